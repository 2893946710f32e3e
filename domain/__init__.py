from .primitives import clamp, clamp_score, round_score
from .enums import AnalysisMode, JudgmentSignal
from .models import (
    PricePoint,
    PriceSeries,
    Fundamentals,
    StockData,
    to_json_dict,
)
from .analysis_types import (
    MACDValue,
    BollingerValue,
    MovingAverageValue,
    StochasticValue,
    IchimokuValue,
    TechnicalIndicatorSnapshot,
    TechnicalScoreResult,
    FundamentalScoreBreakdown,
    FundamentalScoreResult,
    Judgment,
    AnalysisResult,
)
from .indicators import (
    MIN_FULL_HISTORY,
    IndicatorLine,
    IndicatorSeries,
    compute_indicators,
    latest_snapshot,
)
from .technical import score_technical, analyze_technical
from .fundamental import (
    ScoreTable,
    FUNDAMENTAL_WEIGHTS,
    score_fundamental,
)
from .judgment import judge, composite_score, classify_signal
from .analysis import analyze_stock, rank_results

__all__ = [
    # Primitives
    "clamp",
    "clamp_score",
    "round_score",
    # Enums
    "AnalysisMode",
    "JudgmentSignal",
    # Input models
    "PricePoint",
    "PriceSeries",
    "Fundamentals",
    "StockData",
    # Analysis types
    "MACDValue",
    "BollingerValue",
    "MovingAverageValue",
    "StochasticValue",
    "IchimokuValue",
    "TechnicalIndicatorSnapshot",
    "TechnicalScoreResult",
    "FundamentalScoreBreakdown",
    "FundamentalScoreResult",
    "Judgment",
    "AnalysisResult",
    # Indicator engine
    "MIN_FULL_HISTORY",
    "IndicatorLine",
    "IndicatorSeries",
    "compute_indicators",
    "latest_snapshot",
    # Scorers and judgment
    "score_technical",
    "analyze_technical",
    "ScoreTable",
    "FUNDAMENTAL_WEIGHTS",
    "score_fundamental",
    "judge",
    "composite_score",
    "classify_signal",
    # Analysis functions
    "analyze_stock",
    "rank_results",
    # Serialization
    "to_json_dict",
]
