"""
Analysis types - outputs of the indicator, scoring and judgment engines.

These are pure data structures used by analysis functions.
Separating types from logic keeps the scoring modules focused.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple

from .enums import AnalysisMode, JudgmentSignal


# ============================================================================
# Latest indicator values
# ============================================================================

class MACDValue(NamedTuple):
    macd: float
    signal: float
    histogram: float


class BollingerValue(NamedTuple):
    upper: float
    middle: float
    lower: float


class MovingAverageValue(NamedTuple):
    ma5: float
    ma25: float
    ma75: float


class StochasticValue(NamedTuple):
    k: float
    d: float


class IchimokuValue(NamedTuple):
    tenkan_sen: float
    kijun_sen: float
    senkou_span_a: float
    senkou_span_b: float

    @property
    def cloud_top(self) -> float:
        return max(self.senkou_span_a, self.senkou_span_b)

    @property
    def cloud_bottom(self) -> float:
        return min(self.senkou_span_a, self.senkou_span_b)


@dataclass(frozen=True)
class TechnicalIndicatorSnapshot:
    """
    Latest value of every indicator, plus the price they are judged against.

    ``defaulted`` names each value that was substituted by a neutral
    default because the series was too short to compute it. An empty set
    means every value is real.
    """
    current_price: float
    rsi: float
    macd: MACDValue
    bollinger_bands: BollingerValue
    moving_averages: MovingAverageValue
    stochastic: StochasticValue
    ichimoku: IchimokuValue
    defaulted: frozenset[str] = field(default_factory=frozenset)

    @property
    def is_complete(self) -> bool:
        return not self.defaulted


# ============================================================================
# Scorer outputs
# ============================================================================

@dataclass(frozen=True)
class TechnicalScoreResult:
    """Technical score (0-100) with the narrative that explains it."""
    score: int
    reasons: tuple[str, ...]
    risks: tuple[str, ...]
    snapshot: TechnicalIndicatorSnapshot
    mode: AnalysisMode = AnalysisMode.FULL
    data_points: int | None = None

    @property
    def simplified(self) -> bool:
        return self.mode == AnalysisMode.SIMPLIFIED


@dataclass(frozen=True)
class FundamentalScoreBreakdown:
    """Six sub-scores, each 0-100."""
    per_score: int
    pbr_score: int
    roe_score: int
    dividend_score: int
    growth_score: int
    stability_score: int

    def as_dict(self) -> dict[str, int]:
        return {
            "per": self.per_score,
            "pbr": self.pbr_score,
            "roe": self.roe_score,
            "dividend": self.dividend_score,
            "growth": self.growth_score,
            "stability": self.stability_score,
        }


@dataclass(frozen=True)
class FundamentalScoreResult:
    """Weighted fundamental score (0-100) with sub-scores and narrative."""
    score: int
    breakdown: FundamentalScoreBreakdown
    reasons: tuple[str, ...]
    risks: tuple[str, ...]


@dataclass(frozen=True)
class Judgment:
    """Final buy-timing judgment."""
    score: int
    signal: JudgmentSignal
    reasons: tuple[str, ...]
    risks: tuple[str, ...]


@dataclass(frozen=True)
class AnalysisResult:
    """Everything produced by one analysis run for one instrument."""
    symbol: str
    technical: TechnicalScoreResult
    fundamental: FundamentalScoreResult
    judgment: Judgment
    name: str | None = None
    updated_at: datetime = field(default_factory=datetime.now)
