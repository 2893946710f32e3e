"""
Technical Scoring Module.

Reduces the latest indicator values to a 0-100 technical score.

Scoring starts from a neutral 50 and applies one additive adjustment per
indicator family:
- RSI: oversold is bullish, overbought is bearish
- MACD: positive histogram with MACD above signal
- Bollinger Bands: position of the price inside the bands
- Moving averages: 5/25/75-day alignment
- Stochastic: %K and %D both in an extreme zone
- Ichimoku: price relative to the cloud

Adjustments are independent of each other, so evaluation order never
changes the score. No I/O - this is domain layer logic only.
"""

from ports import DataError, ErrorCode, InsufficientHistoryError

from .analysis_types import TechnicalIndicatorSnapshot, TechnicalScoreResult
from .enums import AnalysisMode
from .indicators.bollinger import band_position
from .indicators.engine import MIN_FULL_HISTORY, compute_indicators, latest_snapshot
from .models import PriceSeries
from .primitives import clamp_score

BASE_SCORE = 50

NEUTRAL_REASON = "Technical indicators are at neutral levels"
NO_RISK = "No notable technical risk factors identified"

# (adjustment, reason or None)
Adjustment = tuple[int, str | None]


# ============================================================================
# Per-indicator adjustments
# ============================================================================

def _rsi_adjustment(rsi: float) -> Adjustment:
    if rsi < 30:
        return 15, f"RSI {rsi:.1f} is in oversold territory"
    if rsi < 40:
        return 10, f"RSI {rsi:.1f} is leaning oversold"
    if rsi > 70:
        return -15, f"RSI {rsi:.1f} is in overbought territory"
    if rsi > 60:
        return -5, f"RSI {rsi:.1f} is leaning overbought"
    return 0, None


def _macd_adjustment(snapshot: TechnicalIndicatorSnapshot) -> Adjustment:
    m = snapshot.macd
    adjustment = 0
    if m.histogram > 0 and m.macd > m.signal:
        adjustment += 10
    if m.histogram > 0:
        adjustment += 5

    if adjustment >= 10:
        return adjustment, "MACD is showing a buy signal"
    if m.histogram < 0:
        return adjustment, "MACD momentum is weakening"
    return adjustment, None


def _bollinger_adjustment(
    snapshot: TechnicalIndicatorSnapshot,
    current_price: float,
) -> Adjustment:
    bb = snapshot.bollinger_bands
    position = band_position(current_price, bb.upper, bb.lower)
    if position < 0.2:
        return 10, "Price is near the lower Bollinger band; a rebound is possible"
    if position > 0.8:
        return -10, "Price is near the upper Bollinger band; a pullback is possible"
    return 0, None


def _moving_average_adjustment(snapshot: TechnicalIndicatorSnapshot) -> Adjustment:
    ma5, ma25, ma75 = snapshot.moving_averages
    # A defaulted 75-day average is just the price; order on 5/25 alone
    if "ma75" in snapshot.defaulted:
        if ma5 > ma25:
            return 15, "Moving averages are aligned in an uptrend"
        if ma5 < ma25:
            return -8, "Short-term moving average is below the medium-term average"
        return 0, None
    if ma5 > ma25 > ma75:
        return 15, "Moving averages are aligned in an uptrend"
    if ma5 > ma25:
        return 8, "Short-term moving average is turning up"
    if ma5 < ma25:
        if ma25 < ma75:
            return -8, "Moving averages point to a downtrend"
        return -8, "Short-term moving average is below the medium-term average"
    return 0, None


def _stochastic_adjustment(snapshot: TechnicalIndicatorSnapshot) -> Adjustment:
    k, d = snapshot.stochastic
    if k < 20 and d < 20:
        return 10, "Stochastic is holding in the oversold zone"
    if k > 80 and d > 80:
        return -10, "Stochastic is in the overbought zone"
    return 0, None


def _ichimoku_adjustment(
    snapshot: TechnicalIndicatorSnapshot,
    current_price: float,
) -> Adjustment:
    cloud = snapshot.ichimoku
    if current_price > cloud.cloud_top:
        return 8, "Price is above the Ichimoku cloud"
    if current_price < cloud.cloud_bottom:
        return -8, "Price is below the Ichimoku cloud"
    return 0, None


# ============================================================================
# Risks
# ============================================================================

def identify_technical_risks(snapshot: TechnicalIndicatorSnapshot) -> list[str]:
    """
    Flag technical conditions that argue against buying now.

    Returns an empty list when nothing fires; score_technical adds the
    neutral sentence.
    """
    risks = []

    if snapshot.rsi > 80:
        risks.append("RSI is extremely overbought; correction risk")

    if snapshot.macd.histogram < -5:
        risks.append("Strong MACD sell signal; downward pressure")

    ma5, ma25, ma75 = snapshot.moving_averages
    if ma5 < ma25 < ma75 and "ma75" not in snapshot.defaulted:
        risks.append("All moving averages are falling; downtrend may continue")

    k, d = snapshot.stochastic
    if k > 90 and d > 90:
        risks.append("Stochastic is extremely overbought; reversal risk")

    cloud_bottom = snapshot.ichimoku.cloud_bottom
    if snapshot.ichimoku.tenkan_sen < cloud_bottom and snapshot.ichimoku.kijun_sen < cloud_bottom:
        risks.append("Trading below the Ichimoku cloud; upside looks heavy")

    return risks


# ============================================================================
# Scoring
# ============================================================================

def score_technical(
    snapshot: TechnicalIndicatorSnapshot,
    current_price: float | None = None,
) -> TechnicalScoreResult:
    """
    Compute the technical score (0-100) from an indicator snapshot.

    Args:
        snapshot: Latest indicator values
        current_price: Price to judge against; defaults to the snapshot's

    Returns:
        TechnicalScoreResult with at least one reason and one risk line

    Example:
        >>> from domain.analysis_types import (BollingerValue, IchimokuValue,
        ...     MACDValue, MovingAverageValue, StochasticValue)
        >>> snap = TechnicalIndicatorSnapshot(
        ...     current_price=100.0, rsi=50.0,
        ...     macd=MACDValue(0.0, 0.0, 0.0),
        ...     bollinger_bands=BollingerValue(100.0, 100.0, 100.0),
        ...     moving_averages=MovingAverageValue(100.0, 100.0, 100.0),
        ...     stochastic=StochasticValue(50.0, 50.0),
        ...     ichimoku=IchimokuValue(100.0, 100.0, 100.0, 100.0))
        >>> score_technical(snap).score
        50
    """
    price = snapshot.current_price if current_price is None else current_price

    adjustments = [
        _rsi_adjustment(snapshot.rsi),
        _macd_adjustment(snapshot),
        _bollinger_adjustment(snapshot, price),
        _moving_average_adjustment(snapshot),
        _stochastic_adjustment(snapshot),
        _ichimoku_adjustment(snapshot, price),
    ]

    total = BASE_SCORE
    reasons = []
    for adjustment, reason in adjustments:
        total += adjustment
        if reason:
            reasons.append(reason)

    risks = identify_technical_risks(snapshot)

    return TechnicalScoreResult(
        score=clamp_score(total),
        reasons=tuple(reasons) or (NEUTRAL_REASON,),
        risks=tuple(risks) or (NO_RISK,),
        snapshot=snapshot,
    )


def analyze_technical(
    prices: PriceSeries,
    mode: AnalysisMode = AnalysisMode.FULL,
) -> TechnicalScoreResult:
    """
    Run the indicator engine and technical scorer over a price series.

    FULL mode needs at least MIN_FULL_HISTORY points. SIMPLIFIED mode
    accepts any non-empty series, substitutes neutral defaults for
    indicators still warming up, and appends a risk line stating how
    short the history was.

    Raises:
        DataError: If the series is empty
        InsufficientHistoryError: If FULL mode is requested on short data
    """
    latest = prices.latest
    if latest is None:
        raise DataError("price series is empty", code=ErrorCode.DATA_EMPTY)

    available = len(prices)
    if mode == AnalysisMode.FULL and available < MIN_FULL_HISTORY:
        raise InsufficientHistoryError(available=available, required=MIN_FULL_HISTORY)

    series = compute_indicators(prices)
    snapshot = latest_snapshot(series, latest.close)
    result = score_technical(snapshot, latest.close)

    risks = result.risks
    if mode == AnalysisMode.SIMPLIFIED:
        note = (
            f"Simplified analysis: only {available} days of price history "
            f"(full analysis needs {MIN_FULL_HISTORY})"
        )
        if snapshot.defaulted:
            note += f"; neutral defaults used for {', '.join(sorted(snapshot.defaulted))}"
        risks = (*[r for r in risks if r != NO_RISK], note)

    return TechnicalScoreResult(
        score=result.score,
        reasons=result.reasons,
        risks=risks,
        snapshot=snapshot,
        mode=mode,
        data_points=available,
    )
