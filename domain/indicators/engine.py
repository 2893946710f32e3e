"""Indicator engine: every indicator the scorer needs, computed in one pass."""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from domain.analysis_types import (
    BollingerValue,
    IchimokuValue,
    MACDValue,
    MovingAverageValue,
    StochasticValue,
    TechnicalIndicatorSnapshot,
)
from domain.indicators.base import IndicatorLine
from domain.indicators.bollinger import bollinger_bands
from domain.indicators.ichimoku import ichimoku
from domain.indicators.macd import macd
from domain.indicators.moving_averages import sma
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import stochastic
from domain.models import PriceSeries
from ports import ValidationError

# Longest lookback of any indicator (Ichimoku senkou span B)
MIN_FULL_HISTORY = 52

MA_PERIODS = (5, 25, 75)

NEUTRAL_RSI = 50.0
NEUTRAL_STOCHASTIC = 50.0
NEUTRAL_MACD = 0.0


@dataclass(frozen=True)
class IndicatorSeries:
    """All indicator lines for one price series, each anchored by offset."""
    length: int
    sma5: IndicatorLine
    sma25: IndicatorLine
    sma75: IndicatorLine
    rsi: IndicatorLine
    macd_line: IndicatorLine
    macd_signal: IndicatorLine
    macd_histogram: IndicatorLine
    bollinger_upper: IndicatorLine
    bollinger_middle: IndicatorLine
    bollinger_lower: IndicatorLine
    stochastic_k: IndicatorLine
    stochastic_d: IndicatorLine
    tenkan_sen: IndicatorLine
    kijun_sen: IndicatorLine
    senkou_span_a: IndicatorLine
    senkou_span_b: IndicatorLine

    @property
    def has_full_history(self) -> bool:
        return self.length >= MIN_FULL_HISTORY


def _validate_arrays(
    closes: Sequence[float],
    highs: Sequence[float],
    lows: Sequence[float],
) -> None:
    if not (len(closes) == len(highs) == len(lows)):
        raise ValidationError(
            field="prices",
            reason=(
                f"closes, highs and lows must have same length "
                f"(got {len(closes)}, {len(highs)}, {len(lows)})"
            ),
        )
    for name, values in (("close", closes), ("high", highs), ("low", lows)):
        for i, v in enumerate(values):
            if not math.isfinite(v) or v < 0:
                raise ValidationError(
                    field=f"{name}[{i}]",
                    reason="prices must be finite and non-negative",
                    value=v,
                )


def compute_indicator_lines(
    closes: Sequence[float],
    highs: Sequence[float],
    lows: Sequence[float],
) -> IndicatorSeries:
    """
    Compute every indicator from raw, oldest-first arrays.

    Short input is not an error: lines that need more history than is
    available come back empty.

    Raises:
        ValidationError: If the arrays differ in length or hold a
            negative or non-finite price
    """
    _validate_arrays(closes, highs, lows)
    n = len(closes)

    def line(values: Sequence[float]) -> IndicatorLine:
        return IndicatorLine.align(values, n)

    ma5, ma25, ma75 = (sma(closes, p) for p in MA_PERIODS)
    macd_line, signal_line, histogram = macd(closes)
    upper, middle, lower = bollinger_bands(closes)
    k_values, d_values = stochastic(highs, lows, closes)
    tenkan, kijun, span_a, span_b = ichimoku(highs, lows)

    return IndicatorSeries(
        length=n,
        sma5=line(ma5),
        sma25=line(ma25),
        sma75=line(ma75),
        rsi=line(rsi(closes)),
        macd_line=line(macd_line),
        macd_signal=line(signal_line),
        macd_histogram=line(histogram),
        bollinger_upper=line(upper),
        bollinger_middle=line(middle),
        bollinger_lower=line(lower),
        stochastic_k=line(k_values),
        stochastic_d=line(d_values),
        tenkan_sen=line(tenkan),
        kijun_sen=line(kijun),
        senkou_span_a=line(span_a),
        senkou_span_b=line(span_b),
    )


def compute_indicators(prices: PriceSeries) -> IndicatorSeries:
    """Compute every indicator for a validated price series."""
    return compute_indicator_lines(prices.closes, prices.highs, prices.lows)


def latest_snapshot(
    series: IndicatorSeries,
    current_price: float,
) -> TechnicalIndicatorSnapshot:
    """
    Reduce indicator lines to their latest values.

    Lines still in warm-up are replaced by neutral defaults (RSI 50,
    stochastic 50/50, MACD 0, price-level indicators = current price),
    and their names are recorded in ``snapshot.defaulted``.
    """
    defaulted: set[str] = set()

    def latest(name: str, ind_line: IndicatorLine, default: float) -> float:
        value = ind_line.latest
        if value is None:
            defaulted.add(name)
            return default
        return value

    price = current_price
    snapshot = TechnicalIndicatorSnapshot(
        current_price=price,
        rsi=latest("rsi", series.rsi, NEUTRAL_RSI),
        macd=MACDValue(
            macd=latest("macd", series.macd_line, NEUTRAL_MACD),
            signal=latest("macd_signal", series.macd_signal, NEUTRAL_MACD),
            histogram=latest("macd_histogram", series.macd_histogram, NEUTRAL_MACD),
        ),
        bollinger_bands=BollingerValue(
            upper=latest("bollinger_upper", series.bollinger_upper, price),
            middle=latest("bollinger_middle", series.bollinger_middle, price),
            lower=latest("bollinger_lower", series.bollinger_lower, price),
        ),
        moving_averages=MovingAverageValue(
            ma5=latest("ma5", series.sma5, price),
            ma25=latest("ma25", series.sma25, price),
            ma75=latest("ma75", series.sma75, price),
        ),
        stochastic=StochasticValue(
            k=latest("stochastic_k", series.stochastic_k, NEUTRAL_STOCHASTIC),
            d=latest("stochastic_d", series.stochastic_d, NEUTRAL_STOCHASTIC),
        ),
        ichimoku=IchimokuValue(
            tenkan_sen=latest("tenkan_sen", series.tenkan_sen, price),
            kijun_sen=latest("kijun_sen", series.kijun_sen, price),
            senkou_span_a=latest("senkou_span_a", series.senkou_span_a, price),
            senkou_span_b=latest("senkou_span_b", series.senkou_span_b, price),
        ),
        defaulted=frozenset(defaulted),
    )
    return snapshot
