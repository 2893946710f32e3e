"""Technical indicators used by the buy-timing scorer.

This package provides pure Python implementations of the indicators the
technical scorer reads. Every function takes oldest-first sequences and
returns compact lists: values exist only once the warm-up window is full,
and each list ends on the last input bar.

Indicators:
    - Moving Averages: SMA, EMA (seeded with the first value)
    - RSI: Relative Strength Index using Wilder's smoothing
    - MACD: Moving Average Convergence Divergence
    - Bollinger Bands: Volatility bands using population standard deviation
    - Stochastic: Stochastic Oscillator (%K and %D)
    - Ichimoku: Tenkan, Kijun and the (undisplaced) cloud spans
    - Engine: every indicator at once, anchored with IndicatorLine offsets

Example:
    >>> from domain.indicators import rsi, macd, bollinger_bands
    >>>
    >>> closes = [44, 44.34, 44.09, 43.61, 44.33, 44.83, 45.10, 45.42,
    ...           45.84, 46.08, 45.89, 46.03, 45.61, 46.28, 46.28, 46.00]
    >>>
    >>> rsi_values = rsi(closes, period=14)
    >>> macd_line, signal_line, histogram = macd(closes)
    >>> upper, middle, lower = bollinger_bands(closes, period=20)
    >>> len(rsi_values), len(macd_line), len(upper)
    (2, 16, 0)
"""

from domain.indicators.base import IndicatorLine
from domain.indicators.bollinger import band_position, bollinger_bands
from domain.indicators.engine import (
    MIN_FULL_HISTORY,
    IndicatorSeries,
    compute_indicator_lines,
    compute_indicators,
    latest_snapshot,
)
from domain.indicators.ichimoku import ichimoku
from domain.indicators.macd import macd
from domain.indicators.moving_averages import ema, sma
from domain.indicators.rsi import rsi
from domain.indicators.stochastic import stochastic
from domain.indicators.utils import highest, lowest, midpoint, tail_align

__all__ = [
    # Base types
    "IndicatorLine",
    "IndicatorSeries",
    # Oscillators and trend
    "rsi",
    "macd",
    "bollinger_bands",
    "band_position",
    "stochastic",
    "ichimoku",
    # Moving averages
    "sma",
    "ema",
    # Engine
    "MIN_FULL_HISTORY",
    "compute_indicators",
    "compute_indicator_lines",
    "latest_snapshot",
    # Utilities
    "highest",
    "lowest",
    "midpoint",
    "tail_align",
]
