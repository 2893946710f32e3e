"""Stochastic Oscillator indicators."""

from collections.abc import Sequence

from domain.indicators.moving_averages import sma
from domain.indicators.utils import highest, lowest

# %K reported for a window with no high/low range
FLAT_RANGE_K = 50.0


def stochastic(
    highs: Sequence[float],
    lows: Sequence[float],
    closes: Sequence[float],
    k_period: int = 14,
    d_period: int = 3
) -> tuple[list[float], list[float]]:
    """Calculate Stochastic Oscillator (%K and %D).

    %K = 100 * (Close - Lowest Low) / (Highest High - Lowest Low)
    %D = SMA of %K

    Args:
        highs: List of high prices
        lows: List of low prices
        closes: List of closing prices
        k_period: Lookback period for %K (default: 14)
        d_period: SMA period for %D (default: 3)

    Returns:
        Tuple of (k_values, d_values); %K has length
        ``len(closes) - k_period + 1`` and %D is ``d_period - 1`` shorter

    Example:
        >>> highs = [50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62, 63, 64]
        >>> lows = [48, 49, 50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62]
        >>> closes = [49, 50, 51, 52, 53, 54, 55, 56, 57, 58, 59, 60, 61, 62, 63]
        >>> k, d = stochastic(highs, lows, closes, 14, 3)
        >>> [round(v, 2) for v in k]
        [93.33, 93.33]
        >>> d
        []

    Notes:
        - Returns values on 0-100 scale
        - A flat window (highest == lowest) yields 50 instead of dividing by zero
    """
    if len(highs) != len(lows) or len(highs) != len(closes):
        raise ValueError("highs, lows, and closes must have same length")

    highest_highs = highest(highs, k_period)
    lowest_lows = lowest(lows, k_period)
    recent_closes = closes[k_period - 1:] if highest_highs else []

    k_values = []
    for close, hh, ll in zip(recent_closes, highest_highs, lowest_lows):
        if hh == ll:
            k_values.append(FLAT_RANGE_K)
        else:
            k_values.append(100.0 * (close - ll) / (hh - ll))

    d_values = sma(k_values, d_period)

    return (k_values, d_values)
