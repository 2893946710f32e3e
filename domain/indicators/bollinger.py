"""Bollinger Bands indicator."""

import math
from collections.abc import Sequence

from domain.indicators.moving_averages import sma


def bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0
) -> tuple[list[float], list[float], list[float]]:
    """Calculate Bollinger Bands.

    Upper Band = SMA + (std_dev * standard_deviation)
    Middle Band = SMA
    Lower Band = SMA - (std_dev * standard_deviation)

    The standard deviation is the population one (divisor = period).

    Args:
        closes: List of closing prices
        period: Period for SMA and standard deviation (default: 20)
        std_dev: Number of standard deviations for bands (default: 2.0)

    Returns:
        Tuple of (upper_band, middle_band, lower_band), each of length
        ``len(closes) - period + 1``

    Example:
        >>> upper, middle, lower = bollinger_bands([2, 4, 4, 4, 5, 5, 7, 9], period=8)
        >>> middle, upper, lower
        ([5.0], [9.0], [1.0])
    """
    middle_band = sma(closes, period)
    if not middle_band:
        return ([], [], [])

    upper_band = []
    lower_band = []

    for j, mean in enumerate(middle_band):
        window = closes[j:j + period]
        variance = math.fsum((x - mean) ** 2 for x in window) / period
        width = std_dev * math.sqrt(variance)

        upper_band.append(mean + width)
        lower_band.append(mean - width)

    return (upper_band, middle_band, lower_band)


def band_position(price: float, upper: float, lower: float) -> float:
    """Where ``price`` sits inside the bands: 0 at lower, 1 at upper.

    A zero-width band (flat window) returns the neutral 0.5.

    Example:
        >>> band_position(105.0, 110.0, 100.0)
        0.5
    """
    width = upper - lower
    if width == 0:
        return 0.5
    return (price - lower) / width
