"""Moving average indicators."""

import math
from collections.abc import Sequence


def sma(values: Sequence[float], period: int) -> list[float]:
    """Calculate Simple Moving Average.

    Args:
        values: List of values to calculate SMA over
        period: Number of periods for the moving average

    Returns:
        List of SMA values, one per complete window
        (length ``len(values) - period + 1``, empty if too short)

    Example:
        >>> sma([10, 11, 12, 13, 14, 15], 3)
        [11.0, 12.0, 13.0, 14.0]
    """
    if period <= 0 or len(values) < period:
        return []

    # Exact sum per window
    return [
        math.fsum(values[i - period + 1:i + 1]) / period
        for i in range(period - 1, len(values))
    ]


def ema(values: Sequence[float], period: int) -> list[float]:
    """Calculate Exponential Moving Average.

    Uses exponential smoothing with alpha = 2/(period+1), seeded with the
    first input value rather than an initial SMA. The output therefore has
    the same length as the input, and the first ~2*period values carry a
    bias toward the seed.

    Args:
        values: List of values to calculate EMA over
        period: Number of periods for the moving average

    Returns:
        List of EMA values, same length as ``values``

    Example:
        >>> ema([10, 10, 10], 3)
        [10.0, 10.0, 10.0]
        >>> ema([10, 12], 3)
        [10.0, 11.0]
    """
    if period <= 0 or not values:
        return []

    alpha = 2.0 / (period + 1)
    result = [float(values[0])]

    for i in range(1, len(values)):
        result.append(values[i] * alpha + result[-1] * (1 - alpha))

    return result
