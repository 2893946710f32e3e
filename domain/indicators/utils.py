"""Utility functions for technical analysis.

All helpers return compact lists: the first element corresponds to the
first complete window, so outputs are ``period - 1`` shorter than inputs.
"""

from collections.abc import Sequence


def highest(values: Sequence[float], period: int) -> list[float]:
    """Find highest value over rolling period.

    Args:
        values: List of values
        period: Lookback period

    Returns:
        Rolling maxima, one per complete window

    Example:
        >>> highest([10, 12, 11, 15, 14, 13], 3)
        [12, 15, 15, 15]
    """
    if period <= 0 or len(values) < period:
        return []
    return [max(values[i - period + 1:i + 1]) for i in range(period - 1, len(values))]


def lowest(values: Sequence[float], period: int) -> list[float]:
    """Find lowest value over rolling period.

    Example:
        >>> lowest([10, 12, 11, 15, 14, 13], 3)
        [10, 11, 11, 13]
    """
    if period <= 0 or len(values) < period:
        return []
    return [min(values[i - period + 1:i + 1]) for i in range(period - 1, len(values))]


def midpoint(highs: Sequence[float], lows: Sequence[float], period: int) -> list[float]:
    """Midpoint of the rolling highest high and lowest low.

    Example:
        >>> midpoint([12, 14, 13], [10, 11, 9], 2)
        [12.0, 11.5]
    """
    if len(highs) != len(lows):
        raise ValueError("highs and lows must have same length")
    return [(h + l) / 2 for h, l in zip(highest(highs, period), lowest(lows, period))]


def tail_align(
    longer: Sequence[float],
    shorter: Sequence[float],
) -> tuple[Sequence[float], Sequence[float]]:
    """Trim the head of the longer of two tail-aligned series.

    Both inputs must end on the same source bar. The result pairs
    element-by-element.

    Example:
        >>> tail_align([1, 2, 3, 4], [30, 40])
        ([3, 4], [30, 40])
    """
    skip = len(longer) - len(shorter)
    if skip < 0:
        skip = 0
        shorter = shorter[len(shorter) - len(longer):]
    return longer[skip:], shorter
