"""Ichimoku Kinko Hyo indicator."""

from collections.abc import Sequence

from domain.indicators.utils import midpoint, tail_align


def ichimoku(
    highs: Sequence[float],
    lows: Sequence[float],
    tenkan_period: int = 9,
    kijun_period: int = 26,
    senkou_b_period: int = 52,
) -> tuple[list[float], list[float], list[float], list[float]]:
    """Calculate the Ichimoku lines.

    Tenkan-sen = midpoint of the ``tenkan_period`` high/low range
    Kijun-sen = midpoint of the ``kijun_period`` high/low range
    Senkou Span A = (Tenkan-sen + Kijun-sen) / 2, aligned to Kijun-sen
    Senkou Span B = midpoint of the ``senkou_b_period`` high/low range

    The spans are NOT displaced forward: each value describes the cloud
    on the bar it was computed from.

    Args:
        highs: List of high prices
        lows: List of low prices
        tenkan_period: Conversion line period (default: 9)
        kijun_period: Base line period (default: 26)
        senkou_b_period: Leading span B period (default: 52)

    Returns:
        Tuple of (tenkan_sen, kijun_sen, senkou_span_a, senkou_span_b),
        each tail-aligned to the input and empty while warming up

    Example:
        >>> highs = [float(h) for h in range(11, 71)]
        >>> lows = [float(l) for l in range(9, 69)]
        >>> tenkan, kijun, span_a, span_b = ichimoku(highs, lows)
        >>> len(tenkan), len(kijun), len(span_a), len(span_b)
        (52, 35, 35, 9)
        >>> tenkan[-1], kijun[-1], span_a[-1], span_b[-1]
        (65.0, 56.5, 60.75, 43.5)
    """
    if len(highs) != len(lows):
        raise ValueError("highs and lows must have same length")

    tenkan_sen = midpoint(highs, lows, tenkan_period)
    kijun_sen = midpoint(highs, lows, kijun_period)

    tenkan_tail, kijun_tail = tail_align(tenkan_sen, kijun_sen)
    senkou_span_a = [(t + k) / 2 for t, k in zip(tenkan_tail, kijun_tail)]

    senkou_span_b = midpoint(highs, lows, senkou_b_period)

    return (tenkan_sen, kijun_sen, senkou_span_a, senkou_span_b)
