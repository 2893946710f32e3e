"""MACD (Moving Average Convergence Divergence) indicator."""

from collections.abc import Sequence

from domain.indicators.moving_averages import ema
from domain.indicators.utils import tail_align


def macd(
    closes: Sequence[float],
    fast: int = 12,
    slow: int = 26,
    signal: int = 9
) -> tuple[list[float], list[float], list[float]]:
    """Calculate MACD indicator.

    MACD Line = EMA(fast) - EMA(slow), aligned on the slow EMA
    Signal Line = EMA(MACD Line, signal periods)
    Histogram = MACD Line - Signal Line, aligned on the shorter of the two

    Args:
        closes: List of closing prices
        fast: Fast EMA period (default: 12)
        slow: Slow EMA period (default: 26)
        signal: Signal line EMA period (default: 9)

    Returns:
        Tuple of (macd_line, signal_line, histogram), all tail-aligned
        to ``closes``

    Example:
        >>> line, sig, hist = macd([float(p) for p in range(100, 140)])
        >>> len(line), len(sig), len(hist)
        (40, 40, 40)
        >>> hist[-1] > 0
        True

    Notes:
        - EMAs are seeded with the first close, so every line has the
          same length as ``closes``; early values are biased toward zero
    """
    fast_ema = ema(closes, fast)
    slow_ema = ema(closes, slow)

    fast_tail, slow_tail = tail_align(fast_ema, slow_ema)
    macd_line = [f - s for f, s in zip(fast_tail, slow_tail)]

    signal_line = ema(macd_line, signal)

    macd_tail, signal_tail = tail_align(macd_line, signal_line)
    histogram = [m - s for m, s in zip(macd_tail, signal_tail)]

    return (macd_line, signal_line, histogram)
