"""Relative Strength Index (RSI) indicator."""

from collections.abc import Sequence


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - (100.0 / (1.0 + rs))


def rsi(closes: Sequence[float], period: int = 14) -> list[float]:
    """Calculate RSI using Wilder's smoothing method.

    Returns values on 0-100 scale. The first value averages the first
    ``period`` deltas; later values use Wilder's smoothing
    (RMA) rather than a simple moving average.

    Args:
        closes: List of closing prices
        period: RSI period (default: 14)

    Returns:
        List of RSI values (0-100), length ``len(closes) - period``
        (empty when fewer than ``period`` deltas exist)

    Example:
        >>> prices = [44, 44.34, 44.09, 43.61, 44.33, 44.83, 45.10, 45.42,
        ...           45.84, 46.08, 45.89, 46.03, 45.61, 46.28, 46.28, 46.00]
        >>> len(rsi(prices, 14))
        2

    Notes:
        - Wilder's smoothing: New avg = (prev_avg * (period-1) + current) / period
        - Zero average loss gives 100, including a perfectly flat window
    """
    if period <= 0 or len(closes) - 1 < period:
        return []

    gains = []
    losses = []
    for i in range(1, len(closes)):
        change = closes[i] - closes[i - 1]
        gains.append(max(change, 0.0))
        losses.append(max(-change, 0.0))

    # First average is simple average
    avg_gain = sum(gains[:period]) / period
    avg_loss = sum(losses[:period]) / period
    result = [_rsi_value(avg_gain, avg_loss)]

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + gain) / period
        avg_loss = (avg_loss * (period - 1) + loss) / period
        result.append(_rsi_value(avg_gain, avg_loss))

    return result
