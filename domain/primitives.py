"""Numeric primitives shared by the scorers."""

import math


def clamp(value: float, min_val: float = 0.0, max_val: float = 100.0) -> float:
    """Clamp value to range."""
    return max(min_val, min(max_val, value))


def round_score(value: float) -> int:
    """
    Round half away from zero for non-negative scores.

    Weighted sums such as 48.5 must round up to 49, and float noise
    like 48.49999999999999 must not flip the result, so the value is
    first snapped to 6 decimals.
    """
    return int(math.floor(round(value, 6) + 0.5))


def clamp_score(value: float) -> int:
    """Round and clamp to an integer 0-100 score."""
    return int(clamp(round_score(value)))
