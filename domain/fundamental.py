"""
Fundamental Scoring Module.

Scores balance-sheet ratios on a 0-100 scale:
- PER: lower is cheaper
- PBR: lower is cheaper relative to net assets
- ROE: profitability, with a slight haircut for extreme values
- Dividend yield: attractive up to ~5%, suspicious beyond 8%
- Growth: room to grow (small caps) plus strong ROE
- Stability: size, a sane PBR, steady ROE and a real dividend

The four ratio scores are bucket lookups in ScoreTable data; growth and
stability are additive around a neutral 50. Missing ratios fall back to
fixed neutral scores, never to zero. No I/O - this is domain layer logic
only.
"""

import math
from dataclasses import dataclass

from .analysis_types import FundamentalScoreBreakdown, FundamentalScoreResult
from .models import Fundamentals
from .primitives import clamp_score

NEUTRAL_REASON = "Fundamentals are at standard levels"
NO_RISK = "No particular risk factors identified"

BILLION = 1e9


# ============================================================================
# Threshold tables
# ============================================================================

@dataclass(frozen=True)
class ScoreTable:
    """
    Ordered bucket lookup: the first ``value < upper_bound`` row wins.

    ``missing`` is returned for an unknown value (and for a non-positive
    one when ``positive_only`` is set, or for zero when ``zero_missing``
    is set); ``fallback`` for a value above every bound.

    Example:
        >>> table = ScoreTable(buckets=((10, 80), (20, 60)), fallback=30, missing=50)
        >>> table.lookup(5), table.lookup(15), table.lookup(99), table.lookup(None)
        (80, 60, 30, 50)
    """
    buckets: tuple[tuple[float, int], ...]
    fallback: int
    missing: int
    positive_only: bool = False
    zero_missing: bool = False

    def __post_init__(self):
        bounds = [bound for bound, _ in self.buckets]
        if bounds != sorted(bounds):
            raise ValueError(f"bucket bounds must be ascending, got {bounds}")

    def lookup(self, value: float | None) -> int:
        if value is None or math.isnan(value):
            return self.missing
        if self.positive_only and value <= 0:
            return self.missing
        if self.zero_missing and value == 0:
            return self.missing
        for upper_bound, score in self.buckets:
            if value < upper_bound:
                return score
        return self.fallback


PER_TABLE = ScoreTable(
    buckets=((8, 85), (12, 80), (15, 75), (20, 65), (25, 50), (35, 35)),
    fallback=20,
    missing=50,
    positive_only=True,
)

PBR_TABLE = ScoreTable(
    buckets=((0.5, 90), (0.8, 85), (1.0, 80), (1.5, 70), (2.0, 55), (3.0, 40)),
    fallback=25,
    missing=50,
    positive_only=True,
)

# ROE in percent; 35% and above drops back to 80
ROE_TABLE = ScoreTable(
    buckets=((0, 20), (3, 30), (8, 45), (15, 70), (25, 85), (35, 90)),
    fallback=80,
    missing=50,
)

# Dividend yield in percent; 8% and above drops back to 50
DIVIDEND_TABLE = ScoreTable(
    buckets=((0.5, 45), (1.5, 55), (3.0, 75), (5.0, 85), (8.0, 70)),
    fallback=50,
    missing=40,
    zero_missing=True,
)


@dataclass(frozen=True)
class FundamentalWeights:
    """Weights for combining sub-scores. Must sum to 1.0."""
    per: float = 0.20
    pbr: float = 0.15
    roe: float = 0.25
    dividend: float = 0.15
    growth: float = 0.15
    stability: float = 0.10

    def __post_init__(self):
        total = self.per + self.pbr + self.roe + self.dividend + self.growth + self.stability
        if abs(total - 1.0) > 0.001:
            raise ValueError(f"Weights must sum to 1.0, got {total}")


FUNDAMENTAL_WEIGHTS = FundamentalWeights()


# ============================================================================
# Sub-scores
# ============================================================================

def score_per(per: float | None) -> int:
    return PER_TABLE.lookup(per)


def score_pbr(pbr: float | None) -> int:
    return PBR_TABLE.lookup(pbr)


def score_roe(roe: float | None) -> int:
    return ROE_TABLE.lookup(roe)


def score_dividend(dividend_yield: float | None) -> int:
    return DIVIDEND_TABLE.lookup(dividend_yield)


def score_growth(fundamentals: Fundamentals) -> int:
    """
    Growth potential score.

    Smaller companies get more headroom: market cap under 100B +15,
    under 1T +8, under 5T +3. ROE above 15% adds +10.
    """
    score = 50

    market_cap = fundamentals.market_cap
    if market_cap is not None and market_cap > 0:
        cap_billions = market_cap / BILLION
        if cap_billions < 100:
            score += 15
        elif cap_billions < 1000:
            score += 8
        elif cap_billions < 5000:
            score += 3

    if fundamentals.roe is not None and fundamentals.roe > 15:
        score += 10

    return clamp_score(score)


def score_stability(fundamentals: Fundamentals) -> int:
    """
    Financial stability score.

    Large caps are steadier (over 5T +20, 1T +15, 300B +8, 100B +3).
    A PBR below 0.5 hints at balance-sheet trouble (-15); ROE between 8%
    and 25% is steady (+10); a dividend yield above 1% adds +8.
    """
    score = 50

    market_cap = fundamentals.market_cap
    if market_cap is not None:
        cap_billions = market_cap / BILLION
        if cap_billions > 5000:
            score += 20
        elif cap_billions > 1000:
            score += 15
        elif cap_billions > 300:
            score += 8
        elif cap_billions > 100:
            score += 3

    pbr = fundamentals.pbr
    if pbr and pbr < 0.5:
        score -= 15

    roe = fundamentals.roe
    if roe is not None and 8 <= roe <= 25:
        score += 10

    dividend_yield = fundamentals.dividend_yield
    if dividend_yield is not None and dividend_yield > 1:
        score += 8

    return clamp_score(score)


def compute_breakdown(fundamentals: Fundamentals) -> FundamentalScoreBreakdown:
    """Compute all six sub-scores."""
    return FundamentalScoreBreakdown(
        per_score=score_per(fundamentals.per),
        pbr_score=score_pbr(fundamentals.pbr),
        roe_score=score_roe(fundamentals.roe),
        dividend_score=score_dividend(fundamentals.dividend_yield),
        growth_score=score_growth(fundamentals),
        stability_score=score_stability(fundamentals),
    )


def weighted_score(
    breakdown: FundamentalScoreBreakdown,
    weights: FundamentalWeights = FUNDAMENTAL_WEIGHTS,
) -> int:
    """Weighted sum of the sub-scores, rounded half up."""
    total = (
        breakdown.per_score * weights.per
        + breakdown.pbr_score * weights.pbr
        + breakdown.roe_score * weights.roe
        + breakdown.dividend_score * weights.dividend
        + breakdown.growth_score * weights.growth
        + breakdown.stability_score * weights.stability
    )
    return clamp_score(total)


# ============================================================================
# Narrative
# ============================================================================

def generate_fundamental_reasons(
    breakdown: FundamentalScoreBreakdown,
    fundamentals: Fundamentals,
) -> list[str]:
    """One sentence per favourable (or notably unfavourable) ratio."""
    reasons = []

    per = fundamentals.per
    if per is not None and per > 0:
        if breakdown.per_score >= 75:
            reasons.append(f"PER of {per:.1f}x looks undervalued")
        elif breakdown.per_score <= 40:
            reasons.append(f"PER of {per:.1f}x looks expensive")

    pbr = fundamentals.pbr
    if pbr is not None and pbr > 0 and breakdown.pbr_score >= 80:
        reasons.append(f"PBR of {pbr:.2f}x is cheap relative to net assets")

    roe = fundamentals.roe
    if roe is not None:
        if breakdown.roe_score >= 80:
            reasons.append(f"ROE of {roe:.1f}% shows high profitability")
        elif breakdown.roe_score <= 40:
            reasons.append(f"ROE of {roe:.1f}% points to profitability challenges")

    dividend_yield = fundamentals.dividend_yield
    if dividend_yield is not None and dividend_yield > 0 and breakdown.dividend_score >= 75:
        reasons.append(f"Dividend yield of {dividend_yield:.2f}% is attractive")

    if breakdown.growth_score >= 70:
        reasons.append("Room for future growth is expected")

    if breakdown.stability_score >= 80:
        reasons.append("Financial stability is high")

    return reasons or [NEUTRAL_REASON]


def identify_fundamental_risks(
    breakdown: FundamentalScoreBreakdown,
    fundamentals: Fundamentals,
) -> list[str]:
    """One sentence per ratio that argues against buying."""
    risks = []

    per = fundamentals.per
    if per is not None and per > 0 and breakdown.per_score <= 35:
        risks.append(f"PER of {per:.1f}x is high; risk of expectations resetting")

    pbr = fundamentals.pbr
    if pbr and pbr < 0.5:
        risks.append("PBR below 0.5x; check the financial condition")

    if breakdown.roe_score <= 35:
        risks.append("Profitability needs to improve")

    dividend_yield = fundamentals.dividend_yield
    if dividend_yield is not None and dividend_yield > 6:
        risks.append("Dividend yield is high; watch for a dividend cut")

    if breakdown.growth_score <= 40:
        risks.append("Limited room for growth")

    if breakdown.stability_score <= 40:
        risks.append("Financial stability has room for improvement")

    return risks or [NO_RISK]


def score_fundamental(fundamentals: Fundamentals) -> FundamentalScoreResult:
    """
    Compute the fundamental score (0-100) with sub-scores and narrative.

    Never fails: every missing ratio resolves to its neutral score.

    Example:
        >>> result = score_fundamental(Fundamentals())
        >>> result.score, result.breakdown.dividend_score
        (49, 40)
    """
    breakdown = compute_breakdown(fundamentals)
    return FundamentalScoreResult(
        score=weighted_score(breakdown),
        breakdown=breakdown,
        reasons=tuple(generate_fundamental_reasons(breakdown, fundamentals)),
        risks=tuple(identify_fundamental_risks(breakdown, fundamentals)),
    )
