"""
Judgment Engine.

Fuses the technical and fundamental scores into the final buy-timing
judgment:

1. Composite: round(technical * 0.6 + fundamental * 0.4)
2. Signal: first matching rung of SIGNAL_LADDER
3. Reasons: technical reasons, then fundamental reasons
4. Risks: technical risks, fundamental risks, then a composite warning
   when both sides are weak
"""

from dataclasses import dataclass

from .analysis_types import FundamentalScoreResult, Judgment, TechnicalScoreResult
from .enums import JudgmentSignal
from .models import Fundamentals
from .primitives import clamp_score

TECHNICAL_WEIGHT = 0.6
FUNDAMENTAL_WEIGHT = 0.4

WEAK_SCORE = 40
WEAK_BOTH_RISK = "Weak on both technical and fundamental fronts"


@dataclass(frozen=True)
class SignalRung:
    """One rung of the signal ladder; all minimums must be met."""
    signal: JudgmentSignal
    min_composite: int
    min_technical: int = 0
    min_fundamental: int = 0

    def matches(self, composite: int, technical: int, fundamental: int) -> bool:
        return (
            composite >= self.min_composite
            and technical >= self.min_technical
            and fundamental >= self.min_fundamental
        )


# First match wins; the last rung always matches
SIGNAL_LADDER: tuple[SignalRung, ...] = (
    SignalRung(JudgmentSignal.STRONG_BUY, 80, min_technical=70, min_fundamental=70),
    SignalRung(JudgmentSignal.STRONG_BUY, 75),
    SignalRung(JudgmentSignal.BUY, 60),
    SignalRung(JudgmentSignal.HOLD, 40),
    SignalRung(JudgmentSignal.SELL, 0),
)


def composite_score(technical: int, fundamental: int) -> int:
    """
    Weighted composite of the two scores, rounded half up.

    Example:
        >>> composite_score(75, 70)
        73
    """
    return clamp_score(technical * TECHNICAL_WEIGHT + fundamental * FUNDAMENTAL_WEIGHT)


def classify_signal(composite: int, technical: int, fundamental: int) -> JudgmentSignal:
    """Walk the ladder and return the first matching signal."""
    for rung in SIGNAL_LADDER:
        if rung.matches(composite, technical, fundamental):
            return rung.signal
    return JudgmentSignal.SELL


def judge(
    technical: TechnicalScoreResult,
    fundamental: FundamentalScoreResult,
    fundamentals: Fundamentals | None = None,
) -> Judgment:
    """
    Produce the final judgment.

    ``fundamentals`` is accepted so callers can pass the raw ratios
    alongside their scores; the narrative already lives on the two
    results, so it is not consulted here.

    Never fails. Reasons and risks are never empty because both scorers
    always emit at least one line each.
    """
    score = composite_score(technical.score, fundamental.score)
    signal = classify_signal(score, technical.score, fundamental.score)

    reasons = [*technical.reasons, *fundamental.reasons]

    risks = [*technical.risks, *fundamental.risks]
    if technical.score < WEAK_SCORE and fundamental.score < WEAK_SCORE:
        risks.append(WEAK_BOTH_RISK)

    return Judgment(
        score=score,
        signal=signal,
        reasons=tuple(reasons),
        risks=tuple(risks),
    )
