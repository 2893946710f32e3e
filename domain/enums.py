from enum import Enum


class AnalysisMode(str, Enum):
    """How much price history a technical analysis may rely on."""
    FULL = "full"              # requires the full Ichimoku lookback
    SIMPLIFIED = "simplified"  # short history, neutral defaults where needed


class JudgmentSignal(str, Enum):
    """Final recommendation label, strongest first."""
    STRONG_BUY = "strong buy"
    BUY = "buy consideration"
    HOLD = "hold/watch"
    SELL = "sell consideration"

    @property
    def code(self) -> str:
        """Short machine code used by badge renderers."""
        return _SIGNAL_CODES[self]

    @property
    def rank(self) -> int:
        """Ordering key: higher is more bullish."""
        return _SIGNAL_RANKS[self]


_SIGNAL_CODES = {
    JudgmentSignal.STRONG_BUY: "strong_buy",
    JudgmentSignal.BUY: "buy",
    JudgmentSignal.HOLD: "hold",
    JudgmentSignal.SELL: "sell",
}

_SIGNAL_RANKS = {
    JudgmentSignal.STRONG_BUY: 3,
    JudgmentSignal.BUY: 2,
    JudgmentSignal.HOLD: 1,
    JudgmentSignal.SELL: 0,
}
