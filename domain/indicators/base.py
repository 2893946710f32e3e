"""Base types for technical indicators."""

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class IndicatorLine:
    """Compact indicator output anchored to its source series.

    Indicator functions return only the values they can compute, so a line
    is shorter than its input by the warm-up period. ``offset`` is the index
    in the source series of ``values[0]``; every line ends on the last
    source bar.

    Attributes:
        values: Computed values, oldest first
        offset: Source index of the first value

    Example:
        >>> line = IndicatorLine.align([11.0, 12.0], source_length=4)
        >>> line.offset
        2
        >>> line.at(3)
        12.0
    """
    values: tuple[float, ...]
    offset: int

    @classmethod
    def align(cls, values: Sequence[float], source_length: int) -> "IndicatorLine":
        """Anchor a tail-aligned value list to a source of ``source_length`` bars."""
        if len(values) > source_length:
            raise ValueError("indicator line cannot be longer than its source")
        return cls(values=tuple(values), offset=source_length - len(values))

    def __len__(self) -> int:
        return len(self.values)

    @property
    def is_empty(self) -> bool:
        return not self.values

    @property
    def latest(self) -> float | None:
        """Value on the last source bar, or None during warm-up."""
        return self.values[-1] if self.values else None

    def at(self, index: int) -> float | None:
        """Value at a source-series index, or None before the line starts."""
        pos = index - self.offset
        if pos < 0 or pos >= len(self.values):
            return None
        return self.values[pos]
