"""
Domain models - pure data structures with validation.

These are immutable input carriers with no business logic.
All models are JSON-serializable and self-validating.
"""

import math
from collections.abc import Iterable, Mapping
from datetime import date as date_type
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic.functional_validators import AfterValidator


# ============================================================================
# Custom validators
# ============================================================================

def _validate_symbol(v: str) -> str:
    """Validate instrument code format (e.g. 7203, 7203.T, BRK-B)."""
    v = v.upper().strip()
    if not v:
        raise ValueError("symbol cannot be empty")
    if len(v) > 12:
        raise ValueError("symbol too long (max 12 chars)")
    if not v.replace("-", "").replace(".", "").isalnum():
        raise ValueError("symbol must be alphanumeric (with - or .)")
    return v


Symbol = Annotated[str, AfterValidator(_validate_symbol)]
Price = Annotated[float, Field(ge=0, allow_inf_nan=False)]


# ============================================================================
# Price data
# ============================================================================

class PricePoint(BaseModel):
    """One trading day's OHLCV summary."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    date: date_type
    open: Price
    high: Price
    low: Price
    close: Price
    volume: int = Field(default=0, ge=0)


class PriceSeries(BaseModel):
    """
    Daily prices for one instrument, oldest first.

    Dates must be strictly increasing. Missing trading days are simply
    absent; no gap filling is done.
    """
    model_config = ConfigDict(frozen=True)

    points: tuple[PricePoint, ...] = ()

    @model_validator(mode="after")
    def _dates_strictly_increasing(self) -> "PriceSeries":
        for prev, curr in zip(self.points, self.points[1:]):
            if curr.date <= prev.date:
                raise ValueError(
                    f"dates must be strictly increasing: {curr.date} follows {prev.date}"
                )
        return self

    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any] | PricePoint]) -> "PriceSeries":
        """Build a series from dict rows (or PricePoints)."""
        return cls(points=tuple(
            row if isinstance(row, PricePoint) else PricePoint.model_validate(row)
            for row in rows
        ))

    def __len__(self) -> int:
        return len(self.points)

    @property
    def closes(self) -> list[float]:
        return [p.close for p in self.points]

    @property
    def highs(self) -> list[float]:
        return [p.high for p in self.points]

    @property
    def lows(self) -> list[float]:
        return [p.low for p in self.points]

    @property
    def latest(self) -> PricePoint | None:
        """Most recent price point, if any."""
        return self.points[-1] if self.points else None


# ============================================================================
# Fundamentals
# ============================================================================

class Fundamentals(BaseModel):
    """
    Balance-sheet ratios for one instrument.

    Every field is optional: None means "unknown", never zero.
    ROE and dividend yield are percentages (12.5 = 12.5%).
    """
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    per: float | None = None
    pbr: float | None = None
    roe: float | None = None
    dividend_yield: float | None = None
    market_cap: float | None = None
    revenue: float | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _nan_is_unknown(cls, v: Any) -> Any:
        if isinstance(v, float) and (math.isnan(v) or math.isinf(v)):
            return None
        return v

    @property
    def is_empty(self) -> bool:
        """True when no ratio is known."""
        return all(v is None for v in self.model_dump().values())


class StockData(BaseModel):
    """Everything a data source hands over for one analysis."""
    model_config = ConfigDict(frozen=True)

    symbol: Symbol
    name: str | None = None
    prices: PriceSeries = Field(default_factory=PriceSeries)
    fundamentals: Fundamentals = Field(default_factory=Fundamentals)

    @field_validator("prices", mode="before")
    @classmethod
    def _rows_to_series(cls, v: Any) -> Any:
        # Sources usually ship a bare list of daily rows
        if isinstance(v, (list, tuple)):
            return {"points": v}
        return v

    @field_validator("fundamentals", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return {} if v is None else v


# ============================================================================
# Serialization helpers
# ============================================================================

def to_json_dict(model: BaseModel) -> dict:
    """Convert model to JSON-serializable dict."""
    return model.model_dump(mode="json", by_alias=True)

