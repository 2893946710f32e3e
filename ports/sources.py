"""
Ports consumed by the analysis core, and the errors it raises.

This module defines the protocol the analysis core consumes from
data-source collaborators, and the structured error types raised
when input cannot be analyzed.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from domain.models import StockData


# ============================================================================
# Error Codes
# ============================================================================

class ErrorCode(str, Enum):
    """Stable codes carried by every AnalysisError (grouped by hundreds)."""

    # Parse errors (3xx)
    PARSE_JSON = "E301"
    PARSE_CSV = "E303"
    PARSE_DATE = "E304"

    # Data errors (4xx)
    DATA_MISSING = "E401"
    DATA_INVALID = "E402"
    DATA_EMPTY = "E404"
    DATA_INSUFFICIENT_HISTORY = "E405"

    # Validation errors (5xx)
    VALIDATION_PRICES = "E501"

    # Internal errors (9xx)
    INTERNAL = "E901"
    UNKNOWN = "E999"


# ============================================================================
# Error Classes
# ============================================================================

class AnalysisError(Exception):
    """
    Base exception for analysis failures.

    Provides structured error information for logging and reporting.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN,
        source: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        self.code = code
        self.source = source
        self.context = context or {}
        self.cause = cause
        self.timestamp = datetime.now()

        parts = [f"[{code.value}]"]
        if source:
            parts.append(f"[{source}]")
        parts.append(message)

        self.message = message
        super().__init__(" ".join(parts))

    def to_dict(self) -> dict[str, Any]:
        """Plain dict form for structured logs and JSON error payloads."""
        return {
            "code": self.code.value,
            "message": self.message,
            "source": self.source,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None,
        }

    def with_context(self, **kwargs: Any) -> AnalysisError:
        """Attach extra key/value context; returns self so it can be raised inline."""
        self.context.update(kwargs)
        return self


class ValidationError(AnalysisError):
    """Raised when input is malformed (unordered dates, negative prices, ...)."""

    def __init__(
        self,
        field: str,
        reason: str,
        value: Any = None,
        source: str | None = None,
        code: ErrorCode = ErrorCode.VALIDATION_PRICES,
        cause: Exception | None = None,
    ):
        self.field = field
        self.value = value

        context: dict[str, Any] = {"field": field}
        if value is not None:
            context["value"] = str(value)[:100]

        super().__init__(
            message=f"Invalid {field}: {reason}",
            code=code,
            source=source,
            context=context,
            cause=cause,
        )

    @classmethod
    def from_pydantic(
        cls,
        error: Exception,
        source: str | None = None,
    ) -> ValidationError:
        """Create ValidationError from the first entry of a pydantic ValidationError."""
        errors = error.errors() if hasattr(error, "errors") else []
        if errors:
            first = errors[0]
            field = ".".join(str(loc) for loc in first.get("loc", ())) or "input"
            return cls(
                field=field,
                reason=first.get("msg", "validation error"),
                value=first.get("input"),
                source=source,
                cause=error,
            )
        return cls(field="input", reason=str(error), source=source, cause=error)


class InsufficientHistoryError(AnalysisError):
    """Raised when a full analysis is requested on too short a price series."""

    def __init__(self, available: int, required: int, source: str | None = None):
        self.available = available
        self.required = required
        super().__init__(
            message=(
                f"Full analysis needs at least {required} data points, "
                f"got {available}; request simplified mode instead"
            ),
            code=ErrorCode.DATA_INSUFFICIENT_HISTORY,
            source=source,
            context={"available": available, "required": required},
        )


class ParseError(AnalysisError):
    """Raised when an input file cannot be parsed."""

    def __init__(
        self,
        source: str,
        format_type: str,
        reason: str,
        raw_content: str | None = None,
        cause: Exception | None = None,
    ):
        code_map = {
            "json": ErrorCode.PARSE_JSON,
            "csv": ErrorCode.PARSE_CSV,
            "date": ErrorCode.PARSE_DATE,
        }
        code = code_map.get(format_type, ErrorCode.UNKNOWN)

        context: dict[str, Any] = {"format": format_type}
        if raw_content:
            context["raw_preview"] = raw_content[:200]

        super().__init__(
            message=f"Failed to parse {format_type.upper()}: {reason}",
            code=code,
            source=source,
            context=context,
            cause=cause,
        )


class DataError(AnalysisError):
    """Raised when required data is missing or empty."""

    def __init__(
        self,
        reason: str,
        symbol: str | None = None,
        code: ErrorCode = ErrorCode.DATA_INVALID,
        source: str | None = None,
    ):
        self.symbol = symbol
        context = {"symbol": symbol} if symbol else {}
        super().__init__(message=reason, code=code, source=source, context=context)


# ============================================================================
# Data Source Protocol
# ============================================================================

@runtime_checkable
class StockDataSource(Protocol):
    """
    Collaborator that supplies already-fetched, already-validated input.

    Authentication, rate limiting and caching belong to the implementation;
    the analysis core only sees the returned StockData.
    """

    @property
    def source_name(self) -> str:
        """Unique identifier for this source."""
        ...

    def get_stock_data(self, symbol: str) -> StockData:
        """
        Return prices and fundamentals for one instrument.

        Raises:
            DataError: If the symbol is unknown to this source
            ParseError: If the stored payload is malformed
            ValidationError: If the payload fails domain validation
        """
        ...
