from .sources import (
    StockDataSource,
    AnalysisError,
    ValidationError,
    InsufficientHistoryError,
    ParseError,
    DataError,
    ErrorCode,
)

__all__ = [
    "StockDataSource",
    "AnalysisError",
    "ValidationError",
    "InsufficientHistoryError",
    "ParseError",
    "DataError",
    "ErrorCode",
]
