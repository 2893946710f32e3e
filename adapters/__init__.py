from .files import (
    FileDataSource,
    load_stock_json,
    load_prices_csv,
    load_fundamentals_json,
    load_stock_files,
)

__all__ = [
    "FileDataSource",
    "load_stock_json",
    "load_prices_csv",
    "load_fundamentals_json",
    "load_stock_files",
]
