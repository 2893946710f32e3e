"""
Local file data source.

Reads instrument data that was fetched elsewhere:
- ``<SYMBOL>.json``: a full StockData document
  ({"symbol", "name", "prices": [...], "fundamentals": {...}})
- ``<SYMBOL>.csv`` plus optional ``<SYMBOL>.fundamentals.json``:
  daily OHLCV rows and camelCase fundamentals

Everything returned has passed domain validation; malformed files raise
ParseError and invalid values raise ValidationError.
"""

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from domain import Fundamentals, PriceSeries, StockData
from ports import DataError, ErrorCode, ParseError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "%Y-%m-%d"

# CSV header aliases -> PricePoint field
CSV_COLUMNS = {
    "date": "date",
    "open": "open",
    "high": "high",
    "low": "low",
    "close": "close",
    "volume": "volume",
    "adj close": "close",
    "adjclose": "close",
}


def _read_json(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise DataError(f"Cannot read {path}: {e}", code=ErrorCode.DATA_MISSING, source=str(path)) from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(
            source=str(path),
            format_type="json",
            reason=str(e),
            raw_content=raw,
            cause=e,
        ) from e


def load_stock_json(path: Path | str) -> StockData:
    """
    Load a complete StockData document.

    Raises:
        DataError: If the file cannot be read
        ParseError: If the file is not valid JSON
        ValidationError: If the document fails domain validation
    """
    path = Path(path)
    data = _read_json(path)
    if not isinstance(data, dict):
        raise ParseError(source=str(path), format_type="json", reason="expected a JSON object")

    try:
        stock = StockData.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, source=str(path)) from e

    logger.debug(f"Loaded {stock.symbol} from {path} ({len(stock.prices)} price points)")
    return stock


def load_fundamentals_json(path: Path | str) -> Fundamentals:
    """Load fundamentals (camelCase or snake_case keys) from a JSON object."""
    path = Path(path)
    data = _read_json(path)
    if data is None:
        return Fundamentals()
    if not isinstance(data, dict):
        raise ParseError(source=str(path), format_type="json", reason="expected a JSON object")

    try:
        return Fundamentals.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, source=str(path)) from e


def _normalize_row(row: dict[str, str], line_no: int, path: Path, date_format: str) -> dict[str, Any]:
    normalized: dict[str, Any] = {}
    for header, value in row.items():
        if header is None:
            continue
        key = CSV_COLUMNS.get(header.strip().lower())
        # An explicit close column wins over adj close
        if key is None or (key in normalized and header.strip().lower() != key):
            continue
        normalized[key] = value.strip() if isinstance(value, str) else value

    if not normalized.get("volume"):
        normalized.pop("volume", None)

    date_text = normalized.get("date")
    if not date_text:
        raise ParseError(source=str(path), format_type="csv", reason=f"line {line_no}: missing date")
    try:
        normalized["date"] = datetime.strptime(date_text, date_format).date()
    except ValueError as e:
        raise ParseError(
            source=str(path),
            format_type="date",
            reason=f"line {line_no}: {date_text!r} does not match {date_format}",
            cause=e,
        ) from e

    return normalized


def load_prices_csv(path: Path | str, date_format: str = DEFAULT_DATE_FORMAT) -> PriceSeries:
    """
    Load a daily OHLCV CSV (header row required, oldest first).

    Column names are case-insensitive; ``Adj Close`` is used only when
    there is no ``Close`` column. Volume is optional.

    Raises:
        DataError: If the file cannot be read
        ParseError: If a row has a missing or malformed date
        ValidationError: If prices are negative or dates are out of order
    """
    path = Path(path)
    try:
        with open(path, newline="", encoding="utf-8") as f:
            reader = csv.DictReader(f)
            if not reader.fieldnames:
                raise ParseError(source=str(path), format_type="csv", reason="missing header row")
            rows = [
                _normalize_row(row, line_no, path, date_format)
                for line_no, row in enumerate(reader, start=2)
            ]
    except OSError as e:
        raise DataError(f"Cannot read {path}: {e}", code=ErrorCode.DATA_MISSING, source=str(path)) from e
    except csv.Error as e:
        raise ParseError(source=str(path), format_type="csv", reason=str(e), cause=e) from e

    try:
        series = PriceSeries.from_rows(rows)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, source=str(path)) from e

    logger.debug(f"Loaded {len(series)} price points from {path}")
    return series


def load_stock_files(
    prices_path: Path | str,
    fundamentals_path: Path | str | None = None,
    symbol: str | None = None,
    name: str | None = None,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> StockData:
    """
    Assemble StockData from a price CSV and an optional fundamentals JSON.

    The symbol defaults to the CSV file stem.
    """
    prices_path = Path(prices_path)
    prices = load_prices_csv(prices_path, date_format)
    fundamentals = load_fundamentals_json(fundamentals_path) if fundamentals_path else Fundamentals()

    try:
        return StockData(
            symbol=symbol or prices_path.stem,
            name=name,
            prices=prices,
            fundamentals=fundamentals,
        )
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, source=str(prices_path)) from e


class FileDataSource:
    """
    StockDataSource backed by a directory of files.

    Lookup order for a symbol: ``<SYMBOL>.json``, then ``<SYMBOL>.csv``
    with an optional ``<SYMBOL>.fundamentals.json``. Loaded data is kept
    in memory and reloaded when a file's mtime changes.
    """

    def __init__(self, data_dir: Path | str, date_format: str = DEFAULT_DATE_FORMAT):
        self.data_dir = Path(data_dir)
        self.date_format = date_format
        self._cache: dict[str, tuple[float, StockData]] = {}

    @property
    def source_name(self) -> str:
        return "files"

    def _candidates(self, symbol: str) -> tuple[Path, Path, Path]:
        return (
            self.data_dir / f"{symbol}.json",
            self.data_dir / f"{symbol}.csv",
            self.data_dir / f"{symbol}.fundamentals.json",
        )

    def available_symbols(self) -> list[str]:
        """Symbols that have a document or a price CSV in the data directory."""
        if not self.data_dir.is_dir():
            return []
        symbols = set()
        for path in self.data_dir.iterdir():
            if path.name.endswith(".fundamentals.json"):
                continue
            if path.suffix in (".json", ".csv"):
                symbols.add(path.stem.upper())
        return sorted(symbols)

    def get_stock_data(self, symbol: str) -> StockData:
        """
        Load prices and fundamentals for one symbol.

        Raises:
            DataError: If no file exists for the symbol
            ParseError: If a file is malformed
            ValidationError: If the data fails domain validation
        """
        symbol = symbol.upper().strip()
        doc_path, csv_path, fund_path = self._candidates(symbol)

        if doc_path.exists():
            source_path = doc_path
        elif csv_path.exists():
            source_path = csv_path
        else:
            raise DataError(
                f"No data file for {symbol} in {self.data_dir}",
                symbol=symbol,
                code=ErrorCode.DATA_MISSING,
                source=self.source_name,
            )

        mtime = source_path.stat().st_mtime
        cached = self._cache.get(symbol)
        if cached and cached[0] == mtime:
            logger.debug(f"Cache hit: {symbol}")
            return cached[1]

        if source_path == doc_path:
            stock = load_stock_json(doc_path)
        else:
            stock = load_stock_files(
                csv_path,
                fund_path if fund_path.exists() else None,
                symbol=symbol,
                date_format=self.date_format,
            )

        self._cache[symbol] = (mtime, stock)
        logger.info(f"Loaded {symbol} from {source_path}")
        return stock
