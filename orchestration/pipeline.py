"""
Main orchestration pipeline.

Coordinates all components:
1. Data loading (a StockDataSource, or StockData handed in directly)
2. Mode selection (full vs simplified analysis)
3. Analysis (indicators, scoring, judgment)

Handles partial failures gracefully - one bad symbol never stops a batch
unless fail_fast is set.
"""

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum

from config import KaidokiConfig, get_config
from domain import (
    MIN_FULL_HISTORY,
    AnalysisMode,
    AnalysisResult,
    StockData,
    analyze_stock,
    rank_results,
)
from ports import AnalysisError, DataError, ErrorCode, InsufficientHistoryError, StockDataSource

logger = logging.getLogger(__name__)


# ============================================================================
# Pipeline Status Tracking
# ============================================================================

class SymbolStatus(str, Enum):
    """Outcome of one symbol in a run."""
    OK = "ok"
    SIMPLIFIED = "simplified"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass
class SymbolResult:
    """Result of analysing a single symbol."""
    symbol: str
    status: SymbolStatus
    result: AnalysisResult | None = None
    error: str | None = None
    error_code: str | None = None
    # AnalysisError.to_dict() of the failure
    detail: dict | None = None
    finished_at: datetime = field(default_factory=datetime.now)


@dataclass
class PipelineStatus:
    """Overall pipeline execution status."""
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: datetime | None = None
    symbols: dict[str, SymbolResult] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_healthy(self) -> bool:
        """True when at least one symbol was analysed and none failed."""
        return bool(self.succeeded) and not self.failed

    @property
    def succeeded(self) -> list[str]:
        return [
            s for s, r in self.symbols.items()
            if r.status in (SymbolStatus.OK, SymbolStatus.SIMPLIFIED)
        ]

    @property
    def failed(self) -> list[str]:
        return [s for s, r in self.symbols.items() if r.status == SymbolStatus.FAILED]

    @property
    def duration(self) -> timedelta | None:
        """Pipeline execution duration."""
        if self.completed_at:
            return self.completed_at - self.started_at
        return None

    def add_warning(self, msg: str) -> None:
        logger.warning(msg)
        self.warnings.append(msg)

    def add_error(self, msg: str) -> None:
        logger.error(msg)
        self.errors.append(msg)


@dataclass
class BatchResult:
    """Analysis results of a batch, in input order, plus run status."""
    results: list[AnalysisResult]
    status: PipelineStatus

    def ranked(self) -> list[AnalysisResult]:
        """Results best first."""
        return rank_results(self.results)


# ============================================================================
# Pipeline
# ============================================================================

class AnalysisPipeline:
    """
    Runs buy-timing analysis for one or many instruments.

    Usage:
        pipeline = AnalysisPipeline(source=FileDataSource("data"))
        batch = pipeline.run_many(["7203", "6758"])
        for result in batch.ranked():
            print(result.symbol, result.judgment.signal.value)
    """

    def __init__(
        self,
        config: KaidokiConfig | None = None,
        source: StockDataSource | None = None,
    ):
        self.config = config or get_config()
        self.source = source
        self.status = PipelineStatus()

    def choose_mode(self, stock: StockData, requested: AnalysisMode | None = None) -> AnalysisMode:
        """
        Decide how to analyse ``stock``.

        An explicit request is honoured as-is (FULL on short data fails
        later with InsufficientHistoryError). Otherwise FULL is used when
        there is enough history, SIMPLIFIED when config allows it.

        Raises:
            InsufficientHistoryError: If history is short and simplified
                analysis is disabled
        """
        if requested is not None:
            return requested

        available = len(stock.prices)
        if available >= MIN_FULL_HISTORY:
            return AnalysisMode.FULL
        if self.config.analysis.allow_simplified:
            return AnalysisMode.SIMPLIFIED
        raise InsufficientHistoryError(
            available=available,
            required=MIN_FULL_HISTORY,
            source=stock.symbol,
        )

    def run(self, stock: StockData, mode: AnalysisMode | None = None) -> AnalysisResult:
        """
        Analyse one instrument.

        Raises:
            AnalysisError: On empty, invalid or (in FULL mode) short data
        """
        chosen = self.choose_mode(stock, mode)
        if chosen == AnalysisMode.SIMPLIFIED and mode is None:
            self.status.add_warning(
                f"{stock.symbol}: only {len(stock.prices)} price points, "
                f"running simplified analysis (full needs {MIN_FULL_HISTORY})"
            )

        logger.debug(f"Analysing {stock.symbol} ({chosen.value}, {len(stock.prices)} points)")
        return analyze_stock(stock, chosen)

    def load(self, symbol: str) -> StockData:
        """
        Fetch one symbol from the configured data source.

        Raises:
            DataError: If no data source is configured
        """
        if self.source is None:
            raise DataError(
                "No data source configured; pass StockData instead of a symbol",
                symbol=symbol,
                code=ErrorCode.DATA_MISSING,
            )
        return self.source.get_stock_data(symbol)

    def run_symbol(self, symbol: str, mode: AnalysisMode | None = None) -> AnalysisResult:
        """Load ``symbol`` from the data source and analyse it."""
        return self.run(self.load(symbol), mode)

    def _run_item(self, item: StockData | str, mode: AnalysisMode | None) -> AnalysisResult:
        if isinstance(item, StockData):
            return self.run(item, mode)
        return self.run_symbol(item, mode)

    def run_many(
        self,
        items: Iterable[StockData | str],
        mode: AnalysisMode | None = None,
    ) -> BatchResult:
        """
        Analyse a batch in a thread pool.

        Items may be StockData or symbols to load from the data source.
        Failures are recorded per symbol; with ``analysis.fail_fast`` the
        first failure cancels pending work and is re-raised. A symbol that
        appears more than once is analysed once, with a warning.
        """
        self.status = PipelineStatus()
        items = self._unique(items)
        settings = self.config.analysis
        results: dict[int, AnalysisResult] = {}

        workers = min(settings.max_workers, max(len(items), 1))
        logger.info(f"Analysing {len(items)} instrument(s) with {workers} worker(s)")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self._run_item, item, mode): (index, _label(item))
                for index, item in enumerate(items)
            }

            for future in as_completed(futures):
                index, label = futures[future]
                try:
                    result = future.result()
                except AnalysisError as e:
                    self.status.add_error(f"{label}: {e}")
                    self.status.symbols[label] = SymbolResult(
                        symbol=label,
                        status=SymbolStatus.FAILED,
                        error=e.message,
                        error_code=e.code.value,
                        detail=e.with_context(symbol=label).to_dict(),
                    )
                    if settings.fail_fast:
                        self._skip_pending(futures)
                        raise
                    continue
                except Exception as e:
                    self.status.add_error(f"{label}: Unexpected error - {e}")
                    internal = AnalysisError(str(e), code=ErrorCode.INTERNAL, source=label, cause=e)
                    self.status.symbols[label] = SymbolResult(
                        symbol=label,
                        status=SymbolStatus.FAILED,
                        error=internal.message,
                        error_code=internal.code.value,
                        detail=internal.to_dict(),
                    )
                    if settings.fail_fast:
                        self._skip_pending(futures)
                        raise
                    continue

                results[index] = result
                self.status.symbols[result.symbol] = SymbolResult(
                    symbol=result.symbol,
                    status=(
                        SymbolStatus.SIMPLIFIED
                        if result.technical.simplified
                        else SymbolStatus.OK
                    ),
                    result=result,
                )

        self.status.completed_at = datetime.now()
        logger.info(
            f"Batch done: {len(self.status.succeeded)} ok, "
            f"{len(self.status.failed)} failed in {self.status.duration}"
        )
        return BatchResult(
            results=[results[i] for i in sorted(results)],
            status=self.status,
        )

    def _unique(self, items: Iterable[StockData | str]) -> list[StockData | str]:
        """Drop repeated symbols, keeping the first occurrence."""
        seen: set[str] = set()
        unique = []
        for item in items:
            label = _label(item)
            if label in seen:
                self.status.add_warning(f"{label}: duplicate in batch, analysed once")
                continue
            seen.add(label)
            unique.append(item)
        return unique

    def _skip_pending(self, futures: dict) -> None:
        for future, (_, label) in futures.items():
            if future.cancel():
                self.status.symbols[label] = SymbolResult(symbol=label, status=SymbolStatus.SKIPPED)
        self.status.completed_at = datetime.now()

    def get_status(self) -> PipelineStatus:
        """Status of the most recent run."""
        return self.status


def _label(item: StockData | str) -> str:
    return item.symbol if isinstance(item, StockData) else item.upper().strip()


def run_pipeline(
    items: Iterable[StockData | str],
    config: KaidokiConfig | None = None,
    source: StockDataSource | None = None,
    mode: AnalysisMode | None = None,
) -> BatchResult:
    """Convenience function to analyse a batch with a fresh pipeline."""
    return AnalysisPipeline(config=config, source=source).run_many(items, mode)
