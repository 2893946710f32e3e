"""
Stock analysis engine - pure functions, no I/O.

Wires the indicator engine, the two scorers and the judgment engine
together for one instrument. All functions take typed domain objects
and return typed domain objects.
"""

from datetime import datetime

from .analysis_types import AnalysisResult
from .enums import AnalysisMode
from .fundamental import score_fundamental
from .judgment import judge
from .models import StockData
from .technical import analyze_technical


def analyze_stock(
    stock: StockData,
    mode: AnalysisMode = AnalysisMode.FULL,
    as_of: datetime | None = None,
) -> AnalysisResult:
    """
    Run the full analysis for one instrument.

    Both scorers complete before the judgment is made. The fundamental
    path never fails; the technical path raises on an empty series or on
    FULL mode with short history.

    Args:
        stock: Prices and fundamentals for the instrument
        mode: FULL (needs 52+ points) or SIMPLIFIED
        as_of: Timestamp for the result (defaults to now)

    Returns:
        AnalysisResult with technical, fundamental and judgment parts

    Raises:
        DataError: If the price series is empty
        InsufficientHistoryError: If FULL mode is requested on short data
    """
    technical = analyze_technical(stock.prices, mode)
    fundamental = score_fundamental(stock.fundamentals)
    judgment = judge(technical, fundamental, stock.fundamentals)

    return AnalysisResult(
        symbol=stock.symbol,
        name=stock.name,
        technical=technical,
        fundamental=fundamental,
        judgment=judgment,
        updated_at=as_of or datetime.now(),
    )


def rank_results(results: list[AnalysisResult]) -> list[AnalysisResult]:
    """
    Order results best first.

    Sorted by judgment score, then signal strength, then technical score;
    the symbol breaks remaining ties so the order is stable.
    """
    return sorted(
        results,
        key=lambda r: (
            -r.judgment.score,
            -r.judgment.signal.rank,
            -r.technical.score,
            r.symbol,
        ),
    )
