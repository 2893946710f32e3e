"""
Data export utilities.

Export analysis results to CSV and JSON.
"""

import csv
import json
from pathlib import Path
from typing import Any, TextIO

from domain import AnalysisResult
from .json_api import to_batch_response, to_error_response
from .report import ReportData, generate_markdown_report


CSV_FIELDS = [
    "symbol",
    "name",
    "signal",
    "recommendation",
    "score",
    "technical_score",
    "fundamental_score",
    "per_score",
    "pbr_score",
    "roe_score",
    "dividend_score",
    "growth_score",
    "stability_score",
    "mode",
    "current_price",
    "rsi",
    "reasons",
    "risks",
    "updated_at",
]


def _result_row(result: AnalysisResult) -> dict[str, Any]:
    b = result.fundamental.breakdown
    snapshot = result.technical.snapshot
    return {
        "symbol": result.symbol,
        "name": result.name or "",
        "signal": result.judgment.signal.value,
        "recommendation": result.judgment.signal.code,
        "score": result.judgment.score,
        "technical_score": result.technical.score,
        "fundamental_score": result.fundamental.score,
        "per_score": b.per_score,
        "pbr_score": b.pbr_score,
        "roe_score": b.roe_score,
        "dividend_score": b.dividend_score,
        "growth_score": b.growth_score,
        "stability_score": b.stability_score,
        "mode": result.technical.mode.value,
        "current_price": f"{snapshot.current_price:.2f}",
        "rsi": f"{snapshot.rsi:.2f}",
        "reasons": "; ".join(result.judgment.reasons),
        "risks": "; ".join(result.judgment.risks),
        "updated_at": result.updated_at.isoformat(),
    }


# ============================================================================
# CSV Export
# ============================================================================

def write_results_csv(
    results: list[AnalysisResult],
    stream: TextIO,
    include_header: bool = True,
) -> None:
    """
    Write one CSV row per analysed instrument.

    Args:
        results: Analysis results
        stream: Text stream opened with newline=""
        include_header: Include header row
    """
    writer = csv.DictWriter(stream, fieldnames=CSV_FIELDS)

    if include_header:
        writer.writeheader()

    for result in results:
        writer.writerow(_result_row(result))


def export_results_csv(
    results: list[AnalysisResult],
    filepath: str | Path,
    include_header: bool = True,
) -> None:
    """
    Export analysis results to CSV.

    Args:
        results: Analysis results
        filepath: Output file path
        include_header: Include header row
    """
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        write_results_csv(results, f, include_header)


# ============================================================================
# JSON Export
# ============================================================================

def render_report_json(data: ReportData, indent: int = 2) -> str:
    """Render a run (results plus failures) as a camelCase JSON document."""
    errors = [
        to_error_response(symbol, data.error_details.get(symbol), message)
        for symbol, message in data.failures.items()
    ]
    response = to_batch_response(data.results, errors, data.generated_at)
    return json.dumps(
        response.model_dump(mode="json", by_alias=True),
        indent=indent or None,
        ensure_ascii=False,
    )


def export_report_json(
    data: ReportData,
    filepath: str | Path,
    indent: int = 2,
) -> None:
    """
    Export a full run to JSON.

    Args:
        data: Report data
        filepath: Output file path
        indent: JSON indentation
    """
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(render_report_json(data, indent))


# ============================================================================
# Convenience Functions
# ============================================================================

def export_all(
    data: ReportData,
    output_dir: str | Path,
    base_name: str | None = None,
) -> dict[str, Path]:
    """
    Export a run in all formats.

    Args:
        data: Report data
        output_dir: Output directory
        base_name: Base filename (default: analysis_{date})

    Returns:
        Dict of format -> filepath
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    if base_name is None:
        date_str = data.generated_at.strftime("%Y%m%d_%H%M")
        base_name = f"analysis_{date_str}"

    files = {}

    json_path = output_dir / f"{base_name}.json"
    export_report_json(data, json_path)
    files["json"] = json_path

    if data.results:
        csv_path = output_dir / f"{base_name}.csv"
        export_results_csv(data.results, csv_path)
        files["csv"] = csv_path

    md_path = output_dir / f"{base_name}.md"
    md_path.write_text(generate_markdown_report(data), encoding="utf-8")
    files["markdown"] = md_path

    return files
