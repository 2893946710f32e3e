from .report import (
    ReportData,
    generate_markdown_report,
    generate_section,
    write_report,
)
from .json_api import (
    AnalysisResponse,
    BatchResponse,
    SnapshotResponse,
    to_api_response,
    to_batch_response,
    to_error_response,
    to_snapshot_response,
    to_json,
)
from .export import (
    write_results_csv,
    export_results_csv,
    render_report_json,
    export_report_json,
    export_all,
)

__all__ = [
    # Report generation
    "ReportData",
    "generate_markdown_report",
    "generate_section",
    "write_report",
    # JSON API
    "AnalysisResponse",
    "BatchResponse",
    "SnapshotResponse",
    "to_api_response",
    "to_batch_response",
    "to_error_response",
    "to_snapshot_response",
    "to_json",
    # Export
    "write_results_csv",
    "export_results_csv",
    "render_report_json",
    "export_report_json",
    "export_all",
]
