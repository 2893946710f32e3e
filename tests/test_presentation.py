"""
Tests for the presentation layer.

Tests cover:
- camelCase API responses
- Markdown report sections
- CSV and JSON exports
"""

import csv
import io
import json
from datetime import datetime

import pytest

from domain import AnalysisMode, analyze_stock
from ports import DataError, ErrorCode
from presentation import (
    ReportData,
    export_all,
    generate_markdown_report,
    generate_section,
    render_report_json,
    to_api_response,
    to_json,
    write_report,
    write_results_csv,
)
from presentation.report import _score_bar

GENERATED_AT = datetime(2024, 4, 10, 15, 30)


@pytest.fixture
def result(rising_stock):
    return analyze_stock(rising_stock, as_of=GENERATED_AT)


@pytest.fixture
def simplified_result(short_stock):
    return analyze_stock(short_stock, AnalysisMode.SIMPLIFIED, as_of=GENERATED_AT)


@pytest.fixture
def report_data(result, simplified_result):
    return ReportData(
        generated_at=GENERATED_AT,
        results=[result, simplified_result],
        failures={"9999": "[E404] price series is empty"},
        warnings=["6758: only 30 price points"],
    )


class TestJsonApi:
    """camelCase wire format."""

    def test_top_level_keys(self, result):
        data = to_json(result)
        assert set(data) == {"symbol", "name", "technical", "fundamental", "judgment", "updatedAt"}
        assert data["updatedAt"] == "2024-04-10T15:30:00"

    def test_technical_keys(self, result):
        technical = to_json(result)["technical"]
        assert technical["score"] == 53
        assert technical["mode"] == "full"
        assert technical["simplified"] is False
        assert technical["dataPoints"] == 100
        assert technical["defaulted"] == []
        assert set(technical["bollingerBands"]) == {"upper", "middle", "lower"}
        assert set(technical["movingAverages"]) == {"ma5", "ma25", "ma75"}
        assert set(technical["ichimoku"]) == {"tenkanSen", "kijunSen", "senkouSpanA", "senkouSpanB"}

    def test_fundamental_and_judgment(self, result):
        data = to_json(result)
        assert data["fundamental"]["perScore"] == 80
        assert data["fundamental"]["stabilityScore"] == 68
        assert data["judgment"]["signal"] == "buy consideration"
        assert data["judgment"]["recommendation"] == "buy"
        assert data["judgment"]["score"] == 63

    def test_simplified_defaults_listed(self, simplified_result):
        technical = to_json(simplified_result)["technical"]
        assert technical["simplified"] is True
        assert "ma75" in technical["defaulted"]

    def test_response_model(self, result):
        response = to_api_response(result)
        assert response.technical.moving_averages.ma5 == result.technical.snapshot.moving_averages.ma5


class TestMarkdownReport:
    """Markdown sections."""

    def test_score_bar(self):
        assert _score_bar(50, 10) == "[█████░░░░░] 50"
        assert _score_bar(0, 5) == "[░░░░░] 0"
        assert _score_bar(100, 5) == "[█████] 100"

    def test_full_report(self, report_data):
        report = generate_markdown_report(report_data)
        assert report.startswith("# Buy-Timing Report - April 10, 2024")
        assert "| 7203 (Toyota Motor) |" in report
        assert "| 6758 * |" in report
        assert "## 🟢 7203 - Toyota Motor" in report
        assert "### Fundamental Breakdown" in report
        assert "- ❌ **9999**: [E404] price series is empty" in report
        assert "- ⚠️ 6758: only 30 price points" in report
        assert "not constitute investment advice" in report

    def test_reasons_and_risks_listed(self, report_data, result):
        report = generate_markdown_report(report_data)
        for reason in result.judgment.reasons:
            assert f"- {reason}" in report
        for risk in result.judgment.risks:
            assert f"- ⚠️ {risk}" in report

    def test_empty_report(self):
        report = generate_markdown_report(ReportData(generated_at=GENERATED_AT))
        assert "*No instruments analysed.*" in report
        assert "## Issues" not in report

    def test_selected_sections(self, report_data):
        report = generate_markdown_report(report_data, sections=["summary"])
        assert report.startswith("## Summary")
        assert "### Indicators" not in report

    def test_unknown_section(self, report_data):
        assert generate_section("charts", report_data) == "<!-- Unknown section: charts -->\n"

    def test_write_report_to_stream(self, report_data):
        buffer = io.StringIO()
        content = write_report(report_data, output=buffer)
        assert buffer.getvalue() == content


class TestExport:
    """CSV and JSON exports."""

    def test_csv_rows(self, result, simplified_result):
        buffer = io.StringIO(newline="")
        write_results_csv([result, simplified_result], buffer)
        rows = list(csv.DictReader(io.StringIO(buffer.getvalue())))
        assert [r["symbol"] for r in rows] == ["7203", "6758"]
        assert rows[0]["signal"] == "buy consideration"
        assert rows[0]["score"] == "63"
        assert rows[0]["mode"] == "full"
        assert rows[1]["mode"] == "simplified"
        assert rows[0]["name"] == "Toyota Motor"

    def test_report_json(self, report_data):
        document = json.loads(render_report_json(report_data))
        assert document["total"] == 2
        assert document["generatedAt"] == "2024-04-10T15:30:00"
        assert [r["symbol"] for r in document["results"]] == ["7203", "6758"]
        assert document["errors"] == [
            {"symbol": "9999", "code": None, "message": "[E404] price series is empty"}
        ]

    def test_report_json_error_detail(self, report_data):
        error = DataError("price series is empty", code=ErrorCode.DATA_EMPTY)
        report_data.error_details["9999"] = error.with_context(symbol="9999").to_dict()
        document = json.loads(render_report_json(report_data))
        assert document["errors"] == [
            {"symbol": "9999", "code": "E404", "message": "price series is empty"}
        ]

    def test_export_all(self, report_data, tmp_path):
        files = export_all(report_data, tmp_path / "out")
        assert set(files) == {"json", "csv", "markdown"}
        assert files["json"].name == "analysis_20240410_1530.json"
        for path in files.values():
            assert path.exists()

    def test_export_all_without_results(self, tmp_path):
        files = export_all(ReportData(generated_at=GENERATED_AT), tmp_path, base_name="empty")
        assert set(files) == {"json", "markdown"}
