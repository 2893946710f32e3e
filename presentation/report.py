"""
Markdown buy-timing report.

Renders ranked analysis results, per-instrument detail and run issues.
Formatting only; write_report is the single place that does I/O.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import TextIO
import sys

from domain import AnalysisResult, JudgmentSignal, TechnicalIndicatorSnapshot


@dataclass
class ReportData:
    """
    All data needed to generate a report.

    Collected from one pipeline run.
    """
    generated_at: datetime = field(default_factory=datetime.now)
    results: list[AnalysisResult] = field(default_factory=list)

    # symbol -> error message for instruments that failed
    failures: dict[str, str] = field(default_factory=dict)
    # symbol -> AnalysisError.to_dict(), where the failure carried one
    error_details: dict[str, dict] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    title: str = "Buy-Timing Report"
    bar_width: int = 10
    date_format: str = "%Y-%m-%d %H:%M"


def _format_date(dt: datetime) -> str:
    """Long-form date for the report title."""
    return dt.strftime("%B %d, %Y")


def _score_bar(score: int, width: int = 10) -> str:
    """Create ASCII bar for a 0-100 score."""
    filled = round(score / 100 * width)
    empty = width - filled
    return f"[{'█' * filled}{'░' * empty}] {score}"


def _signal_badge(signal: JudgmentSignal) -> str:
    """Get badge for a judgment signal."""
    return {
        JudgmentSignal.STRONG_BUY: "🟢🟢",
        JudgmentSignal.BUY: "🟢",
        JudgmentSignal.HOLD: "🟡",
        JudgmentSignal.SELL: "🔴",
    }.get(signal, "⚪")


def _fmt(value: float) -> str:
    return f"{value:,.2f}"


# ============================================================================
# Section Generators
# ============================================================================

def generate_header(data: ReportData) -> str:
    """Title line and generation timestamp."""
    lines = [
        f"# {data.title} - {_format_date(data.generated_at)}",
        "",
        f"*Generated: {data.generated_at.strftime(data.date_format)}*",
        "",
        "---",
        "",
    ]
    return "\n".join(lines)


def generate_summary_section(data: ReportData) -> str:
    """Generate the ranking table."""
    if not data.results:
        return "## Summary\n\n*No instruments analysed.*\n"

    lines = [
        "## Summary",
        "",
        "| Symbol | Signal | Score | Technical | Fundamental |",
        "|--------|--------|-------|-----------|-------------|",
    ]
    for r in data.results:
        label = f"{r.symbol} ({r.name})" if r.name else r.symbol
        if r.technical.simplified:
            label += " *"
        lines.append(
            f"| {label} | {_signal_badge(r.judgment.signal)} {r.judgment.signal.value} "
            f"| {r.judgment.score} | {r.technical.score} | {r.fundamental.score} |"
        )

    if any(r.technical.simplified for r in data.results):
        lines.append("")
        lines.append("\\* simplified analysis (short price history)")

    lines.append("")
    return "\n".join(lines)


def _indicator_lines(snapshot: TechnicalIndicatorSnapshot) -> list[str]:
    m = snapshot.macd
    bb = snapshot.bollinger_bands
    ma = snapshot.moving_averages
    st = snapshot.stochastic
    ich = snapshot.ichimoku
    return [
        f"- Price: {_fmt(snapshot.current_price)}",
        f"- RSI(14): {snapshot.rsi:.1f}",
        f"- MACD: {m.macd:.2f} / signal {m.signal:.2f} / histogram {m.histogram:.2f}",
        f"- Bollinger(20, 2): {_fmt(bb.lower)} - {_fmt(bb.middle)} - {_fmt(bb.upper)}",
        f"- MA 5/25/75: {_fmt(ma.ma5)} / {_fmt(ma.ma25)} / {_fmt(ma.ma75)}",
        f"- Stochastic %K/%D: {st.k:.1f} / {st.d:.1f}",
        f"- Ichimoku tenkan/kijun: {_fmt(ich.tenkan_sen)} / {_fmt(ich.kijun_sen)}, "
        f"cloud {_fmt(ich.cloud_bottom)} - {_fmt(ich.cloud_top)}",
    ]


def generate_result_section(result: AnalysisResult, bar_width: int = 10) -> str:
    """Generate the detail section for one instrument."""
    title = f"{result.symbol} - {result.name}" if result.name else result.symbol
    judgment = result.judgment
    b = result.fundamental.breakdown

    lines = [
        f"## {_signal_badge(judgment.signal)} {title}",
        "",
        f"**Judgment:** {judgment.signal.value} {_score_bar(judgment.score, bar_width)}",
        "",
        f"- Technical: {_score_bar(result.technical.score, bar_width)}",
        f"- Fundamental: {_score_bar(result.fundamental.score, bar_width)}",
        "",
        "### Indicators",
        "",
        *_indicator_lines(result.technical.snapshot),
    ]

    if result.technical.snapshot.defaulted:
        names = ", ".join(sorted(result.technical.snapshot.defaulted))
        lines.append(f"- *Neutral defaults:* {names}")

    lines.extend([
        "",
        "### Fundamental Breakdown",
        "",
        "| PER | PBR | ROE | Dividend | Growth | Stability |",
        "|-----|-----|-----|----------|--------|-----------|",
        f"| {b.per_score} | {b.pbr_score} | {b.roe_score} | {b.dividend_score} "
        f"| {b.growth_score} | {b.stability_score} |",
        "",
        "### Reasons",
        "",
    ])
    lines.extend(f"- {reason}" for reason in judgment.reasons)
    lines.extend(["", "### Risks", ""])
    lines.extend(f"- ⚠️ {risk}" for risk in judgment.risks)
    lines.append("")

    return "\n".join(lines)


def generate_failures_section(data: ReportData) -> str:
    """Generate the list of failed instruments and run warnings."""
    if not data.failures and not data.warnings:
        return ""

    lines = ["## Issues", ""]
    for symbol, message in data.failures.items():
        lines.append(f"- ❌ **{symbol}**: {message}")
    for warning in data.warnings:
        lines.append(f"- ⚠️ {warning}")
    lines.append("")
    return "\n".join(lines)


def generate_footer(data: ReportData) -> str:
    """Disclaimer and generation stamp."""
    lines = [
        "---",
        "",
        "*This report is for informational purposes only and does not constitute investment advice.*",
        "",
        f"*Report generated by kaidoki on {data.generated_at.strftime(data.date_format)}*",
    ]
    return "\n".join(lines)


# ============================================================================
# Report assembly
# ============================================================================

def _details(data: ReportData) -> str:
    return "\n".join(generate_result_section(r, data.bar_width) for r in data.results)


SECTIONS = {
    "header": generate_header,
    "summary": generate_summary_section,
    "details": _details,
    "issues": generate_failures_section,
    "footer": generate_footer,
}

DEFAULT_SECTIONS = ("header", "summary", "details", "issues", "footer")


def generate_section(section_name: str, data: ReportData) -> str:
    """Render one named section; unknown names become an HTML comment."""
    render = SECTIONS.get(section_name)
    if render is None:
        return f"<!-- Unknown section: {section_name} -->\n"
    return render(data)


def generate_markdown_report(
    data: ReportData,
    sections: list[str] | None = None,
) -> str:
    """
    Render the buy-timing report as markdown.

    Args:
        data: Results, failures and warnings of one run
        sections: Section names to include, in order (default: all)
    """
    rendered = (generate_section(name, data) for name in sections or DEFAULT_SECTIONS)
    return "\n".join(part for part in rendered if part)


def write_report(
    data: ReportData,
    output: TextIO | None = None,
    filepath: str | None = None,
) -> str:
    """
    Render the report and send it to ``filepath``, ``output`` or stdout.

    Returns the markdown that was written.
    """
    content = generate_markdown_report(data)

    if filepath:
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(content)
    else:
        (output or sys.stdout).write(content)

    return content
