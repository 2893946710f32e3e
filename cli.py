"""
Kaidoki CLI - buy-timing analysis from the command line.

Usage:
    python cli.py analyze FILE... [--format FORMAT] [--output PATH]
    python cli.py analyze --prices PRICES.csv [--fundamentals FUND.json]
    python cli.py analyze --data-dir DIR --symbols 7203,6758
    python cli.py indicators FILE
"""

import argparse
import io
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from adapters import FileDataSource, load_prices_csv, load_stock_files, load_stock_json
from config import ConfigError, KaidokiConfig, load_config
from domain import AnalysisMode, StockData, compute_indicators, latest_snapshot
from orchestration.pipeline import AnalysisPipeline
from ports import AnalysisError
from presentation.export import export_all, render_report_json, write_results_csv
from presentation.json_api import to_snapshot_response
from presentation.report import ReportData, generate_markdown_report

logger = logging.getLogger("kaidoki")


def configure_logging(config: KaidokiConfig, verbose: bool = False) -> None:
    """Set up root logging from the config section (-v forces DEBUG)."""
    level = logging.DEBUG if verbose else getattr(logging, config.logging.level)
    logging.basicConfig(level=level, format=config.logging.format, stream=sys.stderr)


def _requested_mode(args: argparse.Namespace) -> AnalysisMode | None:
    if args.full:
        return AnalysisMode.FULL
    if args.simplified:
        return AnalysisMode.SIMPLIFIED
    return None


def _load_file(path: Path, date_format: str) -> StockData:
    """Load a StockData JSON document, or a bare price CSV named after its symbol."""
    if path.suffix.lower() == ".csv":
        return load_stock_files(path, date_format=date_format)
    return load_stock_json(path)


def _write_output(content: str, output: str | None) -> None:
    if output:
        Path(output).write_text(content, encoding="utf-8")
        print(f"Written to {output}", file=sys.stderr)
    else:
        sys.stdout.write(content)
        if not content.endswith("\n"):
            sys.stdout.write("\n")


def cmd_analyze(args: argparse.Namespace, config: KaidokiConfig) -> int:
    """Analyse one or more instruments and render the results."""
    date_format = config.data.date_format
    items: list[StockData | str] = []
    failures: dict[str, str] = {}
    error_details: dict[str, dict] = {}

    for file_arg in args.files:
        path = Path(file_arg)
        try:
            items.append(_load_file(path, date_format))
        except AnalysisError as e:
            failures[path.name] = str(e)
            error_details[path.name] = e.with_context(file=str(path)).to_dict()
            logger.error(f"Skipping {path}: {e}")

    if args.prices:
        try:
            items.append(load_stock_files(
                args.prices,
                args.fundamentals,
                symbol=args.symbol,
                name=args.name,
                date_format=date_format,
            ))
        except AnalysisError as e:
            failures[Path(args.prices).name] = str(e)
            error_details[Path(args.prices).name] = e.with_context(file=args.prices).to_dict()
            logger.error(f"Skipping {args.prices}: {e}")

    source = None
    if args.symbols:
        source = FileDataSource(args.data_dir or config.data.data_dir, date_format)
        items.extend(s for s in args.symbols.split(",") if s.strip())

    if not items and not failures:
        print("Error: nothing to analyse (give FILEs, --prices or --symbols)", file=sys.stderr)
        return 1

    pipeline = AnalysisPipeline(config=config, source=source)
    try:
        batch = pipeline.run_many(items, mode=_requested_mode(args))
    except AnalysisError as e:
        # Only reached with analysis.fail_fast
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for symbol, outcome in batch.status.symbols.items():
        if outcome.error:
            failures[symbol] = outcome.error
            if outcome.detail:
                error_details[symbol] = outcome.detail

    data = ReportData(
        results=batch.ranked(),
        failures=failures,
        error_details=error_details,
        warnings=batch.status.warnings,
        bar_width=config.output.bar_width,
        date_format=config.output.date_format,
    )

    fmt = args.format or config.output.format
    if fmt == "json":
        _write_output(render_report_json(data, config.output.json_indent), args.output)
    elif fmt == "csv":
        buffer = io.StringIO(newline="")
        write_results_csv(data.results, buffer)
        _write_output(buffer.getvalue(), args.output)
    elif fmt == "all":
        if not args.output:
            print("Error: --output directory required for 'all' format", file=sys.stderr)
            return 1
        files = export_all(data, args.output)
        print(f"Exported to: {[str(p) for p in files.values()]}", file=sys.stderr)
    else:  # markdown
        _write_output(generate_markdown_report(data), args.output)

    return 1 if failures else 0


def cmd_indicators(args: argparse.Namespace, config: KaidokiConfig) -> int:
    """Print the latest indicator snapshot as JSON."""
    path = Path(args.file)
    try:
        if path.suffix.lower() == ".csv":
            symbol = path.stem.upper()
            prices = load_prices_csv(path, config.data.date_format)
        else:
            stock = load_stock_json(path)
            symbol, prices = stock.symbol, stock.prices
    except AnalysisError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    latest = prices.latest
    if latest is None:
        print(f"Error: {path} has no price data", file=sys.stderr)
        return 1

    snapshot = latest_snapshot(compute_indicators(prices), latest.close)
    response = to_snapshot_response(symbol, snapshot)
    print(json.dumps(
        response.model_dump(mode="json", by_alias=True),
        indent=config.output.json_indent or None,
    ))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="kaidoki",
        description="Buy-timing analysis for individual stocks",
    )
    parser.add_argument("-c", "--config", help="Path to a TOML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Score instruments and judge buy timing")
    analyze_parser.add_argument(
        "files",
        nargs="*",
        help="StockData JSON files (or price CSVs named <SYMBOL>.csv)",
    )
    analyze_parser.add_argument("--prices", help="Daily OHLCV CSV for a single instrument")
    analyze_parser.add_argument("--fundamentals", help="Fundamentals JSON for --prices")
    analyze_parser.add_argument("--symbol", help="Symbol for --prices (default: file name)")
    analyze_parser.add_argument("--name", help="Display name for --prices")
    analyze_parser.add_argument("-s", "--symbols", help="Comma-separated symbols to load from --data-dir")
    analyze_parser.add_argument("--data-dir", help="Directory of <SYMBOL>.json / .csv files")
    analyze_parser.add_argument(
        "-f", "--format",
        choices=["markdown", "json", "csv", "all"],
        default=None,
        help="Output format (default: from config)",
    )
    analyze_parser.add_argument("-o", "--output", help="Output file (directory for 'all')")
    mode_group = analyze_parser.add_mutually_exclusive_group()
    mode_group.add_argument("--full", action="store_true", help="Require full history (52+ days)")
    mode_group.add_argument("--simplified", action="store_true", help="Force simplified analysis")
    analyze_parser.set_defaults(func=cmd_analyze)

    # Indicators command
    indicators_parser = subparsers.add_parser("indicators", help="Show latest indicator values")
    indicators_parser.add_argument("file", help="StockData JSON or price CSV")
    indicators_parser.set_defaults(func=cmd_indicators)

    args = parser.parse_args(argv)

    if args.command == "analyze" and args.fundamentals and not args.prices:
        parser.error("--fundamentals requires --prices")

    load_dotenv()
    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    configure_logging(config, args.verbose)
    return args.func(args, config)


if __name__ == "__main__":
    sys.exit(main())
