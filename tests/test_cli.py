"""
Tests for the command line interface.

Runs cli.main() in-process against files in a temporary directory.
"""

import csv
import json

import pytest

import cli
from config import get_config, loader
from conftest import price_rows


@pytest.fixture(autouse=True)
def workspace(monkeypatch, tmp_path):
    """Run inside tmp_path with no config files and no KAIDOKI_* variables."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(loader, "CONFIG_PATHS", [tmp_path / "kaidoki.toml"])
    for suffix in loader.ENV_OVERRIDES:
        monkeypatch.delenv(f"{loader.ENV_PREFIX}{suffix}", raising=False)
    get_config.cache_clear()
    return tmp_path


def write_stock(path, symbol, closes, fundamentals=None, name=None):
    doc = {
        "symbol": symbol,
        "name": name,
        "prices": price_rows(closes),
        "fundamentals": fundamentals or {},
    }
    path.write_text(json.dumps(doc), encoding="utf-8")
    return path


def write_prices_csv(path, closes):
    rows = price_rows(closes)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=["date", "open", "high", "low", "close", "volume"])
        writer.writeheader()
        writer.writerows(rows)
    return path


@pytest.fixture
def rising_file(workspace, rising_closes, value_fundamentals):
    return write_stock(workspace / "7203.json", "7203", rising_closes, value_fundamentals, "Toyota Motor")


@pytest.fixture
def short_file(workspace):
    return write_stock(workspace / "6758.json", "6758", [100.0 + (i % 5) for i in range(30)])


class TestAnalyze:
    """analyze subcommand."""

    def test_json_output(self, rising_file, capsys):
        assert cli.main(["analyze", str(rising_file), "--format", "json"]) == 0
        document = json.loads(capsys.readouterr().out)
        assert document["total"] == 1
        result = document["results"][0]
        assert result["symbol"] == "7203"
        assert result["judgment"]["recommendation"] == "buy"
        assert result["judgment"]["score"] == 63

    def test_markdown_default(self, rising_file, short_file, capsys):
        assert cli.main(["analyze", str(short_file), str(rising_file)]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# Buy-Timing Report")
        # Ranked best first
        assert out.index("| 7203 (Toyota Motor)") < out.index("| 6758 *")
        assert "running simplified analysis" in out

    def test_csv_output(self, rising_file, capsys):
        assert cli.main(["analyze", str(rising_file), "-f", "csv"]) == 0
        rows = list(csv.DictReader(capsys.readouterr().out.splitlines()))
        assert rows[0]["symbol"] == "7203"
        assert rows[0]["technical_score"] == "53"

    def test_output_file(self, rising_file, workspace, capsys):
        target = workspace / "report.md"
        assert cli.main(["analyze", str(rising_file), "-o", str(target)]) == 0
        assert "7203 - Toyota Motor" in target.read_text(encoding="utf-8")
        assert "Written to" in capsys.readouterr().err

    def test_all_formats(self, rising_file, workspace):
        out_dir = workspace / "out"
        assert cli.main(["analyze", str(rising_file), "-f", "all", "-o", str(out_dir)]) == 0
        suffixes = sorted(p.suffix for p in out_dir.iterdir())
        assert suffixes == [".csv", ".json", ".md"]

    def test_all_formats_needs_output(self, rising_file, capsys):
        assert cli.main(["analyze", str(rising_file), "-f", "all"]) == 1
        assert "--output directory required" in capsys.readouterr().err

    def test_prices_and_fundamentals(self, workspace, rising_closes, capsys):
        prices = write_prices_csv(workspace / "prices.csv", rising_closes)
        fundamentals = workspace / "fund.json"
        fundamentals.write_text(json.dumps({"per": 9, "pbr": 0.7, "roe": 18, "dividendYield": 3.0}))

        code = cli.main([
            "analyze", "--prices", str(prices), "--fundamentals", str(fundamentals),
            "--symbol", "7203", "--name", "Toyota Motor", "-f", "json",
        ])
        assert code == 0
        result = json.loads(capsys.readouterr().out)["results"][0]
        assert result["symbol"] == "7203"
        assert result["fundamental"]["score"] == 79

    def test_price_csv_file_argument(self, workspace, rising_closes, capsys):
        path = write_prices_csv(workspace / "AAPL.csv", rising_closes)
        assert cli.main(["analyze", str(path), "-f", "json"]) == 0
        assert json.loads(capsys.readouterr().out)["results"][0]["symbol"] == "AAPL"

    def test_symbols_from_data_dir(self, workspace, rising_closes, capsys):
        data_dir = workspace / "data"
        data_dir.mkdir()
        write_stock(data_dir / "7203.json", "7203", rising_closes)
        code = cli.main(["analyze", "-s", "7203,9984", "--data-dir", str(data_dir), "-f", "json"])
        assert code == 1
        document = json.loads(capsys.readouterr().out)
        assert [r["symbol"] for r in document["results"]] == ["7203"]
        assert document["errors"][0]["symbol"] == "9984"
        assert document["errors"][0]["code"] == "E401"

    def test_bad_file_reported(self, rising_file, workspace, capsys):
        bad = workspace / "bad.json"
        bad.write_text("{oops", encoding="utf-8")
        assert cli.main(["analyze", str(bad), str(rising_file)]) == 1
        out = capsys.readouterr().out
        assert "**bad.json**" in out
        assert "| 7203 (Toyota Motor)" in out

    def test_full_mode_on_short_history(self, short_file, capsys):
        assert cli.main(["analyze", str(short_file), "--full", "-f", "json"]) == 1
        document = json.loads(capsys.readouterr().out)
        assert document["results"] == []
        assert "52" in document["errors"][0]["message"]
        assert document["errors"][0]["code"] == "E405"

    def test_nothing_to_analyse(self, capsys):
        assert cli.main(["analyze"]) == 1
        assert "nothing to analyse" in capsys.readouterr().err

    def test_fundamentals_requires_prices(self):
        with pytest.raises(SystemExit) as exc_info:
            cli.main(["analyze", "--fundamentals", "fund.json"])
        assert exc_info.value.code == 2


class TestIndicators:
    """indicators subcommand."""

    def test_snapshot(self, rising_file, capsys):
        assert cli.main(["indicators", str(rising_file)]) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["symbol"] == "7203"
        assert snapshot["currentPrice"] == 199.0
        assert snapshot["defaulted"] == []
        assert snapshot["movingAverages"]["ma5"] == pytest.approx(197.0)

    def test_csv_snapshot(self, workspace, capsys):
        path = write_prices_csv(workspace / "sony.csv", [100.0 + i for i in range(30)])
        assert cli.main(["indicators", str(path)]) == 0
        snapshot = json.loads(capsys.readouterr().out)
        assert snapshot["symbol"] == "SONY"
        assert "ma75" in snapshot["defaulted"]

    def test_missing_file(self, workspace, capsys):
        assert cli.main(["indicators", str(workspace / "absent.json")]) == 1
        assert "Error" in capsys.readouterr().err

    def test_empty_prices(self, workspace, capsys):
        path = workspace / "empty.json"
        path.write_text(json.dumps({"symbol": "9999"}), encoding="utf-8")
        assert cli.main(["indicators", str(path)]) == 1
        assert "no price data" in capsys.readouterr().err


class TestConfig:
    """Global options."""

    def test_missing_config_file(self, workspace, rising_file, capsys):
        assert cli.main(["-c", str(workspace / "absent.toml"), "analyze", str(rising_file)]) == 2
        assert "Config file not found" in capsys.readouterr().err

    def test_config_sets_default_format(self, workspace, rising_file, capsys):
        (workspace / "kaidoki.toml").write_text('[output]\nformat = "json"\n', encoding="utf-8")
        assert cli.main(["analyze", str(rising_file)]) == 0
        assert json.loads(capsys.readouterr().out)["total"] == 1

    def test_simplified_disabled_by_env(self, monkeypatch, short_file, capsys):
        monkeypatch.setenv("KAIDOKI_ALLOW_SIMPLIFIED", "false")
        assert cli.main(["analyze", str(short_file), "-f", "json"]) == 1
        assert json.loads(capsys.readouterr().out)["errors"][0]["symbol"] == "6758"
