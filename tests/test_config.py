"""
Tests for configuration loading.

Tests cover:
- Built-in defaults
- TOML files (explicit and discovered)
- Environment overrides and their priority
- Validation errors surfaced as ConfigError
"""

from pathlib import Path

import pytest

from config import ConfigError, KaidokiConfig, get_config, load_config, reload_config
from config import loader


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """No discovered config files and no KAIDOKI_* variables."""
    monkeypatch.setattr(loader, "CONFIG_PATHS", [tmp_path / "kaidoki.toml"])
    for suffix in loader.ENV_OVERRIDES:
        monkeypatch.delenv(f"{loader.ENV_PREFIX}{suffix}", raising=False)
    get_config.cache_clear()
    yield tmp_path
    get_config.cache_clear()


def write_toml(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestDefaults:
    """Built-in defaults."""

    def test_defaults(self):
        config = load_config()
        assert config == KaidokiConfig()
        assert config.analysis.allow_simplified is True
        assert config.analysis.max_workers == 4
        assert config.analysis.fail_fast is False
        assert config.output.format == "markdown"
        assert config.logging.level == "WARNING"
        assert config.data.data_dir == Path("data")


class TestTomlFiles:
    """Config files."""

    def test_explicit_file(self, tmp_path):
        path = write_toml(tmp_path / "custom.toml", """
[analysis]
allow_simplified = false
max_workers = 8

[output]
format = "JSON"
bar_width = 20
""")
        config = load_config(path)
        assert config.analysis.allow_simplified is False
        assert config.analysis.max_workers == 8
        assert config.output.format == "json"
        assert config.output.bar_width == 20
        assert config.logging.level == "WARNING"

    def test_discovered_file(self, isolated_config):
        write_toml(isolated_config / "kaidoki.toml", '[logging]\nlevel = "debug"\n')
        assert load_config().logging.level == "DEBUG"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.toml")

    def test_invalid_toml(self, tmp_path):
        path = write_toml(tmp_path / "bad.toml", "[analysis\nmax_workers = ")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.source == str(path)

    def test_invalid_value(self, tmp_path):
        path = write_toml(tmp_path / "bad.toml", "[analysis]\nmax_workers = 0\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.field == "analysis.max_workers"
        assert "Field: analysis.max_workers" in str(exc_info.value)

    def test_unknown_format(self, tmp_path):
        path = write_toml(tmp_path / "bad.toml", '[output]\nformat = "xml"\n')
        with pytest.raises(ConfigError):
            load_config(path)

    def test_unknown_log_level(self, tmp_path):
        path = write_toml(tmp_path / "bad.toml", '[logging]\nlevel = "LOUD"\n')
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.field == "logging.level"


class TestEnvironment:
    """KAIDOKI_* overrides."""

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("KAIDOKI_MAX_WORKERS", "3")
        monkeypatch.setenv("KAIDOKI_ALLOW_SIMPLIFIED", "false")
        monkeypatch.setenv("KAIDOKI_OUTPUT_FORMAT", "csv")
        monkeypatch.setenv("KAIDOKI_DATA_DIR", "/srv/prices")
        config = load_config()
        assert config.analysis.max_workers == 3
        assert config.analysis.allow_simplified is False
        assert config.output.format == "csv"
        assert config.data.data_dir == Path("/srv/prices")

    def test_env_beats_file(self, monkeypatch, tmp_path):
        path = write_toml(tmp_path / "custom.toml", "[analysis]\nmax_workers = 8\nfail_fast = true\n")
        monkeypatch.setenv("KAIDOKI_MAX_WORKERS", "2")
        config = load_config(path)
        assert config.analysis.max_workers == 2
        assert config.analysis.fail_fast is True

    def test_env_with_top_level_keys(self, monkeypatch, tmp_path):
        path = write_toml(tmp_path / "custom.toml", 'title = "desk"\n\n[output]\nbar_width = 12\n')
        monkeypatch.setenv("KAIDOKI_FAIL_FAST", "true")
        config = load_config(path)
        assert config.analysis.fail_fast is True
        assert config.output.bar_width == 12

    def test_blank_env_ignored(self, monkeypatch):
        monkeypatch.setenv("KAIDOKI_LOG_LEVEL", "  ")
        assert load_config().logging.level == "WARNING"

    def test_invalid_env_value(self, monkeypatch):
        monkeypatch.setenv("KAIDOKI_MAX_WORKERS", "many")
        with pytest.raises(ConfigError) as exc_info:
            load_config()
        assert exc_info.value.field == "analysis.max_workers"


class TestCaching:
    """get_config / reload_config."""

    def test_cached(self):
        assert get_config() is get_config()

    def test_reload_picks_up_changes(self, isolated_config):
        assert get_config().analysis.max_workers == 4
        write_toml(isolated_config / "kaidoki.toml", "[analysis]\nmax_workers = 6\n")
        assert get_config().analysis.max_workers == 4
        assert reload_config().analysis.max_workers == 6

    def test_reload_explicit_path(self, tmp_path):
        path = write_toml(tmp_path / "custom.toml", "[analysis]\nfail_fast = true\n")
        assert reload_config(path).analysis.fail_fast is True
