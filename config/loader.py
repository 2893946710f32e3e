"""
Settings resolution for kaidoki.

Three layers are merged section by section, later layers winning:

    built-in defaults  <  TOML file  <  KAIDOKI_* environment variables

The TOML file is either given explicitly or is the first match in
CONFIG_PATHS. Values from the environment are plain strings; pydantic
coerces them when the merged document is validated.
"""

import logging
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schema import KaidokiConfig

logger = logging.getLogger(__name__)

# Searched in order when no explicit path is given
CONFIG_PATHS = [
    Path("kaidoki.toml"),
    Path(".kaidoki.toml"),
    Path.home() / ".config" / "kaidoki" / "config.toml",
    Path("/etc/kaidoki/config.toml"),
]

ENV_PREFIX = "KAIDOKI_"

# Env var suffix -> (section, field)
ENV_OVERRIDES = {
    "LOG_LEVEL": ("logging", "level"),
    "ALLOW_SIMPLIFIED": ("analysis", "allow_simplified"),
    "MAX_WORKERS": ("analysis", "max_workers"),
    "FAIL_FAST": ("analysis", "fail_fast"),
    "OUTPUT_FORMAT": ("output", "format"),
    "DATA_DIR": ("data", "data_dir"),
}

Layer = dict[str, Any]


class ConfigError(Exception):
    """Settings could not be read or did not validate."""

    def __init__(self, message: str, source: str | None = None, field: str | None = None):
        self.source = source
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        details = [super().__str__()]
        if self.source:
            details.append(f"Source: {self.source}")
        if self.field:
            details.append(f"Field: {self.field}")
        return " | ".join(details)

    @classmethod
    def from_validation(cls, error: ValidationError, source: str | None = None) -> "ConfigError":
        """Report the first pydantic error as ``section.field``."""
        problems = error.errors()
        if not problems:
            return cls(f"Invalid configuration: {error}", source=source)
        first = problems[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        return cls(
            f"Invalid configuration: {first.get('msg', 'validation error')}",
            source=source,
            field=location or None,
        )


def _read_toml(path: Path) -> Layer:
    try:
        with path.open("rb") as f:
            document = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse TOML: {e}", source=str(path)) from e

    logger.info(f"Using settings from {path}")
    return document


def _locate_file(config_path: Path | str | None) -> Path | None:
    """Explicit path (must exist), else the first CONFIG_PATHS hit."""
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", source=str(path))
        return path
    return next((p for p in CONFIG_PATHS if p.exists()), None)


def _env_layer() -> Layer:
    layer: Layer = {}
    for suffix, (section, name) in ENV_OVERRIDES.items():
        raw = os.environ.get(ENV_PREFIX + suffix, "").strip()
        if raw:
            layer.setdefault(section, {})[name] = raw
    return layer


def _apply(base: Layer, layer: Layer) -> Layer:
    """Overlay ``layer`` on ``base`` one section at a time."""
    merged = {
        key: dict(values) if isinstance(values, dict) else values
        for key, values in base.items()
    }
    for section, values in layer.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section].update(values)
        else:
            merged[section] = values
    return merged


def load_config(config_path: Path | str | None = None) -> KaidokiConfig:
    """
    Resolve and validate settings.

    Args:
        config_path: TOML file to use instead of searching CONFIG_PATHS

    Raises:
        ConfigError: If the file is missing or unreadable, or a value is invalid
    """
    path = _locate_file(config_path)
    source = str(path) if path else None
    document = _read_toml(path) if path else {}

    env = _env_layer()
    if env:
        document = _apply(document, env)
        logger.debug(f"Environment overrides: {sorted(env)}")

    try:
        return KaidokiConfig.model_validate(document)
    except ValidationError as e:
        raise ConfigError.from_validation(e, source) from e


@lru_cache
def get_config() -> KaidokiConfig:
    """Process-wide settings, resolved on first use."""
    return load_config()


def reload_config(config_path: Path | str | None = None) -> KaidokiConfig:
    """
    Drop the cached settings and resolve them again.

    An explicit path is loaded directly and is not cached.
    """
    get_config.cache_clear()
    return load_config(config_path) if config_path else get_config()
