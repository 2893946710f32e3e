"""
Configuration schema with validation.

All configuration is validated at load time using Pydantic.
Scoring weights, thresholds and the minimum history length are fixed in
the domain layer and deliberately absent here.
"""

import logging
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class AnalysisConfig(BaseModel):
    """Analysis run behaviour."""

    allow_simplified: bool = Field(
        default=True,
        description="Fall back to simplified analysis when history is short",
    )
    max_workers: int = Field(default=4, ge=1, le=32, description="Thread pool size for batches")
    fail_fast: bool = Field(default=False, description="Stop a batch on the first error")


class DataConfig(BaseModel):
    """Local data source configuration."""

    data_dir: Path = Field(default=Path("data"), description="Directory of <SYMBOL>.json files")
    date_format: str = Field(default="%Y-%m-%d", min_length=1, description="Date format in price CSVs")


class OutputConfig(BaseModel):
    """Output preferences."""

    format: Literal["markdown", "json", "csv"] = Field(default="markdown")
    json_indent: int = Field(default=2, ge=0, le=8)
    bar_width: int = Field(default=10, ge=5, le=50, description="Width of score bars in reports")
    date_format: str = Field(default="%Y-%m-%d %H:%M")

    @field_validator("format", mode="before")
    @classmethod
    def normalize_format(cls, v: str) -> str:
        return v.lower().strip() if isinstance(v, str) else v


class LoggingConfig(BaseModel):
    """Logging configuration (applied by the CLI only)."""

    level: str = Field(default="WARNING")
    format: str = Field(default="%(asctime)s %(levelname)s %(name)s: %(message)s")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper().strip()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


class KaidokiConfig(BaseModel):
    """
    Root configuration model.

    All settings are validated on load.
    """

    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    data: DataConfig = Field(default_factory=DataConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
