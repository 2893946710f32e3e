from .loader import ConfigError, load_config, get_config, reload_config
from .schema import (
    KaidokiConfig,
    AnalysisConfig,
    DataConfig,
    OutputConfig,
    LoggingConfig,
)

__all__ = [
    "ConfigError",
    "load_config",
    "get_config",
    "reload_config",
    "KaidokiConfig",
    "AnalysisConfig",
    "DataConfig",
    "OutputConfig",
    "LoggingConfig",
]
