"""Configuration management module."""

from finseries.core.config.settings import (
    ConfigManager,
    FinSeriesConfig,
    LoggingConfig,
    PaginationConfig,
    StorageConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "FinSeriesConfig",
    "LoggingConfig",
    "PaginationConfig",
    "StorageConfig",
    "get_default_config",
    "load_config_from_env",
]
