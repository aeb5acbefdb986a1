"""Configuration management for finseries."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from finseries.core.exceptions import ConfigurationError
from finseries.core.logging import get_logger

logger = get_logger("config")

DEFAULT_CONFIG_PATH = Path.home() / ".finseries" / "config.toml"
STORAGE_BACKENDS = ("memory", "duckdb")


@dataclass
class StorageConfig:
    """Storage backend configuration."""

    backend: str = "duckdb"
    database: str = str(Path.home() / ".finseries" / "finseries.duckdb")
    threads: int = 1

    def __post_init__(self) -> None:
        self.backend = self.backend.strip().lower()
        if self.backend not in STORAGE_BACKENDS:
            raise ConfigurationError(
                f"unknown storage backend '{self.backend}', expected one of: {', '.join(STORAGE_BACKENDS)}",
                details={"backend": self.backend},
            )


@dataclass
class PaginationConfig:
    """Page size defaults applied by the query service."""

    default_limit: int = 10
    max_limit: int = 100

    def __post_init__(self) -> None:
        if self.default_limit < 1:
            raise ConfigurationError("default_limit must be at least 1", details={"default_limit": self.default_limit})
        if self.max_limit < self.default_limit:
            raise ConfigurationError(
                "max_limit must not be smaller than default_limit",
                details={"default_limit": self.default_limit, "max_limit": self.max_limit},
            )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None


@dataclass
class FinSeriesConfig:
    """Top level finseries configuration."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    pagination: PaginationConfig = field(default_factory=PaginationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "FinSeriesConfig":
        """Build a configuration from a nested dictionary."""
        try:
            return cls(
                storage=StorageConfig(**config_dict.get("storage", {})),
                pagination=PaginationConfig(**config_dict.get("pagination", {})),
                logging=LoggingConfig(**config_dict.get("logging", {})),
            )
        except TypeError as exc:
            raise ConfigurationError(f"invalid configuration: {exc}") from exc

    def to_dict(self) -> dict[str, Any]:
        """Convert to a nested dictionary."""
        return {
            "storage": asdict(self.storage),
            "pagination": asdict(self.pagination),
            "logging": asdict(self.logging),
        }


class ConfigManager:
    """Loads configuration from a TOML file and environment overrides."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        """Initialise the manager.

        Args:
            config_path: TOML file to read, defaults to ``~/.finseries/config.toml``
            use_env: apply ``FINSERIES_*`` environment overrides on top of the file
        """
        self.config_path = config_path or DEFAULT_CONFIG_PATH
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> FinSeriesConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning("failed to load config, using defaults", path=str(self.config_path), reason=str(e))
                config_dict = {}

        if self.use_env:
            config_dict = _deep_update(config_dict, load_config_from_env())
        return FinSeriesConfig.from_dict(config_dict)

    def get_config(self) -> FinSeriesConfig:
        """Return the active configuration."""
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Deep-merge ``updates`` into the active configuration."""
        self.config = FinSeriesConfig.from_dict(_deep_update(self.config.to_dict(), updates))


def _deep_update(d: dict[str, Any], u: dict[str, Any]) -> dict[str, Any]:
    for k, v in u.items():
        if isinstance(v, dict):
            d[k] = _deep_update(d.get(k, {}), v)
        else:
            d[k] = v
    return d


def get_default_config() -> FinSeriesConfig:
    """Return the built-in defaults."""
    return FinSeriesConfig()


def load_config_from_env() -> dict[str, Any]:
    """Read ``FINSERIES_*`` environment variables into a config dictionary."""
    config: dict[str, Any] = {}

    storage_config: dict[str, Any] = {}
    backend = os.getenv("FINSERIES_STORAGE_BACKEND")
    if backend:
        storage_config["backend"] = backend
    database = os.getenv("FINSERIES_DATABASE")
    if database:
        storage_config["database"] = database
    if storage_config:
        config["storage"] = storage_config

    pagination_config: dict[str, Any] = {}
    for key, env_name in (("default_limit", "FINSERIES_DEFAULT_LIMIT"), ("max_limit", "FINSERIES_MAX_LIMIT")):
        raw = os.getenv(env_name)
        if raw is None:
            continue
        try:
            pagination_config[key] = int(raw)
        except ValueError as exc:
            raise ConfigurationError(f"{env_name} must be an integer", details={env_name: raw}) from exc
    if pagination_config:
        config["pagination"] = pagination_config

    logging_config: dict[str, Any] = {}
    level = os.getenv("FINSERIES_LOG_LEVEL")
    if level:
        logging_config["level"] = level
    log_file = os.getenv("FINSERIES_LOG_FILE")
    if log_file:
        logging_config["file"] = log_file
    if logging_config:
        config["logging"] = logging_config

    return config
