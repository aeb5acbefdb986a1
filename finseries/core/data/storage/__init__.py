"""Database connection helpers."""

from finseries.core.data.storage.duckdb_factory import (
    MEMORY_DATABASE,
    DuckDBConnectionFactory,
    DuckDBFactoryConfig,
)

__all__ = ["DuckDBConnectionFactory", "DuckDBFactoryConfig", "MEMORY_DATABASE"]
