"""Helpers for creating configured DuckDB connections."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import duckdb
from duckdb import DuckDBPyConnection

from finseries.core.exceptions import StorageError

MEMORY_DATABASE = ":memory:"


@dataclass(frozen=True)
class DuckDBFactoryConfig:
    """Configuration applied to DuckDB connections produced by the factory."""

    database: str | Path = MEMORY_DATABASE
    read_only: bool = False
    pragmas: Mapping[str, object] = field(default_factory=lambda: {"threads": 1})


class DuckDBConnectionFactory:
    """Factory that yields configured DuckDB connections."""

    def __init__(self, config: DuckDBFactoryConfig | None = None) -> None:
        self._config = config or DuckDBFactoryConfig()

    @property
    def config(self) -> DuckDBFactoryConfig:
        return self._config

    def create_connection(self) -> DuckDBPyConnection:
        """Create and return a configured DuckDB connection."""

        database = str(self._config.database)
        if database != MEMORY_DATABASE:
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)
            database = str(Path(database).expanduser())
        try:
            conn = duckdb.connect(database=database, read_only=self._config.read_only)
            self._apply_pragmas(conn)
        except duckdb.Error as exc:
            raise StorageError(
                f"failed to open database '{database}': {exc}",
                operation="connect",
                backend="duckdb",
            ) from exc
        return conn

    @contextmanager
    def connection(self) -> Iterator[DuckDBPyConnection]:
        """Context manager that yields a configured DuckDB connection."""

        conn = self.create_connection()
        try:
            yield conn
        finally:
            conn.close()

    def _apply_pragmas(self, conn: DuckDBPyConnection) -> None:
        for setting, value in self._config.pragmas.items():
            conn.execute(f"SET {setting} = {_render_setting(value)}")


def _render_setting(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


__all__ = ["DuckDBConnectionFactory", "DuckDBFactoryConfig", "MEMORY_DATABASE"]
