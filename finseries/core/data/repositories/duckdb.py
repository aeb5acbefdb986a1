"""DuckDB-backed record store."""

from __future__ import annotations

import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime
from typing import Any

import duckdb
from duckdb import DuckDBPyConnection

from finseries.core.data.repositories.base import FinancialRecordRepository
from finseries.core.data.schema import (
    FINANCIAL_RECORDS_TABLE,
    MUTABLE_COLUMNS,
    NATURAL_KEY_COLUMNS,
    VALUE_TYPE,
)
from finseries.core.data.storage import DuckDBConnectionFactory
from finseries.core.exceptions import StorageError
from finseries.core.logging import get_logger
from finseries.core.models import FinancialRecord, NaturalKey

logger = get_logger("repository.duckdb")

_TABLE = FINANCIAL_RECORDS_TABLE.name
_COLUMNS = FINANCIAL_RECORDS_TABLE.column_names
_COLUMN_SQL = ", ".join(_COLUMNS)
# value is bound as fixed-point text; DuckDB misreads Decimals in exponent form.
_ROW_PLACEHOLDER = "(" + ", ".join(f"CAST(? AS {VALUE_TYPE})" if column == "value" else "?" for column in _COLUMNS) + ")"
_ORDER_BY = "ORDER BY year DESC, ticker ASC, metric ASC, company ASC"
_UPSERT_SUFFIX = (
    f"ON CONFLICT ({', '.join(NATURAL_KEY_COLUMNS)}) DO UPDATE SET "
    + ", ".join(f"{column} = excluded.{column}" for column in MUTABLE_COLUMNS)
)


def _to_storage_ts(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def _from_storage_ts(value: datetime) -> datetime:
    return value.replace(tzinfo=UTC)


def _to_row(record: FinancialRecord, created_at: datetime, updated_at: datetime) -> list[Any]:
    return [
        record.id,
        record.company,
        record.ticker,
        record.report_type,
        record.metric,
        record.year,
        None if record.value is None else format(record.value, "f"),
        record.currency,
        _to_storage_ts(created_at),
        _to_storage_ts(updated_at),
    ]


def _from_row(row: Sequence[Any]) -> FinancialRecord:
    values = dict(zip(_COLUMNS, row, strict=True))
    values["created_at"] = _from_storage_ts(values["created_at"])
    values["updated_at"] = _from_storage_ts(values["updated_at"])
    return FinancialRecord(**values)


def _collapse_by_natural_key(records: Sequence[FinancialRecord]) -> list[FinancialRecord]:
    # One statement may not update the same row twice; the last occurrence wins.
    latest: dict[NaturalKey, FinancialRecord] = {}
    for record in records:
        latest.pop(record.natural_key, None)
        latest[record.natural_key] = record
    return list(latest.values())


class DuckDBRecordRepository(FinancialRecordRepository):
    """Relational record store.

    The natural-key invariant is enforced by a unique constraint and
    ``bulk_upsert`` is a single ``INSERT ... ON CONFLICT DO UPDATE``
    statement, so atomicity comes from DuckDB rather than from locks held
    here. Every call runs on its own cursor, which lets one repository be
    shared across threads.
    """

    backend = "duckdb"

    def __init__(self, connection: DuckDBPyConnection, *, owns_connection: bool = True) -> None:
        self._connection = connection
        self._owns_connection = owns_connection
        with self._cursor("ensure_schema") as cursor:
            FINANCIAL_RECORDS_TABLE.ensure(cursor)

    @classmethod
    def from_factory(cls, factory: DuckDBConnectionFactory) -> DuckDBRecordRepository:
        """Open a connection through ``factory`` and build a repository on it."""

        return cls(factory.create_connection())

    @contextmanager
    def _cursor(self, operation: str) -> Iterator[DuckDBPyConnection]:
        try:
            cursor = self._connection.cursor()
        except duckdb.Error as exc:
            raise StorageError(f"{operation} failed: {exc}", operation=operation, backend=self.backend) from exc
        try:
            yield cursor
        except duckdb.Error as exc:
            logger.error("storage operation failed", operation=operation, reason=str(exc))
            raise StorageError(f"{operation} failed: {exc}", operation=operation, backend=self.backend) from exc
        finally:
            cursor.close()

    def create(self, record: FinancialRecord) -> None:
        now = datetime.now(UTC)
        stored = record.model_copy(update={"id": record.id or str(uuid.uuid4())})
        row = _to_row(stored, record.created_at or now, record.updated_at or now)
        with self._cursor("create") as cursor:
            cursor.execute(f"INSERT INTO {_TABLE} ({_COLUMN_SQL}) VALUES {_ROW_PLACEHOLDER}", row)

    def bulk_upsert(self, records: Sequence[FinancialRecord]) -> None:
        if not records:
            return

        now = datetime.now(UTC)
        with_ids = [record.model_copy(update={"id": record.id or str(uuid.uuid4())}) for record in records]
        batch = _collapse_by_natural_key(with_ids)

        params: list[Any] = []
        for record in batch:
            params.extend(_to_row(record, record.created_at or now, now))
        placeholders = ", ".join(_ROW_PLACEHOLDER for _ in batch)

        with self._cursor("bulk_upsert") as cursor:
            cursor.execute(f"INSERT INTO {_TABLE} ({_COLUMN_SQL}) VALUES {placeholders} {_UPSERT_SUFFIX}", params)

        logger.debug("bulk upsert applied", rows=len(batch), collapsed=len(records) - len(batch))

    def find_all(self, page: int, limit: int) -> tuple[list[FinancialRecord], int]:
        return self.find_by_filters(None, None, page, limit)

    def find_by_filters(
        self, ticker: str | None, year: int | None, page: int, limit: int
    ) -> tuple[list[FinancialRecord], int]:
        where_conditions: list[str] = []
        params: list[Any] = []

        if ticker:
            where_conditions.append("ticker = ?")
            params.append(ticker)

        if year is not None:
            where_conditions.append("year = ?")
            params.append(year)

        where_clause = f"WHERE {' AND '.join(where_conditions)}" if where_conditions else ""
        offset = (page - 1) * limit

        with self._cursor("find") as cursor:
            total = cursor.execute(f"SELECT COUNT(*) FROM {_TABLE} {where_clause}", params).fetchone()[0]
            rows = cursor.execute(
                f"SELECT {_COLUMN_SQL} FROM {_TABLE} {where_clause} {_ORDER_BY} LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()

        return [_from_row(row) for row in rows], int(total)

    def get_metrics(self, ticker: str) -> list[str]:
        with self._cursor("get_metrics") as cursor:
            rows = cursor.execute(
                f"SELECT DISTINCT metric FROM {_TABLE} WHERE ticker = ? ORDER BY metric",
                [ticker],
            ).fetchall()
        return [row[0] for row in rows]

    def delete_all(self) -> None:
        with self._cursor("delete_all") as cursor:
            cursor.execute(f"DELETE FROM {_TABLE}")

    def count(self) -> int:
        with self._cursor("count") as cursor:
            return int(cursor.execute(f"SELECT COUNT(*) FROM {_TABLE}").fetchone()[0])

    def close(self) -> None:
        if self._owns_connection:
            self._connection.close()
