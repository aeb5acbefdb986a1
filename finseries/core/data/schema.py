"""DuckDB schema definitions for persisted financial records."""

from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from dataclasses import dataclass

from duckdb import DuckDBPyConnection

from finseries.core.models import VALUE_DECIMAL_PLACES, VALUE_MAX_DIGITS


@dataclass(frozen=True)
class ColumnDef:
    """Represents a DuckDB table column definition."""

    name: str
    data_type: str
    constraints: Sequence[str] = ()

    def render(self) -> str:
        parts = [self.name, self.data_type, *self.constraints]
        return " ".join(parts)


@dataclass(frozen=True)
class TableSchema:
    """Utility wrapper describing a DuckDB table schema."""

    name: str
    columns: Sequence[ColumnDef]
    primary_key: Sequence[str] = ()
    unique: Sequence[Sequence[str]] = ()

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def create_ddl(self) -> str:
        column_defs: list[str] = [column.render() for column in self.columns]
        if self.primary_key:
            pk_cols = ", ".join(self.primary_key)
            column_defs.append(f"PRIMARY KEY ({pk_cols})")
        for unique_cols in self.unique:
            column_defs.append(f"UNIQUE ({', '.join(unique_cols)})")
        columns_sql = ",\n                ".join(column_defs)
        return f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                {columns_sql}
            )
            """.strip()

    def ensure(self, conn: DuckDBPyConnection) -> None:
        """Create the table on the provided connection if it does not exist."""

        conn.execute(self.create_ddl())


VALUE_TYPE = f"DECIMAL({VALUE_MAX_DIGITS}, {VALUE_DECIMAL_PLACES})"
NATURAL_KEY_COLUMNS = ("company", "ticker", "metric", "year")
MUTABLE_COLUMNS = ("report_type", "value", "currency", "updated_at")

FINANCIAL_RECORDS_TABLE = TableSchema(
    name="financial_records",
    columns=(
        ColumnDef("id", "VARCHAR", ("NOT NULL",)),
        ColumnDef("company", "VARCHAR", ("NOT NULL",)),
        ColumnDef("ticker", "VARCHAR(10)", ("NOT NULL",)),
        ColumnDef("report_type", "VARCHAR"),
        ColumnDef("metric", "VARCHAR", ("NOT NULL",)),
        ColumnDef("year", "INTEGER", ("NOT NULL",)),
        ColumnDef("value", VALUE_TYPE),
        ColumnDef("currency", "VARCHAR(3)", ("DEFAULT 'EUR'",)),
        ColumnDef("created_at", "TIMESTAMP", ("NOT NULL",)),
        ColumnDef("updated_at", "TIMESTAMP", ("NOT NULL",)),
    ),
    primary_key=("id",),
    unique=(NATURAL_KEY_COLUMNS,),
)


def ensure_record_tables(conn: DuckDBPyConnection) -> None:
    """Create the financial record table on the provided connection."""

    FINANCIAL_RECORDS_TABLE.ensure(conn)


__all__ = [
    "ColumnDef",
    "FINANCIAL_RECORDS_TABLE",
    "MUTABLE_COLUMNS",
    "NATURAL_KEY_COLUMNS",
    "TableSchema",
    "VALUE_TYPE",
    "ensure_record_tables",
]
