"""Table and JSON Lines renderers for CLI output."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

Row = Mapping[str, object]


def _resolve_columns(rows: Sequence[Row], columns: Sequence[str] | None) -> list[str]:
    if columns:
        return list(columns)
    if rows:
        return list(rows[0].keys())
    return []


class OutputFormatter:
    """Base class for CLI output formatters."""

    name: str

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        caption: str | None = None,
    ) -> None:
        """Render ``rows`` to ``stream``; ``caption`` is a one-line summary."""

        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render output as a Rich table."""

    name: str = "table"
    no_color: bool = False

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        caption: str | None = None,
    ) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        resolved = _resolve_columns(rows, columns)

        if resolved:
            table = Table(box=SIMPLE, show_lines=False, caption=caption)
            header_style = "" if self.no_color else "bold"
            for column in resolved:
                table.add_column(column, header_style=header_style, overflow="fold")
            for row in rows:
                table.add_row(*(self._format_cell(row.get(column)) for column in resolved))
            console.print(table)
        if not rows:
            console.print("No data available.")

    def _format_cell(self, value: object) -> str:
        if value is None:
            return "-"
        if isinstance(value, Decimal):
            return format(value.normalize(), "f")
        if isinstance(value, datetime):
            return value.isoformat(timespec="seconds")
        return str(value)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """Render output as JSON Lines, one object per row.

    Decimals are written as strings so no precision is lost.
    """

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Row],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
        caption: str | None = None,
    ) -> None:
        resolved = _resolve_columns(rows, columns)
        for row in rows:
            json.dump({column: row.get(column) for column in resolved}, stream, ensure_ascii=False, default=_json_default)
            stream.write("\n")
        stream.flush()


def _json_default(value: object) -> object:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    msg = f"Unsupported format '{name}'. Available formats: table, jsonl."
    raise ValueError(msg)


__all__ = ["OutputFormatter", "TableFormatter", "JSONLFormatter", "create_formatter"]
