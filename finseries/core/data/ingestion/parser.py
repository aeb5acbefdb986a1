"""CSV parsing for financial record imports.

Parsing is fail-fast: the first malformed row raises and nothing parsed so
far is returned, so a bad file can never be partially imported.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import IO

from pydantic import ValidationError

from finseries.core.exceptions import MalformedCSVError, MissingFieldsError, RowParseError
from finseries.core.models import DEFAULT_CURRENCY, FinancialRecord

REQUIRED_COLUMNS = ("company", "ticker", "report_type", "metric", "year", "value", "currency")

CSVSource = IO[bytes] | IO[str] | bytes | bytearray


@contextmanager
def _open_text(source: CSVSource) -> Iterator[IO[str]]:
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    if isinstance(source, io.TextIOBase):
        yield source
        return

    wrapper = io.TextIOWrapper(source, encoding="utf-8-sig", newline="")  # type: ignore[arg-type]
    try:
        yield wrapper
    finally:
        # Leave the caller's stream open.
        wrapper.detach()


def _next_row(reader: Iterator[list[str]], row_number: int) -> list[str] | None:
    """Return the next non-blank row, or None at end of input."""

    where = f"row {row_number}" if row_number else "header"
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return None
        except csv.Error as exc:
            raise MalformedCSVError(f"failed to read CSV {where}: {exc}", row=row_number or None) from exc
        except UnicodeDecodeError as exc:
            raise MalformedCSVError(f"failed to read CSV {where}: input is not valid UTF-8", row=row_number or None) from exc
        if row:
            return row


def resolve_columns(header: Sequence[str]) -> dict[str, int]:
    """Map each required column to its position in ``header``.

    Matching ignores case and surrounding whitespace; the first occurrence
    of a repeated column wins.
    """

    positions: dict[str, int] = {}
    for position, name in enumerate(header):
        positions.setdefault(name.strip().lower(), position)

    missing = [column for column in REQUIRED_COLUMNS if column not in positions]
    if missing:
        raise MissingFieldsError(missing)
    return {column: positions[column] for column in REQUIRED_COLUMNS}


def _parse_year(raw: str) -> int | None:
    digits = raw[1:] if raw[:1] in ("+", "-") else raw
    if not digits or not (digits.isascii() and digits.isdigit()):
        return None
    return int(raw)


def _parse_value(raw: str) -> Decimal | None:
    # Decimal() also takes digit-group underscores such as "1_000".
    if "_" in raw:
        return None
    try:
        value = Decimal(raw)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_row(row: Sequence[str], row_number: int, columns: dict[str, int], width: int) -> FinancialRecord:
    """Convert one CSV row into a :class:`FinancialRecord`."""

    if len(row) != width:
        raise RowParseError(row_number, None, f"expected {width} fields, got {len(row)}")

    cells = {column: row[position].strip() for column, position in columns.items()}

    year = _parse_year(cells["year"])
    if year is None:
        raise RowParseError(row_number, "year", f"invalid year '{cells['year']}'")

    value = _parse_value(cells["value"])
    if value is None:
        raise RowParseError(row_number, "value", f"invalid value '{cells['value']}'")

    try:
        return FinancialRecord(
            company=cells["company"],
            ticker=cells["ticker"],
            report_type=cells["report_type"],
            metric=cells["metric"],
            year=year,
            value=value,
            currency=cells["currency"] or DEFAULT_CURRENCY,
        )
    except ValidationError as exc:
        error = exc.errors()[0]
        field = str(error["loc"][0]) if error["loc"] else None
        raise RowParseError(row_number, field, f"invalid {field}: {error['msg']}") from exc


def read_records(source: CSVSource) -> list[FinancialRecord]:
    """Parse a CSV payload into records.

    Args:
        source: binary or text stream, or raw bytes, holding the CSV

    Returns:
        parsed records in file order; empty when the file has only a header

    Raises:
        MalformedCSVError: the header is missing or a row cannot be read
        MissingFieldsError: required columns are absent from the header
        RowParseError: a data row is malformed
    """

    with _open_text(source) as text:
        reader = csv.reader(text)

        header = _next_row(reader, 0)
        if header is None:
            raise MalformedCSVError("failed to read CSV header: input is empty")
        columns = resolve_columns(header)
        width = len(header)

        records: list[FinancialRecord] = []
        row_number = 1
        while (row := _next_row(reader, row_number)) is not None:
            records.append(parse_row(row, row_number, columns, width))
            row_number += 1

    return records


__all__ = ["CSVSource", "REQUIRED_COLUMNS", "parse_row", "read_records", "resolve_columns"]
