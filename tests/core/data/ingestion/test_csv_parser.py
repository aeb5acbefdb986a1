"""Tests for CSV parsing into financial records."""

from __future__ import annotations

import io
from decimal import Decimal

import pytest

from finseries.core.data.ingestion import read_records
from finseries.core.exceptions import ErrorCode, MalformedCSVError, MissingFieldsError, RowParseError


def test_parses_rows_in_file_order(make_csv) -> None:
    payload = make_csv(
        "Siemens AG,SIE,income,EBITDA,2025,15859000000.0,EUR",
        "SAP SE,SAP,income,Revenue,2024,34176000000,EUR",
    )

    records = read_records(payload)

    assert [record.ticker for record in records] == ["SIE", "SAP"]
    first = records[0]
    assert first.company == "Siemens AG"
    assert first.report_type == "income"
    assert first.metric == "EBITDA"
    assert first.year == 2025
    assert first.value == Decimal("15859000000.0")
    assert first.currency == "EUR"
    assert first.id is None


def test_header_only_yields_no_records(make_csv) -> None:
    assert read_records(make_csv()) == []


def test_header_is_matched_by_name(make_csv) -> None:
    payload = make_csv(
        "2025, eur ,EBITDA,SIE,Siemens AG,income,1.5,ignored",
        header="Year,Currency,METRIC,ticker,company,report_type,value,notes",
    )

    (record,) = read_records(payload)

    assert record.year == 2025
    assert record.ticker == "SIE"
    assert record.value == Decimal("1.5")
    assert record.currency == "eur"


def test_missing_columns_are_reported_in_canonical_order(make_csv) -> None:
    with pytest.raises(MissingFieldsError) as exc_info:
        read_records(make_csv("Siemens AG,SIE,2025", header="company,ticker,year"))

    error = exc_info.value
    assert error.message == "missing required fields: report_type, metric, value, currency"
    assert error.missing_fields == ["report_type", "metric", "value", "currency"]
    assert error.error_code is ErrorCode.MISSING_REQUIRED_FIELDS


def test_empty_input_is_rejected() -> None:
    with pytest.raises(MalformedCSVError, match="input is empty"):
        read_records(b"")


def test_invalid_year_reports_data_row_number(make_csv) -> None:
    payload = make_csv(
        "Siemens AG,SIE,income,EBITDA,2025,1,EUR",
        "Siemens AG,SIE,income,Revenue,2025,2,EUR",
        "Siemens AG,SIE,income,Net income,abc,3,EUR",
    )

    with pytest.raises(RowParseError) as exc_info:
        read_records(payload)

    error = exc_info.value
    assert error.message == "invalid data at row 3: invalid year 'abc'"
    assert error.row == 3
    assert error.field == "year"
    assert error.details["row"] == 3


@pytest.mark.parametrize("raw_value", ["", "n/a", "NaN", "Infinity", "1,5"])
def test_invalid_values_are_rejected(make_csv, raw_value: str) -> None:
    payload = make_csv(f'Siemens AG,SIE,income,EBITDA,2025,"{raw_value}",EUR')

    with pytest.raises(RowParseError) as exc_info:
        read_records(payload)

    assert exc_info.value.field == "value"
    assert exc_info.value.row == 1


@pytest.mark.parametrize("raw_year", ["2025.0", "", "２０２５", "20 25"])
def test_invalid_years_are_rejected(make_csv, raw_year: str) -> None:
    with pytest.raises(RowParseError) as exc_info:
        read_records(make_csv(f"Siemens AG,SIE,income,EBITDA,{raw_year},1,EUR"))

    assert exc_info.value.field == "year"


def test_field_count_must_match_header(make_csv) -> None:
    with pytest.raises(RowParseError, match="expected 7 fields, got 6") as exc_info:
        read_records(make_csv("Siemens AG,SIE,income,EBITDA,2025,1"))

    assert exc_info.value.field is None


def test_overlong_ticker_is_rejected(make_csv) -> None:
    with pytest.raises(RowParseError) as exc_info:
        read_records(make_csv("Siemens AG,SIEMENSAGXYZ,income,EBITDA,2025,1,EUR"))

    assert exc_info.value.field == "ticker"
    assert exc_info.value.message.startswith("invalid data at row 1: invalid ticker")


def test_blank_currency_defaults_to_eur(make_csv) -> None:
    (record,) = read_records(make_csv("Siemens AG,SIE,income,EBITDA,2025,-12.5,"))

    assert record.currency == "EUR"
    assert record.value == Decimal("-12.5")


def test_cells_are_trimmed_and_quotes_honoured(make_csv) -> None:
    (record,) = read_records(make_csv('"Siemens, AG", SIE ,income, EBITDA ,2025, 7 ,USD'))

    assert record.company == "Siemens, AG"
    assert record.ticker == "SIE"
    assert record.metric == "EBITDA"
    assert record.value == Decimal("7")


def test_blank_lines_are_skipped_and_not_numbered(make_csv) -> None:
    payload = make_csv(
        "",
        "Siemens AG,SIE,income,EBITDA,2025,1,EUR",
        "",
        "Siemens AG,SIE,income,Revenue,2025,bad,EUR",
    )

    with pytest.raises(RowParseError) as exc_info:
        read_records(payload)

    assert exc_info.value.row == 2


def test_byte_order_mark_is_ignored(make_csv) -> None:
    (record,) = read_records(b"\xef\xbb\xbf" + make_csv("Siemens AG,SIE,income,EBITDA,2025,1,EUR"))

    assert record.company == "Siemens AG"


def test_windows_line_endings(make_csv) -> None:
    payload = make_csv("Siemens AG,SIE,income,EBITDA,2025,1,EUR").replace(b"\n", b"\r\n")

    (record,) = read_records(payload)

    assert record.currency == "EUR"


def test_binary_stream_is_left_open(make_csv) -> None:
    stream = io.BytesIO(make_csv("Siemens AG,SIE,income,EBITDA,2025,1,EUR"))

    records = read_records(stream)

    assert len(records) == 1
    assert not stream.closed


def test_text_stream_is_accepted(make_csv) -> None:
    text = make_csv("Siemens AG,SIE,income,EBITDA,2025,1,EUR").decode("utf-8")

    (record,) = read_records(io.StringIO(text, newline=""))

    assert record.ticker == "SIE"


def test_undecodable_input_is_rejected() -> None:
    with pytest.raises(MalformedCSVError):
        read_records(b"company,ticker\xff\xfe,report_type\n")


def test_exponent_notation_value_is_accepted(make_csv) -> None:
    (record,) = read_records(make_csv("Siemens AG,SIE,income,EBITDA,2025,1.5859E+10,EUR"))

    assert record.value == Decimal("15859000000")


@pytest.mark.parametrize("raw_value", ["1_000", "1_5859.5"])
def test_digit_group_underscores_are_rejected(make_csv, raw_value: str) -> None:
    with pytest.raises(RowParseError) as exc_info:
        read_records(make_csv(f"Siemens AG,SIE,income,EBITDA,2025,{raw_value},EUR"))

    assert exc_info.value.message == f"invalid data at row 1: invalid value '{raw_value}'"


@pytest.mark.parametrize("raw_value", ["0.1234567", "1e20", "100000000000000000000"])
def test_values_beyond_storage_precision_are_rejected(make_csv, raw_value: str) -> None:
    with pytest.raises(RowParseError) as exc_info:
        read_records(make_csv(f"Siemens AG,SIE,income,EBITDA,2025,{raw_value},EUR"))

    assert exc_info.value.field == "value"
    assert exc_info.value.message.startswith("invalid data at row 1: invalid value:")
