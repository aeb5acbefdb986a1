"""Tests for the finseries error hierarchy."""

from __future__ import annotations

import pytest

from finseries.core.exceptions import (
    ConfigurationError,
    DataValidationError,
    EmptyImportError,
    ErrorCode,
    FinSeriesError,
    MalformedCSVError,
    MissingFieldsError,
    MissingParameterError,
    RowParseError,
    StorageError,
)


def test_base_error_payload() -> None:
    error = FinSeriesError("boom", details={"row": 1})

    assert str(error) == "boom"
    assert error.to_payload() == {"code": "GENERAL_ERROR", "message": "boom", "details": {"row": 1}}


def test_row_parse_error_message_and_details() -> None:
    error = RowParseError(7, "value", "invalid value 'x'")

    assert error.message == "invalid data at row 7: invalid value 'x'"
    assert error.error_code is ErrorCode.INVALID_ROW
    assert error.details == {"field": "value", "reason": "invalid value 'x'", "row": 7}
    assert error.row == 7


def test_missing_fields_message_lists_fields() -> None:
    error = MissingFieldsError(["metric", "year"])

    assert error.message == "missing required fields: metric, year"
    assert error.details == {"missing_fields": ["metric", "year"]}


def test_default_messages() -> None:
    assert EmptyImportError().message == "no records found in CSV"
    assert MissingParameterError("ticker").message == "ticker is required"


def test_storage_error_carries_operation_and_backend() -> None:
    error = StorageError("insert failed", operation="bulk_upsert", backend="duckdb", details={"rows": 3})

    assert error.error_code is ErrorCode.STORAGE_ERROR
    assert error.details == {"rows": 3, "operation": "bulk_upsert", "backend": "duckdb"}


@pytest.mark.parametrize(
    "error",
    [
        MalformedCSVError("bad"),
        MissingFieldsError(["company"]),
        RowParseError(1, None, "expected 7 fields, got 1"),
        EmptyImportError(),
        MissingParameterError("ticker"),
    ],
)
def test_input_errors_are_validation_errors(error: FinSeriesError) -> None:
    assert isinstance(error, DataValidationError)
    assert not isinstance(error, StorageError)


def test_configuration_error_code() -> None:
    assert ConfigurationError("bad").error_code is ErrorCode.CONFIGURATION_ERROR
