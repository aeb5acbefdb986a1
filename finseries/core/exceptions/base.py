"""finseries core exception classes."""

from collections.abc import Sequence
from typing import Any

from finseries.core.exceptions.codes import ErrorCode


class FinSeriesError(Exception):
    """Base class for every error raised by finseries."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.GENERAL_ERROR,
        details: dict[str, Any] | None = None,
    ):
        """Initialise the error.

        Args:
            message: human readable message
            error_code: machine readable code
            details: extra context (row numbers, field names, ...)
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def to_payload(self) -> dict[str, Any]:
        """Return a serialisable payload describing the error."""

        return {
            "code": self.error_code.value,
            "message": self.message,
            "details": dict(self.details),
        }


class ConfigurationError(FinSeriesError):
    """Invalid configuration values."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class DataValidationError(FinSeriesError):
    """Input data failed validation."""

    def __init__(
        self,
        message: str,
        validation_errors: dict[str, Any] | None = None,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
    ):
        super_details = details or {}
        if validation_errors:
            super_details["validation_errors"] = validation_errors
        super().__init__(message, error_code, super_details)
        self.validation_errors = validation_errors or {}


class MalformedCSVError(DataValidationError):
    """The CSV payload could not be read."""

    def __init__(
        self,
        message: str,
        row: int | None = None,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.DATA_FORMAT_ERROR,
    ):
        super_details = details or {}
        if row is not None:
            super_details["row"] = row
        super().__init__(message, details=super_details, error_code=error_code)
        self.row = row


class MissingFieldsError(MalformedCSVError):
    """The CSV header lacks one or more required columns."""

    def __init__(self, missing_fields: Sequence[str]):
        fields = list(missing_fields)
        super().__init__(
            f"missing required fields: {', '.join(fields)}",
            details={"missing_fields": fields},
            error_code=ErrorCode.MISSING_REQUIRED_FIELDS,
        )
        self.missing_fields = fields


class RowParseError(MalformedCSVError):
    """A data row could not be converted into a record."""

    def __init__(self, row: int, field: str | None, reason: str):
        super().__init__(
            f"invalid data at row {row}: {reason}",
            row=row,
            details={"field": field, "reason": reason},
            error_code=ErrorCode.INVALID_ROW,
        )
        self.field = field
        self.reason = reason


class EmptyImportError(DataValidationError):
    """The CSV had a header but no data rows."""

    def __init__(self, message: str = "no records found in CSV"):
        super().__init__(message, error_code=ErrorCode.NO_RECORDS)


class MissingParameterError(DataValidationError):
    """A required query parameter was empty."""

    def __init__(self, parameter: str):
        super().__init__(
            f"{parameter} is required",
            details={"parameter": parameter},
            error_code=ErrorCode.MISSING_PARAMETER,
        )
        self.parameter = parameter


class StorageError(FinSeriesError):
    """A storage backend operation failed."""

    def __init__(
        self,
        message: str,
        operation: str,
        backend: str,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        super_details.setdefault("operation", operation)
        super_details.setdefault("backend", backend)
        super().__init__(message, ErrorCode.STORAGE_ERROR, super_details)
        self.operation = operation
        self.backend = backend
