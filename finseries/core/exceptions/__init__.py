"""Exception handling module."""

from finseries.core.exceptions.base import (
    ConfigurationError,
    DataValidationError,
    EmptyImportError,
    FinSeriesError,
    MalformedCSVError,
    MissingFieldsError,
    MissingParameterError,
    RowParseError,
    StorageError,
)
from finseries.core.exceptions.codes import ErrorCode

__all__ = [
    "FinSeriesError",
    "ConfigurationError",
    "DataValidationError",
    "MalformedCSVError",
    "MissingFieldsError",
    "RowParseError",
    "EmptyImportError",
    "MissingParameterError",
    "StorageError",
    "ErrorCode",
]
