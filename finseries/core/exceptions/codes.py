"""Standardised error codes."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes attached to every :class:`FinSeriesError`."""

    GENERAL_ERROR = "GENERAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"

    # Import pipeline
    DATA_FORMAT_ERROR = "DATA_FORMAT_ERROR"
    MISSING_REQUIRED_FIELDS = "MISSING_REQUIRED_FIELDS"
    INVALID_ROW = "INVALID_ROW"
    NO_RECORDS = "NO_RECORDS"
    INGESTION_CONFIG_ERROR = "INGESTION_CONFIG_ERROR"

    # Query parameters
    MISSING_PARAMETER = "MISSING_PARAMETER"

    # Storage
    STORAGE_ERROR = "STORAGE_ERROR"
