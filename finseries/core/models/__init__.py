"""Domain models."""

from finseries.core.models.record import (
    DEFAULT_CURRENCY,
    VALUE_DECIMAL_PLACES,
    VALUE_MAX_DIGITS,
    FinancialRecord,
    NaturalKey,
    RecordValue,
    sort_key,
)
from finseries.core.models.responses import ImportResult, MetricsResult, PaginationMeta, RecordPage

__all__ = [
    "DEFAULT_CURRENCY",
    "VALUE_DECIMAL_PLACES",
    "VALUE_MAX_DIGITS",
    "RecordValue",
    "FinancialRecord",
    "NaturalKey",
    "sort_key",
    "ImportResult",
    "MetricsResult",
    "PaginationMeta",
    "RecordPage",
]
