"""Financial record model."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CURRENCY = "EUR"

NaturalKey = tuple[str, str, str, int]

# Precision and scale of the stored value; DuckDB declares the column with these.
VALUE_MAX_DIGITS = 24
VALUE_DECIMAL_PLACES = 6

RecordValue = Annotated[Decimal, Field(max_digits=VALUE_MAX_DIGITS, decimal_places=VALUE_DECIMAL_PLACES)]


class FinancialRecord(BaseModel):
    """One reported metric of one company for one fiscal year.

    ``(company, ticker, metric, year)`` is the natural key; ``id`` only
    addresses a stored row and carries no business meaning.
    """

    model_config = ConfigDict(validate_assignment=True)

    id: str | None = None
    company: str
    ticker: str = Field(max_length=10)
    report_type: str = ""
    metric: str
    year: int
    value: RecordValue | None = None
    currency: str = Field(default=DEFAULT_CURRENCY, max_length=3)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def natural_key(self) -> NaturalKey:
        return (self.company, self.ticker, self.metric, self.year)


def sort_key(record: FinancialRecord) -> tuple[int, str, str, str]:
    """Year descending, then ticker, metric and company ascending."""

    return (-record.year, record.ticker, record.metric, record.company)


__all__ = [
    "DEFAULT_CURRENCY",
    "VALUE_DECIMAL_PLACES",
    "VALUE_MAX_DIGITS",
    "FinancialRecord",
    "NaturalKey",
    "RecordValue",
    "sort_key",
]
