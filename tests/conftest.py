"""Shared fixtures for the finseries test suite."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from decimal import Decimal

import duckdb
import pytest

from finseries.core.data.repositories import (
    DuckDBRecordRepository,
    FinancialRecordRepository,
    InMemoryRecordRepository,
)
from finseries.core.models import FinancialRecord

CSV_HEADER = "company,ticker,report_type,metric,year,value,currency"


def _make_record(**overrides: object) -> FinancialRecord:
    fields: dict[str, object] = {
        "company": "Siemens AG",
        "ticker": "SIE",
        "report_type": "income",
        "metric": "EBITDA",
        "year": 2025,
        "value": Decimal("15859000000.0"),
        "currency": "EUR",
    }
    fields.update(overrides)
    return FinancialRecord(**fields)


def _make_csv(*rows: str, header: str = CSV_HEADER) -> bytes:
    return "\n".join([header, *rows]).encode("utf-8") + b"\n"


@pytest.fixture
def make_record() -> Callable[..., FinancialRecord]:
    """Factory for a Siemens EBITDA record with any field overridden."""

    return _make_record


@pytest.fixture
def make_csv() -> Callable[..., bytes]:
    """Factory joining the standard header and data rows into CSV bytes."""

    return _make_csv


def _open_repository(backend: str) -> FinancialRecordRepository:
    if backend == "memory":
        return InMemoryRecordRepository()
    return DuckDBRecordRepository(duckdb.connect(database=":memory:"))


@pytest.fixture(params=["memory", "duckdb"])
def repository(request: pytest.FixtureRequest) -> Iterator[FinancialRecordRepository]:
    """Every storage backend, so contract tests run against both."""

    repo = _open_repository(request.param)
    try:
        yield repo
    finally:
        repo.close()


@pytest.fixture
def memory_repository() -> InMemoryRecordRepository:
    return InMemoryRecordRepository()
