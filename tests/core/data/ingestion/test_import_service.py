"""Tests for the CSV import pipeline."""

from __future__ import annotations

import io
import json
from collections.abc import Sequence
from decimal import Decimal

import pytest

from finseries.core.data.ingestion import IngestionConfig, IngestionConfigError, import_csv
from finseries.core.data.repositories import InMemoryRecordRepository
from finseries.core.exceptions import (
    EmptyImportError,
    MissingFieldsError,
    RowParseError,
    StorageError,
)
from finseries.core.logging import LogConfig, StructuredLogger
from finseries.core.models import FinancialRecord


class SpyRepository(InMemoryRecordRepository):
    def __init__(self, error: Exception | None = None) -> None:
        super().__init__()
        self.error = error
        self.batches: list[int] = []

    def bulk_upsert(self, records: Sequence[FinancialRecord]) -> None:
        self.batches.append(len(records))
        if self.error is not None:
            raise self.error
        super().bulk_upsert(records)


def test_import_writes_all_rows_in_one_batch(make_csv) -> None:
    repository = SpyRepository()
    payload = make_csv(
        "Siemens AG,SIE,income,EBITDA,2025,15859000000.0,EUR",
        "Siemens AG,SIE,income,Revenue,2025,75930000000,EUR",
    )

    result = import_csv(repository, payload)

    assert result.records_imported == 2
    assert result.message == "Successfully imported 2 records"
    assert repository.batches == [2]
    assert repository.count() == 2


def test_bad_row_aborts_without_touching_storage(make_csv) -> None:
    repository = SpyRepository()
    payload = make_csv(
        "Siemens AG,SIE,income,EBITDA,2025,1,EUR",
        "Siemens AG,SIE,income,Revenue,2025,2,EUR",
        "Siemens AG,SIE,income,Net income,2025,not-a-number,EUR",
        "Siemens AG,SIE,income,Assets,2025,4,EUR",
    )

    with pytest.raises(RowParseError) as exc_info:
        import_csv(repository, payload)

    assert exc_info.value.row == 3
    assert repository.batches == []
    assert repository.count() == 0


def test_header_without_rows_is_rejected(make_csv) -> None:
    repository = SpyRepository()

    with pytest.raises(EmptyImportError, match="no records found in CSV"):
        import_csv(repository, make_csv())

    assert repository.batches == []


def test_missing_columns_are_rejected(make_csv) -> None:
    repository = SpyRepository()

    with pytest.raises(MissingFieldsError):
        import_csv(repository, make_csv("Siemens AG,SIE", header="company,ticker"))

    assert repository.batches == []


def test_batch_limit_is_enforced(make_csv) -> None:
    repository = SpyRepository()
    payload = make_csv(
        "Siemens AG,SIE,income,EBITDA,2025,1,EUR",
        "Siemens AG,SIE,income,Revenue,2025,2,EUR",
    )

    with pytest.raises(IngestionConfigError, match="exceeds configured limit 1"):
        import_csv(repository, payload, config=IngestionConfig(max_batch_rows=1))

    assert repository.batches == []


def test_non_positive_batch_limit_is_rejected() -> None:
    with pytest.raises(IngestionConfigError):
        IngestionConfig(max_batch_rows=0).validate_batch_size(1)


def test_storage_errors_propagate(make_csv) -> None:
    error = StorageError("disk full", operation="bulk_upsert", backend="memory")
    repository = SpyRepository(error=error)

    with pytest.raises(StorageError) as exc_info:
        import_csv(repository, make_csv("Siemens AG,SIE,income,EBITDA,2025,1,EUR"))

    assert exc_info.value is error
    assert repository.batches == [1]


def test_reimport_is_idempotent_and_updates_values(repository, make_csv) -> None:
    row = "Siemens AG,SIE,income,EBITDA,2025,{value},EUR"

    import_csv(repository, make_csv(row.format(value="1")))
    import_csv(repository, make_csv(row.format(value="1")))
    assert repository.count() == 1

    import_csv(repository, make_csv(row.format(value="2")))

    (record,), total = repository.find_all(1, 10)
    assert total == 1
    assert record.value == Decimal("2")


def test_import_accepts_open_binary_file(tmp_path, make_csv) -> None:
    path = tmp_path / "records.csv"
    path.write_bytes(make_csv("Siemens AG,SIE,income,EBITDA,2025,1,EUR"))
    repository = InMemoryRecordRepository()

    with path.open("rb") as source:
        result = import_csv(repository, source)

    assert result.records_imported == 1


def test_import_logs_share_one_import_id(make_csv) -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(console_stream=buffer, console_output=True, level="INFO"))

    with pytest.raises(RowParseError):
        import_csv(InMemoryRecordRepository(), make_csv("Siemens AG,SIE,income,EBITDA,bad,1,EUR"))

    records = [json.loads(line) for line in buffer.getvalue().splitlines() if line.strip()]
    ingestion = [record for record in records if record["component"] == "ingestion"]
    assert [record["message"] for record in ingestion] == ["csv import started", "csv import rejected"]
    assert len({record["context"]["import_id"] for record in ingestion}) == 1
    assert ingestion[1]["level"] == "WARNING"
    assert ingestion[1]["error_code"] == "INVALID_ROW"
    assert ingestion[1]["context"]["row"] == 1


def test_exponent_values_import_identically_on_every_backend(repository, make_csv) -> None:
    payload = make_csv(
        "Siemens AG,SIE,income,EBITDA,2025,1.5859E+10,EUR",
        "Siemens AG,SIE,income,EBITDA,2024,2e3,EUR",
    )

    import_csv(repository, payload)

    records, _ = repository.find_all(1, 10)
    assert [record.value for record in records] == [Decimal("15859000000"), Decimal("2000")]


def test_out_of_range_value_is_rejected_before_storage(repository, make_csv) -> None:
    with pytest.raises(RowParseError) as exc_info:
        import_csv(repository, make_csv("Siemens AG,SIE,income,EBITDA,2025,1e20,EUR"))

    assert exc_info.value.field == "value"
    assert repository.count() == 0
