"""Thread-safe in-process record store."""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from datetime import UTC, datetime

from finseries.core.data.repositories.base import FinancialRecordRepository
from finseries.core.exceptions import StorageError
from finseries.core.logging import get_logger
from finseries.core.models import FinancialRecord, sort_key

logger = get_logger("repository.memory")


class _ReadWriteLock:
    """Many concurrent readers or one writer."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            while self._writer or self._readers:
                self._cond.wait()
            self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class InMemoryRecordRepository(FinancialRecordRepository):
    """Map-backed record store.

    Upserts find the natural-key match by scanning every stored record, so a
    batch of m rows against n stored rows costs O(n*m). That is fine for test
    and demo volumes; larger data sets need an index keyed by natural key.
    """

    backend = "memory"

    def __init__(self) -> None:
        self._records: dict[str, FinancialRecord] = {}
        self._lock = _ReadWriteLock()

    def create(self, record: FinancialRecord) -> None:
        now = datetime.now(UTC)
        stored = record.model_copy(
            update={
                "id": record.id or str(uuid.uuid4()),
                "created_at": record.created_at or now,
                "updated_at": record.updated_at or now,
            }
        )
        with self._lock.write():
            if stored.id in self._records:
                raise StorageError(f"record {stored.id} already exists", operation="create", backend=self.backend)
            if self._find_by_natural_key(self._records, stored) is not None:
                raise StorageError(
                    f"record for {stored.natural_key} already exists",
                    operation="create",
                    backend=self.backend,
                    details={"natural_key": list(stored.natural_key)},
                )
            self._records[stored.id] = stored

    def bulk_upsert(self, records: Sequence[FinancialRecord]) -> None:
        if not records:
            return

        now = datetime.now(UTC)
        incoming = [record.model_copy(update={"id": record.id or str(uuid.uuid4())}) for record in records]

        inserted = updated = 0
        with self._lock.write():
            staged = dict(self._records)
            for record in incoming:
                existing = self._find_by_natural_key(staged, record)
                if existing is not None:
                    staged[existing.id] = existing.model_copy(
                        update={
                            "report_type": record.report_type,
                            "value": record.value,
                            "currency": record.currency,
                            "updated_at": now,
                        }
                    )
                    updated += 1
                    continue
                if record.id in staged:
                    raise StorageError(f"record {record.id} already exists", operation="bulk_upsert", backend=self.backend)
                staged[record.id] = record.model_copy(update={"created_at": record.created_at or now, "updated_at": now})
                inserted += 1
            self._records = staged

        logger.debug("bulk upsert applied", inserted=inserted, updated=updated)

    def find_all(self, page: int, limit: int) -> tuple[list[FinancialRecord], int]:
        return self.find_by_filters(None, None, page, limit)

    def find_by_filters(
        self, ticker: str | None, year: int | None, page: int, limit: int
    ) -> tuple[list[FinancialRecord], int]:
        with self._lock.read():
            matches = [
                record
                for record in self._records.values()
                if (not ticker or record.ticker == ticker) and (year is None or record.year == year)
            ]
        matches.sort(key=sort_key)

        total = len(matches)
        offset = (page - 1) * limit
        if offset >= total:
            return [], total
        return [record.model_copy() for record in matches[offset : offset + limit]], total

    def get_metrics(self, ticker: str) -> list[str]:
        with self._lock.read():
            metrics = {record.metric for record in self._records.values() if record.ticker == ticker}
        return sorted(metrics)

    def delete_all(self) -> None:
        with self._lock.write():
            self._records = {}

    def count(self) -> int:
        with self._lock.read():
            return len(self._records)

    def close(self) -> None:
        return None

    @staticmethod
    def _find_by_natural_key(records: dict[str, FinancialRecord], candidate: FinancialRecord) -> FinancialRecord | None:
        key = candidate.natural_key
        for existing in records.values():
            if existing.natural_key == key:
                return existing
        return None
