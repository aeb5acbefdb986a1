"""Storage contract for financial records."""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from finseries.core.models import FinancialRecord


class FinancialRecordRepository(ABC):
    """Storage contract shared by every backend.

    Implementations own the persisted state: records passed in are copied
    before being stored and records handed out are copies, so callers can
    never mutate stored rows through a reference.
    """

    backend: str

    @abstractmethod
    def create(self, record: FinancialRecord) -> None:
        """Persist a single record, assigning an identifier when it has none."""

    @abstractmethod
    def bulk_upsert(self, records: Sequence[FinancialRecord]) -> None:
        """Insert or update every record by natural key, atomically."""

    @abstractmethod
    def find_all(self, page: int, limit: int) -> tuple[list[FinancialRecord], int]:
        """Return one page of all records and the total record count."""

    @abstractmethod
    def find_by_filters(
        self, ticker: str | None, year: int | None, page: int, limit: int
    ) -> tuple[list[FinancialRecord], int]:
        """Return one page of matching records and the total match count."""

    @abstractmethod
    def get_metrics(self, ticker: str) -> list[str]:
        """Return the sorted distinct metric names recorded for ``ticker``."""

    @abstractmethod
    def delete_all(self) -> None:
        """Remove every stored record."""

    @abstractmethod
    def count(self) -> int:
        """Return the number of stored records."""

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""


__all__ = ["FinancialRecordRepository"]
