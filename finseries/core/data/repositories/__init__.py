"""Record storage backends."""

from finseries.core.data.repositories.base import FinancialRecordRepository
from finseries.core.data.repositories.duckdb import DuckDBRecordRepository
from finseries.core.data.repositories.factory import create_repository, create_test_repository
from finseries.core.data.repositories.memory import InMemoryRecordRepository

__all__ = [
    "FinancialRecordRepository",
    "InMemoryRecordRepository",
    "DuckDBRecordRepository",
    "create_repository",
    "create_test_repository",
]
