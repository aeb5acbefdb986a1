"""finseries - financial time-series ingestion and query engine.

Imports company metrics from CSV, keeps one row per
(company, ticker, metric, year) and serves paginated, filtered reads.
"""

from finseries.core.config import ConfigManager, FinSeriesConfig
from finseries.core.data.repositories import (
    DuckDBRecordRepository,
    FinancialRecordRepository,
    InMemoryRecordRepository,
    create_repository,
)
from finseries.core.models import FinancialRecord, ImportResult, MetricsResult, RecordPage
from finseries.core.services import FinancialRecordService

_service: FinancialRecordService | None = None


def create_service(config: FinSeriesConfig | None = None) -> FinancialRecordService:
    """Build a service with the repository selected by ``config``."""
    config = config or ConfigManager().get_config()
    return FinancialRecordService(create_repository(config.storage), pagination=config.pagination)


def get_service() -> FinancialRecordService:
    """Return the process-wide service, creating it on first use."""
    global _service
    if _service is None:
        _service = create_service()
    return _service


__version__ = "0.1.0"

__all__ = [
    "DuckDBRecordRepository",
    "FinSeriesConfig",
    "FinancialRecord",
    "FinancialRecordRepository",
    "FinancialRecordService",
    "ImportResult",
    "InMemoryRecordRepository",
    "MetricsResult",
    "RecordPage",
    "create_repository",
    "create_service",
    "get_service",
]
