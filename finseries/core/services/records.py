"""Query and import service for financial records."""

from __future__ import annotations

from finseries.core.config import PaginationConfig
from finseries.core.data.ingestion import IngestionConfig, import_csv
from finseries.core.data.ingestion.parser import CSVSource
from finseries.core.data.repositories import FinancialRecordRepository
from finseries.core.exceptions import MissingParameterError
from finseries.core.logging import get_logger
from finseries.core.models import ImportResult, MetricsResult, PaginationMeta, RecordPage

logger = get_logger("service")


class FinancialRecordService:
    """Entry point used by transport adapters.

    Stateless apart from the repository it wraps; page and limit arguments
    are clamped here so storage always receives valid values.
    """

    def __init__(
        self,
        repository: FinancialRecordRepository,
        *,
        ingestion_config: IngestionConfig | None = None,
        pagination: PaginationConfig | None = None,
    ) -> None:
        self.repository = repository
        self.ingestion_config = ingestion_config or IngestionConfig()
        self.pagination = pagination or PaginationConfig()

    def import_csv(self, source: CSVSource) -> ImportResult:
        """Import a CSV payload; errors from the pipeline pass through unchanged."""
        return import_csv(self.repository, source, config=self.ingestion_config)

    def get_all(self, page: int, limit: int) -> RecordPage:
        """Return one page of all records."""
        page, limit = self._clamp(page, limit)
        records, total = self.repository.find_all(page, limit)
        return RecordPage(data=records, pagination=PaginationMeta.build(page, limit, total))

    def get_by_filters(self, ticker: str | None, year: int | None, page: int, limit: int) -> RecordPage:
        """Return one page of records matching ``ticker`` and ``year``.

        An empty ticker or a ``None`` year leaves that dimension unfiltered.
        """
        page, limit = self._clamp(page, limit)
        records, total = self.repository.find_by_filters(ticker or None, year, page, limit)
        logger.debug("filtered query", ticker=ticker, year=year, page=page, limit=limit, total=total)
        return RecordPage(data=records, pagination=PaginationMeta.build(page, limit, total))

    def get_metrics(self, ticker: str) -> MetricsResult:
        """List the distinct metrics recorded for ``ticker``."""
        if not ticker:
            raise MissingParameterError("ticker")
        return MetricsResult(ticker=ticker, metrics=self.repository.get_metrics(ticker))

    def _clamp(self, page: int, limit: int) -> tuple[int, int]:
        if page < 1:
            page = 1
        if limit < 1 or limit > self.pagination.max_limit:
            limit = self.pagination.default_limit
        return page, limit
