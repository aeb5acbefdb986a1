"""Import pipeline that parses a CSV payload and upserts it into storage."""

from __future__ import annotations

from time import perf_counter
from typing import TYPE_CHECKING
from uuid import uuid4

from finseries.core.data.ingestion.config import IngestionConfig
from finseries.core.data.ingestion.parser import CSVSource, read_records
from finseries.core.exceptions import EmptyImportError, FinSeriesError
from finseries.core.logging import get_logger, log_context
from finseries.core.models import ImportResult

if TYPE_CHECKING:
    from finseries.core.data.repositories import FinancialRecordRepository

logger = get_logger("ingestion")


def import_csv(
    repository: FinancialRecordRepository,
    source: CSVSource,
    *,
    config: IngestionConfig | None = None,
) -> ImportResult:
    """Parse ``source`` and merge every row into ``repository``.

    The whole file is validated before storage is touched and then written
    with a single ``bulk_upsert`` call, so an import either applies entirely
    or not at all.
    """

    config = config or IngestionConfig()

    with log_context(import_id=uuid4().hex):
        start = perf_counter()
        logger.info("csv import started", backend=repository.backend)
        try:
            records = read_records(source)
            if not records:
                raise EmptyImportError()
            config.validate_batch_size(len(records))
        except FinSeriesError as exc:
            logger.bind(error_code=exc.error_code.value).warning("csv import rejected", **exc.details)
            raise

        repository.bulk_upsert(records)

        duration_ms = (perf_counter() - start) * 1000
        logger.info("csv import completed", records=len(records), duration_ms=round(duration_ms, 3))

    return ImportResult(
        records_imported=len(records),
        message=f"Successfully imported {len(records)} records",
    )
