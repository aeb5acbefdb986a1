"""CSV ingestion pipeline."""

from __future__ import annotations

from finseries.core.data.ingestion.config import IngestionConfig, IngestionConfigError
from finseries.core.data.ingestion.parser import REQUIRED_COLUMNS, read_records
from finseries.core.data.ingestion.service import import_csv

__all__ = [
    "IngestionConfig",
    "IngestionConfigError",
    "REQUIRED_COLUMNS",
    "import_csv",
    "read_records",
]
