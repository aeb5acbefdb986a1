"""Result payloads returned by the query service."""

from __future__ import annotations

from pydantic import BaseModel, Field

from finseries.core.models.record import FinancialRecord


class ImportResult(BaseModel):
    """Outcome of a successful CSV import."""

    records_imported: int
    message: str


class PaginationMeta(BaseModel):
    """Pagination metadata for a page of records."""

    page: int
    limit: int
    total_count: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total_count: int) -> PaginationMeta:
        """Compute ``total_pages`` as ``ceil(total_count / limit)``."""

        total_pages = (total_count + limit - 1) // limit
        return cls(page=page, limit=limit, total_count=total_count, total_pages=total_pages)


class RecordPage(BaseModel):
    """A page of records plus pagination metadata."""

    data: list[FinancialRecord] = Field(default_factory=list)
    pagination: PaginationMeta


class MetricsResult(BaseModel):
    """Distinct metric names reported for a ticker."""

    ticker: str
    metrics: list[str] = Field(default_factory=list)


__all__ = ["ImportResult", "MetricsResult", "PaginationMeta", "RecordPage"]
