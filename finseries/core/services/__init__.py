"""Application services."""

from finseries.core.services.records import FinancialRecordService

__all__ = ["FinancialRecordService"]
