"""Logging utilities for monitoring and debugging."""

from finseries.core.logging.config import LogConfig
from finseries.core.logging.logger import (
    StructuredLogger,
    configure_logging,
    current_trace_id,
    get_logger,
    log_context,
    logger,
)

__all__ = [
    "LogConfig",
    "StructuredLogger",
    "current_trace_id",
    "get_logger",
    "configure_logging",
    "log_context",
    "logger",
]
