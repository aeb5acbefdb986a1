"""Record import and query commands."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TypeVar

import typer

from finseries import create_service
from finseries.core.config import ConfigManager
from finseries.core.data.ingestion import IngestionConfigError
from finseries.core.exceptions import (
    ConfigurationError,
    DataValidationError,
    FinSeriesError,
    StorageError,
)
from finseries.core.logging import configure_logging
from finseries.core.models import FinancialRecord
from finseries.core.services import FinancialRecordService

from .constants import STORAGE_EXIT_CODE, SYSTEM_EXIT_CODE, VALIDATION_EXIT_CODE
from .utils import CLIOptions, emit_error, get_cli_options, prepare_output

RECORD_COLUMNS = [
    "company",
    "ticker",
    "report_type",
    "metric",
    "year",
    "value",
    "currency",
    "updated_at",
]

T = TypeVar("T")


def register(app: typer.Typer) -> None:
    """Register record commands on the root application."""

    app.command("import")(import_command)
    app.command("list")(list_command)
    app.command("metrics")(metrics_command)


def get_record_service(options: CLIOptions) -> FinancialRecordService:
    """Factory hook building the service from config file and CLI overrides."""

    manager = ConfigManager(options.config_path)
    overrides: dict[str, object] = {}
    if options.backend:
        overrides["backend"] = options.backend
    if options.database:
        overrides["database"] = options.database
    if overrides:
        manager.update_config(storage=overrides)
    config = manager.get_config()
    if config.logging.file:
        configure_logging(level=options.log_level, file_output=True, file_path=config.logging.file)
    return create_service(config)


def _call(ctx: typer.Context, operation: Callable[[FinancialRecordService], T]) -> T:
    service: FinancialRecordService | None = None
    try:
        service = get_record_service(get_cli_options(ctx))
        return operation(service)
    except (DataValidationError, IngestionConfigError, ConfigurationError) as error:
        emit_error(error.message, error.error_code.value, details=error.details)
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from error
    except StorageError as error:
        emit_error(error.message, error.error_code.value, details=error.details)
        raise typer.Exit(code=STORAGE_EXIT_CODE) from error
    except FinSeriesError as error:
        emit_error(error.message, error.error_code.value, details=error.details)
        raise typer.Exit(code=SYSTEM_EXIT_CODE) from error
    finally:
        if service is not None:
            service.repository.close()


def _record_to_row(record: FinancialRecord) -> Mapping[str, object]:
    return record.model_dump()


def import_command(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="CSV file to import."),
) -> None:
    """Import a CSV file of company metrics."""

    if not path.is_file():
        emit_error(f"File '{path}' does not exist or is not a file.", "FILE_NOT_FOUND")
        raise typer.Exit(code=VALIDATION_EXIT_CODE)

    formatter, stream, stack = prepare_output(ctx)
    try:
        with path.open("rb") as source:
            result = _call(ctx, lambda service: service.import_csv(source))
        formatter.render([result.model_dump()], stream=stream, columns=["records_imported", "message"])
    finally:
        stack.close()


def list_command(
    ctx: typer.Context,
    ticker: str | None = typer.Option(None, "--ticker", help="Only records for this ticker."),
    year: int | None = typer.Option(None, "--year", help="Only records for this fiscal year."),
    page: int = typer.Option(1, "--page", help="1-based page number."),
    limit: int = typer.Option(10, "--limit", help="Records per page (1-100)."),
) -> None:
    """List stored records, newest year first."""

    formatter, stream, stack = prepare_output(ctx)
    try:
        result = _call(ctx, lambda service: service.get_by_filters(ticker, year, page, limit))
        meta = result.pagination
        caption = f"page {meta.page} of {meta.total_pages}, {meta.total_count} records"
        formatter.render(
            [_record_to_row(record) for record in result.data],
            stream=stream,
            columns=RECORD_COLUMNS,
            caption=caption,
        )
    finally:
        stack.close()


def metrics_command(
    ctx: typer.Context,
    ticker: str = typer.Argument(..., help="Ticker to inspect."),
) -> None:
    """Show the metrics recorded for a ticker."""

    formatter, stream, stack = prepare_output(ctx)
    try:
        result = _call(ctx, lambda service: service.get_metrics(ticker))
        formatter.render(
            [{"ticker": result.ticker, "metric": metric} for metric in result.metrics],
            stream=stream,
            columns=["ticker", "metric"],
        )
    finally:
        stack.close()


__all__ = ["register", "get_record_service", "import_command", "list_command", "metrics_command"]
