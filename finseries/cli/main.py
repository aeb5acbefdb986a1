"""Main entry point for the finseries command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from finseries.core.logging import configure_logging

from .formatters import create_formatter
from .records import register as register_record_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for finseries."""

    app = typer.Typer(add_completion=False, help="Import and query company financial metrics.")

    @app.callback()
    def main(
        ctx: typer.Context,
        format: str = typer.Option(
            "table",
            "--format",
            "-f",
            help="Output format (table or jsonl).",
            show_default=True,
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write output to a file instead of stdout.",
        ),
        log_level: str = typer.Option(
            "WARNING",
            "--log-level",
            help="Minimum level of structured log lines written to stderr.",
            show_default=True,
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
        ),
        config: Path | None = typer.Option(
            None,
            "--config",
            help="TOML configuration file (default: ~/.finseries/config.toml).",
        ),
        backend: str | None = typer.Option(
            None,
            "--backend",
            help="Storage backend override (memory or duckdb).",
        ),
        database: str | None = typer.Option(
            None,
            "--database",
            help="DuckDB database file override.",
        ),
    ) -> None:
        ctx.ensure_object(dict)
        normalized_format = format.strip().lower()
        try:
            create_formatter(normalized_format, no_color=no_color)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--format") from exc

        ctx.obj.update(
            {
                "format": normalized_format,
                "output_path": output,
                "no_color": no_color,
                "config_path": config,
                "backend": backend,
                "database": database,
                "log_level": log_level.upper(),
            }
        )
        try:
            configure_logging(level=log_level.upper())
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    register_record_commands(app)
    return app


app = create_app()


def run() -> None:
    """Console script entry point."""

    app()
