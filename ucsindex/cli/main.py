"""Main entry point for the ucsindex command line interface."""

from __future__ import annotations

from pathlib import Path

import typer

from ucsindex.core.logging import configure_logging

from .audit import register as register_audit_commands
from .business_days import register as register_calendar_commands
from .compute import register as register_compute_commands
from .formatters import create_formatter
from .graph import register as register_graph_commands
from .impact import register as register_impact_commands
from .recalc import register as register_recalc_commands


def create_app() -> typer.Typer:
    """Create a Typer application instance for ucsindex."""

    app = typer.Typer(add_completion=False, help="UCS index engine command line interface")

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
            help="Structured log level (logs go to stderr).",
            show_default=True,
        ),
        no_color: bool = typer.Option(
            False,
            "--no-color",
            help="Disable colorized output for table format.",
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
                "log_level": log_level.upper(),
                "no_color": no_color,
            }
        )
        configure_logging(level=log_level.upper())

    register_compute_commands(app)
    register_impact_commands(app)
    register_recalc_commands(app)
    register_graph_commands(app)
    register_calendar_commands(app)
    register_audit_commands(app)
    return app


app = create_app()
