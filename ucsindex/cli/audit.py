from __future__ import annotations

import typer

from ucsindex.core.data.repositories import AuditLog, query_entries
from ucsindex.core.services.calculation import parse_date

from .engine import get_engine
from .utils import fail, render

AUDIT_COLUMNS = ["created_at", "target_date", "asset", "user", "old_value", "new_value", "affected_assets"]


def register(app: typer.Typer) -> None:
    app.command("audit")(audit_command)


def get_audit_log() -> AuditLog:
    """Factory hook returning the configured audit log."""

    return get_engine().audit_log


def audit_command(
    ctx: typer.Context,
    date: str | None = typer.Option(None, "--date", "-d", help="Edits recorded for this target date."),
    start: str | None = typer.Option(None, "--from", help="First target date of a period."),
    end: str | None = typer.Option(None, "--to", help="Last target date of a period."),
    asset: str | None = typer.Option(None, "--asset", "-a", help="Only edits of this asset."),
    limit: int | None = typer.Option(None, "--limit", "-n", min=1, help="Maximum number of entries."),
) -> None:
    """List manual edits recorded by recalculations, newest first."""

    try:
        entries = query_entries(
            get_audit_log(),
            target_date=parse_date(date) if date else None,
            start=parse_date(start) if start else None,
            end=parse_date(end) if end else None,
            asset_id=asset,
            limit=limit,
        )
    except Exception as error:
        fail(error)

    rows = []
    for entry in entries:
        payload = entry.to_payload()
        payload["affected_assets"] = ", ".join(entry.affected_assets)
        rows.append(payload)
    render(ctx, rows, AUDIT_COLUMNS)


__all__ = ["AUDIT_COLUMNS", "audit_command", "get_audit_log", "register"]
