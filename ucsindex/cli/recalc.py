from __future__ import annotations

import typer

from ucsindex.core.models.results import RecalculationStep
from ucsindex.core.services.calculation import parse_date
from ucsindex.core.services.recalculation import RecalculationService

from .constants import VALIDATION_EXIT_CODE
from .engine import get_engine
from .utils import emit_error, fail, render

RECALC_COLUMNS = ["step", "asset", "status", "value"]


def register(app: typer.Typer) -> None:
    app.command("recalc")(recalc_command)


def get_recalculation_service() -> RecalculationService:
    """Factory hook returning the configured :class:`RecalculationService`."""

    return get_engine().recalculation


def parse_assignments(values: list[str]) -> dict[str, float]:
    """Parse ``asset=value`` pairs."""

    edits: dict[str, float] = {}
    for item in values:
        asset_id, sep, raw = item.partition("=")
        if not sep or not asset_id.strip():
            raise ValueError(f"Expected ASSET=VALUE, got '{item}'.")
        try:
            edits[asset_id.strip()] = float(raw)
        except ValueError as exc:
            raise ValueError(f"Value for '{asset_id.strip()}' is not a number: '{raw}'.") from exc
    return edits


def recalc_command(
    ctx: typer.Context,
    assignments: list[str] = typer.Argument(..., help="Edits as ASSET=VALUE (e.g. soja=120.5)."),
    date: str = typer.Option(..., "--date", "-d", help="Business day to recalculate."),
    user: str = typer.Option("cli", "--user", "-u", help="User recorded in the audit log."),
    plan_only: bool = typer.Option(False, "--plan", help="Print the recalculation plan without writing."),
) -> None:
    """Write manual edits and recompute every affected asset for a business day."""

    try:
        edits = parse_assignments(assignments)
    except ValueError as exc:
        emit_error(str(exc), "INVALID_ASSIGNMENT")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc

    service = get_recalculation_service()
    if plan_only:
        steps = service.plan(edits)
        render(
            ctx,
            [{"step": step.id, "asset": _step_asset(step), "status": step.status.value, "value": None} for step in steps],
            RECALC_COLUMNS,
        )
        return

    try:
        result = service.recalculate(parse_date(date), edits, user=user)
    except Exception as error:
        fail(error)

    rows = [
        {
            "step": step.id,
            "asset": _step_asset(step),
            "status": step.status.value,
            "value": result.written.get(_step_asset(step) or ""),
        }
        for step in result.steps
    ]
    render(ctx, rows, RECALC_COLUMNS)


def _step_asset(step: RecalculationStep) -> str | None:
    if step.type == "validation":
        return None
    return step.id.split("_", 1)[1]


__all__ = ["RECALC_COLUMNS", "get_recalculation_service", "parse_assignments", "recalc_command", "register"]
