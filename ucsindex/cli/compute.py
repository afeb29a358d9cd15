from __future__ import annotations

from collections.abc import Mapping

import typer

from ucsindex.core.models.results import CalculationResult
from ucsindex.core.services.calculation import CalculationService, parse_target_date

from .engine import get_engine
from .utils import fail, render

COMPUTE_COLUMNS = [
    "asset",
    "date",
    "price",
    "change",
    "absolute_change",
    "previous_close",
    "cached",
    "persisted",
]


def register(app: typer.Typer) -> None:
    """Register the compute command on the root CLI application."""

    app.command("compute")(compute_command)


def get_calculation_service() -> CalculationService:
    """Factory hook returning the configured :class:`CalculationService`."""

    return get_engine().calculation


def compute_command(
    ctx: typer.Context,
    assets: list[str] = typer.Argument(..., help="Asset ids to compute (e.g. ucs_ase vus)."),
    date: str | None = typer.Option(None, "--date", "-d", help="Target date (YYYY-MM-DD or DD/MM/YYYY)."),
    components: bool = typer.Option(False, "--components", help="Emit the component values of each asset."),
) -> None:
    """Resolve assets for a date, computing and persisting missing values."""

    service = get_calculation_service()
    target_date = parse_target_date(date, service.clock)

    results: list[CalculationResult] = []
    for asset_id in assets:
        try:
            results.append(service.compute(asset_id, target_date))
        except Exception as error:
            fail(error)

    if components:
        rows = [
            {"asset": result.asset_id, "component": name, "value": value}
            for result in results
            for name, value in result.components.items()
        ]
        render(ctx, rows, ["asset", "component", "value"])
        return
    render(ctx, [_result_to_row(result) for result in results], COMPUTE_COLUMNS)


def _result_to_row(result: CalculationResult) -> Mapping[str, object]:
    return {
        "asset": result.asset_id,
        "date": result.date.isoformat(),
        "price": result.close,
        "change": result.change_pct,
        "absolute_change": result.absolute_change,
        "previous_close": result.previous_close,
        "cached": result.cached,
        "persisted": result.persisted,
    }


__all__ = ["COMPUTE_COLUMNS", "compute_command", "get_calculation_service", "register"]
