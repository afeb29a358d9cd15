from __future__ import annotations

import typer

from ucsindex.core.models.results import ScenarioChangeType
from ucsindex.core.services.calculation import parse_target_date
from ucsindex.core.services.simulation import ImpactSimulationService

from .constants import VALIDATION_EXIT_CODE
from .engine import get_engine
from .utils import emit_error, fail, render

IMPACT_COLUMNS = ["id", "name", "old_value", "new_value", "percentage_change", "depth", "formula"]
SCENARIO_COLUMNS = [
    "asset",
    "target",
    "original_asset_value",
    "new_asset_value",
    "original_index_value",
    "new_index_value",
    "change_percentage",
]


def register(app: typer.Typer) -> None:
    app.command("impact")(impact_command)
    app.command("scenario")(scenario_command)


def get_simulation_service() -> ImpactSimulationService:
    """Factory hook returning the configured :class:`ImpactSimulationService`."""

    return get_engine().simulation


def impact_command(
    ctx: typer.Context,
    asset: str = typer.Argument(..., help="Asset to override."),
    value: float = typer.Argument(..., help="Simulated value."),
    date: str | None = typer.Option(None, "--date", "-d", help="Target date."),
) -> None:
    """Preview the downstream effect of an edit. Nothing is written."""

    service = get_simulation_service()
    target_date = parse_target_date(date, service.calculation.clock)
    try:
        impacted = service.preview_impact(asset, value, target_date)
    except Exception as error:
        fail(error)

    rows = [
        {
            "id": item.id,
            "name": item.name,
            "old_value": item.old_value,
            "new_value": item.new_value,
            "percentage_change": item.percentage_change,
            "depth": item.depth,
            "formula": item.formula,
        }
        for item in impacted
    ]
    render(ctx, rows, IMPACT_COLUMNS)


def scenario_command(
    ctx: typer.Context,
    asset: str = typer.Argument(..., help="Asset to shock."),
    value: float = typer.Argument(..., help="Percentage or absolute value."),
    change_type: str = typer.Option("percentage", "--type", "-t", help="percentage or absolute."),
    target: str = typer.Option("ucs_ase", "--target", help="Index to report."),
    date: str | None = typer.Option(None, "--date", "-d", help="Target date."),
) -> None:
    """Shock one asset and report the simulated target index."""

    try:
        kind = ScenarioChangeType(change_type.lower())
    except ValueError as exc:
        allowed = ", ".join(item.value for item in ScenarioChangeType)
        emit_error(f"Unsupported change type '{change_type}'. Allowed values: {allowed}", "INVALID_CHANGE_TYPE")
        raise typer.Exit(code=VALIDATION_EXIT_CODE) from exc

    service = get_simulation_service()
    target_date = parse_target_date(date, service.calculation.clock)
    try:
        result = service.preview_scenario(asset, kind, value, target_date, target=target)
    except Exception as error:
        fail(error)

    render(
        ctx,
        [
            {
                "asset": result.asset_id,
                "target": result.target_id,
                "original_asset_value": result.original_asset_value,
                "new_asset_value": result.new_asset_value,
                "original_index_value": result.original_index_value,
                "new_index_value": result.new_index_value,
                "change_percentage": result.change_percentage,
            }
        ],
        SCENARIO_COLUMNS,
    )


__all__ = ["IMPACT_COLUMNS", "SCENARIO_COLUMNS", "get_simulation_service", "impact_command", "register"]
