from __future__ import annotations

import typer

from ucsindex.core.exceptions import ConfigurationMissingError
from ucsindex.core.services.dependencies import DependencyGraph, default_asset_graph
from ucsindex.core.services.formulas import formula_label

from .utils import fail, render

graph_app = typer.Typer(help="Inspect the asset dependency graph.")

GRAPH_COLUMNS = ["id", "name", "category", "depth", "depends_on", "formula"]


def register(app: typer.Typer) -> None:
    app.add_typer(graph_app, name="graph", help="Inspect the asset dependency graph")


def get_dependency_graph() -> DependencyGraph:
    """Factory hook returning the asset graph."""

    return default_asset_graph()


def _rows(graph: DependencyGraph, asset_ids: list[str]) -> list[dict[str, object]]:
    rows: list[dict[str, object]] = []
    for asset_id in asset_ids:
        node = graph.get(asset_id)
        rows.append(
            {
                "id": node.id,
                "name": node.display_name,
                "category": node.category.value,
                "depth": graph.depth(node.id),
                "depends_on": ", ".join(node.depends_on),
                "formula": formula_label(node.formula_id),
            }
        )
    return rows


@graph_app.command("affected")
def affected_command(
    ctx: typer.Context,
    assets: list[str] = typer.Argument(..., help="Edited asset ids."),
) -> None:
    """List every asset that must be recomputed after editing ASSETS."""

    graph = get_dependency_graph()
    for asset_id in assets:
        if asset_id not in graph:
            fail(ConfigurationMissingError(asset_id))
    render(ctx, _rows(graph, graph.affected_assets(assets)), GRAPH_COLUMNS)


@graph_app.command("order")
def order_command(ctx: typer.Context) -> None:
    """Print every asset in calculation order."""

    graph = get_dependency_graph()
    render(ctx, _rows(graph, graph.calculation_order()), GRAPH_COLUMNS)


__all__ = ["GRAPH_COLUMNS", "get_dependency_graph", "graph_app", "register"]
