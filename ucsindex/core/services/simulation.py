"""What-if simulation over the dependency graph. Never writes to the store."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date

from ucsindex.core.exceptions import ConfigurationMissingError
from ucsindex.core.logging import get_logger, log_context
from ucsindex.core.models.results import ImpactedAsset, ScenarioChangeType, ScenarioResult
from ucsindex.core.services.calculation import CalculationService
from ucsindex.core.services.dependencies import DependencyGraph
from ucsindex.core.services.formulas import evaluate, formula_label

logger = get_logger(__name__)

DEFAULT_IMPACT_THRESHOLD_PCT = 0.001


def percentage_change(old_value: float, new_value: float) -> float:
    """Relative change in percent; a move away from zero counts as 100%."""
    if old_value == 0:
        return 100.0 if new_value != 0 else 0.0
    return (new_value - old_value) / old_value * 100


def propagate(
    graph: DependencyGraph,
    baseline: Mapping[str, float],
    overrides: Mapping[str, float],
) -> dict[str, float]:
    """Apply ``overrides`` on top of ``baseline`` and recompute every downstream asset."""

    working = dict(baseline)
    working.update(overrides)
    for asset_id in graph.affected_assets(overrides):
        if asset_id in overrides:
            continue
        node = graph.get(asset_id)
        if node is not None:
            working[asset_id] = evaluate(node, working)
    return working


class ImpactSimulationService:
    """Preview how a single edit ripples through the graph."""

    def __init__(
        self,
        calculation: CalculationService,
        *,
        threshold_pct: float = DEFAULT_IMPACT_THRESHOLD_PCT,
    ) -> None:
        self.calculation = calculation
        self.threshold_pct = threshold_pct

    @property
    def graph(self) -> DependencyGraph:
        return self.calculation.graph

    def _require(self, asset_id: str) -> None:
        if asset_id not in self.graph:
            raise ConfigurationMissingError(asset_id)

    def preview_impact(self, asset_id: str, new_value: float, target_date: date) -> list[ImpactedAsset]:
        """Downstream assets whose value moves by at least the configured threshold."""

        self._require(asset_id)
        with log_context(asset_id=asset_id):
            baseline = self.calculation.snapshot(target_date)
            working = propagate(self.graph, baseline, {asset_id: new_value})

            impacted: list[ImpactedAsset] = []
            for dependent_id in self.graph.affected_assets([asset_id]):
                node = self.graph.get(dependent_id)
                old_value = baseline.get(dependent_id, 0.0)
                simulated = working[dependent_id]
                change = percentage_change(old_value, simulated)
                if abs(change) < self.threshold_pct:
                    continue
                impacted.append(
                    ImpactedAsset(
                        id=dependent_id,
                        name=node.display_name,
                        old_value=old_value,
                        new_value=simulated,
                        percentage_change=change,
                        formula=formula_label(node.formula_id),
                        depth=self.graph.depth(dependent_id) or 0,
                    )
                )

            logger.info(
                "impact preview",
                date=target_date,
                new_value=new_value,
                impacted=len(impacted),
            )
            return impacted

    def preview_scenario(
        self,
        asset_id: str,
        change_type: ScenarioChangeType | str,
        value: float,
        target_date: date,
        target: str = "ucs_ase",
    ) -> ScenarioResult:
        """Shock ``asset_id`` by a percentage or to an absolute value and report ``target``."""

        self._require(asset_id)
        self._require(target)
        kind = ScenarioChangeType(change_type)

        baseline = self.calculation.snapshot(target_date)
        original_asset = baseline.get(asset_id, 0.0)
        if kind is ScenarioChangeType.PERCENTAGE:
            new_asset = original_asset * (1 + value / 100)
        else:
            new_asset = value

        working = propagate(self.graph, baseline, {asset_id: new_asset})
        original_index = baseline.get(target, 0.0)
        new_index = working.get(target, 0.0)
        change = 0.0 if original_index == 0 else (new_index - original_index) / original_index * 100

        logger.info(
            "scenario preview",
            asset_id=asset_id,
            target=target,
            change_type=kind.value,
            value=value,
            change_percentage=change,
        )
        return ScenarioResult(
            asset_id=asset_id,
            target_id=target,
            original_asset_value=original_asset,
            new_asset_value=new_asset,
            original_index_value=original_index,
            new_index_value=new_index,
            change_percentage=change,
        )


__all__ = [
    "DEFAULT_IMPACT_THRESHOLD_PCT",
    "ImpactSimulationService",
    "percentage_change",
    "propagate",
]
