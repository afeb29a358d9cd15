"""Authoritative recalculation of a date after manual edits of quoted assets."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from datetime import UTC, date, datetime, timedelta

from ucsindex.core.data.repositories import AuditLog
from ucsindex.core.exceptions import AssetNotEditableError, ConfigurationMissingError, NonBusinessDayError
from ucsindex.core.logging import get_logger, log_context
from ucsindex.core.models.quote import Quote, QuoteSource
from ucsindex.core.models.results import (
    AuditEntry,
    EditedAsset,
    RecalculationResult,
    RecalculationStep,
    StepStatus,
)
from ucsindex.core.services.calculation import CalculationService
from ucsindex.core.services.dependencies import DependencyGraph
from ucsindex.core.services.formulas import is_usable
from ucsindex.core.services.simulation import propagate

logger = get_logger(__name__)

VALIDATION_STEP = "validation"


def _variation(value: float, previous: float) -> float:
    if previous <= 0:
        return 0.0
    return (value - previous) / previous * 100


class RecalculationService:
    """Write manual edits and every affected asset for one business day.

    Each edited asset gets an audit entry. Affected assets that resolve to zero
    are skipped and reported instead of aborting the run.
    """

    def __init__(
        self,
        calculation: CalculationService,
        audit_log: AuditLog,
        *,
        now: Callable[[], datetime] = lambda: datetime.now(UTC),
    ) -> None:
        self.calculation = calculation
        self.audit_log = audit_log
        self.now = now

    @property
    def graph(self) -> DependencyGraph:
        return self.calculation.graph

    def plan(self, edited_ids: Iterable[str]) -> list[RecalculationStep]:
        """Ordered steps: validation, one update per edit, one calculation per affected asset."""

        edited = list(dict.fromkeys(edited_ids))
        steps = [
            RecalculationStep(
                id=VALIDATION_STEP,
                name="Validação",
                type="validation",
                description="Verifica se os ativos podem ser editados",
            )
        ]
        producers: dict[str, str] = {}
        for asset_id in edited:
            step_id = f"update_{asset_id}"
            producers[asset_id] = step_id
            steps.append(
                RecalculationStep(
                    id=step_id,
                    name=f"Atualizar {self.graph.display_name(asset_id) or asset_id}",
                    type="update",
                    description="Grava o valor editado manualmente",
                    depends_on=(VALIDATION_STEP,),
                )
            )

        for asset_id in self.graph.affected_assets(edited):
            if asset_id in producers:
                continue
            node = self.graph.get(asset_id)
            step_id = f"calc_{asset_id}"
            upstream = tuple(producers[dep] for dep in node.depends_on if dep in producers)
            producers[asset_id] = step_id
            steps.append(
                RecalculationStep(
                    id=step_id,
                    name=f"Calcular {node.display_name}",
                    type="calculation",
                    description=f"Recalcula {node.display_name} a partir das dependências",
                    depends_on=upstream or (VALIDATION_STEP,),
                )
            )

        for order, step in enumerate(steps):
            step.order = order
        return steps

    def validate(self, target_date: date, edited_values: Mapping[str, float]) -> None:
        for asset_id, value in edited_values.items():
            node = self.graph.get(asset_id)
            if node is None:
                raise ConfigurationMissingError(asset_id)
            if not node.editable:
                raise AssetNotEditableError(asset_id, node.category.value)
            if not is_usable(value):
                raise ValueError(f"Edited value for '{asset_id}' must be a positive number, got {value!r}.")

        if target_date > self.calculation.clock():
            raise NonBusinessDayError(target_date, "future")
        status = self.calculation.calendar.check(target_date)
        if not status.is_business_day:
            raise NonBusinessDayError(target_date, status.reason or "non_business_day", status.holiday_name)

    def recalculate(
        self,
        target_date: date,
        edited_values: Mapping[str, float],
        user: str = "system",
    ) -> RecalculationResult:
        edits = {asset_id: float(value) for asset_id, value in edited_values.items()}
        steps = self.plan(edits)
        by_id = {step.id: step for step in steps}

        with log_context(user=user, date=target_date.isoformat()):
            by_id[VALIDATION_STEP].status = StepStatus.IN_PROGRESS
            try:
                self.validate(target_date, edits)
            except Exception:
                by_id[VALIDATION_STEP].status = StepStatus.ERROR
                raise
            by_id[VALIDATION_STEP].status = StepStatus.COMPLETED

            store = self.calculation.store
            baseline = self.calculation.snapshot(target_date)
            previous = self.calculation.snapshot(target_date - timedelta(days=1))
            working = propagate(self.graph, baseline, edits)
            affected = [asset_id for asset_id in self.graph.affected_assets(edits) if asset_id not in edits]

            edited: list[EditedAsset] = []
            written: dict[str, float] = {}
            for asset_id, new_value in edits.items():
                step = by_id[f"update_{asset_id}"]
                old_value = baseline.get(asset_id, 0.0)
                store.save_quote(
                    Quote(
                        asset_id=asset_id,
                        date=target_date,
                        close=new_value,
                        change_pct=_variation(new_value, previous.get(asset_id, 0.0)),
                        source=QuoteSource.MANUAL_EDIT,
                    )
                )
                written[asset_id] = new_value
                edited.append(EditedAsset(asset_id, self.graph.display_name(asset_id), old_value, new_value))
                step.status = StepStatus.COMPLETED

            skipped: list[str] = []
            for asset_id in affected:
                step = by_id[f"calc_{asset_id}"]
                value = working[asset_id]
                if value <= 0:
                    step.status = StepStatus.SKIPPED
                    skipped.append(asset_id)
                    logger.warning("recalculation skipped not computable asset", asset_id=asset_id)
                    continue
                node = self.graph.get(asset_id)
                store.save_quote(
                    Quote(
                        asset_id=asset_id,
                        date=target_date,
                        close=value,
                        change_pct=_variation(value, previous.get(asset_id, 0.0)),
                        components={dep: working.get(dep, 0.0) for dep in node.depends_on},
                        source=QuoteSource.RECALCULATED,
                    )
                )
                written[asset_id] = value
                step.status = StepStatus.COMPLETED

            created_at = self.now()
            for item in edited:
                self.audit_log.append(
                    AuditEntry(
                        asset_id=item.id,
                        asset_name=item.name,
                        old_value=item.old_value,
                        new_value=item.new_value,
                        user=user,
                        target_date=target_date,
                        affected_assets=tuple(affected),
                        created_at=created_at,
                        details=f"Edição manual de {item.name}: {item.old_value} -> {item.new_value}",
                    )
                )

            logger.info(
                "recalculation completed",
                edited=len(edited),
                affected=len(affected),
                skipped=len(skipped),
            )
            return RecalculationResult(
                target_date=target_date,
                edited=tuple(edited),
                affected=tuple(affected),
                written=written,
                skipped=tuple(skipped),
                steps=steps,
            )


__all__ = ["RecalculationService", "VALIDATION_STEP"]
