"""Result objects returned by the engine services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any

from ucsindex.core.models.quote import DISPLAY_DATE_FORMAT


@dataclass(frozen=True)
class CalculationResult:
    """Resolved value of an asset for a date."""

    asset_id: str
    date: date
    close: float
    change_pct: float
    absolute_change: float
    previous_close: float | None
    components: dict[str, float]
    persisted: bool = False
    cached: bool = False

    @property
    def price(self) -> float:
        return self.close

    @property
    def change(self) -> float:
        return self.change_pct

    def to_payload(self) -> dict[str, Any]:
        """Shape consumed by the HTTP and CLI surfaces."""
        return {
            "asset": self.asset_id,
            "date": self.date.strftime(DISPLAY_DATE_FORMAT),
            "price": self.close,
            "change": self.change_pct,
            "absoluteChange": self.absolute_change,
            "components": dict(self.components),
        }


@dataclass(frozen=True)
class ImpactedAsset:
    """Simulated change of one downstream asset; never persisted."""

    id: str
    name: str
    old_value: float
    new_value: float
    percentage_change: float
    formula: str
    depth: int


class ScenarioChangeType(str, Enum):
    PERCENTAGE = "percentage"
    ABSOLUTE = "absolute"


@dataclass(frozen=True)
class ScenarioResult:
    """Effect of a scenario shock on a target index."""

    asset_id: str
    target_id: str
    original_asset_value: float
    new_asset_value: float
    original_index_value: float
    new_index_value: float
    change_percentage: float


class StepStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    ERROR = "error"


@dataclass
class RecalculationStep:
    """One entry of a recalculation plan."""

    id: str
    name: str
    type: str
    description: str
    depends_on: tuple[str, ...] = ()
    order: int = 0
    status: StepStatus = StepStatus.PENDING


@dataclass(frozen=True)
class EditedAsset:
    id: str
    name: str
    old_value: float
    new_value: float


@dataclass(frozen=True)
class AuditEntry:
    """Audit record written for each manually edited asset."""

    asset_id: str
    asset_name: str
    old_value: float
    new_value: float
    user: str
    target_date: date
    affected_assets: tuple[str, ...]
    created_at: datetime
    action: str = "edit"
    details: str = ""

    def to_payload(self) -> dict[str, Any]:
        return {
            "asset": self.asset_id,
            "name": self.asset_name,
            "action": self.action,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "user": self.user,
            "target_date": self.target_date.isoformat(),
            "affected_assets": list(self.affected_assets),
            "created_at": self.created_at.isoformat(),
            "details": self.details,
        }


@dataclass(frozen=True)
class RecalculationResult:
    """Outcome of an authoritative recalculation for a date."""

    target_date: date
    edited: tuple[EditedAsset, ...]
    affected: tuple[str, ...]
    written: dict[str, float]
    skipped: tuple[str, ...]
    steps: list[RecalculationStep] = field(default_factory=list)


__all__ = [
    "AuditEntry",
    "CalculationResult",
    "EditedAsset",
    "ImpactedAsset",
    "RecalculationResult",
    "RecalculationStep",
    "ScenarioChangeType",
    "ScenarioResult",
    "StepStatus",
]
