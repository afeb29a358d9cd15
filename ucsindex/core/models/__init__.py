"""Core data models."""

from ucsindex.core.models.assets import AssetCategory, AssetNode, EDITABLE_CATEGORIES, FormulaId
from ucsindex.core.models.quote import DISPLAY_DATE_FORMAT, Quote, QuoteSource, date_to_timestamp
from ucsindex.core.models.results import (
    AuditEntry,
    CalculationResult,
    EditedAsset,
    ImpactedAsset,
    RecalculationResult,
    RecalculationStep,
    ScenarioChangeType,
    ScenarioResult,
    StepStatus,
)

__all__ = [
    "AssetCategory",
    "AssetNode",
    "AuditEntry",
    "CalculationResult",
    "DISPLAY_DATE_FORMAT",
    "EDITABLE_CATEGORIES",
    "EditedAsset",
    "FormulaId",
    "ImpactedAsset",
    "Quote",
    "QuoteSource",
    "RecalculationResult",
    "RecalculationStep",
    "ScenarioChangeType",
    "ScenarioResult",
    "StepStatus",
    "date_to_timestamp",
]
