"""Engine services."""

from ucsindex.core.services.assets import AssetConfig, AssetConfigService
from ucsindex.core.services.calculation import CalculationService, parse_date, parse_target_date
from ucsindex.core.services.calendars import BusinessDayCalendar, BusinessDayStatus
from ucsindex.core.services.dependencies import DependencyGraph, default_asset_graph, default_asset_nodes
from ucsindex.core.services.recalculation import RecalculationService
from ucsindex.core.services.simulation import ImpactSimulationService

__all__ = [
    "AssetConfig",
    "AssetConfigService",
    "BusinessDayCalendar",
    "BusinessDayStatus",
    "CalculationService",
    "DependencyGraph",
    "ImpactSimulationService",
    "RecalculationService",
    "default_asset_graph",
    "default_asset_nodes",
    "parse_date",
    "parse_target_date",
]
