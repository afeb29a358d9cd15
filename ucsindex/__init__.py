"""ucsindex - UCS environmental index engine

Turns commodity quotes into the UCS composite index, propagates edits through
the asset dependency graph and previews what-if scenarios.
"""

from datetime import date
from typing import Any

from ucsindex.core.config import ConfigManager
from ucsindex.core.engine import UCSIndexEngine, build_engine
from ucsindex.core.models import CalculationResult, ImpactedAsset, Quote
from ucsindex.core.services.calculation import parse_target_date

__version__ = "0.1.0"

_engine: UCSIndexEngine | None = None


def get_engine() -> UCSIndexEngine:
    """Return the process-wide engine, building it from the user configuration on first use."""
    global _engine
    if _engine is None:
        _engine = build_engine(ConfigManager().get_config())
    return _engine


def compute_asset(asset_id: str, target_date: str | date | None = None) -> dict[str, Any]:
    """Compute ``asset_id`` for ``target_date`` (default today).

    Returns the ``{asset, date, price, change, absoluteChange, components}``
    payload; raises ``NotComputableError`` when no value is available.
    """
    engine = get_engine()
    day = parse_target_date(target_date, engine.calculation.clock)
    return engine.calculation.compute(asset_id, day).to_payload()


def preview_impact(asset_id: str, new_value: float, target_date: str | date | None = None) -> list[ImpactedAsset]:
    """Simulate setting ``asset_id`` to ``new_value`` without writing anything."""
    engine = get_engine()
    day = parse_target_date(target_date, engine.calculation.clock)
    return engine.simulation.preview_impact(asset_id, new_value, day)


__all__ = [
    "CalculationResult",
    "ImpactedAsset",
    "Quote",
    "UCSIndexEngine",
    "__version__",
    "build_engine",
    "compute_asset",
    "get_engine",
    "preview_impact",
]
