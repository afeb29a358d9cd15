"""Read surface over the static asset configuration."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from ucsindex.core.data.cache import ThreadSafeInMemoryCache
from ucsindex.core.services.dependencies import DependencyGraph
from ucsindex.core.services.formulas import formula_label


@dataclass(frozen=True)
class AssetConfig:
    id: str
    name: str
    category: str
    currency: str
    unit: str
    depends_on: tuple[str, ...]
    formula: str
    editable: bool
    depth: int
    description: str = ""

    def to_payload(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["depends_on"] = list(self.depends_on)
        return payload


class AssetConfigService:
    """Asset configuration lookups fronted by a TTL cache.

    The cache only saves rebuilding the view objects; the graph is the source
    of truth and dropping the cache changes no result.
    """

    def __init__(self, graph: DependencyGraph, cache: ThreadSafeInMemoryCache | None = None) -> None:
        self.graph = graph
        self.cache = cache

    def _build(self, asset_id: str) -> AssetConfig | None:
        node = self.graph.get(asset_id)
        if node is None:
            return None
        return AssetConfig(
            id=node.id,
            name=node.display_name,
            category=node.category.value,
            currency=node.currency,
            unit=node.unit,
            depends_on=node.depends_on,
            formula=formula_label(node.formula_id),
            editable=node.editable,
            depth=self.graph.depth(node.id) or 0,
            description=node.description,
        )

    def get_asset_config(self, asset_id: str) -> AssetConfig | None:
        if self.cache is None:
            return self._build(asset_id)
        key = f"asset:{asset_id}"
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        config = self._build(asset_id)
        if config is not None:
            self.cache.set(key, config)
        return config

    def list_asset_configs(self) -> list[AssetConfig]:
        return [self.get_asset_config(asset_id) for asset_id in self.graph.topological_order]

    def invalidate(self) -> None:
        if self.cache is not None:
            self.cache.clear()


__all__ = ["AssetConfig", "AssetConfigService"]
