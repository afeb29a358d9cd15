"""Static dependency graph of the UCS asset pipeline."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable, Iterator, Mapping, Sequence
from types import MappingProxyType

from ucsindex.core.exceptions import GraphConfigurationError
from ucsindex.core.logging import get_logger
from ucsindex.core.models.assets import AssetCategory, AssetNode, FormulaId

logger = get_logger(__name__)


class DependencyGraph:
    """Validated, immutable view over a table of :class:`AssetNode`.

    The table is checked once at construction: duplicate ids, dependencies on
    unknown ids and cycles raise :class:`GraphConfigurationError`. A topological
    order and the depth of each node (longest path from a root, roots at 0) are
    computed eagerly and reused by every query.
    """

    def __init__(self, nodes: Iterable[AssetNode]) -> None:
        table: dict[str, AssetNode] = {}
        for node in nodes:
            if node.id in table:
                raise GraphConfigurationError(f"Duplicate asset id '{node.id}'.", asset_id=node.id)
            table[node.id] = node

        for node in table.values():
            unknown = [dep for dep in node.depends_on if dep not in table]
            if unknown:
                raise GraphConfigurationError(
                    f"Asset '{node.id}' depends on unknown assets: {', '.join(unknown)}.",
                    asset_id=node.id,
                    unknown=unknown,
                )

        self._nodes: Mapping[str, AssetNode] = MappingProxyType(table)
        self._index = {asset_id: position for position, asset_id in enumerate(table)}
        self._dependents: dict[str, list[str]] = {asset_id: [] for asset_id in table}
        for node in table.values():
            for dep in node.depends_on:
                if node.id not in self._dependents[dep]:
                    self._dependents[dep].append(node.id)

        self._depth = self._compute_depths()
        self._order: tuple[str, ...] = tuple(sorted(table, key=self._sort_key))
        logger.debug("dependency graph loaded", nodes=len(table), max_depth=max(self._depth.values(), default=0))

    def _compute_depths(self) -> dict[str, int]:
        remaining = {asset_id: len(set(node.depends_on)) for asset_id, node in self._nodes.items()}
        depth = {asset_id: 0 for asset_id in self._nodes}
        queue = deque(asset_id for asset_id, count in remaining.items() if count == 0)
        processed = 0
        while queue:
            current = queue.popleft()
            processed += 1
            for dependent in self._dependents[current]:
                depth[dependent] = max(depth[dependent], depth[current] + 1)
                remaining[dependent] -= 1
                if remaining[dependent] == 0:
                    queue.append(dependent)

        if processed != len(self._nodes):
            cyclic = [asset_id for asset_id, count in remaining.items() if count > 0]
            raise GraphConfigurationError(
                f"Dependency cycle detected among: {', '.join(cyclic)}.",
                assets=cyclic,
            )
        return depth

    def _sort_key(self, asset_id: str) -> tuple[int, int]:
        return self._depth[asset_id], self._index[asset_id]

    # Lookups -------------------------------------------------------------

    def __contains__(self, asset_id: object) -> bool:
        return asset_id in self._nodes

    def __iter__(self) -> Iterator[AssetNode]:
        return iter(self._nodes.values())

    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def nodes(self) -> Mapping[str, AssetNode]:
        return self._nodes

    @property
    def topological_order(self) -> tuple[str, ...]:
        return self._order

    def get(self, asset_id: str) -> AssetNode | None:
        return self._nodes.get(asset_id)

    def depth(self, asset_id: str) -> int | None:
        return self._depth.get(asset_id)

    def display_name(self, asset_id: str) -> str | None:
        node = self.get(asset_id)
        return node.display_name if node else None

    def category(self, asset_id: str) -> AssetCategory | None:
        node = self.get(asset_id)
        return node.category if node else None

    def weights(self, asset_id: str) -> Mapping[str, float] | None:
        node = self.get(asset_id)
        return node.weights if node else None

    def currency(self, asset_id: str) -> str | None:
        node = self.get(asset_id)
        return node.currency if node else None

    def formula_id(self, asset_id: str) -> FormulaId | None:
        node = self.get(asset_id)
        return node.formula_id if node else None

    def can_edit(self, asset_id: str) -> bool:
        node = self.get(asset_id)
        return bool(node and node.editable)

    # Traversals ----------------------------------------------------------

    def direct_dependents(self, asset_id: str) -> list[str]:
        """Assets listing ``asset_id`` in ``depends_on``, in declaration order."""
        return list(self._dependents.get(asset_id, ()))

    def affected_assets(self, asset_ids: Iterable[str]) -> list[str]:
        """Transitive dependents of ``asset_ids`` in a safe evaluation order.

        Seeds are excluded unless one is reachable from another seed.
        """
        affected: set[str] = set()
        expanded: set[str] = set()
        queue = deque(asset_id for asset_id in asset_ids if asset_id in self._nodes)
        while queue:
            current = queue.popleft()
            if current in expanded:
                continue
            expanded.add(current)
            for dependent in self._dependents[current]:
                affected.add(dependent)
                queue.append(dependent)
        return sorted(affected, key=self._sort_key)

    def transitive_dependencies(self, asset_id: str) -> list[str]:
        node = self.get(asset_id)
        if node is None:
            return []
        seen: set[str] = set()
        stack = list(node.depends_on)
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            stack.extend(self._nodes[current].depends_on)
        return sorted(seen, key=self._sort_key)

    def calculation_order(self, asset_ids: Iterable[str] | None = None) -> list[str]:
        """Order ``asset_ids`` (default: every asset) so dependencies come first."""
        if asset_ids is None:
            return list(self._order)
        unique = {asset_id for asset_id in asset_ids if asset_id in self._nodes}
        return sorted(unique, key=self._sort_key)

    def assets_by_category(self, category: AssetCategory | str) -> list[AssetNode]:
        wanted = AssetCategory(category)
        return [node for node in self._nodes.values() if node.category is wanted]

    def base_assets(self) -> list[AssetNode]:
        return [node for node in self._nodes.values() if node.is_quoted]

    def calculated_assets(self) -> list[AssetNode]:
        return [self._nodes[asset_id] for asset_id in self._order if not self._nodes[asset_id].is_quoted]


def _node(
    asset_id: str,
    name: str,
    category: AssetCategory,
    formula_id: FormulaId = FormulaId.QUOTE,
    depends_on: Sequence[str] = (),
    *,
    weights: Mapping[str, float] | None = None,
    currency: str = "BRL",
    unit: str = "",
    description: str = "",
) -> AssetNode:
    return AssetNode(
        id=asset_id,
        display_name=name,
        category=category,
        formula_id=formula_id,
        depends_on=tuple(depends_on),
        weights=MappingProxyType(dict(weights or {})),
        currency=currency,
        unit=unit,
        description=description,
    )


_AGRICULTURAL = ("boi_gordo", "milho", "soja")


def default_asset_nodes() -> list[AssetNode]:
    """Node table of the UCS pipeline, leaves first."""

    C = AssetCategory
    F = FormulaId
    return [
        _node("usd", "Dólar Americano", C.CURRENCY, unit="BRL/USD"),
        _node("eur", "Euro", C.CURRENCY, unit="BRL/EUR"),
        _node("soja", "Soja", C.BASE, currency="USD", unit="saca 60kg"),
        _node("milho", "Milho", C.BASE, unit="saca 60kg"),
        _node("boi_gordo", "Boi Gordo", C.BASE, unit="arroba"),
        _node("madeira", "Madeira", C.BASE, currency="USD", unit="m³"),
        _node("carbono", "Carbono", C.BASE, currency="EUR", unit="tCO2"),
        _node(
            "vus",
            "Valor de Uso do Solo",
            C.SUB_INDEX,
            F.VUS,
            (*_AGRICULTURAL, "usd"),
            weights={"boi_gordo": 0.35, "milho": 0.30, "soja": 0.35},
            description="Rentabilidade agropecuária por módulo de 25 ha, líquida de arrendamento.",
        ),
        _node("vmad", "Valor da Madeira", C.SUB_INDEX, F.VMAD, ("madeira", "usd")),
        _node("carbono_crs", "CRS Carbono", C.CREDIT, F.CARBONO_CRS, ("carbono", "eur")),
        _node(
            "ch2o_agua",
            "CH2O Água",
            C.CALCULATED,
            F.CH2O_AGUA,
            (*_AGRICULTURAL, "madeira", "carbono", "usd", "eur"),
            weights={"boi_gordo": 0.35, "milho": 0.30, "soja": 0.35, "madeira": 1.0, "carbono": 1.0},
        ),
        _node("custo_agua", "Custo da Água", C.CREDIT, F.CUSTO_AGUA, ("ch2o_agua",), weights={"ch2o_agua": 0.07}),
        _node("agua_crs", "CRS Água", C.CREDIT, F.AGUA_CRS, ("ch2o_agua",)),
        _node(
            "valor_uso_solo",
            "Valor de Uso do Solo Total",
            C.INDEX,
            F.VALOR_USO_SOLO,
            ("vus", "vmad", "carbono_crs", "custo_agua"),
        ),
        _node("pdm", "PDM", C.CALCULATED, F.PDM, ("ch2o_agua", "custo_agua")),
        _node("ucs", "UCS", C.INDEX, F.UCS, ("pdm",)),
        _node("ucs_ase", "UCS ASE", C.INDEX, F.UCS_ASE, ("ucs",)),
        _node("ucs_ase_usd", "UCS ASE (USD)", C.CURRENCY, F.TO_USD, ("ucs_ase", "usd"), currency="USD"),
        _node("ucs_ase_eur", "UCS ASE (EUR)", C.CURRENCY, F.TO_EUR, ("ucs_ase", "eur"), currency="EUR"),
    ]


def default_asset_graph() -> DependencyGraph:
    """Return the validated graph of the UCS pipeline."""

    return DependencyGraph(default_asset_nodes())


__all__ = ["DependencyGraph", "default_asset_graph", "default_asset_nodes"]
