"""Static asset configuration types."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class AssetCategory(str, Enum):
    """Role of an asset inside the index pipeline."""

    BASE = "base"
    CURRENCY = "currency"
    CALCULATED = "calculated"
    SUB_INDEX = "sub-index"
    CREDIT = "credit"
    INDEX = "index"


class FormulaId(str, Enum):
    """Closed set of formulas compiled into the engine."""

    QUOTE = "quote"
    VUS = "vus"
    VMAD = "vmad"
    CARBONO_CRS = "carbono_crs"
    CH2O_AGUA = "ch2o_agua"
    CUSTO_AGUA = "custo_agua"
    AGUA_CRS = "agua_crs"
    VALOR_USO_SOLO = "valor_uso_solo"
    PDM = "pdm"
    UCS = "ucs"
    UCS_ASE = "ucs_ase"
    TO_USD = "to_usd"
    TO_EUR = "to_eur"


EDITABLE_CATEGORIES = frozenset({AssetCategory.BASE, AssetCategory.CURRENCY})


@dataclass(frozen=True)
class AssetNode:
    """One node of the dependency graph."""

    id: str
    display_name: str
    category: AssetCategory
    formula_id: FormulaId = FormulaId.QUOTE
    depends_on: tuple[str, ...] = ()
    weights: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    currency: str = "BRL"
    unit: str = ""
    description: str = ""

    @property
    def is_quoted(self) -> bool:
        """Externally supplied values (commodities and exchange rates)."""
        return self.formula_id is FormulaId.QUOTE

    @property
    def editable(self) -> bool:
        # derived currency projections (ucs_ase_usd) are not editable
        return self.is_quoted and self.category in EDITABLE_CATEGORIES


__all__ = ["AssetCategory", "AssetNode", "EDITABLE_CATEGORIES", "FormulaId"]
