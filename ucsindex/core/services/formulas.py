"""Composite formula engine.

Pure functions over normalized profitability values, plus a dispatch table
keyed by :class:`FormulaId`. Inputs for the dispatcher are raw quotes keyed by
asset id; commodity prices are normalized on the way in.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

from ucsindex.core.models.assets import AssetNode, FormulaId
from ucsindex.core.services.normalizer import (
    rent_media_boi,
    rent_media_carbono,
    rent_media_madeira,
    rent_media_milho,
    rent_media_soja,
)

HECTARES_PER_MODULE = 25
CATTLE_WEIGHT = 0.35
CORN_WEIGHT = 0.30
SOY_WEIGHT = 0.35
LEASE_FACTOR = 0.048
TIMBER_MULTIPLIER = 5
CARBON_MULTIPLIER = 25
WATER_COST_RATE = 0.07
PDM_DIVISOR = 900
ASE_MULTIPLIER = 2


def vus(rent_boi: float, rent_milho: float, rent_soja: float) -> float:
    """Land-use value of the agricultural mix, net of the lease factor."""
    gross = (
        rent_boi * HECTARES_PER_MODULE * CATTLE_WEIGHT
        + rent_milho * HECTARES_PER_MODULE * CORN_WEIGHT
        + rent_soja * HECTARES_PER_MODULE * SOY_WEIGHT
    )
    return gross * (1 - LEASE_FACTOR)


def vmad(rent_madeira: float) -> float:
    return rent_madeira * TIMBER_MULTIPLIER


def carbono_crs(rent_carbono: float) -> float:
    return rent_carbono * CARBON_MULTIPLIER


def water_weighted_sum(
    rent_boi: float,
    rent_milho: float,
    rent_soja: float,
    rent_madeira: float,
    rent_carbono: float,
) -> float:
    return (
        rent_boi * CATTLE_WEIGHT
        + rent_milho * CORN_WEIGHT
        + rent_soja * SOY_WEIGHT
        + rent_madeira
        + rent_carbono
    )


def ch2o_agua(
    rent_boi: float,
    rent_milho: float,
    rent_soja: float,
    rent_madeira: float,
    rent_carbono: float,
) -> float:
    """Water-weighted commodity aggregate (pre-CRS)."""
    return water_weighted_sum(rent_boi, rent_milho, rent_soja, rent_madeira, rent_carbono)


def custo_agua(ch2o: float) -> float:
    """Water CRS cost: 7% of the water-weighted aggregate."""
    return ch2o * WATER_COST_RATE


def agua_crs(ch2o: float) -> float:
    return ch2o


def valor_uso_solo(vus_value: float, vmad_value: float, carbono_crs_value: float, custo_agua_value: float) -> float:
    return vus_value + vmad_value + carbono_crs_value + custo_agua_value


def pdm(ch2o: float, custo_agua_value: float) -> float:
    return ch2o + custo_agua_value


def ucs(pdm_value: float) -> float:
    return (pdm_value / PDM_DIVISOR) / 2


def ucs_ase(ucs_value: float) -> float:
    return ucs_value * ASE_MULTIPLIER


def convert(value: float, rate: float) -> float:
    """Project a BRL value into a foreign currency quoted as BRL per unit."""
    if not rate:
        return 0.0
    return value / rate


def _rents(values: Mapping[str, float]) -> tuple[float, float, float, float, float]:
    usd = values.get("usd")
    return (
        rent_media_boi(values.get("boi_gordo")),
        rent_media_milho(values.get("milho")),
        rent_media_soja(values.get("soja"), usd),
        rent_media_madeira(values.get("madeira"), usd),
        rent_media_carbono(values.get("carbono"), values.get("eur")),
    )


def _eval_quote(node: AssetNode, values: Mapping[str, float]) -> float:
    return values.get(node.id, 0.0)


def _eval_vus(node: AssetNode, values: Mapping[str, float]) -> float:
    rent_boi, rent_milho, rent_soja, _, _ = _rents(values)
    return vus(rent_boi, rent_milho, rent_soja)


def _eval_vmad(node: AssetNode, values: Mapping[str, float]) -> float:
    return vmad(rent_media_madeira(values.get("madeira"), values.get("usd")))


def _eval_carbono_crs(node: AssetNode, values: Mapping[str, float]) -> float:
    return carbono_crs(rent_media_carbono(values.get("carbono"), values.get("eur")))


def _eval_ch2o(node: AssetNode, values: Mapping[str, float]) -> float:
    return ch2o_agua(*_rents(values))


def _eval_custo_agua(node: AssetNode, values: Mapping[str, float]) -> float:
    return custo_agua(values["ch2o_agua"])


def _eval_agua_crs(node: AssetNode, values: Mapping[str, float]) -> float:
    return agua_crs(values["ch2o_agua"])


def _eval_valor_uso_solo(node: AssetNode, values: Mapping[str, float]) -> float:
    return valor_uso_solo(values["vus"], values["vmad"], values["carbono_crs"], values["custo_agua"])


def _eval_pdm(node: AssetNode, values: Mapping[str, float]) -> float:
    return pdm(values["ch2o_agua"], values["custo_agua"])


def _eval_ucs(node: AssetNode, values: Mapping[str, float]) -> float:
    return ucs(values["pdm"])


def _eval_ucs_ase(node: AssetNode, values: Mapping[str, float]) -> float:
    return ucs_ase(values["ucs"])


def _eval_to_usd(node: AssetNode, values: Mapping[str, float]) -> float:
    source = next(dep for dep in node.depends_on if dep != "usd")
    return convert(values[source], values["usd"])


def _eval_to_eur(node: AssetNode, values: Mapping[str, float]) -> float:
    source = next(dep for dep in node.depends_on if dep != "eur")
    return convert(values[source], values["eur"])


FormulaFn = Callable[[AssetNode, Mapping[str, float]], float]

FORMULAS: dict[FormulaId, FormulaFn] = {
    FormulaId.QUOTE: _eval_quote,
    FormulaId.VUS: _eval_vus,
    FormulaId.VMAD: _eval_vmad,
    FormulaId.CARBONO_CRS: _eval_carbono_crs,
    FormulaId.CH2O_AGUA: _eval_ch2o,
    FormulaId.CUSTO_AGUA: _eval_custo_agua,
    FormulaId.AGUA_CRS: _eval_agua_crs,
    FormulaId.VALOR_USO_SOLO: _eval_valor_uso_solo,
    FormulaId.PDM: _eval_pdm,
    FormulaId.UCS: _eval_ucs,
    FormulaId.UCS_ASE: _eval_ucs_ase,
    FormulaId.TO_USD: _eval_to_usd,
    FormulaId.TO_EUR: _eval_to_eur,
}

FORMULA_LABELS: dict[FormulaId, str] = {
    FormulaId.QUOTE: "cotação",
    FormulaId.VUS: "((Boi×25×35%) + (Milho×25×30%) + (Soja×25×35%)) × (1-4.8%)",
    FormulaId.VMAD: "rent_media_madeira × 5",
    FormulaId.CARBONO_CRS: "rent_media_carbono × 25",
    FormulaId.CH2O_AGUA: "(Boi×35%) + (Milho×30%) + (Soja×35%) + Madeira + Carbono",
    FormulaId.CUSTO_AGUA: "CH2O × 7%",
    FormulaId.AGUA_CRS: "valor_CH2O",
    FormulaId.VALOR_USO_SOLO: "VUS + Vmad + Carbono_CRS + Custo_Água",
    FormulaId.PDM: "CH2O + Custo_Água",
    FormulaId.UCS: "(PDM ÷ 900) ÷ 2",
    FormulaId.UCS_ASE: "UCS × 2",
    FormulaId.TO_USD: "UCS_ASE ÷ USD",
    FormulaId.TO_EUR: "UCS_ASE ÷ EUR",
}

_missing = (set(FormulaId) - set(FORMULAS)) | (set(FormulaId) - set(FORMULA_LABELS))
if _missing:
    raise RuntimeError(f"formula table is not exhaustive: {sorted(item.value for item in _missing)}")


def is_usable(value: float | None) -> bool:
    """True for a finite positive value."""
    return value is not None and math.isfinite(value) and value > 0


def evaluate(node: AssetNode, values: Mapping[str, float | None]) -> float:
    """Apply the formula of ``node`` to the dependency ``values``.

    Zero-propagation: a missing, zero, negative or NaN direct dependency makes
    the result ``0.0``. Never raises.
    """
    if node.is_quoted:
        value = values.get(node.id)
        return value if is_usable(value) else 0.0

    resolved: dict[str, float] = {}
    for dependency in node.depends_on:
        value = values.get(dependency)
        if not is_usable(value):
            return 0.0
        resolved[dependency] = value

    result = FORMULAS[node.formula_id](node, resolved)
    return result if math.isfinite(result) else 0.0


def formula_label(formula_id: FormulaId) -> str:
    return FORMULA_LABELS[formula_id]


__all__ = [
    "FORMULAS",
    "FORMULA_LABELS",
    "agua_crs",
    "carbono_crs",
    "ch2o_agua",
    "convert",
    "custo_agua",
    "evaluate",
    "formula_label",
    "is_usable",
    "pdm",
    "ucs",
    "ucs_ase",
    "valor_uso_solo",
    "vmad",
    "vus",
    "water_weighted_sum",
]
