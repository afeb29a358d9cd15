"""Conversion of raw commodity quotes into per-hectare average profitability.

Every composite formula consumes ``rent_media``: the average profitability of
a commodity in BRL per hectare. The functions below are pure and total: a
missing, zero or non-finite input (price or exchange rate) yields ``0.0``
instead of an exception, so that the orchestrator is the single place that
decides whether a value is usable.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping

BAG_KG = 60
TON_KG = 1000

SOY_FACTOR = 3.3
CORN_FACTOR = 7.20
CATTLE_ARROBAS_PER_HA = 18
CARBON_FACTOR = 2.59
TIMBER_VOLUME_FACTOR = 1196.54547720813
TIMBER_SHARE = 0.10


def _usable(*values: float | None) -> bool:
    for value in values:
        if value is None or not math.isfinite(value) or value <= 0:
            return False
    return True


def _per_ton(price_per_bag: float) -> float:
    return price_per_bag / BAG_KG * TON_KG


def rent_media_soja(price_per_bag: float | None, usd_rate: float | None) -> float:
    """Soy quoted in USD per 60kg bag."""
    if not _usable(price_per_bag, usd_rate):
        return 0.0
    return _per_ton(price_per_bag) * usd_rate * SOY_FACTOR


def rent_media_milho(price_per_bag: float | None) -> float:
    """Corn quoted in BRL per 60kg bag."""
    if not _usable(price_per_bag):
        return 0.0
    return _per_ton(price_per_bag) * CORN_FACTOR


def rent_media_boi(price_per_arroba: float | None) -> float:
    if not _usable(price_per_arroba):
        return 0.0
    return price_per_arroba * CATTLE_ARROBAS_PER_HA


def rent_media_carbono(price: float | None, eur_rate: float | None) -> float:
    """Carbon credits quoted in EUR per tonne."""
    if not _usable(price, eur_rate):
        return 0.0
    return price * eur_rate * CARBON_FACTOR


def rent_media_madeira(price: float | None, usd_rate: float | None) -> float:
    """Timber quoted in USD."""
    if not _usable(price, usd_rate):
        return 0.0
    return price * usd_rate * TIMBER_VOLUME_FACTOR * TIMBER_SHARE


_NORMALIZERS: dict[str, Callable[[float | None, Mapping[str, float]], float]] = {
    "soja": lambda price, rates: rent_media_soja(price, rates.get("usd")),
    "milho": lambda price, rates: rent_media_milho(price),
    "boi_gordo": lambda price, rates: rent_media_boi(price),
    "carbono": lambda price, rates: rent_media_carbono(price, rates.get("eur")),
    "madeira": lambda price, rates: rent_media_madeira(price, rates.get("usd")),
}

NORMALIZED_ASSETS = frozenset(_NORMALIZERS)


def rent_media(asset_id: str, price: float | None, rates: Mapping[str, float] | None = None) -> float:
    """Normalize ``price`` of ``asset_id`` using the ``usd``/``eur`` entries of ``rates``.

    Unknown assets normalize to ``0.0``.
    """
    normalizer = _NORMALIZERS.get(asset_id)
    if normalizer is None:
        return 0.0
    return normalizer(price, rates or {})


__all__ = [
    "NORMALIZED_ASSETS",
    "rent_media",
    "rent_media_boi",
    "rent_media_carbono",
    "rent_media_madeira",
    "rent_media_milho",
    "rent_media_soja",
]
