from __future__ import annotations

from ucsindex.core.data.cache import ThreadSafeInMemoryCache
from ucsindex.core.services import AssetConfigService


def test_asset_config_view(graph) -> None:
    service = AssetConfigService(graph)

    config = service.get_asset_config("vus")

    assert config.name == "Valor de Uso do Solo"
    assert config.category == "sub-index"
    assert config.depends_on == ("boi_gordo", "milho", "soja", "usd")
    assert config.editable is False
    assert config.depth == 1
    assert config.to_payload()["depends_on"] == ["boi_gordo", "milho", "soja", "usd"]


def test_unknown_asset_returns_none(graph) -> None:
    assert AssetConfigService(graph).get_asset_config("petroleo") is None


def test_list_follows_evaluation_order(graph) -> None:
    configs = AssetConfigService(graph).list_asset_configs()

    assert [config.id for config in configs] == list(graph.topological_order)
    assert [config.id for config in configs if config.editable] == [
        "usd",
        "eur",
        "soja",
        "milho",
        "boi_gordo",
        "madeira",
        "carbono",
    ]


def test_cache_is_used_and_invalidated(graph) -> None:
    cache = ThreadSafeInMemoryCache(max_size=8, default_ttl=60)
    service = AssetConfigService(graph, cache)

    first = service.get_asset_config("soja")
    second = service.get_asset_config("soja")

    assert first is second
    assert len(cache) == 1

    service.invalidate()
    assert len(cache) == 0
    assert service.get_asset_config("soja") == first
