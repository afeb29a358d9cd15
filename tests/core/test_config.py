from __future__ import annotations

from pathlib import Path

from ucsindex.core.config import ConfigManager, EngineConfig, load_config_from_env


def test_defaults() -> None:
    config = EngineConfig()

    assert config.calculation.impact_threshold_pct == 0.001
    assert config.calculation.max_lookback_days == 14
    assert config.cache.enabled is True
    assert config.storage.database.endswith("quotes.duckdb")


def test_loads_toml_file(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        '[calculation]\nimpact_threshold_pct = 0.5\nextra_holidays = ["2024-01-25"]\n'
        '[storage]\ndatabase = ":memory:"\n',
        encoding="utf-8",
    )

    config = ConfigManager(path, use_env=False).get_config()

    assert config.calculation.impact_threshold_pct == 0.5
    assert config.calculation.extra_holidays == ["2024-01-25"]
    assert config.storage.database == ":memory:"
    assert config.cache.max_size == 256


def test_environment_overrides_file(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[cache]\nttl_seconds = 10\n", encoding="utf-8")
    monkeypatch.setenv("UCSINDEX_CACHE_TTL", "60")
    monkeypatch.setenv("UCSINDEX_EXTRA_HOLIDAYS", "2024-01-25, 2024-07-09")
    monkeypatch.setenv("UCSINDEX_CACHE_ENABLED", "false")

    config = ConfigManager(path).get_config()

    assert config.cache.ttl_seconds == 60
    assert config.cache.enabled is False
    assert config.calculation.extra_holidays == ["2024-01-25", "2024-07-09"]


def test_invalid_files_fall_back_to_defaults(tmp_path: Path) -> None:
    broken = tmp_path / "broken.toml"
    broken.write_text("[calculation\n", encoding="utf-8")
    unknown = tmp_path / "unknown.toml"
    unknown.write_text("[calculation]\nspeed = 3\n", encoding="utf-8")

    assert ConfigManager(broken, use_env=False).get_config() == EngineConfig()
    assert ConfigManager(unknown, use_env=False).get_config() == EngineConfig()


def test_update_config_merges_sections(tmp_path: Path) -> None:
    manager = ConfigManager(tmp_path / "missing.toml", use_env=False)

    manager.update_config(storage={"database": ":memory:"})

    assert manager.get_config().storage.database == ":memory:"
    assert manager.get_config().storage.threads == 1


def test_env_loader_ignores_unset(monkeypatch) -> None:
    for name in ("UCSINDEX_IMPACT_THRESHOLD_PCT", "UCSINDEX_DATABASE", "UCSINDEX_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("UCSINDEX_DATABASE", "/tmp/ucs.duckdb")

    assert load_config_from_env()["storage"] == {"database": "/tmp/ucs.duckdb"}
