"""Configuration management for the UCS index engine."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

DEFAULT_HOME = Path.home() / ".ucsindex"


@dataclass
class CalculationConfig:
    """Orchestrator and simulation tuning."""

    impact_threshold_pct: float = 0.001
    max_lookback_days: int = 14
    extra_holidays: list[str] = field(default_factory=list)


@dataclass
class StorageConfig:
    """Quote store location."""

    database: str = str(DEFAULT_HOME / "quotes.duckdb")
    threads: int = 1


@dataclass
class CacheConfig:
    """In-memory cache for configuration lookups."""

    enabled: bool = True
    max_size: int = 256
    ttl_seconds: int = 300


@dataclass
class LoggingConfig:
    """Logging sinks."""

    level: str = "INFO"
    file: str | None = None


@dataclass
class EngineConfig:
    """Top-level engine configuration."""

    calculation: CalculationConfig = field(default_factory=CalculationConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "EngineConfig":
        """Build a configuration from a (possibly partial) mapping."""
        return cls(
            calculation=CalculationConfig(**config_dict.get("calculation", {})),
            storage=StorageConfig(**config_dict.get("storage", {})),
            cache=CacheConfig(**config_dict.get("cache", {})),
            logging=LoggingConfig(**config_dict.get("logging", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "calculation": asdict(self.calculation),
            "storage": asdict(self.storage),
            "cache": asdict(self.cache),
            "logging": asdict(self.logging),
        }


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict):
            target[key] = _deep_update(dict(target.get(key, {})), value)
        else:
            target[key] = value
    return target


class ConfigManager:
    """Loads the TOML configuration file and overlays environment variables."""

    def __init__(self, config_path: Path | None = None, *, use_env: bool = True):
        self.config_path = config_path or DEFAULT_HOME / "config.toml"
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> EngineConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logger.warning(
                    "Failed to load config from {path}, using defaults: {error}",
                    path=str(self.config_path),
                    error=str(exc),
                )
                config_dict = {}

        if self.use_env:
            config_dict = _deep_update(config_dict, load_config_from_env())

        try:
            return EngineConfig.from_dict(config_dict)
        except TypeError as exc:
            logger.warning("Ignoring invalid configuration keys: {error}", error=str(exc))
            return EngineConfig()

    def get_config(self) -> EngineConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested updates, e.g. ``update_config(storage={"database": ":memory:"})``."""
        self.config = EngineConfig.from_dict(_deep_update(self.config.to_dict(), updates))


def get_default_config() -> EngineConfig:
    return EngineConfig()


def load_config_from_env() -> dict[str, Any]:
    """Read ``UCSINDEX_*`` environment variables into a nested mapping."""
    config: dict[str, Any] = {}

    calculation: dict[str, Any] = {}
    threshold = os.getenv("UCSINDEX_IMPACT_THRESHOLD_PCT")
    if threshold is not None:
        calculation["impact_threshold_pct"] = float(threshold)
    lookback = os.getenv("UCSINDEX_MAX_LOOKBACK_DAYS")
    if lookback is not None:
        calculation["max_lookback_days"] = int(lookback)
    holidays = os.getenv("UCSINDEX_EXTRA_HOLIDAYS")
    if holidays:
        calculation["extra_holidays"] = [item.strip() for item in holidays.split(",") if item.strip()]
    if calculation:
        config["calculation"] = calculation

    database = os.getenv("UCSINDEX_DATABASE")
    if database:
        config["storage"] = {"database": database}

    cache: dict[str, Any] = {}
    cache_enabled = os.getenv("UCSINDEX_CACHE_ENABLED")
    if cache_enabled is not None:
        cache["enabled"] = cache_enabled.lower() == "true"
    cache_ttl = os.getenv("UCSINDEX_CACHE_TTL")
    if cache_ttl is not None:
        cache["ttl_seconds"] = int(cache_ttl)
    if cache:
        config["cache"] = cache

    logging_config: dict[str, Any] = {}
    level = os.getenv("UCSINDEX_LOG_LEVEL")
    if level is not None:
        logging_config["level"] = level
    log_file = os.getenv("UCSINDEX_LOG_FILE")
    if log_file is not None:
        logging_config["file"] = log_file
    if logging_config:
        config["logging"] = logging_config

    return config
