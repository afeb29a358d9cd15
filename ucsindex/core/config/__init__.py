"""Configuration management module."""

from ucsindex.core.config.settings import (
    CacheConfig,
    CalculationConfig,
    ConfigManager,
    EngineConfig,
    LoggingConfig,
    StorageConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "CacheConfig",
    "CalculationConfig",
    "ConfigManager",
    "EngineConfig",
    "LoggingConfig",
    "StorageConfig",
    "get_default_config",
    "load_config_from_env",
]
