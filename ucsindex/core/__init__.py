"""ucsindex core: models, storage and the calculation services."""

from ucsindex.core.config.settings import ConfigManager, EngineConfig
from ucsindex.core.engine import UCSIndexEngine, build_engine, build_services

__all__ = ["ConfigManager", "EngineConfig", "UCSIndexEngine", "build_engine", "build_services"]
