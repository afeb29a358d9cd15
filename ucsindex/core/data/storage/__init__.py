"""DuckDB connection management."""

from ucsindex.core.data.storage.duckdb_factory import DuckDBFactoryConfig, UCSIndexDuckDBFactory

__all__ = ["DuckDBFactoryConfig", "UCSIndexDuckDBFactory"]
