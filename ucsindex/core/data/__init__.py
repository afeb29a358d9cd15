"""Persistence layer: DuckDB schema, connections, repositories and caches."""
