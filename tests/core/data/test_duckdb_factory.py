from __future__ import annotations

from pathlib import Path

from ucsindex.core.data.storage import DuckDBFactoryConfig, UCSIndexDuckDBFactory


def test_in_memory_connection_applies_pragmas() -> None:
    factory = UCSIndexDuckDBFactory(DuckDBFactoryConfig(pragmas={"threads": 2}))

    with factory.connection() as conn:
        threads = conn.execute("SELECT current_setting('threads')").fetchone()[0]

    assert int(threads) == 2
    assert factory.config.in_memory


def test_file_database_creates_parent_directory(tmp_path: Path) -> None:
    database = tmp_path / "nested" / "ucs.duckdb"
    factory = UCSIndexDuckDBFactory(DuckDBFactoryConfig(database=database))

    with factory.connection() as conn:
        conn.execute("CREATE TABLE sample (value INTEGER)")
        conn.execute("INSERT INTO sample VALUES (1)")

    assert database.exists()
    with factory.connection() as conn:
        assert conn.execute("SELECT COUNT(*) FROM sample").fetchone()[0] == 1
