from __future__ import annotations

from ucsindex.core.data.schema import ALL_TABLES, AUDIT_LOG_TABLE, QUOTES_TABLE, ColumnDef, TableSchema, ensure_tables


def test_create_ddl_renders_columns_and_primary_key() -> None:
    table = TableSchema(
        name="sample",
        columns=(ColumnDef("id", "VARCHAR", ("NOT NULL",)), ColumnDef("value", "DOUBLE")),
        primary_key=("id",),
    )

    ddl = table.create_ddl()

    assert ddl.startswith("CREATE TABLE IF NOT EXISTS sample")
    assert "id VARCHAR NOT NULL" in ddl
    assert "PRIMARY KEY (id)" in ddl
    assert table.column_names == ["id", "value"]


def test_ensure_tables_is_repeatable(duckdb_conn) -> None:
    ensure_tables(duckdb_conn)
    ensure_tables(duckdb_conn)

    names = {row[0] for row in duckdb_conn.execute("SELECT table_name FROM information_schema.tables").fetchall()}
    assert {table.name for table in ALL_TABLES} <= names


def test_quote_table_keyed_by_asset_and_date() -> None:
    assert QUOTES_TABLE.primary_key == ("asset_id", "date")
    assert "components" in QUOTES_TABLE.column_names
    assert "user_name" in AUDIT_LOG_TABLE.column_names
