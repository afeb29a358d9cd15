"""DuckDB table definitions for quotes and the audit trail."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from duckdb import DuckDBPyConnection


@dataclass(frozen=True)
class ColumnDef:
    """Represents a DuckDB table column definition."""

    name: str
    data_type: str
    constraints: Sequence[str] = ()

    def render(self) -> str:
        return " ".join([self.name, self.data_type, *self.constraints])


@dataclass(frozen=True)
class TableSchema:
    """Utility wrapper describing a DuckDB table schema."""

    name: str
    columns: Sequence[ColumnDef]
    primary_key: Sequence[str] = ()

    @property
    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]

    def create_ddl(self) -> str:
        column_defs = [column.render() for column in self.columns]
        if self.primary_key:
            column_defs.append(f"PRIMARY KEY ({', '.join(self.primary_key)})")
        columns_sql = ",\n                ".join(column_defs)
        return f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                {columns_sql}
            )
            """.strip()

    def ensure(self, conn: DuckDBPyConnection) -> None:
        """Create the table on the provided connection if it does not exist."""

        conn.execute(self.create_ddl())


QUOTES_TABLE = TableSchema(
    name="quotes",
    columns=(
        ColumnDef("asset_id", "VARCHAR", ("NOT NULL",)),
        ColumnDef("date", "DATE", ("NOT NULL",)),
        ColumnDef("timestamp", "BIGINT", ("NOT NULL",)),
        ColumnDef("close", "DOUBLE", ("NOT NULL",)),
        ColumnDef("change_pct", "DOUBLE", ("NOT NULL", "DEFAULT 0")),
        ColumnDef("components", "JSON"),
        ColumnDef("source", "VARCHAR", ("NOT NULL",)),
        ColumnDef("updated_at", "TIMESTAMP", ("NOT NULL",)),
    ),
    primary_key=("asset_id", "date"),
)

AUDIT_LOG_TABLE = TableSchema(
    name="audit_log",
    columns=(
        ColumnDef("id", "VARCHAR", ("NOT NULL",)),
        ColumnDef("asset_id", "VARCHAR", ("NOT NULL",)),
        ColumnDef("asset_name", "VARCHAR"),
        ColumnDef("action", "VARCHAR", ("NOT NULL",)),
        ColumnDef("old_value", "DOUBLE"),
        ColumnDef("new_value", "DOUBLE"),
        ColumnDef("user_name", "VARCHAR", ("NOT NULL",)),
        ColumnDef("target_date", "DATE", ("NOT NULL",)),
        ColumnDef("affected_assets", "JSON"),
        ColumnDef("details", "VARCHAR"),
        ColumnDef("created_at", "TIMESTAMP", ("NOT NULL",)),
    ),
    primary_key=("id",),
)

ALL_TABLES: tuple[TableSchema, ...] = (QUOTES_TABLE, AUDIT_LOG_TABLE)


def ensure_tables(conn: DuckDBPyConnection, tables: Iterable[TableSchema] = ALL_TABLES) -> None:
    for table in tables:
        table.ensure(conn)


__all__ = ["ALL_TABLES", "AUDIT_LOG_TABLE", "ColumnDef", "QUOTES_TABLE", "TableSchema", "ensure_tables"]
