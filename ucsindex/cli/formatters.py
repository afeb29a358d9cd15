"""Table and JSON Lines renderers for command rows.

Rows are plain mappings keyed by column name. The table renderer picks a
presentation per column from :data:`COLUMN_KINDS`: variations are signed
percentages, dates use the ``dd/mm/yyyy`` display format and index values get
thousands separators. JSON Lines output always carries the raw values.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ucsindex.core.models.quote import DISPLAY_DATE_FORMAT


class ColumnKind(str, Enum):
    TEXT = "text"
    VALUE = "value"
    PERCENT = "percent"
    DATE = "date"
    FLAG = "flag"


COLUMN_KINDS: dict[str, ColumnKind] = {
    "price": ColumnKind.VALUE,
    "value": ColumnKind.VALUE,
    "absolute_change": ColumnKind.VALUE,
    "previous_close": ColumnKind.VALUE,
    "old_value": ColumnKind.VALUE,
    "new_value": ColumnKind.VALUE,
    "original_asset_value": ColumnKind.VALUE,
    "new_asset_value": ColumnKind.VALUE,
    "original_index_value": ColumnKind.VALUE,
    "new_index_value": ColumnKind.VALUE,
    "change": ColumnKind.PERCENT,
    "percentage_change": ColumnKind.PERCENT,
    "change_percentage": ColumnKind.PERCENT,
    "date": ColumnKind.DATE,
    "target_date": ColumnKind.DATE,
    "previous_business_day": ColumnKind.DATE,
    "next_business_day": ColumnKind.DATE,
    "business_day": ColumnKind.FLAG,
    "cached": ColumnKind.FLAG,
    "persisted": ColumnKind.FLAG,
}


def column_kind(column: str) -> ColumnKind:
    return COLUMN_KINDS.get(column, ColumnKind.TEXT)


def _display_date(value: object) -> str:
    if isinstance(value, date):
        return value.strftime(DISPLAY_DATE_FORMAT)
    try:
        return date.fromisoformat(str(value)).strftime(DISPLAY_DATE_FORMAT)
    except ValueError:
        return str(value)


class OutputFormatter:
    """Base class for row renderers."""

    name: str

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Rich table with per-column presentation."""

    name: str = "table"
    no_color: bool = False
    float_digits: int = 4
    width: int | None = None

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        console = Console(
            file=stream,
            color_system=None if self.no_color else "auto",
            no_color=self.no_color,
            width=self.width,
        )
        selected = list(columns or (rows[0].keys() if rows else ()))
        if not rows:
            console.print("No data available.")
            return

        table = Table(box=SIMPLE, show_lines=False, header_style="" if self.no_color else "bold")
        for column in selected:
            kind = column_kind(column)
            justify = "right" if kind in (ColumnKind.VALUE, ColumnKind.PERCENT) else "left"
            table.add_column(column, justify=justify)
        for row in rows:
            table.add_row(*(self._cell(column, row.get(column)) for column in selected))
        console.print(table)

    def _cell(self, column: str, value: object) -> Text:
        style = ""
        if not self.no_color and column_kind(column) is ColumnKind.PERCENT and isinstance(value, (int, float)):
            style = "green" if value > 0 else "red" if value < 0 else ""
        # Text keeps asset names and formula labels out of markup parsing
        return Text(self.format_cell(column, value), style=style)

    def format_cell(self, column: str, value: object) -> str:
        if value is None:
            return "-"
        kind = column_kind(column)
        if kind is ColumnKind.FLAG or isinstance(value, bool):
            return "yes" if value else "no"
        if kind is ColumnKind.DATE:
            return _display_date(value)
        if kind is ColumnKind.PERCENT and isinstance(value, (int, float)):
            return f"{value:+.{self.float_digits}f}%"
        if isinstance(value, float):
            return f"{value:,.{self.float_digits}f}"
        return str(value)


@dataclass(slots=True)
class JSONLFormatter(OutputFormatter):
    """One JSON object per row, restricted to ``columns`` when given."""

    name: str = "jsonl"

    def render(
        self,
        rows: Sequence[Mapping[str, object]],
        *,
        stream: TextIO,
        columns: Sequence[str] | None = None,
    ) -> None:
        for row in rows:
            payload = {column: row.get(column) for column in columns} if columns else dict(row)
            stream.write(json.dumps(payload, ensure_ascii=False, default=str))
            stream.write("\n")
        stream.flush()


FORMATTERS = ("table", "jsonl")


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "jsonl":
        return JSONLFormatter()
    raise ValueError(f"Unsupported format '{name}'. Available formats: {', '.join(FORMATTERS)}.")


__all__ = [
    "COLUMN_KINDS",
    "ColumnKind",
    "FORMATTERS",
    "JSONLFormatter",
    "OutputFormatter",
    "TableFormatter",
    "column_kind",
    "create_formatter",
]
