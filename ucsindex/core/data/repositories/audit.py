"""Append-only audit trail of manual edits."""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import Any, Protocol
from uuid import uuid4

import duckdb
from duckdb import DuckDBPyConnection

from ucsindex.core.data.schema import AUDIT_LOG_TABLE
from ucsindex.core.exceptions import QuoteStoreError
from ucsindex.core.logging import get_logger
from ucsindex.core.models.results import AuditEntry

logger = get_logger(__name__)

DATE_QUERY_LIMIT = 100
PERIOD_QUERY_LIMIT = 500


class AuditLog(Protocol):
    def append(self, entry: AuditEntry) -> str: ...

    def entries(self, asset_id: str | None = None, limit: int = 100) -> list[AuditEntry]: ...

    def entries_for_date(self, target_date: date, limit: int = DATE_QUERY_LIMIT) -> list[AuditEntry]: ...

    def entries_for_period(self, start: date, end: date, limit: int = PERIOD_QUERY_LIMIT) -> list[AuditEntry]: ...


class InMemoryAuditLog:
    def __init__(self) -> None:
        self._entries: list[AuditEntry] = []

    def append(self, entry: AuditEntry) -> str:
        self._entries.append(entry)
        return uuid4().hex

    def entries(self, asset_id: str | None = None, limit: int = 100) -> list[AuditEntry]:
        selected = [entry for entry in reversed(self._entries) if asset_id is None or entry.asset_id == asset_id]
        return selected[:limit]

    def entries_for_date(self, target_date: date, limit: int = DATE_QUERY_LIMIT) -> list[AuditEntry]:
        selected = [entry for entry in self._entries if entry.target_date == target_date]
        return sorted(selected, key=lambda entry: entry.created_at, reverse=True)[:limit]

    def entries_for_period(self, start: date, end: date, limit: int = PERIOD_QUERY_LIMIT) -> list[AuditEntry]:
        selected = [entry for entry in self._entries if start <= entry.target_date <= end]
        return sorted(selected, key=lambda entry: (entry.target_date, entry.created_at), reverse=True)[:limit]


_SELECT = (
    "SELECT asset_id, asset_name, old_value, new_value, user_name, target_date,"
    f" affected_assets, created_at, action, details FROM {AUDIT_LOG_TABLE.name}"
)


def _row_to_entry(row: tuple[Any, ...]) -> AuditEntry:
    affected = row[6]
    if isinstance(affected, str):
        affected = json.loads(affected)
    created_at = row[7] if isinstance(row[7], datetime) else datetime.fromisoformat(str(row[7]))
    return AuditEntry(
        asset_id=row[0],
        asset_name=row[1] or "",
        old_value=row[2],
        new_value=row[3],
        user=row[4],
        target_date=row[5],
        affected_assets=tuple(affected or ()),
        created_at=created_at,
        action=row[8],
        details=row[9] or "",
    )


class DuckDBAuditLog:
    """Audit entries stored in the ``audit_log`` table."""

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self._conn = conn
        try:
            AUDIT_LOG_TABLE.ensure(conn)
        except duckdb.Error as exc:
            raise QuoteStoreError(f"Audit log setup failed: {exc}", operation="ensure_schema") from exc

    def append(self, entry: AuditEntry) -> str:
        entry_id = uuid4().hex
        try:
            self._conn.execute(
                f"""
                INSERT INTO {AUDIT_LOG_TABLE.name}
                    (id, asset_id, asset_name, action, old_value, new_value, user_name,
                     target_date, affected_assets, details, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    entry_id,
                    entry.asset_id,
                    entry.asset_name,
                    entry.action,
                    entry.old_value,
                    entry.new_value,
                    entry.user,
                    entry.target_date,
                    json.dumps(list(entry.affected_assets)),
                    entry.details,
                    entry.created_at.replace(tzinfo=None),
                ],
            )
        except duckdb.Error as exc:
            raise QuoteStoreError(
                f"Audit log write failed: {exc}", operation="audit_append", asset_id=entry.asset_id
            ) from exc
        logger.info("audit entry recorded", asset_id=entry.asset_id, user=entry.user, action=entry.action)
        return entry_id

    def _select(self, operation: str, where: str, params: list[object], order: str, limit: int) -> list[AuditEntry]:
        query = f"{_SELECT}{where} ORDER BY {order} LIMIT ?"
        try:
            rows = self._conn.execute(query, [*params, limit]).fetchall()
        except duckdb.Error as exc:
            raise QuoteStoreError(f"Audit log read failed: {exc}", operation=operation) from exc
        return [_row_to_entry(row) for row in rows]

    def entries(self, asset_id: str | None = None, limit: int = 100) -> list[AuditEntry]:
        if asset_id is None:
            return self._select("audit_entries", "", [], "created_at DESC", limit)
        return self._select("audit_entries", " WHERE asset_id = ?", [asset_id], "created_at DESC", limit)

    def entries_for_date(self, target_date: date, limit: int = DATE_QUERY_LIMIT) -> list[AuditEntry]:
        return self._select(
            "audit_entries_for_date", " WHERE target_date = ?", [target_date], "created_at DESC", limit
        )

    def entries_for_period(self, start: date, end: date, limit: int = PERIOD_QUERY_LIMIT) -> list[AuditEntry]:
        return self._select(
            "audit_entries_for_period",
            " WHERE target_date BETWEEN ? AND ?",
            [start, end],
            "target_date DESC, created_at DESC",
            limit,
        )


def query_entries(
    audit_log: AuditLog,
    *,
    target_date: date | None = None,
    start: date | None = None,
    end: date | None = None,
    asset_id: str | None = None,
    limit: int | None = None,
) -> list[AuditEntry]:
    """Dispatch a read to the date, period or latest-entries query.

    ``target_date`` wins over a period; a period needs both bounds. ``asset_id``
    narrows the result of any of the three queries.
    """

    if (start is None) != (end is None):
        raise ValueError("A period needs both a start and an end date.")
    if start is not None and end is not None and start > end:
        raise ValueError(f"Period start {start.isoformat()} is after its end {end.isoformat()}.")

    if target_date is not None:
        entries = audit_log.entries_for_date(target_date, limit or DATE_QUERY_LIMIT)
    elif start is not None and end is not None:
        entries = audit_log.entries_for_period(start, end, limit or PERIOD_QUERY_LIMIT)
    else:
        return audit_log.entries(asset_id=asset_id, limit=limit or DATE_QUERY_LIMIT)
    if asset_id is not None:
        entries = [entry for entry in entries if entry.asset_id == asset_id]
    return entries


__all__ = [
    "AuditLog",
    "DATE_QUERY_LIMIT",
    "DuckDBAuditLog",
    "InMemoryAuditLog",
    "PERIOD_QUERY_LIMIT",
    "query_entries",
]
