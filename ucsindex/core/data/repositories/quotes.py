"""Quote store adapters keyed by ``(asset_id, date)``."""

from __future__ import annotations

import json
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, date, datetime, timedelta
from typing import Any, Protocol

import duckdb
from duckdb import DuckDBPyConnection

from ucsindex.core.data.schema import QUOTES_TABLE
from ucsindex.core.data.storage import UCSIndexDuckDBFactory
from ucsindex.core.exceptions import QuoteStoreError
from ucsindex.core.logging import get_logger
from ucsindex.core.models.quote import Quote, QuoteSource

logger = get_logger(__name__)

DEFAULT_MAX_LOOKBACK = 14


class QuoteStore(Protocol):
    """Read/write surface used by the engine services."""

    def get_quote(
        self,
        asset_id: str,
        day: date,
        *,
        fallback: bool = False,
        max_lookback: int = DEFAULT_MAX_LOOKBACK,
    ) -> Quote | None: ...

    def save_quote(self, quote: Quote) -> Quote: ...

    def history(self, asset_id: str, start: date, end: date) -> list[Quote]: ...

    def quotes_for_date(self, day: date) -> dict[str, Quote]: ...


class InMemoryQuoteStore:
    """Dictionary backed store for tests and dry runs."""

    def __init__(self, quotes: list[Quote] | None = None) -> None:
        self._quotes: dict[tuple[str, date], Quote] = {}
        self.writes = 0
        for quote in quotes or []:
            self._quotes[(quote.asset_id, quote.date)] = quote

    def __len__(self) -> int:
        return len(self._quotes)

    def get_quote(
        self,
        asset_id: str,
        day: date,
        *,
        fallback: bool = False,
        max_lookback: int = DEFAULT_MAX_LOOKBACK,
    ) -> Quote | None:
        quote = self._quotes.get((asset_id, day))
        if quote is not None or not fallback:
            return quote
        for offset in range(1, max_lookback + 1):
            quote = self._quotes.get((asset_id, day - timedelta(days=offset)))
            if quote is not None:
                return quote
        return None

    def save_quote(self, quote: Quote) -> Quote:
        self._quotes[(quote.asset_id, quote.date)] = quote
        self.writes += 1
        return quote

    def history(self, asset_id: str, start: date, end: date) -> list[Quote]:
        return sorted(
            (quote for (key, day), quote in self._quotes.items() if key == asset_id and start <= day <= end),
            key=lambda quote: quote.date,
        )

    def quotes_for_date(self, day: date) -> dict[str, Quote]:
        return {asset_id: quote for (asset_id, quote_day), quote in self._quotes.items() if quote_day == day}


_SELECT_COLUMNS = "asset_id, date, timestamp, close, change_pct, components, source"


def _row_to_quote(row: tuple[Any, ...]) -> Quote:
    asset_id, day, timestamp, close, change_pct, components, source = row
    if isinstance(components, str):
        components = json.loads(components)
    return Quote(
        asset_id=asset_id,
        date=day,
        timestamp=timestamp,
        close=close,
        change_pct=change_pct or 0.0,
        components=components or {},
        source=QuoteSource(source),
    )


class DuckDBQuoteStore:
    """Quote store persisted in the ``quotes`` DuckDB table.

    Backend failures are wrapped in :class:`QuoteStoreError` and never retried.
    """

    def __init__(self, conn: DuckDBPyConnection) -> None:
        self._conn = conn
        with self._guard("ensure_schema"):
            QUOTES_TABLE.ensure(conn)

    @classmethod
    def from_factory(cls, factory: UCSIndexDuckDBFactory) -> "DuckDBQuoteStore":
        return cls(factory.create_connection())

    @property
    def connection(self) -> DuckDBPyConnection:
        return self._conn

    @contextmanager
    def _guard(self, operation: str, **context: Any) -> Iterator[None]:
        try:
            yield
        except duckdb.Error as exc:
            logger.error("quote store failure", operation=operation, error=str(exc), **context)
            raise QuoteStoreError(f"Quote store {operation} failed: {exc}", operation=operation, **context) from exc

    def get_quote(
        self,
        asset_id: str,
        day: date,
        *,
        fallback: bool = False,
        max_lookback: int = DEFAULT_MAX_LOOKBACK,
    ) -> Quote | None:
        """Exact-date lookup; with ``fallback`` the closest prior record within ``max_lookback`` days."""

        with self._guard("get_quote", asset_id=asset_id, date=day.isoformat()):
            if fallback:
                row = self._conn.execute(
                    f"""
                    SELECT {_SELECT_COLUMNS} FROM {QUOTES_TABLE.name}
                    WHERE asset_id = ? AND date <= ? AND date >= ?
                    ORDER BY date DESC
                    LIMIT 1
                    """,
                    [asset_id, day, day - timedelta(days=max_lookback)],
                ).fetchone()
            else:
                row = self._conn.execute(
                    f"SELECT {_SELECT_COLUMNS} FROM {QUOTES_TABLE.name} WHERE asset_id = ? AND date = ?",
                    [asset_id, day],
                ).fetchone()
        return _row_to_quote(row) if row else None

    def save_quote(self, quote: Quote) -> Quote:
        """Upsert ``quote`` by ``(asset_id, date)``."""

        with self._guard("save_quote", asset_id=quote.asset_id, date=quote.date.isoformat()):
            self._conn.execute(
                f"""
                INSERT OR REPLACE INTO {QUOTES_TABLE.name}
                    ({_SELECT_COLUMNS}, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                [
                    quote.asset_id,
                    quote.date,
                    quote.timestamp,
                    quote.close,
                    quote.change_pct,
                    json.dumps(quote.components),
                    quote.source.value,
                    datetime.now(UTC).replace(tzinfo=None),
                ],
            )
        logger.debug("quote saved", asset_id=quote.asset_id, date=quote.date, source=quote.source.value)
        return quote

    def history(self, asset_id: str, start: date, end: date) -> list[Quote]:
        with self._guard("history", asset_id=asset_id):
            rows = self._conn.execute(
                f"""
                SELECT {_SELECT_COLUMNS} FROM {QUOTES_TABLE.name}
                WHERE asset_id = ? AND date BETWEEN ? AND ?
                ORDER BY date
                """,
                [asset_id, start, end],
            ).fetchall()
        return [_row_to_quote(row) for row in rows]

    def quotes_for_date(self, day: date) -> dict[str, Quote]:
        with self._guard("quotes_for_date", date=day.isoformat()):
            rows = self._conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM {QUOTES_TABLE.name} WHERE date = ? ORDER BY asset_id",
                [day],
            ).fetchall()
        return {row[0]: _row_to_quote(row) for row in rows}

    def count(self) -> int:
        with self._guard("count"):
            row = self._conn.execute(f"SELECT COUNT(*) FROM {QUOTES_TABLE.name}").fetchone()
        return int(row[0]) if row else 0

    def close(self) -> None:
        self._conn.close()


__all__ = ["DEFAULT_MAX_LOOKBACK", "DuckDBQuoteStore", "InMemoryQuoteStore", "QuoteStore"]
