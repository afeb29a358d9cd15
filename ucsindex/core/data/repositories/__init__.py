"""Quote and audit repositories."""

from ucsindex.core.data.repositories.audit import AuditLog, DuckDBAuditLog, InMemoryAuditLog, query_entries
from ucsindex.core.data.repositories.quotes import (
    DEFAULT_MAX_LOOKBACK,
    DuckDBQuoteStore,
    InMemoryQuoteStore,
    QuoteStore,
)

__all__ = [
    "AuditLog",
    "DEFAULT_MAX_LOOKBACK",
    "DuckDBAuditLog",
    "DuckDBQuoteStore",
    "InMemoryAuditLog",
    "InMemoryQuoteStore",
    "QuoteStore",
    "query_entries",
]
