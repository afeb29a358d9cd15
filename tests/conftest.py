"""Shared fixtures for the ucsindex test suite."""

from __future__ import annotations

from datetime import date, timedelta

import duckdb
import pytest

from ucsindex.core.config import EngineConfig
from ucsindex.core.data.repositories import DuckDBAuditLog, DuckDBQuoteStore, InMemoryAuditLog, InMemoryQuoteStore
from ucsindex.core.engine import UCSIndexEngine, build_services
from ucsindex.core.models import Quote
from ucsindex.core.services import BusinessDayCalendar, CalculationService, DependencyGraph, default_asset_graph

# Tuesday, not a holiday in 2024 (Carnival fell on 12-13 February).
BUSINESS_DAY = date(2024, 3, 5)
PREVIOUS_DAY = BUSINESS_DAY - timedelta(days=1)
TODAY = date(2024, 3, 8)

BASE_PRICES: dict[str, float] = {
    "usd": 5.0,
    "eur": 5.5,
    "soja": 20.0,
    "milho": 60.0,
    "boi_gordo": 230.0,
    "madeira": 100.0,
    "carbono": 70.0,
}

PREVIOUS_PRICES: dict[str, float] = {**BASE_PRICES, "soja": 19.0, "boi_gordo": 225.0}


def seed_quotes(day: date, prices: dict[str, float]) -> list[Quote]:
    return [Quote(asset_id=asset_id, date=day, close=close) for asset_id, close in prices.items()]


@pytest.fixture()
def graph() -> DependencyGraph:
    return default_asset_graph()


@pytest.fixture()
def calendar() -> BusinessDayCalendar:
    return BusinessDayCalendar()


@pytest.fixture()
def store() -> InMemoryQuoteStore:
    return InMemoryQuoteStore(seed_quotes(BUSINESS_DAY, BASE_PRICES) + seed_quotes(PREVIOUS_DAY, PREVIOUS_PRICES))


@pytest.fixture()
def calculation(store: InMemoryQuoteStore, graph: DependencyGraph, calendar: BusinessDayCalendar) -> CalculationService:
    return CalculationService(store, graph, calendar, clock=lambda: TODAY)


@pytest.fixture()
def duckdb_conn() -> duckdb.DuckDBPyConnection:
    conn = duckdb.connect(":memory:")
    yield conn
    conn.close()


@pytest.fixture()
def duckdb_store(duckdb_conn: duckdb.DuckDBPyConnection) -> DuckDBQuoteStore:
    return DuckDBQuoteStore(duckdb_conn)


@pytest.fixture()
def engine(store: InMemoryQuoteStore) -> UCSIndexEngine:
    return build_services(EngineConfig(), store, InMemoryAuditLog(), clock=lambda: TODAY)


@pytest.fixture()
def duckdb_engine(duckdb_conn: duckdb.DuckDBPyConnection) -> UCSIndexEngine:
    quotes = DuckDBQuoteStore(duckdb_conn)
    for quote in seed_quotes(BUSINESS_DAY, BASE_PRICES) + seed_quotes(PREVIOUS_DAY, PREVIOUS_PRICES):
        quotes.save_quote(quote)
    return build_services(EngineConfig(), quotes, DuckDBAuditLog(duckdb_conn), clock=lambda: TODAY)


@pytest.fixture()
def business_day() -> date:
    return BUSINESS_DAY


@pytest.fixture()
def previous_day() -> date:
    return PREVIOUS_DAY


@pytest.fixture()
def today() -> date:
    return TODAY


@pytest.fixture()
def base_prices() -> dict[str, float]:
    return dict(BASE_PRICES)


@pytest.fixture()
def previous_prices() -> dict[str, float]:
    return dict(PREVIOUS_PRICES)
