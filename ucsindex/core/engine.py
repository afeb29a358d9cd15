"""Composition root wiring configuration, storage and services together."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date

from ucsindex.core.config import EngineConfig, get_default_config
from ucsindex.core.data.cache import ThreadSafeInMemoryCache
from ucsindex.core.data.repositories import AuditLog, DuckDBAuditLog, DuckDBQuoteStore, QuoteStore
from ucsindex.core.data.storage import DuckDBFactoryConfig, UCSIndexDuckDBFactory
from ucsindex.core.logging import configure_logging, get_logger
from ucsindex.core.services import (
    AssetConfigService,
    BusinessDayCalendar,
    CalculationService,
    DependencyGraph,
    ImpactSimulationService,
    RecalculationService,
    default_asset_graph,
)

logger = get_logger(__name__)


@dataclass
class UCSIndexEngine:
    """Services sharing one graph, calendar and store."""

    config: EngineConfig
    graph: DependencyGraph
    calendar: BusinessDayCalendar
    store: QuoteStore
    audit_log: AuditLog
    calculation: CalculationService
    simulation: ImpactSimulationService
    recalculation: RecalculationService
    assets: AssetConfigService
    # serializes use of the shared DuckDB connection across worker threads
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def close(self) -> None:
        close = getattr(self.store, "close", None)
        if close is not None:
            close()


def build_services(
    config: EngineConfig,
    store: QuoteStore,
    audit_log: AuditLog,
    *,
    graph: DependencyGraph | None = None,
    clock: Callable[[], date] = date.today,
) -> UCSIndexEngine:
    """Assemble the services around an existing store and audit log."""

    graph = graph or default_asset_graph()
    calendar = BusinessDayCalendar.from_iso_dates(config.calculation.extra_holidays)
    calculation = CalculationService(store, graph, calendar, clock=clock)
    cache = None
    if config.cache.enabled:
        cache = ThreadSafeInMemoryCache(max_size=config.cache.max_size, default_ttl=config.cache.ttl_seconds)
    return UCSIndexEngine(
        config=config,
        graph=graph,
        calendar=calendar,
        store=store,
        audit_log=audit_log,
        calculation=calculation,
        simulation=ImpactSimulationService(calculation, threshold_pct=config.calculation.impact_threshold_pct),
        recalculation=RecalculationService(calculation, audit_log),
        assets=AssetConfigService(graph, cache),
    )


def build_engine(config: EngineConfig | None = None, *, configure_logs: bool = False) -> UCSIndexEngine:
    """Open the DuckDB database named in ``config`` and assemble the services."""

    config = config or get_default_config()
    if configure_logs:
        configure_logging(
            level=config.logging.level,
            file_output=bool(config.logging.file),
            file_path=config.logging.file,
        )
    factory = UCSIndexDuckDBFactory(
        DuckDBFactoryConfig(database=config.storage.database, pragmas={"threads": config.storage.threads})
    )
    conn = factory.create_connection()
    logger.info("engine started", database=str(config.storage.database))
    return build_services(config, DuckDBQuoteStore(conn), DuckDBAuditLog(conn))


__all__ = ["UCSIndexEngine", "build_engine", "build_services"]
