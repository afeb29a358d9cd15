"""Calculation orchestrator: fetch, compute, persist and compare with the prior day."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from ucsindex.core.data.repositories import QuoteStore
from ucsindex.core.exceptions import ConfigurationMissingError, InvalidDateError, NotComputableError
from ucsindex.core.logging import get_logger, log_context
from ucsindex.core.models.quote import Quote, QuoteSource
from ucsindex.core.models.results import CalculationResult
from ucsindex.core.services.calendars import BusinessDayCalendar
from ucsindex.core.services.dependencies import DependencyGraph, default_asset_graph
from ucsindex.core.services.formulas import evaluate

logger = get_logger(__name__)

_DATE_FORMATS = ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y")


def parse_date(raw: str) -> date:
    """Parse ISO or ``dd/mm/yyyy`` dates, raising :class:`InvalidDateError`."""

    value = raw.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    raise InvalidDateError(raw)


def parse_target_date(raw: str | date | None, clock: Callable[[], date] = date.today) -> date:
    """Lenient parsing for read paths: unparsable input falls back to today with a warning."""

    if isinstance(raw, date):
        return raw
    if raw is None or not raw.strip():
        return clock()
    try:
        return parse_date(raw)
    except InvalidDateError as exc:
        today = clock()
        logger.warning(
            "invalid date, using today",
            error_code=exc.code.value,
            raw_value=raw,
            substituted=today.isoformat(),
        )
        return today


@dataclass
class _Resolution:
    close: float
    components: dict[str, float] = field(default_factory=dict)
    # record backing ``close``; None when the value was only computed in memory
    stored: Quote | None = None
    cached: bool = False
    persisted: bool = False


@dataclass
class _Run:
    """Per-call memo of ``(asset_id, date)`` resolutions."""

    persist: bool
    memo: dict[tuple[str, date], _Resolution] = field(default_factory=dict)


class CalculationService:
    """Resolve the value of any asset for a date, computing and persisting on demand.

    Stored quotes with a positive close are authoritative and returned
    unchanged. Missing values are computed from their dependencies for the
    same date; the result is written back only when it is positive, the date is
    not in the future and it is a business day.
    """

    def __init__(
        self,
        store: QuoteStore,
        graph: DependencyGraph | None = None,
        calendar: BusinessDayCalendar | None = None,
        *,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self.store = store
        self.graph = graph or default_asset_graph()
        self.calendar = calendar or BusinessDayCalendar()
        self.clock = clock

    def can_persist(self, day: date) -> bool:
        return day <= self.clock() and self.calendar.is_business_day(day)

    def compute(self, asset_id: str, target_date: date) -> CalculationResult:
        node = self.graph.get(asset_id)
        if node is None:
            raise ConfigurationMissingError(asset_id)

        with log_context(asset_id=asset_id):
            run = _Run(persist=True)
            current = self._resolve(asset_id, target_date, run)
            if current.close <= 0:
                missing = [dep for dep in node.depends_on if self._resolve(dep, target_date, run).close <= 0]
                logger.info("asset not computable", date=target_date, missing=missing)
                raise NotComputableError(asset_id, target_date, missing=missing)

            previous_day = target_date - timedelta(days=1)
            previous = self._resolve(asset_id, previous_day, run).close
            change_pct = 0.0
            absolute_change = 0.0
            if previous > 0:
                absolute_change = current.close - previous
                change_pct = absolute_change / previous * 100

            persisted = current.persisted
            stored = current.stored
            if stored is not None and stored.change_pct == 0 and change_pct != 0:
                self.store.save_quote(stored.model_copy(update={"change_pct": change_pct}))
                persisted = True
                logger.debug("variation backfilled", date=target_date, change_pct=change_pct)

            logger.info(
                "asset resolved",
                date=target_date,
                close=current.close,
                cached=current.cached,
                persisted=persisted,
            )
            return CalculationResult(
                asset_id=asset_id,
                date=target_date,
                close=current.close,
                change_pct=change_pct,
                absolute_change=absolute_change,
                previous_close=previous if previous > 0 else None,
                components=dict(current.components),
                persisted=persisted,
                cached=current.cached,
            )

    def snapshot(self, target_date: date, asset_ids: Iterable[str] | None = None) -> dict[str, float]:
        """Value of every asset for ``target_date`` without writing anything."""

        run = _Run(persist=False)
        order = self.graph.calculation_order(asset_ids)
        return {asset_id: self._resolve(asset_id, target_date, run).close for asset_id in order}

    def _resolve(self, asset_id: str, day: date, run: _Run) -> _Resolution:
        key = (asset_id, day)
        if key in run.memo:
            return run.memo[key]

        node = self.graph.get(asset_id)
        if node is None:
            logger.warning("unknown dependency treated as zero", dependency=asset_id)
            resolution = _Resolution(0.0)
            run.memo[key] = resolution
            return resolution

        stored = self.store.get_quote(asset_id, day)
        if stored is not None and stored.is_usable:
            resolution = _Resolution(stored.close, dict(stored.components), stored, cached=True)
        elif node.is_quoted:
            resolution = _Resolution(0.0)
        else:
            values = {dep: self._resolve(dep, day, run).close for dep in node.depends_on}
            close = evaluate(node, values)
            resolution = _Resolution(close, values)
            if run.persist and close > 0 and self.can_persist(day):
                resolution.stored = self.store.save_quote(
                    Quote(
                        asset_id=asset_id,
                        date=day,
                        close=close,
                        change_pct=0.0,
                        components=values,
                        source=QuoteSource.CALCULATED,
                    )
                )
                resolution.persisted = True

        run.memo[key] = resolution
        return resolution


__all__ = ["CalculationService", "parse_date", "parse_target_date"]
