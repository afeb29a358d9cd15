from __future__ import annotations

from datetime import date, timedelta

import pytest

from ucsindex.core.data.repositories import InMemoryQuoteStore
from ucsindex.core.exceptions import ConfigurationMissingError, InvalidDateError, NotComputableError
from ucsindex.core.models import Quote
from ucsindex.core.models.quote import QuoteSource
from ucsindex.core.services import CalculationService
from ucsindex.core.services.calculation import parse_date, parse_target_date
from ucsindex.core.services.formulas import vus
from ucsindex.core.services.normalizer import rent_media_boi, rent_media_milho, rent_media_soja

SATURDAY = date(2024, 3, 9)
FUTURE_MONDAY = date(2024, 3, 11)
NEW_YEAR = date(2024, 1, 1)


def _quotes(day: date, prices: dict[str, float]) -> list[Quote]:
    return [Quote(asset_id=asset_id, date=day, close=close) for asset_id, close in prices.items()]


class TestDateParsing:
    @pytest.mark.parametrize("raw", ["2024-03-05", "05/03/2024", "05-03-2024", " 2024-03-05 "])
    def test_accepted_formats(self, raw: str) -> None:
        assert parse_date(raw) == date(2024, 3, 5)

    def test_invalid_date_raises(self) -> None:
        with pytest.raises(InvalidDateError) as excinfo:
            parse_date("2024-13-01")
        assert excinfo.value.raw_value == "2024-13-01"

    def test_lenient_parsing_falls_back_to_today(self, today: date) -> None:
        assert parse_target_date("not-a-date", clock=lambda: today) == today
        assert parse_target_date(None, clock=lambda: today) == today
        assert parse_target_date("", clock=lambda: today) == today
        assert parse_target_date(date(2020, 1, 2), clock=lambda: today) == date(2020, 1, 2)


class TestCompute:
    def test_computes_composite_from_base_quotes(self, calculation, business_day, base_prices) -> None:
        result = calculation.compute("vus", business_day)

        expected = vus(
            rent_media_boi(base_prices["boi_gordo"]),
            rent_media_milho(base_prices["milho"]),
            rent_media_soja(base_prices["soja"], base_prices["usd"]),
        )
        assert result.close == pytest.approx(expected)
        assert result.cached is False
        assert result.persisted is True
        assert set(result.components) == {"boi_gordo", "milho", "soja", "usd"}

    def test_variation_against_previous_calendar_day(self, calculation, business_day, previous_day) -> None:
        current = calculation.snapshot(business_day)["ucs"]
        previous = calculation.snapshot(previous_day)["ucs"]

        result = calculation.compute("ucs", business_day)

        assert result.close == pytest.approx(current)
        assert result.previous_close == pytest.approx(previous)
        assert result.absolute_change == pytest.approx(current - previous)
        assert result.change_pct == pytest.approx((current - previous) / previous * 100)
        assert result.components == {"pdm": pytest.approx(calculation.snapshot(business_day)["pdm"])}

    def test_index_chain_relations(self, calculation, business_day) -> None:
        values = calculation.snapshot(business_day)

        assert values["ucs"] == pytest.approx(values["pdm"] / 900 / 2)
        assert values["ucs_ase"] == pytest.approx(values["ucs"] * 2)
        assert values["ucs_ase_usd"] == pytest.approx(values["ucs_ase"] / values["usd"])
        assert values["ucs_ase_eur"] == pytest.approx(values["ucs_ase"] / values["eur"])

    def test_persists_computed_values(self, calculation, store, business_day) -> None:
        calculation.compute("ucs_ase", business_day)

        for asset_id in ("ch2o_agua", "custo_agua", "pdm", "ucs", "ucs_ase"):
            stored = store.get_quote(asset_id, business_day)
            assert stored is not None
            assert stored.source is QuoteSource.CALCULATED
            assert stored.close > 0

        # not on the path of ucs_ase
        assert store.get_quote("vus", business_day) is None

    def test_second_call_is_idempotent(self, calculation, store, business_day) -> None:
        first = calculation.compute("ucs", business_day)
        writes = store.writes

        second = calculation.compute("ucs", business_day)

        assert store.writes == writes
        assert second.cached is True
        assert second.persisted is False
        assert second.close == pytest.approx(first.close)
        assert second.change_pct == pytest.approx(first.change_pct)

    def test_stored_value_is_authoritative(self, calculation, store, business_day) -> None:
        store.save_quote(Quote(asset_id="ucs", date=business_day, close=123.0, change_pct=1.5))

        result = calculation.compute("ucs", business_day)

        assert result.close == 123.0
        assert result.cached is True

    def test_weekend_values_are_not_persisted(self, base_prices, graph, calendar, today) -> None:
        store = InMemoryQuoteStore(_quotes(SATURDAY, base_prices))
        service = CalculationService(store, graph, calendar, clock=lambda: SATURDAY)

        result = service.compute("ucs", SATURDAY)

        assert result.close > 0
        assert result.persisted is False
        assert store.writes == 0
        assert store.get_quote("ucs", SATURDAY) is None

    def test_future_values_are_not_persisted(self, base_prices, graph, calendar, today) -> None:
        store = InMemoryQuoteStore(_quotes(FUTURE_MONDAY, base_prices))
        service = CalculationService(store, graph, calendar, clock=lambda: today)

        result = service.compute("pdm", FUTURE_MONDAY)

        assert result.close > 0
        assert result.persisted is False
        assert store.writes == 0

    def test_holiday_values_are_not_persisted(self, base_prices, graph, calendar, today) -> None:
        store = InMemoryQuoteStore(_quotes(NEW_YEAR, base_prices))
        service = CalculationService(store, graph, calendar, clock=lambda: today)

        result = service.compute("ucs", NEW_YEAR)

        assert result.close > 0
        assert result.persisted is False
        assert store.writes == 0
        assert store.get_quote("ucs", NEW_YEAR) is None

    def test_zero_record_on_weekend_is_left_untouched(self, base_prices, graph, calendar) -> None:
        friday = SATURDAY - timedelta(days=1)
        placeholder = Quote(asset_id="vmad", date=SATURDAY, close=0.0)
        store = InMemoryQuoteStore(
            _quotes(SATURDAY, base_prices) + _quotes(friday, {**base_prices, "madeira": 80.0}) + [placeholder]
        )
        service = CalculationService(store, graph, calendar, clock=lambda: SATURDAY)

        result = service.compute("vmad", SATURDAY)

        assert result.close > 0
        assert result.change_pct == pytest.approx(25.0)
        assert result.persisted is False
        assert store.get_quote("vmad", SATURDAY) == placeholder

    def test_missing_base_quote_is_not_computable(self, base_prices, graph, calendar, business_day, today) -> None:
        prices = {**base_prices, "milho": 0.0}
        store = InMemoryQuoteStore(_quotes(business_day, prices))
        service = CalculationService(store, graph, calendar, clock=lambda: today)

        with pytest.raises(NotComputableError) as excinfo:
            service.compute("vus", business_day)

        assert excinfo.value.missing == ["milho"]
        assert store.get_quote("vus", business_day) is None

        with pytest.raises(NotComputableError) as excinfo:
            service.compute("ucs", business_day)
        assert excinfo.value.missing == ["pdm"]

    def test_quoted_asset_without_quote_is_not_computable(self, calculation, today) -> None:
        with pytest.raises(NotComputableError):
            calculation.compute("soja", today)

    def test_unknown_asset(self, calculation, business_day) -> None:
        with pytest.raises(ConfigurationMissingError):
            calculation.compute("petroleo", business_day)

    def test_backfills_zero_variation(self, store, calculation, business_day, previous_day) -> None:
        store.save_quote(Quote(asset_id="ucs", date=previous_day, close=100.0))
        store.save_quote(Quote(asset_id="ucs", date=business_day, close=110.0, change_pct=0.0))

        result = calculation.compute("ucs", business_day)

        assert result.change_pct == pytest.approx(10.0)
        assert result.persisted is True
        assert store.get_quote("ucs", business_day).change_pct == pytest.approx(10.0)

    def test_does_not_backfill_without_previous(self, base_prices, graph, calendar, business_day, today) -> None:
        store = InMemoryQuoteStore(_quotes(business_day, base_prices))
        service = CalculationService(store, graph, calendar, clock=lambda: today)

        result = service.compute("soja", business_day)

        assert result.change_pct == 0.0
        assert result.previous_close is None
        assert store.writes == 0


def test_snapshot_never_writes(calculation, store, business_day) -> None:
    values = calculation.snapshot(business_day)

    assert values["ucs_ase"] > 0
    assert store.writes == 0


def test_snapshot_subset(calculation, business_day) -> None:
    values = calculation.snapshot(business_day, ["ucs", "soja"])

    assert list(values) == ["soja", "ucs"]
