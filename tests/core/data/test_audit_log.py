from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from ucsindex.core.data.repositories import DuckDBAuditLog, InMemoryAuditLog, query_entries
from ucsindex.core.models.results import AuditEntry

CREATED = datetime(2024, 3, 5, 10, 0, tzinfo=UTC)


def _entry(asset_id: str, minutes: int = 0, target_date: date = date(2024, 3, 5)) -> AuditEntry:
    return AuditEntry(
        asset_id=asset_id,
        asset_name=asset_id.title(),
        old_value=20.0,
        new_value=25.0,
        user="ana",
        target_date=target_date,
        affected_assets=("vus", "ucs"),
        created_at=CREATED + timedelta(minutes=minutes),
        details="edit",
    )


@pytest.fixture(params=["memory", "duckdb"])
def audit_log(request, duckdb_conn):
    if request.param == "memory":
        return InMemoryAuditLog()
    return DuckDBAuditLog(duckdb_conn)


def test_entries_are_newest_first(audit_log) -> None:
    first_id = audit_log.append(_entry("soja"))
    second_id = audit_log.append(_entry("milho", minutes=5))

    entries = audit_log.entries()

    assert first_id != second_id
    assert [entry.asset_id for entry in entries] == ["milho", "soja"]
    assert entries[0].affected_assets == ("vus", "ucs")
    assert entries[0].user == "ana"
    assert entries[0].target_date == date(2024, 3, 5)


def test_entries_filter_by_asset_and_limit(audit_log) -> None:
    for minutes in range(3):
        audit_log.append(_entry("soja", minutes))
    audit_log.append(_entry("usd", 10))

    assert len(audit_log.entries(asset_id="soja")) == 3
    assert len(audit_log.entries(limit=2)) == 2
    assert audit_log.entries(asset_id="eur") == []


def test_entries_for_date(audit_log) -> None:
    audit_log.append(_entry("soja", 0))
    audit_log.append(_entry("milho", 5, target_date=date(2024, 3, 4)))
    audit_log.append(_entry("usd", 10))

    entries = audit_log.entries_for_date(date(2024, 3, 5))

    assert [entry.asset_id for entry in entries] == ["usd", "soja"]
    assert audit_log.entries_for_date(date(2024, 3, 6)) == []


def test_entries_for_period_newest_date_first(audit_log) -> None:
    audit_log.append(_entry("soja", 30, target_date=date(2024, 3, 1)))
    audit_log.append(_entry("milho", 0, target_date=date(2024, 3, 4)))
    audit_log.append(_entry("usd", 10, target_date=date(2024, 3, 4)))
    audit_log.append(_entry("eur", 20, target_date=date(2024, 3, 8)))

    entries = audit_log.entries_for_period(date(2024, 3, 1), date(2024, 3, 5))

    assert [entry.asset_id for entry in entries] == ["usd", "milho", "soja"]
    assert len(audit_log.entries_for_period(date(2024, 3, 1), date(2024, 3, 31), limit=2)) == 2


def test_query_entries_dispatch(audit_log) -> None:
    audit_log.append(_entry("soja", 0))
    audit_log.append(_entry("usd", 5))
    audit_log.append(_entry("soja", 10, target_date=date(2024, 3, 4)))

    by_date = query_entries(audit_log, target_date=date(2024, 3, 5), asset_id="soja")
    by_period = query_entries(audit_log, start=date(2024, 3, 4), end=date(2024, 3, 5))
    latest = query_entries(audit_log, asset_id="soja", limit=1)

    assert [entry.target_date for entry in by_date] == [date(2024, 3, 5)]
    assert [entry.asset_id for entry in by_period] == ["usd", "soja", "soja"]
    assert [entry.target_date for entry in latest] == [date(2024, 3, 4)]


@pytest.mark.parametrize(
    "bounds",
    [{"start": date(2024, 3, 1)}, {"end": date(2024, 3, 1)}, {"start": date(2024, 3, 5), "end": date(2024, 3, 1)}],
)
def test_query_entries_rejects_bad_period(bounds) -> None:
    with pytest.raises(ValueError):
        query_entries(InMemoryAuditLog(), **bounds)
