from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from ucsindex.cli import audit, business_days, compute, graph, impact, recalc


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def cli_engine(engine, monkeypatch):
    """Point every command hook at the in-memory test engine."""

    monkeypatch.setattr(compute, "get_calculation_service", lambda: engine.calculation)
    monkeypatch.setattr(impact, "get_simulation_service", lambda: engine.simulation)
    monkeypatch.setattr(recalc, "get_recalculation_service", lambda: engine.recalculation)
    monkeypatch.setattr(graph, "get_dependency_graph", lambda: engine.graph)
    monkeypatch.setattr(business_days, "get_calendar", lambda: engine.calendar)
    monkeypatch.setattr(audit, "get_audit_log", lambda: engine.audit_log)
    return engine


@pytest.fixture()
def jsonl_rows():
    def parse(text: str) -> list[dict]:
        return [json.loads(line) for line in text.splitlines() if line.startswith("{")]

    return parse


@pytest.fixture()
def error_payload():
    def parse(text: str) -> dict:
        for line in text.splitlines():
            if line.startswith("{") and '"code"' in line:
                return json.loads(line)
        raise AssertionError(f"no error payload in output: {text!r}")

    return parse
