from __future__ import annotations

from ucsindex.cli.constants import VALIDATION_EXIT_CODE
from ucsindex.cli.main import app

BASE_ARGS = ["--format", "jsonl", "--log-level", "ERROR"]


def _recalc(runner, *args: str) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "recalc", *args])
    assert result.exit_code == 0, result.output


def test_audit_for_date(runner, cli_engine, jsonl_rows) -> None:
    _recalc(runner, "soja=25", "usd=5.2", "--date", "2024-03-05", "--user", "ana")
    _recalc(runner, "milho=70", "--date", "2024-03-04", "--user", "rui")

    result = runner.invoke(app, [*BASE_ARGS, "audit", "--date", "05/03/2024"])

    assert result.exit_code == 0, result.output
    rows = jsonl_rows(result.stdout)
    assert {row["asset"] for row in rows} == {"soja", "usd"}
    assert {row["user"] for row in rows} == {"ana"}
    assert all(row["target_date"] == "2024-03-05" for row in rows)
    assert "ucs_ase" in rows[0]["affected_assets"]


def test_audit_for_period_and_asset(runner, cli_engine, jsonl_rows) -> None:
    _recalc(runner, "soja=25", "--date", "2024-03-05")
    _recalc(runner, "soja=24", "--date", "2024-03-04")
    _recalc(runner, "milho=70", "--date", "2024-03-04")

    result = runner.invoke(
        app, [*BASE_ARGS, "audit", "--from", "2024-03-01", "--to", "2024-03-05", "--asset", "soja"]
    )

    assert result.exit_code == 0, result.output
    rows = jsonl_rows(result.stdout)
    assert [row["target_date"] for row in rows] == ["2024-03-05", "2024-03-04"]
    assert [row["new_value"] for row in rows] == [25.0, 24.0]


def test_audit_rejects_open_period(runner, cli_engine, error_payload) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "audit", "--from", "2024-03-01"])

    assert result.exit_code == VALIDATION_EXIT_CODE
    assert error_payload(result.output)["code"] == "VALIDATION_ERROR"
