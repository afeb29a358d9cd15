from __future__ import annotations

import pytest

from ucsindex.cli.constants import NOT_COMPUTABLE_EXIT_CODE, VALIDATION_EXIT_CODE
from ucsindex.cli.main import app

BASE_ARGS = ["--format", "jsonl", "--log-level", "ERROR"]


def test_compute_jsonl(runner, cli_engine, jsonl_rows) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "compute", "ucs", "vus", "--date", "05/03/2024"])

    assert result.exit_code == 0, result.output
    rows = jsonl_rows(result.stdout)
    assert [row["asset"] for row in rows] == ["ucs", "vus"]
    assert rows[0]["date"] == "2024-03-05"
    assert rows[0]["price"] > 0
    assert rows[0]["persisted"] is True
    assert rows[0]["previous_close"] > 0


def test_compute_components(runner, cli_engine, jsonl_rows) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "compute", "pdm", "--date", "2024-03-05", "--components"])

    assert result.exit_code == 0, result.output
    rows = jsonl_rows(result.stdout)
    assert {row["component"] for row in rows} == {"ch2o_agua", "custo_agua"}
    assert all(row["asset"] == "pdm" for row in rows)


def test_compute_not_computable_exit_code(runner, cli_engine, error_payload) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "compute", "ucs", "--date", "2024-03-08"])

    assert result.exit_code == NOT_COMPUTABLE_EXIT_CODE
    payload = error_payload(result.output)
    assert payload["code"] == "NOT_COMPUTABLE"
    assert payload["details"]["missing"] == ["pdm"]


def test_compute_unknown_asset(runner, cli_engine, error_payload) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "compute", "petroleo", "--date", "2024-03-05"])

    assert result.exit_code == VALIDATION_EXIT_CODE
    assert error_payload(result.output)["code"] == "CONFIGURATION_MISSING"


def test_table_output(runner, cli_engine) -> None:
    result = runner.invoke(app, ["--no-color", "compute", "ucs_ase", "--date", "2024-03-05"])

    assert result.exit_code == 0, result.output
    assert result.stdout.strip()
    assert not result.stdout.lstrip().startswith("{")


@pytest.mark.parametrize("fmt", ["xml", "csv"])
def test_rejects_unknown_format(runner, cli_engine, fmt: str) -> None:
    result = runner.invoke(app, ["--format", fmt, "compute", "ucs"])

    assert result.exit_code != 0


def test_output_file(runner, cli_engine, tmp_path, jsonl_rows) -> None:
    target = tmp_path / "out.jsonl"

    result = runner.invoke(
        app, ["--format", "jsonl", "--output", str(target), "compute", "soja", "--date", "2024-03-05"]
    )

    assert result.exit_code == 0, result.output
    (row,) = jsonl_rows(target.read_text(encoding="utf-8"))
    assert row["price"] == 20.0
    assert row["cached"] is True
