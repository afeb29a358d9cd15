from __future__ import annotations

from ucsindex.cli.constants import VALIDATION_EXIT_CODE
from ucsindex.cli.main import app

BASE_ARGS = ["--format", "jsonl", "--log-level", "ERROR"]


def test_affected_assets(runner, cli_engine, jsonl_rows) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "graph", "affected", "carbono"])

    assert result.exit_code == 0, result.output
    rows = jsonl_rows(result.stdout)
    ids = [row["id"] for row in rows]
    assert ids[0] == "carbono_crs"
    assert "vus" not in ids
    assert [row["depth"] for row in rows] == sorted(row["depth"] for row in rows)


def test_calculation_order(runner, cli_engine, jsonl_rows) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "graph", "order"])

    assert result.exit_code == 0, result.output
    ids = [row["id"] for row in jsonl_rows(result.stdout)]
    assert len(ids) == 19
    assert ids.index("ch2o_agua") < ids.index("custo_agua") < ids.index("pdm") < ids.index("ucs")


def test_unknown_asset(runner, cli_engine, error_payload) -> None:
    result = runner.invoke(app, [*BASE_ARGS, "graph", "affected", "petroleo"])

    assert result.exit_code == VALIDATION_EXIT_CODE
    assert error_payload(result.output)["code"] == "CONFIGURATION_MISSING"
