from __future__ import annotations

import ucsindex
from ucsindex.cli import audit, compute, engine as cli_engine_module, impact, recalc


def test_cli_hooks_use_the_package_engine(engine, monkeypatch) -> None:
    monkeypatch.setattr(ucsindex, "_engine", engine)

    assert cli_engine_module.get_engine() is ucsindex.get_engine() is engine
    assert compute.get_calculation_service() is engine.calculation
    assert impact.get_simulation_service() is engine.simulation
    assert recalc.get_recalculation_service() is engine.recalculation
    assert audit.get_audit_log() is engine.audit_log
