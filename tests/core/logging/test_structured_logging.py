from __future__ import annotations

import io
import json

from ucsindex.core.logging import LogConfig, StructuredLogger, configure_logging, current_trace_id, get_logger, log_context


def _capture(level: str = "INFO") -> io.StringIO:
    stream = io.StringIO()
    configure_logging(level=level, console_stream=stream)
    return stream


def _records(stream: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line.strip()]


def teardown_function() -> None:
    configure_logging()


def test_json_payload_carries_trace_and_asset() -> None:
    stream = _capture()
    logger = get_logger("tests")

    with log_context(trace_id="trace-1", asset_id="ucs", user="ana"):
        logger.info("asset resolved", close=1.5)

    (record,) = _records(stream)
    assert record["message"] == "asset resolved"
    assert record["level"] == "INFO"
    assert record["trace_id"] == "trace-1"
    assert record["asset_id"] == "ucs"
    assert record["context"]["user"] == "ana"
    assert record["context"]["close"] == 1.5
    assert record["context"]["logger_name"] == "tests"


def test_nested_context_inherits_trace() -> None:
    stream = _capture()
    logger = get_logger("tests")

    with log_context(trace_id="outer") as outer:
        with log_context(asset_id="soja") as inner:
            logger.info("nested")
            assert current_trace_id() == "outer"

    assert outer == inner == "outer"
    (record,) = _records(stream)
    assert record["trace_id"] == "outer"
    assert record["asset_id"] == "soja"


def test_level_filtering() -> None:
    stream = _capture(level="WARNING")
    logger = get_logger("tests")

    logger.info("hidden")
    logger.warning("shown", error_code="INVALID_DATE")

    records = _records(stream)
    assert [record["message"] for record in records] == ["shown"]
    assert records[0]["error_code"] == "INVALID_DATE"


def test_file_sink(tmp_path) -> None:
    path = tmp_path / "logs" / "ucsindex.log"
    configure_logging(level="INFO", console_output=False, file_output=True, file_path=str(path))

    get_logger("tests").info("to file")

    (record,) = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert record["message"] == "to file"


def test_structured_logger_reconfigures_and_binds_trace() -> None:
    first = io.StringIO()
    second = io.StringIO()
    structured = StructuredLogger(LogConfig(level="INFO", console_stream=first))

    with structured.context(trace_id="t-1", asset_id="pdm"):
        structured.logger.info("before")
    structured.configure(console_stream=second, level="ERROR")
    structured.logger.warning("dropped")
    structured.logger.error("after")

    (before,) = _records(first)
    (after,) = _records(second)
    assert before["trace_id"] == "t-1"
    assert before["asset_id"] == "pdm"
    assert after["message"] == "after"
