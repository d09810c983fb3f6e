"""Tests for structured logging with trace propagation."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest
from loguru import logger
from pydantic import ValidationError

from gitpulse.core.config import LoggingConfig
from gitpulse.core.data.normalization import normalize_snapshots
from gitpulse.core.logging import LogConfig, StructuredLogger, configure_logging, get_logger, log_duration


def _read_records(stream: io.StringIO) -> list[dict[str, object]]:
    stream.seek(0)
    lines = [line for line in stream.getvalue().splitlines() if line.strip()]
    return [json.loads(line) for line in lines]


def teardown_function() -> None:
    configure_logging(level="WARNING")


def test_structured_log_contains_trace_and_context() -> None:
    buffer = io.StringIO()
    config = LogConfig(console_stream=buffer, console_output=True)
    structured = StructuredLogger(config)

    with structured.context(trace_id="trace-123", repo="octo/demo", request_id="req-42"):
        structured.logger.info("dashboard built", dataset="releases")

    records = _read_records(buffer)
    assert len(records) == 1
    record = records[0]
    assert record["trace_id"] == "trace-123"
    assert record["repo"] == "octo/demo"
    assert record["dataset"] == "releases"
    assert record["level"] == "INFO"
    assert record["context"]["request_id"] == "req-42"


def test_trace_id_propagates_within_context() -> None:
    buffer = io.StringIO()
    structured = StructuredLogger(LogConfig(console_stream=buffer, console_output=True))

    with structured.context() as trace_id:
        structured.logger.info("first event")
        structured.logger.info("second event")

    structured.logger.info("outside context")

    records = _read_records(buffer)
    assert len(records) == 3
    assert records[0]["trace_id"] == records[1]["trace_id"]
    assert records[0]["trace_id"] == trace_id
    assert records[2]["trace_id"] != records[0]["trace_id"]


def test_trace_id_generated_when_missing() -> None:
    buffer = io.StringIO()
    structured = StructuredLogger(LogConfig(console_stream=buffer, console_output=True))

    structured.logger.info("single message")

    records = _read_records(buffer)
    assert len(records) == 1
    trace_id = records[0]["trace_id"]
    assert isinstance(trace_id, str)
    assert len(trace_id) == 32
    assert all(character in "0123456789abcdef" for character in trace_id)


def test_level_filters_records() -> None:
    buffer = io.StringIO()
    structured = StructuredLogger(LogConfig(level="WARNING", console_stream=buffer))

    structured.logger.info("hidden")
    structured.logger.warning("shown")

    records = _read_records(buffer)
    assert [record["message"] for record in records] == ["shown"]


def test_skipped_rows_are_logged_as_warnings() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(level="WARNING", console_stream=buffer))

    normalize_snapshots([{"date": "not-a-date", "stars": "1"}, {"date": "2024-01-01", "stars": "2"}])

    records = _read_records(buffer)
    assert len(records) == 1
    assert records[0]["level"] == "WARNING"


def test_log_duration_records_elapsed_time() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(level="DEBUG", console_stream=buffer))

    with log_duration("Fetched dataset", dataset="packages"):
        pass

    records = _read_records(buffer)
    assert records[0]["message"] == "Fetched dataset"
    assert records[0]["dataset"] == "packages"
    assert records[0]["context"]["elapsed_ms"] >= 0


def test_log_duration_skips_failed_blocks() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(level="DEBUG", console_stream=buffer))

    with pytest.raises(RuntimeError):
        with log_duration("Fetched dataset"):
            raise RuntimeError("boom")

    assert _read_records(buffer) == []


def test_config_from_settings() -> None:
    config = LogConfig.from_settings(LoggingConfig(level="debug", file="logs/gitpulse.jsonl"))

    assert config.level == "DEBUG"
    assert config.file_output is True
    assert LogConfig.from_settings(LoggingConfig(), level="error").level == "ERROR"


def test_unknown_level_rejected() -> None:
    with pytest.raises(ValidationError):
        LogConfig(level="LOUD")


def test_file_sink_appends_json_lines(tmp_path: Path) -> None:
    path = tmp_path / "logs" / "gitpulse.jsonl"
    configure_logging(level="INFO", console_output=False, file_path=str(path))

    logger.info("written to file", repo="octo/demo")

    record = json.loads(path.read_text(encoding="utf-8").splitlines()[0])
    assert record["repo"] == "octo/demo"


def test_named_logger_records_its_name() -> None:
    buffer = io.StringIO()
    StructuredLogger(LogConfig(console_stream=buffer))

    get_logger("gitpulse.core.services.dedup").info("named")

    assert _read_records(buffer)[0]["context"]["logger_name"] == "gitpulse.core.services.dedup"
