"""Tests for structured logging."""

from __future__ import annotations

import json
import logging

import pytest
from rich.logging import RichHandler

from shared.logger import ScopeLogger, configure_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    configure_logging(console_output=False)


def test_names_are_scoped():
    log = ScopeLogger("collectors.resolver")
    assert log.underlying.name == "airscope.collectors.resolver"
    assert log.tool_name == "resolver"
    assert ScopeLogger("airscope.core").underlying.name == "airscope.core"


def test_console_handler_is_rich():
    root = configure_logging(log_level="debug")
    assert root.level == logging.DEBUG
    assert any(isinstance(h, RichHandler) for h in root.handlers)


def test_reconfigure_replaces_handlers():
    configure_logging()
    root = configure_logging(console_output=False)
    assert [type(h) for h in root.handlers] == [logging.NullHandler]


def test_json_file_records(tmp_path):
    log_file = tmp_path / "logs" / "airscope.jsonl"
    configure_logging(
        log_level="DEBUG", log_file=log_file, json_logs=True, console_output=False
    )
    log = ScopeLogger("airscope.engine")
    with log.operation("snapshot"):
        log.info("built %d lists", 2, networks=7)
    log.warning("outside")

    for handler in logging.getLogger("airscope").handlers:
        handler.flush()
    lines = [json.loads(line) for line in log_file.read_text().splitlines()]

    assert lines[0]["message"] == "built 2 lists"
    assert lines[0]["tool_name"] == "engine"
    assert lines[0]["operation"] == "snapshot"
    assert lines[0]["extra"] == {"networks": 7}
    assert "operation" not in lines[1]
    assert lines[1]["level"] == "WARNING"


def test_timed_logs_completion(tmp_path):
    log_file = tmp_path / "airscope.log"
    configure_logging(log_level="INFO", log_file=log_file, console_output=False)
    log = ScopeLogger("airscope.engine")
    with log.timed("snapshot build") as timer:
        pass
    assert timer.elapsed >= 0

    for handler in logging.getLogger("airscope").handlers:
        handler.flush()
    assert "Completed: snapshot build" in log_file.read_text()
