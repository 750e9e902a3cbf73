"""
swimlane-layout — unit tests for observability logging

File: tests/unit/observability/test_logging.py
Last updated: 2026-10-19

Purpose
- Validate JSON-lines and text logging set up through ``setup_logging`` and the
  correlation fields attached to every record.

What this test file should cover
- JSON line validity and structured extra fields.
- Correlation field propagation and reset.
- Text format rendering, file sink creation and handler replacement.

Functional requirements
- Offline operation.

Non-functional requirements
- Deterministic and non-flaky.
"""

from __future__ import annotations

import io
import json
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
import structlog

from swimlane_layout.observability.logging import (
    correlation_scope,
    get_correlation_context,
    reset_correlation_fields,
    set_correlation_fields,
    setup_logging,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def logger_name() -> Iterator[str]:
    name = f"swimlane_layout.tests.logging.{uuid4().hex}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def _lines(stream: io.StringIO) -> list[dict[str, object]]:
    return [json.loads(line) for line in stream.getvalue().splitlines()]


@pytest.mark.unit
def test_structlog_events_render_as_json_lines(logger_name: str) -> None:
    stream = io.StringIO()
    setup_logging({"log_level": "INFO"}, stream=stream, logger_name=logger_name)

    structlog.get_logger(logger_name).info("lane_recovered", lane="Farm", ratio=1.25)

    [event] = _lines(stream)
    assert event["level"] == "INFO"
    assert event["logger"] == logger_name
    assert event["message"] == "lane_recovered"
    assert event["fields"] == {"lane": "Farm", "ratio": 1.25}
    assert str(event["timestamp"]).endswith("Z")


@pytest.mark.unit
def test_level_filter_drops_debug_events(logger_name: str) -> None:
    stream = io.StringIO()
    setup_logging({"log_level": "WARNING"}, stream=stream, logger_name=logger_name)
    log = structlog.get_logger(logger_name)

    log.info("quiet")
    log.warning("loud")

    assert [event["message"] for event in _lines(stream)] == ["loud"]


@pytest.mark.unit
def test_correlation_fields_are_attached_inside_scope(logger_name: str) -> None:
    stream = io.StringIO()
    setup_logging(stream=stream, logger_name=logger_name)
    log = logging.getLogger(logger_name)

    with correlation_scope(build_id="build-abc", command="layout"):
        log.info("inside")
    log.info("outside")

    inside, outside = _lines(stream)
    assert inside["build_id"] == "build-abc"
    assert inside["command"] == "layout"
    assert "build_id" not in outside


@pytest.mark.unit
def test_text_format_appends_fields(logger_name: str) -> None:
    stream = io.StringIO()
    setup_logging({"log_format": "text"}, stream=stream, logger_name=logger_name)

    with correlation_scope(build_id="b1"):
        structlog.get_logger(logger_name).info("layout_built", nodes=3)

    line = stream.getvalue().strip()
    assert f"INFO {logger_name} layout_built" in line
    assert line.endswith('build_id="b1" nodes=3')


@pytest.mark.unit
def test_file_sink_is_created_on_demand(logger_name: str, tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "swimlane.log"
    setup_logging(
        {"log_path": str(log_path)}, stream=io.StringIO(), logger_name=logger_name
    )

    logging.getLogger(logger_name).warning("to file")
    for handler in logging.getLogger(logger_name).handlers:
        handler.flush()

    [line] = log_path.read_text(encoding="utf-8").splitlines()
    assert json.loads(line)["message"] == "to file"


@pytest.mark.unit
def test_setup_replaces_its_own_handlers(logger_name: str) -> None:
    first = io.StringIO()
    second = io.StringIO()
    setup_logging(stream=first, logger_name=logger_name)
    setup_logging(stream=second, logger_name=logger_name)

    logging.getLogger(logger_name).info("once")

    assert first.getvalue() == ""
    assert len(_lines(second)) == 1


@pytest.mark.unit
def test_unknown_level_is_rejected(logger_name: str) -> None:
    with pytest.raises(ValueError, match="unsupported logging level"):
        setup_logging({"log_level": "LOUD"}, stream=io.StringIO(), logger_name=logger_name)


@pytest.mark.unit
def test_correlation_fields_validate_and_reset() -> None:
    token = set_correlation_fields(build_id="b1")
    try:
        assert get_correlation_context() == {"build_id": "b1"}
        inner = set_correlation_fields(build_id=None)
        assert get_correlation_context() == {}
        reset_correlation_fields(inner)
        with pytest.raises(ValueError, match="must not be empty"):
            set_correlation_fields(build_id="  ")
    finally:
        reset_correlation_fields(token)

    assert get_correlation_context() == {}
