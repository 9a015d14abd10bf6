"""Unit tests for structlog configuration and request-context binding."""
from __future__ import annotations

import json
import logging
from typing import Any, Iterator

import pytest
import structlog

from campus_search.observability.logging import (
    JsonLoggerFactory,
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    yield
    clear_request_context()
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(logging.WARNING)


def _lines(err: str) -> list[dict[str, Any]]:
    return [json.loads(line) for line in err.splitlines() if line.strip()]


class TestJsonLoggerFactory:
    def test_json_lines_carry_bound_fields(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("DEBUG", json=True)
        get_logger("tests.search", service="campus-search").info("search.completed", matched=3)
        line = _lines(capsys.readouterr().err)[-1]
        assert line["event"] == "search.completed"
        assert line["matched"] == 3
        assert line["service"] == "campus-search"
        assert line["level"] == "info"
        assert line["logger"] == "tests.search"
        assert "timestamp" in line

    def test_request_context_is_merged_then_cleared(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("INFO")
        logger = get_logger("tests.context")
        bind_request_context(endpoint="/api/search/institutions", method="GET")
        logger.info("inside")
        clear_request_context()
        logger.info("outside")
        inside, outside = _lines(capsys.readouterr().err)[-2:]
        assert inside["endpoint"] == "/api/search/institutions"
        assert inside["method"] == "GET"
        assert "endpoint" not in outside

    def test_level_filters_records(self, capsys: pytest.CaptureFixture[str]) -> None:
        JsonLoggerFactory.configure(level="WARNING")
        logger = get_logger("tests.level")
        logger.info("dropped")
        logger.warning("kept")
        events = [line["event"] for line in _lines(capsys.readouterr().err)]
        assert events == ["kept"]

    def test_unknown_level_name_falls_back_to_info(self) -> None:
        JsonLoggerFactory.configure(level="LOUD")
        assert logging.getLogger().level == logging.INFO

    def test_reconfigure_replaces_root_handlers(self) -> None:
        configure_logging()
        configure_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_stdlib_records_share_the_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        configure_logging("INFO")
        logging.getLogger("uvicorn.error").warning("plain %s", "record")
        line = _lines(capsys.readouterr().err)[-1]
        assert line["event"] == "plain record"
        assert line["level"] == "warning"
