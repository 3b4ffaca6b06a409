"""
Tests for structured logging

Tests cover:
- JSON lines carry the request id and structured data
- Merge summaries raise their level when diagnostics were reported
- setup_logging only configures the loggers this service owns
"""

import json
import logging

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from availability_calendar.utils.logging_config import (
    JSONFormatter,
    clear_request_context,
    get_logger,
    set_request_context,
    setup_logging
)


class TestJSONFormatter:

    def test_request_id_and_data(self):
        record = logging.LogRecord("availability_calendar", logging.INFO, __file__, 1, "merged", None, None)
        record.extra_data = {"added": 3}
        record.window = "2024-04..2024-06"

        set_request_context("req-7")
        try:
            line = json.loads(JSONFormatter().format(record))
        finally:
            clear_request_context()

        assert line["request_id"] == "req-7"
        assert line["data"] == {"added": 3}
        assert line["window"] == "2024-04..2024-06"
        assert line["level"] == "INFO"

    def test_no_request_id_outside_requests(self):
        record = logging.LogRecord("availability_calendar", logging.INFO, __file__, 1, "idle", None, None)

        assert "request_id" not in json.loads(JSONFormatter().format(record))


class TestStructuredLogger:

    def test_merge_with_diagnostics_is_a_warning(self, caplog):
        caplog.set_level(logging.DEBUG)
        logger = get_logger("availability_calendar.tests")

        logger.merge_applied(added=2, skipped=0, total=2, diagnostics=0)
        logger.merge_applied(added=1, skipped=1, total=3, diagnostics=1, window="2024-05..2024-05")

        assert [r.levelno for r in caplog.records] == [logging.INFO, logging.WARNING]
        assert caplog.records[1].extra_data["diagnostics"] == 1
        assert caplog.records[1].window == "2024-05..2024-05"


class TestSetupLogging:

    def test_third_party_levels_left_alone(self):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        httpx_logger = logging.getLogger("httpx")
        httpx_logger.setLevel(logging.NOTSET)
        try:
            setup_logging(level="debug", json_format=True, include_uvicorn=False)

            assert logging.getLogger("availability_calendar").level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert httpx_logger.level == logging.NOTSET
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
