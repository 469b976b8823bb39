# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime and logging utilities."""

import logging
from datetime import datetime, timedelta, timezone

import structlog
from structlog.testing import capture_logs

from src.core.config import Settings
from src.utils.datetime import ensure_utc, format_store_timestamp, parse_iso, utc_today_iso
from src.utils.logging import bind_context, clear_context, get_logger, setup_logging


class TestDatetime:
    """Tests for PocketBase timestamp helpers."""

    def test_format_store_timestamp(self):
        dt = datetime(2025, 1, 31, 8, 15, 0, 123456, tzinfo=timezone.utc)

        assert format_store_timestamp(dt) == "2025-01-31 08:15:00.123Z"

    def test_format_converts_to_utc(self):
        dt = datetime(2025, 1, 31, 11, 0, tzinfo=timezone(timedelta(hours=3)))

        assert format_store_timestamp(dt) == "2025-01-31 08:00:00.000Z"

    def test_parse_store_timestamp(self):
        assert parse_iso("2025-01-31 08:15:00.123Z") == datetime(
            2025, 1, 31, 8, 15, 0, 123000, tzinfo=timezone.utc
        )

    def test_parse_empty(self):
        assert parse_iso("") is None
        assert parse_iso(None) is None

    def test_ensure_utc_naive(self):
        assert ensure_utc(datetime(2025, 1, 1)).tzinfo == timezone.utc

    def test_today_is_date_only(self):
        assert len(utc_today_iso()) == 10


class TestLogging:
    """Tests for structlog setup."""

    def test_setup_logging_levels(self):
        setup_logging(Settings(environment="production", debug=False, log_level="WARNING"))

        assert logging.getLogger().level == logging.WARNING
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_bind_and_clear_context(self):
        bind_context(request_id="abc")
        assert structlog.contextvars.get_contextvars()["request_id"] == "abc"

        clear_context()
        assert structlog.contextvars.get_contextvars() == {}

    def test_get_logger_structured_event(self):
        with capture_logs() as logs:
            get_logger("src.test").warning("user_deactivated", user_id="t1")

        assert logs == [{"event": "user_deactivated", "user_id": "t1", "log_level": "warning"}]
