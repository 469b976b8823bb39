# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for the school portal service.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations and PocketBase formats
"""

from src.utils.datetime import (
    ensure_utc,
    format_store_timestamp,
    parse_iso,
    utc_now,
    utc_today_iso,
)
from src.utils.logging import bind_context, clear_context, get_logger, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    # Datetime
    "utc_now",
    "utc_today_iso",
    "ensure_utc",
    "format_store_timestamp",
    "parse_iso",
]
