# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for the school portal service.

All Python datetimes are timezone-aware UTC. PocketBase stores timestamps as
"YYYY-MM-DD HH:MM:SS.sssZ" strings and date-only fields as "YYYY-MM-DD";
the helpers here convert between those and datetime objects.

Usage:
------
    from src.utils.datetime import utc_now, utc_today_iso

    stamp = format_store_timestamp(utc_now())
    enrollment_date = utc_today_iso()
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def utc_today_iso() -> str:
    """Today's UTC date as "YYYY-MM-DD" with no time component."""
    return utc_now().date().isoformat()


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    # Already aware - convert to UTC
    return dt.astimezone(timezone.utc)


def format_store_timestamp(dt: datetime) -> str:
    """Format a datetime the way PocketBase stores it.

    Args:
        dt: Datetime to format.

    Returns:
        String like "2025-01-31 08:15:00.000Z".
    """
    dt_utc = ensure_utc(dt)
    return dt_utc.strftime("%Y-%m-%d %H:%M:%S.") + f"{dt_utc.microsecond // 1000:03d}Z"


def parse_iso(iso_string: str | None) -> datetime | None:
    """Parse an ISO 8601 or PocketBase timestamp string.

    Empty strings (PocketBase's value for an unset date) yield None.

    Args:
        iso_string: Timestamp string.

    Returns:
        Timezone-aware UTC datetime or None.
    """
    if not iso_string:
        return None

    dt = datetime.fromisoformat(iso_string.strip().replace("Z", "+00:00"))
    return ensure_utc(dt)
