# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record store access.

This package provides the client used to talk to the PocketBase record store:
- RecordStore: protocol implemented by every store client
- PocketBaseClient: httpx-based client for the PocketBase REST API
- Collections: names of the collections the portal uses
- filters: helpers for building quoted filter expressions

Example:
    >>> async with httpx.AsyncClient(base_url=settings.record_store.url) as http:
    ...     store = PocketBaseClient(http, token=token)
    ...     grades = await store.list(Collections.GRADES, sort="display_order")
"""

from src.infrastructure.record_store.base import Collections, Record, RecordStore
from src.infrastructure.record_store.client import PocketBaseClient
from src.infrastructure.record_store import filters

__all__ = [
    "Collections",
    "Record",
    "RecordStore",
    "PocketBaseClient",
    "filters",
]
