# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lookup domain package.

Read-only projections of grades, sections and subjects used to populate
selection lists and to validate section/grade relations before writes.
"""

from src.domains.lookup.service import LookupService

__all__ = ["LookupService"]
