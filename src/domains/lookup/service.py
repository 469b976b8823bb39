# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lookup service for grades, sections and subjects.

Example:
    >>> lookups = LookupService(store)
    >>> grades = await lookups.fetch_grades()
    >>> sections = await lookups.fetch_sections_by_grade(grades[0].id)
"""

import logging

from src.infrastructure.record_store import Collections, RecordStore, filters
from src.models.lookup import Grade, Section, Subject

logger = logging.getLogger(__name__)


class LookupService:
    """Read-only access to reference data.

    Nothing is cached: every call goes to the record store and transport
    errors propagate to the caller.

    Attributes:
        _store: Record store client.
    """

    def __init__(self, store: RecordStore) -> None:
        self._store = store

    async def fetch_grades(self) -> list[Grade]:
        """List active grades ordered by display order."""
        records = await self._store.list(
            Collections.GRADES,
            filter=filters.eq("is_active", True),
            sort="display_order",
        )
        return [Grade.from_record(r) for r in records]

    async def fetch_sections_by_grade(self, grade_id: str | None = None) -> list[Section]:
        """List active sections, optionally only those of one grade.

        Args:
            grade_id: Grade to filter by. All grades when None.

        Returns:
            Sections ordered by name.
        """
        expr = filters.and_(
            filters.eq("is_active", True),
            filters.eq("grade", grade_id) if grade_id else None,
        )
        records = await self._store.list(Collections.SECTIONS, filter=expr, sort="name")
        return [Section.from_record(r) for r in records]

    async def fetch_subjects(self) -> list[Subject]:
        """List active subjects ordered by code."""
        records = await self._store.list(
            Collections.SUBJECTS,
            filter=filters.eq("is_active", True),
            sort="code",
        )
        return [Subject.from_record(r) for r in records]

    async def get_section(self, section_id: str) -> Section:
        """Fetch one section.

        Raises:
            RecordNotFoundError: If the section does not exist.
        """
        record = await self._store.get(Collections.SECTIONS, section_id)
        return Section.from_record(record)
