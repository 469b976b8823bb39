# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record store protocol and collection names."""

from __future__ import annotations

from typing import Any, Protocol

Record = dict[str, Any]


class Collections:
    """Collection names in the record store.

    Several names differ from the domain vocabulary: grades live in
    ``classes`` and subjects in ``courses``.
    """

    USERS = "users"
    PROFILES = "user_profiles"
    GRADES = "classes"
    SECTIONS = "class_sections"
    SUBJECTS = "courses"
    TEACHER_SUBJECTS = "teacher_subjects"
    TEACHER_CLASSES = "teacher_classes"
    ENROLLMENTS = "enrollments"
    ACTIVITIES = "activities"
    QUESTIONS = "questions"
    SUBMISSIONS = "submissions"
    NEWS = "news"
    LESSONS = "lessons"


class RecordStore(Protocol):
    """Operations the domain services need from a record store.

    Implementations raise the errors from src.core.errors:
    ConflictError on uniqueness violations, ValidationError on schema
    violations, AuthError on 401/403, RecordNotFoundError on 404 and
    TransportError on network failures or 5xx responses.
    """

    async def list(
        self,
        collection: str,
        filter: str | None = None,
        sort: str | None = None,
        expand: str | None = None,
    ) -> list[Record]:
        ...

    async def count(self, collection: str, filter: str | None = None) -> int:
        ...

    async def get(self, collection: str, record_id: str) -> Record:
        ...

    async def create(self, collection: str, fields: Record) -> Record:
        ...

    async def update(self, collection: str, record_id: str, fields: Record) -> Record:
        ...

    async def delete(self, collection: str, record_id: str) -> None:
        ...
