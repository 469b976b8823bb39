# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Reference records: grades, sections and subjects.

Storage names differ from the domain names: grades are stored in the
``classes`` collection and subjects in ``courses``. A section points at its
grade through the ``grade`` relation field.
"""

from typing import Any

from pydantic import BaseModel, Field

from src.models.common import LocalizedText, to_localized_text

DEFAULT_SUBJECT_COLOR = "#2196F3"


class Grade(BaseModel):
    """A year-level cohort, e.g. Grade 4."""

    id: str
    code: str = ""
    name: LocalizedText = Field(default_factory=lambda: to_localized_text(None))
    display_order: int = 0
    is_active: bool = True

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Grade":
        return cls(
            id=record["id"],
            code=record.get("code") or "",
            name=to_localized_text(record.get("name")),
            display_order=record.get("display_order") or 0,
            is_active=bool(record.get("is_active", True)),
        )


class Section(BaseModel):
    """A named sub-group of a grade, bounded by max_students."""

    id: str
    name: str = ""
    grade_id: str = ""
    max_students: int | None = None
    is_active: bool = True

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Section":
        return cls(
            id=record["id"],
            name=record.get("name") or "",
            grade_id=record.get("grade") or "",
            max_students=record.get("max_students") or None,
            is_active=bool(record.get("is_active", True)),
        )


class Subject(BaseModel):
    """A teachable course area, e.g. Math."""

    id: str
    code: str = ""
    name: LocalizedText = Field(default_factory=lambda: to_localized_text(None))
    icon: str = ""
    color: str = DEFAULT_SUBJECT_COLOR
    is_active: bool = True

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Subject":
        return cls(
            id=record["id"],
            code=record.get("code") or "",
            name=to_localized_text(record.get("name")),
            icon=record.get("icon") or "",
            color=record.get("color") or DEFAULT_SUBJECT_COLOR,
            is_active=bool(record.get("is_active", True)),
        )
