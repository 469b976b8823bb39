# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User, profile and enrollment models.

Request models accept missing fields on purpose: the enrollment writer
reports every missing required field in one ValidationError instead of
failing on the first one, so presence checks live in the service.
"""

from datetime import date, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.utils.datetime import parse_iso


class UserRole(str, Enum):
    """Roles a portal user can hold."""

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class User(BaseModel):
    """A portal user as stored in the ``users`` collection."""

    id: str
    email: str = ""
    role: str = UserRole.STUDENT.value
    active: bool = True
    name: str = ""
    created_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_teacher(self) -> bool:
        return self.role == UserRole.TEACHER.value

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "User":
        """Build a User from a store record.

        The store flag is ``is_active``; older records used ``active``.
        """
        active = record.get("is_active")
        if active is None:
            active = record.get("active", True)
        return cls(
            id=record["id"],
            email=record.get("email") or "",
            role=record.get("role") or UserRole.STUDENT.value,
            active=bool(active),
            name=record.get("name") or "",
            created_at=parse_iso(record.get("created")),
            deleted_at=parse_iso(record.get("deleted_at")),
        )


class Profile(BaseModel):
    """Personal and enrollment details owned 1:1 by a user."""

    id: str
    user_id: str
    first_name: str = ""
    last_name: str = ""
    first_name_ar: str = ""
    last_name_ar: str = ""
    grade_id: str | None = None
    section_id: str | None = None
    parent_phone: str | None = None
    date_of_birth: str | None = None
    enrollment_date: str | None = None

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "Profile":
        return cls(
            id=record["id"],
            user_id=record.get("user_id") or "",
            first_name=record.get("first_name") or "",
            last_name=record.get("last_name") or "",
            first_name_ar=record.get("first_name_ar") or "",
            last_name_ar=record.get("last_name_ar") or "",
            grade_id=record.get("grade_id") or None,
            section_id=record.get("section_id") or None,
            parent_phone=record.get("parent_phone") or None,
            date_of_birth=record.get("date_of_birth") or None,
            enrollment_date=record.get("enrollment_date") or None,
        )


# =============================================================================
# Creation requests
# =============================================================================


class StudentCreateRequest(BaseModel):
    """Request to create a student enrolled in one grade section."""

    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    first_name_ar: str | None = None
    last_name_ar: str | None = None
    grade_id: str | None = None
    section_id: str | None = None
    parent_phone: str | None = None
    date_of_birth: date | None = None


class GradeSections(BaseModel):
    """Sections of one grade a teacher is assigned to."""

    grade_id: str | None = None
    section_ids: list[str] = Field(default_factory=list)


class SubjectAssignment(BaseModel):
    """One subject and the grade sections it is taught to."""

    subject_id: str | None = None
    grades: list[GradeSections] = Field(default_factory=list)

    @property
    def pair_count(self) -> int:
        """Number of (grade, section) pairs requested under this subject."""
        return sum(len(g.section_ids) for g in self.grades)


class TeacherCreateRequest(BaseModel):
    """Request to create a teacher with subject and class assignments."""

    email: str | None = None
    password: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    first_name_ar: str | None = None
    last_name_ar: str | None = None
    subject_assignments: list[SubjectAssignment] = Field(default_factory=list)


class UserUpdateRequest(BaseModel):
    """Admin update of a user. Only provided fields change."""

    active: bool | None = None
    role: UserRole | None = None
    name: str | None = None


# =============================================================================
# Results
# =============================================================================


class StudentCreated(BaseModel):
    """Result of a successful student creation."""

    success: bool = True
    id: str
    email: str
    role: str = UserRole.STUDENT.value
    first_name: str
    last_name: str
    grade_id: str
    section_id: str


class AssignmentError(BaseModel):
    """A (subject, grade, section) assignment that could not be created."""

    subject_id: str
    grade_id: str
    section_id: str
    message: str


class TeacherCreated(BaseModel):
    """Result of a teacher creation.

    success means the user and profile exist; inspect assignments_failed to
    know whether some assignments need to be redone.
    """

    success: bool = True
    id: str
    email: str
    role: str = UserRole.TEACHER.value
    first_name: str
    last_name: str
    assignments_created: int = 0
    assignments_failed: int = 0
    errors: list[AssignmentError] = Field(default_factory=list)


class AuthSession(BaseModel):
    """Token and user returned by the record store after authentication."""

    token: str
    user: User
