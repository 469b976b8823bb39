# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Models for user deletion and class reassignment."""

from enum import Enum

from pydantic import BaseModel, Field

from src.models.user import UserRole


class DeletionMode(str, Enum):
    """How a user is removed.

    SOFT deactivates and keeps every dependent row; HARD removes the user and
    its dependents permanently.
    """

    SOFT = "soft"
    HARD = "hard"


class DependencyReport(BaseModel):
    """Rows referencing a user, by kind. Kinds with zero rows are omitted."""

    dependencies: dict[str, int] = Field(default_factory=dict)
    total_impact: int = 0

    def count(self, kind: str) -> int:
        return self.dependencies.get(kind, 0)

    def offers_reassignment(self, role: str) -> bool:
        """Whether class reassignment should be offered before deletion."""
        return role == UserRole.TEACHER.value and self.count("classes") > 0


class DeletionResult(BaseModel):
    """Outcome of a soft or hard delete."""

    success: bool = True
    mode: DeletionMode
    user_id: str
    already_inactive: bool = False


class ReassignmentResult(BaseModel):
    """Outcome of moving class assignments from one teacher to another."""

    success: bool = True
    old_teacher_id: str
    new_teacher_id: str
    reassigned: list[str] = Field(default_factory=list)
    subject_edges_created: list[str] = Field(default_factory=list)


class ReassignClassesRequest(BaseModel):
    """Move the listed class assignments to another teacher."""

    new_teacher_id: str
    class_ids: list[str] = Field(default_factory=list)


class SoftDeleteRequest(BaseModel):
    """Soft delete, optionally reassigning classes first.

    reassignments maps a teacher_classes row id to the teacher taking it over.
    """

    reassignments: dict[str, str] = Field(default_factory=dict)


class SoftDeleteWithReassignmentResult(BaseModel):
    """Outcome of reassign-then-deactivate."""

    deletion: DeletionResult
    reassignments: list[ReassignmentResult] = Field(default_factory=list)
