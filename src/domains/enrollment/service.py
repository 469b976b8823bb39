# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for creating students and teachers.

This module provides the EnrollmentService class for:
- Student creation with grade/section enrollment
- Teacher creation with subject and class assignments

The two paths fail differently. Student creation is all-or-nothing: if the
profile cannot be written the user is deleted again. Teacher creation only
guarantees the user and profile; subject and class assignments are written
best-effort and reported back as counts plus error entries.
"""

from __future__ import annotations

import logging

from src.core.errors import (
    DependencyWriteError,
    PortalError,
    RecordNotFoundError,
    ValidationError,
)
from src.domains.enrollment.compensation import CompensationScope
from src.domains.enrollment.outcomes import AssignmentOutcome, AssignmentSummary
from src.domains.lookup.service import LookupService
from src.infrastructure.record_store import Collections, Record, RecordStore
from src.models.lookup import Section
from src.models.user import (
    StudentCreateRequest,
    StudentCreated,
    SubjectAssignment,
    TeacherCreateRequest,
    TeacherCreated,
    UserRole,
)
from src.utils.datetime import utc_today_iso

logger = logging.getLogger(__name__)

SECTION_GRADE_MISMATCH = "section does not belong to grade"

_ACCOUNT_FIELDS = (
    "email",
    "password",
    "first_name",
    "last_name",
    "first_name_ar",
    "last_name_ar",
)
_STUDENT_FIELDS = _ACCOUNT_FIELDS + ("grade_id", "section_id")


class EnrollmentService:
    """Service for creating students and teachers with their enrollments.

    Attributes:
        _store: Record store client.
        _lookups: Lookup service used for section/grade validation.
    """

    def __init__(self, store: RecordStore, lookups: LookupService | None = None) -> None:
        """Initialize enrollment service.

        Args:
            store: Record store client.
            lookups: Lookup service; built on the same store when omitted.
        """
        self._store = store
        self._lookups = lookups or LookupService(store)

    # =========================================================================
    # Students
    # =========================================================================

    async def create_student_with_enrollment(
        self,
        request: StudentCreateRequest,
    ) -> StudentCreated:
        """Create a student user and profile enrolled in one section.

        Args:
            request: Student data.

        Returns:
            Created student summary.

        Raises:
            ValidationError: Missing fields, or the section is not in the grade.
            ConflictError: Email already registered.
            DependencyWriteError: Profile write failed; the user was deleted
                again unless ``compensated`` is False.
        """
        missing = _missing_fields(request, _STUDENT_FIELDS)
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                missing_fields=missing,
            )

        await self._require_section_in_grade(request.section_id, request.grade_id)

        async with CompensationScope("student enrollment") as scope:
            user = await self._create_user(
                request.email,
                request.password,
                UserRole.STUDENT,
                f"{request.first_name} {request.last_name}",
            )
            scope.push(
                f"delete user {user['id']}",
                lambda: self._store.delete(Collections.USERS, user["id"]),
            )

            profile = {
                **_profile_names(request),
                "user_id": user["id"],
                "grade_id": request.grade_id,
                "section_id": request.section_id,
                "enrollment_date": utc_today_iso(),
            }
            if request.parent_phone:
                profile["parent_phone"] = request.parent_phone
            if request.date_of_birth:
                profile["date_of_birth"] = request.date_of_birth.isoformat()

            await self._create_profile_or_compensate(scope, user, profile)

        logger.info(
            "Student created: %s (grade=%s, section=%s)",
            user["id"],
            request.grade_id,
            request.section_id,
        )

        return StudentCreated(
            id=user["id"],
            email=user.get("email") or request.email,
            role=UserRole.STUDENT.value,
            first_name=request.first_name,
            last_name=request.last_name,
            grade_id=request.grade_id,
            section_id=request.section_id,
        )

    # =========================================================================
    # Teachers
    # =========================================================================

    async def create_teacher_with_assignments(
        self,
        request: TeacherCreateRequest,
    ) -> TeacherCreated:
        """Create a teacher user and profile, then assign subjects and classes.

        Subject edges and class assignments are best-effort: a failed subject
        edge skips (and counts as failed) every pair under that subject, and
        each pair fails independently. Those failures never raise.

        Args:
            request: Teacher data with subject assignments.

        Returns:
            Created teacher summary with assignment counts and errors.

        Raises:
            ValidationError: Invalid request or a section outside its grade.
            ConflictError: Email already registered.
            DependencyWriteError: Profile write failed (user compensated).
        """
        self._validate_teacher_request(request)
        checked: set[tuple[str, str]] = set()
        for subject in request.subject_assignments:
            for grade in subject.grades:
                for section_id in grade.section_ids:
                    if (section_id, grade.grade_id) in checked:
                        continue
                    await self._require_section_in_grade(section_id, grade.grade_id)
                    checked.add((section_id, grade.grade_id))

        async with CompensationScope("teacher creation") as scope:
            user = await self._create_user(
                request.email,
                request.password,
                UserRole.TEACHER,
                f"{request.first_name} {request.last_name}",
            )
            scope.push(
                f"delete user {user['id']}",
                lambda: self._store.delete(Collections.USERS, user["id"]),
            )
            profile = {**_profile_names(request), "user_id": user["id"]}
            await self._create_profile_or_compensate(scope, user, profile)

        summary = await self._assign_subjects(user["id"], request.subject_assignments)

        logger.info(
            "Teacher created: %s (assignments_created=%d, assignments_failed=%d)",
            user["id"],
            summary.created,
            summary.failed,
        )

        return TeacherCreated(
            id=user["id"],
            email=user.get("email") or request.email,
            role=UserRole.TEACHER.value,
            first_name=request.first_name,
            last_name=request.last_name,
            assignments_created=summary.created,
            assignments_failed=summary.failed,
            errors=summary.errors,
        )

    async def _assign_subjects(
        self,
        teacher_id: str,
        assignments: list[SubjectAssignment],
    ) -> AssignmentSummary:
        """Write subject edges and class assignments, collecting outcomes."""
        summary = AssignmentSummary()
        sections: dict[str, Section | str] = {}

        for assignment in assignments:
            subject_id = assignment.subject_id
            try:
                await self._store.create(
                    Collections.TEACHER_SUBJECTS,
                    {"teacher_id": teacher_id, "subject_id": subject_id},
                )
            except PortalError as e:
                logger.warning(
                    "Subject assignment failed: teacher=%s, subject=%s, skipping %d classes: %s",
                    teacher_id,
                    subject_id,
                    assignment.pair_count,
                    e.message,
                )
                for grade in assignment.grades:
                    for section_id in grade.section_ids:
                        summary.add(
                            AssignmentOutcome.failed(
                                subject_id,
                                grade.grade_id,
                                section_id,
                                f"subject assignment failed: {e.message}",
                            )
                        )
                continue

            for grade in assignment.grades:
                for section_id in grade.section_ids:
                    summary.add(
                        await self._assign_class(
                            teacher_id, subject_id, grade.grade_id, section_id, sections
                        )
                    )

        return summary

    async def _assign_class(
        self,
        teacher_id: str,
        subject_id: str,
        grade_id: str,
        section_id: str,
        sections: dict[str, Section | str],
    ) -> AssignmentOutcome:
        """Re-check one section against its grade and write the assignment."""
        if section_id not in sections:
            try:
                sections[section_id] = await self._lookups.get_section(section_id)
            except RecordNotFoundError:
                sections[section_id] = "section not found"
            except PortalError as e:
                return AssignmentOutcome.failed(subject_id, grade_id, section_id, e.message)

        section = sections[section_id]
        if isinstance(section, str):
            return AssignmentOutcome.failed(subject_id, grade_id, section_id, section)
        if section.grade_id != grade_id:
            return AssignmentOutcome.failed(
                subject_id, grade_id, section_id, SECTION_GRADE_MISMATCH
            )

        try:
            record = await self._store.create(
                Collections.TEACHER_CLASSES,
                {
                    "teacher_id": teacher_id,
                    "subject_id": subject_id,
                    "grade_id": grade_id,
                    "section_id": section_id,
                },
            )
        except PortalError as e:
            logger.warning(
                "Class assignment failed: teacher=%s, subject=%s, grade=%s, section=%s: %s",
                teacher_id,
                subject_id,
                grade_id,
                section_id,
                e.message,
            )
            return AssignmentOutcome.failed(subject_id, grade_id, section_id, e.message)

        return AssignmentOutcome.created(subject_id, grade_id, section_id, record["id"])

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    def _validate_teacher_request(self, request: TeacherCreateRequest) -> None:
        """Check every required part of a teacher request is present and subjects are unique."""
        missing = _missing_fields(request, _ACCOUNT_FIELDS)
        problems: list[str] = []

        if not request.subject_assignments:
            problems.append("at least one subject assignment is required")

        first_seen: dict[str, int] = {}
        for i, subject in enumerate(request.subject_assignments):
            where = f"subject_assignments[{i}]"
            if not _present(subject.subject_id):
                problems.append(f"{where}.subject_id is required")
            elif subject.subject_id in first_seen:
                problems.append(
                    f"{where}.subject_id duplicates "
                    f"subject_assignments[{first_seen[subject.subject_id]}]"
                )
            else:
                first_seen[subject.subject_id] = i
            if not subject.grades:
                problems.append(f"{where} needs at least one grade")
            for j, grade in enumerate(subject.grades):
                if not _present(grade.grade_id):
                    problems.append(f"{where}.grades[{j}].grade_id is required")
                if not grade.section_ids:
                    problems.append(f"{where}.grades[{j}] needs at least one section")
                elif not all(_present(s) for s in grade.section_ids):
                    problems.append(f"{where}.grades[{j}].section_ids contains a blank id")

        if missing or problems:
            parts = []
            if missing:
                parts.append(f"Missing required fields: {', '.join(missing)}")
            parts.extend(problems)
            raise ValidationError(
                "; ".join(parts),
                details={"problems": problems} if problems else None,
                missing_fields=missing,
            )

    async def _require_section_in_grade(self, section_id: str, grade_id: str) -> None:
        """Raise ValidationError unless the section exists and is in the grade."""
        try:
            section = await self._lookups.get_section(section_id)
        except RecordNotFoundError as e:
            raise ValidationError(
                f"Section {section_id} not found",
                details={"section_id": section_id, "grade_id": grade_id},
            ) from e

        if section.grade_id != grade_id:
            raise ValidationError(
                SECTION_GRADE_MISMATCH,
                details={
                    "section_id": section_id,
                    "grade_id": grade_id,
                    "section_grade_id": section.grade_id,
                },
            )

    async def _create_user(
        self,
        email: str,
        password: str,
        role: UserRole,
        name: str,
    ) -> Record:
        return await self._store.create(
            Collections.USERS,
            {
                "email": email.strip(),
                "password": password,
                "passwordConfirm": password,
                "role": role.value,
                "is_active": True,
                "name": name.strip(),
            },
        )

    async def _create_profile_or_compensate(
        self,
        scope: CompensationScope,
        user: Record,
        profile: Record,
    ) -> Record:
        """Write the profile; on failure undo the user and raise.

        The original profile error is the one reported, whether or not the
        compensating delete succeeded.
        """
        try:
            return await self._store.create(Collections.PROFILES, profile)
        except PortalError as e:
            compensated = await scope.unwind()
            if not compensated:
                logger.error(
                    "Orphaned user without profile: user=%s, email=%s",
                    user["id"],
                    user.get("email"),
                )
            raise DependencyWriteError(
                f"Failed to create profile: {e.message}",
                original=e,
                compensated=compensated,
                details={"user_id": user["id"]},
            ) from e


def _present(value: object) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _missing_fields(request: object, names: tuple[str, ...]) -> list[str]:
    return [name for name in names if not _present(getattr(request, name, None))]


def _profile_names(request: StudentCreateRequest | TeacherCreateRequest) -> Record:
    return {
        "first_name": request.first_name.strip(),
        "last_name": request.last_name.strip(),
        "first_name_ar": request.first_name_ar.strip(),
        "last_name_ar": request.last_name_ar.strip(),
    }
