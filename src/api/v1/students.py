# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student enrollment API endpoints.

Example:
    POST /api/v1/students
    {
        "email": "student@school.test",
        "password": "secret123",
        "first_name": "Omar",
        "last_name": "Haddad",
        "first_name_ar": "عمر",
        "last_name_ar": "حداد",
        "grade_id": "g4",
        "section_id": "s4a"
    }
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import Enrollment
from src.models.user import StudentCreateRequest, StudentCreated

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=StudentCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create student",
    description="Create a student account and profile enrolled in a grade section.",
)
async def create_student(
    data: StudentCreateRequest,
    enrollment: Enrollment,
) -> StudentCreated:
    """Create a student.

    Either both the account and the profile exist afterwards, or neither
    does (unless undoing the account failed, reported as 502 with
    ``details.compensated`` false).
    """
    logger.info("Creating student: grade=%s, section=%s", data.grade_id, data.section_id)
    return await enrollment.create_student_with_enrollment(data)
