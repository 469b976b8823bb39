# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Teacher creation API endpoint.

A 201 response means the teacher account and profile exist. Individual
subject/class assignments may still have failed: check
``assignments_failed`` and ``errors`` in the body.
"""

import logging

from fastapi import APIRouter, status

from src.api.dependencies import Enrollment
from src.models.user import TeacherCreateRequest, TeacherCreated

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=TeacherCreated,
    status_code=status.HTTP_201_CREATED,
    summary="Create teacher",
    description="Create a teacher account with subject and class assignments.",
)
async def create_teacher(
    data: TeacherCreateRequest,
    enrollment: Enrollment,
) -> TeacherCreated:
    logger.info(
        "Creating teacher: subjects=%d, pairs=%d",
        len(data.subject_assignments),
        sum(s.pair_count for s in data.subject_assignments),
    )
    return await enrollment.create_teacher_with_assignments(data)
