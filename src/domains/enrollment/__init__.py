# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain package.

This package provides user creation with enrollment:
- Student creation enrolled in a grade section (compensated on failure)
- Teacher creation with best-effort subject and class assignments
- CompensationScope: undo stack used by multi-step writes
"""

from src.domains.enrollment.compensation import (
    CompensationFailure,
    CompensationScope,
)
from src.domains.enrollment.outcomes import AssignmentOutcome, AssignmentSummary
from src.domains.enrollment.service import (
    SECTION_GRADE_MISMATCH,
    EnrollmentService,
)

__all__ = [
    "AssignmentOutcome",
    "AssignmentSummary",
    "CompensationFailure",
    "CompensationScope",
    "EnrollmentService",
    "SECTION_GRADE_MISMATCH",
]
