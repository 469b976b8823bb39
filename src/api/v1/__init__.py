# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific domain.

Modules:
    auth: Login and token refresh.
    lookups: Grades, sections and subjects.
    students: Student creation with enrollment.
    teachers: Teacher creation with subject/class assignments.
    users: User administration, deletion and class reassignment.
"""

from fastapi import APIRouter

from src.api.v1 import auth, lookups, students, teachers, users

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

# Include domain routers
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(lookups.router, prefix="/lookups", tags=["Lookups"])
router.include_router(students.router, prefix="/students", tags=["Students"])
router.include_router(teachers.router, prefix="/teachers", tags=["Teachers"])
router.include_router(users.router, prefix="/users", tags=["Users"])

__all__ = ["router"]
