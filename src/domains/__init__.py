# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for SchoolPortal.

Each domain module provides a service that takes a record store client and
encapsulates the business rules for one area.

Domains:
    auth: Login and token refresh against the record store.
    deletion: Dependency counting, soft/hard delete, class reassignment.
    enrollment: Student and teacher creation with their enrollments.
    lookup: Grades, sections and subjects.
    user: User listing and admin updates.
"""
