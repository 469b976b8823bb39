# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Deletion domain package.

This package provides the two-tier removal of users:
- Dependency counting before deletion
- Soft delete (deactivate, keep everything) and reactivation
- Hard delete (remove the user and its dependents, gated by confirmation)
- Class reassignment to another teacher
"""

from src.domains.deletion.service import (
    DEPENDENCY_RELATIONS,
    HARD_DELETE_CONFIRMATION,
    DeletionService,
    DependencyRelation,
    is_hard_delete_confirmed,
    require_hard_delete_confirmation,
)

__all__ = [
    "DEPENDENCY_RELATIONS",
    "HARD_DELETE_CONFIRMATION",
    "DeletionService",
    "DependencyRelation",
    "is_hard_delete_confirmed",
    "require_hard_delete_confirmation",
]
