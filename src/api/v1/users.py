# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User management API endpoints.

This module provides endpoints for user management:
- GET / - List users with filtering
- GET /{user_id} - Get user details
- PATCH /{user_id} - Update user (active flag, role, name)
- GET /{user_id}/dependencies - Count rows that reference the user
- GET /{user_id}/replacement-teachers - Teachers who can take over classes
- POST /{user_id}/reassign-classes - Move classes to another teacher
- POST /{user_id}/reactivate - Undo a soft delete
- POST /{user_id}/soft-delete - Reassign classes (optional), then deactivate
- DELETE /{user_id}?mode=soft|hard - Legacy delete entry point

Hard deletion is irreversible and requires ``confirm=DELETE``.

Example:
    POST /api/v1/users/t1/soft-delete
    {
        "reassignments": {"tc1": "t2", "tc2": "t2"}
    }
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from src.api.dependencies import Deletion, Users
from src.models.deletion import (
    DeletionMode,
    DeletionResult,
    ReassignClassesRequest,
    ReassignmentResult,
    SoftDeleteRequest,
    SoftDeleteWithReassignmentResult,
)
from src.models.user import User, UserRole, UserUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


class UserListResponse(BaseModel):
    """Response for user list endpoint."""

    users: list[User]
    total: int


class UserDependenciesResponse(BaseModel):
    """What deleting a user would touch."""

    user_id: str
    role: str
    dependencies: dict[str, int] = Field(default_factory=dict)
    total_impact: int = 0
    offers_reassignment: bool = False


@router.get(
    "",
    response_model=UserListResponse,
    summary="List users",
    description="List users, newest first, optionally by role and active flag.",
)
async def list_users(
    users: Users,
    role: Annotated[UserRole | None, Query(description="Filter by role")] = None,
    active: Annotated[bool | None, Query(description="Filter by active flag")] = None,
) -> UserListResponse:
    result = await users.list_users(role=role, active=active)
    return UserListResponse(users=result, total=len(result))


@router.get("/{user_id}", response_model=User, summary="Get user")
async def get_user(user_id: str, users: Users) -> User:
    return await users.get_user(user_id)


@router.patch("/{user_id}", response_model=User, summary="Update user")
async def update_user(user_id: str, data: UserUpdateRequest, users: Users) -> User:
    return await users.update_user(user_id, data)


@router.get(
    "/{user_id}/dependencies",
    response_model=UserDependenciesResponse,
    summary="Count user dependencies",
    description="Count rows referencing the user before choosing a deletion mode.",
)
async def get_user_dependencies(
    user_id: str,
    users: Users,
    deletion: Deletion,
) -> UserDependenciesResponse:
    user = await users.get_user(user_id)
    report = await deletion.get_user_dependencies(user_id)
    return UserDependenciesResponse(
        user_id=user_id,
        role=user.role,
        dependencies=report.dependencies,
        total_impact=report.total_impact,
        offers_reassignment=report.offers_reassignment(user.role),
    )


@router.get(
    "/{user_id}/replacement-teachers",
    response_model=list[User],
    summary="List replacement teachers",
)
async def list_replacement_teachers(user_id: str, users: Users) -> list[User]:
    return await users.list_replacement_teachers(user_id)


@router.post(
    "/{user_id}/reassign-classes",
    response_model=ReassignmentResult,
    summary="Reassign classes",
)
async def reassign_classes(
    user_id: str,
    data: ReassignClassesRequest,
    deletion: Deletion,
) -> ReassignmentResult:
    return await deletion.reassign_classes(user_id, data.new_teacher_id, data.class_ids)


@router.post("/{user_id}/reactivate", response_model=User, summary="Reactivate user")
async def reactivate_user(user_id: str, deletion: Deletion) -> User:
    return await deletion.reactivate_user(user_id)


@router.post(
    "/{user_id}/soft-delete",
    response_model=SoftDeleteWithReassignmentResult,
    summary="Soft delete user",
    description="Optionally reassign classes, then deactivate the user.",
)
async def soft_delete_user(
    user_id: str,
    deletion: Deletion,
    data: SoftDeleteRequest | None = None,
) -> SoftDeleteWithReassignmentResult:
    reassignments = data.reassignments if data else {}
    return await deletion.soft_delete_with_reassignment(user_id, reassignments)


@router.delete(
    "/{user_id}",
    response_model=DeletionResult,
    summary="Delete user",
    description=(
        "mode=soft deactivates the user. mode=hard permanently removes the user "
        "and its dependents and requires confirm=DELETE."
    ),
)
async def delete_user(
    user_id: str,
    deletion: Deletion,
    mode: Annotated[str, Query(description="soft or hard")] = DeletionMode.SOFT.value,
    confirm: Annotated[str | None, Query(description='Must be "DELETE" for mode=hard')] = None,
) -> DeletionResult:
    logger.info("Delete requested: user=%s, mode=%s", user_id, mode)
    return await deletion.delete_user(user_id, mode, confirm)
