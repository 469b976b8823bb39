# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User service for portal user administration.

This module provides the UserService that handles:
- User listing and lookup
- Admin updates (activate/deactivate, role change, display name)
- Replacement teacher lookup for class reassignment

Creation lives in the enrollment domain and removal in the deletion domain.

Example:
    >>> user_service = UserService(store)
    >>> teachers = await user_service.list_users(role="teacher", active=True)
    >>> await user_service.update_user(user_id, UserUpdateRequest(active=False))
"""

import logging

from src.infrastructure.record_store import Collections, RecordStore, filters
from src.models.user import User, UserRole, UserUpdateRequest
from src.utils.datetime import format_store_timestamp, utc_now

logger = logging.getLogger(__name__)


class UserService:
    """Service for reading and updating portal users.

    Attributes:
        _store: Record store client.

    Example:
        >>> service = UserService(store)
        >>> user = await service.get_user("u1")
    """

    def __init__(self, store: RecordStore) -> None:
        """Initialize the user service.

        Args:
            store: Record store client.
        """
        self._store = store

    async def list_users(
        self,
        role: UserRole | str | None = None,
        active: bool | None = None,
    ) -> list[User]:
        """List users, newest first.

        Args:
            role: Only users with this role.
            active: Only active (True) or deactivated (False) users.

        Returns:
            Matching users.
        """
        if isinstance(role, UserRole):
            role = role.value
        expr = filters.and_(
            filters.eq("role", role) if role else None,
            filters.eq("is_active", active) if active is not None else None,
        )
        records = await self._store.list(Collections.USERS, filter=expr or None, sort="-created")
        return [User.from_record(r) for r in records]

    async def get_user(self, user_id: str) -> User:
        """Get a user by id.

        Raises:
            RecordNotFoundError: If the user does not exist.
        """
        record = await self._store.get(Collections.USERS, user_id)
        return User.from_record(record)

    async def update_user(self, user_id: str, request: UserUpdateRequest) -> User:
        """Apply an admin update.

        Changing the active flag follows the soft delete lifecycle:
        deactivating stamps ``deleted_at`` and reactivating clears it. Setting
        the flag to its current value writes nothing for it.

        Args:
            user_id: User identifier.
            request: Fields to change; None leaves a field untouched.

        Returns:
            Updated user. Returned unchanged when nothing was requested.

        Raises:
            RecordNotFoundError: If the user does not exist.
        """
        fields: dict[str, object] = {}
        if request.active is not None:
            current = await self.get_user(user_id)
            if request.active and not current.active:
                fields["is_active"] = True
                fields["deleted_at"] = ""
            elif not request.active and current.active:
                fields["is_active"] = False
                fields["deleted_at"] = format_store_timestamp(utc_now())
        if request.role is not None:
            fields["role"] = request.role.value
        if request.name is not None:
            fields["name"] = request.name.strip()

        if not fields:
            return await self.get_user(user_id)

        record = await self._store.update(Collections.USERS, user_id, fields)

        logger.info("User updated: %s (fields=%s)", user_id, sorted(fields))

        return User.from_record(record)

    async def list_replacement_teachers(self, user_id: str) -> list[User]:
        """Active teachers who can take over classes from the given user."""
        teachers = await self.list_users(role=UserRole.TEACHER, active=True)
        return [t for t in teachers if t.id != user_id]
