# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User domain package.

This package provides user administration:
- UserService: listing, lookup, admin updates and replacement teachers

Example:
    >>> from src.domains.user import UserService
    >>> service = UserService(store)
    >>> users = await service.list_users(role="student")
"""

from src.domains.user.service import UserService

__all__ = ["UserService"]
