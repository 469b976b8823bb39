# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain services.

Users log in with email and password against the record store, which issues
the bearer token. The API forwards that token on every store call.

Exports:
    AuthService: Login and token refresh.
"""

from src.domains.auth.service import AuthService

__all__ = ["AuthService"]
