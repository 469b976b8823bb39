# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service for portal sessions.

This module provides the AuthService that handles:
- Password login against the record store's users collection
- Token refresh

The record store issues and verifies tokens; this service only forwards
credentials and rejects deactivated accounts.

Example:
    >>> auth_service = AuthService(client)
    >>> session = await auth_service.login("admin@school.test", "secret")
    >>> session = await auth_service.refresh(session.token)
"""

import logging

from src.core.errors import AuthError, ValidationError
from src.infrastructure.record_store import PocketBaseClient, Record
from src.models.user import AuthSession, User

logger = logging.getLogger(__name__)


class AuthService:
    """Authentication service backed by the record store.

    Attributes:
        _client: Record store client (used without a token).
    """

    def __init__(self, client: PocketBaseClient) -> None:
        """Initialize auth service.

        Args:
            client: Record store client.
        """
        self._client = client

    async def login(self, email: str, password: str) -> AuthSession:
        """Authenticate with email and password.

        Raises:
            ValidationError: Email or password missing.
            AuthError: Wrong credentials (401) or deactivated account (403).
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError(
                "Email and password are required",
                missing_fields=[n for n, v in (("email", email), ("password", password)) if not v],
            )

        response = await self._client.with_token(None).auth_with_password(email, password)
        session = self._to_session(response)

        logger.info("User logged in: %s", session.user.id)

        return session

    async def refresh(self, token: str | None) -> AuthSession:
        """Exchange a valid token for a fresh one.

        Raises:
            AuthError: Token missing, invalid or expired, or account deactivated.
        """
        if not token:
            raise AuthError("Missing bearer token")

        response = await self._client.with_token(token).auth_refresh()
        return self._to_session(response)

    def _to_session(self, response: Record) -> AuthSession:
        record = response.get("record") or {}
        token = response.get("token")
        if not token or not record.get("id"):
            raise AuthError("Record store returned no session")

        user = User.from_record(record)
        if not user.active:
            logger.warning("Login rejected for deactivated user: %s", user.id)
            raise AuthError("Account is deactivated", status_code=403)

        return AuthSession(token=token, user=user)
