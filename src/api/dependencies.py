# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the shared HTTP client opened in the application lifespan
- Extract the operator's bearer token
- Build a record store client carrying that token
- Get service instances

Example:
    @router.get("/grades")
    async def list_grades(lookups: Lookups) -> list[Grade]:
        ...
"""

import logging
from typing import Annotated

import httpx
from fastapi import Depends, Request

from src.core.config import get_settings
from src.core.errors import AuthError
from src.domains.auth import AuthService
from src.domains.deletion import DeletionService
from src.domains.enrollment import EnrollmentService
from src.domains.lookup import LookupService
from src.domains.user import UserService
from src.infrastructure.record_store import PocketBaseClient, RecordStore

logger = logging.getLogger(__name__)


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Get the process-wide HTTP client for the record store.

    Raises:
        RuntimeError: If the application lifespan has not started.
    """
    client = getattr(request.app.state, "http_client", None)
    if client is None:
        raise RuntimeError("Record store HTTP client not initialized")
    return client


def get_optional_token(request: Request) -> str | None:
    """Bearer token from the Authorization header, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def require_token(token: Annotated[str | None, Depends(get_optional_token)]) -> str:
    """Bearer token, or AuthError (401) when missing."""
    if not token:
        raise AuthError("Missing bearer token")
    return token


def get_store_client(
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> PocketBaseClient:
    """Record store client without a token."""
    return PocketBaseClient(http, page_size=get_settings().record_store.page_size)


def get_record_store(
    token: Annotated[str, Depends(require_token)],
    http: Annotated[httpx.AsyncClient, Depends(get_http_client)],
) -> RecordStore:
    """Record store client acting as the calling operator."""
    return PocketBaseClient(
        http, token=token, page_size=get_settings().record_store.page_size
    )


# =============================================================================
# Service Dependencies
# =============================================================================


def get_auth_service(
    client: Annotated[PocketBaseClient, Depends(get_store_client)],
) -> AuthService:
    return AuthService(client)


def get_lookup_service(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> LookupService:
    return LookupService(store)


def get_enrollment_service(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> EnrollmentService:
    return EnrollmentService(store)


def get_user_service(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> UserService:
    return UserService(store)


def get_deletion_service(
    store: Annotated[RecordStore, Depends(get_record_store)],
) -> DeletionService:
    return DeletionService(store)


# Type aliases for cleaner endpoint signatures
BearerToken = Annotated[str | None, Depends(get_optional_token)]
Auth = Annotated[AuthService, Depends(get_auth_service)]
Lookups = Annotated[LookupService, Depends(get_lookup_service)]
Enrollment = Annotated[EnrollmentService, Depends(get_enrollment_service)]
Users = Annotated[UserService, Depends(get_user_service)]
Deletion = Annotated[DeletionService, Depends(get_deletion_service)]
