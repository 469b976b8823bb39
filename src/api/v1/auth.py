# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication API endpoints.

This module provides endpoints for operator sessions:
- POST /login - Email and password login
- POST /refresh - Exchange the current bearer token for a fresh one

Tokens are issued by the record store and sent back unchanged as
``Authorization: Bearer <token>`` on every other request.
"""

import logging

from fastapi import APIRouter
from pydantic import BaseModel

from src.api.dependencies import Auth, BearerToken
from src.models.user import AuthSession

logger = logging.getLogger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    """Login request body."""

    email: str = ""
    password: str = ""


@router.post(
    "/login",
    response_model=AuthSession,
    summary="Login",
    description="Authenticate with email and password.",
)
async def login(data: LoginRequest, auth: Auth) -> AuthSession:
    return await auth.login(data.email, data.password)


@router.post(
    "/refresh",
    response_model=AuthSession,
    summary="Refresh token",
    description="Exchange a valid bearer token for a fresh one.",
)
async def refresh(token: BearerToken, auth: Auth) -> AuthSession:
    return await auth.refresh(token)
