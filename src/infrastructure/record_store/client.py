# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""PocketBase REST client.

This module provides PocketBaseClient, a thin wrapper over the PocketBase
records API:

- GET    /api/collections/{collection}/records        (paged list)
- GET    /api/collections/{collection}/records/{id}
- POST   /api/collections/{collection}/records
- PATCH  /api/collections/{collection}/records/{id}
- DELETE /api/collections/{collection}/records/{id}

The underlying httpx.AsyncClient is owned by the caller and shared between
requests; each PocketBaseClient only adds the bearer token of the operator
on whose behalf it acts.

Example:
    >>> http = httpx.AsyncClient(base_url="http://127.0.0.1:8090", timeout=30.0)
    >>> store = PocketBaseClient(http, token="eyJhbGciOi...")
    >>> sections = await store.list("class_sections", filter="grade='g1'")
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from src.core.errors import (
    AuthError,
    ConflictError,
    RecordNotFoundError,
    TransportError,
    ValidationError,
)
from src.infrastructure.record_store.base import Collections, Record

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500

# PocketBase field error code for unique index violations
_NOT_UNIQUE_CODE = "validation_not_unique"


class PocketBaseClient:
    """Record store client for PocketBase.

    Attributes:
        _http: Shared async HTTP client with the store base URL configured.
        _token: Bearer token attached to every request, if any.
        _page_size: Page size used when fetching full lists.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        token: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        """Initialize the client.

        Args:
            http: Shared async HTTP client.
            token: Operator bearer token.
            page_size: Records per page for full list fetches.
        """
        self._http = http
        self._token = token
        self._page_size = page_size

    @property
    def token(self) -> str | None:
        """Bearer token used by this client."""
        return self._token

    def with_token(self, token: str | None) -> PocketBaseClient:
        """Return a client sharing the HTTP connection pool with another token."""
        return PocketBaseClient(self._http, token=token, page_size=self._page_size)

    # =========================================================================
    # Records
    # =========================================================================

    async def list(
        self,
        collection: str,
        filter: str | None = None,
        sort: str | None = None,
        expand: str | None = None,
    ) -> list[Record]:
        """Fetch every record matching the filter, following pages.

        Args:
            collection: Collection name.
            filter: PocketBase filter expression.
            sort: Sort expression, e.g. "display_order" or "-created".
            expand: Relations to expand.

        Returns:
            List of records.
        """
        items: list[Record] = []
        page = 1
        while True:
            params: dict[str, Any] = {
                "page": page,
                "perPage": self._page_size,
                "skipTotal": 1,
            }
            if filter:
                params["filter"] = filter
            if sort:
                params["sort"] = sort
            if expand:
                params["expand"] = expand

            data = await self._request("GET", self._records_path(collection), params=params)
            batch = data.get("items", [])
            items.extend(batch)
            if len(batch) < self._page_size:
                break
            page += 1

        return items

    async def count(self, collection: str, filter: str | None = None) -> int:
        """Count records matching the filter without fetching them."""
        params: dict[str, Any] = {"page": 1, "perPage": 1, "fields": "id"}
        if filter:
            params["filter"] = filter
        data = await self._request("GET", self._records_path(collection), params=params)
        return int(data.get("totalItems", 0))

    async def get(self, collection: str, record_id: str) -> Record:
        """Fetch a single record by id."""
        return await self._request("GET", self._records_path(collection, record_id))

    async def create(self, collection: str, fields: Record) -> Record:
        """Create a record and return it as stored."""
        return await self._request("POST", self._records_path(collection), json=fields)

    async def update(self, collection: str, record_id: str, fields: Record) -> Record:
        """Patch a record and return it as stored."""
        return await self._request(
            "PATCH", self._records_path(collection, record_id), json=fields
        )

    async def delete(self, collection: str, record_id: str) -> None:
        """Delete a record."""
        await self._request("DELETE", self._records_path(collection, record_id))

    # =========================================================================
    # Auth
    # =========================================================================

    async def auth_with_password(self, identity: str, password: str) -> Record:
        """Authenticate a user record by email and password.

        Returns:
            Response with ``token`` and ``record`` keys.
        """
        try:
            return await self._request(
                "POST",
                f"/api/collections/{Collections.USERS}/auth-with-password",
                json={"identity": identity, "password": password},
            )
        except ValidationError as e:
            # PocketBase answers bad credentials with 400
            raise AuthError("Invalid email or password") from e

    async def auth_refresh(self) -> Record:
        """Refresh the current token. Returns ``token`` and ``record`` keys."""
        return await self._request(
            "POST", f"/api/collections/{Collections.USERS}/auth-refresh"
        )

    # =========================================================================
    # Private Helper Methods
    # =========================================================================

    @staticmethod
    def _records_path(collection: str, record_id: str | None = None) -> str:
        path = f"/api/collections/{collection}/records"
        if record_id is not None:
            path = f"{path}/{record_id}"
        return path

    def _headers(self) -> dict[str, str]:
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}

    async def _request(self, method: str, path: str, **kwargs: Any) -> Record:
        """Send a request and translate failures into portal errors."""
        try:
            response = await self._http.request(
                method, path, headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as e:
            logger.error("Record store unreachable: %s %s (%s)", method, path, e)
            raise TransportError(f"Record store unreachable: {e}") from e

        if response.is_success:
            if response.status_code == 204 or not response.content:
                return {}
            return response.json()

        raise _error_from_response(method, path, response)


def _error_from_response(method: str, path: str, response: httpx.Response):
    """Map a failed PocketBase response to the matching portal error."""
    status_code = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    message = body.get("message") or response.reason_phrase or "Record store error"
    field_errors = body.get("data") or {}

    logger.debug(
        "Record store error: %s %s -> %d %s", method, path, status_code, message
    )

    if status_code in (401, 403):
        return AuthError(message, status_code=status_code)
    if status_code == 404:
        return RecordNotFoundError(message, details={"path": path})
    if status_code == 409 or _has_unique_violation(field_errors):
        return ConflictError(message, details={"fields": field_errors})
    if status_code in (400, 422):
        return ValidationError(message, details={"fields": field_errors})
    return TransportError(
        f"Record store returned {status_code}: {message}",
        details={"status_code": status_code},
    )


def _has_unique_violation(field_errors: Any) -> bool:
    if not isinstance(field_errors, dict):
        return False
    return any(
        isinstance(err, dict) and err.get("code") == _NOT_UNIQUE_CODE
        for err in field_errors.values()
    )
