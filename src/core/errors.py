# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by the record store client and domain services.

Every error raised by this package derives from PortalError so that the API
layer can translate it to an HTTP response in one place:

- ValidationError: client-supplied data violates a precondition
- ConflictError: uniqueness violation (e.g. duplicate email)
- DependencyWriteError: a required secondary write failed after a primary
  write succeeded
- AuthError: token invalid, expired or forbidden
- TransportError: network failure or 5xx from the record store
- RecordNotFoundError: the referenced record does not exist
"""

from typing import Any


class PortalError(Exception):
    """Base exception for all portal errors.

    Attributes:
        message: Human readable error message.
        details: Optional structured details (field errors, ids).
    """

    code = "portal_error"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(PortalError):
    """Raised when input violates a precondition.

    Attributes:
        missing_fields: Names of required fields that were absent.
    """

    code = "validation_error"

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        missing_fields: list[str] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.missing_fields = list(missing_fields or [])
        if self.missing_fields:
            self.details.setdefault("missing_fields", self.missing_fields)


class ConflictError(PortalError):
    """Raised on a uniqueness violation."""

    code = "conflict"


class AuthError(PortalError):
    """Raised when the bearer token is missing, invalid or not allowed.

    Attributes:
        status_code: HTTP status reported by the record store (401 or 403).
    """

    code = "auth_error"

    def __init__(
        self,
        message: str,
        status_code: int = 401,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.status_code = status_code


class TransportError(PortalError):
    """Raised on network failures or server errors. Callers may retry."""

    code = "transport_error"


class RecordNotFoundError(PortalError):
    """Raised when a record does not exist."""

    code = "not_found"


class DependencyWriteError(PortalError):
    """Raised when a required secondary write failed.

    The primary write has already been compensated when ``compensated`` is
    True. When it is False the compensation itself failed and the primary
    record is orphaned (the failure has been logged).

    Attributes:
        original: The error raised by the secondary write.
        compensated: Whether the compensating actions all succeeded.
    """

    code = "dependency_write_error"

    def __init__(
        self,
        message: str,
        original: BaseException | None = None,
        compensated: bool = True,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.original = original
        self.compensated = compensated
        self.details.setdefault("compensated", compensated)
        if original is not None:
            self.details.setdefault("cause", str(original))
