"""
auth/errors.py -- Error taxonomy for the auth flows and the authentication gate.

Each class carries the HTTP status it maps to. The api/ layer registers one
exception handler for AuthServiceError and renders the standard envelope:

    {"message": exc.message, "success": false}

Messages are client-facing. InternalError always carries a generic message;
the underlying exception is logged server-side by whoever raised it.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations


class AuthServiceError(Exception):
    """Base class for every expected, client-reportable failure."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(AuthServiceError):
    """Missing or malformed input fields, length constraints."""

    status_code = 400


class AuthenticationError(AuthServiceError):
    """Bad credentials, or a missing, malformed, invalid or expired token.

    Messages must not reveal which credential was wrong.
    """

    status_code = 401


class NotFoundError(AuthServiceError):
    status_code = 404


class ConflictError(AuthServiceError):
    """Duplicate email on signup."""

    status_code = 409


class InternalError(AuthServiceError):
    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
