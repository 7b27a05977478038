"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class (pure data container, zero logic). Stores and flows do the
work; these only own the shape.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class Account:
    """A registered email/password identity.

    password_hash is the bcrypt string. It never leaves the server -- use
    public_view() for anything sent to a client.

    email is stored exactly as submitted. Lookups are case-sensitive, so
    "A@b.com" and "a@b.com" are two different accounts.
    """

    id: str
    email: str
    password_hash: str
    created_at: str

    def public_view(self) -> dict:
        """Return the account without its password hash, keyed for the wire."""
        return {"id": self.id, "email": self.email, "createdAt": self.created_at}


@dataclass(frozen=True)
class TokenPayload:
    """Decoded claims of a verified session token."""

    id: str
    email: str
    issued_at: datetime
    expires_at: datetime


@dataclass(frozen=True)
class AuthContext:
    """Identity attached to a request that passed the authentication gate.

    Handlers receive this as an explicit argument (FastAPI Depends), never
    through request-global mutable state.
    """

    token: str
    payload: TokenPayload

    @property
    def account_id(self) -> str:
        return self.payload.id
