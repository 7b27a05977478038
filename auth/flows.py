"""
auth/flows.py -- Signup, signin, logout and "me" orchestration.

Each flow composes the three leaf components (CredentialHasher,
SessionTokenCodec, AccountStore) and returns a FlowResult that the api/ layer
renders as the response envelope {message, success, data}.

Error policy:
  Expected failures (validation, conflict, bad credentials, missing account)
  are raised as AuthServiceError subclasses, checked in the order the HTTP
  contract documents. Anything else that escapes a flow is logged with its
  traceback and re-raised as InternalError, so internals never reach the
  client.

Signin is timing-equalized: an unknown email still costs one bcrypt
verification, and both failure modes share one message.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

import functools
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.exc import IntegrityError

from auth.errors import (
    AuthenticationError,
    AuthServiceError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from auth.hashing import CredentialHasher
from auth.models import AuthContext
from auth.store import AccountStore
from auth.tokens import SessionTokenCodec

logger = logging.getLogger("sessiongate.auth.flows")

MIN_PASSWORD_LENGTH = 6

MSG_FIELDS_REQUIRED = "Email and password are required"
MSG_PASSWORD_TOO_SHORT = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
MSG_EMAIL_TAKEN = "User already exists with this email"
MSG_BAD_CREDENTIALS = "Invalid email or password"
MSG_USER_NOT_FOUND = "User not found"


@dataclass(frozen=True)
class FlowResult:
    status_code: int
    message: str
    data: dict[str, Any] | None = field(default=None)


def _guarded(flow):
    """Convert unexpected exceptions escaping a flow into InternalError."""

    @functools.wraps(flow)
    def wrapper(*args, **kwargs):
        try:
            return flow(*args, **kwargs)
        except AuthServiceError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure in %s flow", flow.__name__)
            raise InternalError() from exc

    return wrapper


class AuthFlows:
    """The four account flows, bound to one store, hasher and codec.

    Usage:
        flows = AuthFlows(store, CredentialHasher(10), SessionTokenCodec(secret))
        result = flows.signup("a@b.com", "secret1")
        result.status_code   # 201
        result.data["token"]
    """

    def __init__(self, store: AccountStore, hasher: CredentialHasher, codec: SessionTokenCodec) -> None:
        self.store = store
        self.hasher = hasher
        self.codec = codec

    @_guarded
    def signup(self, email: str | None, password: str | None) -> FlowResult:
        if not email or not password:
            raise ValidationError(MSG_FIELDS_REQUIRED)
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(MSG_PASSWORD_TOO_SHORT)
        if self.store.get_by_email(email) is not None:
            raise ConflictError(MSG_EMAIL_TAKEN)

        password_hash = self.hasher.hash(password)
        try:
            account = self.store.create_account(email, password_hash)
        except IntegrityError as exc:
            # Lost a race with a concurrent signup for the same email.
            raise ConflictError(MSG_EMAIL_TAKEN) from exc

        token = self.codec.issue(account.id, account.email)
        logger.info("Account created id=%s", account.id)
        return FlowResult(
            status_code=201,
            message="User created successfully",
            data={"user": account.public_view(), "token": token},
        )

    @_guarded
    def signin(self, email: str | None, password: str | None) -> FlowResult:
        if not email or not password:
            raise ValidationError(MSG_FIELDS_REQUIRED)

        account = self.store.get_by_email(email)
        if account is None:
            self.hasher.dummy_verify(password)
            raise AuthenticationError(MSG_BAD_CREDENTIALS)
        if not self.hasher.verify(password, account.password_hash):
            logger.info("Signin failed for id=%s", account.id)
            raise AuthenticationError(MSG_BAD_CREDENTIALS)

        token = self.codec.issue(account.id, account.email)
        return FlowResult(
            status_code=200,
            message="Sign in successful",
            data={"user": account.public_view(), "token": token},
        )

    @_guarded
    def logout(self, context: AuthContext) -> FlowResult:
        """Acknowledge a logout. Tokens are stateless and are not revoked;
        the client discards its copy."""
        logger.info("Logout acknowledged id=%s", context.account_id)
        return FlowResult(status_code=200, message="Logout successful")

    @_guarded
    def me(self, context: AuthContext) -> FlowResult:
        account = self.store.get_by_id(context.account_id)
        if account is None:
            raise NotFoundError(MSG_USER_NOT_FOUND)
        return FlowResult(
            status_code=200,
            message="User information retrieved successfully",
            data=account.public_view(),
        )
