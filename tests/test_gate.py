"""Unit tests for auth/dependencies.py -- the authentication gate.

Covers every per-request state:
  - no header / empty header            -> 401 "Authorization header is required"
  - wrong scheme / missing token        -> 401 "Authorization header is required"
  - forged, tampered or expired token   -> 401 "Invalid or expired token"
  - valid token                         -> AuthContext with the decoded payload
  - internal fault inside the gate      -> 500 InternalError, not 401
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

from auth.dependencies import (
    MSG_GATE_FAILED,
    MSG_HEADER_REQUIRED,
    MSG_INVALID_TOKEN,
    authenticate_header,
    require_auth,
)
from auth.errors import AuthenticationError, InternalError
from auth.models import AuthContext
from auth.tokens import SessionTokenCodec

ACCOUNT_ID = "0b7f4e5c-9a51-4c83-8d0f-3c2b1a6e7d94"


def _fake_request(codec, authorization=None):
    headers = {"Authorization": authorization} if authorization is not None else {}
    state = SimpleNamespace(token_codec=codec) if codec is not None else SimpleNamespace()
    return SimpleNamespace(
        app=SimpleNamespace(state=state),
        headers=headers,
        method="GET",
        url=SimpleNamespace(path="/auth/me"),
    )


class TestAuthenticateHeader:
    def test_valid_bearer_token_yields_context(self, codec: SessionTokenCodec) -> None:
        token = codec.issue(ACCOUNT_ID, "a@b.com")
        ctx = authenticate_header(f"Bearer {token}", codec)
        assert isinstance(ctx, AuthContext)
        assert ctx.token == token
        assert ctx.account_id == ACCOUNT_ID
        assert ctx.payload.email == "a@b.com"

    @pytest.mark.parametrize("header", [None, "", "Bearer ", "Bearer", "bearer abc", "Basic dXNlcjpwYXNz", "Token abc"])
    def test_missing_or_malformed_header(self, codec: SessionTokenCodec, header) -> None:
        with pytest.raises(AuthenticationError) as excinfo:
            authenticate_header(header, codec)
        assert excinfo.value.message == MSG_HEADER_REQUIRED
        assert excinfo.value.status_code == 401

    def test_garbage_token(self, codec: SessionTokenCodec) -> None:
        with pytest.raises(AuthenticationError) as excinfo:
            authenticate_header("Bearer not.a.jwt", codec)
        assert excinfo.value.message == MSG_INVALID_TOKEN

    def test_token_signed_with_other_secret(self, codec: SessionTokenCodec) -> None:
        token = SessionTokenCodec("some-other-secret-0123456789abcdefgh").issue(ACCOUNT_ID, "a@b.com")
        with pytest.raises(AuthenticationError) as excinfo:
            authenticate_header(f"Bearer {token}", codec)
        assert excinfo.value.message == MSG_INVALID_TOKEN

    def test_expired_token_same_message_as_forged(self) -> None:
        now = datetime.now(timezone.utc)
        issuer = SessionTokenCodec("gate-secret-0123456789abcdefghijklm", clock=lambda: now - timedelta(days=2))
        verifier = SessionTokenCodec("gate-secret-0123456789abcdefghijklm")
        token = issuer.issue(ACCOUNT_ID, "a@b.com")
        with pytest.raises(AuthenticationError) as excinfo:
            authenticate_header(f"Bearer {token}", verifier)
        assert excinfo.value.message == MSG_INVALID_TOKEN

    def test_extra_whitespace_is_not_trimmed(self, codec: SessionTokenCodec) -> None:
        token = codec.issue(ACCOUNT_ID, "a@b.com")
        with pytest.raises(AuthenticationError):
            authenticate_header(f"Bearer  {token}", codec)


class TestRequireAuth:
    def test_passes_context_through(self, codec: SessionTokenCodec) -> None:
        token = codec.issue(ACCOUNT_ID, "a@b.com")
        ctx = require_auth(_fake_request(codec, f"Bearer {token}"))
        assert ctx.account_id == ACCOUNT_ID

    def test_rejection_stays_401(self, codec: SessionTokenCodec) -> None:
        with pytest.raises(AuthenticationError):
            require_auth(_fake_request(codec))

    def test_internal_fault_becomes_500(self) -> None:
        """A missing codec is a server bug, not bad credentials."""
        with pytest.raises(InternalError) as excinfo:
            require_auth(_fake_request(None, "Bearer abc.def.ghi"))
        assert excinfo.value.status_code == 500
        assert excinfo.value.message == MSG_GATE_FAILED

    def test_codec_crash_becomes_500(self) -> None:
        class ExplodingCodec:
            def verify(self, token):
                raise RuntimeError("key store offline")

        with pytest.raises(InternalError):
            require_auth(_fake_request(ExplodingCodec(), "Bearer abc.def.ghi"))
