"""
auth/tokens.py -- Session token issuance and verification.

Security design decisions:
  JWT: python-jose with HS256. Tokens carry the account id, email, iat and
       exp claims and nothing else. They are stateless: there is no server-side
       session table and no revocation list, so a token stays valid until exp
       even after the client logs out.

  Secret: passed to SessionTokenCodec at construction and never mutated. The
       lifespan in api/main.py builds exactly one codec per process from
       Settings.secret_key; tests build their own with a fixed secret.

  Expiry: checked here rather than by jose so that (a) the boundary is exact
       -- a token is rejected at exp, not one second after -- and (b) the clock
       is injectable. ExpiredTokenError subclasses InvalidTokenError so callers
       that only care about "valid or not" catch one type.

  Canonical encoding: base64url has slack in the final character of a segment
       (the low bits are padding). jose's decoder ignores those bits, which
       means two different token strings can carry identical bytes. We reject
       any segment that does not re-encode to itself, so every single-character
       change to a token is a verification failure.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from jose.utils import base64url_decode, base64url_encode

from auth.models import TokenPayload

logger = logging.getLogger("sessiongate.auth.tokens")

_ALGORITHM = "HS256"
DEFAULT_TTL_SECONDS = 24 * 60 * 60

Clock = Callable[[], datetime]


class InvalidTokenError(Exception):
    """Signature mismatch, malformed structure, or bad claims."""


class ExpiredTokenError(InvalidTokenError):
    """Signature is good but the current time is at or past exp."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _is_canonical_segment(segment: str) -> bool:
    if not segment:
        return False
    try:
        raw = segment.encode("ascii")
        return base64url_encode(base64url_decode(raw)) == raw
    except (UnicodeEncodeError, ValueError):
        return False


def _from_epoch(value: object, claim: str) -> datetime:
    # bool is an int subclass; a token claiming iat=true is malformed.
    if not isinstance(value, int) or isinstance(value, bool):
        raise InvalidTokenError(f"Claim {claim!r} must be an integer timestamp")
    try:
        return datetime.fromtimestamp(value, tz=timezone.utc)
    except (OverflowError, OSError, ValueError) as exc:
        raise InvalidTokenError(f"Claim {claim!r} is out of range") from exc


class SessionTokenCodec:
    """Signs and verifies session tokens with a single symmetric secret.

    Usage:
        codec = SessionTokenCodec(settings.secret_key)
        token = codec.issue(account.id, account.email)
        payload = codec.verify(token)   # TokenPayload, or raises InvalidTokenError
    """

    def __init__(self, secret: str, ttl_seconds: int = DEFAULT_TTL_SECONDS, clock: Clock = _utcnow) -> None:
        if not secret:
            raise ValueError("Token signing secret must not be empty")
        if ttl_seconds <= 0:
            raise ValueError("Token lifetime must be positive")
        self._secret = secret
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    @property
    def ttl_seconds(self) -> int:
        return int(self._ttl.total_seconds())

    def issue(self, subject_id: str, subject_email: str) -> str:
        """Encode a signed token for the given account identity.

        iat is truncated to whole seconds (JWT NumericDate); exp = iat + ttl.
        """
        issued_at = int(self._clock().timestamp())
        claims = {
            "id": subject_id,
            "email": subject_email,
            "iat": issued_at,
            "exp": issued_at + self.ttl_seconds,
        }
        return jwt.encode(claims, self._secret, algorithm=_ALGORITHM)

    def verify(self, token: str) -> TokenPayload:
        """Verify signature, structure and expiry. Returns the decoded payload.

        Raises ExpiredTokenError if now >= exp, InvalidTokenError for
        everything else. Does not check that the account still exists.
        """
        if not isinstance(token, str):
            raise InvalidTokenError("Token must be a string")
        segments = token.split(".")
        if len(segments) != 3 or not all(_is_canonical_segment(s) for s in segments):
            raise InvalidTokenError("Token is not a well-formed compact JWS")

        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[_ALGORITHM],
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidTokenError(str(exc)) from exc

        subject_id = claims.get("id")
        subject_email = claims.get("email")
        if not isinstance(subject_id, str) or not isinstance(subject_email, str):
            raise InvalidTokenError("Token is missing identity claims")
        issued_at = _from_epoch(claims.get("iat"), "iat")
        expires_at = _from_epoch(claims.get("exp"), "exp")

        if self._clock() >= expires_at:
            raise ExpiredTokenError("Token has expired")

        return TokenPayload(
            id=subject_id,
            email=subject_email,
            issued_at=issued_at,
            expires_at=expires_at,
        )
