"""
auth/dependencies.py -- The authentication gate for protected routes.

One method only: the Authorization header carrying "Bearer <token>". No
cookies, no API keys.

authenticate_header() is the pure check -- header value in, AuthContext out,
AuthenticationError (401) on any rejection. require_auth() adapts it to
FastAPI's Depends() and converts unexpected faults into InternalError (500),
which is a different failure class from "credentials rejected".

Per-request states:
  no header               -> 401 "Authorization header is required"
  not "Bearer <token>"    -> 401 "Authorization header is required"
  token invalid / expired -> 401 "Invalid or expired token"
  token valid             -> AuthContext handed to the route handler

Layer rule: no imports from api/, client/, or core/.
  auth/dependencies.py may import from fastapi because it is part of the
  FastAPI dependency injection system.
"""

from __future__ import annotations

import logging

from fastapi import Request

from auth.errors import AuthenticationError, AuthServiceError, InternalError
from auth.models import AuthContext
from auth.tokens import InvalidTokenError, SessionTokenCodec

logger = logging.getLogger("sessiongate.auth.gate")

_BEARER_PREFIX = "Bearer "

MSG_HEADER_REQUIRED = "Authorization header is required"
MSG_INVALID_TOKEN = "Invalid or expired token"
MSG_GATE_FAILED = "Authentication failed"


def authenticate_header(header_value: str | None, codec: SessionTokenCodec) -> AuthContext:
    """Verify an Authorization header value and return the request's identity.

    Raises AuthenticationError for every rejection. Expired and forged tokens
    share one message; the distinction is only visible in the server log.
    """
    if not header_value or not header_value.startswith(_BEARER_PREFIX):
        raise AuthenticationError(MSG_HEADER_REQUIRED)
    token = header_value[len(_BEARER_PREFIX) :]
    if not token:
        raise AuthenticationError(MSG_HEADER_REQUIRED)

    try:
        payload = codec.verify(token)
    except InvalidTokenError as exc:
        logger.info("Rejected token: %s (%s)", type(exc).__name__, exc)
        raise AuthenticationError(MSG_INVALID_TOKEN) from exc

    return AuthContext(token=token, payload=payload)


def require_auth(request: Request) -> AuthContext:
    """Require a valid bearer token. Raises 401 if rejected, 500 on internal fault.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(auth: AuthContext = Depends(require_auth)): ...
    """
    try:
        codec: SessionTokenCodec = request.app.state.token_codec
        return authenticate_header(request.headers.get("Authorization"), codec)
    except AuthServiceError:
        raise
    except Exception as exc:
        logger.exception("Authentication gate failed on %s %s", request.method, request.url.path)
        raise InternalError(MSG_GATE_FAILED) from exc
