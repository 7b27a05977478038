"""
api/main.py -- FastAPI application entry point for SessionGate.

Run with:  uvicorn asgi:app --reload

Middleware stack (outermost to innermost):
  1. CORSMiddleware -- adds CORS headers for allowed browser origins
  2. log_requests   -- one log line per request with status and latency

Lifespan builds the per-process collaborators from Settings and hangs them on
app.state:
  account_store -- AccountStore (SQLAlchemy engine + pool)
  hasher        -- CredentialHasher (bcrypt rounds)
  token_codec   -- SessionTokenCodec (signing secret, 24h lifetime)
  flows         -- AuthFlows composed from the three above

Every response, success or failure, uses the {message, success, data?}
envelope from api.models.ApiResponse.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.models import ApiResponse, HealthResponse
from api.routes.auth import router as auth_router
from auth.errors import AuthServiceError
from auth.flows import AuthFlows
from auth.hashing import CredentialHasher
from auth.store import AccountStore
from auth.tokens import SessionTokenCodec
from core.config import get_settings

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-5s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("sessiongate.api")

_settings = get_settings()


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the auth collaborators on startup and release the pool on shutdown.

    The signing secret is read exactly once, here. Nothing else in the process
    holds or mutates it.
    """
    logger.info("SessionGate API starting up")
    store = AccountStore(_settings.database_url)
    if store.ping():
        logger.info("Database connected")
    else:
        logger.error("Database connection failed -- requests will answer 500 until it recovers")
    hasher = CredentialHasher(rounds=_settings.bcrypt_rounds)
    codec = SessionTokenCodec(_settings.secret_key, ttl_seconds=_settings.token_expire_seconds)

    app.state.account_store = store
    app.state.hasher = hasher
    app.state.token_codec = codec
    app.state.flows = AuthFlows(store, hasher, codec)

    yield

    store.close()
    logger.info("SessionGate API shutdown complete")


# ---------------------------------------------------------------------------
# App instantiation
# ---------------------------------------------------------------------------

app = FastAPI(
    title="SessionGate Authentication API",
    description="Email/password signup and signin with stateless bearer tokens.",
    version=__version__,
    lifespan=lifespan,
    docs_url="/api-docs",
    openapi_url="/api-docs/json",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type", "Authorization"],
    max_age=3600,
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s %d %.1fms %s",
        request.method,
        request.url.path,
        response.status_code,
        ms,
        request.client.host if request.client else "unknown",
    )
    return response


app.include_router(auth_router, tags=["Authentication"])


# ---------------------------------------------------------------------------
# Exception handlers
#
# All handlers return the same envelope so clients can read .message and
# .success without inspecting the status code first.
# ---------------------------------------------------------------------------


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ApiResponse(message=message, success=False).render(),
    )


@app.exception_handler(AuthServiceError)
async def auth_service_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    """Render an expected failure (400/401/404/409/500) raised by a flow or the gate."""
    return _error(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return 400 when the body is not JSON or a field has the wrong type."""
    # Field locations only; the rejected input may contain a password.
    fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
    logger.info("Rejected request body on %s: %s", request.url.path, fields)
    return _error(400, "Invalid request body")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Wrap routing errors (404 unknown path, 405 wrong method) in the envelope."""
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected server errors.

    The raw exception goes to the log only, never to the response body.
    """
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    return _error(500, "Internal server error")


# ---------------------------------------------------------------------------
# Public endpoints
# ---------------------------------------------------------------------------


@app.get("/", response_model=ApiResponse, tags=["Health"])
async def root() -> JSONResponse:
    """Welcome message pointing at the API documentation."""
    return JSONResponse(
        content=ApiResponse(
            message="Welcome to SessionGate Authentication API! Visit /api-docs for documentation.",
            success=True,
        ).render()
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health(request: Request) -> HealthResponse:
    """Return liveness plus a database connectivity check."""
    db_ok = request.app.state.account_store.ping()
    return HealthResponse(
        status="healthy" if db_ok else "degraded",
        version=__version__,
        components={"app": "ok", "database": "ok" if db_ok else "error"},
    )
