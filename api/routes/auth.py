"""
api/routes/auth.py -- Signup, signin, logout and current-user endpoints.

Routes:
  POST /auth/signup   -- create account; 201 with {user, token}
  POST /auth/signin   -- password login; 200 with {user, token}
  POST /auth/logout   -- acknowledge logout (requires auth); 200
  GET  /auth/me       -- fresh account view (requires auth); 200

Security:
  Signin answers wrong-email and wrong-password with the same 401 message and
  the same bcrypt cost (see auth/flows.py).
  Cache-Control: no-store on every response that carries a token.
  Logout revokes nothing. Tokens are stateless and remain valid until they
  expire; the client is responsible for discarding its copy.

Handlers stay thin: parse the body, call the flow, render the FlowResult.
Failures propagate as AuthServiceError and are rendered by the handlers in
api/main.py.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.models import ApiResponse, AuthEnvelope, SigninRequest, SignupRequest, UserEnvelope
from auth.dependencies import require_auth
from auth.flows import AuthFlows, FlowResult
from auth.models import AuthContext

# Auth policy:
# - POST /auth/signup:  public
# - POST /auth/signin:  public
# - POST /auth/logout:  requires auth (require_auth)
# - GET  /auth/me:      requires auth (require_auth)
router = APIRouter(prefix="/auth")

_ERROR_RESPONSES = {
    400: {"model": ApiResponse, "description": "Missing or invalid fields"},
    500: {"model": ApiResponse, "description": "Internal server error"},
}
_AUTH_ERROR = {401: {"model": ApiResponse, "description": "Missing, invalid or expired token"}}


def get_flows(request: Request) -> AuthFlows:
    return request.app.state.flows


def _render(result: FlowResult, no_store: bool = False) -> JSONResponse:
    resp = JSONResponse(
        status_code=result.status_code,
        content=ApiResponse(message=result.message, success=True, data=result.data).render(),
    )
    if no_store:
        resp.headers["Cache-Control"] = "no-store"
    return resp


@router.post(
    "/signup",
    status_code=201,
    response_model=AuthEnvelope,
    responses={**_ERROR_RESPONSES, 409: {"model": ApiResponse, "description": "User already exists"}},
)
def signup(body: SignupRequest, flows: AuthFlows = Depends(get_flows)) -> JSONResponse:
    """Create a new account and sign it in."""
    return _render(flows.signup(body.email, body.password), no_store=True)


@router.post(
    "/signin",
    response_model=AuthEnvelope,
    responses={**_ERROR_RESPONSES, 401: {"model": ApiResponse, "description": "Invalid credentials"}},
)
def signin(body: SigninRequest, flows: AuthFlows = Depends(get_flows)) -> JSONResponse:
    """Exchange email and password for a session token."""
    return _render(flows.signin(body.email, body.password), no_store=True)


@router.post("/logout", response_model=ApiResponse, responses={**_AUTH_ERROR, 500: _ERROR_RESPONSES[500]})
def logout(auth: AuthContext = Depends(require_auth), flows: AuthFlows = Depends(get_flows)) -> JSONResponse:
    """Log out of the current session. The client must discard its token."""
    return _render(flows.logout(auth))


@router.get(
    "/me",
    response_model=UserEnvelope,
    responses={
        **_AUTH_ERROR,
        404: {"model": ApiResponse, "description": "Account no longer exists"},
        500: _ERROR_RESPONSES[500],
    },
)
def me(auth: AuthContext = Depends(require_auth), flows: AuthFlows = Depends(get_flows)) -> JSONResponse:
    """Return the current account, re-read from the database."""
    return _render(flows.me(auth))
