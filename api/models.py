"""
API request and response models for SessionGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal representation. Route handlers map between the two.

Every endpoint answers with the same envelope:

    {"message": str, "success": bool, "data": {...}}   -- data omitted when empty

Request fields are Optional on purpose: a missing email or password is a 400
with the flow's own message, not FastAPI's default 422.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /auth/signup."""

    email: Optional[str] = Field(default=None, max_length=255, examples=["user@example.com"])
    password: Optional[str] = Field(default=None, examples=["password123"])


class SigninRequest(BaseModel):
    """Request body for POST /auth/signin."""

    email: Optional[str] = Field(default=None, max_length=255, examples=["user@example.com"])
    password: Optional[str] = Field(default=None, examples=["password123"])


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class UserResponse(BaseModel):
    """Public view of an account. There is deliberately no password field."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    createdAt: str


class AuthData(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: UserResponse
    token: str


class ApiResponse(BaseModel):
    """The response envelope shared by every endpoint."""

    model_config = ConfigDict(frozen=True)

    message: str
    success: bool
    data: Optional[Any] = None

    def render(self) -> dict:
        """Serialize for the wire, dropping data when there is none."""
        body = {"message": self.message, "success": self.success}
        if self.data is not None:
            body["data"] = self.data
        return body


class AuthEnvelope(ApiResponse):
    """Envelope for signup and signin (documentation only)."""

    data: AuthData


class UserEnvelope(ApiResponse):
    """Envelope for GET /auth/me (documentation only)."""

    data: UserResponse


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "healthy"
    version: str
    components: dict[str, str]
