"""
client/api.py -- HTTP client for the SessionGate API.

Session rules:
  - the stored token is attached as "Authorization: Bearer <token>" on every call
  - any 401 response wipes the stored session (token expired or was rejected)
  - logout always discards the local session, even if the server call fails
  - restore() re-validates a stored session against GET /auth/me at startup

Transport failures (connection refused, timeout, non-JSON body) raise
AuthClientError. API-level failures (400/401/404/409/500) are returned as an
ApiResult with success=False so callers can show the server's message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

from client.session import SessionFile, StoredSession

logger = logging.getLogger("sessiongate.client")


class AuthClientError(Exception):
    """The API could not be reached or answered with something unparseable."""


@dataclass(frozen=True)
class ApiResult:
    status_code: int
    message: str
    success: bool
    data: Optional[Any] = None


class AuthClient:
    """Thin wrapper over requests.Session that manages the stored session.

    Usage:
        client = AuthClient("http://localhost:3000", SessionFile(path))
        result = client.signin("a@b.com", "secret1")
        if result.success:
            client.me().data["email"]
    """

    def __init__(
        self,
        base_url: str,
        session_file: SessionFile,
        http: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session_file = session_file
        self.timeout = timeout
        self._http = http or requests.Session()
        self._http.headers.update({"Content-Type": "application/json"})

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, body: Optional[dict] = None) -> ApiResult:
        headers: dict[str, str] = {}
        stored = self.session_file.load()
        if stored is not None:
            headers["Authorization"] = f"Bearer {stored.token}"
        try:
            resp = self._http.request(
                method,
                f"{self.base_url}{path}",
                json=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AuthClientError(f"Could not reach {self.base_url}: {e}") from e

        try:
            payload = resp.json()
        except ValueError as e:
            raise AuthClientError(f"Unexpected non-JSON response ({resp.status_code}) from {path}") from e
        if not isinstance(payload, dict):
            raise AuthClientError(f"Unexpected response shape from {path}")

        if resp.status_code == 401:
            # Token expired or was rejected -- drop it so the next run starts signed out.
            self.session_file.clear()

        return ApiResult(
            status_code=resp.status_code,
            message=str(payload.get("message", "")),
            success=bool(payload.get("success", False)),
            data=payload.get("data"),
        )

    def _store_auth(self, result: ApiResult) -> None:
        if result.success and isinstance(result.data, dict) and result.data.get("token"):
            self.session_file.save(StoredSession(token=result.data["token"], user=result.data.get("user")))

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def signup(self, email: str, password: str) -> ApiResult:
        result = self._request("POST", "/auth/signup", {"email": email, "password": password})
        self._store_auth(result)
        return result

    def signin(self, email: str, password: str) -> ApiResult:
        result = self._request("POST", "/auth/signin", {"email": email, "password": password})
        self._store_auth(result)
        return result

    def logout(self) -> Optional[ApiResult]:
        """Tell the server, then discard the local session regardless of the outcome.

        Returns None if the server could not be reached.
        """
        try:
            return self._request("POST", "/auth/logout")
        except AuthClientError as e:
            logger.warning("Logout call failed, clearing local session anyway: %s", e)
            return None
        finally:
            self.session_file.clear()

    def me(self) -> ApiResult:
        result = self._request("GET", "/auth/me")
        if result.success and isinstance(result.data, dict):
            self.session_file.update_user(result.data)
        return result

    def restore(self) -> Optional[dict]:
        """Validate the stored session with the server.

        Returns the fresh user view, or None (and clears the session) if there
        is no stored session or the server no longer accepts it.
        """
        stored = self.session_file.load()
        if stored is None:
            return None
        try:
            result = self.me()
        except AuthClientError:
            self.session_file.clear()
            raise
        if not result.success:
            self.session_file.clear()
            return None
        return result.data

    def is_authenticated(self) -> bool:
        return self.session_file.is_authenticated()
