"""
client/session.py -- On-disk storage for the client's session token.

The CLI keeps the {token, user} pair from the last signin or signup in a small
JSON file (default ~/.sessiongate/session.json).

The file holds a live bearer token, so it is written with 0600 permissions.
A missing, empty or corrupt file reads as "signed out" rather than raising --
the fix for a corrupt session file is always to sign in again.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger("sessiongate.client.session")


@dataclass
class StoredSession:
    token: str
    user: Optional[dict] = None


class SessionFile:
    """Persist, load and discard the client's session."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[StoredSession]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Could not read session file %s: %s", self.path, e)
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Session file %s is corrupt; ignoring it", self.path)
            return None
        if not isinstance(data, dict) or not isinstance(data.get("token"), str) or not data["token"]:
            return None
        user = data.get("user")
        return StoredSession(token=data["token"], user=user if isinstance(user, dict) else None)

    def save(self, session: StoredSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps({"token": session.token, "user": session.user}, indent=2)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(payload)

    def update_user(self, user: dict) -> None:
        current = self.load()
        if current is not None:
            self.save(StoredSession(token=current.token, user=user))

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass

    def is_authenticated(self) -> bool:
        """True if a token is stored. Says nothing about whether the server still accepts it."""
        return self.load() is not None
