"""
auth/hashing.py -- bcrypt password hashing and verification.

Using bcrypt directly rather than passlib[bcrypt]: passlib's wrap-bug
detection trips over bcrypt 4.x, and the direct API is all we need.

The cost factor is embedded in every hash string ($2b$<rounds>$...), so
changing Settings.bcrypt_rounds only affects new hashes. Existing hashes keep
verifying at the cost they were created with.

bcrypt only looks at the first 72 bytes of a password. Recent bcrypt releases
raise ValueError for longer input instead of truncating, so we truncate
explicitly in one place and both hash() and verify() go through it.

Layer rule: no imports from api/, client/, or core/.
"""

from __future__ import annotations

import logging

import bcrypt

logger = logging.getLogger("sessiongate.auth.hashing")

DEFAULT_ROUNDS = 10
_BCRYPT_MAX_BYTES = 72


class HashingError(Exception):
    """bcrypt failed to produce a hash. Never raised for a wrong password."""


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


class CredentialHasher:
    """One-way password hashing with a fixed work factor.

    Usage:
        hasher = CredentialHasher(rounds=10)
        stored = hasher.hash("secret1")
        hasher.verify("secret1", stored)   # True
        hasher.verify("secret2", stored)   # False
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError(f"bcrypt rounds must be between 4 and 31, got {rounds}")
        self.rounds = rounds
        self._dummy_hash: str | None = None

    def hash(self, plain: str) -> str:
        """Return a salted bcrypt hash of the plaintext password."""
        try:
            return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")
        except (ValueError, TypeError) as exc:
            raise HashingError("bcrypt could not hash the password") from exc

    def verify(self, plain: str, hashed: str) -> bool:
        """Return True if the plaintext matches the hash.

        A malformed hash is a mismatch, not an error.
        """
        try:
            return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
        except (ValueError, TypeError):
            return False

    def dummy_verify(self, plain: str) -> bool:
        """Burn one verification's worth of CPU against a throwaway hash.

        Signin calls this when the email is unknown so the response time does
        not reveal whether an account exists. Always returns False.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("sessiongate_timing_dummy")
        self.verify(plain, self._dummy_hash)
        return False
