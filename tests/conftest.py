"""
tests/conftest.py -- Shared test fixtures for SessionGate.

This module provides:
  - hasher / codec / store / flows: the auth collaborators, built with a fixed
    secret and the minimum bcrypt cost so the suite stays fast
  - _patch_lifespan(): wires those collaborators into app.state, bypassing
    the real startup (which reads Settings and opens the default database)
  - api_client: TestClient against the real FastAPI app

Each test gets its own SQLite file under tmp_path. A file (not :memory:) is
used because TestClient runs sync route handlers in a worker thread pool, and
the concurrency tests need real cross-connection locking.

The DEBUG env var must be set before any api/ import so get_settings()
auto-generates SECRET_KEY in dev mode rather than raising ValueError.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set DEBUG before any api/core import so get_settings() can
# auto-generate SECRET_KEY in dev mode instead of raising ValueError.
os.environ.setdefault("DEBUG", "true")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.flows import AuthFlows
from auth.hashing import CredentialHasher
from auth.store import AccountStore
from auth.tokens import SessionTokenCodec

TEST_SECRET = "test-signing-secret-0123456789abcdef"


def _patch_lifespan(store: AccountStore, hasher: CredentialHasher, codec: SessionTokenCodec):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.account_store = store
        app.state.hasher = hasher
        app.state.token_codec = codec
        app.state.flows = AuthFlows(store, hasher, codec)
        yield

    return test_lifespan


@pytest.fixture
def hasher() -> CredentialHasher:
    return CredentialHasher(rounds=4)


@pytest.fixture
def codec() -> SessionTokenCodec:
    return SessionTokenCodec(TEST_SECRET)


@pytest.fixture
def store(tmp_path) -> Generator[AccountStore, None, None]:
    s = AccountStore(f"sqlite:///{tmp_path / 'accounts.db'}")
    yield s
    s.close()


@pytest.fixture
def flows(store: AccountStore, hasher: CredentialHasher, codec: SessionTokenCodec) -> AuthFlows:
    return AuthFlows(store, hasher, codec)


@pytest.fixture
def api_client(
    store: AccountStore, hasher: CredentialHasher, codec: SessionTokenCodec
) -> Generator[TestClient, None, None]:
    """Yield a TestClient for the real app backed by this test's store.

    raise_server_exceptions=False so the catch-all 500 handler can be
    asserted on like any other response.
    """
    app.router.lifespan_context = _patch_lifespan(store, hasher, codec)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


@pytest.fixture
def make_codec():
    """Factory for codecs sharing the app's secret but with their own clock.

    Used to mint tokens that are already expired from the app's point of view.
    """

    def _make(clock) -> SessionTokenCodec:
        return SessionTokenCodec(TEST_SECRET, clock=clock)

    return _make
