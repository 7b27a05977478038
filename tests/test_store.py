"""Unit tests for auth/store.py -- AccountStore.

Covers:
- create_account() assigns a uuid id and an ISO-8601 created_at
- get_by_email() is exact and case-sensitive; get_by_id() round trip
- duplicate email raises IntegrityError (the race-safe conflict signal)
- delete_account(), count(), ping()
"""

import uuid
from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError

from auth.store import AccountStore


@pytest.fixture
def mem_store():
    s = AccountStore("sqlite:///:memory:")
    yield s
    s.close()


def test_create_assigns_identity(mem_store: AccountStore) -> None:
    account = mem_store.create_account("a@b.com", "$2b$04$hash")
    assert uuid.UUID(account.id).version == 4
    assert account.email == "a@b.com"
    assert account.password_hash == "$2b$04$hash"
    assert datetime.fromisoformat(account.created_at).tzinfo is not None


def test_lookup_by_email_and_id(mem_store: AccountStore) -> None:
    created = mem_store.create_account("a@b.com", "h")
    assert mem_store.get_by_email("a@b.com") == created
    assert mem_store.get_by_id(created.id) == created


def test_lookup_misses_return_none(mem_store: AccountStore) -> None:
    assert mem_store.get_by_email("nobody@example.com") is None
    assert mem_store.get_by_id(str(uuid.uuid4())) is None


def test_email_lookup_is_case_sensitive(mem_store: AccountStore) -> None:
    mem_store.create_account("a@b.com", "h")
    assert mem_store.get_by_email("A@B.COM") is None


def test_case_variants_are_distinct_accounts(mem_store: AccountStore) -> None:
    first = mem_store.create_account("a@b.com", "h")
    second = mem_store.create_account("A@b.com", "h")
    assert first.id != second.id
    assert mem_store.count() == 2


def test_duplicate_email_raises_integrity_error(mem_store: AccountStore) -> None:
    mem_store.create_account("a@b.com", "h1")
    with pytest.raises(IntegrityError):
        mem_store.create_account("a@b.com", "h2")
    assert mem_store.count() == 1
    assert mem_store.get_by_email("a@b.com").password_hash == "h1"


def test_delete_account(mem_store: AccountStore) -> None:
    account = mem_store.create_account("a@b.com", "h")
    assert mem_store.delete_account(account.id) is True
    assert mem_store.get_by_id(account.id) is None
    assert mem_store.delete_account(account.id) is False


def test_ping(mem_store: AccountStore) -> None:
    assert mem_store.ping() is True


def test_file_store_persists_across_instances(tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'persist.db'}"
    first = AccountStore(url)
    created = first.create_account("a@b.com", "h")
    first.close()

    second = AccountStore(url)
    try:
        assert second.get_by_id(created.id) == created
    finally:
        second.close()
