"""Tests for session storage and the admin access gate."""

import re

import pytest

from solo_stage.schemas.session import SessionIdentity
from solo_stage.services.sessions import (
    AccessGate,
    SessionStore,
    SessionStoreUnavailableError,
)
from tests.conftest import ADMIN_EMAIL

WEEK = 7 * 24 * 60 * 60


@pytest.fixture()
def store(kv) -> SessionStore:
    return SessionStore(kv, ttl_seconds=WEEK)


def test_create_and_lookup_round_trip(store, kv) -> None:
    identity = SessionIdentity(email=ADMIN_EMAIL, name="Owner", picture="https://img.example/p.png")

    token = store.create(identity)

    assert re.fullmatch(r"[0-9a-f]{64}", token)
    assert store.lookup(token) == identity
    assert WEEK - 5 <= kv.ttl(f"session:{token}") <= WEEK


def test_tokens_are_unique(store) -> None:
    identity = SessionIdentity(email=ADMIN_EMAIL)

    assert store.create(identity) != store.create(identity)


def test_lookup_does_not_extend_lifetime(store, kv) -> None:
    token = store.create(SessionIdentity(email=ADMIN_EMAIL))
    kv.expire(f"session:{token}", 10)

    store.lookup(token)

    assert kv.ttl(f"session:{token}") <= 10


def test_destroyed_session_is_gone(store) -> None:
    token = store.create(SessionIdentity(email=ADMIN_EMAIL))

    store.destroy(token)

    assert store.lookup(token) is None


def test_expired_session_is_gone(store, kv) -> None:
    token = store.create(SessionIdentity(email=ADMIN_EMAIL))
    kv.delete(f"session:{token}")

    assert store.lookup(token) is None


def test_missing_and_malformed_tokens(store, kv) -> None:
    assert store.lookup(None) is None
    assert store.lookup("") is None
    assert store.lookup("0" * 64) is None

    kv.set("session:broken", "{not json")
    assert store.lookup("broken") is None


def test_store_without_client_is_unavailable() -> None:
    store = SessionStore(None)

    with pytest.raises(SessionStoreUnavailableError):
        store.create(SessionIdentity(email=ADMIN_EMAIL))
    with pytest.raises(SessionStoreUnavailableError):
        store.lookup("token")


def test_gate_accepts_allow_listed_session(store) -> None:
    token = store.create(SessionIdentity(email=ADMIN_EMAIL))
    gate = AccessGate(store, ADMIN_EMAIL)

    assert gate.is_authorized(token)
    assert gate.authorize(token).email == ADMIN_EMAIL


def test_gate_rejects_other_email(store) -> None:
    token = store.create(SessionIdentity(email="someone@example.com"))

    assert not AccessGate(store, ADMIN_EMAIL).is_authorized(token)


@pytest.mark.parametrize("allowed", [None, ""])
def test_gate_without_allow_list_refuses_everyone(store, allowed) -> None:
    token = store.create(SessionIdentity(email=ADMIN_EMAIL))
    gate = AccessGate(store, allowed)

    assert not gate.is_authorized(token)
    assert not gate.is_allowed_email(ADMIN_EMAIL)


def test_gate_rejects_destroyed_session(store) -> None:
    token = store.create(SessionIdentity(email=ADMIN_EMAIL))
    store.destroy(token)

    assert not AccessGate(store, ADMIN_EMAIL).is_authorized(token)
