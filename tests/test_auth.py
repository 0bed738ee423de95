"""
Unit tests for tokens, the session store and token extraction.
"""

from datetime import datetime, timedelta

import jwt

from vanguard_admin.api.auth import (
    SessionStore,
    extract_token,
    generate_token,
    resolve_session,
    verify_token,
)
from vanguard_admin.config import SECRET_KEY, SESSION_COOKIE_NAME
from vanguard_admin.models import AccessContext


class FakeRequest:
    def __init__(self, headers=None, cookies=None):
        self.headers = headers or {}
        self.cookies = cookies or {}


CTX = AccessContext(user_id=3, display_name="Fin", role="finance", email="f@example.org")


# ── Tests: tokens ────────────────────────────────────────────────────

def test_token_round_trip():
    payload = verify_token(generate_token(CTX))
    assert payload["user_id"] == 3
    assert payload["role"] == "finance"


def test_expired_token_is_rejected():
    token = jwt.encode(
        {"user_id": 1, "exp": datetime.utcnow() - timedelta(seconds=5)},
        SECRET_KEY, algorithm="HS256",
    )
    assert verify_token(token) is None


def test_foreign_signature_is_rejected():
    token = jwt.encode({"user_id": 1}, "another-secret-key-of-sufficient-length", algorithm="HS256")
    assert verify_token(token) is None


# ── Tests: SessionStore ──────────────────────────────────────────────

def test_open_get_close():
    store = SessionStore()
    token = store.open(CTX)
    assert len(store) == 1
    assert store.get(token)["ctx"] is CTX
    assert store.close(token) is True
    assert store.get(token) is None
    assert store.close(token) is False


def test_unknown_or_garbage_token():
    store = SessionStore()
    assert store.get(None) is None
    assert store.get("not-a-jwt") is None
    # valid signature but never opened here
    assert store.get(generate_token(CTX)) is None


def expired_token():
    return jwt.encode(
        {"user_id": 3, "exp": datetime.utcnow() - timedelta(seconds=5)},
        SECRET_KEY, algorithm="HS256",
    )


def plant(store, token):
    now = datetime.utcnow()
    store._sessions[token] = {"ctx": CTX, "created_at": now, "last_activity": now}


def test_cleanup_expired(capsys):
    store = SessionStore()
    token = store.open(CTX)
    store.get(token)["last_activity"] = datetime.utcnow() - timedelta(days=2)
    assert store.cleanup_expired() == 1
    assert len(store) == 0
    assert "[cleanup] Removed 1 expired sessions" in capsys.readouterr().out


def test_expired_token_is_evicted_on_lookup():
    store = SessionStore()
    token = expired_token()
    plant(store, token)
    assert len(store) == 1
    assert store.get(token) is None
    assert len(store) == 0


def test_cleanup_drops_expired_tokens_even_when_recently_active():
    store = SessionStore()
    plant(store, expired_token())
    live = store.open(CTX)
    assert store.cleanup_expired() == 1
    assert store.get(live)["ctx"] is CTX


def test_sweep_is_throttled():
    store = SessionStore()
    plant(store, expired_token())
    assert store.sweep(interval_seconds=3600) == 0
    assert len(store) == 1
    assert store.sweep(interval_seconds=0) == 1
    assert len(store) == 0


# ── Tests: extract_token / resolve_session ───────────────────────────

def test_bearer_header_wins_over_cookie():
    req = FakeRequest({"Authorization": "Bearer abc"}, {SESSION_COOKIE_NAME: "cookie"})
    assert extract_token(req) == "abc"


def test_cookie_fallback():
    assert extract_token(FakeRequest(cookies={SESSION_COOKIE_NAME: "cookie"})) == "cookie"


def test_malformed_header_falls_back_to_nothing():
    assert extract_token(FakeRequest({"Authorization": "Bearer"})) is None
    assert extract_token(FakeRequest({"Authorization": "Basic dXNlcg=="})) is None


def test_resolve_session():
    store = SessionStore()
    token = store.open(CTX)
    assert resolve_session(FakeRequest({"Authorization": f"Bearer {token}"}), store) is CTX
    assert resolve_session(FakeRequest(), store) is None
