"""
JWT authentication helpers and the in-process session store.
"""

import threading
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

import jwt

from vanguard_admin.config import (
    SECRET_KEY,
    SESSION_COOKIE_NAME,
    SESSION_SWEEP_SECONDS,
    TOKEN_EXPIRY_HOURS,
)
from vanguard_admin.models import AccessContext


def generate_token(ctx: AccessContext) -> str:
    """Generate a JWT token for an authenticated user."""
    now = datetime.utcnow()
    payload = {
        "user_id": ctx.user_id,
        "role": ctx.role,
        "display_name": ctx.display_name,
        "iat": now,
        "exp": now + timedelta(hours=TOKEN_EXPIRY_HOURS),
    }
    return jwt.encode(payload, SECRET_KEY, algorithm="HS256")


def verify_token(token: str) -> Optional[Dict[str, Any]]:
    """Verify a JWT token and return the decoded payload (or None)."""
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=["HS256"])
    except jwt.ExpiredSignatureError:
        return None
    except jwt.InvalidTokenError:
        return None


class SessionStore:
    """Tokens issued at login, mapped to the caller's AccessContext.

    A token is only honoured while it is both a valid JWT and present here,
    so logging out revokes it before it expires.
    """

    def __init__(self):
        self._sessions: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._last_sweep = datetime.utcnow()

    def __len__(self) -> int:
        return len(self._sessions)

    def open(self, ctx: AccessContext) -> str:
        token = generate_token(ctx)
        now = datetime.utcnow()
        with self._lock:
            self._sessions[token] = {"ctx": ctx, "created_at": now, "last_activity": now}
        return token

    def get(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        if not token:
            return None
        if verify_token(token) is None:
            with self._lock:
                self._sessions.pop(token, None)
            return None
        with self._lock:
            data = self._sessions.get(token)
            if data is not None:
                data["last_activity"] = datetime.utcnow()
            return data

    def close(self, token: Optional[str]) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None

    def snapshot(self) -> List[Dict[str, Any]]:
        with self._lock:
            return [dict(data) for data in self._sessions.values()]

    def cleanup_expired(self) -> int:
        """Remove sessions whose token expired or that sat idle beyond TOKEN_EXPIRY_HOURS."""
        now = datetime.utcnow()
        with self._lock:
            self._last_sweep = now
            expired = [
                tok for tok, data in self._sessions.items()
                if (now - data["last_activity"]).total_seconds() > TOKEN_EXPIRY_HOURS * 3600
                or verify_token(tok) is None
            ]
            for tok in expired:
                del self._sessions[tok]
        if expired:
            print(f"[cleanup] Removed {len(expired)} expired sessions")
        return len(expired)

    def sweep(self, interval_seconds: int = SESSION_SWEEP_SECONDS) -> int:
        """Run cleanup_expired() at most once per *interval_seconds*."""
        if (datetime.utcnow() - self._last_sweep).total_seconds() < interval_seconds:
            return 0
        return self.cleanup_expired()


def extract_token(request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    auth_header = request.headers.get("Authorization", "")
    scheme, _, value = auth_header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(SESSION_COOKIE_NAME) or None


def resolve_session(request, store: SessionStore) -> Optional[AccessContext]:
    """The caller's AccessContext, or None when there is no live session."""
    data = store.get(extract_token(request))
    return data["ctx"] if data else None
