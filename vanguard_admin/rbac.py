"""
Role-Based Access Control – loading the caller's context and gating endpoints.
"""

from typing import FrozenSet, Iterable, Optional

from sqlalchemy import select

from vanguard_admin.errors import AuthenticationRequired, PermissionDenied
from vanguard_admin.models import (
    FORBIDDEN,
    OK,
    UNAUTHENTICATED,
    AccessContext,
    AccessDecision,
    Role,
)
from vanguard_admin.tables import admin_users

ALL_ROLES: FrozenSet[Role] = frozenset(Role)


def role_set(*names) -> FrozenSet[Role]:
    """Build an allow-list, rejecting misspelt role names up front."""
    roles = set()
    for name in names:
        role = Role.parse(name)
        if role is None:
            raise ValueError(f"Unknown role '{name}' in allow-list.")
        roles.add(role)
    return frozenset(roles)


def authorize(session: Optional[AccessContext], allowed_roles: Iterable[Role]) -> AccessDecision:
    """Decide whether *session* may call an endpoint allowing *allowed_roles*."""
    if session is None or session.user_id in (None, ""):
        return AccessDecision(allowed=False, reason=UNAUTHENTICATED)

    role = Role.parse(session.role)
    if role is None or role not in allowed_roles:
        return AccessDecision(allowed=False, reason=FORBIDDEN)

    return AccessDecision(allowed=True, reason=OK)


def enforce(decision: AccessDecision) -> None:
    """Raise the error matching a negative decision."""
    if decision.reason == UNAUTHENTICATED:
        raise AuthenticationRequired()
    if not decision.allowed:
        raise PermissionDenied()


def load_access_context(engine, api_key: str) -> AccessContext:
    """Look up an active admin user by API key and return their AccessContext."""
    stmt = (
        select(admin_users.c.id, admin_users.c.display_name,
               admin_users.c.role, admin_users.c.email)
        .where(admin_users.c.api_key == api_key)
        .where(admin_users.c.is_active.is_(True))
        .limit(1)
    )
    with engine.connect() as conn:
        row = conn.execute(stmt).mappings().first()

    if not row:
        raise ValueError("Invalid key or user inactive (no match in admin_users).")

    role = Role.parse(row["role"])
    if role is None:
        raise ValueError(f"Unsupported role '{row['role']}' in admin_users.")

    return AccessContext(
        user_id=int(row["id"]),
        display_name=str(row["display_name"]),
        role=role.value,
        email=row["email"],
    )
