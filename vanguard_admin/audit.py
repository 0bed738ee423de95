"""
Audit trail for admin mutations. Writes are best-effort: a failed insert is
reported on stderr and never fails the request that triggered it.
"""

import sys
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import insert
from sqlalchemy.exc import SQLAlchemyError

from vanguard_admin.models import AccessContext
from vanguard_admin.tables import audit_logs


@dataclass(frozen=True)
class RequestOrigin:
    """Where a mutation came from."""
    ip_address: str = "unknown"
    user_agent: str = "unknown"
    method: str = ""
    url: str = ""


def record_audit(engine, event_type: str, description: str,
                 session: Optional[AccessContext], origin: Optional[RequestOrigin] = None,
                 details: Optional[dict] = None, severity: str = "low",
                 status: str = "success") -> bool:
    """Insert an audit_logs row; returns False instead of raising on failure."""
    origin = origin or RequestOrigin()
    values = {
        "event_type": event_type,
        "description": description,
        "user_id": str(session.user_id) if session and session.user_id is not None else None,
        "user_email": session.email if session else None,
        "user_role": session.role if session else None,
        "ip_address": origin.ip_address[:64],
        "user_agent": origin.user_agent[:300],
        "request_method": origin.method,
        "request_url": origin.url[:500],
        "details": details or {},
        "severity": severity,
        "status": status,
    }
    try:
        with engine.begin() as conn:
            conn.execute(insert(audit_logs).values(**values))
    except SQLAlchemyError as e:
        print(f"[WARN] [audit] Could not record '{event_type}': {e}", file=sys.stderr)
        return False
    return True
