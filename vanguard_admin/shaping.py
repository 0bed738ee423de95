"""
Response envelopes and value normalisation for the client-facing JSON.
"""

from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, Optional

from vanguard_admin.config import MAX_STORED_INTEGER


def success_body(data: Any, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def error_body(message: str, details: Any = None) -> dict:
    body = {"success": False, "error": message}
    if details:
        body["details"] = details
    return body


def shape(items: Iterable[dict], mapper: Callable[[dict], dict], meta: dict,
          collection: str, extra: Optional[Dict[str, Any]] = None) -> dict:
    """Map raw records and wrap them with pagination metadata."""
    data = {collection: [mapper(item) for item in items]}
    if extra:
        data.update(extra)
    data["pagination"] = dict(meta)
    return success_body(data)


def public_id(value) -> Optional[str]:
    return str(value) if value is not None else None


def iso(value) -> Optional[str]:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def parse_id(raw) -> Optional[int]:
    """Record ids are positive integers on the wire as strings; None if malformed."""
    try:
        value = int(str(raw))
    except (TypeError, ValueError):
        return None
    return value if 0 < value <= MAX_STORED_INTEGER else None
