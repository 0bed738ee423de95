"""
Pagination and sort resolution for listing endpoints.

Query-string input is untrusted; nothing in here raises. Malformed values
degrade to defaults so pagination never fails a request.
"""

import math
from typing import Mapping, Optional

from vanguard_admin.config import (
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    MAX_PAGE_NUMBER,
)
from vanguard_admin.models import PageParams, SortSpec


def _positive_int(raw) -> Optional[int]:
    """Parse *raw* as an integer >= 1, or return None."""
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if value >= 1 else None


def resolve(raw_page, raw_limit, max_limit: int = MAX_PAGE_LIMIT,
            default_limit: int = DEFAULT_PAGE_LIMIT) -> PageParams:
    """Turn raw ``page``/``limit`` values into a validated (page, limit, skip)."""
    max_limit = max(1, int(max_limit))

    page = min(_positive_int(raw_page) or 1, MAX_PAGE_NUMBER)
    limit = _positive_int(raw_limit) or default_limit
    limit = max(1, min(limit, max_limit))

    return PageParams(page=page, limit=limit, skip=(page - 1) * limit)


def pagination_meta(page: int, limit: int, total: int) -> dict:
    """Build the client-facing pagination block."""
    total_pages = math.ceil(total / limit) if total > 0 else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
    }


def resolve_sort(raw_sort_by, raw_sort_order, sortable: Mapping[str, str],
                 default_field: str, default_direction: str = "desc") -> SortSpec:
    """Map ``sortBy``/``sortOrder`` onto an allow-listed column."""
    key = (raw_sort_by or "").strip()
    if key not in sortable:
        key = default_field
    column = sortable[key]

    order = (raw_sort_order or "").strip().lower()
    if order not in ("asc", "desc"):
        order = default_direction
    return SortSpec(column=column, direction=order)
