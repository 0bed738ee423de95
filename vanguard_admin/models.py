"""
Domain dataclasses used across the application.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class Role(str, Enum):
    """Closed set of admin console permission levels."""
    ADMIN = "admin"
    EDITOR = "editor"
    REVIEWER = "reviewer"
    FINANCE = "finance"

    @classmethod
    def parse(cls, value) -> Optional["Role"]:
        """Return the matching Role, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


# Access decision reasons
UNAUTHENTICATED = "unauthenticated"
FORBIDDEN = "forbidden"
OK = "ok"


@dataclass
class AccessContext:
    """Represents the authenticated caller's identity."""
    user_id: Optional[Union[int, str]]
    display_name: str
    role: str                   # one of Role values; anything else is denied
    email: Optional[str] = None


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of an Access Gate check."""
    allowed: bool
    reason: str                 # UNAUTHENTICATED, FORBIDDEN or OK


@dataclass(frozen=True)
class PageParams:
    page: int
    limit: int
    skip: int


@dataclass(frozen=True)
class SortSpec:
    column: str
    direction: str = "desc"     # "asc" or "desc"


@dataclass
class QueryRequest:
    """A parsed listing request; built fresh per incoming request."""
    page: int
    limit: int
    skip: int
    sort: SortSpec
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None


@dataclass
class QueryPage:
    """One page of raw records plus the matching total."""
    items: List[Dict[str, Any]]
    total: int
