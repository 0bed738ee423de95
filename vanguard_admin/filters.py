"""
Filter composition: recognised query parameters -> backend-agnostic predicate.

A FieldSpec is declared once per resource. compose() reads only the keys the
spec names, so unknown query keys are ignored.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Tuple

from vanguard_admin.config import MAX_SEARCH_LENGTH, MAX_STORED_INTEGER

EQ = "eq"
NE = "ne"
GTE = "gte"
LTE = "lte"
CONTAINS = "contains"

LIKE_ESCAPE = "\\"


# ── Coercers ─────────────────────────────────────────────────────────
# A coercer turns the raw string into the stored value; None skips the filter.

def as_text(raw: str) -> Optional[str]:
    return raw or None


def as_bool(raw: str) -> Optional[bool]:
    value = raw.lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return None


def as_int(raw: str) -> Optional[int]:
    try:
        value = int(raw)
    except ValueError:
        return None
    return value if -MAX_STORED_INTEGER - 1 <= value <= MAX_STORED_INTEGER else None


def as_datetime(raw: str) -> Optional[datetime]:
    """ISO-8601 date or datetime, normalised to naive UTC like the stored values."""
    try:
        value = datetime.fromisoformat(raw.replace("Z", "+00:00"))
    except ValueError:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ── Declarations ─────────────────────────────────────────────────────

@dataclass(frozen=True)
class ExactFilter:
    """Query key compared by equality against a column.

    ``default`` is used as the raw value when the key is absent.
    """
    param: str
    column: str
    coerce: Callable[[str], Any] = as_text
    default: Optional[str] = None


@dataclass(frozen=True)
class RangeFilter:
    """Query key used as an inclusive bound (op is GTE or LTE)."""
    param: str
    column: str
    op: str
    coerce: Callable[[str], Any] = as_datetime


@dataclass(frozen=True)
class FixedCondition:
    """Condition applied to every query for a resource."""
    column: str
    value: Any
    negate: bool = False

    def holds_for(self, record: dict) -> bool:
        same = record.get(self.column) == self.value
        return not same if self.negate else same


@dataclass(frozen=True)
class FieldSpec:
    exact: Tuple[ExactFilter, ...] = ()
    ranges: Tuple[RangeFilter, ...] = ()
    fixed: Tuple[FixedCondition, ...] = ()
    search_fields: Tuple[str, ...] = ()
    search_param: str = "search"


# ── Predicate ────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Condition:
    column: str
    op: str
    value: Any
    param: Optional[str] = None     # query key that produced it; None for fixed ones


@dataclass(frozen=True)
class FilterPredicate:
    """``conditions`` are ANDed; ``any_of`` is one OR-group ANDed with them."""
    conditions: Tuple[Condition, ...] = ()
    any_of: Tuple[Condition, ...] = ()

    @property
    def search_term(self) -> Optional[str]:
        return self.any_of[0].value if self.any_of else None

    def applied_filters(self) -> dict:
        """Caller-supplied filters keyed by query parameter."""
        return {c.param: c.value for c in self.conditions if c.param}


def escape_like(term: str) -> str:
    """Neutralise LIKE wildcards so *term* is matched literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def _param(params: Mapping[str, Any], key: str) -> Optional[str]:
    raw = params.get(key)
    if raw is None:
        return None
    raw = str(raw).strip()
    return raw or None


def compose(params: Mapping[str, Any], spec: FieldSpec) -> FilterPredicate:
    """Build a FilterPredicate from query parameters according to *spec*."""
    conditions = [
        Condition(f.column, NE if f.negate else EQ, f.value) for f in spec.fixed
    ]

    for f in spec.exact:
        raw = _param(params, f.param) or f.default
        if raw is None:
            continue
        value = f.coerce(raw)
        if value is not None:
            conditions.append(Condition(f.column, EQ, value, f.param))

    for f in spec.ranges:
        raw = _param(params, f.param)
        if raw is None:
            continue
        value = f.coerce(raw)
        if value is not None:
            conditions.append(Condition(f.column, f.op, value, f.param))

    any_of = ()
    term = _param(params, spec.search_param)
    if term and spec.search_fields:
        term = term[:MAX_SEARCH_LENGTH]
        any_of = tuple(Condition(col, CONTAINS, term) for col in spec.search_fields)

    return FilterPredicate(conditions=tuple(conditions), any_of=any_of)
