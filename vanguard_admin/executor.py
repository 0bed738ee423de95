"""
Query execution: filter + sort + pagination against a table.

The count and the page fetch run as two statements on one connection without
a shared transaction. Under concurrent writes ``total`` can drift from the
rows actually paged through; admin listings accept that window.
"""

import sys
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from sqlalchemy import String, and_, case, func, literal, or_, select, true
from sqlalchemy.exc import SQLAlchemyError

from vanguard_admin.database import fold_case
from vanguard_admin.errors import QueryFailed
from vanguard_admin.filters import (
    CONTAINS,
    EQ,
    GTE,
    LIKE_ESCAPE,
    LTE,
    NE,
    Condition,
    FilterPredicate,
    escape_like,
)
from vanguard_admin.models import QueryPage, SortSpec


# ── Clause building ──────────────────────────────────────────────────

def _condition_clause(table, cond: Condition):
    col = table.c[cond.column]
    if cond.op == EQ:
        return col == cond.value
    if cond.op == NE:
        # rows without the field are "not equal" too
        return or_(col != cond.value, col.is_(None))
    if cond.op == GTE:
        return col >= cond.value
    if cond.op == LTE:
        return col <= cond.value
    if cond.op == CONTAINS:
        pattern = literal(f"%{escape_like(str(cond.value))}%", String)
        return fold_case(col).like(fold_case(pattern), escape=LIKE_ESCAPE)
    raise ValueError(f"Unsupported filter operator: {cond.op}")


def build_where(table, predicate: FilterPredicate):
    """Compile a FilterPredicate into a single WHERE clause."""
    clauses = [_condition_clause(table, c) for c in predicate.conditions]
    if predicate.any_of:
        clauses.append(or_(*[_condition_clause(table, c) for c in predicate.any_of]))
    if not clauses:
        return true()
    return and_(*clauses)


def build_order(table, sort: SortSpec):
    col = table.c[sort.column]
    primary = col.asc() if sort.direction == "asc" else col.desc()
    # primary key breaks ties so pages never overlap or reshuffle
    return [primary, table.c.id.asc()]


# ── Execution ────────────────────────────────────────────────────────

def _failed(table, exc: Exception) -> QueryFailed:
    print(f"[ERROR] Query on '{table.name}' failed: {exc}", file=sys.stderr)
    return QueryFailed(f"Failed to fetch {table.name.replace('_', ' ')}", details=str(exc))


def execute(engine, table, predicate: FilterPredicate, sort: SortSpec,
            skip: int, limit: int) -> QueryPage:
    """Return one sorted page of matching rows plus the total match count."""
    where = build_where(table, predicate)
    count_stmt = select(func.count()).select_from(table).where(where)
    fetch_stmt = (
        select(table)
        .where(where)
        .order_by(*build_order(table, sort))
        .offset(skip)
        .limit(limit)
    )
    try:
        with engine.connect() as conn:
            total = conn.execute(count_stmt).scalar_one()
            rows = conn.execute(fetch_stmt).mappings().all()
    except SQLAlchemyError as e:
        raise _failed(table, e) from e

    return QueryPage(items=[dict(r) for r in rows], total=int(total))


def fetch_all(engine, table, predicate: FilterPredicate, sort: SortSpec,
              max_rows: int) -> list:
    """Sorted matching rows without a count, capped at *max_rows*."""
    stmt = (
        select(table)
        .where(build_where(table, predicate))
        .order_by(*build_order(table, sort))
        .limit(max_rows)
    )
    try:
        with engine.connect() as conn:
            return [dict(r) for r in conn.execute(stmt).mappings().all()]
    except SQLAlchemyError as e:
        raise _failed(table, e) from e


# ── Aggregates ───────────────────────────────────────────────────────

COUNT = "count"
SUM = "sum"
AVG = "avg"
COUNT_WHERE = "count_where"


@dataclass(frozen=True)
class Metric:
    """One named aggregate; COUNT_WHERE counts rows where column == value."""
    name: str
    kind: str
    column: Optional[str] = None
    value: Any = None


def _metric_expr(table, metric: Metric):
    if metric.kind == COUNT:
        return func.count()
    col = table.c[metric.column]
    if metric.kind == SUM:
        return func.sum(col)
    if metric.kind == AVG:
        return func.avg(col)
    if metric.kind == COUNT_WHERE:
        return func.sum(case((col == metric.value, 1), else_=0))
    raise ValueError(f"Unsupported metric kind: {metric.kind}")


def aggregate(engine, table, predicate: FilterPredicate,
              metrics: Sequence[Metric]) -> Dict[str, Any]:
    """Compute *metrics* over the rows matching *predicate*."""
    if not metrics:
        return {}
    stmt = (
        select(*[_metric_expr(table, m).label(m.name) for m in metrics])
        .select_from(table)
        .where(build_where(table, predicate))
    )
    try:
        with engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
    except SQLAlchemyError as e:
        raise _failed(table, e) from e

    out = {}
    for m in metrics:
        value = row[m.name] if row is not None else None
        out[m.name] = value if value is not None else 0
    return out


def count_by(engine, table, predicate: FilterPredicate, column: str) -> Dict[str, int]:
    """Count matching rows grouped by *column*."""
    col = table.c[column]
    stmt = (
        select(col, func.count().label("n"))
        .where(build_where(table, predicate))
        .group_by(col)
    )
    try:
        with engine.connect() as conn:
            rows = conn.execute(stmt).all()
    except SQLAlchemyError as e:
        raise _failed(table, e) from e
    return {str(value): int(n) for value, n in rows if value is not None}
