"""
Generic admin query service, instantiated once per ResourceSpec.

Every operation runs the same pipeline: Access Gate first, then input
parsing/validation, then storage. Nothing reaches storage until the caller
is authorised and the input is valid.
"""

from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Tuple

import pandas as pd

from vanguard_admin.audit import RequestOrigin, record_audit
from vanguard_admin.config import MAX_EXPORT_ROWS
from vanguard_admin.errors import MethodNotAllowed, NotFound, ValidationFailed
from vanguard_admin import tables
from vanguard_admin.executor import COUNT, COUNT_WHERE, SUM, Metric, aggregate, count_by, execute, fetch_all
from vanguard_admin.filters import EQ, GTE, Condition, FilterPredicate, compose
from vanguard_admin.models import AccessContext, QueryRequest
from vanguard_admin.pagination import pagination_meta, resolve, resolve_sort
from vanguard_admin.rbac import authorize, enforce
from vanguard_admin.records import delete_one, fetch_one, insert_one, update_one
from vanguard_admin.resources import ResourceSpec
from vanguard_admin.shaping import iso, parse_id, shape, success_body
from vanguard_admin.validation import validate_body


class AdminQueryService:
    def __init__(self, spec: ResourceSpec, engine, notifier=None):
        self.spec = spec
        self.engine = engine
        self.notifier = notifier

    # ── Gate ─────────────────────────────────────────────────────────

    def _gate(self, session: Optional[AccessContext], roles) -> None:
        if roles is None:
            return
        enforce(authorize(session, roles))

    def _require(self, supported: bool) -> None:
        if not supported:
            raise MethodNotAllowed(f"{self.spec.label} does not support this operation")

    def _load(self, record_id) -> dict:
        rid = parse_id(record_id)
        record = fetch_one(self.engine, self.spec.table, rid) if rid is not None else None
        if record is None or not all(c.holds_for(record) for c in self.spec.fields.fixed):
            raise NotFound(f"{self.spec.label} not found")
        return record

    def _audit(self, action: str, session, origin, record_id, details=None) -> None:
        record_audit(
            self.engine,
            event_type="admin_action",
            description=f"{self.spec.label} {record_id} {action}",
            session=session,
            origin=origin,
            details={"resource": self.spec.name, "recordId": str(record_id), **(details or {})},
        )

    # ── Reads ────────────────────────────────────────────────────────

    def parse_request(self, args: Mapping[str, Any]) -> Tuple[QueryRequest, FilterPredicate]:
        spec = self.spec
        params = resolve(args.get("page"), args.get("limit"),
                         max_limit=spec.max_limit, default_limit=spec.default_limit)
        sort = resolve_sort(args.get("sortBy"), args.get("sortOrder"),
                            spec.sortable, spec.default_sort, spec.default_direction)
        predicate = compose(args, spec.fields)
        return QueryRequest(
            page=params.page,
            limit=params.limit,
            skip=params.skip,
            sort=sort,
            filters=predicate.applied_filters(),
            search=predicate.search_term,
        ), predicate

    def list(self, session: Optional[AccessContext], args: Mapping[str, Any]) -> dict:
        spec = self.spec
        self._gate(session, spec.read_roles)

        request, predicate = self.parse_request(args)
        page = execute(self.engine, spec.table, predicate, request.sort,
                       request.skip, request.limit)

        extra = {}
        if spec.stats:
            extra[spec.stats_key] = aggregate(self.engine, spec.table, predicate, spec.stats)
        if spec.status_counts:
            extra["statusCounts"] = count_by(self.engine, spec.table, predicate, spec.status_counts)

        filters = {key: iso(value) for key, value in request.filters.items()}
        if request.search:
            filters["search"] = request.search
        extra["filters"] = filters

        meta = pagination_meta(request.page, request.limit, page.total)
        return shape(page.items, spec.mapper, meta, spec.collection, extra)

    def get(self, session: Optional[AccessContext], record_id) -> dict:
        spec = self.spec
        self._gate(session, spec.read_roles)
        mapper = spec.detail_mapper or spec.mapper
        return success_body(mapper(self._load(record_id)))

    def export(self, session: Optional[AccessContext], args: Mapping[str, Any]) -> str:
        """CSV of every matching record (capped), in listing order."""
        spec = self.spec
        self._gate(session, spec.read_roles)

        request, predicate = self.parse_request(args)
        rows = fetch_all(self.engine, spec.table, predicate, request.sort, MAX_EXPORT_ROWS)
        df = pd.json_normalize([spec.mapper(r) for r in rows])
        return df.to_csv(index=False)

    # ── Writes ───────────────────────────────────────────────────────

    def create(self, session: Optional[AccessContext], body,
               origin: Optional[RequestOrigin] = None) -> dict:
        spec = self.spec
        self._require(spec.create_schema is not None)
        self._gate(session, spec.create_roles)

        values = validate_body(spec.create_schema, body, partial=False)
        if spec.prepare:
            values = spec.prepare(None, values)
        record = insert_one(self.engine, spec.table, values)

        self._audit("created", session, origin, record["id"])
        return success_body(spec.mapper(record), message=f"{spec.label} created")

    def update(self, session: Optional[AccessContext], record_id, body,
               origin: Optional[RequestOrigin] = None) -> dict:
        spec = self.spec
        self._require(spec.update_schema is not None)
        self._gate(session, spec.write_roles)

        changes = validate_body(spec.update_schema, body)
        before = self._load(record_id)
        if spec.prepare:
            changes = spec.prepare(before, changes)

        after = update_one(self.engine, spec.table, before["id"], changes)
        if after is None:
            raise NotFound(f"{spec.label} not found")

        self._audit("updated", session, origin, after["id"], {
            "changes": sorted(changes),
            "oldStatus": before.get("status"),
            "newStatus": after.get("status"),
        })
        if spec.on_updated:
            spec.on_updated(before, after, self.notifier)
        return success_body(spec.mapper(after), message=f"{spec.label} updated")

    def delete(self, session: Optional[AccessContext], record_id,
               origin: Optional[RequestOrigin] = None) -> dict:
        spec = self.spec
        self._require(bool(spec.delete_roles))
        self._gate(session, spec.delete_roles)

        record = self._load(record_id)
        if spec.soft_delete:
            after = update_one(self.engine, spec.table, record["id"], dict(spec.soft_delete))
            if after is None:
                raise NotFound(f"{spec.label} not found")
            self._audit("archived", session, origin, record["id"], {
                "oldStatus": record.get("status"),
                "newStatus": after.get("status"),
            })
            return success_body(spec.mapper(after), message=f"{spec.label} archived")

        if not delete_one(self.engine, spec.table, record["id"]):
            raise NotFound(f"{spec.label} not found")

        self._audit("deleted", session, origin, record["id"])
        return success_body({"id": str(record["id"])}, message=f"{spec.label} deleted")

    def transition(self, session: Optional[AccessContext], record_id, action: str, body,
                   origin: Optional[RequestOrigin] = None) -> dict:
        """Move a record to the status named by *action* (e.g. publish, reject)."""
        spec = self.spec
        step = spec.transition(action)
        self._require(step is not None)
        self._gate(session, step.roles)

        values = validate_body(step.schema, {} if body is None else body, partial=False)
        before = self._load(record_id)
        if before.get("status") == step.target:
            raise ValidationFailed.field("status", f"{spec.label} is already {step.target}")

        changes = step.apply(before, values, session)
        changes["status"] = step.target
        after = update_one(self.engine, spec.table, before["id"], changes)
        if after is None:
            raise NotFound(f"{spec.label} not found")

        self._audit(step.target, session, origin, after["id"], {
            "action": step.action,
            "oldStatus": before.get("status"),
            "newStatus": after.get("status"),
        })
        if step.notify:
            step.notify(after, values, self.notifier)
        return success_body(spec.mapper(after), message=f"{spec.label} {step.target}")


def _where(*conditions: Condition) -> FilterPredicate:
    return FilterPredicate(conditions=conditions)


def dashboard_stats(engine, now: Optional[datetime] = None) -> dict:
    """Headline counters for the admin dashboard."""
    now = now or datetime.utcnow()
    stats = {}
    stats.update(aggregate(engine, tables.members, _where(), (
        Metric("totalMembers", COUNT),
        Metric("activeMembers", COUNT_WHERE, "is_active", True),
    )))
    stats.update(aggregate(engine, tables.donations, _where(Condition("status", EQ, "completed")), (
        Metric("completedDonations", COUNT),
        Metric("totalDonationAmount", SUM, "amount"),
    )))
    stats.update(aggregate(engine, tables.orders, _where(Condition("status", EQ, "confirmed")), (
        Metric("confirmedOrders", COUNT),
        Metric("totalOrderAmount", SUM, "total"),
    )))
    stats.update(aggregate(engine, tables.stories, _where(Condition("status", EQ, "pending")), (
        Metric("pendingStories", COUNT),
    )))
    week_ago = now - timedelta(days=7)
    stats.update(aggregate(engine, tables.contacts, _where(Condition("created_at", GTE, week_ago)), (
        Metric("recentContacts", COUNT),
    )))
    return stats
