"""
Declarative catalog of admin resources.

Each ResourceSpec configures the generic AdminQueryService for one content
type: who may read or change it, which query keys filter it, how records are
shaped for clients, and which aggregates ride along with the listing.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Tuple, Type

from pydantic import BaseModel
from sqlalchemy import Table

from vanguard_admin.config import DEFAULT_PAGE_LIMIT, DEFAULT_SORT_FIELD, MAX_PAGE_LIMIT
from vanguard_admin.errors import ValidationFailed
from vanguard_admin.executor import AVG, COUNT, COUNT_WHERE, SUM, Metric
from vanguard_admin.filters import (
    GTE,
    LTE,
    ExactFilter,
    FieldSpec,
    FixedCondition,
    RangeFilter,
    as_bool,
    as_int,
)
from vanguard_admin.models import AccessContext, Role
from vanguard_admin.notifications import (
    membership_confirmation,
    send_best_effort,
    submission_published,
    submission_rejected,
)
from vanguard_admin.rbac import ALL_ROLES, role_set
from vanguard_admin.shaping import iso, public_id
from vanguard_admin import tables
from vanguard_admin import validation

BASE_SORTABLE = {"createdAt": "created_at", "updatedAt": "updated_at"}

DATE_RANGE = (
    RangeFilter("startDate", "created_at", GTE),
    RangeFilter("endDate", "created_at", LTE),
)


@dataclass(frozen=True)
class Transition:
    """A named status change, reached with POST /<id>/<action>.

    ``apply(current, values, session)`` returns the extra column changes;
    ``notify(after, values, notifier)`` runs after the write, best-effort.
    """
    action: str
    target: str
    roles: FrozenSet[Role]
    schema: Type[BaseModel]
    apply: Callable[[dict, dict, AccessContext], dict]
    notify: Optional[Callable[[dict, dict, object], None]] = None


@dataclass(frozen=True)
class ResourceSpec:
    name: str                                   # URL segment
    collection: str                             # key of the item list in responses
    label: str                                  # singular, for messages
    table: Table
    mapper: Callable[[dict], dict]
    read_roles: Optional[FrozenSet[Role]]       # None: public, no gate
    fields: FieldSpec = FieldSpec()
    sortable: Mapping[str, str] = field(default_factory=lambda: dict(BASE_SORTABLE))
    default_sort: str = DEFAULT_SORT_FIELD
    default_direction: str = "desc"
    default_limit: int = DEFAULT_PAGE_LIMIT
    max_limit: int = MAX_PAGE_LIMIT
    write_roles: FrozenSet[Role] = frozenset()
    create_roles: FrozenSet[Role] = frozenset()
    delete_roles: FrozenSet[Role] = frozenset()
    update_schema: Optional[Type[BaseModel]] = None
    create_schema: Optional[Type[BaseModel]] = None
    stats: Tuple[Metric, ...] = ()
    stats_key: str = "stats"
    status_counts: Optional[str] = None
    # prepare(current_or_None, changes) -> changes; may raise ValidationFailed
    prepare: Optional[Callable[[Optional[dict], dict], dict]] = None
    # on_updated(before, after, notifier); side effects only
    on_updated: Optional[Callable[[dict, dict, object], None]] = None
    detail_mapper: Optional[Callable[[dict], dict]] = None    # get-by-id; defaults to mapper
    soft_delete: Optional[Mapping[str, Any]] = None           # delete applies these values instead
    transitions: Tuple[Transition, ...] = ()

    def transition(self, action: str) -> Optional[Transition]:
        for t in self.transitions:
            if t.action == action:
                return t
        return None


def _sortable(**extra) -> Dict[str, str]:
    out = dict(BASE_SORTABLE)
    out.update(extra)
    return out


def _stamps(r: dict) -> dict:
    return {"createdAt": iso(r.get("created_at")), "updatedAt": iso(r.get("updated_at"))}


# ── Mappers ──────────────────────────────────────────────────────────

def contact_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "name": r.get("name"),
        "email": r.get("email"),
        "phone": r.get("phone"),
        "subject": r.get("subject"),
        "message": r.get("message"),
        "category": r.get("category"),
        "status": r.get("status"),
        "priority": r.get("priority"),
        "source": r.get("source"),
        "metadata": r.get("extra") or {},
        "notes": r.get("notes") or "",
        "response": r.get("response") or "",
        "respondedAt": iso(r.get("responded_at")),
        **_stamps(r),
    }


def normalize_member(r: dict) -> dict:
    """Resolve legacy member shapes into the current field set."""
    first = r.get("first_name") or ""
    last = r.get("last_name") or ""
    legacy_name = (r.get("name") or "").strip()
    if legacy_name and not first and not last:
        parts = legacy_name.split()
        first = parts[0]
        last = " ".join(parts[1:])

    return {
        **r,
        "first_name": first,
        "last_name": last,
        "full_name": f"{first} {last}".strip() or legacy_name,
        "join_date": r.get("join_date") or r.get("subscription_start") or r.get("created_at"),
        "expiry_date": r.get("expiry_date") or r.get("subscription_end"),
        "payment_method": r.get("payment_method") or r.get("payment_provider"),
    }


def member_to_public(r: dict) -> dict:
    m = normalize_member(r)
    return {
        "id": public_id(m["id"]),
        "firstName": m["first_name"],
        "lastName": m["last_name"],
        "fullName": m["full_name"],
        "email": m.get("email"),
        "phone": m.get("phone"),
        "membershipType": m.get("membership_type"),
        "status": m.get("status"),
        "isActive": bool(m.get("is_active")),
        "joinDate": iso(m["join_date"]),
        "expiryDate": iso(m["expiry_date"]),
        "paymentStatus": m.get("payment_status"),
        "paymentMethod": m["payment_method"],
        "paymentId": m.get("payment_id"),
        "amount": m.get("amount"),
        "currency": m.get("currency"),
        "organization": m.get("organization") or {},
        "interests": m.get("interests") or [],
        "newsletter": bool(m.get("newsletter")),
        "notes": m.get("notes") or "",
        **_stamps(m),
    }


def order_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "orderNumber": r.get("order_number"),
        "customerInfo": {
            "email": r.get("customer_email"),
            "firstName": r.get("customer_first_name"),
            "lastName": r.get("customer_last_name"),
            "phone": r.get("customer_phone"),
        },
        "items": r.get("items") or [],
        "subtotal": r.get("subtotal"),
        "tax": r.get("tax"),
        "shipping": r.get("shipping"),
        "discount": r.get("discount"),
        "total": r.get("total"),
        "currency": r.get("currency"),
        "status": r.get("status"),
        "paymentStatus": r.get("payment_status"),
        "paymentMethod": r.get("payment_method"),
        "trackingNumber": r.get("tracking_number"),
        "notes": r.get("notes") or "",
        **_stamps(r),
    }


def job_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "title": r.get("title"),
        "slug": r.get("slug"),
        "department": r.get("department"),
        "type": r.get("job_type"),
        "location": r.get("location"),
        "locationType": r.get("location_type"),
        "description": r.get("description"),
        "status": r.get("status"),
        "deadline": iso(r.get("deadline")),
        **_stamps(r),
    }


def volunteer_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "jobId": public_id(r.get("job_id")),
        "applicantName": r.get("applicant_name"),
        "applicantEmail": r.get("applicant_email"),
        "applicantPhone": r.get("applicant_phone"),
        "status": r.get("status"),
        "coverLetter": r.get("cover_letter"),
        "resumeUrl": r.get("resume_url"),
        "reviewNotes": r.get("review_notes") or "",
        "reviewedAt": iso(r.get("reviewed_at")),
        **_stamps(r),
    }


def registration_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "eventId": public_id(r.get("event_id")),
        "attendeeName": r.get("attendee_name"),
        "attendeeEmail": r.get("attendee_email"),
        "attendeePhone": r.get("attendee_phone"),
        "ticketType": r.get("ticket_type"),
        "status": r.get("status"),
        "paymentStatus": r.get("payment_status"),
        "paymentMethod": r.get("payment_method"),
        "amount": r.get("amount"),
        "currency": r.get("currency"),
        "confirmationCode": r.get("confirmation_code"),
        "discountCode": r.get("discount_code"),
        "discountAmount": r.get("discount_amount") or 0,
        **_stamps(r),
    }


def news_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "title": r.get("title"),
        "slug": r.get("slug"),
        "excerpt": r.get("excerpt"),
        "content": r.get("content"),
        "category": r.get("category"),
        "status": r.get("status"),
        "author": r.get("author"),
        "isFeatured": bool(r.get("is_featured")),
        "tags": r.get("tags") or [],
        "publishedAt": iso(r.get("published_at")),
        **_stamps(r),
    }


def story_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "title": r.get("title"),
        "content": r.get("content"),
        "submitterName": r.get("submitter_name"),
        "submitterEmail": r.get("submitter_email"),
        "status": r.get("status"),
        "featured": bool(r.get("featured")),
        "reviewNotes": r.get("review_notes") or "",
        "tags": r.get("tags") or [],
        "reviewedAt": iso(r.get("reviewed_at")),
        **_stamps(r),
    }


def donation_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "donorName": r.get("donor_name"),
        "donorEmail": r.get("donor_email"),
        "amount": r.get("amount"),
        "currency": r.get("currency"),
        "donationType": r.get("donation_type"),
        "status": r.get("status"),
        "paymentMethod": r.get("payment_method"),
        "transactionId": r.get("transaction_id"),
        "isAnonymous": bool(r.get("is_anonymous")),
        "notes": r.get("notes") or "",
        **_stamps(r),
    }


def submission_to_public(r: dict) -> dict:
    """Review-queue row; the article body is left to the detail view."""
    reviewer = None
    if r.get("reviewer_id"):
        reviewer = {"id": r["reviewer_id"], "name": r.get("reviewer_name")}
    return {
        "id": public_id(r["id"]),
        "title": r.get("title"),
        "authorName": r.get("author_name"),
        "submitterName": r.get("submitter_name"),
        "submitterEmail": r.get("submitter_email"),
        "status": r.get("status"),
        "language": r.get("language"),
        "tags": r.get("tags") or [],
        "excerpt": r.get("excerpt"),
        "featured": bool(r.get("featured")),
        "reviewer": reviewer,
        "reviewedAt": iso(r.get("reviewed_at")),
        "publishedAt": iso(r.get("published_at")),
        **_stamps(r),
    }


def submission_detail_to_public(r: dict) -> dict:
    return {
        **submission_to_public(r),
        "slug": r.get("slug"),
        "authorEmail": r.get("author_email"),
        "authorPhone": r.get("author_phone"),
        "body": r.get("body"),
        "coverImageUrl": r.get("cover_image_url"),
        "attachments": r.get("attachments") or [],
        "submitterPhone": r.get("submitter_phone"),
        "reviewNotes": r.get("review_notes") or "",
        "viewCount": r.get("view_count") or 0,
    }


def _inventory(inv: Optional[dict]) -> dict:
    inv = inv or {}
    return {
        "trackQuantity": bool(inv.get("track_quantity")),
        "quantity": inv.get("quantity") or 0,
        "lowStockThreshold": inv.get("low_stock_threshold", 5),
        "allowBackorder": bool(inv.get("allow_backorder")),
    }


def product_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "name": r.get("name"),
        "slug": r.get("slug"),
        "description": r.get("description"),
        "shortDescription": r.get("short_description"),
        "price": r.get("price"),
        "currency": r.get("currency"),
        "compareAtPrice": r.get("compare_at_price"),
        "costPrice": r.get("cost_price"),
        "sku": r.get("sku"),
        "barcode": r.get("barcode"),
        "category": r.get("category"),
        "subcategory": r.get("subcategory"),
        "tags": r.get("tags") or [],
        "status": r.get("status"),
        "isDigital": bool(r.get("is_digital")),
        "isPhysical": bool(r.get("is_physical")),
        "inventory": _inventory(r.get("inventory")),
        "images": [
            {"url": img.get("url"), "alt": img.get("alt"), "isPrimary": bool(img.get("is_primary"))}
            for img in r.get("images") or []
        ],
        "isFeatured": bool(r.get("is_featured")),
        "isNew": bool(r.get("is_new")),
        "isOnSale": bool(r.get("is_on_sale")),
        "viewCount": r.get("view_count") or 0,
        "purchaseCount": r.get("purchase_count") or 0,
        **_stamps(r),
    }


def subscriber_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "email": r.get("email"),
        "firstName": r.get("first_name") or "",
        "lastName": r.get("last_name") or "",
        "status": r.get("status"),
        "tags": r.get("tags") or [],
        "memberRating": r.get("member_rating") or 0,
        "source": r.get("source"),
        "subscribedAt": iso(r.get("subscribed_at") or r.get("created_at")),
        "lastChanged": iso(r.get("updated_at")),
    }


def audit_to_public(r: dict) -> dict:
    return {
        "id": public_id(r["id"]),
        "eventType": r.get("event_type"),
        "description": r.get("description"),
        "userId": r.get("user_id"),
        "userEmail": r.get("user_email"),
        "userRole": r.get("user_role"),
        "ipAddress": r.get("ip_address"),
        "userAgent": r.get("user_agent"),
        "requestMethod": r.get("request_method"),
        "requestUrl": r.get("request_url"),
        "metadata": r.get("details") or {},
        "severity": r.get("severity"),
        "status": r.get("status"),
        "createdAt": iso(r.get("created_at")),
    }


# ── Hooks ────────────────────────────────────────────────────────────

def check_member_activation(current: Optional[dict], changes: dict) -> dict:
    """Membership may only become active once payment is verified."""
    current = current or {}
    activating_flag = changes.get("is_active") is True
    activating_status = changes.get("status") == "active"
    if (activating_flag or activating_status) and current.get("payment_status") != "paid":
        raise ValidationFailed.field(
            "isActive" if activating_flag else "status",
            "Membership can only be activated after payment is verified. "
            f"Current payment status: {current.get('payment_status')}",
        )
    return changes


def confirm_member_activation(before: dict, after: dict, notifier) -> None:
    if before.get("is_active") or not after.get("is_active") or after.get("status") != "active":
        return
    member = member_to_public(after)
    subject, body = membership_confirmation(member)
    send_best_effort(notifier, member["email"], subject, body)


def stamp_published(current: Optional[dict], changes: dict) -> dict:
    if changes.get("status") == "published" and not (current or {}).get("published_at"):
        changes["published_at"] = datetime.utcnow()
    return changes


def stamp_reviewed(current: Optional[dict], changes: dict) -> dict:
    if "status" in changes or "review_notes" in changes:
        changes["reviewed_at"] = datetime.utcnow()
    return changes


def stamp_submission(current: Optional[dict], changes: dict) -> dict:
    return stamp_published(current, stamp_reviewed(current, changes))


def slugify(text: str) -> str:
    """Lower-case ASCII words joined by single hyphens."""
    words = re.sub(r"[^a-z0-9\s-]", "", text.lower()).split()
    return re.sub(r"-+", "-", "-".join(words)).strip("-")


def product_slug(current: Optional[dict], changes: dict) -> dict:
    if current is None and not changes.get("slug"):
        slug = slugify(changes.get("name") or "")
        if not slug:
            raise ValidationFailed.field("name", "Name must contain letters or digits")
        changes["slug"] = slug
    return changes


# ── Review transitions ───────────────────────────────────────────────

def _reviewed_by(session: AccessContext) -> dict:
    return {
        "reviewer_id": str(session.user_id),
        "reviewer_name": session.display_name,
        "reviewed_at": datetime.utcnow(),
    }


def apply_publish(current: dict, values: dict, session: AccessContext) -> dict:
    changes = _reviewed_by(session)
    changes.update(
        review_notes=values.get("review_notes") or "",
        published_at=changes["reviewed_at"],
        featured=bool(values.get("featured")),
    )
    return changes


def apply_reject(current: dict, values: dict, session: AccessContext) -> dict:
    changes = _reviewed_by(session)
    changes["review_notes"] = values["review_notes"]
    return changes


def notify_published(after: dict, values: dict, notifier) -> None:
    if not after.get("submitter_email"):
        return
    subject, body = submission_published(submission_to_public(after), values.get("review_notes"))
    send_best_effort(notifier, after["submitter_email"], subject, body)


def notify_rejected(after: dict, values: dict, notifier) -> None:
    if not after.get("submitter_email"):
        return
    subject, body = submission_rejected(submission_to_public(after), values["review_notes"],
                                        values.get("reason"))
    send_best_effort(notifier, after["submitter_email"], subject, body)


# ── Admin catalog ────────────────────────────────────────────────────

ADMIN = role_set("admin")
ADMIN_EDITOR = role_set("admin", "editor")
ADMIN_EDITOR_REVIEWER = role_set("admin", "editor", "reviewer")
ADMIN_EDITOR_FINANCE = role_set("admin", "editor", "finance")

CONTACT_SEARCH = ("name", "email", "subject", "message")

ADMIN_RESOURCES = (
    ResourceSpec(
        name="contacts", collection="contacts", label="Contact",
        table=tables.contacts, mapper=contact_to_public,
        read_roles=ADMIN_EDITOR_REVIEWER, write_roles=ADMIN_EDITOR_REVIEWER,
        delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("category", "category"),
                   ExactFilter("priority", "priority")),
            fixed=(FixedCondition("category", "partnership", negate=True),),
            search_fields=CONTACT_SEARCH,
        ),
        sortable=_sortable(name="name", priority="priority", status="status"),
        update_schema=validation.ContactUpdate,
    ),
    ResourceSpec(
        name="partnerships", collection="partnerships", label="Partnership inquiry",
        table=tables.contacts, mapper=contact_to_public,
        read_roles=ALL_ROLES, write_roles=ADMIN_EDITOR, delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("priority", "priority")),
            fixed=(FixedCondition("category", "partnership"),),
            search_fields=CONTACT_SEARCH,
        ),
        sortable=_sortable(name="name", priority="priority", status="status"),
        update_schema=validation.ContactUpdate,
    ),
    ResourceSpec(
        name="members", collection="members", label="Member",
        table=tables.members, mapper=member_to_public,
        read_roles=ALL_ROLES, write_roles=ADMIN_EDITOR_FINANCE, delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("membershipType", "membership_type"),
                   ExactFilter("paymentStatus", "payment_status"),
                   ExactFilter("isActive", "is_active", as_bool)),
            search_fields=("first_name", "last_name", "name", "email", "phone"),
        ),
        sortable=_sortable(lastName="last_name", email="email",
                           joinDate="join_date", amount="amount"),
        update_schema=validation.MemberUpdate,
        prepare=check_member_activation,
        on_updated=confirm_member_activation,
    ),
    ResourceSpec(
        name="orders", collection="orders", label="Order",
        table=tables.orders, mapper=order_to_public,
        read_roles=ADMIN_EDITOR_FINANCE, write_roles=ADMIN_EDITOR_FINANCE,
        delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("paymentStatus", "payment_status"),
                   ExactFilter("paymentMethod", "payment_method")),
            ranges=DATE_RANGE,
            search_fields=("order_number", "customer_email",
                           "customer_first_name", "customer_last_name"),
        ),
        sortable=_sortable(total="total", orderNumber="order_number"),
        update_schema=validation.OrderUpdate,
        stats=(Metric("totalRevenue", SUM, "total"),
               Metric("totalOrders", COUNT),
               Metric("averageOrderValue", AVG, "total")),
    ),
    ResourceSpec(
        name="jobs", collection="jobs", label="Job",
        table=tables.jobs, mapper=job_to_public,
        read_roles=ADMIN_EDITOR, write_roles=ADMIN_EDITOR,
        create_roles=ADMIN_EDITOR, delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("type", "job_type"),
                   ExactFilter("department", "department"),
                   ExactFilter("location", "location"),
                   ExactFilter("locationType", "location_type")),
            search_fields=("title", "description"),
        ),
        sortable=_sortable(title="title", deadline="deadline"),
        update_schema=validation.JobUpdate,
        create_schema=validation.JobCreate,
    ),
    ResourceSpec(
        name="volunteers", collection="applications", label="Volunteer application",
        table=tables.volunteer_applications, mapper=volunteer_to_public,
        read_roles=ADMIN_EDITOR_REVIEWER, write_roles=ADMIN_EDITOR_REVIEWER,
        delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("jobId", "job_id", as_int)),
            search_fields=("applicant_name", "applicant_email"),
        ),
        sortable=_sortable(applicantName="applicant_name", status="status"),
        update_schema=validation.VolunteerUpdate,
        prepare=stamp_reviewed,
    ),
    ResourceSpec(
        name="registrations", collection="registrations", label="Event registration",
        table=tables.event_registrations, mapper=registration_to_public,
        read_roles=ADMIN_EDITOR_FINANCE, write_roles=ADMIN_EDITOR_FINANCE,
        delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("paymentStatus", "payment_status"),
                   ExactFilter("paymentMethod", "payment_method"),
                   ExactFilter("eventId", "event_id", as_int)),
            search_fields=("attendee_name", "attendee_email", "confirmation_code"),
        ),
        sortable=_sortable(attendeeName="attendee_name", amount="amount"),
        update_schema=validation.RegistrationUpdate,
        stats=(Metric("totalRevenue", SUM, "amount"),
               Metric("totalRegistrations", COUNT),
               Metric("paidRegistrations", COUNT_WHERE, "payment_status", "paid"),
               Metric("pendingPayments", COUNT_WHERE, "payment_status", "pending")),
    ),
    ResourceSpec(
        name="news", collection="news", label="News article",
        table=tables.news, mapper=news_to_public,
        read_roles=ADMIN_EDITOR, write_roles=ADMIN_EDITOR,
        create_roles=ADMIN_EDITOR, delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("category", "category"),
                   ExactFilter("isFeatured", "is_featured", as_bool)),
            search_fields=("title", "excerpt", "content"),
        ),
        sortable=_sortable(title="title", publishedAt="published_at"),
        update_schema=validation.NewsUpdate,
        create_schema=validation.NewsCreate,
        prepare=stamp_published,
    ),
    ResourceSpec(
        name="stories", collection="stories", label="Story",
        table=tables.stories, mapper=story_to_public,
        read_roles=ADMIN_EDITOR_REVIEWER, write_roles=ADMIN_EDITOR_REVIEWER,
        delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("featured", "featured", as_bool)),
            search_fields=("title", "content", "submitter_name", "submitter_email"),
        ),
        sortable=_sortable(title="title", status="status"),
        default_limit=20,
        update_schema=validation.StoryUpdate,
        status_counts="status",
        prepare=stamp_reviewed,
    ),
    ResourceSpec(
        name="submissions", collection="submissions", label="Submission",
        table=tables.submissions, mapper=submission_to_public,
        detail_mapper=submission_detail_to_public,
        read_roles=ADMIN_EDITOR_REVIEWER, write_roles=ADMIN_EDITOR_REVIEWER,
        delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("language", "language"),
                   ExactFilter("featured", "featured", as_bool)),
            search_fields=("title", "author_name", "submitter_name", "submitter_email"),
        ),
        sortable=_sortable(title="title", status="status", reviewedAt="reviewed_at"),
        default_limit=20,
        update_schema=validation.SubmissionUpdate,
        status_counts="status",
        prepare=stamp_submission,
        transitions=(
            Transition("publish", "published", ADMIN_EDITOR,
                       validation.PublishSubmission, apply_publish, notify_published),
            Transition("reject", "rejected", ADMIN_EDITOR_REVIEWER,
                       validation.RejectSubmission, apply_reject, notify_rejected),
        ),
    ),
    ResourceSpec(
        name="products", collection="products", label="Product",
        table=tables.products, mapper=product_to_public,
        read_roles=ADMIN_EDITOR, write_roles=ADMIN_EDITOR,
        create_roles=ADMIN_EDITOR, delete_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("category", "category"),
                   ExactFilter("isFeatured", "is_featured", as_bool)),
            search_fields=("name", "description", "sku"),
        ),
        sortable=_sortable(name="name", price="price", status="status"),
        update_schema=validation.ProductUpdate,
        create_schema=validation.ProductCreate,
        prepare=product_slug,
        soft_delete={"status": "archived"},
    ),
    ResourceSpec(
        name="newsletter", collection="subscribers", label="Subscriber",
        table=tables.newsletter_subscribers, mapper=subscriber_to_public,
        read_roles=ADMIN_EDITOR,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status", default="subscribed"),),
            search_fields=("email", "first_name", "last_name"),
        ),
        sortable=_sortable(email="email", subscribedAt="subscribed_at"),
    ),
    ResourceSpec(
        name="donations", collection="donations", label="Donation",
        table=tables.donations, mapper=donation_to_public,
        read_roles=ALL_ROLES, write_roles=ADMIN_EDITOR_FINANCE,
        fields=FieldSpec(
            exact=(ExactFilter("status", "status"),
                   ExactFilter("donationType", "donation_type"),
                   ExactFilter("paymentMethod", "payment_method")),
            ranges=DATE_RANGE,
            search_fields=("donor_name", "donor_email"),
        ),
        sortable=_sortable(amount="amount"),
        update_schema=validation.DonationUpdate,
        stats=(Metric("totalAmount", SUM, "amount"),
               Metric("totalDonations", COUNT),
               Metric("completedDonations", COUNT_WHERE, "status", "completed")),
    ),
    ResourceSpec(
        name="audit-logs", collection="logs", label="Audit log entry",
        table=tables.audit_logs, mapper=audit_to_public,
        read_roles=ADMIN,
        fields=FieldSpec(
            exact=(ExactFilter("eventType", "event_type"),
                   ExactFilter("userId", "user_id"),
                   ExactFilter("severity", "severity"),
                   ExactFilter("status", "status")),
            ranges=DATE_RANGE,
            search_fields=("description", "user_email", "ip_address"),
        ),
        default_limit=50,
    ),
)

# ── Public, read-only views ──────────────────────────────────────────

PUBLIC_RESOURCES = (
    ResourceSpec(
        name="news", collection="news", label="News article",
        table=tables.news, mapper=news_to_public, read_roles=None,
        fields=FieldSpec(
            exact=(ExactFilter("category", "category"),
                   ExactFilter("featured", "is_featured", as_bool)),
            fixed=(FixedCondition("status", "published"),),
            search_fields=("title", "excerpt", "content"),
        ),
        sortable=_sortable(publishedAt="published_at", title="title"),
        default_sort="publishedAt",
    ),
    ResourceSpec(
        name="jobs", collection="jobs", label="Job",
        table=tables.jobs, mapper=job_to_public, read_roles=None,
        fields=FieldSpec(
            exact=(ExactFilter("type", "job_type"),
                   ExactFilter("department", "department"),
                   ExactFilter("location", "location"),
                   ExactFilter("locationType", "location_type")),
            fixed=(FixedCondition("status", "open"),),
            search_fields=("title", "description"),
        ),
        sortable=_sortable(deadline="deadline", title="title"),
    ),
)

ADMIN_CATALOG: Dict[str, ResourceSpec] = {spec.name: spec for spec in ADMIN_RESOURCES}
PUBLIC_CATALOG: Dict[str, ResourceSpec] = {spec.name: spec for spec in PUBLIC_RESOURCES}
