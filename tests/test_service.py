"""
AdminQueryService tests: gate ordering, mutations, hooks and audit.
"""

import pytest
from sqlalchemy import select

from vanguard_admin import tables
from vanguard_admin.audit import RequestOrigin
from vanguard_admin.errors import (
    AuthenticationRequired,
    Conflict,
    MethodNotAllowed,
    NotFound,
    PermissionDenied,
    ValidationFailed,
)
from vanguard_admin.resources import ADMIN_CATALOG, PUBLIC_CATALOG
from vanguard_admin.service import AdminQueryService, dashboard_stats


# ── Helpers / Fakes ──────────────────────────────────────────────────

class FakeNotifier:
    def __init__(self, fail=False, explode=False):
        self.fail = fail
        self.explode = explode
        self.sent = []

    def send(self, to, subject, body):
        if self.explode:
            raise ConnectionRefusedError("smtp down")
        self.sent.append((to, subject, body))
        return (False, "rejected") if self.fail else (True, "")


def service(engine, name, notifier=None):
    return AdminQueryService(ADMIN_CATALOG[name], engine, notifier)


def audit_rows(engine):
    with engine.connect() as conn:
        return [dict(r) for r in conn.execute(select(tables.audit_logs)).mappings()]


def member(**overrides):
    row = {
        "first_name": "Jane", "last_name": "Doe", "email": "jane@example.org",
        "membership_type": "individual", "status": "pending", "is_active": False,
        "payment_status": "pending", "amount": 25.0, "currency": "USD",
    }
    row.update(overrides)
    return row


# ── Tests: gate before anything else ─────────────────────────────────

def test_list_requires_session(engine):
    with pytest.raises(AuthenticationRequired):
        service(engine, "members").list(None, {})


def test_gate_runs_before_validation(engine, ctx_for):
    svc = service(engine, "jobs")
    with pytest.raises(AuthenticationRequired):
        svc.update(None, "1", {"status": "nonsense"})
    with pytest.raises(PermissionDenied):
        svc.update(ctx_for("reviewer"), "1", {"status": "nonsense"})


def test_reviewer_cannot_read_orders(engine, ctx_for):
    with pytest.raises(PermissionDenied):
        service(engine, "orders").list(ctx_for("reviewer"), {})


def test_audit_logs_are_admin_only(engine, ctx_for):
    with pytest.raises(PermissionDenied):
        service(engine, "audit-logs").list(ctx_for("editor"), {})
    assert service(engine, "audit-logs").list(ctx_for("admin"), {})["success"] is True


def test_unsupported_operations(engine, ctx_for):
    admin = ctx_for("admin")
    with pytest.raises(MethodNotAllowed):
        service(engine, "donations").delete(admin, "1")
    with pytest.raises(MethodNotAllowed):
        service(engine, "members").create(admin, {"email": "x@example.org"})
    with pytest.raises(MethodNotAllowed):
        service(engine, "audit-logs").update(admin, "1", {"status": "failure"})


# ── Tests: listing ───────────────────────────────────────────────────

def test_list_envelope(engine, seed, ctx_for):
    seed(tables.members, [member(email=f"m{i}@example.org") for i in range(3)])
    body = service(engine, "members").list(ctx_for("finance"), {"limit": "2"})
    assert body["success"] is True
    assert len(body["data"]["members"]) == 2
    assert body["data"]["pagination"] == {
        "page": 1, "limit": 2, "total": 3, "totalPages": 2,
        "hasNextPage": True, "hasPrevPage": False,
    }


def test_contacts_and_partnerships_are_disjoint(engine, seed, ctx_for):
    seed(tables.contacts, [
        {"name": "A", "email": "a@example.org", "category": "general"},
        {"name": "B", "email": "b@example.org", "category": "partnership"},
        {"name": "C", "email": "c@example.org", "category": None},
    ])
    admin = ctx_for("admin")
    contacts = service(engine, "contacts").list(admin, {})["data"]["contacts"]
    partnerships = service(engine, "partnerships").list(admin, {})["data"]["partnerships"]
    assert {c["name"] for c in contacts} == {"A", "C"}
    assert [p["name"] for p in partnerships] == ["B"]

    with pytest.raises(NotFound):
        service(engine, "contacts").get(admin, "2")
    assert service(engine, "partnerships").get(admin, "2")["data"]["name"] == "B"


def test_order_stats_follow_the_filter(engine, seed, ctx_for):
    seed(tables.orders, [
        {"order_number": "EV-1", "customer_email": "a@example.org", "total": 100.0, "status": "confirmed"},
        {"order_number": "EV-2", "customer_email": "b@example.org", "total": 50.0, "status": "confirmed"},
        {"order_number": "EV-3", "customer_email": "c@example.org", "total": 10.0, "status": "cancelled"},
    ])
    body = service(engine, "orders").list(ctx_for("finance"), {"status": "confirmed", "limit": "1"})
    assert body["data"]["stats"] == {"totalRevenue": 150.0, "totalOrders": 2, "averageOrderValue": 75.0}
    assert len(body["data"]["orders"]) == 1


def test_story_status_counts(engine, seed, ctx_for):
    seed(tables.stories, [
        {"title": "a", "content": "x", "status": "pending"},
        {"title": "b", "content": "x", "status": "approved"},
    ])
    body = service(engine, "stories").list(ctx_for("reviewer"), {})
    assert body["data"]["statusCounts"] == {"pending": 1, "approved": 1}
    assert body["data"]["pagination"]["limit"] == 20


def test_get_with_malformed_id_is_not_found(engine, ctx_for):
    with pytest.raises(NotFound) as e:
        service(engine, "members").get(ctx_for("admin"), "not-an-id")
    assert e.value.message == "Member not found"


def test_public_news_only_shows_published(engine, seed):
    seed(tables.news, [
        {"title": "Draft", "slug": "draft", "content": "x", "status": "draft"},
        {"title": "Live", "slug": "live", "content": "x", "status": "published"},
    ])
    svc = AdminQueryService(PUBLIC_CATALOG["news"], engine)
    body = svc.list(None, {"status": "draft"})
    assert [n["title"] for n in body["data"]["news"]] == ["Live"]
    with pytest.raises(NotFound):
        svc.get(None, "1")


def test_export_csv(engine, seed, ctx_for):
    seed(tables.donations, [
        {"donor_name": "Ann", "donor_email": "a@example.org", "amount": 10.0, "status": "completed"},
        {"donor_name": "Ben", "donor_email": "b@example.org", "amount": 20.0, "status": "failed"},
    ])
    csv_text = service(engine, "donations").export(ctx_for("finance"), {"status": "completed"})
    lines = csv_text.strip().splitlines()
    assert "donorName" in lines[0]
    assert len(lines) == 2
    assert "Ann" in lines[1]


# ── Tests: member activation rule ────────────────────────────────────

def test_activation_requires_paid(engine, seed, ctx_for):
    seed(tables.members, [member(payment_status="pending")])
    svc = service(engine, "members", FakeNotifier())
    with pytest.raises(ValidationFailed) as e:
        svc.update(ctx_for("finance"), "1", {"isActive": True})
    assert e.value.details[0]["field"] == "isActive"
    assert "payment is verified" in e.value.details[0]["message"]
    assert svc.get(ctx_for("admin"), "1")["data"]["isActive"] is False


def test_activation_sends_confirmation(engine, seed, ctx_for):
    seed(tables.members, [member(payment_status="paid")])
    notifier = FakeNotifier()
    svc = service(engine, "members", notifier)
    body = svc.update(ctx_for("finance"), "1", {"isActive": True, "status": "active"},
                      RequestOrigin(ip_address="10.0.0.1", method="PATCH"))
    assert body["data"]["isActive"] is True
    assert body["data"]["status"] == "active"
    assert len(notifier.sent) == 1
    to, subject, text = notifier.sent[0]
    assert to == "jane@example.org"
    assert subject == "Equality Vanguard Membership Confirmed"
    assert "Jane Doe" in text


@pytest.mark.parametrize("notifier", [FakeNotifier(fail=True), FakeNotifier(explode=True)])
def test_email_failure_does_not_fail_update(engine, seed, ctx_for, notifier, capsys):
    seed(tables.members, [member(payment_status="paid")])
    body = service(engine, "members", notifier).update(
        ctx_for("admin"), "1", {"isActive": True, "status": "active"})
    assert body["success"] is True
    assert "[WARN] [email]" in capsys.readouterr().err


def test_no_email_when_already_active(engine, seed, ctx_for):
    seed(tables.members, [member(payment_status="paid", is_active=True, status="active")])
    notifier = FakeNotifier()
    service(engine, "members", notifier).update(ctx_for("admin"), "1", {"notes": "vip"})
    assert notifier.sent == []


# ── Tests: mutations and audit ───────────────────────────────────────

def test_update_writes_audit_entry(engine, seed, ctx_for):
    seed(tables.contacts, [{"name": "A", "email": "a@example.org", "category": "general"}])
    service(engine, "contacts").update(
        ctx_for("editor", user_id=7), "1", {"status": "resolved"},
        RequestOrigin(ip_address="10.0.0.2", user_agent="pytest", method="PATCH",
                      url="http://localhost/api/admin/contacts/1"))
    [entry] = audit_rows(engine)
    assert entry["event_type"] == "admin_action"
    assert entry["user_id"] == "7"
    assert entry["user_role"] == "editor"
    assert entry["ip_address"] == "10.0.0.2"
    assert entry["details"]["oldStatus"] == "new"
    assert entry["details"]["newStatus"] == "resolved"
    assert entry["details"]["changes"] == ["status"]


def test_update_bumps_revision(engine, seed, ctx_for):
    seed(tables.donations, [{"donor_email": "a@example.org", "amount": 5.0}])
    service(engine, "donations").update(ctx_for("finance"), "1", {"status": "completed"})
    with engine.connect() as conn:
        row = conn.execute(select(tables.donations)).mappings().one()
    assert row["revision"] == 1
    assert row["status"] == "completed"


def test_audit_failure_does_not_fail_mutation(engine, seed, ctx_for, capsys):
    seed(tables.stories, [{"title": "a", "content": "x"}])
    tables.audit_logs.drop(engine)
    body = service(engine, "stories").update(ctx_for("reviewer"), "1", {"status": "approved"})
    assert body["data"]["status"] == "approved"
    assert body["data"]["reviewedAt"] is not None
    assert "[WARN] [audit]" in capsys.readouterr().err


def test_create_news_and_duplicate_slug(engine, ctx_for):
    svc = service(engine, "news")
    editor = ctx_for("editor")
    body = svc.create(editor, {"title": "We won", "slug": "we-won", "content": "x",
                               "status": "published"})
    assert body["data"]["slug"] == "we-won"
    assert body["data"]["publishedAt"] is not None

    with pytest.raises(Conflict) as e:
        svc.create(editor, {"title": "Again", "slug": "we-won", "content": "y"})
    assert e.value.status == 409


def test_delete(engine, seed, ctx_for):
    seed(tables.jobs, [{"title": "Organizer", "slug": "organizer"}])
    svc = service(engine, "jobs")
    with pytest.raises(PermissionDenied):
        svc.delete(ctx_for("editor"), "1")
    assert svc.delete(ctx_for("admin"), "1")["data"] == {"id": "1"}
    with pytest.raises(NotFound):
        svc.get(ctx_for("admin"), "1")


def test_list_echoes_applied_filters(engine, seed, ctx_for):
    seed(tables.members, [member(status="active")])
    body = service(engine, "members").list(
        ctx_for("admin"), {"status": "active", "search": "JANE", "startDate": "2020-01-01"})
    assert body["data"]["filters"] == {
        "status": "active", "startDate": "2020-01-01T00:00:00", "search": "JANE",
    }
    assert service(engine, "members").list(ctx_for("admin"), {})["data"]["filters"] == {}


def test_oversized_ids_are_not_found(engine, ctx_for):
    with pytest.raises(NotFound):
        service(engine, "members").get(ctx_for("admin"), "99999999999999999999")


# ── Tests: submissions review ────────────────────────────────────────

def submission(**overrides):
    row = {"title": "Voices of the Coast", "slug": "voices-of-the-coast",
           "author_name": "A. Said", "body": "Full text", "status": "pending",
           "submitter_name": "Amina", "submitter_email": "amina@example.org"}
    row.update(overrides)
    return row


def test_publish_stamps_reviewer_and_notifies(engine, seed, ctx_for):
    seed(tables.submissions, [submission()])
    notifier = FakeNotifier()
    svc = service(engine, "submissions", notifier)
    body = svc.transition(ctx_for("editor", user_id=5), "1", "publish",
                          {"reviewNotes": "Lovely", "featured": True})
    data = body["data"]
    assert body["message"] == "Submission published"
    assert data["status"] == "published"
    assert data["featured"] is True
    assert data["reviewer"] == {"id": "5", "name": "Test editor"}
    assert data["publishedAt"] is not None
    assert "body" not in data

    [(to, subject, text)] = notifier.sent
    assert to == "amina@example.org"
    assert subject == "Your Submission Has Been Approved!"
    assert "Lovely" in text

    [entry] = audit_rows(engine)
    assert entry["details"]["action"] == "publish"
    assert entry["details"]["oldStatus"] == "pending"
    assert entry["details"]["newStatus"] == "published"


def test_publish_twice_is_rejected(engine, seed, ctx_for):
    seed(tables.submissions, [submission(status="published")])
    with pytest.raises(ValidationFailed) as e:
        service(engine, "submissions").transition(ctx_for("admin"), "1", "publish", None)
    assert e.value.details[0] == {"field": "status", "message": "Submission is already published"}


def test_reviewer_may_reject_but_not_publish(engine, seed, ctx_for):
    seed(tables.submissions, [submission()])
    svc = service(engine, "submissions", FakeNotifier())
    with pytest.raises(PermissionDenied):
        svc.transition(ctx_for("reviewer"), "1", "publish", {})

    body = svc.transition(ctx_for("reviewer"), "1", "reject",
                          {"reviewNotes": "Needs sources", "reason": "Unverified"})
    assert body["data"]["status"] == "rejected"
    detail = svc.get(ctx_for("reviewer"), "1")["data"]
    assert detail["reviewNotes"] == "Needs sources"
    assert detail["body"] == "Full text"


def test_reject_requires_notes_before_touching_storage(engine, ctx_for):
    svc = service(engine, "submissions")
    with pytest.raises(ValidationFailed) as e:
        svc.transition(ctx_for("admin"), "404", "reject", {})
    assert e.value.details[0]["field"] == "reviewNotes"
    with pytest.raises(NotFound):
        svc.transition(ctx_for("admin"), "404", "reject", {"reviewNotes": "x"})


def test_unknown_transition(engine, ctx_for):
    with pytest.raises(MethodNotAllowed):
        service(engine, "submissions").transition(ctx_for("admin"), "1", "archive", {})
    with pytest.raises(MethodNotAllowed):
        service(engine, "members").transition(ctx_for("admin"), "1", "publish", {})


def test_no_email_without_submitter_address(engine, seed, ctx_for):
    seed(tables.submissions, [submission(submitter_email=None)])
    notifier = FakeNotifier()
    service(engine, "submissions", notifier).transition(
        ctx_for("admin"), "1", "reject", {"reviewNotes": "No"})
    assert notifier.sent == []


# ── Tests: products and newsletter ───────────────────────────────────

PRODUCT = {"name": "Equality Tote Bag!", "description": "Canvas tote", "price": 18.5,
           "category": "merchandise", "inventory": {"trackQuantity": True, "quantity": 12}}


def test_product_create_derives_slug(engine, ctx_for):
    svc = service(engine, "products")
    body = svc.create(ctx_for("editor"), PRODUCT)
    assert body["data"]["slug"] == "equality-tote-bag"
    assert body["data"]["inventory"]["quantity"] == 12
    assert body["data"]["status"] == "draft"

    with pytest.raises(Conflict):
        svc.create(ctx_for("editor"), {**PRODUCT, "description": "Again"})
    with pytest.raises(ValidationFailed) as e:
        svc.create(ctx_for("editor"), {**PRODUCT, "name": "!!!"})
    assert e.value.details[0]["field"] == "name"


def test_product_delete_archives(engine, ctx_for):
    svc = service(engine, "products")
    svc.create(ctx_for("admin"), PRODUCT)
    body = svc.delete(ctx_for("admin"), "1")
    assert body["message"] == "Product archived"
    assert body["data"]["status"] == "archived"
    assert svc.get(ctx_for("editor"), "1")["data"]["status"] == "archived"
    assert audit_rows(engine)[-1]["details"]["newStatus"] == "archived"


def test_newsletter_defaults_to_subscribed(engine, seed, ctx_for):
    seed(tables.newsletter_subscribers, [
        {"email": "a@example.org", "status": "subscribed"},
        {"email": "b@example.org", "status": "unsubscribed"},
    ])
    svc = service(engine, "newsletter")
    body = svc.list(ctx_for("editor"), {})
    assert [s["email"] for s in body["data"]["subscribers"]] == ["a@example.org"]
    assert body["data"]["filters"] == {"status": "subscribed"}

    body = svc.list(ctx_for("editor"), {"status": "unsubscribed"})
    assert [s["email"] for s in body["data"]["subscribers"]] == ["b@example.org"]

    with pytest.raises(PermissionDenied):
        svc.list(ctx_for("finance"), {})
    with pytest.raises(MethodNotAllowed):
        svc.update(ctx_for("admin"), "1", {"status": "unsubscribed"})


# ── Tests: dashboard ─────────────────────────────────────────────────

def test_dashboard_stats(engine, seed):
    seed(tables.members, [member(), member(email="b@example.org", is_active=True)])
    seed(tables.donations, [
        {"donor_email": "a@example.org", "amount": 30.0, "status": "completed"},
        {"donor_email": "a@example.org", "amount": 99.0, "status": "pending"},
    ])
    stats = dashboard_stats(engine)
    assert stats["totalMembers"] == 2
    assert stats["activeMembers"] == 1
    assert stats["completedDonations"] == 1
    assert stats["totalDonationAmount"] == 30.0
    assert stats["confirmedOrders"] == 0
    assert stats["pendingStories"] == 0
