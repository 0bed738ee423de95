"""
Table definitions for the admin content store.

Nested sub-documents (order line items, member organisation, tags) live in
JSON columns; fields the admin API filters or searches on are plain columns.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    Text,
)

metadata = MetaData()


def _utcnow():
    return datetime.utcnow()


def _content_table(name, *columns):
    """Table with the id / timestamp / revision columns every record carries."""
    return Table(
        name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        *columns,
        Column("revision", Integer, nullable=False, default=0),
        Column("created_at", DateTime, nullable=False, default=_utcnow, index=True),
        Column("updated_at", DateTime, nullable=False, default=_utcnow, onupdate=_utcnow),
    )


admin_users = Table(
    "admin_users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("display_name", String(120), nullable=False),
    Column("email", String(255)),
    Column("role", String(20), nullable=False),
    Column("api_key", String(128), nullable=False, unique=True),
    Column("is_active", Boolean, nullable=False, default=True),
    Column("created_at", DateTime, nullable=False, default=_utcnow),
)

contacts = _content_table(
    "contacts",
    Column("name", String(200), nullable=False),
    Column("email", String(255), nullable=False),
    Column("phone", String(50)),
    Column("subject", String(300)),
    Column("message", Text),
    Column("category", String(30), index=True),      # general, partnership, volunteer, media, support, other
    Column("status", String(30), nullable=False, default="new", index=True),
    Column("priority", String(20), nullable=False, default="medium"),
    Column("source", String(30)),
    Column("extra", JSON),
    Column("notes", Text),
    Column("response", Text),
    Column("responded_at", DateTime),
)

members = _content_table(
    "members",
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("name", String(200)),                     # legacy combined name
    Column("email", String(255), nullable=False, unique=True),
    Column("phone", String(50)),
    Column("membership_type", String(30), nullable=False),
    Column("status", String(30), nullable=False, default="pending", index=True),
    Column("is_active", Boolean, nullable=False, default=False),
    Column("join_date", DateTime),
    Column("expiry_date", DateTime),
    Column("subscription_start", DateTime),          # legacy join_date
    Column("subscription_end", DateTime),            # legacy expiry_date
    Column("payment_status", String(20), nullable=False, default="pending"),
    Column("payment_method", String(30)),
    Column("payment_provider", String(30)),          # legacy payment_method
    Column("payment_id", String(100)),
    Column("amount", Float, nullable=False, default=0.0),
    Column("currency", String(3), nullable=False, default="USD"),
    Column("organization", JSON),
    Column("interests", JSON),
    Column("newsletter", Boolean, nullable=False, default=True),
    Column("notes", Text),
)

orders = _content_table(
    "orders",
    Column("order_number", String(40), nullable=False, unique=True),
    Column("customer_email", String(255), nullable=False),
    Column("customer_first_name", String(100)),
    Column("customer_last_name", String(100)),
    Column("customer_phone", String(50)),
    Column("items", JSON),
    Column("subtotal", Float, nullable=False, default=0.0),
    Column("tax", Float, nullable=False, default=0.0),
    Column("shipping", Float, nullable=False, default=0.0),
    Column("discount", Float, nullable=False, default=0.0),
    Column("total", Float, nullable=False, default=0.0),
    Column("currency", String(3), nullable=False, default="KES"),
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("payment_status", String(20), nullable=False, default="pending"),
    Column("payment_method", String(20)),
    Column("tracking_number", String(100)),
    Column("notes", Text),
)

jobs = _content_table(
    "jobs",
    Column("title", String(200), nullable=False),
    Column("slug", String(220), nullable=False, unique=True),
    Column("department", String(30)),
    Column("job_type", String(20)),                  # full-time, part-time, contract, internship, volunteer
    Column("location", String(200)),
    Column("location_type", String(20)),             # remote, hybrid, on-site
    Column("description", Text),
    Column("status", String(20), nullable=False, default="draft", index=True),
    Column("deadline", DateTime),
)

volunteer_applications = _content_table(
    "volunteer_applications",
    Column("job_id", Integer),
    Column("applicant_name", String(200), nullable=False),
    Column("applicant_email", String(255), nullable=False),
    Column("applicant_phone", String(50)),
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("cover_letter", Text),
    Column("resume_url", String(500)),
    Column("review_notes", Text),
    Column("reviewed_at", DateTime),
)

event_registrations = _content_table(
    "event_registrations",
    Column("event_id", Integer),
    Column("attendee_name", String(200), nullable=False),
    Column("attendee_email", String(255), nullable=False),
    Column("attendee_phone", String(50)),
    Column("ticket_type", String(20), nullable=False, default="free"),
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("payment_status", String(20), nullable=False, default="pending"),
    Column("payment_method", String(20)),
    Column("amount", Float, nullable=False, default=0.0),
    Column("currency", String(3), nullable=False, default="KES"),
    Column("confirmation_code", String(40)),
    Column("discount_code", String(40)),
    Column("discount_amount", Float, nullable=False, default=0.0),
)

news = _content_table(
    "news",
    Column("title", String(200), nullable=False),
    Column("slug", String(220), nullable=False, unique=True),
    Column("excerpt", String(500)),
    Column("content", Text, nullable=False),
    Column("category", String(30), nullable=False, default="update"),
    Column("status", String(20), nullable=False, default="draft", index=True),
    Column("author", String(120)),
    Column("is_featured", Boolean, nullable=False, default=False),
    Column("tags", JSON),
    Column("published_at", DateTime),
)

stories = _content_table(
    "stories",
    Column("title", String(200), nullable=False),
    Column("content", Text, nullable=False),
    Column("submitter_name", String(200)),
    Column("submitter_email", String(255)),
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("featured", Boolean, nullable=False, default=False),
    Column("review_notes", Text),
    Column("tags", JSON),
    Column("reviewed_at", DateTime),
)

submissions = _content_table(
    "submissions",
    Column("title", String(300), nullable=False),
    Column("slug", String(320), unique=True),
    Column("author_name", String(200), nullable=False),
    Column("author_email", String(255)),
    Column("author_phone", String(50)),
    Column("language", String(10), nullable=False, default="en"),
    Column("tags", JSON),
    Column("excerpt", String(500)),
    Column("body", Text),
    Column("cover_image_url", String(500)),
    Column("attachments", JSON),
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("submitter_name", String(200)),
    Column("submitter_email", String(255)),
    Column("submitter_phone", String(50)),
    Column("reviewer_id", String(64)),
    Column("reviewer_name", String(120)),
    Column("review_notes", Text),
    Column("reviewed_at", DateTime),
    Column("published_at", DateTime),
    Column("featured", Boolean, nullable=False, default=False),
    Column("view_count", Integer, nullable=False, default=0),
)

products = _content_table(
    "products",
    Column("name", String(200), nullable=False),
    Column("slug", String(220), nullable=False, unique=True),
    Column("description", Text, nullable=False),
    Column("short_description", String(300)),
    Column("price", Float, nullable=False),
    Column("currency", String(3), nullable=False, default="USD"),
    Column("compare_at_price", Float),
    Column("cost_price", Float),
    Column("sku", String(60), unique=True),
    Column("barcode", String(60)),
    Column("category", String(30), nullable=False),  # book, merchandise, digital, service, other
    Column("subcategory", String(60)),
    Column("tags", JSON),
    Column("status", String(20), nullable=False, default="draft", index=True),
    Column("is_digital", Boolean, nullable=False, default=False),
    Column("is_physical", Boolean, nullable=False, default=True),
    Column("inventory", JSON),                       # trackQuantity, quantity, lowStockThreshold, allowBackorder
    Column("images", JSON),
    Column("is_featured", Boolean, nullable=False, default=False),
    Column("is_new", Boolean, nullable=False, default=False),
    Column("is_on_sale", Boolean, nullable=False, default=False),
    Column("view_count", Integer, nullable=False, default=0),
    Column("purchase_count", Integer, nullable=False, default=0),
)

newsletter_subscribers = _content_table(
    "newsletter_subscribers",
    Column("email", String(255), nullable=False, unique=True),
    Column("first_name", String(100)),
    Column("last_name", String(100)),
    Column("status", String(20), nullable=False, default="subscribed", index=True),  # subscribed, unsubscribed, cleaned, pending
    Column("tags", JSON),
    Column("member_rating", Integer, nullable=False, default=0),
    Column("source", String(30)),
    Column("subscribed_at", DateTime),
)

donations = _content_table(
    "donations",
    Column("donor_name", String(200)),
    Column("donor_email", String(255), nullable=False),
    Column("amount", Float, nullable=False),
    Column("currency", String(3), nullable=False, default="KES"),
    Column("donation_type", String(30), nullable=False, default="one_time"),
    Column("status", String(20), nullable=False, default="pending", index=True),
    Column("payment_method", String(20)),
    Column("transaction_id", String(100)),
    Column("is_anonymous", Boolean, nullable=False, default=False),
    Column("notes", Text),
)

audit_logs = _content_table(
    "audit_logs",
    Column("event_type", String(50), nullable=False),
    Column("description", Text, nullable=False),
    Column("user_id", String(64)),
    Column("user_email", String(255)),
    Column("user_role", String(20)),
    Column("ip_address", String(64)),
    Column("user_agent", String(300)),
    Column("request_method", String(10)),
    Column("request_url", String(500)),
    Column("details", JSON),
    Column("severity", String(10), nullable=False, default="low"),
    Column("status", String(10), nullable=False, default="success"),
)
