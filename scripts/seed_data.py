#!/usr/bin/env python3
"""
Fill a development database with realistic admin content.
Usage: DATABASE_URL=sqlite:///vanguard.db python scripts/seed_data.py
"""

import random
import secrets
from datetime import datetime, timedelta

from faker import Faker
from sqlalchemy import select

from vanguard_admin.database import StorageHandle, init_schema
from vanguard_admin.tables import (
    admin_users,
    contacts,
    donations,
    event_registrations,
    jobs,
    members,
    news,
    newsletter_subscribers,
    orders,
    products,
    stories,
    submissions,
    volunteer_applications,
)

# --------------------------------------------------------------------
# CONFIG
# --------------------------------------------------------------------
NUM_CONTACTS = 60
NUM_MEMBERS = 80
NUM_ORDERS = 40
NUM_JOBS = 12
NUM_REGISTRATIONS = 50
NUM_NEWS = 20
NUM_STORIES = 30
NUM_DONATIONS = 70
NUM_SUBMISSIONS = 25
NUM_PRODUCTS = 18
NUM_SUBSCRIBERS = 120

# per job
APPLICATIONS_PER_JOB = (0, 6)

# --------------------------------------------------------------------
# SETUP
# --------------------------------------------------------------------
fake = Faker()
random.seed(42)
Faker.seed(42)


# --------------------------------------------------------------------
# HELPERS
# --------------------------------------------------------------------
def random_bool(p_true=0.5):
    return random.random() < p_true


def random_datetime_within(days_back=365):
    now = datetime.utcnow()
    delta = timedelta(days=random.randint(0, days_back), seconds=random.randint(0, 86400))
    return now - delta


def slugify(text, suffix):
    base = "-".join("".join(c for c in word.lower() if c.isalnum()) for word in text.split())
    base = "-".join(part for part in base.split("-") if part)
    return f"{base[:200]}-{suffix}"


# --------------------------------------------------------------------
# SEED FUNCTIONS
# --------------------------------------------------------------------
def seed_admin_users(conn):
    rows = []
    for role in ("admin", "editor", "reviewer", "finance"):
        rows.append(
            {
                "display_name": f"{fake.first_name()} ({role})",
                "email": f"{role}@equalityvanguard.org",
                "role": role,
                "api_key": f"ev_{secrets.token_urlsafe(24)}",
                "is_active": True,
            }
        )
    conn.execute(admin_users.insert(), rows)
    return rows


def seed_contacts(conn, n=NUM_CONTACTS):
    rows = []
    for _ in range(n):
        category = random.choice(
            ["general", "partnership", "volunteer", "media", "support", "other"]
        )
        extra = {"source": "website"}
        if category == "partnership":
            extra["organization"] = fake.company()
        status = random.choice(["new", "in_progress", "resolved", "closed"])
        rows.append(
            {
                "name": fake.name(),
                "email": fake.email(),
                "phone": fake.phone_number() if random_bool(0.6) else None,
                "subject": fake.sentence(nb_words=6),
                "message": fake.text(max_nb_chars=400),
                "category": category,
                "status": status,
                "priority": random.choice(["low", "medium", "high", "urgent"]),
                "source": random.choice(["website", "email", "phone", "event"]),
                "extra": extra,
                "notes": fake.text(max_nb_chars=120) if random_bool(0.3) else None,
                "response": fake.text(max_nb_chars=200) if status == "resolved" else None,
                "created_at": random_datetime_within(90),
            }
        )
    conn.execute(contacts.insert(), rows)


def seed_members(conn, n=NUM_MEMBERS):
    rows = []
    for _ in range(n):
        email = fake.unique.email()
        first = fake.first_name()
        last = fake.last_name()
        joined = random_datetime_within(700)
        paid = random_bool(0.7)
        legacy = random_bool(0.15)
        active = paid and random_bool(0.8)
        rows.append(
            {
                # legacy rows only carry the combined name and subscription dates
                "first_name": None if legacy else first,
                "last_name": None if legacy else last,
                "name": f"{first} {last}" if legacy else None,
                "email": email,
                "phone": fake.phone_number(),
                "membership_type": random.choice(["individual", "student", "organization", "lifetime"]),
                "status": "active" if active else random.choice(["pending", "suspended", "cancelled"]),
                "is_active": active,
                "join_date": None if legacy else joined,
                "expiry_date": None if legacy else joined + timedelta(days=365),
                "subscription_start": joined if legacy else None,
                "subscription_end": joined + timedelta(days=365) if legacy else None,
                "payment_status": "paid" if paid else random.choice(["pending", "failed"]),
                "payment_method": None if legacy else random.choice(["mpesa", "card", "paypal"]),
                "payment_provider": random.choice(["mpesa", "stripe"]) if legacy else None,
                "payment_id": fake.uuid4() if paid else None,
                "amount": random.choice([10.0, 25.0, 50.0, 250.0]),
                "currency": "USD",
                "organization": {"name": fake.company()} if random_bool(0.2) else None,
                "interests": random.sample(["advocacy", "legal", "events", "research"], k=2),
                "newsletter": random_bool(0.8),
                "created_at": joined,
            }
        )
    conn.execute(members.insert(), rows)


def seed_orders(conn, n=NUM_ORDERS):
    rows = []
    for i in range(n):
        items = [
            {
                "name": fake.word().title() + " T-Shirt",
                "quantity": random.randint(1, 3),
                "price": random.choice([15.0, 20.0, 35.0]),
            }
            for _ in range(random.randint(1, 3))
        ]
        subtotal = sum(it["quantity"] * it["price"] for it in items)
        shipping = random.choice([0.0, 5.0, 10.0])
        rows.append(
            {
                "order_number": f"EV-{datetime.utcnow():%Y%m}-{i + 1:05d}",
                "customer_email": fake.email(),
                "customer_first_name": fake.first_name(),
                "customer_last_name": fake.last_name(),
                "customer_phone": fake.phone_number(),
                "items": items,
                "subtotal": subtotal,
                "tax": 0.0,
                "shipping": shipping,
                "discount": 0.0,
                "total": subtotal + shipping,
                "status": random.choice(["pending", "confirmed", "processing", "shipped", "delivered", "cancelled"]),
                "payment_status": random.choice(["pending", "paid", "failed"]),
                "payment_method": random.choice(["mpesa", "card"]),
                "created_at": random_datetime_within(180),
            }
        )
    conn.execute(orders.insert(), rows)


def seed_jobs(conn, n=NUM_JOBS):
    rows = []
    for i in range(n):
        title = fake.job()
        rows.append(
            {
                "title": title,
                "slug": slugify(title, i + 1),
                "department": random.choice(["advocacy", "legal", "communications", "programs", "operations"]),
                "job_type": random.choice(["full-time", "part-time", "contract", "internship", "volunteer"]),
                "location": fake.city(),
                "location_type": random.choice(["remote", "hybrid", "on-site"]),
                "description": fake.text(max_nb_chars=600),
                "status": random.choice(["draft", "open", "open", "closed"]),
                "deadline": datetime.utcnow() + timedelta(days=random.randint(-10, 60)),
                "created_at": random_datetime_within(120),
            }
        )
    conn.execute(jobs.insert(), rows)
    return conn.execute(select(jobs.c.id)).scalars().all()


def seed_applications(conn, job_ids):
    rows = []
    lo, hi = APPLICATIONS_PER_JOB
    for job_id in job_ids:
        for _ in range(random.randint(lo, hi)):
            rows.append(
                {
                    "job_id": job_id,
                    "applicant_name": fake.name(),
                    "applicant_email": fake.email(),
                    "applicant_phone": fake.phone_number(),
                    "status": random.choice(["pending", "reviewing", "shortlisted", "rejected"]),
                    "cover_letter": fake.text(max_nb_chars=500),
                    "resume_url": fake.url() if random_bool(0.7) else None,
                    "created_at": random_datetime_within(60),
                }
            )
    if rows:
        conn.execute(volunteer_applications.insert(), rows)


def seed_registrations(conn, n=NUM_REGISTRATIONS):
    rows = []
    for _ in range(n):
        paid_ticket = random_bool(0.6)
        rows.append(
            {
                "event_id": random.randint(1, 5),
                "attendee_name": fake.name(),
                "attendee_email": fake.email(),
                "attendee_phone": fake.phone_number(),
                "ticket_type": "paid" if paid_ticket else "free",
                "status": random.choice(["pending", "confirmed", "paid", "cancelled"]),
                "payment_status": random.choice(["pending", "paid"]) if paid_ticket else "paid",
                "payment_method": "mpesa" if paid_ticket else None,
                "amount": random.choice([500.0, 1000.0, 1500.0]) if paid_ticket else 0.0,
                "currency": "KES",
                "confirmation_code": secrets.token_hex(4).upper(),
                "created_at": random_datetime_within(60),
            }
        )
    conn.execute(event_registrations.insert(), rows)


def seed_news(conn, n=NUM_NEWS):
    rows = []
    for i in range(n):
        title = fake.sentence(nb_words=7).rstrip(".")
        status = random.choice(["draft", "published", "published", "archived"])
        created = random_datetime_within(200)
        rows.append(
            {
                "title": title,
                "slug": slugify(title, i + 1),
                "excerpt": fake.sentence(nb_words=20),
                "content": fake.text(max_nb_chars=1500),
                "category": random.choice(["announcement", "update", "event", "achievement"]),
                "status": status,
                "author": fake.name(),
                "is_featured": random_bool(0.2),
                "tags": random.sample(["policy", "community", "events", "rights", "youth"], k=2),
                "published_at": created if status == "published" else None,
                "created_at": created,
            }
        )
    conn.execute(news.insert(), rows)


def seed_stories(conn, n=NUM_STORIES):
    rows = []
    for _ in range(n):
        rows.append(
            {
                "title": fake.sentence(nb_words=6).rstrip("."),
                "content": fake.text(max_nb_chars=1200),
                "submitter_name": fake.name() if random_bool(0.8) else None,
                "submitter_email": fake.email(),
                "status": random.choice(["pending", "pending", "in_review", "approved", "rejected", "published"]),
                "featured": random_bool(0.1),
                "tags": random.sample(["journey", "advocacy", "family", "work"], k=1),
                "created_at": random_datetime_within(120),
            }
        )
    conn.execute(stories.insert(), rows)


def seed_donations(conn, n=NUM_DONATIONS):
    rows = []
    for _ in range(n):
        anonymous = random_bool(0.2)
        rows.append(
            {
                "donor_name": None if anonymous else fake.name(),
                "donor_email": fake.email(),
                "amount": round(random.uniform(100, 20000), 2),
                "currency": "KES",
                "donation_type": random.choice(["one_time", "monthly"]),
                "status": random.choice(["pending", "completed", "completed", "failed"]),
                "payment_method": random.choice(["mpesa", "card"]),
                "transaction_id": fake.uuid4(),
                "is_anonymous": anonymous,
                "created_at": random_datetime_within(365),
            }
        )
    conn.execute(donations.insert(), rows)


def seed_submissions(conn, n=NUM_SUBMISSIONS):
    rows = []
    for i in range(n):
        title = fake.sentence(nb_words=8).rstrip(".")
        status = random.choice(["pending", "pending", "in_review", "approved", "rejected", "published"])
        created = random_datetime_within(150)
        reviewed = created + timedelta(days=random.randint(1, 14)) if status != "pending" else None
        rows.append(
            {
                "title": title,
                "slug": slugify(title, i + 1),
                "author_name": fake.name(),
                "author_email": fake.email(),
                "language": random.choice(["en", "en", "sw", "fr"]),
                "tags": random.sample(["history", "law", "memoir", "health", "culture"], k=2),
                "excerpt": fake.sentence(nb_words=25),
                "body": fake.text(max_nb_chars=2500),
                "status": status,
                "submitter_name": fake.name(),
                "submitter_email": fake.email() if random_bool(0.9) else None,
                "reviewer_name": fake.name() if reviewed else None,
                "review_notes": fake.sentence(nb_words=12) if reviewed else None,
                "reviewed_at": reviewed,
                "published_at": reviewed if status == "published" else None,
                "featured": status == "published" and random_bool(0.3),
                "created_at": created,
            }
        )
    conn.execute(submissions.insert(), rows)


def seed_products(conn, n=NUM_PRODUCTS):
    rows = []
    for i in range(n):
        category = random.choice(["book", "merchandise", "merchandise", "digital", "service"])
        name = f"{fake.color_name()} {random.choice(['Tote', 'Mug', 'Tee', 'Handbook', 'Poster'])}"
        price = random.choice([8.0, 12.5, 18.0, 25.0, 40.0])
        digital = category in ("digital", "service")
        rows.append(
            {
                "name": name,
                "slug": slugify(name, i + 1),
                "description": fake.text(max_nb_chars=400),
                "short_description": fake.sentence(nb_words=10),
                "price": price,
                "currency": "USD",
                "compare_at_price": price + 5 if random_bool(0.2) else None,
                "sku": f"EV-{category[:3].upper()}-{i + 1:04d}",
                "category": category,
                "tags": random.sample(["gift", "limited", "bestseller", "new"], k=1),
                "status": random.choice(["draft", "active", "active", "inactive", "archived"]),
                "is_digital": digital,
                "is_physical": not digital,
                "inventory": {
                    "track_quantity": not digital,
                    "quantity": 0 if digital else random.randint(0, 120),
                    "low_stock_threshold": 5,
                    "allow_backorder": False,
                },
                "images": [{"url": fake.image_url(), "alt": name, "is_primary": True}],
                "is_featured": random_bool(0.2),
                "is_new": random_bool(0.3),
                "is_on_sale": random_bool(0.15),
                "created_at": random_datetime_within(300),
            }
        )
    conn.execute(products.insert(), rows)


def seed_newsletter(conn, n=NUM_SUBSCRIBERS):
    rows = []
    for _ in range(n):
        joined = random_datetime_within(500)
        rows.append(
            {
                "email": fake.unique.email(),
                "first_name": fake.first_name() if random_bool(0.7) else None,
                "last_name": fake.last_name() if random_bool(0.6) else None,
                "status": random.choice(["subscribed", "subscribed", "subscribed", "unsubscribed", "cleaned", "pending"]),
                "tags": random.sample(["donor", "member", "volunteer", "press"], k=1),
                "member_rating": random.randint(1, 5),
                "source": random.choice(["website", "event", "import"]),
                "subscribed_at": joined,
                "created_at": joined,
            }
        )
    conn.execute(newsletter_subscribers.insert(), rows)


# --------------------------------------------------------------------
# MAIN
# --------------------------------------------------------------------
def main():
    with StorageHandle() as engine:
        init_schema(engine)
        with engine.begin() as conn:
            users = seed_admin_users(conn)
            seed_contacts(conn)
            seed_members(conn)
            seed_orders(conn)
            job_ids = seed_jobs(conn)
            seed_applications(conn, job_ids)
            seed_registrations(conn)
            seed_news(conn)
            seed_stories(conn)
            seed_donations(conn)
            seed_submissions(conn)
            seed_products(conn)
            seed_newsletter(conn)

    print("Seed complete. Admin API keys:")
    for user in users:
        print(f"  {user['role']:<9} {user['api_key']}")


if __name__ == "__main__":
    main()
