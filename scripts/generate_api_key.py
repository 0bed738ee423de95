#!/usr/bin/env python3
"""
Generate API keys for admin console users.
Creates secure random API keys that can be inserted into the admin_users table.
"""

import secrets
import string

ROLE_EXAMPLES = (
    ("Site Administrator", "admin@equalityvanguard.org", "admin"),
    ("Content Editor", "editor@equalityvanguard.org", "editor"),
    ("Story Reviewer", "reviewer@equalityvanguard.org", "reviewer"),
    ("Finance Officer", "finance@equalityvanguard.org", "finance"),
)


def generate_api_key(prefix="ev", length=32):
    """Generate a secure random API key."""
    chars = string.ascii_letters + string.digits
    random_part = "".join(secrets.choice(chars) for _ in range(length))
    return f"{prefix}_{random_part}"


def insert_statement(display_name, email, role, api_key):
    return (
        "INSERT INTO admin_users\n"
        "    (display_name, email, role, api_key, is_active, created_at)\n"
        "VALUES\n"
        f"    ('{display_name}', '{email}', '{role}', '{api_key}', 1, CURRENT_TIMESTAMP);"
    )


if __name__ == "__main__":
    print("=" * 70)
    print("Equality Vanguard Admin API Key Generator")
    print("=" * 70)
    print()

    print("Single API Key:")
    print("-" * 70)
    print(f"  {generate_api_key()}")
    print()

    print("=" * 70)
    print("SQL Insert Examples (one per role):")
    print("=" * 70)
    for display_name, email, role in ROLE_EXAMPLES:
        print(f"\n-- For a {role}:")
        print(insert_statement(display_name, email, role, generate_api_key()))
    print()

    print("=" * 70)
    print("Note: Run these SQL statements in your database to create users.")
    print("=" * 70)
