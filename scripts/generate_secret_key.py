#!/usr/bin/env python3
"""
Check a .env file for the admin API and print the lines it is missing.

Usage: python scripts/generate_secret_key.py [path/to/.env]

A fresh JWT_SECRET_KEY is proposed whenever the current one is absent,
still the development default, or shorter than 32 characters.
"""

import secrets
import sys
from pathlib import Path

from dotenv import dotenv_values

DEV_SECRET = "dev-secret-key-change-in-production"
MIN_SECRET_LENGTH = 32

REQUIRED = ("DATABASE_URL",)
OPTIONAL = {
    "FLASK_ENV": "production",
    "SMTP_HOST": "",
    "SMTP_PORT": "587",
    "SMTP_USER": "",
    "SMTP_PASSWORD": "",
    "SMTP_FROM": "",
    "SMTP_USE_TLS": "1",
}


def secret_problem(value):
    if not value:
        return "missing"
    if value == DEV_SECRET:
        return "still the development default"
    if len(value) < MIN_SECRET_LENGTH:
        return f"shorter than {MIN_SECRET_LENGTH} characters"
    return None


def missing_lines(values):
    """Lines to append so *values* covers every setting the API reads."""
    lines = []
    problem = secret_problem(values.get("JWT_SECRET_KEY"))
    if problem:
        lines.append(f"JWT_SECRET_KEY={secrets.token_hex(32)}")
    for name in REQUIRED:
        if not values.get(name):
            lines.append(f"{name}=")
    for name, default in OPTIONAL.items():
        if name not in values:
            lines.append(f"{name}={default}")
    return problem, lines


if __name__ == "__main__":
    env_path = Path(sys.argv[1] if len(sys.argv) > 1 else ".env")

    print("=" * 60)
    print("Admin API Environment Check")
    print("=" * 60)

    values = dotenv_values(env_path) if env_path.exists() else {}
    if not values:
        print(f"\n{env_path} not found or empty; starting from scratch.")

    problem, lines = missing_lines(values)
    if problem:
        print(f"\n[WARN] JWT_SECRET_KEY is {problem}; a new one is generated below.")
    for name in REQUIRED:
        if not values.get(name):
            print(f"[WARN] {name} is required by the server and is not set.")

    if not lines:
        print(f"\n{env_path} has every setting the API reads.")
    else:
        print(f"\nAdd these lines to {env_path} (never commit it):\n")
        print("\n".join(lines))
    print("\n" + "=" * 60)
