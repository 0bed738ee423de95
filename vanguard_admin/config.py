"""
Centralised configuration constants and environment helpers.
"""

import os
import sys

from dotenv import load_dotenv

load_dotenv()

# ── Pagination / query limits ────────────────────────────────────────
DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100
MAX_PAGE_NUMBER = 100000
MAX_SEARCH_LENGTH = 200
DEFAULT_SORT_FIELD = "createdAt"

# Integer ids and filters must fit a signed 64-bit column
MAX_STORED_INTEGER = 2 ** 63 - 1

# ── Export / console preview ─────────────────────────────────────────
MAX_EXPORT_ROWS = 5000
MAX_PREVIEW_ROWS = 20

# ── API server ───────────────────────────────────────────────────────
SECRET_KEY = os.getenv("JWT_SECRET_KEY", "dev-secret-key-change-in-production")
TOKEN_EXPIRY_HOURS = 24
SESSION_COOKIE_NAME = "session_token"
SESSION_SWEEP_SECONDS = 300

# ── Transactional email (SMTP) ───────────────────────────────────────
SMTP_HOST = os.getenv("SMTP_HOST", "").strip()
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USER = os.getenv("SMTP_USER", "").strip()
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD", "")
SMTP_FROM = os.getenv("SMTP_FROM", "").strip()
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "1") == "1"


def get_env(name: str) -> str:
    """Return an environment variable or exit with an error message."""
    value = os.getenv(name)
    if not value:
        print(f"ERROR: env var {name} is not set", file=sys.stderr)
        sys.exit(1)
    return value


def is_development() -> bool:
    """True when FLASK_ENV selects the development profile."""
    return os.getenv("FLASK_ENV") == "development"
