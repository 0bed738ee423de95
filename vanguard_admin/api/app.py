"""
Flask application factory and server entry-point.
"""

import os
import sys
import traceback

from flask import Flask
from flask_cors import CORS

from vanguard_admin.config import TOKEN_EXPIRY_HOURS, is_development
from vanguard_admin.database import StorageHandle, init_schema
from vanguard_admin.notifications import EmailNotifier
from vanguard_admin.resources import ADMIN_CATALOG, PUBLIC_CATALOG
from vanguard_admin.api.auth import SessionStore
from vanguard_admin.api.routes import register_routes


def create_app(database_url=None, notifier=None):
    """Build and return a fully configured Flask application."""
    app = Flask(__name__)
    CORS(app, supports_credentials=True)

    # ── Initialise shared resources ──────────────────────────────────
    storage = StorageHandle(database_url)
    try:
        print("[init] Initializing database connection...")
        engine = storage.acquire()

        print("[init] Ensuring schema...")
        init_schema(engine)

        if notifier is None:
            notifier = EmailNotifier()
            if not notifier.is_configured():
                print("[WARN] SMTP not configured; confirmation emails are disabled.",
                      file=sys.stderr)

        print("[init] ✓ API server ready")
    except Exception as e:
        print(f"[FATAL] Failed to initialize: {e}", file=sys.stderr)
        traceback.print_exc()
        sys.exit(1)

    sessions = SessionStore()
    app.extensions["vanguard_storage"] = storage
    app.extensions["vanguard_sessions"] = sessions
    app.extensions["vanguard_notifier"] = notifier

    @app.before_request
    def sweep_sessions():
        sessions.sweep()

    # ── Register routes ──────────────────────────────────────────────
    register_routes(app, engine, sessions, notifier)

    return app


def main():
    """Run the development server."""
    print("=" * 60)
    print("Equality Vanguard – Admin REST API Server")
    print("=" * 60)

    app = create_app()

    host = os.getenv("API_HOST", "0.0.0.0")
    port = int(os.getenv("API_PORT", "8000"))
    debug = is_development()

    print(f"\n[server] Starting Flask API on {host}:{port}")
    print(f"[server] Debug mode: {debug}")
    print(f"[server] CORS enabled: True")
    print(f"[server] Session expiry: {TOKEN_EXPIRY_HOURS} hours")
    print("\nAPI Endpoints:")
    print(f"  - POST http://{host}:{port}/api/auth/login")
    print(f"  - POST http://{host}:{port}/api/auth/logout")
    print(f"  - GET  http://{host}:{port}/api/user/profile")
    print(f"  - GET  http://{host}:{port}/api/admin/dashboard")
    for name in sorted(ADMIN_CATALOG):
        print(f"  - GET  http://{host}:{port}/api/admin/{name}")
    for name in sorted(PUBLIC_CATALOG):
        print(f"  - GET  http://{host}:{port}/api/{name}")
    print(f"  - GET  http://{host}:{port}/health")
    print("\n" + "=" * 60)

    try:
        app.run(host=host, port=port, debug=debug, threaded=True)
    finally:
        app.extensions["vanguard_storage"].release()


if __name__ == "__main__":
    main()
