"""
Flask route handlers for the REST API.
"""

import sys
import traceback
from datetime import datetime, timedelta

from flask import Response, jsonify, request
from sqlalchemy import text as sa_text
from sqlalchemy.exc import SQLAlchemyError

from vanguard_admin.audit import RequestOrigin
from vanguard_admin.config import SESSION_COOKIE_NAME, TOKEN_EXPIRY_HOURS, is_development
from vanguard_admin.errors import (
    AdminError,
    AuthenticationRequired,
    MethodNotAllowed,
    NotFound,
    ValidationFailed,
)
from vanguard_admin.rbac import ALL_ROLES, authorize, enforce, load_access_context
from vanguard_admin.resources import ADMIN_CATALOG, PUBLIC_CATALOG
from vanguard_admin.service import AdminQueryService, dashboard_stats
from vanguard_admin.shaping import error_body, success_body
from vanguard_admin.api.auth import extract_token, resolve_session


def _user_json(ctx) -> dict:
    return {
        "id": ctx.user_id,
        "display_name": ctx.display_name,
        "role": ctx.role,
        "email": ctx.email,
    }


def request_origin(req) -> RequestOrigin:
    forwarded = req.headers.get("X-Forwarded-For", "")
    ip = forwarded.split(",")[0].strip() or req.headers.get("X-Real-IP") or req.remote_addr
    return RequestOrigin(
        ip_address=ip or "unknown",
        user_agent=req.headers.get("User-Agent") or "unknown",
        method=req.method,
        url=req.url,
    )


def register_routes(app, engine, sessions, notifier=None):
    """Register all API routes on the Flask *app*."""

    admin_services = {
        name: AdminQueryService(spec, engine, notifier) for name, spec in ADMIN_CATALOG.items()
    }
    public_services = {
        name: AdminQueryService(spec, engine) for name, spec in PUBLIC_CATALOG.items()
    }

    def _service(catalog, name: str) -> AdminQueryService:
        svc = catalog.get(name)
        if svc is None:
            raise NotFound(f"Unknown resource '{name}'")
        return svc

    def _session():
        return resolve_session(request, sessions)

    # ── Health / info ────────────────────────────────────────────────

    @app.route("/", methods=["GET"])
    def index():
        return jsonify({
            "service": "Equality Vanguard Admin API",
            "version": "1.0.0",
            "status": "running",
            "endpoints": {
                "auth": "/api/auth/login",
                "logout": "/api/auth/logout",
                "profile": "/api/user/profile",
                "dashboard": "/api/admin/dashboard",
                "admin": [f"/api/admin/{name}" for name in sorted(ADMIN_CATALOG)],
                "public": [f"/api/{name}" for name in sorted(PUBLIC_CATALOG)],
                "health": "/health",
            },
        })

    @app.route("/health", methods=["GET"])
    def health():
        checks = {"database": False}
        try:
            with engine.connect() as conn:
                conn.execute(sa_text("SELECT 1"))
            checks["database"] = True
        except SQLAlchemyError as e:
            print(f"[WARN] Health check failed: {e}", file=sys.stderr)

        all_healthy = all(checks.values())
        return jsonify({
            "status": "healthy" if all_healthy else "unhealthy",
            "checks": checks,
            "active_sessions": len(sessions),
        }), 200 if all_healthy else 503

    # ── Auth ─────────────────────────────────────────────────────────

    @app.route("/api/auth/login", methods=["POST"])
    def login():
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationFailed.field("body", "Content-Type must be application/json")

        api_key = str(data.get("api_key") or "").strip()
        if not api_key:
            raise ValidationFailed.field("api_key", "api_key is required")

        try:
            ctx = load_access_context(engine, api_key)
        except ValueError as e:
            raise AuthenticationRequired(f"Authentication failed: {e}") from None

        token = sessions.open(ctx)
        expires_at = datetime.utcnow() + timedelta(hours=TOKEN_EXPIRY_HOURS)
        resp = jsonify({
            "success": True,
            "token": token,
            "user": _user_json(ctx),
            "expires_at": expires_at.isoformat(),
        })
        resp.set_cookie(SESSION_COOKIE_NAME, token, httponly=True, samesite="Lax",
                        max_age=TOKEN_EXPIRY_HOURS * 3600)
        return resp, 200

    @app.route("/api/auth/logout", methods=["POST"])
    def logout():
        token = extract_token(request)
        if _session() is None:
            raise AuthenticationRequired()
        sessions.close(token)
        resp = jsonify({"success": True, "message": "Logged out successfully"})
        resp.delete_cookie(SESSION_COOKIE_NAME)
        return resp, 200

    @app.route("/api/user/profile", methods=["GET"])
    def get_profile():
        data = sessions.get(extract_token(request))
        if data is None:
            raise AuthenticationRequired()
        return jsonify({
            "success": True,
            "user": _user_json(data["ctx"]),
            "session": {
                "created_at": data["created_at"].isoformat(),
                "last_activity": data["last_activity"].isoformat(),
            },
        }), 200

    @app.route("/api/sessions", methods=["GET"])
    def get_sessions_info():
        if not is_development():
            return jsonify(error_body("Not available in production")), 403

        sessions_info = []
        for data in sessions.snapshot():
            sessions_info.append({
                **_user_json(data["ctx"]),
                "created_at": data["created_at"].isoformat(),
                "last_activity": data["last_activity"].isoformat(),
            })
        return jsonify({
            "active_sessions": len(sessions_info),
            "sessions": sessions_info,
        }), 200

    # ── Admin ────────────────────────────────────────────────────────

    @app.route("/api/admin/dashboard", methods=["GET"])
    def dashboard():
        enforce(authorize(_session(), ALL_ROLES))
        return jsonify(success_body({"stats": dashboard_stats(engine)})), 200

    @app.route("/api/admin/<resource>", methods=["GET"])
    def admin_list(resource):
        svc = _service(admin_services, resource)
        return jsonify(svc.list(_session(), request.args)), 200

    @app.route("/api/admin/<resource>", methods=["POST"])
    def admin_create(resource):
        svc = _service(admin_services, resource)
        body = svc.create(_session(), request.get_json(silent=True), request_origin(request))
        return jsonify(body), 201

    @app.route("/api/admin/<resource>/export", methods=["GET"])
    def admin_export(resource):
        svc = _service(admin_services, resource)
        csv_text = svc.export(_session(), request.args)
        stamp = datetime.utcnow().strftime("%Y%m%d")
        return Response(
            csv_text,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={resource}-{stamp}.csv"},
        )

    @app.route("/api/admin/<resource>/<record_id>", methods=["GET"])
    def admin_get(resource, record_id):
        svc = _service(admin_services, resource)
        return jsonify(svc.get(_session(), record_id)), 200

    @app.route("/api/admin/<resource>/<record_id>", methods=["PATCH", "PUT"])
    def admin_update(resource, record_id):
        svc = _service(admin_services, resource)
        body = svc.update(_session(), record_id, request.get_json(silent=True),
                          request_origin(request))
        return jsonify(body), 200

    @app.route("/api/admin/<resource>/<record_id>", methods=["DELETE"])
    def admin_delete(resource, record_id):
        svc = _service(admin_services, resource)
        return jsonify(svc.delete(_session(), record_id, request_origin(request))), 200

    @app.route("/api/admin/<resource>/<record_id>/<action>", methods=["POST"])
    def admin_transition(resource, record_id, action):
        svc = _service(admin_services, resource)
        body = svc.transition(_session(), record_id, action, request.get_json(silent=True),
                              request_origin(request))
        return jsonify(body), 200

    # Fixed paths that would otherwise fall through to the generic
    # /api/<resource> or /api/admin/<resource> rules for other methods.
    def wrong_method(**_):
        raise MethodNotAllowed()

    for path in ("/api/auth/login", "/api/auth/logout"):
        app.add_url_rule(path, f"wrong_method_{path.rsplit('/', 1)[-1]}",
                         wrong_method, methods=["GET"])
    app.add_url_rule("/api/admin/dashboard", "wrong_method_dashboard",
                     wrong_method, methods=["POST"])

    # ── Public ───────────────────────────────────────────────────────

    @app.route("/api/<resource>", methods=["GET"])
    def public_list(resource):
        svc = _service(public_services, resource)
        return jsonify(svc.list(None, request.args)), 200

    @app.route("/api/<resource>/<record_id>", methods=["GET"])
    def public_get(resource, record_id):
        svc = _service(public_services, resource)
        return jsonify(svc.get(None, record_id)), 200

    # ── Error handlers ───────────────────────────────────────────────

    @app.errorhandler(AdminError)
    def admin_error(e):
        details = e.details
        if e.status >= 500 and not is_development():
            details = None
        return jsonify(error_body(e.message, details)), e.status

    @app.errorhandler(404)
    def not_found(e):
        return jsonify(error_body("Endpoint not found")), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify(error_body("Method not allowed")), 405

    @app.errorhandler(500)
    def internal_error(e):
        cause = getattr(e, "original_exception", None) or e
        print(f"[ERROR] Unhandled error: {cause}", file=sys.stderr)
        traceback.print_exception(type(cause), cause, cause.__traceback__)
        details = str(cause) if is_development() else None
        return jsonify(error_body("Internal server error", details)), 500
