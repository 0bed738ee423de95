"""
Error taxonomy for the admin API.

Every error carries the HTTP status it maps to and a client-safe message.
Route handlers never build error responses by hand; they raise one of
these and the Flask error handler renders the envelope.
"""

from typing import Any, List, Optional


class AdminError(Exception):
    status = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationFailed(AdminError):
    """Malformed or missing input; details is a list of {field, message}."""
    status = 400
    default_message = "Validation failed"

    def __init__(self, details: Optional[List[dict]] = None, message: Optional[str] = None):
        super().__init__(message, details or [])

    @classmethod
    def field(cls, name: str, message: str) -> "ValidationFailed":
        return cls([{"field": name, "message": message}])


class AuthenticationRequired(AdminError):
    status = 401
    default_message = "Authentication required"


class PermissionDenied(AdminError):
    status = 403
    default_message = "Insufficient permissions"


class NotFound(AdminError):
    status = 404
    default_message = "Resource not found"


class MethodNotAllowed(AdminError):
    status = 405
    default_message = "Method not allowed"


class Conflict(AdminError):
    status = 409
    default_message = "Resource already exists"


class QueryFailed(AdminError):
    """Storage or upstream failure; the cause is logged, never returned."""
    status = 500
    default_message = "Query failed"
