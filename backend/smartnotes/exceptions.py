"""
SmartNotesX Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for every failure the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Services raise them unmodified; the handlers registered in
       main.py are the single place that maps them to HTTP status codes and
       the response envelope.
Who:   Raised by services, dependencies and middleware.

Exception Hierarchy:
    SmartNotesError (base)
    ├── ValidationError          → 400 Bad Request
    ├── DuplicateError           → 400 Bad Request (uniqueness violation)
    ├── BusinessRuleError        → 400 Bad Request (deadline passed, admin protected)
    ├── AuthError                → 401 Unauthorized
    ├── AuthorizationError       → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── RateLimitExceededError   → 429 Too Many Requests
    ├── UploadError              → 500 Internal Server Error (media store failed)
    └── InternalError            → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class SmartNotesError(Exception):
    """
    Base exception for all SmartNotesX application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(SmartNotesError):
    """
    Raised when client input fails validation.

    When:    Missing file, wrong MIME type, oversized upload, bad field values.
    HTTP:    400 Bad Request

    `errors` holds per-field problems and is returned to the client as
    `[{"field": ..., "message": ...}]`.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or ([{"field": field, "message": message}] if field else [])


class DuplicateError(SmartNotesError):
    """
    Raised when a write would violate a uniqueness rule.

    When:    Email already registered, note already bookmarked, job already applied to.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class BusinessRuleError(SmartNotesError):
    """
    Raised when a well-formed request breaks a domain rule.

    When:    Applying after the deadline, toggling or deleting an admin account.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Operation not allowed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthError(SmartNotesError):
    """
    Raised when the caller cannot be identified.

    When:    Missing/invalid/expired token, unknown email, wrong password.
    HTTP:    401 Unauthorized (with WWW-Authenticate: Bearer)
    """

    def __init__(
        self,
        message: str = "Not authorized, invalid or missing token",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(SmartNotesError):
    """
    Raised when an identified caller lacks the role or ownership required.

    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "Access denied",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(SmartNotesError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the handler can answer 404.
    """

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class UploadError(SmartNotesError):
    """
    Raised when the media store rejects or fails an upload or deletion.

    When:    Network error, non-2xx from Cloudinary, local disk failure.
    HTTP:    500 Internal Server Error

    Never retried; the caller repeats the whole operation.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(SmartNotesError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests (with Retry-After header)
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Too many requests. Please wait {retry_after} seconds before retrying."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after


class InternalError(SmartNotesError):
    """
    Anything not covered above. The message is always generic; details are
    logged server-side only.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred. Please try again or contact support.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
