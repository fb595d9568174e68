"""Application error taxonomy.

Storage and the auth layer raise these; the API layer turns them into HTTP
responses (see ``bizboard.main``). Native database errors never leave the
storage layer.
"""

from typing import Any, Dict, List, Optional


class AppError(Exception):
    """Base class for all errors the API knows how to render."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    """Input failed schema validation. ``errors`` lists ``{field, message}`` pairs."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: List[Dict[str, Any]], message: Optional[str] = None):
        self.errors = errors
        super().__init__(message)

    @property
    def fields(self) -> List[str]:
        return [error["field"] for error in self.errors]


class AuthError(AppError):
    """The request has no usable principal, or the principal has no tenant."""

    UNAUTHENTICATED = "unauthenticated"
    NO_COMPANY = "no_company"

    def __init__(self, reason: str = UNAUTHENTICATED, message: Optional[str] = None):
        self.reason = reason
        if reason == self.NO_COMPANY:
            self.status_code = 400
            message = message or "No company associated with user"
        else:
            self.status_code = 401
            message = message or "Authentication required"
        super().__init__(message)


class PermissionDeniedError(AppError):
    status_code = 403
    default_message = "Insufficient permissions"


class NotFoundError(AppError):
    status_code = 404

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class StorageError(AppError):
    """A persistence failure, normalized to a stable reason code."""

    DUPLICATE = "duplicate"
    FOREIGN_KEY = "foreign_key"
    CONNECTION = "connection"

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        if reason == self.FOREIGN_KEY:
            self.status_code = 400
            message = "Referenced record does not exist"
        else:
            message = None
        super().__init__(message)


class ConflictError(StorageError):
    """A unique field already holds this value (e.g. a registered email)."""

    status_code = 409

    def __init__(self, field: str = "value", detail: Optional[str] = None):
        self.field = field
        super().__init__(self.DUPLICATE, detail)
        self.status_code = 409
        self.message = f"{field} already in use"
        self.args = (self.message,)
