"""
Domain exceptions raised by the model layer and mapped to HTTP responses
by middleware.error_middleware.
"""
from typing import Any, Optional


class PlanboardError(Exception):
    """Base class for every error the API turns into a JSON response"""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(PlanboardError):
    status_code = 400
    code = "VALIDATION_ERROR"


class ReservedSlugError(ValidationError):
    """Slug collides with a static route name"""

    code = "RESERVED_SLUG"


class DuplicateSlugError(PlanboardError):
    status_code = 409
    code = "DUPLICATE_SLUG"


class NotFoundError(PlanboardError):
    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str = "Resource"):
        super().__init__(f"{resource} not found")
        self.resource = resource


class AuthenticationError(PlanboardError):
    status_code = 401
    code = "AUTHENTICATION_ERROR"


class PermissionDeniedError(PlanboardError):
    status_code = 403
    code = "AUTHORIZATION_ERROR"


class TransportError(PlanboardError):
    """A Firestore call was rejected; local state was left untouched"""

    status_code = 503
    code = "TRANSPORT_ERROR"
