"""
Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the handlers in
``zoo_api.core.error_handlers`` turn them into JSON responses.
"""
from typing import Any, Optional


class ZooError(Exception):
    """Base class for errors reported to the API caller."""
    code = "zoo_error"
    status_code = 400

    def __init__(self, message: str, *, errors: Optional[list[dict[str, Any]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors


class ValidationError(ZooError):
    code = "validation_error"
    status_code = 400


class ReferenceNotFound(ZooError):
    code = "reference_not_found"
    status_code = 400


class CapacityExceeded(ZooError):
    code = "capacity_exceeded"
    status_code = 400


class NotFound(ZooError):
    code = "not_found"
    status_code = 404


class Unauthorized(ZooError):
    code = "unauthorized"
    status_code = 401


class Forbidden(ZooError):
    code = "forbidden"
    status_code = 403


class InternalError(ZooError):
    code = "internal_error"
    status_code = 500


class ConflictError(ZooError):
    code = "conflict"
    status_code = 409


class RateLimited(ZooError):
    code = "rate_limited"
    status_code = 429


class ServiceUnavailable(ZooError):
    code = "service_unavailable"
    status_code = 503
