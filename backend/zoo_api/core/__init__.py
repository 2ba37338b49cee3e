"""
Core module - Security, rate limiting, errors and logging.
"""
from zoo_api.core.errors import (
    ZooError,
    ValidationError,
    ReferenceNotFound,
    CapacityExceeded,
    NotFound,
    Unauthorized,
    Forbidden,
    InternalError,
    ConflictError,
    RateLimited,
    ServiceUnavailable,
)
from zoo_api.core.security import (
    hash_password,
    verify_password,
    create_access_token,
    decode_token,
)

__all__ = [
    "ZooError",
    "ValidationError",
    "ReferenceNotFound",
    "CapacityExceeded",
    "NotFound",
    "Unauthorized",
    "Forbidden",
    "InternalError",
    "ConflictError",
    "RateLimited",
    "ServiceUnavailable",
    "hash_password",
    "verify_password",
    "create_access_token",
    "decode_token",
]
