"""
Dependencies for dependency injection in routes.
"""
from zoo_api.dependencies.auth import (
    CurrentUser,
    get_current_active_user,
    get_current_user,
    get_token_payload,
)
from zoo_api.dependencies.roles import require_admin, require_roles

__all__ = [
    "CurrentUser",
    "get_current_user",
    "get_current_active_user",
    "get_token_payload",
    "require_roles",
    "require_admin",
]
