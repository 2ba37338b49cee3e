"""
Role-based access control dependencies.
"""
from typing import Callable

from fastapi import Depends

from zoo_api.core.errors import Forbidden
from zoo_api.dependencies.auth import get_current_active_user
from zoo_api.models.user import StaffRole, User


def require_roles(*allowed_roles: StaffRole) -> Callable:
    """
    Dependency factory for role-based access control.

    Usage:
        @router.post("/reconcile")
        async def reconcile(user: User = Depends(require_roles(StaffRole.ADMIN))):
            ...

    Args:
        *allowed_roles: Roles that are allowed to access the route

    Returns:
        Dependency function that validates the user's role
    """
    allowed = {role.value for role in allowed_roles}

    async def role_checker(
        current_user: User = Depends(get_current_active_user)
    ) -> User:
        if current_user.role not in allowed:
            raise Forbidden(
                f"User role {current_user.role} is not authorized to access this route"
            )
        return current_user

    return role_checker


def require_admin() -> Callable:
    """Shortcut dependency for admin-only routes."""
    return require_roles(StaffRole.ADMIN)
