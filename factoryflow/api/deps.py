"""
Request dependencies shared by the routers.

Authentication happens upstream. The gateway passes the caller's
role in X-User-Role and, optionally, their id in X-User-Id.
"""

from fastapi import Depends, Header, HTTPException

from factoryflow.models.enums import (
    PermissionAction,
    PermissionModule,
    UserRole,
)
from factoryflow.services.permissions import has_permission


def get_user_role(x_user_role: str = Header(default="viewer")) -> UserRole:
    try:
        return UserRole(x_user_role.strip().lower())
    except ValueError:
        raise HTTPException(
            status_code=403, detail=f"Unknown role: {x_user_role}"
        )


def get_user_id(x_user_id: str | None = Header(default=None)) -> str | None:
    return x_user_id


def require_permission(module: PermissionModule, action: PermissionAction):
    """Dependency factory: 403 unless the caller's role allows the action."""

    def checker(role: UserRole = Depends(get_user_role)) -> UserRole:
        if not has_permission(role, module, action):
            raise HTTPException(
                status_code=403,
                detail=(
                    f"Role '{role.value}' may not {action.value} "
                    f"{module.value}"
                ),
            )
        return role

    return checker
