"""
Role-based permissions

Every authenticated role can view the calendar and the work order list;
the remaining permissions are granted per role below.
"""

import enum
from typing import Optional, Union

from .models import UserRole


class Permission(str, enum.Enum):
    # Universal permissions (available to all authenticated users)
    VIEW_CALENDAR = "view-calendar"
    VIEW_WORK_ORDERS = "view-work-orders"
    # Work orders
    CREATE_WORK_ORDERS = "create-work-orders"
    EDIT_WORK_ORDERS = "edit-work-orders"
    # Management
    MANAGE_USERS = "manage-users"
    MANAGE_EQUIPMENT = "manage-equipment"
    ASSIGN_TECHNICIANS = "assign-technicians"


UNIVERSAL_PERMISSIONS = (Permission.VIEW_CALENDAR, Permission.VIEW_WORK_ORDERS)

ROLE_PERMISSIONS: dict[UserRole, frozenset[Permission]] = {
    UserRole.ADMIN: frozenset(
        [
            *UNIVERSAL_PERMISSIONS,
            Permission.CREATE_WORK_ORDERS,
            Permission.EDIT_WORK_ORDERS,
            Permission.MANAGE_USERS,
            Permission.MANAGE_EQUIPMENT,
            Permission.ASSIGN_TECHNICIANS,
        ]
    ),
    UserRole.SUPERVISOR: frozenset(
        [
            *UNIVERSAL_PERMISSIONS,
            Permission.EDIT_WORK_ORDERS,
            Permission.MANAGE_EQUIPMENT,
            Permission.ASSIGN_TECHNICIANS,
        ]
    ),
    UserRole.TECHNICIAN: frozenset(UNIVERSAL_PERMISSIONS),
}


def _coerce_role(role: Union[UserRole, str, None]) -> Optional[UserRole]:
    if role is None:
        return None
    try:
        return UserRole(role)
    except ValueError:
        return None


def has_permission(
    user_role: Union[UserRole, str, None], permission: Union[Permission, str]
) -> bool:
    """Check whether a role grants a permission. Unknown roles and permissions are denied."""
    role = _coerce_role(user_role)
    if role is None:
        return False
    try:
        permission = Permission(permission)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def permissions_for(user_role: Union[UserRole, str, None]) -> list[Permission]:
    """All permissions of a role, in declaration order"""
    role = _coerce_role(user_role)
    if role is None:
        return []
    granted = ROLE_PERMISSIONS.get(role, frozenset())
    return [p for p in Permission if p in granted]
