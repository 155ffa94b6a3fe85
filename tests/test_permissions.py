import pytest

from docket.models import UserRole
from docket.permissions import Permission, has_permission, permissions_for


def test_admin_has_every_permission() -> None:
    for permission in Permission:
        assert has_permission(UserRole.ADMIN, permission)


@pytest.mark.parametrize(
    "permission,expected",
    [
        (Permission.VIEW_CALENDAR, True),
        (Permission.VIEW_WORK_ORDERS, True),
        (Permission.CREATE_WORK_ORDERS, False),
        (Permission.EDIT_WORK_ORDERS, True),
        (Permission.MANAGE_USERS, False),
        (Permission.MANAGE_EQUIPMENT, True),
        (Permission.ASSIGN_TECHNICIANS, True),
    ],
)
def test_supervisor_matrix(permission, expected) -> None:
    assert has_permission(UserRole.SUPERVISOR, permission) is expected


def test_technician_only_views() -> None:
    assert permissions_for(UserRole.TECHNICIAN) == [
        Permission.VIEW_CALENDAR,
        Permission.VIEW_WORK_ORDERS,
    ]


def test_roles_and_permissions_accepted_as_strings() -> None:
    assert has_permission("SUPERVISOR", "assign-technicians")
    assert not has_permission("TECHNICIAN", "edit-work-orders")


def test_unknown_role_or_permission_is_denied() -> None:
    assert not has_permission(None, Permission.VIEW_CALENDAR)
    assert not has_permission("DISPATCHER", Permission.VIEW_CALENDAR)
    assert not has_permission(UserRole.ADMIN, "delete-everything")
    assert permissions_for("DISPATCHER") == []
