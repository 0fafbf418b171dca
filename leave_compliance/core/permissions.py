"""
Role to permission mapping for leave management
"""
from typing import FrozenSet, Dict
from leave_compliance.models.employee import Role
from leave_compliance.utils.enums import enum_to_str

MANAGE_TYPES = "leave.manage_types"
MANAGE_BALANCES = "leave.manage_balances"
MANAGE_HOLIDAYS = "leave.manage_holidays"
APPROVE_REQUESTS = "leave.approve_requests"
VIEW_TEAM_CALENDAR = "leave.view_team_calendar"

ALL_LEAVE_PERMISSIONS = frozenset({
    MANAGE_TYPES,
    MANAGE_BALANCES,
    MANAGE_HOLIDAYS,
    APPROVE_REQUESTS,
    VIEW_TEAM_CALENDAR,
})

ROLE_PERMISSIONS: Dict[str, FrozenSet[str]] = {
    Role.OWNER.value: ALL_LEAVE_PERMISSIONS,
    Role.ADMIN.value: ALL_LEAVE_PERMISSIONS,
    Role.PEOPLE_OPS.value: ALL_LEAVE_PERMISSIONS,
    Role.MANAGER.value: frozenset({APPROVE_REQUESTS, VIEW_TEAM_CALENDAR}),
    Role.EMPLOYEE.value: frozenset(),
}


def has_permission(role, permission: str) -> bool:
    """Check whether a role (enum or string) grants a permission. Unknown roles grant nothing."""
    return permission in ROLE_PERMISSIONS.get(enum_to_str(role), frozenset())


# Roles that see and act on every employee of the tenant; others are limited to their reporting tree
TENANT_WIDE_ROLES = frozenset({Role.OWNER.value, Role.ADMIN.value, Role.PEOPLE_OPS.value})


def is_tenant_wide(role) -> bool:
    return enum_to_str(role) in TENANT_WIDE_ROLES
