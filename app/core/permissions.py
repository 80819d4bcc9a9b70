"""Role → action authorization table.

Every menu entry and every guarded endpoint asks the same question:
"may this role perform this action?". The answer lives in one table here
instead of being scattered across handlers.
"""

import enum


class Role(str, enum.Enum):
    STAFF = "staff"
    BUSINESS_ADMIN = "business_admin"
    SUPER_ADMIN = "super_admin"


class Action(str, enum.Enum):
    VIEW_DASHBOARD = "view_dashboard"
    MANAGE_QUEUE = "manage_queue"
    MANAGE_APPOINTMENTS = "manage_appointments"
    MANAGE_STAFF = "manage_staff"
    MANAGE_SERVICES = "manage_services"
    MANAGE_SETTINGS = "manage_settings"
    MANAGE_USERS = "manage_users"
    MANAGE_BUSINESSES = "manage_businesses"


_STAFF_ACTIONS = frozenset({
    Action.VIEW_DASHBOARD,
    Action.MANAGE_QUEUE,
    Action.MANAGE_APPOINTMENTS,
})

_ADMIN_ACTIONS = _STAFF_ACTIONS | {
    Action.MANAGE_STAFF,
    Action.MANAGE_SERVICES,
    Action.MANAGE_SETTINGS,
    Action.MANAGE_USERS,
}

PERMISSIONS: dict[Role, frozenset[Action]] = {
    Role.STAFF: _STAFF_ACTIONS,
    Role.BUSINESS_ADMIN: frozenset(_ADMIN_ACTIONS),
    Role.SUPER_ADMIN: frozenset(Action),
}


def is_allowed(role: str | Role, action: Action) -> bool:
    """Return True when `role` may perform `action`. Unknown roles get nothing."""
    try:
        resolved = Role(role)
    except ValueError:
        return False
    return action in PERMISSIONS[resolved]


def allowed_actions(role: str | Role) -> list[str]:
    """Sorted action names for a role (drives menu visibility on the client)."""
    try:
        resolved = Role(role)
    except ValueError:
        return []
    return sorted(a.value for a in PERMISSIONS[resolved])
