"""Tests for the role → action table."""

import pytest

from app.core.permissions import Action, Role, allowed_actions, is_allowed


@pytest.mark.parametrize("action", [Action.VIEW_DASHBOARD, Action.MANAGE_QUEUE, Action.MANAGE_APPOINTMENTS])
def test_staff_day_to_day_actions(action):
    assert is_allowed(Role.STAFF, action)


@pytest.mark.parametrize("action", [
    Action.MANAGE_STAFF, Action.MANAGE_SERVICES, Action.MANAGE_SETTINGS,
    Action.MANAGE_USERS, Action.MANAGE_BUSINESSES,
])
def test_staff_cannot_administer(action):
    assert not is_allowed("staff", action)


def test_business_admin():
    assert is_allowed("business_admin", Action.MANAGE_SETTINGS)
    assert is_allowed("business_admin", Action.MANAGE_QUEUE)
    assert not is_allowed("business_admin", Action.MANAGE_BUSINESSES)


def test_super_admin_can_do_everything():
    assert all(is_allowed(Role.SUPER_ADMIN, action) for action in Action)


def test_unknown_role_gets_nothing():
    assert not is_allowed("owner", Action.VIEW_DASHBOARD)
    assert allowed_actions("owner") == []


def test_allowed_actions_sorted():
    assert allowed_actions("staff") == ["manage_appointments", "manage_queue", "view_dashboard"]
