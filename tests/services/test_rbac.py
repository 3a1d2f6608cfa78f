from dataclasses import replace

from inventory_kernel.domain.commands import CommandKind
from inventory_kernel.domain.models import UserStatus
from inventory_services.rbac import (
    COMMAND_PRIVILEGES,
    check_privilege,
    get_privilege_for_command,
)


def test_every_command_kind_is_mapped():
    assert set(COMMAND_PRIVILEGES) == set(CommandKind)


def test_privilege_lookup():
    assert get_privilege_for_command(CommandKind.DELETE_ASSET) == "assets.delete"
    assert get_privilege_for_command(CommandKind.CREATE_ROLE) == "users.manage"


def test_admin_allowed(default_state):
    assert check_privilege(default_state, "u1", "assets.delete") == (True, "")


def test_staff_denied_with_reason(default_state):
    allowed, reason = check_privilege(default_state, "u3", "assets.edit")
    assert not allowed
    assert "assets.edit" in reason


def test_unknown_user_denied(default_state):
    allowed, reason = check_privilege(default_state, "u404", "assets.view")
    assert not allowed
    assert "unknown user" in reason


def test_inactive_user_denied(default_state):
    admin = default_state.get_user("u1")
    users = tuple(
        replace(u, status=UserStatus.INACTIVE) if u.id == admin.id else u
        for u in default_state.users
    )
    state = replace(default_state, users=users)
    allowed, reason = check_privilege(state, "u1", "assets.view")
    assert not allowed
    assert "inactive" in reason
