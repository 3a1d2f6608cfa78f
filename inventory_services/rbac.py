"""
inventory_services.rbac -- Privilege checks at the command boundary.

Responsibility:
    Map each command kind to the privilege it requires and check whether a
    user holds it through their group's role.

Architecture position:
    Services layer.  Consumed by ``CommandGateway``; the store itself is
    actor-agnostic and never checks privileges.

Invariants:
    - Privileges are referenced by name (``assets.edit``), resolved from
      the state's privilege records.
    - Inactive users hold no privileges.
"""

from __future__ import annotations

from inventory_kernel.domain.commands import CommandKind
from inventory_kernel.domain.models import UserStatus
from inventory_kernel.domain.queries import effective_privileges
from inventory_kernel.domain.state import InventoryState

ASSETS_CREATE = "assets.create"
ASSETS_EDIT = "assets.edit"
ASSETS_DELETE = "assets.delete"
USERS_MANAGE = "users.manage"

# command kind -> privilege name
COMMAND_PRIVILEGES: dict[CommandKind, str] = {
    # Assets
    CommandKind.CREATE_ASSET: ASSETS_CREATE,
    CommandKind.UPDATE_ASSET: ASSETS_EDIT,
    CommandKind.DELETE_ASSET: ASSETS_DELETE,
    CommandKind.SET_ASSETS: ASSETS_EDIT,
    # Licenses
    CommandKind.CREATE_LICENSE: ASSETS_CREATE,
    CommandKind.UPDATE_LICENSE: ASSETS_EDIT,
    CommandKind.DELETE_LICENSE: ASSETS_DELETE,
    CommandKind.SET_LICENSES: ASSETS_EDIT,
    CommandKind.UPDATE_SEAT: ASSETS_EDIT,
    # Accessories
    CommandKind.CREATE_ACCESSORY: ASSETS_CREATE,
    CommandKind.UPDATE_ACCESSORY: ASSETS_EDIT,
    CommandKind.DELETE_ACCESSORY: ASSETS_DELETE,
    CommandKind.SET_ACCESSORIES: ASSETS_EDIT,
    CommandKind.CHECKOUT_ACCESSORY: ASSETS_EDIT,
    CommandKind.CHECKIN_ACCESSORY: ASSETS_EDIT,
    # Components
    CommandKind.CREATE_COMPONENT: ASSETS_CREATE,
    CommandKind.UPDATE_COMPONENT: ASSETS_EDIT,
    CommandKind.DELETE_COMPONENT: ASSETS_DELETE,
    CommandKind.SET_COMPONENTS: ASSETS_EDIT,
    CommandKind.CHECKOUT_COMPONENT: ASSETS_EDIT,
    CommandKind.CHECKIN_COMPONENT: ASSETS_EDIT,
    # Procurement
    CommandKind.CREATE_BATCH: ASSETS_CREATE,
    CommandKind.UPDATE_BATCH: ASSETS_EDIT,
    CommandKind.DELETE_BATCH: ASSETS_DELETE,
    CommandKind.SET_BATCHES: ASSETS_EDIT,
    CommandKind.UPDATE_BATCH_STATUS: ASSETS_EDIT,
    # Reference lists
    CommandKind.SET_REFERENCE_VALUES: ASSETS_EDIT,
    CommandKind.ADD_REFERENCE_VALUE: ASSETS_EDIT,
    CommandKind.REMOVE_REFERENCE_VALUE: ASSETS_EDIT,
    # Users, groups, roles
    CommandKind.CREATE_USER: USERS_MANAGE,
    CommandKind.UPDATE_USER: USERS_MANAGE,
    CommandKind.DELETE_USER: USERS_MANAGE,
    CommandKind.SET_USERS: USERS_MANAGE,
    CommandKind.CREATE_GROUP: USERS_MANAGE,
    CommandKind.UPDATE_GROUP: USERS_MANAGE,
    CommandKind.DELETE_GROUP: USERS_MANAGE,
    CommandKind.SET_GROUPS: USERS_MANAGE,
    CommandKind.CREATE_ROLE: USERS_MANAGE,
    CommandKind.UPDATE_ROLE: USERS_MANAGE,
    CommandKind.DELETE_ROLE: USERS_MANAGE,
    CommandKind.SET_ROLES: USERS_MANAGE,
}


def get_privilege_for_command(kind: CommandKind) -> str:
    """Return the privilege required to issue ``kind``."""
    return COMMAND_PRIVILEGES[kind]


def check_privilege(
    state: InventoryState,
    user_id: str,
    privilege: str,
) -> tuple[bool, str]:
    """Check whether the user holds ``privilege``.

    Returns:
        (allowed, reason). allowed is True iff the user may act; reason is
        empty when allowed, or a short message when denied.
    """
    user = state.get_user(user_id)
    if user is None:
        return (False, f"RBAC: unknown user '{user_id}'")
    if user.status is not UserStatus.ACTIVE:
        return (False, f"RBAC: user '{user_id}' is inactive")
    if privilege not in effective_privileges(state, user_id):
        return (False, f"RBAC: privilege '{privilege}' not granted to user")
    return (True, "")
