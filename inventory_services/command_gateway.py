"""
inventory_services.command_gateway -- Authenticated command submission.

Responsibility:
    The checked way for a collaborator to change inventory: requires a
    logged-in session, checks the session user's privilege for the command
    kind, runs the quantity guards, then dispatches to the store.  Thin
    coordinator; every rule lives elsewhere.

Architecture position:
    Services layer.  Composes ``AuthService``, ``rbac``, kernel guards and
    ``InventoryStore``.

Failure modes:
    - ``InvalidCommandError`` for an unparseable ``{kind, payload}`` mapping.
    - ``NotAuthenticatedError`` without a session.
    - ``PermissionDeniedError`` when the user lacks the privilege.
    - ``GuardError`` subclasses when a stock movement is out of bounds.
    In every failure case the store is not touched.
"""

from __future__ import annotations

from typing import Any, Mapping
from uuid import uuid4

from inventory_kernel.domain.commands import Command, parse_command
from inventory_kernel.domain.guards import check_command
from inventory_kernel.domain.state import InventoryState
from inventory_kernel.domain.store import InventoryStore
from inventory_kernel.exceptions import NotAuthenticatedError, PermissionDeniedError
from inventory_kernel.logging_config import LogContext, get_logger
from inventory_services.auth_service import AuthService
from inventory_services.rbac import check_privilege, get_privilege_for_command

logger = get_logger("services.command_gateway")


class CommandGateway:
    def __init__(self, store: InventoryStore, auth: AuthService):
        self._store = store
        self._auth = auth

    def submit(self, command: Command | Mapping[str, Any]) -> InventoryState:
        """
        Validate and dispatch one command.

        Accepts a typed command or its ``{"kind": ..., "payload": ...}``
        mapping form.  Returns the store's state after dispatch.
        """
        if not isinstance(command, Command):
            command = parse_command(command)

        user = self._auth.current_user()
        if user is None or not self._auth.is_authenticated():
            logger.warning("command_rejected_unauthenticated",
                           extra={"command_kind": command.kind.value})
            raise NotAuthenticatedError(command.kind.value)

        with LogContext.bind(correlation_id=str(uuid4()), actor_id=user.id):
            privilege = get_privilege_for_command(command.kind)
            allowed, reason = check_privilege(self._store.state, user.id, privilege)
            if not allowed:
                logger.warning(
                    "command_rejected_permission",
                    extra={"command_kind": command.kind.value,
                           "privilege": privilege, "reason": reason},
                )
                raise PermissionDeniedError(user.id, privilege, reason)

            check_command(self._store.state, command)
            return self._store.dispatch(command)
