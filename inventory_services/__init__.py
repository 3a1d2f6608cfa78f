"""
inventory_services -- Package init and public API.

Responsibility:
    Collaborators that sit outside the kernel: mock authentication, a
    simulated inventory backend, privilege checks, and the gateway that
    combines them in front of the store.  This is the only layer that
    sleeps, holds sessions, or knows who the actor is.

Architecture position:
    Services -- orchestration over kernel + config.

    Dependency direction:
        inventory_services/ -> inventory_config/  (allowed)
        inventory_services/ -> inventory_kernel/  (allowed)
        inventory_kernel/   -> inventory_services/ (FORBIDDEN)
"""

from inventory_kernel.logging_config import get_logger

logger = get_logger("services")

from inventory_services.auth_service import AuthService, AuthSession, TokenStorage
from inventory_services.command_gateway import CommandGateway
from inventory_services.mock_api import MockInventoryApi
from inventory_services.rbac import (
    COMMAND_PRIVILEGES,
    check_privilege,
    get_privilege_for_command,
)

__all__ = [
    "AuthService",
    "AuthSession",
    "COMMAND_PRIVILEGES",
    "CommandGateway",
    "MockInventoryApi",
    "TokenStorage",
    "check_privilege",
    "get_privilege_for_command",
]
