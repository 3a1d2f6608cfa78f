"""
Caller-side quantity guards (``inventory_kernel.domain.guards``).

Responsibility
--------------
Reject stock movements that would push an accessory or component outside
``[0, total_qty]``.  The store applies checkout and check-in verbatim; these
guards are what keep the quantities in range, and they run before a command
is dispatched (see ``inventory_services.command_gateway``).

Commands that are not stock movements, and movements that address an
unknown item, always pass: the store turns the latter into a no-op.
"""

from __future__ import annotations

from inventory_kernel.domain.commands import (
    CheckinAccessory,
    CheckinComponent,
    CheckoutAccessory,
    CheckoutComponent,
    Command,
)
from inventory_kernel.domain.models import Accessory, HardwareComponent
from inventory_kernel.domain.state import InventoryState
from inventory_kernel.exceptions import (
    NothingCheckedOutError,
    StockExhaustedError,
    StockFullError,
)
from inventory_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.guards")


def can_checkout_accessory(accessory: Accessory) -> bool:
    return accessory.remaining_qty > 0


def can_checkin_accessory(accessory: Accessory) -> bool:
    return accessory.checked_out_qty > 0


def can_checkout_component(component: HardwareComponent) -> bool:
    return component.remaining_qty > 0


def can_checkin_component(component: HardwareComponent) -> bool:
    return component.remaining_qty < component.total_qty


def check_command(state: InventoryState, command: Command) -> None:
    """
    Raise a ``GuardError`` if ``command`` would break a quantity bound.

    Raises:
        StockExhaustedError: Checkout with nothing remaining.
        NothingCheckedOutError: Accessory check-in with zero checked out.
        StockFullError: Component check-in with remaining already at total.
    """
    if isinstance(command, CheckoutAccessory):
        accessory = state.get_accessory(command.item_id)
        if accessory is not None and not can_checkout_accessory(accessory):
            _rejected(command, "stock_exhausted")
            raise StockExhaustedError(
                accessory.id, accessory.total_qty, accessory.remaining_qty,
            )

    elif isinstance(command, CheckinAccessory):
        accessory = state.get_accessory(command.item_id)
        if accessory is not None and not can_checkin_accessory(accessory):
            _rejected(command, "nothing_checked_out")
            raise NothingCheckedOutError(accessory.id)

    elif isinstance(command, CheckoutComponent):
        component = state.get_component(command.item_id)
        if component is not None and not can_checkout_component(component):
            _rejected(command, "stock_exhausted")
            raise StockExhaustedError(
                component.id, component.total_qty, component.remaining_qty,
            )

    elif isinstance(command, CheckinComponent):
        component = state.get_component(command.item_id)
        if component is not None and not can_checkin_component(component):
            _rejected(command, "stock_full")
            raise StockFullError(component.id, component.total_qty)


def _rejected(command: Command, reason: str) -> None:
    with LogContext.for_command(command):
        logger.warning(
            "guard_rejected",
            extra={"item_id": command.target_id, "reason": reason},
        )
