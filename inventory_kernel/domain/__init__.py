"""
Pure domain layer.

This module contains the inventory records, the command set, and the
state-transition function, with NO dependencies on:
- Persistence
- Network transport
- Wall-clock time (the clock is injected)
- I/O

All domain objects are immutable and deterministic.
"""

from inventory_kernel.domain.clock import (
    Clock,
    DeterministicClock,
    SequentialClock,
    SystemClock,
)
from inventory_kernel.domain.commands import (
    COMMANDS_BY_KIND,
    Command,
    CommandKind,
    parse_command,
)
from inventory_kernel.domain.guards import check_command
from inventory_kernel.domain.history import (
    HistoryEvent,
    HistoryEventType,
    append_events,
    newest_first,
)
from inventory_kernel.domain.ids import (
    IdGenerator,
    SequentialIdGenerator,
    UuidIdGenerator,
)
from inventory_kernel.domain.models import (
    Accessory,
    Asset,
    AssetStatus,
    AssigneeType,
    BatchItemType,
    BatchStatus,
    DeliveryCondition,
    DeliveryNote,
    HardwareComponent,
    LicenseSeat,
    LicenseStatus,
    MasterLicense,
    Privilege,
    ProcurementBatch,
    PurchaseOrder,
    Role,
    SeatStatus,
    User,
    UserGroup,
    UserStatus,
    WardMinutes,
)
from inventory_kernel.domain.policy import REFERENCE_POLICY, StorePolicy
from inventory_kernel.domain.snapshot import to_snapshot
from inventory_kernel.domain.state import InventoryState, ReferenceList
from inventory_kernel.domain.store import InventoryStore, apply_command

__all__ = [
    # Collaborators
    "Clock",
    "DeterministicClock",
    "SequentialClock",
    "SystemClock",
    "IdGenerator",
    "SequentialIdGenerator",
    "UuidIdGenerator",
    # Records
    "Accessory",
    "Asset",
    "AssetStatus",
    "AssigneeType",
    "BatchItemType",
    "BatchStatus",
    "DeliveryCondition",
    "DeliveryNote",
    "HardwareComponent",
    "LicenseSeat",
    "LicenseStatus",
    "MasterLicense",
    "Privilege",
    "ProcurementBatch",
    "PurchaseOrder",
    "Role",
    "SeatStatus",
    "User",
    "UserGroup",
    "UserStatus",
    "WardMinutes",
    # History
    "HistoryEvent",
    "HistoryEventType",
    "append_events",
    "newest_first",
    # State and commands
    "InventoryState",
    "ReferenceList",
    "Command",
    "CommandKind",
    "COMMANDS_BY_KIND",
    "parse_command",
    # Store
    "InventoryStore",
    "apply_command",
    "StorePolicy",
    "REFERENCE_POLICY",
    "check_command",
    "to_snapshot",
]
