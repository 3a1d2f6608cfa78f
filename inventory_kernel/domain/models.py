"""
Inventory Domain Models (``inventory_kernel.domain.models``).

Responsibility
--------------
Frozen value objects for the nouns of IT asset management: assets, master
licenses and their seats, bulk-tracked accessories and hardware components,
procurement batches with their paperwork, and the user / group / role /
privilege reference data.

Architecture
------------
Layer: **Kernel > Domain** -- pure data structures.  All dataclasses are
``frozen=True``; the store produces modified copies with
``dataclasses.replace`` and never mutates a record in place.  Optional
collections (``assigned_licenses``, ``history``) are always present and
default to empty tuples.

Invariants
----------
- ``LicenseSeat``: ``status == ASSIGNED`` iff ``assigned_to_type`` is not
  ``UNASSIGNED`` and ``assigned_to_id`` is non-empty.  Violations raise
  ``ValueError`` at construction.
- Quantity bounds on ``Accessory`` and ``HardwareComponent`` are caller-side
  rules and are NOT enforced here, so an out-of-range value produced by an
  unguarded checkout is representable.
- All monetary fields use ``Decimal``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from inventory_kernel.domain.history import History
from inventory_kernel.logging_config import get_logger

logger = get_logger("domain.models")


class AssetStatus(Enum):
    ACTIVE = "active"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class LicenseStatus(Enum):
    ACTIVE = "active"
    EXPIRING = "expiring"
    EXPIRED = "expired"


class SeatStatus(Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"


class AssigneeType(Enum):
    """What a license seat is assigned to."""
    UNASSIGNED = "unassigned"
    PERSON = "person"
    ASSET = "asset"


class BatchStatus(Enum):
    """Procurement batch lifecycle states."""
    PENDING = "pending"
    PARTIALLY_RECEIVED = "partially_received"
    RECEIVED = "received"
    COMMISSIONED = "commissioned"


class BatchItemType(Enum):
    ASSET = "asset"
    LICENSE = "license"


class DeliveryCondition(Enum):
    GOOD = "good"
    DAMAGED = "damaged"
    PARTIAL = "partial"


class UserStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


# ---------------------------------------------------------------------------
# Hardware assets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Asset:
    """
    A tracked piece of hardware.

    Contract: Immutable.  ``assigned_licenses`` lists LicenseSeat ids; it may
    reference seats that no longer exist after a license is deleted.  The
    asset exclusively owns its ``history`` log.
    """
    id: str
    name: str
    asset_type: str = ""
    asset_tag: str = ""
    serial_number: str = ""
    model: str = ""
    status: AssetStatus = AssetStatus.ACTIVE
    location: str = ""
    department: str = ""
    assignee: str = ""
    purchase_cost: Decimal = Decimal("0")
    current_value: Decimal = Decimal("0")
    purchase_date: date | None = None
    image: str = ""
    assigned_licenses: tuple[str, ...] = ()
    procurement_batch_id: str | None = None
    history: History = ()


# ---------------------------------------------------------------------------
# Software licenses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MasterLicense:
    """
    A software license agreement with a declared seat capacity.

    Contract: Immutable.  Seats are separate records linked back through
    ``LicenseSeat.master_license_id``; ``total_seats`` is the declared
    capacity, not a count of seat records.
    """
    id: str
    name: str
    key: str = ""
    category: str = ""
    manufacturer: str = ""
    total_seats: int = 0
    expiration_date: date | None = None
    status: LicenseStatus = LicenseStatus.ACTIVE
    purchase_date: date | None = None
    notes: str = ""
    procurement_batch_id: str | None = None
    history: History = ()


@dataclass(frozen=True)
class LicenseSeat:
    """
    One assignable unit of a master license.

    Contract: Immutable.  ``assigned_to_id`` is a free-text person name when
    ``assigned_to_type`` is PERSON, or an Asset id when it is ASSET.  The
    seat's history is independent of its master license's history.

    Raises:
        ValueError: If status and assignment disagree.
    """
    id: str
    master_license_id: str
    seat_number: str
    status: SeatStatus = SeatStatus.AVAILABLE
    assigned_to_type: AssigneeType = AssigneeType.UNASSIGNED
    assigned_to_id: str | None = None
    history: History = ()

    def __post_init__(self):
        # INVARIANT: assigned <=> has a typed, non-empty assignment target.
        has_target = (
            self.assigned_to_type is not AssigneeType.UNASSIGNED
            and bool(self.assigned_to_id)
        )
        if (self.status is SeatStatus.ASSIGNED) != has_target:
            logger.warning(
                "license_seat_assignment_mismatch",
                extra={
                    "seat_id": self.id,
                    "status": self.status.value,
                    "assigned_to_type": self.assigned_to_type.value,
                    "assigned_to_id": self.assigned_to_id,
                },
            )
            raise ValueError(
                f"Seat {self.id}: status {self.status.value} does not match "
                f"assignment ({self.assigned_to_type.value}, "
                f"{self.assigned_to_id!r})"
            )

    @property
    def is_assigned(self) -> bool:
        return self.status is SeatStatus.ASSIGNED


# ---------------------------------------------------------------------------
# Bulk-tracked stock
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Accessory:
    """
    A bulk-tracked consumable counted by units checked out.

    Contract: Immutable.  ``remaining_qty`` is derived; low stock means
    ``remaining_qty <= min_qty``.
    """
    id: str
    name: str
    category: str = ""
    model_number: str = ""
    location: str = ""
    min_qty: int = 0
    total_qty: int = 0
    checked_out_qty: int = 0
    unit_cost: Decimal = Decimal("0")
    image: str = ""
    notes: str = ""
    history: History = ()

    @property
    def remaining_qty(self) -> int:
        return self.total_qty - self.checked_out_qty

    @property
    def is_low_stock(self) -> bool:
        return self.remaining_qty <= self.min_qty


@dataclass(frozen=True)
class HardwareComponent:
    """
    A bulk-tracked part counted by units remaining on the shelf.

    Contract: Immutable.  Unlike ``Accessory`` the remaining quantity is
    stored directly rather than derived from a checked-out counter.
    """
    id: str
    name: str
    serial: str = ""
    category: str = ""
    model_number: str = ""
    location: str = ""
    order_number: str = ""
    purchase_date: date | None = None
    min_qty: int = 0
    total_qty: int = 0
    remaining_qty: int = 0
    unit_cost: Decimal = Decimal("0")
    notes: str = ""
    history: History = ()

    @property
    def checked_out_qty(self) -> int:
        return self.total_qty - self.remaining_qty

    @property
    def is_low_stock(self) -> bool:
        return self.remaining_qty <= self.min_qty


# ---------------------------------------------------------------------------
# Procurement
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PurchaseOrder:
    po_number: str
    vendor: str
    total_cost: Decimal
    order_date: date
    document_url: str | None = None


@dataclass(frozen=True)
class DeliveryNote:
    waybill_number: str
    received_date: date
    condition: DeliveryCondition = DeliveryCondition.GOOD
    document_url: str | None = None


@dataclass(frozen=True)
class WardMinutes:
    """Commissioning committee sign-off for a delivered batch."""
    meeting_ref_no: str
    meeting_date: date
    committee_sign_off: bool = False
    document_url: str | None = None


@dataclass(frozen=True)
class ProcurementBatch:
    """
    An ordered/received quantity pair with its supporting documents.

    Contract: Immutable.  ``discrepancy`` is ``ordered_qty - received_qty``;
    any non-zero value is a reconciliation alert.
    """
    id: str
    name: str
    ordered_qty: int = 0
    received_qty: int = 0
    item_type: BatchItemType = BatchItemType.ASSET
    status: BatchStatus = BatchStatus.PENDING
    notes: str = ""
    po: PurchaseOrder | None = None
    dn: DeliveryNote | None = None
    minutes: WardMinutes | None = None

    @property
    def discrepancy(self) -> int:
        return self.ordered_qty - self.received_qty

    @property
    def needs_reconciliation(self) -> bool:
        return self.discrepancy != 0


# ---------------------------------------------------------------------------
# Users and permissions (reference data, no history)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Privilege:
    id: str
    name: str
    description: str = ""


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    privileges: tuple[str, ...] = ()


@dataclass(frozen=True)
class UserGroup:
    id: str
    name: str
    role_id: str
    description: str = ""


@dataclass(frozen=True)
class User:
    id: str
    name: str
    username: str
    group_id: str
    email: str = ""
    status: UserStatus = UserStatus.ACTIVE
    department: str = ""
    location: str = ""
