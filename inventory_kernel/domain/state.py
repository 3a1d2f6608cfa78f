"""
Inventory state tree (``inventory_kernel.domain.state``).

Responsibility
--------------
``InventoryState`` is one immutable version of everything the store knows.
Each command produces a whole new ``InventoryState``; readers holding an
older one keep a fully consistent view.

Collections are tuples in display order (most recently created first for
primary records, creation order for seats).  Lookups go through the
``get_*`` helpers, which return ``None`` for unknown ids.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol, TypeVar

from inventory_kernel.domain.models import (
    Accessory,
    Asset,
    HardwareComponent,
    LicenseSeat,
    MasterLicense,
    Privilege,
    ProcurementBatch,
    Role,
    User,
    UserGroup,
)


class ReferenceList(Enum):
    """Free-text lookup lists maintained alongside the records."""
    DEPARTMENTS = "departments"
    LOCATIONS = "locations"
    ASSET_TYPES = "asset_types"


class _Identified(Protocol):
    id: str


R = TypeVar("R", bound=_Identified)


def find_by_id(records: Iterable[R], record_id: str) -> R | None:
    """First record with ``record_id`` or ``None``."""
    for record in records:
        if record.id == record_id:
            return record
    return None


def replace_by_id(records: tuple[R, ...], record: R) -> tuple[R, ...]:
    """Swap the record sharing ``record.id``; order is preserved."""
    return tuple(record if r.id == record.id else r for r in records)


def remove_by_id(records: tuple[R, ...], record_id: str) -> tuple[R, ...]:
    return tuple(r for r in records if r.id != record_id)


@dataclass(frozen=True)
class InventoryState:
    """
    One complete, consistent version of the inventory.

    Contract: frozen; every collection is a tuple.  The reference lists
    (departments, locations, asset types) are plain sorted strings.
    """
    assets: tuple[Asset, ...] = ()
    master_licenses: tuple[MasterLicense, ...] = ()
    license_seats: tuple[LicenseSeat, ...] = ()
    accessories: tuple[Accessory, ...] = ()
    components: tuple[HardwareComponent, ...] = ()
    procurement_batches: tuple[ProcurementBatch, ...] = ()
    departments: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    asset_types: tuple[str, ...] = ()
    users: tuple[User, ...] = ()
    groups: tuple[UserGroup, ...] = ()
    roles: tuple[Role, ...] = ()
    privileges: tuple[Privilege, ...] = ()

    def get_asset(self, asset_id: str) -> Asset | None:
        return find_by_id(self.assets, asset_id)

    def get_license(self, license_id: str) -> MasterLicense | None:
        return find_by_id(self.master_licenses, license_id)

    def get_seat(self, seat_id: str) -> LicenseSeat | None:
        return find_by_id(self.license_seats, seat_id)

    def get_accessory(self, accessory_id: str) -> Accessory | None:
        return find_by_id(self.accessories, accessory_id)

    def get_component(self, component_id: str) -> HardwareComponent | None:
        return find_by_id(self.components, component_id)

    def get_batch(self, batch_id: str) -> ProcurementBatch | None:
        return find_by_id(self.procurement_batches, batch_id)

    def get_user(self, user_id: str) -> User | None:
        return find_by_id(self.users, user_id)

    def get_group(self, group_id: str) -> UserGroup | None:
        return find_by_id(self.groups, group_id)

    def get_role(self, role_id: str) -> Role | None:
        return find_by_id(self.roles, role_id)

    def seats_for_license(self, license_id: str) -> tuple[LicenseSeat, ...]:
        return tuple(
            s for s in self.license_seats if s.master_license_id == license_id
        )

    def reference_values(self, which: ReferenceList) -> tuple[str, ...]:
        return getattr(self, which.value)
