"""
Module: inventory_kernel.domain.queries
Responsibility:
    Read-only projections over an ``InventoryState``: stock levels,
    procurement reconciliation, license seat usage, dashboard totals, and
    history feeds.  These are what collaborators render; none of them
    changes state.

Architecture position:
    Kernel > Domain -- pure calculation, zero I/O, no clock access.

Invariants enforced:
    - Decimal-only arithmetic for monetary totals.
    - Deterministic output ordering for identical inputs.

Usage:
    from inventory_kernel.domain.queries import dashboard_stats, global_history

    stats = dashboard_stats(store.state)
    for entry in global_history(store.state):
        print(entry.item_type, entry.item_name, entry.event.description)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from inventory_kernel.domain.history import HistoryEvent, newest_first
from inventory_kernel.domain.models import (
    Accessory,
    AssetStatus,
    HardwareComponent,
    LicenseSeat,
    LicenseStatus,
    ProcurementBatch,
)
from inventory_kernel.domain.state import InventoryState


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------


def low_stock_accessories(state: InventoryState) -> list[Accessory]:
    return [a for a in state.accessories if a.is_low_stock]


def low_stock_components(state: InventoryState) -> list[HardwareComponent]:
    return [c for c in state.components if c.is_low_stock]


# ---------------------------------------------------------------------------
# Procurement
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ReconciliationSummary:
    """
    Ordered versus received totals across all procurement batches.

    ``gap`` is ``total_ordered - total_received``; ``discrepant_batches``
    lists every batch whose own quantities disagree.
    """

    total_ordered: int
    total_received: int
    discrepant_batches: tuple[ProcurementBatch, ...]

    @property
    def gap(self) -> int:
        return self.total_ordered - self.total_received

    @property
    def all_matched(self) -> bool:
        return self.total_ordered == self.total_received


def reconciliation_summary(state: InventoryState) -> ReconciliationSummary:
    batches = state.procurement_batches
    return ReconciliationSummary(
        total_ordered=sum(b.ordered_qty for b in batches),
        total_received=sum(b.received_qty for b in batches),
        discrepant_batches=tuple(b for b in batches if b.needs_reconciliation),
    )


# ---------------------------------------------------------------------------
# Licenses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SeatUsage:
    license_id: str
    license_name: str
    total_seats: int
    assigned_seats: int

    @property
    def available_seats(self) -> int:
        # Declared capacity, not seat records: may go negative if over-assigned.
        return self.total_seats - self.assigned_seats


def license_seat_usage(state: InventoryState) -> list[SeatUsage]:
    """Assigned and available seat counts per master license."""
    return [
        SeatUsage(
            license_id=lic.id,
            license_name=lic.name,
            total_seats=lic.total_seats,
            assigned_seats=sum(
                1 for s in state.seats_for_license(lic.id) if s.is_assigned
            ),
        )
        for lic in state.master_licenses
    ]


def seat_label(state: InventoryState, seat: LicenseSeat) -> str:
    """``"<license name> - <seat number>"``; an orphaned seat reads ``None``."""
    master = state.get_license(seat.master_license_id)
    name = master.name if master is not None else "None"
    return f"{name} - {seat.seat_number}"


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DashboardStats:
    total_assets: int
    total_licenses: int
    total_accessories: int
    total_components: int
    assigned_seats: int
    total_seats: int
    active_assets: int
    expiring_licenses: int
    total_value: Decimal


def dashboard_stats(state: InventoryState) -> DashboardStats:
    """
    Headline counts and the total inventory value.

    Value is asset purchase cost plus ``total_qty * unit_cost`` for every
    accessory and component.
    """
    asset_value = sum((a.purchase_cost for a in state.assets), Decimal("0"))
    stock_value = sum(
        (item.total_qty * item.unit_cost
         for item in (*state.accessories, *state.components)),
        Decimal("0"),
    )
    return DashboardStats(
        total_assets=len(state.assets),
        total_licenses=len(state.master_licenses),
        total_accessories=len(state.accessories),
        total_components=len(state.components),
        assigned_seats=sum(1 for s in state.license_seats if s.is_assigned),
        total_seats=len(state.license_seats),
        active_assets=sum(1 for a in state.assets if a.status is AssetStatus.ACTIVE),
        expiring_licenses=sum(
            1 for lic in state.master_licenses if lic.status is LicenseStatus.EXPIRING
        ),
        total_value=asset_value + stock_value,
    )


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------


def entity_history(state: InventoryState, entity_id: str) -> list[HistoryEvent]:
    """History of any history-bearing record, newest first; empty if unknown."""
    for finder in (
        state.get_asset,
        state.get_license,
        state.get_seat,
        state.get_accessory,
        state.get_component,
    ):
        record = finder(entity_id)
        if record is not None:
            return newest_first(record.history)
    return []


@dataclass(frozen=True)
class FeedEntry:
    """One history event with the label of the record it belongs to."""

    event: HistoryEvent
    item_name: str
    item_type: str


def global_history(state: InventoryState) -> list[FeedEntry]:
    """Every history event in the store, newest first."""
    entries: list[FeedEntry] = []
    for asset in state.assets:
        entries.extend(FeedEntry(e, asset.name, "Asset") for e in asset.history)
    for lic in state.master_licenses:
        entries.extend(FeedEntry(e, lic.name, "Master License") for e in lic.history)
    for seat in state.license_seats:
        label = seat_label(state, seat)
        entries.extend(FeedEntry(e, label, "License Seat") for e in seat.history)
    for acc in state.accessories:
        entries.extend(FeedEntry(e, acc.name, "Accessory") for e in acc.history)
    for comp in state.components:
        entries.extend(FeedEntry(e, comp.name, "Component") for e in comp.history)

    # Stable sort: ties keep collection order.
    entries.sort(key=lambda entry: entry.event.occurred_at, reverse=True)
    return entries


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------


def effective_privileges(state: InventoryState, user_id: str) -> frozenset[str]:
    """
    Privilege names a user holds through group -> role.

    Unknown users, groups or roles yield an empty set; privilege ids with
    no matching ``Privilege`` record are skipped.
    """
    user = state.get_user(user_id)
    if user is None:
        return frozenset()
    group = state.get_group(user.group_id)
    if group is None:
        return frozenset()
    role = state.get_role(group.role_id)
    if role is None:
        return frozenset()
    names = {p.id: p.name for p in state.privileges}
    return frozenset(names[pid] for pid in role.privileges if pid in names)
