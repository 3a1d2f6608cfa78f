"""
License seat reconciliation (``inventory_kernel.domain.seats``).

Responsibility
--------------
The cross-entity effects between assets and license seats: claiming seats
for an asset, releasing seats an asset no longer lists, and normalising a
partial seat update.  Called only from the store's asset and seat branches.

Invariants enforced
-------------------
- Every seat returned satisfies ``assigned <=> typed, non-empty target``.
- Only seats whose assignment actually changes gain a history event; all
  other seats are returned as the identical object.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping

from inventory_kernel.domain.history import (
    EventRecorder,
    HistoryEventType,
    append_events,
)
from inventory_kernel.domain.models import (
    AssigneeType,
    LicenseSeat,
    SeatStatus,
)
from inventory_kernel.logging_config import get_logger

logger = get_logger("domain.seats")


def points_at_asset(seat: LicenseSeat, asset_id: str) -> bool:
    return (
        seat.assigned_to_type is AssigneeType.ASSET
        and seat.assigned_to_id == asset_id
    )


def claim_seat(
    seat: LicenseSeat,
    asset_id: str,
    description: str,
    changed_to: str,
    recorder: EventRecorder,
) -> LicenseSeat:
    """Assign ``seat`` to ``asset_id`` and log it on the seat."""
    logger.debug(
        "seat_claimed",
        extra={"seat_id": seat.id, "asset_id": asset_id,
               "previous_assignee": seat.assigned_to_id},
    )
    return replace(
        seat,
        status=SeatStatus.ASSIGNED,
        assigned_to_type=AssigneeType.ASSET,
        assigned_to_id=asset_id,
        history=append_events(seat.history, recorder.record(
            seat.id,
            HistoryEventType.ASSIGNMENT,
            description,
            changed_to=changed_to,
        )),
    )


def release_seat(
    seat: LicenseSeat,
    description: str,
    changed_from: str | None,
    recorder: EventRecorder,
) -> LicenseSeat:
    """Return ``seat`` to the available pool and log it on the seat."""
    logger.debug(
        "seat_released",
        extra={"seat_id": seat.id, "previous_assignee": seat.assigned_to_id},
    )
    return replace(
        seat,
        status=SeatStatus.AVAILABLE,
        assigned_to_type=AssigneeType.UNASSIGNED,
        assigned_to_id=None,
        history=append_events(seat.history, recorder.record(
            seat.id,
            HistoryEventType.ASSIGNMENT,
            description,
            changed_from=changed_from,
        )),
    )


def assign_to_new_asset(
    seats: tuple[LicenseSeat, ...],
    asset_id: str,
    asset_name: str,
    seat_ids: tuple[str, ...],
    recorder: EventRecorder,
) -> tuple[LicenseSeat, ...]:
    """Claim every listed seat for a just-created asset.  Unknown ids are skipped."""
    wanted = set(seat_ids)
    return tuple(
        claim_seat(
            s, asset_id, f"Assigned to new asset: {asset_name}", asset_name, recorder,
        ) if s.id in wanted else s
        for s in seats
    )


def reconcile_asset_seats(
    seats: tuple[LicenseSeat, ...],
    asset_id: str,
    old_name: str,
    new_name: str,
    seat_ids: tuple[str, ...],
    recorder: EventRecorder,
) -> tuple[LicenseSeat, ...]:
    """
    Diff the seats pointing at an asset against its new seat list.

    Seats pointing at the asset but no longer listed are released; listed
    seats not yet pointing at it are claimed.  Everything else is untouched.
    """
    wanted = set(seat_ids)
    result: list[LicenseSeat] = []
    for seat in seats:
        pointing = points_at_asset(seat, asset_id)
        if pointing and seat.id not in wanted:
            seat = release_seat(
                seat, "Unassigned due to asset update", old_name, recorder,
            )
        elif seat.id in wanted and not pointing:
            seat = claim_seat(
                seat, asset_id, f"Assigned to asset: {new_name}", new_name, recorder,
            )
        result.append(seat)
    return tuple(result)


def release_asset_seats(
    seats: tuple[LicenseSeat, ...],
    asset_id: str,
    asset_name: str,
    recorder: EventRecorder,
) -> tuple[LicenseSeat, ...]:
    """Release every seat pointing at a deleted asset."""
    return tuple(
        release_seat(s, "Unassigned due to asset deletion", asset_name, recorder)
        if points_at_asset(s, asset_id) else s
        for s in seats
    )


def merge_seat_changes(seat: LicenseSeat, changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Field values of ``seat`` with ``changes`` applied and status normalised.

    - An explicit ``AVAILABLE`` status clears the assignment.
    - A missing type or empty target makes the seat available.
    - Anything else with a typed, non-empty target is ``ASSIGNED``.
    """
    merged = {
        "status": seat.status,
        "assigned_to_type": seat.assigned_to_type,
        "assigned_to_id": seat.assigned_to_id,
        "seat_number": seat.seat_number,
    }
    merged.update({k: v for k, v in changes.items() if k in merged})

    has_target = (
        merged["assigned_to_type"] is not AssigneeType.UNASSIGNED
        and bool(merged["assigned_to_id"])
    )
    if merged["status"] is SeatStatus.AVAILABLE and "status" in changes:
        has_target = False
    if has_target:
        merged["status"] = SeatStatus.ASSIGNED
    else:
        merged["status"] = SeatStatus.AVAILABLE
        merged["assigned_to_type"] = AssigneeType.UNASSIGNED
        merged["assigned_to_id"] = None
    return merged
