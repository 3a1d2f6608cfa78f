"""
Inventory Store -- the state-transition and audit-trail engine.

Responsibility:
    Applies one command to one ``InventoryState`` and returns the next
    state.  Derives the cross-entity effects (license seat claims and
    releases, cascade deletes) and appends the history events that record
    what changed, from what, to what.

Architecture position:
    Kernel > Domain -- pure functional core.  ``apply_command`` has no I/O;
    time and identifiers come from the injected ``Clock`` and
    ``IdGenerator``.  ``InventoryStore`` is the single writer that holds the
    current snapshot for collaborators.

Invariants enforced:
    - All-or-nothing: a command either yields a complete new state or the
      identical input state.
    - Missing references are no-ops: no exception, no history event.
    - Deleting a master license removes every seat that references it in
      the same transition.
    - History logs only grow; existing events are never rewritten.
    - Accessory, component, batch and reference-data edits append no
      history.

Failure modes:
    - ``UnknownCommandError`` when the object dispatched has no registered
      handler.  This is a programming error, never a data condition.
    - Record construction errors (``ValueError`` / ``TypeError``) when a
      create command carries fields that do not fit the record type.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable

from inventory_kernel.domain.clock import Clock, SystemClock
from inventory_kernel.domain.commands import (
    AddReferenceValue,
    CheckinAccessory,
    CheckinComponent,
    CheckoutAccessory,
    CheckoutComponent,
    Command,
    CreateAccessory,
    CreateAsset,
    CreateBatch,
    CreateComponent,
    CreateGroup,
    CreateLicense,
    CreateRecord,
    CreateRole,
    CreateUser,
    DeleteAccessory,
    DeleteAsset,
    DeleteBatch,
    DeleteComponent,
    DeleteGroup,
    DeleteLicense,
    DeleteRecord,
    DeleteRole,
    DeleteUser,
    RemoveReferenceValue,
    SetAccessories,
    SetAssets,
    SetBatches,
    SetComponents,
    SetGroups,
    SetLicenses,
    SetRecords,
    SetReferenceValues,
    SetRoles,
    SetUsers,
    UpdateAccessory,
    UpdateAsset,
    UpdateBatch,
    UpdateBatchStatus,
    UpdateComponent,
    UpdateGroup,
    UpdateLicense,
    UpdateRecord,
    UpdateRole,
    UpdateSeat,
    UpdateUser,
)
from inventory_kernel.domain.history import (
    EventRecorder,
    HistoryEventType,
    append_events,
)
from inventory_kernel.domain.ids import IdGenerator, UuidIdGenerator
from inventory_kernel.domain.models import Asset, LicenseSeat, MasterLicense
from inventory_kernel.domain.policy import REFERENCE_POLICY, StorePolicy
from inventory_kernel.domain.records import coerce_fields, record_from_dict
from inventory_kernel.domain.seats import (
    assign_to_new_asset,
    merge_seat_changes,
    reconcile_asset_seats,
    release_asset_seats,
)
from inventory_kernel.domain.state import (
    InventoryState,
    find_by_id,
    remove_by_id,
    replace_by_id,
)
from inventory_kernel.exceptions import UnknownCommandError
from inventory_kernel.logging_config import LogContext, get_logger

logger = get_logger("domain.store")


class _Transition:
    """Collaborators available to one command handler."""

    __slots__ = ("recorder", "ids", "policy")

    def __init__(self, recorder: EventRecorder, ids: IdGenerator, policy: StorePolicy):
        self.recorder = recorder
        self.ids = ids
        self.policy = policy


Handler = Callable[[InventoryState, Command, _Transition], InventoryState]

_HANDLERS: dict[type[Command], Handler] = {}


def handles(*command_types: type[Command]) -> Callable[[Handler], Handler]:
    """Register a handler for one or more exact command classes."""

    def decorator(fn: Handler) -> Handler:
        for command_type in command_types:
            _HANDLERS[command_type] = fn
        return fn

    return decorator


def apply_command(
    state: InventoryState,
    command: Command,
    *,
    clock: Clock,
    ids: IdGenerator,
    policy: StorePolicy = REFERENCE_POLICY,
) -> InventoryState:
    """
    Apply ``command`` to ``state`` and return the resulting state.

    Preconditions:
        - ``command`` is an instance of a registered command class.

    Postconditions:
        - Returns ``state`` itself (identity) when the command addresses a
          record that does not exist.
        - Otherwise returns a new, fully consistent ``InventoryState``.

    Raises:
        UnknownCommandError: If no handler is registered for the command type.
    """
    handler = _HANDLERS.get(type(command))
    if handler is None:
        raise UnknownCommandError(type(command).__name__)

    transition = _Transition(EventRecorder(clock, ids), ids, policy)
    with LogContext.for_command(command):
        new_state = handler(state, command, transition)
        if new_state is state:
            logger.debug(
                "command_no_effect",
                extra={"target_id": command.target_id},
            )
        else:
            logger.info(
                "command_applied",
                extra={"history_events_appended": transition.recorder.recorded},
            )
    return new_state


class InventoryStore:
    """
    Single writer holding the current inventory snapshot.

    Contract:
        ``dispatch`` runs one command to completion and swaps the snapshot
        in one assignment, so a reader that grabbed ``state`` earlier keeps
        a consistent (if stale) view.

    Non-goals:
        No locking, no persistence, no async.  Collaborators that simulate
        latency resolve first and then dispatch synchronously.
    """

    def __init__(
        self,
        state: InventoryState | None = None,
        *,
        clock: Clock | None = None,
        ids: IdGenerator | None = None,
        policy: StorePolicy = REFERENCE_POLICY,
    ):
        self._state = state or InventoryState()
        self._clock = clock or SystemClock()
        self._ids = ids or UuidIdGenerator()
        self._policy = policy
        self._listeners: list[Callable[[InventoryState], None]] = []

    @property
    def state(self) -> InventoryState:
        return self._state

    @property
    def policy(self) -> StorePolicy:
        return self._policy

    def subscribe(self, listener: Callable[[InventoryState], None]) -> Callable[[], None]:
        """Call ``listener`` with every new snapshot; returns an unsubscribe function."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def dispatch(self, command: Command) -> InventoryState:
        new_state = apply_command(
            self._state, command, clock=self._clock, ids=self._ids, policy=self._policy,
        )
        if new_state is not self._state:
            self._state = new_state
            for listener in list(self._listeners):
                listener(new_state)
        return self._state


# ---------------------------------------------------------------------------
# Generic record handlers
# ---------------------------------------------------------------------------


def _build_record(record_type: type, data, record_id: str):
    return record_from_dict(record_type, {**data, "id": record_id})


@handles(CreateAccessory, CreateComponent, CreateBatch, CreateUser, CreateGroup, CreateRole)
def _create_record(state: InventoryState, command: CreateRecord, t: _Transition) -> InventoryState:
    record = _build_record(command.record_type, command.data, t.ids.next_id())
    collection = getattr(state, command.collection)
    return replace(state, **{command.collection: (record, *collection)})


@handles(
    UpdateLicense, UpdateAccessory, UpdateComponent, UpdateBatch,
    UpdateUser, UpdateGroup, UpdateRole,
)
def _update_record(state: InventoryState, command: UpdateRecord, t: _Transition) -> InventoryState:
    collection = getattr(state, command.collection)
    if find_by_id(collection, command.record.id) is None:
        return state
    return replace(state, **{command.collection: replace_by_id(collection, command.record)})


@handles(DeleteAccessory, DeleteComponent, DeleteBatch, DeleteUser, DeleteGroup, DeleteRole)
def _delete_record(state: InventoryState, command: DeleteRecord, t: _Transition) -> InventoryState:
    collection = getattr(state, command.collection)
    if find_by_id(collection, command.record_id) is None:
        return state
    return replace(state, **{command.collection: remove_by_id(collection, command.record_id)})


@handles(SetAssets, SetAccessories, SetComponents, SetBatches, SetUsers, SetGroups, SetRoles)
def _set_records(state: InventoryState, command: SetRecords, t: _Transition) -> InventoryState:
    return replace(state, **{command.collection: tuple(command.records)})


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


@handles(CreateAsset)
def _create_asset(state: InventoryState, command: CreateAsset, t: _Transition) -> InventoryState:
    asset_id = t.ids.next_id()
    asset: Asset = _build_record(
        Asset,
        {**command.data, "assigned_licenses": command.license_seat_ids},
        asset_id,
    )
    asset = replace(asset, history=append_events(asset.history, t.recorder.record(
        asset_id,
        HistoryEventType.CREATION,
        "Asset created",
        changed_to=asset.assignee,
    )))
    seats = assign_to_new_asset(
        state.license_seats, asset_id, asset.name, command.license_seat_ids, t.recorder,
    )
    return replace(state, assets=(asset, *state.assets), license_seats=seats)


@handles(UpdateAsset)
def _update_asset(state: InventoryState, command: UpdateAsset, t: _Transition) -> InventoryState:
    incoming: Asset = command.record
    old = state.get_asset(incoming.id)
    if old is None:
        return state

    events = []
    if old.assignee != incoming.assignee:
        events.append(t.recorder.record(
            old.id,
            HistoryEventType.ASSIGNMENT,
            "Asset reassigned",
            changed_from=old.assignee,
            changed_to=incoming.assignee,
        ))
    if old.status is not incoming.status:
        events.append(t.recorder.record(
            old.id,
            HistoryEventType.STATUS,
            f"Status changed to {incoming.status.value}",
            changed_from=old.status.value,
            changed_to=incoming.status.value,
        ))

    updated = replace(incoming, history=append_events(old.history, *events))
    seats = reconcile_asset_seats(
        state.license_seats,
        old.id,
        old.name,
        updated.name,
        updated.assigned_licenses,
        t.recorder,
    )
    if updated == old and seats == state.license_seats:
        return state
    return replace(
        state,
        assets=replace_by_id(state.assets, updated),
        license_seats=seats,
    )


@handles(DeleteAsset)
def _delete_asset(state: InventoryState, command: DeleteAsset, t: _Transition) -> InventoryState:
    asset = state.get_asset(command.record_id)
    if asset is None:
        return state
    seats = state.license_seats
    if t.policy.release_seats_on_asset_delete:
        seats = release_asset_seats(seats, asset.id, asset.name, t.recorder)
    return replace(
        state,
        assets=remove_by_id(state.assets, asset.id),
        license_seats=seats,
    )


# ---------------------------------------------------------------------------
# Licenses and seats
# ---------------------------------------------------------------------------


@handles(CreateLicense)
def _create_license(state: InventoryState, command: CreateLicense, t: _Transition) -> InventoryState:
    license_id = t.ids.next_id()
    master: MasterLicense = _build_record(MasterLicense, command.data, license_id)
    seats = tuple(
        record_from_dict(LicenseSeat, {
            **seat_data,
            "id": t.ids.next_id(),
            "master_license_id": license_id,
        })
        for seat_data in command.initial_seats
    )
    return replace(
        state,
        master_licenses=(master, *state.master_licenses),
        license_seats=(*state.license_seats, *seats),
    )


@handles(DeleteLicense)
def _delete_license(state: InventoryState, command: DeleteLicense, t: _Transition) -> InventoryState:
    license_id = command.record_id
    if state.get_license(license_id) is None:
        return state

    removed = {s.id for s in state.license_seats if s.master_license_id == license_id}
    assets = state.assets
    if t.policy.prune_dangling_seat_refs and removed:
        assets = tuple(
            replace(a, assigned_licenses=tuple(
                s for s in a.assigned_licenses if s not in removed
            )) if removed.intersection(a.assigned_licenses) else a
            for a in assets
        )
    logger.info(
        "license_cascade_delete",
        extra={"license_id": license_id, "seats_removed": len(removed)},
    )
    return replace(
        state,
        master_licenses=remove_by_id(state.master_licenses, license_id),
        license_seats=tuple(
            s for s in state.license_seats if s.master_license_id != license_id
        ),
        assets=assets,
    )


@handles(SetLicenses)
def _set_licenses(state: InventoryState, command: SetLicenses, t: _Transition) -> InventoryState:
    return replace(
        state,
        master_licenses=tuple(command.licenses),
        license_seats=tuple(command.seats),
    )


@handles(UpdateSeat)
def _update_seat(state: InventoryState, command: UpdateSeat, t: _Transition) -> InventoryState:
    seat = state.get_seat(command.seat_id)
    if seat is None:
        return state

    changes = coerce_fields(LicenseSeat, {
        k: v for k, v in command.changes.items()
        if k not in ("id", "master_license_id", "history")
    })
    merged = merge_seat_changes(seat, changes)
    event = t.recorder.record(
        seat.id,
        HistoryEventType.ASSIGNMENT,
        "Seat assigned" if merged["assigned_to_id"] else "Seat unassigned",
        changed_from=seat.assigned_to_id or "None",
        changed_to=merged["assigned_to_id"] or "None",
    )
    updated = replace(seat, **merged, history=append_events(seat.history, event))
    return replace(state, license_seats=replace_by_id(state.license_seats, updated))


# ---------------------------------------------------------------------------
# Stock movements
# ---------------------------------------------------------------------------


def _clamp(value: int, total: int, policy: StorePolicy) -> int:
    if not policy.clamp_stock_quantities:
        return value
    return max(0, min(total, value))


def _move_accessory(delta: int) -> Handler:
    def handler(state: InventoryState, command, t: _Transition) -> InventoryState:
        accessory = state.get_accessory(command.item_id)
        if accessory is None:
            return state
        updated = replace(
            accessory,
            checked_out_qty=_clamp(
                accessory.checked_out_qty + delta, accessory.total_qty, t.policy,
            ),
        )
        return replace(state, accessories=replace_by_id(state.accessories, updated))
    return handler


def _move_component(delta: int) -> Handler:
    def handler(state: InventoryState, command, t: _Transition) -> InventoryState:
        component = state.get_component(command.item_id)
        if component is None:
            return state
        updated = replace(
            component,
            remaining_qty=_clamp(
                component.remaining_qty + delta, component.total_qty, t.policy,
            ),
        )
        return replace(state, components=replace_by_id(state.components, updated))
    return handler


handles(CheckoutAccessory)(_move_accessory(+1))
handles(CheckinAccessory)(_move_accessory(-1))
handles(CheckoutComponent)(_move_component(-1))
handles(CheckinComponent)(_move_component(+1))


# ---------------------------------------------------------------------------
# Procurement and reference data
# ---------------------------------------------------------------------------


@handles(UpdateBatchStatus)
def _update_batch_status(
    state: InventoryState, command: UpdateBatchStatus, t: _Transition,
) -> InventoryState:
    batch = state.get_batch(command.batch_id)
    if batch is None:
        return state
    return replace(
        state,
        procurement_batches=replace_by_id(
            state.procurement_batches, replace(batch, status=command.status),
        ),
    )


@handles(SetReferenceValues)
def _set_reference_values(
    state: InventoryState, command: SetReferenceValues, t: _Transition,
) -> InventoryState:
    return replace(state, **{command.reference.value: tuple(command.values)})


@handles(AddReferenceValue)
def _add_reference_value(
    state: InventoryState, command: AddReferenceValue, t: _Transition,
) -> InventoryState:
    current = state.reference_values(command.reference)
    value = command.value.strip()
    if not value or value in current:
        return state
    return replace(state, **{command.reference.value: tuple(sorted((*current, value)))})


@handles(RemoveReferenceValue)
def _remove_reference_value(
    state: InventoryState, command: RemoveReferenceValue, t: _Transition,
) -> InventoryState:
    current = state.reference_values(command.reference)
    if command.value not in current:
        return state
    return replace(
        state,
        **{command.reference.value: tuple(v for v in current if v != command.value)},
    )
