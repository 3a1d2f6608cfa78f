"""
Store commands (``inventory_kernel.domain.commands``).

Responsibility
--------------
Typed mutation intents accepted by the store.  Every command is a frozen
dataclass with a class-level ``kind``; together they form a tagged union
that ``store.apply_command`` dispatches on.

Commands for plain collections (accessories, components, procurement
batches, users, groups, roles) share the generic ``CreateRecord``,
``UpdateRecord``, ``DeleteRecord`` and ``SetRecords`` shapes and are
handled by one implementation each.  Assets, licenses and seats have
dedicated commands because they carry cross-entity effects and history.

``parse_command`` turns the discriminated ``{"kind": ..., "payload": ...}``
mapping form into a typed command.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Mapping

from inventory_kernel.domain.models import (
    Accessory,
    Asset,
    BatchStatus,
    HardwareComponent,
    LicenseSeat,
    MasterLicense,
    ProcurementBatch,
    Role,
    User,
    UserGroup,
)
from inventory_kernel.domain.records import coerce_fields, record_from_dict
from inventory_kernel.domain.state import ReferenceList
from inventory_kernel.exceptions import InvalidCommandError


class CommandKind(Enum):
    CREATE_ASSET = "create_asset"
    UPDATE_ASSET = "update_asset"
    DELETE_ASSET = "delete_asset"
    SET_ASSETS = "set_assets"

    CREATE_LICENSE = "create_license"
    UPDATE_LICENSE = "update_license"
    DELETE_LICENSE = "delete_license"
    SET_LICENSES = "set_licenses"
    UPDATE_SEAT = "update_seat"

    CREATE_ACCESSORY = "create_accessory"
    UPDATE_ACCESSORY = "update_accessory"
    DELETE_ACCESSORY = "delete_accessory"
    SET_ACCESSORIES = "set_accessories"
    CHECKOUT_ACCESSORY = "checkout_accessory"
    CHECKIN_ACCESSORY = "checkin_accessory"

    CREATE_COMPONENT = "create_component"
    UPDATE_COMPONENT = "update_component"
    DELETE_COMPONENT = "delete_component"
    SET_COMPONENTS = "set_components"
    CHECKOUT_COMPONENT = "checkout_component"
    CHECKIN_COMPONENT = "checkin_component"

    CREATE_BATCH = "create_batch"
    UPDATE_BATCH = "update_batch"
    DELETE_BATCH = "delete_batch"
    SET_BATCHES = "set_batches"
    UPDATE_BATCH_STATUS = "update_batch_status"

    SET_REFERENCE_VALUES = "set_reference_values"
    ADD_REFERENCE_VALUE = "add_reference_value"
    REMOVE_REFERENCE_VALUE = "remove_reference_value"

    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
    SET_USERS = "set_users"

    CREATE_GROUP = "create_group"
    UPDATE_GROUP = "update_group"
    DELETE_GROUP = "delete_group"
    SET_GROUPS = "set_groups"

    CREATE_ROLE = "create_role"
    UPDATE_ROLE = "update_role"
    DELETE_ROLE = "delete_role"
    SET_ROLES = "set_roles"


@dataclass(frozen=True)
class Command(ABC):
    """Base of every store command."""

    kind: ClassVar[CommandKind]

    @property
    def target_id(self) -> str | None:
        """Id of the record the command addresses, if any (for logging)."""
        return None

    @classmethod
    @abstractmethod
    def from_payload(cls, payload: Any) -> "Command":
        """Build the command from the ``payload`` half of ``{kind, payload}``."""


def _require_mapping(payload: Any) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"payload must be a mapping, got {type(payload).__name__}")
    return payload


def _payload_id(payload: Any) -> str:
    if isinstance(payload, str):
        return payload
    return str(_require_mapping(payload)["id"])


def _without_id(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k != "id"}


# ---------------------------------------------------------------------------
# Generic record commands
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateRecord(Command):
    """Insert a new record built from ``data`` under a freshly allocated id."""

    data: Mapping[str, Any] = field(default_factory=dict)

    record_type: ClassVar[type]
    collection: ClassVar[str]

    @classmethod
    def from_payload(cls, payload: Any) -> "CreateRecord":
        data = _without_id(_require_mapping(payload))
        return cls(data=coerce_fields(cls.record_type, data))


@dataclass(frozen=True)
class UpdateRecord(Command):
    """Replace the record sharing ``record.id``."""

    record: Any = None

    record_type: ClassVar[type]
    collection: ClassVar[str]

    @property
    def target_id(self) -> str | None:
        return self.record.id

    @classmethod
    def from_payload(cls, payload: Any) -> "UpdateRecord":
        return cls(record=record_from_dict(cls.record_type, _require_mapping(payload)))


@dataclass(frozen=True)
class DeleteRecord(Command):
    """Remove the record with ``record_id``."""

    record_id: str = ""

    collection: ClassVar[str]

    @property
    def target_id(self) -> str | None:
        return self.record_id

    @classmethod
    def from_payload(cls, payload: Any) -> "DeleteRecord":
        return cls(record_id=_payload_id(payload))


@dataclass(frozen=True)
class SetRecords(Command):
    """Replace a whole collection (bulk load)."""

    records: tuple[Any, ...] = ()

    record_type: ClassVar[type]
    collection: ClassVar[str]

    @classmethod
    def from_payload(cls, payload: Any) -> "SetRecords":
        if isinstance(payload, Mapping) or isinstance(payload, str):
            raise ValueError("payload must be a list of records")
        return cls(records=tuple(
            record_from_dict(cls.record_type, _require_mapping(item))
            for item in payload
        ))


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateAsset(CreateRecord):
    """
    Create an asset and claim the listed license seats for it.

    ``license_seat_ids`` becomes the asset's ``assigned_licenses``; ids that
    match no seat are kept on the asset but otherwise ignored.
    """

    license_seat_ids: tuple[str, ...] = ()

    kind = CommandKind.CREATE_ASSET
    record_type = Asset
    collection = "assets"

    @classmethod
    def from_payload(cls, payload: Any) -> "CreateAsset":
        data = _without_id(_require_mapping(payload))
        seat_ids = tuple(data.pop("assigned_licenses", ()) or ())
        return cls(
            data=coerce_fields(Asset, data),
            license_seat_ids=tuple(str(s) for s in seat_ids),
        )


class UpdateAsset(UpdateRecord):
    kind = CommandKind.UPDATE_ASSET
    record_type = Asset
    collection = "assets"


class DeleteAsset(DeleteRecord):
    kind = CommandKind.DELETE_ASSET
    collection = "assets"


class SetAssets(SetRecords):
    kind = CommandKind.SET_ASSETS
    record_type = Asset
    collection = "assets"


# ---------------------------------------------------------------------------
# Licenses and seats
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CreateLicense(CreateRecord):
    """
    Create a master license together with its initial seats.

    Each entry of ``initial_seats`` holds seat fields (at least
    ``seat_number``); ids and the back-reference are allocated by the store.
    """

    initial_seats: tuple[Mapping[str, Any], ...] = ()

    kind = CommandKind.CREATE_LICENSE
    record_type = MasterLicense
    collection = "master_licenses"

    @classmethod
    def from_payload(cls, payload: Any) -> "CreateLicense":
        payload = _require_mapping(payload)
        data = _without_id(_require_mapping(payload["license"]))
        seats = tuple(
            coerce_fields(
                LicenseSeat,
                {k: v for k, v in _require_mapping(s).items()
                 if k not in ("id", "master_license_id")},
            )
            for s in payload.get("seats", ())
        )
        return cls(data=coerce_fields(MasterLicense, data), initial_seats=seats)


class UpdateLicense(UpdateRecord):
    kind = CommandKind.UPDATE_LICENSE
    record_type = MasterLicense
    collection = "master_licenses"


class DeleteLicense(DeleteRecord):
    """Delete a master license and every seat that references it."""

    kind = CommandKind.DELETE_LICENSE
    collection = "master_licenses"


@dataclass(frozen=True)
class SetLicenses(Command):
    """Replace master licenses and seats together."""

    licenses: tuple[MasterLicense, ...] = ()
    seats: tuple[LicenseSeat, ...] = ()

    kind = CommandKind.SET_LICENSES

    @classmethod
    def from_payload(cls, payload: Any) -> "SetLicenses":
        payload = _require_mapping(payload)
        return cls(
            licenses=tuple(
                record_from_dict(MasterLicense, _require_mapping(item))
                for item in payload.get("licenses", ())
            ),
            seats=tuple(
                record_from_dict(LicenseSeat, _require_mapping(item))
                for item in payload.get("seats", ())
            ),
        )


@dataclass(frozen=True)
class UpdateSeat(Command):
    """Merge ``changes`` into a seat and record the assignment change."""

    seat_id: str = ""
    changes: Mapping[str, Any] = field(default_factory=dict)

    kind = CommandKind.UPDATE_SEAT

    @property
    def target_id(self) -> str | None:
        return self.seat_id

    @classmethod
    def from_payload(cls, payload: Any) -> "UpdateSeat":
        payload = _require_mapping(payload)
        changes = {k: v for k, v in payload.items()
                   if k not in ("id", "master_license_id", "history")}
        return cls(
            seat_id=str(payload["id"]),
            changes=coerce_fields(LicenseSeat, changes),
        )


# ---------------------------------------------------------------------------
# Accessories and components
# ---------------------------------------------------------------------------


class CreateAccessory(CreateRecord):
    kind = CommandKind.CREATE_ACCESSORY
    record_type = Accessory
    collection = "accessories"


class UpdateAccessory(UpdateRecord):
    kind = CommandKind.UPDATE_ACCESSORY
    record_type = Accessory
    collection = "accessories"


class DeleteAccessory(DeleteRecord):
    kind = CommandKind.DELETE_ACCESSORY
    collection = "accessories"


class SetAccessories(SetRecords):
    kind = CommandKind.SET_ACCESSORIES
    record_type = Accessory
    collection = "accessories"


@dataclass(frozen=True)
class StockMovement(Command):
    """Move exactly one unit of a bulk-tracked item."""

    item_id: str = ""

    @property
    def target_id(self) -> str | None:
        return self.item_id

    @classmethod
    def from_payload(cls, payload: Any) -> "StockMovement":
        return cls(item_id=_payload_id(payload))


class CheckoutAccessory(StockMovement):
    kind = CommandKind.CHECKOUT_ACCESSORY


class CheckinAccessory(StockMovement):
    kind = CommandKind.CHECKIN_ACCESSORY


class CreateComponent(CreateRecord):
    kind = CommandKind.CREATE_COMPONENT
    record_type = HardwareComponent
    collection = "components"


class UpdateComponent(UpdateRecord):
    kind = CommandKind.UPDATE_COMPONENT
    record_type = HardwareComponent
    collection = "components"


class DeleteComponent(DeleteRecord):
    kind = CommandKind.DELETE_COMPONENT
    collection = "components"


class SetComponents(SetRecords):
    kind = CommandKind.SET_COMPONENTS
    record_type = HardwareComponent
    collection = "components"


class CheckoutComponent(StockMovement):
    kind = CommandKind.CHECKOUT_COMPONENT


class CheckinComponent(StockMovement):
    kind = CommandKind.CHECKIN_COMPONENT


# ---------------------------------------------------------------------------
# Procurement
# ---------------------------------------------------------------------------


class CreateBatch(CreateRecord):
    kind = CommandKind.CREATE_BATCH
    record_type = ProcurementBatch
    collection = "procurement_batches"


class UpdateBatch(UpdateRecord):
    kind = CommandKind.UPDATE_BATCH
    record_type = ProcurementBatch
    collection = "procurement_batches"


class DeleteBatch(DeleteRecord):
    kind = CommandKind.DELETE_BATCH
    collection = "procurement_batches"


class SetBatches(SetRecords):
    kind = CommandKind.SET_BATCHES
    record_type = ProcurementBatch
    collection = "procurement_batches"


@dataclass(frozen=True)
class UpdateBatchStatus(Command):
    batch_id: str = ""
    status: BatchStatus = BatchStatus.PENDING

    kind = CommandKind.UPDATE_BATCH_STATUS

    @property
    def target_id(self) -> str | None:
        return self.batch_id

    @classmethod
    def from_payload(cls, payload: Any) -> "UpdateBatchStatus":
        payload = _require_mapping(payload)
        return cls(batch_id=str(payload["id"]), status=BatchStatus(payload["status"]))


# ---------------------------------------------------------------------------
# Reference lists
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SetReferenceValues(Command):
    reference: ReferenceList = ReferenceList.DEPARTMENTS
    values: tuple[str, ...] = ()

    kind = CommandKind.SET_REFERENCE_VALUES

    @classmethod
    def from_payload(cls, payload: Any) -> "SetReferenceValues":
        payload = _require_mapping(payload)
        return cls(
            reference=ReferenceList(payload["list"]),
            values=tuple(str(v) for v in payload["values"]),
        )


@dataclass(frozen=True)
class AddReferenceValue(Command):
    reference: ReferenceList = ReferenceList.DEPARTMENTS
    value: str = ""

    kind = CommandKind.ADD_REFERENCE_VALUE

    @classmethod
    def from_payload(cls, payload: Any) -> "AddReferenceValue":
        payload = _require_mapping(payload)
        return cls(reference=ReferenceList(payload["list"]), value=str(payload["value"]))


class RemoveReferenceValue(AddReferenceValue):
    kind = CommandKind.REMOVE_REFERENCE_VALUE


# ---------------------------------------------------------------------------
# Users, groups, roles
# ---------------------------------------------------------------------------


class CreateUser(CreateRecord):
    kind = CommandKind.CREATE_USER
    record_type = User
    collection = "users"


class UpdateUser(UpdateRecord):
    kind = CommandKind.UPDATE_USER
    record_type = User
    collection = "users"


class DeleteUser(DeleteRecord):
    kind = CommandKind.DELETE_USER
    collection = "users"


class SetUsers(SetRecords):
    kind = CommandKind.SET_USERS
    record_type = User
    collection = "users"


class CreateGroup(CreateRecord):
    kind = CommandKind.CREATE_GROUP
    record_type = UserGroup
    collection = "groups"


class UpdateGroup(UpdateRecord):
    kind = CommandKind.UPDATE_GROUP
    record_type = UserGroup
    collection = "groups"


class DeleteGroup(DeleteRecord):
    kind = CommandKind.DELETE_GROUP
    collection = "groups"


class SetGroups(SetRecords):
    kind = CommandKind.SET_GROUPS
    record_type = UserGroup
    collection = "groups"


class CreateRole(CreateRecord):
    kind = CommandKind.CREATE_ROLE
    record_type = Role
    collection = "roles"


class UpdateRole(UpdateRecord):
    kind = CommandKind.UPDATE_ROLE
    record_type = Role
    collection = "roles"


class DeleteRole(DeleteRecord):
    kind = CommandKind.DELETE_ROLE
    collection = "roles"


class SetRoles(SetRecords):
    kind = CommandKind.SET_ROLES
    record_type = Role
    collection = "roles"


# ---------------------------------------------------------------------------
# Discriminated input
# ---------------------------------------------------------------------------


def _concrete_commands() -> dict[CommandKind, type[Command]]:
    found: dict[CommandKind, type[Command]] = {}
    pending = list(Command.__subclasses__())
    while pending:
        cls = pending.pop()
        pending.extend(cls.__subclasses__())
        kind = cls.__dict__.get("kind")
        if isinstance(kind, CommandKind):
            found[kind] = cls
    return found


COMMANDS_BY_KIND: dict[CommandKind, type[Command]] = _concrete_commands()


def parse_command(raw: Mapping[str, Any]) -> Command:
    """
    Build a typed command from ``{"kind": <kind>, "payload": <payload>}``.

    Raises:
        InvalidCommandError: If the kind is unknown or the payload cannot be
            coerced into the command's fields.
    """
    kind_value = raw.get("kind") if isinstance(raw, Mapping) else None
    try:
        kind = CommandKind(kind_value)
    except ValueError:
        raise InvalidCommandError(
            None if kind_value is None else str(kind_value), "unknown command kind"
        ) from None

    try:
        return COMMANDS_BY_KIND[kind].from_payload(raw.get("payload"))
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidCommandError(kind.value, str(exc)) from exc
