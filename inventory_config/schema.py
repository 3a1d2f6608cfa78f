"""
InventoryConfiguration schema.

Defines the human-authored, reviewable configuration set for the inventory
store.  YAML files are parsed into these types by the loader; the kernel
only ever sees the ``StorePolicy`` and the seed records, never the YAML.

Key distinction:
  InventoryConfiguration = source artifact (human-authored, versioned)
  InventoryState         = runtime artifact built from its seed data
"""

from __future__ import annotations

from dataclasses import dataclass

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
from inventory_kernel.domain.policy import StorePolicy


@dataclass(frozen=True)
class ServiceSettings:
    """
    Knobs for the mock collaborators in ``inventory_services``.

    Latencies are in milliseconds; ``mock_password`` is the one password
    the mock auth service accepts for every known username.
    """

    mock_password: str = "password"
    login_latency_ms: int = 800
    refresh_latency_ms: int = 500
    fetch_latency_ms: int = 300
    create_latency_ms: int = 500
    token_prefix: str = "mock_jwt_token_"
    refresh_token_prefix: str = "mock_refresh_token_"


@dataclass(frozen=True)
class ReferenceData:
    """
    Lookup lists.  An empty tuple means "derive from the seed assets"
    (locations and asset types only).
    """

    departments: tuple[str, ...] = ()
    locations: tuple[str, ...] = ()
    asset_types: tuple[str, ...] = ()


@dataclass(frozen=True)
class SeedData:
    """Initial records, in display order."""

    assets: tuple[Asset, ...] = ()
    master_licenses: tuple[MasterLicense, ...] = ()
    license_seats: tuple[LicenseSeat, ...] = ()
    accessories: tuple[Accessory, ...] = ()
    components: tuple[HardwareComponent, ...] = ()
    procurement_batches: tuple[ProcurementBatch, ...] = ()
    privileges: tuple[Privilege, ...] = ()
    roles: tuple[Role, ...] = ()
    groups: tuple[UserGroup, ...] = ()
    users: tuple[User, ...] = ()


@dataclass(frozen=True)
class InventoryConfiguration:
    """Human-authored configuration set for one inventory deployment.

    Attributes:
        config_id: Unique identifier (e.g., "inventory-default")
        version: Configuration version number
        checksum: SHA-256 of the canonical serialization of the source YAML
        description: Free text for reviewers
        policy: Store behaviour switches handed to the kernel
        services: Mock collaborator settings
        reference: Lookup lists
        seed: Initial records
    """

    config_id: str
    version: int
    checksum: str
    description: str = ""
    policy: StorePolicy = StorePolicy()
    services: ServiceSettings = ServiceSettings()
    reference: ReferenceData = ReferenceData()
    seed: SeedData = SeedData()
