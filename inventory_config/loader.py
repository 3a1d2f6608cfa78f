"""
Configuration Loader (``inventory_config.loader``).

Responsibility
--------------
Loads a YAML configuration set and parses it into the typed
``inventory_config.schema`` dataclasses.  The single public entry point
for runtime config is ``inventory_config.get_active_config()``.

Architecture position
---------------------
**Config layer** -- infrastructure tooling.  Depends on the kernel's
record codec to build seed records; the kernel never imports this package.

Invariants enforced
-------------------
* All parse errors raise ``ValueError`` or ``KeyError`` with descriptive
  messages; no silent defaults for required fields.
* Every parsed object is a frozen dataclass.
* ``compute_checksum`` produces a deterministic SHA-256 hash for
  configuration identity and change detection.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys in parsed dict  -> ``KeyError`` propagates.
* Unknown record fields or bad values  -> ``ValueError`` from the codec.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from inventory_config.schema import (
    InventoryConfiguration,
    ReferenceData,
    SeedData,
    ServiceSettings,
)
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
from inventory_kernel.domain.records import coerce_fields, record_from_dict

_SEED_TYPES: dict[str, type] = {
    "assets": Asset,
    "master_licenses": MasterLicense,
    "license_seats": LicenseSeat,
    "accessories": Accessory,
    "components": HardwareComponent,
    "procurement_batches": ProcurementBatch,
    "privileges": Privilege,
    "roles": Role,
    "groups": UserGroup,
    "users": User,
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_policy(data: dict[str, Any]) -> StorePolicy:
    """Parse a StorePolicy from a dict; missing switches keep their defaults."""
    return StorePolicy(**coerce_fields(StorePolicy, data))


def parse_service_settings(data: dict[str, Any]) -> ServiceSettings:
    return ServiceSettings(**coerce_fields(ServiceSettings, data))


def parse_reference_data(data: dict[str, Any]) -> ReferenceData:
    return ReferenceData(**coerce_fields(ReferenceData, data))


def parse_seed_data(data: dict[str, Any]) -> SeedData:
    """
    Parse the ``seed`` section into domain records.

    Raises:
        ValueError: on an unknown collection name or an invalid record.
    """
    unknown = set(data) - set(_SEED_TYPES)
    if unknown:
        raise ValueError(f"Unknown seed collection(s): {', '.join(sorted(unknown))}")
    return SeedData(**{
        name: tuple(record_from_dict(_SEED_TYPES[name], item) for item in items or ())
        for name, items in data.items()
    })


def parse_configuration(data: dict[str, Any]) -> InventoryConfiguration:
    """
    Parse a full configuration set.

    Preconditions:
        - ``data`` contains at least ``config_id`` and ``version``.
    Postconditions:
        - ``checksum`` is computed over ``data`` exactly as given.
    """
    return InventoryConfiguration(
        config_id=data["config_id"],
        version=int(data["version"]),
        checksum=compute_checksum(data),
        description=data.get("description", ""),
        policy=parse_policy(data.get("policy") or {}),
        services=parse_service_settings(data.get("services") or {}),
        reference=parse_reference_data(data.get("reference") or {}),
        seed=parse_seed_data(data.get("seed") or {}),
    )


def load_configuration(path: Path) -> InventoryConfiguration:
    return parse_configuration(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """
    Compute SHA-256 checksum of canonical JSON serialization.

    Identical ``data`` always produces identical checksums; key order does
    not matter.
    """
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
