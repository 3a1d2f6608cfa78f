"""
inventory_config -- single public entrypoint for inventory configuration.

Responsibility:
    Provides the way to obtain configuration at runtime through
    ``get_active_config()``, and ``build_initial_state()`` to turn its seed
    data into the store's first ``InventoryState``.

Architecture position:
    Configuration -- YAML-driven, sits above ``inventory_kernel`` and below
    ``inventory_services``.  The kernel MUST NEVER import from
    ``inventory_config``; the kernel-facing outputs are plain kernel types
    (``StorePolicy``, ``InventoryState``).

Invariants enforced:
    - Deterministic loading: the same YAML always produces the same
      ``InventoryConfiguration`` and checksum.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested name.
    - ``ValueError`` / ``KeyError`` -- schema or record parse failures.

Audit relevance:
    Every successful ``get_active_config()`` call emits an
    ``INVENTORY_CONFIG_TRACE`` log entry with the config id, version,
    checksum, active policy switches, and seed record counts.
"""

from __future__ import annotations

from pathlib import Path

from inventory_config.loader import load_configuration
from inventory_config.schema import (
    InventoryConfiguration,
    ReferenceData,
    SeedData,
    ServiceSettings,
)
from inventory_kernel.domain.state import InventoryState
from inventory_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

__all__ = [
    "InventoryConfiguration",
    "ReferenceData",
    "SeedData",
    "ServiceSettings",
    "build_initial_state",
    "get_active_config",
]


def get_active_config(
    name: str = "default",
    config_dir: Path | None = None,
) -> InventoryConfiguration:
    """Load the configuration set ``<config_dir>/<name>.yaml``.

    Guarantees:
        - An ``INVENTORY_CONFIG_TRACE`` log entry is emitted on every
          successful call.

    Non-goals:
        - No caching; callers hold the returned configuration.

    Args:
        name: Configuration set name (file stem).
        config_dir: Override path to the configuration sets directory.
            Defaults to inventory_config/sets/.

    Raises:
        FileNotFoundError: If no matching configuration set is found.
        ValueError: If the configuration fails to parse.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"No configuration set {name!r} in {sets_dir}")

    config = load_configuration(path)

    _logger.info(
        "INVENTORY_CONFIG_TRACE",
        extra={
            "trace_type": "INVENTORY_CONFIG_TRACE",
            "config_set_id": config.config_id,
            "config_set_version": config.version,
            "checksum": config.checksum,
            "release_seats_on_asset_delete": config.policy.release_seats_on_asset_delete,
            "prune_dangling_seat_refs": config.policy.prune_dangling_seat_refs,
            "clamp_stock_quantities": config.policy.clamp_stock_quantities,
            "asset_count": len(config.seed.assets),
            "license_count": len(config.seed.master_licenses),
            "seat_count": len(config.seed.license_seats),
        },
    )
    return config


def build_initial_state(config: InventoryConfiguration) -> InventoryState:
    """
    The store's starting state for ``config``.

    Locations and asset types not declared in the reference section are
    the sorted distinct non-empty values found on the seed assets.
    """
    seed = config.seed
    ref = config.reference
    locations = ref.locations or tuple(sorted({a.location for a in seed.assets if a.location}))
    asset_types = ref.asset_types or tuple(
        sorted({a.asset_type for a in seed.assets if a.asset_type})
    )
    return InventoryState(
        assets=seed.assets,
        master_licenses=seed.master_licenses,
        license_seats=seed.license_seats,
        accessories=seed.accessories,
        components=seed.components,
        procurement_batches=seed.procurement_batches,
        departments=ref.departments,
        locations=locations,
        asset_types=asset_types,
        users=seed.users,
        groups=seed.groups,
        roles=seed.roles,
        privileges=seed.privileges,
    )
