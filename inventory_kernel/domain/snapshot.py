"""Plain-data projection of an ``InventoryState`` for collaborators."""

from __future__ import annotations

from typing import Any

from inventory_kernel.domain.records import to_plain
from inventory_kernel.domain.state import InventoryState, ReferenceList

KEYED_COLLECTIONS = (
    "assets",
    "master_licenses",
    "license_seats",
    "accessories",
    "components",
    "procurement_batches",
    "users",
    "groups",
    "roles",
    "privileges",
)


def to_snapshot(state: InventoryState) -> dict[str, Any]:
    """
    Render ``state`` as JSON-compatible data.

    Record collections become ``{id: record}`` mappings (insertion order
    follows the state's display order); reference lists stay lists.
    """
    snapshot: dict[str, Any] = {
        name: {record.id: to_plain(record) for record in getattr(state, name)}
        for name in KEYED_COLLECTIONS
    }
    for ref in ReferenceList:
        snapshot[ref.value] = list(state.reference_values(ref))
    return snapshot
