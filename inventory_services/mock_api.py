"""
inventory_services.mock_api -- Simulated inventory backend.

Responsibility:
    Async fetchers that hand back copies of configured seed records after a
    simulated delay, and ``load_into`` which pushes the fetched collections
    into a store as bulk-replace commands.

Architecture position:
    Services layer.  Results re-enter the kernel only as ordinary commands
    dispatched through ``InventoryStore.dispatch``.

Invariants enforced:
    - ``load_into`` dispatches nothing until every fetch has resolved; a
      cancelled load leaves the store untouched.
"""

from __future__ import annotations

import asyncio
from typing import Any, Mapping

from inventory_config.schema import SeedData, ServiceSettings
from inventory_kernel.domain.commands import (
    SetAssets,
    SetBatches,
    SetComponents,
    SetLicenses,
)
from inventory_kernel.domain.ids import IdGenerator, UuidIdGenerator
from inventory_kernel.domain.models import (
    Asset,
    HardwareComponent,
    LicenseSeat,
    MasterLicense,
    ProcurementBatch,
)
from inventory_kernel.domain.records import record_from_dict
from inventory_kernel.domain.state import InventoryState
from inventory_kernel.domain.store import InventoryStore
from inventory_kernel.logging_config import get_logger

logger = get_logger("services.mock_api")


class MockInventoryApi:
    def __init__(
        self,
        seed: SeedData,
        settings: ServiceSettings | None = None,
        ids: IdGenerator | None = None,
    ):
        self._seed = seed
        self._settings = settings or ServiceSettings()
        self._ids = ids or UuidIdGenerator()

    async def _delay(self, ms: int) -> None:
        await asyncio.sleep(ms / 1000)

    async def fetch_assets(self) -> list[Asset]:
        await self._delay(self._settings.fetch_latency_ms)
        return list(self._seed.assets)

    async def fetch_licenses(self) -> tuple[list[MasterLicense], list[LicenseSeat]]:
        await self._delay(self._settings.fetch_latency_ms)
        return list(self._seed.master_licenses), list(self._seed.license_seats)

    async def fetch_batches(self) -> list[ProcurementBatch]:
        await self._delay(self._settings.fetch_latency_ms)
        return list(self._seed.procurement_batches)

    async def fetch_components(self) -> list[HardwareComponent]:
        await self._delay(self._settings.fetch_latency_ms)
        return list(self._seed.components)

    async def create_asset(self, data: Mapping[str, Any]) -> Asset:
        """Echo ``data`` back as an ``Asset`` with a fresh id (nothing is stored)."""
        await self._delay(self._settings.create_latency_ms)
        fields = {k: v for k, v in data.items() if k != "id"}
        return record_from_dict(Asset, {**fields, "id": self._ids.next_id()})

    async def load_into(self, store: InventoryStore) -> InventoryState:
        """Fetch every collection concurrently, then replace them in ``store``."""
        assets, (licenses, seats), batches, components = await asyncio.gather(
            self.fetch_assets(),
            self.fetch_licenses(),
            self.fetch_batches(),
            self.fetch_components(),
        )
        store.dispatch(SetAssets(records=tuple(assets)))
        store.dispatch(SetLicenses(licenses=tuple(licenses), seats=tuple(seats)))
        store.dispatch(SetBatches(records=tuple(batches)))
        store.dispatch(SetComponents(records=tuple(components)))
        logger.info(
            "inventory_loaded",
            extra={
                "asset_count": len(assets),
                "license_count": len(licenses),
                "seat_count": len(seats),
                "batch_count": len(batches),
                "component_count": len(components),
            },
        )
        return store.state
