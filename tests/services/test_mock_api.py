"""Simulated backend: fetchers, create echo, bulk load into a store."""

import asyncio

import pytest

from inventory_kernel.domain.ids import SequentialIdGenerator
from inventory_kernel.domain.models import AssetStatus
from inventory_kernel.domain.state import InventoryState
from inventory_kernel.domain.store import InventoryStore
from inventory_services.mock_api import MockInventoryApi


@pytest.fixture
def api(default_config, instant_settings):
    return MockInventoryApi(
        default_config.seed, instant_settings, ids=SequentialIdGenerator("api"),
    )


def test_fetchers_return_seed_copies(api, default_config):
    assets = asyncio.run(api.fetch_assets())
    licenses, seats = asyncio.run(api.fetch_licenses())
    assert [a.id for a in assets] == ["1", "2", "3"]
    assert [lic.id for lic in licenses] == ["l1", "l2"]
    assert len(seats) == 5
    assert len(asyncio.run(api.fetch_batches())) == 2
    assert len(asyncio.run(api.fetch_components())) == 4

    assets.clear()
    assert len(default_config.seed.assets) == 3


def test_create_asset_assigns_fresh_id(api):
    asset = asyncio.run(api.create_asset({"id": "client", "name": "Tablet", "status": "retired"}))
    assert asset.id == "api-1"
    assert asset.status is AssetStatus.RETIRED


def test_load_into_replaces_collections(api, clock, ids):
    store = InventoryStore(InventoryState(departments=("HR",)), clock=clock, ids=ids)
    state = asyncio.run(api.load_into(store))
    assert store.state is state
    assert len(state.assets) == 3
    assert len(state.master_licenses) == 2
    assert len(state.license_seats) == 5
    assert len(state.procurement_batches) == 2
    assert len(state.components) == 4
    assert state.accessories == ()
    assert state.departments == ("HR",)


def test_cancelled_load_leaves_store_untouched(default_config, clock, ids):
    slow = MockInventoryApi(default_config.seed)
    store = InventoryStore(InventoryState(), clock=clock, ids=ids)
    before = store.state

    async def _cancel_midway():
        task = asyncio.create_task(slow.load_into(store))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    asyncio.run(_cancel_midway())
    assert store.state is before
