"""Accessories, components, procurement batches, reference lists and users."""

from dataclasses import replace
from decimal import Decimal

import pytest

from inventory_kernel.domain.commands import (
    AddReferenceValue,
    CheckinAccessory,
    CheckinComponent,
    CheckoutAccessory,
    CheckoutComponent,
    CreateAccessory,
    CreateBatch,
    CreateRole,
    CreateUser,
    DeleteAccessory,
    DeleteComponent,
    DeleteGroup,
    RemoveReferenceValue,
    SetReferenceValues,
    UpdateAccessory,
    UpdateBatchStatus,
    UpdateComponent,
)
from inventory_kernel.domain.models import BatchStatus, ProcurementBatch
from inventory_kernel.domain.policy import StorePolicy
from inventory_kernel.domain.state import ReferenceList
from inventory_kernel.domain.store import apply_command


class TestAccessories:
    def test_checkout_and_checkin(self, office_state, clock, ids):
        state = apply_command(office_state, CheckoutAccessory(item_id="acc1"), clock=clock, ids=ids)
        state = apply_command(state, CheckoutAccessory(item_id="acc1"), clock=clock, ids=ids)
        assert state.get_accessory("acc1").checked_out_qty == 2
        assert state.get_accessory("acc1").remaining_qty == 1
        state = apply_command(state, CheckinAccessory(item_id="acc1"), clock=clock, ids=ids)
        assert state.get_accessory("acc1").checked_out_qty == 1

    def test_no_history_is_recorded(self, office_state, clock, ids):
        state = apply_command(office_state, CheckoutAccessory(item_id="acc1"), clock=clock, ids=ids)
        assert state.get_accessory("acc1").history == ()

    def test_unguarded_checkin_goes_negative(self, office_state, clock, ids):
        state = apply_command(office_state, CheckinAccessory(item_id="acc1"), clock=clock, ids=ids)
        assert state.get_accessory("acc1").checked_out_qty == -1

    def test_clamping_policy(self, office_state, clock, ids):
        state = apply_command(
            office_state, CheckinAccessory(item_id="acc1"), clock=clock, ids=ids,
            policy=StorePolicy(clamp_stock_quantities=True),
        )
        assert state.get_accessory("acc1").checked_out_qty == 0

    def test_create_update_delete(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            CreateAccessory(data={"name": "Headset", "total_qty": 5, "unit_cost": Decimal("40")}),
            clock=clock, ids=ids,
        )
        created = state.accessories[0]
        assert created.name == "Headset"
        assert created.id == "gen-1"

        state = apply_command(
            state, UpdateAccessory(record=replace(created, min_qty=3)), clock=clock, ids=ids,
        )
        assert state.get_accessory(created.id).min_qty == 3

        state = apply_command(state, DeleteAccessory(record_id=created.id), clock=clock, ids=ids)
        assert state.get_accessory(created.id) is None

    def test_unknown_accessory_is_noop(self, office_state, clock, ids):
        assert apply_command(
            office_state, CheckoutAccessory(item_id="nope"), clock=clock, ids=ids,
        ) is office_state


class TestComponents:
    def test_checkout_decrements_remaining(self, office_state, clock, ids):
        state = apply_command(office_state, CheckoutComponent(item_id="comp1"), clock=clock, ids=ids)
        assert state.get_component("comp1").remaining_qty == 1
        state = apply_command(state, CheckinComponent(item_id="comp1"), clock=clock, ids=ids)
        assert state.get_component("comp1").remaining_qty == 2

    def test_unguarded_checkin_exceeds_total(self, office_state, clock, ids):
        state = apply_command(office_state, CheckinComponent(item_id="comp1"), clock=clock, ids=ids)
        assert state.get_component("comp1").remaining_qty == 3

    def test_clamping_policy(self, office_state, clock, ids):
        state = apply_command(
            office_state, CheckinComponent(item_id="comp1"), clock=clock, ids=ids,
            policy=StorePolicy(clamp_stock_quantities=True),
        )
        assert state.get_component("comp1").remaining_qty == 2

    def test_update_and_delete(self, office_state, clock, ids):
        comp = office_state.get_component("comp1")
        state = apply_command(
            office_state, UpdateComponent(record=replace(comp, location="Shelf B")),
            clock=clock, ids=ids,
        )
        assert state.get_component("comp1").location == "Shelf B"
        state = apply_command(state, DeleteComponent(record_id="comp1"), clock=clock, ids=ids)
        assert state.components == ()


class TestProcurement:
    def test_create_and_status_change(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            CreateBatch(data={"name": "Batch 7", "ordered_qty": 10, "received_qty": 4}),
            clock=clock, ids=ids,
        )
        batch = state.procurement_batches[0]
        assert isinstance(batch, ProcurementBatch)
        assert batch.discrepancy == 6

        state = apply_command(
            state,
            UpdateBatchStatus(batch_id=batch.id, status=BatchStatus.PARTIALLY_RECEIVED),
            clock=clock, ids=ids,
        )
        assert state.get_batch(batch.id).status is BatchStatus.PARTIALLY_RECEIVED

    def test_unknown_batch_status_is_noop(self, office_state, clock, ids):
        assert apply_command(
            office_state, UpdateBatchStatus(batch_id="pbX", status=BatchStatus.RECEIVED),
            clock=clock, ids=ids,
        ) is office_state


class TestReferenceLists:
    def test_add_keeps_list_sorted(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            AddReferenceValue(reference=ReferenceList.DEPARTMENTS, value="Design"),
            clock=clock, ids=ids,
        )
        assert state.departments == ("Design", "Engineering", "HR")

    @pytest.mark.parametrize("value", ["HR", "   ", ""])
    def test_duplicate_or_blank_add_is_noop(self, office_state, clock, ids, value):
        assert apply_command(
            office_state,
            AddReferenceValue(reference=ReferenceList.DEPARTMENTS, value=value),
            clock=clock, ids=ids,
        ) is office_state

    def test_remove(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            RemoveReferenceValue(reference=ReferenceList.DEPARTMENTS, value="HR"),
            clock=clock, ids=ids,
        )
        assert state.departments == ("Engineering",)

    def test_set_replaces_list(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            SetReferenceValues(reference=ReferenceList.ASSET_TYPES, values=("Laptop", "Mobile")),
            clock=clock, ids=ids,
        )
        assert state.asset_types == ("Laptop", "Mobile")


class TestUsersAndRoles:
    def test_create_user_and_role(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            CreateRole(data={"name": "Auditor", "privileges": ("p1",)}),
            clock=clock, ids=ids,
        )
        state = apply_command(
            state,
            CreateUser(data={"name": "Dana", "username": "dana", "group_id": "g1"}),
            clock=clock, ids=ids,
        )
        assert state.roles[0].privileges == ("p1",)
        assert state.users[0].username == "dana"

    def test_delete_unknown_group_is_noop(self, office_state, clock, ids):
        assert apply_command(office_state, DeleteGroup(record_id="g9"), clock=clock, ids=ids) is office_state
