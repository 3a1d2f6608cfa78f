"""Read-side projections over the default configured inventory."""

from dataclasses import replace
from decimal import Decimal

from inventory_kernel.domain.commands import CheckoutAccessory, UpdateAsset, UpdateSeat
from inventory_kernel.domain.models import AssigneeType
from inventory_kernel.domain.queries import (
    dashboard_stats,
    effective_privileges,
    entity_history,
    global_history,
    license_seat_usage,
    low_stock_accessories,
    low_stock_components,
    reconciliation_summary,
    seat_label,
)
from inventory_kernel.domain.snapshot import to_snapshot
from inventory_kernel.domain.store import apply_command


class TestDashboard:
    def test_counts(self, default_state):
        stats = dashboard_stats(default_state)
        assert stats.total_assets == 3
        assert stats.total_licenses == 2
        assert stats.total_accessories == 4
        assert stats.total_components == 4
        assert stats.total_seats == 5
        assert stats.assigned_seats == 2
        assert stats.active_assets == 2
        assert stats.expiring_licenses == 1

    def test_total_value(self, office_state):
        # 1000 asset + 3 * 25 accessory + 2 * 50 component
        assert dashboard_stats(office_state).total_value == Decimal("1175")


class TestStock:
    def test_low_stock(self, office_state, clock, ids):
        assert low_stock_accessories(office_state) == []
        state = office_state
        for _ in range(2):
            state = apply_command(state, CheckoutAccessory(item_id="acc1"), clock=clock, ids=ids)
        assert [a.id for a in low_stock_accessories(state)] == ["acc1"]
        assert low_stock_components(state) == []


class TestReconciliation:
    def test_summary(self, default_state):
        summary = reconciliation_summary(default_state)
        assert summary.total_ordered == 150
        assert summary.total_received == 95
        assert summary.gap == 55
        assert not summary.all_matched
        assert [b.id for b in summary.discrepant_batches] == ["pb1", "pb2"]


class TestSeatUsage:
    def test_usage_per_license(self, default_state):
        usage = {u.license_id: u for u in license_seat_usage(default_state)}
        assert usage["l1"].assigned_seats == 2
        assert usage["l1"].available_seats == 1
        assert usage["l2"].assigned_seats == 0
        assert usage["l2"].available_seats == 2

    def test_seat_label(self, default_state):
        assert seat_label(default_state, default_state.get_seat("s4")) == "Microsoft Office 365 - Seat 001"


class TestHistoryFeeds:
    def test_entity_history_newest_first(self, office_state, clock, ids):
        old = office_state.get_asset("a1")
        state = apply_command(office_state, UpdateAsset(record=replace(old, assignee="Bob")),
                              clock=clock, ids=ids)
        clock.advance(60)
        state = apply_command(state, UpdateAsset(record=replace(old, assignee="Carol")),
                              clock=clock, ids=ids)
        assert [e.changed_to for e in entity_history(state, "a1")] == ["Carol", "Bob"]
        assert entity_history(state, "unknown") == []

    def test_global_feed_labels_items(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            UpdateSeat(seat_id="s2", changes={
                "assigned_to_type": AssigneeType.PERSON, "assigned_to_id": "Bob",
            }),
            clock=clock, ids=ids,
        )
        clock.advance(5)
        old = state.get_asset("a1")
        state = apply_command(state, UpdateAsset(record=replace(old, assignee="Bob")),
                              clock=clock, ids=ids)
        feed = global_history(state)
        assert [(f.item_type, f.item_name) for f in feed] == [
            ("Asset", "Laptop-1"),
            ("License Seat", "Office - Seat 002"),
        ]

    def test_seed_history_is_in_feed(self, default_state):
        feed = global_history(default_state)
        assert len(feed) == 1
        assert feed[0].item_name == "MacBook Pro M3"


class TestPrivileges:
    def test_user_inherits_role_privileges(self, default_state):
        assert effective_privileges(default_state, "u3") == {"assets.view", "reports.view"}
        assert "users.manage" in effective_privileges(default_state, "u1")

    def test_unknown_user_has_none(self, default_state):
        assert effective_privileges(default_state, "nobody") == frozenset()


class TestSnapshot:
    def test_keyed_collections(self, default_state):
        snapshot = to_snapshot(default_state)
        assert set(snapshot["assets"]) == {"1", "2", "3"}
        assert snapshot["license_seats"]["s2"]["assigned_to_type"] == "asset"
        assert snapshot["assets"]["1"]["purchase_cost"] == "2499"
        assert snapshot["assets"]["1"]["history"][0]["event_type"] == "creation"
        assert snapshot["procurement_batches"]["pb1"]["po"]["order_date"] == "2024-01-15"
        assert snapshot["departments"] == ["Design", "Engineering", "HR", "Operations", "Sales"]
        assert snapshot["locations"] == ["HQ - Floor 2", "IT Repair Bay", "Remote"]
        assert snapshot["asset_types"] == ["Laptop", "Mobile"]
