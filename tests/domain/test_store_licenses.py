"""Master license and seat commands."""

from dataclasses import replace

from inventory_kernel.domain.commands import (
    CreateLicense,
    DeleteLicense,
    SetLicenses,
    UpdateLicense,
    UpdateSeat,
)
from inventory_kernel.domain.history import HistoryEventType
from inventory_kernel.domain.models import (
    AssigneeType,
    LicenseSeat,
    LicenseStatus,
    MasterLicense,
    SeatStatus,
)
from inventory_kernel.domain.policy import StorePolicy
from inventory_kernel.domain.store import apply_command


class TestCreateLicense:
    def test_creates_master_and_seats_atomically(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            CreateLicense(
                data={"name": "Adobe", "total_seats": 2},
                initial_seats=({"seat_number": "Seat 001"}, {"seat_number": "Seat 002"}),
            ),
            clock=clock, ids=ids,
        )
        master = state.master_licenses[0]
        assert master.name == "Adobe"
        assert master.id == "gen-1"
        new_seats = state.seats_for_license(master.id)
        assert [s.seat_number for s in new_seats] == ["Seat 001", "Seat 002"]
        assert [s.id for s in new_seats] == ["gen-2", "gen-3"]
        assert all(s.status is SeatStatus.AVAILABLE for s in new_seats)
        assert state.license_seats[: len(office_state.license_seats)] == office_state.license_seats

    def test_license_without_seats(self, office_state, clock, ids):
        state = apply_command(
            office_state, CreateLicense(data={"name": "Empty"}), clock=clock, ids=ids,
        )
        assert state.seats_for_license(state.master_licenses[0].id) == ()


class TestUpdateLicense:
    def test_replaces_by_id_without_history(self, office_state, clock, ids):
        old = office_state.get_license("l1")
        state = apply_command(
            office_state,
            UpdateLicense(record=replace(old, status=LicenseStatus.EXPIRING)),
            clock=clock, ids=ids,
        )
        assert state.get_license("l1").status is LicenseStatus.EXPIRING
        assert state.get_license("l1").history == ()

    def test_unknown_license_is_noop(self, office_state, clock, ids):
        ghost = MasterLicense(id="ghost", name="Ghost")
        assert apply_command(office_state, UpdateLicense(record=ghost), clock=clock, ids=ids) is office_state


class TestDeleteLicense:
    def test_cascades_to_seats(self, office_state, clock, ids):
        state = apply_command(office_state, DeleteLicense(record_id="l1"), clock=clock, ids=ids)
        assert state.get_license("l1") is None
        assert state.seats_for_license("l1") == ()
        assert state.license_seats == ()

    def test_reference_behaviour_leaves_dangling_asset_refs(self, office_state, clock, ids):
        state = apply_command(office_state, DeleteLicense(record_id="l1"), clock=clock, ids=ids)
        assert state.get_asset("a1").assigned_licenses == ("s1",)

    def test_policy_prunes_dangling_refs(self, office_state, clock, ids):
        state = apply_command(
            office_state, DeleteLicense(record_id="l1"), clock=clock, ids=ids,
            policy=StorePolicy(prune_dangling_seat_refs=True),
        )
        assert state.get_asset("a1").assigned_licenses == ()

    def test_other_license_seats_survive(self, office_state, clock, ids):
        other = LicenseSeat(id="x1", master_license_id="l2", seat_number="Seat 001")
        seeded = replace(
            office_state,
            master_licenses=(*office_state.master_licenses, MasterLicense(id="l2", name="Other")),
            license_seats=(*office_state.license_seats, other),
        )
        state = apply_command(seeded, DeleteLicense(record_id="l1"), clock=clock, ids=ids)
        assert state.license_seats == (other,)


class TestSetLicenses:
    def test_replaces_both_collections(self, office_state, clock, ids):
        licenses = (MasterLicense(id="m", name="M"),)
        seats = (LicenseSeat(id="ms", master_license_id="m", seat_number="1"),)
        state = apply_command(
            office_state, SetLicenses(licenses=licenses, seats=seats), clock=clock, ids=ids,
        )
        assert state.master_licenses == licenses
        assert state.license_seats == seats


class TestUpdateSeat:
    def test_assign_to_person(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            UpdateSeat(seat_id="s2", changes={
                "assigned_to_type": AssigneeType.PERSON, "assigned_to_id": "Bob",
            }),
            clock=clock, ids=ids,
        )
        seat = state.get_seat("s2")
        assert seat.status is SeatStatus.ASSIGNED
        (event,) = seat.history
        assert event.event_type is HistoryEventType.ASSIGNMENT
        assert event.description == "Seat assigned"
        assert (event.changed_from, event.changed_to) == ("None", "Bob")

    def test_explicit_available_clears_assignment(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            UpdateSeat(seat_id="s1", changes={"status": SeatStatus.AVAILABLE}),
            clock=clock, ids=ids,
        )
        seat = state.get_seat("s1")
        assert seat.status is SeatStatus.AVAILABLE
        assert seat.assigned_to_type is AssigneeType.UNASSIGNED
        assert seat.assigned_to_id is None
        assert seat.history[-1].description == "Seat unassigned"
        assert (seat.history[-1].changed_from, seat.history[-1].changed_to) == ("a1", "None")

    def test_clearing_target_makes_seat_available(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            UpdateSeat(seat_id="s1", changes={"assigned_to_id": ""}),
            clock=clock, ids=ids,
        )
        assert state.get_seat("s1").status is SeatStatus.AVAILABLE

    def test_string_changes_are_coerced(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            UpdateSeat(seat_id="s3", changes={
                "status": "assigned", "assigned_to_type": "asset", "assigned_to_id": "a9",
            }),
            clock=clock, ids=ids,
        )
        assert state.get_seat("s3").assigned_to_type is AssigneeType.ASSET

    def test_seat_number_change(self, office_state, clock, ids):
        state = apply_command(
            office_state,
            UpdateSeat(seat_id="s3", changes={"seat_number": "Seat 100"}),
            clock=clock, ids=ids,
        )
        seat = state.get_seat("s3")
        assert seat.seat_number == "Seat 100"
        assert seat.status is SeatStatus.AVAILABLE

    def test_unknown_seat_is_noop(self, office_state, clock, ids):
        assert apply_command(
            office_state, UpdateSeat(seat_id="zz", changes={}), clock=clock, ids=ids,
        ) is office_state
