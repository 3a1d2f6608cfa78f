"""
Pytest fixtures for the inventory kernel test suite.

Provides:
- Structured logging configured for every test, plus a JSON log capture
- Deterministic clock and sequential id fixtures
- Small hand-built states and the default configured state

All tests are pure: no database, no network.  Async collaborators are
driven with ``asyncio.run`` and zero-latency settings.
"""

import json
import logging
from datetime import datetime, timezone
from decimal import Decimal
from io import StringIO

import pytest

from inventory_config import build_initial_state, get_active_config
from inventory_config.schema import ServiceSettings
from inventory_kernel.domain.clock import DeterministicClock
from inventory_kernel.domain.ids import SequentialIdGenerator
from inventory_kernel.domain.models import (
    Accessory,
    Asset,
    AssigneeType,
    HardwareComponent,
    LicenseSeat,
    MasterLicense,
    SeatStatus,
)
from inventory_kernel.domain.state import InventoryState
from inventory_kernel.domain.store import InventoryStore
from inventory_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

FIXED_TIME = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture inventory_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, store):
            store.dispatch(...)
            logs = captured_logs()
            assert any(r["message"] == "command_applied" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("inventory_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Collaborator fixtures
# =============================================================================


@pytest.fixture
def clock():
    """Provide a deterministic clock for testing."""
    return DeterministicClock(FIXED_TIME)


@pytest.fixture
def ids():
    return SequentialIdGenerator(prefix="gen")


@pytest.fixture
def instant_settings():
    """Service settings with every simulated latency set to zero."""
    return ServiceSettings(
        login_latency_ms=0,
        refresh_latency_ms=0,
        fetch_latency_ms=0,
        create_latency_ms=0,
    )


# =============================================================================
# State fixtures
# =============================================================================


@pytest.fixture
def office_state():
    """
    One license ("Office", seats s1..s3), one asset holding s1, one accessory
    and one component.
    """
    return InventoryState(
        assets=(
            Asset(
                id="a1",
                name="Laptop-1",
                assignee="Alice",
                purchase_cost=Decimal("1000"),
                assigned_licenses=("s1",),
            ),
        ),
        master_licenses=(MasterLicense(id="l1", name="Office", total_seats=3),),
        license_seats=(
            LicenseSeat(
                id="s1",
                master_license_id="l1",
                seat_number="Seat 001",
                status=SeatStatus.ASSIGNED,
                assigned_to_type=AssigneeType.ASSET,
                assigned_to_id="a1",
            ),
            LicenseSeat(id="s2", master_license_id="l1", seat_number="Seat 002"),
            LicenseSeat(id="s3", master_license_id="l1", seat_number="Seat 003"),
        ),
        accessories=(
            Accessory(id="acc1", name="USB Keyboard", total_qty=3, min_qty=1,
                      unit_cost=Decimal("25")),
        ),
        components=(
            HardwareComponent(id="comp1", name="4GB SODIMM", total_qty=2,
                              remaining_qty=2, min_qty=1, unit_cost=Decimal("50")),
        ),
        departments=("Engineering", "HR"),
    )


@pytest.fixture
def store(office_state, clock, ids):
    return InventoryStore(office_state, clock=clock, ids=ids)


@pytest.fixture(scope="session")
def default_config():
    return get_active_config()


@pytest.fixture
def default_state(default_config):
    return build_initial_state(default_config)
