"""Shared pytest fixtures for Lodgely tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from helpers import FakeClock  # noqa: E402
from lodgely.domain.reservations import ReservationManager  # noqa: E402
from lodgely.infra.settings import EngineSettings  # noqa: E402
from lodgely.infra.store import InMemoryReservationStore  # noqa: E402


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store():
    return InMemoryReservationStore()


@pytest.fixture
def manager(store, clock):
    return ReservationManager(store, clock=clock)


@pytest.fixture
def blocking_manager(store, clock):
    """Manager where pending reservations also block their range."""
    return ReservationManager(
        store,
        settings=EngineSettings(pending_blocks=True),
        clock=clock,
    )
