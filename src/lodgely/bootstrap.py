"""Wiring for a ready-to-use reservation manager."""

from __future__ import annotations

from lodgely.domain.reservations import ReservationManager
from lodgely.infra.settings import EngineSettings, load_settings
from lodgely.infra.store import (
    InMemoryReservationStore,
    PostgresReservationStore,
    ReservationStore,
)
from lodgely.observability.logging import get_logger

logger = get_logger(__name__)


def create_store(settings: EngineSettings) -> ReservationStore:
    """Postgres-backed store when a database URL is configured, else in-memory."""
    if settings.database_url:
        return PostgresReservationStore(settings.database_url)
    logger.warning("DATABASE_URL not set, reservations are kept in memory only")
    return InMemoryReservationStore()


def create_manager(
    settings: EngineSettings | None = None,
    *,
    store: ReservationStore | None = None,
) -> ReservationManager:
    """Build a manager and load its working set from the store.

    Args:
        settings: Engine settings; read from the environment when omitted.
        store: Explicit store, overriding the one chosen from settings.
    """
    settings = settings or load_settings()
    manager = ReservationManager(store or create_store(settings), settings=settings)
    manager.load()
    return manager
