"""Engine settings loaded from environment variables.

LODGELY_PENDING_BLOCKS: when true, pending reservations also occupy the
availability index, so two overlapping requests cannot both be accepted.
LODGELY_ALLOW_PAST_START: when true, create() accepts start dates before
today (historical imports).
DATABASE_URL: when set, reservations are persisted to Postgres.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class EngineSettings:
    """Reservation engine configuration."""

    pending_blocks: bool = False
    allow_past_start: bool = False
    database_url: str | None = None


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag, got {raw!r}")


def load_settings() -> EngineSettings:
    """Build settings from the environment.

    Raises:
        ValueError: If a flag variable holds an unrecognised value.
    """
    return EngineSettings(
        pending_blocks=_env_flag("LODGELY_PENDING_BLOCKS", False),
        allow_past_start=_env_flag("LODGELY_ALLOW_PAST_START", False),
        database_url=os.environ.get("DATABASE_URL") or None,
    )
