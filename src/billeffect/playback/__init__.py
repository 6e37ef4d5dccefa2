"""Timeline playback."""
from __future__ import annotations

from .engine import (
    SPEEDS,
    AsyncioTicker,
    PlaybackEngine,
    PlaybackState,
    Scheduler,
    TickHandle,
    add_years,
    asyncio_scheduler,
)

__all__ = [
    "AsyncioTicker",
    "PlaybackEngine",
    "PlaybackState",
    "SPEEDS",
    "Scheduler",
    "TickHandle",
    "add_years",
    "asyncio_scheduler",
]
