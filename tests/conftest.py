from __future__ import annotations

from datetime import date
from typing import Callable, List

import pytest

from billeffect.playback import PlaybackEngine


class ManualHandle:
    def __init__(self, interval: Callable[[], float], callback: Callable[[], object]) -> None:
        self.interval = interval
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler whose ticks are fired explicitly by the test."""

    def __init__(self) -> None:
        self.handles: List[ManualHandle] = []

    def __call__(self, interval, callback) -> ManualHandle:
        handle = ManualHandle(interval, callback)
        self.handles.append(handle)
        return handle

    @property
    def active(self) -> List[ManualHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def fire(self, times: int = 1) -> None:
        for _ in range(times):
            for handle in self.active:
                handle.callback()


TODAY = date(2026, 1, 15)


@pytest.fixture()
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture()
def engine(scheduler: ManualScheduler) -> PlaybackEngine:
    return PlaybackEngine(scheduler=scheduler, today=lambda: TODAY)
