"""Date cursor with play/pause/seek/speed semantics driving the timeline."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, List, Optional, Protocol, Tuple
import logging

LOGGER = logging.getLogger(__name__)

SPEEDS: Tuple[int, ...] = (1, 2, 5)


@dataclass(slots=True, frozen=True)
class PlaybackState:
    """Immutable snapshot of the playback engine."""

    is_playing: bool
    speed: int
    current_date: date
    start_date: date
    end_date: date

    @property
    def progress(self) -> float:
        """Position of the cursor within the range as a value in ``[0, 1]``."""

        total = (self.end_date - self.start_date).days
        if total <= 0:
            return 1.0
        return (self.current_date - self.start_date).days / total


class TickHandle(Protocol):
    """Owned handle of a recurring tick action."""

    def cancel(self) -> None: ...


# A scheduler receives a callable returning the current interval in seconds and
# the tick callback, and starts a recurring action until the handle is cancelled.
Scheduler = Callable[[Callable[[], float], Callable[[], object]], TickHandle]
PlaybackListener = Callable[[PlaybackState], None]


class AsyncioTicker:
    """Recurring tick running as a task on the current event loop."""

    def __init__(self, interval: Callable[[], float], callback: Callable[[], object]) -> None:
        self._interval = interval
        self._callback = callback
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            # the interval is re-read every cycle so speed changes apply to the next wait
            await asyncio.sleep(self._interval())
            self._callback()

    def cancel(self) -> None:
        self._task.cancel()


def asyncio_scheduler(interval: Callable[[], float], callback: Callable[[], object]) -> TickHandle:
    return AsyncioTicker(interval, callback)


def add_years(value: date, years: int) -> date:
    """Shift ``value`` by whole years, mapping Feb 29 to Feb 28 where needed."""

    try:
        return value.replace(year=value.year + years)
    except ValueError:
        return value.replace(year=value.year + years, day=28)


class PlaybackEngine:
    """Owns the playback clock and the single recurring tick action.

    Every tick advances the cursor by exactly one calendar day. The speed only
    changes how often ticks happen (``base_interval / speed`` seconds). Reaching
    the end of the range clamps the cursor and pauses playback.
    """

    def __init__(
        self,
        *,
        horizon_years: int = 2,
        base_interval: float = 1.0,
        scheduler: Optional[Scheduler] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        if base_interval <= 0:
            raise ValueError("base_interval must be positive")
        self._horizon_years = horizon_years
        self._base_interval = base_interval
        self._scheduler = scheduler or asyncio_scheduler
        self._today = today
        self._handle: Optional[TickHandle] = None
        self._listeners: List[PlaybackListener] = []
        self._is_playing = False
        self._speed = 1
        self._init_dates()

    # --- read side ------------------------------------------------------
    @property
    def state(self) -> PlaybackState:
        return PlaybackState(
            is_playing=self._is_playing,
            speed=self._speed,
            current_date=self._current,
            start_date=self._start,
            end_date=self._end,
        )

    @property
    def is_playing(self) -> bool:
        return self._is_playing

    @property
    def current_date(self) -> date:
        return self._current

    @property
    def tick_interval(self) -> float:
        """Seconds between two ticks at the current speed."""

        return self._base_interval / self._speed

    @property
    def has_active_ticker(self) -> bool:
        return self._handle is not None

    def subscribe(self, listener: PlaybackListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every transition."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # --- transitions ----------------------------------------------------
    def play(self) -> None:
        if self._is_playing:
            return
        self._handle = self._scheduler(lambda: self.tick_interval, self.tick)
        self._is_playing = True
        LOGGER.debug("Playback started at %s (speed %sx)", self._current, self._speed)
        self._notify()

    def pause(self) -> None:
        if not self._is_playing:
            return
        self._is_playing = False
        self._cancel_ticker()
        LOGGER.debug("Playback paused at %s", self._current)
        self._notify()

    def toggle(self) -> None:
        if self._is_playing:
            self.pause()
        else:
            self.play()

    def tick(self) -> bool:
        """Advance by one day. Returns ``False`` if the engine was paused."""

        if not self._is_playing:
            return False
        advanced = self._current + timedelta(days=1)
        if advanced >= self._end:
            self._current = self._end
            self._is_playing = False
            self._cancel_ticker()
            LOGGER.info("Playback reached the end of the range (%s)", self._end)
        else:
            self._current = advanced
        self._notify()
        return True

    def seek(self, target: date) -> date:
        """Move the cursor to ``target`` clamped into the range; play state is kept."""

        self._current = min(max(target, self._start), self._end)
        self._notify()
        return self._current

    def set_speed(self, speed: int) -> None:
        if speed not in SPEEDS:
            raise ValueError(f"Unsupported playback speed {speed!r}; choose one of {SPEEDS}")
        self._speed = speed
        self._notify()

    def set_date_range(self, start: date, end: date) -> None:
        if start > end:
            raise ValueError(f"Range start {start} lies after end {end}")
        # the cursor is left where it is; callers seek() or reset() afterwards
        self._start, self._end = start, end
        self._notify()

    def reset(self) -> None:
        """Pause and return to today .. today + horizon with speed 1x."""

        self._is_playing = False
        self._cancel_ticker()
        self._speed = 1
        self._init_dates()
        self._notify()

    # --- helpers --------------------------------------------------------
    def _init_dates(self) -> None:
        today = self._today()
        self._start = self._current = today
        self._end = add_years(today, self._horizon_years)

    def _cancel_ticker(self) -> None:
        handle, self._handle = self._handle, None
        if handle is not None:
            handle.cancel()

    def _notify(self) -> None:
        snapshot = self.state
        for listener in list(self._listeners):
            listener(snapshot)


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
