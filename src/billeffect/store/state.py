"""Single owned state container: the live bill, the accumulated events and playback."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Set, Tuple
import logging

from ..core.jurisdictions import Jurisdiction, is_known, lookup
from ..core.types import Bill, SimulationEvent
from ..playback import PlaybackEngine, PlaybackState

LOGGER = logging.getLogger(__name__)


def events_up_to(events: Iterable[SimulationEvent], as_of: date) -> List[SimulationEvent]:
    """Events dated on or before ``as_of`` in their original order."""

    return [event for event in events if event.date <= as_of]


def dominant_impact(events: Iterable[SimulationEvent]) -> str:
    """The shared polarity of ``events`` or ``"mixed"`` if they disagree."""

    impacts = {event.impact for event in events}
    if len(impacts) == 1:
        return impacts.pop()
    return "mixed" if impacts else "neutral"


@dataclass(slots=True, frozen=True)
class StateEvents:
    """Visible events of one jurisdiction, as shown by a map marker."""

    state: str
    events: Tuple[SimulationEvent, ...]
    impact: str
    jurisdiction: Optional[Jurisdiction]


def group_by_state(events: Iterable[SimulationEvent]) -> List[StateEvents]:
    grouped: Dict[str, List[SimulationEvent]] = {}
    for event in events:
        grouped.setdefault(event.state, []).append(event)
    return [
        StateEvents(
            state=state,
            events=tuple(items),
            impact=dominant_impact(items),
            jurisdiction=lookup(state),
        )
        for state, items in grouped.items()
    ]


class AppStore:
    """Funnels every mutation through named operations and counts revisions."""

    def __init__(self, playback: Optional[PlaybackEngine] = None) -> None:
        self.playback = playback or PlaybackEngine()
        self._bill: Optional[Bill] = None
        self._events: List[SimulationEvent] = []
        self._warned_states: Set[str] = set()
        self._revision = 0
        self.playback.subscribe(self._on_playback)

    @property
    def revision(self) -> int:
        return self._revision

    @property
    def bill(self) -> Optional[Bill]:
        return self._bill

    @property
    def events(self) -> Tuple[SimulationEvent, ...]:
        return tuple(self._events)

    @property
    def playback_state(self) -> PlaybackState:
        return self.playback.state

    # --- bill -----------------------------------------------------------
    def set_bill(self, bill: Optional[Bill]) -> None:
        self._bill = bill
        self._bump()

    def clear_bill(self) -> None:
        self.set_bill(None)

    # --- events ---------------------------------------------------------
    def add_event(self, event: SimulationEvent) -> None:
        self.add_events([event])

    def add_events(self, events: Iterable[SimulationEvent]) -> None:
        added = list(events)
        for event in added:
            if event.state not in self._warned_states and not is_known(event.state):
                self._warned_states.add(event.state)
                LOGGER.warning("Event %s names unknown jurisdiction %r; it cannot be placed on the map", event.id, event.state)
        self._events.extend(added)
        self._bump()

    def clear_events(self) -> None:
        self._events = []
        self._bump()

    def visible_events(self, as_of: Optional[date] = None) -> List[SimulationEvent]:
        """Events on or before ``as_of`` (default: the playback cursor)."""

        return events_up_to(self._events, as_of or self.playback.current_date)

    def events_by_state(self, as_of: Optional[date] = None) -> List[StateEvents]:
        return group_by_state(self.visible_events(as_of))

    # --- simulation -----------------------------------------------------
    def reset_simulation(self) -> None:
        """Drop the bill and all events and start playback from a fresh range."""

        self._bill = None
        self._events = []
        self.playback.reset()
        self._bump()

    def touch(self) -> None:
        """Mark the state as changed for pollers without mutating it."""

        self._bump()

    def _on_playback(self, _: PlaybackState) -> None:
        self._bump()

    def _bump(self) -> None:
        self._revision += 1


__all__ = [
    "AppStore",
    "StateEvents",
    "dominant_impact",
    "events_up_to",
    "group_by_state",
]
