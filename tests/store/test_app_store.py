from __future__ import annotations

import logging
from datetime import date, timedelta

from billeffect.core.types import Bill, SimulationEvent
from billeffect.store import AppStore, dominant_impact

TODAY = date(2026, 1, 15)


def _event(state: str, day: date, impact: str = "neutral", event_id: str | None = None) -> SimulationEvent:
    return SimulationEvent(
        id=event_id or f"{state}-{day.isoformat()}",
        state=state,
        date=day,
        title=f"Event in {state}",
        description="",
        impact=impact,  # type: ignore[arg-type]
    )


def _store(engine) -> AppStore:
    store = AppStore(engine)
    store.add_events(
        [
            _event("Texas", TODAY + timedelta(days=30), "positive"),
            _event("Ohio", TODAY + timedelta(days=5), "negative"),
            _event("Texas", TODAY + timedelta(days=200), "negative"),
            _event("Maine", TODAY + timedelta(days=30)),
        ]
    )
    return store


def test_visible_events_are_the_dated_subset_in_insertion_order(engine):
    store = _store(engine)
    visible = store.visible_events(TODAY + timedelta(days=30))

    assert [event.state for event in visible] == ["Texas", "Ohio", "Maine"]
    assert all(event.date <= TODAY + timedelta(days=30) for event in visible)


def test_visible_events_grow_monotonically(engine):
    store = _store(engine)
    previous: set[str] = set()
    for offset in range(0, 260, 10):
        current = {event.id for event in store.visible_events(TODAY + timedelta(days=offset))}
        assert previous <= current
        previous = current
    assert len(previous) == 4


def test_nothing_is_visible_before_the_earliest_event(engine):
    store = _store(engine)
    assert store.visible_events(TODAY + timedelta(days=4)) == []


def test_visible_events_default_to_playback_cursor(engine):
    store = _store(engine)
    assert store.visible_events() == []
    engine.seek(TODAY + timedelta(days=5))
    assert [event.state for event in store.visible_events()] == ["Ohio"]


def test_clear_events_empties_every_view(engine):
    store = _store(engine)
    store.clear_events()
    assert store.events == ()
    assert store.visible_events(TODAY + timedelta(days=1000)) == []


def test_events_by_state_groups_and_colours(engine):
    store = _store(engine)
    groups = {group.state: group for group in store.events_by_state(TODAY + timedelta(days=365))}

    assert set(groups) == {"Texas", "Ohio", "Maine"}
    assert len(groups["Texas"].events) == 2
    assert groups["Texas"].impact == "mixed"
    assert groups["Ohio"].impact == "negative"
    assert groups["Maine"].jurisdiction.abbr == "ME"


def test_dominant_impact_without_events_is_neutral():
    assert dominant_impact([]) == "neutral"


def test_unknown_jurisdiction_is_kept_and_warned_once(engine, caplog):
    store = AppStore(engine)
    with caplog.at_level(logging.WARNING, logger="billeffect.store.state"):
        store.add_event(_event("Atlantis", TODAY, event_id="a1"))
        store.add_event(_event("Atlantis", TODAY, event_id="a2"))

    assert len(store.events) == 2
    assert sum("Atlantis" in record.getMessage() for record in caplog.records) == 1
    (group,) = store.events_by_state(TODAY)
    assert group.jurisdiction is None


def test_known_jurisdictions_are_not_warned_about(engine, caplog):
    store = AppStore(engine)
    with caplog.at_level(logging.WARNING, logger="billeffect.store.state"):
        store.add_events([_event("Texas", TODAY), _event("District of Columbia", TODAY)])

    assert caplog.records == []


def test_revision_counts_mutations_and_playback(engine, scheduler):
    store = AppStore(engine)
    start = store.revision
    store.set_bill(Bill.create(title="T", content="text"))
    assert store.revision == start + 1
    engine.play()
    scheduler.fire()
    assert store.revision == start + 3


def test_reset_simulation_drops_bill_and_events(engine):
    store = _store(engine)
    store.set_bill(Bill.create(title="T", content="text"))
    engine.seek(TODAY + timedelta(days=50))
    store.reset_simulation()

    assert store.bill is None
    assert store.events == ()
    assert store.playback_state.current_date == TODAY
