from __future__ import annotations

import asyncio
from datetime import date, timedelta

import pytest

from billeffect.playback import SPEEDS, PlaybackEngine, add_years

TODAY = date(2026, 1, 15)


def _assert_in_range(engine: PlaybackEngine) -> None:
    state = engine.state
    assert state.start_date <= state.current_date <= state.end_date


def test_initial_state_spans_horizon(engine):
    state = engine.state
    assert state.is_playing is False
    assert state.speed == 1
    assert state.start_date == state.current_date == TODAY
    assert state.end_date == date(2028, 1, 15)
    assert state.progress == 0.0


def test_tick_advances_one_day_at_every_speed(engine, scheduler):
    engine.play()
    for speed in SPEEDS:
        engine.set_speed(speed)
        before = engine.current_date
        scheduler.fire()
        assert engine.current_date == before + timedelta(days=1)


def test_speed_only_changes_tick_interval():
    engine = PlaybackEngine(base_interval=1.0, scheduler=lambda interval, callback: None, today=lambda: TODAY)
    assert engine.tick_interval == 1.0
    engine.set_speed(2)
    assert engine.tick_interval == 0.5
    engine.set_speed(5)
    assert engine.tick_interval == pytest.approx(0.2)


def test_interval_is_reread_by_scheduler(engine, scheduler):
    engine.play()
    handle = scheduler.active[0]
    assert handle.interval() == 1.0
    engine.set_speed(5)
    assert handle.interval() == pytest.approx(0.2)


def test_unsupported_speed_is_rejected(engine):
    with pytest.raises(ValueError):
        engine.set_speed(3)
    assert engine.state.speed == 1


def test_reaching_end_clamps_and_pauses(engine, scheduler):
    engine.set_date_range(TODAY, TODAY + timedelta(days=3))
    engine.play()
    scheduler.fire(3)
    state = engine.state
    assert state.current_date == state.end_date
    assert state.is_playing is False
    assert scheduler.active == []
    assert engine.has_active_ticker is False


def test_tick_on_last_day_lands_exactly_on_end(engine, scheduler):
    end = TODAY + timedelta(days=10)
    engine.set_date_range(TODAY, end)
    engine.seek(end - timedelta(days=1))
    engine.play()
    scheduler.fire()
    assert engine.current_date == end
    assert engine.is_playing is False


def test_no_ticks_after_pause(engine, scheduler):
    engine.play()
    handle = scheduler.active[0]
    scheduler.fire(2)
    engine.pause()
    assert handle.cancelled is True
    frozen = engine.current_date
    # a late callback from the cancelled action must not move the cursor
    assert handle.callback() is False
    assert engine.current_date == frozen


def test_play_is_idempotent(engine, scheduler):
    engine.play()
    engine.play()
    assert len(scheduler.handles) == 1
    engine.toggle()
    engine.toggle()
    assert len(scheduler.active) == 1
    assert len(scheduler.handles) == 2


def test_seek_clamps_and_keeps_play_state(engine, scheduler):
    engine.play()
    state = engine.state
    assert engine.seek(state.start_date - timedelta(days=30)) == state.start_date
    assert engine.seek(state.end_date + timedelta(days=30)) == state.end_date
    middle = state.start_date + timedelta(days=100)
    assert engine.seek(middle) == middle
    assert engine.is_playing is True


def test_set_date_range_rejects_inverted_bounds(engine):
    with pytest.raises(ValueError):
        engine.set_date_range(date(2027, 1, 2), date(2027, 1, 1))


def test_set_date_range_leaves_cursor_to_caller(engine, scheduler):
    engine.seek(date(2027, 6, 1))
    engine.set_date_range(date(2026, 1, 1), date(2026, 12, 31))
    assert engine.current_date == date(2027, 6, 1)
    # the next tick clamps a cursor beyond the new end
    engine.play()
    scheduler.fire()
    assert engine.current_date == date(2026, 12, 31)
    assert engine.is_playing is False


def test_invariant_holds_across_operations(engine, scheduler):
    operations = [
        engine.play,
        lambda: scheduler.fire(5),
        lambda: engine.seek(date(2000, 1, 1)),
        lambda: engine.set_speed(5),
        lambda: scheduler.fire(3),
        lambda: engine.seek(date(2100, 1, 1)),
        engine.toggle,
        lambda: (engine.set_date_range(date(2026, 3, 1), date(2026, 3, 5)), engine.seek(date(2026, 3, 1))),
        engine.play,
        lambda: scheduler.fire(10),
        engine.reset,
    ]
    for operation in operations:
        operation()
        _assert_in_range(engine)


def test_reset_restores_defaults(engine, scheduler):
    engine.set_speed(5)
    engine.play()
    scheduler.fire(4)
    engine.reset()
    state = engine.state
    assert state.is_playing is False
    assert state.speed == 1
    assert state.current_date == state.start_date == TODAY
    assert scheduler.active == []


def test_listeners_receive_snapshots(engine, scheduler):
    seen = []
    unsubscribe = engine.subscribe(seen.append)
    engine.play()
    scheduler.fire()
    unsubscribe()
    scheduler.fire()
    assert [state.current_date for state in seen] == [TODAY, TODAY + timedelta(days=1)]
    assert seen[0].is_playing is True


def test_add_years_maps_leap_day():
    assert add_years(date(2028, 2, 29), 2) == date(2030, 2, 28)
    assert add_years(date(2028, 2, 29), 4) == date(2032, 2, 29)
    assert add_years(date(2026, 7, 4), 2) == date(2028, 7, 4)


def test_asyncio_ticker_advances_and_stops():
    async def scenario():
        engine = PlaybackEngine(base_interval=0.01, today=lambda: TODAY)
        engine.play()
        engine.play()
        others = [task for task in asyncio.all_tasks() if task is not asyncio.current_task()]
        assert len(others) == 1
        await asyncio.sleep(0.1)
        engine.pause()
        stopped_at = engine.current_date
        await asyncio.sleep(0.05)
        return stopped_at, engine.current_date

    stopped_at, later = asyncio.run(scenario())
    assert stopped_at > TODAY
    assert later == stopped_at
