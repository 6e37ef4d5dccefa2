from __future__ import annotations

import asyncio
import random
import threading
from datetime import date

import pytest

from billeffect.analysis import LocalAnalyst
from billeffect.core.errors import EmptyInputError, TransportError, UnsupportedFormatError
from billeffect.session import SimulationSession
from billeffect.store import AppStore


def _local() -> LocalAnalyst:
    return LocalAnalyst(analysis_delay=0, simulation_delay=0, rng=random.Random(5))


class GatedAnalyst:
    """Blocks inside ``analyze`` until the test opens the gate."""

    def __init__(self) -> None:
        self.gate = threading.Event()
        self.started = threading.Event()
        self.calls = 0
        self._delegate = _local()

    def analyze(self, bill_text):
        self.calls += 1
        self.started.set()
        self.gate.wait(timeout=5)
        return self._delegate.analyze(bill_text)

    def simulate(self, analysis, date_range):
        return self._delegate.simulate(analysis, date_range)


class FailingAnalyst:
    def analyze(self, bill_text):
        raise TransportError("Grok API error: 500 Internal Server Error", status_code=500)

    def simulate(self, analysis, date_range):  # pragma: no cover - never reached
        raise AssertionError("simulate must not run after a failed analysis")


def _session(engine, analyst=None, **kwargs) -> SimulationSession:
    return SimulationSession(store=AppStore(engine), analyst=analyst or _local(), **kwargs)


def test_load_text_installs_bill(engine):
    session = _session(engine)
    bill = session.load_text("H.R. 1234: Clean Water Act\nbody")

    assert session.store.bill == bill
    assert bill.title == "H.R. 1234: Clean Water Act"
    assert session.last_error is None
    assert session.log_rows()[-1]["stage"] == "Ingestion"


def test_blank_text_is_rejected_and_recorded(engine):
    session = _session(engine)
    with pytest.raises(EmptyInputError):
        session.load_text("   ")

    assert session.store.bill is None
    assert session.last_error


def test_load_file_reads_markdown(engine):
    session = _session(engine)
    bill = asyncio.run(session.load_file("bill.md", b"# The Housing Act of 2026\ntext"))

    assert bill.source == "markdown"
    assert session.store.bill is bill


def test_load_file_rejects_unknown_format(engine):
    session = _session(engine)
    with pytest.raises(UnsupportedFormatError):
        asyncio.run(session.load_file("bill.docx", b"data"))
    assert "Unsupported" in session.last_error


def test_start_without_bill_reports_error(engine):
    session = _session(engine)

    assert asyncio.run(session.start_simulation()) is False
    assert session.last_error
    assert session.store.events == ()


def test_start_simulation_populates_store(engine):
    session = _session(engine)
    session.load_text("H.R. 1234: Clean Water Act\nbody")
    engine.seek(date(2027, 1, 1))

    assert asyncio.run(session.start_simulation()) is True

    store = session.store
    state = store.playback_state
    assert state.current_date == state.start_date
    assert len(store.events) == 24
    assert all(state.start_date <= event.date <= state.end_date for event in store.events)
    assert store.bill.key_points == session.analysis.clauses
    assert session.is_analyzing is False

    engine.seek(state.end_date)
    snapshot = session.snapshot()
    assert len(snapshot["visible_events"]) == 24
    assert {group.state for group in snapshot["states"]} == set(session.analysis.affected_states)
    assert snapshot["remote"] is False


def test_restart_replaces_previous_events(engine):
    session = _session(engine)
    session.load_text("A bill")
    asyncio.run(session.start_simulation())
    asyncio.run(session.start_simulation())

    assert len(session.store.events) == 24


def test_failed_analysis_is_recorded(engine):
    session = _session(engine, FailingAnalyst())
    session.load_text("A bill")

    assert asyncio.run(session.start_simulation()) is False
    assert session.last_error == "Grok API error: 500 Internal Server Error"
    assert session.is_analyzing is False
    assert session.store.events == ()
    assert session.store.bill is not None
    assert session.snapshot()["error"] == session.last_error


def test_second_start_is_ignored_while_analysing(engine):
    analyst = GatedAnalyst()
    session = _session(engine, analyst)
    session.load_text("A bill")

    async def scenario():
        first = asyncio.create_task(session.start_simulation())
        await asyncio.to_thread(analyst.started.wait, 5)
        assert session.is_analyzing is True
        second = await session.start_simulation()
        analyst.gate.set()
        return second, await first

    second, first = asyncio.run(scenario())

    assert second is False
    assert first is True
    assert analyst.calls == 1
    assert len(session.store.events) == 24


def test_reset_clears_everything(engine):
    session = _session(engine)
    session.load_text("A bill")
    asyncio.run(session.start_simulation())
    session.reset()

    assert session.store.bill is None
    assert session.store.events == ()
    assert session.analysis is None


def _run_with_interruption(session, analyst, interrupt):
    async def scenario():
        run = asyncio.create_task(session.start_simulation())
        await asyncio.to_thread(analyst.started.wait, 5)
        interrupt()
        analyst.gate.set()
        return await run

    return asyncio.run(scenario())


def test_reset_during_run_discards_results(engine):
    analyst = GatedAnalyst()
    session = _session(engine, analyst)
    session.load_text("H.R. 1: Old Act\nbody")

    result = _run_with_interruption(session, analyst, session.reset)

    assert result is False
    assert session.store.bill is None
    assert session.store.events == ()
    assert session.analysis is None
    assert "Discarded" in session.log_rows()[-1]["message"]


def test_new_bill_during_run_discards_results(engine):
    analyst = GatedAnalyst()
    session = _session(engine, analyst)
    session.load_text("H.R. 1: Old Act\nbody")

    result = _run_with_interruption(session, analyst, lambda: session.load_text("S. 2: New Act"))

    assert result is False
    assert session.store.bill.title == "S. 2: New Act"
    assert session.store.bill.key_points is None
    assert session.store.events == ()
    assert session.analysis is None


def test_failure_of_superseded_run_is_not_reported(engine):
    class GatedFailingAnalyst(GatedAnalyst):
        def analyze(self, bill_text):
            super().analyze(bill_text)
            raise TransportError("Grok API error: 503 Service Unavailable", status_code=503)

    analyst = GatedFailingAnalyst()
    session = _session(engine, analyst)
    session.load_text("H.R. 1: Old Act\nbody")

    result = _run_with_interruption(session, analyst, lambda: session.load_text("S. 2: New Act"))

    assert result is False
    assert session.last_error is None


def test_log_rows_have_unique_ids(engine):
    session = _session(engine)
    session.load_text("A bill")
    session.reset()
    session.load_text("Another bill")

    ids = [row["id"] for row in session.log_rows()]
    assert len(ids) == 3
    assert len(set(ids)) == 3
