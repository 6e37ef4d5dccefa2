"""Translate user intents into store operations and keep a user visible status."""
from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Deque, Dict, List, Optional
import logging

from .analysis import ImpactAnalyst
from .core.errors import BillEffectError, EmptyInputError
from .core.types import Bill, BillAnalysis, DateRange
from .ingestion import PdfExtractor, create_bill, read_bill_file
from .store import AppStore

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class LogEntry:
    timestamp: datetime
    stage: str
    message: str
    error: bool = False
    seq: int = 0

    def to_row(self) -> Dict[str, str]:
        return {
            "id": str(self.seq),
            "time": self.timestamp.strftime("%H:%M:%S"),
            "stage": self.stage,
            "message": self.message,
        }


class SimulationSession:
    """Coordinates ingestion, the analysis chain and the store for one user."""

    def __init__(
        self,
        *,
        store: AppStore,
        analyst: ImpactAnalyst,
        pdf_extractor: Optional[PdfExtractor] = None,
        remote: bool = False,
    ) -> None:
        self.store = store
        self._analyst = analyst
        self._pdf_extractor = pdf_extractor
        self.remote = remote
        self._is_analyzing = False
        self._analysis: Optional[BillAnalysis] = None
        self._last_error: Optional[str] = None
        self._log: Deque[LogEntry] = deque(maxlen=100)
        self._log_seq = 0
        # bumped whenever the bill is replaced or cleared; a run started under an
        # older generation must not publish its results
        self._generation = 0

    @property
    def is_analyzing(self) -> bool:
        return self._is_analyzing

    @property
    def analysis(self) -> Optional[BillAnalysis]:
        return self._analysis

    @property
    def last_error(self) -> Optional[str]:
        return self._last_error

    @property
    def pdf_enabled(self) -> bool:
        return self._pdf_extractor is not None

    # --- ingestion ------------------------------------------------------
    def load_text(self, text: str) -> Bill:
        """Replace the live bill with pasted ``text``."""

        try:
            bill = create_bill(text)
        except BillEffectError as exc:
            self._record_error("Ingestion", exc)
            raise
        self._install_bill(bill)
        return bill

    async def load_file(self, filename: str, data: bytes) -> Bill:
        """Replace the live bill with the text of an uploaded file.

        PDF extraction runs in a worker thread; the store is only touched on the
        event loop.
        """

        try:
            text, source = await asyncio.to_thread(
                read_bill_file, filename, data, pdf_extractor=self._pdf_extractor
            )
            bill = create_bill(text, source=source)
        except BillEffectError as exc:
            self._record_error("Ingestion", exc)
            raise
        self._install_bill(bill)
        return bill

    def reset(self) -> None:
        self._generation += 1
        self.store.reset_simulation()
        self._analysis = None
        self._last_error = None
        self._append("Reset", "Simulation cleared")

    # --- simulation -----------------------------------------------------
    async def start_simulation(self) -> bool:
        """Run analysis and simulation for the live bill.

        Returns ``True`` when events were added. A call while another run is
        pending returns ``False`` without contacting the analyst. Results of a
        run whose bill was replaced or reset in the meantime are discarded.
        """

        if self._is_analyzing:
            LOGGER.info("Simulation already in progress - ignoring start request")
            return False
        bill = self.store.bill
        if bill is None:
            self._record_error("Analysis", EmptyInputError("Load a bill before starting the simulation"))
            return False

        generation = self._generation
        self._is_analyzing = True
        self._last_error = None
        self.store.playback.reset()
        self.store.clear_events()
        playback = self.store.playback_state
        date_range = DateRange(playback.start_date, playback.end_date)
        self._append("Analysis", f"Analysing {bill.title}")
        try:
            analysis = await asyncio.to_thread(self._analyst.analyze, bill.content)
            self._append("Analysis", f"Found {len(analysis.clauses)} clauses affecting {len(analysis.affected_states)} states")
            events = await asyncio.to_thread(self._analyst.simulate, analysis, date_range)
        except BillEffectError as exc:
            if generation == self._generation:
                self._record_error("Simulation", exc)
            else:
                LOGGER.info("Ignoring failure of a superseded simulation: %s", exc)
            return False
        finally:
            self._is_analyzing = False

        current = self.store.bill
        if generation != self._generation or current is None or current.id != bill.id:
            LOGGER.info("Discarding results for %r: the bill changed while the simulation ran", bill.title)
            self._append("Simulation", f"Discarded results for {bill.title}; the bill was replaced or reset")
            return False

        self._analysis = analysis
        self.store.set_bill(current.with_key_points(analysis.clauses))
        self.store.add_events(events)
        self._append("Simulation", f"Generated {len(events)} events until {date_range.end.isoformat()}")
        LOGGER.info("Simulation for %r produced %d events", bill.title, len(events))
        return True

    # --- read side ------------------------------------------------------
    def snapshot(self) -> Dict[str, object]:
        playback = self.store.playback_state
        return {
            "revision": self.store.revision,
            "bill": self.store.bill,
            "analysis": self._analysis,
            "playback": playback,
            "visible_events": self.store.visible_events(playback.current_date),
            "states": self.store.events_by_state(playback.current_date),
            "event_total": len(self.store.events),
            "is_analyzing": self._is_analyzing,
            "remote": self.remote,
            "error": self._last_error,
            "log": self.log_rows(),
        }

    def log_rows(self) -> List[Dict[str, str]]:
        return [entry.to_row() for entry in self._log]

    # --- helpers --------------------------------------------------------
    def _install_bill(self, bill: Bill) -> None:
        self._generation += 1
        self.store.set_bill(bill)
        self.store.clear_events()
        self.store.playback.reset()
        self._analysis = None
        self._last_error = None
        self._append("Ingestion", f"Loaded {bill.title}")

    def _record_error(self, stage: str, exc: Exception) -> None:
        LOGGER.warning("%s failed: %s", stage, exc)
        self._last_error = str(exc)
        self._append(stage, str(exc), error=True)

    def _append(self, stage: str, message: str, *, error: bool = False) -> None:
        self._log_seq += 1
        self._log.append(
            LogEntry(
                timestamp=datetime.now(timezone.utc),
                stage=stage,
                message=message,
                error=error,
                seq=self._log_seq,
            )
        )
        self.store.touch()


__all__ = ["LogEntry", "SimulationSession"]
