"""Offline analyst producing a canned analysis and randomised events.

Used whenever no language model credential is configured so that the whole
application stays usable without network access.
"""
from __future__ import annotations

from datetime import timedelta
from typing import Callable, Dict, List, Optional
import logging
import random
import re
import time

from ..core.errors import EmptyInputError
from ..core.types import (
    IMPACTS,
    BillAnalysis,
    BillClause,
    DateRange,
    Impact,
    SimulationEvent,
    Timeframe,
    new_id,
)

LOGGER = logging.getLogger(__name__)

_CITATION_TITLE = re.compile(r"(?:H\.R\.|S\.|H\.J\.Res\.|S\.J\.Res\.)\s*\d+[:\s]+([^\n]+)", re.IGNORECASE)
_MARKER_TITLE = re.compile(r"(?:ACT|BILL)[:\s]+([^\n]+)", re.IGNORECASE)

# progress along the range contributed by the clause and the state ordinal
_CLAUSE_STEP = 0.2
_STATE_STEP = 0.05
_JITTER = 0.1
_MAX_PROGRESS = 0.95

_CANNED_SUMMARY = (
    "This bill proposes changes to federal policy that will affect multiple states across the "
    "country. The legislation includes provisions for healthcare, infrastructure, and economic development."
)

_CANNED_CLAUSES = (
    (
        "Healthcare Expansion",
        "Expands Medicare coverage to additional populations in underserved areas.",
        ("Texas", "California", "Florida", "New York", "Arizona"),
        "healthcare",
    ),
    (
        "Infrastructure Investment",
        "Allocates federal funds for highway and bridge repairs in rural states.",
        ("Montana", "Wyoming", "North Dakota", "South Dakota", "Nebraska", "Kansas", "Oklahoma"),
        "infrastructure",
    ),
    (
        "Clean Energy Initiative",
        "Provides tax incentives for renewable energy adoption.",
        ("California", "Texas", "Colorado", "Washington", "Oregon", "Nevada"),
        "environment",
    ),
    (
        "Education Grants",
        "Creates new federal grant program for public schools.",
        ("Mississippi", "Louisiana", "Alabama", "Arkansas", "West Virginia", "Kentucky"),
        "education",
    ),
)

_DESCRIPTIONS: Dict[str, Dict[str, str]] = {
    "healthcare": {
        "positive": "Healthcare coverage expanded in {state}. Local hospitals report more capacity for underserved communities.",
        "negative": "Healthcare providers in {state} are struggling to meet new requirements as administrative costs rise.",
        "neutral": "Healthcare policy changes are taking effect in {state}. Stakeholders are monitoring implementation.",
    },
    "infrastructure": {
        "positive": "Major highway repairs completed in {state}. Commute times are down and economic activity is up.",
        "negative": "Infrastructure projects in {state} face delays and cost overruns. Traffic disruptions continue.",
        "neutral": "Infrastructure assessment underway in {state}. State officials are setting project priorities.",
    },
    "environment": {
        "positive": "Renewable energy installations surge in {state} as solar and wind capacity expands.",
        "negative": "The energy transition in {state} causes short-term job losses in traditional sectors.",
        "neutral": "{state} is evaluating clean energy options while environmental impact studies continue.",
    },
    "education": {
        "positive": "Schools in {state} receive new federal funding. Teacher salaries and resources improve.",
        "negative": "Education mandates create a compliance burden for {state} school districts.",
        "neutral": "The {state} education department is reviewing new grant requirements and eligibility.",
    },
    "economy": {
        "positive": "Economic growth accelerates in {state} with new businesses and jobs.",
        "negative": "Economic uncertainty in {state} as businesses adapt to new regulations.",
        "neutral": "{state} businesses are assessing how the new federal policies affect operations.",
    },
    "defense": {
        "positive": "Defense contracts bring jobs to {state} and military installations expand.",
        "negative": "Defense budget changes affect military communities in {state}.",
        "neutral": "{state} is evaluating defense policy changes while base assessments continue.",
    },
    "social": {
        "positive": "Social programs in {state} expand services to more residents.",
        "negative": "Social program changes in {state} cause adjustment challenges for beneficiaries.",
        "neutral": "{state} is implementing new social program requirements with outreach underway.",
    },
    "other": {
        "positive": "Policy changes bring positive outcomes to {state} residents.",
        "negative": "New federal requirements create challenges for {state} agencies.",
        "neutral": "{state} officials are monitoring implementation and gathering feedback.",
    },
}


def _mock_title(bill_text: str) -> str:
    match = _CITATION_TITLE.search(bill_text) or _MARKER_TITLE.search(bill_text)
    if match and match.group(1).strip():
        return match.group(1).strip()
    return "Uploaded Bill"


def describe_event(category: str, state: str, impact: Impact) -> str:
    templates = _DESCRIPTIONS.get(category, _DESCRIPTIONS["other"])
    return templates[impact].format(state=state)


class LocalAnalyst:
    """Deterministic-shape, randomly jittered stand-in for the remote analyst."""

    def __init__(
        self,
        *,
        analysis_delay: float = 1.5,
        simulation_delay: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
        rng: Optional[random.Random] = None,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self._analysis_delay = max(0.0, analysis_delay)
        self._simulation_delay = max(0.0, simulation_delay)
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._new_id = id_factory

    def analyze(self, bill_text: str) -> BillAnalysis:
        if not (bill_text or "").strip():
            raise EmptyInputError("Cannot analyse an empty bill")
        self._pause(self._analysis_delay)
        clauses = tuple(
            BillClause(
                id=self._new_id(),
                title=title,
                summary=summary,
                affected_states=states,
                category=category,  # type: ignore[arg-type]
            )
            for title, summary, states, category in _CANNED_CLAUSES
        )
        return BillAnalysis(
            bill_id=self._new_id(),
            title=_mock_title(bill_text),
            summary=_CANNED_SUMMARY,
            clauses=clauses,
            overall_impact="mixed",
            timeframe=Timeframe(immediate=True, short_term=True, long_term=True),
        )

    def simulate(self, analysis: BillAnalysis, date_range: DateRange) -> List[SimulationEvent]:
        self._pause(self._simulation_delay)
        span_days = date_range.span.days
        events: List[SimulationEvent] = []
        for clause_index, clause in enumerate(analysis.clauses):
            for state_index, state in enumerate(clause.affected_states):
                base = clause_index * _CLAUSE_STEP + state_index * _STATE_STEP
                progress = min(base + self._rng.random() * _JITTER, _MAX_PROGRESS)
                impact: Impact = self._rng.choice(IMPACTS)  # type: ignore[assignment]
                events.append(
                    SimulationEvent(
                        id=self._new_id(),
                        state=state,
                        date=date_range.start + timedelta(days=int(span_days * progress)),
                        title=f"{clause.category.capitalize()} Impact in {state}",
                        description=describe_event(clause.category, state, impact),
                        impact=impact,
                    )
                )
        events.sort(key=lambda event: event.date)
        LOGGER.info(
            "Generated %d offline events between %s and %s",
            len(events),
            date_range.start,
            date_range.end,
        )
        return events

    def close(self) -> None:
        """Nothing to release."""

    def _pause(self, seconds: float) -> None:
        if seconds:
            self._sleep(seconds)


__all__ = ["LocalAnalyst", "describe_event"]
