"""Language model backed analyst."""
from __future__ import annotations

from typing import List, Protocol
import json
import logging

from ..core.errors import EmptyInputError
from ..core.types import BillAnalysis, DateRange, SimulationEvent
from .base import parse_analysis_response, parse_simulation_response

LOGGER = logging.getLogger(__name__)

ANALYSIS_SYSTEM_PROMPT = """You are an expert policy analyst. Analyze the provided congressional bill and extract structured information about its clauses, affected states, and potential impacts.

Return your analysis as a JSON object with this structure:
{
  "billId": "unique-id",
  "title": "Short title of the bill",
  "summary": "2-3 sentence summary of the bill's main purpose",
  "clauses": [
    {
      "id": "unique-id",
      "title": "Clause title",
      "summary": "Brief description of what this clause does",
      "affectedStates": ["State Name 1", "State Name 2"],
      "category": "healthcare|economy|environment|education|infrastructure|defense|social|other"
    }
  ],
  "overallImpact": "positive|negative|mixed|neutral",
  "estimatedTimeframe": {
    "immediate": true,
    "shortTerm": true,
    "longTerm": false
  }
}

Use full state names (e.g. "California", not "CA"). Be realistic about which states would be most affected by each clause."""

SIMULATION_SYSTEM_PROMPT = """You are an expert policy simulation engine. Based on the provided bill analysis, generate a series of realistic events that would occur as the bill takes effect across different states.

Return your simulation as a JSON array of events:
[
  {
    "id": "unique-id",
    "state": "State Name",
    "date": "YYYY-MM-DD",
    "title": "Brief event title",
    "description": "Detailed description of what happened",
    "impact": "positive|negative|neutral"
  }
]

Distribute the events across the date range, with more events in the states most affected by the bill. Events should be specific to each state's situation."""


class ChatBackend(Protocol):
    """A chat completion service answering one system and one user prompt."""

    def complete(self, system_prompt: str, user_prompt: str) -> str: ...

    def close(self) -> None: ...


class RemoteAnalyst:
    """Analyst delegating both steps to a chat completion backend."""

    def __init__(self, backend: ChatBackend) -> None:
        self._backend = backend

    def analyze(self, bill_text: str) -> BillAnalysis:
        text = (bill_text or "").strip()
        if not text:
            raise EmptyInputError("Cannot analyse an empty bill")
        raw = self._backend.complete(ANALYSIS_SYSTEM_PROMPT, f"Analyze this congressional bill:\n\n{text}")
        analysis = parse_analysis_response(raw)
        LOGGER.info("Analysed bill %r: %d clauses", analysis.title, len(analysis.clauses))
        return analysis

    def simulate(self, analysis: BillAnalysis, date_range: DateRange) -> List[SimulationEvent]:
        user_prompt = (
            "Generate simulation events for this bill analysis over the period "
            f"{date_range.start.isoformat()} to {date_range.end.isoformat()}:\n\n"
            f"{json.dumps(analysis.to_dict(), indent=2)}"
        )
        raw = self._backend.complete(SIMULATION_SYSTEM_PROMPT, user_prompt)
        events = parse_simulation_response(raw)
        in_range = [event for event in events if event.date in date_range]
        dropped = len(events) - len(in_range)
        if dropped:
            LOGGER.warning(
                "Dropped %d simulated events outside %s..%s",
                dropped,
                date_range.start,
                date_range.end,
            )
        return in_range

    def close(self) -> None:
        self._backend.close()


__all__ = [
    "ANALYSIS_SYSTEM_PROMPT",
    "ChatBackend",
    "RemoteAnalyst",
    "SIMULATION_SYSTEM_PROMPT",
]
