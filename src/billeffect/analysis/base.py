"""Contract shared by the offline and the remote analysts."""
from __future__ import annotations

from typing import Any, List, Protocol
import json
import logging
import re

from ..core.errors import ParseError
from ..core.types import BillAnalysis, DateRange, SimulationEvent

LOGGER = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")
_JSON_ARRAY = re.compile(r"\[[\s\S]*\]")


class ImpactAnalyst(Protocol):
    """Produces a bill analysis and the simulated events derived from it."""

    def analyze(self, bill_text: str) -> BillAnalysis: ...

    def simulate(self, analysis: BillAnalysis, date_range: DateRange) -> List[SimulationEvent]: ...


def _load_first(pattern: re.Pattern[str], raw: str, what: str) -> Any:
    match = pattern.search(raw or "")
    if not match:
        raise ParseError(f"Failed to parse {what} response")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise ParseError(f"{what.capitalize()} response is not valid JSON: {exc.msg}") from exc


def parse_analysis_response(raw: str) -> BillAnalysis:
    """Parse the first ``{...}`` block of ``raw`` into a :class:`BillAnalysis`."""

    return BillAnalysis.from_dict(_load_first(_JSON_OBJECT, raw, "bill analysis"))


def parse_simulation_response(raw: str) -> List[SimulationEvent]:
    """Parse the first ``[...]`` block of ``raw`` into simulation events."""

    payload = _load_first(_JSON_ARRAY, raw, "simulation")
    if not isinstance(payload, list):  # pragma: no cover - the pattern only matches arrays
        raise ParseError("Simulation response is not a JSON array")
    events = [SimulationEvent.from_dict(entry) for entry in payload]
    LOGGER.debug("Parsed %d simulation events", len(events))
    return events


__all__ = ["ImpactAnalyst", "parse_analysis_response", "parse_simulation_response"]
