"""Typed domain objects shared by ingestion, analysis, the store and the UI."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, get_args
from uuid import uuid4

from .errors import ParseError

Impact = Literal["positive", "negative", "neutral"]
OverallImpact = Literal["positive", "negative", "mixed", "neutral"]
Category = Literal[
    "healthcare",
    "economy",
    "environment",
    "education",
    "infrastructure",
    "defense",
    "social",
    "other",
]
BillSource = Literal["paste", "text", "markdown", "pdf"]

IMPACTS: Tuple[str, ...] = get_args(Impact)
OVERALL_IMPACTS: Tuple[str, ...] = get_args(OverallImpact)
CATEGORIES: Tuple[str, ...] = get_args(Category)


def new_id() -> str:
    """Return a fresh opaque identifier."""

    return uuid4().hex


def _parse_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return date.fromisoformat(value.strip()[:10])
        except ValueError as exc:
            raise ParseError(f"Invalid event date {value!r}") from exc
    raise ParseError(f"Invalid event date {value!r}")


def _require_str(data: Mapping[str, Any], key: str, context: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ParseError(f"{context} is missing a {key!r} string")
    return value.strip()


@dataclass(slots=True, frozen=True)
class BillClause:
    """A categorised clause of a bill together with the jurisdictions it affects."""

    id: str
    title: str
    summary: str
    affected_states: Tuple[str, ...]
    category: Category = "other"

    @classmethod
    def from_dict(cls, data: Any) -> "BillClause":
        if not isinstance(data, Mapping):
            raise ParseError("Clause entry is not an object")
        states = data.get("affectedStates", data.get("affected_states", []))
        if not isinstance(states, list) or not all(isinstance(s, str) for s in states):
            raise ParseError("Clause 'affectedStates' must be a list of state names")
        category = str(data.get("category") or "other").strip().lower()
        if category not in CATEGORIES:
            category = "other"
        return cls(
            id=str(data.get("id") or new_id()),
            title=_require_str(data, "title", "Clause"),
            summary=str(data.get("summary") or ""),
            affected_states=tuple(s.strip() for s in states if s.strip()),
            category=category,  # type: ignore[arg-type]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "summary": self.summary,
            "affectedStates": list(self.affected_states),
            "category": self.category,
        }


@dataclass(slots=True, frozen=True)
class Timeframe:
    """Which horizons the effects of a bill fall into."""

    immediate: bool = False
    short_term: bool = False
    long_term: bool = False


@dataclass(slots=True, frozen=True)
class BillAnalysis:
    """Structured analysis returned by an analyst for a bill text."""

    bill_id: str
    title: str
    summary: str
    clauses: Tuple[BillClause, ...]
    overall_impact: OverallImpact = "mixed"
    timeframe: Timeframe = field(default_factory=Timeframe)

    @property
    def affected_states(self) -> List[str]:
        """All affected jurisdictions in first-mention order."""

        seen: Dict[str, None] = {}
        for clause in self.clauses:
            for state in clause.affected_states:
                seen.setdefault(state, None)
        return list(seen)

    @classmethod
    def from_dict(cls, data: Any) -> "BillAnalysis":
        """Validate the camelCase payload produced by a language model."""

        if not isinstance(data, Mapping):
            raise ParseError("Bill analysis is not a JSON object")
        raw_clauses = data.get("clauses")
        if not isinstance(raw_clauses, list):
            raise ParseError("Bill analysis does not contain a 'clauses' list")
        overall = str(data.get("overallImpact") or "mixed").strip().lower()
        if overall not in OVERALL_IMPACTS:
            overall = "mixed"
        raw_timeframe = data.get("estimatedTimeframe") or {}
        if not isinstance(raw_timeframe, Mapping):
            raise ParseError("'estimatedTimeframe' must be an object")
        return cls(
            bill_id=str(data.get("billId") or new_id()),
            title=_require_str(data, "title", "Bill analysis"),
            summary=str(data.get("summary") or ""),
            clauses=tuple(BillClause.from_dict(entry) for entry in raw_clauses),
            overall_impact=overall,  # type: ignore[arg-type]
            timeframe=Timeframe(
                immediate=bool(raw_timeframe.get("immediate", False)),
                short_term=bool(raw_timeframe.get("shortTerm", False)),
                long_term=bool(raw_timeframe.get("longTerm", False)),
            ),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "billId": self.bill_id,
            "title": self.title,
            "summary": self.summary,
            "clauses": [clause.to_dict() for clause in self.clauses],
            "overallImpact": self.overall_impact,
            "estimatedTimeframe": {
                "immediate": self.timeframe.immediate,
                "shortTerm": self.timeframe.short_term,
                "longTerm": self.timeframe.long_term,
            },
        }


@dataclass(slots=True, frozen=True)
class Bill:
    """The user supplied legislative text currently under analysis."""

    id: str
    title: str
    content: str
    uploaded_at: datetime
    source: BillSource = "paste"
    key_points: Optional[Tuple[BillClause, ...]] = None

    @classmethod
    def create(cls, *, title: str, content: str, source: BillSource = "paste") -> "Bill":
        return cls(
            id=new_id(),
            title=title,
            content=content,
            uploaded_at=datetime.now(timezone.utc),
            source=source,
        )

    def with_key_points(self, clauses: Tuple[BillClause, ...]) -> "Bill":
        return replace(self, key_points=tuple(clauses))


@dataclass(slots=True, frozen=True)
class SimulationEvent:
    """One predicted consequence of a bill in a jurisdiction on a given day."""

    id: str
    state: str
    date: date
    title: str
    description: str
    impact: Impact

    @classmethod
    def from_dict(cls, data: Any) -> "SimulationEvent":
        if not isinstance(data, Mapping):
            raise ParseError("Simulation event is not a JSON object")
        impact = str(data.get("impact") or "").strip().lower()
        if impact not in IMPACTS:
            raise ParseError(f"Unknown event impact {data.get('impact')!r}")
        return cls(
            id=str(data.get("id") or new_id()),
            state=_require_str(data, "state", "Simulation event"),
            date=_parse_date(data.get("date")),
            title=_require_str(data, "title", "Simulation event"),
            description=str(data.get("description") or ""),
            impact=impact,  # type: ignore[arg-type]
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "state": self.state,
            "date": self.date.isoformat(),
            "title": self.title,
            "description": self.description,
            "impact": self.impact,
        }


@dataclass(slots=True, frozen=True)
class DateRange:
    """Inclusive calendar range a simulation is generated for."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Date range start {self.start} lies after end {self.end}")

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def __contains__(self, value: object) -> bool:
        return isinstance(value, date) and self.start <= value <= self.end


__all__ = [
    "Bill",
    "BillAnalysis",
    "BillClause",
    "BillSource",
    "CATEGORIES",
    "Category",
    "DateRange",
    "IMPACTS",
    "Impact",
    "OVERALL_IMPACTS",
    "OverallImpact",
    "SimulationEvent",
    "Timeframe",
    "new_id",
]
