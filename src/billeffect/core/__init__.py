"""Domain types and error kinds."""
from __future__ import annotations

from .errors import (
    BillEffectError,
    ConfigurationError,
    EmptyInputError,
    ParseError,
    TransportError,
    UnsupportedFormatError,
)
from .jurisdictions import JURISDICTIONS, Jurisdiction
from .types import (
    Bill,
    BillAnalysis,
    BillClause,
    DateRange,
    SimulationEvent,
    Timeframe,
)

__all__ = [
    "Bill",
    "BillAnalysis",
    "BillClause",
    "BillEffectError",
    "ConfigurationError",
    "DateRange",
    "EmptyInputError",
    "JURISDICTIONS",
    "Jurisdiction",
    "ParseError",
    "SimulationEvent",
    "Timeframe",
    "TransportError",
    "UnsupportedFormatError",
]
