"""Visualise the simulated downstream effects of a bill on a US map."""
from __future__ import annotations

from .analysis import ImpactAnalyst, LocalAnalyst, RemoteAnalyst
from .clients import PdfExtraction, ReductoClient
from .config import AppConfig, load_config
from .core import (
    Bill,
    BillAnalysis,
    BillClause,
    BillEffectError,
    ConfigurationError,
    DateRange,
    EmptyInputError,
    ParseError,
    SimulationEvent,
    TransportError,
    UnsupportedFormatError,
)
from .ingestion import create_bill, derive_title
from .playback import PlaybackEngine, PlaybackState
from .runtime import AppResources, create_resources
from .session import SimulationSession
from .store import AppStore, events_up_to

__all__ = [
    "AppConfig",
    "AppResources",
    "AppStore",
    "Bill",
    "BillAnalysis",
    "BillClause",
    "BillEffectError",
    "ConfigurationError",
    "DateRange",
    "EmptyInputError",
    "ImpactAnalyst",
    "LocalAnalyst",
    "ParseError",
    "PdfExtraction",
    "PlaybackEngine",
    "PlaybackState",
    "ReductoClient",
    "RemoteAnalyst",
    "SimulationEvent",
    "SimulationSession",
    "TransportError",
    "UnsupportedFormatError",
    "create_bill",
    "create_resources",
    "derive_title",
    "events_up_to",
    "load_config",
]
