"""Bill analysis and impact simulation."""
from __future__ import annotations

from .base import ImpactAnalyst, parse_analysis_response, parse_simulation_response
from .local import LocalAnalyst
from .remote import ChatBackend, RemoteAnalyst

__all__ = [
    "ChatBackend",
    "ImpactAnalyst",
    "LocalAnalyst",
    "RemoteAnalyst",
    "parse_analysis_response",
    "parse_simulation_response",
]
