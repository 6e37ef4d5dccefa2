"""Application state."""
from __future__ import annotations

from .state import AppStore, StateEvents, dominant_impact, events_up_to, group_by_state

__all__ = ["AppStore", "StateEvents", "dominant_impact", "events_up_to", "group_by_state"]
