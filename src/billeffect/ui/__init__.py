"""Interactive map and timeline for Bill Effect."""
from __future__ import annotations

from importlib import import_module
from typing import Any

try:
    run_ui = import_module("billeffect.ui.app").run_ui  # type: ignore[attr-defined]
except ModuleNotFoundError as exc:  # pragma: no cover - only without nicegui
    if exc.name != "nicegui":
        raise
    _missing = exc

    def run_ui(*_: Any, **__: Any) -> None:
        raise ModuleNotFoundError(
            "The map interface needs NiceGUI. Install it with `pip install 'nicegui>=1.4.17,<3'`."
        ) from _missing

__all__ = ["run_ui"]
