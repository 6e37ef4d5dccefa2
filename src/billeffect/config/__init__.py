"""Configuration helpers for Bill Effect."""
from __future__ import annotations

from .settings import (
    AnalysisConfig,
    AppConfig,
    GeminiConfig,
    GrokConfig,
    PlaybackConfig,
    ReductoConfig,
    load_config,
    resolve_config_path,
    save_config,
)

__all__ = [
    "AnalysisConfig",
    "AppConfig",
    "GeminiConfig",
    "GrokConfig",
    "PlaybackConfig",
    "ReductoConfig",
    "load_config",
    "resolve_config_path",
    "save_config",
]
