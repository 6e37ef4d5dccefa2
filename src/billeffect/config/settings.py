"""Application configuration helpers for Bill Effect."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
import types
from typing import Any, Callable, Dict, Optional, Type, TypeVar, Union, get_args, get_origin, get_type_hints


_ENV_PREFIX = "BILLEFFECT_"
_DEFAULT_CONFIG_LOCATIONS = (
    Path("billeffect.json"),
    Path.home() / ".config" / "billeffect" / "config.json",
)


@dataclass(slots=True)
class AnalysisConfig:
    """Selection between the offline analyst and a remote language model."""

    mode: str = "auto"
    provider: str = "grok"
    analysis_delay: float = 1.5
    simulation_delay: float = 1.0
    seed: Optional[int] = None


@dataclass(slots=True)
class GrokConfig:
    """Configuration for the x.ai chat completion API."""

    api_key: Optional[str] = None
    base_url: str = "https://api.x.ai/v1"
    model: str = "grok-3-fast"
    temperature: float = 0.7
    timeout: float = 120.0


@dataclass(slots=True)
class GeminiConfig:
    """Configuration for the Gemini API."""

    api_key: Optional[str] = None
    base_url: str = "https://generativelanguage.googleapis.com"
    model: str = "gemini-2.5-pro"
    timeout: float = 120.0


@dataclass(slots=True)
class ReductoConfig:
    """Configuration for the Reducto document parsing API."""

    api_key: Optional[str] = None
    base_url: str = "https://platform.reducto.ai"
    timeout: float = 120.0


@dataclass(slots=True)
class PlaybackConfig:
    """Timeline defaults."""

    horizon_years: int = 2
    base_interval: float = 1.0


@dataclass(slots=True)
class AppConfig:
    """High level application configuration."""

    analysis: AnalysisConfig
    grok: GrokConfig
    gemini: GeminiConfig
    reducto: ReductoConfig
    playback: PlaybackConfig

    @classmethod
    def defaults(cls) -> "AppConfig":
        return cls(
            analysis=AnalysisConfig(),
            grok=GrokConfig(),
            gemini=GeminiConfig(),
            reducto=ReductoConfig(),
            playback=PlaybackConfig(),
        )


_SECTION_TYPES: Dict[str, type] = {
    "analysis": AnalysisConfig,
    "grok": GrokConfig,
    "gemini": GeminiConfig,
    "reducto": ReductoConfig,
    "playback": PlaybackConfig,
}

_TRUTHY = frozenset({"true", "1", "yes", "y", "on"})
_FALSY = frozenset({"false", "0", "no", "n", "off"})


def _env_overrides(section: str) -> Dict[str, str]:
    """Return ``BILLEFFECT_<SECTION>_<FIELD>`` variables keyed by field name."""

    prefix = f"{_ENV_PREFIX}{section.upper()}_"
    return {
        key[len(prefix):].lower(): value
        for key, value in os.environ.items()
        if key.startswith(prefix)
    }


def _read_json(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        return {}
    return json.loads(path.read_text(encoding="utf8")) or {}


def _first_config_file() -> Dict[str, Any]:
    for candidate in _DEFAULT_CONFIG_LOCATIONS:
        data = _read_json(candidate)
        if data:
            return data
    return {}


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUTHY:
            return True
        if lowered in _FALSY:
            return False
    raise ValueError(f"Cannot convert {value!r} to bool")


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Cannot convert {value!r} to int")
    if isinstance(value, int):
        return value
    return int(float(value))


_CONVERTERS: Dict[Any, Callable[[Any], Any]] = {
    bool: _to_bool,
    int: _to_int,
    float: float,
    str: str,
}


def _convert(value: Any, annotation: Any) -> Any:
    """Convert a raw file or environment value to the annotated field type.

    ``Optional`` fields treat blank strings as ``None`` so that an empty
    ``BILLEFFECT_GROK_API_KEY=`` switches remote analysis off.
    """

    if value is None:
        return None
    if get_origin(annotation) in (Union, types.UnionType):
        candidates = [arg for arg in get_args(annotation) if arg is not type(None)]  # noqa: E721
        if isinstance(value, str) and not value.strip():
            return None
        annotation = candidates[0]
    converter = _CONVERTERS.get(annotation)
    return converter(value) if converter else value


T = TypeVar("T")


def _build_section(name: str, cls: Type[T], values: Dict[str, Any]) -> T:
    hints = get_type_hints(cls)
    kwargs: Dict[str, Any] = {}
    for item in fields(cls):
        if item.name not in values:
            continue
        raw = values[item.name]
        try:
            kwargs[item.name] = _convert(raw, hints[item.name])
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid value for {name}.{item.name}: {raw!r}") from exc
    return cls(**kwargs)


def _validate(config: AppConfig) -> AppConfig:
    if config.analysis.mode not in {"auto", "local", "remote"}:
        raise ValueError(f"Unknown analysis mode {config.analysis.mode!r}")
    if config.analysis.provider not in {"grok", "gemini"}:
        raise ValueError(f"Unknown analysis provider {config.analysis.provider!r}")
    if config.playback.horizon_years < 0:
        raise ValueError("Playback horizon must not be negative")
    if config.playback.base_interval <= 0:
        raise ValueError("Playback base interval must be positive")
    return config


def resolve_config_path(explicit_path: Optional[Path] = None) -> Path:
    """Return ``explicit_path``, else the first existing default location.

    Without any file the per-user location ``~/.config/billeffect/config.json``
    is returned so that :func:`save_config` has somewhere to write.
    """

    if explicit_path:
        return explicit_path
    existing = next((path for path in _DEFAULT_CONFIG_LOCATIONS if path.exists()), None)
    return existing or _DEFAULT_CONFIG_LOCATIONS[-1]


def load_config(explicit_path: Optional[Path] = None) -> AppConfig:
    """Build the configuration from dataclass defaults, a JSON file and the environment.

    Later sources win. Environment variables are named
    ``BILLEFFECT_<SECTION>_<FIELD>``, e.g. ``BILLEFFECT_GROK_API_KEY`` or
    ``BILLEFFECT_PLAYBACK_BASE_INTERVAL``.
    """

    file_data = _read_json(explicit_path) if explicit_path else _first_config_file()
    sections: Dict[str, Any] = {}
    for name, cls in _SECTION_TYPES.items():
        values = {key: value for key, value in (file_data.get(name) or {}).items() if value is not None}
        values.update(_env_overrides(name))
        sections[name] = _build_section(name, cls, values)
    return _validate(AppConfig(**sections))


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    """Write ``config`` as JSON and return the path written to."""

    target = resolve_config_path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    payload = {name: asdict(getattr(config, name)) for name in _SECTION_TYPES}
    target.write_text(json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n", encoding="utf8")
    return target


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
