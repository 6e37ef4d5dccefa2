"""Chat completion backend using the Gemini API via the official SDK."""
from __future__ import annotations

from importlib import import_module
from typing import Any, Optional
import logging
import math

import httpx

from ..core.errors import ConfigurationError, ParseError, TransportError

LOGGER = logging.getLogger(__name__)


class GeminiChatBackend:
    """Answers a system instruction plus user prompt with Gemini."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        base_url: str = "https://generativelanguage.googleapis.com",
        model: str = "gemini-2.5-pro",
        temperature: float = 0.7,
        timeout: float = 120.0,
    ) -> None:
        if not api_key:
            raise ConfigurationError("A Gemini API key must be provided for remote analysis")
        self._model = model
        self._temperature = temperature
        self._genai = import_module("google.genai")
        self._types = import_module("google.genai.types")
        self._errors = import_module("google.genai.errors")
        options: dict[str, Any] = {"timeout": max(1, math.ceil(timeout * 1000))}  # milliseconds
        if base_url:
            options["base_url"] = base_url.rstrip("/")
        self._client = self._genai.Client(api_key=api_key, http_options=self._types.HttpOptions(**options))

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        request_config = self._types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=self._temperature,
        )
        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=user_prompt,
                config=request_config,
            )
        except self._errors.APIError as exc:
            LOGGER.warning("Gemini request failed: %s", exc)
            raise TransportError(f"Gemini API error: {exc}", status_code=getattr(exc, "code", None)) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("HTTP error while calling Gemini: %s", exc)
            raise TransportError(f"Gemini request failed: {exc}") from exc
        return _response_text(response)

    def close(self) -> None:
        """The SDK client holds no resources that need closing."""


def _response_text(response: Any) -> str:
    """Text of the response, falling back to the first non-empty candidate part."""

    text = (response.text or "").strip()
    if text:
        return text
    for candidate in response.candidates or ():
        parts = candidate.content.parts if candidate.content else None
        for part in parts or ():
            part_text = (getattr(part, "text", None) or "").strip()
            if part_text:
                return part_text
    raise ParseError("Gemini response did not contain text")


__all__ = ["GeminiChatBackend"]
