"""Chat completion backend for the x.ai Grok API."""
from __future__ import annotations

from typing import Any, Dict, Optional
import logging

import httpx

from ..core.errors import ConfigurationError, ParseError, TransportError

LOGGER = logging.getLogger(__name__)


class GrokChatBackend:
    """Sends one system and one user message to ``/chat/completions``."""

    def __init__(
        self,
        *,
        api_key: Optional[str],
        base_url: str = "https://api.x.ai/v1",
        model: str = "grok-3-fast",
        temperature: float = 0.7,
        timeout: float = 120.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError("A Grok API key must be provided for remote analysis")
        self._api_key = api_key
        self._url = f"{base_url.rstrip('/')}/chat/completions"
        self._model = model
        self._temperature = temperature
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        body = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": self._temperature,
        }
        try:
            response = self._client.post(self._url, headers=self._headers(), json=body)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            LOGGER.warning("Grok API returned status %s", status)
            raise TransportError(
                f"Grok API error: {status} {exc.response.reason_phrase}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("HTTP error while calling Grok: %s", exc)
            raise TransportError(f"Grok API request failed: {exc}") from exc
        return self._extract_text(response)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }

    @staticmethod
    def _extract_text(response: httpx.Response) -> str:
        try:
            data: Any = response.json()
        except ValueError as exc:
            raise ParseError("Grok returned a response that is not JSON") from exc
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            return ""


__all__ = ["GrokChatBackend"]
