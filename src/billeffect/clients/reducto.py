"""HTTP client for the Reducto document parsing API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
import logging

import httpx

from ..core.errors import ConfigurationError, ParseError, TransportError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PdfExtraction:
    """Text extracted from a PDF document."""

    text: str
    page_count: int


class ReductoClient:
    """Minimal client uploading a PDF and collecting the parsed text chunks."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        *,
        timeout: float = 120.0,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if not api_key:
            raise ConfigurationError(
                "Reducto API key not configured. Set BILLEFFECT_REDUCTO_API_KEY to extract PDF text."
            )
        self._base_url = base_url.rstrip("/")
        self._api_key = api_key
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    # --- public API -----------------------------------------------------
    def extract(self, filename: str, data: bytes) -> PdfExtraction:
        """Upload ``data`` and return the extracted text."""

        upload = self._request(
            "POST",
            "/upload",
            files={"file": (filename, data, "application/pdf")},
            action="upload file",
        )
        file_id = upload.get("file_id")
        if not file_id:
            raise ParseError("Reducto upload response did not contain a file_id")

        parsed = self._request("POST", "/parse", json={"input": file_id}, action="parse document")
        result = parsed.get("result") or {}
        if result.get("type") == "url" and result.get("url"):
            # large documents are returned as a presigned URL
            chunks = self._fetch_remote_chunks(result["url"])
        else:
            chunks = result.get("chunks") or []

        text = self.chunks_to_text(chunks)
        if not text:
            raise ParseError("No text could be extracted from the PDF")
        page_count = (parsed.get("usage") or {}).get("num_pages") or 1
        LOGGER.info("Extracted %d characters from %s (%s pages)", len(text), filename, page_count)
        return PdfExtraction(text=text, page_count=int(page_count))

    def extract_text(self, filename: str, data: bytes) -> str:
        return self.extract(filename, data).text

    def close(self) -> None:
        """Close the underlying HTTP client if this instance created it."""

        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "ReductoClient":  # pragma: no cover - trivial
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # pragma: no cover - trivial
        self.close()

    # --- helpers --------------------------------------------------------
    @staticmethod
    def chunks_to_text(chunks: Iterable[Dict[str, Any]]) -> str:
        """Concatenate chunk text, falling back to ``embed`` and then block content."""

        parts: List[str] = []
        for chunk in chunks:
            if chunk.get("content"):
                parts.append(chunk["content"] + "\n\n")
            elif chunk.get("embed"):
                parts.append(chunk["embed"] + "\n\n")
            elif chunk.get("blocks"):
                for block in chunk["blocks"]:
                    if block.get("content"):
                        parts.append(block["content"] + "\n")
                parts.append("\n")
        return "".join(parts).strip()

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _request(self, method: str, path: str, *, action: str, **kwargs: Any) -> Dict[str, Any]:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.request(method, url, headers=self._headers(), **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            LOGGER.warning("Reducto API returned status %s for %s %s", status, method, url)
            raise TransportError(
                f"Reducto failed to {action}: {status} - {exc.response.text}",
                status_code=status,
            ) from exc
        except httpx.HTTPError as exc:
            LOGGER.warning("HTTP error while requesting %s %s: %s", method, url, exc)
            raise TransportError(f"Reducto failed to {action}: {exc}") from exc
        return self._decode(response)

    def _fetch_remote_chunks(self, url: str) -> List[Dict[str, Any]]:
        try:
            response = self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TransportError(f"Failed to fetch full result: {status}", status_code=status) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Failed to fetch full result: {exc}") from exc
        return self._decode(response).get("chunks") or []

    @staticmethod
    def _decode(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseError("Reducto returned a response that is not JSON") from exc
        if not isinstance(payload, dict):
            raise ParseError("Reducto returned an unexpected JSON payload")
        return payload


__all__ = ["PdfExtraction", "ReductoClient"]
