"""Error kinds surfaced to the user at the ingestion, analysis and simulation boundaries."""
from __future__ import annotations

from typing import Optional


class BillEffectError(RuntimeError):
    """Base class for all recoverable application errors."""


class EmptyInputError(BillEffectError):
    """Raised when ingested bill text is blank."""


class UnsupportedFormatError(BillEffectError):
    """Raised when a file type cannot be turned into bill text."""


class TransportError(BillEffectError):
    """Raised when a remote call fails, including non-success HTTP status codes."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(BillEffectError):
    """Raised when a remote response does not contain the expected payload."""


class ConfigurationError(BillEffectError):
    """Raised when remote mode is requested without a credential."""


__all__ = [
    "BillEffectError",
    "ConfigurationError",
    "EmptyInputError",
    "ParseError",
    "TransportError",
    "UnsupportedFormatError",
]
