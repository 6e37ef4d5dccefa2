"""Turn pasted text and uploaded files into :class:`~billeffect.core.types.Bill` values."""
from __future__ import annotations

from pathlib import PurePath
from typing import Optional, Protocol, Tuple
import logging
import re

from ..core.errors import ConfigurationError, EmptyInputError, UnsupportedFormatError
from ..core.types import Bill, BillSource

LOGGER = logging.getLogger(__name__)

UNTITLED = "Untitled Bill"
_TITLE_LIMIT = 100
_CITATION_SCAN_LINES = 10
_KEYWORD_MIN, _KEYWORD_MAX = 10, 150

_CITATION_PATTERN = re.compile(
    r"(?<![A-Za-z])"
    r"(?:H\.\s?R\.|H\.\s?J\.\s?Res\.|S\.\s?J\.\s?Res\.|H\.\s?Con\.\s?Res\.|S\.\s?Con\.\s?Res\."
    r"|H\.\s?Res\.|S\.\s?Res\.|S\."
    r"|[ASHL]\.?\s?B\.?|LD|HF|SF)"
    r"\s*\d+\b",
    re.IGNORECASE,
)
_KEYWORD_PATTERN = re.compile(r"\b(?:ACT|BILL)\b", re.IGNORECASE)

_TEXT_SUFFIXES = {".txt": "text", ".text": "text", ".md": "markdown", ".markdown": "markdown"}


class PdfExtractor(Protocol):
    def extract_text(self, filename: str, data: bytes) -> str: ...


def derive_title(content: str) -> str:
    """Guess a human readable title for a bill text."""

    lines = [line.strip() for line in content.strip().splitlines()]
    if not any(lines):
        return UNTITLED

    for line in lines[:_CITATION_SCAN_LINES]:
        if line and _CITATION_PATTERN.search(line):
            return line[:_TITLE_LIMIT]

    for line in lines:
        if _KEYWORD_MIN <= len(line) <= _KEYWORD_MAX and _KEYWORD_PATTERN.search(line):
            return line

    first = next(line for line in lines if line)
    if len(first) > _TITLE_LIMIT:
        return first[:_TITLE_LIMIT].rstrip() + "..."
    return first


def create_bill(content: str, *, source: BillSource = "paste") -> Bill:
    """Validate ``content`` and wrap it in a new :class:`Bill`."""

    text = (content or "").strip()
    if not text:
        raise EmptyInputError("The bill text is empty. Paste or upload some legislation first.")
    bill = Bill.create(title=derive_title(text), content=text, source=source)
    LOGGER.info("Ingested bill %s (%s, %d characters)", bill.title, source, len(text))
    return bill


def read_bill_file(
    filename: str,
    data: bytes,
    *,
    pdf_extractor: Optional[PdfExtractor] = None,
) -> Tuple[str, BillSource]:
    """Return the text contained in an uploaded file and the matching source tag."""

    suffix = PurePath(filename).suffix.lower()
    if suffix in _TEXT_SUFFIXES:
        return data.decode("utf-8", errors="replace"), _TEXT_SUFFIXES[suffix]  # type: ignore[return-value]
    if suffix == ".pdf":
        if pdf_extractor is None:
            raise ConfigurationError(
                "PDF extraction is not configured. Set BILLEFFECT_REDUCTO_API_KEY or paste the text instead."
            )
        return pdf_extractor.extract_text(filename, data), "pdf"
    raise UnsupportedFormatError(f"Unsupported file type {suffix or filename!r}. Use PDF, TXT or Markdown.")


def load_bill_file(
    filename: str,
    data: bytes,
    *,
    pdf_extractor: Optional[PdfExtractor] = None,
) -> Bill:
    text, source = read_bill_file(filename, data, pdf_extractor=pdf_extractor)
    return create_bill(text, source=source)


__all__ = [
    "PdfExtractor",
    "UNTITLED",
    "create_bill",
    "derive_title",
    "load_bill_file",
    "read_bill_file",
]
