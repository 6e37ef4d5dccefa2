"""Clients for third-party document services."""
from __future__ import annotations

from .reducto import PdfExtraction, ReductoClient

__all__ = ["PdfExtraction", "ReductoClient"]
