"""Bill ingestion from pasted text and uploaded files."""
from __future__ import annotations

from .bills import PdfExtractor, create_bill, derive_title, load_bill_file, read_bill_file

__all__ = ["PdfExtractor", "create_bill", "derive_title", "load_bill_file", "read_bill_file"]
