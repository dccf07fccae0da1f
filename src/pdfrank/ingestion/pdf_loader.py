"""PDF text extraction.

Uses PyMuPDF (fitz) for fast PDF text extraction.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import fitz  # PyMuPDF

from pdfrank.errors import ExtractionError
from pdfrank.utils.text import normalize_whitespace

LOGGER = logging.getLogger(__name__)


def iter_text_parts(path: Path) -> Iterator[str]:
    """Yield normalized text from a PDF file page by page.

    Raises:
        ExtractionError: if the file cannot be opened as a PDF.
    """
    try:
        doc = fitz.open(path)
    except Exception as exc:
        raise ExtractionError(f"Failed to open PDF {path}: {exc}") from exc

    try:
        for index in range(len(doc)):
            try:
                text = doc[index].get_text() or ""
            except Exception as exc:
                LOGGER.warning("Failed to read page %s in %s: %s", index, path, exc)
                continue
            normalized = normalize_whitespace(text.splitlines())
            if normalized:
                yield normalized
    finally:
        doc.close()


def extract_text(path: Path) -> str:
    """Return the text of every readable page, one page per block."""
    return "\n".join(iter_text_parts(path))
