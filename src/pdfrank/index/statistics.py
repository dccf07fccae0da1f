"""Per-document term statistics."""

from __future__ import annotations

import logging
from collections import Counter
from typing import Optional

from pdfrank.errors import EmptyDocumentError
from pdfrank.models import Document
from pdfrank.utils.text import tokenize

LOGGER = logging.getLogger(__name__)


def build_document(id: str, text: str, *, sha256: Optional[str] = None) -> Document:
    """Tokenize ``text`` and count its terms into a :class:`Document`.

    Raises:
        EmptyDocumentError: if the text is blank or contains no terms.
    """
    if not text or not text.strip():
        raise EmptyDocumentError(f"No text extracted from {id}")

    tokens = tokenize(text)
    if not tokens:
        raise EmptyDocumentError(f"No indexable terms in {id}")

    counts = Counter(tokens)
    LOGGER.debug("Built %s: %d terms, %d distinct", id, len(tokens), len(counts))
    return Document(
        id=id,
        term_frequencies=dict(counts),
        total_terms=len(tokens),
        sha256=sha256,
    )
