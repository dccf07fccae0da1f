"""Text helpers: tokenization and whitespace cleanup."""

from __future__ import annotations

import re
from typing import Iterable, List

# Runs of letters and digits; underscore counts as punctuation.
_TOKEN_PATTERN = re.compile(r"[^\W_]+")


def tokenize(text: str) -> List[str]:
    """Split text into lowercase alphanumeric terms.

    Text is lowercased first and then split on whitespace and every
    non-alphanumeric character, so ``"Hello, World!"`` becomes
    ``["hello", "world"]``. Numeric tokens are kept. Empty input yields an
    empty list.
    """
    if not text:
        return []
    return _TOKEN_PATTERN.findall(text.lower())


def normalize_whitespace(lines: Iterable[str]) -> str:
    """Collapse whitespace and join lines."""
    return "\n".join(line.strip() for line in lines if line.strip())
