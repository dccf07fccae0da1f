"""Utility helpers for locating and fingerprinting source files."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterable, Iterator, Set

PDF_SUFFIX = ".pdf"


def iter_pdf_paths(inputs: Iterable[Path]) -> Iterator[Path]:
    """Yield PDF paths from input paths, descending into directories.

    Directory contents are visited in sorted order and every file is yielded
    at most once, so the same inputs always produce the same sequence.
    """
    seen: Set[Path] = set()
    for path in _walk(inputs):
        key = path.resolve()
        if key in seen:
            continue
        seen.add(key)
        yield path


def _walk(inputs: Iterable[Path]) -> Iterator[Path]:
    for item in inputs:
        item = Path(item)
        if item.is_dir():
            yield from _walk(
                sorted(child for child in item.rglob("*") if child.suffix.lower() == PDF_SUFFIX)
            )
        elif item.is_file() and item.suffix.lower() == PDF_SUFFIX:
            yield item


def document_id(path: Path) -> str:
    """Stable document identifier for a source file: its absolute path."""
    return str(Path(path).resolve())


def compute_sha256(path: Path) -> str:
    """Compute SHA256 hash for a file."""
    sha = hashlib.sha256()
    with Path(path).open("rb") as handle:
        for chunk in iter(lambda: handle.read(1 << 20), b""):
            sha.update(chunk)
    return sha.hexdigest()
