"""JSON file persistence for the corpus index."""

from __future__ import annotations

import json
import logging
import os
import tempfile
import time
from datetime import timedelta
from pathlib import Path
from typing import Optional

from pdfrank.errors import CorruptIndexError
from pdfrank.index.corpus import CorpusIndex

LOGGER = logging.getLogger(__name__)

FORMAT_VERSION = 1


class IndexStore:
    """Reads and writes a :class:`CorpusIndex` as a single JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> CorpusIndex:
        """Load and validate the stored index.

        Raises:
            FileNotFoundError: if no index file exists.
            CorruptIndexError: if the file is not valid UTF-8 JSON, has an
                unsupported format version or fails validation.
        """
        with self.path.open("r", encoding="utf-8") as handle:
            try:
                record = json.load(handle)
            except (json.JSONDecodeError, UnicodeDecodeError) as exc:
                raise CorruptIndexError(f"{self.path} is not valid JSON: {exc}") from exc

        if not isinstance(record, dict):
            raise CorruptIndexError(f"{self.path} does not contain an index record")
        version = record.get("format_version", FORMAT_VERSION)
        if version != FORMAT_VERSION:
            raise CorruptIndexError(f"Unsupported index format version: {version!r}")

        index = CorpusIndex.from_persistable(record)
        LOGGER.info("Loaded %d documents from %s", index.document_count, self.path)
        return index

    def save(self, index: CorpusIndex) -> None:
        """Write the index atomically, replacing any previous file."""
        record = {"format_version": FORMAT_VERSION, **index.to_persistable()}
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(record, handle, ensure_ascii=False)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        LOGGER.info("Saved %d documents to %s", index.document_count, self.path)


def is_stale(index: CorpusIndex, max_age: timedelta, *, now: Optional[float] = None) -> bool:
    """Return True when the index was built longer than ``max_age`` ago."""
    current = time.time() if now is None else now
    return current - index.created_at > max_age.total_seconds()
