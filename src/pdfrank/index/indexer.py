"""Document indexing pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Sequence, Tuple

from pdfrank.errors import EmptyDocumentError, ExtractionError
from pdfrank.index.corpus import CorpusIndex
from pdfrank.index.statistics import build_document
from pdfrank.ingestion.pdf_loader import extract_text
from pdfrank.models import Document
from pdfrank.utils.files import compute_sha256, document_id, iter_pdf_paths

LOGGER = logging.getLogger(__name__)


def find_pdfs(paths: Sequence[Path]) -> list[Path]:
    """Find all PDF files under the given paths."""
    return list(iter_pdf_paths(paths))


@dataclass(slots=True)
class IndexStats:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    processed_files: list[Path] = field(default_factory=list)
    failures: list[Tuple[Path, str]] = field(default_factory=list)

    def increment(self, status: str, path: Path) -> None:
        if status == "inserted":
            self.inserted += 1
        elif status == "updated":
            self.updated += 1
        elif status == "skipped":
            self.skipped += 1
        else:
            self.failed += 1
        self.processed_files.append(path)

    def record_failure(self, path: Path, reason: str) -> None:
        self.increment("failed", path)
        self.failures.append((path, reason))

    @property
    def changed(self) -> bool:
        return bool(self.inserted or self.updated)


@dataclass(slots=True)
class _Prepared:
    """Outcome of the per-file work done on a worker thread."""

    status: str
    document: Optional[Document] = None
    reason: str = ""


class Indexer:
    """Builds documents from PDFs and adds them to a corpus index.

    Fingerprinting and text extraction run on a thread pool. Results are
    applied to the index on the calling thread in input order, so the index
    only ever has one writer and its document order does not depend on
    worker scheduling.
    """

    def __init__(self, corpus: CorpusIndex, *, workers: int = 4) -> None:
        self.corpus = corpus
        self.workers = max(1, workers)

    def index(self, paths: Sequence[Path]) -> IndexStats:
        """Index all PDFs found under the given paths."""
        pdf_files = find_pdfs(paths)
        if not pdf_files:
            LOGGER.warning("No PDF files found")
            return IndexStats()

        stats = IndexStats()
        # Snapshot taken before any worker starts; workers never read the corpus.
        known: Dict[str, Optional[str]] = {doc.id: doc.sha256 for doc in self.corpus}

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [
                (path, executor.submit(self._prepare, path, known.get(document_id(path))))
                for path in pdf_files
            ]
            for path, future in futures:
                self._apply(path, future.result(), stats)

        LOGGER.info(
            "Indexed %d files: %d inserted, %d updated, %d skipped, %d failed",
            len(pdf_files),
            stats.inserted,
            stats.updated,
            stats.skipped,
            stats.failed,
        )
        return stats

    def _prepare(self, path: Path, known_sha256: Optional[str]) -> _Prepared:
        """Fingerprint, extract and count one file. Runs on a worker thread."""
        doc_id = document_id(path)
        try:
            sha256 = compute_sha256(path)
            if known_sha256 is not None and known_sha256 == sha256:
                return _Prepared("unchanged")
            LOGGER.info("Processing: %s", path)
            text = extract_text(path)
            return _Prepared("built", build_document(doc_id, text, sha256=sha256))
        except EmptyDocumentError as exc:
            return _Prepared("empty", reason=str(exc))
        except (ExtractionError, OSError) as exc:
            return _Prepared("error", reason=str(exc))
        except Exception as exc:
            LOGGER.exception("Unexpected error while processing %s", path)
            return _Prepared("error", reason=f"{type(exc).__name__}: {exc}")

    def _apply(self, path: Path, prepared: _Prepared, stats: IndexStats) -> None:
        doc_id = document_id(path)
        if prepared.status == "unchanged":
            LOGGER.debug("Unchanged, skipping: %s", path)
            stats.increment("skipped", path)
        elif prepared.status == "empty":
            LOGGER.warning("No text extracted from %s", path)
            if doc_id in self.corpus:
                self.corpus.remove_document(doc_id)
            stats.increment("skipped", path)
        elif prepared.status == "error":
            LOGGER.error("Failed to process %s: %s", path, prepared.reason)
            stats.record_failure(path, prepared.reason)
        else:
            status = "inserted"
            if doc_id in self.corpus:
                self.corpus.remove_document(doc_id)
                status = "updated"
            self.corpus.add_document(prepared.document)
            stats.increment(status, path)

    def prune(self) -> int:
        """Remove documents whose source files no longer exist."""
        missing = [doc.id for doc in self.corpus if not Path(doc.id).exists()]
        for doc_id in missing:
            LOGGER.info("Removing missing file: %s", doc_id)
            self.corpus.remove_document(doc_id)
        return len(missing)
