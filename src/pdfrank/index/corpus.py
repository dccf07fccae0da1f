"""In-memory corpus index with document frequency bookkeeping."""

from __future__ import annotations

import logging
import math
import time
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from pdfrank.errors import CorruptIndexError, DocumentNotFoundError, DuplicateDocumentIdError
from pdfrank.models import Document

LOGGER = logging.getLogger(__name__)

# 3000-01-01T00:00:00Z
MAX_TIMESTAMP = 32_503_680_000


def compute_document_frequency(documents: Iterable[Document]) -> Dict[str, int]:
    """Count, for every term, the number of documents containing it."""
    frequency: Dict[str, int] = {}
    for document in documents:
        for term in document.term_frequencies:
            frequency[term] = frequency.get(term, 0) + 1
    return frequency


class CorpusIndex:
    """Ordered collection of documents plus corpus-wide term statistics.

    Insertion order is preserved and used as the ranking tie-break. The index
    is not safe for concurrent mutation: a single writer must serialise
    ``add_document``/``remove_document`` calls, and queries must not run while
    a mutation is in flight.
    """

    def __init__(
        self, documents: Iterable[Document] = (), *, created_at: Optional[float] = None
    ) -> None:
        self.created_at = time.time() if created_at is None else float(created_at)
        self._documents: List[Document] = []
        self._by_id: Dict[str, Document] = {}
        self._document_frequency: Dict[str, int] = {}
        for document in documents:
            self.add_document(document)

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(tuple(self._documents))

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._by_id

    def __repr__(self) -> str:
        return (
            f"CorpusIndex(documents={len(self._documents)}, "
            f"terms={len(self._document_frequency)})"
        )

    @property
    def documents(self) -> Tuple[Document, ...]:
        return tuple(self._documents)

    @property
    def document_count(self) -> int:
        return len(self._documents)

    @property
    def document_frequency(self) -> Mapping[str, int]:
        return MappingProxyType(self._document_frequency)

    def get_document(self, doc_id: str) -> Document:
        try:
            return self._by_id[doc_id]
        except KeyError:
            raise DocumentNotFoundError(f"Document not indexed: {doc_id}") from None

    def term_document_frequency(self, term: str) -> int:
        return self._document_frequency.get(term, 0)

    def add_document(self, document: Document) -> None:
        """Append a document and count its distinct terms.

        Raises:
            DuplicateDocumentIdError: if a document with the same id exists.
                The index is left untouched.
            ValueError: if the document's term table no longer matches its
                ``total_terms``. The index is left untouched.
        """
        document.validate()
        if document.id in self._by_id:
            raise DuplicateDocumentIdError(f"Document already indexed: {document.id}")

        self._documents.append(document)
        self._by_id[document.id] = document
        for term in document.term_frequencies:
            self._document_frequency[term] = self._document_frequency.get(term, 0) + 1

    def remove_document(self, doc_id: str) -> Document:
        """Remove a document and rebuild the document frequency table.

        Raises:
            DocumentNotFoundError: if no document has this id.
        """
        document = self.get_document(doc_id)
        self._documents = [doc for doc in self._documents if doc.id != doc_id]
        del self._by_id[doc_id]
        self._document_frequency = compute_document_frequency(self._documents)
        return document

    def to_persistable(self) -> Dict[str, Any]:
        """Return a JSON-compatible record of the whole index."""
        documents = []
        for document in self._documents:
            entry: Dict[str, Any] = {
                "id": document.id,
                "term_frequencies": dict(document.term_frequencies),
                "total_terms": document.total_terms,
            }
            if document.sha256 is not None:
                entry["sha256"] = document.sha256
            documents.append(entry)
        return {
            "created_at": self.created_at,
            "document_count": len(self._documents),
            "documents": documents,
            "document_frequency": dict(self._document_frequency),
        }

    @classmethod
    def from_persistable(cls, record: Mapping[str, Any]) -> "CorpusIndex":
        """Rebuild an index from :meth:`to_persistable` output.

        Derived fields are recomputed from the documents. When the record
        carries its own ``total_terms``, ``document_frequency`` or
        ``document_count``, they must agree with the recomputed values.

        Raises:
            CorruptIndexError: if the record is malformed or inconsistent.
        """
        if not isinstance(record, Mapping):
            raise CorruptIndexError("Index record must be a mapping")
        raw_documents = record.get("documents")
        if not isinstance(raw_documents, list):
            raise CorruptIndexError("Index record has no 'documents' list")

        created_at = record.get("created_at")
        if created_at is not None and not _is_timestamp(created_at):
            raise CorruptIndexError(f"Invalid created_at: {created_at!r}")

        index = cls(created_at=created_at)
        for position, raw in enumerate(raw_documents):
            document = _parse_document(raw, position)
            try:
                index.add_document(document)
            except DuplicateDocumentIdError as exc:
                raise CorruptIndexError(str(exc)) from exc

        stored_count = record.get("document_count")
        if stored_count is not None and (
            not _is_count(stored_count) or stored_count != index.document_count
        ):
            raise CorruptIndexError(
                f"document_count is {stored_count!r} but {index.document_count} documents were loaded"
            )

        stored_frequency = record.get("document_frequency")
        if stored_frequency is not None and (
            not isinstance(stored_frequency, Mapping)
            or not all(_is_count(count) for count in stored_frequency.values())
            or stored_frequency != index._document_frequency
        ):
            raise CorruptIndexError("document_frequency does not match the stored documents")

        LOGGER.debug("Restored %r", index)
        return index


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_timestamp(value: Any) -> bool:
    # Range datetime.fromtimestamp handles on every platform.
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return math.isfinite(value) and 0 <= value <= MAX_TIMESTAMP


def _parse_document(raw: Any, position: int) -> Document:
    if not isinstance(raw, Mapping):
        raise CorruptIndexError(f"Document #{position} is not a mapping")

    doc_id = raw.get("id")
    if not isinstance(doc_id, str) or not doc_id:
        raise CorruptIndexError(f"Document #{position} has no valid id")

    frequencies = raw.get("term_frequencies")
    if not isinstance(frequencies, Mapping) or not frequencies:
        raise CorruptIndexError(f"Document {doc_id} has no term frequencies")
    for term, count in frequencies.items():
        if not isinstance(term, str) or not term:
            raise CorruptIndexError(f"Document {doc_id} has an invalid term {term!r}")
        if not _is_count(count) or count <= 0:
            raise CorruptIndexError(f"Document {doc_id} has an invalid count for {term!r}")

    sha256 = raw.get("sha256")
    if sha256 is not None and not isinstance(sha256, str):
        raise CorruptIndexError(f"Document {doc_id} has an invalid sha256")

    document = Document.from_counts(doc_id, frequencies, sha256=sha256)
    stored_total = raw.get("total_terms")
    if stored_total is not None and (
        not _is_count(stored_total) or stored_total != document.total_terms
    ):
        raise CorruptIndexError(
            f"Document {doc_id} total_terms is {stored_total!r}, expected {document.total_terms}"
        )
    return document
