"""Core pdfrank data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Mapping, Optional


@dataclass(slots=True)
class Document:
    """Term statistics for one indexed source file.

    ``total_terms`` caches the sum of ``term_frequencies`` and is used to
    normalise term frequency at query time. Documents are built once and
    replaced wholesale on re-indexing, never edited in place.

    Raises:
        ValueError: if the id is empty, the term table is empty, a count is
            not a positive integer or ``total_terms`` differs from the sum.
    """

    id: str
    term_frequencies: Dict[str, int]
    total_terms: int
    sha256: Optional[str] = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if not isinstance(self.id, str) or not self.id:
            raise ValueError(f"Document id must be a non-empty string, got {self.id!r}")
        if not self.term_frequencies:
            raise ValueError(f"Document {self.id} has no terms")
        for term, count in self.term_frequencies.items():
            if not isinstance(term, str) or not term:
                raise ValueError(f"Document {self.id} has an invalid term {term!r}")
            if not isinstance(count, int) or isinstance(count, bool) or count <= 0:
                raise ValueError(f"Document {self.id} has an invalid count {count!r} for {term!r}")
        expected = sum(self.term_frequencies.values())
        if (
            not isinstance(self.total_terms, int)
            or isinstance(self.total_terms, bool)
            or self.total_terms != expected
        ):
            raise ValueError(
                f"Document {self.id} total_terms is {self.total_terms!r}, expected {expected}"
            )

    @classmethod
    def from_counts(
        cls, id: str, counts: Mapping[str, int], sha256: Optional[str] = None
    ) -> "Document":
        term_frequencies = dict(counts)
        return cls(
            id=id,
            term_frequencies=term_frequencies,
            total_terms=sum(term_frequencies.values()),
            sha256=sha256,
        )
