"""Tests for core data models."""

from __future__ import annotations

import pytest

from pdfrank.models import Document


class TestDocument:
    """Test Document dataclass."""

    def test_create_document(self) -> None:
        """Should create Document with all fields."""
        doc = Document(
            id="/path/to/doc.pdf",
            term_frequencies={"cat": 1, "dog": 2},
            total_terms=3,
            sha256="abc123",
        )

        assert doc.id == "/path/to/doc.pdf"
        assert doc.term_frequencies == {"cat": 1, "dog": 2}
        assert doc.total_terms == 3
        assert doc.sha256 == "abc123"

    def test_sha256_optional(self) -> None:
        doc = Document(id="a", term_frequencies={"x": 1}, total_terms=1)
        assert doc.sha256 is None

    def test_from_counts_computes_total(self) -> None:
        """from_counts should derive total_terms from the counts."""
        doc = Document.from_counts("a", {"cat": 1, "dog": 2, "bird": 4})

        assert doc.total_terms == 7
        assert doc.total_terms == sum(doc.term_frequencies.values())

    def test_from_counts_copies_mapping(self) -> None:
        counts = {"cat": 1}
        doc = Document.from_counts("a", counts)
        counts["dog"] = 5

        assert doc.term_frequencies == {"cat": 1}

    def test_document_equality(self) -> None:
        """Should compare documents by value."""
        doc1 = Document.from_counts("a", {"cat": 1}, sha256="h")
        doc2 = Document.from_counts("a", {"cat": 1}, sha256="h")

        assert doc1 == doc2
        assert doc1 != Document.from_counts("b", {"cat": 1}, sha256="h")


class TestDocumentValidation:
    """Documents that break the term table invariant cannot be created."""

    def test_total_must_match_sum(self) -> None:
        with pytest.raises(ValueError, match="total_terms"):
            Document(id="a", term_frequencies={"dog": 2}, total_terms=5)

    def test_zero_total_rejected(self) -> None:
        with pytest.raises(ValueError):
            Document(id="a", term_frequencies={"dog": 1}, total_terms=0)

    def test_empty_table_rejected(self) -> None:
        with pytest.raises(ValueError, match="no terms"):
            Document(id="a", term_frequencies={}, total_terms=0)

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(ValueError):
            Document.from_counts("", {"dog": 1})

    @pytest.mark.parametrize("count", [0, -1, True, 1.5])
    def test_counts_must_be_positive_ints(self, count) -> None:
        with pytest.raises(ValueError, match="count"):
            Document(id="a", term_frequencies={"dog": count}, total_terms=count)

    def test_float_total_rejected(self) -> None:
        with pytest.raises(ValueError, match="total_terms"):
            Document(id="a", term_frequencies={"dog": 3}, total_terms=3.0)

    def test_validate_catches_later_edits(self) -> None:
        doc = Document.from_counts("a", {"dog": 2})
        doc.term_frequencies["cat"] = 1

        with pytest.raises(ValueError):
            doc.validate()
