"""Exceptions raised by pdfrank."""

from __future__ import annotations


class PdfRankError(Exception):
    """Base class for all pdfrank errors."""


class ExtractionError(PdfRankError):
    """A source file could not be read or parsed."""


class EmptyDocumentError(PdfRankError):
    """A source produced no indexable terms."""


class DuplicateDocumentIdError(PdfRankError):
    """A document with the same id is already indexed."""


class DocumentNotFoundError(PdfRankError, KeyError):
    """No document with the requested id is indexed."""

    def __str__(self) -> str:
        # KeyError.__str__ quotes the message
        return Exception.__str__(self)


class CorruptIndexError(PdfRankError):
    """A persisted index failed validation on load."""
