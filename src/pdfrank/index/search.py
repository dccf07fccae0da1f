"""TF-IDF ranking over a corpus index."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

from pdfrank.index.corpus import CorpusIndex
from pdfrank.models import Document
from pdfrank.utils.text import tokenize


@dataclass(slots=True, frozen=True)
class SearchResult:
    id: str
    score: float


def idf(index: CorpusIndex, term: str) -> float:
    """Inverse document frequency: ``ln(N / (1 + df))``.

    The ``+1`` keeps the ratio defined for unseen terms. With this smoothing
    a term present in every document gets a negative weight.
    """
    return math.log(index.document_count / (1 + index.term_document_frequency(term)))


def tf(document: Document, term: str) -> float:
    """Fraction of the document's terms equal to ``term``."""
    count = document.term_frequencies.get(term, 0)
    if not count:
        return 0.0
    return count / document.total_terms


def search(index: CorpusIndex, query: str) -> List[SearchResult]:
    """Rank the documents of ``index`` against ``query``.

    Repeated query terms count once. Documents sharing no term with the query
    are not matches and are left out. Results are ordered by descending score,
    ties keeping indexing order; the list is not truncated.
    """
    terms = sorted(set(tokenize(query)))
    if not terms or not index.document_count:
        return []

    weights = {term: idf(index, term) for term in terms}
    scored = []
    for position, document in enumerate(index.documents):
        matched = [term for term in terms if term in document.term_frequencies]
        if not matched:
            continue
        score = sum(tf(document, term) * weights[term] for term in matched)
        scored.append((position, document.id, score))

    scored.sort(key=lambda item: (-item[2], item[0]))
    return [SearchResult(id=doc_id, score=score) for _, doc_id, score in scored]


class Searcher:
    """High-level API to query a corpus index."""

    def __init__(self, index: CorpusIndex) -> None:
        self.index = index

    def search(self, query: str, *, top_k: Optional[int] = None) -> List[SearchResult]:
        results = search(self.index, query)
        if top_k is not None:
            results = results[: max(top_k, 0)]
        return results
