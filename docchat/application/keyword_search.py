# docchat/application/keyword_search.py

from typing import List, Sequence

from docchat.domain.models import Chunk, SearchHit


SNIPPET_LENGTH = 240
SNIPPET_LEAD = 80


def keyword_search(chunks: Sequence[Chunk], query: str, top: int = 5) -> List[SearchHit]:
    """
    Score each chunk by how many distinct query terms it contains
    (case-insensitive substring match) and return the top hits,
    ordered by score desc then page number asc.
    """
    query = (query or "").strip()
    if not query or top < 1:
        return []

    terms = _query_terms(query)
    if not terms:
        return []

    hits: List[SearchHit] = []
    for chunk in chunks:
        lowered = (chunk.text or "").lower()
        if not lowered:
            continue

        score = sum(1 for term in terms if term in lowered)
        if score > 0:
            hits.append(SearchHit(
                page_number=chunk.page_number,
                score=score,
                snippet=make_snippet(chunk.text, terms),
            ))

    hits.sort(key=lambda hit: (-hit.score, hit.page_number))
    return hits[:top]


def make_snippet(text: str, terms: Sequence[str]) -> str:
    """
    Up to SNIPPET_LENGTH chars starting SNIPPET_LEAD chars before the first
    occurrence of the first matching term. Newlines are flattened and
    " ..." marks a truncated tail.
    """
    if not text or not text.strip():
        return ""

    lowered = text.lower()
    index = -1
    for term in terms:
        index = lowered.find(term)
        if index >= 0:
            break
    if index < 0:
        index = 0

    start = max(0, index - SNIPPET_LEAD)
    length = min(len(text) - start, SNIPPET_LENGTH)

    snippet = text[start:start + length].replace("\r", " ").replace("\n", " ")
    return snippet + (" ..." if start + length < len(text) else "")


def _query_terms(query: str) -> List[str]:
    terms: dict[str, None] = {}
    for raw in query.split():
        term = raw.strip().lower()
        if len(term) > 1:
            terms.setdefault(term, None)
    return list(terms)
