# docchat/application/fuzzy_corrector.py

from typing import Iterable, Iterator, List

from docchat.application.text_processing import tokenize
from docchat.domain.models import Chunk


MAX_EDIT_DISTANCE = 2


def bounded_levenshtein(a: str, b: str, max_distance: int = MAX_EDIT_DISTANCE) -> int:
    """
    Levenshtein distance with early exit.
    Returns max_distance + 1 as soon as the distance is known to exceed the bound.
    """
    n, m = len(a), len(b)
    if abs(n - m) > max_distance:
        return max_distance + 1

    previous = list(range(m + 1))
    current = [0] * (m + 1)

    for i in range(1, n + 1):
        current[0] = i
        row_min = current[0]

        for j in range(1, m + 1):
            cost = 0 if a[i - 1] == b[j - 1] else 1
            current[j] = min(
                current[j - 1] + 1,      # insertion
                previous[j] + 1,         # deletion
                previous[j - 1] + cost,  # substitution
            )
            row_min = min(row_min, current[j])

        if row_min > max_distance:
            return max_distance + 1

        previous, current = current, previous

    return previous[m]


class Vocabulary:
    """
    Known tokens of the currently loaded document, used as the correction
    target for typo repair. Iteration follows first-occurrence order so that
    ties between equally close candidates always resolve the same way.
    """

    def __init__(self, tokens: Iterable[str] = ()):
        self._tokens: dict[str, None] = {}
        for token in tokens:
            token = token.lower()
            if len(token) > 1:
                self._tokens.setdefault(token, None)

    @classmethod
    def from_chunks(cls, chunks: Iterable[Chunk]) -> "Vocabulary":
        tokens: List[str] = []
        for chunk in chunks:
            tokens.extend(tokenize(chunk.text))
        return cls(tokens)

    def __contains__(self, term: object) -> bool:
        return isinstance(term, str) and term.lower() in self._tokens

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def correct(self, term: str) -> str:
        """
        Closest vocabulary token within MAX_EDIT_DISTANCE, else `term` unchanged.
        Short terms (<= 3 chars) and terms starting with a digit are left alone.
        """
        if not term or not term.strip() or not self._tokens:
            return term
        if term in self:
            return term
        if len(term) <= 3 or term[0].isdigit():
            return term

        lowered = term.lower()
        first = lowered[0]
        best = term
        best_distance = MAX_EDIT_DISTANCE + 1

        for candidate in self._tokens:
            # Same first letter only; keeps the scan cheap on large documents.
            if candidate[0] != first:
                continue

            distance = bounded_levenshtein(lowered, candidate, MAX_EDIT_DISTANCE)
            if distance < best_distance:
                best_distance = distance
                best = candidate
                if distance == 0:
                    break

        return best if best_distance <= MAX_EDIT_DISTANCE else term
