# docchat/application/query_enrichment.py

from typing import Dict, List, Optional, Tuple

from docchat.application.fuzzy_corrector import Vocabulary
from docchat.application.text_processing import tokenize
from docchat.domain.interfaces import SpellCheckPort, SynonymPort
from docchat.domain.models import EnrichedQuery, Err, FailureKind, Ok


SYNONYMS_PER_TERM = 3

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "to", "of", "in", "on", "for", "with",
    "by", "as", "at", "is", "are", "was", "were", "be", "been", "being", "this",
    "that", "these", "those", "it", "its", "from", "into", "about",
})


def is_stop_word(term: str) -> bool:
    """Function words, very short terms and numbers are never expanded."""
    if not term or not term.strip():
        return True
    if len(term) <= 2 or term[0].isdigit():
        return True
    return term.lower() in STOP_WORDS


class SynonymExpander:
    """
    Session-scoped, cached view over a thesaurus capability.

    Each (word, max_count) key is looked up at most once per session.
    Failed lookups are cached as an empty list and not retried.
    """

    def __init__(self, thesaurus: Optional[SynonymPort]):
        self._thesaurus = thesaurus
        self._cache: Dict[Tuple[str, int], List[str]] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()

    async def synonyms(self, word: str, max_count: int) -> List[str]:
        word = (word or "").strip().lower()
        if len(word) < 2 or max_count < 1 or self._thesaurus is None:
            return []

        key = (word, max_count)
        if key in self._cache:
            return list(self._cache[key])

        try:
            outcome = await self._thesaurus.lookup(word, max_count)
        except Exception as error:
            outcome = Err(FailureKind.NETWORK, repr(error))

        if isinstance(outcome, Err):
            print(f"[SynonymExpander] Lookup for '{word}' degraded ({outcome.kind.value}): {outcome.detail}")
            result: List[str] = []
        else:
            result = self._normalise(word, outcome.value, max_count)

        self._cache[key] = result
        return list(result)

    @staticmethod
    def _normalise(word: str, candidates: List[str], max_count: int) -> List[str]:
        seen: dict[str, None] = {}
        for candidate in candidates:
            cleaned = (candidate or "").strip().lower()
            if cleaned and cleaned != word:
                seen.setdefault(cleaned, None)
        return list(seen)[:max_count]


class SpellCorrector:
    """
    Cached view over an optional spell-check capability.
    Degrades to the identity on failure; the failure is cached too.
    """

    def __init__(self, checker: Optional[SpellCheckPort]):
        self._checker = checker
        self._cache: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def clear(self) -> None:
        self._cache.clear()

    async def correct(self, text: str) -> str:
        if self._checker is None or not text.strip():
            return text

        key = text.lower()
        if key in self._cache:
            return self._cache[key]

        try:
            outcome = await self._checker.check(text)
        except Exception as error:
            outcome = Err(FailureKind.NETWORK, repr(error))

        if isinstance(outcome, Ok) and outcome.value.strip():
            corrected = outcome.value
        else:
            if isinstance(outcome, Err):
                print(f"[SpellCorrector] Check degraded ({outcome.kind.value}): {outcome.detail}")
            corrected = text

        self._cache[key] = corrected
        return corrected


class QueryEnricher:
    """
    corrected: per-term vocabulary correction of the query.
    expanded:  corrected terms plus a few synonyms of the content terms,
               used only for retrieval.
    """

    def __init__(
        self,
        synonym_expander: SynonymExpander,
        spell_corrector: Optional[SpellCorrector] = None,
        synonyms_per_term: int = SYNONYMS_PER_TERM,
    ):
        self._synonym_expander = synonym_expander
        self._spell_corrector = spell_corrector
        self._synonyms_per_term = synonyms_per_term

    async def enrich(self, query: str, vocabulary: Vocabulary) -> EnrichedQuery:
        query = (query or "").strip()
        if not query:
            return EnrichedQuery(corrected="", expanded="")

        if self._spell_corrector is not None:
            query = await self._spell_corrector.correct(query)

        corrected_terms = [vocabulary.correct(term) for term in tokenize(query)]
        corrected = " ".join(corrected_terms)

        # Sequential on purpose: insertion order decides tie-breaks downstream.
        expanded: dict[str, None] = {}
        for term in corrected_terms:
            expanded.setdefault(term, None)
            if is_stop_word(term):
                continue
            for synonym in await self._synonym_expander.synonyms(term, self._synonyms_per_term):
                expanded.setdefault(synonym, None)

        return EnrichedQuery(corrected=corrected, expanded=" ".join(expanded))
