# tests/conftest.py

from typing import Dict, List, Optional

import pytest

from docchat.application.answer_composer import AnswerComposer
from docchat.application.chat_session import ChatSession
from docchat.application.query_enrichment import QueryEnricher, SynonymExpander
from docchat.domain.interfaces import DocumentReaderPort, SynonymPort
from docchat.domain.models import CapabilityResult, Chunk, Err, FailureKind, Ok, SourceKind


REFUND_TEXT = "The refund policy allows returns within 30 days."
SHIPPING_TEXT = "Shipping is handled by our logistics partner in Europe."


class StubReader(DocumentReaderPort):
    """Returns canned chunks per location; unknown locations fail like a corrupt file."""

    def __init__(self, documents: Dict[str, List[Chunk]]):
        self._documents = documents
        self.calls: List[str] = []

    async def read(self, location: str) -> List[Chunk]:
        self.calls.append(location)
        if location not in self._documents:
            raise ValueError(f"cannot read {location}")
        return list(self._documents[location])


class CountingThesaurus(SynonymPort):
    """Thesaurus stub that records every lookup it receives."""

    def __init__(self, synonyms: Optional[Dict[str, List[str]]] = None, fail: bool = False):
        self._synonyms = synonyms or {}
        self._fail = fail
        self.calls: List[tuple] = []

    async def lookup(self, word: str, max_count: int) -> CapabilityResult[List[str]]:
        self.calls.append((word, max_count))
        if self._fail:
            return Err(FailureKind.NETWORK, "offline")
        return Ok(list(self._synonyms.get(word, [])))


@pytest.fixture
def refund_chunks() -> List[Chunk]:
    return [Chunk(1, REFUND_TEXT), Chunk(2, SHIPPING_TEXT)]


@pytest.fixture
def make_session(refund_chunks):
    """Build a keyword-mode ChatSession whose readers serve `refund_chunks` at 'doc.pdf'."""

    def _make(
        documents: Optional[Dict[str, List[Chunk]]] = None,
        thesaurus: Optional[SynonymPort] = None,
        retriever=None,
        completer=None,
    ) -> ChatSession:
        reader = StubReader(documents if documents is not None else {"doc.pdf": refund_chunks})
        composer = AnswerComposer(
            QueryEnricher(SynonymExpander(thesaurus)),
            retriever=retriever,
            completer=completer,
            chat_model="chat-model",
        )
        readers = {SourceKind.PDF: reader, SourceKind.WORD: reader, SourceKind.WEB: reader}
        return ChatSession(readers, composer, retriever=retriever)

    return _make
