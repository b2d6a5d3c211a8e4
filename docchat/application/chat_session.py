# docchat/application/chat_session.py

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from docchat.application.answer_composer import AnswerComposer
from docchat.application.fuzzy_corrector import Vocabulary
from docchat.application.intent_classifier import classify_intent, is_follow_up
from docchat.application.search_service import VectorRetriever
from docchat.domain.interfaces import DocumentReaderPort
from docchat.domain.models import (
    ChatMessage,
    ChatTurn,
    Chunk,
    EmbeddingChunk,
    IntentKind,
    Role,
    SourceKind,
)


GREETING = "Upload a PDF/Word or load a Website and ask me a question 🙂 (Type 'help' for commands)"
NEW_CHAT_GREETING = "New chat started. Type 'help' to see commands 🙂"
TYPING_PLACEHOLDER = "Typing…"
TURN_FAILURE_MESSAGE = (
    "Something went wrong while processing the document. "
    "Try re-loading or ask a shorter question."
)

LOADED_MESSAGES = {
    SourceKind.PDF: "PDF loaded ✅ Pages: {count}",
    SourceKind.WORD: "Word loaded ✅ Sections: {count}",
    SourceKind.WEB: "Website loaded ✅ Chunks: {count}",
}

LOAD_FAILED_MESSAGES = {
    SourceKind.PDF: "PDF selected, but I couldn’t extract text. If it’s scanned, you’ll need OCR.",
    SourceKind.WORD: "Word selected, but I couldn’t read it. Make sure it’s .docx (not .doc).",
    SourceKind.WEB: "Couldn’t load the website. Try another URL or check internet access.",
}

# (nothing selected, selected but nothing loaded)
NOT_READY_MESSAGES = {
    SourceKind.PDF: (
        "Pick a PDF first (PDF tab) and try again.",
        "PDF is selected but no text is loaded. Try another PDF (or OCR if scanned).",
    ),
    SourceKind.WORD: (
        "Pick a Word file first (Word tab) and try again.",
        "Word is selected but no text is loaded.",
    ),
    SourceKind.WEB: (
        "Paste a URL (Web tab) then click Load Website.",
        "Website URL is set but content not loaded. Click Load Website.",
    ),
}


@dataclass
class DocumentState:
    """Chunks, vocabulary and embeddings of one load. Replaced as a unit."""
    chunks: List[Chunk] = field(default_factory=list)
    vocabulary: Vocabulary = field(default_factory=Vocabulary)
    embedded: List[EmbeddingChunk] = field(default_factory=list)


class ChatSession:
    """
    One retrieval session: the loaded document, the conversation, and the
    caches of the external lookups.

    Turns and loads are serialised by a session-wide lock, so a question
    never sees a half-replaced index and a second send waits for the first.
    """

    def __init__(
        self,
        readers: Mapping[SourceKind, DocumentReaderPort],
        composer: AnswerComposer,
        retriever: Optional[VectorRetriever] = None,
    ):
        self._readers = dict(readers)
        self._composer = composer
        self._retriever = retriever
        self._lock = asyncio.Lock()

        self._document = DocumentState()
        self._selected: Dict[SourceKind, str] = {}
        self._last_question = ""

        self.active_source = SourceKind.PDF
        self.messages: List[ChatMessage] = [ChatMessage(Role.ASSISTANT, GREETING)]
        self.history: List[ChatTurn] = []

    # ─── Read-only views ─────────────────────────────────────────────────────

    @property
    def chunks(self) -> List[Chunk]:
        return list(self._document.chunks)

    @property
    def vocabulary(self) -> Vocabulary:
        return self._document.vocabulary

    @property
    def has_content(self) -> bool:
        return bool(self._document.chunks)

    @property
    def has_index(self) -> bool:
        return self._retriever is not None and self._retriever.has_index

    def selected(self, source: SourceKind) -> Optional[str]:
        return self._selected.get(source)

    # ─── Loading ─────────────────────────────────────────────────────────────

    async def load_pdf(self, path: str) -> str:
        return await self.load(SourceKind.PDF, path)

    async def load_word(self, path: str) -> str:
        return await self.load(SourceKind.WORD, path)

    async def load_web(self, url: str) -> str:
        if not url or not url.strip():
            self.active_source = SourceKind.WEB
            return self._say("Paste a URL first.")
        return await self.load(SourceKind.WEB, url.strip())

    async def load(self, source: SourceKind, location: str) -> str:
        """
        Read `location` with the source's reader and swap the new chunks,
        vocabulary and embeddings in together. On failure all three are cleared.
        """
        async with self._lock:
            self.active_source = source
            self._selected[source] = location

            try:
                reader = self._readers[source]
                chunks = await reader.read(location)
                state = DocumentState(
                    chunks=chunks,
                    vocabulary=Vocabulary.from_chunks(chunks),
                    embedded=await self._embed(chunks),
                )
            except Exception as error:
                print(f"[ChatSession] ⚠ Failed to load {source.value} '{location}': {error}")
                self._install(DocumentState())
                return self._say(LOAD_FAILED_MESSAGES[source])

            self._install(state)
            print(f"[ChatSession] Loaded {len(state.chunks)} chunks from {source.value} '{location}' "
                  f"(vocabulary: {len(state.vocabulary)}, embedded: {len(state.embedded)})")
            return self._say(LOADED_MESSAGES[source].format(count=len(state.chunks)))

    def new_chat(self) -> str:
        self.messages.clear()
        self.history.clear()
        self._last_question = ""
        return self._say(NEW_CHAT_GREETING)

    # ─── Turns ───────────────────────────────────────────────────────────────

    async def send(self, text: str) -> str:
        """Run one user turn and return the assistant's reply."""
        text = (text or "").strip()
        if not text:
            return ""

        async with self._lock:
            self.messages.append(ChatMessage(Role.USER, text))
            typing = ChatMessage(Role.ASSISTANT, TYPING_PLACEHOLDER)
            self.messages.append(typing)

            try:
                answer = await self._answer(text)
            except Exception as error:
                print(f"[ChatSession] ⚠ Turn failed: {error!r}")
                answer = TURN_FAILURE_MESSAGE
            finally:
                self._remove(typing)

            self.messages.append(ChatMessage(Role.ASSISTANT, answer))
            self.history.append(ChatTurn(Role.USER, text))
            self.history.append(ChatTurn(Role.ASSISTANT, answer))
            return answer

    async def _answer(self, text: str) -> str:
        if is_follow_up(text) and self._last_question:
            text = f"{self._last_question} (follow-up: {text})"
        else:
            self._last_question = text

        intent = classify_intent(text)

        if intent.kind is IntentKind.HELP:
            return self._composer.help_text()

        not_ready = self.not_ready_message()
        if not_ready:
            return not_ready

        chunks = self._document.chunks
        vocabulary = self._document.vocabulary

        if intent.kind is IntentKind.FIND:
            return await self._composer.find(intent.keyword, chunks, vocabulary)
        if intent.kind is IntentKind.SUMMARIZE_PAGE:
            return self._composer.summarize_page(intent.page, chunks)
        if intent.kind is IntentKind.SUMMARIZE_DOCUMENT:
            return self._composer.summarize_document(chunks)
        if intent.kind is IntentKind.EXTRACT_PAGE:
            return self._composer.extract_page(intent.page, chunks)
        return await self._composer.answer(text, chunks, vocabulary, self.history)

    def not_ready_message(self) -> Optional[str]:
        if self._document.chunks:
            return None
        nothing_selected, nothing_loaded = NOT_READY_MESSAGES[self.active_source]
        return nothing_loaded if self._selected.get(self.active_source) else nothing_selected

    # ─── Private ─────────────────────────────────────────────────────────────

    async def _embed(self, chunks: List[Chunk]) -> List[EmbeddingChunk]:
        if self._retriever is None or not chunks:
            return []
        return await self._retriever.embed_chunks(chunks)

    def _install(self, state: DocumentState) -> None:
        self._document = state
        if self._retriever is not None:
            self._retriever.install(state.embedded)

    def _remove(self, message: ChatMessage) -> None:
        # Identity, not equality: a real answer may carry the same text.
        self.messages[:] = [m for m in self.messages if m is not message]

    def _say(self, text: str) -> str:
        self.messages.append(ChatMessage(Role.ASSISTANT, text))
        return text
