# docchat/application/answer_composer.py

from typing import List, Optional, Sequence, Tuple

from docchat.application.fuzzy_corrector import Vocabulary
from docchat.application.keyword_search import keyword_search
from docchat.application.query_enrichment import QueryEnricher
from docchat.application.search_service import VectorRetriever, build_context
from docchat.application.text_processing import (
    extract_bullet_like_lines,
    extract_key_sentences,
    make_excerpt,
)
from docchat.domain.interfaces import CompletionPort
from docchat.domain.models import Chunk, ChatTurn, EnrichedQuery, SearchHit


HELP_TEXT = (
    "Commands you can use:\n"
    "\n"
    "• help\n"
    "• summary\n"
    "• summary page 7\n"
    "• page 7\n"
    "• find: payment terms\n"
    "• find: refund policy\n"
    "\n"
    "Tip:\n"
    "- If you type with small typos, I try to fix them.\n"
    "- I also expand synonyms to improve search."
)

ANSWER_ONLY_FROM_CONTEXT = (
    "You are a helpful assistant. Answer using ONLY the provided CONTEXT. "
    "If not found, say you don't know."
)

FIND_TOP = 8
GENERAL_TOP = 12
MAX_HISTORY_TURNS = 8
PAGE_EXCERPT_CHARS = 900


class AnswerComposer:
    """
    Builds the reply text for each intent from the current chunk set.
    Stateless apart from its collaborators; the session passes in the
    chunks and vocabulary it owns.
    """

    def __init__(
        self,
        enricher: QueryEnricher,
        retriever: Optional[VectorRetriever] = None,
        completer: Optional[CompletionPort] = None,
        chat_model: str = "",
        temperature: float = 0.2,
        history_turns: int = MAX_HISTORY_TURNS,
    ):
        self._enricher = enricher
        self._retriever = retriever
        self._completer = completer
        self._chat_model = chat_model
        self._temperature = temperature
        self._history_turns = history_turns

    @property
    def semantic_ready(self) -> bool:
        return (
            self._retriever is not None
            and self._completer is not None
            and self._retriever.has_index
        )

    @staticmethod
    def help_text() -> str:
        return HELP_TEXT

    # ─── find: ───────────────────────────────────────────────────────────────

    async def find(self, keyword: Optional[str], chunks: Sequence[Chunk], vocabulary: Vocabulary) -> str:
        if not keyword or len(keyword.strip()) < 2:
            return "Type like this: find: payment terms"

        enriched, hits = await self._search_with_fallback(keyword.strip(), chunks, vocabulary, FIND_TOP)
        if not hits:
            return f"No matches found for: {enriched.corrected}"

        lines = [f"Top matches for: {enriched.corrected}", ""]
        for hit in hits:
            lines.append(f"Page {hit.page_number}")
            lines.append(hit.snippet)
            lines.append("")

        lines.append(f"Try: summary page {hits[0].page_number}")
        return "\n".join(lines).strip()

    # ─── Page-level answers ──────────────────────────────────────────────────

    def summarize_page(self, page_number: int, chunks: Sequence[Chunk]) -> str:
        chunk = find_chunk(chunks, page_number)
        if chunk is None:
            return _missing_page(page_number, chunks)

        bullets = extract_bullet_like_lines(chunk.text, 7)
        if not bullets:
            bullets = extract_key_sentences(chunk.text, 5)

        lines = [f"Summary of page {page_number}:", ""]
        lines.extend(f"• {bullet}" for bullet in bullets)
        return "\n".join(lines).strip()

    def extract_page(self, page_number: int, chunks: Sequence[Chunk]) -> str:
        chunk = find_chunk(chunks, page_number)
        if chunk is None:
            return _missing_page(page_number, chunks)

        excerpt = make_excerpt(chunk.text, PAGE_EXCERPT_CHARS)
        if not excerpt.strip():
            excerpt = "(No extractable text found on this page.)"
        return f"Page {page_number} (excerpt):\n\n{excerpt}"

    def summarize_document(self, chunks: Sequence[Chunk]) -> str:
        lines = ["Document overview (quick summary):", ""]
        found_any = False

        for chunk in list(chunks)[:3]:
            bullets = extract_bullet_like_lines(chunk.text, 4)
            if not bullets:
                continue
            found_any = True
            lines.append(f"Page {chunk.page_number}:")
            lines.extend(f"• {bullet}" for bullet in bullets)
            lines.append("")

        if not found_any:
            lines.append(
                "I couldn’t detect clean headings/bullets. "
                "Ask: \"summary page 1\" or use \"find: <keyword>\"."
            )

        lines.append("Tell me your angle (scope, risks, timeline, cost) and I’ll summarize that.")
        return "\n".join(lines).strip()

    # ─── General questions ───────────────────────────────────────────────────

    async def answer(
        self,
        question: str,
        chunks: Sequence[Chunk],
        vocabulary: Vocabulary,
        history: Sequence[ChatTurn] = (),
    ) -> str:
        if self.semantic_ready:
            return await self.answer_from_context(question, history)
        return await self.answer_from_keywords(question, chunks, vocabulary)

    async def answer_from_keywords(self, question: str, chunks: Sequence[Chunk], vocabulary: Vocabulary) -> str:
        enriched, hits = await self._search_with_fallback(question, chunks, vocabulary, GENERAL_TOP)
        if not hits:
            return (
                "I couldn’t find anything relevant.\n"
                "Try \"find: <keyword>\" or \"summary page X\"."
            )

        pages = sorted({hit.page_number for hit in hits})
        lines: List[str] = []

        if enriched.corrected.lower() != question.strip().lower():
            lines.extend([f"I searched for: {enriched.corrected}", ""])

        lines.extend(["Answer (based on closest matches):", ""])

        used = 0
        for page_number in pages:
            if used >= 2:
                break
            chunk = find_chunk(chunks, page_number)
            if chunk is None:
                continue
            sentences = extract_key_sentences(chunk.text, 3)
            if not sentences:
                continue
            lines.extend(f"• {sentence}" for sentence in sentences)
            lines.append("")
            used += 1

        lines.append("Evidence pages: " + ", ".join(str(p) for p in pages[:5]))
        lines.append("")
        lines.append("Try: find: <keyword>  |  summary  |  summary page 5  |  page 5")
        return "\n".join(lines).strip()

    async def answer_from_context(self, question: str, history: Sequence[ChatTurn] = ()) -> str:
        if self._retriever is None or self._completer is None:
            raise RuntimeError("Semantic answering needs an embedding and a completion capability.")

        top_chunks = await self._retriever.retrieve(question)
        messages = build_completion_messages(
            question,
            build_context(top_chunks),
            history,
            self._history_turns,
        )
        return await self._completer.complete(self._chat_model, messages, self._temperature)

    # ─── Private ─────────────────────────────────────────────────────────────

    async def _search_with_fallback(
        self,
        query: str,
        chunks: Sequence[Chunk],
        vocabulary: Vocabulary,
        top: int,
    ) -> Tuple[EnrichedQuery, List[SearchHit]]:
        """Expanded query first; corrected-only if the expansion found nothing."""
        enriched = await self._enricher.enrich(query, vocabulary)
        hits = keyword_search(chunks, enriched.expanded, top)
        if not hits:
            hits = keyword_search(chunks, enriched.corrected, top)
        return enriched, hits


def build_completion_messages(
    question: str,
    context: str,
    history: Sequence[ChatTurn],
    history_turns: int = MAX_HISTORY_TURNS,
) -> List[Tuple[str, str]]:
    """Instruction, context, recent history, then the question."""
    messages: List[Tuple[str, str]] = [
        ("system", ANSWER_ONLY_FROM_CONTEXT),
        ("system", context),
    ]
    recent = list(history)[-history_turns:] if history_turns > 0 else []
    messages.extend((turn.role.value, turn.content) for turn in recent)
    messages.append(("user", question))
    return messages


def find_chunk(chunks: Sequence[Chunk], page_number: int) -> Optional[Chunk]:
    for chunk in chunks:
        if chunk.page_number == page_number:
            return chunk
    return None


def _missing_page(page_number: int, chunks: Sequence[Chunk]) -> str:
    return f"I can’t find page {page_number}. This document has {len(chunks)} pages/chunks."
