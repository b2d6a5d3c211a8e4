# main.py

import asyncio

from docchat import config
from docchat.application.answer_composer import AnswerComposer
from docchat.application.chat_session import ChatSession
from docchat.application.query_enrichment import QueryEnricher, SpellCorrector, SynonymExpander
from docchat.application.search_service import VectorRetriever
from docchat.domain.models import SourceKind
from docchat.infrastructure.document_loader import DocxReader, PdfReader, WebReader
from docchat.infrastructure.embedding_engine import SentenceTransformerEngine
from docchat.infrastructure.lexical_services import DatamuseThesaurus, LanguageToolSpellChecker
from docchat.infrastructure.llm_client import LlmClient
from docchat.infrastructure.vector_store import InMemoryVectorStore
from docchat.interface.cli import (
    display_answer,
    display_error,
    display_welcome_banner,
    prompt_for_input,
)


QUIT_COMMANDS = {":quit", ":q", ":exit"}


def build_session() -> ChatSession:
    """Wire one ChatSession from the environment configuration."""
    max_chars = config.MAX_CHARS_PER_CHUNK
    readers = {
        SourceKind.PDF: PdfReader(max_chars),
        SourceKind.WORD: DocxReader(max_chars),
        SourceKind.WEB: WebReader(max_chars, timeout=config.HTTP_TIMEOUT_S),
    }

    thesaurus = (
        DatamuseThesaurus(config.DATAMUSE_URL, timeout=config.HTTP_TIMEOUT_S)
        if config.ENABLE_SYNONYMS else None
    )
    spell_checker = (
        LanguageToolSpellChecker(config.LANGUAGETOOL_URL, timeout=config.HTTP_TIMEOUT_S)
        if config.ENABLE_SPELLCHECK else None
    )
    enricher = QueryEnricher(
        SynonymExpander(thesaurus),
        SpellCorrector(spell_checker) if spell_checker else None,
    )

    retriever = None
    completer = None
    if config.SEMANTIC_MODE_AVAILABLE:
        completer = LlmClient(config.LLM_API_KEY, config.LLM_BASE_URL)
        embedding_engine = completer if config.EMBEDDING_BACKEND == "api" else SentenceTransformerEngine()
        retriever = VectorRetriever(
            embedding_engine=embedding_engine,
            vector_store=InMemoryVectorStore(),
            model_id=config.EMBEDDING_MODEL_NAME,
            top_k=config.RETRIEVAL_TOP_K,
        )

    composer = AnswerComposer(
        enricher,
        retriever=retriever,
        completer=completer,
        chat_model=config.CHAT_MODEL_NAME,
        temperature=config.CHAT_TEMPERATURE,
        history_turns=config.HISTORY_TURNS,
    )
    return ChatSession(readers, composer, retriever=retriever)


async def handle_input(session: ChatSession, line: str) -> str:
    """Console commands load sources; anything else is a chat turn."""
    command, _, argument = line.strip().partition(" ")
    command = command.lower()

    if command == ":pdf":
        return await session.load_pdf(argument.strip())
    if command == ":word":
        return await session.load_word(argument.strip())
    if command == ":web":
        return await session.load_web(argument.strip())
    if command == ":new":
        return session.new_chat()
    return await session.send(line)


async def _chat_loop() -> None:
    session = build_session()
    display_welcome_banner(config.SEMANTIC_MODE_AVAILABLE)
    display_answer(session.messages[0].text)

    while True:
        line = (await asyncio.to_thread(prompt_for_input)).strip()
        if not line:
            continue
        if line.lower() in QUIT_COMMANDS:
            break

        try:
            display_answer(await handle_input(session, line))
        except ValueError as error:
            display_error(str(error))


def main() -> None:
    asyncio.run(_chat_loop())


if __name__ == "__main__":
    main()
