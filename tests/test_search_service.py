# tests/test_search_service.py

import pytest
from unittest.mock import AsyncMock, MagicMock

from docchat.application.search_service import VectorRetriever, build_context
from docchat.domain.models import CapabilityError, Chunk, EmbeddingChunk, FailureKind
from docchat.infrastructure.vector_store import InMemoryVectorStore


def _fake_embed(model_id: str, text: str):
    if "fail" in text:
        raise CapabilityError(FailureKind.STATUS, "HTTP 500")
    if "refund" in text.lower() or "return" in text.lower():
        return [1.0, 0.0]
    return [0.0, 1.0]


def _make_engine():
    engine = MagicMock()
    engine.embed = AsyncMock(side_effect=_fake_embed)
    return engine


def _make_retriever(engine=None) -> VectorRetriever:
    return VectorRetriever(engine or _make_engine(), InMemoryVectorStore(), model_id="embed-model")


@pytest.mark.asyncio
async def test_retrieve_requires_index():
    retriever = _make_retriever()
    with pytest.raises(RuntimeError, match="Index not built"):
        await retriever.retrieve("test query")


@pytest.mark.asyncio
async def test_retrieve_raises_on_empty_question():
    retriever = _make_retriever()
    await retriever.build_index([Chunk(1, "refund rules")])

    with pytest.raises(ValueError, match="empty"):
        await retriever.retrieve("   ")


@pytest.mark.asyncio
async def test_build_index_embeds_every_chunk_with_model_id():
    engine = _make_engine()
    retriever = _make_retriever(engine)

    count = await retriever.build_index([Chunk(1, "refund rules"), Chunk(2, "shipping"), Chunk(3, "  ")])

    assert count == 2
    assert retriever.has_index is True
    assert engine.embed.await_count == 2
    engine.embed.assert_any_await("embed-model", "refund rules")


@pytest.mark.asyncio
async def test_failed_chunk_is_skipped_and_build_continues():
    retriever = _make_retriever()

    count = await retriever.build_index([Chunk(1, "this will fail"), Chunk(2, "refund rules")])

    assert count == 1
    chunks = await retriever.retrieve("refund?")
    assert [c.page_number for c in chunks] == [2]


@pytest.mark.asyncio
async def test_retrieve_ranks_by_similarity():
    retriever = _make_retriever()
    await retriever.build_index([Chunk(1, "shipping partners"), Chunk(2, "refund rules")])

    chunks = await retriever.retrieve("How do returns work?", top_k=2)

    assert [c.page_number for c in chunks] == [2, 1]


@pytest.mark.asyncio
async def test_query_embedding_failure_propagates():
    retriever = _make_retriever()
    await retriever.build_index([Chunk(1, "refund rules")])

    with pytest.raises(CapabilityError):
        await retriever.retrieve("please fail")


def test_build_context_keeps_ranking_order():
    context = build_context([
        EmbeddingChunk(4, "Refunds take 30 days."),
        EmbeddingChunk(1, "Intro text."),
    ])

    assert context.startswith("CONTEXT:\n--------\n")
    assert "[Chunk p4]\nRefunds take 30 days.\n\n[Chunk p1]\nIntro text.\n" in context
    assert context.index("[Chunk p4]") < context.index("[Chunk p1]")
