# tests/test_vector_store.py

import numpy as np
import pytest

from docchat.domain.models import EmbeddingChunk
from docchat.infrastructure.vector_store import InMemoryVectorStore, cosine_similarity


def _make_chunk(page_number: int, text: str, vector) -> EmbeddingChunk:
    return EmbeddingChunk(page_number=page_number, text=text, vector=list(vector))


# ── Cosine similarity ─────────────────────────────────────────────────────────

def test_cosine_of_vector_with_itself_is_one():
    assert cosine_similarity([3.0, 4.0, 0.5], [3.0, 4.0, 0.5]) == pytest.approx(1.0)


def test_cosine_is_symmetric():
    a, b = [0.2, -1.0, 3.0], [1.5, 0.3, -0.7]
    assert cosine_similarity(a, b) == pytest.approx(cosine_similarity(b, a))


def test_cosine_guards_degenerate_inputs():
    assert cosine_similarity([], [1.0]) == 0.0
    assert cosine_similarity([1.0, 2.0], [1.0, 2.0, 3.0]) == 0.0
    assert cosine_similarity([0.0, 0.0], [1.0, 2.0]) == 0.0
    assert cosine_similarity(None, [1.0]) == 0.0


def test_cosine_of_opposite_vectors_is_minus_one():
    assert cosine_similarity([1.0, 0.0], [-2.0, 0.0]) == pytest.approx(-1.0)


# ── Store ─────────────────────────────────────────────────────────────────────

def test_search_returns_top_k_results():
    store = InMemoryVectorStore()
    embeddings = np.array([
        [1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, 0.0, 1.0],
        [0.7, 0.7, 0.0],
    ], dtype=np.float32)
    store.replace([_make_chunk(i + 1, f"Chunk {i}", embeddings[i]) for i in range(4)])

    results = store.search([1.0, 0.0, 0.0], top_k=3)

    assert len(results) == 3
    assert results[0][0].page_number == 1
    assert results[0][1] == pytest.approx(1.0, abs=1e-4)


def test_search_sorted_descending():
    store = InMemoryVectorStore()
    embeddings = np.eye(3, dtype=np.float32)
    store.replace([_make_chunk(i + 1, f"text {i}", embeddings[i]) for i in range(3)])

    results = store.search([0.6, 0.8, 0.0], top_k=3)

    scores = [score for _, score in results]
    assert scores == sorted(scores, reverse=True)
    assert [chunk.page_number for chunk, _ in results] == [2, 1, 3]


def test_vectors_are_not_assumed_normalized():
    store = InMemoryVectorStore()
    store.replace([
        _make_chunk(1, "long but off-axis", [10.0, 10.0]),
        _make_chunk(2, "short and aligned", [0.1, 0.0]),
    ])

    results = store.search([1.0, 0.0], top_k=1)
    assert results[0][0].page_number == 2


def test_mismatched_dimensions_score_zero():
    store = InMemoryVectorStore()
    store.replace([_make_chunk(1, "three dims", [1.0, 0.0, 0.0])])

    assert store.search([1.0, 0.0], top_k=1)[0][1] == 0.0


def test_readiness_follows_contents():
    store = InMemoryVectorStore()
    assert store.is_ready() is False
    assert store.search([1.0], top_k=3) == []

    store.replace([_make_chunk(1, "text", [1.0])])
    assert store.is_ready() is True
    assert len(store) == 1

    store.clear()
    assert store.is_ready() is False


def test_replace_swaps_whole_index():
    store = InMemoryVectorStore()
    store.replace([_make_chunk(1, "old", [1.0]), _make_chunk(2, "old", [1.0])])
    store.replace([_make_chunk(1, "new", [1.0])])

    assert len(store) == 1
    assert store.search([1.0], top_k=5)[0][0].text == "new"
