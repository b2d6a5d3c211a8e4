# docchat/infrastructure/vector_store.py

import numpy as np
from typing import List, Sequence, Tuple

from docchat.domain.interfaces import VectorStorePort
from docchat.domain.models import EmbeddingChunk


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    dot(a, b) / (|a| * |b|).
    0.0 when either vector is empty, the lengths differ, or a norm is zero.
    """
    if a is None or b is None:
        return 0.0

    va = np.asarray(a, dtype=np.float64).ravel()
    vb = np.asarray(b, dtype=np.float64).ravel()
    if va.size == 0 or vb.size == 0 or va.size != vb.size:
        return 0.0

    denom = float(np.linalg.norm(va)) * float(np.linalg.norm(vb))
    if denom <= 0:
        return 0.0
    return float(np.dot(va, vb) / denom)


class InMemoryVectorStore(VectorStorePort):
    """
    Per-session store of embedded chunks ranked by cosine similarity.

    Vectors are not assumed to be normalized: each score is computed with
    cosine_similarity, so vectors of the wrong dimension simply score 0.
    """

    def __init__(self):
        self._chunks: List[EmbeddingChunk] = []

    def replace(self, chunks: List[EmbeddingChunk]) -> None:
        self._chunks = list(chunks)
        dims = {len(c.vector) for c in self._chunks}
        print(f"[VectorStore] Indexed {len(self._chunks)} chunks. "
              f"Dimensions: {sorted(dims) if dims else '-'}")

    def clear(self) -> None:
        self._chunks = []

    def is_ready(self) -> bool:
        """Ready as soon as at least one chunk made it into the index."""
        return len(self._chunks) > 0

    def __len__(self) -> int:
        return len(self._chunks)

    def search(
        self,
        query_vector: Sequence[float],
        top_k: int = 4,
    ) -> List[Tuple[EmbeddingChunk, float]]:
        if not self._chunks or top_k < 1:
            return []

        scored = [
            (chunk, cosine_similarity(query_vector, chunk.vector))
            for chunk in self._chunks
        ]
        # Stable sort: equal scores keep index order.
        scored.sort(key=lambda pair: pair[1], reverse=True)
        return scored[:top_k]
