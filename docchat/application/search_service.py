# docchat/application/search_service.py

from typing import List, Sequence

from docchat.domain.interfaces import EmbeddingPort, VectorStorePort
from docchat.domain.models import CapabilityError, Chunk, EmbeddingChunk


DEFAULT_TOP_K = 4


class VectorRetriever:
    """
    Semantic retrieval: embed every chunk on load, rank chunks by cosine
    similarity to the embedded question at query time.

    Readiness is `has_index`; a build that lost some chunks to embedding
    failures is still usable for whatever made it in.
    """

    def __init__(
        self,
        embedding_engine: EmbeddingPort,
        vector_store: VectorStorePort,
        model_id: str,
        top_k: int = DEFAULT_TOP_K,
    ):
        self._embedding_engine = embedding_engine
        self._vector_store = vector_store
        self._model_id = model_id
        self._top_k = top_k

    @property
    def has_index(self) -> bool:
        return self._vector_store.is_ready()

    def clear(self) -> None:
        self._vector_store.clear()

    async def embed_chunks(self, chunks: Sequence[Chunk]) -> List[EmbeddingChunk]:
        """
        Embed every non-empty chunk. A chunk whose embedding request fails is
        left out and the rest of the build carries on.
        """
        embedded: List[EmbeddingChunk] = []
        print(f"[VectorRetriever] Encoding {len(chunks)} chunks...")

        for chunk in chunks:
            if not chunk.text or not chunk.text.strip():
                continue
            try:
                vector = await self._embedding_engine.embed(self._model_id, chunk.text)
            except CapabilityError as error:
                print(f"[VectorRetriever] ⚠ Skipped chunk p{chunk.page_number}: {error}")
                continue
            embedded.append(EmbeddingChunk(
                page_number=chunk.page_number,
                text=chunk.text,
                vector=list(vector),
            ))

        return embedded

    def install(self, embedded: List[EmbeddingChunk]) -> None:
        """Replace the whole index with a freshly embedded chunk set."""
        self._vector_store.replace(embedded)

    async def build_index(self, chunks: Sequence[Chunk]) -> int:
        self.install(await self.embed_chunks(chunks))
        return len(self._vector_store)

    async def retrieve(self, question: str, top_k: int | None = None) -> List[EmbeddingChunk]:
        """
        Top-k chunks by similarity to `question`, most similar first.
        Embedding failures propagate to the caller.
        """
        if not self.has_index:
            raise RuntimeError("Index not built. Load a document first.")

        question = question.strip()
        if not question:
            raise ValueError("Question cannot be empty.")

        query_vector = await self._embedding_engine.embed(self._model_id, question)
        ranked = self._vector_store.search(query_vector, top_k or self._top_k)
        return [chunk for chunk, _ in ranked]


def build_context(chunks: Sequence[EmbeddingChunk]) -> str:
    """Context block handed to the completion capability, in ranking order."""
    lines = ["CONTEXT:", "--------"]
    for chunk in chunks:
        lines.append(f"[Chunk p{chunk.page_number}]")
        lines.append(chunk.text)
        lines.append("")
    return "\n".join(lines) + "\n"
