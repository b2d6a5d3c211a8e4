# docchat/domain/interfaces.py

from abc import ABC, abstractmethod
from typing import List, Sequence, Tuple

from .models import CapabilityResult, Chunk, EmbeddingChunk


class EmbeddingPort(ABC):
    """
    Port for any embedding engine.
    Must raise CapabilityError on transport or non-success failure.
    """

    @abstractmethod
    async def embed(self, model_id: str, text: str) -> List[float]: ...


class VectorStorePort(ABC):

    @abstractmethod
    def replace(self, chunks: List[EmbeddingChunk]) -> None:
        """Swap in a whole new set of embedded chunks."""
        ...

    @abstractmethod
    def search(self, query_vector: Sequence[float], top_k: int) -> List[Tuple[EmbeddingChunk, float]]: ...

    @abstractmethod
    def clear(self) -> None: ...

    @abstractmethod
    def is_ready(self) -> bool: ...

    @abstractmethod
    def __len__(self) -> int: ...


class CompletionPort(ABC):

    @abstractmethod
    async def complete(
        self,
        model_id: str,
        messages: Sequence[Tuple[str, str]],
        temperature: float = 0.2,
    ) -> str: ...


class SynonymPort(ABC):
    """Best-effort thesaurus lookup. Never raises; failures come back as Err."""

    @abstractmethod
    async def lookup(self, word: str, max_count: int) -> CapabilityResult[List[str]]: ...


class SpellCheckPort(ABC):
    """Best-effort spell check. Never raises; failures come back as Err."""

    @abstractmethod
    async def check(self, text: str) -> CapabilityResult[str]: ...


class DocumentReaderPort(ABC):

    @abstractmethod
    async def read(self, location: str) -> List[Chunk]:
        """
        Return the ordered chunks of the document at `location` (path or URL).
        Raises on unreadable / corrupt input.
        """
        ...
