# docchat/infrastructure/embedding_engine.py
# Local embeddings; model_id selects the sentence-transformers model.

import asyncio
from typing import Dict, List

from sentence_transformers import SentenceTransformer

from docchat.domain.interfaces import EmbeddingPort
from docchat.domain.models import CapabilityError, FailureKind


DEFAULT_MODEL_NAME = "all-MiniLM-L6-v2"


class SentenceTransformerEngine(EmbeddingPort):

    def __init__(self, device: str = "cpu"):
        self._device = device
        self._models: Dict[str, SentenceTransformer] = {}

    def _model(self, model_id: str) -> SentenceTransformer:
        """Models load lazily on first use and stay cached per id."""
        name = model_id or DEFAULT_MODEL_NAME
        if name not in self._models:
            print(f"[EmbeddingEngine] Loading model: {name} ...")
            self._models[name] = SentenceTransformer(name, device=self._device)
            print("[EmbeddingEngine] Model ready.")
        return self._models[name]

    def encode_single(self, model_id: str, text: str) -> List[float]:
        try:
            vector = self._model(model_id).encode(
                text,
                convert_to_numpy=True,
                normalize_embeddings=True,
            )
        except Exception as error:
            raise CapabilityError(FailureKind.STATUS, f"Local embedding failed: {error}") from error
        return vector.astype(float).tolist()

    async def embed(self, model_id: str, text: str) -> List[float]:
        return await asyncio.to_thread(self.encode_single, model_id, text)
