# docchat/infrastructure/llm_client.py

from typing import Any, Dict, List, Sequence, Tuple

import httpx

from docchat.domain.interfaces import CompletionPort, EmbeddingPort
from docchat.domain.models import CapabilityError, FailureKind


DEFAULT_BASE_URL = "https://api.openai.com/v1/"


class LlmClient(EmbeddingPort, CompletionPort):
    """
    OpenAI-compatible HTTP client: `embeddings` and `chat/completions`.
    Any transport error, non-2xx status or unexpected payload is raised
    as CapabilityError.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        if not api_key:
            raise ValueError("api_key is required.")
        self._api_key = api_key
        self._base_url = base_url.rstrip("/") + "/"
        self._timeout = timeout
        self._transport = transport

    async def embed(self, model_id: str, text: str) -> List[float]:
        data = await self._post_json("embeddings", {"model": model_id, "input": text})
        try:
            return [float(x) for x in data["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError) as error:
            raise CapabilityError(FailureKind.PARSE, f"Malformed embedding response: {error}") from error

    async def complete(
        self,
        model_id: str,
        messages: Sequence[Tuple[str, str]],
        temperature: float = 0.2,
    ) -> str:
        payload = {
            "model": model_id,
            "temperature": temperature,
            "messages": [{"role": role, "content": content} for role, content in messages],
        }
        data = await self._post_json("chat/completions", payload)
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as error:
            raise CapabilityError(FailureKind.PARSE, f"Malformed chat response: {error}") from error

    async def _post_json(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._base_url + path, headers=headers, json=payload)
        except httpx.RequestError as error:
            raise CapabilityError(FailureKind.NETWORK, f"{path} request failed: {error}") from error

        if response.status_code // 100 != 2:
            raise CapabilityError(FailureKind.STATUS, f"{path} returned HTTP {response.status_code}")

        try:
            return response.json()
        except ValueError as error:
            raise CapabilityError(FailureKind.PARSE, f"{path} returned invalid JSON") from error
