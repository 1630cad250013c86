"""
OpenAI Embedding Service - Query embeddings over the /v1/embeddings HTTP API.

Features:
- Async HTTP client (lazily created)
- Any OpenAI-compatible endpoint via base_url
- Transport errors retried with exponential backoff
- All failures surface as EmbeddingUnavailable
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from neuranotes.config.errors import EmbeddingUnavailable

logger = logging.getLogger(__name__)

__all__ = ["OpenAIEmbeddingService"]


class OpenAIEmbeddingService:
    """
    OpenAI-compatible embedding client.

    Example:
        >>> service = OpenAIEmbeddingService(api_key="sk-...")
        >>> vector = await service.embed("artificial intelligence")
    """

    def __init__(
        self,
        api_key: str,
        model: str = "text-embedding-3-large",
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize embedding client.

        Args:
            api_key: Bearer token for the embeddings endpoint
            model: Embedding model name
            base_url: API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._api_key = api_key
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"Authorization": f"Bearer {self._api_key}"},
                transport=self._transport,
            )
        return self._client

    async def embed(self, text: str) -> list[float]:
        """
        Generate an embedding for `text`.

        Raises:
            EmbeddingUnavailable: transport error, non-2xx status or malformed body
        """
        client = await self._get_client()

        payload: dict[str, Any] = {
            "model": self.model,
            "input": text,
            "encoding_format": "float",
        }

        try:
            response = await self._post(client, payload)
        except httpx.HTTPError as e:
            raise EmbeddingUnavailable(
                f"Embedding service unreachable: {e}",
                {"error_type": type(e).__name__},
            ) from e

        if response.is_error:
            raise EmbeddingUnavailable(
                f"Embedding service returned HTTP {response.status_code}",
                {"status_code": response.status_code, "message": _error_message(response)},
            )

        try:
            data = response.json()
            embedding = [float(v) for v in data["data"][0]["embedding"]]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise EmbeddingUnavailable("Malformed embedding response") from e

        logger.debug("Embedded %d chars -> %d dims", len(text), len(embedding))
        return embedding

    @retry(
        retry=retry_if_exception_type(httpx.TransportError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.2, max=2),
        reraise=True,
    )
    async def _post(self, client: httpx.AsyncClient, payload: dict[str, Any]) -> httpx.Response:
        return await client.post("/embeddings", json=payload)

    async def aclose(self) -> None:
        """Close HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json().get("error", {}).get("message", response.reason_phrase)
    except (ValueError, AttributeError):
        return response.reason_phrase
