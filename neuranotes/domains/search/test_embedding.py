"""Tests for the embedding client."""

from __future__ import annotations

from unittest.mock import AsyncMock

import numpy as np
import pytest

from neuranotes.config.errors import EmbeddingUnavailable, ErrorCode, SearchError

from .embedding import EmbeddingClient, UnconfiguredEmbeddingService


async def test_embed_trims_text() -> None:
    service = AsyncMock()
    service.embed.return_value = [0.25, 0.5]

    vector = await EmbeddingClient(service).embed("  neural nets \n")

    assert vector == [0.25, 0.5]
    service.embed.assert_awaited_once_with("neural nets")


async def test_embed_accepts_numpy_vectors() -> None:
    service = AsyncMock()
    service.embed.return_value = np.array([0.1, 0.2], dtype="float32")

    vector = await EmbeddingClient(service).embed("agents")

    assert vector == pytest.approx([0.1, 0.2])
    assert all(isinstance(v, float) for v in vector)


async def test_embed_rejects_empty_text() -> None:
    service = AsyncMock()

    with pytest.raises(SearchError):
        await EmbeddingClient(service).embed("   ")
    service.embed.assert_not_awaited()


async def test_unconfigured_service_is_unavailable() -> None:
    client = EmbeddingClient(UnconfiguredEmbeddingService("OPENAI_API_KEY not set"))

    assert client.configured is False
    with pytest.raises(EmbeddingUnavailable) as exc_info:
        await client.embed("agents")
    assert exc_info.value.code == ErrorCode.EMBEDDING_UNAVAILABLE
    assert exc_info.value.details == {"configured": False}


async def test_service_errors_become_unavailable() -> None:
    service = AsyncMock()
    service.embed.side_effect = ConnectionError("refused")
    client = EmbeddingClient(service)

    assert client.configured is True
    with pytest.raises(EmbeddingUnavailable) as exc_info:
        await client.embed("agents")
    assert exc_info.value.details["error_type"] == "ConnectionError"


async def test_empty_vector_is_unavailable() -> None:
    service = AsyncMock()
    service.embed.return_value = []

    with pytest.raises(EmbeddingUnavailable):
        await EmbeddingClient(service).embed("agents")


async def test_aclose_forwards_to_service() -> None:
    service = AsyncMock()

    await EmbeddingClient(service).aclose()

    service.aclose.assert_awaited_once()


async def test_aclose_without_service_support_is_noop() -> None:
    client = EmbeddingClient(UnconfiguredEmbeddingService())

    await client.aclose()

    assert client.configured is False
