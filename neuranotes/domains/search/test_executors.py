"""Tests for the lexical, vector and document fallback executors."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from .content import PlainTextExtractor
from .executors import DocumentFallbackExecutor, LexicalSearchExecutor, VectorSearchExecutor


# --- Lexical ---


async def test_lexical_ranks_follow_store_order() -> None:
    store = AsyncMock()
    store.lexical_search.return_value = [
        {"id": "b", "document_id": "d1", "text": "second best", "score": -1.0},
        {"id": "a", "document_id": "d1", "text": "best", "score": -2.0},
    ]

    matches = await LexicalSearchExecutor(store).search("best", None, 10)

    assert [(m.id, m.lexical_rank) for m in matches] == [("b", 0), ("a", 1)]
    store.lexical_search.assert_awaited_once_with("best", None, 10)


async def test_lexical_store_failure_returns_empty() -> None:
    store = AsyncMock()
    store.lexical_search.side_effect = RuntimeError("no such table")

    assert await LexicalSearchExecutor(store).search("agents") == []


async def test_lexical_does_not_absorb_cancellation() -> None:
    store = AsyncMock()
    store.lexical_search.side_effect = asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await LexicalSearchExecutor(store).search("agents")


async def test_lexical_enforces_scope_and_limit() -> None:
    store = AsyncMock()
    store.lexical_search.return_value = [
        {"id": "1", "document_id": "d2", "text": "x"},
        {"id": "2", "document_id": "d1", "text": "y"},
        {"id": "3", "document_id": "d1", "text": "z"},
    ]

    matches = await LexicalSearchExecutor(store).search("x", "d1", 1)

    assert [m.id for m in matches] == ["2"]


async def test_lexical_skips_malformed_rows() -> None:
    store = AsyncMock()
    store.lexical_search.return_value = [
        {"document_id": "d1", "text": "no id"},
        None,
        {"id": "ok", "document_id": "d1", "text": "kept"},
    ]

    matches = await LexicalSearchExecutor(store).search("kept")

    assert [(m.id, m.lexical_rank) for m in matches] == [("ok", 0)]


# --- Vector ---


async def test_vector_filters_threshold_and_sorts() -> None:
    store = AsyncMock()
    store.vector_search.return_value = [
        {"id": "low", "document_id": "d1", "text": "", "similarity": 0.5},
        {"id": "mid", "document_id": "d1", "text": "", "similarity": 0.7},
        {"id": "high", "document_id": "d1", "text": "", "similarity": 0.92},
    ]

    matches = await VectorSearchExecutor(store).search([0.1, 0.2], None, 10)

    assert [m.id for m in matches] == ["high", "mid"]
    assert matches[0].vector_similarity == pytest.approx(0.92)
    store.vector_search.assert_awaited_once_with([0.1, 0.2], None, 10, 0.5)


async def test_vector_threshold_override_and_clamp() -> None:
    store = AsyncMock()
    store.vector_search.return_value = [
        {"id": "a", "document_id": "d1", "text": "", "similarity": 1.0000002},
        {"id": "b", "document_id": "d1", "text": "", "similarity": 0.15},
    ]

    matches = await VectorSearchExecutor(store, similarity_threshold=0.5).search(
        [1.0], None, 10, threshold=0.1
    )

    assert [m.id for m in matches] == ["a", "b"]
    assert matches[0].vector_similarity == 1.0


async def test_vector_store_failure_returns_empty() -> None:
    store = AsyncMock()
    store.vector_search.side_effect = OSError("index file missing")

    assert await VectorSearchExecutor(store).search([0.1]) == []


async def test_vector_skips_malformed_rows() -> None:
    store = AsyncMock()
    store.vector_search.return_value = [
        {"id": "bad", "document_id": "d1", "text": "", "similarity": "n/a"},
        {"id": "orphan", "text": "", "similarity": 0.9},
        {"id": "ok", "document_id": "d1", "text": "kept", "similarity": 0.8},
    ]

    matches = await VectorSearchExecutor(store).search([0.1], None, 10)

    assert [m.id for m in matches] == ["ok"]


# --- Document fallback ---


@pytest.fixture
def directory() -> AsyncMock:
    mock = AsyncMock()
    mock.list_documents.return_value = [
        {"id": "d1", "title": "Neural Networks", "body": "layers and weights"},
        {
            "id": "d2",
            "title": "Reading list",
            "body": {
                "type": "doc",
                "content": [
                    {"type": "paragraph", "content": [{"type": "text", "text": "Deep neural nets"}]}
                ],
            },
        },
        {"id": "d3", "title": "Groceries", "body": None},
    ]
    return mock


async def test_document_fallback_matches_title_and_body(directory: AsyncMock) -> None:
    executor = DocumentFallbackExecutor(directory, PlainTextExtractor())

    matches = await executor.search("NEURAL", None, 10)

    assert [m.id for m in matches] == ["d1", "d2"]
    assert matches[1].text == "Reading list"
    assert matches[1].document_id == "d2"
    assert [m.lexical_rank for m in matches] == [0, 1]


async def test_document_fallback_respects_limit(directory: AsyncMock) -> None:
    executor = DocumentFallbackExecutor(directory, PlainTextExtractor())

    matches = await executor.search("neural", None, 1)

    assert [m.id for m in matches] == ["d1"]


async def test_document_fallback_passes_scope(directory: AsyncMock) -> None:
    executor = DocumentFallbackExecutor(directory, PlainTextExtractor())

    matches = await executor.search("neural", "d2", 10)

    directory.list_documents.assert_awaited_once_with("d2")
    assert [m.id for m in matches] == ["d2"]


async def test_document_fallback_skips_unreadable_bodies(directory: AsyncMock) -> None:
    extractor = MagicMock()
    extractor.extract_plain_text.side_effect = [ValueError("corrupt"), "deep neural nets", ""]
    executor = DocumentFallbackExecutor(directory, extractor)

    matches = await executor.search("nets", None, 10)

    assert [m.id for m in matches] == ["d2"]


async def test_document_fallback_listing_failure_returns_empty() -> None:
    directory = AsyncMock()
    directory.list_documents.side_effect = RuntimeError("db closed")
    executor = DocumentFallbackExecutor(directory, PlainTextExtractor())

    assert await executor.search("neural") == []
