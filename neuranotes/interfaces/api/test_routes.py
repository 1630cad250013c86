"""Tests for API Routes."""

from collections.abc import Generator
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from neuranotes.config.errors import EmbeddingUnavailable, ErrorCode, StorageError
from neuranotes.domains.search import FusedResult, SearchMethod, SearchOutcome

from . import deps
from .deps import get_search_engine, get_sqlite_repository, get_vector_index
from .main import create_app
from .middleware import error_code_to_status


@pytest.fixture
def mock_engine() -> AsyncMock:
    """Create a mock search engine."""
    mock = AsyncMock()
    mock.embedding_configured = True
    mock.search.return_value = SearchOutcome(
        success=True,
        query="artificial intelligence",
        results=[
            FusedResult(
                id="p1",
                document_id="d1",
                text="AI is...",
                lexical_score=1.0,
                vector_score=0.9,
                hybrid_score=0.95,
            )
        ],
        total=1,
        method=SearchMethod.FUSED,
        duration_ms=12.5,
    )
    return mock


@pytest.fixture
def mock_repo() -> AsyncMock:
    """Create a mock SQLite repository."""
    mock = AsyncMock()
    mock.get_passage_count.return_value = 42
    return mock


@pytest.fixture
def mock_index() -> MagicMock:
    """Create a mock vector index."""
    mock = MagicMock()
    mock.size = 40
    return mock


@pytest.fixture
def client(
    mock_engine: AsyncMock, mock_repo: AsyncMock, mock_index: MagicMock
) -> Generator[TestClient, None, None]:
    """Create a test client with mocked dependencies."""
    app = create_app()

    # Override dependencies with mocks
    app.dependency_overrides[get_search_engine] = lambda: mock_engine
    app.dependency_overrides[get_sqlite_repository] = lambda: mock_repo
    app.dependency_overrides[get_vector_index] = lambda: mock_index

    yield TestClient(app)

    app.dependency_overrides.clear()


class TestHealthRoutes:
    """Tests for health check endpoints."""

    def test_health_check(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "neuranotes"}

    def test_api_info(self, client: TestClient) -> None:
        response = client.get("/api")
        assert response.status_code == 200
        assert response.json()["name"] == "NeuraNotes API"

    def test_readiness_hybrid(self, client: TestClient) -> None:
        response = client.get("/health/ready")
        assert response.status_code == 200
        assert response.json() == {
            "status": "ready",
            "passages": 42,
            "vectors": 40,
            "embedding_configured": True,
            "mode": "hybrid",
        }

    def test_readiness_keyword_only(
        self, client: TestClient, mock_engine: AsyncMock, mock_index: MagicMock
    ) -> None:
        mock_engine.embedding_configured = False
        assert client.get("/health/ready").json()["mode"] == "keyword"

        mock_engine.embedding_configured = True
        mock_index.size = 0
        assert client.get("/health/ready").json()["mode"] == "keyword"

    def test_readiness_storage_failure(self, client: TestClient, mock_repo: AsyncMock) -> None:
        mock_repo.get_passage_count.side_effect = StorageError("database is locked")

        response = client.get("/health/ready")

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "STORAGE_CONNECTION_FAILED"

    def test_request_context_headers(self, client: TestClient) -> None:
        response = client.get("/health", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"
        assert float(response.headers["X-Response-Time-Ms"]) >= 0

    def test_request_id_generated(self, client: TestClient) -> None:
        response = client.get("/health")
        assert len(response.headers["X-Request-ID"]) == 32


class TestHybridSearchRoute:
    """Tests for POST /api/hybrid-search."""

    def test_search_returns_outcome(self, client: TestClient, mock_engine: AsyncMock) -> None:
        response = client.post(
            "/api/hybrid-search",
            json={"query": "artificial intelligence", "document_id": "d1", "limit": 3},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["method"] == "fused"
        assert data["total"] == 1
        assert data["results"][0]["hybrid_score"] == 0.95

        query = mock_engine.search.await_args.args[0]
        assert query.text == "artificial intelligence"
        assert query.scope_document_id == "d1"
        assert query.limit == 3
        assert (query.lexical_weight, query.vector_weight) == (0.5, 0.5)

    def test_search_default_limit(self, client: TestClient, mock_engine: AsyncMock) -> None:
        client.post("/api/hybrid-search", json={"query": "agents"})

        query = mock_engine.search.await_args.args[0]
        assert query.limit == 10

    def test_search_passes_weights(self, client: TestClient, mock_engine: AsyncMock) -> None:
        client.post(
            "/api/hybrid-search",
            json={"query": "agents", "lexical_weight": 0.8, "vector_weight": 0.2},
        )

        query = mock_engine.search.await_args.args[0]
        assert (query.lexical_weight, query.vector_weight) == (0.8, 0.2)

    def test_degraded_search_is_200(self, client: TestClient, mock_engine: AsyncMock) -> None:
        mock_engine.search.return_value = SearchOutcome(
            success=True, query="agents", method=SearchMethod.LEXICAL_FALLBACK
        )

        response = client.post("/api/hybrid-search", json={"query": "agents"})

        assert response.status_code == 200
        assert response.json()["method"] == "lexical-fallback"

    @pytest.mark.parametrize(
        "body",
        [
            {"query": ""},
            {"query": "x" * 1001},
            {"query": "agents", "limit": 0},
            {"query": "agents", "limit": 101},
            {"query": "agents", "vector_weight": -1},
            {},
        ],
    )
    def test_invalid_request_rejected(
        self, client: TestClient, mock_engine: AsyncMock, body: dict
    ) -> None:
        response = client.post("/api/hybrid-search", json=body)

        assert response.status_code == 422
        mock_engine.search.assert_not_awaited()

    def test_failed_outcome_is_500(self, client: TestClient, mock_engine: AsyncMock) -> None:
        mock_engine.search.return_value = SearchOutcome(
            success=False, query="agents", method=SearchMethod.ERROR, error="executor crashed"
        )

        response = client.post("/api/hybrid-search", json={"query": "agents"})

        assert response.status_code == 500
        data = response.json()
        assert data["error"]["code"] == "SEARCH_FAILED"
        assert data["error"]["message"] == "executor crashed"
        assert data["outcome"]["method"] == "error"

    def test_domain_error_mapped_by_middleware(
        self, client: TestClient, mock_engine: AsyncMock
    ) -> None:
        mock_engine.search.side_effect = EmbeddingUnavailable("provider down")

        response = client.post("/api/hybrid-search", json={"query": "agents"})

        assert response.status_code == 503
        assert response.json()["error"]["code"] == "EMBEDDING_UNAVAILABLE"


def test_unmapped_error_codes_are_500() -> None:
    assert error_code_to_status(ErrorCode.SEARCH_FAILED) == 500
    assert error_code_to_status(ErrorCode.SEARCH_INVALID_QUERY) == 400


class TestServiceLifecycle:
    """Tests for startup and shutdown wiring."""

    @pytest.fixture(autouse=True)
    def fresh_singletons(self) -> Generator[None, None, None]:
        deps.get_search_engine.cache_clear()
        yield
        deps.get_search_engine.cache_clear()

    async def test_cleanup_closes_engine_and_repository(self) -> None:
        engine, repo = AsyncMock(), AsyncMock()
        with (
            patch.object(deps, "build_search_engine", return_value=engine),
            patch.object(deps, "get_sqlite_repository", return_value=repo),
            patch.object(deps, "get_vector_index", return_value=MagicMock()),
        ):
            assert deps.get_search_engine() is engine
            await deps.cleanup_services()

        engine.aclose.assert_awaited_once()
        repo.close.assert_awaited_once()

    async def test_cleanup_does_not_build_unused_engine(self) -> None:
        repo = AsyncMock()
        with (
            patch.object(deps, "build_search_engine") as build,
            patch.object(deps, "get_sqlite_repository", return_value=repo),
        ):
            await deps.cleanup_services()

        build.assert_not_called()
        repo.close.assert_awaited_once()
