"""Tests for search API endpoint."""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from legal_rag.config import Settings
from legal_rag.core.models import Candidate, QueryType, SegmentMetadata
from legal_rag.dependencies import get_search_service
from legal_rag.main import app
from legal_rag.retrieval.query_analyzer import QueryAnalyzer
from legal_rag.services.search_service import LegalSearchService

client = TestClient(app)


class StubSegmentStore:
    """Answers citation lookups and vector searches from fixed lists."""

    def __init__(self, exact: list[Candidate], similar: list[Candidate]):
        self.exact = exact
        self.similar = similar

    async def find_by_citation(
        self, law_name: str, article_number: str, limit: int | None = None
    ) -> list[Candidate]:
        return [
            c
            for c in self.exact
            if c.metadata.law_name == law_name and c.metadata.article_number == article_number
        ]

    async def search_similar(self, query: str, k: int) -> list[Candidate]:
        return self.similar[:k]


@pytest.fixture
def search_service() -> Iterator[LegalSearchService]:
    article = Candidate(
        node_id="seg-1",
        text="第三十条 排放污染物的企业事业单位，应当采取措施。",
        metadata=SegmentMetadata(law_name="环境保护法", article_number="第三十条", chapter="第三章"),
    )
    similar = [
        Candidate(
            node_id="seg-2",
            text="违约责任的承担方式。",
            metadata=SegmentMetadata(law_name="民法典"),
            similarity=0.91,
        )
    ]
    store = StubSegmentStore([article], similar)
    service = LegalSearchService(
        Settings(),
        classifier=QueryAnalyzer(),
        citation_lookup=store,
        similarity_search=store,
    )
    app.dependency_overrides[get_search_service] = lambda: service
    yield service
    app.dependency_overrides.clear()


def test_precise_article_query(search_service: LegalSearchService) -> None:
    response = client.post("/api/v1/search", json={"query": "环境保护法第30条", "max_results": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["query"] == "环境保护法第30条"
    assert data["intent"]["query_type"] == QueryType.PRECISE_ARTICLE.value
    assert data["intent"]["law_name"] == "环境保护法"
    assert data["intent"]["article_number"] == "第三十条"
    assert data["total_results"] == 1
    result = data["results"][0]
    assert result["id"] == "seg-1"
    assert result["metadata"]["chapter"] == "第三章"
    assert result["precision_score"] is None


def test_semantic_query(search_service: LegalSearchService) -> None:
    response = client.post("/api/v1/search", json={"query": "什么是违约责任"})

    assert response.status_code == 200
    data = response.json()
    assert data["intent"]["query_type"] == "SEMANTIC"
    assert [r["id"] for r in data["results"]] == ["seg-2"]
    assert data["results"][0]["similarity"] == pytest.approx(0.91)


def test_blank_query_is_rejected(search_service: LegalSearchService) -> None:
    response = client.post("/api/v1/search", json={"query": "   "})

    assert response.status_code == 422
    assert response.json()["type"] == "ValidationException"


@pytest.mark.parametrize(
    "payload",
    [{"query": ""}, {"query": "民法典", "max_results": 0}, {"query": "民法典", "max_results": 101}, {}],
)
def test_request_validation(search_service: LegalSearchService, payload: dict) -> None:
    response = client.post("/api/v1/search", json=payload)
    assert response.status_code == 422
