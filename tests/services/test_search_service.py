"""Tests for the intent-aware search service."""

from __future__ import annotations

import pytest

from legal_rag.config import Settings
from legal_rag.core.exceptions import ValidationException
from legal_rag.core.models import Candidate, QueryIntent, QueryType, SegmentMetadata
from legal_rag.retrieval.query_analyzer import QueryAnalyzer
from legal_rag.services.search_service import LegalSearchService

pytestmark = pytest.mark.asyncio


class StubClassifier:
    """Returns a fixed intent for any query."""

    def __init__(self, intent: QueryIntent):
        self.intent = intent
        self.calls: list[str] = []

    def classify(self, query: str) -> QueryIntent:
        self.calls.append(query)
        return self.intent


class StubCitationLookup:
    def __init__(self, results: list[Candidate] | None = None):
        self.results = results or []
        self.calls: list[tuple[str, str]] = []
        self.limits: list[int | None] = []

    async def find_by_citation(
        self, law_name: str, article_number: str, limit: int | None = None
    ) -> list[Candidate]:
        self.calls.append((law_name, article_number))
        self.limits.append(limit)
        return list(self.results)


class StubSimilaritySearch:
    def __init__(self, results: list[Candidate] | None = None):
        self.results = results or []
        self.calls: list[tuple[str, int]] = []

    async def search_similar(self, query: str, k: int) -> list[Candidate]:
        self.calls.append((query, k))
        return list(self.results[:k])


def _candidate(node_id: str, similarity: float = 0.5, **metadata) -> Candidate:
    return Candidate(
        node_id=node_id,
        text=f"text {node_id}",
        metadata=SegmentMetadata.from_mapping(metadata),
        similarity=similarity,
    )


def _service(
    intent: QueryIntent,
    *,
    exact: list[Candidate] | None = None,
    similar: list[Candidate] | None = None,
) -> tuple[LegalSearchService, StubCitationLookup, StubSimilaritySearch]:
    lookup = StubCitationLookup(exact)
    vectors = StubSimilaritySearch(similar)
    service = LegalSearchService(
        Settings(),
        classifier=StubClassifier(intent),
        citation_lookup=lookup,
        similarity_search=vectors,
    )
    return service, lookup, vectors


PRECISE = QueryIntent(
    query_type=QueryType.PRECISE_ARTICLE,
    original_query="民法典第1042条",
    law_name="民法典",
    article_number="1042",
)


async def test_precise_exact_match_returns_lookup_order_unscored() -> None:
    exact = [_candidate("x1", similarity=None), _candidate("x2", similarity=None)]
    service, lookup, vectors = _service(PRECISE, exact=exact, similar=[_candidate("v1")])

    results = await service.search("民法典第1042条", 10)

    assert [r.node_id for r in results] == ["x1", "x2"]
    assert all(r.precision_score is None for r in results)
    assert lookup.calls == [("民法典", "1042")]
    assert vectors.calls == []


async def test_precise_exact_match_is_truncated() -> None:
    exact = [_candidate(f"x{i}") for i in range(5)]
    service, lookup, _ = _service(PRECISE, exact=exact)

    results = await service.search("民法典第1042条", 3)

    assert [r.node_id for r in results] == ["x0", "x1", "x2"]
    assert lookup.limits == [3]


async def test_precise_fallback_ranks_best_citation_first() -> None:
    similar = [
        _candidate("v0"),
        _candidate("v1"),
        _candidate("v2"),
        _candidate("hit", law_name="民法典", article_number="1042"),
        _candidate("v4"),
    ]
    service, lookup, vectors = _service(PRECISE, exact=[], similar=similar)

    results = await service.search("民法典第1042条", 5)

    assert results[0].node_id == "hit"
    assert results[0].precision_score == 150.0
    assert [r.node_id for r in results[1:]] == ["v0", "v1", "v2", "v4"]
    assert lookup.calls == [("民法典", "1042")]
    assert vectors.calls == [("民法典第1042条", 25)]


async def test_precise_without_law_name_skips_lookup() -> None:
    intent = QueryIntent(
        query_type=QueryType.PRECISE_ARTICLE,
        original_query="第1042条",
        article_number="1042",
    )
    service, lookup, vectors = _service(intent, similar=[_candidate("v0")])

    results = await service.search("第1042条", 2)

    assert lookup.calls == []
    assert vectors.calls == [("第1042条", 10)]
    assert [r.node_id for r in results] == ["v0"]


async def test_precise_fallback_with_no_candidates_is_empty() -> None:
    service, _, _ = _service(PRECISE, exact=[], similar=[])
    assert await service.search("民法典第1042条", 5) == []


async def test_chapter_level_filters_on_chapter_and_section() -> None:
    intent = QueryIntent(
        query_type=QueryType.CHAPTER_LEVEL,
        original_query="民法典第三章第一节",
        chapter="第三章",
        section="第一节",
    )
    similar = [
        _candidate("wrong-chapter", chapter="第二章", section="第一节"),
        _candidate("match-1", chapter="第三章", section="第一节"),
        _candidate("missing-section", chapter="第三章"),
        _candidate("match-2", chapter="第三章", section="第一节"),
        _candidate("no-metadata"),
        _candidate("match-3", chapter="第三章", section="第一节"),
    ]
    service, _, vectors = _service(intent, similar=similar)

    results = await service.search("民法典第三章第一节", 2)

    assert [r.node_id for r in results] == ["match-1", "match-2"]
    assert vectors.calls == [("民法典第三章第一节", 6)]


async def test_chapter_level_checks_only_specified_fields() -> None:
    intent = QueryIntent(
        query_type=QueryType.CHAPTER_LEVEL,
        original_query="第三章",
        chapter="第三章",
    )
    similar = [_candidate("a", chapter="第三章", section="第九节"), _candidate("b", chapter="第一章")]
    service, _, _ = _service(intent, similar=similar)

    results = await service.search("第三章", 10)

    assert [r.node_id for r in results] == ["a"]


async def test_semantic_passes_through_vector_results() -> None:
    intent = QueryIntent(query_type=QueryType.SEMANTIC, original_query="什么是违约责任")
    similar = [_candidate("s1", 0.9), _candidate("s2", 0.8), _candidate("s3", 0.7)]
    service, lookup, vectors = _service(intent, similar=similar)

    results = await service.search("什么是违约责任", 2)

    assert [r.node_id for r in results] == ["s1", "s2"]
    assert [r.similarity for r in results] == [0.9, 0.8]
    assert vectors.calls == [("什么是违约责任", 2)]
    assert lookup.calls == []


async def test_complex_uses_semantic_search() -> None:
    intent = QueryIntent(query_type=QueryType.COMPLEX, original_query="合同法和侵权法第几条")
    service, _, vectors = _service(intent, similar=[_candidate("c1")])

    results = await service.search("合同法和侵权法第几条", 4)

    assert [r.node_id for r in results] == ["c1"]
    assert vectors.calls == [("合同法和侵权法第几条", 4)]


async def test_search_with_intent_returns_classification() -> None:
    service, _, _ = _service(PRECISE, exact=[_candidate("x1")])

    intent, results = await service.search_with_intent("民法典第1042条", 10)

    assert intent is PRECISE
    assert len(results) == 1


@pytest.mark.parametrize(("query", "max_results"), [("", 5), ("   ", 5), ("民法典", 0)])
async def test_invalid_arguments_are_rejected(query: str, max_results: int) -> None:
    service, _, _ = _service(PRECISE)
    with pytest.raises(ValidationException):
        await service.search(query, max_results)


async def test_real_classifier_routes_chapter_queries() -> None:
    vectors = StubSimilaritySearch([_candidate("c", chapter="第三章")])
    service = LegalSearchService(
        Settings(),
        classifier=QueryAnalyzer(),
        citation_lookup=StubCitationLookup(),
        similarity_search=vectors,
    )

    intent, results = await service.search_with_intent("民法典第三章的主要内容", 3)

    assert intent.query_type == QueryType.CHAPTER_LEVEL
    assert [r.node_id for r in results] == ["c"]
    assert vectors.calls == [("民法典第三章的主要内容", 9)]
