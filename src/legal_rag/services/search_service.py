"""Intent-aware legal search with deterministic precision re-ranking."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from legal_rag.config import Settings
from legal_rag.core.exceptions import ValidationException
from legal_rag.core.logging import get_logger
from legal_rag.core.models import Candidate, QueryIntent, QueryType, ScoredDocument
from legal_rag.core.protocols import CitationLookup, QueryClassifier, SimilaritySearch
from legal_rag.retrieval.precision import rank_by_precision

logger = get_logger(__name__)

StrategyHandler = Callable[[QueryIntent, int], Awaitable[list[ScoredDocument]]]


def _unscored(candidates: list[Candidate]) -> list[ScoredDocument]:
    return [ScoredDocument.from_candidate(candidate) for candidate in candidates]


class LegalSearchService:
    """Classifies a query and runs the matching retrieval strategy.

    ``PRECISE_ARTICLE`` tries an exact citation lookup before falling back to oversampled
    vector search ranked by precision score. ``CHAPTER_LEVEL`` oversamples and filters on
    chapter/section. ``SEMANTIC`` is plain vector search. ``COMPLEX`` currently runs the
    semantic path.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        classifier: QueryClassifier,
        citation_lookup: CitationLookup,
        similarity_search: SimilaritySearch,
    ):
        self.settings = settings
        self._classifier = classifier
        self._citations = citation_lookup
        self._vectors = similarity_search
        self._strategies: dict[QueryType, StrategyHandler] = {
            QueryType.PRECISE_ARTICLE: self._precise_article,
            QueryType.CHAPTER_LEVEL: self._chapter_level,
            QueryType.SEMANTIC: self._semantic,
            QueryType.COMPLEX: self._complex,
        }

    def classify(self, query: str) -> QueryIntent:
        return self._classifier.classify(query)

    async def search(self, query: str, max_results: int) -> list[ScoredDocument]:
        intent, results = await self.search_with_intent(query, max_results)
        return results

    async def search_with_intent(
        self, query: str, max_results: int
    ) -> tuple[QueryIntent, list[ScoredDocument]]:
        """Run a search and also return the intent that drove it."""
        if not query or not query.strip():
            raise ValidationException("Query must not be empty")
        if max_results < 1:
            raise ValidationException("max_results must be at least 1")

        intent = self._classifier.classify(query)
        logger.info(
            "Search query_type=%s law=%s article=%s max_results=%s",
            intent.query_type.value,
            intent.law_name,
            intent.article_number,
            max_results,
        )
        handler = self._strategies[intent.query_type]
        results = await handler(intent, max_results)
        logger.info("Search returned %s results", len(results))
        return intent, results

    async def _precise_article(self, intent: QueryIntent, max_results: int) -> list[ScoredDocument]:
        if intent.has_exact_match_info():
            exact = await self._citations.find_by_citation(
                str(intent.law_name), str(intent.article_number), limit=max_results
            )
            if exact:
                logger.debug("Exact citation lookup matched %s segments", len(exact))
                return _unscored(exact[:max_results])
            logger.debug("Exact citation lookup empty; falling back to vector search")

        pool_size = max_results * self.settings.precise_oversample_factor
        candidates = await self._vectors.search_similar(intent.original_query, pool_size)
        if not candidates:
            return []
        return rank_by_precision(candidates, intent, max_results)

    async def _chapter_level(self, intent: QueryIntent, max_results: int) -> list[ScoredDocument]:
        pool_size = max_results * self.settings.chapter_oversample_factor
        candidates = await self._vectors.search_similar(intent.original_query, pool_size)

        def in_scope(candidate: Candidate) -> bool:
            if intent.chapter is not None and candidate.metadata.chapter != intent.chapter:
                return False
            if intent.section is not None and candidate.metadata.section != intent.section:
                return False
            return True

        return _unscored([c for c in candidates if in_scope(c)][:max_results])

    async def _semantic(self, intent: QueryIntent, max_results: int) -> list[ScoredDocument]:
        candidates = await self._vectors.search_similar(intent.original_query, max_results)
        return _unscored(candidates[:max_results])

    async def _complex(self, intent: QueryIntent, max_results: int) -> list[ScoredDocument]:
        # TODO: decompose multi-clause queries into sub-intents and merge their results.
        logger.debug("Complex query handled by the semantic strategy")
        return await self._semantic(intent, max_results)
