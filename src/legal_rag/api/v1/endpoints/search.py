"""Legal search endpoint."""

from fastapi import APIRouter, status

from legal_rag.core.logging import get_logger
from legal_rag.dependencies import SearchServiceDep
from legal_rag.schemas.search import (
    QueryIntentResponse,
    SearchRequest,
    SearchResponse,
    SearchResultItem,
)

logger = get_logger(__name__)

router = APIRouter(tags=["search"])


@router.post(
    "/search",
    response_model=SearchResponse,
    summary="Legal Search",
    description=(
        "Classifies the query (precise article, chapter, semantic or complex) and runs "
        "the matching retrieval strategy over the segment store"
    ),
    status_code=status.HTTP_200_OK,
)
async def search(
    request: SearchRequest,
    search_service: SearchServiceDep,
) -> SearchResponse:
    """Search indexed legal segments.

    Citation queries such as ``民法典第1条`` are answered by an exact metadata lookup
    when possible; everything else goes through vector similarity, re-ranked by
    citation precision where the query names a law or article.

    Args:
        request: Search request with the query and result limit.
        search_service: Injected search service.

    Returns:
        SearchResponse: Classified intent and results in rank order.
    """
    logger.info("Search request: query=%r max_results=%s", request.query, request.max_results)
    intent, results = await search_service.search_with_intent(request.query, request.max_results)

    return SearchResponse(
        query=request.query,
        intent=QueryIntentResponse.from_intent(intent),
        results=[SearchResultItem.from_document(doc) for doc in results],
        total_results=len(results),
    )
