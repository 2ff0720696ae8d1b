"""Search request and response schemas."""

from typing import Any

from pydantic import BaseModel, Field

from legal_rag.core.models import QueryIntent, QueryType, ScoredDocument


class SearchRequest(BaseModel):
    """Request model for search endpoint."""

    query: str = Field(..., description="Legal question or citation", min_length=1)
    max_results: int = Field(10, description="Maximum number of results to return", ge=1, le=100)


class QueryIntentResponse(BaseModel):
    """Intent the query was classified into."""

    query_type: QueryType = Field(..., description="Retrieval strategy that was used")
    law_name: str | None = Field(None, description="Law referenced by the query")
    article_number: str | None = Field(None, description="Article, normalized to 第X条")
    chapter: str | None = Field(None, description="Chapter referenced by the query")
    section: str | None = Field(None, description="Section referenced by the query")

    @classmethod
    def from_intent(cls, intent: QueryIntent) -> "QueryIntentResponse":
        return cls(
            query_type=intent.query_type,
            law_name=intent.law_name,
            article_number=intent.article_number,
            chapter=intent.chapter,
            section=intent.section,
        )


class SearchResultItem(BaseModel):
    """A single retrieved segment."""

    id: str = Field(..., description="Segment ID")
    text: str = Field(..., description="Segment text")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Segment metadata")
    similarity: float | None = Field(None, description="Vector similarity, absent for exact matches")
    precision_score: float | None = Field(None, description="Citation match score, when ranked")

    @classmethod
    def from_document(cls, doc: ScoredDocument) -> "SearchResultItem":
        return cls(
            id=doc.node_id,
            text=doc.text,
            metadata=doc.metadata.to_payload(),
            similarity=doc.similarity,
            precision_score=doc.precision_score,
        )


class SearchResponse(BaseModel):
    """Response model for search endpoint."""

    query: str = Field(..., description="Original search query")
    intent: QueryIntentResponse = Field(..., description="Classified query intent")
    results: list[SearchResultItem] = Field(..., description="Results in rank order")
    total_results: int = Field(..., description="Number of results returned")
