"""Collaborator contracts consumed by the indexing and retrieval core."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

from legal_rag.core.models import Candidate, QueryIntent, Segment, SourceDocument

if TYPE_CHECKING:
    from legal_rag.schemas.documents import CorpusDocument


class QueryClassifier(Protocol):
    """Derives a structured intent from raw query text."""

    def classify(self, query: str) -> QueryIntent:
        """Classify a query. Must be deterministic."""
        ...


class CitationLookup(Protocol):
    """Exact metadata lookup keyed by legal citation."""

    async def find_by_citation(
        self, law_name: str, article_number: str, limit: int | None = None
    ) -> list[Candidate]:
        """Return up to ``limit`` matching segments (all when None), or an empty list."""
        ...


class SimilaritySearch(Protocol):
    """Vector similarity search over indexed segments."""

    async def search_similar(self, query: str, k: int) -> list[Candidate]:
        """Return up to ``k`` candidates ordered by similarity, best first."""
        ...


class Splitter(Protocol):
    """Splits a whole document into raw segments."""

    def split(self, document: SourceDocument) -> list[Segment]:
        ...


class SegmentStore(Protocol):
    """Embeds and persists segments into one vector store."""

    async def persist(self, segments: Sequence[Segment]) -> int:
        """Persist segments and return how many were written. May raise on transport errors."""
        ...


class StoreAdmin(Protocol):
    """Administrative access to the logical vector stores."""

    async def clear_store(self, store_id: str) -> int:
        """Remove every point from a store and return the number removed."""
        ...

    async def count_store(self, store_id: str) -> int:
        ...


class CorpusRepository(Protocol):
    """Read access to the canonical document corpus."""

    async def list_all_documents(self) -> list[CorpusDocument]:
        ...

    async def count_documents(self) -> int:
        ...
