"""Repositories over the Qdrant-backed segment and passage stores."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence

from llama_index.core import VectorStoreIndex
from llama_index.core.base.embeddings.base import BaseEmbedding
from llama_index.vector_stores.qdrant import QdrantVectorStore  # type: ignore
from qdrant_client import models as q

from legal_rag.adapters import qdrant_mapper
from legal_rag.core.constants import K_ARTICLE_NUMBER, K_LAW_NAME, SEGMENT_VEC
from legal_rag.core.logging import get_logger
from legal_rag.core.models import Candidate, Segment
from legal_rag.services.qdrant_service import QdrantService

logger = get_logger(__name__)


def build_vector_store(qdrant_service: QdrantService, batch_size: int = 64) -> QdrantVectorStore:
    return QdrantVectorStore(
        collection_name=qdrant_service.col,
        aclient=qdrant_service.aclient,
        dense_vector_name=SEGMENT_VEC,
        batch_size=batch_size,
    )


class QdrantSegmentRepository:
    """Persists, looks up and searches segments in one Qdrant collection.

    Segments are inserted as pre-built nodes so that the splitter's boundaries are kept;
    LlamaIndex only embeds and writes them.
    """

    def __init__(
        self,
        qdrant_service: QdrantService,
        embed_model: BaseEmbedding,
        vector_store: QdrantVectorStore | None = None,
    ):
        self._qdrant = qdrant_service
        self._embed_model = embed_model
        self._vector_store = vector_store or build_vector_store(qdrant_service)
        self._index = VectorStoreIndex.from_vector_store(  # type: ignore[reportUnknownReturnType]
            self._vector_store,
            embed_model=embed_model,
        )

    @property
    def collection_name(self) -> str:
        return self._qdrant.col

    async def persist(self, segments: Sequence[Segment]) -> int:
        """Embed and write segments; transport errors propagate to the caller."""
        if not segments:
            return 0
        nodes = [qdrant_mapper.segment_to_node(segment) for segment in segments]
        await self._index.ainsert_nodes(nodes)
        logger.debug("Persisted %s segments into '%s'", len(nodes), self._qdrant.col)
        return len(nodes)

    async def find_by_citation(
        self, law_name: str, article_number: str, limit: int | None = None
    ) -> list[Candidate]:
        """Exact payload match on law name and article number.

        Without a ``limit`` every matching record is returned.
        """
        citation = q.Filter(
            must=[
                q.FieldCondition(key=K_LAW_NAME, match=q.MatchValue(value=law_name)),
                q.FieldCondition(key=K_ARTICLE_NUMBER, match=q.MatchValue(value=article_number)),
            ]
        )
        if limit is None:
            records = await self._qdrant.scroll_all_by_filter(citation)
        elif limit <= 0:
            return []
        else:
            records = await self._qdrant.retrieve_by_filter(citation, limit=limit)
        logger.debug(
            "Citation lookup law=%s article=%s matched %s records",
            law_name,
            article_number,
            len(records),
        )
        return [qdrant_mapper.record_to_candidate(record) for record in records]

    async def search_similar(self, query: str, k: int) -> list[Candidate]:
        if k <= 0:
            return []
        retriever = self._index.as_retriever(similarity_top_k=k)
        results = await retriever.aretrieve(query)
        return [qdrant_mapper.scored_node_to_candidate(result) for result in results]


class QdrantStoreAdmin:
    """Clears and counts the logical stores, addressed by store id."""

    def __init__(self, services: Mapping[str, QdrantService]):
        self._services = dict(services)

    @property
    def store_ids(self) -> tuple[str, ...]:
        return tuple(self._services)

    def _service(self, store_id: str) -> QdrantService:
        try:
            return self._services[store_id]
        except KeyError:
            raise ValueError(f"Unknown vector store: {store_id!r}") from None

    async def count_store(self, store_id: str) -> int:
        return await self._service(store_id).count()

    async def clear_store(self, store_id: str) -> int:
        """Truncate a store. A failed pre-clear count is logged and reported as 0."""
        service = self._service(store_id)
        try:
            existing = await service.count()
        except Exception as exc:
            logger.warning("Could not count store '%s' before clearing: %s", store_id, exc)
            existing = 0
        await service.truncate()
        logger.info("Cleared store '%s' (%s points removed)", store_id, existing)
        return existing

    async def ensure_schemas(self) -> None:
        await asyncio.gather(*(service.ensure_schema() for service in self._services.values()))
