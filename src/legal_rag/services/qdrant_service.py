"""Qdrant service for managing one segment collection."""

from __future__ import annotations

from typing import Final

from qdrant_client import AsyncQdrantClient
from qdrant_client import models as q
from qdrant_client.conversions.common_types import PointId

from legal_rag.config import Settings
from legal_rag.core.constants import (
    K_ARTICLE_NUMBER,
    K_CHAPTER,
    K_DOC_ID,
    K_DOCUMENT_TYPE,
    K_LAW_NAME,
    K_SECTION,
    SEGMENT_VEC,
)
from legal_rag.core.logging import get_logger

logger = get_logger(__name__)

# Keyword indexes backing exact citation lookup and chapter filtering.
_KEYWORD_INDEXES: Final[tuple[str, ...]] = (
    K_LAW_NAME,
    K_ARTICLE_NUMBER,
    K_CHAPTER,
    K_SECTION,
    K_DOC_ID,
    K_DOCUMENT_TYPE,
)


class QdrantService:
    """Thin wrapper around the async Qdrant client for one collection."""

    def __init__(
        self,
        settings: Settings,
        collection_name: str,
        aclient: AsyncQdrantClient | None = None,
    ):
        self.settings = settings
        self.col = collection_name
        self.vector_size = settings.embedding_dim

        self.aclient = aclient or AsyncQdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key,
            prefer_grpc=settings.qdrant_prefer_grpc,
            timeout=settings.qdrant_timeout,
        )

        logger.info("QdrantService initialized for collection '%s'", self.col)

    async def aclose(self) -> None:
        """Close the client."""
        await self.aclient.close()

    async def ensure_schema(self) -> None:
        """Ensure the collection exists with the dense segment vector and payload indexes."""
        if await self.collection_exists():
            logger.info("Collection '%s' already exists", self.col)
        else:
            logger.info("Creating collection '%s' with named vector '%s'", self.col, SEGMENT_VEC)
            await self.aclient.create_collection(
                collection_name=self.col,
                vectors_config={
                    SEGMENT_VEC: q.VectorParams(
                        size=self.vector_size,
                        distance=q.Distance.COSINE,
                    ),
                },
            )
            logger.info("Created collection '%s'", self.col)
        await self._ensure_payload_indexes()

    async def _ensure_payload_indexes(self) -> None:
        for field_name in _KEYWORD_INDEXES:
            try:
                await self.aclient.create_payload_index(
                    collection_name=self.col,
                    field_name=field_name,
                    field_schema=q.PayloadSchemaType.KEYWORD,
                )
            except Exception as exc:  # pragma: no cover
                if "exists" in str(exc).lower():
                    logger.debug("Index '%s' already exists", field_name)
                else:
                    logger.warning("Failed to create index '%s': %s", field_name, exc)

    async def collection_exists(self) -> bool:
        """Return True if the collection already exists."""
        return await self.aclient.collection_exists(self.col)

    async def count(self) -> int:
        """Exact number of points in the collection; 0 when it does not exist."""
        if not await self.collection_exists():
            return 0
        result = await self.aclient.count(collection_name=self.col, exact=True)
        return result.count

    async def truncate(self) -> None:
        """Drop every point by recreating the collection."""
        if await self.collection_exists():
            await self.aclient.delete_collection(collection_name=self.col)
            logger.info("Dropped collection '%s'", self.col)
        await self.ensure_schema()

    async def retrieve_by_filter(
        self,
        filter_: q.Filter,
        *,
        limit: int,
        with_payload: bool = True,
        with_vectors: bool = False,
        offset: PointId | None = None,
    ) -> list[q.Record]:
        """Scroll through records matching a filter."""
        records, _ = await self.aclient.scroll(
            collection_name=self.col,
            scroll_filter=filter_,
            limit=limit,
            offset=offset,
            with_payload=with_payload,
            with_vectors=with_vectors,
        )
        return records

    async def scroll_all_by_filter(
        self,
        filter_: q.Filter,
        *,
        page_size: int = 256,
        with_payload: bool = True,
    ) -> list[q.Record]:
        """Scroll every page of records matching a filter."""
        records: list[q.Record] = []
        offset: PointId | None = None
        while True:
            page, offset = await self.aclient.scroll(
                collection_name=self.col,
                scroll_filter=filter_,
                limit=page_size,
                offset=offset,
                with_payload=with_payload,
                with_vectors=False,
            )
            records.extend(page)
            if offset is None:
                return records


__all__ = ["QdrantService"]
