"""FastAPI dependency injection utilities."""

from typing import TYPE_CHECKING, Annotated

from fastapi import Depends

from legal_rag.config import Settings, get_settings
from legal_rag.core.logging import get_logger

if TYPE_CHECKING:
    from llama_index.core.base.embeddings.base import BaseEmbedding
    from qdrant_client import AsyncQdrantClient

    from legal_rag.repositories.corpus_repository import SupabaseCorpusRepository
    from legal_rag.repositories.segment_repository import (
        QdrantSegmentRepository,
        QdrantStoreAdmin,
    )
    from legal_rag.retrieval.query_analyzer import QueryAnalyzer
    from legal_rag.services.pipeline import DocumentProcessingPipeline, PassagePipeline
    from legal_rag.services.qdrant_service import QdrantService
    from legal_rag.services.rebuild_service import VectorRebuildService
    from legal_rag.services.search_service import LegalSearchService

logger = get_logger(__name__)

# Common dependencies that can be injected into route handlers
SettingsDep = Annotated[Settings, Depends(get_settings)]


# Module-level singleton caches
_qdrant_client_cache: "AsyncQdrantClient | None" = None
_qdrant_services_cache: "dict[str, QdrantService]" = {}
_embed_model_cache: "BaseEmbedding | None" = None
_segment_repository_cache: "QdrantSegmentRepository | None" = None
_passage_repository_cache: "QdrantSegmentRepository | None" = None
_corpus_repository_cache: "SupabaseCorpusRepository | None" = None
_processing_pipeline_cache: "DocumentProcessingPipeline | None" = None
_passage_pipeline_cache: "PassagePipeline | None" = None
_search_service_cache: "LegalSearchService | None" = None
_rebuild_service_cache: "VectorRebuildService | None" = None


def get_qdrant_client(settings: SettingsDep) -> "AsyncQdrantClient":
    """Get or create the shared async Qdrant client."""
    global _qdrant_client_cache

    if _qdrant_client_cache is None:
        from qdrant_client import AsyncQdrantClient

        _qdrant_client_cache = AsyncQdrantClient(
            url=settings.qdrant_url,
            api_key=settings.qdrant_api_key,
            prefer_grpc=settings.qdrant_prefer_grpc,
            timeout=settings.qdrant_timeout,
        )

    return _qdrant_client_cache


def _qdrant_service(settings: Settings, collection_name: str) -> "QdrantService":
    service = _qdrant_services_cache.get(collection_name)
    if service is None:
        from legal_rag.services.qdrant_service import QdrantService

        service = QdrantService(settings, collection_name, aclient=get_qdrant_client(settings))
        _qdrant_services_cache[collection_name] = service
    return service


def get_embed_model(settings: SettingsDep) -> "BaseEmbedding":
    """Get or create the OpenAI embedding model."""
    global _embed_model_cache

    if _embed_model_cache is None:
        from llama_index.embeddings.openai import OpenAIEmbedding  # type: ignore

        _embed_model_cache = OpenAIEmbedding(
            api_key=settings.openai_api_key,
            model=settings.openai_embedding_model,
            max_retries=settings.openai_max_retries,
        )

    return _embed_model_cache


def get_segment_repository(
    settings: SettingsDep,
    embed_model: Annotated["BaseEmbedding", Depends(get_embed_model)],
) -> "QdrantSegmentRepository":
    """Repository over the splitter-aware segment collection."""
    global _segment_repository_cache

    if _segment_repository_cache is None:
        from legal_rag.repositories.segment_repository import QdrantSegmentRepository

        _segment_repository_cache = QdrantSegmentRepository(
            _qdrant_service(settings, settings.segment_collection_name),
            embed_model,
        )

    return _segment_repository_cache


def get_passage_repository(
    settings: SettingsDep,
    embed_model: Annotated["BaseEmbedding", Depends(get_embed_model)],
) -> "QdrantSegmentRepository":
    """Repository over the plain passage collection."""
    global _passage_repository_cache

    if _passage_repository_cache is None:
        from legal_rag.repositories.segment_repository import QdrantSegmentRepository

        _passage_repository_cache = QdrantSegmentRepository(
            _qdrant_service(settings, settings.passage_collection_name),
            embed_model,
        )

    return _passage_repository_cache


def get_store_admin(settings: SettingsDep) -> "QdrantStoreAdmin":
    from legal_rag.core.constants import STORE_PASSAGES, STORE_SEGMENTS
    from legal_rag.repositories.segment_repository import QdrantStoreAdmin

    return QdrantStoreAdmin(
        {
            STORE_SEGMENTS: _qdrant_service(settings, settings.segment_collection_name),
            STORE_PASSAGES: _qdrant_service(settings, settings.passage_collection_name),
        }
    )


async def get_corpus_repository(settings: SettingsDep) -> "SupabaseCorpusRepository":
    """Get or create the Supabase-backed corpus repository."""
    global _corpus_repository_cache

    if _corpus_repository_cache is None:
        from supabase import acreate_client

        from legal_rag.repositories.corpus_repository import SupabaseCorpusRepository

        if not settings.supabase_url or not settings.supabase_key:
            raise ValueError("Supabase URL and key must be set")
        client = await acreate_client(settings.supabase_url, settings.supabase_key)
        _corpus_repository_cache = SupabaseCorpusRepository(client, settings.corpus_table)

    return _corpus_repository_cache


def get_query_analyzer() -> "QueryAnalyzer":
    from legal_rag.retrieval.query_analyzer import QueryAnalyzer

    return QueryAnalyzer()


def get_processing_pipeline(
    settings: SettingsDep,
    segment_repository: Annotated["QdrantSegmentRepository", Depends(get_segment_repository)],
) -> "DocumentProcessingPipeline":
    global _processing_pipeline_cache

    if _processing_pipeline_cache is None:
        from legal_rag.services.pipeline import DocumentProcessingPipeline
        from legal_rag.splitters.factory import SplitterFactory
        from legal_rag.text_processing.quality import SegmentQualityFilter

        _processing_pipeline_cache = DocumentProcessingPipeline(
            splitter_factory=SplitterFactory.from_settings(settings),
            quality_filter=SegmentQualityFilter.from_settings(settings),
            store=segment_repository,
        )

    return _processing_pipeline_cache


def get_passage_pipeline(
    settings: SettingsDep,
    passage_repository: Annotated["QdrantSegmentRepository", Depends(get_passage_repository)],
) -> "PassagePipeline":
    global _passage_pipeline_cache

    if _passage_pipeline_cache is None:
        from legal_rag.services.pipeline import PassagePipeline
        from legal_rag.splitters.recursive import RecursiveSplitter

        _passage_pipeline_cache = PassagePipeline(
            splitter=RecursiveSplitter(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
            ),
            store=passage_repository,
        )

    return _passage_pipeline_cache


def get_search_service(
    settings: SettingsDep,
    analyzer: Annotated["QueryAnalyzer", Depends(get_query_analyzer)],
    segment_repository: Annotated["QdrantSegmentRepository", Depends(get_segment_repository)],
) -> "LegalSearchService":
    """Get a LegalSearchService instance."""
    global _search_service_cache

    if _search_service_cache is None:
        from legal_rag.services.search_service import LegalSearchService

        _search_service_cache = LegalSearchService(
            settings,
            classifier=analyzer,
            citation_lookup=segment_repository,
            similarity_search=segment_repository,
        )

    return _search_service_cache


def get_rebuild_service(
    settings: SettingsDep,
    corpus: Annotated["SupabaseCorpusRepository", Depends(get_corpus_repository)],
    store_admin: Annotated["QdrantStoreAdmin", Depends(get_store_admin)],
    segment_pipeline: Annotated["DocumentProcessingPipeline", Depends(get_processing_pipeline)],
    passage_pipeline: Annotated["PassagePipeline", Depends(get_passage_pipeline)],
) -> "VectorRebuildService":
    """Get the VectorRebuildService singleton; it tracks running rebuilds across requests."""
    global _rebuild_service_cache

    if _rebuild_service_cache is None:
        from legal_rag.services.rebuild_service import VectorRebuildService

        _rebuild_service_cache = VectorRebuildService(
            settings,
            corpus=corpus,
            store_admin=store_admin,
            segment_pipeline=segment_pipeline,
            passage_pipeline=passage_pipeline,
        )

    return _rebuild_service_cache


async def close_dependencies() -> None:
    """Close shared clients and drop every cached singleton."""
    global _qdrant_client_cache, _embed_model_cache, _segment_repository_cache
    global _passage_repository_cache, _corpus_repository_cache, _processing_pipeline_cache
    global _passage_pipeline_cache, _search_service_cache, _rebuild_service_cache

    if _qdrant_client_cache is not None:
        await _qdrant_client_cache.close()
        logger.info("Closed Qdrant client")

    _qdrant_client_cache = None
    _qdrant_services_cache.clear()
    _embed_model_cache = None
    _segment_repository_cache = None
    _passage_repository_cache = None
    _corpus_repository_cache = None
    _processing_pipeline_cache = None
    _passage_pipeline_cache = None
    _search_service_cache = None
    _rebuild_service_cache = None


# Type aliases for dependency injection
SearchServiceDep = Annotated["LegalSearchService", Depends(get_search_service)]
ProcessingPipelineDep = Annotated["DocumentProcessingPipeline", Depends(get_processing_pipeline)]
RebuildServiceDep = Annotated["VectorRebuildService", Depends(get_rebuild_service)]
