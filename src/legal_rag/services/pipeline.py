"""Document indexing pipelines: split, filter, embed and persist."""

from __future__ import annotations

import time
from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from legal_rag.core.constants import (
    SOURCE_TYPE_KNOWLEDGE_BASE,
    SPLITTER_RECURSIVE,
    SUPPORTED_DOCUMENT_TYPES,
)
from legal_rag.core.logging import get_logger
from legal_rag.core.models import (
    BatchProcessingResult,
    ProcessingResult,
    SegmentMetadata,
    SourceDocument,
)
from legal_rag.core.protocols import SegmentStore
from legal_rag.schemas.documents import CorpusDocument
from legal_rag.splitters.factory import SplitterFactory
from legal_rag.splitters.recursive import RecursiveSplitter
from legal_rag.text_processing.checksum import compute_checksum
from legal_rag.text_processing.quality import SegmentQualityFilter

logger = get_logger(__name__)

MSG_EMPTY_CONTENT = "Document content is empty"
MSG_NO_SEGMENTS = "No valid segments after splitting"
MSG_SUCCESS = "Document processed successfully"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def knowledge_metadata(doc: CorpusDocument, *, include_record: bool = True) -> SegmentMetadata:
    """Source metadata for a corpus document, with the record's own metadata layered on top."""
    base = SegmentMetadata.from_mapping(
        {
            "doc_id": str(doc.id),
            "original_filename": doc.title,
            "document_type": doc.document_type,
            "source_file": doc.source_file,
            "file_hash": doc.content_hash or compute_checksum(doc.content or ""),
            "source_type": SOURCE_TYPE_KNOWLEDGE_BASE,
            "indexed_at": datetime.now().isoformat(),
        }
    )
    if include_record:
        return base.merged(doc.metadata)
    return base


def _coerce_metadata(metadata: Mapping[str, Any] | SegmentMetadata | None) -> SegmentMetadata:
    if isinstance(metadata, SegmentMetadata):
        return metadata
    return SegmentMetadata.from_mapping(metadata)


class DocumentProcessingPipeline:
    """Splitter-aware pipeline feeding the segment store."""

    def __init__(
        self,
        *,
        splitter_factory: SplitterFactory,
        quality_filter: SegmentQualityFilter,
        store: SegmentStore,
    ) -> None:
        self._splitters = splitter_factory
        self._quality = quality_filter
        self._store = store

    async def process_document(
        self,
        content: str | None,
        metadata: Mapping[str, Any] | SegmentMetadata | None,
        document_type: str | None,
    ) -> ProcessingResult:
        """Split, filter and persist one document.

        Never raises: blank input, an empty post-filter segment set and storage errors are
        all reported as ``success=False``.
        """
        started = time.perf_counter()
        if not content or not content.strip():
            logger.warning("Skipping document with empty content (type=%s)", document_type)
            return ProcessingResult(success=False, message=MSG_EMPTY_CONTENT)

        logger.info("Processing document type=%s length=%s", document_type, len(content))
        try:
            source_metadata = _coerce_metadata(metadata)
            splitter = self._splitters.select_splitter(
                document_type, source_metadata.original_filename
            )
            splitter_type = self._splitters.splitter_type(splitter)

            raw_segments = splitter.split(SourceDocument(text=content, metadata=source_metadata))
            segments = self._quality.filter_and_enhance(raw_segments, document_type, splitter_type)
            logger.debug(
                "%s produced %s raw segments, %s kept",
                splitter_type,
                len(raw_segments),
                len(segments),
            )
            if not segments:
                logger.warning("No segments survived filtering (type=%s)", document_type)
                return ProcessingResult(
                    success=False,
                    message=MSG_NO_SEGMENTS,
                    splitter_type=splitter_type,
                    duration_ms=_elapsed_ms(started),
                )

            stored = await self._store.persist(segments)
        except Exception as exc:
            logger.error(
                "Document processing failed (type=%s): %s", document_type, exc, exc_info=True
            )
            return ProcessingResult(
                success=False,
                message=f"Document processing failed: {exc}",
                duration_ms=_elapsed_ms(started),
            )

        duration_ms = _elapsed_ms(started)
        logger.info(
            "Document processed with %s: %s segments stored in %sms",
            splitter_type,
            stored,
            duration_ms,
        )
        return ProcessingResult(
            success=True,
            message=MSG_SUCCESS,
            segment_count=stored,
            splitter_type=splitter_type,
            duration_ms=duration_ms,
        )

    async def process_knowledge_document(self, doc: CorpusDocument) -> ProcessingResult:
        logger.info("Processing corpus document '%s' (id=%s)", doc.title, doc.id)
        if not doc.content or not doc.content.strip():
            logger.warning("Corpus document '%s' has no content", doc.title)
            return ProcessingResult(success=False, message=MSG_EMPTY_CONTENT)
        return await self.process_document(doc.content, knowledge_metadata(doc), doc.document_type)

    async def batch_process_documents(
        self, documents: Sequence[CorpusDocument]
    ) -> BatchProcessingResult:
        """Process documents one after another; a failure never stops the batch."""
        started = time.perf_counter()
        success_count = 0
        total_segments = 0
        failed: list[str] = []

        for doc in documents:
            try:
                result = await self.process_knowledge_document(doc)
            except Exception as exc:
                logger.error("Batch processing failed for '%s'", doc.title, exc_info=True)
                failed.append(f"{doc.title}: {exc}")
                continue
            if result.success:
                success_count += 1
                total_segments += result.segment_count
            else:
                failed.append(f"{doc.title}: {result.message}")

        batch = BatchProcessingResult(
            total_documents=len(documents),
            success_count=success_count,
            failed_count=len(failed),
            total_segments=total_segments,
            failed_documents=failed,
            duration_ms=_elapsed_ms(started),
        )
        logger.info(
            "Batch complete: %s documents, %s succeeded, %s failed, %s segments in %sms",
            batch.total_documents,
            batch.success_count,
            batch.failed_count,
            batch.total_segments,
            batch.duration_ms,
        )
        return batch

    def supported_document_types(self) -> list[str]:
        return list(SUPPORTED_DOCUMENT_TYPES)

    def config_info(self) -> dict[str, Any]:
        recursive = self._splitters.recursive
        return {
            "supported_document_types": self.supported_document_types(),
            "min_chunk_size": self._quality.min_chunk_size,
            "legal_min_chunk_size": self._quality.legal_min_chunk_size,
            "enable_quality_filter": self._quality.enable_quality_filter,
            "chunk_size": recursive.chunk_size,
            "chunk_overlap": recursive.chunk_overlap,
        }


class PassagePipeline:
    """Plain chunking pipeline feeding the passage store.

    Every document is cut by the recursive splitter regardless of type; no quality
    scoring is applied.
    """

    def __init__(self, *, splitter: RecursiveSplitter, store: SegmentStore) -> None:
        self._splitter = splitter
        self._store = store

    async def process_text(
        self,
        content: str | None,
        metadata: Mapping[str, Any] | SegmentMetadata | None,
    ) -> ProcessingResult:
        started = time.perf_counter()
        if not content or not content.strip():
            return ProcessingResult(success=False, message=MSG_EMPTY_CONTENT)

        try:
            chunks = self._splitter.split(
                SourceDocument(text=content, metadata=_coerce_metadata(metadata))
            )
            if not chunks:
                return ProcessingResult(
                    success=False,
                    message=MSG_NO_SEGMENTS,
                    splitter_type=SPLITTER_RECURSIVE,
                    duration_ms=_elapsed_ms(started),
                )
            stamped_at = datetime.now().isoformat()
            chunks = [
                chunk.with_metadata(
                    segment_index=idx,
                    total_segments=len(chunks),
                    splitter_type=SPLITTER_RECURSIVE,
                    processing_timestamp=stamped_at,
                )
                for idx, chunk in enumerate(chunks)
            ]
            stored = await self._store.persist(chunks)
        except Exception as exc:
            logger.error("Passage processing failed: %s", exc, exc_info=True)
            return ProcessingResult(
                success=False,
                message=f"Passage processing failed: {exc}",
                duration_ms=_elapsed_ms(started),
            )

        return ProcessingResult(
            success=True,
            message=MSG_SUCCESS,
            segment_count=stored,
            splitter_type=SPLITTER_RECURSIVE,
            duration_ms=_elapsed_ms(started),
        )

    async def process_knowledge_document(self, doc: CorpusDocument) -> ProcessingResult:
        return await self.process_text(doc.content, knowledge_metadata(doc, include_record=False))
