"""Full rebuild of the segment and passage vector stores from the document corpus."""

from __future__ import annotations

import asyncio
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime

from legal_rag.config import Settings
from legal_rag.core.constants import STORE_IDS, STORE_PASSAGES, STORE_SEGMENTS
from legal_rag.core.exceptions import RebuildInProgressException
from legal_rag.core.logging import get_logger
from legal_rag.core.models import ProcessingResult, VectorDatabaseStats, VectorRebuildResult
from legal_rag.core.protocols import CorpusRepository, StoreAdmin
from legal_rag.schemas.documents import CorpusDocument
from legal_rag.services.pipeline import DocumentProcessingPipeline, PassagePipeline

logger = get_logger(__name__)

MSG_NO_DOCUMENTS = "vector stores cleared; no documents to reindex"
_MAX_TRACKED_HANDLES = 16
_PROGRESS_EVERY = 10


@dataclass(slots=True)
class RebuildTally:
    """Aggregates per-document outcomes of one rebuild run."""

    processed: int = 0
    failed: int = 0
    skipped: int = 0
    chunks_per_store: dict[str, int] = field(default_factory=dict)
    failures: list[tuple[str, str]] = field(default_factory=list)

    @property
    def total_chunks(self) -> int:
        return sum(self.chunks_per_store.values())

    def record_success(self, chunks: Mapping[str, int]) -> None:
        self.processed += 1
        for store_id, count in chunks.items():
            self.chunks_per_store[store_id] = self.chunks_per_store.get(store_id, 0) + count

    def record_failure(self, title: str, message: str) -> None:
        self.failed += 1
        self.failures.append((title, message))


class RebuildHandle:
    """Handle on a background rebuild task."""

    def __init__(
        self,
        task_id: str,
        task: asyncio.Task[VectorRebuildResult],
        stop_event: asyncio.Event,
    ):
        self.task_id = task_id
        self._task = task
        self._stop = stop_event

    async def wait(self) -> VectorRebuildResult:
        return await self._task

    def cancel(self) -> None:
        """Stop dispatching new documents; documents already in flight complete."""
        logger.info("Cancellation requested for rebuild %s", self.task_id)
        self._stop.set()

    def abort(self) -> None:
        """Cancel the rebuild task itself; the run still drains in-flight documents."""
        logger.info("Aborting rebuild task %s", self.task_id)
        self._task.cancel()

    @property
    def stop_requested(self) -> bool:
        return self._stop.is_set()

    def done(self) -> bool:
        return self._task.done()

    def result(self) -> VectorRebuildResult | None:
        if not self._task.done() or self._task.cancelled():
            return None
        return self._task.result()


class VectorRebuildService:
    """Clears both vector stores and reindexes every corpus document into them."""

    def __init__(
        self,
        settings: Settings,
        *,
        corpus: CorpusRepository,
        store_admin: StoreAdmin,
        segment_pipeline: DocumentProcessingPipeline,
        passage_pipeline: PassagePipeline,
    ):
        self.settings = settings
        self._corpus = corpus
        self._admin = store_admin
        self._segments = segment_pipeline
        self._passages = passage_pipeline
        self._handles: dict[str, RebuildHandle] = {}
        self._active: RebuildHandle | None = None

    def start_rebuild(self) -> RebuildHandle:
        """Launch a rebuild in the background.

        Raises:
            RebuildInProgressException: If a rebuild is already running.
        """
        if self._active is not None and not self._active.done():
            raise RebuildInProgressException(self._active.task_id)

        task_id = uuid.uuid4().hex
        stop_event = asyncio.Event()
        task = asyncio.create_task(self._run(task_id, stop_event), name=f"vector-rebuild-{task_id}")
        handle = RebuildHandle(task_id, task, stop_event)
        self._active = handle
        self._track(handle)
        logger.info("Started vector rebuild %s", task_id)
        return handle

    async def rebuild(self) -> VectorRebuildResult:
        """Run a rebuild and wait for its result."""
        return await self.start_rebuild().wait()

    def get_handle(self, task_id: str) -> RebuildHandle | None:
        return self._handles.get(task_id)

    def _track(self, handle: RebuildHandle) -> None:
        self._handles[handle.task_id] = handle
        finished = [tid for tid, h in self._handles.items() if h.done()]
        while len(self._handles) > _MAX_TRACKED_HANDLES and finished:
            self._handles.pop(finished.pop(0), None)

    async def store_counts(self) -> dict[str, int]:
        """Point counts per store. Unlike ``get_stats`` this raises when a store is unreachable."""
        return {store_id: await self._admin.count_store(store_id) for store_id in STORE_IDS}

    async def get_stats(self) -> VectorDatabaseStats:
        """Live store and corpus counts; any read failure yields zeros."""
        try:
            counts = await self.store_counts()
            source_count = await self._corpus.count_documents()
        except Exception as exc:
            logger.error("Failed to read vector database stats: %s", exc, exc_info=True)
            counts = dict.fromkeys(STORE_IDS, 0)
            source_count = 0

        return VectorDatabaseStats(
            store_counts=counts,
            source_documents_count=source_count,
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
            min_chunk_size=self.settings.min_chunk_size,
        )

    # ------------------------------------------------------------------ #
    # Rebuild run
    # ------------------------------------------------------------------ #
    async def _run(self, task_id: str, stop_event: asyncio.Event) -> VectorRebuildResult:
        started = time.perf_counter()
        result = VectorRebuildResult(
            start_time=datetime.now(),
            chunk_size=self.settings.chunk_size,
            chunk_overlap=self.settings.chunk_overlap,
        )
        logger.info(
            "Rebuild %s: chunk_size=%s chunk_overlap=%s min_chunk_size=%s",
            task_id,
            self.settings.chunk_size,
            self.settings.chunk_overlap,
            self.settings.min_chunk_size,
        )

        try:
            await self._clear_stores(result)
        except asyncio.CancelledError:
            return self._finalize(result, started, cancelled=True)
        except Exception as exc:
            logger.error("Rebuild %s: clearing stores failed: %s", task_id, exc, exc_info=True)
            result.message = f"Failed to clear vector stores: {exc}"
            return self._finalize(result, started)

        try:
            documents = await self._corpus.list_all_documents()
        except asyncio.CancelledError:
            return self._finalize(result, started, cancelled=True)
        except Exception as exc:
            logger.error("Rebuild %s: loading corpus failed: %s", task_id, exc, exc_info=True)
            result.message = f"Failed to load corpus documents: {exc}"
            return self._finalize(result, started)

        logger.info("Rebuild %s: %s documents to reindex", task_id, len(documents))
        if not documents:
            result.success = True
            result.message = MSG_NO_DOCUMENTS
            return self._finalize(result, started)

        tally = RebuildTally()
        semaphore = asyncio.Semaphore(max(1, self.settings.rebuild_max_concurrency))
        tasks = [
            asyncio.create_task(self._index_document(doc, semaphore, stop_event, tally, len(documents)))
            for doc in documents
        ]
        cancelled = False
        try:
            await asyncio.shield(asyncio.gather(*tasks))
        except asyncio.CancelledError:
            logger.warning("Rebuild %s cancelled; waiting for in-flight documents", task_id)
            stop_event.set()
            await asyncio.gather(*tasks, return_exceptions=True)
            cancelled = True

        cancelled = cancelled or tally.skipped > 0
        result.processed_documents = tally.processed
        result.failed_documents = tally.failed
        result.total_chunks = tally.total_chunks
        result.chunks_per_store = dict(tally.chunks_per_store)
        result.failures = list(tally.failures)

        if cancelled:
            result.message = (
                f"Vector rebuild cancelled: {tally.processed} indexed, {tally.failed} failed, "
                f"{tally.skipped} not started"
            )
        else:
            result.success = True
            result.message = (
                f"Vector rebuild complete: {tally.processed}/{len(documents)} documents indexed"
            )
        return self._finalize(result, started, cancelled=cancelled)

    async def _clear_stores(self, result: VectorRebuildResult) -> None:
        for store_id in (STORE_SEGMENTS, STORE_PASSAGES):
            result.cleared_counts[store_id] = await self._admin.clear_store(store_id)
        logger.info("Cleared vector stores: %s", result.cleared_counts)

    async def _index_document(
        self,
        doc: CorpusDocument,
        semaphore: asyncio.Semaphore,
        stop_event: asyncio.Event,
        tally: RebuildTally,
        total: int,
    ) -> None:
        async with semaphore:
            if stop_event.is_set():
                tally.skipped += 1
                return

            logger.debug("Reindexing '%s' (id=%s)", doc.title, doc.id)
            try:
                outcomes: dict[str, ProcessingResult] = {
                    STORE_PASSAGES: await self._passages.process_knowledge_document(doc),
                    STORE_SEGMENTS: await self._segments.process_knowledge_document(doc),
                }
            except Exception as exc:
                logger.error("Reindexing '%s' raised: %s", doc.title, exc, exc_info=True)
                tally.record_failure(doc.title, str(exc))
                return

            if all(outcome.success for outcome in outcomes.values()):
                tally.record_success(
                    {store_id: outcome.segment_count for store_id, outcome in outcomes.items()}
                )
            else:
                message = "; ".join(
                    f"{store_id}: {outcome.message}"
                    for store_id, outcome in outcomes.items()
                    if not outcome.success
                )
                logger.error("Reindexing '%s' failed: %s", doc.title, message)
                tally.record_failure(doc.title, message)

            done = tally.processed + tally.failed
            if done % _PROGRESS_EVERY == 0:
                logger.info("Rebuild progress: %s/%s documents, %s chunks", done, total, tally.total_chunks)

    @staticmethod
    def _finalize(
        result: VectorRebuildResult,
        started: float,
        *,
        cancelled: bool = False,
    ) -> VectorRebuildResult:
        if cancelled:
            result.cancelled = True
            result.success = False
            result.message = result.message or "Vector rebuild cancelled"
        result.end_time = datetime.now()
        result.duration_ms = int((time.perf_counter() - started) * 1000)
        logger.info(
            "Rebuild finished success=%s processed=%s failed=%s chunks=%s in %sms",
            result.success,
            result.processed_documents,
            result.failed_documents,
            result.total_chunks,
            result.duration_ms,
        )
        return result
