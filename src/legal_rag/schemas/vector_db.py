"""Vector database administration schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from legal_rag.core.models import VectorDatabaseStats, VectorRebuildResult

RebuildStatus = Literal["running", "completed", "failed", "cancelled"]


class RebuildFailure(BaseModel):
    title: str
    message: str


class VectorRebuildResponse(BaseModel):
    """Outcome of a vector store rebuild."""

    success: bool
    message: str
    cancelled: bool = False
    start_time: datetime
    end_time: datetime | None = None
    duration_ms: int = 0
    cleared_counts: dict[str, int] = Field(default_factory=dict)
    processed_documents: int = 0
    failed_documents: int = 0
    total_chunks: int = 0
    chunks_per_store: dict[str, int] = Field(default_factory=dict)
    failures: list[RebuildFailure] = Field(default_factory=list)
    chunk_size: int
    chunk_overlap: int

    @classmethod
    def from_result(cls, result: VectorRebuildResult) -> "VectorRebuildResponse":
        return cls(
            success=result.success,
            message=result.message,
            cancelled=result.cancelled,
            start_time=result.start_time,
            end_time=result.end_time,
            duration_ms=result.duration_ms,
            cleared_counts=dict(result.cleared_counts),
            processed_documents=result.processed_documents,
            failed_documents=result.failed_documents,
            total_chunks=result.total_chunks,
            chunks_per_store=dict(result.chunks_per_store),
            failures=[RebuildFailure(title=t, message=m) for t, m in result.failures],
            chunk_size=result.chunk_size,
            chunk_overlap=result.chunk_overlap,
        )


class RebuildAcceptedResponse(BaseModel):
    """Returned when a background rebuild has been started."""

    task_id: str = Field(..., description="Identifier to poll the rebuild status with")
    status: RebuildStatus = "running"
    message: str = "Vector rebuild started"


class RebuildStatusResponse(BaseModel):
    task_id: str
    status: RebuildStatus
    result: VectorRebuildResponse | None = None


class VectorDatabaseStatsResponse(BaseModel):
    """Point-in-time vector store statistics."""

    store_counts: dict[str, int]
    source_documents_count: int
    chunk_size: int
    chunk_overlap: int
    min_chunk_size: int

    @classmethod
    def from_stats(cls, stats: VectorDatabaseStats) -> "VectorDatabaseStatsResponse":
        return cls(
            store_counts=dict(stats.store_counts),
            source_documents_count=stats.source_documents_count,
            chunk_size=stats.chunk_size,
            chunk_overlap=stats.chunk_overlap,
            min_chunk_size=stats.min_chunk_size,
        )


class VectorDatabaseHealthResponse(BaseModel):
    healthy: bool
    message: str
    store_counts: dict[str, int] = Field(default_factory=dict)
