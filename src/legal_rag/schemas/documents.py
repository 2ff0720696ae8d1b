"""Corpus document and document-processing schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CorpusDocument(BaseModel):
    """A row of the canonical document corpus table."""

    model_config = ConfigDict(extra="ignore")

    id: int | str
    title: str
    content: str | None = None
    document_type: str | None = None
    source_file: str | None = None
    content_hash: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("metadata", mode="before")
    @classmethod
    def _null_metadata(cls, value: Any) -> Any:
        return {} if value is None else value


class ProcessDocumentRequest(BaseModel):
    """Request model for indexing a single document."""

    content: str = Field(..., description="Full document text")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Source metadata")
    document_type: str | None = Field(
        None, description="LAW, REGULATION, CONTRACT_TEMPLATE, CASE or GENERAL"
    )


class ProcessingResultResponse(BaseModel):
    """Outcome of indexing one document."""

    success: bool
    message: str
    segment_count: int = 0
    splitter_type: str | None = None
    duration_ms: int = 0


class ProcessingConfigResponse(BaseModel):
    """Active document-processing configuration."""

    supported_document_types: list[str]
    min_chunk_size: int
    legal_min_chunk_size: int
    enable_quality_filter: bool
    chunk_size: int
    chunk_overlap: int
