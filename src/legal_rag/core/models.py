"""Domain models shared by the indexing and retrieval pipelines."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class QueryType(str, Enum):
    """Retrieval strategy selected for a query."""

    PRECISE_ARTICLE = "PRECISE_ARTICLE"
    CHAPTER_LEVEL = "CHAPTER_LEVEL"
    SEMANTIC = "SEMANTIC"
    COMPLEX = "COMPLEX"


@dataclass(frozen=True, slots=True)
class QueryIntent:
    """Structured retrieval needs extracted from a user query."""

    query_type: QueryType
    original_query: str
    law_name: str | None = None
    article_number: str | None = None
    chapter: str | None = None
    section: str | None = None

    def has_exact_match_info(self) -> bool:
        return self.law_name is not None and self.article_number is not None

    def is_precise_query(self) -> bool:
        return self.query_type in (QueryType.PRECISE_ARTICLE, QueryType.CHAPTER_LEVEL)


@dataclass(frozen=True)
class SegmentMetadata:
    """Typed metadata carried by source documents and their segments.

    Known keys are explicit fields; anything else supplied upstream is kept in ``extra``
    and passed through to storage untouched. ``None`` means absent and is never emitted.
    """

    doc_id: str | None = None
    original_filename: str | None = None
    document_type: str | None = None
    source_file: str | None = None
    file_hash: str | None = None
    source_type: str | None = None
    indexed_at: str | None = None
    law_name: str | None = None
    law_category: str | None = None
    article_number: str | None = None
    book: str | None = None
    chapter: str | None = None
    section: str | None = None
    hierarchy_path: str | None = None
    split_type: str | None = None
    clause_number: str | None = None
    part: int | None = None
    total_parts: int | None = None
    segment_index: int | None = None
    total_segments: int | None = None
    splitter_type: str | None = None
    processing_timestamp: str | None = None
    quality_score: float | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def known_keys(cls) -> frozenset[str]:
        return _KNOWN_KEYS

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any] | None) -> SegmentMetadata:
        """Build metadata from a loose mapping, dropping null values."""
        known: dict[str, Any] = {}
        extra: dict[str, Any] = {}
        for key, value in (values or {}).items():
            if value is None:
                continue
            if key in _KNOWN_KEYS:
                known[key] = value
            else:
                extra[key] = value
        return cls(**known, extra=extra)

    def get(self, key: str, default: Any = None) -> Any:
        if key in _KNOWN_KEYS:
            value = getattr(self, key)
            return default if value is None else value
        return self.extra.get(key, default)

    def with_updates(self, **changes: Any) -> SegmentMetadata:
        """Return a copy with ``changes`` applied; a ``None`` value removes the key."""
        known: dict[str, Any] = {}
        extra = dict(self.extra)
        for key, value in changes.items():
            if key in _KNOWN_KEYS:
                known[key] = value
            elif value is None:
                extra.pop(key, None)
            else:
                extra[key] = value
        return dataclasses.replace(self, **known, extra=extra)

    def merged(self, values: Mapping[str, Any] | None) -> SegmentMetadata:
        """Return a copy with every non-null entry of ``values`` layered on top."""
        if not values:
            return self
        return self.with_updates(**{k: v for k, v in values.items() if v is not None})

    def to_payload(self) -> dict[str, Any]:
        """Flatten into an ordered payload dict with absent values omitted."""
        payload: dict[str, Any] = {}
        for name in _FIELD_ORDER:
            value = getattr(self, name)
            if value is not None:
                payload[name] = value
        for key, value in self.extra.items():
            if value is not None and key not in payload:
                payload[key] = value
        return payload


_FIELD_ORDER: tuple[str, ...] = tuple(
    f.name for f in dataclasses.fields(SegmentMetadata) if f.name != "extra"
)
_KNOWN_KEYS: frozenset[str] = frozenset(_FIELD_ORDER)


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """A whole document handed to a splitter."""

    text: str
    metadata: SegmentMetadata = field(default_factory=SegmentMetadata)


@dataclass(frozen=True, slots=True)
class Segment:
    """A unit of split document text; the atomic unit stored in a vector index."""

    text: str
    metadata: SegmentMetadata = field(default_factory=SegmentMetadata)

    def with_metadata(self, **changes: Any) -> Segment:
        return Segment(text=self.text, metadata=self.metadata.with_updates(**changes))


@dataclass(frozen=True, slots=True)
class Candidate:
    """A retrieval hit returned by exact-match or vector search."""

    node_id: str
    text: str
    metadata: SegmentMetadata
    similarity: float | None = None


@dataclass(frozen=True, slots=True)
class ScoredDocument:
    """A search result, optionally carrying its precision score."""

    node_id: str
    text: str
    metadata: SegmentMetadata
    similarity: float | None = None
    precision_score: float | None = None

    @classmethod
    def from_candidate(
        cls,
        candidate: Candidate,
        precision_score: float | None = None,
    ) -> ScoredDocument:
        return cls(
            node_id=candidate.node_id,
            text=candidate.text,
            metadata=candidate.metadata,
            similarity=candidate.similarity,
            precision_score=precision_score,
        )


@dataclass(frozen=True, slots=True)
class ProcessingResult:
    """Outcome of processing one document into one store."""

    success: bool
    message: str
    segment_count: int = 0
    splitter_type: str | None = None
    duration_ms: int = 0


@dataclass(frozen=True, slots=True)
class BatchProcessingResult:
    """Aggregate outcome of processing several documents."""

    total_documents: int
    success_count: int
    failed_count: int
    total_segments: int
    failed_documents: list[str] = field(default_factory=list)
    duration_ms: int = 0


@dataclass(slots=True)
class VectorRebuildResult:
    """Outcome of a full dual-store rebuild, filled in as the run progresses."""

    start_time: datetime
    chunk_size: int
    chunk_overlap: int
    success: bool = False
    message: str = ""
    end_time: datetime | None = None
    duration_ms: int = 0
    cleared_counts: dict[str, int] = field(default_factory=dict)
    processed_documents: int = 0
    failed_documents: int = 0
    total_chunks: int = 0
    chunks_per_store: dict[str, int] = field(default_factory=dict)
    failures: list[tuple[str, str]] = field(default_factory=list)
    cancelled: bool = False


@dataclass(frozen=True, slots=True)
class VectorDatabaseStats:
    """Point-in-time snapshot of both stores and the chunking configuration."""

    store_counts: dict[str, int]
    source_documents_count: int
    chunk_size: int
    chunk_overlap: int
    min_chunk_size: int
