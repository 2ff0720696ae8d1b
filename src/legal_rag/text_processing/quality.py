"""Segment quality filtering and metadata enrichment."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from legal_rag.config import Settings
from legal_rag.core.constants import LEGAL_DOCUMENT_TYPES
from legal_rag.core.logging import get_logger
from legal_rag.core.models import Segment

logger = get_logger(__name__)

SHORT_TEXT_LENGTH = 100
LONG_TEXT_LENGTH = 3000
SHORT_TEXT_PENALTY = 0.7
LONG_TEXT_PENALTY = 0.8
NO_PUNCTUATION_PENALTY = 0.6
LOW_CJK_RATIO = 0.3
LOW_CJK_PENALTY = 0.7

_CJK_START = 0x4E00
_CJK_END = 0x9FA5


def is_legal_document(document_type: str | None) -> bool:
    """Return True for document types whose short provisions must be kept."""
    if not document_type:
        return False
    return document_type.upper() in LEGAL_DOCUMENT_TYPES


def _cjk_count(text: str) -> int:
    return sum(1 for ch in text if _CJK_START <= ord(ch) <= _CJK_END)


class SegmentQualityFilter:
    """Drops unusable segments and stamps the survivors with processing metadata."""

    def __init__(
        self,
        *,
        min_chunk_size: int,
        legal_min_chunk_size: int = 10,
        enable_quality_filter: bool = True,
        punctuation: str = "。！？；，",
    ) -> None:
        self.min_chunk_size = min_chunk_size
        self.legal_min_chunk_size = legal_min_chunk_size
        self.enable_quality_filter = enable_quality_filter
        self.punctuation = frozenset(punctuation)

    @classmethod
    def from_settings(cls, settings: Settings) -> SegmentQualityFilter:
        return cls(
            min_chunk_size=settings.min_chunk_size,
            legal_min_chunk_size=settings.legal_min_chunk_size,
            enable_quality_filter=settings.enable_quality_filter,
            punctuation=settings.quality_punctuation,
        )

    def effective_min_size(self, document_type: str | None) -> int:
        if is_legal_document(document_type):
            return self.legal_min_chunk_size
        return self.min_chunk_size

    def filter_and_enhance(
        self,
        segments: Sequence[Segment],
        document_type: str | None,
        splitter_type: str,
        *,
        timestamp: datetime | None = None,
    ) -> list[Segment]:
        """Filter segments by length and re-index the survivors.

        Steps:
            1. Drop segments whose stripped text is shorter than the effective minimum
               (10 characters for legal types, ``min_chunk_size`` otherwise).
            2. Drop segments that are blank after stripping.
            3. Stamp ``segment_index``/``total_segments`` (post-filter), ``splitter_type``
               and ``processing_timestamp`` on each survivor, preserving input order.
            4. Attach ``quality_score`` when quality filtering is enabled.

        Args:
            segments: Raw segments from a splitter.
            document_type: Type of the source document, may be None.
            splitter_type: Name of the splitter that produced the segments.
            timestamp: Processing time to stamp; defaults to now.

        Returns:
            New segments; the inputs are never modified.
        """
        min_size = self.effective_min_size(document_type)
        kept = [
            segment
            for segment in segments
            if len(segment.text.strip()) >= min_size and segment.text.strip()
        ]
        if len(kept) != len(segments):
            logger.debug(
                "Quality filter dropped %s of %s segments (min_size=%s, type=%s)",
                len(segments) - len(kept),
                len(segments),
                min_size,
                document_type,
            )

        stamped_at = (timestamp or datetime.now()).isoformat()
        total = len(kept)
        enhanced: list[Segment] = []
        for idx, segment in enumerate(kept):
            changes: dict[str, object] = {
                "segment_index": idx,
                "total_segments": total,
                "splitter_type": splitter_type,
                "processing_timestamp": stamped_at,
            }
            if self.enable_quality_filter:
                changes["quality_score"] = self.score(segment.text, document_type)
            enhanced.append(segment.with_metadata(**changes))
        return enhanced

    def score(self, text: str, document_type: str | None) -> float:
        """Score text quality in [0, 1].

        Penalties compound multiplicatively in this order: length, missing sentence
        punctuation, low share of CJK characters. Short legal text is never penalized
        for length.
        """
        score = 1.0
        length = len(text)

        if is_legal_document(document_type):
            if length > LONG_TEXT_LENGTH:
                score *= LONG_TEXT_PENALTY
        elif length < SHORT_TEXT_LENGTH:
            score *= SHORT_TEXT_PENALTY
        elif length > LONG_TEXT_LENGTH:
            score *= LONG_TEXT_PENALTY

        if not any(ch in self.punctuation for ch in text):
            score *= NO_PUNCTUATION_PENALTY

        if _cjk_count(text) < length * LOW_CJK_RATIO:
            score *= LOW_CJK_PENALTY

        return max(0.0, min(1.0, score))
