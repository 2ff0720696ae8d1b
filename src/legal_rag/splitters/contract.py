"""Clause-aware splitter for contracts and contract templates."""

from __future__ import annotations

import re

from legal_rag.core.logging import get_logger
from legal_rag.core.models import Segment, SegmentMetadata, SourceDocument

logger = get_logger(__name__)

_ARTICLE = re.compile(r"^\s*第([零一二三四五六七八九十百千0-9]+)条[\s:：]+(.*)", re.MULTILINE)
_CLAUSE = re.compile(r"^\s*第([零一二三四五六七八九十百千0-9]+)款[\s:：]+(.*)", re.MULTILINE)
_CHAPTER = re.compile(r"^\s*第([零一二三四五六七八九十百千0-9]+)章[\s:：]+(.*)", re.MULTILINE)
_NUMBERED = re.compile(r"^\s*(\d+)[.、)）]\s+(.*)", re.MULTILINE)
_PARAGRAPH_BREAK = re.compile(r"\n\n+")

MIN_STRUCTURE_MARKERS = 3
SENTENCE_BOUNDARIES = frozenset("。!?；\n")
BOUNDARY_SEARCH_WINDOW = 100


class ContractSplitter:
    """Split contracts by clause when they are structured, by paragraph otherwise."""

    def __init__(self, *, max_segment_size: int = 2000, context_overlap: int = 200) -> None:
        self.max_segment_size = max_segment_size
        self.context_overlap = context_overlap

    def split(self, document: SourceDocument) -> list[Segment]:
        content = document.text
        if not content or not content.strip():
            return []

        if self.has_structure(content):
            segments = self._split_by_structure(content, document.metadata)
            logger.debug("Contract split by structure into %s segments", len(segments))
        else:
            segments = self._split_by_paragraph(content, document.metadata)
            logger.debug("Contract split by paragraph into %s segments", len(segments))
        return segments

    def has_structure(self, content: str) -> bool:
        """True when at least three clause, chapter or numbered-item markers are present."""
        markers = 0
        for pattern in (_ARTICLE, _CHAPTER, _NUMBERED):
            for _ in pattern.finditer(content):
                markers += 1
                if markers >= MIN_STRUCTURE_MARKERS:
                    return True
        return False

    def _split_by_structure(self, content: str, base: SegmentMetadata) -> list[Segment]:
        segments: list[Segment] = []
        buffer: list[str] = []
        clause_number: str | None = None
        chapter: str | None = None

        def buffered() -> str:
            return "\n".join(buffer).strip()

        def flush() -> None:
            text = buffered()
            if text:
                segments.append(self._clause_segment(text, base, clause_number, chapter))
            buffer.clear()

        for line in content.split("\n"):
            if match := _CHAPTER.match(line):
                flush()
                chapter = f"第{match.group(1)}章"
                clause_number = None
                buffer.append(line)
                continue

            if (match := _ARTICLE.match(line)) or (match := _CLAUSE.match(line)):
                flush()
                clause_number = match.group(1)
                buffer.append(line)
                continue

            if _NUMBERED.match(line):
                if len(buffered()) > self.max_segment_size:
                    flush()
                buffer.append(line)
                continue

            buffer.append(line)
            text = buffered()
            if len(text) > self.max_segment_size:
                fragments = self.split_long_text(text)
                for idx, fragment in enumerate(fragments, start=1):
                    segment = self._clause_segment(fragment, base, clause_number, chapter)
                    segments.append(
                        segment.with_metadata(part=idx, total_parts=len(fragments))
                    )
                buffer.clear()

        flush()
        return segments

    def _split_by_paragraph(self, content: str, base: SegmentMetadata) -> list[Segment]:
        segments: list[Segment] = []
        current: list[str] = []
        current_len = 0

        def flush() -> None:
            if current:
                segments.append(
                    Segment(
                        text="\n\n".join(current),
                        metadata=base.with_updates(split_type="contract_paragraph"),
                    )
                )

        for paragraph in _PARAGRAPH_BREAK.split(content):
            paragraph = paragraph.strip()
            if not paragraph:
                continue
            if current and current_len + len(paragraph) > self.max_segment_size:
                flush()
                current, current_len = [], 0
            current.append(paragraph)
            current_len += len(paragraph) + 2

        flush()
        return segments

    def split_long_text(self, text: str) -> list[str]:
        """Cut text into windows of ``max_segment_size`` that end on a sentence boundary
        where one is near, each window overlapping the previous by ``context_overlap``."""
        if len(text) <= self.max_segment_size:
            return [text]

        fragments: list[str] = []
        start = 0
        while start < len(text):
            end = min(start + self.max_segment_size, len(text))
            if end < len(text):
                end = self._sentence_boundary(text, start, end)
            fragment = text[start:end].strip()
            if fragment:
                fragments.append(fragment)
            if end >= len(text):
                break
            start = max(start + 1, end - self.context_overlap)
        return fragments

    @staticmethod
    def _sentence_boundary(text: str, start: int, suggested_end: int) -> int:
        floor = max(start, suggested_end - BOUNDARY_SEARCH_WINDOW)
        for idx in range(suggested_end, floor - 1, -1):
            if text[idx] in SENTENCE_BOUNDARIES:
                return idx + 1
        return suggested_end

    @staticmethod
    def _clause_segment(
        text: str,
        base: SegmentMetadata,
        clause_number: str | None,
        chapter: str | None,
    ) -> Segment:
        changes: dict[str, object] = {"split_type": "contract_clause"}
        if clause_number is not None:
            changes["clause_number"] = clause_number
        if chapter is not None:
            changes["chapter"] = chapter
        return Segment(text=text, metadata=base.with_updates(**changes))
