"""Hierarchy-aware splitter for statutes and regulations."""

from __future__ import annotations

import re
from collections.abc import Sequence

from legal_rag.core.logging import get_logger
from legal_rag.core.models import Segment, SegmentMetadata, SourceDocument
from legal_rag.text_processing.token_estimator import CJK_CHARS_PER_TOKEN, estimate_tokens

logger = get_logger(__name__)

# Lookahead so the article heading stays with its body.
_ARTICLE_SPLIT = re.compile(r"(?=第[一二三四五六七八九十百千零〇]+条)")
_ARTICLE_NUMBER = re.compile(r"^\s*(第[一二三四五六七八九十百千零〇]+条)")
_BOOK = re.compile(r"^\s*(第[一二三四五六七八九十百]+编\s*.*)$")
_CHAPTER = re.compile(r"^\s*(第[一二三四五六七八九十百]+章\s*.*)$")
_SECTION = re.compile(r"^\s*(第[一二三四五六七八九十百]+节\s*.*)$")
_FILE_EXTENSION = re.compile(r"\.(pdf|docx|txt|doc)$")
_NATIONAL_PREFIX = re.compile(r"^中华人民共和国")
_PARAGRAPH_BREAK = re.compile(r"\n\n+")
# Leading designator of a heading, e.g. 第三章 in "第三章 合同的履行".
_HEADING_DESIGNATOR = re.compile(r"^第[一二三四五六七八九十百]+[编章节]")

LONG_ARTICLE_SEPARATORS: tuple[str, ...] = ("\n\n", "。", "；", "，")
UNKNOWN_ARTICLE = "未知条号"

# Ordered: the first matching category wins.
LAW_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("环境保护", ("环境", "污染")),
    ("劳动社保", ("劳动", "社保", "工伤")),
    ("民事法律", ("民法", "合同", "物权", "侵权")),
    ("刑事法律", ("刑法", "刑事")),
    ("行政法律", ("行政", "处罚")),
    ("诉讼程序", ("诉讼",)),
    ("基本法律", ("宪法",)),
)
DEFAULT_LAW_CATEGORY = "其他"


def _designator(heading: str) -> str:
    """Citation key of a heading; the full titled heading stays in the hierarchy path."""
    match = _HEADING_DESIGNATOR.match(heading)
    return match.group(0) if match else heading


def law_name_from_filename(filename: str) -> str:
    """Law name as queries cite it: no file extension, no 中华人民共和国 prefix."""
    return _NATIONAL_PREFIX.sub("", _FILE_EXTENSION.sub("", filename), count=1)


def categorize_law(law_name: str | None) -> str:
    """Map a law name onto a coarse category using keyword matching."""
    if not law_name:
        return DEFAULT_LAW_CATEGORY
    name = law_name.lower()
    for category, keywords in LAW_CATEGORIES:
        if any(keyword in name for keyword in keywords):
            return category
    return DEFAULT_LAW_CATEGORY


class LegalDocumentSplitter:
    """Split legal text so that every segment is one article (第X条).

    Headings for books (编), chapters (章) and sections (节) are tracked while walking the
    document line by line and stamped on each article. Articles longer than ``max_tokens``
    are split again on progressively finer separators and tagged with ``part`` and
    ``total_parts``. Documents without recognizable articles degrade to paragraph chunks.
    """

    def __init__(
        self,
        *,
        max_tokens: int = 512,
        chunk_overlap: int = 50,
        hierarchical: bool = True,
    ) -> None:
        self.max_tokens = max_tokens
        self.chunk_overlap = chunk_overlap
        self.hierarchical = hierarchical

    def split(self, document: SourceDocument) -> list[Segment]:
        content = document.text
        if not content or not content.strip():
            logger.warning("Legal splitter received empty content; returning no segments")
            return []

        logger.debug("Splitting legal document (%s chars)", len(content))
        if self.hierarchical:
            segments = self._split_with_hierarchy(content, document.metadata)
        else:
            segments = self._split_by_article(content, document.metadata)

        segments = self._split_long_articles(segments)
        logger.info("Legal splitter produced %s segments", len(segments))
        return segments

    # ------------------------------------------------------------------ #
    # Article extraction
    # ------------------------------------------------------------------ #
    def _split_with_hierarchy(self, content: str, base: SegmentMetadata) -> list[Segment]:
        segments: list[Segment] = []
        book: str | None = None
        chapter: str | None = None
        section: str | None = None
        article_number: str | None = None
        article_lines: list[str] = []

        def flush() -> None:
            nonlocal article_number, article_lines
            if article_number is not None:
                segments.append(
                    self._article_segment(
                        "\n".join(article_lines),
                        base,
                        article_number=article_number,
                        book=book,
                        chapter=chapter,
                        section=section,
                    )
                )
            article_number = None
            article_lines = []

        for raw_line in content.split("\n"):
            line = raw_line.strip()
            if not line:
                continue

            if match := _BOOK.match(line):
                flush()
                book, chapter, section = match.group(1), None, None
                continue
            if match := _CHAPTER.match(line):
                flush()
                chapter, section = match.group(1), None
                continue
            if match := _SECTION.match(line):
                flush()
                section = match.group(1)
                continue
            if match := _ARTICLE_NUMBER.match(line):
                flush()
                article_number = match.group(1)
                article_lines = [line]
            elif article_number is not None:
                article_lines.append(line)

        flush()

        if not segments:
            logger.warning("No article headings found line by line; trying regex article split")
            return self._split_by_article(content, base)
        return segments

    def _split_by_article(self, content: str, base: SegmentMetadata) -> list[Segment]:
        segments: list[Segment] = []
        for piece in _ARTICLE_SPLIT.split(content):
            text = piece.strip()
            if not text.startswith("第"):
                continue
            match = _ARTICLE_NUMBER.match(text)
            article_number = match.group(1) if match else UNKNOWN_ARTICLE
            segments.append(
                self._article_segment(
                    text,
                    base,
                    article_number=article_number,
                    split_type="article",
                )
            )

        if not segments:
            logger.warning("No articles recognized; falling back to paragraph split")
            return self._fallback_split(content, base)
        return segments

    def _article_segment(
        self,
        text: str,
        base: SegmentMetadata,
        *,
        article_number: str,
        book: str | None = None,
        chapter: str | None = None,
        section: str | None = None,
        split_type: str = "article_hierarchical",
    ) -> Segment:
        path = [level for level in (book, chapter, section) if level]
        path.append(article_number)

        changes: dict[str, object] = {
            "article_number": article_number,
            "split_type": split_type,
            "hierarchy_path": " > ".join(path),
        }
        for key, heading in (("book", book), ("chapter", chapter), ("section", section)):
            if heading:
                changes[key] = _designator(heading)
        if base.original_filename:
            law_name = law_name_from_filename(base.original_filename)
            changes["law_name"] = law_name
            changes["law_category"] = categorize_law(law_name)

        return Segment(text=text.strip(), metadata=base.with_updates(**changes))

    # ------------------------------------------------------------------ #
    # Long articles
    # ------------------------------------------------------------------ #
    def _tokens(self, text: str) -> int:
        return estimate_tokens(text, CJK_CHARS_PER_TOKEN)

    def _split_long_articles(self, segments: Sequence[Segment]) -> list[Segment]:
        result: list[Segment] = []
        for segment in segments:
            if self._tokens(segment.text) <= self.max_tokens:
                result.append(segment)
                continue

            chunks = self._recursive_split(segment.text)
            logger.debug(
                "Article %s split into %s parts",
                segment.metadata.article_number,
                len(chunks),
            )
            for idx, chunk in enumerate(chunks, start=1):
                result.append(
                    Segment(
                        text=chunk,
                        metadata=segment.metadata.with_updates(
                            part=idx,
                            total_parts=len(chunks),
                            split_type="article_part",
                        ),
                    )
                )
        return result

    def _recursive_split(self, text: str) -> list[str]:
        chunks: list[str] = []
        self._split_recursively(text, 0, chunks)
        return chunks

    def _split_recursively(self, text: str, level: int, out: list[str]) -> None:
        if self._tokens(text) <= self.max_tokens:
            if text.strip():
                out.append(text.strip())
            return

        if level >= len(LONG_ARTICLE_SEPARATORS):
            self._force_character_split(text, out)
            return

        separator = LONG_ARTICLE_SEPARATORS[level]
        parts = text.split(separator)
        if len(parts) == 1:
            self._split_recursively(text, level + 1, out)
            return

        current = ""
        for part in parts:
            candidate = part if not current else current + separator + part
            if self._tokens(candidate) <= self.max_tokens:
                current = candidate
                continue

            if current:
                self._split_recursively(current, level + 1, out)
                current = ""
                if self.chunk_overlap > 0 and out:
                    current = out[-1][-self.chunk_overlap :] + separator
            current += part

        if current:
            self._split_recursively(current, level + 1, out)

    def _force_character_split(self, text: str, out: list[str]) -> None:
        window = self.max_tokens * CJK_CHARS_PER_TOKEN
        step = max(1, window - self.chunk_overlap)
        for start in range(0, len(text), step):
            chunk = text[start : start + window].strip()
            if chunk:
                out.append(chunk)

    # ------------------------------------------------------------------ #
    # Fallback
    # ------------------------------------------------------------------ #
    def _fallback_split(self, content: str, base: SegmentMetadata) -> list[Segment]:
        segments: list[Segment] = []
        for paragraph in _PARAGRAPH_BREAK.split(content):
            paragraph = paragraph.strip()
            if not paragraph:
                continue
            if self._tokens(paragraph) > self.max_tokens:
                segments.extend(
                    Segment(text=chunk, metadata=base.with_updates(split_type="fallback_chunk"))
                    for chunk in self._recursive_split(paragraph)
                )
            else:
                segments.append(
                    Segment(text=paragraph, metadata=base.with_updates(split_type="fallback_paragraph"))
                )

        if not segments and content.strip():
            logger.warning("Paragraph split produced nothing; forcing length split")
            segments = [
                Segment(text=chunk, metadata=base.with_updates(split_type="fallback_forced"))
                for chunk in self._recursive_split(content)
            ]

        logger.info("Fallback split produced %s segments", len(segments))
        return segments
