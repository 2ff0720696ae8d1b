"""Deterministic, regex-based query intent classifier."""

from __future__ import annotations

import re

from legal_rag.core.logging import get_logger
from legal_rag.core.models import QueryIntent, QueryType

logger = get_logger(__name__)

_LAW_NAME = re.compile(r"《?([^《》]+?(?:法典|法|条例|规定|办法|准则|细则))》?")
_BOOK_TITLE_MARKS = re.compile(r"[《》]")
_NATIONAL_PREFIX = re.compile(r"^中华人民共和国")

# (pattern, numeral written without a leading 第)
_ARTICLE_PATTERNS: tuple[tuple[re.Pattern[str], bool], ...] = (
    (re.compile(r"第([一二三四五六七八九十百千万零]+)条"), False),
    (re.compile(r"第(\d+)条"), False),
    (re.compile(r"(\d+)条"), True),
    (re.compile(r"第([一二三四五六七八九十百千万零]+)款"), True),
    (re.compile(r"第(\d+)款"), True),
)
_CHAPTER = re.compile(r"第([一二三四五六七八九十百千万零\d]+)章")
_SECTION = re.compile(r"第([一二三四五六七八九十百千万零\d]+)节")
_COMPOUND = re.compile(r"([和及以或者还有]|、).*第")

_DIGITS = "零一二三四五六七八九"
_UNITS = ("", "十", "百", "千")
MAX_CONVERTIBLE = 9999


def to_chinese_numeral(number: int) -> str:
    """Render 0..9999 as a Chinese numeral (12 -> 十二, 105 -> 一百零五).

    Numbers outside the range are returned as Arabic digits.
    """
    if number < 0 or number > MAX_CONVERTIBLE:
        logger.warning("Number %s out of range for Chinese numeral conversion", number)
        return str(number)
    if number == 0:
        return _DIGITS[0]

    text = str(number)
    width = len(text)
    out: list[str] = []
    for idx, char in enumerate(text):
        digit = int(char)
        unit = width - idx - 1
        if digit == 0:
            if out and out[-1] != _DIGITS[0]:
                out.append(_DIGITS[0])
        elif digit == 1 and unit == 1 and idx == 0:
            out.append(_UNITS[unit])
        else:
            out.append(_DIGITS[digit] + _UNITS[unit])

    result = "".join(out)
    return result.rstrip(_DIGITS[0])


def normalize_article_number(raw: str, bare: bool = False) -> str:
    """Normalize an article reference to the ``第X条`` form used in segment metadata."""
    if raw.isdigit():
        return f"第{to_chinese_numeral(int(raw))}条"
    result = raw
    if bare or not result.startswith("第"):
        result = "第" + result
    if not result.endswith("条"):
        result += "条"
    return result


class QueryAnalyzer:
    """Extract law name, article, chapter and section references from a query."""

    def classify(self, query: str) -> QueryIntent:
        if not query or not query.strip():
            logger.warning("Empty query; classifying as semantic")
            return QueryIntent(query_type=QueryType.SEMANTIC, original_query=query)

        law_name = self.extract_law_name(query)
        article_number = self.extract_article_number(query)
        chapter = self._extract_heading(_CHAPTER, query, "章")
        section = self._extract_heading(_SECTION, query, "节")
        query_type = self._query_type(query, article_number, chapter, section)

        logger.info(
            "Classified query as %s (law=%s, article=%s)",
            query_type.value,
            law_name,
            article_number,
        )
        return QueryIntent(
            query_type=query_type,
            original_query=query,
            law_name=law_name,
            article_number=article_number,
            chapter=chapter,
            section=section,
        )

    @staticmethod
    def extract_law_name(query: str) -> str | None:
        match = _LAW_NAME.search(query)
        if not match:
            return None
        name = _BOOK_TITLE_MARKS.sub("", match.group(1))
        return _NATIONAL_PREFIX.sub("", name, count=1)

    @staticmethod
    def extract_article_number(query: str) -> str | None:
        for pattern, bare in _ARTICLE_PATTERNS:
            if match := pattern.search(query):
                return normalize_article_number(match.group(1), bare)
        return None

    @staticmethod
    def _extract_heading(pattern: re.Pattern[str], query: str, suffix: str) -> str | None:
        match = pattern.search(query)
        return f"第{match.group(1)}{suffix}" if match else None

    @staticmethod
    def _query_type(
        query: str,
        article_number: str | None,
        chapter: str | None,
        section: str | None,
    ) -> QueryType:
        if article_number is not None:
            return QueryType.PRECISE_ARTICLE
        if chapter is not None or section is not None:
            return QueryType.CHAPTER_LEVEL
        if _COMPOUND.search(query):
            return QueryType.COMPLEX
        return QueryType.SEMANTIC
