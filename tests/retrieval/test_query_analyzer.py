"""Tests for the query intent classifier."""

import pytest

from legal_rag.core.models import QueryType
from legal_rag.retrieval.query_analyzer import (
    QueryAnalyzer,
    normalize_article_number,
    to_chinese_numeral,
)


@pytest.fixture
def analyzer() -> QueryAnalyzer:
    return QueryAnalyzer()


def test_precise_article_with_arabic_number(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("环境保护法第30条的内容是什么")

    assert intent.query_type == QueryType.PRECISE_ARTICLE
    assert intent.law_name == "环境保护法"
    assert intent.article_number == "第三十条"
    assert intent.has_exact_match_info()
    assert intent.is_precise_query()


def test_precise_article_with_chinese_number(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("民法典第一千一百九十八条")

    assert intent.law_name == "民法典"
    assert intent.article_number == "第一千一百九十八条"
    assert intent.query_type == QueryType.PRECISE_ARTICLE


def test_article_without_law_name(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("第30条的内容")

    assert intent.law_name is None
    assert intent.article_number == "第三十条"
    assert intent.query_type == QueryType.PRECISE_ARTICLE
    assert not intent.has_exact_match_info()


def test_book_title_marks_and_national_prefix_are_removed(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("《中华人民共和国环境保护法》第30条")
    assert intent.law_name == "环境保护法"
    assert intent.article_number == "第三十条"


def test_chapter_level(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("民法典第三章的主要内容")

    assert intent.query_type == QueryType.CHAPTER_LEVEL
    assert intent.law_name == "民法典"
    assert intent.chapter == "第三章"
    assert intent.article_number is None


def test_section_level(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("第二节讲了什么")
    assert intent.query_type == QueryType.CHAPTER_LEVEL
    assert intent.section == "第二节"
    assert intent.chapter is None


def test_semantic(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("什么是违约责任")

    assert intent.query_type == QueryType.SEMANTIC
    assert intent.article_number is None
    assert intent.chapter is None
    assert not intent.is_precise_query()


def test_multiple_articles_stay_precise(analyzer: QueryAnalyzer) -> None:
    intent = analyzer.classify("民法典第1198条和环境保护法第30条")
    assert intent.query_type == QueryType.PRECISE_ARTICLE
    assert intent.law_name == "民法典"
    assert intent.article_number == "第一千一百九十八条"


@pytest.mark.parametrize("query", ["", "   "])
def test_blank_query_is_semantic(analyzer: QueryAnalyzer, query: str) -> None:
    intent = analyzer.classify(query)
    assert intent.query_type == QueryType.SEMANTIC
    assert intent.law_name is None


@pytest.mark.parametrize(
    ("query", "expected"),
    [
        ("第1条", "第一条"),
        ("第10条", "第十条"),
        ("第12条", "第十二条"),
        ("第100条", "第一百条"),
        ("第105条", "第一百零五条"),
        ("第1024条", "第一千零二十四条"),
        ("30条", "第三十条"),
        ("第五十条", "第五十条"),
        ("第二款", "第二条"),
    ],
)
def test_article_number_normalization(analyzer: QueryAnalyzer, query: str, expected: str) -> None:
    assert analyzer.extract_article_number(query) == expected


@pytest.mark.parametrize(
    ("number", "expected"),
    [
        (0, "零"),
        (7, "七"),
        (10, "十"),
        (11, "十一"),
        (20, "二十"),
        (101, "一百零一"),
        (110, "一百一十"),
        (1198, "一千一百九十八"),
        (2000, "二千"),
        (9999, "九千九百九十九"),
        (10000, "10000"),
    ],
)
def test_to_chinese_numeral(number: int, expected: str) -> None:
    assert to_chinese_numeral(number) == expected


def test_normalize_article_number_keeps_existing_form() -> None:
    assert normalize_article_number("第三条") == "第三条"
    assert normalize_article_number("三", bare=True) == "第三条"
