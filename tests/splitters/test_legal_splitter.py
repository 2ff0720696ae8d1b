"""Tests for the hierarchy-aware legal splitter."""

import pytest

from legal_rag.core.models import SegmentMetadata, SourceDocument
from legal_rag.splitters.legal import (
    LegalDocumentSplitter,
    categorize_law,
    law_name_from_filename,
)
from legal_rag.text_processing.token_estimator import CJK_CHARS_PER_TOKEN, estimate_tokens

CIVIL_CODE = """中华人民共和国民法典

第一编 总则
第一章 基本规定
第一条 为了保护民事主体的合法权益，调整民事关系，制定本法。
第二条 民法调整平等主体的自然人、法人和非法人组织之间的人身关系和财产关系。
第二章 自然人
第一节 民事权利能力和民事行为能力
第十三条 自然人从出生时起到死亡时止，具有民事权利能力，
依法享有民事权利，承担民事义务。
"""


@pytest.fixture
def splitter() -> LegalDocumentSplitter:
    return LegalDocumentSplitter()


def _doc(text: str, filename: str | None = "中华人民共和国民法典.txt") -> SourceDocument:
    return SourceDocument(
        text=text,
        metadata=SegmentMetadata(doc_id="42", original_filename=filename),
    )


def test_each_article_becomes_a_segment(splitter: LegalDocumentSplitter) -> None:
    segments = splitter.split(_doc(CIVIL_CODE))

    assert [s.metadata.article_number for s in segments] == ["第一条", "第二条", "第十三条"]
    assert all(s.metadata.split_type == "article_hierarchical" for s in segments)
    assert segments[0].text.startswith("第一条 为了保护")


def test_hierarchy_is_tracked(splitter: LegalDocumentSplitter) -> None:
    first, second, third = splitter.split(_doc(CIVIL_CODE))

    assert first.metadata.book == "第一编"
    assert first.metadata.chapter == "第一章"
    assert first.metadata.section is None
    assert first.metadata.hierarchy_path == "第一编 总则 > 第一章 基本规定 > 第一条"

    assert third.metadata.chapter == "第二章"
    assert third.metadata.section == "第一节"
    assert third.metadata.hierarchy_path == (
        "第一编 总则 > 第二章 自然人 > 第一节 民事权利能力和民事行为能力 > 第十三条"
    )
    # Continuation lines stay with their article
    assert "承担民事义务" in third.text
    assert second.metadata.chapter == "第一章"


def test_law_name_and_category_from_filename(splitter: LegalDocumentSplitter) -> None:
    segment = splitter.split(_doc(CIVIL_CODE))[0]
    assert segment.metadata.law_name == "民法典"
    assert segment.metadata.law_category == "民事法律"
    assert segment.metadata.doc_id == "42"


def test_no_filename_means_no_law_name(splitter: LegalDocumentSplitter) -> None:
    segment = splitter.split(_doc(CIVIL_CODE, filename=None))[0]
    assert segment.metadata.law_name is None
    assert segment.metadata.law_category is None


def test_regex_article_split_without_hierarchy() -> None:
    splitter = LegalDocumentSplitter(hierarchical=False)
    segments = splitter.split(_doc("第一条 本法自公布之日起施行。第二条 本法由国务院负责解释。"))

    assert [s.metadata.article_number for s in segments] == ["第一条", "第二条"]
    assert all(s.metadata.split_type == "article" for s in segments)
    assert segments[1].text == "第二条 本法由国务院负责解释。"


def test_documents_without_articles_fall_back_to_paragraphs(
    splitter: LegalDocumentSplitter,
) -> None:
    segments = splitter.split(_doc("这是一份说明材料。\n\n它没有任何条文编号。"))

    assert [s.text for s in segments] == ["这是一份说明材料。", "它没有任何条文编号。"]
    assert all(s.metadata.split_type == "fallback_paragraph" for s in segments)
    assert all(s.metadata.article_number is None for s in segments)


def test_long_articles_are_split_into_parts() -> None:
    splitter = LegalDocumentSplitter(max_tokens=20, chunk_overlap=0)
    article = "第一条 " + "民事主体从事民事活动，应当遵循诚信原则。" * 10
    parts = splitter.split(_doc(article))

    assert len(parts) > 1
    assert [p.metadata.part for p in parts] == list(range(1, len(parts) + 1))
    assert all(p.metadata.total_parts == len(parts) for p in parts)
    assert all(p.metadata.split_type == "article_part" for p in parts)
    assert all(p.metadata.article_number == "第一条" for p in parts)
    assert all(estimate_tokens(p.text, CJK_CHARS_PER_TOKEN) <= 20 for p in parts)


def test_empty_content_yields_nothing(splitter: LegalDocumentSplitter) -> None:
    assert splitter.split(_doc("   \n ")) == []


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("民法典.pdf", "民法典"),
        ("中华人民共和国刑法.docx", "刑法"),
        ("劳动合同法", "劳动合同法"),
    ],
)
def test_law_name_from_filename(filename: str, expected: str) -> None:
    assert law_name_from_filename(filename) == expected


def test_categorize_law_first_match_wins() -> None:
    assert categorize_law("环境保护法") == "环境保护"
    assert categorize_law("劳动合同法") == "劳动社保"
    assert categorize_law("刑法") == "刑事法律"
    assert categorize_law("海商法") == "其他"
    assert categorize_law(None) == "其他"
