"""Tests for splitter selection."""

import pytest

from legal_rag.config import Settings
from legal_rag.splitters.contract import ContractSplitter
from legal_rag.splitters.factory import SplitterFactory
from legal_rag.splitters.legal import LegalDocumentSplitter
from legal_rag.splitters.recursive import RecursiveSplitter


@pytest.fixture
def factory() -> SplitterFactory:
    return SplitterFactory.from_settings(Settings())


@pytest.mark.parametrize(
    ("document_type", "file_name", "expected"),
    [
        ("LAW", "合同范本.docx", LegalDocumentSplitter),
        ("regulation", None, LegalDocumentSplitter),
        ("CONTRACT_TEMPLATE", "民法典.pdf", ContractSplitter),
        ("CASE", "民法典.pdf", RecursiveSplitter),
        ("GENERAL", None, RecursiveSplitter),
        (None, "民法典.pdf", LegalDocumentSplitter),
        ("  ", "Service Agreement.DOCX", ContractSplitter),
        (None, "劳动合同.docx", ContractSplitter),
        (None, "会议纪要.txt", RecursiveSplitter),
        (None, None, RecursiveSplitter),
    ],
)
def test_select_splitter(
    factory: SplitterFactory,
    document_type: str | None,
    file_name: str | None,
    expected: type,
) -> None:
    assert isinstance(factory.select_splitter(document_type, file_name), expected)


def test_splitter_type_names(factory: SplitterFactory) -> None:
    assert factory.splitter_type(factory.legal) == "LegalDocumentSplitter"
    assert factory.splitter_type(factory.contract) == "ContractSplitter"
    assert factory.splitter_type(factory.recursive) == "RecursiveSplitter"


def test_from_settings_applies_chunking(factory: SplitterFactory) -> None:
    assert factory.recursive.chunk_size == 2000
    assert factory.recursive.chunk_overlap == 400
    assert factory.legal.max_tokens == 512
    assert factory.contract.max_segment_size == 2000
