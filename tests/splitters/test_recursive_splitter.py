"""Tests for the character-budget recursive splitter."""

from legal_rag.core.models import SegmentMetadata, SourceDocument
from legal_rag.splitters.recursive import RecursiveSplitter


def test_long_text_is_chunked_within_budget() -> None:
    splitter = RecursiveSplitter(chunk_size=100, chunk_overlap=20)
    text = "民事主体从事民事活动，应当遵循诚信原则。" * 25
    metadata = SegmentMetadata(doc_id="9", original_filename="说明.txt")

    chunks = splitter.split(SourceDocument(text=text, metadata=metadata))

    assert len(chunks) > 1
    assert all(len(chunk.text) <= 100 for chunk in chunks)
    assert all(chunk.metadata == metadata for chunk in chunks)


def test_short_text_is_a_single_chunk() -> None:
    splitter = RecursiveSplitter(chunk_size=100, chunk_overlap=20)
    chunks = splitter.split(SourceDocument(text="本法自公布之日起施行。"))
    assert [c.text for c in chunks] == ["本法自公布之日起施行。"]


def test_blank_text_yields_nothing() -> None:
    assert RecursiveSplitter(chunk_size=100, chunk_overlap=20).split(SourceDocument(text="  ")) == []
