"""Tests for checksum helpers."""

from legal_rag.text_processing.checksum import compute_checksum


def test_checksum_ignores_whitespace_layout() -> None:
    """Text differing only in whitespace should hash identically."""
    assert compute_checksum("第一条  为了保护\n民事主体") == compute_checksum("第一条 为了保护 民事主体")
    assert compute_checksum("  padded  ") == compute_checksum("padded")


def test_checksum_differs_for_unique_content() -> None:
    first = compute_checksum("第一条 民法典")
    second = compute_checksum("第二条 民法典")
    assert first != second


def test_checksum_is_sha256_hex() -> None:
    checksum = compute_checksum("content")
    assert len(checksum) == 64
    int(checksum, 16)
