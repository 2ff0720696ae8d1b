"""Checksum helpers for corpus content."""

import hashlib
import re

from legal_rag.core.logging import get_logger

logger = get_logger(__name__)

_WHITESPACE_PATTERN = re.compile(r"\s+")


def compute_checksum(value: str) -> str:
    """Compute a SHA256 checksum that ignores whitespace layout.

    Args:
        value: Raw document text.

    Returns:
        Hex string representation of SHA256 hash.
    """
    collapsed = _WHITESPACE_PATTERN.sub(" ", value).strip()
    checksum = hashlib.sha256(collapsed.encode("utf-8")).hexdigest()
    logger.debug(
        "Computed checksum %s… for %d-char input (%d-char collapsed)",
        checksum[:8],
        len(value),
        len(collapsed),
    )
    return checksum
