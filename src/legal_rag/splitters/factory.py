"""Selects the splitting strategy for a document."""

from __future__ import annotations

from legal_rag.config import Settings
from legal_rag.core.constants import (
    DOC_TYPE_CONTRACT,
    DOC_TYPE_CONTRACT_TEMPLATE,
    DOC_TYPE_LAW,
    DOC_TYPE_REGULATION,
    SPLITTER_CONTRACT,
    SPLITTER_LEGAL,
    SPLITTER_RECURSIVE,
)
from legal_rag.core.logging import get_logger
from legal_rag.core.protocols import Splitter
from legal_rag.splitters.contract import ContractSplitter
from legal_rag.splitters.legal import LegalDocumentSplitter
from legal_rag.splitters.recursive import RecursiveSplitter

logger = get_logger(__name__)

LEGAL_FILENAME_KEYWORDS: tuple[str, ...] = (
    "法",
    "law",
    "法律",
    "法规",
    "条例",
    "规定",
    "民法",
    "刑法",
    "宪法",
    "行政法",
    "诉讼法",
    "规章",
    "办法",
    "细则",
)
CONTRACT_FILENAME_KEYWORDS: tuple[str, ...] = (
    "合同",
    "contract",
    "协议",
    "agreement",
    "契约",
    "条款",
    "terms",
)


class SplitterFactory:
    """Holds one instance of each splitter and picks between them."""

    def __init__(
        self,
        *,
        legal: LegalDocumentSplitter,
        contract: ContractSplitter,
        recursive: RecursiveSplitter,
    ) -> None:
        self.legal = legal
        self.contract = contract
        self.recursive = recursive

    @classmethod
    def from_settings(cls, settings: Settings) -> SplitterFactory:
        return cls(
            legal=LegalDocumentSplitter(
                max_tokens=settings.legal_max_tokens,
                chunk_overlap=settings.legal_chunk_overlap,
            ),
            contract=ContractSplitter(
                max_segment_size=settings.contract_max_segment_size,
                context_overlap=settings.contract_context_overlap,
            ),
            recursive=RecursiveSplitter(
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
            ),
        )

    def select_splitter(self, document_type: str | None, file_name: str | None) -> Splitter:
        """Document type takes precedence over filename; recursive is the default."""
        if document_type and document_type.strip():
            splitter = self.by_document_type(document_type)
        elif file_name and file_name.strip():
            splitter = self.by_file_name(file_name)
        else:
            splitter = self.recursive
        logger.debug(
            "Selected %s for document_type=%s file_name=%s",
            self.splitter_type(splitter),
            document_type,
            file_name,
        )
        return splitter

    def by_document_type(self, document_type: str) -> Splitter:
        normalized = document_type.strip().upper()
        if normalized in (DOC_TYPE_LAW, DOC_TYPE_REGULATION):
            return self.legal
        if normalized in (DOC_TYPE_CONTRACT_TEMPLATE, DOC_TYPE_CONTRACT):
            return self.contract
        return self.recursive

    def by_file_name(self, file_name: str) -> Splitter:
        lowered = file_name.lower()
        if any(keyword in lowered for keyword in LEGAL_FILENAME_KEYWORDS):
            return self.legal
        if any(keyword in lowered for keyword in CONTRACT_FILENAME_KEYWORDS):
            return self.contract
        return self.recursive

    def splitter_type(self, splitter: Splitter) -> str:
        if isinstance(splitter, LegalDocumentSplitter):
            return SPLITTER_LEGAL
        if isinstance(splitter, ContractSplitter):
            return SPLITTER_CONTRACT
        return SPLITTER_RECURSIVE
