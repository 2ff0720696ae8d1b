"""Central constants shared across the indexing and retrieval stack."""

from typing import Final

# Named dense vector configured in both Qdrant collections.
SEGMENT_VEC: Final[str] = "segment"

# Logical store identifiers used by the rebuild orchestrator.
STORE_SEGMENTS: Final[str] = "segments"
STORE_PASSAGES: Final[str] = "passages"
STORE_IDS: Final[tuple[str, ...]] = (STORE_SEGMENTS, STORE_PASSAGES)

# Document types.
DOC_TYPE_LAW: Final[str] = "LAW"
DOC_TYPE_REGULATION: Final[str] = "REGULATION"
DOC_TYPE_CONTRACT_TEMPLATE: Final[str] = "CONTRACT_TEMPLATE"
DOC_TYPE_CONTRACT: Final[str] = "CONTRACT"
DOC_TYPE_CASE: Final[str] = "CASE"
DOC_TYPE_GENERAL: Final[str] = "GENERAL"

SUPPORTED_DOCUMENT_TYPES: Final[tuple[str, ...]] = (
    DOC_TYPE_LAW,
    DOC_TYPE_REGULATION,
    DOC_TYPE_CONTRACT_TEMPLATE,
    DOC_TYPE_CASE,
    DOC_TYPE_GENERAL,
)
LEGAL_DOCUMENT_TYPES: Final[frozenset[str]] = frozenset(
    {DOC_TYPE_LAW, DOC_TYPE_REGULATION, DOC_TYPE_CASE}
)

# Splitter type names stamped on every segment.
SPLITTER_LEGAL: Final[str] = "LegalDocumentSplitter"
SPLITTER_CONTRACT: Final[str] = "ContractSplitter"
SPLITTER_RECURSIVE: Final[str] = "RecursiveSplitter"

SOURCE_TYPE_KNOWLEDGE_BASE: Final[str] = "knowledge_base"

# Source metadata keys.
K_DOC_ID: Final[str] = "doc_id"
K_ORIGINAL_FILENAME: Final[str] = "original_filename"
K_DOCUMENT_TYPE: Final[str] = "document_type"
K_SOURCE_FILE: Final[str] = "source_file"
K_FILE_HASH: Final[str] = "file_hash"
K_SOURCE_TYPE: Final[str] = "source_type"
K_INDEXED_AT: Final[str] = "indexed_at"

# Citation metadata keys.
K_LAW_NAME: Final[str] = "law_name"
K_LAW_CATEGORY: Final[str] = "law_category"
K_ARTICLE_NUMBER: Final[str] = "article_number"
K_BOOK: Final[str] = "book"
K_CHAPTER: Final[str] = "chapter"
K_SECTION: Final[str] = "section"
K_HIERARCHY_PATH: Final[str] = "hierarchy_path"
K_CLAUSE_NUMBER: Final[str] = "clause_number"

# Segmentation metadata keys.
K_SPLIT_TYPE: Final[str] = "split_type"
K_PART: Final[str] = "part"
K_TOTAL_PARTS: Final[str] = "total_parts"
K_SEGMENT_INDEX: Final[str] = "segment_index"
K_TOTAL_SEGMENTS: Final[str] = "total_segments"
K_SPLITTER_TYPE: Final[str] = "splitter_type"
K_PROCESSING_TIMESTAMP: Final[str] = "processing_timestamp"
K_QUALITY_SCORE: Final[str] = "quality_score"
