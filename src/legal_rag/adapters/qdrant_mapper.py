"""Helpers to translate between domain models and LlamaIndex/Qdrant transport objects."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from llama_index.core.schema import BaseNode, NodeRelationship, NodeWithScore, RelatedNodeInfo, TextNode
from llama_index.core.vector_stores.utils import metadata_dict_to_node
from qdrant_client import models as q

from legal_rag.core.constants import K_ARTICLE_NUMBER, K_CHAPTER, K_LAW_NAME, K_SECTION
from legal_rag.core.logging import get_logger
from legal_rag.core.models import Candidate, Segment, SegmentMetadata

logger = get_logger(__name__)

# Citation fields that help retrieval when embedded alongside the text.
EMBEDDED_METADATA_KEYS: frozenset[str] = frozenset({K_LAW_NAME, K_ARTICLE_NUMBER, K_CHAPTER, K_SECTION})

# Bookkeeping keys LlamaIndex writes next to the node metadata in every payload.
_LLAMA_PAYLOAD_KEYS: frozenset[str] = frozenset(
    {"_node_content", "_node_type", "document_id", "ref_doc_id", "text"}
)


def segment_to_node(segment: Segment) -> TextNode:
    """Convert a segment into a TextNode ready for ``VectorStoreIndex.ainsert_nodes``.

    LlamaIndex mirrors ``ref_doc_id`` into the payload's ``doc_id`` key, so the source
    relationship is pointed at the segment's own ``doc_id`` to keep the two consistent.
    """
    payload = segment.metadata.to_payload()
    node = TextNode(
        text=segment.text,
        metadata=payload,
        excluded_embed_metadata_keys=[k for k in payload if k not in EMBEDDED_METADATA_KEYS],
        excluded_llm_metadata_keys=list(payload),
    )
    if segment.metadata.doc_id:
        node.relationships[NodeRelationship.SOURCE] = RelatedNodeInfo(
            node_id=segment.metadata.doc_id
        )
    return node


def node_to_candidate(node: BaseNode, similarity: float | None = None) -> Candidate:
    return Candidate(
        node_id=node.node_id,
        text=node.get_content(),
        metadata=SegmentMetadata.from_mapping(node.metadata),
        similarity=similarity,
    )


def scored_node_to_candidate(result: NodeWithScore) -> Candidate:
    return node_to_candidate(result.node, result.score)


def record_to_candidate(record: q.Record) -> Candidate:
    """Convert a raw Qdrant record written through LlamaIndex into a Candidate."""
    payload = record.payload or {}
    try:
        node = metadata_dict_to_node(dict(payload))
    except Exception as exc:
        logger.debug("Record %s has no serialized node (%s); using raw payload", record.id, exc)
        return Candidate(
            node_id=str(record.id),
            text=str(payload.get("text") or ""),
            metadata=SegmentMetadata.from_mapping(_strip_llama_keys(payload)),
        )
    node.id_ = str(record.id)
    return node_to_candidate(node)


def _strip_llama_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in payload.items() if k not in _LLAMA_PAYLOAD_KEYS}
