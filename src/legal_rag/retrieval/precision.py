"""Deterministic precision scoring of retrieval candidates."""

from __future__ import annotations

from collections.abc import Sequence

from legal_rag.core.models import Candidate, QueryIntent, ScoredDocument, SegmentMetadata

ARTICLE_MATCH_WEIGHT = 100.0
LAW_EXACT_WEIGHT = 50.0
LAW_PARTIAL_WEIGHT = 25.0
CHAPTER_MATCH_WEIGHT = 20.0
SECTION_MATCH_WEIGHT = 10.0


def _as_text(value: object) -> str | None:
    return None if value is None else str(value)


def score_candidate(metadata: SegmentMetadata, intent: QueryIntent) -> float:
    """Score how well a candidate's citation metadata matches the query intent.

    Exact law-name equality and partial containment are mutually exclusive. A field
    missing on either side contributes nothing.
    """
    score = 0.0

    article = _as_text(metadata.get("article_number"))
    if article is not None and intent.article_number is not None:
        if article == intent.article_number:
            score += ARTICLE_MATCH_WEIGHT

    law = _as_text(metadata.get("law_name"))
    if law is not None and intent.law_name is not None:
        if law == intent.law_name:
            score += LAW_EXACT_WEIGHT
        elif intent.law_name in law or law in intent.law_name:
            score += LAW_PARTIAL_WEIGHT

    chapter = _as_text(metadata.get("chapter"))
    if chapter is not None and intent.chapter is not None and chapter == intent.chapter:
        score += CHAPTER_MATCH_WEIGHT

    section = _as_text(metadata.get("section"))
    if section is not None and intent.section is not None and section == intent.section:
        score += SECTION_MATCH_WEIGHT

    return score


def rank_by_precision(
    candidates: Sequence[Candidate],
    intent: QueryIntent,
    limit: int,
) -> list[ScoredDocument]:
    """Score, stable-sort descending and truncate. Ties keep their incoming order."""
    scored = [
        ScoredDocument.from_candidate(candidate, score_candidate(candidate.metadata, intent))
        for candidate in candidates
    ]
    scored.sort(key=lambda doc: doc.precision_score or 0.0, reverse=True)
    return scored[:limit]
