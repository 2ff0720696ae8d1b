from legal_rag.retrieval.precision import rank_by_precision, score_candidate
from legal_rag.retrieval.query_analyzer import QueryAnalyzer

__all__ = ["QueryAnalyzer", "rank_by_precision", "score_candidate"]
