from legal_rag.splitters.contract import ContractSplitter
from legal_rag.splitters.factory import SplitterFactory
from legal_rag.splitters.legal import LegalDocumentSplitter
from legal_rag.splitters.recursive import RecursiveSplitter

__all__ = [
    "ContractSplitter",
    "LegalDocumentSplitter",
    "RecursiveSplitter",
    "SplitterFactory",
]
