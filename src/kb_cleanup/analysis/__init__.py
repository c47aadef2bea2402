"""Analysis module - классификация документов базы знаний."""

from kb_cleanup.analysis.classifier import DocumentClassifier, classify, find_mismatch
from kb_cleanup.analysis.keywords import DEFAULT_TABLES, KeywordTables
from kb_cleanup.analysis.models import Action, AnalysisResult, KBDocument

__all__ = [
    "Action",
    "AnalysisResult",
    "DEFAULT_TABLES",
    "DocumentClassifier",
    "KBDocument",
    "KeywordTables",
    "classify",
    "find_mismatch",
]
