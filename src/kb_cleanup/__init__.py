"""Knowledge base cleanup tooling.

Основные компоненты:
- DocumentClassifier: классификация документов базы знаний
- BatchRunner: пакетный анализ через API хранилища
- KBFixer: применение отчёта анализа
"""

__all__ = [
    "DocumentClassifier",
    "classify",
    "BatchRunner",
    "KBClient",
    "KBFixer",
]


def __getattr__(name: str):
    """Lazy loading to avoid importing httpx/sqlalchemy for the classifier alone."""
    if name in ("DocumentClassifier", "classify"):
        from kb_cleanup.analysis import classifier

        return getattr(classifier, name)
    elif name == "BatchRunner":
        from kb_cleanup.runner import BatchRunner

        return BatchRunner
    elif name == "KBClient":
        from kb_cleanup.client import KBClient

        return KBClient
    elif name == "KBFixer":
        from kb_cleanup.fixer import KBFixer

        return KBFixer
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
