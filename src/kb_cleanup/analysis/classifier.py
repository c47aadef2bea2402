# SPDX-License-Identifier: MIT
"""KB document classifier

Определяет, что делать с документом базы знаний: пометить как
неактуальный, удалить или исправить код компании/продукта.

Использование:
    from kb_cleanup.analysis.classifier import DocumentClassifier

    classifier = DocumentClassifier()
    result = classifier.classify(document, content)
    print(result.actions, result.issues)
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

from .keywords import DEFAULT_TABLES, KeywordTables
from .models import Action, AnalysisResult, KBDocument

ISSUE_OBSOLETE = "Содержит ключевые слова неактуальности"
ISSUE_NOT_RELEVANT = "Не подходит для страхового сервиса"
ISSUE_WRONG_COMPANY = "Неправильная компания: {current} -> {suggested}"
ISSUE_WRONG_PRODUCT = "Неправильный продукт: {current} -> {suggested}"


def _contains_any(text: str, keywords: Iterable[str]) -> bool:
    return any(kw in text for kw in keywords)


def find_mismatch(
    current_code: str,
    content_lower: str,
    table: Mapping[str, Iterable[str]],
) -> Optional[str]:
    """Первый код из таблицы (кроме текущего), чьё ключевое слово есть в тексте

    Args:
        current_code: код, указанный в документе
        content_lower: текст документа в нижнем регистре
        table: код -> ключевые слова, порядок объявления важен

    Returns:
        Предлагаемый код или None
    """
    for code, keywords in table.items():
        if code == current_code:
            continue
        if _contains_any(content_lower, keywords):
            return code
    return None


class DocumentClassifier:
    """Классификатор документов базы знаний

    Четыре независимые проверки выполняются в фиксированном порядке:
    неактуальность, удаление, компания, продукт.
    """

    def __init__(self, tables: KeywordTables | None = None) -> None:
        self.tables = tables or DEFAULT_TABLES

    def classify(self, document: KBDocument, content: str) -> AnalysisResult:
        """Проанализировать документ

        Args:
            document: метаданные документа
            content: полный текст (пустая строка допустима)

        Returns:
            AnalysisResult: действия и описания проблем
        """
        result = AnalysisResult.for_document(document)
        content_lower = content.lower()
        title_lower = document.title.lower()

        # 1. Неактуальность
        if self._mentions(self.tables.obsolete, content_lower, title_lower) and not document.is_obsolete:
            result.add(Action.MARK_OBSOLETE, ISSUE_OBSOLETE)

        # 2. Удаление
        is_internal = self._mentions(self.tables.internal, content_lower, title_lower)
        is_irrelevant = (
            not _contains_any(content_lower, self.tables.insurance)
            and len(content) < self.tables.min_relevant_length
        )
        if is_internal or is_irrelevant:
            result.add(Action.DELETE, ISSUE_NOT_RELEVANT)

        # 3. Компания
        company = find_mismatch(document.company_code, content_lower, self.tables.companies)
        if company:
            result.suggested_company = company
            result.add(
                Action.FIX_COMPANY,
                ISSUE_WRONG_COMPANY.format(current=document.company_code, suggested=company),
            )

        # 4. Продукт
        product = find_mismatch(document.product_code, content_lower, self.tables.products)
        if product:
            result.suggested_product = product
            result.add(
                Action.FIX_PRODUCT,
                ISSUE_WRONG_PRODUCT.format(current=document.product_code, suggested=product),
            )

        return result

    @staticmethod
    def _mentions(keywords: Iterable[str], *texts: str) -> bool:
        keywords = tuple(keywords)
        return any(_contains_any(text, keywords) for text in texts)


_default_classifier = DocumentClassifier()


def classify(document: KBDocument, content: str) -> AnalysisResult:
    """Классифицировать документ встроенными словарями."""
    return _default_classifier.classify(document, content)
