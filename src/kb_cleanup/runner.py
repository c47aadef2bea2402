"""Batch runner.

Пакетный анализ базы знаний: список документов -> текст каждого ->
классификация -> сводный отчёт.

Ошибка получения текста не прерывает прогон: документ
классифицируется с пустым текстом, а его id попадает в fetch_failures.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

from kb_cleanup.analysis.classifier import DocumentClassifier
from kb_cleanup.analysis.models import AnalysisResult, KBDocument
from kb_cleanup.client import KBClient, KBClientError
from kb_cleanup.report import AnalysisReport

logger = logging.getLogger(__name__)


class BatchRunner:
    """Последовательный (или с ограниченным параллелизмом) прогон анализа."""

    def __init__(
        self,
        client: KBClient,
        classifier: Optional[DocumentClassifier] = None,
        delay: float = 0.1,
        concurrency: int = 1,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Инициализация

        Args:
            client: клиент API хранилища
            classifier: классификатор (None - встроенные словари)
            delay: пауза после каждого запроса текста, сек
            concurrency: число одновременных запросов
            sleep: функция паузы (подменяется в тестах)
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.client = client
        self.classifier = classifier or DocumentClassifier()
        self.delay = delay
        self.concurrency = concurrency
        self._sleep = sleep

    def list_documents(self) -> list[KBDocument]:
        try:
            return self.client.list_documents()
        except KBClientError as e:
            logger.error("Ошибка получения документов: %s", e)
            return []

    def fetch_content(self, doc: KBDocument) -> tuple[str, bool]:
        """Текст документа и признак успеха"""
        try:
            return self.client.fetch_content(doc.id), True
        except KBClientError as e:
            logger.error("Ошибка получения содержимого документа %s: %s", doc.id, e)
            return "", False
        finally:
            if self.delay > 0:
                self._sleep(self.delay)

    def analyze(self, doc: KBDocument) -> tuple[AnalysisResult, bool]:
        content, ok = self.fetch_content(doc)
        return self.classifier.classify(doc, content), ok

    def run(self) -> AnalysisReport:
        """Проанализировать все документы

        Returns:
            AnalysisReport: результаты в порядке списка документов
        """
        documents = self.list_documents()
        total = len(documents)
        logger.info("Найдено документов: %d", total)

        if self.concurrency == 1:
            outcomes = []
            for i, doc in enumerate(documents, 1):
                logger.info("[%d/%d] Анализируем: %s", i, total, doc.title)
                outcomes.append(self.analyze(doc))
        else:
            with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
                # map сохраняет порядок входных документов
                outcomes = list(pool.map(self.analyze, documents))

        results = [result for result, _ in outcomes]
        failures = [result.id for result, ok in outcomes if not ok]
        if failures:
            logger.warning("Не удалось получить текст %d документов", len(failures))

        return AnalysisReport.from_results(results, total_documents=total, fetch_failures=failures)
