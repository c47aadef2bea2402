"""Fix applier.

Применяет отчёт анализа к базе знаний через API: исправляет коды
компаний и продуктов, помечает устаревшие документы, удаляет мусор.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, Optional

from kb_cleanup.analysis.models import Action
from kb_cleanup.client import KBClient, KBClientError
from kb_cleanup.report import AnalysisReport, ReportEntry

logger = logging.getLogger(__name__)

OBSOLETE_REASON = "Автоматически помечено как устаревшее на основе анализа"


@dataclass
class StepResult:
    """Счётчики одного шага"""

    success_count: int = 0
    error_count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"successCount": self.success_count, "errorCount": self.error_count}


@dataclass
class FixReport:
    """Итог применения исправлений"""

    original_analysis: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    company_fixes: StepResult = field(default_factory=StepResult)
    product_fixes: StepResult = field(default_factory=StepResult)
    obsolete_marks: StepResult = field(default_factory=StepResult)
    deletions: StepResult = field(default_factory=StepResult)

    def _steps(self) -> list[StepResult]:
        return [self.company_fixes, self.product_fixes, self.obsolete_marks, self.deletions]

    @property
    def total_success(self) -> int:
        return sum(s.success_count for s in self._steps())

    @property
    def total_errors(self) -> int:
        return sum(s.error_count for s in self._steps())

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "originalAnalysis": self.original_analysis,
            "results": {
                "companyFixes": self.company_fixes.to_dict(),
                "productFixes": self.product_fixes.to_dict(),
                "obsoleteMarks": self.obsolete_marks.to_dict(),
                "deletions": self.deletions.to_dict(),
            },
            "totalSuccess": self.total_success,
            "totalErrors": self.total_errors,
        }

    def render(self) -> str:
        return "\n".join(
            [
                "ИТОГОВЫЙ ОТЧЕТ ИСПРАВЛЕНИЙ:",
                "=" * 50,
                f"Исправлено кодов компаний: {self.company_fixes.success_count} "
                f"(ошибок: {self.company_fixes.error_count})",
                f"Исправлено кодов продуктов: {self.product_fixes.success_count} "
                f"(ошибок: {self.product_fixes.error_count})",
                f"Помечено как obsolete: {self.obsolete_marks.success_count} "
                f"(ошибок: {self.obsolete_marks.error_count})",
                f"Удалено документов: {self.deletions.success_count} (ошибок: {self.deletions.error_count})",
                f"Всего успешных операций: {self.total_success}",
                f"Всего ошибок: {self.total_errors}",
            ]
        )

    def write(self, path: Path | str) -> Path:
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
        return path


class KBFixer:
    """Применение отчёта анализа через API хранилища."""

    def __init__(
        self,
        client: KBClient,
        delay: float = 0.1,
        dry_run: bool = False,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.delay = delay
        self.dry_run = dry_run
        self._sleep = sleep

    def apply(self, report: AnalysisReport) -> FixReport:
        """Применить все исправления по порядку

        Порядок: компании, продукты, obsolete, удаление.
        """
        fix_report = FixReport(original_analysis=report.timestamp)
        fix_report.company_fixes = self._run_step(
            "Исправляем коды компаний", report.to_fix_company, self._fix_company
        )
        fix_report.product_fixes = self._run_step(
            "Исправляем коды продуктов", report.to_fix_product, self._fix_product
        )
        fix_report.obsolete_marks = self._run_step(
            "Помечаем документы как obsolete", report.to_mark_obsolete, self._mark_obsolete
        )
        fix_report.deletions = self._run_step("Удаляем документы", report.to_delete, self._delete)
        return fix_report

    def _run_step(
        self,
        name: str,
        entries: list[ReportEntry],
        operation: Callable[[ReportEntry], None],
    ) -> StepResult:
        step = StepResult()
        if not entries:
            logger.info("%s: нет документов", name)
            return step

        logger.info("%s (%d)", name, len(entries))
        for i, entry in enumerate(entries, 1):
            try:
                operation(entry)
            except (KBClientError, ValueError) as e:
                step.error_count += 1
                logger.error("[%d/%d] %s (%s): %s", i, len(entries), entry.title, entry.id, e)
            else:
                step.success_count += 1
                logger.info("[%d/%d] %s (%s): ok", i, len(entries), entry.title, entry.id)
            finally:
                if self.delay > 0 and not self.dry_run:
                    self._sleep(self.delay)

        logger.info("%s: успешно %d, ошибок %d", name, step.success_count, step.error_count)
        return step

    def _update(self, entry: ReportEntry, updates: dict[str, Any]) -> None:
        if self.dry_run:
            logger.info("dry-run: update %s %s", entry.id, updates)
            return
        self.client.update_document(entry.id, updates)

    def _suggested(self, entry: ReportEntry, action: Action) -> str:
        code: Optional[str] = entry.suggestion(action)
        if not code:
            raise ValueError(f"в описании проблем нет предлагаемого кода: {entry.issues}")
        return code

    def _fix_company(self, entry: ReportEntry) -> None:
        self._update(entry, {"companyCode": self._suggested(entry, Action.FIX_COMPANY)})

    def _fix_product(self, entry: ReportEntry) -> None:
        self._update(entry, {"productCode": self._suggested(entry, Action.FIX_PRODUCT)})

    def _mark_obsolete(self, entry: ReportEntry) -> None:
        self._update(entry, {"isObsolete": True, "obsoleteReason": OBSOLETE_REASON})

    def _delete(self, entry: ReportEntry) -> None:
        if self.dry_run:
            logger.info("dry-run: delete %s", entry.id)
            return
        self.client.delete_document(entry.id)
