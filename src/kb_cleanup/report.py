"""Analysis report.

Группировка результатов анализа по действиям, текстовый отчёт
и сохранение в JSON (kb-analysis-report.json).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from kb_cleanup.analysis.models import Action, AnalysisResult

# "Неправильная компания: SOGAZ -> RESO" -> "RESO"
_SUGGESTION_RE = re.compile(r"->\s*(\S+)\s*$")

BUCKET_KEYS = {
    Action.MARK_OBSOLETE: "toMarkObsolete",
    Action.DELETE: "toDelete",
    Action.FIX_COMPANY: "toFixCompany",
    Action.FIX_PRODUCT: "toFixProduct",
}

_ISSUE_PREFIXES = {
    Action.FIX_COMPANY: "Неправильная компания",
    Action.FIX_PRODUCT: "Неправильный продукт",
}


def parse_suggestion(issues: Iterable[str], action: Action) -> Optional[str]:
    """Предлагаемый код из описания проблемы

    Args:
        issues: описания проблем документа
        action: FIX_COMPANY или FIX_PRODUCT

    Returns:
        Код после "->" или None
    """
    prefix = _ISSUE_PREFIXES.get(action)
    if prefix is None:
        return None
    for issue in issues:
        if issue.startswith(prefix):
            match = _SUGGESTION_RE.search(issue)
            if match:
                return match.group(1)
    return None


@dataclass
class ReportEntry:
    """Запись отчёта"""

    id: str
    title: str
    issues: list[str]
    company_code: str = ""
    product_code: str = ""

    @classmethod
    def from_result(cls, result: AnalysisResult) -> ReportEntry:
        return cls(
            id=result.id,
            title=result.title,
            issues=list(result.issues),
            company_code=result.company_code,
            product_code=result.product_code,
        )

    def suggestion(self, action: Action) -> Optional[str]:
        return parse_suggestion(self.issues, action)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "title": self.title, "issues": list(self.issues)}


@dataclass
class AnalysisReport:
    """Сводный отчёт по базе знаний"""

    timestamp: str
    total_documents: int
    buckets: dict[Action, list[ReportEntry]] = field(default_factory=lambda: {a: [] for a in Action})
    fetch_failures: list[str] = field(default_factory=list)

    @classmethod
    def from_results(
        cls,
        results: Iterable[AnalysisResult],
        total_documents: int,
        fetch_failures: Iterable[str] = (),
    ) -> AnalysisReport:
        """Разложить результаты по корзинам действий

        Один документ может попасть в несколько корзин.
        """
        report = cls(
            timestamp=datetime.now(timezone.utc).isoformat(),
            total_documents=total_documents,
            fetch_failures=list(fetch_failures),
        )
        for result in results:
            entry = ReportEntry.from_result(result)
            for action in result.actions:
                report.buckets[action].append(entry)
        return report

    @property
    def to_mark_obsolete(self) -> list[ReportEntry]:
        return self.buckets[Action.MARK_OBSOLETE]

    @property
    def to_delete(self) -> list[ReportEntry]:
        return self.buckets[Action.DELETE]

    @property
    def to_fix_company(self) -> list[ReportEntry]:
        return self.buckets[Action.FIX_COMPANY]

    @property
    def to_fix_product(self) -> list[ReportEntry]:
        return self.buckets[Action.FIX_PRODUCT]

    def render(self) -> str:
        """Текстовый отчёт для консоли"""
        lines = [
            "РЕЗУЛЬТАТЫ АНАЛИЗА:",
            "=" * 50,
            f"Всего документов: {self.total_documents}",
            f"Пометить как obsolete: {len(self.to_mark_obsolete)}",
            f"Удалить: {len(self.to_delete)}",
            f"Исправить компанию: {len(self.to_fix_company)}",
            f"Исправить продукт: {len(self.to_fix_product)}",
        ]
        if self.fetch_failures:
            lines.append(f"Не удалось получить текст: {len(self.fetch_failures)}")

        for header, entries in (
            ("ДОКУМЕНТЫ ДЛЯ ПОМЕТКИ КАК OBSOLETE:", self.to_mark_obsolete),
            ("ДОКУМЕНТЫ ДЛЯ УДАЛЕНИЯ:", self.to_delete),
        ):
            if entries:
                lines += ["", header]
                for e in entries:
                    lines.append(f"- {e.title} ({e.company_code}/{e.product_code})")
                    lines.append(f"  Проблемы: {', '.join(e.issues)}")

        if self.to_fix_company:
            lines += ["", "ДОКУМЕНТЫ ДЛЯ ИСПРАВЛЕНИЯ КОМПАНИИ:"]
            for e in self.to_fix_company:
                lines.append(f"- {e.title} ({e.company_code} -> {e.suggestion(Action.FIX_COMPANY)})")

        if self.to_fix_product:
            lines += ["", "ДОКУМЕНТЫ ДЛЯ ИСПРАВЛЕНИЯ ПРОДУКТА:"]
            for e in self.to_fix_product:
                lines.append(f"- {e.title} ({e.product_code} -> {e.suggestion(Action.FIX_PRODUCT)})")

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timestamp": self.timestamp,
            "totalDocuments": self.total_documents,
        }
        for action, key in BUCKET_KEYS.items():
            data[key] = [e.to_dict() for e in self.buckets[action]]
        data["fetchFailures"] = list(self.fetch_failures)
        return data

    def write(self, path: Path | str) -> Path:
        """Сохранить отчёт в JSON

        Raises:
            OSError: ошибка файловой системы
        """
        path = Path(path)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)
        return path

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AnalysisReport:
        report = cls(
            timestamp=data.get("timestamp", ""),
            total_documents=int(data.get("totalDocuments", 0)),
            fetch_failures=list(data.get("fetchFailures", [])),
        )
        for action, key in BUCKET_KEYS.items():
            report.buckets[action] = [
                ReportEntry(id=str(item["id"]), title=item.get("title", ""), issues=list(item.get("issues", [])))
                for item in data.get(key, [])
            ]
        return report

    @classmethod
    def load(cls, path: Path | str) -> AnalysisReport:
        with open(path, encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
