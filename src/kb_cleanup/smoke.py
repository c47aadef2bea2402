"""API smoke checks.

Быстрая ручная проверка поиска и статистики backend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from kb_cleanup.client import KBClient, KBClientError

logger = logging.getLogger(__name__)


@dataclass
class SmokeCheck:
    name: str
    ok: bool
    summary: str


def _describe_hits(hits: list[dict]) -> str:
    lines = [f"Найдено результатов: {len(hits)}"]
    for i, hit in enumerate(hits, 1):
        score = hit.get("score")
        score_str = f"{score:.3f}" if isinstance(score, (int, float)) else "-"
        lines.append(
            f"  {i}. {hit.get('docTitle', '')} ({hit.get('companyCode', '')}/{hit.get('productCode', '')}) - {score_str}"
        )
    return "\n".join(lines)


def _describe_stats(stats: dict) -> str:
    return (
        f"Документов: {stats.get('totalDocuments', 0)}, "
        f"чанков: {stats.get('totalChunks', 0)}, "
        f"компаний: {len(stats.get('companies', []))}, "
        f"продуктов: {len(stats.get('products', []))}"
    )


def run_smoke_checks(client: KBClient) -> list[SmokeCheck]:
    """Выполнить проверки; ошибка одной не останавливает остальные"""
    checks: list[tuple[str, Callable[[], str]]] = [
        ("Поиск 'страхование'", lambda: _describe_hits(client.search("страхование", limit=3))),
        ("Поиск 'ОСАГО' в RESO", lambda: _describe_hits(client.search("ОСАГО", company_code="RESO", limit=3))),
        ("Статистика базы знаний", lambda: _describe_stats(client.stats())),
    ]

    results: list[SmokeCheck] = []
    for name, check in checks:
        try:
            summary = check()
        except KBClientError as e:
            logger.error("%s: %s", name, e)
            results.append(SmokeCheck(name=name, ok=False, summary=str(e)))
        else:
            results.append(SmokeCheck(name=name, ok=True, summary=summary))
    return results
