"""Bulk approval and database statistics.

Массовое одобрение документов для поиска и сводка по таблицам KB.
Решений не принимает: одобряет первые N неодобренных актуальных
документов каждой компании.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from kb_cleanup.db.models import KBChunk, KBDoc

logger = logging.getLogger(__name__)


@dataclass
class CompanyApproval:
    company_code: str
    approved: int
    sample_titles: list[str] = field(default_factory=list)


@dataclass
class ApprovalResult:
    """Итог одобрения"""

    companies: list[CompanyApproval] = field(default_factory=list)
    total_approved: int = 0
    searchable_chunks: int = 0

    @property
    def newly_approved(self) -> int:
        return sum(c.approved for c in self.companies)


@dataclass
class DatabaseStats:
    """Сводка по базе"""

    documents: int
    chunks: int
    approved: int
    obsolete: int
    companies: list[str]
    products: list[str]

    def render(self) -> str:
        lines = [
            f"Документов в базе: {self.documents}",
            f"Чанков в базе: {self.chunks}",
            f"Одобренных документов: {self.approved}",
            f"Неактуальных документов: {self.obsolete}",
            f"Компаний: {len(self.companies)}",
        ]
        lines += [f"  - {c}" for c in self.companies]
        lines.append(f"Продуктов: {len(self.products)}")
        lines += [f"  - {p}" for p in self.products]
        return "\n".join(lines)


def approve_documents(
    session: Session,
    companies: Iterable[str],
    limit: int = 50,
    approved_by: str = "admin",
) -> ApprovalResult:
    """Одобрить документы для поиска

    Args:
        session: сессия SQLAlchemy
        companies: коды компаний
        limit: максимум документов на компанию
        approved_by: кто одобрил

    Returns:
        ApprovalResult

    Raises:
        sqlalchemy.exc.SQLAlchemyError: сессия откатывается, ошибка пробрасывается
    """
    result = ApprovalResult()
    try:
        for company in companies:
            rows = session.execute(
                select(KBDoc.id, KBDoc.title)
                .where(
                    KBDoc.company_code == company,
                    KBDoc.is_approved.is_(False),
                    KBDoc.is_obsolete.is_(False),
                )
                .order_by(KBDoc.created_at, KBDoc.id)
                .limit(limit)
            ).all()

            if rows:
                session.execute(
                    update(KBDoc)
                    .where(KBDoc.id.in_([r.id for r in rows]))
                    .values(
                        {
                            KBDoc.is_approved: True,
                            KBDoc.approved_at: datetime.now(timezone.utc),
                            KBDoc.approved_by: approved_by,
                        }
                    )
                )
                logger.info("%s: одобрено %d документов", company, len(rows))
            else:
                logger.warning("%s: нет документов для одобрения", company)

            result.companies.append(
                CompanyApproval(
                    company_code=company,
                    approved=len(rows),
                    sample_titles=[r.title for r in rows[:3]],
                )
            )
        session.commit()
    except Exception:
        session.rollback()
        raise

    result.total_approved = session.scalar(
        select(func.count()).select_from(KBDoc).where(KBDoc.is_approved.is_(True))
    )
    result.searchable_chunks = session.scalar(
        select(func.count())
        .select_from(KBChunk)
        .join(KBDoc, KBChunk.doc_id == KBDoc.id)
        .where(KBDoc.is_approved.is_(True), KBDoc.is_obsolete.is_(False))
    )
    return result


def collect_stats(session: Session) -> DatabaseStats:
    """Сводка по документам и чанкам"""

    def count(stmt) -> int:
        return session.scalar(stmt) or 0

    return DatabaseStats(
        documents=count(select(func.count()).select_from(KBDoc)),
        chunks=count(select(func.count()).select_from(KBChunk)),
        approved=count(select(func.count()).select_from(KBDoc).where(KBDoc.is_approved.is_(True))),
        obsolete=count(select(func.count()).select_from(KBDoc).where(KBDoc.is_obsolete.is_(True))),
        companies=list(session.scalars(select(KBDoc.company_code).distinct().order_by(KBDoc.company_code))),
        products=list(session.scalars(select(KBDoc.product_code).distinct().order_by(KBDoc.product_code))),
    )
