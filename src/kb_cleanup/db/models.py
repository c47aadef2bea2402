"""SQLAlchemy models for the backend's KB tables.

Имена таблиц и колонок совпадают со схемой backend ("KBDoc", "KBChunk",
camelCase-колонки).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class KBDoc(Base):
    """Документ базы знаний."""

    __tablename__ = "KBDoc"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    title: Mapped[str] = mapped_column(String, nullable=False, default="")
    company_code: Mapped[str] = mapped_column("companyCode", String, nullable=False)
    product_code: Mapped[str] = mapped_column("productCode", String, nullable=False)
    is_approved: Mapped[bool] = mapped_column("isApproved", Boolean, nullable=False, default=False)
    is_obsolete: Mapped[bool] = mapped_column("isObsolete", Boolean, nullable=False, default=False)
    approved_at: Mapped[Optional[datetime]] = mapped_column("approvedAt", DateTime(timezone=True), nullable=True)
    approved_by: Mapped[Optional[str]] = mapped_column("approvedBy", String, nullable=True)
    created_at: Mapped[datetime] = mapped_column("createdAt", DateTime(timezone=True), default=_utcnow)

    chunks: Mapped[list["KBChunk"]] = relationship(back_populates="doc", cascade="all, delete-orphan")


class KBChunk(Base):
    """Фрагмент документа для поиска."""

    __tablename__ = "KBChunk"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    doc_id: Mapped[str] = mapped_column("docId", ForeignKey("KBDoc.id"), nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    doc: Mapped[KBDoc] = relationship(back_populates="chunks")
