"""Database access - ORM-модели и фабрика сессий."""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from kb_cleanup.db.models import Base, KBChunk, KBDoc


def create_session_factory(url: str, echo: bool = False) -> sessionmaker[Session]:
    """Фабрика сессий для базы backend

    Args:
        url: SQLAlchemy URL (postgresql://..., sqlite:///...)
        echo: логировать SQL
    """
    engine = create_engine(url, echo=echo)
    return sessionmaker(bind=engine)


__all__ = [
    "Base",
    "KBChunk",
    "KBDoc",
    "create_session_factory",
]
