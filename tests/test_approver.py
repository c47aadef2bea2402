"""Approver and database stats tests on in-memory SQLite."""

from datetime import datetime, timedelta, timezone

import pytest
from kb_cleanup.approver import approve_documents, collect_stats
from kb_cleanup.db import Base, KBChunk, KBDoc
from sqlalchemy import Update, create_engine, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session


@pytest.fixture
def session():
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


def seed(session):
    base = datetime(2026, 1, 1, tzinfo=timezone.utc)
    docs = [
        KBDoc(id="r1", title="РЕСО 1", company_code="RESO", product_code="AUTO", created_at=base),
        KBDoc(id="r2", title="РЕСО 2", company_code="RESO", product_code="AUTO", created_at=base + timedelta(days=1)),
        KBDoc(id="r3", title="РЕСО 3", company_code="RESO", product_code="LIFE", created_at=base + timedelta(days=2)),
        KBDoc(id="r4", title="РЕСО old", company_code="RESO", product_code="AUTO", is_obsolete=True, created_at=base),
        KBDoc(id="v1", title="ВСК 1", company_code="VSK", product_code="HEALTH", is_approved=True, created_at=base),
        KBDoc(id="s1", title="СОГАЗ 1", company_code="SOGAZ", product_code="TRAVEL", created_at=base),
    ]
    session.add_all(docs)
    session.add_all(
        [
            KBChunk(id="c1", doc_id="r1", text="фрагмент"),
            KBChunk(id="c2", doc_id="r1", text="фрагмент"),
            KBChunk(id="c3", doc_id="r4", text="фрагмент"),
            KBChunk(id="c4", doc_id="v1", text="фрагмент"),
        ]
    )
    session.commit()


class TestApproveDocuments:
    """Bulk approval of the first N documents per company."""

    def test_approves_oldest_first_up_to_limit(self, session):
        seed(session)

        result = approve_documents(session, ["RESO"], limit=2, approved_by="tester")

        approved = session.scalars(select(KBDoc.id).where(KBDoc.is_approved.is_(True)).order_by(KBDoc.id)).all()
        assert approved == ["r1", "r2", "v1"]
        assert result.companies[0].approved == 2
        assert result.companies[0].sample_titles == ["РЕСО 1", "РЕСО 2"]

        doc = session.get(KBDoc, "r1")
        assert doc.approved_by == "tester"
        assert doc.approved_at is not None

    def test_skips_obsolete_and_already_approved(self, session):
        seed(session)

        result = approve_documents(session, ["RESO", "VSK", "SOGAZ"], limit=50)

        by_company = {c.company_code: c.approved for c in result.companies}
        assert by_company == {"RESO": 3, "VSK": 0, "SOGAZ": 1}
        assert session.get(KBDoc, "r4").is_approved is False
        assert result.newly_approved == 4

    def test_totals_after_approval(self, session):
        seed(session)

        result = approve_documents(session, ["RESO"], limit=1)

        assert result.total_approved == 2  # r1 + v1
        assert result.searchable_chunks == 3  # c1, c2 (r1) + c4 (v1); r4 is obsolete

    def test_database_error_rolls_back_and_propagates(self, session, monkeypatch):
        seed(session)
        execute = session.execute
        updates = []

        def failing_execute(statement, *args, **kwargs):
            if isinstance(statement, Update):
                updates.append(statement)
                if len(updates) == 2:
                    raise SQLAlchemyError("update failed")
            return execute(statement, *args, **kwargs)

        monkeypatch.setattr(session, "execute", failing_execute)

        with pytest.raises(SQLAlchemyError):
            approve_documents(session, ["RESO", "SOGAZ"])

        monkeypatch.undo()
        approved = session.scalars(select(KBDoc.id).where(KBDoc.is_approved.is_(True))).all()
        assert len(updates) == 2
        assert approved == ["v1"]

    def test_unknown_company_approves_nothing(self, session):
        seed(session)

        result = approve_documents(session, ["ALFA"])

        assert result.newly_approved == 0


class TestCollectStats:
    """Database overview."""

    def test_counts_and_distinct_codes(self, session):
        seed(session)

        stats = collect_stats(session)

        assert stats.documents == 6
        assert stats.chunks == 4
        assert stats.approved == 1
        assert stats.obsolete == 1
        assert stats.companies == ["RESO", "SOGAZ", "VSK"]
        assert stats.products == ["AUTO", "HEALTH", "LIFE", "TRAVEL"]
        assert "Документов в базе: 6" in stats.render()

    def test_empty_database(self, session):
        stats = collect_stats(session)

        assert stats.documents == 0
        assert stats.companies == []
