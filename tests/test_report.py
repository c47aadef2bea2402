"""AnalysisReport tests: bucketing, rendering and JSON layout."""

import json

import pytest
from kb_cleanup.analysis.classifier import classify
from kb_cleanup.analysis.models import Action, KBDocument
from kb_cleanup.report import AnalysisReport, parse_suggestion


def doc(doc_id, **meta):
    return KBDocument.model_validate(
        {"id": doc_id, "title": meta.pop("title", f"Док {doc_id}"), "companyCode": "SOGAZ", "productCode": "AUTO", **meta}
    )


@pytest.fixture
def report():
    results = [
        classify(doc("1"), "Условия страхования по полису. " * 5),
        classify(doc("2"), "устарело: ресо-гарантия"),
        classify(doc("3"), "Условия страхования по полису квартира. " * 3),
    ]
    return AnalysisReport.from_results(results, total_documents=3, fetch_failures=["2"])


class TestAnalysisReport:
    """Report built from classifier results."""

    def test_document_can_land_in_several_buckets(self, report):
        assert [e.id for e in report.to_mark_obsolete] == ["2"]
        assert [e.id for e in report.to_delete] == ["2"]
        assert [e.id for e in report.to_fix_company] == ["2"]
        assert [e.id for e in report.to_fix_product] == ["3"]

    def test_json_layout(self, report):
        data = report.to_dict()

        assert list(data) == [
            "timestamp",
            "totalDocuments",
            "toMarkObsolete",
            "toDelete",
            "toFixCompany",
            "toFixProduct",
            "fetchFailures",
        ]
        assert data["totalDocuments"] == 3
        assert data["toFixProduct"] == [
            {"id": "3", "title": "Док 3", "issues": ["Неправильный продукт: AUTO -> PROPERTY"]}
        ]
        assert data["fetchFailures"] == ["2"]

    def test_write_and_load(self, report, tmp_path):
        path = report.write(tmp_path / "kb-analysis-report.json")

        raw = path.read_text(encoding="utf-8")
        assert "ресо" not in raw  # content is not persisted
        assert "Неправильная компания" in raw  # ensure_ascii=False

        loaded = AnalysisReport.load(path)
        assert loaded.timestamp == report.timestamp
        assert loaded.total_documents == 3
        assert [e.id for e in loaded.to_fix_company] == ["2"]
        assert loaded.to_fix_company[0].suggestion(Action.FIX_COMPANY) == "RESO"

    def test_write_to_missing_directory_raises(self, report, tmp_path):
        with pytest.raises(OSError):
            report.write(tmp_path / "missing" / "report.json")

    def test_render_lists_counts_and_suggestions(self, report):
        text = report.render()

        assert "Всего документов: 3" in text
        assert "Исправить компанию: 1" in text
        assert "- Док 2 (SOGAZ -> RESO)" in text
        assert "- Док 3 (AUTO -> PROPERTY)" in text
        assert "Не удалось получить текст: 1" in text

    def test_empty_report(self):
        report = AnalysisReport.from_results([], total_documents=0)

        assert report.to_dict()["toDelete"] == []
        assert "ДОКУМЕНТЫ" not in report.render()


class TestParseSuggestion:
    """Suggested code extraction from issue strings."""

    def test_picks_matching_issue_not_first(self):
        issues = ["Содержит ключевые слова неактуальности", "Неправильная компания: SOGAZ -> VSK"]

        assert parse_suggestion(issues, Action.FIX_COMPANY) == "VSK"
        assert parse_suggestion(issues, Action.FIX_PRODUCT) is None

    def test_not_applicable_for_other_actions(self):
        assert parse_suggestion(["Неправильная компания: A -> B"], Action.DELETE) is None

    def test_json_round_trip_keeps_order(self, report):
        loaded = AnalysisReport.from_dict(json.loads(json.dumps(report.to_dict())))

        assert [e.to_dict() for e in loaded.to_delete] == [e.to_dict() for e in report.to_delete]
