from datetime import datetime, timedelta, timezone

import pytest

from config import settings
from models.schemas import Language, ReportRecord, ReportType, SearchOutcome, SearchParams
from core.conversation.search import SearchRanker, format_search_results, parse_search_query
from core.services.report_store import InMemoryReportStore, ReportStore, ReportStoreError


class _ExplodingStore(ReportStore):
    def search_reports(self, *args, **kwargs):
        raise ConnectionError("socket closed")

    def get_user_reports(self, user_id):
        return []


def test_parse_english_query():
    params = parse_search_query("missing dog in casablanca")
    assert params.report_type == ReportType.PET
    assert params.city == "casablanca"
    assert params.keywords == ["dog"]
    assert params.original_query == "missing dog in casablanca"


def test_parse_arabic_query():
    params = parse_search_query("كلب ضائع في الدار البيضاء")
    assert params.report_type == ReportType.PET
    assert params.city == "casablanca"
    assert params.color is None
    assert params.keywords == ["كلب"]


def test_parse_time_and_colour():
    now = datetime(2026, 5, 20, 9, 0, tzinfo=timezone.utc)
    params = parse_search_query("black cat yesterday in rabat", now=now)
    assert params.color == "black"
    assert params.date_from == datetime(2026, 5, 19, tzinfo=timezone.utc)
    assert params.date_to == datetime(2026, 5, 20, tzinfo=timezone.utc)


@pytest.mark.parametrize("text", ["", None, "the and of", "   "])
def test_parse_without_entities(text):
    params = parse_search_query(text)
    assert params.report_type is None
    assert params.city is None
    assert params.keywords == []


def test_ranker_prefers_keyword_and_colour_matches(report_store, now):
    ranker = SearchRanker(report_store)
    outcome = ranker.search_reports(parse_search_query("brown dog in casablanca"), now=now)

    assert [result.report.id for result in outcome.items] == ["r-1", "r-2"]
    best, other = outcome.items
    expected = settings.SEARCH_SCORE_FLOOR + 2 * settings.KEYWORD_MATCH_SCORE + settings.COLOR_MATCH_SCORE + 10.0
    assert best.relevance_score == expected
    assert other.relevance_score == settings.SEARCH_SCORE_FLOOR
    assert outcome.total_count == 2


def test_ranker_filters_on_status_and_type(report_store, now):
    outcome = SearchRanker(report_store).search_reports(SearchParams(report_type=ReportType.PERSON), now=now)
    assert outcome.items == []
    assert outcome.total_count == 0


def test_ties_go_to_newest(now):
    old = ReportRecord(id="old", report_type=ReportType.OTHER, city="fes",
                       created_at=now - timedelta(days=100))
    older = ReportRecord(id="older", report_type=ReportType.OTHER, city="fes",
                         created_at=now - timedelta(days=200))
    ranked = SearchRanker(InMemoryReportStore()).rank([older, old], SearchParams(), now=now)
    assert [result.report.id for result in ranked] == ["old", "older"]


def test_colour_variants_count_as_matches(now):
    report = ReportRecord(id="ar", report_type=ReportType.PET, city="rabat",
                          details={"color": "أسود"}, created_at=now - timedelta(days=60))
    ranker = SearchRanker(InMemoryReportStore())
    assert ranker.score(report, SearchParams(color="black"), now) == (
        settings.SEARCH_SCORE_FLOOR + settings.COLOR_MATCH_SCORE
    )


def test_store_failures_surface_as_store_errors(failing_store):
    with pytest.raises(ReportStoreError):
        SearchRanker(failing_store).search_reports(SearchParams())
    with pytest.raises(ReportStoreError):
        SearchRanker(_ExplodingStore()).search_reports(SearchParams())


def test_format_results(report_store, now):
    outcome = SearchRanker(report_store).search_reports(parse_search_query("dog in casablanca"), now=now)
    response = format_search_results(outcome, Language.EN)

    assert response.text.startswith("🔍 Found 2 matching report(s):")
    assert "1. 🐾 Pet • Rex dog" in response.text
    assert "📍 Casablanca - Maarif park" in response.text
    assert [reply.action for reply in response.quick_replies] == ["search_reports", "filter_search", "cancel"]


def test_format_more_results_line(report_store, now):
    outcome = SearchRanker(report_store).search_reports(SearchParams(), now=now)
    response = format_search_results(outcome, Language.EN, shown=2)
    assert response.text.count("📅") == 2
    assert "Showing the top 2" in response.text


def test_format_no_results():
    response = format_search_results(SearchOutcome(), Language.AR)
    assert response.text
    assert [reply.action for reply in response.quick_replies] == ["search_reports", "create_report", "cancel"]
