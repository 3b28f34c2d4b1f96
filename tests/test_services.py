from datetime import timedelta

from config import settings
from models.schemas import ReportRecord, ReportType
from core.services.conversation_log import InMemoryConversationLog, LogConfig
from core.services.report_store import InMemoryReportStore


def test_city_filter_matches_city_with_district(now):
    store = InMemoryReportStore([
        ReportRecord(id="maarif", report_type=ReportType.PET, city="Casablanca - Maarif", created_at=now),
        ReportRecord(id="rabat", report_type=ReportType.PET, city="Rabat", created_at=now),
    ])
    assert [report.id for report in store.search_reports(city="casablanca")] == ["maarif"]
    assert [report.id for report in store.search_reports(city="RABAT")] == ["rabat"]
    assert store.search_reports(city="tanger") == []


def test_store_mixes_naive_and_aware_timestamps(now):
    store = InMemoryReportStore([
        ReportRecord(id="naive", report_type=ReportType.OTHER,
                     created_at=now.replace(tzinfo=None) - timedelta(hours=30)),
        ReportRecord(id="aware", report_type=ReportType.OTHER, created_at=now - timedelta(days=3)),
        ReportRecord(id="old", report_type=ReportType.OTHER,
                     created_at=now.replace(tzinfo=None) - timedelta(days=20), owner_id="user-1"),
    ])

    recent = store.search_reports(date_from=now - timedelta(days=7), date_to=now)
    assert [report.id for report in recent] == ["naive", "aware"]
    # Naive bounds are treated the same way
    assert [report.id for report in store.search_reports(date_to=now.replace(tzinfo=None) - timedelta(days=10))] == ["old"]
    assert [report.id for report in store.get_user_reports("user-1")] == ["old"]


def test_log_keeps_only_recent_messages_per_session():
    log = InMemoryConversationLog(LogConfig(max_sessions=10, max_messages=3))
    for index in range(5):
        log.record("s-1", "user", f"message {index}")

    assert [message.text for message in log.get_history("s-1")] == ["message 2", "message 3", "message 4"]
    assert [message.text for message in log.get_history("s-1", limit=1)] == ["message 4"]


def test_log_evicts_least_recently_active_session():
    log = InMemoryConversationLog(LogConfig(max_sessions=2, max_messages=10))
    log.record("s-1", "user", "hi")
    log.record("s-2", "user", "hello")
    log.record("s-1", "assistant", "welcome back")
    log.record("s-3", "user", "salam")

    assert log.session_count == 2
    assert log.get_history("s-2") == []
    assert [message.text for message in log.get_history("s-1")] == ["hi", "welcome back"]
    assert [message.role for message in log.get_history("s-3")] == ["user"]


def test_log_limits_default_to_settings():
    config = InMemoryConversationLog().config
    assert config.max_sessions == settings.CONVERSATION_LOG_MAX_SESSIONS
    assert config.max_messages == settings.CONVERSATION_LOG_MAX_MESSAGES
