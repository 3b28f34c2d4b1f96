from datetime import datetime, timedelta, timezone

import pytest

from models.schemas import ReportRecord, ReportType
from core.conversation.orchestration import DialogueOrchestrator
from core.services.conversation_log import InMemoryConversationLog
from core.services.report_store import InMemoryReportStore, ReportStore, ReportStoreError


class FailingReportStore(ReportStore):
    """Store whose backend is always down"""

    def __init__(self):
        self.calls = 0

    def search_reports(self, report_type=None, city=None, date_from=None, date_to=None, limit=10):
        self.calls += 1
        raise ReportStoreError("connection refused")

    def get_user_reports(self, user_id):
        self.calls += 1
        raise ReportStoreError("connection refused")


def _report(report_id, report_type, city, days_old, now, status="approved", owner_id=None, **details):
    return ReportRecord(
        id=report_id,
        report_type=report_type,
        status=status,
        city=city,
        last_known_location=details.pop("location", None),
        additional_info=details.pop("info", None),
        details=details,
        created_at=now - timedelta(days=days_old),
        owner_id=owner_id,
    )


@pytest.fixture
def now():
    return datetime.now(timezone.utc)


@pytest.fixture
def sample_reports(now):
    return [
        _report("r-1", ReportType.PET, "casablanca", 2, now,
                petName="Rex", petType="dog", color="brown", location="Maarif park"),
        _report("r-2", ReportType.PET, "casablanca", 45, now,
                petName="Mimi", petType="cat", color="white", location="Ain Diab"),
        _report("r-3", ReportType.PET, "Rabat", 1, now,
                petName="Bobby", petType="dog", color="black", location="Agdal"),
        _report("r-4", ReportType.ELECTRONICS, "casablanca", 3, now,
                deviceType="phone", brand="Samsung", color="black", owner_id="user-1"),
        _report("r-5", ReportType.PERSON, "marrakech", 5, now, status="pending",
                firstName="Youssef", lastName="Alami", owner_id="user-1"),
    ]


@pytest.fixture
def report_store(sample_reports):
    return InMemoryReportStore(sample_reports)


@pytest.fixture
def failing_store():
    return FailingReportStore()


@pytest.fixture
def conversation_log():
    return InMemoryConversationLog()


@pytest.fixture
def orchestrator(report_store, conversation_log):
    return DialogueOrchestrator(store=report_store, conversation_log=conversation_log)


@pytest.fixture
def failing_orchestrator(failing_store):
    return DialogueOrchestrator(store=failing_store)
