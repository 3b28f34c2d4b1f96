"""Report store collaborator used by search and status lookups"""
import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from models.schemas import ReportRecord, ReportType

logger = logging.getLogger(__name__)


def as_aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC"""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class ReportStoreError(RuntimeError):
    """Raised when the report store cannot be reached or fails a query"""


class ReportStore(ABC):
    """Read access to published reports"""

    @abstractmethod
    def search_reports(self, report_type: Optional[ReportType] = None,
                       city: Optional[str] = None,
                       date_from: Optional[datetime] = None,
                       date_to: Optional[datetime] = None,
                       limit: int = 10) -> List[ReportRecord]:
        """
        Fetch approved reports matching the structured filters.

        Args:
            report_type: Restrict to one category
            city: Restrict to cities containing this name (case-insensitive)
            date_from: Earliest creation time
            date_to: Latest creation time
            limit: Maximum number of candidates

        Returns:
            Candidate reports, newest first

        Raises:
            ReportStoreError: if the store is unavailable
        """

    @abstractmethod
    def get_user_reports(self, user_id: str) -> List[ReportRecord]:
        """Get every report owned by a user, whatever its status"""


class InMemoryReportStore(ReportStore):
    """Process-local store, used for development and tests"""

    def __init__(self, reports: Optional[Iterable[ReportRecord]] = None):
        self._reports: List[ReportRecord] = list(reports or [])
        self._lock = threading.Lock()

    def add(self, report: ReportRecord) -> ReportRecord:
        with self._lock:
            self._reports.append(report)
        logger.debug(f"Stored report {report.id}", extra={"report_type": report.report_type.value})
        return report

    def search_reports(self, report_type: Optional[ReportType] = None,
                       city: Optional[str] = None,
                       date_from: Optional[datetime] = None,
                       date_to: Optional[datetime] = None,
                       limit: int = 10) -> List[ReportRecord]:
        with self._lock:
            candidates = [
                report for report in self._reports
                if report.status == "approved"
                and (report_type is None or report.report_type == report_type)
                and (city is None or city.lower() in (report.city or "").lower())
                and (date_from is None or as_aware(report.created_at) >= as_aware(date_from))
                and (date_to is None or as_aware(report.created_at) <= as_aware(date_to))
            ]
        candidates.sort(key=lambda report: as_aware(report.created_at), reverse=True)
        return candidates[:limit]

    def get_user_reports(self, user_id: str) -> List[ReportRecord]:
        with self._lock:
            owned = [report for report in self._reports if report.owner_id == user_id]
        owned.sort(key=lambda report: as_aware(report.created_at), reverse=True)
        return owned
