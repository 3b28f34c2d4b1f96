"""
Search ranking.

Fetches candidate reports from the report store using the structured
filters, then scores them on keyword overlap, colour and recency.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from config import settings
from models.schemas import ReportRecord, SearchOutcome, SearchParams, SearchResult
from core.conversation.understanding.lexicon import COLOR_TERMS, normalize_text
from core.services.report_store import ReportStore, ReportStoreError, as_aware

logger = logging.getLogger(__name__)

# (max age, bonus) pairs, checked in order
RECENCY_BONUSES = [
    (timedelta(days=1), 15.0),
    (timedelta(days=7), 10.0),
    (timedelta(days=30), 5.0),
]


class SearchRanker:
    """Scores and orders report candidates for a parsed query"""

    def __init__(self, store: ReportStore):
        self.store = store

    def search_reports(self, params: SearchParams,
                       now: Optional[datetime] = None) -> SearchOutcome:
        """
        Run a search against the report store.

        Args:
            params: Parsed search filters
            now: Reference time for the recency bonus

        Returns:
            SearchOutcome with ranked items

        Raises:
            ReportStoreError: if the store fails
        """
        try:
            candidates = self.store.search_reports(
                report_type=params.report_type,
                city=params.city,
                date_from=params.date_from,
                date_to=params.date_to,
                limit=settings.MAX_SEARCH_RESULTS,
            )
        except ReportStoreError:
            raise
        except Exception as e:
            raise ReportStoreError(f"Report search failed: {e}") from e

        items = self.rank(candidates, params, now=now)
        logger.info(
            f"Search returned {len(items)} result(s)",
            extra={"candidates": len(candidates), "keywords": params.keywords}
        )
        return SearchOutcome(items=items, total_count=len(items))

    def rank(self, candidates: List[ReportRecord], params: SearchParams,
             now: Optional[datetime] = None) -> List[SearchResult]:
        """Score candidates, best first; ties go to the newest report"""
        now = now or datetime.now(timezone.utc)
        results = [
            SearchResult(report=report, relevance_score=self.score(report, params, now))
            for report in candidates
        ]
        results.sort(key=lambda result: as_aware(result.report.created_at), reverse=True)
        results.sort(key=lambda result: result.relevance_score, reverse=True)
        return results

    def score(self, report: ReportRecord, params: SearchParams, now: datetime) -> float:
        text = self.searchable_text(report)
        score = settings.SEARCH_SCORE_FLOOR

        for keyword in params.keywords:
            if normalize_text(keyword) in text:
                score += settings.KEYWORD_MATCH_SCORE

        if params.color:
            variants = [params.color, *COLOR_TERMS.get(params.color, [])]
            if any(normalize_text(variant) in text for variant in variants):
                score += settings.COLOR_MATCH_SCORE

        age = as_aware(now) - as_aware(report.created_at)
        for max_age, bonus in RECENCY_BONUSES:
            if age < max_age:
                score += bonus
                break

        return score

    @staticmethod
    def searchable_text(report: ReportRecord) -> str:
        """Normalized concatenation of every text field of a report"""
        parts = [report.city, report.last_known_location, report.additional_info]
        parts.extend(str(value) for value in report.details.values() if value is not None)
        return normalize_text(" ".join(part for part in parts if part))
