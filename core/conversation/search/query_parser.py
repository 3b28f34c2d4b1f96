"""
Search query parsing.

Turns free text such as "black dog lost in casa yesterday" into structured
SearchParams. Parsing is permissive: input with no recognizable entity still
yields a valid, unfiltered query.
"""

import logging
from datetime import datetime
from typing import Optional

from models.schemas import SearchParams
from core.conversation.understanding.entity_extractor import (
    EntityExtractor,
    EntityType,
    entity_extractor,
)
from core.conversation.understanding.language_detector import LanguageDetector, language_detector

logger = logging.getLogger(__name__)


class SearchQueryParser:
    """Extracts category, city, colour, time window and keywords from a query"""

    def __init__(self, extractor: Optional[EntityExtractor] = None,
                 detector: Optional[LanguageDetector] = None):
        self.extractor = extractor or entity_extractor
        self.detector = detector or language_detector

    def parse(self, text: Optional[str], now: Optional[datetime] = None) -> SearchParams:
        """
        Parse a natural-language search query.

        Args:
            text: Raw query text
            now: Reference time for relative expressions like "yesterday"

        Returns:
            SearchParams; keywords are the non-stopword tokens left after the
            city and time expressions are removed
        """
        text = text or ""
        entities = self.extractor.extract_entities(text, now=now)

        report_type = entities.get(EntityType.REPORT_TYPE)
        city = entities.get(EntityType.CITY)
        color = entities.get(EntityType.COLOR)
        time_range = entities.get(EntityType.TIME_RANGE)
        keywords = entities.get(EntityType.KEYWORDS)

        params = SearchParams(
            report_type=report_type.normalized_value if report_type else None,
            city=city.normalized_value if city else None,
            keywords=list(keywords.normalized_value) if keywords else [],
            color=color.normalized_value if color else None,
            date_from=time_range.normalized_value[0] if time_range else None,
            date_to=time_range.normalized_value[1] if time_range else None,
            original_query=text.strip(),
        )

        logger.info(
            "Parsed search query",
            extra={
                "language": self.detector.detect(text).value,
                "report_type": params.report_type.value if params.report_type else None,
                "city": params.city,
                "keyword_count": len(params.keywords),
            }
        )
        return params


# Global parser instance
search_query_parser = SearchQueryParser()


def parse_search_query(text: Optional[str], now: Optional[datetime] = None) -> SearchParams:
    return search_query_parser.parse(text, now=now)
