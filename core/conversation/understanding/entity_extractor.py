"""
Entity extraction module.

This module extracts report categories, Moroccan cities, colours, time
windows and free-text keywords from user messages using the shared lexicon
tables. Intent classification and search parsing both build on it.
"""

import logging
from typing import Dict, Any, List, Optional, Set, Tuple
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from config import settings
from models.schemas import ReportType
from core.conversation.understanding.lexicon import (
    CITY_GAZETTEER,
    COLOR_TERMS,
    REPORT_TYPE_NOUNS,
    STOPWORDS,
    TIME_PERIODS,
    PhraseMatch,
    PhraseMatcher,
    all_languages,
    tokenize,
)

logger = logging.getLogger(__name__)


class EntityType(str, Enum):
    """Types of entities that can be extracted"""
    REPORT_TYPE = "report_type"
    CITY = "city"
    COLOR = "color"
    TIME_RANGE = "time_range"
    KEYWORDS = "keywords"


@dataclass
class ExtractedEntity:
    """Represents an extracted entity"""
    entity_type: EntityType
    value: Any
    normalized_value: Optional[Any] = None
    confidence: float = 1.0
    span: Optional[Tuple[int, int]] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


class EntityExtractor:
    """
    Extracts and normalizes entities from user messages.

    Matching is done on normalized tokens, so Arabic clitics ("فمراكش"),
    plurals ("dogs") and punctuation do not hide an entity.
    """

    def __init__(self):
        self.report_type_matcher = PhraseMatcher(REPORT_TYPE_NOUNS)
        self.city_matcher = PhraseMatcher(CITY_GAZETTEER)
        self.color_matcher = PhraseMatcher(COLOR_TERMS)
        self.time_matcher = PhraseMatcher(TIME_PERIODS)
        self.stopwords = frozenset(
            token for phrase in all_languages(STOPWORDS) for token in tokenize(phrase)
        )

    def extract_entities(self, message: str,
                         now: Optional[datetime] = None) -> Dict[EntityType, ExtractedEntity]:
        """
        Extract every supported entity from a message.

        Args:
            message: Raw user message
            now: Reference time for relative time expressions

        Returns:
            Dictionary of extracted entities keyed by type
        """
        tokens = tokenize(message)
        entities: Dict[EntityType, ExtractedEntity] = {}
        consumed: Set[int] = set()

        report_type = self.extract_report_type(tokens)
        if report_type:
            entities[EntityType.REPORT_TYPE] = report_type

        city = self.extract_city(tokens)
        if city:
            entities[EntityType.CITY] = city
            consumed.update(range(*city.span))

        color = self.extract_color(tokens, consumed)
        if color:
            entities[EntityType.COLOR] = color

        time_range = self.extract_time_range(tokens, now)
        if time_range:
            entities[EntityType.TIME_RANGE] = time_range
            consumed.update(range(*time_range.span))

        keywords = self.extract_keywords(tokens, consumed)
        if keywords.value:
            entities[EntityType.KEYWORDS] = keywords

        logger.debug(
            "Extracted entities",
            extra={"entity_types": [entity_type.value for entity_type in entities]}
        )
        return entities

    def extract_report_type(self, tokens: List[str]) -> Optional[ExtractedEntity]:
        """Find the first report-category noun"""
        match = self.report_type_matcher.find_first(tokens)
        if not match:
            return None
        return self._entity_from_match(EntityType.REPORT_TYPE, tokens, match,
                                       normalized=ReportType(match.label))

    def extract_city(self, tokens: List[str]) -> Optional[ExtractedEntity]:
        """Find the first known city and map it to its canonical name"""
        match = self.city_matcher.find_first(tokens)
        if not match:
            return None
        return self._entity_from_match(EntityType.CITY, tokens, match)

    def extract_color(self, tokens: List[str],
                      consumed: Optional[Set[int]] = None) -> Optional[ExtractedEntity]:
        """Find the first colour outside already consumed spans ("الدار البيضاء" is a city)"""
        consumed = consumed or set()
        for match in self.color_matcher.find_all(tokens):
            if not consumed.intersection(range(match.start, match.end)):
                return self._entity_from_match(EntityType.COLOR, tokens, match)
        return None

    def extract_time_range(self, tokens: List[str],
                           now: Optional[datetime] = None) -> Optional[ExtractedEntity]:
        """
        Turn a relative time expression into a date window.

        Args:
            tokens: Normalized message tokens
            now: Reference time, defaults to the current UTC time

        Returns:
            Entity whose normalized value is a (date_from, date_to) tuple
        """
        match = self.time_matcher.find_first(tokens)
        if not match:
            return None
        window = self._date_range(match.label, now or datetime.now(timezone.utc))
        return self._entity_from_match(EntityType.TIME_RANGE, tokens, match, normalized=window)

    def extract_keywords(self, tokens: List[str],
                         consumed: Optional[Set[int]] = None) -> ExtractedEntity:
        """
        Collect the meaningful tokens left after entity extraction.

        Stopwords of every supported language, tokens shorter than the
        configured minimum and tokens already consumed by a city or time
        expression are dropped; duplicates keep their first position.
        """
        consumed = consumed or set()
        keywords: List[str] = []
        for position, token in enumerate(tokens):
            if position in consumed:
                continue
            if len(token) < settings.MIN_KEYWORD_LENGTH or token in self.stopwords:
                continue
            if token not in keywords:
                keywords.append(token)
        return ExtractedEntity(EntityType.KEYWORDS, keywords, normalized_value=keywords)

    def get_entities_summary(self, entities: Dict[EntityType, ExtractedEntity]) -> Dict[str, Any]:
        """
        Get the wire-format summary of extracted entities.

        Args:
            entities: Extracted entities

        Returns:
            Dictionary with reportType, city, keywords and color when present
        """
        summary: Dict[str, Any] = {}
        if EntityType.REPORT_TYPE in entities:
            summary["reportType"] = entities[EntityType.REPORT_TYPE].normalized_value.value
        if EntityType.CITY in entities:
            summary["city"] = entities[EntityType.CITY].normalized_value
        if EntityType.KEYWORDS in entities:
            summary["keywords"] = list(entities[EntityType.KEYWORDS].normalized_value)
        if EntityType.COLOR in entities:
            summary["color"] = entities[EntityType.COLOR].normalized_value
        return summary

    def _entity_from_match(self, entity_type: EntityType, tokens: List[str],
                           match: PhraseMatch, normalized: Any = None) -> ExtractedEntity:
        return ExtractedEntity(
            entity_type=entity_type,
            value=" ".join(tokens[match.start:match.end]),
            normalized_value=match.label if normalized is None else normalized,
            span=(match.start, match.end),
        )

    @staticmethod
    def _date_range(period: str, now: datetime) -> Tuple[datetime, datetime]:
        """Map a named period to a (date_from, date_to) window"""
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        if period == "today":
            return start_of_day, now
        if period == "yesterday":
            return start_of_day - timedelta(days=1), start_of_day
        if period == "this_week":
            return start_of_day - timedelta(days=7), now
        return start_of_day - timedelta(days=30), now


# Global extractor instance
entity_extractor = EntityExtractor()
