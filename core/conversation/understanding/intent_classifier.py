"""
Rule-based intent classification.

This module maps a normalized message to one of the assistant's intents by
evaluating ordered cue rules (report creation, search, status, help) over
the multilingual lexicon. Cancellation is detected separately, before this
classifier runs, because it must interrupt any active flow.
"""

import logging
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from enum import Enum

from config import settings
from models.schemas import ChatUser, ConversationContext, IntentType, Language, ReportType
from core.conversation.understanding.entity_extractor import (
    EntityExtractor,
    EntityType,
    ExtractedEntity,
    entity_extractor,
)
from core.conversation.understanding.language_detector import LanguageDetector, language_detector
from core.conversation.understanding.lexicon import (
    CREATE_REPORT_CUES,
    EMERGENCY_CUES,
    FOUND_CUES,
    GOODBYE_CUES,
    GREETING_CUES,
    HELP_CUES,
    SEARCH_CUES,
    STATUS_CUES,
    THANKS_CUES,
    PhraseMatcher,
    tokenize,
)

logger = logging.getLogger(__name__)


class HelpTopic(str, Enum):
    """Small-talk refinements of the platform_help intent"""
    GREETING = "greeting"
    THANKS = "thanks"
    GOODBYE = "goodbye"
    HELP = "help"


@dataclass
class IntentRule:
    """A cue table that votes for one intent"""
    name: str
    intent_type: IntentType
    matcher: PhraseMatcher


@dataclass
class IntentResult:
    """Result of intent classification"""
    intent: IntentType
    confidence: float
    language: Language
    entities: Dict[str, Any] = field(default_factory=dict)
    topic: Optional[HelpTopic] = None
    urgent: bool = False
    found: bool = False
    matched_rules: List[str] = field(default_factory=list)
    original_message: Optional[str] = None

    @property
    def report_type(self) -> Optional[ReportType]:
        value = self.entities.get("reportType")
        return ReportType(value) if value else None

    @property
    def city(self) -> Optional[str]:
        return self.entities.get("city")

    @property
    def keywords(self) -> List[str]:
        return self.entities.get("keywords", [])

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for responses and logging"""
        return {
            "intent": self.intent.value,
            "confidence": round(self.confidence, 2),
            "language": self.language.value,
            "entities": dict(self.entities),
            "topic": self.topic.value if self.topic else None,
            "urgent": self.urgent,
            "found": self.found,
        }


class IntentClassifier:
    """
    Ordered, deterministic intent classifier.

    Rules are evaluated highest priority first and the first match wins:
    report creation, search, status, then the platform_help fallback.
    Confidence is derived from how many cues fired and how complete the
    extracted entities are; it is informational only.
    """

    BASE_CONFIDENCE = 0.6
    MAX_CONFIDENCE = 0.95

    def __init__(self, detector: Optional[LanguageDetector] = None,
                 extractor: Optional[EntityExtractor] = None):
        self.detector = detector or language_detector
        self.extractor = extractor or entity_extractor
        self._initialize_rules()

    def _initialize_rules(self):
        """Initialize cue rules in priority order"""
        self.rules = [
            IntentRule("create_report", IntentType.CREATE_REPORT, PhraseMatcher(CREATE_REPORT_CUES)),
            IntentRule("search_reports", IntentType.SEARCH_REPORTS, PhraseMatcher(SEARCH_CUES)),
            IntentRule("check_status", IntentType.CHECK_STATUS, PhraseMatcher(STATUS_CUES)),
        ]
        self.topic_matchers = [
            (HelpTopic.GOODBYE, PhraseMatcher(GOODBYE_CUES)),
            (HelpTopic.THANKS, PhraseMatcher(THANKS_CUES)),
            (HelpTopic.HELP, PhraseMatcher(HELP_CUES)),
            (HelpTopic.GREETING, PhraseMatcher(GREETING_CUES)),
        ]
        self.emergency_matcher = PhraseMatcher(EMERGENCY_CUES)
        self.found_matcher = PhraseMatcher(FOUND_CUES)

    def classify(self, text: str, context: Optional[ConversationContext] = None,
                 user: Optional[ChatUser] = None) -> IntentResult:
        """
        Classify a message.

        Args:
            text: Raw user message
            context: Current conversation context, if any
            user: Authenticated user, if any

        Returns:
            IntentResult with intent, confidence and extracted entities
        """
        language = self.detector.detect(text)
        tokens = tokenize(text)
        extracted = self.extractor.extract_entities(text)

        cue_hits = {rule.name: len(rule.matcher.find_all(tokens)) for rule in self.rules}
        matched_rules = [name for name, hits in cue_hits.items() if hits]
        has_noun = EntityType.REPORT_TYPE in extracted
        has_city = EntityType.CITY in extracted

        if cue_hits["create_report"] or (has_noun and not cue_hits["search_reports"]):
            intent = IntentType.CREATE_REPORT
            entity_types = [EntityType.REPORT_TYPE]
            hits = cue_hits["create_report"] + int(has_noun)
        elif cue_hits["search_reports"] or has_city:
            intent = IntentType.SEARCH_REPORTS
            entity_types = [EntityType.REPORT_TYPE, EntityType.CITY, EntityType.KEYWORDS]
            hits = cue_hits["search_reports"] + int(has_city)
        elif cue_hits["check_status"]:
            intent = IntentType.CHECK_STATUS
            entity_types = []
            hits = cue_hits["check_status"]
        else:
            intent = IntentType.PLATFORM_HELP
            entity_types = []
            hits = 0

        entities = self._select_entities(extracted, entity_types)
        result = IntentResult(
            intent=intent,
            confidence=self._score(intent, hits, len(matched_rules), entities, entity_types),
            language=language,
            entities=entities,
            topic=self._detect_topic(tokens) if intent == IntentType.PLATFORM_HELP else None,
            urgent=self.emergency_matcher.matches(tokens),
            found=intent == IntentType.CREATE_REPORT and self.found_matcher.matches(tokens),
            matched_rules=matched_rules,
            original_message=text,
        )

        logger.info(
            f"Classified intent {result.intent.value}",
            extra={
                "intent_type": result.intent.value,
                "confidence": result.confidence,
                "language": language.value,
                "matched_rules": matched_rules,
                "authenticated": user is not None,
                "mode": context.mode.value if context and context.mode else None,
            }
        )
        return result

    def _select_entities(self, extracted: Dict[EntityType, ExtractedEntity],
                         entity_types: List[EntityType]) -> Dict[str, Any]:
        relevant = {
            entity_type: entity for entity_type, entity in extracted.items()
            if entity_type in entity_types
        }
        return self.extractor.get_entities_summary(relevant)

    def _detect_topic(self, tokens: List[str]) -> Optional[HelpTopic]:
        for topic, matcher in self.topic_matchers:
            if matcher.matches(tokens):
                return topic
        return None

    def _score(self, intent: IntentType, hits: int, rules_matched: int,
               entities: Dict[str, Any], entity_types: List[EntityType]) -> float:
        """Deterministic confidence from cue hits, rule overlap and entity completeness"""
        if intent == IntentType.PLATFORM_HELP:
            return settings.INTENT_CONFIDENCE_FLOOR

        confidence = self.BASE_CONFIDENCE + 0.1 * min(max(hits - 1, 0), 2)
        if entity_types:
            confidence += 0.15 * len(entities) / len(entity_types)
        if rules_matched > 1:
            confidence -= 0.1 * (rules_matched - 1)
        return round(max(settings.INTENT_CONFIDENCE_FLOOR, min(confidence, self.MAX_CONFIDENCE)), 2)


# Global classifier instance
intent_classifier = IntentClassifier()
