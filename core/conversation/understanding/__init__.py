"""Language, intent and entity understanding components"""

from .language_detector import LanguageDetector, detect_language
from .cancellation import CancellationDetector
from .entity_extractor import EntityExtractor, EntityType, ExtractedEntity
from .intent_classifier import IntentClassifier, IntentResult, HelpTopic

__all__ = [
    'LanguageDetector',
    'detect_language',
    'CancellationDetector',
    'EntityExtractor',
    'EntityType',
    'ExtractedEntity',
    'IntentClassifier',
    'IntentResult',
    'HelpTopic',
]
