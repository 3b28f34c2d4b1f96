"""
Lightweight language detection.

Classifies a message as English, Standard Arabic or Latin-script Moroccan
Arabic (darija) from cheap lexical signals. Deterministic: ties and empty
input always resolve to English.
"""

import logging
from typing import Optional

from config import settings
from models.schemas import Language
from core.conversation.understanding.lexicon import (
    ARABIZI_TOKEN,
    DARIJA_STRONG_MARKERS,
    DARIJA_WEAK_MARKERS,
    has_arabic_script,
    tokenize,
)

logger = logging.getLogger(__name__)


class LanguageDetector:
    """Rule-based detector for en / ar / darija"""

    def __init__(self, darija_ratio: Optional[float] = None):
        self.darija_ratio = settings.DARIJA_TOKEN_RATIO if darija_ratio is None else darija_ratio
        self.strong_markers = frozenset(DARIJA_STRONG_MARKERS)
        self.weak_markers = frozenset(DARIJA_WEAK_MARKERS)

    def detect(self, text: Optional[str]) -> Language:
        """
        Detect the language of a message.

        Args:
            text: Raw user message

        Returns:
            Language.AR for any Arabic-script text, Language.DARIJA when the
            Latin tokens carry enough darija markers, otherwise Language.EN
        """
        if has_arabic_script(text):
            return Language.AR

        tokens = tokenize(text)
        if not tokens:
            return Language.EN

        if any(token in self.strong_markers for token in tokens):
            return Language.DARIJA

        weak_hits = sum(
            1 for token in tokens
            if token in self.weak_markers or ARABIZI_TOKEN.match(token)
        )
        if weak_hits and weak_hits / len(tokens) >= self.darija_ratio:
            return Language.DARIJA

        return Language.EN


# Global detector instance
language_detector = LanguageDetector()


def detect_language(text: Optional[str]) -> Language:
    """Module-level shortcut for the shared detector"""
    return language_detector.detect(text)
