"""
Cancellation detection.

Recognizes requests to abandon the current flow in any supported language.
Runs before intent classification on every turn so users can always escape
an active report or search session.
"""

import logging
from typing import Optional

from models.schemas import Language
from core.conversation.understanding.lexicon import (
    CANCEL_PHRASES,
    CANCEL_WORDS,
    PhraseMatcher,
    tokenize,
)

logger = logging.getLogger(__name__)


class CancellationDetector:
    """Matches cancel phrases anywhere and short cancel words as whole messages"""

    def __init__(self):
        self.phrase_matcher = PhraseMatcher(CANCEL_PHRASES)
        self.word_matcher = PhraseMatcher(CANCEL_WORDS)

    def is_cancel(self, text: Optional[str], language: Optional[Language] = None) -> bool:
        """
        Check whether a message asks to cancel.

        Every language's keyword set is checked regardless of the detected
        language, since users switch scripts mid-conversation.

        Args:
            text: Raw user message
            language: Detected language of the message, if known

        Returns:
            True if the message is a cancellation request
        """
        tokens = tokenize(text)
        if not tokens:
            return False
        matched = self.word_matcher.matches_whole(tokens) or self.phrase_matcher.matches(tokens)
        if matched:
            logger.debug(
                "Cancellation requested",
                extra={"language": language.value if language else None}
            )
        return matched


# Global detector instance
cancellation_detector = CancellationDetector()
