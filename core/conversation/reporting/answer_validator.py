"""
Validation of slot answers.

Each slot carries a declarative ``kind`` tag; this module maps the tag to a
check that either canonicalizes the raw answer or explains what is wrong.
"""

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from models.schemas import SlotDefinition, SlotKind
from core.conversation.understanding.lexicon import (
    CITY_GAZETTEER,
    PhraseMatcher,
    normalize_text,
    tokenize,
)

_YEAR = re.compile(r"^\d{4}$")
_MIN_YEAR = 1900


@dataclass
class AnswerCheck:
    """Outcome of validating one answer"""
    valid: bool
    value: Optional[str] = None
    hint: Optional[str] = None  # key into the localized hint table


class AnswerValidator:
    """Kind-based slot answer checks"""

    def __init__(self):
        self.city_matcher = PhraseMatcher(CITY_GAZETTEER)

    def validate(self, slot: SlotDefinition, raw_answer: Optional[str]) -> AnswerCheck:
        """
        Validate and canonicalize an answer for a slot.

        Args:
            slot: Slot being answered
            raw_answer: Text the user typed or the quick-reply value

        Returns:
            AnswerCheck with the canonical value, or a hint key when invalid
        """
        answer = (raw_answer or "").strip()
        if not answer:
            return AnswerCheck(valid=False, hint="required")

        if slot.kind == SlotKind.CHOICE:
            return self._validate_choice(slot, answer)
        if slot.kind == SlotKind.YEAR:
            return self._validate_year(answer)
        if slot.kind == SlotKind.CITY:
            return self._validate_city(answer)
        return AnswerCheck(valid=True, value=answer)

    def _validate_choice(self, slot: SlotDefinition, answer: str) -> AnswerCheck:
        normalized = normalize_text(answer)
        for option in slot.options:
            candidates = [option.value, *option.labels.values(), *option.synonyms]
            if normalized in {normalize_text(candidate) for candidate in candidates}:
                return AnswerCheck(valid=True, value=option.value)
        return AnswerCheck(valid=False, hint="choice")

    def _validate_year(self, answer: str) -> AnswerCheck:
        if not _YEAR.match(answer):
            return AnswerCheck(valid=False, hint="year")
        year = int(answer)
        if year < _MIN_YEAR or year > datetime.now(timezone.utc).year:
            return AnswerCheck(valid=False, hint="year")
        return AnswerCheck(valid=True, value=answer)

    def _validate_city(self, answer: str) -> AnswerCheck:
        # Unknown towns are accepted as typed
        match = self.city_matcher.find_first(tokenize(answer))
        if match and match.length == len(tokenize(answer)):
            return AnswerCheck(valid=True, value=match.label.title())
        return AnswerCheck(valid=True, value=answer)


# Global validator instance
answer_validator = AnswerValidator()
