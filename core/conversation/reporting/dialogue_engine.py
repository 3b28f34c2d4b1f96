"""
Report slot-filling dialogue engine.

Drives a report draft one question at a time. Sessions are immutable: every
operation returns a new ReportSession inside a ReportTurn, so a session can
be serialized into the caller's context after any answer and resumed later
with identical behavior.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Union

from models.schemas import (
    Language,
    QuickReply,
    ReportSession,
    ReportType,
    SlotDefinition,
    SlotSection,
    localized,
)
from core.conversation.reporting.answer_validator import AnswerValidator, answer_validator
from core.conversation.reporting.slot_registry import SlotSchemaRegistry, slot_registry
from core.conversation.responses import QUICK_REPLY_LABELS, cancel_reply, get_message

logger = logging.getLogger(__name__)

# Control signals sent by the skip / done quick replies
SKIP_SIGNAL = "__SKIP_OPTIONAL__"
COMPLETE_SIGNAL = "__COMPLETE__"

PROGRESS_BAR_CELLS = 10

_SECTION_ORDER = [SlotSection.IDENTITY, SlotSection.DESCRIPTION, SlotSection.LOCATION]


@dataclass
class ReportTurn:
    """What the engine produced for one turn"""
    session: ReportSession
    prompt: str
    quick_replies: List[QuickReply] = field(default_factory=list)
    hint: Optional[str] = None
    summary: Optional[str] = None

    @property
    def is_complete(self) -> bool:
        return self.session.is_complete


class ReportDialogueEngine:
    """
    Slot-filling state machine for report drafts.

    States are AWAITING_ANSWER(i) for each slot index and COMPLETE. Invalid
    answers leave the index where it is; required slots can never be skipped.
    """

    def __init__(self, registry: Optional[SlotSchemaRegistry] = None,
                 validator: Optional[AnswerValidator] = None):
        self.registry = registry or slot_registry
        self.validator = validator or answer_validator

    def init_report_session(self, report_type: Union[ReportType, str], language: Language,
                            include_optional: bool = False, found: bool = False) -> ReportTurn:
        """
        Start a report dialogue.

        Args:
            report_type: Category of the report
            language: Language for prompts
            include_optional: Ask optional descriptive questions too
            found: The user is reporting something they found, not something they lost

        Returns:
            ReportTurn carrying the new session and the first prompt

        Raises:
            UnknownReportType: if the category is not supported
        """
        resolved = self.registry.resolve_type(report_type)
        slots = self.registry.get_schema(resolved)
        session = ReportSession(
            report_type=resolved,
            language=language,
            slots=slots,
            collected_data={},
            current_slot_index=self._next_index(slots, 0, include_optional),
            is_complete=False,
            progress=0.0,
            include_optional=include_optional,
            found=found,
        )
        logger.info(
            "Report session started",
            extra={"report_type": resolved.value, "language": language.value,
                   "include_optional": include_optional, "found": found}
        )
        return self._prompt_turn(session, language)

    def process_report_answer(self, session: ReportSession, raw_answer: Optional[str],
                              language: Optional[Language] = None) -> ReportTurn:
        """
        Apply one answer to the session.

        Args:
            session: Current session (left untouched)
            raw_answer: Typed answer, a quick-reply value or a control signal
            language: Language for the reply, defaults to the session language

        Returns:
            ReportTurn with the next session and what to show
        """
        language = language or session.language
        self._check_shape(session)

        if session.is_complete:
            return self._complete_turn(session, language)

        slot = session.current_slot
        if slot is None:
            return self._complete_turn(session, language)

        answer = (raw_answer or "").strip()

        if answer == COMPLETE_SIGNAL:
            if session.all_required_filled:
                return self._complete_turn(session, language)
            return self._prompt_turn(session, language, hint=get_message("hint_not_ready", language))

        if answer == SKIP_SIGNAL or (not answer and not slot.required):
            if slot.required:
                return self._prompt_turn(session, language, hint=get_message("hint_cannot_skip", language))
            logger.debug("Optional slot skipped", extra={"slot": slot.key})
            return self._advance(session, session.collected_data, language)

        check = self.validator.validate(slot, answer)
        if not check.valid:
            logger.debug("Invalid slot answer", extra={"slot": slot.key, "hint": check.hint})
            return self._prompt_turn(session, language, hint=get_message(f"hint_{check.hint}", language))

        collected = dict(session.collected_data)
        collected[slot.key] = check.value
        return self._advance(session, collected, language)

    def generate_report_summary(self, session: ReportSession, language: Language) -> str:
        """
        Render a recap of the collected answers grouped by section.

        Args:
            session: Session to summarize
            language: Language for labels

        Returns:
            Multi-line summary text
        """
        lines = [get_message("summary_header", language)]
        for section in _SECTION_ORDER:
            entries = [
                f"• {localized(slot.label, language)}: {self._display_value(slot, session.collected_data[slot.key], language)}"
                for slot in session.slots
                if slot.section == section and slot.key in session.collected_data
            ]
            if entries:
                lines.append("")
                lines.append(f"{get_message(f'section_{section.value}', language)}:")
                lines.extend(entries)
        return "\n".join(lines)

    def render_progress(self, session: ReportSession, language: Language) -> str:
        """Progress line such as "Step 3/10 [▓▓▓░░░░░░░] 30%" """
        asked = [
            index for index, slot in enumerate(session.slots)
            if slot.required or session.include_optional
        ]
        total = len(asked)
        if session.is_complete:
            current = total
        else:
            current = sum(1 for index in asked if index <= session.current_slot_index)
        filled = int(round(session.progress * PROGRESS_BAR_CELLS))
        bar = "▓" * filled + "░" * (PROGRESS_BAR_CELLS - filled)
        percent = int(round(session.progress * 100))
        return f"{get_message('step', language)} {current}/{total} [{bar}] {percent}%"

    def _advance(self, session: ReportSession, collected: Dict[str, str],
                 language: Language) -> ReportTurn:
        next_index = self._next_index(session.slots, session.current_slot_index + 1,
                                      session.include_optional)
        updated = session.model_copy(update={
            "collected_data": collected,
            "current_slot_index": next_index,
            "progress": self._progress(session.slots, collected),
        })
        if next_index >= len(session.slots):
            return self._complete_turn(updated, language)
        return self._prompt_turn(updated, language)

    def _complete_turn(self, session: ReportSession, language: Language) -> ReportTurn:
        completed = session.model_copy(update={
            "is_complete": True,
            "current_slot_index": len(session.slots),
            "progress": self._progress(session.slots, session.collected_data),
        })
        logger.info(
            "Report session complete",
            extra={"report_type": completed.report_type.value,
                   "fields": sorted(completed.collected_data)}
        )
        return ReportTurn(
            session=completed,
            prompt=get_message("report_complete", language),
            summary=self.generate_report_summary(completed, language),
        )

    def _prompt_turn(self, session: ReportSession, language: Language,
                     hint: Optional[str] = None) -> ReportTurn:
        slot = session.current_slot
        return ReportTurn(
            session=session,
            prompt=localized(slot.prompt, language),
            quick_replies=self._slot_replies(session, slot, language),
            hint=hint,
        )

    def _slot_replies(self, session: ReportSession, slot: SlotDefinition,
                      language: Language) -> List[QuickReply]:
        replies = [
            QuickReply(text=localized(option.labels, language), action="answer",
                       data={"value": option.value})
            for option in slot.options
        ]
        if not slot.required:
            replies.append(QuickReply(text=localized(QUICK_REPLY_LABELS["skip"], language),
                                      action="answer", data={"value": SKIP_SIGNAL}))
            if session.all_required_filled:
                replies.append(QuickReply(text=localized(QUICK_REPLY_LABELS["done"], language),
                                          action="answer", data={"value": COMPLETE_SIGNAL}))
        replies.append(cancel_reply(language))
        return replies

    def _display_value(self, slot: SlotDefinition, value: str, language: Language) -> str:
        for option in slot.options:
            if option.value == value:
                return localized(option.labels, language)
        return value

    @staticmethod
    def _next_index(slots: List[SlotDefinition], start: int, include_optional: bool) -> int:
        """First slot at or after start that should be asked"""
        index = start
        while index < len(slots) and not (include_optional or slots[index].required):
            index += 1
        return index

    @staticmethod
    def _progress(slots: List[SlotDefinition], collected: Dict[str, str]) -> float:
        required = [slot.key for slot in slots if slot.required]
        if not required:
            return 1.0
        answered = sum(1 for key in required if key in collected)
        return round(answered / len(required), 4)

    @staticmethod
    def _check_shape(session: ReportSession):
        if not session.slots or not 0 <= session.current_slot_index <= len(session.slots):
            raise ValueError("Corrupted report session")


# Global engine instance
report_engine = ReportDialogueEngine()


def init_report_session(report_type: Union[ReportType, str], language: Language,
                        include_optional: bool = False, found: bool = False) -> ReportTurn:
    return report_engine.init_report_session(report_type, language, include_optional, found)


def process_report_answer(session: ReportSession, raw_answer: Optional[str],
                          language: Optional[Language] = None) -> ReportTurn:
    return report_engine.process_report_answer(session, raw_answer, language)


def generate_report_summary(session: ReportSession, language: Language) -> str:
    return report_engine.generate_report_summary(session, language)
