"""
Report creation handler.

Starts report dialogues (asking for the category when it is not known yet)
and feeds answers to the dialogue engine while a report session is active.
"""

from typing import Optional

from config import settings
from models.schemas import (
    ConversationContext,
    ConversationMode,
    IntentType,
    NavigationAction,
    ReportSession,
)
from core.conversation.handlers.base import BaseHandler, HandlerResponse, TurnRequest
from core.conversation.reporting.dialogue_engine import (
    COMPLETE_SIGNAL,
    SKIP_SIGNAL,
    ReportDialogueEngine,
    ReportTurn,
    report_engine,
)
from core.conversation.reporting.slot_registry import UnknownReportType
from core.conversation.responses import get_message, type_label, type_menu_replies
from core.conversation.understanding.intent_classifier import IntentResult
from core.conversation.understanding.lexicon import DONE_WORDS, SKIP_WORDS, PhraseMatcher, tokenize


class ReportHandler(BaseHandler):
    """Handles create_report intents and active report sessions"""

    def __init__(self, engine: Optional[ReportDialogueEngine] = None):
        super().__init__()
        self.engine = engine or report_engine
        self.skip_matcher = PhraseMatcher({"skip": SKIP_WORDS})
        self.done_matcher = PhraseMatcher({"done": DONE_WORDS})

    def can_handle(self, intent: IntentResult, context: ConversationContext) -> bool:
        return intent.intent == IntentType.CREATE_REPORT

    def handle(self, intent: IntentResult, context: ConversationContext,
               request: TurnRequest) -> HandlerResponse:
        """
        Start a report dialogue.

        The category comes from a select_type quick reply or from a category
        noun in the message; without one the category menu is shown.
        """
        language = request.language
        report_type = request.action_data.get("type") if request.action == "select_type" else None
        report_type = report_type or intent.report_type

        if not report_type:
            response = self.respond(
                get_message("choose_type", language),
                ConversationContext(),
                quick_replies=type_menu_replies(language),
            )
            self.log_handling(intent, response)
            return response

        try:
            turn = self.engine.init_report_session(
                report_type, language,
                include_optional=settings.REPORT_ASK_OPTIONAL_FIELDS,
                found=intent.found,
            )
        except UnknownReportType as e:
            self.logger.warning(f"Rejected report type: {e}", extra={"code": e.code})
            return self.respond(
                get_message("choose_type", language),
                ConversationContext(),
                quick_replies=type_menu_replies(language),
                success=False,
                error=e.code,
            )

        intro = get_message("report_started_found" if intent.found else "report_started", language,
                            type_label=type_label(turn.session.report_type, language))
        response = self._turn_response(turn, request, intro=intro)
        self.log_handling(intent, response)
        return response

    def continue_session(self, session: ReportSession, request: TurnRequest) -> HandlerResponse:
        """
        Apply the user's answer to the active report session.

        Args:
            session: Session restored from the context
            request: Current turn; an ``answer`` quick reply carries the value

        Returns:
            Next prompt, or the summary and form navigation on completion
        """
        answer = self._resolve_answer(session, request)
        turn = self.engine.process_report_answer(session, answer, request.language)
        return self._turn_response(turn, request)

    def _resolve_answer(self, session: ReportSession, request: TurnRequest) -> str:
        """Map quick replies and typed skip/done words to engine input"""
        if request.action == "answer" and request.action_data.get("value") is not None:
            return str(request.action_data["value"])

        slot = session.current_slot
        tokens = tokenize(request.message)
        if slot is not None and not slot.required:
            if self.skip_matcher.matches_whole(tokens):
                return SKIP_SIGNAL
            if self.done_matcher.matches_whole(tokens):
                return COMPLETE_SIGNAL
        return request.message

    def _turn_response(self, turn: ReportTurn, request: TurnRequest,
                       intro: Optional[str] = None) -> HandlerResponse:
        language = request.language
        session = turn.session

        if turn.is_complete:
            self.logger.info(
                "Report draft ready for the form",
                extra={"session_id": request.session_id, "report_type": session.report_type.value,
                       "found": session.found}
            )
            # Found items go to the sighting form, lost ones to the missing-report form
            route = settings.REPORT_SIGHTING_ROUTE if session.found else settings.REPORT_FORM_ROUTE
            return self.respond(
                f"{turn.prompt}\n\n{turn.summary}",
                ConversationContext(),
                action=NavigationAction(
                    type="navigate_with_data",
                    route=route,
                    params={"type": session.report_type.value, "prefill": dict(session.collected_data)},
                ),
            )

        parts = [part for part in [intro, turn.hint, turn.prompt] if part]
        return self.respond(
            "\n\n".join(parts),
            ConversationContext(mode=ConversationMode.REPORT_CREATION, report_context=session),
            quick_replies=turn.quick_replies,
            progress=self.engine.render_progress(session, language),
            success=turn.hint is None,
        )
