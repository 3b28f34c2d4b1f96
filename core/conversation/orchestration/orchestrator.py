"""
Dialogue orchestration.

This module runs one conversation turn end to end: it restores the caller's
context, checks for cancellation, routes the message to the active flow or
to an intent handler, and returns the reply with the next context. It never
raises; every failure becomes a well-formed reply.
"""

import logging
from typing import Dict, Any, Optional, Union

from pydantic import ValidationError as SchemaValidationError

from config import settings
from models.schemas import (
    AssistantResponse,
    ChatUser,
    ConversationContext,
    ConversationMode,
    IntentType,
    Language,
)
from core.conversation.context.validators import ContextValidator
from core.conversation.handlers import (
    HandlerRegistry,
    HandlerResponse,
    HelpHandler,
    ReportHandler,
    SearchHandler,
    StatusHandler,
    TurnRequest,
)
from core.conversation.pipeline.middleware import (
    ErrorHandlingMiddleware,
    LoggingMiddleware,
    MiddlewarePipeline,
    ValidationMiddleware,
    build_result,
)
from core.conversation.reporting.dialogue_engine import ReportDialogueEngine
from core.conversation.responses import get_message, main_menu_replies, with_emergency
from core.conversation.understanding.cancellation import CancellationDetector, cancellation_detector
from core.conversation.understanding.intent_classifier import (
    HelpTopic,
    IntentClassifier,
    IntentResult,
    intent_classifier,
)
from core.services.conversation_log import ConversationLog, InMemoryConversationLog
from core.services.report_store import InMemoryReportStore, ReportStore

logger = logging.getLogger(__name__)

# Quick-reply actions and the intent each one stands for
ACTION_INTENTS = {
    "select_type": IntentType.CREATE_REPORT,
    "create_report": IntentType.CREATE_REPORT,
    "search_reports": IntentType.SEARCH_REPORTS,
    "search": IntentType.SEARCH_REPORTS,
    "retry_search": IntentType.SEARCH_REPORTS,
    "filter_search": IntentType.SEARCH_REPORTS,
    "check_status": IntentType.CHECK_STATUS,
    "platform_help": IntentType.PLATFORM_HELP,
}


class DialogueOrchestrator:
    """
    Runs conversation turns.

    Turn order: context restore, cancellation, active report session, active
    search refinement, then quick-reply actions or fresh intent
    classification routed through the handler registry.
    """

    def __init__(self, store: Optional[ReportStore] = None,
                 conversation_log: Optional[ConversationLog] = None,
                 classifier: Optional[IntentClassifier] = None,
                 cancellation: Optional[CancellationDetector] = None,
                 engine: Optional[ReportDialogueEngine] = None):
        self.store = store or InMemoryReportStore()
        self.conversation_log = conversation_log or InMemoryConversationLog()
        self.classifier = classifier or intent_classifier
        self.cancellation = cancellation or cancellation_detector

        self.report_handler = ReportHandler(engine)
        self.search_handler = SearchHandler(self.store)
        self.handler_registry = HandlerRegistry()
        self._register_handlers()

        self.pipeline = (
            MiddlewarePipeline()
            .add(ErrorHandlingMiddleware(self._fallback))
            .add(LoggingMiddleware())
            .add(ValidationMiddleware())
        )
        self._process = self.pipeline.build(self._handle_turn)

    def _register_handlers(self):
        """Register intent handlers"""
        self.handler_registry.register(self.report_handler, [IntentType.CREATE_REPORT])
        self.handler_registry.register(self.search_handler, [IntentType.SEARCH_REPORTS])
        self.handler_registry.register(StatusHandler(self.store), [IntentType.CHECK_STATUS])
        self.handler_registry.register(HelpHandler(), [IntentType.PLATFORM_HELP])

    def process_message(self, message: Optional[str],
                        context: Optional[Dict[str, Any]] = None,
                        user: Optional[Union[ChatUser, Dict[str, Any]]] = None,
                        session_id: Optional[str] = None,
                        action: Optional[str] = None,
                        action_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Process one user turn.

        Args:
            message: User's message (may be empty when a quick reply is clicked)
            context: Context returned by the previous turn, verbatim
            user: Authenticated user, if any
            session_id: Conversation identifier used for logging
            action: Quick-reply action, if the user clicked one
            action_data: Quick-reply payload

        Returns:
            Dict with ``response`` and ``context``, plus ``intent`` and
            ``entities`` when a classification ran
        """
        data = {
            "message": message or "",
            "context": context,
            "user": user,
            "session_id": session_id,
            "action": action,
            "action_data": action_data or {},
        }
        result = self._process(data)
        if isinstance(result.get("context"), dict) and data.get("language"):
            result["context"]["language"] = data["language"].value
        self._record_turn(data, result)
        return {
            key: result[key]
            for key in ("response", "context", "intent", "entities")
            if result.get(key) is not None
        }

    def _handle_turn(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Final pipeline stage"""
        message = data["message"]
        action = data["action"]
        user = self._load_user(data["user"])

        # Stage 1: Context restore
        context = self._load_context(data["context"], data["session_id"])
        if context is None:
            language = self._turn_language(message, None)
            data["language"] = language
            response = AssistantResponse(
                text=get_message("restart", language),
                quick_replies=main_menu_replies(language),
            )
            return build_result(response, ConversationContext(), metadata={"handler_name": "restart"})

        language = self._turn_language(message, context, action)
        data["language"] = language
        request = TurnRequest(
            message=message,
            language=language,
            user=user,
            session_id=data["session_id"],
            action=action,
            action_data=data["action_data"],
        )

        # Stage 2: Cancellation, in every mode
        if action == "cancel" or self.cancellation.is_cancel(message, language):
            logger.info(
                "Conversation cancelled",
                extra={"session_id": request.session_id,
                       "mode": context.mode.value if context.mode else None}
            )
            response = AssistantResponse(
                text=get_message("cancel", language),
                quick_replies=main_menu_replies(language),
            )
            return build_result(response, ConversationContext(), intent=IntentType.CANCEL.value,
                                metadata={"handler_name": "cancel"})

        # Stage 3: Active report session; only navigation actions leave it
        if (context.mode == ConversationMode.REPORT_CREATION and context.report_context
                and action not in ACTION_INTENTS):
            try:
                handled = self.report_handler.continue_session(context.report_context, request)
            except ValueError as e:
                logger.warning(f"Resetting broken report session: {e}",
                               extra={"session_id": request.session_id})
                response = AssistantResponse(
                    text=get_message("restart", language),
                    quick_replies=main_menu_replies(language),
                )
                return build_result(response, ConversationContext(), metadata={"handler_name": "restart"})
            return self._handler_result(handled)

        # Stage 4: Search refinement
        if context.mode == ConversationMode.SEARCH and action is None:
            handled = self.search_handler.refine(context, request)
            return self._handler_result(handled)

        # Stage 5: Quick-reply actions or fresh classification
        intent = self._resolve_intent(request, context, user)
        if intent is None:
            response = AssistantResponse(
                text=get_message("unknown", language),
                quick_replies=main_menu_replies(language),
            )
            return build_result(response, context, metadata={"handler_name": "unknown_action"})

        handler = self.handler_registry.get_handler(intent, context)
        if handler is None:
            logger.warning(f"No handler for intent {intent.intent.value}")
            response = AssistantResponse(
                text=get_message("unknown", language),
                quick_replies=main_menu_replies(language),
            )
            return build_result(response, ConversationContext())

        handled = handler.handle(intent, context, request)
        if intent.urgent:
            handled.response = handled.response.model_copy(
                update={"text": with_emergency(handled.response.text, language)}
            )
        return self._handler_result(handled, intent)

    def _resolve_intent(self, request: TurnRequest, context: ConversationContext,
                        user: Optional[ChatUser]) -> Optional[IntentResult]:
        """Map a quick-reply action to an intent, or classify the message"""
        if request.action:
            intent_type = ACTION_INTENTS.get(request.action)
            if intent_type is not None:
                return IntentResult(
                    intent=intent_type,
                    confidence=1.0,
                    language=request.language,
                    topic=HelpTopic.HELP if intent_type == IntentType.PLATFORM_HELP else None,
                    matched_rules=[f"action:{request.action}"],
                    original_message=request.message,
                )
            logger.info(f"Unknown quick-reply action {request.action!r}",
                        extra={"session_id": request.session_id})
            if not request.message.strip():
                return None
        return self.classifier.classify(request.message, context=context, user=user)

    def _handler_result(self, handled: HandlerResponse,
                        intent: Optional[IntentResult] = None) -> Dict[str, Any]:
        extra: Dict[str, Any] = {"metadata": dict(handled.metadata, error=handled.error)}
        if intent is not None:
            extra["intent"] = intent.intent.value
            extra["entities"] = dict(intent.entities)
        return build_result(handled.response, handled.context, success=handled.success, **extra)

    def _load_context(self, raw_context: Any, session_id: Optional[str]) -> Optional[ConversationContext]:
        """
        Validate and parse the caller's context.

        Returns:
            Parsed context, or None when it is corrupt
        """
        errors = ContextValidator.validate_context(raw_context)
        if errors:
            log = logger.warning if ContextValidator.has_errors(errors) else logger.debug
            log("Context validation issues", extra={
                "session_id": session_id,
                "issues": ContextValidator.summarize(errors),
            })
        if ContextValidator.has_errors(errors):
            return None

        try:
            context = ConversationContext.from_dict(raw_context)
        except SchemaValidationError as e:
            logger.warning(f"Unparseable context: {e.error_count()} error(s)",
                           extra={"session_id": session_id})
            return None

        # A finished or orphaned session does not keep the flow alive
        if context.mode == ConversationMode.REPORT_CREATION and (
                context.report_context is None or context.report_context.is_complete):
            return ConversationContext()
        return context

    @staticmethod
    def _load_user(user: Any) -> Optional[ChatUser]:
        if user is None or isinstance(user, ChatUser):
            return user
        try:
            return ChatUser.model_validate(user)
        except SchemaValidationError:
            logger.warning("Ignoring malformed user record")
            return None

    def _turn_language(self, message: str, context: Optional[ConversationContext],
                       action: Optional[str] = None) -> Language:
        """
        Pick the reply language.

        Quick-reply turns keep the conversation language. Inside a report
        session an English detection keeps the session language.
        """
        session = context.report_context if context else None
        remembered = session.language if session else (context.language if context else None)
        if not message.strip() or (action and remembered):
            return remembered or Language(settings.DEFAULT_LANGUAGE)
        detected = self.classifier.detector.detect(message)
        if session is not None and detected == Language.EN:
            return session.language
        return detected

    def _fallback(self, data: Dict[str, Any], error: Exception) -> Dict[str, Any]:
        """Apology reply used by the error middleware"""
        language = self._turn_language(data.get("message") or "", None)
        response = AssistantResponse(
            text=get_message("error", language),
            quick_replies=main_menu_replies(language),
        )
        return build_result(response, ConversationContext(), success=False,
                            metadata={"error_type": type(error).__name__})

    def _record_turn(self, data: Dict[str, Any], result: Dict[str, Any]):
        """Append the turn to the conversation log; failures never reach the user"""
        session_id = data.get("session_id")
        if not session_id:
            return
        try:
            if data["message"]:
                self.conversation_log.record(session_id, "user", data["message"],
                                             {"action": data.get("action")})
            self.conversation_log.record(
                session_id, "assistant", result["response"]["text"],
                {"intent": result.get("intent"),
                 "mode": (result.get("context") or {}).get("mode")}
            )
        except Exception as e:
            logger.error(f"Failed to record conversation turn: {e}",
                         extra={"session_id": session_id})
