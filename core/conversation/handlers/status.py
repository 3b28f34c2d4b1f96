"""Report status handler"""

from collections import Counter

from config import settings
from models.schemas import ConversationContext, IntentType, NavigationAction
from core.conversation.handlers.base import BaseHandler, HandlerResponse, TurnRequest
from core.conversation.responses import get_message, retry_replies, status_replies
from core.conversation.understanding.intent_classifier import IntentResult
from core.services.report_store import ReportStore, ReportStoreError


class StatusHandler(BaseHandler):
    """Summarizes the user's own reports, or asks anonymous users to log in"""

    def __init__(self, store: ReportStore):
        super().__init__()
        self.store = store

    def can_handle(self, intent: IntentResult, context: ConversationContext) -> bool:
        return intent.intent == IntentType.CHECK_STATUS

    def handle(self, intent: IntentResult, context: ConversationContext,
               request: TurnRequest) -> HandlerResponse:
        language = request.language

        if request.user is None:
            response = self.respond(
                get_message("status_login", language),
                ConversationContext(),
                action=NavigationAction(route=settings.LOGIN_ROUTE),
            )
            self.log_handling(intent, response)
            return response

        try:
            reports = self.store.get_user_reports(request.user.id)
        except ReportStoreError as e:
            self.logger.error(
                f"Report store failed during status lookup: {e}",
                extra={"session_id": request.session_id, "user_id": request.user.id}
            )
            return self.respond(
                get_message("retry", language),
                context,
                quick_replies=retry_replies(language, "check_status"),
                success=False,
                error="report_store_unavailable",
            )

        if not reports:
            response = self.respond(
                get_message("status_none", language),
                ConversationContext(),
                quick_replies=status_replies(language),
            )
        else:
            counts = Counter(report.status for report in reports)
            breakdown = ", ".join(f"{count} {status}" for status, count in sorted(counts.items()))
            response = self.respond(
                get_message("status_summary", language, count=len(reports), breakdown=breakdown),
                ConversationContext(),
                action=NavigationAction(route=settings.MY_REPORTS_ROUTE),
            )

        self.log_handling(intent, response)
        return response
