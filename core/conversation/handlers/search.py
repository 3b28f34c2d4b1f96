"""
Search handler.

Runs report searches from free text or category shortcuts and keeps the
last query in the context so follow-up messages refine it.
"""

from typing import Optional

from models.schemas import (
    ConversationContext,
    ConversationMode,
    IntentType,
    ReportType,
    SearchContext,
)
from core.conversation.handlers.base import BaseHandler, HandlerResponse, TurnRequest
from core.conversation.responses import get_message, retry_replies, search_type_replies
from core.conversation.search.formatter import format_search_results
from core.conversation.search.query_parser import SearchQueryParser, search_query_parser
from core.conversation.search.ranker import SearchRanker
from core.conversation.understanding.intent_classifier import IntentResult
from core.services.report_store import ReportStore, ReportStoreError


class SearchHandler(BaseHandler):
    """Handles search_reports intents and search refinement"""

    def __init__(self, store: ReportStore, parser: Optional[SearchQueryParser] = None):
        super().__init__()
        self.ranker = SearchRanker(store)
        self.parser = parser or search_query_parser

    def can_handle(self, intent: IntentResult, context: ConversationContext) -> bool:
        return intent.intent == IntentType.SEARCH_REPORTS

    def handle(self, intent: IntentResult, context: ConversationContext,
               request: TurnRequest) -> HandlerResponse:
        action = request.action

        if action == "search_reports":
            response = self.enter(request)
        elif action == "filter_search":
            response = self.respond(
                get_message("filter_prompt", request.language),
                self._search_mode(context),
            )
        elif action == "search":
            response = self.run(
                "", context, request,
                report_type=request.action_data.get("type"),
            )
        elif action == "retry_search":
            response = self.run(request.action_data.get("query") or "", context, request,
                                report_type=request.action_data.get("type"))
        elif not (intent.entities.get("reportType") or intent.city or intent.keywords):
            # A bare "search" with nothing to look for
            response = self.enter(request)
        else:
            response = self.run(request.message, context, request)

        self.log_handling(intent, response)
        return response

    def enter(self, request: TurnRequest) -> HandlerResponse:
        """Switch to search mode with a fresh query and ask what to look for"""
        return self.respond(
            get_message("search_prompt", request.language),
            ConversationContext(mode=ConversationMode.SEARCH, search_context=SearchContext()),
            quick_replies=search_type_replies(request.language),
        )

    def refine(self, context: ConversationContext, request: TurnRequest) -> HandlerResponse:
        """Append a follow-up message to the previous query and search again"""
        search_context = context.search_context or SearchContext()
        query = f"{search_context.last_query} {request.message}".strip()
        last_params = search_context.last_params
        # A category picked from the type quick replies never appears in the query text
        previous_type = last_params.report_type.value if last_params and last_params.report_type else None
        self.logger.debug("Refining search", extra={"session_id": request.session_id, "query": query})
        return self.run(query, context, request, default_type=previous_type)

    def run(self, query: str, context: ConversationContext, request: TurnRequest,
            report_type: Optional[str] = None,
            default_type: Optional[str] = None) -> HandlerResponse:
        """
        Parse, rank and format a search.

        Args:
            query: Full query text
            context: Context to keep unchanged if the store fails
            request: Current turn
            report_type: Category forced by a quick reply
            default_type: Category used only when the query names none

        Returns:
            Results response, or a retry response when the store fails
        """
        language = request.language
        params = self.parser.parse(query)
        if not report_type and params.report_type is None:
            report_type = default_type
        if report_type:
            try:
                params = params.model_copy(update={"report_type": ReportType(report_type)})
            except ValueError:
                self.logger.warning(f"Ignoring unknown search type {report_type!r}")
                report_type = None

        try:
            outcome = self.ranker.search_reports(params)
        except ReportStoreError as e:
            self.logger.error(
                f"Report store failed during search: {e}",
                extra={"session_id": request.session_id}
            )
            retry_data = {"query": query}
            if report_type:
                retry_data["type"] = report_type
            return self.respond(
                get_message("retry", language),
                context,
                quick_replies=retry_replies(language, "retry_search", retry_data),
                success=False,
                error="report_store_unavailable",
            )

        formatted = format_search_results(outcome, language)
        next_context = ConversationContext(
            mode=ConversationMode.SEARCH,
            search_context=SearchContext(
                last_query=query,
                last_params=params,
                result_count=outcome.total_count,
            ),
        )
        return self.respond(formatted.text, next_context, quick_replies=formatted.quick_replies)

    @staticmethod
    def _search_mode(context: ConversationContext) -> ConversationContext:
        if context.mode == ConversationMode.SEARCH:
            return context
        return ConversationContext(mode=ConversationMode.SEARCH, search_context=SearchContext())
