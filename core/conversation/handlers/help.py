"""Platform help and small-talk handler"""

from models.schemas import ConversationContext, IntentType
from core.conversation.handlers.base import BaseHandler, HandlerResponse, TurnRequest
from core.conversation.responses import get_message, main_menu_replies
from core.conversation.understanding.intent_classifier import HelpTopic, IntentResult


class HelpHandler(BaseHandler):
    """Greets, thanks, says goodbye, explains the platform or asks to rephrase"""

    TOPIC_MESSAGES = {
        HelpTopic.GREETING: "greeting",
        HelpTopic.THANKS: "thanks",
        HelpTopic.GOODBYE: "goodbye",
        HelpTopic.HELP: "help",
    }

    def can_handle(self, intent: IntentResult, context: ConversationContext) -> bool:
        return intent.intent == IntentType.PLATFORM_HELP

    def handle(self, intent: IntentResult, context: ConversationContext,
               request: TurnRequest) -> HandlerResponse:
        language = request.language
        key = self.TOPIC_MESSAGES.get(intent.topic, "unknown")

        if key == "greeting":
            text = get_message(key, language, name=self._display_name(request))
        else:
            text = get_message(key, language)

        # Goodbye ends the exchange, everything else offers the main menu
        quick_replies = [] if key == "goodbye" else main_menu_replies(language)
        response = self.respond(text, ConversationContext(), quick_replies=quick_replies)
        self.log_handling(intent, response)
        return response

    @staticmethod
    def _display_name(request: TurnRequest) -> str:
        user = request.user
        if user is None:
            return ""
        name = user.first_name or user.username
        return f" {name}" if name else ""
