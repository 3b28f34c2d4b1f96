"""
Base handler interface for conversation handling.

This module defines the abstract base class for all conversation handlers,
providing a consistent interface for handling different types of user intents.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional, List
from dataclasses import dataclass
import logging

from models.schemas import (
    AssistantResponse,
    ChatUser,
    ConversationContext,
    IntentType,
    Language,
    NavigationAction,
    QuickReply,
)
from core.conversation.understanding.intent_classifier import IntentResult

logger = logging.getLogger(__name__)


@dataclass
class TurnRequest:
    """Everything a handler may need about the current turn"""
    message: str
    language: Language
    user: Optional[ChatUser] = None
    session_id: Optional[str] = None
    action: Optional[str] = None
    action_data: Dict[str, Any] = None

    def __post_init__(self):
        if self.action_data is None:
            self.action_data = {}


@dataclass
class HandlerResponse:
    """Response from a handler"""
    success: bool
    response: AssistantResponse
    context: ConversationContext
    metadata: Dict[str, Any] = None
    error: Optional[str] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


class BaseHandler(ABC):
    """
    Abstract base class for conversation handlers.

    Each handler is responsible for processing a specific type of intent
    and producing the reply plus the next conversation context.
    """

    def __init__(self):
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def can_handle(self, intent: IntentResult, context: ConversationContext) -> bool:
        """
        Check if this handler can process the given intent.

        Args:
            intent: The classified intent
            context: Current conversation context

        Returns:
            True if this handler can process the intent
        """
        pass

    @abstractmethod
    def handle(self, intent: IntentResult, context: ConversationContext,
               request: TurnRequest) -> HandlerResponse:
        """
        Handle the intent and generate a response.

        Args:
            intent: The classified intent
            context: Current conversation context
            request: The current turn

        Returns:
            Handler response with reply and next context
        """
        pass

    def respond(self, text: str, context: ConversationContext,
                quick_replies: Optional[List[QuickReply]] = None,
                progress: Optional[str] = None,
                action: Optional[NavigationAction] = None,
                success: bool = True, error: Optional[str] = None) -> HandlerResponse:
        """Build a HandlerResponse tagged with this handler's name"""
        return HandlerResponse(
            success=success,
            response=AssistantResponse(
                text=text,
                quick_replies=quick_replies or [],
                progress=progress,
                action=action,
            ),
            context=context,
            metadata={"handler_name": self.__class__.__name__},
            error=error,
        )

    def log_handling(self, intent: IntentResult, response: HandlerResponse):
        """Log handler processing for debugging"""
        self.logger.info(
            f"Handled {intent.intent.value} intent",
            extra={
                "intent_confidence": intent.confidence,
                "entities": list(intent.entities.keys()),
                "response_success": response.success,
                "has_error": response.error is not None,
                "mode": response.context.mode.value if response.context.mode else None,
            }
        )


class HandlerRegistry:
    """Registry for managing conversation handlers"""

    def __init__(self):
        self.handlers: List[BaseHandler] = []
        self._intent_handler_map: Dict[IntentType, List[BaseHandler]] = {}

    def register(self, handler: BaseHandler, intent_types: List[IntentType] = None):
        """
        Register a handler.

        Args:
            handler: Handler instance
            intent_types: Optional list of intent types this handler processes
        """
        self.handlers.append(handler)

        if intent_types:
            for intent_type in intent_types:
                if intent_type not in self._intent_handler_map:
                    self._intent_handler_map[intent_type] = []
                self._intent_handler_map[intent_type].append(handler)

    def get_handler(self, intent: IntentResult, context: ConversationContext) -> Optional[BaseHandler]:
        """
        Get appropriate handler for intent.

        Args:
            intent: Classified intent
            context: Conversation context

        Returns:
            Handler instance or None
        """
        # First check intent-specific handlers
        if intent.intent in self._intent_handler_map:
            for handler in self._intent_handler_map[intent.intent]:
                if handler.can_handle(intent, context):
                    return handler

        # Then check all handlers
        for handler in self.handlers:
            if handler.can_handle(intent, context):
                return handler

        return None
