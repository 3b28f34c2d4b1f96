"""
Middleware components for the conversation pipeline.

This module provides middleware that wraps turn processing for cross-cutting
concerns: logging with timing, input validation and error containment.

Turn data is a dict with ``message``, ``session_id``, ``context``, ``user``,
``action`` and ``action_data``; results are dicts with ``success``,
``response`` (wire AssistantResponse), ``context`` and optional ``intent``,
``entities`` and ``metadata``.
"""

import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, Any, Callable, Optional, List

from config import settings
from models.schemas import AssistantResponse, ConversationContext, Language
from core.conversation.responses import get_message, main_menu_replies
from core.conversation.understanding.language_detector import detect_language

logger = logging.getLogger(__name__)


def build_result(response: AssistantResponse, context: Any, success: bool = True,
                 **extra: Any) -> Dict[str, Any]:
    """Assemble a pipeline result dict"""
    if isinstance(context, ConversationContext):
        context = context.to_dict()
    result = {
        "success": success,
        "response": response.model_dump(by_alias=True, exclude_none=True),
        "context": context,
    }
    result.update(extra)
    return result


def _context_mode(context: Any) -> Optional[str]:
    return context.get("mode") if isinstance(context, dict) else None


class Middleware(ABC):
    """Abstract base class for pipeline middleware"""

    @abstractmethod
    def process(self, data: Dict[str, Any], next_handler: Callable) -> Dict[str, Any]:
        """
        Process data and call next handler in chain.

        Args:
            data: Turn data being processed
            next_handler: Next middleware or final handler

        Returns:
            Turn result
        """
        pass


class LoggingMiddleware(Middleware):
    """Logs each turn with its processing time"""

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level

    def process(self, data: Dict[str, Any], next_handler: Callable) -> Dict[str, Any]:
        """Log before and after processing"""
        logger.log(
            self.log_level,
            "Processing message",
            extra={
                "session_id": data.get("session_id"),
                "message_preview": (data.get("message") or "")[:50],
                "action": data.get("action"),
                "mode": _context_mode(data.get("context")),
            }
        )

        start_time = time.time()
        result = next_handler(data)
        processing_time = (time.time() - start_time) * 1000

        logger.log(
            self.log_level,
            "Message processed",
            extra={
                "session_id": data.get("session_id"),
                "success": result.get("success"),
                "intent_type": result.get("intent"),
                "mode": _context_mode(result.get("context")),
                "processing_time_ms": processing_time,
                "handler_used": result.get("metadata", {}).get("handler_name"),
            }
        )

        return result


class ValidationMiddleware(Middleware):
    """Validates input data before processing"""

    def __init__(self, max_length: Optional[int] = None):
        self.max_length = max_length or settings.MESSAGE_MAX_LENGTH

    def process(self, data: Dict[str, Any], next_handler: Callable) -> Dict[str, Any]:
        """Reject empty or oversized input with a friendly re-prompt"""
        message = data.get("message") or ""
        errors: List[str] = []
        key = None

        if not message.strip() and not data.get("action"):
            errors.append("Message or action is required")
            key = "empty_message"
        elif len(message) > self.max_length:
            errors.append(f"Message too long (max {self.max_length} characters)")
            key = "message_too_long"

        if errors:
            language = detect_language(message[:self.max_length]) if message else Language(settings.DEFAULT_LANGUAGE)
            logger.info("Input rejected", extra={"session_id": data.get("session_id"), "errors": errors})
            response = AssistantResponse(text=get_message(key, language, limit=self.max_length))
            context = data.get("context")
            return build_result(
                response,
                context if isinstance(context, dict) else ConversationContext(),
                success=False,
                metadata={"validation_errors": errors},
            )

        return next_handler(data)


class ErrorHandlingMiddleware(Middleware):
    """Handles errors gracefully in the pipeline"""

    def __init__(self, fallback_handler: Optional[Callable] = None):
        self.fallback_handler = fallback_handler

    def process(self, data: Dict[str, Any], next_handler: Callable) -> Dict[str, Any]:
        """Handle errors during processing"""
        try:
            return next_handler(data)
        except Exception as e:
            logger.error(
                f"Pipeline error: {str(e)}",
                extra={
                    "session_id": data.get("session_id"),
                    "error_type": type(e).__name__
                },
                exc_info=True
            )

            # Try fallback handler
            if self.fallback_handler:
                try:
                    return self.fallback_handler(data, e)
                except Exception as fallback_error:
                    logger.error(f"Fallback handler failed: {str(fallback_error)}")

            language = Language(settings.DEFAULT_LANGUAGE)
            response = AssistantResponse(
                text=get_message("error", language),
                quick_replies=main_menu_replies(language),
            )
            return build_result(
                response,
                ConversationContext(),
                success=False,
                metadata={
                    "error_type": type(e).__name__,
                    "timestamp": datetime.now(timezone.utc).isoformat(),
                },
            )


class MiddlewarePipeline:
    """Manages a pipeline of middleware"""

    def __init__(self):
        self.middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> 'MiddlewarePipeline':
        """Add middleware to pipeline"""
        self.middleware.append(middleware)
        return self

    def build(self, final_handler: Callable) -> Callable:
        """Build the middleware chain"""
        def create_handler(middleware: Middleware, next_handler: Callable) -> Callable:
            return lambda data: middleware.process(data, next_handler)

        # Build chain in reverse order
        handler = final_handler
        for mw in reversed(self.middleware):
            handler = create_handler(mw, handler)

        return handler
