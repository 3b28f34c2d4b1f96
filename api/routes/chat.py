"""
Chat endpoint for the L9ani assistant.

The caller owns the conversation context: each response carries the context
to send back verbatim with the next message.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from pydantic import Field
from typing import Optional, Dict, Any
import logging
import uuid

from models.schemas import ChatUser, ConversationContext, WireModel
from core.conversation.orchestration import DialogueOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


class ChatRequest(WireModel):
    """Chat request model"""
    message: str = ""
    session_id: Optional[str] = None
    context: Optional[Dict[str, Any]] = None
    user: Optional[ChatUser] = None
    action: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class ChatResponse(WireModel):
    """Chat response model"""
    response: Dict[str, Any]
    context: Dict[str, Any] = Field(default_factory=dict)
    session_id: str
    intent: Optional[str] = None
    entities: Optional[Dict[str, Any]] = None


# Dialogue orchestrator with in-memory collaborators
orchestrator = DialogueOrchestrator()


def get_orchestrator() -> DialogueOrchestrator:
    return orchestrator


@router.post("/chat", response_model=ChatResponse)
async def chat_endpoint(request: ChatRequest,
                        assistant: DialogueOrchestrator = Depends(get_orchestrator)):
    """
    Process one chat turn.

    Accepts free text and/or a quick-reply action with its data, plus the
    context returned by the previous turn.
    """
    # Generate session ID if not provided
    session_id = request.session_id or str(uuid.uuid4())

    logger.info(
        "Chat request received",
        extra={
            "session_id": session_id,
            "user_id": request.user.id if request.user else None,
            "message_length": len(request.message),
            "action": request.action,
        }
    )

    try:
        result = await run_in_threadpool(
            assistant.process_message,
            request.message,
            context=request.context,
            user=request.user,
            session_id=session_id,
            action=request.action,
            action_data=request.data,
        )

        logger.info(
            "Chat request processed successfully",
            extra={"session_id": session_id, "intent_type": result.get("intent")}
        )

        return ChatResponse(
            response=result["response"],
            context=result["context"],
            session_id=session_id,
            intent=result.get("intent"),
            entities=result.get("entities"),
        )

    except ValueError as e:
        # Handle validation errors
        logger.warning(f"Validation error in chat request: {str(e)}")
        raise HTTPException(status_code=400, detail=str(e))

    except Exception as e:
        # Handle unexpected errors
        logger.error(
            f"Error processing chat request: {str(e)}",
            extra={"session_id": session_id},
            exc_info=True
        )

        # Return a user-friendly error response
        return ChatResponse(
            response={
                "text": "I apologize, but I encountered an error processing your request. Please try again.",
                "quickReplies": [],
            },
            context=ConversationContext().to_dict(),
            session_id=session_id,
        )
