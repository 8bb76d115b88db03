"""
Chat API Routes

Provides endpoints for the text assistant:
- POST /api/assistant/chat - Send a message and get the assistant's turn
- GET /api/assistant/history - Get the stored conversation for a user
- DELETE /api/assistant/history - Forget the conversation for a user
"""

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from claw.api.services import AssistantServices, get_services
from claw.assistant.chat import send_message
from claw.logging_config import bind_session

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Request/Response Models
# =============================================================================


class ChatRequest(BaseModel):
    """Request model for one chat message."""

    user_id: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=2000)


class ChatResponse(BaseModel):
    """One assistant turn."""

    response: str
    function_results: list[dict[str, Any]] = Field(default_factory=list)
    function_calls: list[dict[str, Any]] = Field(default_factory=list)
    pending_action: Optional[dict[str, Any]] = None


class ChatHistoryResponse(BaseModel):
    """Stored conversation for a user."""

    user_id: str
    messages: list[dict[str, Any]]
    total: int
    last_referenced_task_id: Optional[str] = None
    last_referenced_subtask_id: Optional[str] = None


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/chat", response_model=ChatResponse)
async def post_chat_message(
    request: ChatRequest,
    services: AssistantServices = Depends(get_services),
):
    """Run one chat turn for the user."""
    bind_session(request.user_id, "chat")
    session = services.chat_session(request.user_id)
    turn = await send_message(request.message, session, services.llm)
    return ChatResponse(**turn.to_dict())


@router.get("/history", response_model=ChatHistoryResponse)
async def get_chat_history(
    user_id: str = Query(..., min_length=1),
    services: AssistantServices = Depends(get_services),
):
    """Return the user's stored messages, oldest first."""
    session = services.chat_session(user_id)
    return ChatHistoryResponse(
        user_id=user_id,
        messages=[m.to_dict() for m in session.history],
        total=len(session.history),
        last_referenced_task_id=session.conversation.last_referenced_task_id,
        last_referenced_subtask_id=session.conversation.last_referenced_subtask_id,
    )


@router.delete("/history")
async def clear_chat_history(
    user_id: str = Query(..., min_length=1),
    services: AssistantServices = Depends(get_services),
):
    """Forget the user's conversation. Tasks are untouched."""
    session = services.chat_session(user_id)
    session.reset()
    logger.info(f"Cleared chat history for {user_id}")
    return {"success": True, "message": "Chat history cleared"}
