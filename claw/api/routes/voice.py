"""
Voice API Routes

Provides the webhook the voice platform posts tool calls to:
- POST /api/assistant/voice/webhook - Run a batch of tool calls
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from claw.api.services import AssistantServices, get_services
from claw.assistant.voice import VoiceWebhookError, handle_webhook

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/webhook")
async def voice_webhook(
    payload: dict[str, Any] = Body(...),
    services: AssistantServices = Depends(get_services),
):
    """Handle a voice platform webhook message."""
    try:
        return await handle_webhook(payload, services.voice_sessions)
    except VoiceWebhookError as e:
        logger.warning(f"Rejected voice webhook: {e}")
        raise HTTPException(status_code=400, detail=str(e))
