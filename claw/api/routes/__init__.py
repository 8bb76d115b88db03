"""Assistant API Routes Package

Aggregates the route handlers into a single router for the FastAPI app.
"""

from fastapi import APIRouter

from .chat import router as chat_router
from .voice import router as voice_router


api_router = APIRouter(prefix="/api")

api_router.include_router(chat_router, prefix="/assistant", tags=["chat"])
api_router.include_router(voice_router, prefix="/assistant/voice", tags=["voice"])

__all__ = ["api_router"]
