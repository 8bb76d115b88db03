"""
Claw Assistant Backend - FastAPI Application

Exposes the assistant engine over HTTP: text chat turns, chat history, and
the voice platform's tool-call webhook.

Usage:
    uvicorn claw.api.main:app --host 127.0.0.1 --port 8080 --reload

    Or run directly:
    python -m claw.api.main
"""

import logging
from datetime import datetime

# Load .env file before anything else
from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from claw.api.routes import api_router
from claw.api.services import AssistantServices
from claw.assistant.chat_log import ChatLog
from claw.assistant.config import AssistantConfig, load_config
from claw.assistant.llm import AnthropicLLM, AssistantLLM
from claw.logging_config import setup_logging
from claw.tasks.breakdown import TaskBreakdown
from claw.tasks.manager import TaskStore

logger = logging.getLogger(__name__)


def create_app(
    store: TaskStore | None = None,
    llm: AssistantLLM | None = None,
    chat_log: ChatLog | None = None,
    config: AssistantConfig | None = None,
    breakdown: TaskBreakdown | None = None,
) -> FastAPI:
    """Build the application. Collaborators default to the configured production ones."""
    config = config or load_config()

    if breakdown is None and config.breakdown.enabled:
        breakdown = TaskBreakdown(
            model=config.breakdown.model,
            timeout_seconds=config.breakdown.timeout_seconds,
            api_key_env=config.llm.api_key_env,
        )

    app = FastAPI(
        title="Claw Assistant API",
        description="Natural-language task commands for chat and voice",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.state.services = AssistantServices(
        store=store or TaskStore(),
        llm=llm or AnthropicLLM(config.llm),
        chat_log=chat_log or ChatLog(max_messages=config.context.stored_messages),
        config=config,
        breakdown=breakdown,
    )
    app.state.started_at = datetime.now()
    logger.info("Claw Assistant backend ready")

    app.include_router(api_router)

    @app.get("/health")
    async def health():
        uptime = (datetime.now() - app.state.started_at).total_seconds()
        return {"status": "healthy", "uptime_seconds": int(uptime)}

    return app


setup_logging()
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("claw.api.main:app", host="127.0.0.1", port=8080, reload=False)
