"""
Integration test fixtures for Claw.

Provides fixtures specific to integration testing:
- FastAPI test client over isolated databases
- Voice session registry
"""

import pytest
from fastapi.testclient import TestClient

from claw.api.main import create_app
from claw.assistant.config import AssistantConfig, BreakdownConfig
from claw.assistant.context import AssistantSession
from claw.assistant.voice import SessionRegistry
from tests.conftest import FakeLLM


# ─────────────────────────────────────────────────────────────────────────────
# API Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def api_llm() -> FakeLLM:
    """Scripted model behind the API; queue replies per test."""
    return FakeLLM()


@pytest.fixture
def assistant_app(seeded_store, chat_log, api_llm):
    """App wired to temporary databases, with the breakdown model disabled."""
    config = AssistantConfig(breakdown=BreakdownConfig(enabled=False))
    return create_app(store=seeded_store, llm=api_llm, chat_log=chat_log, config=config)


@pytest.fixture
def test_client(assistant_app):
    with TestClient(assistant_app) as client:
        yield client


# ─────────────────────────────────────────────────────────────────────────────
# Voice Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def voice_registry(seeded_store, focus_timer):
    return SessionRegistry(lambda user_id: AssistantSession.load(user_id, seeded_store, timer=focus_timer))

