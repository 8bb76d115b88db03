"""Shared test fixtures for Claw tests.

This module provides common fixtures used across all test modules:
- Database isolation with temporary files
- In-memory tasks for resolver and handler tests
- A scripted language model and controllable clocks

Usage:
    def test_something(task_store):
        # task_store writes to a temporary database
        ...
"""

import os
import tempfile
from collections.abc import Generator
from datetime import datetime
from pathlib import Path

import pytest

from claw.assistant.chat_log import ChatLog
from claw.assistant.config import AssistantConfig
from claw.assistant.context import AssistantSession
from claw.assistant.functions.base import FunctionContext
from claw.assistant.llm import LLMReply
from claw.assistant.models import ConversationState, FunctionCall
from claw.assistant.timer import FocusTimer
from claw.tasks.manager import TaskStore
from claw.tasks.models import Subtask, Task


# ─────────────────────────────────────────────────────────────────────────────
# Path Constants
# ─────────────────────────────────────────────────────────────────────────────

PROJECT_ROOT = Path(__file__).parent.parent

# Wednesday afternoon
FIXED_NOW = datetime(2026, 3, 11, 14, 0, 0)


# ─────────────────────────────────────────────────────────────────────────────
# Database Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_db() -> Generator[Path, None, None]:
    """Create a temporary database file for testing.

    The database file is automatically deleted after the test completes.

    Yields:
        Path to the temporary database file
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    # Cleanup
    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def task_store(tmp_path: Path) -> TaskStore:
    """Task store on a temporary database."""
    return TaskStore(tmp_path / "tasks.db")


@pytest.fixture
def chat_log(tmp_path: Path) -> ChatLog:
    """Chat log on a temporary database."""
    return ChatLog(tmp_path / "assistant.db")


# ─────────────────────────────────────────────────────────────────────────────
# User Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def mock_user_id() -> str:
    """Standard test user ID."""
    return "test_user_123"


# ─────────────────────────────────────────────────────────────────────────────
# Task Fixtures
# ─────────────────────────────────────────────────────────────────────────────


def make_task(
    name: str,
    subtasks: tuple = (),
    task_id: str | None = None,
    completed: bool = False,
    user_id: str = "test_user_123",
    emoji: str = "📝",
) -> Task:
    """Build an in-memory Task. Subtasks are names, or (name, completed) pairs."""
    task_id = task_id or name.lower().replace(" ", "_")
    built = []
    for order, item in enumerate(subtasks):
        sub_name, sub_done = (item, False) if isinstance(item, str) else item
        built.append(
            Subtask(
                id=f"{task_id}_st{order}",
                task_id=task_id,
                name=sub_name,
                completed=sub_done,
                sort_order=order,
            )
        )
    return Task(id=task_id, user_id=user_id, name=name, emoji=emoji, completed=completed, subtasks=built)


@pytest.fixture
def sample_tasks() -> list[Task]:
    """A small task set with one ambiguous prefix ("Project")."""
    return [
        make_task("Clean kitchen", ("Wash dishes", "Wipe counters", "Take out trash")),
        make_task("Project Alpha", ("Write outline", ("Draft intro", True))),
        make_task("Project Beta", ("Write outline",)),
        make_task("Do taxes"),
    ]


@pytest.fixture
def seeded_store(task_store: TaskStore, mock_user_id: str) -> TaskStore:
    """Store with two active tasks for the test user."""
    task_store.create_task(mock_user_id, "Clean kitchen", "🧽", ["Wash dishes", "Wipe counters"], "low")
    task_store.create_task(mock_user_id, "Write report", "📄", ["Outline", "Draft", "Edit"], "high")
    return task_store


def active_tasks(store: TaskStore, user_id: str) -> list[Task]:
    return store.list_active_tasks(user_id)["data"]["tasks"]


# ─────────────────────────────────────────────────────────────────────────────
# Clock and Timer Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class FakeClock:
    """Monotonic clock the test advances by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def focus_timer(fake_clock: FakeClock) -> FocusTimer:
    return FocusTimer(clock=fake_clock)


# ─────────────────────────────────────────────────────────────────────────────
# Handler Context Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def make_context(task_store: TaskStore, mock_user_id: str, focus_timer: FocusTimer):
    """Factory for FunctionContext; tasks default to the store's active tasks."""

    def _make(
        tasks: list[Task] | None = None,
        conversation: ConversationState | None = None,
        timer=focus_timer,
        clock=datetime.now,
    ) -> FunctionContext:
        return FunctionContext(
            user_id=mock_user_id,
            store=task_store,
            tasks=tasks if tasks is not None else active_tasks(task_store, mock_user_id),
            conversation=conversation or ConversationState(),
            timer=timer,
            clock=clock,
        )

    return _make


# ─────────────────────────────────────────────────────────────────────────────
# Language Model Fixtures
# ─────────────────────────────────────────────────────────────────────────────


class FakeLLM:
    """Scripted AssistantLLM. Each complete() pops the next reply; exceptions are raised."""

    def __init__(self, *replies):
        self.replies = list(replies)
        self.calls: list[dict] = []

    def queue(self, *replies) -> None:
        self.replies.extend(replies)

    async def complete(self, system, messages, tools):
        self.calls.append({"system": system, "messages": messages, "tools": tools})
        if not self.replies:
            return LLMReply(text="Okay.")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


def calls_reply(*calls: tuple, text: str = "") -> LLMReply:
    """LLMReply carrying (name, arguments) function calls."""
    return LLMReply(
        text=text,
        function_calls=[
            FunctionCall(name=name, arguments=arguments, id=f"call_{i}")
            for i, (name, arguments) in enumerate(calls)
        ],
    )


@pytest.fixture
def fake_llm() -> FakeLLM:
    return FakeLLM()


# ─────────────────────────────────────────────────────────────────────────────
# Session Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def assistant_config() -> AssistantConfig:
    return AssistantConfig()


@pytest.fixture
def session(
    seeded_store: TaskStore,
    chat_log: ChatLog,
    focus_timer: FocusTimer,
    mock_user_id: str,
    assistant_config: AssistantConfig,
) -> AssistantSession:
    """Chat session over the seeded store, without a breakdown model."""
    return AssistantSession.load(
        mock_user_id,
        seeded_store,
        chat_log=chat_log,
        timer=focus_timer,
        config=assistant_config,
    )


# ─────────────────────────────────────────────────────────────────────────────
# Voice Payload Helpers
# ─────────────────────────────────────────────────────────────────────────────


def tool_calls_payload(user_id, *calls, call_id="call_abc"):
    """Voice platform tool-calls message for (name, arguments) pairs."""
    return {
        "message": {
            "type": "tool-calls",
            "call": {"id": call_id, "metadata": {"userId": user_id}},
            "toolCalls": [
                {"id": f"tc_{i}", "function": {"name": name, "arguments": arguments}}
                for i, (name, arguments) in enumerate(calls)
            ],
        }
    }
