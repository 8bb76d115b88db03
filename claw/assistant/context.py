"""Context window and session state.

Everything one user's conversation needs lives on an ``AssistantSession``
that is passed explicitly through every call: the bounded task set, the
conversation memory, the pending confirmation, recent history and the
timer. Nothing is module-global, so sessions never see each other.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from claw.assistant import LLM_CONTEXT_MESSAGE_LIMIT, MAX_CONTEXT_TASKS, MAX_STORED_MESSAGES
from claw.assistant.chat_log import ChatLog
from claw.assistant.config import AssistantConfig
from claw.assistant.conversation import remember_result
from claw.assistant.functions.base import FunctionContext
from claw.assistant.gate import ConfirmationGate
from claw.assistant.models import ChatMessage, ConversationState, FunctionResult
from claw.assistant.timer import TimerController
from claw.tasks.breakdown import TaskBreakdown
from claw.tasks.manager import TaskStore
from claw.tasks.models import Task

logger = logging.getLogger(__name__)


def load_task_context(store: TaskStore, user_id: str, limit: int = MAX_CONTEXT_TASKS) -> list[Task] | None:
    """The user's active tasks, most recently updated first, at most ``limit``.

    Returns None if the store could not be read.
    """
    limit = min(limit, MAX_CONTEXT_TASKS)
    result = store.list_active_tasks(user_id, limit=limit)
    if not result["success"]:
        logger.warning(f"Could not load task context for {user_id}: {result.get('error')}")
        return None
    return [task for task in result["data"]["tasks"] if not task.completed][:limit]


def recent_history(history: list[ChatMessage], limit: int = LLM_CONTEXT_MESSAGE_LIMIT) -> list[ChatMessage]:
    """The last ``limit`` messages, the slice the language model gets to see."""
    limit = min(limit, LLM_CONTEXT_MESSAGE_LIMIT)
    if limit <= 0:
        return []
    return history[-limit:]


@dataclass
class AssistantSession:
    user_id: str
    store: TaskStore
    tasks: list[Task] = field(default_factory=list)
    conversation: ConversationState = field(default_factory=ConversationState)
    gate: ConfirmationGate = field(default_factory=ConfirmationGate)
    history: list[ChatMessage] = field(default_factory=list)
    timer: TimerController | None = None
    chat_log: ChatLog | None = None
    breakdown: TaskBreakdown | None = None
    config: AssistantConfig = field(default_factory=AssistantConfig)

    @classmethod
    def load(
        cls,
        user_id: str,
        store: TaskStore,
        chat_log: ChatLog | None = None,
        timer: TimerController | None = None,
        breakdown: TaskBreakdown | None = None,
        config: AssistantConfig | None = None,
    ) -> AssistantSession:
        """Build a session, restoring history and references from the chat log."""
        session = cls(
            user_id=user_id,
            store=store,
            timer=timer,
            chat_log=chat_log,
            breakdown=breakdown,
            config=config or AssistantConfig(),
        )
        if chat_log is not None:
            session.history = chat_log.load_messages(user_id)
            session.conversation = chat_log.load_conversation_state(user_id)
        session.refresh_tasks()
        return session

    def refresh_tasks(self) -> list[Task]:
        """Reload the bounded task set. Keeps the previous set if the store fails."""
        tasks = load_task_context(self.store, self.user_id, self.config.context.max_tasks)
        if tasks is not None:
            self.tasks = tasks
        return self.tasks

    def function_context(self) -> FunctionContext:
        return FunctionContext(
            user_id=self.user_id,
            store=self.store,
            tasks=self.tasks,
            conversation=self.conversation,
            timer=self.timer,
            breakdown=self.breakdown,
            default_timer_minutes=self.config.timer.default_minutes,
        )

    def llm_history(self) -> list[ChatMessage]:
        return recent_history(self.history, self.config.context.llm_history)

    def remember(self, result: FunctionResult) -> None:
        self.conversation = remember_result(self.conversation, result)

    def add_message(self, message: ChatMessage) -> None:
        self.history.append(message)
        limit = min(self.config.context.stored_messages, MAX_STORED_MESSAGES)
        if len(self.history) > limit:
            self.history = self.history[-limit:]
        if self.chat_log is not None:
            self.chat_log.save_message(self.user_id, message)

    def persist_conversation(self) -> None:
        if self.chat_log is not None:
            self.chat_log.save_conversation_state(self.user_id, self.conversation)

    def reset(self) -> None:
        """Forget history, references and any pending confirmation."""
        self.history = []
        self.conversation = ConversationState()
        self.gate.clear()
        if self.chat_log is not None:
            self.chat_log.clear(self.user_id)
