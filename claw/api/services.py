"""Long-lived collaborators shared by the API routes.

Sessions are created lazily per user (chat) or per call (voice). Focus
timers are per user, so a timer started by voice shows up in chat.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from fastapi import Request

from claw.assistant.chat_log import ChatLog
from claw.assistant.config import AssistantConfig
from claw.assistant.context import AssistantSession
from claw.assistant.llm import AssistantLLM
from claw.assistant.timer import FocusTimer
from claw.assistant.voice import SessionRegistry
from claw.tasks.breakdown import TaskBreakdown
from claw.tasks.manager import TaskStore

logger = logging.getLogger(__name__)


@dataclass
class AssistantServices:
    store: TaskStore
    llm: AssistantLLM
    chat_log: ChatLog
    config: AssistantConfig
    breakdown: TaskBreakdown | None = None
    chat_sessions: dict[str, AssistantSession] = field(default_factory=dict)
    timers: dict[str, FocusTimer] = field(default_factory=dict)
    voice_sessions: SessionRegistry | None = None

    def __post_init__(self):
        if self.voice_sessions is None:
            self.voice_sessions = SessionRegistry(self.new_voice_session)

    def timer_for(self, user_id: str) -> FocusTimer:
        if user_id not in self.timers:
            self.timers[user_id] = FocusTimer()
        return self.timers[user_id]

    def chat_session(self, user_id: str) -> AssistantSession:
        session = self.chat_sessions.get(user_id)
        if session is None:
            logger.info(f"Loading chat session for {user_id}")
            session = AssistantSession.load(
                user_id,
                self.store,
                chat_log=self.chat_log,
                timer=self.timer_for(user_id),
                breakdown=self.breakdown,
                config=self.config,
            )
            self.chat_sessions[user_id] = session
        return session

    def new_voice_session(self, user_id: str) -> AssistantSession:
        return AssistantSession.load(
            user_id,
            self.store,
            timer=self.timer_for(user_id),
            breakdown=self.breakdown,
            config=self.config,
        )


def get_services(request: Request) -> AssistantServices:
    return request.app.state.services
