"""Voice channel: tool-call batches from the voice platform.

The voice model hears the user and emits structured tool calls; the platform
posts them here in batches. Each call id gets its own session so "it" and
pending confirmations stay within one phone call.

Payload::

    {"message": {"type": "tool-calls",
                 "call": {"id": "...", "metadata": {"userId": "..."}},
                 "toolCalls": [{"id": "...", "function": {"name": "...", "arguments": {...}}}]}}

Response::

    {"results": [{"toolCallId": "...", "result": "<FunctionResult JSON>"}]}
"""

from __future__ import annotations

import json
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable

from claw.assistant.chat import MUTATING_FUNCTIONS
from claw.assistant.context import AssistantSession
from claw.assistant.dispatcher import FunctionDispatcher, get_default_dispatcher
from claw.assistant.gate import requires_confirmation
from claw.assistant.models import ErrorCode, FunctionCall, FunctionResult
from claw.assistant.parser.guards import is_similar_task
from claw.logging_config import bind_session

logger = logging.getLogger(__name__)

DUPLICATE_IN_BATCH = "Already got that one!"

MAX_VOICE_SESSIONS = 500
VOICE_SESSION_IDLE_SECONDS = 2 * 60 * 60


class VoiceWebhookError(ValueError):
    """The payload can't be processed (e.g. no user id)."""


@dataclass
class ToolCallBatch:
    user_id: str
    call_id: str
    calls: list[FunctionCall]


def _parse_arguments(raw: Any) -> dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, str) and raw.strip():
        try:
            parsed = json.loads(raw)
        except json.JSONDecodeError:
            logger.error(f"Failed to parse tool call arguments: {raw!r}")
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def parse_tool_calls(payload: dict[str, Any]) -> ToolCallBatch | None:
    """Extract the batch from a webhook payload. None for non tool-call messages.

    Raises:
        VoiceWebhookError: tool-call message without a user id
    """
    message = payload.get("message") or {}
    if message.get("type") != "tool-calls":
        return None

    call = message.get("call") or {}
    assistant = message.get("assistant") or {}
    user_id = (call.get("metadata") or {}).get("userId") or (assistant.get("metadata") or {}).get("userId")
    if not user_id:
        raise VoiceWebhookError("Missing userId in call metadata")

    calls = []
    for tool_call in message.get("toolCalls") or []:
        function = tool_call.get("function") or {}
        calls.append(
            FunctionCall(
                name=function.get("name", ""),
                arguments=_parse_arguments(function.get("arguments")),
                id=tool_call.get("id"),
            )
        )
    return ToolCallBatch(user_id=str(user_id), call_id=str(call.get("id") or user_id), calls=calls)


class SessionRegistry:
    """Voice sessions keyed by call id.

    A call's session is dropped on its end-of-call report, or after
    ``idle_seconds`` without a batch. Past ``max_sessions`` the least
    recently used session is dropped first.
    """

    def __init__(
        self,
        factory: Callable[[str], AssistantSession],
        max_sessions: int = MAX_VOICE_SESSIONS,
        idle_seconds: float = VOICE_SESSION_IDLE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self._max_sessions = max_sessions
        self._idle_seconds = idle_seconds
        self._clock = clock
        self._sessions: OrderedDict[str, tuple[AssistantSession, float]] = OrderedDict()

    def _evict(self, now: float) -> None:
        expired = [cid for cid, (_, seen) in self._sessions.items() if now - seen > self._idle_seconds]
        for call_id in expired:
            logger.info(f"Dropping idle voice session {call_id}")
            del self._sessions[call_id]
        while len(self._sessions) > self._max_sessions:
            call_id, _ = self._sessions.popitem(last=False)
            logger.info(f"Dropping least recently used voice session {call_id}")

    def get(self, call_id: str, user_id: str) -> AssistantSession:
        now = self._clock()
        self._evict(now)
        entry = self._sessions.get(call_id)
        session = entry[0] if entry else None
        if session is None or session.user_id != user_id:
            session = self._factory(user_id)
        self._sessions[call_id] = (session, now)
        self._sessions.move_to_end(call_id)
        self._evict(now)
        return session

    def end(self, call_id: str) -> None:
        self._sessions.pop(call_id, None)

    def __contains__(self, call_id: str) -> bool:
        return call_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


async def process_tool_calls(
    batch: ToolCallBatch,
    session: AssistantSession,
    dispatcher: FunctionDispatcher | None = None,
) -> list[dict[str, Any]]:
    """Run a batch of tool calls in order and return the platform's result list."""
    dispatcher = dispatcher or get_default_dispatcher()
    session.refresh_tasks()
    seen_descriptions: list[str] = []
    results = []

    for call in batch.calls:
        logger.info(f"Executing voice function: {call.name}")
        result = await _process_one(call, session, dispatcher, seen_descriptions)
        results.append({"toolCallId": call.id, "result": json.dumps(result.to_dict(), ensure_ascii=False)})

    return results


async def _process_one(
    call: FunctionCall,
    session: AssistantSession,
    dispatcher: FunctionDispatcher,
    seen_descriptions: list[str],
) -> FunctionResult:
    if call.name == "createTask":
        description = str(call.arguments.get("description") or "").strip()
        if description:
            if any(is_similar_task(existing, description) for existing in seen_descriptions):
                logger.info(f"Skipping duplicate createTask in batch: {description!r}")
                return FunctionResult(success=True, data={"deduplicated": True}, message=DUPLICATE_IN_BATCH)
            seen_descriptions.append(description)

    if requires_confirmation(call):
        result = await dispatcher.execute(call.with_arguments(confirmed=False), session.function_context())
        if result.error == ErrorCode.CONFIRMATION_REQUIRED:
            session.gate.propose(call)
        return result

    if call.name in MUTATING_FUNCTIONS and session.gate.pending and session.gate.pending.type == call.name:
        session.gate.clear()

    result = await dispatcher.execute(call, session.function_context())
    if result.success:
        session.remember(result)
        if call.name in MUTATING_FUNCTIONS:
            session.refresh_tasks()
    return result


async def handle_webhook(
    payload: dict[str, Any],
    registry: SessionRegistry,
    dispatcher: FunctionDispatcher | None = None,
) -> dict[str, Any]:
    """Full webhook handling: parse, route to the call's session, run.

    Raises:
        VoiceWebhookError: tool-call message without a user id
    """
    message_type = (payload.get("message") or {}).get("type")
    if message_type == "end-of-call-report":
        call_id = ((payload.get("message") or {}).get("call") or {}).get("id")
        if call_id:
            registry.end(str(call_id))
        return {"message": "Call ended"}

    batch = parse_tool_calls(payload)
    if batch is None:
        return {"message": "Ignored non-tool-calls message"}

    bind_session(batch.user_id, "voice")
    session = registry.get(batch.call_id, batch.user_id)
    return {"results": await process_tool_calls(batch, session, dispatcher)}
