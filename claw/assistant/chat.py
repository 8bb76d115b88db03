"""One chat turn, end to end.

    user message
      → confirmation gate (is this the answer to a pending question?)
      → language model (text and/or function calls)
      → gate check per call → dispatch → conversation memory
      → reply text, history, chat log

The turn never raises for model or store failures; they come back as
failed FunctionResults with a sentence the user can read.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from claw.assistant.context import AssistantSession
from claw.assistant.dispatcher import FunctionDispatcher, get_default_dispatcher
from claw.assistant.functions.results import llm_error
from claw.assistant.gate import GateOutcome, default_confirmation_question, requires_confirmation
from claw.assistant.llm import AssistantLLM, LLMError, build_messages
from claw.assistant.models import (
    ChatMessage,
    ErrorCode,
    FunctionCall,
    FunctionResult,
    PendingAction,
)
from claw.assistant.prompt import build_system_prompt
from claw.assistant.schemas import tool_definitions

logger = logging.getLogger(__name__)

FALLBACK_RESPONSE = "Sorry, I didn't quite get that. Could you say it another way?"

# Calls after which the task set must be reloaded
MUTATING_FUNCTIONS = frozenset({
    "createTask",
    "completeTask",
    "completeSubtask",
    "renameTask",
    "renameSubtask",
    "addSubtask",
    "removeSubtask",
    "deleteTask",
    "clearCompletedTasks",
    "setReminder",
    "removeReminder",
    "setRecurrence",
})


@dataclass
class ChatTurn:
    """What one call to ``send_message`` produced."""

    response: str
    function_results: list[FunctionResult] = field(default_factory=list)
    function_calls: list[FunctionCall] = field(default_factory=list)
    pending_action: PendingAction | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "response": self.response,
            "function_results": [r.to_dict() for r in self.function_results],
            "function_calls": [c.to_dict() for c in self.function_calls],
            "pending_action": self.pending_action.to_dict() if self.pending_action else None,
        }


async def _run_call(
    call: FunctionCall,
    session: AssistantSession,
    dispatcher: FunctionDispatcher,
) -> FunctionResult:
    """Execute one grounded, confirmed call and fold it into the session."""
    result = await dispatcher.execute(call, session.function_context())
    if result.success:
        session.remember(result)
        if call.name in MUTATING_FUNCTIONS:
            session.refresh_tasks()
    return result


def _compose_response(text: str, results: list[FunctionResult]) -> str:
    if any(not r.success for r in results):
        return " ".join(r.message for r in results)
    if text:
        return text
    if results:
        return " ".join(r.message for r in results)
    return FALLBACK_RESPONSE


def _finish_turn(session: AssistantSession, message: str, turn: ChatTurn) -> ChatTurn:
    session.add_message(ChatMessage(role="user", content=message))
    session.add_message(
        ChatMessage(
            role="assistant",
            content=turn.response,
            function_calls=[c.to_dict() for c in turn.function_calls],
        )
    )
    session.persist_conversation()
    turn.pending_action = session.gate.pending
    return turn


async def send_message(
    message: str,
    session: AssistantSession,
    llm: AssistantLLM,
    dispatcher: FunctionDispatcher | None = None,
) -> ChatTurn:
    """Process one user message and return the assistant's reply.

    Args:
        message: What the user typed
        session: The user's session; updated in place
        llm: Language-model collaborator
        dispatcher: Function dispatcher (defaults to every assistant function)

    Returns:
        ChatTurn with the reply text, executed results and any pending action
    """
    dispatcher = dispatcher or get_default_dispatcher()
    session.refresh_tasks()

    decision = session.gate.reply(message)

    if decision.outcome == GateOutcome.CONFIRMED:
        logger.info(f"User confirmed pending {decision.call.name}")
        result = await _run_call(decision.call, session, dispatcher)
        turn = ChatTurn(response=result.message, function_results=[result], function_calls=[decision.call])
        return _finish_turn(session, message, turn)

    if decision.outcome == GateOutcome.DENIED:
        logger.info("User declined pending action")
        return _finish_turn(session, message, ChatTurn(response=decision.message))

    system = build_system_prompt(session.tasks, session.timer.get_state() if session.timer else None)
    messages = build_messages(session.llm_history(), message)

    try:
        reply = await llm.complete(system, messages, tool_definitions())
    except LLMError as e:
        logger.warning(f"Assistant model unavailable: {e}")
        if decision.discarded is not None:
            session.gate.restore(decision.discarded)
        failure = llm_error()
        return ChatTurn(response=failure.message, function_results=[failure], pending_action=session.gate.pending)

    results: list[FunctionResult] = []
    for call in reply.function_calls:
        if requires_confirmation(call):
            preview = await dispatcher.execute(
                call.with_arguments(confirmed=False), session.function_context()
            )
            results.append(preview)
            if preview.error == ErrorCode.CONFIRMATION_REQUIRED:
                session.gate.propose(call)
                count = (preview.data or {}).get("count")
                question = reply.text or preview.message or default_confirmation_question(call, count)
                turn = ChatTurn(response=question, function_results=results, function_calls=reply.function_calls)
                return _finish_turn(session, message, turn)
            continue

        results.append(await _run_call(call, session, dispatcher))

    turn = ChatTurn(
        response=_compose_response(reply.text, results),
        function_results=results,
        function_calls=reply.function_calls,
    )
    return _finish_turn(session, message, turn)
