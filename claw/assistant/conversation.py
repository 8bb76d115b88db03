"""Conversation state updates.

Naming a new task forgets the remembered subtask, unless a subtask was
named in the same breath. States are frozen; every update returns a new one.
"""

from __future__ import annotations

from claw.assistant.models import ConversationState, FunctionResult


def update_conversation_state(
    current: ConversationState,
    task_id: str | None = None,
    subtask_id: str | None = None,
) -> ConversationState:
    new_task_id = task_id if task_id is not None else current.last_referenced_task_id

    if subtask_id is not None:
        new_subtask_id = subtask_id
    elif task_id is not None:
        new_subtask_id = None
    else:
        new_subtask_id = current.last_referenced_subtask_id

    return ConversationState(
        last_referenced_task_id=new_task_id,
        last_referenced_subtask_id=new_subtask_id,
    )


def referenced_ids(result: FunctionResult) -> tuple[str | None, str | None]:
    """(task_id, subtask_id) a successful result talked about, if any."""
    if not result.success or not result.data:
        return None, None
    return result.data.get("task_id"), result.data.get("subtask_id")


def remember_result(current: ConversationState, result: FunctionResult) -> ConversationState:
    """Fold a function result into the conversation state. Failures change nothing."""
    task_id, subtask_id = referenced_ids(result)
    if task_id is None and subtask_id is None:
        return current
    return update_conversation_state(current, task_id, subtask_id)
