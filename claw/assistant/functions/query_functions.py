"""Read-only query handlers. These never touch the store; they read the session's task set."""

from __future__ import annotations

from typing import Any

from claw.assistant.functions.base import FunctionContext
from claw.assistant.functions.results import plural, unresolved
from claw.assistant.models import FunctionResult
from claw.assistant.parser.references import resolve_task_reference


async def list_tasks(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    active = [task for task in ctx.tasks if not task.completed]
    if not active:
        return FunctionResult(
            success=True,
            data={"tasks": []},
            message="You don't have any active tasks. Would you like to create one?",
        )

    summaries = "; ".join(task.summary() for task in active)
    return FunctionResult(
        success=True,
        data={"tasks": active},
        message=f"You have {plural(len(active), 'active task')}: {summaries}.",
    )


async def get_task_details(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    name = str(arguments.get("taskName", "")).strip()
    ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name)

    task = ref.task
    header = (
        f"{task.emoji} {task.name}: {task.percent_complete}% complete "
        f"({task.completed_count}/{len(task.subtasks)})."
    )
    if task.subtasks:
        items = "; ".join(f"{'✓' if st.completed else '○'} {st.name}" for st in task.subtasks)
        message = f"{header} Subtasks: {items}."
    else:
        message = f"{header} No subtasks yet."

    return FunctionResult(success=True, data={"task_id": task.id, "task": task}, message=message)


async def get_next_subtask(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Suggest what to do next.

    The task bound to the running timer wins. Otherwise the unfinished task
    closest to done, so momentum carries through to a completion.
    """
    state = ctx.timer.get_state() if ctx.timer is not None else None
    if state is not None and state.active_task_id:
        for task in ctx.tasks:
            if task.id != state.active_task_id:
                continue
            subtask = task.next_subtask()
            if subtask is not None:
                return FunctionResult(
                    success=True,
                    data={"task_id": task.id, "subtask_id": subtask.id},
                    message=f'You\'re working on "{task.name}". Next up: {subtask.name}.',
                )

    candidates = [task for task in ctx.tasks if not task.completed and task.subtasks]
    if not candidates:
        return FunctionResult(
            success=True,
            message="You don't have any active tasks with subtasks. Would you like to create one?",
        )

    for task in sorted(candidates, key=lambda t: t.progress, reverse=True):
        subtask = task.next_subtask()
        if subtask is not None:
            return FunctionResult(
                success=True,
                data={"task_id": task.id, "subtask_id": subtask.id},
                message=f'Next up: "{subtask.name}" from "{task.name}".',
            )

    return FunctionResult(success=True, message="All your subtasks are complete! Great job!")
