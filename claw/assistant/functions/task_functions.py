"""Task and subtask mutation handlers.

Connects assistant function calls to the task store (claw/tasks/).
createTask, deleteTask and clearCompletedTasks answer with a question
unless called with confirmed=true.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any

from claw.assistant.functions.base import FunctionContext
from claw.assistant.functions.results import (
    confirmation_required,
    database_error,
    invalid_input,
    plural,
    unresolved,
)
from claw.assistant.models import FunctionResult
from claw.assistant.parser.guards import is_garbage_input, is_similar_task
from claw.assistant.parser.references import resolve_subtask_reference, resolve_task_reference
from claw.tasks.breakdown import fallback_breakdown

logger = logging.getLogger(__name__)

# How far back a near-identical task counts as the same request said twice
DUPLICATE_WINDOW = timedelta(seconds=30)


def _text(arguments: dict[str, Any], key: str) -> str:
    value = arguments.get(key)
    return str(value).strip() if value is not None else ""


async def create_task(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Create a task with a generated breakdown."""
    description = _text(arguments, "description")
    if not description:
        return invalid_input("What task would you like to create?")

    if is_garbage_input(description):
        logger.info(f"Rejecting garbage input: {description!r}")
        return invalid_input("Sorry, didn't catch that. What's the task?")

    if arguments.get("confirmed") is not True:
        return confirmation_required(
            f'Should I create a task called "{description}"?',
            data={"description": description},
        )

    recent = ctx.store.list_recent_tasks(ctx.user_id, since=ctx.now() - DUPLICATE_WINDOW)
    if recent["success"]:
        for task in recent["data"]["tasks"]:
            if is_similar_task(task.name, description):
                logger.info(f"Duplicate detected: {description!r} similar to recent {task.name!r}")
                return FunctionResult(
                    success=True,
                    data={"task_id": task.id, "name": task.name, "deduplicated": True},
                    message=f'Already got "{task.name}" on your list!',
                )

    if ctx.breakdown is not None:
        breakdown = await ctx.breakdown.breakdown(description)
    else:
        breakdown = fallback_breakdown()

    result = ctx.store.create_task(
        ctx.user_id,
        description,
        emoji=breakdown.emoji,
        subtasks=breakdown.subtasks,
        energy_tag=breakdown.energy_tag,
    )
    if not result["success"]:
        return database_error("creating that task")

    task = result["data"]["task"]
    subtask_names = ", ".join(st.name for st in task.subtasks)
    return FunctionResult(
        success=True,
        data={"task_id": task.id, "task": task},
        message=f'Created "{task.name}" with {plural(len(task.subtasks), "subtask")}: {subtask_names}.',
    )


async def complete_task(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Mark a task and all of its subtasks complete."""
    name = _text(arguments, "taskName")
    ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name)

    task = ref.task
    if task.completed:
        return FunctionResult(
            success=True,
            data={"task_id": task.id},
            message=f'"{task.name}" is already complete.',
        )

    result = ctx.store.complete_task(task.id, ctx.user_id)
    if not result["success"]:
        return database_error("completing that task")

    coins = result["data"]["coins_awarded"]
    message = f'"{task.name}" is complete! Great job!'
    if coins:
        message = f'"{task.name}" is complete! Great job, that\'s {plural(coins, "coin")} for you.'
    return FunctionResult(
        success=True,
        data={"task_id": task.id, "coins_awarded": coins},
        message=message,
    )


async def complete_subtask(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Check off a subtask. Finishing the last one completes its task."""
    name = _text(arguments, "subtaskName")
    ref = resolve_subtask_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name, kind="subtask")

    task, subtask = ref.task, ref.subtask
    if subtask.completed:
        return FunctionResult(
            success=True,
            data={"task_id": task.id, "subtask_id": subtask.id},
            message=f'"{subtask.name}" is already done.',
        )

    result = ctx.store.toggle_subtask(subtask.id, True, ctx.user_id)
    if not result["success"]:
        return database_error("completing that subtask")

    data = result["data"]
    message = f'Completed "{subtask.name}" in "{task.name}".'
    if data["task_completed"]:
        message += f' That finishes "{task.name}", nice work! +{plural(data["coins_awarded"], "coin")}.'
    return FunctionResult(
        success=True,
        data={
            "task_id": task.id,
            "subtask_id": subtask.id,
            "task_completed": data["task_completed"],
            "coins_awarded": data["coins_awarded"],
        },
        message=message,
    )


async def rename_task(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    old_name = _text(arguments, "oldName")
    new_name = _text(arguments, "newName")
    if not new_name:
        return invalid_input("What should the new name be?")

    ref = resolve_task_reference(old_name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, old_name)

    task = ref.task
    result = ctx.store.rename_task(task.id, new_name)
    if not result["success"]:
        return database_error("renaming that task")

    return FunctionResult(
        success=True,
        data={"task_id": task.id, "old_name": task.name, "new_name": new_name},
        message=f'Renamed "{task.name}" to "{new_name}".',
    )


async def rename_subtask(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    old_name = _text(arguments, "oldName")
    new_name = _text(arguments, "newName")
    if not new_name:
        return invalid_input("What should the new name be?")

    ref = resolve_subtask_reference(old_name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, old_name, kind="subtask")

    task, subtask = ref.task, ref.subtask
    result = ctx.store.rename_subtask(subtask.id, new_name)
    if not result["success"]:
        return database_error("renaming that subtask")

    return FunctionResult(
        success=True,
        data={
            "task_id": task.id,
            "subtask_id": subtask.id,
            "old_name": subtask.name,
            "new_name": new_name,
        },
        message=f'Renamed "{subtask.name}" to "{new_name}" in "{task.name}".',
    )


async def add_subtask(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    task_name = _text(arguments, "taskName")
    description = _text(arguments, "subtaskDescription")
    if not description:
        return invalid_input("What's the subtask?")

    ref = resolve_task_reference(task_name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, task_name)

    task = ref.task
    result = ctx.store.add_subtask(task.id, description)
    if not result["success"]:
        return database_error("adding that subtask")

    return FunctionResult(
        success=True,
        data={"task_id": task.id, "subtask_id": result["data"]["subtask_id"]},
        message=f'Added "{description}" to "{task.name}".',
    )


async def remove_subtask(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    name = _text(arguments, "subtaskName")
    ref = resolve_subtask_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name, kind="subtask")

    task, subtask = ref.task, ref.subtask
    result = ctx.store.delete_subtask(subtask.id, ctx.user_id)
    if not result["success"]:
        return database_error("removing that subtask")

    message = f'Removed "{subtask.name}" from "{task.name}".'
    if result["data"]["task_completed"]:
        message += f' That leaves "{task.name}" all done!'
    # The removed subtask must not be remembered, only its task.
    return FunctionResult(
        success=True,
        data={"task_id": task.id, "removed_subtask": subtask.name},
        message=message,
    )


async def delete_task(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Delete a task and its subtasks. Asks first unless confirmed."""
    name = _text(arguments, "taskName")
    ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name)

    task = ref.task
    if arguments.get("confirmed") is not True:
        return confirmation_required(
            f'Are you sure you want to delete "{task.name}"? This cannot be undone.',
            data={"task_name": task.name},
        )

    result = ctx.store.delete_task(task.id)
    if not result["success"]:
        return database_error("deleting that task")

    return FunctionResult(
        success=True,
        data={"deleted_task": task.name},
        message=f'Deleted "{task.name}".',
    )


async def clear_completed_tasks(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Delete every completed task. Asks first unless confirmed."""
    completed = ctx.store.list_tasks(ctx.user_id, completed=True)
    if not completed["success"]:
        return database_error("checking your completed tasks")

    count = completed["data"]["count"]
    if count == 0:
        return FunctionResult(success=True, data={"count": 0}, message="No completed tasks to clear.")

    if arguments.get("confirmed") is not True:
        return confirmation_required(
            f"Are you sure you want to clear {plural(count, 'completed task')}? This cannot be undone.",
            data={"count": count},
        )

    result = ctx.store.clear_completed_tasks(ctx.user_id)
    if not result["success"]:
        return database_error("clearing your completed tasks")

    cleared = result["data"]["count"]
    return FunctionResult(
        success=True,
        data={"count": cleared},
        message=f"Cleared {plural(cleared, 'completed task')}.",
    )
