"""Reminder and recurrence handlers."""

from __future__ import annotations

import logging
from typing import Any

from claw.assistant.functions.base import FunctionContext
from claw.assistant.functions.results import database_error, invalid_input, unresolved
from claw.assistant.models import FunctionResult
from claw.assistant.parser.references import resolve_task_reference
from claw.assistant.parser.time_parser import FORMAT_HINT, describe_time, parse_time
from claw.tasks.recurrence import FREQUENCY_HINT, describe, parse_frequency

logger = logging.getLogger(__name__)


async def set_reminder(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Attach a reminder time to a task."""
    name = str(arguments.get("taskName", "")).strip()
    time_phrase = str(arguments.get("time", "")).strip()

    ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name)

    now = ctx.now()
    when = parse_time(time_phrase, now)
    if when is None:
        return invalid_input(f'I couldn\'t understand the time "{time_phrase}". {FORMAT_HINT}')

    task = ref.task
    result = ctx.store.update_reminder(task.id, when.isoformat())
    if not result["success"]:
        return database_error("setting that reminder")

    return FunctionResult(
        success=True,
        data={"task_id": task.id, "reminder_at": when.isoformat()},
        message=f'Set a reminder for "{task.name}" {describe_time(when, now)}.',
    )


async def remove_reminder(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    name = str(arguments.get("taskName", "")).strip()
    ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name)

    task = ref.task
    if not task.reminder_at:
        return FunctionResult(
            success=True,
            data={"task_id": task.id},
            message=f'"{task.name}" doesn\'t have a reminder.',
        )

    result = ctx.store.update_reminder(task.id, None)
    if not result["success"]:
        return database_error("removing that reminder")

    return FunctionResult(
        success=True,
        data={"task_id": task.id},
        message=f'Removed the reminder from "{task.name}".',
    )


async def set_recurrence(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    """Make a task repeat on a named frequency."""
    name = str(arguments.get("taskName", "")).strip()
    frequency = str(arguments.get("frequency", "")).strip()

    ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
    if not ref.resolved:
        return unresolved(ref, name)

    recurrence_type = parse_frequency(frequency)
    if recurrence_type is None:
        return invalid_input(f'I didn\'t understand "{frequency}". {FREQUENCY_HINT}')

    task = ref.task
    result = ctx.store.set_recurrence(task.id, recurrence_type)
    if not result["success"]:
        return database_error("setting that recurrence")

    return FunctionResult(
        success=True,
        data={"task_id": task.id, "frequency": recurrence_type},
        message=f'"{task.name}" will now repeat {describe(recurrence_type)}.',
    )
