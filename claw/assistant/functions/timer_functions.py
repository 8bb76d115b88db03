"""Focus timer handlers.

The timer is idle (no state), running or paused:

    idle ──start──▶ running ──pause──▶ paused ──resume──▶ running
    any ──stop──▶ idle

Starting over an existing timer is refused rather than silently restarting.
"""

from __future__ import annotations

import logging
import math
from typing import Any

from claw.assistant.functions.base import FunctionContext
from claw.assistant.functions.results import (
    invalid_input,
    plural,
    timer_conflict,
    timer_unavailable,
    unresolved,
)
from claw.assistant.models import FunctionResult
from claw.assistant.parser.references import resolve_task_reference

logger = logging.getLogger(__name__)


def _minutes_left(remaining_seconds: int) -> int:
    return math.ceil(remaining_seconds / 60)


async def start_timer(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    if ctx.timer is None:
        return timer_unavailable()

    if ctx.timer.get_state() is not None:
        return timer_conflict("A timer is already running. Stop it first or pause it.")

    duration = arguments.get("duration")
    if duration is None:
        minutes = float(ctx.default_timer_minutes)
    else:
        try:
            minutes = float(duration)
        except (TypeError, ValueError):
            minutes = 0.0
        if not math.isfinite(minutes) or minutes <= 0:
            return invalid_input("How long should the timer run? Say a number of minutes.")

    task = None
    task_name = arguments.get("taskName")
    if task_name:
        name = str(task_name).strip()
        ref = resolve_task_reference(name, ctx.tasks, ctx.conversation)
        if not ref.resolved:
            return unresolved(ref, name)
        task = ref.task

    ctx.timer.set_active_task(task.id if task else None)
    total_seconds = max(1, round(minutes * 60))
    ctx.timer.start(total_seconds)

    shown = max(1, round(minutes))
    message = f"Started a {shown} minute timer."
    data: dict[str, Any] = {"duration_minutes": shown, "total_seconds": total_seconds}
    if task is not None:
        message = f'Started a {shown} minute timer for "{task.name}".'
        data["task_id"] = task.id
    return FunctionResult(success=True, data=data, message=message)


async def pause_timer(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    if ctx.timer is None:
        return timer_unavailable()

    state = ctx.timer.get_state()
    if state is None:
        return timer_conflict("No timer is running to pause.")

    if state.is_paused:
        return FunctionResult(
            success=True,
            data={"remaining_seconds": state.remaining_seconds},
            message="Timer is already paused.",
        )

    ctx.timer.pause()
    paused = ctx.timer.get_state()
    remaining = paused.remaining_seconds if paused else state.remaining_seconds
    return FunctionResult(
        success=True,
        data={"remaining_seconds": remaining},
        message=f"Paused timer with {plural(_minutes_left(remaining), 'minute')} remaining.",
    )


async def resume_timer(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    if ctx.timer is None:
        return timer_unavailable()

    state = ctx.timer.get_state()
    if state is None:
        return timer_conflict("No timer to resume. Start a new timer first.")

    if not state.is_paused:
        return timer_conflict("Timer is not paused.")

    ctx.timer.resume()
    return FunctionResult(
        success=True,
        data={"remaining_seconds": state.remaining_seconds},
        message=f"Resumed timer with {plural(_minutes_left(state.remaining_seconds), 'minute')} remaining.",
    )


async def stop_timer(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    if ctx.timer is None:
        return timer_unavailable()

    if ctx.timer.get_state() is None:
        ctx.timer.stop()
        return FunctionResult(success=True, message="No timer is running.")

    ctx.timer.stop()
    return FunctionResult(success=True, message="Timer stopped.")


async def get_timer_status(arguments: dict[str, Any], ctx: FunctionContext) -> FunctionResult:
    if ctx.timer is None:
        return timer_unavailable()

    state = ctx.timer.get_state()
    if state is None:
        return FunctionResult(success=True, data={"status": "idle"}, message="No timer is running.")

    minutes, seconds = divmod(state.remaining_seconds, 60)
    return FunctionResult(
        success=True,
        data={
            "status": state.status,
            "remaining_seconds": state.remaining_seconds,
            "total_seconds": state.total_seconds,
            "active_task_id": state.active_task_id,
        },
        message=(
            f"Timer is {state.status} with {plural(minutes, 'minute')} "
            f"and {plural(seconds, 'second')} remaining."
        ),
    )
