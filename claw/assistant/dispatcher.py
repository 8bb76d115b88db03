"""Route function calls to their handlers.

The dispatcher validates every call against its required parameters, runs
the handler, and turns anything a handler raises into a polite failure.
Each call is logged with its outcome and timing.
"""

from __future__ import annotations

import logging
import time

from claw.assistant.functions.base import FunctionContext, HandlerFn
from claw.assistant.functions.results import invalid_input, unknown_error, unknown_function
from claw.assistant.models import FunctionCall, FunctionResult
from claw.assistant.schemas import validate_function_call

logger = logging.getLogger(__name__)

# What to ask when a required parameter is missing
MISSING_PARAM_PROMPTS: dict[str, str] = {
    "description": "What task would you like to create?",
    "taskName": "Which task do you mean?",
    "subtaskName": "Which subtask do you mean?",
    "oldName": "Which one should I rename?",
    "newName": "What should the new name be?",
    "subtaskDescription": "What's the subtask?",
    "time": "When would you like to be reminded?",
    "frequency": "How often should it repeat? Daily, weekly, or monthly?",
    "confirmed": "Should I go ahead with that?",
}


def missing_params_message(missing: list[str]) -> str:
    return MISSING_PARAM_PROMPTS.get(missing[0], "I need a bit more detail to do that.")


class FunctionDispatcher:
    """Routes function calls to registered handlers."""

    def __init__(self):
        self._handlers: dict[str, HandlerFn] = {}

    def register(self, name: str, handler: HandlerFn) -> None:
        """Register a handler for a function name."""
        self._handlers[name] = handler

    @property
    def function_names(self) -> list[str]:
        return list(self._handlers)

    async def execute(self, call: FunctionCall, ctx: FunctionContext) -> FunctionResult:
        """Validate and run one call. Never raises."""
        start = time.monotonic()
        handler = self._handlers.get(call.name)
        validation = validate_function_call(call)

        if handler is None or validation.missing_params == ["unknown function"]:
            logger.warning(f"Unknown function requested: {call.name}")
            result = unknown_function(call.name)
        elif not validation.valid:
            logger.info(f"{call.name} missing parameters: {validation.missing_params}")
            result = invalid_input(missing_params_message(validation.missing_params))
            result.data = {"missing_params": validation.missing_params}
        else:
            try:
                result = await handler(call.arguments, ctx)
            except Exception as e:
                logger.exception(f"Function handler {call.name} failed: {e}")
                result = unknown_error()

        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.info(
            f"Executed {call.name}: success={result.success} "
            f"error={result.error.value if result.error else None} elapsed_ms={elapsed_ms}"
        )
        return result


def create_default_dispatcher() -> FunctionDispatcher:
    """Create a dispatcher with every assistant function registered."""
    from claw.assistant.functions.query_functions import (
        get_next_subtask,
        get_task_details,
        list_tasks,
    )
    from claw.assistant.functions.reminder_functions import (
        remove_reminder,
        set_recurrence,
        set_reminder,
    )
    from claw.assistant.functions.task_functions import (
        add_subtask,
        clear_completed_tasks,
        complete_subtask,
        complete_task,
        create_task,
        delete_task,
        remove_subtask,
        rename_subtask,
        rename_task,
    )
    from claw.assistant.functions.timer_functions import (
        get_timer_status,
        pause_timer,
        resume_timer,
        start_timer,
        stop_timer,
    )

    dispatcher = FunctionDispatcher()

    # Task and subtask mutation
    dispatcher.register("createTask", create_task)
    dispatcher.register("completeTask", complete_task)
    dispatcher.register("completeSubtask", complete_subtask)
    dispatcher.register("renameTask", rename_task)
    dispatcher.register("renameSubtask", rename_subtask)
    dispatcher.register("addSubtask", add_subtask)
    dispatcher.register("removeSubtask", remove_subtask)
    dispatcher.register("deleteTask", delete_task)
    dispatcher.register("clearCompletedTasks", clear_completed_tasks)

    # Scheduling
    dispatcher.register("setReminder", set_reminder)
    dispatcher.register("removeReminder", remove_reminder)
    dispatcher.register("setRecurrence", set_recurrence)

    # Timer control
    dispatcher.register("startTimer", start_timer)
    dispatcher.register("pauseTimer", pause_timer)
    dispatcher.register("resumeTimer", resume_timer)
    dispatcher.register("stopTimer", stop_timer)
    dispatcher.register("getTimerStatus", get_timer_status)

    # Queries
    dispatcher.register("listTasks", list_tasks)
    dispatcher.register("getTaskDetails", get_task_details)
    dispatcher.register("getNextSubtask", get_next_subtask)

    return dispatcher


_default_dispatcher: FunctionDispatcher | None = None


def get_default_dispatcher() -> FunctionDispatcher:
    global _default_dispatcher
    if _default_dispatcher is None:
        _default_dispatcher = create_default_dispatcher()
    return _default_dispatcher


async def execute_function_call(
    call: FunctionCall,
    ctx: FunctionContext,
    dispatcher: FunctionDispatcher | None = None,
) -> FunctionResult:
    """Validate and execute a single call with the default dispatcher."""
    return await (dispatcher or get_default_dispatcher()).execute(call, ctx)
