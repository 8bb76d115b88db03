"""Function schemas.

One table drives both sides of the model boundary: the tool definitions the
language model sees, and the required-parameter check every call passes
before a handler runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from claw.assistant.models import FunctionCall

_STRING = "string"
_BOOLEAN = "boolean"
_NUMBER = "number"

# name -> (description, {param: (type, description)}, required)
FUNCTION_SCHEMAS: dict[str, tuple[str, dict[str, tuple[str, str]], list[str]]] = {
    "createTask": (
        "Create a new task with AI-generated subtasks. First ask the user to confirm "
        "the task name, then call with confirmed=true.",
        {
            "description": (_STRING, "The task description/name"),
            "confirmed": (_BOOLEAN, "True only after the user explicitly confirms."),
        },
        ["description", "confirmed"],
    ),
    "completeTask": (
        "Mark a task as completed. Use when the user says done, finished, check off.",
        {"taskName": (_STRING, "Name or partial name of the task, or 'it' for the last one discussed")},
        ["taskName"],
    ),
    "completeSubtask": (
        "Mark a subtask as completed.",
        {"subtaskName": (_STRING, "Name or partial name of the subtask, or 'that subtask'")},
        ["subtaskName"],
    ),
    "renameTask": (
        "Rename a task.",
        {
            "oldName": (_STRING, "Current name or partial name"),
            "newName": (_STRING, "New name"),
        },
        ["oldName", "newName"],
    ),
    "renameSubtask": (
        "Rename a subtask.",
        {
            "oldName": (_STRING, "Current name or partial name"),
            "newName": (_STRING, "New name"),
        },
        ["oldName", "newName"],
    ),
    "addSubtask": (
        "Add a new subtask to an existing task.",
        {
            "taskName": (_STRING, "Name of the parent task"),
            "subtaskDescription": (_STRING, "Description of the new subtask"),
        },
        ["taskName", "subtaskDescription"],
    ),
    "removeSubtask": (
        "Remove a subtask.",
        {"subtaskName": (_STRING, "Name or partial name of the subtask")},
        ["subtaskName"],
    ),
    "deleteTask": (
        "Delete a task. First ask the user to confirm, then call with confirmed=true.",
        {
            "taskName": (_STRING, "Name of the task to delete"),
            "confirmed": (_BOOLEAN, "True only after the user explicitly confirms."),
        },
        ["taskName", "confirmed"],
    ),
    "clearCompletedTasks": (
        "Delete all completed tasks. First ask the user to confirm, then call with confirmed=true.",
        {"confirmed": (_BOOLEAN, "True only after the user explicitly confirms.")},
        ["confirmed"],
    ),
    "setReminder": (
        "Set a reminder for a task.",
        {
            "taskName": (_STRING, "Name of the task"),
            "time": (_STRING, "When, e.g. '3pm', '15:00', 'in 2 hours', 'tomorrow 9am', 'Saturday 10am'"),
        },
        ["taskName", "time"],
    ),
    "removeReminder": (
        "Remove the reminder from a task.",
        {"taskName": (_STRING, "Name of the task")},
        ["taskName"],
    ),
    "setRecurrence": (
        "Make a task repeat.",
        {
            "taskName": (_STRING, "Name of the task"),
            "frequency": (_STRING, "daily, weekdays, weekly, monthly or yearly"),
        },
        ["taskName", "frequency"],
    ),
    "startTimer": (
        "Start a focus timer, optionally for a task.",
        {
            "duration": (_NUMBER, "Minutes (default 25)"),
            "taskName": (_STRING, "Task to focus on"),
        },
        [],
    ),
    "pauseTimer": ("Pause the running focus timer.", {}, []),
    "resumeTimer": ("Resume a paused focus timer.", {}, []),
    "stopTimer": ("Stop the focus timer.", {}, []),
    "getTimerStatus": ("Report the focus timer status.", {}, []),
    "listTasks": ("List the user's active tasks.", {}, []),
    "getTaskDetails": (
        "Show progress and subtasks of one task.",
        {"taskName": (_STRING, "Name of the task")},
        ["taskName"],
    ),
    "getNextSubtask": ("Suggest the next subtask to work on.", {}, []),
}


@dataclass
class ValidationResult:
    valid: bool
    missing_params: list[str] = field(default_factory=list)


def required_params(name: str) -> list[str] | None:
    schema = FUNCTION_SCHEMAS.get(name)
    return list(schema[2]) if schema else None


def validate_function_call(call: FunctionCall) -> ValidationResult:
    """Check a call's required parameters. Absent or None counts as missing."""
    required = required_params(call.name)
    if required is None:
        return ValidationResult(valid=False, missing_params=["unknown function"])

    missing = [param for param in required if call.arguments.get(param) is None]
    return ValidationResult(valid=not missing, missing_params=missing)


def tool_definitions() -> list[dict[str, Any]]:
    """Tool definitions in the Messages API format."""
    tools = []
    for name, (description, params, required) in FUNCTION_SCHEMAS.items():
        tools.append({
            "name": name,
            "description": description,
            "input_schema": {
                "type": "object",
                "properties": {
                    param: {"type": param_type, "description": param_description}
                    for param, (param_type, param_description) in params.items()
                },
                "required": list(required),
            },
        })
    return tools
