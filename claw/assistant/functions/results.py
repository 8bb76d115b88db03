"""FunctionResult builders.

One place for every user-facing failure sentence, so none of them can leak
an exception string or a stray None.
"""

from __future__ import annotations

from typing import Any

from claw.assistant.models import (
    ErrorCode,
    FunctionResult,
    ResolutionStatus,
    ResolvedReference,
    SubtaskMatch,
)
from claw.tasks.models import Task


def task_not_found(name: str) -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.TASK_NOT_FOUND,
        message=f'Couldn\'t find a task matching "{name}". Try saying the full task name or ask me to list your tasks.',
    )


def subtask_not_found(name: str) -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.SUBTASK_NOT_FOUND,
        message=f'Couldn\'t find a subtask matching "{name}". Try saying the full subtask name.',
    )


def task_disambiguation(tasks: list[Task]) -> FunctionResult:
    names = ", ".join(task.name for task in tasks)
    return FunctionResult(
        success=False,
        error=ErrorCode.DISAMBIGUATION_NEEDED,
        data={"matches": [{"id": task.id, "name": task.name} for task in tasks]},
        message=f"Found multiple tasks: {names}. Which one did you mean?",
    )


def subtask_disambiguation(matches: list[SubtaskMatch]) -> FunctionResult:
    names = ", ".join(f'"{m.subtask.name}" (in {m.task.name})' for m in matches)
    return FunctionResult(
        success=False,
        error=ErrorCode.DISAMBIGUATION_NEEDED,
        data={
            "matches": [
                {"id": m.subtask.id, "name": m.subtask.name, "task_id": m.task.id, "task_name": m.task.name}
                for m in matches
            ]
        },
        message=f"Found multiple subtasks: {names}. Which one did you mean?",
    )


def clarification(message: str) -> FunctionResult:
    return FunctionResult(success=False, error=ErrorCode.CLARIFICATION_NEEDED, message=message)


def invalid_input(message: str) -> FunctionResult:
    return FunctionResult(success=False, error=ErrorCode.INVALID_INPUT, message=message)


def confirmation_required(question: str, data: dict[str, Any] | None = None) -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.CONFIRMATION_REQUIRED,
        data=data,
        message=question,
    )


def database_error(operation: str) -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.DATABASE_ERROR,
        message=f"Had trouble {operation}. Want to try again?",
    )


def timer_conflict(message: str) -> FunctionResult:
    return FunctionResult(success=False, error=ErrorCode.TIMER_CONFLICT, message=message)


def timer_unavailable() -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.TIMER_UNAVAILABLE,
        message="Timer is not available right now.",
    )


def unknown_function(name: str) -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.UNKNOWN_FUNCTION,
        data={"function": name},
        message="Sorry, I don't know how to do that yet.",
    )


def unknown_error() -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.UNKNOWN_ERROR,
        message="Something went wrong with that. Want to try again?",
    )


def llm_error() -> FunctionResult:
    return FunctionResult(
        success=False,
        error=ErrorCode.LLM_ERROR,
        message="Sorry, I'm having trouble thinking right now. Could you try that again in a moment?",
    )


def unresolved(reference: ResolvedReference, name: str, kind: str = "task") -> FunctionResult:
    """Failure result for a reference that didn't resolve to exactly one entity."""
    if reference.status == ResolutionStatus.NEEDS_CLARIFICATION:
        return clarification(reference.clarification_message or "Which one do you mean?")
    if reference.status == ResolutionStatus.AMBIGUOUS:
        if kind == "subtask":
            return subtask_disambiguation(reference.candidates)
        return task_disambiguation(reference.candidates)
    if kind == "subtask":
        return subtask_not_found(name)
    return task_not_found(name)


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"
