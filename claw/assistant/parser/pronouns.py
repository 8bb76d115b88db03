"""Pronoun resolution.

"Complete it" only means something if we remember what "it" was. The
remembered id is always checked against the live task set: a task that was
deleted or completed since is never silently reused.
"""

from __future__ import annotations

import re

from claw.assistant.models import (
    ConversationState,
    ResolutionStatus,
    ResolvedReference,
    SubtaskMatch,
)
from claw.tasks.models import Task

# Checked in order; subtask patterns are consulted before task patterns.
TASK_PRONOUN_PATTERNS: list[str] = [
    r"\bit\b",
    r"\bthat task\b",
    r"\bthe last one\b",
    r"\bthis task\b",
    r"\bthe task\b",
]

SUBTASK_PRONOUN_PATTERNS: list[str] = [
    r"\bthat subtask\b",
    r"\bthe subtask\b",
    r"\bthis subtask\b",
]

TASK_CLARIFICATION = "I'm not sure which task you're referring to. Could you specify the task name?"
SUBTASK_CLARIFICATION = "I'm not sure which subtask you're referring to. Could you specify the subtask name?"

_compiled_patterns: tuple[list[re.Pattern], list[re.Pattern]] | None = None


def _get_patterns() -> tuple[list[re.Pattern], list[re.Pattern]]:
    """Get compiled (task, subtask) pronoun patterns."""
    global _compiled_patterns
    if _compiled_patterns is None:
        _compiled_patterns = (
            [re.compile(p, re.IGNORECASE) for p in TASK_PRONOUN_PATTERNS],
            [re.compile(p, re.IGNORECASE) for p in SUBTASK_PRONOUN_PATTERNS],
        )
    return _compiled_patterns


def _normalize(text: str) -> str:
    return " ".join(text.strip().rstrip(".!?").split())


def contains_task_pronoun(text: str) -> bool:
    task_patterns, _ = _get_patterns()
    return any(p.search(text) for p in task_patterns)


def contains_subtask_pronoun(text: str) -> bool:
    _, subtask_patterns = _get_patterns()
    return any(p.search(text) for p in subtask_patterns)


def is_task_pronoun_phrase(text: str) -> bool:
    """True when the whole text is a task pronoun, e.g. a taskName of "it"."""
    task_patterns, _ = _get_patterns()
    normalized = _normalize(text)
    return any(p.fullmatch(normalized) for p in task_patterns)


def is_subtask_pronoun_phrase(text: str) -> bool:
    _, subtask_patterns = _get_patterns()
    normalized = _normalize(text)
    return any(p.fullmatch(normalized) for p in subtask_patterns)


def find_subtask_owner(tasks: list[Task], subtask_id: str) -> SubtaskMatch | None:
    for task in tasks:
        subtask = task.find_subtask(subtask_id)
        if subtask is not None:
            return SubtaskMatch(task=task, subtask=subtask)
    return None


def resolve_task_pronoun(state: ConversationState, tasks: list[Task]) -> ResolvedReference:
    task_id = state.last_referenced_task_id
    if task_id:
        for task in tasks:
            if task.id == task_id:
                return ResolvedReference(status=ResolutionStatus.RESOLVED, task=task)
    return ResolvedReference(
        status=ResolutionStatus.NEEDS_CLARIFICATION,
        clarification_message=TASK_CLARIFICATION,
    )


def resolve_subtask_pronoun(state: ConversationState, tasks: list[Task]) -> ResolvedReference:
    subtask_id = state.last_referenced_subtask_id
    if subtask_id:
        match = find_subtask_owner(tasks, subtask_id)
        if match is not None:
            return ResolvedReference(
                status=ResolutionStatus.RESOLVED,
                task=match.task,
                subtask=match.subtask,
            )
    return ResolvedReference(
        status=ResolutionStatus.NEEDS_CLARIFICATION,
        clarification_message=SUBTASK_CLARIFICATION,
    )


def resolve_pronoun(text: str, state: ConversationState, tasks: list[Task]) -> ResolvedReference:
    """Resolve pronoun references in an utterance.

    Returns:
        NOT_NEEDED when the text has no pronoun, RESOLVED with the remembered
        task (and subtask), or NEEDS_CLARIFICATION with a question to ask.
    """
    if contains_subtask_pronoun(text):
        return resolve_subtask_pronoun(state, tasks)
    if contains_task_pronoun(text):
        return resolve_task_pronoun(state, tasks)
    return ResolvedReference(status=ResolutionStatus.NOT_NEEDED)
