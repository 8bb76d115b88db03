"""Entity reference resolution.

Names are matched by case-insensitive substring after trimming. There is no
fuzzy matching: "kitchn" finds nothing, and "Project" matching two tasks is
reported back with both names rather than picking one.
"""

from __future__ import annotations

from claw.assistant.models import (
    ConversationState,
    ResolutionStatus,
    ResolvedReference,
    SubtaskMatch,
)
from claw.assistant.parser.pronouns import (
    is_subtask_pronoun_phrase,
    is_task_pronoun_phrase,
    resolve_subtask_pronoun,
    resolve_task_pronoun,
)
from claw.tasks.models import Task


def find_tasks_by_name(tasks: list[Task], name: str) -> list[Task]:
    needle = name.strip().lower()
    if not needle:
        return []
    return [task for task in tasks if needle in task.name.lower()]


def find_subtasks_by_name(tasks: list[Task], name: str) -> list[SubtaskMatch]:
    """All (task, subtask) pairs whose subtask name contains ``name``, in task then sort order."""
    needle = name.strip().lower()
    if not needle:
        return []
    return [
        SubtaskMatch(task=task, subtask=subtask)
        for task in tasks
        for subtask in task.subtasks
        if needle in subtask.name.lower()
    ]


def resolve_task_reference(
    name: str,
    tasks: list[Task],
    state: ConversationState | None = None,
) -> ResolvedReference:
    """Ground a task name (or a pronoun standing in for one) against ``tasks``."""
    if state is not None and is_task_pronoun_phrase(name):
        return resolve_task_pronoun(state, tasks)

    matches = find_tasks_by_name(tasks, name)
    if not matches:
        return ResolvedReference(status=ResolutionStatus.NOT_FOUND)
    if len(matches) > 1:
        return ResolvedReference(status=ResolutionStatus.AMBIGUOUS, candidates=matches)
    return ResolvedReference(status=ResolutionStatus.RESOLVED, task=matches[0])


def resolve_subtask_reference(
    name: str,
    tasks: list[Task],
    state: ConversationState | None = None,
) -> ResolvedReference:
    """Ground a subtask name against ``tasks``. Resolved references carry the owning task."""
    if state is not None and (is_subtask_pronoun_phrase(name) or is_task_pronoun_phrase(name)):
        return resolve_subtask_pronoun(state, tasks)

    matches = find_subtasks_by_name(tasks, name)
    if not matches:
        return ResolvedReference(status=ResolutionStatus.NOT_FOUND)
    if len(matches) > 1:
        return ResolvedReference(status=ResolutionStatus.AMBIGUOUS, candidates=matches)
    return ResolvedReference(
        status=ResolutionStatus.RESOLVED,
        task=matches[0].task,
        subtask=matches[0].subtask,
    )
