"""Parsing and grounding helpers for assistant commands."""

from claw.assistant.parser.confirmation import is_confirmation, is_denial
from claw.assistant.parser.pronouns import resolve_pronoun
from claw.assistant.parser.references import (
    find_subtasks_by_name,
    find_tasks_by_name,
    resolve_subtask_reference,
    resolve_task_reference,
)
from claw.assistant.parser.time_parser import parse_time

__all__ = [
    "find_subtasks_by_name",
    "find_tasks_by_name",
    "is_confirmation",
    "is_denial",
    "parse_time",
    "resolve_pronoun",
    "resolve_subtask_reference",
    "resolve_task_reference",
]
