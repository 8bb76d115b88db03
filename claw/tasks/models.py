"""Task data models.

A Task owns an ordered list of Subtasks. Rows come out of SQLite as
``sqlite3.Row`` and are mapped here, so the rest of the engine never touches
column names.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any

from claw.tasks import DEFAULT_ENERGY, DEFAULT_SUBTASK_EMOJI, ENERGY_LEVELS


def parse_energy_tag(value: str | None) -> str:
    """Normalize an energy tag, falling back to medium."""
    if value in ENERGY_LEVELS:
        return value
    return DEFAULT_ENERGY


@dataclass
class Subtask:
    """One step of a task. ``sort_order`` is unique within its task."""

    id: str
    task_id: str
    name: str
    emoji: str = DEFAULT_SUBTASK_EMOJI
    completed: bool = False
    sort_order: int = 0

    @classmethod
    def from_row(cls, row: sqlite3.Row) -> Subtask:
        return cls(
            id=row["id"],
            task_id=row["task_id"],
            name=row["name"],
            emoji=row["emoji"] or DEFAULT_SUBTASK_EMOJI,
            completed=bool(row["completed"]),
            sort_order=row["sort_order"],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "task_id": self.task_id,
            "name": self.name,
            "emoji": self.emoji,
            "completed": self.completed,
            "sort_order": self.sort_order,
        }


@dataclass
class Task:
    """A user's big task with its subtasks in sort order."""

    id: str
    user_id: str
    name: str
    emoji: str
    completed: bool = False
    created_at: str | None = None
    completed_at: str | None = None
    updated_at: str | None = None
    subtasks: list[Subtask] = field(default_factory=list)
    energy_tag: str = DEFAULT_ENERGY
    reminder_at: str | None = None
    recurrence: dict[str, Any] | None = None

    @classmethod
    def from_row(cls, row: sqlite3.Row, subtasks: list[Subtask] | None = None) -> Task:
        recurrence = None
        if row["recurrence_type"]:
            recurrence = {"type": row["recurrence_type"]}
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            emoji=row["emoji"],
            completed=bool(row["completed"]),
            created_at=row["created_at"],
            completed_at=row["completed_at"],
            updated_at=row["updated_at"],
            subtasks=sorted(subtasks or [], key=lambda st: st.sort_order),
            energy_tag=parse_energy_tag(row["energy_tag"]),
            reminder_at=row["reminder_at"],
            recurrence=recurrence,
        )

    @property
    def completed_count(self) -> int:
        return sum(1 for st in self.subtasks if st.completed)

    @property
    def progress(self) -> float:
        """Fraction of subtasks done, 0.0 for a task without subtasks."""
        if not self.subtasks:
            return 0.0
        return self.completed_count / len(self.subtasks)

    @property
    def percent_complete(self) -> int:
        return round(self.progress * 100)

    def next_subtask(self) -> Subtask | None:
        """First incomplete subtask by sort order."""
        incomplete = [st for st in self.subtasks if not st.completed]
        if not incomplete:
            return None
        return min(incomplete, key=lambda st: st.sort_order)

    def find_subtask(self, subtask_id: str) -> Subtask | None:
        for subtask in self.subtasks:
            if subtask.id == subtask_id:
                return subtask
        return None

    def summary(self) -> str:
        return f"{self.emoji} {self.name} ({self.completed_count}/{len(self.subtasks)} done)"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "emoji": self.emoji,
            "completed": self.completed,
            "created_at": self.created_at,
            "completed_at": self.completed_at,
            "updated_at": self.updated_at,
            "subtasks": [st.to_dict() for st in self.subtasks],
            "energy_tag": self.energy_tag,
            "reminder_at": self.reminder_at,
            "recurrence": self.recurrence,
        }
