"""Assistant data models.

Defines the structures that flow through one command:
    FunctionCall → (resolution, gate) → FunctionResult → ConversationState
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from claw.tasks.models import Subtask, Task


class ErrorCode(str, Enum):
    """Machine-readable failure kinds carried on a FunctionResult."""

    # Grounding
    TASK_NOT_FOUND = "task_not_found"
    SUBTASK_NOT_FOUND = "subtask_not_found"
    DISAMBIGUATION_NEEDED = "disambiguation_needed"
    CLARIFICATION_NEEDED = "clarification_needed"

    # Input and gating
    INVALID_INPUT = "invalid_input"
    CONFIRMATION_REQUIRED = "confirmation_required"

    # Timer
    TIMER_CONFLICT = "timer_conflict"
    TIMER_UNAVAILABLE = "timer_unavailable"

    # Execution
    DATABASE_ERROR = "database_error"
    LLM_ERROR = "llm_error"
    UNKNOWN_FUNCTION = "unknown_function"
    UNKNOWN_ERROR = "unknown_error"


@dataclass
class FunctionCall:
    """A structured call emitted by the language model."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)
    id: str | None = None

    def with_arguments(self, **overrides: Any) -> FunctionCall:
        return FunctionCall(name=self.name, arguments={**self.arguments, **overrides}, id=self.id)

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


@dataclass
class FunctionResult:
    """Outcome of one function call.

    ``message`` is always a complete sentence that can be spoken or shown
    as-is. Internal error detail goes to the log, never here.
    """

    success: bool
    message: str
    data: dict[str, Any] | None = None
    error: ErrorCode | None = None

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"success": self.success, "message": self.message}
        if self.data is not None:
            result["data"] = _jsonable(self.data)
        if self.error is not None:
            result["error"] = self.error.value
        return result


@dataclass(frozen=True)
class ConversationState:
    """What the assistant last talked about. Replaced, never mutated."""

    last_referenced_task_id: str | None = None
    last_referenced_subtask_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "last_referenced_task_id": self.last_referenced_task_id,
            "last_referenced_subtask_id": self.last_referenced_subtask_id,
        }


@dataclass(frozen=True)
class PendingAction:
    """A gated call waiting for the user's yes or no."""

    type: str
    params: dict[str, Any]
    timestamp: datetime

    def to_call(self) -> FunctionCall:
        return FunctionCall(name=self.type, arguments={**self.params, "confirmed": True})

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "params": self.params, "timestamp": self.timestamp.isoformat()}


@dataclass
class TimerState:
    """Focus timer snapshot. An idle timer has no state at all (None)."""

    is_running: bool
    is_paused: bool
    remaining_seconds: int
    total_seconds: int
    active_task_id: str | None = None

    @property
    def status(self) -> str:
        return "paused" if self.is_paused else "running"

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_running": self.is_running,
            "is_paused": self.is_paused,
            "remaining_seconds": self.remaining_seconds,
            "total_seconds": self.total_seconds,
            "active_task_id": self.active_task_id,
        }


@dataclass
class ChatMessage:
    """One stored chat line."""

    role: str
    content: str
    timestamp: datetime = field(default_factory=datetime.now)
    function_calls: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "function_calls": self.function_calls,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ChatMessage:
        return cls(
            role=data["role"],
            content=data["content"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            function_calls=data.get("function_calls") or [],
        )


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    NEEDS_CLARIFICATION = "needs_clarification"
    NOT_NEEDED = "not_needed"


@dataclass
class SubtaskMatch:
    task: Task
    subtask: Subtask


@dataclass
class ResolvedReference:
    """Result of grounding a name or pronoun against the live task set."""

    status: ResolutionStatus
    task: Task | None = None
    subtask: Subtask | None = None
    candidates: list[Any] = field(default_factory=list)
    clarification_message: str | None = None

    @property
    def resolved(self) -> bool:
        return self.status == ResolutionStatus.RESOLVED

    @property
    def task_id(self) -> str | None:
        return self.task.id if self.task else None

    @property
    def subtask_id(self) -> str | None:
        return self.subtask.id if self.subtask else None


def _jsonable(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, datetime):
        return value.isoformat()
    return value
