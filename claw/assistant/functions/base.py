"""Handler context and signature."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable

from claw.assistant import DEFAULT_TIMER_MINUTES
from claw.assistant.models import ConversationState, FunctionResult
from claw.assistant.timer import TimerController
from claw.tasks.breakdown import TaskBreakdown
from claw.tasks.manager import TaskStore
from claw.tasks.models import Task


@dataclass
class FunctionContext:
    """What a handler may read and touch while running one call."""

    user_id: str
    store: TaskStore
    tasks: list[Task] = field(default_factory=list)
    conversation: ConversationState = field(default_factory=ConversationState)
    timer: TimerController | None = None
    breakdown: TaskBreakdown | None = None
    default_timer_minutes: int = DEFAULT_TIMER_MINUTES
    clock: Callable[[], datetime] = datetime.now

    def now(self) -> datetime:
        return self.clock()


# Handler type: async function(arguments, context) -> FunctionResult
HandlerFn = Callable[[dict[str, Any], FunctionContext], Awaitable[FunctionResult]]
