"""Focus timer.

``TimerController`` is everything the assistant needs from a timer. The
handlers in ``functions.timer_functions`` enforce the idle/running/paused
rules; ``FocusTimer`` is the in-process controller used by the API and CLI.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Protocol

from claw.assistant.models import TimerState

logger = logging.getLogger(__name__)


class TimerController(Protocol):
    def start(self, duration_seconds: int) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def stop(self) -> None: ...

    def get_state(self) -> TimerState | None: ...

    def set_active_task(self, task_id: str | None) -> None: ...


class FocusTimer:
    """Countdown timer driven by a monotonic clock.

    A timer that runs out returns to idle on the next ``get_state``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._total = 0
        self._remaining = 0
        self._started_at: float | None = None
        self._paused = False
        self._active = False
        self._active_task_id: str | None = None

    def _remaining_now(self) -> int:
        if self._paused or self._started_at is None:
            return self._remaining
        elapsed = int(self._clock() - self._started_at)
        return max(0, self._remaining - elapsed)

    def start(self, duration_seconds: int) -> None:
        self._total = duration_seconds
        self._remaining = duration_seconds
        self._started_at = self._clock()
        self._paused = False
        self._active = True
        logger.debug(f"Timer started for {duration_seconds}s")

    def pause(self) -> None:
        if not self._active or self._paused:
            return
        self._remaining = self._remaining_now()
        self._started_at = None
        self._paused = True

    def resume(self) -> None:
        if not self._active or not self._paused:
            return
        self._started_at = self._clock()
        self._paused = False

    def stop(self) -> None:
        self._active = False
        self._paused = False
        self._started_at = None
        self._remaining = 0
        self._total = 0
        self._active_task_id = None

    def get_state(self) -> TimerState | None:
        if not self._active:
            return None

        remaining = self._remaining_now()
        if remaining <= 0 and not self._paused:
            logger.info("Focus timer finished")
            self.stop()
            return None

        return TimerState(
            is_running=not self._paused,
            is_paused=self._paused,
            remaining_seconds=remaining,
            total_seconds=self._total,
            active_task_id=self._active_task_id,
        )

    def set_active_task(self, task_id: str | None) -> None:
        self._active_task_id = task_id
