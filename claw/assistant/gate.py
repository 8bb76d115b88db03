"""Confirmation gate.

Creating, deleting and clearing tasks wait for an explicit yes. The gate
holds at most one pending action per session:

    clear ──gated call without confirmed──▶ awaiting
    awaiting ──"yes"──▶ clear (action re-issued with confirmed=true)
    awaiting ──"no"───▶ clear (nothing happens)
    awaiting ──anything else──▶ clear (message handled as a new command)

A second gated call while one is pending replaces it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable

from claw.assistant import GATED_FUNCTIONS
from claw.assistant.models import FunctionCall, PendingAction
from claw.assistant.parser.confirmation import is_confirmation, is_denial

logger = logging.getLogger(__name__)

DENIAL_ACKNOWLEDGEMENT = "No problem, I've cancelled that."


class GateOutcome(str, Enum):
    NO_PENDING = "no_pending"
    CONFIRMED = "confirmed"
    DENIED = "denied"
    DISCARDED = "discarded"


@dataclass
class GateDecision:
    outcome: GateOutcome
    call: FunctionCall | None = None
    message: str | None = None
    # Set on DISCARDED; restored if the model call then fails
    discarded: PendingAction | None = None


def requires_confirmation(call: FunctionCall) -> bool:
    return call.name in GATED_FUNCTIONS and call.arguments.get("confirmed") is not True


def default_confirmation_question(call: FunctionCall, count: int | None = None) -> str:
    """Question to ask when the model didn't phrase one itself."""
    if call.name == "createTask":
        return f'Should I create a task called "{call.arguments.get("description")}"?'
    if call.name == "deleteTask":
        return f'Are you sure you want to delete "{call.arguments.get("taskName")}"? This cannot be undone.'
    if call.name == "clearCompletedTasks":
        if count is not None:
            plural = "s" if count != 1 else ""
            return f"Are you sure you want to clear {count} completed task{plural}? This cannot be undone."
        return "Are you sure you want to clear all completed tasks? This cannot be undone."
    return "Please confirm this action."


class ConfirmationGate:
    """Per-session pending-action state machine."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now):
        self._clock = clock
        self._pending: PendingAction | None = None

    @property
    def pending(self) -> PendingAction | None:
        return self._pending

    @property
    def awaiting_confirmation(self) -> bool:
        return self._pending is not None

    def propose(self, call: FunctionCall) -> PendingAction:
        """Store a gated call until the user answers. Replaces any earlier one."""
        params = {k: v for k, v in call.arguments.items() if k != "confirmed"}
        if self._pending is not None:
            logger.info(f"Replacing pending {self._pending.type} with {call.name}")
        self._pending = PendingAction(type=call.name, params=params, timestamp=self._clock())
        return self._pending

    def reply(self, message: str) -> GateDecision:
        """Inspect the user's next message against the pending action.

        The pending action is consumed whatever the answer.
        """
        pending = self._pending
        if pending is None:
            return GateDecision(outcome=GateOutcome.NO_PENDING)

        self._pending = None
        if is_confirmation(message):
            return GateDecision(outcome=GateOutcome.CONFIRMED, call=pending.to_call())
        if is_denial(message):
            return GateDecision(outcome=GateOutcome.DENIED, message=DENIAL_ACKNOWLEDGEMENT)

        logger.debug(f"Discarding pending {pending.type}: reply was neither yes nor no")
        return GateDecision(outcome=GateOutcome.DISCARDED, discarded=pending)

    def restore(self, pending: PendingAction) -> None:
        """Put back an action a discarded reply dropped, unless a newer one exists."""
        if self._pending is None:
            self._pending = pending

    def clear(self) -> None:
        self._pending = None
