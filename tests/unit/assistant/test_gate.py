"""Tests for claw/assistant/gate.py

One pending action at most, consumed by whatever the user says next.
"""

from datetime import datetime

import pytest

from claw.assistant.gate import (
    DENIAL_ACKNOWLEDGEMENT,
    ConfirmationGate,
    GateOutcome,
    default_confirmation_question,
    requires_confirmation,
)
from claw.assistant.models import FunctionCall


@pytest.fixture
def gate():
    return ConfirmationGate(clock=lambda: datetime(2026, 3, 11, 14, 0))


class TestRequiresConfirmation:
    @pytest.mark.parametrize("name", ["createTask", "deleteTask", "clearCompletedTasks"])
    def test_gated_without_confirmed(self, name):
        assert requires_confirmation(FunctionCall(name, {}))
        assert requires_confirmation(FunctionCall(name, {"confirmed": False}))

    def test_confirmed_passes(self):
        assert not requires_confirmation(FunctionCall("deleteTask", {"taskName": "x", "confirmed": True}))

    def test_ungated_functions(self):
        assert not requires_confirmation(FunctionCall("completeTask", {"taskName": "x"}))


class TestConfirmationGate:
    def test_propose_stores_pending_without_confirmed(self, gate):
        pending = gate.propose(FunctionCall("deleteTask", {"taskName": "Taxes", "confirmed": False}))

        assert gate.awaiting_confirmation
        assert pending.type == "deleteTask"
        assert pending.params == {"taskName": "Taxes"}
        assert pending.timestamp == datetime(2026, 3, 11, 14, 0)

    def test_no_pending(self, gate):
        assert gate.reply("yes").outcome == GateOutcome.NO_PENDING

    def test_confirm_reissues_with_confirmed(self, gate):
        gate.propose(FunctionCall("deleteTask", {"taskName": "Taxes"}))

        decision = gate.reply("yes")

        assert decision.outcome == GateOutcome.CONFIRMED
        assert decision.call.name == "deleteTask"
        assert decision.call.arguments == {"taskName": "Taxes", "confirmed": True}
        assert gate.pending is None

    def test_deny_acknowledges(self, gate):
        gate.propose(FunctionCall("clearCompletedTasks", {}))

        decision = gate.reply("nope")

        assert decision.outcome == GateOutcome.DENIED
        assert decision.message == DENIAL_ACKNOWLEDGEMENT
        assert gate.pending is None

    def test_other_reply_discards(self, gate):
        gate.propose(FunctionCall("createTask", {"description": "Buy milk"}))

        decision = gate.reply("actually, what's on my list?")

        assert decision.outcome == GateOutcome.DISCARDED
        assert gate.pending is None

    def test_restore_after_discard(self, gate):
        gate.propose(FunctionCall("deleteTask", {"taskName": "Taxes"}))
        decision = gate.reply("what's on my list?")

        gate.restore(decision.discarded)

        assert gate.pending.type == "deleteTask"
        assert gate.pending.params == {"taskName": "Taxes"}

    def test_restore_keeps_newer_proposal(self, gate):
        gate.propose(FunctionCall("deleteTask", {"taskName": "Taxes"}))
        decision = gate.reply("add milk")
        gate.propose(FunctionCall("createTask", {"description": "Milk"}))

        gate.restore(decision.discarded)

        assert gate.pending.type == "createTask"

    def test_second_proposal_replaces_first(self, gate):
        gate.propose(FunctionCall("createTask", {"description": "Buy milk"}))
        gate.propose(FunctionCall("deleteTask", {"taskName": "Taxes"}))

        assert gate.pending.type == "deleteTask"
        assert gate.reply("yes").call.arguments["taskName"] == "Taxes"

    def test_clear(self, gate):
        gate.propose(FunctionCall("createTask", {"description": "Buy milk"}))
        gate.clear()

        assert not gate.awaiting_confirmation


class TestDefaultQuestions:
    def test_create(self):
        question = default_confirmation_question(FunctionCall("createTask", {"description": "Buy milk"}))

        assert question == 'Should I create a task called "Buy milk"?'

    def test_delete(self):
        question = default_confirmation_question(FunctionCall("deleteTask", {"taskName": "Taxes"}))

        assert question == 'Are you sure you want to delete "Taxes"? This cannot be undone.'

    def test_clear_with_count(self):
        call = FunctionCall("clearCompletedTasks", {})

        assert "clear 3 completed tasks" in default_confirmation_question(call, 3)
        assert "clear 1 completed task?" in default_confirmation_question(call, 1)
        assert "all completed tasks" in default_confirmation_question(call)
