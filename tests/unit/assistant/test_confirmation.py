"""Tests for claw/assistant/parser/confirmation.py

The two classifiers must never both accept the same reply.
"""

import pytest

from claw.assistant.parser.confirmation import is_confirmation, is_denial


@pytest.mark.parametrize(
    "message",
    ["yes", "Yes!", "yeah", "yep", "sure", "ok", "okay.", "do it", "go ahead", "confirm",
     "confirmed", "please", "yes please", "yes, please", "that's right", "thats right", "correct",
     "yes?", "ok,", "sure, "],
)
def test_confirmations(message):
    assert is_confirmation(message)
    assert not is_denial(message)


@pytest.mark.parametrize(
    "message",
    ["no", "No.", "nope", "nah", "cancel", "never mind", "nevermind", "forget it", "don't", "dont", "stop",
     "no?", "nope,"],
)
def test_denials(message):
    assert is_denial(message)
    assert not is_confirmation(message)


@pytest.mark.parametrize(
    "message",
    ["yes delete the other one", "no, delete it", "maybe", "add milk to groceries", "", "   "],
)
def test_neither(message):
    assert not is_confirmation(message)
    assert not is_denial(message)


@pytest.mark.parametrize(
    "message",
    ["yes", "no", "ok", "cancel", "stop", "please", "do it", "don't", "sure!", "nah."],
)
def test_never_both(message):
    assert not (is_confirmation(message) and is_denial(message))
