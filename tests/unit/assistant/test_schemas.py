"""Tests for claw/assistant/schemas.py"""

import pytest

from claw.assistant.models import FunctionCall
from claw.assistant.schemas import (
    FUNCTION_SCHEMAS,
    required_params,
    tool_definitions,
    validate_function_call,
)

ALL_FUNCTIONS = {
    "createTask", "completeTask", "completeSubtask", "renameTask", "renameSubtask",
    "addSubtask", "removeSubtask", "deleteTask", "clearCompletedTasks", "setReminder",
    "removeReminder", "setRecurrence", "startTimer", "pauseTimer", "resumeTimer",
    "stopTimer", "getTimerStatus", "listTasks", "getTaskDetails", "getNextSubtask",
}


def test_every_function_has_a_schema():
    assert set(FUNCTION_SCHEMAS) == ALL_FUNCTIONS


@pytest.mark.parametrize(
    "name,required",
    [
        ("createTask", ["description", "confirmed"]),
        ("deleteTask", ["taskName", "confirmed"]),
        ("clearCompletedTasks", ["confirmed"]),
        ("renameTask", ["oldName", "newName"]),
        ("addSubtask", ["taskName", "subtaskDescription"]),
        ("setReminder", ["taskName", "time"]),
        ("startTimer", []),
        ("listTasks", []),
    ],
)
def test_required_params(name, required):
    assert required_params(name) == required


class TestValidateFunctionCall:
    def test_valid(self):
        result = validate_function_call(FunctionCall("completeTask", {"taskName": "taxes"}))

        assert result.valid
        assert result.missing_params == []

    def test_missing_and_none_both_count(self):
        result = validate_function_call(FunctionCall("renameTask", {"oldName": None}))

        assert not result.valid
        assert result.missing_params == ["oldName", "newName"]

    def test_false_is_present(self):
        result = validate_function_call(FunctionCall("clearCompletedTasks", {"confirmed": False}))

        assert result.valid

    def test_unknown_function(self):
        result = validate_function_call(FunctionCall("launchRocket", {}))

        assert not result.valid
        assert result.missing_params == ["unknown function"]


def test_tool_definitions_shape():
    tools = {tool["name"]: tool for tool in tool_definitions()}

    assert set(tools) == ALL_FUNCTIONS
    schema = tools["setReminder"]["input_schema"]
    assert schema["type"] == "object"
    assert schema["required"] == ["taskName", "time"]
    assert schema["properties"]["time"]["type"] == "string"
    assert tools["startTimer"]["input_schema"]["properties"]["duration"]["type"] == "number"
