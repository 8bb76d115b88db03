"""Tests for claw/logging_config.py"""

import json
import logging

import pytest
import structlog

from claw.logging_config import bind_session, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    structlog.contextvars.clear_contextvars()


class TestSetupLogging:
    def test_json_lines_carry_session(self, capsys):
        setup_logging(level="INFO", json_output=True)
        bind_session("alice", "voice")

        logging.getLogger("claw.assistant.dispatcher").info("Executed listTasks: success=True")

        line = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert line["event"] == "Executed listTasks: success=True"
        assert line["user_id"] == "alice"
        assert line["channel"] == "voice"
        assert line["level"] == "info"
        assert line["logger"] == "claw.assistant.dispatcher"

    def test_single_handler_and_level(self):
        setup_logging(level="DEBUG", json_output=False)
        setup_logging(level="WARNING", json_output=False)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING

    def test_model_client_loggers_quieted(self):
        setup_logging(level="DEBUG", json_output=False)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("anthropic").level == logging.WARNING


def test_bind_session_replaces_previous():
    bind_session("alice", "chat")
    bind_session("bob", "cli")

    assert structlog.contextvars.get_contextvars() == {"user_id": "bob", "channel": "cli"}
