"""Claw Test Suite

This package contains all tests for the Claw task assistant.

Test organization:
- unit/: Unit tests for individual modules
  - assistant/: parsers, gate, timer, dispatcher, function handlers, session
  - tasks/: Task store, breakdown, recurrence
- integration/: Chat turns, voice webhook and HTTP API

Running tests:
    # All tests
    pytest

    # Specific module
    pytest tests/unit/assistant/

    # Unit tests only
    pytest -m "not integration"
"""
