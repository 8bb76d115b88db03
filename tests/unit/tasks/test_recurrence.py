"""Tests for claw/tasks/recurrence.py"""

import pytest

from claw.tasks.recurrence import describe, parse_frequency


@pytest.mark.parametrize(
    "phrase,expected",
    [
        ("daily", "daily"),
        ("Every Day", "daily"),
        ("  weekdays ", "weekdays"),
        ("on weekdays", "weekdays"),
        ("weekly", "weekly"),
        ("every  week", "weekly"),
        ("monthly", "monthly"),
        ("every year", "yearly"),
    ],
)
def test_parses_known_phrases(phrase, expected):
    assert parse_frequency(phrase) == expected


@pytest.mark.parametrize("phrase", ["", None, "hourly", "every other tuesday", "sometimes"])
def test_unknown_phrases(phrase):
    assert parse_frequency(phrase) is None


def test_describe():
    assert describe("weekdays") == "every weekday"
    assert describe("daily") == "daily"
