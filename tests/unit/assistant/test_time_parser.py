"""Tests for claw/assistant/parser/time_parser.py

All times are relative to a fixed Wednesday, 2:00 PM.
"""

from datetime import datetime

import pytest

from claw.assistant.parser.time_parser import describe_time, parse_clock, parse_time
from tests.conftest import FIXED_NOW


class TestParseClock:
    @pytest.mark.parametrize(
        "phrase,expected",
        [
            ("3pm", (15, 0)),
            ("3 PM", (15, 0)),
            ("9:30am", (9, 30)),
            ("12am", (0, 0)),
            ("12pm", (12, 0)),
            ("15:00", (15, 0)),
            ("0:05", (0, 5)),
        ],
    )
    def test_valid(self, phrase, expected):
        assert parse_clock(phrase) == expected

    @pytest.mark.parametrize("phrase", ["13pm", "0am", "9:75am", "24:00", "12:60", "noon"])
    def test_invalid(self, phrase):
        assert parse_clock(phrase) is None


class TestParseTime:
    @pytest.mark.parametrize(
        "phrase,expected",
        [
            ("in 2 hours", datetime(2026, 3, 11, 16, 0)),
            ("in 1 hr", datetime(2026, 3, 11, 15, 0)),
            ("in 30 minutes", datetime(2026, 3, 11, 14, 30)),
            ("in 45 min", datetime(2026, 3, 11, 14, 45)),
            ("3pm", datetime(2026, 3, 11, 15, 0)),
            ("at 4:30pm", datetime(2026, 3, 11, 16, 30)),
            ("17:15", datetime(2026, 3, 11, 17, 15)),
            ("tomorrow", datetime(2026, 3, 12, 9, 0)),
            ("tomorrow 7am", datetime(2026, 3, 12, 7, 0)),
            ("tomorrow at 9:30am", datetime(2026, 3, 12, 9, 30)),
            ("Saturday 10am", datetime(2026, 3, 14, 10, 0)),
            ("friday", datetime(2026, 3, 13, 9, 0)),
        ],
    )
    def test_phrases(self, phrase, expected):
        assert parse_time(phrase, FIXED_NOW) == expected

    def test_past_time_rolls_to_tomorrow(self):
        assert parse_time("9am", FIXED_NOW) == datetime(2026, 3, 12, 9, 0)

    def test_current_minute_rolls_to_tomorrow(self):
        assert parse_time("2pm", FIXED_NOW) == datetime(2026, 3, 12, 14, 0)

    def test_same_weekday_earlier_goes_to_next_week(self):
        assert parse_time("wednesday 9am", FIXED_NOW) == datetime(2026, 3, 18, 9, 0)

    def test_same_weekday_later_is_today(self):
        assert parse_time("wednesday 6pm", FIXED_NOW) == datetime(2026, 3, 11, 18, 0)

    @pytest.mark.parametrize("phrase", ["", "whenever", "later", "tomorrow-ish", "in a bit", "tomorrow noon"])
    def test_unparseable(self, phrase):
        assert parse_time(phrase, FIXED_NOW) is None


class TestDescribeTime:
    def test_today(self):
        assert describe_time(datetime(2026, 3, 11, 15, 0), FIXED_NOW) == "at 3:00 PM"

    def test_tomorrow(self):
        assert describe_time(datetime(2026, 3, 12, 9, 30), FIXED_NOW) == "tomorrow at 9:30 AM"

    def test_this_week(self):
        assert describe_time(datetime(2026, 3, 14, 10, 0), FIXED_NOW) == "Saturday at 10:00 AM"

    def test_further_out(self):
        assert describe_time(datetime(2026, 3, 18, 9, 0), FIXED_NOW) == "March 18 at 9:00 AM"
