"""Reminder time parsing.

Understands the phrasings people actually say:
    "in 2 hours", "in 30 min"
    "3pm", "9:30am", "at 10am"
    "15:00"
    "tomorrow", "tomorrow 9:30am"
    "Saturday 10am"

A time of day that has already passed today rolls forward to tomorrow.
Anything else returns None so the caller can answer with FORMAT_HINT.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta

FORMAT_HINT = 'Try something like "3pm", "15:00", or "in 2 hours".'

TOMORROW_DEFAULT_HOUR = 9

WEEKDAYS = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

RELATIVE_PATTERN = re.compile(r"^in\s+(\d+)\s+(hour|hr|minute|min)s?$", re.IGNORECASE)
AMPM_PATTERN = re.compile(r"^(\d{1,2})(?::(\d{2}))?\s*(am|pm)$", re.IGNORECASE)
CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def _strip_at(phrase: str) -> str:
    return phrase[3:].strip() if phrase.startswith("at ") else phrase


def parse_clock(phrase: str) -> tuple[int, int] | None:
    """Parse "3pm", "9:30am" or "15:00" into (hour, minute)."""
    match = AMPM_PATTERN.match(phrase)
    if match:
        hour = int(match.group(1))
        minute = int(match.group(2)) if match.group(2) else 0
        if not 1 <= hour <= 12 or minute > 59:
            return None
        is_pm = match.group(3).lower() == "pm"
        if is_pm and hour != 12:
            hour += 12
        if not is_pm and hour == 12:
            hour = 0
        return hour, minute

    match = CLOCK_PATTERN.match(phrase)
    if match:
        hour, minute = int(match.group(1)), int(match.group(2))
        if hour < 24 and minute < 60:
            return hour, minute

    return None


def parse_time(text: str, now: datetime | None = None) -> datetime | None:
    """Parse a reminder phrase into an absolute datetime, or None."""
    now = now or datetime.now()
    phrase = _strip_at(" ".join(text.lower().strip().rstrip(".!?").split()))
    if not phrase:
        return None

    match = RELATIVE_PATTERN.match(phrase)
    if match:
        amount = int(match.group(1))
        unit = match.group(2).lower()
        if unit in ("hour", "hr"):
            return now + timedelta(hours=amount)
        return now + timedelta(minutes=amount)

    if phrase == "tomorrow":
        return (now + timedelta(days=1)).replace(
            hour=TOMORROW_DEFAULT_HOUR, minute=0, second=0, microsecond=0
        )

    first, _, rest = phrase.partition(" ")
    if first == "tomorrow":
        clock = parse_clock(_strip_at(rest))
        if clock is None:
            return None
        return (now + timedelta(days=1)).replace(hour=clock[0], minute=clock[1], second=0, microsecond=0)

    if first in WEEKDAYS:
        clock = parse_clock(_strip_at(rest)) if rest else (TOMORROW_DEFAULT_HOUR, 0)
        if clock is None:
            return None
        days_ahead = (WEEKDAYS.index(first) - now.weekday()) % 7
        candidate = (now + timedelta(days=days_ahead)).replace(
            hour=clock[0], minute=clock[1], second=0, microsecond=0
        )
        if candidate <= now:
            candidate += timedelta(days=7)
        return candidate

    clock = parse_clock(phrase)
    if clock is None:
        return None
    candidate = now.replace(hour=clock[0], minute=clock[1], second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


def describe_time(when: datetime, now: datetime | None = None) -> str:
    """Speakable form: "at 3:00 PM", "tomorrow at 9:00 AM", "Saturday at 10:00 AM"."""
    now = now or datetime.now()
    clock = when.strftime("%I:%M %p").lstrip("0")
    days = (when.date() - now.date()).days
    if days == 0:
        return f"at {clock}"
    if days == 1:
        return f"tomorrow at {clock}"
    if 1 < days < 7:
        return f"{when.strftime('%A')} at {clock}"
    return f"{when.strftime('%B')} {when.day} at {clock}"
