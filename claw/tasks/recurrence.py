"""Recurrence phrases.

Maps the handful of frequency phrasings people say out loud ("every day",
"on weekdays") to the stored recurrence descriptor. Scheduling the repeats
happens elsewhere; this module only names them.
"""

from typing import Optional

from . import RECURRENCE_TYPES

# Phrase -> recurrence type. Matching is exact after lowercasing and trimming.
FREQUENCY_PHRASES = {
    "daily": "daily",
    "every day": "daily",
    "weekdays": "weekdays",
    "on weekdays": "weekdays",
    "weekly": "weekly",
    "every week": "weekly",
    "monthly": "monthly",
    "every month": "monthly",
    "yearly": "yearly",
    "every year": "yearly",
}

FREQUENCY_HINT = "Try daily, weekdays, weekly, monthly, or yearly."


def parse_frequency(frequency: Optional[str]) -> Optional[str]:
    """Return the recurrence type for a phrase, or None if it isn't one we know."""
    if not frequency:
        return None
    recurrence_type = FREQUENCY_PHRASES.get(" ".join(frequency.lower().split()))
    if recurrence_type not in RECURRENCE_TYPES:
        return None
    return recurrence_type


def describe(recurrence_type: str) -> str:
    """Speakable form, e.g. "every weekday"."""
    if recurrence_type == "weekdays":
        return "every weekday"
    return recurrence_type
