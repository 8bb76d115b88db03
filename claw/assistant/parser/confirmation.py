"""Confirmation and denial classifiers.

Both match the whole reply (after trimming and dropping trailing
punctuation), so "no, delete it" is neither a confirmation nor a denial and
gets treated as a fresh command.
"""

from __future__ import annotations

import re

CONFIRMATION_PATTERNS: list[str] = [
    r"yes",
    r"yeah",
    r"yep",
    r"sure",
    r"ok",
    r"okay",
    r"do it",
    r"go ahead",
    r"confirm",
    r"confirmed",
    r"please",
    r"yes,?\s*please",
    r"that'?s? right",
    r"correct",
]

DENIAL_PATTERNS: list[str] = [
    r"no",
    r"nope",
    r"nah",
    r"cancel",
    r"never\s*mind",
    r"forget\s*it",
    r"don'?t",
    r"stop",
]

_compiled: dict[str, list[re.Pattern]] = {}


def _get_patterns(kind: str) -> list[re.Pattern]:
    if kind not in _compiled:
        source = CONFIRMATION_PATTERNS if kind == "confirm" else DENIAL_PATTERNS
        _compiled[kind] = [re.compile(p, re.IGNORECASE) for p in source]
    return _compiled[kind]


def _normalize(message: str) -> str:
    return message.strip().rstrip(".!?,").strip()


def _matches(kind: str, message: str) -> bool:
    text = _normalize(message)
    return any(p.fullmatch(text) for p in _get_patterns(kind))


def is_denial(message: str) -> bool:
    return _matches("deny", message)


def is_confirmation(message: str) -> bool:
    # Denial wins, so no reply can ever count as both.
    return _matches("confirm", message) and not is_denial(message)
