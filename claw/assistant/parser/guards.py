"""Input guards for task creation.

Speech recognition hands over fragments ("add a", "um") and progressive
repeats ("buy milk", "buy milk and eggs") while the user is still talking.
These checks keep both out of the task list.
"""

from __future__ import annotations

import re
from difflib import SequenceMatcher

GARBAGE_PATTERNS: list[str] = [
    r"^(add|create|make|new|task|a|the|an|um|uh|like|so|and|or)$",
    r"^(add|create|make|new)\s+(a|an|the|task)?$",
    r"^(task|tasks)\s*(for)?$",
    r"^(i need|i want|i have|i should|i gotta|i got)\s*(to|a)?$",
    r"^(remind|reminder|set|start)\s*(me|a|the)?$",
    r"^(can you|could you|please|hey|ok|okay)\s*$",
    r"^[^a-z]*$",
]

SIMILARITY_THRESHOLD = 0.8
WORD_OVERLAP_THRESHOLD = 0.6

_compiled_garbage: list[re.Pattern] | None = None


def _get_garbage_patterns() -> list[re.Pattern]:
    global _compiled_garbage
    if _compiled_garbage is None:
        _compiled_garbage = [re.compile(p, re.IGNORECASE) for p in GARBAGE_PATTERNS]
    return _compiled_garbage


def is_garbage_input(description: str) -> bool:
    """True for speech fragments that can't be a real task."""
    trimmed = description.strip().lower()
    if len(trimmed) < 3:
        return True

    if any(p.search(trimmed) for p in _get_garbage_patterns()):
        return True

    # Needs at least one real word
    return not any(len(word) >= 3 and re.search(r"[a-z]", word) for word in trimmed.split())


def similarity(a: str, b: str) -> float:
    return SequenceMatcher(None, a.lower().strip(), b.lower().strip()).ratio()


def is_similar_task(name1: str, name2: str) -> bool:
    """Whether two task names are close enough to be the same task said twice."""
    a = name1.lower().strip()
    b = name2.lower().strip()

    if a == b:
        return True

    # Progressive duplicates: "buy milk" then "buy milk and eggs"
    if a in b or b in a:
        return True

    if SequenceMatcher(None, a, b).ratio() >= SIMILARITY_THRESHOLD:
        return True

    words_a = {w for w in a.split() if len(w) > 2}
    words_b = {w for w in b.split() if len(w) > 2}
    if words_a and words_b:
        overlap = len(words_a & words_b) / min(len(words_a), len(words_b))
        if overlap >= WORD_OVERLAP_THRESHOLD:
            return True

    return False
