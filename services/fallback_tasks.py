import re
from typing import List, Optional

from schemas.task import Task

MAX_TITLE_LENGTH = 120
ELLIPSIS = "..."

FILLER_WORDS = frozenset({"oh", "uh", "um", "hmm", "huh", "hello", "hi", "hey", "test"})

_NON_WORD_RE = re.compile(r"[^\w\s'-]")
_WHITESPACE_RE = re.compile(r"\s+")

# Applied in order, each only when it matches at the start.
_BOILERPLATE_PREFIXES = (
    re.compile(r"^(add|create|set|make|new)\s+(a\s+)?(task|todo)\s+", re.IGNORECASE),
    re.compile(r"^(todo|to do)\s+", re.IGNORECASE),
    re.compile(r"^(remind me to|i need to|need to)\s+", re.IGNORECASE),
)


def normalize_transcript(transcript: str) -> str:
    cleaned = _NON_WORD_RE.sub(" ", transcript)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def fallback_tasks_from_transcript(transcript: Optional[str]) -> List[Task]:
    """
    Derive at most one task from a transcript without the language model.

    Used when model extraction returns no tasks for usable speech. Filler
    utterances ("um", "hello") and single short words ("ok") yield nothing.

    Args:
        transcript (Optional[str]): Recognized speech text

    Returns:
        List[Task]: Empty, or a single medium-priority task
    """
    if not transcript:
        return []

    cleaned = normalize_transcript(transcript)
    if not cleaned:
        return []

    if cleaned.lower() in FILLER_WORDS:
        return []

    title = cleaned
    for prefix in _BOILERPLATE_PREFIXES:
        title = prefix.sub("", title, count=1)
    title = title.strip()

    if not title:
        title = cleaned

    words = title.split()
    if not words:
        return []

    # Single short tokens are noise.
    if len(words) == 1 and len(words[0]) < 4:
        return []

    # Upper-casing can lengthen the title ("ß" -> "SS"), so it runs before truncation.
    title = title[0].upper() + title[1:]

    if len(title) > MAX_TITLE_LENGTH:
        title = title[:MAX_TITLE_LENGTH - len(ELLIPSIS)].rstrip() + ELLIPSIS

    return [Task(title=title, priority="medium", notes="")]
