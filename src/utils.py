from __future__ import annotations
"""Utility helpers for the verbal fluency experiment."""
from typing import Iterable, List

from fluency_types import TimedPrimeConfig
from models import PrimeWordEntry


def normalize_word(text: str) -> str:
    """Canonical form used to compare a typed word against prime words."""
    return (text or '').strip().lower()


def is_blank_submission(text: str, trim: bool = True) -> bool:
    """Return True when a submission carries no word.

    Args:
        text: Raw input surface contents
        trim: When True whitespace-only text counts as empty; otherwise only ''
    """
    if not isinstance(text, str):
        return True
    return (text.strip() if trim else text) == ''


def build_prime_stack(entries: Iterable[TimedPrimeConfig]) -> List[PrimeWordEntry]:
    """Build a time-indexed prime stack sorted by descending start time.

    The soonest entry ends up last, so the scheduler pops from the end. Entries
    sharing a start time keep their configured order when popped.

    Args:
        entries: Config dicts with 'word' and 'start_time' (seconds)

    Returns:
        List of PrimeWordEntry, latest first
    """
    stack = [
        PrimeWordEntry(word=str(e['word']), start_time_s=float(e['start_time']))
        for e in entries
    ]
    stack.reverse()
    # Stable sort on the reversed list keeps ties in configured pop order
    stack.sort(key=lambda entry: entry.start_time_s, reverse=True)
    return stack
