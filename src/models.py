from __future__ import annotations
"""Data models for the verbal fluency experiment."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Submission:
    """One accepted word, timed relative to its own trial's start."""
    word: str
    time_offset_ms: int

    def as_row(self) -> dict:
        return {'word': self.word, 'time': self.time_offset_ms}


@dataclass(frozen=True)
class PrimeWordEntry:
    """A time-indexed prime word (start time in seconds from trial start)."""
    word: str
    start_time_s: float

    @property
    def start_ms(self) -> int:
        return int(round(self.start_time_s * 1000))


@dataclass
class PrimeDisplayRecord:
    """One prime word shown on screen.

    Attributes:
        word: The word displayed
        appeared_at_ms: Offset when it appeared
        disappeared_at_ms: Offset when it was cleared/replaced (None if it was
            still on screen when the trial ended)
    """
    word: str
    appeared_at_ms: int
    disappeared_at_ms: Optional[int] = None

    def as_row(self) -> dict:
        return {
            'word': self.word,
            'appeared_at': self.appeared_at_ms,
            'disappeared_at': self.disappeared_at_ms,
        }


class TrialTiming:
    """Encapsulates timing state for a single trial.

    Attributes:
        start_time: Trial start timestamp (absolute clock seconds)
        duration_ms: Fixed trial duration
    """
    def __init__(self):
        self.start_time: Optional[float] = None
        self.duration_ms: int = 0

    def initialize(self, start_time: float, duration_ms: int) -> None:
        """Set start time and fixed duration.

        Args:
            start_time: Current timestamp from the host clock
            duration_ms: Trial duration in milliseconds
        """
        self.start_time = start_time
        self.duration_ms = int(duration_ms)

    def is_initialized(self) -> bool:
        return self.start_time is not None

    @property
    def deadline(self) -> Optional[float]:
        if self.start_time is None:
            return None
        return self.start_time + self.duration_ms / 1000.0

    def elapsed_ms(self, now: float) -> int:
        if self.start_time is None:
            return 0
        # 1e-6 ms absorbs float noise from clock arithmetic
        return max(0, int((now - self.start_time) * 1000 + 1e-6))

    def remaining_seconds(self, now: float) -> float:
        if self.deadline is None:
            return 0.0
        return max(0.0, self.deadline - now)

    def expired(self, now: float) -> bool:
        return self.elapsed_ms(now) >= self.duration_ms
