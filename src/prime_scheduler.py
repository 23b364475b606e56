"""Prime-word schedulers: decide when and which prime word is flashed.

Two strategies attach to a trial:
- TimedPrimeScheduler: a fixed list of (word, start time) entries, polled every
  100 ms and popped from a stack sorted by descending start time.
- CountedPrimeScheduler: after a random number of accepted submissions, one
  unguessed word from a pool is flashed for a fixed exposure window while the
  input surface is locked.

Both own only timers registered on the trial's TimerQueue and cancel them in
stop(), so nothing outlives the trial that created it.
"""
from __future__ import annotations

import logging
import random
from typing import Iterable, Sequence

from models import PrimeDisplayRecord, PrimeWordEntry, Submission, TrialTiming
from surfaces import BLANK_PRIME, TextDisplay, TextInputBuffer
from timers import TimerHandle, TimerQueue
from utils import build_prime_stack, normalize_word

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 100
EXPOSURE_MS = 500
DEFAULT_THRESHOLD_RANGE = (3, 6)


class NullPrimeScheduler:
    """Scheduler for trials without prime words."""

    mode = 'none'

    def __init__(self) -> None:
        self.records: list[PrimeDisplayRecord] = []

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass


class TimedPrimeScheduler:
    """Shows prime words at fixed offsets from trial start.

    Entries are held as a stack sorted by descending start time, so the last
    element is always the soonest. Every entry due by a poll is shown on that
    poll, so coincident entries each get a record and only the last stays up.
    A literal '-' entry blanks the display; it is a content change, not a
    prime, and produces no record.
    """

    mode = 'timed'

    def __init__(
        self,
        stack: Sequence[PrimeWordEntry],
        display: TextDisplay,
        timers: TimerQueue,
        timing: TrialTiming,
        poll_interval_ms: int = POLL_INTERVAL_MS,
    ) -> None:
        self.stack = list(stack)
        self.display = display
        self.timers = timers
        self.timing = timing
        self.poll_interval_ms = poll_interval_ms
        self.records: list[PrimeDisplayRecord] = []
        self._poll: TimerHandle | None = None
        self._deadline: TimerHandle | None = None
        self._showing: PrimeDisplayRecord | None = None

    def start(self) -> None:
        self._poll = self.timers.call_every(self.poll_interval_ms / 1000.0, self._tick)
        remaining = self.timing.remaining_seconds(self.timers.get_time())
        self._deadline = self.timers.call_later(remaining, self.stop)

    def stop(self) -> None:
        for handle in (self._poll, self._deadline):
            if handle is not None:
                handle.cancel()
        self._poll = self._deadline = None

    @property
    def running(self) -> bool:
        return self._poll is not None

    def _tick(self) -> None:
        now = self.timers.get_time()
        if self.timing.expired(now):
            self.stop()
            return
        if not self.stack:
            return
        elapsed = self.timing.elapsed_ms(now)
        # Entries sharing a due time all show on this tick; the last one stays up
        while self.stack and elapsed >= self.stack[-1].start_ms:
            entry = self.stack.pop()
            self._show(entry.word, elapsed)

    def _show(self, word: str, elapsed: int) -> None:
        if self._showing is not None:
            self._showing.disappeared_at_ms = elapsed
            self._showing = None
        self.display.set_text(word)
        if word == BLANK_PRIME:
            logger.debug("Prime display blanked at %d ms", elapsed)
            return
        self._showing = PrimeDisplayRecord(word=word, appeared_at_ms=elapsed)
        self.records.append(self._showing)
        logger.info("Timed prime %r shown at %d ms", word, elapsed)


class Exposure:
    """An in-progress prime exposure: its record and the timer that ends it."""

    def __init__(self, record: PrimeDisplayRecord, timer: TimerHandle) -> None:
        self.record = record
        self.timer = timer

    def cancel(self) -> None:
        self.timer.cancel()


class CountedPrimeScheduler:
    """Flashes a random unguessed pool word after every N accepted submissions.

    N (the countdown) is drawn uniformly from the closed threshold range at
    trial start and again after each display. Each accepted submission
    decrements the countdown exactly once. A submission matching a pool word
    (trimmed, case-insensitive) removes that word first, so guessed words are
    never flashed. When the countdown hits zero with an empty pool nothing is
    shown for the rest of the trial.
    """

    mode = 'counted'

    def __init__(
        self,
        pool: Iterable[str],
        display: TextDisplay,
        input_surface: TextInputBuffer,
        timers: TimerQueue,
        timing: TrialTiming,
        threshold_range: Sequence[int] = DEFAULT_THRESHOLD_RANGE,
        exposure_ms: int = EXPOSURE_MS,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            pool: Candidate prime words (order irrelevant, duplicates collapse)
            display: Prime word display target
            input_surface: Input control locked during exposure
            timers: Trial timer queue
            timing: Trial timing (start reference)
            threshold_range: Closed [low, high] range for the countdown draw
            exposure_ms: How long a prime stays visible with input locked
            rng: Random source (seed it for reproducible runs)
        """
        low, high = int(threshold_range[0]), int(threshold_range[1])
        if low < 1 or high < low:
            raise ValueError(f"invalid threshold range {list(threshold_range)}")
        self.pool: dict[str, str] = {}
        for word in pool:
            self.pool.setdefault(normalize_word(word), word)
        self.display = display
        self.input_surface = input_surface
        self.timers = timers
        self.timing = timing
        self.threshold_range = (low, high)
        self.exposure_ms = exposure_ms
        self.rng = rng or random.Random()
        self.records: list[PrimeDisplayRecord] = []
        self.guessed: list[str] = []
        self.responses_until_prime = self.draw_threshold()
        self.exposure: Exposure | None = None

    def draw_threshold(self) -> int:
        return self.rng.randint(*self.threshold_range)

    def start(self) -> None:
        logger.debug(
            "Counted primes armed: %d words, first trigger after %d responses",
            len(self.pool), self.responses_until_prime,
        )

    def stop(self) -> None:
        if self.exposure is not None:
            self.exposure.cancel()
            logger.debug("Exposure of %r cut off by trial end", self.exposure.record.word)
            self.exposure = None

    def on_submission(self, submission: Submission) -> None:
        """Update pool and countdown for one accepted submission."""
        key = normalize_word(submission.word)
        if key in self.pool:
            word = self.pool.pop(key)
            self.guessed.append(word)
            logger.info("Prime word %r guessed; removed from pool", word)

        self.responses_until_prime -= 1
        if self.responses_until_prime != 0:
            return
        if not self.pool:
            logger.info("Prime pool exhausted; no more primes this trial")
            return
        self.begin_exposure()

    def begin_exposure(self) -> Exposure:
        """Show a random pool word, lock input, and schedule the end of exposure."""
        key = self.rng.choice(sorted(self.pool))
        word = self.pool.pop(key)
        now = self.timers.get_time()
        record = PrimeDisplayRecord(word=word, appeared_at_ms=self.timing.elapsed_ms(now))
        self.records.append(record)
        self.display.set_text(word)
        self.input_surface.disable()
        timer = self.timers.call_later(self.exposure_ms / 1000.0, self._end_exposure)
        self.exposure = Exposure(record, timer)
        logger.info("Counted prime %r shown at %d ms", word, record.appeared_at_ms)
        return self.exposure

    def _end_exposure(self) -> None:
        exposure = self.exposure
        if exposure is None:
            return
        self.exposure = None
        now = self.timers.get_time()
        exposure.record.disappeared_at_ms = self.timing.elapsed_ms(now)
        self.display.blank()
        self.input_surface.enable()
        self.responses_until_prime = self.draw_threshold()
        logger.debug(
            "Exposure of %r ended at %d ms; next trigger after %d responses",
            exposure.record.word, exposure.record.disappeared_at_ms, self.responses_until_prime,
        )


def build_scheduler(
    mode: str,
    prime_words: list,
    display: TextDisplay,
    input_surface: TextInputBuffer,
    timers: TimerQueue,
    timing: TrialTiming,
    threshold_range: Sequence[int] = DEFAULT_THRESHOLD_RANGE,
    exposure_ms: int = EXPOSURE_MS,
    rng: random.Random | None = None,
):
    """Create the scheduler for a trial's prime mode ('none', 'timed' or 'counted')."""
    if mode == 'none':
        return NullPrimeScheduler()
    if mode == 'timed':
        return TimedPrimeScheduler(build_prime_stack(prime_words), display, timers, timing)
    if mode == 'counted':
        return CountedPrimeScheduler(
            prime_words, display, input_surface, timers, timing,
            threshold_range=threshold_range, exposure_ms=exposure_ms, rng=rng,
        )
    raise ValueError(f"unknown prime mode '{mode}'")
