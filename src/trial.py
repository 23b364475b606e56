"""Trial lifecycle: per-trial state created at load and frozen at finish.

Any host runner (the PsychoPy TrialRunner or the headless harness) drives a
trial through two calls:

    handle = on_trial_start(config, host)
    ...  # host feeds keys to handle.collector and runs host.timers
    payload = on_trial_end(handle)

A host provides:
    get_time()          -> float seconds
    timers              -> TimerQueue bound to the same clock
    find_element(name)  -> the surface registered under that name, or None

No state outlives its trial: the handle owns the submissions, the prime
scheduler and every timer it registered.
"""
from __future__ import annotations

import logging
import random
from typing import Any, Callable, Protocol

from fluency_types import ResultPayload, TrialConfig
from models import Submission, TrialTiming
from prime_scheduler import DEFAULT_THRESHOLD_RANGE, EXPOSURE_MS, build_scheduler
from response_collector import ResponseCollector
from surfaces import MissingElementError, TextDisplay, TextInputBuffer
from timers import TimerHandle, TimerQueue

logger = logging.getLogger(__name__)

INPUT_ELEMENT = 'input_box'
PRIME_ELEMENT = 'prime_word'
DEFAULT_DURATION_MS = 60000


class TrialHost(Protocol):
    timers: TimerQueue

    def get_time(self) -> float: ...

    def find_element(self, name: str) -> Any: ...


class TrialHandle:
    """Everything one running trial owns."""

    def __init__(
        self,
        config: TrialConfig,
        timing: TrialTiming,
        collector: ResponseCollector,
        scheduler: Any,
        timers: TimerQueue,
        display: TextDisplay,
        input_surface: TextInputBuffer,
    ) -> None:
        self.config = config
        self.timing = timing
        self.collector = collector
        self.scheduler = scheduler
        self.timers = timers
        self.display = display
        self.input_surface = input_surface
        self.deadline_timer: TimerHandle | None = None
        self.finished = False
        self.payload: ResultPayload | None = None

    @property
    def submissions(self) -> list[Submission]:
        return self.collector.submissions

    @property
    def category(self) -> str:
        return self.config.get('category', '')

    def expired(self) -> bool:
        return self.finished or self.timing.expired(self.timers.get_time())


def _lookup(host: TrialHost, name: str, kind: type) -> Any:
    element = host.find_element(name)
    if element is None:
        raise MissingElementError(f"trial element '{name}' not found")
    if not isinstance(element, kind):
        raise MissingElementError(
            f"trial element '{name}' is a {type(element).__name__}, expected {kind.__name__}"
        )
    return element


def on_trial_start(
    config: TrialConfig,
    host: TrialHost,
    rng: random.Random | None = None,
    on_deadline: Callable[[TrialHandle], None] | None = None,
) -> TrialHandle:
    """Create the per-trial state and attach it to the host's surfaces.

    Args:
        config: Trial configuration (category, duration, prime settings)
        host: Host runner exposing clock, timers and named elements
        rng: Random source for counted primes (seed for reproducibility)
        on_deadline: Called with the handle when the trial duration elapses

    Returns:
        TrialHandle for the running trial

    Raises:
        MissingElementError: if the input box or prime display is missing
    """
    input_surface = _lookup(host, INPUT_ELEMENT, TextInputBuffer)
    display = _lookup(host, PRIME_ELEMENT, TextDisplay)
    input_surface.clear()
    input_surface.enable()
    display.blank()

    timing = TrialTiming()
    timing.initialize(host.get_time(), int(config.get('duration_ms', DEFAULT_DURATION_MS)))

    collector = ResponseCollector(
        input_surface,
        timing,
        submissions=[],
        get_time=host.get_time,
        trim_input=bool(config.get('trim_input', True)),
    )
    scheduler = build_scheduler(
        config.get('prime_mode', 'none'),
        list(config.get('prime_words', [])),
        display,
        input_surface,
        host.timers,
        timing,
        threshold_range=config.get('threshold_range', DEFAULT_THRESHOLD_RANGE),
        exposure_ms=int(config.get('exposure_ms', EXPOSURE_MS)),
        rng=rng,
    )
    if scheduler.mode == 'counted':
        collector.add_listener(scheduler.on_submission)

    handle = TrialHandle(config, timing, collector, scheduler, host.timers, display, input_surface)
    if on_deadline is not None:
        handle.deadline_timer = host.timers.call_later(
            timing.duration_ms / 1000.0, lambda: on_deadline(handle)
        )
    scheduler.start()
    logger.info(
        "Trial '%s' started (%d ms, primes: %s)",
        handle.category, timing.duration_ms, scheduler.mode,
    )
    return handle


def on_trial_end(handle: TrialHandle) -> ResultPayload:
    """Stop the trial's timers, release its surfaces and return its data.

    Safe to call more than once; later calls return the same payload.
    """
    if handle.finished and handle.payload is not None:
        return handle.payload
    handle.finished = True
    handle.scheduler.stop()
    if handle.deadline_timer is not None:
        handle.deadline_timer.cancel()
    handle.input_surface.clear()
    handle.input_surface.enable()
    handle.display.blank()

    submissions = list(handle.submissions)
    handle.payload = {
        'category': handle.category,
        'prime_mode': handle.scheduler.mode,
        'duration_ms': handle.timing.duration_ms,
        'words_list': [s.as_row() for s in submissions],
        'number_of_words': len(submissions),
        'prime_words_shown': [r.as_row() for r in handle.scheduler.records],
    }
    logger.info(
        "Trial '%s' finished: %d words, %d primes shown",
        handle.category, len(submissions), len(handle.scheduler.records),
    )
    return handle.payload
