"""Headless trial host driven by a virtual clock.

Runs trials without a window: text is typed straight into the input buffer,
time only moves when advance() is called, and every timer fires at exactly its
due time. Used by the test-suite and for dry-running a sequence config.
"""
from __future__ import annotations

import random
from typing import Any, Iterable

from fluency_types import ResultPayload, TrialConfig
from surfaces import TextDisplay, TextInputBuffer
from timers import TimerQueue
from trial import INPUT_ELEMENT, PRIME_ELEMENT, TrialHandle, on_trial_end, on_trial_start


class VirtualClock:
    """Controllable clock; call it like core.getTime."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = float(start)

    def __call__(self) -> float:
        return self.now

    def set(self, t: float) -> None:
        if t < self.now:
            raise ValueError(f"virtual clock cannot go backwards ({t} < {self.now})")
        self.now = t


class HeadlessHost:
    """TrialHost implementation over a VirtualClock."""

    def __init__(self, start: float = 0.0, rng: random.Random | None = None) -> None:
        self.clock = VirtualClock(start)
        self.timers = TimerQueue(self.clock)
        self.rng = rng
        self.elements: dict[str, Any] = {
            INPUT_ELEMENT: TextInputBuffer(),
            PRIME_ELEMENT: TextDisplay(),
        }
        self.handle: TrialHandle | None = None
        self.results: list[ResultPayload] = []

    def get_time(self) -> float:
        return self.clock()

    def find_element(self, name: str) -> Any:
        return self.elements.get(name)

    @property
    def input_box(self) -> TextInputBuffer:
        return self.elements[INPUT_ELEMENT]

    @property
    def prime_display(self) -> TextDisplay:
        return self.elements[PRIME_ELEMENT]

    # -- lifecycle -----------------------------------------------------------

    def start(self, config: TrialConfig) -> TrialHandle:
        self.handle = on_trial_start(config, self, rng=self.rng, on_deadline=self._deadline)
        return self.handle

    def _deadline(self, handle: TrialHandle) -> None:
        self.results.append(on_trial_end(handle))

    def finish(self) -> ResultPayload:
        """Run the trial to its deadline and return the payload."""
        handle = self._require_handle()
        if not handle.finished:
            self.advance_to(handle.timing.deadline)
        return on_trial_end(handle)

    def _require_handle(self) -> TrialHandle:
        if self.handle is None:
            raise RuntimeError("no trial has been started")
        return self.handle

    # -- time ----------------------------------------------------------------

    def advance_to(self, t: float) -> None:
        """Move the clock to t, firing every timer due on the way in order."""
        while True:
            due = self.timers.next_due()
            if due is None or due > t:
                break
            self.clock.set(max(due, self.clock()))
            self.timers.run_due()
        self.clock.set(t)

    def advance(self, ms: float) -> None:
        self.advance_to(self.clock() + ms / 1000.0)

    def advance_trial_to(self, offset_ms: float) -> None:
        """Advance to an offset relative to the current trial's start."""
        handle = self._require_handle()
        self.advance_to(handle.timing.start_time + offset_ms / 1000.0)

    # -- input ---------------------------------------------------------------

    def type(self, text: str) -> None:
        """Type text character by character (dropped while input is locked)."""
        handle = self._require_handle()
        for char in text:
            if char == ' ':
                handle.collector.handle_key('space')
            elif char.isupper():
                handle.collector.handle_key(char.lower(), {'shift': True})
            else:
                handle.collector.handle_key(char)

    def press_enter(self):
        return self._require_handle().collector.handle_key('return')

    def submit(self, text: str):
        """Replace the input contents with text and press Enter."""
        handle = self._require_handle()
        if handle.input_surface.enabled:
            handle.input_surface.text = text
        return self.press_enter()

    def run_trial(
        self,
        config: TrialConfig,
        script: Iterable[tuple[float, str]] = (),
    ) -> ResultPayload:
        """Run one trial end to end.

        Args:
            config: Trial configuration
            script: (offset_ms, text) submissions in non-decreasing offset order
        """
        self.start(config)
        for offset_ms, text in script:
            self.advance_trial_to(offset_ms)
            if self._require_handle().finished:
                break
            self.submit(text)
        return self.finish()
