"""TrialRunner: the PsychoPy host for a single fluency trial.

Responsibilities:
- Owns the trial's surfaces and timer queue (scoped to one run_trial call)
- Polls the keyboard each frame and routes keys to the ResponseCollector
- Fires due timers on core.getTime so prime polls and exposures run in-frame
- Ends the trial exactly at its fixed duration, regardless of input
"""
from __future__ import annotations

import random
from typing import Any

from psychopy import core, event

from fluency_types import ResultPayload, TrialConfig
from surfaces import TextDisplay, TextInputBuffer
from timers import TimerQueue
from trial import INPUT_ELEMENT, PRIME_ELEMENT, on_trial_end, on_trial_start


class TrialRunner:

    def __init__(self, win: Any, renderer: Any, rng: random.Random | None = None) -> None:
        """Initialize trial runner.

        Args:
            win: PsychoPy window instance
            renderer: Renderer instance for drawing
            rng: Random source shared across trials for counted primes
        """
        self.win = win
        self.renderer = renderer
        self.rng = rng
        self.timers: TimerQueue | None = None
        self.elements: dict[str, Any] = {}

    # TrialHost interface
    def get_time(self) -> float:
        return core.getTime()

    def find_element(self, name: str) -> Any:
        return self.elements.get(name)

    def run_trial(self, config: TrialConfig) -> ResultPayload:
        """Run one trial until its duration elapses and return its payload."""
        # Fresh surfaces and timers per trial; nothing carries over
        self.timers = TimerQueue(core.getTime)
        self.elements = {
            INPUT_ELEMENT: TextInputBuffer(),
            PRIME_ELEMENT: TextDisplay(),
        }
        event.clearEvents()
        handle = on_trial_start(config, self, rng=self.rng)
        try:
            while not handle.expired():
                for key, modifiers in event.getKeys(modifiers=True):
                    handle.collector.handle_key(key, modifiers)
                self.timers.run_due()
                self.renderer.draw_trial(handle.category, handle.display, handle.input_surface)
                self.win.flip()
        finally:
            payload = on_trial_end(handle)
            self.timers.cancel_all()
            self.timers = None
            self.elements = {}
        return payload
