"""ResponseCollector: turns Enter presses on the input surface into timed Submissions."""
from __future__ import annotations

import logging
from typing import Callable, Mapping

from models import Submission, TrialTiming
from surfaces import TextInputBuffer
from utils import is_blank_submission

logger = logging.getLogger(__name__)

SUBMIT_KEYS = ('return', 'num_enter')


class ResponseCollector:
    """Captures discrete word submissions for one trial.

    Each accepted submission is appended to the trial-owned list, the input
    surface is cleared, and listeners (the counted prime scheduler) are told.
    Blank submissions, submissions while the input is locked and submissions
    after the trial deadline leave no trace.
    """

    def __init__(
        self,
        input_surface: TextInputBuffer,
        timing: TrialTiming,
        submissions: list[Submission],
        get_time: Callable[[], float],
        trim_input: bool = True,
    ) -> None:
        """Initialize collector.

        Args:
            input_surface: The trial's text entry control
            timing: Trial timing (start reference and deadline)
            submissions: Trial-owned list that receives Submissions (mutated in-place)
            get_time: Host clock function (seconds)
            trim_input: Strip whitespace before the emptiness check and recording
        """
        self.input_surface = input_surface
        self.timing = timing
        self.submissions = submissions
        self.get_time = get_time
        self.trim_input = trim_input
        self._listeners: list[Callable[[Submission], None]] = []

    def add_listener(self, listener: Callable[[Submission], None]) -> None:
        self._listeners.append(listener)

    def handle_key(self, key: str, modifiers: Mapping[str, bool] | None = None) -> Submission | None:
        """Route one key press: Enter submits, anything else edits the input."""
        if key in SUBMIT_KEYS:
            return self.submit()
        self.input_surface.apply_key(key, modifiers)
        return None

    def submit(self) -> Submission | None:
        """Submit the current input contents.

        Returns:
            The recorded Submission, or None if nothing was recorded
        """
        if not self.input_surface.enabled:
            return None
        contents = self.input_surface.text
        if is_blank_submission(contents, trim=self.trim_input):
            logger.debug("Ignoring blank submission %r", contents)
            return None
        now = self.get_time()
        if self.timing.expired(now):
            return None
        word = contents.strip() if self.trim_input else contents
        submission = Submission(word=word, time_offset_ms=self.timing.elapsed_ms(now))
        self.submissions.append(submission)
        self.input_surface.clear()
        logger.debug("Submission %r at %d ms", submission.word, submission.time_offset_ms)
        for listener in self._listeners:
            listener(submission)
        return submission
