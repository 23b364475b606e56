"""Verbal Fluency Task - Core Module

This module implements the complete fluency experiment flow with:
- A one-time welcome notice and a tutorial screen
- Timed category trials with free-text word entry
- Optional prime words (time-scheduled or response-count triggered)
- End-of-session results display

Architecture:
    - create_window(): Context manager for the PsychoPy window
    - FluencyTask: Main experiment class
"""
from __future__ import annotations

import logging
import random
from contextlib import contextmanager
from typing import cast

from psychopy import visual

from config_loader import apply_debug_durations
from fluency_types import LayoutConfig, ParticipantInfo, ResultPayload, SequenceConfig
from results_table import ResultsTable
from trial_runner import TrialRunner
from ui.renderer import Renderer

logger = logging.getLogger(__name__)

DEBUG_TRIAL_DURATION_MS = 10000


@contextmanager
def create_window(debug_mode: bool):
    """Context manager to create and cleanup a PsychoPy window.

    Args:
        debug_mode: When True, creates a windowed mode for faster debugging.
                    When False, creates a fullscreen window for experiments.

    Yields:
        visual.Window: The created PsychoPy window.
    """
    if debug_mode:
        win = visual.Window(size=(1280, 800), color='black', units='norm')
    else:
        win = visual.Window(fullscr=True, color='black', units='norm')
    try:
        yield win
    finally:
        win.close()


class FluencyTask:
    """Verbal fluency experiment controller.

    Manages the complete experiment lifecycle:
    1. Window creation (debug: 1280x800, normal: fullscreen)
    2. Welcome notice and tutorial
    3. Each category trial in sequence
    4. Results display
    5. Window cleanup

    Notes:
    - Window and UI components are local to run() scope
    - Trial payloads accumulate in self.results (in memory only)
    """

    def __init__(
        self,
        sequence: SequenceConfig,
        layout: LayoutConfig,
        participant_info: ParticipantInfo | None = None,
        seed: int | None = None,
    ) -> None:
        """Initialize task with configuration and participant info.

        Args:
            sequence: Welcome/tutorial text and trials from configs/sequence.json
            layout: UI layout parameters from configs/layout.json
            participant_info: Participant metadata (id, age, gender, etc.)
            seed: Seed for counted prime draws (None for a fresh seed)
        """
        self.participant_info = cast(ParticipantInfo, participant_info or {})
        self.layout = layout

        # Debug mode: layout flag OR participant_id == '0'
        pid = str(self.participant_info.get('participant_id', '')).strip()
        self.debug_mode = bool(self.layout.get('debug_mode', False) or (pid == '0'))
        if self.debug_mode:
            sequence = apply_debug_durations(
                sequence, int(layout.get('debug_trial_duration_ms', DEBUG_TRIAL_DURATION_MS))
            )
        self.sequence = sequence
        self.rng = random.Random(seed)
        self.results = ResultsTable(self.participant_info)

    def run(self) -> None:
        """Main entry point: create window → welcome → tutorial → trials → results."""
        with create_window(self.debug_mode) as win:
            renderer = Renderer(win, self.layout)
            runner = TrialRunner(win, renderer, rng=self.rng)

            welcome = self.sequence.get('welcome')
            if welcome:
                renderer.show_instruction(welcome)
            tutorial = self.sequence.get('tutorial')
            if tutorial:
                renderer.show_instruction(tutorial, prompt='Press ENTER to start.')

            for trial in self.sequence.get('trials', []):
                self.record(runner.run_trial(trial))

            renderer.show_results(self.results.render_table())
            renderer.show_completion()

    def record(self, payload: ResultPayload) -> None:
        index = self.results.add(payload)
        logger.info(
            "Recorded trial %d (%s): %d words",
            index, payload['category'], payload['number_of_words'],
        )
