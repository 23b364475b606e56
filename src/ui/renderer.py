"""Renderer: encapsulates all drawing primitives for the verbal fluency task.

All state (fonts, colors, positions) comes from the injected PsychoPy window
and layout dict. draw_* methods draw without flipping; show_* methods run their
own flip loop.
"""
from __future__ import annotations

from typing import Sequence

from psychopy import core, event, visual

from fluency_types import LayoutConfig
from surfaces import TextDisplay, TextInputBuffer

CONTINUE_KEYS = ['return', 'num_enter']


class Renderer:
    # =========================================================================
    # CONSTRUCTION
    # =========================================================================

    def __init__(self, win: visual.Window, layout: LayoutConfig, font_main: str | None = None):
        self.win = win
        self.layout = layout
        if font_main:
            self.layout['font_main'] = font_main
        self._category_stim = None
        self._prime_stim = None
        self._input_rect = None
        self._input_stim = None

    # =========================================================================
    # COMPLETE SCREEN FLOWS (show_* methods with internal flip loops)
    # =========================================================================

    def show_instruction(self, text: str, prompt: str = 'Press ENTER to continue.') -> None:
        """Blocking: Display an instruction screen until Enter is pressed."""
        lines = (text or '').split('\n')
        event.clearEvents()
        while True:
            self.draw_multiline(
                lines,
                center_y=self.layout['instruction_center_y'],
                line_height=self.layout['instruction_line_height'],
                spacing=self.layout['instruction_line_spacing'],
            )
            if prompt:
                visual.TextStim(
                    self.win, text=prompt, pos=(0, self.layout['instruction_prompt_y']),
                    height=self.layout['instruction_line_height'], color='white',
                    font=self.layout['font_main'],
                ).draw()
            self.win.flip()
            if event.getKeys(keyList=CONTINUE_KEYS):
                break

    def show_results(self, text: str) -> None:
        """Blocking: Display the results table text until Enter is pressed."""
        stim = visual.TextStim(
            self.win, text=text, pos=(0, 0), height=self.layout['results_text_height'],
            color='white', font=self.layout['font_main'], wrapWidth=1.9,
            alignText='left',
        )
        event.clearEvents()
        while not event.getKeys(keyList=CONTINUE_KEYS):
            stim.draw()
            self.win.flip()

    def show_completion(
        self,
        lines: Sequence[str] | None = None,
        colors: list[str] | None = None,
        seconds: float = 3.0,
    ) -> None:
        """Blocking: Render completion message for a given duration."""
        if lines is None:
            lines = ['All categories complete!', 'Thank you for taking part.']
        if colors is None:
            colors = ['green', 'white']
        end_time = core.getTime() + max(0.0, seconds)
        while core.getTime() < end_time:
            self.draw_multiline(lines, center_y=0.05, line_height=0.065, colors=colors, bold_idx={0})
            self.win.flip()

    # =========================================================================
    # ATOMIC DRAWING METHODS (draw_* - no flip, caller manages refresh)
    # =========================================================================

    def _ensure_trial_stims(self) -> None:
        """Create the reusable trial-screen stimuli on first use."""
        if self._category_stim is not None:
            return
        layout = self.layout
        self._category_stim = visual.TextStim(
            self.win, text='', pos=(0, layout['category_y']), height=layout['category_height'],
            color='white', font=layout['font_main'], bold=True,
        )
        self._prime_stim = visual.TextStim(
            self.win, text='', pos=(0, layout['prime_y']), height=layout['prime_height'],
            color=layout['prime_color'], font=layout['font_main'],
        )
        self._input_rect = visual.Rect(
            self.win, width=layout['input_width'], height=layout['input_height'],
            pos=(0, layout['input_y']), lineColor='white', lineWidth=2,
        )
        self._input_stim = visual.TextStim(
            self.win, text='', pos=(0, layout['input_y']), height=layout['input_text_height'],
            color='black', font=layout['font_main'], wrapWidth=layout['input_width'],
        )

    def draw_trial(self, category: str, display: TextDisplay, input_surface: TextInputBuffer) -> None:
        """Draw category heading, prime word and input box."""
        self._ensure_trial_stims()
        self._category_stim.text = f"Category: {category}" if category else ''
        self._category_stim.draw()
        self._prime_stim.text = display.text
        self._prime_stim.draw()
        self._input_rect.fillColor = (
            self.layout['input_fill_enabled'] if input_surface.enabled
            else self.layout['input_fill_disabled']
        )
        self._input_rect.draw()
        self._input_stim.text = input_surface.text + ('|' if input_surface.enabled else '')
        self._input_stim.draw()

    def draw_multiline(
        self,
        lines: Sequence[str],
        center_y: float,
        line_height: float,
        spacing: float = 1.5,
        colors: list[str] | None = None,
        bold_idx: set[int] | None = None,
        x: float = 0.0,
    ) -> None:
        """Draw centered multi-line text with optional colors and bold lines."""
        lines = list(lines or [])
        n = len(lines)
        if n == 0:
            return
        total = line_height * spacing * (n - 1) if n > 1 else 0.0
        start_y = center_y + total / 2.0
        for i, text in enumerate(lines):
            y = start_y - i * (line_height * spacing)
            color = (colors[i] if (colors and i < len(colors)) else 'white')
            stim = visual.TextStim(
                self.win, text=text or '', pos=(x, y), height=line_height,
                color=color, font=self.layout['font_main'],
                bold=bool(bold_idx and i in bold_idx),
            )
            stim.draw()
