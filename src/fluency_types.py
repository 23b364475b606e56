"""Typed structures for verbal fluency task configuration and results.

Defines TypedDict schemas for:
- TimedPrimeConfig: One scheduled prime word (word + start time in seconds)
- TrialConfig: One category round and its prime-word strategy
- ParticipantInfo: User demographic information
- LayoutConfig: Visual layout parameters
- SequenceConfig: Overall experiment sequence
- SubmissionRow / PrimeRow / ResultPayload: Data handed to the results table
"""
from __future__ import annotations

from typing import TypedDict


class TimedPrimeConfig(TypedDict):
    word: str
    start_time: float

class TrialConfig(TypedDict, total=False):
    category: str
    duration_ms: int
    # 'none' | 'timed' | 'counted'
    prime_mode: str
    # list[TimedPrimeConfig] for 'timed', list[str] for 'counted'
    prime_words: list
    threshold_range: list[int]
    exposure_ms: int
    trim_input: bool

class ParticipantInfo(TypedDict, total=False):
    participant_id: str
    age: str
    gender: str
    session: str
    notes: str

class LayoutConfig(TypedDict, total=False):
    # Fonts
    font_main: str
    # Instruction screen
    instruction_center_y: float
    instruction_line_height: float
    instruction_line_spacing: float
    instruction_prompt_y: float
    # Trial screen
    category_y: float
    category_height: float
    prime_y: float
    prime_height: float
    prime_color: str
    input_y: float
    input_width: float
    input_height: float
    input_text_height: float
    input_fill_enabled: object
    input_fill_disabled: object
    # Results screen
    results_text_height: float
    # Misc
    debug_mode: bool
    debug_trial_duration_ms: int

class SequenceConfig(TypedDict, total=False):
    welcome: str
    tutorial: str
    trials: list[TrialConfig]

class SubmissionRow(TypedDict):
    word: str
    time: int

class PrimeRow(TypedDict):
    word: str
    appeared_at: int
    disappeared_at: int | None

class ResultPayload(TypedDict):
    category: str
    prime_mode: str
    duration_ms: int
    words_list: list[SubmissionRow]
    number_of_words: int
    prime_words_shown: list[PrimeRow]
