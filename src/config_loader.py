"""Configuration loader for the verbal fluency task.

Separately loads sequence (configs/sequence.json) and layout (configs/layout.json),
with external override precedence for layout when running as a packaged exe.
"""
from __future__ import annotations

import json
import os
import sys
import warnings
from typing import cast


def get_base_dir() -> str:
    """Return base directory for read-only resources (configs).

    Note: In PyInstaller onefile, resources are unpacked to a temporary
    extraction directory (sys._MEIPASS).
    """
    meipass = getattr(sys, '_MEIPASS', None)
    if meipass and os.path.isdir(meipass):
        return meipass
    # Onedir: use the executable directory so bundled folders like 'configs/' work
    if getattr(sys, 'frozen', False):
        return os.path.dirname(sys.executable)
    # Normal dev mode: project root (src/..)
    return os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def get_exe_override_path(rel_path: str) -> str | None:
    """When running as a frozen exe, return the override path next to the exe.

    Example: rel_path='configs/layout.json' -> '<exe_dir>/configs/layout.json'
    Returns None if not frozen.
    """
    if getattr(sys, 'frozen', False):
        return os.path.join(os.path.dirname(sys.executable), rel_path)
    return None


# Module-level constants
BASE_DIR = get_base_dir()
SEQUENCE_DEFAULT_PATH = os.path.join(BASE_DIR, 'configs', 'sequence.json')
LAYOUT_DEFAULT_PATH = os.path.join(BASE_DIR, 'configs', 'layout.json')

PRIME_MODES = ('none', 'timed', 'counted')


from fluency_types import LayoutConfig, SequenceConfig, TrialConfig

def validate_trial(trial: TrialConfig) -> TrialConfig:
    """Check one trial config; raise ValueError on anything a trial cannot run with.

    Returns:
        The same dict, for chaining
    """
    category = trial.get('category', '?')
    duration = trial.get('duration_ms', 60000)
    if not isinstance(duration, int) or duration <= 0:
        raise ValueError(f"trial '{category}': duration_ms must be a positive integer, got {duration!r}")

    mode = trial.get('prime_mode', 'none')
    if mode not in PRIME_MODES:
        raise ValueError(f"trial '{category}': unknown prime_mode {mode!r} (expected one of {PRIME_MODES})")

    words = trial.get('prime_words', [])
    if mode == 'timed':
        for entry in words:
            if not isinstance(entry, dict) or 'word' not in entry or 'start_time' not in entry:
                raise ValueError(f"trial '{category}': timed prime entries need 'word' and 'start_time'")
            if float(entry['start_time']) < 0:
                raise ValueError(f"trial '{category}': negative start_time for {entry['word']!r}")
    elif mode == 'counted':
        if not all(isinstance(w, str) for w in words):
            raise ValueError(f"trial '{category}': counted prime_words must be strings")
        rng = trial.get('threshold_range', [3, 6])
        if len(rng) != 2 or int(rng[0]) < 1 or int(rng[1]) < int(rng[0]):
            raise ValueError(f"trial '{category}': invalid threshold_range {rng!r}")

    exposure = trial.get('exposure_ms', 500)
    if not isinstance(exposure, int) or exposure <= 0:
        raise ValueError(f"trial '{category}': exposure_ms must be a positive integer, got {exposure!r}")
    return trial


def load_sequence(path: str | None = None) -> SequenceConfig:
    """Load and validate sequence.json configuration.

    Args:
        path: Alternative sequence file (defaults to configs/sequence.json)

    Returns:
        SequenceConfig: welcome/tutorial text and the trial list.
    """
    with open(path or SEQUENCE_DEFAULT_PATH, 'r', encoding='utf-8') as f:
        data = json.load(f)
    sequence = cast(SequenceConfig, data)
    for trial in sequence.get('trials', []):
        validate_trial(trial)
    return sequence


def load_layout(path: str | None = None) -> LayoutConfig:
    """Load layout.json with external-override precedence and parameter merging.

    Search order:
    1) Load defaults from <BASE_DIR>/configs/layout.json (must exist)
    2) If running as frozen exe, load overrides from <exe_dir>/configs/layout.json
    3) Merge: override parameters take precedence, missing ones use defaults
    """
    default_path = path or LAYOUT_DEFAULT_PATH
    if not os.path.exists(default_path):
        raise RuntimeError(
            f"Default layout config not found: {default_path}\n"
            "This base configuration file is required."
        )

    with open(default_path, 'r', encoding='utf-8') as f:
        layout_raw = json.load(f)
    layout: LayoutConfig = cast(LayoutConfig, layout_raw)

    override_path = get_exe_override_path(os.path.join('configs', 'layout.json'))
    if override_path and os.path.exists(override_path):
        try:
            with open(override_path, 'r', encoding='utf-8') as f:
                overrides_raw = json.load(f)
            layout.update(cast(LayoutConfig, overrides_raw))
        except (OSError, ValueError) as e:
            # Malformed override: warn and keep defaults
            warnings.warn(
                f"External layout config is malformed, using defaults: {override_path}\nError: {e}"
            )

    return layout


def apply_debug_durations(sequence: SequenceConfig, duration_ms: int) -> SequenceConfig:
    """Return a copy of sequence with every trial shortened to duration_ms.

    Timed prime entries past the new deadline are dropped.
    """
    trials = []
    for trial in sequence.get('trials', []):
        short = dict(trial)
        short['duration_ms'] = duration_ms
        if short.get('prime_mode') == 'timed':
            short['prime_words'] = [
                e for e in short.get('prime_words', [])
                if float(e['start_time']) * 1000 < duration_ms
            ]
        trials.append(cast(TrialConfig, short))
    out = cast(SequenceConfig, dict(sequence))
    out['trials'] = trials
    return out
