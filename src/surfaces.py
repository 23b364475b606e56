"""Input and display surfaces shared by every trial host.

The PsychoPy runner draws these each frame; the headless harness inspects them
directly. A trial looks its surfaces up by name at load time and a missing one
is fatal for that trial.
"""
from __future__ import annotations

from typing import Mapping

BLANK_PRIME = '-'

# PsychoPy key names that map to a literal character
_PUNCTUATION_KEYS = {
    'space': ' ',
    'minus': '-',
    'apostrophe': "'",
    'comma': ',',
    'period': '.',
    'slash': '/',
    'semicolon': ';',
}
_SHIFTED_PUNCTUATION = {
    'minus': '_',
    'apostrophe': '"',
    'slash': '?',
    'semicolon': ':',
}
_SHIFTED_DIGITS = dict(zip('1234567890', '!@#$%^&*()'))


class MissingElementError(RuntimeError):
    """A trial's display target or input surface does not exist."""


class TextInputBuffer:
    """Single-line text entry control.

    Enter handling lives in ResponseCollector; this buffer only edits text.
    While disabled it drops every key, mirroring a locked textarea.
    """

    def __init__(self, text: str = '') -> None:
        self.text = text
        self.enabled = True

    def clear(self) -> None:
        self.text = ''

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def apply_key(self, key: str, modifiers: Mapping[str, bool] | None = None) -> bool:
        """Apply one PsychoPy key name to the buffer.

        Args:
            key: Key name as reported by event.getKeys (e.g. 'a', 'space', 'backspace')
            modifiers: Modifier state dict from event.getKeys(modifiers=True)

        Returns:
            True if the text changed
        """
        if not self.enabled:
            return False
        mods = modifiers or {}
        shift = bool(mods.get('shift'))
        # Caps lock only affects letters, and shift inverts it
        upper = shift != bool(mods.get('capslock'))
        if key == 'backspace':
            if not self.text:
                return False
            self.text = self.text[:-1]
            return True
        if len(key) == 1 and key.isalpha():
            self.text += key.upper() if upper else key
            return True
        if key in _SHIFTED_DIGITS:
            self.text += _SHIFTED_DIGITS[key] if shift else key
            return True
        if len(key) == 1 and key.isprintable():
            self.text += key
            return True
        if key in _PUNCTUATION_KEYS:
            char = _SHIFTED_PUNCTUATION.get(key) if shift else None
            self.text += char or _PUNCTUATION_KEYS[key]
            return True
        return False


class TextDisplay:
    """Text-bearing element whose content is replaced wholesale."""

    def __init__(self, text: str = BLANK_PRIME) -> None:
        self.text = text
        self.history: list[str] = []

    def set_text(self, text: str) -> None:
        self.text = text
        self.history.append(text)

    def blank(self) -> None:
        self.set_text(BLANK_PRIME)

