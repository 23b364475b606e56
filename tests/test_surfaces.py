import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from surfaces import BLANK_PRIME, TextDisplay, TextInputBuffer  # noqa: E402


class TestTextInputBuffer(unittest.TestCase):
    def test_letters_space_and_punctuation(self):
        box = TextInputBuffer()
        for key in ['p', 'o', 'l', 'a', 'r', 'space', 'b', 'e', 'a', 'r', 'apostrophe', 's']:
            box.apply_key(key)
        self.assertEqual(box.text, "polar bear's")

    def test_shift_and_capslock(self):
        box = TextInputBuffer()
        box.apply_key('a', {'shift': True})
        box.apply_key('b', {'capslock': True})
        box.apply_key('minus', {'shift': True})
        self.assertEqual(box.text, 'AB_')

    def test_backspace_on_empty(self):
        box = TextInputBuffer()
        self.assertFalse(box.apply_key('backspace'))
        self.assertEqual(box.text, '')

    def test_unknown_keys_ignored(self):
        box = TextInputBuffer()
        for key in ['lshift', 'left', 'f1', 'tab']:
            self.assertFalse(box.apply_key(key))
        self.assertEqual(box.text, '')

    def test_disabled_drops_keys(self):
        box = TextInputBuffer('ca')
        box.disable()
        self.assertFalse(box.apply_key('t'))
        self.assertFalse(box.apply_key('backspace'))
        self.assertEqual(box.text, 'ca')

    def test_long_text_is_not_truncated(self):
        box = TextInputBuffer()
        for key in 'a' * 120:
            self.assertTrue(box.apply_key(key))
        self.assertEqual(len(box.text), 120)

    def test_shift_inverts_capslock(self):
        box = TextInputBuffer()
        box.apply_key('a', {'shift': True, 'capslock': True})
        box.apply_key('b', {'shift': False, 'capslock': True})
        box.apply_key('c', {'shift': False, 'capslock': False})
        self.assertEqual(box.text, 'aBc')

    def test_digit_row(self):
        box = TextInputBuffer()
        box.apply_key('1')
        box.apply_key('1', {'shift': True})
        box.apply_key('8', {'shift': True})
        # Caps lock leaves digits alone
        box.apply_key('0', {'capslock': True})
        self.assertEqual(box.text, '1!*0')


class TestTextDisplay(unittest.TestCase):
    def test_replaces_content_wholesale(self):
        display = TextDisplay()
        self.assertEqual(display.text, BLANK_PRIME)
        display.set_text('Arctic')
        display.blank()
        self.assertEqual(display.text, BLANK_PRIME)
        self.assertEqual(display.history, ['Arctic', BLANK_PRIME])


if __name__ == '__main__':
    unittest.main()
