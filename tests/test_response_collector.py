import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from harness import VirtualClock  # noqa: E402
from models import TrialTiming  # noqa: E402
from response_collector import ResponseCollector  # noqa: E402
from surfaces import TextInputBuffer  # noqa: E402


class TestResponseCollector(unittest.TestCase):
    def make(self, trim_input=True, start=10.0, duration_ms=60000):
        self.clock = VirtualClock(start)
        self.timing = TrialTiming()
        self.timing.initialize(self.clock(), duration_ms)
        self.box = TextInputBuffer()
        self.submissions = []
        self.heard = []
        collector = ResponseCollector(
            self.box, self.timing, self.submissions, self.clock, trim_input=trim_input
        )
        collector.add_listener(self.heard.append)
        return collector

    def test_enter_records_relative_time_and_clears(self):
        collector = self.make()
        for key in 'cat':
            collector.handle_key(key)
        self.clock.set(12.5)
        sub = collector.handle_key('return')
        self.assertEqual(sub.word, 'cat')
        self.assertEqual(sub.time_offset_ms, 2500)
        self.assertEqual(self.box.text, '')
        self.assertEqual(self.submissions, [sub])
        self.assertEqual(self.heard, [sub])

    def test_empty_submission_has_no_effect(self):
        collector = self.make()
        self.assertIsNone(collector.handle_key('return'))
        self.assertEqual(self.submissions, [])
        self.assertEqual(self.heard, [])

    def test_whitespace_only_with_trim_is_ignored(self):
        collector = self.make(trim_input=True)
        self.box.text = '   '
        self.assertIsNone(collector.submit())
        self.assertEqual(self.submissions, [])
        # Input left untouched
        self.assertEqual(self.box.text, '   ')

    def test_whitespace_only_without_trim_is_recorded_raw(self):
        collector = self.make(trim_input=False)
        self.box.text = '  '
        sub = collector.submit()
        self.assertEqual(sub.word, '  ')
        self.box.text = ''
        self.assertIsNone(collector.submit())
        self.assertEqual(len(self.submissions), 1)

    def test_trim_policy_controls_recorded_word(self):
        collector = self.make(trim_input=True)
        self.box.text = '  owl '
        self.assertEqual(collector.submit().word, 'owl')
        collector = self.make(trim_input=False)
        self.box.text = '  owl '
        self.assertEqual(collector.submit().word, '  owl ')

    def test_locked_input_ignores_submission(self):
        collector = self.make()
        self.box.text = 'bat'
        self.box.disable()
        self.assertIsNone(collector.submit())
        self.assertEqual(self.box.text, 'bat')
        self.box.enable()
        self.assertIsNotNone(collector.submit())

    def test_submission_after_deadline_is_ignored(self):
        collector = self.make(start=0.0, duration_ms=1000)
        self.box.text = 'late'
        self.clock.set(1.0)
        self.assertIsNone(collector.submit())
        self.assertEqual(self.submissions, [])

    def test_long_word_recorded_intact(self):
        collector = self.make()
        for key in 'a' * 120:
            collector.handle_key(key)
        sub = collector.handle_key('return')
        self.assertEqual(len(sub.word), 120)

    def test_other_keys_edit_the_input(self):
        collector = self.make()
        collector.handle_key('d', {'shift': True})
        collector.handle_key('o')
        collector.handle_key('g')
        collector.handle_key('backspace')
        self.assertEqual(self.box.text, 'Do')


if __name__ == '__main__':
    unittest.main()
