"""Config loading and validation tests (no PsychoPy needed)."""
import json
import os
import sys
import tempfile
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from config_loader import (  # noqa: E402
    LAYOUT_DEFAULT_PATH,
    apply_debug_durations,
    load_layout,
    load_sequence,
    validate_trial,
)


class TestConfigLoader(unittest.TestCase):
    def test_bundled_sequence_loads(self):
        sequence = load_sequence()
        self.assertIn('trials', sequence)
        modes = {t.get('prime_mode', 'none') for t in sequence['trials']}
        self.assertTrue({'timed', 'counted'} <= modes)

    def test_bundled_layout_loads(self):
        layout = load_layout()
        with open(LAYOUT_DEFAULT_PATH, 'r', encoding='utf-8') as f:
            default_layout = json.load(f)
        for key in default_layout:
            self.assertIn(key, layout)
        self.assertIn('font_main', layout)

    def test_missing_layout_raises(self):
        with self.assertRaises(RuntimeError):
            load_layout('/non/existent/layout.json')

    def test_invalid_sequence_file_rejected(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'sequence.json')
            with open(path, 'w', encoding='utf-8') as f:
                json.dump({'trials': [{'category': 'Animals', 'prime_mode': 'sometimes'}]}, f)
            with self.assertRaises(ValueError):
                load_sequence(path)

    def test_validate_trial(self):
        good = {'category': 'Fruits', 'duration_ms': 60000, 'prime_mode': 'counted',
                'prime_words': ['KIWI'], 'threshold_range': [3, 7]}
        self.assertIs(validate_trial(good), good)
        bad_cases = [
            {'duration_ms': 0},
            {'duration_ms': 60000.5},
            {'prime_mode': 'counted', 'prime_words': ['KIWI'], 'threshold_range': [6, 3]},
            {'prime_mode': 'counted', 'prime_words': ['KIWI'], 'threshold_range': [0, 3]},
            {'prime_mode': 'counted', 'prime_words': [1, 2]},
            {'prime_mode': 'timed', 'prime_words': [{'word': 'Arctic'}]},
            {'prime_mode': 'timed', 'prime_words': [{'word': 'Arctic', 'start_time': -1}]},
            {'exposure_ms': 0},
        ]
        for case in bad_cases:
            with self.subTest(case=case):
                with self.assertRaises(ValueError):
                    validate_trial(dict(case, category='X'))

    def test_apply_debug_durations(self):
        sequence = {
            'welcome': 'hi',
            'trials': [
                {'category': 'Animals', 'duration_ms': 60000, 'prime_mode': 'timed',
                 'prime_words': [{'word': 'Arctic', 'start_time': 3}, {'word': 'Atlas', 'start_time': 12}]},
                {'category': 'Fruits', 'duration_ms': 60000},
            ],
        }
        short = apply_debug_durations(sequence, 10000)
        self.assertEqual([t['duration_ms'] for t in short['trials']], [10000, 10000])
        self.assertEqual([e['word'] for e in short['trials'][0]['prime_words']], ['Arctic'])
        # Original untouched
        self.assertEqual(sequence['trials'][0]['duration_ms'], 60000)
        self.assertEqual(short['welcome'], 'hi')


if __name__ == '__main__':
    unittest.main()
