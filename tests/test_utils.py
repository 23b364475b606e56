import os, sys
import unittest

# Ensure src/ is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from utils import build_prime_stack, is_blank_submission, normalize_word

class TestUtils(unittest.TestCase):
    def test_build_prime_stack_descending(self):
        entries = [
            {'word': 'Atlas', 'start_time': 12},
            {'word': 'Trivial', 'start_time': 50},
            {'word': 'Arctic', 'start_time': 3},
            {'word': 'Vermin', 'start_time': 37},
        ]
        stack = build_prime_stack(entries)
        self.assertEqual([e.word for e in stack], ['Trivial', 'Vermin', 'Atlas', 'Arctic'])
        # Soonest entry is popped first
        self.assertEqual(stack.pop().word, 'Arctic')

    def test_build_prime_stack_ties_keep_config_order(self):
        stack = build_prime_stack([
            {'word': 'first', 'start_time': 5},
            {'word': 'second', 'start_time': 5},
        ])
        self.assertEqual(stack.pop().word, 'first')
        self.assertEqual(stack.pop().word, 'second')

    def test_normalize_word(self):
        self.assertEqual(normalize_word('  DoG \n'), 'dog')
        self.assertEqual(normalize_word(''), '')

    def test_is_blank_submission(self):
        self.assertTrue(is_blank_submission(''))
        self.assertTrue(is_blank_submission('   '))
        self.assertFalse(is_blank_submission('   ', trim=False))
        self.assertTrue(is_blank_submission('', trim=False))
        self.assertFalse(is_blank_submission(' cat '))
        self.assertTrue(is_blank_submission(None))

if __name__ == '__main__':
    unittest.main()
