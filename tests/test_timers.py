import os
import sys
import unittest

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from harness import VirtualClock  # noqa: E402
from timers import TimerQueue  # noqa: E402


class TestTimerQueue(unittest.TestCase):
    def setUp(self):
        self.clock = VirtualClock()
        self.timers = TimerQueue(self.clock)
        self.log = []

    def test_one_shot_fires_once_when_due(self):
        self.timers.call_later(0.5, lambda: self.log.append('a'))
        self.clock.set(0.4)
        self.assertEqual(self.timers.run_due(), 0)
        self.clock.set(0.5)
        self.assertEqual(self.timers.run_due(), 1)
        self.clock.set(2.0)
        self.assertEqual(self.timers.run_due(), 0)
        self.assertEqual(self.log, ['a'])
        self.assertEqual(self.timers.pending(), 0)

    def test_due_order_then_registration_order(self):
        self.timers.call_later(0.2, lambda: self.log.append('late'))
        self.timers.call_later(0.1, lambda: self.log.append('early-1'))
        self.timers.call_later(0.1, lambda: self.log.append('early-2'))
        self.clock.set(1.0)
        self.timers.run_due()
        self.assertEqual(self.log, ['early-1', 'early-2', 'late'])

    def test_repeating_timer_and_cancel(self):
        handle = self.timers.call_every(0.1, lambda: self.log.append(self.clock()))
        for step in range(1, 6):
            self.clock.set(step * 0.1 + 0.001)
            self.timers.run_due()
        self.assertEqual(len(self.log), 5)
        handle.cancel()
        self.clock.set(1.0)
        self.assertEqual(self.timers.run_due(), 0)
        self.assertEqual(self.timers.pending(), 0)

    def test_repeating_due_times_do_not_drift(self):
        handle = self.timers.call_every(0.1, lambda: None)
        handle.fired = 600
        self.assertAlmostEqual(handle.next_due(), 60.1, places=9)

    def test_cancel_all(self):
        self.timers.call_later(0.1, lambda: self.log.append('x'))
        self.timers.call_every(0.1, lambda: self.log.append('y'))
        self.timers.cancel_all()
        self.assertIsNone(self.timers.next_due())
        self.clock.set(5.0)
        self.timers.run_due()
        self.assertEqual(self.log, [])

    def test_invalid_interval(self):
        with self.assertRaises(ValueError):
            self.timers.call_every(0, lambda: None)


if __name__ == '__main__':
    unittest.main()
