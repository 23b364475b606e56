"""TimerQueue: single-threaded one-shot and repeating timers over an injected clock.

Nothing here sleeps or spawns threads. The owning loop (the PsychoPy frame loop
or a virtual-clock harness) calls run_due() and every timer whose due time has
passed fires in (due time, registration order), one handler at a time.
"""
from __future__ import annotations

import heapq
import itertools
from typing import Callable


class TimerHandle:
    """Cancellable reference to a scheduled callback."""

    def __init__(
        self,
        queue: 'TimerQueue',
        callback: Callable[[], None],
        first_due: float,
        interval: float | None,
    ) -> None:
        self._queue = queue
        self.callback = callback
        self.first_due = first_due
        self.interval = interval
        self.fired = 0
        self.cancelled = False

    @property
    def repeating(self) -> bool:
        return self.interval is not None

    def next_due(self) -> float:
        if self.interval is None:
            return self.first_due
        # Multiply rather than accumulate so repeating timers never drift
        return self.first_due + self.fired * self.interval

    def cancel(self) -> None:
        if not self.cancelled:
            self.cancelled = True
            self._queue._forget(self)


class TimerQueue:

    def __init__(self, get_time: Callable[[], float]) -> None:
        """Initialize an empty queue.

        Args:
            get_time: Clock function returning seconds (core.getTime or a VirtualClock)
        """
        self.get_time = get_time
        self._heap: list[tuple[float, int, TimerHandle]] = []
        self._live: set[TimerHandle] = set()
        self._seq = itertools.count()

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(self, callback, self.get_time() + max(0.0, delay_s), None)
        self._push(handle)
        return handle

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_s <= 0:
            raise ValueError(f"interval must be positive, got {interval_s}")
        handle = TimerHandle(self, callback, self.get_time() + interval_s, interval_s)
        self._push(handle)
        return handle

    def _push(self, handle: TimerHandle) -> None:
        self._live.add(handle)
        heapq.heappush(self._heap, (handle.next_due(), next(self._seq), handle))

    def _forget(self, handle: TimerHandle) -> None:
        # Heap entries of cancelled handles are skipped lazily in run_due()
        self._live.discard(handle)

    def pending(self) -> int:
        return len(self._live)

    def next_due(self) -> float | None:
        """Due time of the earliest live timer, or None when idle."""
        while self._heap and self._heap[0][2].cancelled:
            heapq.heappop(self._heap)
        if not self._heap:
            return None
        return self._heap[0][0]

    def run_due(self) -> int:
        """Fire every timer due at the current clock reading.

        Returns:
            Number of callbacks fired
        """
        now = self.get_time()
        fired = 0
        while True:
            due = self.next_due()
            if due is None or due > now:
                break
            _, _, handle = heapq.heappop(self._heap)
            handle.fired += 1
            if handle.repeating:
                heapq.heappush(self._heap, (handle.next_due(), next(self._seq), handle))
            else:
                handle.cancelled = True
                self._live.discard(handle)
            handle.callback()
            fired += 1
        return fired

    def cancel_all(self) -> None:
        for handle in list(self._live):
            handle.cancel()
        self._heap.clear()
