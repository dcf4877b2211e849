"""
Purpose: One-shot deferred tasks on the caller's thread.
Why: The simulated assistant reply lands after a fixed delay. Streamlit runs
the script top to bottom on each rerun, so instead of a timer thread the app
polls `run_due()` at the top of every run; tests drive the clock by hand.

No cancellation: a task that should no longer apply checks live state when it
fires.
"""

from __future__ import annotations
import heapq
import itertools
import time
from dataclasses import dataclass, field
from typing import Callable, Optional


@dataclass(order=True)
class _PendingTask:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)


class DeferredScheduler:
    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._queue: list[_PendingTask] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        due = self._clock() + max(0.0, float(delay))
        heapq.heappush(self._queue, _PendingTask(due, next(self._counter), callback))

    def seconds_until_next(self) -> Optional[float]:
        """None when nothing is pending; 0.0 when a task is already due."""
        if not self._queue:
            return None
        return max(0.0, self._queue[0].due - self._clock())

    def run_due(self) -> int:
        """Fire every task whose deadline has passed, earliest first. Returns how many ran."""
        ran = 0
        while self._queue and self._queue[0].due <= self._clock():
            task = heapq.heappop(self._queue)
            task.callback()
            ran += 1
        return ran
