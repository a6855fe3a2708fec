"""Cancellable timers used to pace the round."""
from __future__ import annotations

import heapq
import itertools
import threading
from dataclasses import dataclass, field
from typing import Callable, List, Protocol

Callback = Callable[[], None]


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs a callback once after ``delay`` seconds unless cancelled."""

    def call_later(self, delay: float, callback: Callback) -> TimerHandle:
        ...


@dataclass(order=True)
class _ManualTimer:
    due: float
    seq: int
    callback: Callback = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock. Nothing fires until :meth:`advance` or :meth:`run_all` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[_ManualTimer] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> _ManualTimer:
        if delay < 0:
            raise ValueError("delay must not be negative")
        timer = _ManualTimer(self.now + delay, next(self._seq), callback)
        heapq.heappush(self._queue, timer)
        return timer

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._queue if not timer.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in order. Returns how many fired."""

        target = self.now + seconds
        fired = 0
        while self._queue and self._queue[0].due <= target:
            timer = heapq.heappop(self._queue)
            if timer.cancelled:
                continue
            self.now = timer.due
            timer.callback()
            fired += 1
        self.now = target
        return fired

    def run_all(self, limit: int = 1000) -> int:
        """Fire callbacks until the queue drains; ``limit`` guards against self-rescheduling loops."""

        fired = 0
        while fired < limit:
            live = [timer for timer in self._queue if not timer.cancelled]
            if not live:
                break
            fired += self.advance(min(live).due - self.now)
        return fired


class ThreadingScheduler:
    """Scheduler backed by :class:`threading.Timer` for headless hosts."""

    def __init__(self) -> None:
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()

    def call_later(self, delay: float, callback: Callback) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        with self._lock:
            self._timers = [t for t in self._timers if t.is_alive()]
            self._timers.append(timer)
        timer.start()
        return timer

    def cancel_all(self) -> None:
        with self._lock:
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()


__all__ = ["TimerHandle", "Scheduler", "ManualScheduler", "ThreadingScheduler"]
