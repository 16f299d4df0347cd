"""Cancelable timers — preview countdown, game countdown, one-shot delays.

Every deferred callback goes through a Scheduler. ThreadScheduler backs them
with threading.Timer for the live deck; ManualScheduler runs them when the
caller advances a virtual clock, which keeps tests deterministic.
"""

from __future__ import annotations

import heapq
import itertools
import threading
import time
from collections.abc import Callable


class TimerHandle:
    """A scheduled callback that can be cancelled until it runs."""

    def __init__(self, callback: Callable[[], None]):
        self._callback = callback
        self._lock = threading.Lock()
        self.cancelled = False
        self.fired = False

    def cancel(self):
        with self._lock:
            self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)

    def fire(self):
        with self._lock:
            if self.cancelled or self.fired:
                return
            self.fired = True
        self._callback()


class Scheduler:
    """Interface for deferred callbacks and the clock they run against."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        raise NotImplementedError

    def now(self) -> float:
        raise NotImplementedError


class ThreadScheduler(Scheduler):
    """Real-time scheduler backed by daemon threading.Timer objects."""

    def __init__(self):
        self._timers: dict[TimerHandle, threading.Timer] = {}
        self._lock = threading.Lock()

    def call_later(self, delay, callback):
        handle = TimerHandle(callback)

        def _run():
            with self._lock:
                self._timers.pop(handle, None)
            handle.fire()

        timer = threading.Timer(delay, _run)
        timer.daemon = True
        with self._lock:
            self._timers[handle] = timer
        timer.start()
        return handle

    def now(self):
        return time.monotonic()

    def shutdown(self):
        """Cancel every pending timer — call on exit."""
        with self._lock:
            pending = list(self._timers.items())
            self._timers.clear()
        for handle, timer in pending:
            handle.cancel()
            timer.cancel()


class ManualScheduler(Scheduler):
    """Virtual clock: callbacks run only inside advance()."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: list[tuple[float, int, TimerHandle]] = []
        self._seq = itertools.count()

    def call_later(self, delay, callback):
        handle = TimerHandle(callback)
        heapq.heappush(self._queue, (self._now + delay, next(self._seq), handle))
        return handle

    def now(self):
        return self._now

    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if h.active)

    def advance(self, seconds: float):
        """Move the clock forward, firing due callbacks in order."""
        target = self._now + seconds
        while self._queue and self._queue[0][0] <= target + 1e-9:
            due, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, due)
            handle.fire()
        self._now = target


class PreviewTimer:
    """One-shot countdown; on_expired runs exactly once unless cancelled."""

    def __init__(self, scheduler: Scheduler, on_expired: Callable[[], None]):
        self.scheduler = scheduler
        self.on_expired = on_expired
        self._handle: TimerHandle | None = None

    def start(self, duration: float):
        self.cancel()
        self._handle = self.scheduler.call_later(duration, self.on_expired)

    def cancel(self):
        if self._handle:
            self._handle.cancel()
            self._handle = None

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active


class GameTimer:
    """Per-second countdown with on_tick(remaining) and a final on_expired."""

    def __init__(self, scheduler: Scheduler,
                 on_tick: Callable[[int], None] | None = None,
                 on_expired: Callable[[], None] | None = None,
                 interval: float = 1.0):
        self.scheduler = scheduler
        self.on_tick = on_tick
        self.on_expired = on_expired
        self.interval = interval
        self.remaining = 0
        self._handle: TimerHandle | None = None
        self._run_id = 0
        self._started = 0.0
        self._ticks = 0

    def start(self, duration: int):
        self.cancel()
        self.remaining = int(duration)
        self._run_id += 1
        self._started = self.scheduler.now()
        self._ticks = 0
        self._schedule(self._run_id)

    def _schedule(self, run_id: int):
        # Aim at start + n * interval so callback latency does not accumulate
        self._ticks += 1
        due = self._started + self._ticks * self.interval
        delay = max(0.0, due - self.scheduler.now())
        self._handle = self.scheduler.call_later(delay, lambda: self._tick(run_id))

    def _tick(self, run_id: int):
        # A tick queued before a restart belongs to the old countdown
        if run_id != self._run_id:
            return
        self.remaining = max(0, self.remaining - 1)
        if self.on_tick:
            self.on_tick(self.remaining)
        if run_id != self._run_id:
            return  # on_tick stopped or restarted us
        if self.remaining > 0:
            self._schedule(run_id)
            return
        self._handle = None
        if self.on_expired:
            self.on_expired()

    def cancel(self):
        self._run_id += 1
        if self._handle:
            self._handle.cancel()
            self._handle = None

    @property
    def running(self) -> bool:
        return self._handle is not None and self._handle.active
