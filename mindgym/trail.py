"""Trail Making task — click numbered circles 1, 2, 3, ... as fast as possible."""

from __future__ import annotations

import math
import random
import threading
from collections.abc import Callable
from dataclasses import dataclass

from mindgym.config import TrailConfig
from mindgym.timers import Scheduler, ThreadScheduler, TimerHandle

MAX_ATTEMPTS = 50
SPACING = 2.5  # min distance between centers, in radii


@dataclass
class Circle:
    number: int
    x: int
    y: int
    clicked: bool = False


@dataclass(frozen=True)
class TrailSnapshot:
    phase: str  # menu | running | finished
    circles: tuple[Circle, ...]
    current: int
    elapsed: float
    feedback: str | None

    @property
    def path(self) -> list[tuple[int, int]]:
        """Centers of the clicked circles, in click order."""
        done = sorted((c for c in self.circles if c.clicked), key=lambda c: c.number)
        return [(c.x, c.y) for c in done]


def place_circles(config: TrailConfig, rng: random.Random) -> list[Circle]:
    r = config.radius
    placed: list[Circle] = []
    for number in range(1, config.count + 1):
        for _ in range(MAX_ATTEMPTS):
            x = rng.randint(r, config.width - r)
            y = rng.randint(r, config.height - r)
            if all(math.dist((x, y), (c.x, c.y)) >= r * SPACING for c in placed):
                break
        # Crowded area: keep the last candidate
        placed.append(Circle(number, x, y))
    return placed


class TrailTask:
    def __init__(self, config: TrailConfig | None = None,
                 scheduler: Scheduler | None = None,
                 rng: random.Random | None = None,
                 on_change: Callable[[TrailSnapshot], None] | None = None):
        self.config = config or TrailConfig()
        self.scheduler = scheduler or ThreadScheduler()
        self.rng = rng or random.Random()
        self.on_change = on_change
        self.lock = threading.RLock()

        self.phase = "menu"
        self.circles: list[Circle] = []
        self.current = 1
        self.feedback: str | None = None
        self.started_at: float | None = None
        self.finished_in: float | None = None
        self.generation = 0
        self._clear_feedback: TimerHandle | None = None

    @property
    def elapsed(self) -> float:
        if self.finished_in is not None:
            return self.finished_in
        if self.started_at is None:
            return 0.0
        return self.scheduler.now() - self.started_at

    def snapshot(self) -> TrailSnapshot:
        with self.lock:
            circles = tuple(Circle(c.number, c.x, c.y, c.clicked) for c in self.circles)
            return TrailSnapshot(self.phase, circles, self.current,
                                 self.elapsed, self.feedback)

    def _notify(self):
        if self.on_change:
            self.on_change(self.snapshot())

    def _cancel(self):
        if self._clear_feedback:
            self._clear_feedback.cancel()
            self._clear_feedback = None

    def start(self):
        with self.lock:
            self._cancel()
            self.generation += 1
            self.circles = place_circles(self.config, self.rng)
            self.current = 1
            self.feedback = None
            self.started_at = self.scheduler.now()
            self.finished_in = None
            self.phase = "running"
            self._notify()

    def stop(self):
        with self.lock:
            self._cancel()
            self.generation += 1
            self.phase = "menu"
            self.circles = []
            self.feedback = None
            self.started_at = None
            self.finished_in = None
            self._notify()

    def select_target(self, number: int) -> bool:
        """Click a circle by its number. Returns True on the right one."""
        with self.lock:
            if self.phase != "running":
                return False

            if number != self.current:
                self.feedback = "incorrect"
                self._cancel()
                gen = self.generation
                self._clear_feedback = self.scheduler.call_later(
                    self.config.feedback_delay, lambda: self._on_feedback_done(gen))
                self._notify()
                return False

            self._cancel()
            self.feedback = "correct"
            self.circles[number - 1].clicked = True
            if number == self.config.count:
                self.finished_in = self.scheduler.now() - self.started_at
                self.phase = "finished"
            else:
                self.current += 1
            self._notify()
            return True

    def _on_feedback_done(self, gen: int):
        with self.lock:
            if gen != self.generation or self.feedback != "incorrect":
                return
            self.feedback = None
            self._clear_feedback = None
            self._notify()
