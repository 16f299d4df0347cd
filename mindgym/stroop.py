"""Color Interference (Stroop) task.

Name the INK color of a color word, ignoring the word itself. Count correct
answers until the countdown runs out.
"""

from __future__ import annotations

import random
import threading
from collections.abc import Callable
from dataclasses import dataclass

from mindgym.config import StroopConfig
from mindgym.timers import GameTimer, Scheduler, ThreadScheduler, TimerHandle

COLORS = ("RED", "GREEN", "BLUE", "YELLOW")
OPTION_COUNT = 4


@dataclass(frozen=True)
class StroopTrial:
    word: str
    ink: str
    options: tuple[str, ...]

    @property
    def congruent(self) -> bool:
        return self.word == self.ink


@dataclass(frozen=True)
class StroopSnapshot:
    phase: str  # menu | running | finished
    score: int
    total: int
    remaining_time: int
    trial: StroopTrial | None
    feedback: str | None  # correct | incorrect

    @property
    def accuracy(self) -> float:
        return round(self.score / self.total * 100, 1) if self.total else 0.0


def generate_trial(rng: random.Random, interference: float = 0.7) -> StroopTrial:
    word = rng.randrange(len(COLORS))
    ink = rng.randrange(len(COLORS))
    # Most trials should pit the word against a different ink
    if ink == word and rng.random() < interference:
        ink = (ink + rng.randint(1, len(COLORS) - 1)) % len(COLORS)

    options = [COLORS[ink]]
    others = [c for c in COLORS if c != COLORS[ink]]
    options += rng.sample(others, min(OPTION_COUNT - 1, len(others)))
    rng.shuffle(options)
    return StroopTrial(word=COLORS[word], ink=COLORS[ink], options=tuple(options))


class StroopTask:
    def __init__(self, config: StroopConfig | None = None,
                 scheduler: Scheduler | None = None,
                 rng: random.Random | None = None,
                 on_change: Callable[[StroopSnapshot], None] | None = None):
        self.config = config or StroopConfig()
        self.scheduler = scheduler or ThreadScheduler()
        self.rng = rng or random.Random()
        self.on_change = on_change
        self.lock = threading.RLock()

        self.phase = "menu"
        self.score = 0
        self.total = 0
        self.remaining_time = self.config.duration
        self.trial: StroopTrial | None = None
        self.feedback: str | None = None
        self.generation = 0
        self._timer: GameTimer | None = None
        self._next_trial: TimerHandle | None = None

    def snapshot(self) -> StroopSnapshot:
        with self.lock:
            return StroopSnapshot(self.phase, self.score, self.total,
                                  self.remaining_time, self.trial, self.feedback)

    def _notify(self):
        if self.on_change:
            self.on_change(self.snapshot())

    def _cancel(self):
        if self._timer:
            self._timer.cancel()
            self._timer = None
        if self._next_trial:
            self._next_trial.cancel()
            self._next_trial = None

    def start(self):
        """Begin (or restart) a timed run."""
        with self.lock:
            self._cancel()
            self.generation += 1
            gen = self.generation
            self.phase = "running"
            self.score = 0
            self.total = 0
            self.remaining_time = self.config.duration
            self.feedback = None
            self.trial = generate_trial(self.rng, self.config.interference)
            self._timer = GameTimer(
                self.scheduler,
                on_tick=lambda remaining: self._on_tick(gen, remaining),
                on_expired=lambda: self._on_expired(gen),
            )
            self._timer.start(self.config.duration)
            self._notify()

    def stop(self):
        """Abandon the run and go back to the menu."""
        with self.lock:
            self._cancel()
            self.generation += 1
            self.phase = "menu"
            self.trial = None
            self.feedback = None
            self._notify()

    def submit_answer(self, color: str) -> bool:
        with self.lock:
            if self.phase != "running" or self.trial is None or self.feedback:
                return False
            self.total += 1
            if color == self.trial.ink:
                self.score += 1
                self.feedback = "correct"
            else:
                self.feedback = "incorrect"
            gen = self.generation
            self._next_trial = self.scheduler.call_later(
                self.config.feedback_delay, lambda: self._deal(gen))
            self._notify()
            return True

    def _deal(self, gen: int):
        with self.lock:
            if gen != self.generation or self.phase != "running":
                return
            self.trial = generate_trial(self.rng, self.config.interference)
            self.feedback = None
            self._next_trial = None
            self._notify()

    def _on_tick(self, gen: int, remaining: int):
        with self.lock:
            if gen != self.generation or self.phase != "running":
                return
            self.remaining_time = remaining
            self._notify()

    def _on_expired(self, gen: int):
        with self.lock:
            if gen != self.generation or self.phase != "running":
                return
            self._cancel()
            self.phase = "finished"
            self.feedback = None
            self._notify()
