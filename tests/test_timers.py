"""Tests for schedulers and countdown timers."""

import threading
import time

from mindgym.timers import GameTimer, ManualScheduler, PreviewTimer, ThreadScheduler


def test_manual_scheduler_runs_callbacks_in_due_order():
    sched = ManualScheduler()
    fired = []
    sched.call_later(2, lambda: fired.append("b"))
    sched.call_later(1, lambda: fired.append("a"))
    sched.advance(0.5)
    assert fired == []
    sched.advance(2)
    assert fired == ["a", "b"]
    assert sched.now() == 2.5


def test_cancelled_handle_never_fires():
    sched = ManualScheduler()
    fired = []
    handle = sched.call_later(1, lambda: fired.append(1))
    handle.cancel()
    sched.advance(5)
    assert fired == []
    assert not handle.active


def test_preview_timer_fires_once():
    sched = ManualScheduler()
    calls = []
    timer = PreviewTimer(sched, lambda: calls.append(sched.now()))
    timer.start(5)
    assert timer.running
    sched.advance(10)
    assert calls == [5]
    assert not timer.running


def test_preview_timer_restart_cancels_previous():
    sched = ManualScheduler()
    calls = []
    timer = PreviewTimer(sched, lambda: calls.append(sched.now()))
    timer.start(5)
    sched.advance(3)
    timer.start(5)
    sched.advance(10)
    assert calls == [8]


def test_preview_timer_cancel():
    sched = ManualScheduler()
    calls = []
    timer = PreviewTimer(sched, lambda: calls.append(1))
    timer.start(5)
    timer.cancel()
    sched.advance(10)
    assert calls == []


def test_game_timer_ticks_down_then_expires_once():
    sched = ManualScheduler()
    ticks, expired = [], []
    timer = GameTimer(sched, on_tick=ticks.append, on_expired=lambda: expired.append(sched.now()))
    timer.start(3)
    sched.advance(10)
    assert ticks == [2, 1, 0]
    assert expired == [3]
    assert not timer.running


def test_game_timer_cancel_stops_emissions():
    sched = ManualScheduler()
    ticks, expired = [], []
    timer = GameTimer(sched, on_tick=ticks.append, on_expired=lambda: expired.append(1))
    timer.start(5)
    sched.advance(2)
    timer.cancel()
    sched.advance(10)
    assert ticks == [4, 3]
    assert expired == []


def test_game_timer_restart_resets_countdown():
    sched = ManualScheduler()
    ticks = []
    timer = GameTimer(sched, on_tick=ticks.append)
    timer.start(5)
    sched.advance(2.5)
    timer.start(2)
    sched.advance(5)
    assert ticks == [4, 3, 1, 0]


def test_game_timer_cancel_from_tick_callback():
    sched = ManualScheduler()
    ticks = []
    timer = GameTimer(sched)

    def on_tick(remaining):
        ticks.append(remaining)
        timer.cancel()

    timer.on_tick = on_tick
    timer.start(5)
    sched.advance(5)
    assert ticks == [4]


def test_thread_scheduler_fires_callback():
    sched = ThreadScheduler()
    done = threading.Event()
    sched.call_later(0.01, done.set)
    assert done.wait(2)


def test_thread_scheduler_shutdown_cancels_pending():
    sched = ThreadScheduler()
    done = threading.Event()
    sched.call_later(0.1, done.set)
    sched.shutdown()
    time.sleep(0.2)
    assert not done.is_set()


class LateScheduler:
    """Fires every callback `lag` seconds after it was due."""

    def __init__(self, lag):
        self.lag = lag
        self.clock = 0.0
        self.delays = []
        self.queue = []

    def now(self):
        return self.clock

    def call_later(self, delay, callback):
        self.delays.append(delay)
        self.queue.append((self.clock + delay, callback))

    def run(self):
        while self.queue:
            due, callback = self.queue.pop(0)
            self.clock = due + self.lag
            callback()


def test_game_timer_does_not_drift_with_late_callbacks():
    sched = LateScheduler(lag=0.1)
    ticks = []
    timer = GameTimer(sched, on_tick=lambda r: ticks.append((r, sched.now())))
    timer.start(5)
    sched.run()
    assert [r for r, _ in ticks] == [4, 3, 2, 1, 0]
    # Each tick lands lag after its slot, not lag * n
    assert [round(t, 6) for _, t in ticks] == [1.1, 2.1, 3.1, 4.1, 5.1]
    assert [round(d, 6) for d in sched.delays] == [1.0, 0.9, 0.9, 0.9, 0.9]


def test_game_timer_catches_up_after_a_long_stall():
    sched = LateScheduler(lag=2.5)
    ticks = []
    timer = GameTimer(sched, on_tick=ticks.append)
    timer.start(4)
    sched.run()
    assert ticks == [3, 2, 1, 0]
    assert sched.delays[1:] == [0.0, 0.0, 0.0]
