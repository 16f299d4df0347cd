"""Tests for the Trail Making task."""

import math
import random

import pytest

from mindgym.config import TrailConfig
from mindgym.timers import ManualScheduler
from mindgym.trail import SPACING, TrailTask, place_circles


def make_task(**overrides):
    sched = ManualScheduler()
    task = TrailTask(TrailConfig(**overrides), sched, rng=random.Random(6))
    return task, sched


def test_circles_are_numbered_and_inside_the_area():
    cfg = TrailConfig()
    circles = place_circles(cfg, random.Random(1))
    assert [c.number for c in circles] == list(range(1, 11))
    for c in circles:
        assert cfg.radius <= c.x <= cfg.width - cfg.radius
        assert cfg.radius <= c.y <= cfg.height - cfg.radius


def test_circles_keep_their_distance_when_there_is_room():
    cfg = TrailConfig(count=5, width=1000, height=1000, radius=25)
    circles = place_circles(cfg, random.Random(2))
    for i, a in enumerate(circles):
        for b in circles[i + 1:]:
            assert math.dist((a.x, a.y), (b.x, b.y)) >= cfg.radius * SPACING


def test_crowded_area_still_places_every_circle():
    cfg = TrailConfig(count=5, width=50, height=50, radius=25)
    circles = place_circles(cfg, random.Random(3))
    assert len(circles) == 5
    assert all((c.x, c.y) == (25, 25) for c in circles)


def test_wrong_number_flashes_feedback():
    task, sched = make_task()
    task.start()
    assert not task.select_target(2)
    assert task.feedback == "incorrect"
    assert task.current == 1
    sched.advance(0.5)
    assert task.feedback is None


def test_full_trail_freezes_elapsed_time():
    task, sched = make_task()
    task.start()
    task.select_target(3)
    sched.advance(0.5)
    for n in range(1, 11):
        sched.advance(1)
        assert task.select_target(n)

    snap = task.snapshot()
    assert snap.phase == "finished"
    assert snap.elapsed == pytest.approx(10.5)
    assert len(snap.path) == 10
    assert snap.path[0] == (snap.circles[0].x, snap.circles[0].y)

    sched.advance(30)
    assert task.elapsed == pytest.approx(10.5)
    assert not task.select_target(1)


def test_elapsed_runs_while_playing():
    task, sched = make_task()
    task.start()
    sched.advance(2.5)
    assert task.snapshot().elapsed == pytest.approx(2.5)


def test_correct_click_clears_pending_incorrect_feedback():
    task, sched = make_task()
    task.start()
    task.select_target(5)
    task.select_target(1)
    assert task.feedback == "correct"
    sched.advance(1)
    assert task.feedback == "correct"


def test_menu_ignores_clicks():
    task, _ = make_task()
    assert not task.select_target(1)
    task.start()
    task.stop()
    assert task.phase == "menu"
    assert task.snapshot().circles == ()
    assert task.elapsed == 0.0
