# sinerunner/tests/test_level.py
"""
Curve / obstacle / collision checks.

Usage (from repo root):
  python -m sinerunner.tests.test_level
  pytest sinerunner/tests/test_level.py
"""
from __future__ import annotations
import math
import random

import numpy as np

from sinerunner.game.config import CURVE_CAPACITY, CURVE_LEN, OBSTACLE_CAPACITY, RAND_MAX
from sinerunner.game.level import (
    CurveGenerator, ObstacleField, curve_value, count_collisions, collides
)


def run_curve(width: int, ticks: int) -> CurveGenerator:
    curve = CurveGenerator(width)
    for t in range(1, ticks + 1):
        curve.advance(t)
    return curve


def test_curve_value_formula():
    assert curve_value(700, 0.0) == 350.0
    assert math.isclose(curve_value(700, math.pi / 2), 700 / 3.5 + 350.0)


def test_curve_is_deterministic():
    a = run_curve(960, 3500)
    b = run_curve(960, 3500)
    assert np.array_equal(a.samples, b.samples)
    assert a.max_value == b.max_value
    assert a.advance_x == b.advance_x


def test_curve_first_samples():
    curve = CurveGenerator(960)
    value, pos = curve.advance(1)
    assert curve.advance_x == 0.1
    assert value == curve_value(960, 0.1)
    assert pos == 0.1 / CURVE_LEN
    assert tuple(curve.samples[1]) == (value, pos)
    # untouched slots stay at the origin
    assert tuple(curve.samples[0]) == (0.0, 0.0)
    assert tuple(curve.samples[2]) == (0.0, 0.0)


def test_curve_max_never_decreases():
    curve = CurveGenerator(640)
    prev = curve.max_value
    for t in range(1, 2000):
        value, _ = curve.advance(t)
        assert curve.max_value >= prev
        assert curve.max_value >= value
        prev = curve.max_value
    assert math.isclose(curve.max_value, 640 / 3.5 + 320, rel_tol=1e-3)


def test_curve_ring_buffer_wraps():
    curve = CurveGenerator(960)
    points = {}
    for t in range(1, CURVE_CAPACITY + 6):
        points[t] = curve.advance(t)
    # slot 3 first held tick 3, then tick 1603
    assert tuple(curve.samples[3]) == points[CURVE_CAPACITY + 3]
    assert tuple(curve.samples[10]) == points[10]
    # 1600 most recent samples, all written
    assert np.count_nonzero(curve.samples[:, 1]) == CURVE_CAPACITY


def test_curve_rewind_keeps_history():
    curve = run_curve(960, 50)
    before = curve.samples.copy()
    top = curve.max_value
    curve.rewind()
    assert curve.advance_x == 0.0
    assert np.array_equal(curve.samples, before)
    assert curve.max_value == top


def test_obstacles_follow_placement_formula():
    field = ObstacleField(960, rng=random.Random(7))
    mirror = random.Random(7)
    for t in range(1, OBSTACLE_CAPACITY):
        point = field.advance(t)
        draw = mirror.randint(0, RAND_MAX)
        ox = (draw % 10) * t + 50
        assert point == (curve_value(960, ox), ox / CURVE_LEN)
        assert tuple(field.samples[t]) == point


def test_obstacles_frozen_after_window():
    field = ObstacleField(960, seed=3)
    assert field.advance(0) is None
    for t in range(1, OBSTACLE_CAPACITY):
        assert field.advance(t) is not None
    frozen = field.samples.copy()
    rng_state = field.rng.getstate()
    for t in range(OBSTACLE_CAPACITY, 5000):
        assert field.advance(t) is None
    assert np.array_equal(field.samples, frozen)
    assert field.rng.getstate() == rng_state
    # slot 0 is never generated
    assert tuple(field.samples[0]) == (0.0, 0.0)


def test_obstacle_seed_reproducible():
    a, b = ObstacleField(960, seed=42), ObstacleField(960, seed=42)
    c = ObstacleField(960, seed=43)
    for t in range(1, OBSTACLE_CAPACITY):
        a.advance(t); b.advance(t); c.advance(t)
    assert a.seed == 42
    assert np.array_equal(a.samples, b.samples)
    assert not np.array_equal(a.samples, c.samples)


def test_obstacle_random_seed_recorded():
    field = ObstacleField(960)
    assert isinstance(field.seed, int)


def test_collisions_open_interval():
    samples = np.zeros((OBSTACLE_CAPACITY, 2))
    samples[10] = (100.0, 200.0)
    assert count_collisions((104.9, 195.1), samples) == 1
    assert count_collisions((105.0, 200.0), samples) == 0   # edge does not count
    assert count_collisions((100.0, 195.0), samples) == 0
    assert not collides((300.0, 300.0), samples)


def test_collisions_counted_per_obstacle():
    samples = np.zeros((OBSTACLE_CAPACITY, 2))
    samples[20:23] = (50.0, 60.0)
    assert count_collisions((52.0, 56.0), samples) == 3
    assert collides((52.0, 56.0), samples)


def main():
    for name, fn in sorted(globals().items()):
        if name.startswith("test_") and callable(fn):
            fn()
            print(f"✓ {name}")
    print("🎉 level tests passed")


if __name__ == "__main__":
    main()
