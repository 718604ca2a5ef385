# sinerunner/game/level.py
from __future__ import annotations
import math
import random
from typing import Optional, Tuple

import numpy as np

from .config import (
    CURVE_CAPACITY, CURVE_STEP, CURVE_LEN, AMPLITUDE_DIVISOR,
    OBSTACLE_CAPACITY, OBSTACLE_SPREAD, OBSTACLE_BASE, RAND_MAX,
    HIT_RADIUS
)

Point = Tuple[float, float]   # (value, position)


def curve_value(width: float, x: float) -> float:
    """Transverse offset of the sine track at horizontal advance x."""
    return width * math.sin(x) / AMPLITUDE_DIVISOR + width / 2.0


class CurveGenerator:
    """
    Deterministic sine track, one sample per tick.
    Samples live in a preallocated (capacity, 2) array as (value, position),
    written at t % capacity; older samples are overwritten in place.
    """
    def __init__(self, width: float, capacity: int = CURVE_CAPACITY):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.width = float(width)
        self.capacity = capacity
        self.samples = np.zeros((capacity, 2), dtype=np.float64)
        self.advance_x = 0.0
        self.max_value = 0.0

    def advance(self, t: int) -> Point:
        self.advance_x += CURVE_STEP
        value = curve_value(self.width, self.advance_x)
        point = (value, self.advance_x / CURVE_LEN)
        if value > self.max_value:
            self.max_value = value
        slot = t % self.capacity
        self.samples[slot, 0] = point[0]
        self.samples[slot, 1] = point[1]
        return point

    def rewind(self):
        """Restart the phase at 0. History and max_value are kept."""
        self.advance_x = 0.0


class ObstacleField:
    """
    One-shot obstacle placement: slots are written only while 0 < t < capacity,
    the buffer is read-only afterwards.
    """
    def __init__(self, width: float, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None,
                 capacity: int = OBSTACLE_CAPACITY):
        if rng is None:
            if seed is None:
                seed = random.randrange(0, 2**32 - 1)
            rng = random.Random(seed)
        self.seed = seed
        self.rng = rng
        self.width = float(width)
        self.capacity = capacity
        self.samples = np.zeros((capacity, 2), dtype=np.float64)

    def in_window(self, t: int) -> bool:
        return 0 < t < self.capacity

    def advance(self, t: int) -> Optional[Point]:
        if not self.in_window(t):
            return None
        draw = self.rng.randint(0, RAND_MAX)
        ox = (draw % OBSTACLE_SPREAD) * t + OBSTACLE_BASE
        point = (curve_value(self.width, ox), ox / CURVE_LEN)
        slot = t % self.capacity
        self.samples[slot, 0] = point[0]
        self.samples[slot, 1] = point[1]
        return point


def count_collisions(point: Point, samples: np.ndarray, radius: float = HIT_RADIUS) -> int:
    """Number of samples strictly within (-radius, radius) of point on both axes.
    Every qualifying slot counts, overlapping obstacles are not merged."""
    d_value = samples[:, 0] - point[0]
    d_pos = samples[:, 1] - point[1]
    hit = (d_value < radius) & (d_value > -radius) & (d_pos < radius) & (d_pos > -radius)
    return int(np.count_nonzero(hit))


def collides(point: Point, samples: np.ndarray, radius: float = HIT_RADIUS) -> bool:
    return count_collisions(point, samples, radius) > 0
