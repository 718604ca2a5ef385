# sinerunner/env/observations.py
from __future__ import annotations
from typing import Tuple

import numpy as np

from ..game.config import (
    JUMP_STEP, JUMP_RISE_TICKS, JUMP_TOTAL_TICKS,
    MAX_HITS, HIT_COOLDOWN_TICKS, LAUNCH_HOLD_TICKS,
    FINISH_LOOKAHEAD, FINISH_MARGIN
)

OBS_SIZE = 8
PROBE_WINDOW = 1000.0   # progress units ahead of the runner (100 ticks of track)
DEBUG_OBS = False


def _clip(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def observation_bounds() -> Tuple[np.ndarray, np.ndarray]:
    low = np.array([0.0, -1.0, 0.0, -1.0, 0.0, 0.0, -1.0, 0.0], dtype=np.float32)
    high = np.array([1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0], dtype=np.float32)
    return low, high


def nearest_obstacle_ahead(player_point, obstacles: np.ndarray):
    """(d_value, d_position) to the closest obstacle strictly ahead, or None."""
    d_pos = obstacles[:, 1] - player_point[1]
    ahead = d_pos > 0.0
    if not np.any(ahead):
        return None
    idx = np.flatnonzero(ahead)[np.argmin(d_pos[ahead])]
    return float(obstacles[idx, 0] - player_point[0]), float(d_pos[idx])


def build_observation(game) -> np.ndarray:
    """
    Compact vector for an agent:
      [launch_progress, frontier_gap, jump_phase, vertical_norm,
       hits_norm, cooling, obstacle_dvalue, obstacle_dpos]
    """
    player, clock = game.player, game.clock
    width = float(game.metrics.safe_width)

    launch = _clip(clock.t / float(LAUNCH_HOLD_TICKS), 0.0, 1.0)
    frontier = player.horizontal_offset + FINISH_LOOKAHEAD - FINISH_MARGIN
    gap = _clip((game.curve.max_value - frontier) / width, -1.0, 1.0)

    if player.jump_start_tick is None:
        phase = 0.0
    else:
        elapsed = clock.num_ticks - player.jump_start_tick
        phase = elapsed / float(JUMP_TOTAL_TICKS) if 0 <= elapsed < JUMP_TOTAL_TICKS else 0.0
    vertical = _clip(player.vertical_offset / (JUMP_STEP * JUMP_RISE_TICKS), -1.0, 1.0)

    hits = _clip(player.hit_count / float(MAX_HITS + 1), 0.0, 1.0)
    cooling = 1.0 if player.hit_cooling(clock.num_ticks, HIT_COOLDOWN_TICKS) else 0.0

    near = nearest_obstacle_ahead(game.player_point, game.obstacles.samples)
    if near is None:
        dv, dp = 0.0, 1.0
    else:
        dv = _clip(near[0] / width, -1.0, 1.0)
        dp = _clip(near[1] / PROBE_WINDOW, 0.0, 1.0)

    obs = np.array([launch, gap, phase, vertical, hits, cooling, dv, dp], dtype=np.float32)
    if DEBUG_OBS:
        print("OBS " + " ".join(f"{v:.2f}" for v in obs))
    return obs
