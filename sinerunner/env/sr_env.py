# sinerunner/env/sr_env.py
from __future__ import annotations
from typing import Optional, Dict, Any

import numpy as np
import gymnasium as gym
import pygame

from sinerunner.game.config import WIDTH, HEIGHT, FPS, LAUNCH_OFFSET
from sinerunner.game.engine import SineRunner
from sinerunner.game.state import GameState
from sinerunner.game.game import draw_frame
from sinerunner.env.observations import OBS_SIZE, build_observation, observation_bounds

# Actions
IDLE, HOLD_UPPER, HOLD_LOWER, JUMP = 0, 1, 2, 3

HIT_PENALTY = 1.0
FINISH_BONUS = 10.0
DEATH_PENALTY = 10.0
PROGRESS_SCALE = 10.0   # reward per unit of forward launch offset


class SineRunnerEnv(gym.Env):
    """
    Sine Runner Gymnasium environment (vector observations).
    - One engine tick per 20 ms of game time.
    - Agent acts every `frame_skip` ticks (default 4).
    - Actions: 0 idle, 1 hold upper half, 2 hold lower half, 3 jump.
    - Observation: shape (8,), float32 (see observations.build_observation).
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 max_decisions: Optional[int] = 5000,
                 width: int = WIDTH,
                 height: int = HEIGHT):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.max_decisions = max_decisions
        self.width, self.height = int(width), int(height)

        self.action_space = gym.spaces.Discrete(4)
        low, high = observation_bounds()
        self.observation_space = gym.spaces.Box(low=low, high=high, shape=(OBS_SIZE,), dtype=np.float32)

        # --- Runtime state ---
        self.game: Optional[SineRunner] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Explicit seed -> obstacle layout; otherwise derive one from np_random so
        # the episode stays reproducible from the env's own seeding.
        if seed is not None:
            level_seed = int(seed)
        else:
            level_seed = int(self.np_random.integers(0, 2**31 - 1))

        self.game = SineRunner(width=self.width, height=self.height, seed=level_seed)
        self.timestep = 0
        self.current_seed = level_seed

        obs = build_observation(self.game)
        info = self._info()
        if self.render_mode == "human":
            self.render()
        return obs, info

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.game is not None, "Call reset() before step()"
        game = self.game

        prev_offset = game.player.horizontal_offset
        prev_hits = game.player.hit_count

        self._apply_action(int(action))
        for _ in range(self.frame_skip):
            game.advance()
            if game.terminal:
                break

        gained = max(0.0, game.player.horizontal_offset - prev_offset)
        new_hits = game.player.hit_count - prev_hits
        reward = PROGRESS_SCALE * gained - HIT_PENALTY * new_hits

        state = game.state
        if state == GameState.FINISHED:
            reward += FINISH_BONUS
        elif state == GameState.DEAD:
            reward -= DEATH_PENALTY

        self.timestep += 1
        terminated = game.terminal
        truncated = bool(self.max_decisions is not None and self.timestep >= self.max_decisions)

        obs = build_observation(game)
        if self.render_mode == "human":
            self.render()
        return obs, float(reward), terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _upper_point(self):
        return (self.width // 2, self.height // 4)

    def _lower_point(self):
        return (self.width // 2, (3 * self.height) // 4)

    def _apply_action(self, action: int):
        game = self.game
        player = game.player
        if action == HOLD_UPPER:
            if not (player.pressed and player.press_point == self._upper_point()):
                game.press(self._upper_point())
        elif action == HOLD_LOWER:
            if not (player.pressed and player.press_point == self._lower_point()):
                game.press(self._lower_point())
        elif action == JUMP:
            game.release(self._upper_point())
        elif player.pressed:
            # idle: let go in the lower half so no jump is triggered
            game.release(self._lower_point())

    def _info(self) -> Dict[str, Any]:
        game = self.game
        return {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "t": game.clock.t,
            "num_ticks": game.clock.num_ticks,
            "state": game.state.value,
            "hit_count": game.player.hit_count,
            "offset_gain": game.player.horizontal_offset - LAUNCH_OFFSET,
            "airborne": game.player.is_airborne,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.game is None:
            return None

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((self.width, self.height))
                pygame.display.set_caption("Sine Runner — Gym Env")
                self.clock = pygame.time.Clock()
                self.font = pygame.font.SysFont("jetbrainsmono", 18)
            else:
                self.screen = pygame.Surface((self.width, self.height))

        if self.render_mode == "human":
            # Pump the event queue so the OS doesn't think we're hung
            pygame.event.pump()

        draw_frame(self.screen, self.game.snapshot(), self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata.get("render_fps", FPS))
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
