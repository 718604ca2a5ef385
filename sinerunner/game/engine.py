# sinerunner/game/engine.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import Optional, Protocol, Tuple

import numpy as np

from .config import WIDTH, HEIGHT, DEBUG_STATE_LOGS
from .level import CurveGenerator, ObstacleField, count_collisions
from .player import Player, ScreenPoint
from .state import GameState, GameStateMachine, Visual


class TickListener(Protocol):
    def advance(self) -> "FrameSnapshot": ...


class InputListener(Protocol):
    def press(self, point: ScreenPoint) -> None: ...
    def release(self, point: ScreenPoint) -> None: ...


@dataclass
class ScreenMetrics:
    width: int
    height: int

    @property
    def safe_width(self) -> int:
        return self.width if self.width > 0 else 1

    @property
    def safe_height(self) -> int:
        # a collapsed surface reports 0; treat it as 1
        return self.height if self.height > 0 else 1

    @property
    def aspect(self) -> float:
        return self.safe_width / self.safe_height


@dataclass
class SimulationClock:
    """t rewinds on game reset; num_ticks counts every tick event and never rewinds."""
    t: int = 0
    num_ticks: int = 0

    def tick(self):
        self.t += 1
        self.num_ticks += 1

    def rewind(self):
        self.t = 0


@dataclass(frozen=True)
class FrameSnapshot:
    """What the renderer may read after a tick. Arrays are copies."""
    t: int
    num_ticks: int
    state: GameState
    visual: Visual
    player_point: Tuple[float, float]
    horizontal_offset: float
    vertical_offset: float
    hit_count: int
    danger: bool
    max_curve_value: float
    curve: np.ndarray
    obstacles: np.ndarray


class SineRunner:
    """
    Per-tick simulation of the sine runner. One advance() per tick event,
    press/release only latch input between ticks.
    Satisfies both TickListener and InputListener.
    """
    def __init__(self, width: int = WIDTH, height: int = HEIGHT,
                 seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.metrics = ScreenMetrics(int(width), int(height))
        self.clock = SimulationClock()
        self.curve = CurveGenerator(self.metrics.safe_width)
        self.obstacles = ObstacleField(self.metrics.safe_width, seed=seed, rng=rng)
        self.player = Player()
        self.machine = GameStateMachine()
        self.visual = Visual.THROTTLE
        self.player_point = self.player.position(self.curve.advance_x, self.metrics.safe_width)
        self._last_state = GameState.PLAYING

    @property
    def seed(self) -> Optional[int]:
        return self.obstacles.seed

    @property
    def state(self) -> GameState:
        return self.machine.state(self.player, self.clock.num_ticks)

    @property
    def terminal(self) -> bool:
        return self.machine.is_terminal(self.player)

    # -------------------- Host events --------------------

    def resize(self, width: int, height: int):
        self.metrics = ScreenMetrics(int(width), int(height))
        self.curve.width = float(self.metrics.safe_width)
        self.obstacles.width = float(self.metrics.safe_width)

    def press(self, point: ScreenPoint):
        self.player.press(point)
        if self.terminal:
            # dead or finished: a tap restarts
            self.reset()

    def release(self, point: ScreenPoint):
        self.player.release(point, self.metrics.safe_height, self.clock.num_ticks)

    def reset(self):
        """Back to the launch line. Curve/obstacle history and max_value survive."""
        self.player.reset()
        self.clock.rewind()
        self.curve.rewind()
        self.visual = Visual.THROTTLE
        self._log_transition()

    # -------------------- Tick --------------------

    def advance(self) -> FrameSnapshot:
        if self.terminal:
            self.clock.num_ticks += 1
            return self.snapshot()

        player = self.player
        player.apply_input(self.metrics.safe_height)
        player.update_jump(self.clock.num_ticks)

        self.clock.tick()
        t, num_ticks = self.clock.t, self.clock.num_ticks
        self.curve.advance(t)
        self.obstacles.advance(t)

        self.visual = self.machine.gate(player, t, num_ticks, self.curve.max_value)

        self.player_point = player.position(self.curve.advance_x, self.metrics.safe_width)
        hits = count_collisions(self.player_point, self.obstacles.samples)
        player.register_hits(hits, num_ticks)

        self.machine.evaluate(player)
        if player.is_dead:
            self.visual = Visual.DEAD
        elif player.is_finished:
            self.visual = Visual.FINISHED

        self._log_transition()
        return self.snapshot()

    def run(self, ticks: int) -> FrameSnapshot:
        """Advance `ticks` times with the current input latches."""
        snap = self.snapshot()
        for _ in range(ticks):
            snap = self.advance()
        return snap

    def snapshot(self) -> FrameSnapshot:
        num_ticks = self.clock.num_ticks
        return FrameSnapshot(
            t=self.clock.t,
            num_ticks=num_ticks,
            state=self.state,
            visual=self.visual,
            player_point=self.player_point,
            horizontal_offset=self.player.horizontal_offset,
            vertical_offset=self.player.vertical_offset,
            hit_count=self.player.hit_count,
            danger=self.machine.danger(self.player, num_ticks),
            max_curve_value=self.curve.max_value,
            curve=self.curve.samples.copy(),
            obstacles=self.obstacles.samples.copy(),
        )

    def _log_transition(self):
        state = self.state
        if state != self._last_state:
            if DEBUG_STATE_LOGS:
                print(f"[t={self.clock.t} tick={self.clock.num_ticks}] "
                      f"{self._last_state.value} -> {state.value} (hits={self.player.hit_count})")
            self._last_state = state
