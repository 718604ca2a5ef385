# sinerunner/game/player.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple

from .config import (
    CURVE_LEN, LAUNCH_OFFSET, PRESS_ACCEL,
    JUMP_STEP, JUMP_RISE_TICKS, JUMP_TOTAL_TICKS
)
from .level import curve_value

ScreenPoint = Tuple[float, float]   # (x, y) in screen pixels, y grows downwards


@dataclass
class Player:
    """
    Runner on the sine track.
    - horizontal_offset: launch offset in curve space, added to the curve advance
    - vertical_offset: additive displacement while airborne (negative = up)
    Input is latched by press/release and consumed once per tick by apply_input.
    """
    horizontal_offset: float = LAUNCH_OFFSET
    vertical_offset: float = 0.0
    hit_count: int = 0
    last_hit_tick: Optional[int] = None
    jump_start_tick: Optional[int] = None
    is_airborne: bool = False
    is_dead: bool = False
    is_finished: bool = False

    # --- input latches ---
    pressed: bool = False
    press_point: Optional[ScreenPoint] = None

    # -------------------- Input --------------------

    def press(self, point: ScreenPoint):
        self.press_point = point
        self.pressed = True

    def release(self, point: ScreenPoint, screen_height: float, num_ticks: int) -> bool:
        """Release in the upper half starts a jump when grounded. Returns True if it did."""
        self.pressed = False
        if point[1] > screen_height / 2.0:
            return False
        if self.is_airborne:
            return False
        self.jump_start_tick = num_ticks
        return True

    def apply_input(self, screen_height: float):
        """Held press drifts the launch offset: forward in the upper half, back in the lower."""
        if not self.pressed or self.press_point is None:
            return
        if self.press_point[1] < screen_height / 2.0:
            self.horizontal_offset += PRESS_ACCEL
        else:
            self.horizontal_offset -= PRESS_ACCEL

    # -------------------- Motion --------------------

    def update_jump(self, num_ticks: int):
        """Step the jump arc. Rise for JUMP_RISE_TICKS, fall back for the same, then snap to 0."""
        elapsed = None if self.jump_start_tick is None else num_ticks - self.jump_start_tick
        if elapsed is not None and 0 <= elapsed < JUMP_RISE_TICKS:
            self.is_airborne = True
            self.vertical_offset -= JUMP_STEP
        elif elapsed is not None and JUMP_RISE_TICKS <= elapsed < JUMP_TOTAL_TICKS:
            self.vertical_offset += JUMP_STEP
        else:
            self.is_airborne = False
            self.vertical_offset = 0.0

    def hold_at_launch(self):
        self.horizontal_offset = LAUNCH_OFFSET

    def position(self, advance_x: float, width: float) -> Tuple[float, float]:
        """Curve-space (value, position) of the runner."""
        x = advance_x + self.horizontal_offset
        return curve_value(width, x) + self.vertical_offset, x / CURVE_LEN

    def register_hits(self, count: int, num_ticks: int):
        if count <= 0:
            return
        self.last_hit_tick = num_ticks
        self.hit_count += count

    def hit_cooling(self, num_ticks: int, cooldown: int) -> bool:
        return self.last_hit_tick is not None and self.last_hit_tick + cooldown > num_ticks

    def reset(self):
        """Back to the launch line. Input latches are left alone."""
        self.horizontal_offset = LAUNCH_OFFSET
        self.vertical_offset = 0.0
        self.hit_count = 0
        self.last_hit_tick = None
        self.jump_start_tick = None
        self.is_airborne = False
        self.is_dead = False
        self.is_finished = False
