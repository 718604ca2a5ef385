# sinerunner/game/state.py
from __future__ import annotations
from enum import Enum

from .config import (
    HIT_COOLDOWN_TICKS, MAX_HITS, DANGER_HITS,
    FINISH_LOOKAHEAD, FINISH_MARGIN, LAUNCH_HOLD_TICKS
)
from .player import Player


class GameState(str, Enum):
    PLAYING = "playing"
    HIT_FLASH = "hit_flash"
    DEAD = "dead"
    FINISHED = "finished"


class Visual(str, Enum):
    """Which of the five canvas variants the renderer shows."""
    NORMAL = "normal"
    HIT = "hit"
    DEAD = "dead"
    FINISHED = "finished"
    THROTTLE = "throttle"


class GameStateMachine:
    """
    Life cycle of a run. gate() is evaluated once per live tick, in strict priority:
    hit cooldown > dead > finished > launch throttle > normal.
    In the engine, evaluate() runs after collisions and freezes a fifth hit before the
    next gate(), so the dead branch only fires for a player built already over the limit.
    """
    def __init__(self, launch_hold_ticks: int = LAUNCH_HOLD_TICKS):
        self.launch_hold_ticks = launch_hold_ticks

    def gate(self, player: Player, t: int, num_ticks: int, max_value: float) -> Visual:
        if player.hit_cooling(num_ticks, HIT_COOLDOWN_TICKS):
            return Visual.HIT
        elif player.hit_count > MAX_HITS:
            player.is_dead = True
            return Visual.DEAD
        elif self.frontier_reached(player, max_value):
            player.is_finished = True
            return Visual.FINISHED
        elif t <= self.launch_hold_ticks:
            # not enough track yet: pin the runner behind the start line
            player.hold_at_launch()
            return Visual.THROTTLE
        else:
            return Visual.NORMAL

    @staticmethod
    def frontier_reached(player: Player, max_value: float) -> bool:
        return player.horizontal_offset + FINISH_LOOKAHEAD - FINISH_MARGIN > max_value

    def evaluate(self, player: Player):
        """Post-collision check: too many hits ends the run on this tick."""
        if player.hit_count > MAX_HITS:
            player.is_dead = True

    def state(self, player: Player, num_ticks: int) -> GameState:
        if player.is_dead:
            return GameState.DEAD
        if player.is_finished:
            return GameState.FINISHED
        if player.hit_cooling(num_ticks, HIT_COOLDOWN_TICKS):
            return GameState.HIT_FLASH
        return GameState.PLAYING

    @staticmethod
    def is_terminal(player: Player) -> bool:
        return player.is_dead or player.is_finished

    @staticmethod
    def danger(player: Player, num_ticks: int) -> bool:
        return player.hit_cooling(num_ticks, HIT_COOLDOWN_TICKS) or player.hit_count >= DANGER_HITS
