# sinerunner/tests/test_game.py
import os
from dataclasses import replace

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
import pygame

from sinerunner.game.config import SEED_DEFAULT, COLOR_BG, COLOR_BG_DANGER, COLOR_VISUAL
from sinerunner.game.engine import SineRunner
from sinerunner.game.game import (
    parse_args, resolve_seed, dispatch_pointer, wants_quit, to_screen, draw_frame
)


class Recorder:
    def __init__(self):
        self.events = []

    def press(self, point):
        self.events.append(("press", point))

    def release(self, point):
        self.events.append(("release", point))


def test_seed_resolution():
    assert resolve_seed(None) == SEED_DEFAULT
    assert resolve_seed(-1) is None
    assert resolve_seed(7) == 7
    args = parse_args(["--seed", "3", "--width", "640"])
    assert args.seed == 3 and args.width == 640


def test_pointer_dispatch():
    rec = Recorder()
    down = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(10, 20))
    up = pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(10, 400))
    right = pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=3, pos=(1, 1))
    key = pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE)
    assert dispatch_pointer(down, rec)
    assert dispatch_pointer(up, rec)
    assert not dispatch_pointer(right, rec)
    assert not dispatch_pointer(key, rec)
    assert rec.events == [("press", (10, 20)), ("release", (10, 400))]


def test_pointer_dispatch_drives_engine():
    game = SineRunner(width=960, height=540, seed=1)
    dispatch_pointer(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=(480, 10)), game)
    assert game.player.pressed
    dispatch_pointer(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=(480, 10)), game)
    assert not game.player.pressed
    assert game.player.jump_start_tick == 0


def test_quit_keys():
    assert wants_quit(pygame.event.Event(pygame.QUIT))
    assert wants_quit(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))
    assert wants_quit(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_0))
    assert not wants_quit(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_SPACE))


def test_camera_centers_runner():
    samples = np.array([[100.0, 50.0], [130.0, 80.0]])
    pts = to_screen(samples, (100.0, 50.0), 320, 240)
    assert tuple(pts[0]) == (160.0, 120.0)
    assert tuple(pts[1]) == (190.0, 90.0)   # ahead is up


def test_draw_frame_offscreen():
    game = SineRunner(width=960, height=540, seed=1)
    snap = game.advance()
    surf = pygame.Surface((320, 240))

    draw_frame(surf, snap)
    assert tuple(surf.get_at((0, 239)))[:3] == COLOR_BG
    assert tuple(surf.get_at((160, 120)))[:3] == COLOR_VISUAL[snap.visual.value]

    draw_frame(surf, replace(snap, danger=True))
    assert tuple(surf.get_at((0, 239)))[:3] == COLOR_BG_DANGER
