# sinerunner/game/game.py
import sys, argparse
from typing import Optional

import numpy as np
import pygame
from pygame import K_ESCAPE, K_0

from .config import (
    WIDTH, HEIGHT, FPS, SEED_DEFAULT,
    COLOR_BG, COLOR_BG_DANGER, COLOR_FG, COLOR_HUD_DANGER, COLOR_CURVE, COLOR_OBSTACLE, COLOR_VISUAL,
    CURVE_POINT_PX, PLAYER_POINT_PX, OBSTACLE_POINT_PX,
    DEBUG_TICK_LOGS
)
from .engine import SineRunner, FrameSnapshot, InputListener, TickListener


def parse_args(argv=None):
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Obstacle seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--width", type=int, default=WIDTH)
    p.add_argument("--height", type=int, default=HEIGHT)
    p.add_argument("--fps", type=int, default=FPS, help="Tick rate (50 = one tick per 20 ms)")
    return p.parse_args(argv)


def resolve_seed(seed_arg: Optional[int]) -> Optional[int]:
    # None -> SEED_DEFAULT; -1 -> random
    if seed_arg is None:
        return SEED_DEFAULT
    if seed_arg == -1:
        return None
    return seed_arg


# -------------------- Event plumbing --------------------

def dispatch_pointer(event: pygame.event.Event, listener: InputListener) -> bool:
    """Decode a left-button mouse event into press/release. Returns True if consumed."""
    if getattr(event, "button", None) != 1:
        return False
    if event.type == pygame.MOUSEBUTTONDOWN:
        listener.press(event.pos)
        return True
    if event.type == pygame.MOUSEBUTTONUP:
        listener.release(event.pos)
        return True
    return False


def wants_quit(event: pygame.event.Event) -> bool:
    if event.type == pygame.QUIT:
        return True
    return event.type == pygame.KEYDOWN and event.key in (K_ESCAPE, K_0)


# -------------------- Drawing --------------------

def to_screen(samples: np.ndarray, player_point, width: int, height: int) -> np.ndarray:
    """
    Camera centered on the runner: transverse value on x, progress on y
    (ahead of the runner is up the screen).
    """
    pv, pp = player_point
    xs = samples[:, 0] - pv + width / 2.0
    ys = height / 2.0 - (samples[:, 1] - pp)
    return np.stack([xs, ys], axis=1)


def _draw_points(surf: pygame.Surface, pts: np.ndarray, color, size: int):
    w, h = surf.get_size()
    r = max(1, size // 2)
    visible = (pts[:, 0] > -r) & (pts[:, 0] < w + r) & (pts[:, 1] > -r) & (pts[:, 1] < h + r)
    for x, y in pts[visible]:
        pygame.draw.circle(surf, color, (int(x), int(y)), r)


def draw_frame(surf: pygame.Surface, snap: FrameSnapshot, font: Optional[pygame.font.Font] = None):
    w, h = surf.get_size()
    surf.fill(COLOR_BG_DANGER if snap.danger else COLOR_BG)

    curve = to_screen(snap.curve, snap.player_point, w, h)
    _draw_points(surf, curve, COLOR_CURVE, CURVE_POINT_PX)
    obstacles = to_screen(snap.obstacles, snap.player_point, w, h)
    _draw_points(surf, obstacles, COLOR_OBSTACLE, OBSTACLE_POINT_PX)

    # runner is always at the center
    color = COLOR_VISUAL[snap.visual.value]
    pygame.draw.circle(surf, color, (w // 2, h // 2), PLAYER_POINT_PX // 2)

    if font is not None:
        hud = (f"t: {snap.t}   Hits: {snap.hit_count}   Offset: {snap.horizontal_offset:.2f}   "
               f"{snap.state.value.upper()}")
        fg = COLOR_HUD_DANGER if snap.danger else COLOR_FG
        surf.blit(font.render(hud, True, fg), (12, 10))
        surf.blit(font.render("hold top: run | release top: jump | ESC quit", True, fg), (12, 32))


# -------------------- Main loop --------------------

def run(argv=None):
    args = parse_args(argv)
    seed = resolve_seed(args.seed)

    pygame.init()
    pygame.display.set_caption("Sine Runner")
    screen = pygame.display.set_mode((args.width, args.height), pygame.RESIZABLE)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("jetbrainsmono", 18)

    game = SineRunner(width=args.width, height=args.height, seed=seed)
    ticker: TickListener = game
    inputs: InputListener = game
    print(f"Seed: {game.seed}")

    _print_timer = 0.0 if DEBUG_TICK_LOGS else None

    while True:
        dt = clock.tick(args.fps) / 1000.0

        for event in pygame.event.get():
            if wants_quit(event):
                pygame.quit(); sys.exit()
            if event.type == pygame.VIDEORESIZE:
                game.resize(event.w, event.h)
                continue
            dispatch_pointer(event, inputs)

        snap = ticker.advance()

        if _print_timer is not None:
            _print_timer -= dt
            if _print_timer <= 0.0:
                _print_timer = 0.5
                pv, pp = snap.player_point
                print(f"t={snap.t} tick={snap.num_ticks} value={pv:.1f} pos={pp:.1f} "
                      f"hits={snap.hit_count} visual={snap.visual.value} max={snap.max_curve_value:.1f}")

        draw_frame(screen, snap, font)
        pygame.display.flip()


if __name__ == "__main__":
    run()
