# --- Display ---
WIDTH = 960
HEIGHT = 540
TICK_MS = 20                # host tick period
FPS = 1000 // TICK_MS       # one simulation tick per frame

# --- Curve ---
CURVE_CAPACITY = 1600       # ring buffer slots, indexed by t % capacity
CURVE_STEP = 0.1            # horizontal advance per tick
CURVE_LEN = 0.01            # advance -> progress scale (position = advance / CURVE_LEN)
AMPLITUDE_DIVISOR = 3.5     # value = width * sin(x) / 3.5 + width / 2

# --- Obstacles ---
OBSTACLE_CAPACITY = 100     # also the length of the one-shot generation window
OBSTACLE_SPREAD = 10        # (draw % spread) * t + base
OBSTACLE_BASE = 50
RAND_MAX = 2**31 - 1
SEED_DEFAULT = 12345

# --- Player ---
LAUNCH_OFFSET = -100.0      # behind the front of the curve
PRESS_ACCEL = 0.04          # offset change per tick while the screen is held
JUMP_STEP = 18.0
JUMP_RISE_TICKS = 8
JUMP_TOTAL_TICKS = 16

# --- Rules ---
HIT_RADIUS = 5.0            # open interval (-r, r) on both axes
HIT_COOLDOWN_TICKS = 5
MAX_HITS = 4                # dead once hit_count > MAX_HITS
DANGER_HITS = 3
FINISH_LOOKAHEAD = 400.0
FINISH_MARGIN = 22.0
LAUNCH_HOLD_TICKS = 900     # player pinned at the launch line while t <= this

# --- Rendering ---
CURVE_POINT_PX = 5
PLAYER_POINT_PX = 15
OBSTACLE_POINT_PX = 15

# --- Colors (RGB) ---
COLOR_BG = (236, 232, 220)      # paper canvas
COLOR_BG_DANGER = (9, 14, 28)
COLOR_FG = (40, 44, 52)
COLOR_HUD_DANGER = (220, 232, 255)
COLOR_CURVE = (33, 46, 68)
COLOR_OBSTACLE = (20, 20, 20)
COLOR_VISUAL = {
    "normal": (120, 200, 255),
    "hit": (255, 86, 110),
    "dead": (130, 20, 40),
    "finished": (90, 210, 120),
    "throttle": (250, 190, 70),
}

# --- Debug ---
DEBUG_STATE_LOGS = False    # engine prints state transitions
DEBUG_TICK_LOGS = False     # front-end prints a status line twice per second
