# /experiments/sanity_rollout.py
"""
Sanity rollouts for SineRunnerEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Writes an episodes CSV for notebook analysis

Usage examples (from repo root):
  # Run both policies over 20 default seeds, frame_skip=4:
  python -m experiments.sanity_rollout --policies both

  # Only heuristic, custom seeds:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333

  # Quick random-only smoke with fewer steps:
  python -m experiments.sanity_rollout --policies random --steps 300 --out-dir /tmp/sanity
"""

from __future__ import annotations
import argparse
import csv
from pathlib import Path
from typing import List, Tuple

import numpy as np

from sinerunner.env.sr_env import SineRunnerEnv, IDLE, HOLD_UPPER, JUMP
from sinerunner.game.config import LAUNCH_HOLD_TICKS


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray, _info: dict) -> int:
        return int(rng.randint(0, 4))
    return act

def tiny_heuristic_policy_init():
    """
    Very small rule:
      - While the launch line holds the runner, do nothing.
      - Afterwards keep the upper half pressed to run forward.
      - Jump when the next obstacle is close ahead and roughly on our line.
    """
    def act(obs: np.ndarray, info: dict) -> int:
        launched = info["t"] > LAUNCH_HOLD_TICKS
        if not launched:
            return IDLE
        grounded = obs[2] == 0.0
        dv, dp = obs[6], obs[7]
        if grounded and dp < 0.03 and abs(dv) < 0.05:
            return JUMP
        return HOLD_UPPER
    return act


# ------------------------ Rollout core ------------------------

def ensure_dir(p: Path):
    p.mkdir(parents=True, exist_ok=True)

def write_episode_row(csv_path: Path, header: List[str], row: List):
    exists = csv_path.exists()
    with csv_path.open("a", newline="") as f:
        w = csv.writer(f)
        if not exists:
            w.writerow(header)
        w.writerow(row)

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int) -> Tuple[int, float, float, bool, bool, str, float]:
    """
    Returns: (ep_len, ret_sum, offset_gain, terminated, truncated, end_state, airborne_ratio)
    """
    env = SineRunnerEnv(frame_skip=frame_skip)

    if policy_name == "random":
        # action RNG seed is a function of seed for determinism
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init()
    else:
        raise ValueError(f"Unknown policy: {policy_name}")

    ret_sum = 0.0
    airborne_count = 0
    ep_len = 0
    term = trunc = False

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            a = policy(obs, info)
            obs, r, term, trunc, info = env.step(a)
            ret_sum += float(r)
            ep_len += 1
            airborne_count += int(bool(info["airborne"]))
            if term or trunc:
                break
    finally:
        env.close()

    offset_gain = float(info["offset_gain"])
    end_state = str(info["state"])
    airborne_ratio = airborne_count / max(1, ep_len)
    return ep_len, ret_sum, offset_gain, bool(term), bool(trunc), end_state, airborne_ratio


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Engine ticks per decision step")
    ap.add_argument("--steps", type=int, default=5_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--out-dir", type=str, default="experiments/runs",
                    help="Directory to store episodes.csv")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)
    ensure_dir(out_dir)

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))

    episodes_csv = out_dir / "episodes.csv"
    header = [
        "env_name", "policy_name", "seed", "frame_skip",
        "episode_len_decisions", "return_sum", "offset_gain",
        "terminated", "truncated", "end_state", "airborne_ratio"
    ]
    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]

    print(f"Running policies={to_run} on {len(seeds)} seeds (frame_skip={args.frame_skip})")
    print(f"Writing summaries to {episodes_csv}")

    for policy_name in to_run:
        for seed in seeds:
            ep_len, ret_sum, gain, terminated, truncated, end_state, a_ratio = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
            )
            row = [
                "SineRunnerEnv", policy_name, seed, args.frame_skip,
                ep_len, f"{ret_sum:.2f}", f"{gain:.2f}",
                int(terminated), int(truncated), end_state, f"{a_ratio:.3f}",
            ]
            write_episode_row(episodes_csv, header, row)

            print(f"[{policy_name}] seed={seed}  len={ep_len}  gain={gain:.2f}  "
                  f"ret={ret_sum:.2f}  term={terminated} trunc={truncated}  end={end_state}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
