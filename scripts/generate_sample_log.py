#!/usr/bin/env python3
"""
Sample log generator for testing the Runtime Log Viewer application.

Generates a newline-delimited JSON log dump with:
- Subsystem start-up and shutdown banners
- Repeated GC test and ban-check debug noise
- Runtime errors with detailed and bare crash headers
- A few malformed and blank lines
"""

import argparse
import json
from pathlib import Path

import numpy as np
import pandas as pd


SUBSYSTEMS = ["Garbage Collector", "Atmospherics", "Machines", "Mobs", "Timer", "Air"]

RUNTIME_SITES = [
    ("code/modules/mob/living/living.dm", 214, "Attack", "/mob/living/proc/attack_hand"),
    ("code/datums/components/storage.dm", 88, "handle_item", "/datum/component/storage/proc/handle_item"),
    ("code/modules/client/preferences.dm", 512, "load_preferences", "/datum/preferences/proc/load_preferences"),
]


def wstate(rng: np.random.Generator, ts: pd.Timestamp, tick: int) -> dict:
    """Telemetry snapshot for a line."""
    return {
        "tick_usage": round(float(rng.uniform(10, 95)), 2),
        "tick_lag": round(float(rng.exponential(0.3)), 3),
        "time": tick,
        "timestamp": ts.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
    }


def detailed_runtime(file: str, line: int, name: str, path: str, player: str) -> tuple[str, dict]:
    msg = (
        f"runtime error: Cannot read null.loc\n"
        f"proc name: {name} ({path})\n"
        f"  src: {player} (/mob/living/carbon/human)\n"
        f"  call stack:"
    )
    data = {"file": file, "line": line, "name": name, "desc": f"Cannot read null.loc in {name}"}
    return msg, data


def bare_runtime(file: str, line: int, name: str, path: str) -> tuple[str, dict]:
    msg = f"runtime error: \nproc name: {name} ({path})\n  usr: (src)"
    data = {"file": file, "line": line}
    return msg, data


def generate_lines(num_runtimes: int, seed: int) -> list[str]:
    """Build the log lines in arrival order."""
    rng = np.random.default_rng(seed)
    start = pd.Timestamp("2024-01-01T00:00:00Z")
    lines: list[str] = []
    tick = 0

    def emit(msg: str, cat: str = "game", data=None, with_wstate: bool = False):
        nonlocal tick
        tick += int(rng.integers(1, 50))
        ts = start + pd.Timedelta(milliseconds=tick * 100)
        entry = {
            "ts": ts.strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
            "round_id": "4242",
            "cat": cat,
            "msg": msg,
            "id": len(lines) + 1,
        }
        if data is not None:
            entry["data"] = data
        if with_wstate:
            entry["w-state"] = wstate(rng, ts, tick)
        lines.append(json.dumps(entry))

    for i, name in enumerate(SUBSYSTEMS):
        seconds = round(float(rng.uniform(0.01, 4.0)), 2)
        emit(f"[S{i}-1/{len(SUBSYSTEMS)}] Initialized {name} subsystem within {seconds} seconds!", "init")

    for _ in range(5):
        emit(f"## TESTING: GC: -- {int(rng.integers(0, 999))} was not collected", "gc")
        emit(f"DEBUG: isbanned(): key-{int(rng.integers(100, 999))} checked", "debug")

    emit("## ERROR: Prefs failed to setup (SS)", "prefs")
    emit("## ERROR: Prefs failed to setup (datum) for guest", "prefs")

    for _ in range(num_runtimes):
        file, line, name, path = RUNTIME_SITES[int(rng.integers(0, len(RUNTIME_SITES)))]
        if rng.random() < 0.3:
            msg, data = bare_runtime(file, line, name, path)
        else:
            msg, data = detailed_runtime(file, line, name, path, f"Player{int(rng.integers(1, 20))}")
        emit(msg, "runtime", data, with_wstate=True)

    # Malformed and blank lines are skipped by the reader
    lines.append("{not json")
    lines.append("")

    emit("Round ended.", "game")
    for name in SUBSYSTEMS:
        emit(f"Shutting down {name} subsystem...", "shutdown")

    return lines


def main():
    parser = argparse.ArgumentParser(description="Generate a sample log for Runtime Log Viewer")
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=Path("example_log.json"),
        help="Output file"
    )
    parser.add_argument(
        "--runtimes",
        type=int,
        default=40,
        help="Number of runtime errors to include"
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=13,
        help="Random seed"
    )

    args = parser.parse_args()

    lines = generate_lines(args.runtimes, args.seed)
    args.output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    print(f"Generated: {args.output} ({len(lines)} lines)")


if __name__ == "__main__":
    main()
