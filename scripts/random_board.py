#!/usr/bin/env python3
"""Write a random board definition file.

Usage:
    python scripts/random_board.py ludo.txt [--ladders 8] [--snakes 8] [--seed 1]
"""

import argparse
import random
import sys


def random_layout(ladders: int, snakes: int, rng: random.Random, min_jump: int = 5) -> dict[int, int]:
    """Pick non-overlapping ladder and snake endpoints on cells 2-99."""
    layout: dict[int, int] = {}
    used: set[int] = set()

    def pick(low_start: int, high_start: int, going_up: bool) -> None:
        for _ in range(1000):
            start = rng.randint(low_start, high_start)
            if going_up:
                end = rng.randint(start + min_jump, 99)
            else:
                end = rng.randint(2, start - min_jump)
            if start not in used and end not in used:
                layout[start] = end
                used.update((start, end))
                return
        raise RuntimeError("Board too crowded; ask for fewer ladders or snakes")

    for _ in range(ladders):
        pick(2, 99 - min_jump, going_up=True)
    for _ in range(snakes):
        pick(2 + min_jump, 99, going_up=False)
    return layout


def format_board(layout: dict[int, int]) -> str:
    lines = []
    for start, end in sorted(layout.items()):
        kind = "L" if end > start else "S"
        lines.append(f"{kind} {start} {end}")
    lines.append("E")
    return "\n".join(lines) + "\n"


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a random Snake Ludo board")
    parser.add_argument("output", help="Where to write the board file")
    parser.add_argument("--ladders", type=int, default=8)
    parser.add_argument("--snakes", type=int, default=8)
    parser.add_argument("--seed", type=int)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    try:
        layout = random_layout(args.ladders, args.snakes, rng)
    except RuntimeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    with open(args.output, "w") as f:
        f.write(format_board(layout))
    print(f"Wrote {len(layout)} records to {args.output}")


if __name__ == "__main__":
    main()
