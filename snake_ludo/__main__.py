"""CLI entry point: python -m snake_ludo {play,board}."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from snake_ludo.board import CLASSIC_BOARD, Board, load_board
from snake_ludo.config import DEFAULT_DELAY_MS, GameConfig
from snake_ludo.errors import LudoError
from snake_ludo.game import Coordinator
from snake_ludo.store import MAX_PLAYERS, MIN_PLAYERS


def _load(board_path: Path | str | None) -> Board:
    if board_path is None:
        return CLASSIC_BOARD
    return load_board(board_path)


# ── play ─────────────────────────────────────────────────────────────

def cmd_play(args: argparse.Namespace) -> int:
    """Run one game to completion (or until quit)."""
    config = GameConfig.from_args(args)
    board = _load(config.board_path)
    coordinator = Coordinator(config, board)
    try:
        coordinator.run()
    except KeyboardInterrupt:
        # Interrupted during startup; actors are already stopped.
        pass
    return 0


# ── board ────────────────────────────────────────────────────────────

def cmd_board(args: argparse.Namespace) -> int:
    """Validate a board file and list its ladders and snakes."""
    board = _load(args.board)
    source = args.board or "built-in classic board"
    print(f"Board: {source}")
    for start, end in board.ladders():
        print(f"  Ladder: {start} -> {end}")
    for start, end in board.snakes():
        print(f"  Snake: {start} -> {end}")
    print(f"{len(board.ladders())} ladders, {len(board.snakes())} snakes")

    if args.png:
        from snake_ludo.chart import make_board_chart
        make_board_chart(board, output_path=args.png)
        print(f"Board picture saved to {args.png}")
    return 0


# ── main ─────────────────────────────────────────────────────────────

def _players(value: str) -> int:
    n = int(value)
    if not MIN_PLAYERS <= n <= MAX_PLAYERS:
        raise argparse.ArgumentTypeError(f"num_players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
    return n


def build_parser() -> argparse.ArgumentParser:
    # SUPPRESS keeps a subcommand from resetting a --verbose given before it.
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--verbose", "-v", action="store_true", default=argparse.SUPPRESS, help="Debug logging")

    parser = argparse.ArgumentParser(
        prog="snake_ludo",
        description="Snake Ludo: turn-based snakes and ladders for 2-26 players",
        parents=[common],
    )
    sub = parser.add_subparsers(dest="command")

    p_play = sub.add_parser("play", help="Play a game", parents=[common])
    p_play.add_argument("num_players", type=_players, help=f"Number of players ({MIN_PLAYERS}-{MAX_PLAYERS})")
    p_play.add_argument("--board", help="Board definition file (default: built-in)")
    p_play.add_argument("--autoplay", action="store_true", help="Start in autoplay mode")
    p_play.add_argument("--delay", type=int, default=DEFAULT_DELAY_MS, help="Autoplay delay in ms")
    p_play.add_argument("--seed", type=int, help="Seed for the players' dice")
    p_play.add_argument("--ack-timeout", type=float, help="Fail if a redraw is not acknowledged in time (seconds)")
    p_play.add_argument("--shutdown-timeout", type=float, help="Give up waiting for an actor to exit (seconds)")
    p_play.add_argument("--lenient-acks", action="store_true", help="Warn instead of failing on a malformed ACK")
    p_play.add_argument("--no-color", action="store_true", help="Plain text board")
    p_play.add_argument("--png", help="Also redraw the board into this PNG")

    p_board = sub.add_parser("board", help="Validate and list a board file", parents=[common])
    p_board.add_argument("--board", help="Board definition file (default: built-in)")
    p_board.add_argument("--png", help="Save a picture of the board")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING,
        format="%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s",
    )

    try:
        if args.command == "play":
            return cmd_play(args)
        if args.command == "board":
            return cmd_board(args)
    except LudoError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
