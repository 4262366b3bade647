"""Runtime configuration assembled from the command line and environment."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path

from snake_ludo.errors import ConfigError
from snake_ludo.store import MAX_PLAYERS, MIN_PLAYERS

DEFAULT_DELAY_MS = 1000
BOARD_ENV = "SNAKE_LUDO_BOARD"
SEED_ENV = "SNAKE_LUDO_SEED"


@dataclass
class GameConfig:
    num_players: int
    board_path: Path | None = None  # None = built-in classic layout
    delay_ms: int = DEFAULT_DELAY_MS
    autoplay: bool = False
    seed: int | None = None
    ack_timeout: float | None = None
    shutdown_timeout: float | None = None
    strict_acks: bool = True
    color: bool = True
    png_path: Path | None = None

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ConfigError(f"num_players must be {MIN_PLAYERS}-{MAX_PLAYERS}")
        self.delay_ms = max(0, self.delay_ms)
        for name in ("ack_timeout", "shutdown_timeout"):
            value = getattr(self, name)
            if value is not None and value <= 0:
                raise ConfigError(f"{name.replace('_', '-')} must be positive")

    @classmethod
    def from_args(cls, args: argparse.Namespace, environ: dict[str, str] | None = None) -> GameConfig:
        env = os.environ if environ is None else environ

        board = args.board or env.get(BOARD_ENV)
        seed = args.seed
        if seed is None and env.get(SEED_ENV):
            try:
                seed = int(env[SEED_ENV])
            except ValueError:
                raise ConfigError(f"{SEED_ENV} must be an integer, got {env[SEED_ENV]!r}") from None

        return cls(
            num_players=args.num_players,
            board_path=Path(board) if board else None,
            delay_ms=args.delay,
            autoplay=args.autoplay,
            seed=seed,
            ack_timeout=args.ack_timeout,
            shutdown_timeout=args.shutdown_timeout,
            strict_acks=not args.lenient_acks,
            color=not args.no_color,
            png_path=Path(args.png) if args.png else None,
        )
