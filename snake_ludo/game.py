"""Coordinator — drives turns and user commands for a whole game."""

from __future__ import annotations

import enum
import logging
import queue
import random
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import IO

from snake_ludo.board import Board
from snake_ludo.config import GameConfig
from snake_ludo.errors import ActorStopped, LudoError, StartupError
from snake_ludo.events import Advance, RedrawRequest, Terminate
from snake_ludo.players import Dice, PlayerWorker
from snake_ludo.protocol import LineChannel, read_pid, wait_for_ack
from snake_ludo.render import Renderer, text_drawer
from snake_ludo.store import PlayerIdentity, PlayerStore
from snake_ludo.supervisor import TurnSupervisor

logger = logging.getLogger(__name__)

PROMPT = "+++ CP: Enter command: "
COMMANDS_HELP = "Commands: next, delay <ms>, autoplay, quit"


# ── Commands ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Command:
    name: str  # "next" | "delay" | "autoplay" | "quit" | "invalid"
    arg: int | None = None
    raw: str = ""
    error: str = ""


def parse_command(line: str) -> Command | None:
    """Parse one line of coordinator input. Blank lines give None."""
    text = line.strip()
    if not text:
        return None
    if text in ("next", "autoplay", "quit"):
        return Command(text, raw=text)

    word, _, rest = text.partition(" ")
    if word == "delay":
        try:
            ms = int(rest.strip())
        except ValueError:
            return Command("invalid", raw=text, error=f"delay needs an integer, got {rest.strip()!r}")
        return Command("delay", arg=max(0, ms), raw=text)
    return Command("invalid", raw=text, error=f"Unknown command '{text}'")


# ── Structured types ────────────────────────────────────────────────

class Mode(str, enum.Enum):
    INTERACTIVE = "interactive"
    AUTOPLAY = "autoplay"


class Phase(str, enum.Enum):
    RUNNING = "running"
    ENDED = "ended"


@dataclass
class GameResult:
    reason: str  # "finished" | "quit" | "eof" | "interrupted"
    turns: int = 0
    standings: list[tuple[int, PlayerIdentity]] = field(default_factory=list)

    @property
    def completed(self) -> bool:
        return self.reason == "finished"


# ── Coordinator ──────────────────────────────────────────────────────

class Coordinator:
    """Start every actor, run the command loop, then shut everything down.

    Each ``advance`` goes to the supervisor and the coordinator blocks on
    the renderer's ``ACK`` before doing anything else, so turns are
    strictly serialized.
    """

    def __init__(
        self,
        config: GameConfig,
        board: Board,
        input_fn: Callable[[str], str] = input,
        out: IO[str] | None = None,
        rng_factory: Callable[[int], Dice] | None = None,
        drawers: list | None = None,
    ):
        self.config = config
        self.board = board
        self.input_fn = input_fn
        self.out = out
        self.rng_factory = rng_factory or self._default_rng
        self.mode = Mode.AUTOPLAY if config.autoplay else Mode.INTERACTIVE
        self.delay_ms = config.delay_ms
        self.phase = Phase.RUNNING
        self.turns = 0

        self.store = PlayerStore(config.num_players)
        self.channel = LineChannel("ack")
        completions: queue.Queue = queue.Queue()
        self.renderer = Renderer(self.channel, drawers if drawers is not None else self._default_drawers())
        self.workers = [
            PlayerWorker(
                identity=p,
                board=board,
                store=self.store,
                renderer_inbox=self.renderer.inbox,
                completions=completions,
                rng=self.rng_factory(p.index),
                out=out,
            )
            for p in self.store.players
        ]
        self.supervisor = TurnSupervisor(
            store=self.store,
            workers=self.workers,
            renderer_inbox=self.renderer.inbox,
            completions=completions,
            channel=self.channel,
            join_timeout=config.shutdown_timeout,
            out=out,
        )
        self._stop = threading.Event()
        self._shut_down = False

    def _default_rng(self, index: int) -> Dice:
        if self.config.seed is None:
            return random.Random()
        return random.Random(self.config.seed * 31 + index)

    def _default_drawers(self) -> list:
        drawers = [text_drawer(self.board, out=self.out, color=self.config.color)]
        if self.config.png_path is not None:
            from snake_ludo.chart import image_drawer
            drawers.append(image_drawer(self.board, str(self.config.png_path)))
        return drawers

    def say(self, text: str = "") -> None:
        print(text, file=self.out or sys.stdout, flush=True)

    # ── lifecycle ────────────────────────────────────────────────────

    def start(self) -> None:
        """Bring up renderer and supervisor and wait for the first board."""
        try:
            self.renderer.start()
            pid = read_pid(self.channel, self.config.ack_timeout)
            self.say(f"+++ CP: BP started (PID {pid})")

            self.supervisor.start()
            pid = read_pid(self.channel, self.config.ack_timeout)
            self.say(f"+++ CP: PP started (PID {pid})")

            self.say("+++ CP: Waiting for initial board...")
            self.renderer.inbox.put(RedrawRequest(self.store.snapshot()))
            self._await_ack()
        except (LudoError, KeyboardInterrupt):
            self.shutdown()
            raise
        except Exception as exc:
            self.shutdown()
            raise StartupError(f"Could not start game actors: {exc}") from exc
        self.say("+++ CP: Game ready!\n")

    def _await_ack(self) -> None:
        wait_for_ack(self.channel, self.config.ack_timeout, strict=self.config.strict_acks)

    def step(self) -> None:
        """Advance one turn and block until its redraw is acknowledged."""
        if not self.supervisor.is_alive():
            raise ActorStopped("Turn supervisor is not running")
        self.supervisor.inbox.put(Advance())
        self._await_ack()
        self.turns += 1

    def request_stop(self) -> None:
        """Ask the loop to end before its next turn (safe from any thread)."""
        self._stop.set()

    def run(self) -> GameResult:
        self.banner()
        self.start()
        reason = "finished"
        try:
            reason = self._loop()
        except KeyboardInterrupt:
            self.say("\n+++ CP: Interrupted")
            reason = "interrupted"
        finally:
            self.phase = Phase.ENDED
            self.shutdown()

        result = GameResult(reason=reason, turns=self.turns, standings=self.standings())
        if self.store.active_count <= 0:
            self.say("\n" + "=" * 54)
            self.say("ALL PLAYERS HAVE FINISHED!".center(54))
            self.say("=" * 54)
            for rank, player in result.standings:
                self.say(f"  {rank:>2}. {player.glyph}")
        return result

    def _loop(self) -> str:
        self.say(COMMANDS_HELP)
        self.say("-" * 53 + "\n")

        while self.store.active_count > 0:
            if self._stop.is_set():
                return "quit"

            if self.mode is Mode.AUTOPLAY:
                if self._stop.wait(self.delay_ms / 1000):
                    return "quit"
                self.step()
                continue

            try:
                line = self.input_fn(PROMPT)
            except EOFError:
                return "eof"

            cmd = parse_command(line)
            if cmd is None:
                continue
            if cmd.name == "quit":
                self.say("+++ CP: User requested quit")
                return "quit"
            if cmd.name == "next":
                self.step()
            elif cmd.name == "delay":
                self.delay_ms = cmd.arg
                self.say(f"+++ CP: Delay set to {self.delay_ms} ms")
            elif cmd.name == "autoplay":
                self.mode = Mode.AUTOPLAY
                self.say(f"+++ CP: Switching to autoplay mode (delay: {self.delay_ms} ms)")
            else:
                self.say(f"+++ CP: {cmd.error}")
        return "finished"

    def shutdown(self) -> None:
        """Stop supervisor (and through it every worker), then the renderer."""
        if self._shut_down:
            return
        self._shut_down = True
        timeout = self.config.shutdown_timeout
        self.say("\n+++ CP: Cleaning up...")

        if self.supervisor.is_alive():
            self.say("+++ CP: Terminating players")
            self.supervisor.inbox.put(Terminate())
            self.supervisor.join(timeout)
            if self.supervisor.is_alive():
                logger.warning("Supervisor did not exit within %ss", timeout)

        if self.renderer.is_alive():
            self.say("+++ CP: Terminating board")
            self.renderer.inbox.put(Terminate())
            self.renderer.join(timeout)
            if self.renderer.is_alive():
                logger.warning("Renderer did not exit within %ss", timeout)

        self.channel.close()
        self.say("+++ CP: Cleanup complete. Goodbye!")

    # ── reporting ────────────────────────────────────────────────────

    def banner(self) -> None:
        self.say("-" * 54)
        self.say("|" + "SNAKE LUDO - Coordinator".center(52) + "|")
        self.say("-" * 54)
        self.say(f"|  Players: {self.config.num_players:<41d}|")
        self.say("-" * 54 + "\n")
        for start, end in self.board.ladders():
            self.say(f"  Ladder: {start} -> {end}")
        for start, end in self.board.snakes():
            self.say(f"  Snake: {start} -> {end}")

    def standings(self) -> list[tuple[int, PlayerIdentity]]:
        return [
            (rank, self.store.players[idx])
            for rank, idx in enumerate(self.store.finish_order, start=1)
        ]
