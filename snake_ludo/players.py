"""Player workers — one thread per player, rolling dice and moving."""

from __future__ import annotations

import enum
import logging
import queue
import random
import sys
import threading
from typing import IO, Protocol

from snake_ludo.board import FINISH, Board
from snake_ludo.events import (
    DiceRoll,
    MoveCompleted,
    RedrawRequest,
    Terminate,
    TurnDispatch,
    TurnReport,
)
from snake_ludo.resolver import Outcome, resolve
from snake_ludo.store import PlayerIdentity, PlayerStore

logger = logging.getLogger(__name__)

MAX_SIXES = 3  # three 6s in a row cancel the move


class Dice(Protocol):
    """Anything with ``random.Random.randint``'s signature."""

    def randint(self, a: int, b: int) -> int: ...


def roll_dice(rng: Dice) -> DiceRoll:
    """Roll until a non-6 comes up, stopping after three 6s."""
    rolls: list[int] = []
    while len(rolls) < MAX_SIXES:
        die = rng.randint(1, 6)
        rolls.append(die)
        if die != 6:
            break
    return DiceRoll(tuple(rolls))


class WorkerState(str, enum.Enum):
    IDLE = "idle"
    ROLLING = "rolling"
    RESOLVING = "resolving"
    DONE = "done"


# ── Turn description ────────────────────────────────────────────────

def describe_turn(report: TurnReport) -> list[str]:
    """Human-readable lines for the players' console."""
    g = report.player.glyph
    if report.outcome is Outcome.FINISHED:
        return [f"    {g} has already finished"]

    lines = [f">>> {g}'s turn (at cell {report.start})"]
    dice = report.dice
    if dice is not None:
        thrown = " + ".join(str(r) for r in dice.rolls)
        if dice.cancelled:
            lines.append(f"    {g} throws: {thrown} = {sum(dice.rolls)} (X) Three 6's! Move cancelled.")
        else:
            lines.append(f"    {g} throws: {thrown} = {dice.total}")

    res = report.resolution
    if report.outcome is Outcome.OVERSHOOT and res is not None:
        lines.append(
            f"    Move not allowed: {res.start} + {res.dice_total} = "
            f"{res.start + res.dice_total} > {FINISH}"
        )
    elif report.outcome is Outcome.OCCUPIED and res is not None:
        lines.append(f"    Move not allowed: cell {res.landing} is occupied")
    elif report.outcome is Outcome.MOVED and res is not None:
        lines.append(f"    {g} moves: {res.start} -> {res.landing}")
        for step in res.steps:
            verb = "climbs ladder" if step.is_ladder else "bitten by snake"
            lines.append(f"    {g} {verb}: {step.start} -> {step.end}")
            if not step.taken:
                lines.append(f"    But cell {step.end} is occupied! Staying at {step.start}")

    if report.rank is not None:
        lines.append(f"    *** {g} reaches destination! Rank: {report.rank} ***")
    return lines


# ── Worker ──────────────────────────────────────────────────────────

class PlayerWorker(threading.Thread):
    """Owns one player's dice and moves.

    Waits on :attr:`inbox` for :class:`TurnDispatch`, plays the turn,
    asks the renderer to redraw and reports back to the supervisor.
    """

    def __init__(
        self,
        identity: PlayerIdentity,
        board: Board,
        store: PlayerStore,
        renderer_inbox: queue.Queue,
        completions: queue.Queue,
        rng: Dice | None = None,
        out: IO[str] | None = None,
    ):
        super().__init__(name=f"player-{identity.glyph}", daemon=True)
        self.identity = identity
        self.board = board
        self.store = store
        self.renderer_inbox = renderer_inbox
        self.completions = completions
        self.rng = rng or random.Random()
        self.out = out
        self.inbox: queue.Queue = queue.Queue()
        self.state = WorkerState.IDLE
        self.turns_played = 0

    def take_turn(self) -> TurnReport:
        """Roll, resolve and write this player's move. No messaging."""
        idx = self.identity.index
        start = self.store.position(idx)
        if start == FINISH:
            self.state = WorkerState.DONE
            return TurnReport(self.identity, start, Outcome.FINISHED, start)

        self.state = WorkerState.ROLLING
        dice = roll_dice(self.rng)

        self.state = WorkerState.RESOLVING
        res = resolve(self.board, start, dice.total, self.store.others(idx))
        rank = None
        if res.moved:
            rank = self.store.commit_move(idx, res.final_position)

        self.state = WorkerState.DONE
        self.turns_played += 1
        return TurnReport(
            player=self.identity,
            start=start,
            outcome=res.outcome,
            final_position=res.final_position,
            dice=dice,
            resolution=res,
            rank=rank,
        )

    def handle(self, dispatch: TurnDispatch) -> TurnReport:
        report = self.take_turn()
        for line in describe_turn(report):
            print(line, file=self.out or sys.stdout, flush=True)
        # The snapshot is taken after the write, so the redraw shows this turn.
        self.renderer_inbox.put(RedrawRequest(self.store.snapshot(), report))
        self.completions.put(MoveCompleted(self.identity.index, dispatch.turn_number, report))
        self.state = WorkerState.IDLE
        return report

    def run(self) -> None:
        logger.debug("Player %s started", self.identity.glyph)
        while True:
            msg = self.inbox.get()
            if isinstance(msg, Terminate):
                break
            if isinstance(msg, TurnDispatch):
                self.handle(msg)
            else:
                logger.warning("Player %s ignoring %r", self.identity.glyph, msg)
        logger.debug("Player %s exiting", self.identity.glyph)
