"""Movement resolution: dice total + board effects + occupancy rules.

Pure functions; the caller writes the result into the player store.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass, field

from snake_ludo.board import FINISH, HOME, Board


class Outcome(str, enum.Enum):
    MOVED = "moved"
    CANCELLED = "cancelled"      # three 6s in a row
    OVERSHOOT = "overshoot"      # would pass 100
    OCCUPIED = "occupied"        # landing cell held by another player
    FINISHED = "finished"        # no-op turn for a player already at 100


@dataclass(frozen=True)
class ChainStep:
    """One ladder or snake on the effect chain."""

    start: int
    end: int
    taken: bool = True

    @property
    def is_ladder(self) -> bool:
        return self.end > self.start


@dataclass(frozen=True)
class Resolution:
    start: int
    dice_total: int
    final_position: int
    outcome: Outcome
    landing: int | None = None
    steps: tuple[ChainStep, ...] = field(default_factory=tuple)

    @property
    def occupied_blocked(self) -> bool:
        """True when an occupied cell stopped the move or any chain step."""
        if self.outcome is Outcome.OCCUPIED:
            return True
        return any(not s.taken for s in self.steps)

    @property
    def moved(self) -> bool:
        return self.final_position != self.start


def is_occupied(cell: int, others: Iterable[int]) -> bool:
    """Home and finish hold any number of players."""
    if cell <= HOME or cell >= FINISH:
        return False
    return cell in set(others)


def resolve(
    board: Board,
    position: int,
    dice_total: int,
    other_positions: Iterable[int],
) -> Resolution:
    """Compute where a player at *position* ends up after *dice_total*.

    A total of 0 is a cancelled roll. The effect chain stops at a neutral
    cell, at a cell already visited during this resolution, or before a
    jump whose destination is occupied.
    """
    if not HOME <= position < FINISH:
        raise ValueError(f"Cannot move from position {position}")
    if dice_total < 0:
        raise ValueError(f"Negative dice total {dice_total}")

    others = set(other_positions)

    if dice_total == 0:
        return Resolution(position, 0, position, Outcome.CANCELLED)

    target = position + dice_total
    if target > FINISH:
        return Resolution(position, dice_total, position, Outcome.OVERSHOOT)
    if is_occupied(target, others):
        return Resolution(position, dice_total, position, Outcome.OCCUPIED, landing=target)

    current = target
    visited: set[int] = set()
    steps: list[ChainStep] = []
    while HOME < current < FINISH and board.effect(current) and current not in visited:
        visited.add(current)
        nxt = current + board.effect(current)
        if is_occupied(nxt, others):
            steps.append(ChainStep(current, nxt, taken=False))
            break
        steps.append(ChainStep(current, nxt))
        current = nxt

    return Resolution(
        start=position,
        dice_total=dice_total,
        final_position=current,
        outcome=Outcome.MOVED,
        landing=target,
        steps=tuple(steps),
    )
