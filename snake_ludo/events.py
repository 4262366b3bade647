"""Messages exchanged between the game's actors."""

from __future__ import annotations

from dataclasses import dataclass, field

from snake_ludo.resolver import Outcome, Resolution
from snake_ludo.store import PlayerIdentity, StoreSnapshot


@dataclass(frozen=True)
class DiceRoll:
    rolls: tuple[int, ...]

    @property
    def cancelled(self) -> bool:
        return len(self.rolls) == 3 and all(r == 6 for r in self.rolls)

    @property
    def total(self) -> int:
        return 0 if self.cancelled else sum(self.rolls)


@dataclass(frozen=True)
class TurnReport:
    """Everything that happened during one player's turn."""

    player: PlayerIdentity
    start: int
    outcome: Outcome
    final_position: int
    dice: DiceRoll | None = None
    resolution: Resolution | None = None
    rank: int | None = None


# ── Coordinator → supervisor ────────────────────────────────────────

@dataclass(frozen=True)
class Advance:
    """Dispatch the next active player's turn."""


@dataclass(frozen=True)
class Terminate:
    """Stop the receiving actor after its current step."""


# ── Supervisor ⇄ worker ─────────────────────────────────────────────

@dataclass(frozen=True)
class TurnDispatch:
    turn_number: int


@dataclass(frozen=True)
class MoveCompleted:
    player: int
    turn_number: int
    report: TurnReport | None = None


# ── Worker/supervisor → renderer ────────────────────────────────────

@dataclass(frozen=True)
class RedrawRequest:
    snapshot: StoreSnapshot
    report: TurnReport | None = None
    notes: tuple[str, ...] = field(default_factory=tuple)
