"""Shared player state: positions, active count and finishing order."""

from __future__ import annotations

import string
from dataclasses import dataclass, field

from snake_ludo.board import FINISH, HOME

MIN_PLAYERS = 2
MAX_PLAYERS = 26
GLYPHS = string.ascii_uppercase


@dataclass(frozen=True)
class PlayerIdentity:
    index: int
    glyph: str

    @classmethod
    def for_index(cls, index: int) -> PlayerIdentity:
        return cls(index=index, glyph=GLYPHS[index])


@dataclass(frozen=True)
class StoreSnapshot:
    """Read-only view of the store at one instant, handed to renderers."""

    players: tuple[PlayerIdentity, ...]
    positions: tuple[int, ...]
    active_count: int
    finish_order: tuple[int, ...] = ()

    @property
    def num_players(self) -> int:
        return len(self.players)

    def at(self, cell: int) -> list[PlayerIdentity]:
        return [p for p, pos in zip(self.players, self.positions) if pos == cell]


@dataclass
class PlayerStore:
    """Positions of every player plus the active-player counter.

    Writes go through :meth:`commit_move` only. The turn supervisor grants
    exactly one worker the right to call it at a time, so there is no lock.
    """

    num_players: int
    positions: list[int] = field(default_factory=list)
    active_count: int = 0
    finish_order: list[int] = field(default_factory=list)
    players: tuple[PlayerIdentity, ...] = field(init=False, repr=False, default=())

    def __post_init__(self) -> None:
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ValueError(f"num_players must be {MIN_PLAYERS}-{MAX_PLAYERS}, got {self.num_players}")
        if not self.positions:
            self.positions = [HOME] * self.num_players
            self.active_count = self.num_players
            self.finish_order = []
        elif len(self.positions) != self.num_players:
            raise ValueError("positions length does not match num_players")
        else:
            # Seeded with a mid-game position.
            self.active_count = sum(1 for p in self.positions if p != FINISH)
            if not self.finish_order:
                self.finish_order = [i for i, p in enumerate(self.positions) if p == FINISH]
        self.players = tuple(PlayerIdentity.for_index(i) for i in range(self.num_players))

    def position(self, player: int) -> int:
        return self.positions[player]

    def others(self, player: int) -> list[int]:
        """Positions of every player except *player*."""
        return [pos for i, pos in enumerate(self.positions) if i != player]

    def commit_move(self, player: int, new_position: int) -> int | None:
        """Write *player*'s new position.

        Returns the finishing rank when this write moves the player onto
        the last cell, else None. A finished player cannot move again, so
        the active count drops at most once per player.
        """
        old = self.positions[player]
        if old == FINISH:
            raise ValueError(f"Player {self.players[player].glyph} already finished")
        if not HOME <= new_position <= FINISH:
            raise ValueError(f"Position {new_position} is off the board")
        self.positions[player] = new_position
        if new_position != FINISH:
            return None
        self.active_count -= 1
        self.finish_order.append(player)
        return self.num_players - self.active_count

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            players=self.players,
            positions=tuple(self.positions),
            active_count=self.active_count,
            finish_order=tuple(self.finish_order),
        )
