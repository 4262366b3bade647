"""Board layout and board-definition file parsing for Snake Ludo."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from snake_ludo.errors import BoardError

logger = logging.getLogger(__name__)

BOARD_SIZE = 101  # cells 0..100, index 0 unused
HOME = 0
FINISH = 100

# fmt: off
CLASSIC_LAYOUT: dict[int, int] = {
    # Ladders (go UP)
     1: 38,   4: 14,   9: 31,  21: 42,  28: 84,
    36: 44,  51: 67,  71: 91,  80: 100,
    # Snakes (go DOWN)
    16:  6,  47: 26,  49: 11,  56: 53,  62: 19,
    64: 60,  87: 24,  93: 73,  95: 75,  98: 78,
}
# fmt: on


@dataclass(frozen=True)
class Board:
    """Per-cell effect table.

    ``cells[i] > 0`` is a ladder from ``i`` to ``i + cells[i]``,
    ``cells[i] < 0`` is a snake from ``i`` to ``i + cells[i]``.
    """

    cells: tuple[int, ...] = (0,) * BOARD_SIZE

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_SIZE:
            raise BoardError(f"Board must have {BOARD_SIZE} cells, got {len(self.cells)}")
        for cell, delta in enumerate(self.cells):
            if delta == 0:
                continue
            if cell < 1 or cell > FINISH:
                raise BoardError(f"Effect on invalid cell {cell}")
            if not 1 <= cell + delta <= FINISH:
                raise BoardError(f"Effect at cell {cell} points outside the board ({cell + delta})")

    @classmethod
    def from_pairs(cls, pairs: dict[int, int]) -> Board:
        """Build a board from ``{from_cell: to_cell}``."""
        cells = [0] * BOARD_SIZE
        for start, end in pairs.items():
            _check_endpoint(start)
            _check_endpoint(end)
            cells[start] = end - start
        return cls(tuple(cells))

    def effect(self, cell: int) -> int:
        if 0 <= cell < BOARD_SIZE:
            return self.cells[cell]
        return 0

    def destination(self, cell: int) -> int | None:
        delta = self.effect(cell)
        return cell + delta if delta else None

    def is_ladder(self, cell: int) -> bool:
        return self.effect(cell) > 0

    def is_snake(self, cell: int) -> bool:
        return self.effect(cell) < 0

    def ladders(self) -> list[tuple[int, int]]:
        return [(c, c + d) for c, d in enumerate(self.cells) if d > 0]

    def snakes(self) -> list[tuple[int, int]]:
        return [(c, c + d) for c, d in enumerate(self.cells) if d < 0]


def _check_endpoint(cell: int) -> None:
    if not 1 <= cell <= FINISH:
        raise BoardError(f"Cell {cell} is outside 1-{FINISH}")


CLASSIC_BOARD = Board.from_pairs(CLASSIC_LAYOUT)


def parse_board(text: str) -> Board:
    """Parse ``L <from> <to>`` / ``S <from> <to>`` records up to ``E``.

    Records are read as a token stream, so a record may be split across
    lines. Later records for the same cell override earlier ones.
    """
    tokens = text.split()
    pairs: dict[int, int] = {}
    i = 0
    while i < len(tokens):
        kind = tokens[i]
        if kind.startswith("E"):
            break
        fields = tokens[i + 1:i + 3]
        if len(fields) != 2:
            raise BoardError(f"Record {kind!r} needs two cells, got {len(fields)}")
        try:
            start, end = int(fields[0]), int(fields[1])
        except ValueError:
            raise BoardError(f"Record {kind} {fields[0]} {fields[1]}: cells must be integers") from None
        i += 3

        if kind not in ("L", "S"):
            logger.warning("Skipping unknown board record %r %d %d", kind, start, end)
            continue
        _check_endpoint(start)
        _check_endpoint(end)
        pairs[start] = end
    return Board.from_pairs(pairs)


def load_board(path: Path | str) -> Board:
    """Read and parse a board definition file."""
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise BoardError(f"Cannot read board file {path}: {exc}") from exc
    board = parse_board(text)
    logger.debug("Loaded %d ladders and %d snakes from %s",
                 len(board.ladders()), len(board.snakes()), path)
    return board
