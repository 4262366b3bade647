"""Board rendering and the renderer actor."""

from __future__ import annotations

import logging
import queue
import sys
import threading
from collections.abc import Callable
from typing import IO

from snake_ludo.board import FINISH, HOME, Board
from snake_ludo.events import RedrawRequest, Terminate
from snake_ludo.protocol import LineChannel, encode_ack, encode_pid
from snake_ludo.store import StoreSnapshot

logger = logging.getLogger(__name__)

WIDTH = 72
CLEAR = "\033[2J\033[H"
GREEN = "\033[32m"
RED = "\033[31m"
YELLOW = "\033[1;33m"
RESET = "\033[0m"


def display_cell(row: int, col: int) -> int:
    """Cell number at a grid position; row 0 is the top (91-100), zigzag."""
    base_row = 9 - row
    if base_row % 2 == 0:
        return base_row * 10 + col + 1
    return base_row * 10 + (10 - col)


def _paint(text: str, code: str, color: bool) -> str:
    return f"{code}{text}{RESET}" if color else text


def _boxed(text: str) -> str:
    return "|" + text.ljust(WIDTH) + "|"


def _names(snapshot: StoreSnapshot, cell: int) -> str:
    glyphs = [p.glyph for p in snapshot.at(cell)]
    return ", ".join(glyphs) if glyphs else "(none)"


def render_text(board: Board, snapshot: StoreSnapshot, color: bool = True) -> str:
    rule = "+" + "-" * WIDTH + "+"
    finished = ", ".join(snapshot.players[i].glyph for i in snapshot.finish_order) or "(none)"
    lines = [rule, _boxed(f"  Finished: {finished}"), rule]

    for row in range(10):
        parts = []
        for col in range(10):
            cell = display_cell(row, col)
            here = snapshot.at(cell) if cell < FINISH else []
            if here:
                parts.append(_paint(here[0].glyph, YELLOW, color) + f"{cell:<5d}")
            elif board.is_ladder(cell):
                parts.append(_paint(f"L{cell:<5d}", GREEN, color))
            elif board.is_snake(cell):
                parts.append(_paint(f"S{cell:<5d}", RED, color))
            else:
                parts.append(f"{cell:<6d}")
        lines.append("| " + " ".join(parts) + " |")

    lines += [
        rule,
        _boxed(f"  Home: {_names(snapshot, HOME)}"),
        _boxed(f"  Active players: {snapshot.active_count} / {snapshot.num_players}"),
        rule,
        "",
        "  " + _paint("L", GREEN, color) + " = Ladder   "
        + _paint("S", RED, color) + " = Snake   "
        + _paint("X", YELLOW, color) + " = Player X at cell",
    ]
    return "\n".join(lines)


def text_drawer(board: Board, out: IO[str] | None = None, color: bool = True) -> Callable[[RedrawRequest], None]:
    def draw(request: RedrawRequest) -> None:
        stream = out or sys.stdout
        if color:
            stream.write(CLEAR)
        print(render_text(board, request.snapshot, color=color), file=stream, flush=True)

    return draw


class Renderer(threading.Thread):
    """Redraws on every :class:`RedrawRequest` and acknowledges on *channel*."""

    def __init__(
        self,
        channel: LineChannel,
        drawers: list[Callable[[RedrawRequest], None]],
    ):
        super().__init__(name="renderer", daemon=True)
        self.channel = channel
        self.drawers = drawers
        self.inbox: queue.Queue = queue.Queue()
        self.redraws = 0

    def redraw(self, request: RedrawRequest) -> None:
        for draw in self.drawers:
            draw(request)
        self.redraws += 1
        self.channel.write(encode_ack())

    def run(self) -> None:
        self.channel.write(encode_pid(threading.get_native_id()))
        while True:
            msg = self.inbox.get()
            if isinstance(msg, Terminate):
                break
            if isinstance(msg, RedrawRequest):
                try:
                    self.redraw(msg)
                except Exception as exc:
                    logger.exception("Redraw failed")
                    # Anything but ACK is a protocol error for the coordinator.
                    self.channel.write(f"ERROR:{' '.join(str(exc).split())}\n")
            else:
                logger.warning("Renderer ignoring %r", msg)
        logger.debug("Renderer exiting after %d redraws", self.redraws)
