"""Draw the board, its ladders/snakes and the players as a PNG."""

from __future__ import annotations

import matplotlib
matplotlib.use("Agg")  # non-interactive backend

import matplotlib.pyplot as plt

from snake_ludo.board import FINISH, Board
from snake_ludo.events import RedrawRequest
from snake_ludo.store import StoreSnapshot


def cell_center(cell: int) -> tuple[float, float]:
    """(x, y) of a cell's center on a 10x10 zigzag grid, cell 1 bottom-left."""
    row, offset = divmod(cell - 1, 10)
    col = offset if row % 2 == 0 else 9 - offset
    return col + 0.5, row + 0.5


def make_board_chart(
    board: Board,
    snapshot: StoreSnapshot | None = None,
    output_path: str = "board.png",
    title: str = "Snake Ludo",
) -> str:
    """Render the board to *output_path* and return the path."""
    fig, ax = plt.subplots(figsize=(8, 8))

    for cell in range(1, FINISH + 1):
        x, y = cell_center(cell)
        shade = "#F3EFE0" if (int(x) + int(y)) % 2 == 0 else "#E2DCC8"
        ax.add_patch(plt.Rectangle((x - 0.5, y - 0.5), 1, 1, facecolor=shade, edgecolor="white"))
        ax.text(x - 0.42, y + 0.3, str(cell), fontsize=7, color="#555555")

    for start, end in board.ladders():
        _arrow(ax, start, end, color="#2E8B57")
    for start, end in board.snakes():
        _arrow(ax, start, end, color="#C0392B")

    if snapshot is not None:
        # Several players may share home or finish; stack their glyphs.
        stacked: dict[int, int] = {}
        for player, pos in zip(snapshot.players, snapshot.positions):
            if pos < 1:
                continue
            x, y = cell_center(pos)
            k = stacked.get(pos, 0)
            stacked[pos] = k + 1
            ax.text(
                x + 0.1 * k, y - 0.1 * k, player.glyph,
                ha="center", va="center", fontsize=12, fontweight="bold",
                color="#1F3A93",
            )
        title = f"{title}  (active {snapshot.active_count}/{snapshot.num_players})"

    ax.set_xlim(0, 10)
    ax.set_ylim(0, 10)
    ax.set_aspect("equal")
    ax.axis("off")
    ax.set_title(title, fontsize=14, fontweight="bold")

    plt.tight_layout()
    fig.savefig(output_path, dpi=100)
    plt.close(fig)
    return output_path


def _arrow(ax, start: int, end: int, color: str) -> None:
    x0, y0 = cell_center(start)
    x1, y1 = cell_center(end)
    ax.annotate(
        "", xy=(x1, y1), xytext=(x0, y0),
        arrowprops={"arrowstyle": "->", "color": color, "lw": 2, "alpha": 0.8},
    )


def image_drawer(board: Board, output_path: str):
    """Renderer hook that rewrites *output_path* on every redraw."""

    def draw(request: RedrawRequest) -> None:
        make_board_chart(board, request.snapshot, output_path=output_path)

    return draw
