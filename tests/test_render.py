"""Tests for the text board and the renderer actor."""

import io

from snake_ludo.board import Board
from snake_ludo.events import RedrawRequest, Terminate
from snake_ludo.protocol import LineChannel, read_pid, wait_for_ack
from snake_ludo.render import Renderer, display_cell, render_text, text_drawer
from snake_ludo.store import PlayerStore


def test_display_cell_zigzag():
    assert display_cell(9, 0) == 1      # bottom-left
    assert display_cell(9, 9) == 10
    assert display_cell(8, 9) == 11     # second row runs right to left
    assert display_cell(8, 0) == 20
    assert display_cell(0, 0) == 100    # top-left


def test_render_text_plain():
    board = Board.from_pairs({3: 20, 17: 7})
    store = PlayerStore(3, positions=[20, 0, 100])
    text = render_text(board, store.snapshot(), color=False)

    assert "Finished: C" in text
    assert "Home: B" in text
    assert "Active players: 2 / 3" in text
    assert "L3 " in text
    assert "S17 " in text
    assert "A20 " in text
    assert "\033[" not in text


def test_render_text_empty_finish():
    store = PlayerStore(2)
    text = render_text(Board(), store.snapshot(), color=False)
    assert "Finished: (none)" in text
    assert "Home: A, B" in text


def test_render_text_color_codes():
    board = Board.from_pairs({3: 20})
    text = render_text(board, PlayerStore(2).snapshot(), color=True)
    assert "\033[32mL3" in text


def test_text_drawer_writes_board():
    out = io.StringIO()
    draw = text_drawer(Board(), out=out, color=False)
    draw(RedrawRequest(PlayerStore(2).snapshot()))
    assert "Active players: 2 / 2" in out.getvalue()


def test_renderer_acks_each_redraw():
    channel = LineChannel()
    seen = []
    r = Renderer(channel, [lambda req: seen.append(req.snapshot.positions)])
    r.start()
    assert read_pid(channel, timeout=5) > 0

    store = PlayerStore(2)
    r.inbox.put(RedrawRequest(store.snapshot()))
    assert wait_for_ack(channel, timeout=5) == "ACK"
    store.commit_move(1, 9)
    r.inbox.put(RedrawRequest(store.snapshot()))
    assert wait_for_ack(channel, timeout=5) == "ACK"

    r.inbox.put(Terminate())
    r.join(timeout=5)
    assert not r.is_alive()
    assert seen == [(0, 0), (0, 9)]
    assert r.redraws == 2


def test_renderer_reports_drawing_failure():
    channel = LineChannel()

    def broken(req):
        raise RuntimeError("no display")

    r = Renderer(channel, [broken])
    r.start()
    read_pid(channel, timeout=5)
    r.inbox.put(RedrawRequest(PlayerStore(2).snapshot()))
    assert channel.readline(timeout=5) == "ERROR:no display"
    assert r.is_alive()
    r.inbox.put(Terminate())
    r.join(timeout=5)
    assert not r.is_alive()
    assert r.redraws == 0


def test_renderer_keeps_serving_after_a_failed_redraw():
    channel = LineChannel()
    calls = []

    def flaky(req):
        calls.append(req)
        if len(calls) == 1:
            raise RuntimeError("disk\nfull")

    r = Renderer(channel, [flaky])
    r.start()
    read_pid(channel, timeout=5)
    r.inbox.put(RedrawRequest(PlayerStore(2).snapshot()))
    assert channel.readline(timeout=5) == "ERROR:disk full"
    r.inbox.put(RedrawRequest(PlayerStore(2).snapshot()))
    assert wait_for_ack(channel, timeout=5) == "ACK"
    r.inbox.put(Terminate())
    r.join(timeout=5)
    assert r.redraws == 1
