"""Tests for snake_ludo.store."""

import pytest

from snake_ludo.store import PlayerIdentity, PlayerStore


def test_initial_state():
    s = PlayerStore(3)
    assert s.positions == [0, 0, 0]
    assert s.active_count == 3
    assert [p.glyph for p in s.players] == ["A", "B", "C"]


def test_player_count_limits():
    with pytest.raises(ValueError):
        PlayerStore(1)
    with pytest.raises(ValueError):
        PlayerStore(27)
    assert PlayerStore(26).players[-1] == PlayerIdentity(25, "Z")


def test_commit_plain_move():
    s = PlayerStore(2)
    assert s.commit_move(0, 14) is None
    assert s.position(0) == 14
    assert s.active_count == 2


def test_finishing_decrements_once_and_ranks():
    s = PlayerStore(3)
    assert s.commit_move(1, 100) == 1
    assert s.active_count == 2
    assert s.commit_move(0, 100) == 2
    assert s.commit_move(2, 100) == 3
    assert s.active_count == 0
    assert s.finish_order == [1, 0, 2]


def test_finished_player_cannot_be_written():
    s = PlayerStore(2)
    s.commit_move(0, 100)
    with pytest.raises(ValueError):
        s.commit_move(0, 50)
    assert s.active_count == 1


def test_active_count_matches_unfinished_players():
    s = PlayerStore(4)
    for idx, pos in [(0, 30), (1, 100), (2, 99), (3, 100)]:
        s.commit_move(idx, pos)
    assert s.active_count == sum(1 for p in s.positions if p != 100)


def test_off_board_position_rejected():
    s = PlayerStore(2)
    with pytest.raises(ValueError):
        s.commit_move(0, 101)


def test_seeded_positions():
    s = PlayerStore(3, positions=[10, 100, 0])
    assert s.active_count == 2
    assert s.finish_order == [1]


def test_others_excludes_self():
    s = PlayerStore(3, positions=[10, 14, 0])
    assert s.others(0) == [14, 0]


def test_snapshot_is_a_copy():
    s = PlayerStore(2)
    snap = s.snapshot()
    s.commit_move(0, 5)
    assert snap.positions == (0, 0)
    assert s.snapshot().positions == (5, 0)
    assert [p.glyph for p in s.snapshot().at(5)] == ["A"]
