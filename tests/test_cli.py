"""Tests for configuration and the command-line entry point."""

from pathlib import Path

import pytest

from snake_ludo.__main__ import build_parser, main
from snake_ludo.config import BOARD_ENV, SEED_ENV, GameConfig
from snake_ludo.errors import ConfigError


def _args(*argv):
    return build_parser().parse_args(["play", *argv])


# ── GameConfig ───────────────────────────────────────────────────────

def test_defaults_from_args():
    cfg = GameConfig.from_args(_args("4"), environ={})
    assert cfg.num_players == 4
    assert cfg.board_path is None
    assert cfg.delay_ms == 1000
    assert cfg.strict_acks
    assert cfg.color
    assert cfg.seed is None


def test_flags_from_args():
    cfg = GameConfig.from_args(
        _args("3", "--board", "b.txt", "--autoplay", "--delay", "-20", "--seed", "9",
              "--ack-timeout", "2.5", "--lenient-acks", "--no-color", "--png", "out.png"),
        environ={},
    )
    assert cfg.board_path == Path("b.txt")
    assert cfg.autoplay
    assert cfg.delay_ms == 0
    assert cfg.seed == 9
    assert cfg.ack_timeout == 2.5
    assert not cfg.strict_acks
    assert not cfg.color
    assert cfg.png_path == Path("out.png")


def test_environment_fallbacks():
    cfg = GameConfig.from_args(_args("2"), environ={BOARD_ENV: "env.txt", SEED_ENV: "12"})
    assert cfg.board_path == Path("env.txt")
    assert cfg.seed == 12


def test_bad_seed_env():
    with pytest.raises(ConfigError):
        GameConfig.from_args(_args("2"), environ={SEED_ENV: "lucky"})


def test_player_count_validated():
    with pytest.raises(ConfigError):
        GameConfig(num_players=1)
    with pytest.raises(ConfigError):
        GameConfig(num_players=27)


def test_non_positive_timeout_rejected():
    with pytest.raises(ConfigError):
        GameConfig(num_players=2, ack_timeout=0)


def test_parser_rejects_player_count():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["play", "30"])


def test_verbose_accepted_before_or_after_subcommand():
    parser = build_parser()
    assert parser.parse_args(["play", "2", "--verbose"]).verbose is True
    assert parser.parse_args(["board", "-v"]).verbose is True
    assert parser.parse_args(["-v", "board"]).verbose is True
    assert not hasattr(parser.parse_args(["board"]), "verbose")


def test_board_command_with_trailing_verbose(capsys):
    assert main(["board", "--verbose"]) == 0
    assert "9 ladders, 10 snakes" in capsys.readouterr().out


# ── main ─────────────────────────────────────────────────────────────

def test_board_command_lists_file(tmp_path, capsys):
    path = tmp_path / "ludo.txt"
    path.write_text("L 3 20\nS 17 7\nE\n")
    assert main(["board", "--board", str(path)]) == 0
    out = capsys.readouterr().out
    assert "Ladder: 3 -> 20" in out
    assert "Snake: 17 -> 7" in out
    assert "1 ladders, 1 snakes" in out


def test_board_command_builtin(capsys):
    assert main(["board"]) == 0
    assert "9 ladders, 10 snakes" in capsys.readouterr().out


def test_bad_board_file_exits_nonzero(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_text("L 3\n")
    assert main(["board", "--board", str(path)]) == 1
    assert "Error:" in capsys.readouterr().err


def test_play_missing_board_exits_nonzero(tmp_path, capsys):
    assert main(["play", "2", "--board", str(tmp_path / "missing.txt")]) == 1
    assert "Cannot read board file" in capsys.readouterr().err


def test_play_autoplay_to_the_end(monkeypatch, capsys):
    monkeypatch.delenv(BOARD_ENV, raising=False)
    monkeypatch.delenv(SEED_ENV, raising=False)
    code = main(["play", "2", "--autoplay", "--delay", "0", "--seed", "3",
                 "--no-color", "--ack-timeout", "10"])
    assert code == 0
    assert "ALL PLAYERS HAVE FINISHED!" in capsys.readouterr().out


def test_sample_board_file_loads():
    root = Path(__file__).resolve().parent.parent
    assert main(["board", "--board", str(root / "boards" / "ludo.txt")]) == 0


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()
