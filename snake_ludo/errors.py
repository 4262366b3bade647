"""Exception types raised by the game."""

from __future__ import annotations


class LudoError(Exception):
    """Base class for every fatal game error."""


class ConfigError(LudoError):
    """Bad command-line or environment configuration."""


class BoardError(LudoError):
    """The board definition could not be read or parsed."""


class StartupError(LudoError):
    """An actor or channel could not be brought up."""


class ProtocolError(LudoError):
    """The acknowledgment channel carried something unexpected."""


class ProtocolStall(ProtocolError):
    """No acknowledgment arrived within the configured wait."""


class ActorStopped(LudoError):
    """An actor thread exited while the game still needed it."""
