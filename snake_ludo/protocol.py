"""Line-oriented acknowledgment channel between actors and the coordinator.

Two message shapes travel on it, each terminated by a newline:

    PID:<integer>   an actor announcing itself at startup
    ACK             an actor finished reacting to the latest state change
"""

from __future__ import annotations

import logging
import queue
from dataclasses import dataclass

from snake_ludo.errors import ProtocolError, ProtocolStall

logger = logging.getLogger(__name__)

ACK = "ACK"
PID_PREFIX = "PID:"


def encode_ack() -> str:
    return f"{ACK}\n"


def encode_pid(pid: int) -> str:
    return f"{PID_PREFIX}{pid}\n"


def parse_pid(line: str) -> int:
    """Extract the integer from a ``PID:<n>`` line."""
    line = line.rstrip("\n")
    if not line.startswith(PID_PREFIX):
        raise ProtocolError(f"Expected PID announcement, got {line!r}")
    try:
        return int(line[len(PID_PREFIX):])
    except ValueError:
        raise ProtocolError(f"Malformed PID announcement {line!r}") from None


def is_ack(line: str) -> bool:
    # Only the first three bytes are significant.
    return line[:3] == ACK


@dataclass
class LineChannel:
    """Many writers, one reader; carries newline-terminated text lines."""

    name: str = "ack"

    def __post_init__(self) -> None:
        self._lines: queue.Queue[str] = queue.Queue()
        self.closed = False

    def write(self, text: str) -> None:
        if self.closed:
            raise ProtocolError(f"Channel {self.name} is closed")
        for line in text.splitlines(keepends=True):
            if not line.endswith("\n"):
                raise ProtocolError(f"Unterminated line {line!r} on channel {self.name}")
            self._lines.put(line)

    def readline(self, timeout: float | None = None) -> str:
        """Block for the next line and return it without its newline."""
        try:
            line = self._lines.get(timeout=timeout)
        except queue.Empty:
            raise ProtocolStall(
                f"No message on channel {self.name} within {timeout:g}s"
            ) from None
        return line.rstrip("\n")

    def close(self) -> None:
        self.closed = True


def wait_for_ack(channel: LineChannel, timeout: float | None = None, strict: bool = True) -> str:
    """Read one line and check it is an acknowledgment.

    In strict mode anything else is a :class:`ProtocolError`; otherwise it
    is logged and the game carries on.
    """
    line = channel.readline(timeout)
    if not is_ack(line):
        if strict:
            raise ProtocolError(f"Expected ACK, got {line!r}")
        logger.warning("Expected ACK, got %r", line)
    return line


def read_pid(channel: LineChannel, timeout: float | None = None) -> int:
    return parse_pid(channel.readline(timeout))
