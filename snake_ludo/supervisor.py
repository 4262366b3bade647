"""Turn supervisor — round-robin dispatch with one move in flight."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Sequence
from typing import IO

from snake_ludo.board import FINISH
from snake_ludo.errors import ActorStopped
from snake_ludo.events import Advance, MoveCompleted, RedrawRequest, Terminate, TurnDispatch
from snake_ludo.players import PlayerWorker
from snake_ludo.protocol import LineChannel, encode_pid
from snake_ludo.store import PlayerStore

logger = logging.getLogger(__name__)

NO_CURSOR = -1
COMPLETION_POLL = 0.5  # seconds between liveness checks on the moving worker


def next_active(positions: Sequence[int], cursor: int) -> int | None:
    """Index of the first unfinished player after *cursor*, wrapping around."""
    n = len(positions)
    for step in range(1, n + 1):
        candidate = (cursor + step) % n
        if positions[candidate] != FINISH:
            return candidate
    return None


class TurnSupervisor(threading.Thread):
    """Hands out turns to player workers.

    Each :class:`Advance` on :attr:`inbox` dispatches one worker and blocks
    until that worker reports :class:`MoveCompleted`, so the next advance
    is never looked at while a move is in flight.
    """

    def __init__(
        self,
        store: PlayerStore,
        workers: list[PlayerWorker],
        renderer_inbox: queue.Queue,
        completions: queue.Queue | None = None,
        channel: LineChannel | None = None,
        join_timeout: float | None = None,
        out: IO[str] | None = None,
    ):
        super().__init__(name="supervisor", daemon=True)
        self.store = store
        self.workers = workers
        self.renderer_inbox = renderer_inbox
        self.channel = channel
        self.join_timeout = join_timeout
        self.out = out
        self.inbox: queue.Queue = queue.Queue()
        self.completions: queue.Queue = queue.Queue() if completions is None else completions
        self.cursor = NO_CURSOR
        self.turn_number = 0
        self.in_flight: int | None = None
        self.completion_poll = COMPLETION_POLL

    def advance(self) -> bool:
        """Dispatch the next active player and wait for its move.

        Returns False, touching nothing, when nobody is left to move.
        """
        if self.store.active_count <= 0:
            return False
        if self.in_flight is not None:
            raise RuntimeError(f"Move for player {self.in_flight} still in flight")
        nxt = next_active(self.store.positions, self.cursor)
        if nxt is None:
            return False

        self.cursor = nxt
        self.turn_number += 1
        self.in_flight = nxt
        worker = self.workers[nxt]
        worker.inbox.put(TurnDispatch(self.turn_number))
        try:
            done = self._await_completion(worker)
        finally:
            self.in_flight = None
        if done.player != nxt:
            logger.warning("Completion from player %d, expected %d", done.player, nxt)
        return True

    def _await_completion(self, worker: PlayerWorker) -> MoveCompleted:
        """Block for the dispatched move, failing if its worker has died."""
        while True:
            try:
                return self.completions.get(timeout=self.completion_poll)
            except queue.Empty:
                if not worker.is_alive():
                    raise ActorStopped(
                        f"Player {worker.identity.glyph} stopped before finishing turn {self.turn_number}"
                    ) from None

    def _say(self, text: str) -> None:
        if self.out is not None:
            print(text, file=self.out, flush=True)

    def start_workers(self) -> None:
        for w in self.workers:
            w.start()

    def stop_workers(self) -> None:
        self._say("\n+++ PP: Terminating player processes...")
        for w in self.workers:
            if w.is_alive():
                w.inbox.put(Terminate())
        for w in self.workers:
            w.join(self.join_timeout)
            if w.is_alive():
                logger.warning("Player %s did not exit", w.identity.glyph)
            else:
                self._say(f"+++ PP: Player {w.identity.glyph} terminated")
        self._say("+++ PP: All players terminated.")

    def run(self) -> None:
        if self.channel is not None:
            self.channel.write(encode_pid(threading.get_native_id()))
        self.start_workers()
        try:
            while True:
                msg = self.inbox.get()
                if isinstance(msg, Terminate):
                    break
                if isinstance(msg, Advance):
                    try:
                        dispatched = self.advance()
                    except ActorStopped as exc:
                        logger.error("%s", exc)
                        if self.channel is not None:
                            self.channel.write(f"ERROR:{exc}\n")
                        break
                    if not dispatched:
                        # Nothing to move; still close the round trip.
                        self.renderer_inbox.put(RedrawRequest(self.store.snapshot()))
                else:
                    logger.warning("Supervisor ignoring %r", msg)
        finally:
            self.stop_workers()
