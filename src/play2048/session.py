import collections
import logging
from typing import Any, Callable

import numpy as np

from play2048.game import Direction
from play2048.state import GameState

SnapshotListener = Callable[[str, np.ndarray], Any]


class GameSession:
    """
    Play one game and report a snapshot of the board after each phase.

    Listeners receive (label, 4x4 board copy).
    """

    EVENT_INITIAL: str = "initial"
    """
    once, before the first command
    """

    EVENT_MERGE: str = "merge"
    """
    after a move that changed the board, before the new tile
    """

    EVENT_SPAWN: str = "spawn"
    """
    after the new tile is placed
    """

    EVENT_INVALID: str = "invalid"
    """
    after a move that changed nothing, or an unrecognized command
    """

    EVENT_UNDO: str = "undo"
    """
    after a successful undo
    """

    EVENTS = (EVENT_INITIAL, EVENT_MERGE, EVENT_SPAWN, EVENT_INVALID, EVENT_UNDO)

    def __init__(
        self,
        state: GameState,
        *,
        logger: logging.Logger | None = None,
    ):
        self.state = state
        self._logger = logger
        self._started = False
        self._listeners: dict[str, list[SnapshotListener]] = collections.defaultdict(
            list
        )

    def add_callback(self, event: str, fn: SnapshotListener) -> None:
        assert event in self.EVENTS, event

        self._listeners[event].append(fn)

    def add_listener(self, fn: SnapshotListener) -> None:
        """Subscribe to every event"""
        for event in self.EVENTS:
            self.add_callback(event, fn)

    def _emit(self, event: str) -> None:
        listeners = self._listeners.get(event)
        if not listeners:
            return

        for fn in listeners:
            fn(event, self.state.grid())

    def start(self) -> None:
        if self._started:
            return

        self._started = True
        if self._logger is not None:
            self._logger.info("game started, score=%d", self.state.score())
        self._emit(self.EVENT_INITIAL)

    def play(self, direction: Direction | None) -> bool:
        """
        Play one move. `None` stands for an unrecognized command.

        Return True if the board changed.
        """

        moved = direction is not None and self.state.apply_move(direction)

        if moved:
            self._emit(self.EVENT_MERGE)

            self.state.spawn()
            self._emit(self.EVENT_SPAWN)
        else:
            self._emit(self.EVENT_INVALID)

        return moved

    def undo(self) -> bool:
        if not self.state.undo():
            return False

        self._emit(self.EVENT_UNDO)
        return True

    @property
    def game_over(self) -> bool:
        return not self.state.valid_moves()
