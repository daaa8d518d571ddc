import logging
from collections.abc import Callable, Sequence

import numpy as np

from play2048.game import Direction
from play2048.game_numba import (
    FOUR_PROB,
    MAX_CELL,
    RandomSource,
    as_board,
    move_board,
    score,
    spawn_tile,
)

Mover = Callable[[np.ndarray, int], tuple[Sequence[int], bool]]


class GameState:
    """
    The board of one game and the snapshots needed to undo moves.

    A snapshot is pushed for every move that changed the board,
    so undo() can walk back until the history is exhausted.
    """

    _board: np.ndarray
    _history: list[np.ndarray]

    def __init__(
        self,
        cells: np.ndarray | Sequence[int] | Sequence[Sequence[int]],
        rand: RandomSource,
        *,
        mover: Mover = move_board,
        four_prob: float = FOUR_PROB,
        logger: logging.Logger | None = None,
    ):
        if not 0.0 <= four_prob <= 1.0:
            raise ValueError(f"four_prob={four_prob}")

        self._board = as_board(cells)
        if (self._board > MAX_CELL).any():
            raise ValueError(f"Board cells must not exceed {MAX_CELL}")

        self._history = []
        self._rand = rand
        self._mover = mover
        self._four_prob = four_prob
        self._logger = logger

    @property
    def board(self) -> np.ndarray:
        """Read-only view of the flat board"""
        view = self._board.view()
        view.flags.writeable = False
        return view

    def grid(self) -> np.ndarray:
        return self._board.reshape((4, 4)).copy()

    def score(self) -> int:
        return score(self._board)

    @property
    def history_size(self) -> int:
        return len(self._history)

    def can_undo(self) -> bool:
        return bool(self._history)

    def _move(self, direction: Direction) -> tuple[np.ndarray, bool]:
        moved, changed = self._mover(self._board.copy(), direction)
        return as_board(moved), changed

    def apply_move(self, direction: int) -> bool:
        direction = Direction(direction)
        prev = self._board.copy()

        moved, changed = self._move(direction)

        if changed:
            self._history.append(prev)
            self._board = moved

        if self._logger is not None:
            self._logger.debug(
                "move %s changed=%s history=%d",
                direction.name,
                changed,
                len(self._history),
            )

        return changed

    def spawn(self) -> bool:
        """
        Place a new tile after a changed move.

        Return False if the board has no empty cell.
        """
        return spawn_tile(self._board, self._rand, self._four_prob)

    def undo(self) -> bool:
        if not self._history:
            return False

        self._board = self._history.pop()
        return True

    def valid_moves(self) -> list[Direction]:
        return [d for d in Direction if self._move(d)[1]]
