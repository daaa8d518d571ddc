"""
2048 implemented with numpy and numba
"""

from typing import Protocol, Sequence

import numpy as np
from numba import njit

from play2048.game import BOARD_SIZE, LINE_SIZE, Direction

"""
+----+----+----+----+
|  0 |  1 |  2 |  3 |
|  4 |  5 |  6 |  7 |
|  8 |  9 | 10 | 11 |
| 12 | 13 | 14 | 15 |
+----+----+----+----+
"""

BOARD_SHAPE = (BOARD_SIZE,)
BOARD_DTYPE = np.int64

# largest tile accepted on a new board. merges keep the board sum,
# so a board of such tiles never merges past the int64 range.
MAX_CELL = np.iinfo(BOARD_DTYPE).max // BOARD_SIZE

# probability that a spawned tile is 4 instead of 2
FOUR_PROB = 0.1


class RandomSource(Protocol):
    """The subset of np.random.Generator used by spawn_tile()"""

    def integers(self, low, high=None) -> int: ...

    def random(self) -> float: ...


@njit(inline="always")
def _push_row(board: np.ndarray, offset: int, stride: int) -> bool:
    """
    Compress, merge and compress one line in place.

    The line starts at `offset` and walks `stride` cells per step,
    so a negative stride pushes toward the far end of the line.
    Return True if any cell of the line changed.
    """

    memo = 0  # current unmerged number
    w = 0  # write pointer
    changed = False

    for r in range(4):  # read pointer
        num = board[offset + r * stride]

        if num == 0:
            # skip empty cell
            continue
        elif memo == 0:
            memo = num  # save this cell
        elif memo == num:
            # combine two identical numbers
            memo = 0
            p = offset + w * stride
            if board[p] != num * 2:
                changed = True
            board[p] = num * 2
            w += 1
        else:
            # write the saved number, and save this number
            p = offset + w * stride
            if board[p] != memo:
                changed = True
            board[p] = memo
            w += 1
            memo = num

    if memo != 0:
        p = offset + w * stride
        if board[p] != memo:
            changed = True
        board[p] = memo
        w += 1

    # Fill the remaining row
    while w < 4:
        p = offset + w * stride
        if board[p] != 0:
            changed = True
        board[p] = 0
        w += 1

    return changed


@njit
def _step_left(board: np.ndarray) -> bool:
    c1 = _push_row(board, 0, 1)
    c2 = _push_row(board, 4, 1)
    c3 = _push_row(board, 8, 1)
    c4 = _push_row(board, 12, 1)
    return c1 or c2 or c3 or c4


@njit
def _step_right(board: np.ndarray) -> bool:
    c1 = _push_row(board, 3, -1)
    c2 = _push_row(board, 7, -1)
    c3 = _push_row(board, 11, -1)
    c4 = _push_row(board, 15, -1)
    return c1 or c2 or c3 or c4


@njit
def _step_up(board: np.ndarray) -> bool:
    c1 = _push_row(board, 0, 4)
    c2 = _push_row(board, 1, 4)
    c3 = _push_row(board, 2, 4)
    c4 = _push_row(board, 3, 4)
    return c1 or c2 or c3 or c4


@njit
def _step_down(board: np.ndarray) -> bool:
    c1 = _push_row(board, 12, -4)
    c2 = _push_row(board, 13, -4)
    c3 = _push_row(board, 14, -4)
    c4 = _push_row(board, 15, -4)
    return c1 or c2 or c3 or c4


@njit
def _step_kernel(board: np.ndarray, action: int) -> bool:
    if action == 0:  # Direction.LEFT
        return _step_left(board)
    elif action == 1:  # Direction.RIGHT
        return _step_right(board)
    elif action == 2:  # Direction.UP
        return _step_up(board)
    else:  # Direction.DOWN
        return _step_down(board)


@njit
def _transform_line(line: np.ndarray) -> bool:
    return _push_row(line, 0, 1)


def as_board(cells: np.ndarray | Sequence[int] | Sequence[Sequence[int]]) -> np.ndarray:
    """
    Copy a 4x4 grid or 16 cells into a fresh flat board.
    """

    board = np.array(cells, dtype=BOARD_DTYPE)
    if board.shape not in (BOARD_SHAPE, (LINE_SIZE, LINE_SIZE)):
        raise ValueError(f"Bad board shape {board.shape}")
    if (board < 0).any():
        raise ValueError("Board cells must be non-negative")

    return board.reshape(BOARD_SHAPE)


def transform_row(row: np.ndarray | Sequence[int]) -> np.ndarray:
    line = np.array(row, dtype=BOARD_DTYPE)
    if line.shape != (LINE_SIZE,):
        raise ValueError(f"Expect {LINE_SIZE} cells, got shape {line.shape}")

    _transform_line(line)
    return line


def move_board(board: np.ndarray, direction: int) -> tuple[np.ndarray, bool]:
    """
    Push every line of the board toward `direction`.

    The input is left untouched. Returns the moved board and whether any
    line changed.
    """

    action = Direction(direction)
    moved = as_board(board)
    changed = _step_kernel(moved, int(action))
    return moved, bool(changed)


def empty_cells(board: np.ndarray) -> np.ndarray:
    """Indices of empty cells in row-major order"""
    return np.flatnonzero(np.asarray(board) == 0)


def spawn_tile(
    board: np.ndarray,
    rand: RandomSource,
    four_prob: float = FOUR_PROB,
) -> bool:
    """
    Spawn one number in an empty cell

    The random generator is kept out of numba
    so that any Generator-like object can drive it.

    :param four_prob: probability to spawn 4. otherwise 2.
    """

    if not 0.0 <= four_prob <= 1.0:
        raise ValueError(f"four_prob={four_prob}")

    indices = empty_cells(board)
    if indices.size == 0:
        return False

    k = int(rand.integers(0, indices.size))
    chance = rand.random()

    board.flat[indices[k]] = 4 if chance < four_prob else 2
    return True


def score(board: np.ndarray) -> int:
    """Sum of all tiles"""
    return int(np.sum(board))
