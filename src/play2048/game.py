"""
2048 in pure python.

Reference engine. Boards are flat lists of 16 cells in row-major order.

"""

import enum
from collections.abc import Callable, Sequence
from typing import MutableSequence, Union

Board = Union[MutableSequence[int], list[int]]

BOARD_SIZE = 16
LINE_SIZE = 4


class Direction(enum.IntEnum):
    LEFT = 0
    RIGHT = 1
    UP = 2
    DOWN = 3


def compress_row(row: Sequence[int]) -> list[int]:
    """Shift non-zero values toward index 0, keeping their order"""
    compressed = [num for num in row if num]
    return compressed + [0] * (len(row) - len(compressed))


def merge_row(row: Sequence[int]) -> list[int]:
    """
    Combine adjacent equal values once, scanning left to right.

    A value produced by a merge is not merged again in the same scan.
    """
    row = list(row)

    for i in range(len(row) - 1):
        if row[i] and row[i] == row[i + 1]:
            row[i] *= 2
            row[i + 1] = 0

    return row


def transform_row(row: Sequence[int]) -> list[int]:
    if len(row) != LINE_SIZE:
        raise ValueError(f"Expect {LINE_SIZE} cells, got {len(row)}")

    return compress_row(merge_row(compress_row(row)))


def _identity(cells: Board):
    return list(cells)


def _invert(cells: Board):
    # upside down
    return cells[12:16] + cells[8:12] + cells[4:8] + cells[0:4]


def _mirror(cells: Board):
    # left-right flipping
    return [cells[3 - i + j * 4] for j in range(4) for i in range(4)]


def _transpose(cells: Board):
    return [cells[i * 4 + j] for j in range(4) for i in range(4)]


_TRANSFORMATIONS: dict[
    Direction, tuple[Callable[[Board], Board], Callable[[Board], Board]]
] = {
    Direction.LEFT: (_identity, _identity),
    Direction.RIGHT: (_mirror, _mirror),
    Direction.UP: (_transpose, _transpose),
    Direction.DOWN: (
        lambda cells: _transpose(_invert(cells)),
        lambda cells: _invert(_transpose(cells)),
    ),
}


def move_cells(cells: Board, direction: int) -> tuple[list[int], bool]:
    """
    Push every line of the board toward `direction`.

    The input is left untouched. Returns the moved board and whether any
    line changed.
    """

    if len(cells) != BOARD_SIZE:
        raise ValueError(f"Expect {BOARD_SIZE} cells, got {len(cells)}")

    prepare, finish = _TRANSFORMATIONS[Direction(direction)]

    oriented = prepare(list(cells))
    changed = False

    for j in range(0, 16, 4):
        line = oriented[j : j + 4]
        pushed = transform_row(line)
        changed |= pushed != line
        oriented[j : j + 4] = pushed

    return finish(oriented), changed
