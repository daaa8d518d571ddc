"""
Board snapshots in CSV.

Input: up to 4 lines of up to 4 comma separated integers.
Output: one `label,c0,...,c15` line per snapshot, row-major.
"""

import csv
import logging
import re
from pathlib import Path

import numpy as np

from play2048.game_numba import BOARD_DTYPE, MAX_CELL

_LEADING_INT = re.compile(r"\s*\+?(\d+)")


def parse_cell(text: str) -> int:
    """
    Leading decimal integer of the cell.

    0 if there is none or it is larger than MAX_CELL.
    """
    m = _LEADING_INT.match(text)
    if m is None:
        return 0

    value = int(m.group(1))
    return value if value <= MAX_CELL else 0


def read_board_csv(
    path: str | Path,
    *,
    logger: logging.Logger | None = None,
) -> np.ndarray:
    """
    Load a 4x4 grid. Missing lines and cells stay 0.
    """

    grid = np.zeros((4, 4), dtype=BOARD_DTYPE)
    path = Path(path)

    # undecodable bytes become U+FFFD, which parses as 0
    try:
        fp = path.open("r", encoding="utf-8", errors="replace", newline="")
    except FileNotFoundError:
        if logger is not None:
            logger.warning("%s not found, start from an empty board", path)
        return grid
    except OSError as e:
        if logger is not None:
            logger.warning("cannot open %s, start from an empty board: %s", path, e)
        return grid

    with fp:
        reader = csv.reader(fp)
        try:
            for r, row in enumerate(reader):
                if r >= 4:
                    break
                for c, cell in enumerate(row[:4]):
                    grid[r, c] = parse_cell(cell)
        except (OSError, csv.Error) as e:
            if logger is not None:
                logger.warning(
                    "stop reading %s at line %d: %s", path, reader.line_num, e
                )

    return grid


class CsvRecorder:
    """
    Snapshot listener appending boards to a CSV file.

    The first snapshot truncates the file.
    """

    def __init__(
        self,
        path: str | Path,
        *,
        logger: logging.Logger | None = None,
    ):
        self.path = Path(path)
        self.count = 0
        self._logger = logger

    def __call__(self, label: str, board: np.ndarray) -> None:
        mode = "w" if self.count == 0 else "a"

        try:
            fp = self.path.open(mode, encoding="utf-8", newline="")
        except OSError as e:
            if self._logger is not None:
                self._logger.warning("drop %r snapshot: %s", label, e)
            return

        with fp:
            writer = csv.writer(fp, lineterminator="\n")
            writer.writerow([label, *(int(v) for v in np.ravel(board))])

        self.count += 1
