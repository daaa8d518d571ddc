"""
Play the game in command line.
"""

import sys
from collections.abc import Iterator
from typing import TextIO

import numpy as np

from play2048.game import Direction
from play2048.game_numba import score
from play2048.session import GameSession

PROMPT = "Move (w=up, a=left, s=down, d=right), u=undo, q=quit: "

UNDO = "undo"
QUIT = "quit"

_COMMAND_LETTERS: dict[str, Direction | str] = {
    "w": Direction.UP,
    "a": Direction.LEFT,
    "s": Direction.DOWN,
    "d": Direction.RIGHT,
    "u": UNDO,
    "q": QUIT,
}


def parse_command(letter: str) -> Direction | str | None:
    """Map a letter to a direction, UNDO or QUIT. None if unrecognized."""
    return _COMMAND_LETTERS.get(letter)


def format_board(board: np.ndarray) -> str:
    grid = np.asarray(board).reshape((4, 4))

    lines = [f"Score: {score(grid)}"]
    for row in grid:
        lines.append("".join(f"{v}\t" if v else ".\t" for v in row.tolist()))

    return "\n".join(lines) + "\n"


def _read_letters(stdin: TextIO) -> Iterator[str]:
    # one command per non-whitespace character
    for line in stdin:
        for letter in line:
            if not letter.isspace():
                yield letter


def run_console(
    session: GameSession,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> None:
    """
    Read commands until `q` or end of input.
    """

    if stdin is None:
        stdin = sys.stdin
    if stdout is None:
        stdout = sys.stdout

    def show():
        stdout.write(format_board(session.state.grid()))
        if session.game_over:
            stdout.write("No moves left\n")

    letters = _read_letters(stdin)
    show()
    session.start()

    while True:
        stdout.write(PROMPT)
        stdout.flush()

        letter = next(letters, None)
        if letter is None:
            break

        command = parse_command(letter)

        if command == QUIT:
            break

        if command == UNDO:
            if session.undo():
                show()
        else:
            session.play(command)

        show()

    stdout.write("\n")
    stdout.flush()
