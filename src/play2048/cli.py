"""
Entry point of the `play2048` command.

Load the board from CSV, play with single letter commands,
and record every phase of a move to the output CSV.
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Sequence, TextIO

import numpy as np

from play2048 import game, game_numba
from play2048.console import run_console
from play2048.csvlog import CsvRecorder, read_board_csv
from play2048.session import GameSession
from play2048.state import GameState

_ENGINES = {
    "numba": game_numba.move_board,
    "python": game.move_cells,
}


@dataclasses.dataclass
class Settings:
    input: Path = Path("game_input.csv")
    output: Path = Path("game_output.csv")
    seed: int | None = 42
    four_prob: float = game_numba.FOUR_PROB
    engine: str = "numba"
    log_file: Path | None = None
    verbose: bool = False

    @classmethod
    def from_namespace(cls, ns: argparse.Namespace) -> "Settings":
        fields = {f.name for f in dataclasses.fields(cls)}
        return cls(**{k: v for k, v in vars(ns).items() if k in fields})


def _probability(text: str) -> float:
    value = float(text)
    if not 0.0 <= value <= 1.0:
        raise argparse.ArgumentTypeError(f"{value} is not in [0, 1]")
    return value


def parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="play2048", description=__doc__)
    p.add_argument("--input", type=Path, default=Settings.input)
    p.add_argument("--output", type=Path, default=Settings.output)
    p.add_argument("--seed", type=int, default=Settings.seed)
    p.add_argument("--four-prob", type=_probability, default=Settings.four_prob)
    p.add_argument("--engine", choices=sorted(_ENGINES), default=Settings.engine)
    p.add_argument("--log-file", type=Path, default=None)
    p.add_argument("-v", "--verbose", action="store_true", default=False)
    return p


def setup_logging(settings: Settings) -> logging.Logger:
    logger = logging.getLogger("play2048")
    logger.setLevel(logging.DEBUG if settings.verbose else logging.INFO)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if settings.log_file is not None:
        handler = logging.FileHandler(str(settings.log_file), encoding="utf-8")
    else:
        # keep the board readable on the terminal
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.WARNING)

    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger


def build_session(settings: Settings, logger: logging.Logger | None = None) -> GameSession:
    cells = read_board_csv(settings.input, logger=logger)
    state = GameState(
        cells,
        np.random.default_rng(settings.seed),
        mover=_ENGINES[settings.engine],
        four_prob=settings.four_prob,
        logger=logger,
    )

    session = GameSession(state, logger=logger)
    session.add_listener(CsvRecorder(settings.output, logger=logger))
    return session


def main(
    argv: Sequence[str] | None = None,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    ns = parser().parse_args(argv)
    settings = Settings.from_namespace(ns)

    logger = setup_logging(settings)
    logger.debug("settings %r", settings)

    session = build_session(settings, logger)
    run_console(session, stdin, stdout)

    logger.info("game ended, score=%d", session.state.score())
    return 0


if __name__ == "__main__":
    sys.exit(main())
