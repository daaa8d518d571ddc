import numpy as np
import pytest

from play2048.game import Direction
from play2048.session import GameSession
from play2048.state import GameState

START = [
    [2, 0, 0, 0],
    [0, 2, 0, 0],
    [0, 0, 0, 0],
    [0, 0, 0, 0],
]


@pytest.fixture
def session():
    return GameSession(GameState(START, np.random.default_rng(42)))


@pytest.fixture
def events(session):
    recorded = []
    session.add_listener(lambda label, board: recorded.append((label, board.tolist())))
    return recorded


class TestSession:
    def test_start_once(self, session, events):
        session.start()
        session.start()
        assert events == [("initial", START)]

    def test_changed_move(self, session, events):
        assert session.play(Direction.LEFT)

        labels = [label for label, _ in events]
        assert labels == ["merge", "spawn"]

        merge_board = events[0][1]
        spawn_board = events[1][1]
        assert merge_board[0] == [2, 0, 0, 0]
        assert merge_board[1] == [2, 0, 0, 0]

        added = [
            spawn_board[r][c]
            for r in range(4)
            for c in range(4)
            if merge_board[r][c] == 0 and spawn_board[r][c] != 0
        ]
        assert len(added) == 1
        assert added[0] in (2, 4)

    def test_unchanged_move(self):
        corner = [[2, 0, 0, 0]] + [[0] * 4] * 3
        session = GameSession(GameState(corner, np.random.default_rng(0)))
        recorded = []
        session.add_listener(lambda label, board: recorded.append((label, board.tolist())))

        assert not session.play(Direction.LEFT)
        assert not session.play(Direction.UP)
        assert recorded == [("invalid", corner), ("invalid", corner)]
        assert session.state.history_size == 0

    def test_unrecognized_command(self, session, events):
        assert not session.play(None)
        assert events == [("invalid", START)]

    def test_undo(self, session, events):
        session.play(Direction.LEFT)

        assert session.undo()
        assert events[-1] == ("undo", START)

    def test_undo_without_history(self, session, events):
        assert not session.undo()
        assert events == []

    def test_per_event_callback(self, session):
        undos = []
        session.add_callback(GameSession.EVENT_UNDO, lambda label, board: undos.append(label))

        session.play(Direction.RIGHT)
        session.play(Direction.DOWN)
        session.undo()
        session.undo()
        session.undo()

        assert undos == ["undo", "undo"]

    def test_unknown_event(self, session):
        with pytest.raises(AssertionError):
            session.add_callback("score", print)

    def test_snapshot_is_copy(self, session):
        boards = []
        session.add_callback(GameSession.EVENT_MERGE, lambda label, board: boards.append(board))

        session.play(Direction.LEFT)
        boards[0][:] = 0
        assert session.state.score() > 0

    def test_game_over(self):
        blocked = [[2, 4, 2, 4], [4, 2, 4, 2]] * 2
        session = GameSession(GameState(blocked, np.random.default_rng(0)))
        assert session.game_over

        session = GameSession(GameState(START, np.random.default_rng(0)))
        assert not session.game_over
