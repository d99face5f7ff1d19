import pytest

from gravityfour.game.board import Board
from gravityfour.game.session import GameSession
from gravityfour.utils import Player


def play(board, columns):
    """Drop each column in turn, asserting every move is accepted."""
    for col in columns:
        assert board.drop(col), f"move in column {col} was rejected"
    return board


def non_empty(board) -> int:
    return int((board.grid != Player.EMPTY.value).sum())


@pytest.fixture
def board():
    return Board()


@pytest.fixture
def flipping_board():
    return Board(flip_interval=5)


@pytest.fixture
def session():
    return GameSession(flip_interval=0, seed=7)
