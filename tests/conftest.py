"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chessref.core.board import Board
from chessref.game.controller import Game


@pytest.fixture
def initial_board() -> Board:
    """Standard starting position."""
    return Board.initial()


@pytest.fixture
def empty_board() -> Board:
    """A board with no pieces and no castling rights."""
    from chessref.core.enums import CastlingRights

    return Board(CastlingRights.NONE)


@pytest.fixture
def game() -> Game:
    """An initialised, started human-vs-human game from the standard position."""
    g = Game()
    g.initialize_game("W", "B")
    g.start()
    return g
