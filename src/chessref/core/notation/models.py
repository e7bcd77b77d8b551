"""Shared notation-layer data models."""

from __future__ import annotations

from dataclasses import dataclass

from chessref.core.board import Board
from chessref.core.enums import Color


@dataclass(slots=True)
class FenRecord:
    """Everything a FEN string carries, split into core objects."""

    board: Board
    side_to_move: Color
    halfmove_clock: int = 0
    fullmove_number: int = 1


@dataclass(slots=True)
class PgnMove:
    """A single mainline move extracted from PGN movetext."""

    san: str
    comment: str = ""


@dataclass(slots=True)
class ParsedPgn:
    """Headers, mainline moves and result token of one PGN game."""

    headers: dict[str, str]
    moves: list[PgnMove]
    result_token: str

    @property
    def sans(self) -> list[str]:
        return [move.san for move in self.moves]
