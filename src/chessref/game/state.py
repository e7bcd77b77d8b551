"""Undo snapshots and move-history records."""

from __future__ import annotations

from dataclasses import dataclass

from chessref.core.board import Board
from chessref.core.enums import Color, MoveKind
from chessref.core.move import Move
from chessref.game.player import Player


@dataclass(frozen=True, slots=True)
class GameState:
    """Everything a move can change, captured *before* the move is applied.

    Board and players are private copies; restoring a snapshot hands out
    fresh copies again so a snapshot can never be mutated through the live
    game.
    """

    board: Board
    white_player: Player
    black_player: Player
    current_player: Color
    move_number: int
    half_move_clock: int

    @classmethod
    def capture(
        cls,
        board: Board,
        white: Player,
        black: Player,
        current_player: Color,
        move_number: int,
        half_move_clock: int,
    ) -> GameState:
        return cls(
            board=board.copy(),
            white_player=white.copy(),
            black_player=black.copy(),
            current_player=current_player,
            move_number=move_number,
            half_move_clock=half_move_clock,
        )


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    color: Color
    kind: MoveKind
    san: str
    piece_symbol: str
    captured_symbol: str | None = None
    gave_check: bool = False
    fen_after: str = ""
    comment: str = ""

    @property
    def was_capture(self) -> bool:
        return self.captured_symbol is not None
