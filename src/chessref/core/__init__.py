"""Core domain layer — pure chess logic with zero external dependencies.

Quick start::

    from chessref.core import Board, Color

    board = Board.initial()
    for move in board.all_legal_moves(Color.WHITE):
        print(move)
"""

from chessref.core.board import Board
from chessref.core.enums import CastlingRights, Color, GameResult, MoveKind, PieceType
from chessref.core.move import Move
from chessref.core.notation import (
    STARTING_FEN,
    board_from_fen,
    board_to_fen,
    move_to_san,
    parse_san,
)
from chessref.core.piece import (
    Bishop,
    King,
    Knight,
    Pawn,
    Piece,
    Queen,
    Rook,
    create_piece,
    piece_from_char,
)
from chessref.core.rules import Rules
from chessref.core.types import Position, parse_square, square_name

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameResult",
    "MoveKind",
    "PieceType",
    # Types / helpers
    "Position",
    "parse_square",
    "square_name",
    # Pieces
    "Piece",
    "Pawn",
    "Knight",
    "Bishop",
    "Rook",
    "Queen",
    "King",
    "create_piece",
    "piece_from_char",
    # Domain objects
    "Board",
    "Move",
    "Rules",
    # Notation
    "STARTING_FEN",
    "board_from_fen",
    "board_to_fen",
    "move_to_san",
    "parse_san",
]
