"""Notation package: FEN / SAN / PGN parsing and serialization."""

from chessref.core.notation.fen import STARTING_FEN, board_from_fen, board_to_fen
from chessref.core.notation.models import FenRecord, ParsedPgn, PgnMove
from chessref.core.notation.pgn import (
    build_pgn,
    game_result_from_pgn,
    parse_pgn_game,
    pgn_movetext_from_moves,
    pgn_result_token,
)
from chessref.core.notation.san import move_to_san, parse_san

__all__ = [
    "STARTING_FEN",
    "FenRecord",
    "PgnMove",
    "ParsedPgn",
    "board_from_fen",
    "board_to_fen",
    "move_to_san",
    "parse_san",
    "pgn_result_token",
    "game_result_from_pgn",
    "pgn_movetext_from_moves",
    "build_pgn",
    "parse_pgn_game",
]
