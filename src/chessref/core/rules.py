"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessref.core.enums import Color, PieceType

if TYPE_CHECKING:
    from chessref.core.board import Board

FIFTY_MOVE_HALFMOVES = 100
SEVENTY_FIVE_MOVE_HALFMOVES = 150

_MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    # Draw policy:
    # - Automatic by default: insufficient material, 50-move rule, threefold.
    # - When rule draws are claim-based, the 75-move rule and fivefold
    #   repetition end the game automatically instead.

    @staticmethod
    def is_in_check(board: Board, color: Color) -> bool:
        return board.is_king_in_check(color)

    @staticmethod
    def has_legal_moves(board: Board, color: Color) -> bool:
        return bool(board.all_legal_moves(color))

    @staticmethod
    def is_checkmate(board: Board, color: Color) -> bool:
        if not Rules.is_in_check(board, color):
            return False
        return not Rules.has_legal_moves(board, color)

    @staticmethod
    def is_stalemate(board: Board, color: Color) -> bool:
        if Rules.is_in_check(board, color):
            return False
        return not Rules.has_legal_moves(board, color)

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        others = [p for p in board.pieces() if p.piece_type != PieceType.KING]

        # K vs K
        if not others:
            return True

        # K+minor vs K
        if len(others) == 1:
            return others[0].piece_type in _MINOR_PIECES

        # K+B vs K+B with same-colour bishops
        if len(others) == 2:
            a, b = others
            if (
                a.piece_type == PieceType.BISHOP
                and b.piece_type == PieceType.BISHOP
                and a.color != b.color
            ):
                return a.position.is_light == b.position.is_light

        return False

    @staticmethod
    def is_fifty_move_rule(halfmove_clock: int) -> bool:
        return halfmove_clock >= FIFTY_MOVE_HALFMOVES

    @staticmethod
    def is_seventy_five_move_rule(halfmove_clock: int) -> bool:
        return halfmove_clock >= SEVENTY_FIVE_MOVE_HALFMOVES

    @staticmethod
    def is_threefold_repetition(repetition_count: int) -> bool:
        return repetition_count >= 3

    @staticmethod
    def is_fivefold_repetition(repetition_count: int) -> bool:
        return repetition_count >= 5
