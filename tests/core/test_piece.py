"""Tests for piece movement geometry (pseudo-legal moves)."""

import pytest

from chessref.core.board import Board
from chessref.core.enums import CastlingRights, Color, PieceType
from chessref.core.move import Move
from chessref.core.piece import (
    Bishop,
    King,
    Knight,
    Pawn,
    Queen,
    Rook,
    create_piece,
    piece_from_char,
)
from chessref.core.types import A1, A3, A7, A8, B1, D4, E2, E3, E4, E5, E7, F3, Position


def _place(board: Board, *pieces: object) -> Board:
    for piece in pieces:
        board.set_piece_at(piece, piece.position)  # type: ignore[attr-defined]
    return board


class TestGeometry:
    def test_knight_corner(self, empty_board: Board) -> None:
        knight = Knight(Color.WHITE, A1)
        _place(empty_board, knight)
        targets = {m.to_pos for m in knight.legal_moves(empty_board)}
        assert targets == {Position(2, 1), Position(1, 2)}

    def test_knight_centre(self, empty_board: Board) -> None:
        knight = Knight(Color.WHITE, D4)
        _place(empty_board, knight)
        assert len(knight.legal_moves(empty_board)) == 8

    def test_rook_empty_board(self, empty_board: Board) -> None:
        rook = Rook(Color.WHITE, A1)
        _place(empty_board, rook)
        assert len(rook.legal_moves(empty_board)) == 14

    def test_bishop_empty_board(self, empty_board: Board) -> None:
        bishop = Bishop(Color.BLACK, D4)
        _place(empty_board, bishop)
        assert len(bishop.legal_moves(empty_board)) == 13

    def test_queen_empty_board(self, empty_board: Board) -> None:
        queen = Queen(Color.WHITE, D4)
        _place(empty_board, queen)
        assert len(queen.legal_moves(empty_board)) == 27

    def test_king_off_home(self, empty_board: Board) -> None:
        king = King(Color.WHITE, E4)
        _place(empty_board, king)
        assert len(king.legal_moves(empty_board)) == 8

    def test_slider_stops_at_friendly(self, empty_board: Board) -> None:
        rook = Rook(Color.WHITE, A1)
        _place(empty_board, rook, Pawn(Color.WHITE, A3))
        targets = {m.to_pos for m in rook.legal_moves(empty_board)}
        assert A3 not in targets
        assert Position(1, 0) in targets
        assert len(targets) == 8

    def test_slider_captures_enemy(self, empty_board: Board) -> None:
        rook = Rook(Color.WHITE, A1)
        _place(empty_board, rook, Pawn(Color.BLACK, A3))
        targets = {m.to_pos for m in rook.legal_moves(empty_board)}
        assert A3 in targets
        assert Position(3, 0) not in targets


class TestPawn:
    def test_initial_pushes(self, initial_board: Board) -> None:
        pawn = initial_board.piece_at(E2)
        assert isinstance(pawn, Pawn)
        assert {m.to_pos for m in pawn.legal_moves(initial_board)} == {E3, E4}

    def test_blocked(self, initial_board: Board) -> None:
        initial_board.set_piece_at(Knight(Color.BLACK, E3), E3)
        pawn = initial_board.piece_at(E2)
        assert pawn is not None
        targets = {m.to_pos for m in pawn.legal_moves(initial_board)}
        assert E3 not in targets and E4 not in targets

    def test_double_step_blocked_on_far_square(self, initial_board: Board) -> None:
        initial_board.set_piece_at(Knight(Color.BLACK, E4), E4)
        pawn = initial_board.piece_at(E2)
        assert pawn is not None
        assert {m.to_pos for m in pawn.legal_moves(initial_board)} == {E3}

    def test_diagonal_capture(self, empty_board: Board) -> None:
        pawn = Pawn(Color.WHITE, E4)
        _place(empty_board, pawn, Knight(Color.BLACK, Position(4, 3)))
        targets = {m.to_pos for m in pawn.legal_moves(empty_board)}
        assert targets == {E5, Position(4, 3)}

    def test_black_moves_down(self, empty_board: Board) -> None:
        pawn = Pawn(Color.BLACK, E7)
        _place(empty_board, pawn)
        rows = {m.to_pos.row for m in pawn.legal_moves(empty_board)}
        assert rows == {5, 4}

    def test_promotion_expands(self, empty_board: Board) -> None:
        pawn = Pawn(Color.WHITE, A7)
        _place(empty_board, pawn)
        moves = pawn.legal_moves(empty_board)
        assert {m.promotion for m in moves} == {
            PieceType.QUEEN,
            PieceType.ROOK,
            PieceType.BISHOP,
            PieceType.KNIGHT,
        }
        assert all(m.to_pos == A8 for m in moves)

    def test_attacks_diagonals_only(self, empty_board: Board) -> None:
        pawn = Pawn(Color.WHITE, E4)
        _place(empty_board, pawn)
        assert pawn.attacks(Position(4, 3), empty_board)
        assert pawn.attacks(Position(4, 5), empty_board)
        assert not pawn.attacks(E5, empty_board)


class TestAttacks:
    def test_slider_attack_blocked(self, empty_board: Board) -> None:
        bishop = Bishop(Color.WHITE, A1)
        _place(empty_board, bishop, Pawn(Color.BLACK, Position(2, 2)))
        assert bishop.attacks(Position(2, 2), empty_board)
        assert not bishop.attacks(D4, empty_board)

    def test_rook_does_not_attack_diagonal(self, empty_board: Board) -> None:
        rook = Rook(Color.WHITE, A1)
        _place(empty_board, rook)
        assert not rook.attacks(Position(1, 1), empty_board)

    def test_can_move_to_rejects_friendly(self, initial_board: Board) -> None:
        knight = initial_board.piece_at(B1)
        assert knight is not None
        assert knight.can_move_to(A3, initial_board)
        assert not knight.can_move_to(Position(1, 3), initial_board)

    def test_king_can_move_to_castling_square(self) -> None:
        board = Board(CastlingRights.WHITE_KINGSIDE)
        king = King(Color.WHITE, Position(0, 4))
        _place(board, king, Rook(Color.WHITE, Position(0, 7)))
        assert king.can_move_to(Position(0, 6), board)

    def test_king_in_check(self, empty_board: Board) -> None:
        king = King(Color.WHITE, E4)
        rook = Rook(Color.BLACK, A1)
        _place(empty_board, king, rook)
        assert not king.is_in_check(empty_board)
        _place(empty_board, Rook(Color.BLACK, Position(3, 0)))
        assert king.is_in_check(empty_board)
        assert empty_board.is_king_in_check(Color.WHITE)


class TestFactory:
    def test_symbol(self) -> None:
        assert Knight(Color.WHITE, A1).symbol() == "N"
        assert Knight(Color.BLACK, A1).symbol() == "n"

    def test_piece_from_char(self) -> None:
        piece = piece_from_char("q", D4)
        assert isinstance(piece, Queen)
        assert piece.color == Color.BLACK
        assert piece.position == D4

    @pytest.mark.parametrize("char", ["x", "", "Kk"])
    def test_piece_from_char_invalid(self, char: str) -> None:
        with pytest.raises(ValueError):
            piece_from_char(char, D4)

    def test_create_piece(self) -> None:
        piece = create_piece(PieceType.ROOK, Color.WHITE, A1, has_moved=True)
        assert isinstance(piece, Rook)
        assert piece.has_moved

    def test_clone_is_independent(self) -> None:
        knight = Knight(Color.WHITE, F3)
        twin = knight.clone()
        assert twin == knight and twin is not knight
        twin.mark_as_moved()
        assert not knight.has_moved
        assert twin != knight

    def test_pseudo_legal_moves_are_moves(self, initial_board: Board) -> None:
        knight = initial_board.piece_at(B1)
        assert knight is not None
        assert Move(B1, A3) in knight.legal_moves(initial_board)
