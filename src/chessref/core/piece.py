"""Piece hierarchy — movement geometry for the six piece types.

A piece knows its color, where it stands and whether it has moved. It never
keeps a reference to the board; every query takes the board as an argument.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from chessref.core.enums import Color, PieceType
from chessref.core.move import PROMOTION_TYPES, Move
from chessref.core.types import Position

if TYPE_CHECKING:
    from chessref.core.board import Board


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class Piece(ABC):
    """Abstract chess piece."""

    __slots__ = ("color", "position", "has_moved")

    piece_type: ClassVar[PieceType]
    letter: ClassVar[str]

    def __init__(self, color: Color, position: Position, has_moved: bool = False) -> None:
        self.color = color
        self.position = position
        self.has_moved = has_moved

    # ── Movement contract ────────────────────────────────────────────────

    @abstractmethod
    def legal_moves(self, board: Board) -> list[Move]:
        """Pseudo-legal moves: geometry, occupancy and captures only.

        Moves that would leave the mover's own king in check are *not*
        removed here; :meth:`Board.all_legal_moves` does that.
        """

    @abstractmethod
    def attacks(self, target: Position, board: Board) -> bool:
        """Whether this piece attacks *target* (used for check detection)."""

    def can_move_to(self, target: Position, board: Board) -> bool:
        """Single-target pseudo-legal check."""
        if not target.is_valid() or target == self.position:
            return False
        if self.is_friendly_at(target, board):
            return False
        return self.attacks(target, board)

    def symbol(self) -> str:
        """Uppercase for White, lowercase for Black."""
        return self.letter if self.color == Color.WHITE else self.letter.lower()

    # ── Bookkeeping ──────────────────────────────────────────────────────

    def mark_as_moved(self) -> None:
        self.has_moved = True

    def clone(self) -> Piece:
        return type(self)(self.color, self.position, self.has_moved)

    # ── Occupancy helpers ────────────────────────────────────────────────

    def is_enemy_at(self, target: Position, board: Board) -> bool:
        piece = board.piece_at(target)
        return piece is not None and piece.color != self.color

    def is_friendly_at(self, target: Position, board: Board) -> bool:
        piece = board.piece_at(target)
        return piece is not None and piece.color == self.color

    def _step_moves(
        self, offsets: tuple[tuple[int, int], ...], board: Board
    ) -> list[Move]:
        moves: list[Move] = []
        for dr, dc in offsets:
            target = self.position.offset(dr, dc)
            if target.is_valid() and not self.is_friendly_at(target, board):
                moves.append(Move(self.position, target))
        return moves

    # ── Dunder helpers ───────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (
            type(self) is type(other)
            and self.color == other.color
            and self.position == other.position
            and self.has_moved == other.has_moved
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.color}, {self.position})"


class Pawn(Piece):
    """Pawn: pushes, double step from the start rank, captures, en passant."""

    __slots__ = ()

    piece_type = PieceType.PAWN
    letter = "P"

    @property
    def direction(self) -> int:
        return 1 if self.color == Color.WHITE else -1

    @property
    def start_row(self) -> int:
        return 1 if self.color == Color.WHITE else 6

    @property
    def promotion_row(self) -> int:
        return 7 if self.color == Color.WHITE else 0

    def is_promotion_square(self, target: Position) -> bool:
        return target.row == self.promotion_row

    def is_double_move(self, target: Position) -> bool:
        return (
            target.col == self.position.col
            and target.row - self.position.row == 2 * self.direction
        )

    def is_en_passant(self, target: Position, board: Board) -> bool:
        """Diagonal step behind an enemy pawn that double-stepped last ply."""
        last = board.last_move
        if last is None or not target.is_valid():
            return False
        if target.row - self.position.row != self.direction:
            return False
        if abs(target.col - self.position.col) != 1 or not board.is_empty(target):
            return False

        victim_pos = Position(self.position.row, target.col)
        victim = board.piece_at(victim_pos)
        if not isinstance(victim, Pawn) or victim.color == self.color:
            return False
        return last.to_pos == victim_pos and last.from_pos == Position(
            self.position.row + 2 * self.direction, target.col
        )

    def legal_moves(self, board: Board) -> list[Move]:
        moves: list[Move] = []
        d = self.direction

        one_step = self.position.offset(d, 0)
        if one_step.is_valid() and board.is_empty(one_step):
            self._append(one_step, moves)
            two_step = self.position.offset(2 * d, 0)
            if self.position.row == self.start_row and board.is_empty(two_step):
                moves.append(Move(self.position, two_step))

        for dc in (-1, 1):
            target = self.position.offset(d, dc)
            if not target.is_valid():
                continue
            if self.is_enemy_at(target, board):
                self._append(target, moves)
            elif self.is_en_passant(target, board):
                moves.append(Move(self.position, target))
        return moves

    def attacks(self, target: Position, board: Board) -> bool:
        return (
            target.row - self.position.row == self.direction
            and abs(target.col - self.position.col) == 1
        )

    def can_move_to(self, target: Position, board: Board) -> bool:
        return any(m.to_pos == target for m in self.legal_moves(board))

    def _append(self, target: Position, moves: list[Move]) -> None:
        if self.is_promotion_square(target):
            for pt in PROMOTION_TYPES:
                moves.append(Move(self.position, target, pt))
        else:
            moves.append(Move(self.position, target))


class Knight(Piece):
    """Knight: the eight L-shaped jumps; ignores intervening pieces."""

    __slots__ = ()

    piece_type = PieceType.KNIGHT
    letter = "N"

    def legal_moves(self, board: Board) -> list[Move]:
        return self._step_moves(KNIGHT_OFFSETS, board)

    def attacks(self, target: Position, board: Board) -> bool:
        dr = abs(target.row - self.position.row)
        dc = abs(target.col - self.position.col)
        return (dr, dc) in ((1, 2), (2, 1))


class _SlidingPiece(Piece):
    """Ray-casting movement shared by bishop, rook and queen."""

    __slots__ = ()

    directions: ClassVar[tuple[tuple[int, int], ...]]

    def legal_moves(self, board: Board) -> list[Move]:
        moves: list[Move] = []
        for dr, dc in self.directions:
            target = self.position.offset(dr, dc)
            while target.is_valid():
                occupant = board.piece_at(target)
                if occupant is None:
                    moves.append(Move(self.position, target))
                    target = target.offset(dr, dc)
                    continue
                if occupant.color != self.color:
                    moves.append(Move(self.position, target))
                break
        return moves

    def attacks(self, target: Position, board: Board) -> bool:
        dr = target.row - self.position.row
        dc = target.col - self.position.col
        if dr == 0 and dc == 0:
            return False
        if dr != 0 and dc != 0 and abs(dr) != abs(dc):
            return False
        step = (_sign(dr), _sign(dc))
        if step not in self.directions:
            return False

        current = self.position.offset(*step)
        while current != target:
            if not board.is_empty(current):
                return False
            current = current.offset(*step)
        return True


class Bishop(_SlidingPiece):
    __slots__ = ()

    piece_type = PieceType.BISHOP
    letter = "B"
    directions = BISHOP_DIRS


class Rook(_SlidingPiece):
    __slots__ = ()

    piece_type = PieceType.ROOK
    letter = "R"
    directions = ROOK_DIRS


class Queen(_SlidingPiece):
    __slots__ = ()

    piece_type = PieceType.QUEEN
    letter = "Q"
    directions = QUEEN_DIRS


class King(Piece):
    """King: one step in any direction, plus castling."""

    __slots__ = ()

    piece_type = PieceType.KING
    letter = "K"

    @property
    def home_row(self) -> int:
        return 0 if self.color == Color.WHITE else 7

    def legal_moves(self, board: Board) -> list[Move]:
        moves = self._step_moves(KING_OFFSETS, board)
        for kingside in (True, False):
            if self.can_castle(board, kingside):
                moves.append(Move(self.position, self.castling_target(kingside)))
        return moves

    def attacks(self, target: Position, board: Board) -> bool:
        dr = abs(target.row - self.position.row)
        dc = abs(target.col - self.position.col)
        return max(dr, dc) == 1

    def can_move_to(self, target: Position, board: Board) -> bool:
        if super().can_move_to(target, board):
            return True
        return any(
            target == self.castling_target(kingside) and self.can_castle(board, kingside)
            for kingside in (True, False)
        )

    def is_in_check(self, board: Board) -> bool:
        return board.is_position_under_attack(self.position, self.color.opposite)

    def castling_target(self, kingside: bool) -> Position:
        return Position(self.home_row, 6 if kingside else 2)

    def castling_rook_position(self, kingside: bool) -> Position:
        return Position(self.home_row, 7 if kingside else 0)

    def can_castle(self, board: Board, kingside: bool) -> bool:
        """All castling preconditions for one wing.

        Rights flag still set, king and rook unmoved on their home squares,
        squares between them empty, king not in check, and no square the king
        crosses (destination included) attacked by the opponent.
        """
        if self.has_moved or self.position != Position(self.home_row, 4):
            return False
        if not board.can_castle(self.color, kingside):
            return False

        rook = board.piece_at(self.castling_rook_position(kingside))
        if not isinstance(rook, Rook) or rook.color != self.color or rook.has_moved:
            return False

        between = range(5, 7) if kingside else range(1, 4)
        if any(not board.is_empty(Position(self.home_row, c)) for c in between):
            return False

        opponent = self.color.opposite
        path = (4, 5, 6) if kingside else (4, 3, 2)
        return not any(
            board.is_position_under_attack(Position(self.home_row, c), opponent)
            for c in path
        )


# ── Factory ──────────────────────────────────────────────────────────────────

_PIECE_CLASSES: dict[PieceType, type[Piece]] = {
    PieceType.PAWN: Pawn,
    PieceType.KNIGHT: Knight,
    PieceType.BISHOP: Bishop,
    PieceType.ROOK: Rook,
    PieceType.QUEEN: Queen,
    PieceType.KING: King,
}

_LETTER_TYPES: dict[str, PieceType] = {
    cls.letter: pt for pt, cls in _PIECE_CLASSES.items()
}


def create_piece(
    piece_type: PieceType, color: Color, position: Position, has_moved: bool = False
) -> Piece:
    """Instantiate the concrete class for *piece_type*."""
    return _PIECE_CLASSES[piece_type](color, position, has_moved)


def piece_from_char(char: str, position: Position) -> Piece:
    """Create piece from FEN character, e.g. ``'N'`` → white knight."""
    piece_type = _LETTER_TYPES.get(char.upper()) if len(char) == 1 else None
    if piece_type is None:
        raise ValueError(f"Invalid piece character: {char!r}")
    color = Color.WHITE if char.isupper() else Color.BLACK
    return create_piece(piece_type, color, position)
