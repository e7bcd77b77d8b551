"""Board — piece placement, attack detection and legal-move filtering."""

from __future__ import annotations

from collections.abc import Iterator

from chessref.core.enums import CastlingRights, Color, MoveKind, PieceType
from chessref.core.move import Move
from chessref.core.piece import King, Pawn, Piece, create_piece
from chessref.core.types import ALL_POSITIONS, Position

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)

# Rook home squares and the right each one guards.
_ROOK_CORNERS: dict[Position, CastlingRights] = {
    Position(0, 0): CastlingRights.WHITE_QUEENSIDE,
    Position(0, 7): CastlingRights.WHITE_KINGSIDE,
    Position(7, 0): CastlingRights.BLACK_QUEENSIDE,
    Position(7, 7): CastlingRights.BLACK_KINGSIDE,
}

PositionKey = tuple[str, Color, int, Position | None]


class Board:
    """Mutable 8x8 grid where each cell owns at most one :class:`Piece`.

    Besides placement the board tracks the last move applied (en passant is
    validated against it) and the four castling rights. Castling rights only
    ever go from set to cleared; the constructor is the only place that
    grants them.
    """

    __slots__ = ("_grid", "_castling", "last_move")

    def __init__(self, castling: CastlingRights = CastlingRights.ALL) -> None:
        self._grid: list[list[Piece | None]] = [[None] * 8 for _ in range(8)]
        self._castling = castling
        self.last_move: Move | None = None

    # -- Element access -----------------------------------------------------

    def piece_at(self, pos: Position) -> Piece | None:
        self._check(pos)
        return self._grid[pos.row][pos.col]

    def __getitem__(self, pos: Position) -> Piece | None:
        return self.piece_at(pos)

    def set_piece_at(self, piece: Piece, pos: Position) -> None:
        """Place *piece* on *pos*, discarding whatever stood there."""
        self._check(pos)
        piece.position = pos
        self._grid[pos.row][pos.col] = piece

    def remove_piece_at(self, pos: Position) -> Piece | None:
        self._check(pos)
        piece = self._grid[pos.row][pos.col]
        self._grid[pos.row][pos.col] = None
        return piece

    def is_empty(self, pos: Position) -> bool:
        return self.piece_at(pos) is None

    def has_piece_of_color(self, pos: Position, color: Color) -> bool:
        piece = self.piece_at(pos)
        return piece is not None and piece.color == color

    @staticmethod
    def _check(pos: Position) -> None:
        if not pos.is_valid():
            raise ValueError(f"Position off the board: ({pos.row}, {pos.col})")

    # -- Query helpers ------------------------------------------------------

    def squares(self) -> Iterator[tuple[Position, Piece]]:
        """Occupied squares in a1..h8 order."""
        for pos in ALL_POSITIONS:
            piece = self._grid[pos.row][pos.col]
            if piece is not None:
                yield pos, piece

    def pieces(self, color: Color | None = None) -> list[Piece]:
        return [p for _, p in self.squares() if color is None or p.color == color]

    def pieces_of_color(self, color: Color) -> list[Position]:
        """All squares occupied by *color*."""
        return [pos for pos, p in self.squares() if p.color == color]

    def find_king(self, color: Color) -> Position:
        """Return the king square for *color*."""
        for pos, piece in self.squares():
            if isinstance(piece, King) and piece.color == color:
                return pos
        raise ValueError(f"No {color.name} king on board")

    def has_king(self, color: Color) -> bool:
        return any(isinstance(p, King) for p in self.pieces(color))

    # -- Attack detection ---------------------------------------------------

    def is_position_under_attack(self, pos: Position, attacking_color: Color) -> bool:
        """Is *pos* attacked by any piece of *attacking_color*?

        Unconditional: pinned attackers still count.
        """
        return any(piece.attacks(pos, self) for piece in self.pieces(attacking_color))

    def is_king_in_check(self, color: Color) -> bool:
        if not self.has_king(color):
            return False
        king = self.piece_at(self.find_king(color))
        assert isinstance(king, King)
        return king.is_in_check(self)

    # -- Move generation ----------------------------------------------------

    def pseudo_legal_moves(self, color: Color) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        for piece in self.pieces(color):
            moves.extend(piece.legal_moves(self))
        return moves

    def all_legal_moves(self, color: Color) -> list[Move]:
        """All strictly legal moves for *color*.

        Each candidate is played on a throw-away copy and kept only if the
        mover's king is not attacked afterwards.
        """
        return [
            move
            for move in self.pseudo_legal_moves(color)
            if not self.make_temporary_move(move).is_king_in_check(color)
        ]

    def legal_moves_from(self, pos: Position) -> list[Move]:
        """Strictly legal moves of the piece standing on *pos*."""
        piece = self.piece_at(pos)
        if piece is None:
            return []
        return [
            move
            for move in piece.legal_moves(self)
            if not self.make_temporary_move(move).is_king_in_check(piece.color)
        ]

    def is_move_legal(self, move: Move, color: Color | None = None) -> bool:
        """Whether *move* is legal for the owner of the moving piece.

        When *color* is given the moving piece must also belong to it.
        """
        if not move.is_valid():
            return False
        piece = self.piece_at(move.from_pos)
        if piece is None or (color is not None and piece.color != color):
            return False
        if move not in piece.legal_moves(self):
            return False
        return not self.make_temporary_move(move).is_king_in_check(piece.color)

    def make_temporary_move(self, move: Move) -> Board:
        """Copy of the board with *move* applied; ``self`` is untouched."""
        board = self.copy()
        board.make_move(move)
        return board

    # -- Move classification -----------------------------------------------

    def classify_move(self, move: Move) -> MoveKind:
        """Derive the kind of *move* from the current placement."""
        piece = self.piece_at(move.from_pos)
        if piece is None:
            raise ValueError(f"No piece on {move.from_pos}")

        if isinstance(piece, King) and abs(move.to_pos.col - move.from_pos.col) == 2:
            if move.to_pos.col > move.from_pos.col:
                return MoveKind.CASTLE_KINGSIDE
            return MoveKind.CASTLE_QUEENSIDE

        if isinstance(piece, Pawn):
            if piece.is_promotion_square(move.to_pos):
                return MoveKind.PROMOTION
            if piece.is_double_move(move.to_pos):
                return MoveKind.DOUBLE_PAWN
            if move.to_pos.col != move.from_pos.col and self.is_empty(move.to_pos):
                return MoveKind.EN_PASSANT

        if not self.is_empty(move.to_pos):
            return MoveKind.CAPTURE
        return MoveKind.NORMAL

    def is_capture(self, move: Move) -> bool:
        return (
            not self.is_empty(move.to_pos)
            or self.classify_move(move) == MoveKind.EN_PASSANT
        )

    # -- Mutation -----------------------------------------------------------

    def move_piece(
        self, from_pos: Position, to_pos: Position, promotion: PieceType | None = None
    ) -> Piece | None:
        """Relocate the piece on *from_pos*; return the captured piece, if any.

        Handles the side effects of special moves: the pawn removed by an en
        passant capture, the rook hop of castling, promotion, and castling
        rights.
        """
        piece = self.piece_at(from_pos)
        if piece is None:
            raise ValueError(f"No piece on {from_pos}")
        self._check(to_pos)

        kind = self.classify_move(Move(from_pos, to_pos))
        if kind == MoveKind.PROMOTION and promotion is None:
            raise ValueError(f"Promotion piece required for {from_pos}{to_pos}")

        self.update_castling_rights(from_pos, to_pos)

        captured = self.remove_piece_at(to_pos)
        if kind == MoveKind.EN_PASSANT:
            captured = self.remove_piece_at(Position(from_pos.row, to_pos.col))

        self.remove_piece_at(from_pos)
        if kind == MoveKind.PROMOTION:
            assert promotion is not None
            piece = create_piece(promotion, piece.color, to_pos)
        self.set_piece_at(piece, to_pos)
        piece.mark_as_moved()

        # Slide the rook for castling
        if kind.is_castle:
            row = from_pos.row
            kingside = kind == MoveKind.CASTLE_KINGSIDE
            rook = self.remove_piece_at(Position(row, 7 if kingside else 0))
            assert rook is not None
            self.set_piece_at(rook, Position(row, 5 if kingside else 3))
            rook.mark_as_moved()

        return captured

    def set_last_move(self, move: Move) -> None:
        """Record *move*; it enables en passant for the next ply only."""
        self.last_move = move

    def make_move(self, move: Move) -> Piece | None:
        """Apply *move* (placement + last-move record); return the capture."""
        captured = self.move_piece(move.from_pos, move.to_pos, move.promotion)
        self.set_last_move(move)
        return captured

    # -- Castling bookkeeping -----------------------------------------------

    @property
    def castling_rights(self) -> CastlingRights:
        return self._castling

    def can_castle(self, color: Color, kingside: bool) -> bool:
        """Whether the rights flag for this wing is still set."""
        return bool(self._castling & CastlingRights.for_side(color, kingside))

    def update_castling_rights(self, from_pos: Position, to_pos: Position) -> None:
        """Clear rights touched by a move from *from_pos* to *to_pos*.

        A king move clears both of its side's rights; any move leaving or
        landing on a rook home square clears that corner's right.
        """
        piece = self.piece_at(from_pos)
        if isinstance(piece, King):
            self._castling &= ~CastlingRights.for_color(piece.color)
        for pos in (from_pos, to_pos):
            right = _ROOK_CORNERS.get(pos)
            if right is not None:
                self._castling &= ~right

    # -- En passant ---------------------------------------------------------

    @property
    def en_passant_target(self) -> Position | None:
        """Square behind a pawn that double-stepped on the last move."""
        last = self.last_move
        if last is None or abs(last.to_pos.row - last.from_pos.row) != 2:
            return None
        if last.from_pos.col != last.to_pos.col:
            return None
        if not isinstance(self.piece_at(last.to_pos), Pawn):
            return None
        return Position((last.from_pos.row + last.to_pos.row) // 2, last.to_pos.col)

    def en_passant_capture_available(self, color: Color) -> bool:
        """Whether *color* has a legal en passant capture right now."""
        target = self.en_passant_target
        if target is None:
            return False
        for pawn in self.pieces(color):
            if not isinstance(pawn, Pawn) or not pawn.is_en_passant(target, self):
                continue
            after = self.make_temporary_move(Move(pawn.position, target))
            if not after.is_king_in_check(color):
                return True
        return False

    # -- Repetition key -----------------------------------------------------

    def placement(self) -> str:
        """Piece symbols rank by rank (a1..h8), ``.`` for empty squares."""
        return "".join(
            p.symbol() if p is not None else "."
            for row in self._grid
            for p in row
        )

    def position_key(self, side_to_move: Color) -> PositionKey:
        """Identity of a position for repetition counting."""
        ep = None
        if self.en_passant_capture_available(side_to_move):
            ep = self.en_passant_target
        return (self.placement(), side_to_move, int(self._castling), ep)

    # -- Copying / setup ----------------------------------------------------

    def copy(self) -> Board:
        """Value-independent copy: every piece is cloned."""
        b = Board(self._castling)
        b._grid = [
            [p.clone() if p is not None else None for p in row] for row in self._grid
        ]
        b.last_move = self.last_move
        return b

    def clear(self) -> None:
        self._grid = [[None] * 8 for _ in range(8)]
        self.last_move = None

    def setup_initial_position(self) -> None:
        """Reset to the standard starting position with full rights."""
        self.clear()
        self._castling = CastlingRights.ALL
        for color, back_row, pawn_row in ((Color.WHITE, 0, 1), (Color.BLACK, 7, 6)):
            for col, pt in enumerate(_BACK_RANK):
                back = Position(back_row, col)
                self.set_piece_at(create_piece(pt, color, back), back)
                front = Position(pawn_row, col)
                self.set_piece_at(create_piece(PieceType.PAWN, color, front), front)

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        b = cls()
        b.setup_initial_position()
        return b

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self._grid == other._grid
            and self._castling == other._castling
            and self.last_move == other.last_move
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        rows: list[str] = []
        for row in range(7, -1, -1):
            cells = [p.symbol() if p else "." for p in self._grid[row]]
            rows.append(f"{row + 1} {' '.join(cells)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)
