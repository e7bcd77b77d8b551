"""Core enumerations and flags for chess domain."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveKind(IntEnum):
    """Classification of a move, derived from the board at commit time."""

    NORMAL = 0
    CAPTURE = 1
    DOUBLE_PAWN = 2
    EN_PASSANT = 3
    CASTLE_KINGSIDE = 4
    CASTLE_QUEENSIDE = 5
    PROMOTION = 6

    @property
    def is_castle(self) -> bool:
        return self in (MoveKind.CASTLE_KINGSIDE, MoveKind.CASTLE_QUEENSIDE)


class CastlingRights(IntFlag):
    """Bitmask for castling availability."""

    NONE = 0
    WHITE_KINGSIDE = auto()
    WHITE_QUEENSIDE = auto()
    BLACK_KINGSIDE = auto()
    BLACK_QUEENSIDE = auto()

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH

    @classmethod
    def for_side(cls, color: Color, kingside: bool) -> CastlingRights:
        """The single flag governing *color*'s castling on one wing."""
        if color == Color.WHITE:
            return cls.WHITE_KINGSIDE if kingside else cls.WHITE_QUEENSIDE
        return cls.BLACK_KINGSIDE if kingside else cls.BLACK_QUEENSIDE

    @classmethod
    def for_color(cls, color: Color) -> CastlingRights:
        return cls.WHITE_BOTH if color == Color.WHITE else cls.BLACK_BOTH


class GameResult(IntEnum):
    """Outcome of a game."""

    ONGOING = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW_STALEMATE = 3
    DRAW_INSUFFICIENT_MATERIAL = 4
    DRAW_FIFTY_MOVE_RULE = 5
    DRAW_THREEFOLD_REPETITION = 6
    DRAW_AGREEMENT = 7
    DRAW_SEVENTY_FIVE_MOVE_RULE = 8
    DRAW_FIVEFOLD_REPETITION = 9
    WHITE_TIMEOUT = 10  # White's flag fell
    BLACK_TIMEOUT = 11  # Black's flag fell

    @property
    def is_over(self) -> bool:
        return self != GameResult.ONGOING

    @property
    def is_draw(self) -> bool:
        return self in _DRAW_RESULTS

    @property
    def winner(self) -> Color | None:
        """Winning side, or ``None`` for draws and unfinished games."""
        if self in (GameResult.WHITE_WINS, GameResult.BLACK_TIMEOUT):
            return Color.WHITE
        if self in (GameResult.BLACK_WINS, GameResult.WHITE_TIMEOUT):
            return Color.BLACK
        return None


_DRAW_RESULTS = frozenset(
    {
        GameResult.DRAW_STALEMATE,
        GameResult.DRAW_INSUFFICIENT_MATERIAL,
        GameResult.DRAW_FIFTY_MOVE_RULE,
        GameResult.DRAW_THREEFOLD_REPETITION,
        GameResult.DRAW_AGREEMENT,
        GameResult.DRAW_SEVENTY_FIVE_MOVE_RULE,
        GameResult.DRAW_FIVEFOLD_REPETITION,
    }
)
