"""Move value object (coordinate representation)."""

from __future__ import annotations

from dataclasses import dataclass

from chessref.core.enums import PieceType
from chessref.core.types import Position, parse_square, square_name

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}
_PROMO_CHARS_REV: dict[str, PieceType] = {v: k for k, v in _PROMO_CHARS.items()}

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    Only the two squares (and the promotion choice, when a pawn reaches the
    last rank) are stored. Whether a move captures, castles or takes en
    passant is derived from the board when the move is applied.
    """

    from_pos: Position
    to_pos: Position
    promotion: PieceType | None = None

    def __post_init__(self) -> None:
        if self.promotion is not None and self.promotion not in _PROMO_CHARS:
            raise ValueError(f"Invalid promotion piece: {self.promotion!r}")

    def is_valid(self) -> bool:
        return self.from_pos.is_valid() and self.to_pos.is_valid()

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_pos)}{square_name(self.to_pos)}"
        if self.promotion is not None:
            base += _PROMO_CHARS[self.promotion]
        return base

    @property
    def uci(self) -> str:
        """Coordinate notation, e.g. ``e2e4`` or ``e7e8q``."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse coordinate notation, e.g. ``'g1f3'`` or ``'a7a8q'``."""
        clean = text.strip()
        if len(clean) not in (4, 5):
            raise ValueError(f"Invalid coordinate move: {text!r}")
        promotion: PieceType | None = None
        if len(clean) == 5:
            promotion = _PROMO_CHARS_REV.get(clean[4].lower())
            if promotion is None:
                raise ValueError(f"Invalid promotion piece in move: {text!r}")
        return cls(parse_square(clean[:2]), parse_square(clean[2:4]), promotion)
