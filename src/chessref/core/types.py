"""Board coordinates and square-name helpers.

Board layout (row/column, White at the bottom):
    a1=(0, 0), b1=(0, 1), ..., h1=(0, 7)
    a2=(1, 0), ...
    ...
    a8=(7, 0), ..., h8=(7, 7)
"""

from __future__ import annotations

from dataclasses import dataclass

_FILES = "abcdefgh"
_RANKS = "12345678"


@dataclass(frozen=True, slots=True)
class Position:
    """Immutable board coordinate. ``row`` is the rank index, ``col`` the file."""

    row: int
    col: int

    def is_valid(self) -> bool:
        return 0 <= self.row < 8 and 0 <= self.col < 8

    def offset(self, dr: int, dc: int) -> Position:
        """Position shifted by (*dr*, *dc*); the result may lie off the board."""
        return Position(self.row + dr, self.col + dc)

    @property
    def name(self) -> str:
        return square_name(self)

    @property
    def is_light(self) -> bool:
        """Whether the square is a light square (a1 is dark)."""
        return (self.row + self.col) % 2 == 1

    def __str__(self) -> str:
        return square_name(self) if self.is_valid() else f"({self.row}, {self.col})"


def square_name(pos: Position) -> str:
    """Human-readable name, e.g. ``Position(0, 0)`` → ``'a1'``."""
    if not pos.is_valid():
        raise ValueError(f"Position off the board: ({pos.row}, {pos.col})")
    return _FILES[pos.col] + _RANKS[pos.row]


def parse_square(name: str) -> Position:
    """Parse square name, e.g. ``'e4'`` → ``Position(3, 4)``."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in _RANKS:
        raise ValueError(f"Invalid square name: {name!r}")
    return Position(_RANKS.index(name[1]), _FILES.index(name[0]))


# ── Named square constants ──────────────────────────────────────────────────

A1, B1, C1, D1, E1, F1, G1, H1 = (Position(0, c) for c in range(8))
A2, B2, C2, D2, E2, F2, G2, H2 = (Position(1, c) for c in range(8))
A3, B3, C3, D3, E3, F3, G3, H3 = (Position(2, c) for c in range(8))
A4, B4, C4, D4, E4, F4, G4, H4 = (Position(3, c) for c in range(8))
A5, B5, C5, D5, E5, F5, G5, H5 = (Position(4, c) for c in range(8))
A6, B6, C6, D6, E6, F6, G6, H6 = (Position(5, c) for c in range(8))
A7, B7, C7, D7, E7, F7, G7, H7 = (Position(6, c) for c in range(8))
A8, B8, C8, D8, E8, F8, G8, H8 = (Position(7, c) for c in range(8))

ALL_POSITIONS: tuple[Position, ...] = tuple(
    Position(r, c) for r in range(8) for c in range(8)
)
