"""FEN parsing and serialization."""

from __future__ import annotations

from chessref.core.board import Board
from chessref.core.enums import CastlingRights, Color, PieceType
from chessref.core.move import Move
from chessref.core.notation.models import FenRecord
from chessref.core.piece import piece_from_char
from chessref.core.types import Position, parse_square, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def board_from_fen(fen: str) -> FenRecord:
    """Parse a FEN string into a :class:`FenRecord`."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]

    # Side to move
    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    # Castling
    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        if len(set(castling_part)) != len(castling_part):
            raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
        for ch in castling_part:
            right = rights.get(ch)
            if right is None:
                raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
            castling |= right

    # Piece placement
    board = Board(castling)
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    for rank_idx, rank_text in enumerate(ranks):
        row = 7 - rank_idx
        col = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                col += step
            else:
                if col >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                pos = Position(row, col)
                piece = piece_from_char(ch, pos)
                if piece.piece_type == PieceType.PAWN:
                    if row in (0, 7):
                        raise ValueError(f"Invalid FEN pawn on back rank: {fen!r}")
                    piece.has_moved = row != (1 if piece.color == Color.WHITE else 6)
                board.set_piece_at(piece, pos)
                col += 1
            if col > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if col != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    # En passant: recreated as the double step that enabled it
    if ep_part != "-":
        ep = parse_square(ep_part)
        expected_row = 5 if side == Color.WHITE else 2
        if ep.row != expected_row:
            raise ValueError(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )
        step = 1 if side == Color.WHITE else -1
        board.set_last_move(
            Move(Position(ep.row + step, ep.col), Position(ep.row - step, ep.col))
        )

    # Clocks (optional)
    halfmove = _parse_counter(parts, 4, default=0, minimum=0, label="halfmove clock")
    fullmove = _parse_counter(parts, 5, default=1, minimum=1, label="fullmove number")

    return FenRecord(board, side, halfmove, fullmove)


def _parse_counter(
    parts: list[str], index: int, *, default: int, minimum: int, label: str
) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError:
        raise ValueError(f"Invalid FEN {label}: {parts[index]!r}") from None
    if value < minimum:
        raise ValueError(f"Invalid FEN {label}: {parts[index]!r}")
    return value


def board_to_fen(
    board: Board,
    side_to_move: Color,
    halfmove_clock: int = 0,
    fullmove_number: int = 1,
) -> str:
    """Serialise a board plus game counters to FEN."""
    # 1. Board
    rows: list[str] = []
    for row in range(7, -1, -1):
        empty = 0
        text = ""
        for col in range(8):
            piece = board.piece_at(Position(row, col))
            if piece is None:
                empty += 1
                continue
            if empty:
                text += str(empty)
                empty = 0
            text += piece.symbol()
        if empty:
            text += str(empty)
        rows.append(text)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if side_to_move == Color.WHITE else "b"

    # 3. Castling
    castling_str = "".join(
        ch for ch, right in _CASTLING_CHARS if board.castling_rights & right
    )

    # 4. En passant
    ep = board.en_passant_target
    ep_str = square_name(ep) if ep is not None else "-"

    return (
        f"{board_str} {side_str} {castling_str or '-'} {ep_str} "
        f"{halfmove_clock} {fullmove_number}"
    )
