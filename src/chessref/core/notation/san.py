"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

from chessref.core.board import Board
from chessref.core.enums import Color, MoveKind, PieceType
from chessref.core.move import Move
from chessref.core.types import parse_square, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}
_FILES = "abcdefgh"


def move_to_san(board: Board, move: Move) -> str:
    """Convert a legal *move* to SAN given the *board* before the move."""
    piece = board.piece_at(move.from_pos)
    if piece is None:
        raise ValueError(f"No piece on {move.from_pos}")

    kind = board.classify_move(move)
    if kind == MoveKind.CASTLE_KINGSIDE:
        san = "O-O"
    elif kind == MoveKind.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        is_capture = board.is_capture(move)
        san = ""
        if piece.piece_type == PieceType.PAWN:
            if is_capture:
                san += _FILES[move.from_pos.col]
        else:
            san += _SAN_PIECE[piece.piece_type] + _disambiguation(board, move)

        if is_capture:
            san += "x"
        san += square_name(move.to_pos)
        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    # Check / checkmate suffix
    after = board.make_temporary_move(move)
    opponent = piece.color.opposite
    if after.is_king_in_check(opponent):
        san += "+" if after.all_legal_moves(opponent) else "#"
    return san


def _disambiguation(board: Board, move: Move) -> str:
    piece = board.piece_at(move.from_pos)
    assert piece is not None
    rivals = [
        m.from_pos
        for m in board.all_legal_moves(piece.color)
        if m.to_pos == move.to_pos
        and m.from_pos != move.from_pos
        and type(board.piece_at(m.from_pos)) is type(piece)
    ]
    if not rivals:
        return ""
    if all(pos.col != move.from_pos.col for pos in rivals):
        return _FILES[move.from_pos.col]
    if all(pos.row != move.from_pos.row for pos in rivals):
        return str(move.from_pos.row + 1)
    return square_name(move.from_pos)


def parse_san(board: Board, color: Color, san: str) -> Move:
    """Parse a SAN string into a legal :class:`Move` for *color*."""
    legal = board.all_legal_moves(color)
    clean = san.strip().rstrip("+#!?")
    if len(clean) < 2:
        raise ValueError(f"Invalid SAN: {san!r}")

    # Castling
    if clean in ("O-O", "0-0", "O-O-O", "0-0-0"):
        wanted = MoveKind.CASTLE_KINGSIDE if len(clean) == 3 else MoveKind.CASTLE_QUEENSIDE
        for m in legal:
            if board.classify_move(m) == wanted:
                return m
        raise ValueError(f"Illegal move: {san}")

    # Promotion
    promotion: PieceType | None = None
    if "=" in clean:
        clean, _, promo_char = clean.partition("=")
        promotion = _SAN_PIECE_REV.get(promo_char.upper())
        if promotion is None or promotion == PieceType.KING:
            raise ValueError(f"Invalid promotion in SAN: {san!r}")

    # Destination (last two chars)
    to_pos = parse_square(clean[-2:])
    clean = clean[:-2]

    # Capture marker
    if clean.endswith("x"):
        clean = clean[:-1]

    # Piece type
    if clean and clean[0] in _SAN_PIECE_REV:
        piece_type = _SAN_PIECE_REV[clean[0]]
        clean = clean[1:]
    else:
        piece_type = PieceType.PAWN

    # Disambiguation
    from_col: int | None = None
    from_row: int | None = None
    for ch in clean:
        if ch in _FILES:
            from_col = _FILES.index(ch)
        elif ch in "12345678":
            from_row = int(ch) - 1
        else:
            raise ValueError(f"Invalid SAN: {san!r}")

    candidates: list[Move] = []
    for m in legal:
        p = board.piece_at(m.from_pos)
        if p is None or p.piece_type != piece_type or m.to_pos != to_pos:
            continue
        if m.promotion != promotion:
            continue
        if from_col is not None and m.from_pos.col != from_col:
            continue
        if from_row is not None and m.from_pos.row != from_row:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise ValueError(f"Illegal move: {san}")
    raise ValueError(f"Ambiguous move: {san} -> {[str(m) for m in candidates]}")
