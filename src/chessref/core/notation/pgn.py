"""PGN parsing and serialization helpers."""

from __future__ import annotations

import re

from chessref.core.enums import Color, GameResult
from chessref.core.notation.models import ParsedPgn, PgnMove

_PGN_HEADER_RE = re.compile(r'^\[(\w+)\s+"((?:[^"\\]|\\.)*)"\]\s*$')
_PGN_RESULT_TOKENS = frozenset({"1-0", "0-1", "1/2-1/2", "*"})
_MOVE_NUMBER_RE = re.compile(r"^\d+\.(?:\.\.)?")
# Comments, variation brackets and plain tokens, in scan order.
_MOVETEXT_RE = re.compile(
    r"\{(?P<brace>[^}]*)\}?"
    r"|;(?P<line>[^\n]*)"
    r"|(?P<paren>[()])"
    r"|(?P<token>[^\s{};()]+)"
)


def pgn_result_token(result: GameResult) -> str:
    """Convert :class:`GameResult` to a PGN result token."""
    if result.is_draw:
        return "1/2-1/2"
    winner = result.winner
    if winner == Color.WHITE:
        return "1-0"
    if winner == Color.BLACK:
        return "0-1"
    return "*"


def game_result_from_pgn(token: str) -> GameResult:
    """Convert a PGN result token to :class:`GameResult`.

    PGN does not say why a game was drawn; ``1/2-1/2`` maps to
    :attr:`GameResult.DRAW_AGREEMENT`.
    """
    if token == "1-0":
        return GameResult.WHITE_WINS
    if token == "0-1":
        return GameResult.BLACK_WINS
    if token == "1/2-1/2":
        return GameResult.DRAW_AGREEMENT
    return GameResult.ONGOING


def pgn_movetext_from_moves(
    moves: list[PgnMove],
    result_token: str,
    first_black: bool = False,
    first_number: int = 1,
) -> str:
    """Build PGN movetext with optional comments: ``1. e4 {comment} e5 ...``.

    *first_black* starts the numbering with ``N...`` for games set up with
    Black to move.
    """
    parts: list[str] = []
    offset = 1 if first_black else 0
    for idx, move in enumerate(moves):
        ply = idx + offset
        number = first_number + ply // 2
        if ply % 2 == 0:
            parts.append(f"{number}.")
        elif idx == 0:
            parts.append(f"{number}...")
        parts.append(move.san)
        if move.comment:
            # PGN comments cannot contain a closing brace.
            safe_comment = move.comment.replace("}", "]")
            parts.append(f"{{{safe_comment}}}")
    parts.append(result_token)
    return " ".join(parts)


def build_pgn(
    headers: dict[str, str],
    sans: list[str],
    result_token: str,
    comments: list[str | None] | None = None,
    first_black: bool = False,
    first_number: int = 1,
) -> str:
    """Build a single-game PGN document."""
    if comments is not None and len(comments) != len(sans):
        raise ValueError("PGN comments length must match SAN move length")

    moves: list[PgnMove] = []
    for idx, san in enumerate(sans):
        comment = ""
        if comments is not None and comments[idx]:
            comment = comments[idx] or ""
        moves.append(PgnMove(san=san, comment=comment))

    lines: list[str] = []
    for key, value in headers.items():
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        lines.append(f'[{key} "{escaped}"]')
    lines.append("")
    lines.append(pgn_movetext_from_moves(moves, result_token, first_black, first_number))
    lines.append("")
    return "\n".join(lines)


def _parse_movetext(movetext: str) -> tuple[list[PgnMove], str]:
    """Mainline moves (with their comments) and the result token."""
    moves: list[PgnMove] = []
    result_token = "*"
    depth = 0

    for match in _MOVETEXT_RE.finditer(movetext):
        comment = match.group("brace")
        if comment is None:
            comment = match.group("line")
        if comment is not None:
            clean = " ".join(comment.split())
            if depth == 0 and moves and clean:
                prev = moves[-1]
                prev.comment = f"{prev.comment} {clean}" if prev.comment else clean
            continue

        paren = match.group("paren")
        if paren is not None:
            depth = depth + 1 if paren == "(" else max(0, depth - 1)
            continue

        token = match.group("token")
        if depth > 0:
            continue
        if token in _PGN_RESULT_TOKENS:
            result_token = token
            continue
        if token.startswith("$"):
            continue
        token = _MOVE_NUMBER_RE.sub("", token).lstrip(".")
        if token:
            moves.append(PgnMove(san=token))

    return moves, result_token


def parse_pgn_game(pgn_text: str) -> ParsedPgn:
    """Parse a single PGN game into structured headers/moves/result."""
    headers: dict[str, str] = {}
    move_lines: list[str] = []
    in_headers = True

    for raw_line in pgn_text.splitlines():
        line = raw_line.strip()
        if not line:
            if headers:
                in_headers = False
            continue

        if in_headers and line.startswith("["):
            match = _PGN_HEADER_RE.match(line)
            if match is None:
                raise ValueError(f"Invalid PGN header line: {line}")
            key, raw_value = match.groups()
            headers[key] = raw_value.replace('\\"', '"').replace("\\\\", "\\")
            continue

        in_headers = False
        if not line.startswith("%"):
            move_lines.append(line)

    moves, result_token = _parse_movetext("\n".join(move_lines))
    header_result = headers.get("Result")
    if result_token == "*" and header_result in _PGN_RESULT_TOKENS:
        result_token = header_result

    return ParsedPgn(headers=headers, moves=moves, result_token=result_token)
