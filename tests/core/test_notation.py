"""Tests for FEN / SAN / PGN notation."""

import pytest

from chessref.core.board import Board
from chessref.core.enums import CastlingRights, Color, GameResult, PieceType
from chessref.core.move import Move
from chessref.core.notation import (
    STARTING_FEN,
    PgnMove,
    board_from_fen,
    board_to_fen,
    build_pgn,
    game_result_from_pgn,
    move_to_san,
    parse_pgn_game,
    parse_san,
    pgn_movetext_from_moves,
    pgn_result_token,
)
from chessref.core.types import (
    A1,
    A3,
    A5,
    C1,
    D1,
    D5,
    D6,
    D7,
    E1,
    E2,
    E4,
    E5,
    E7,
    E8,
    F1,
    F3,
    F7,
    G1,
    H5,
    parse_square,
)

# ── FEN ──────────────────────────────────────────────────────────────────────


class TestFEN:
    def test_roundtrip_starting(self) -> None:
        record = board_from_fen(STARTING_FEN)
        assert record.side_to_move == Color.WHITE
        assert record.board == Board.initial()
        fen = board_to_fen(
            record.board,
            record.side_to_move,
            record.halfmove_clock,
            record.fullmove_number,
        )
        assert fen == STARTING_FEN

    def test_after_e4(self) -> None:
        board = Board.initial()
        board.make_move(Move(E2, E4))
        fen = board_to_fen(board, Color.BLACK, 0, 1)
        assert fen == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"

    def test_counters(self) -> None:
        record = board_from_fen("4k3/8/8/8/8/8/8/4K3 b - - 37 82")
        assert record.side_to_move == Color.BLACK
        assert record.halfmove_clock == 37
        assert record.fullmove_number == 82

    def test_counters_optional(self) -> None:
        record = board_from_fen("4k3/8/8/8/8/8/8/4K3 w - -")
        assert record.halfmove_clock == 0
        assert record.fullmove_number == 1

    def test_castling_field(self) -> None:
        record = board_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kq - 0 1")
        rights = record.board.castling_rights
        assert rights == CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE
        assert board_to_fen(record.board, Color.WHITE).split()[2] == "Kq"

    def test_en_passant_field_recreates_last_move(self) -> None:
        record = board_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        assert record.board.last_move == Move(D7, D5)
        assert record.board.en_passant_target == D6
        assert Move(E5, D6) in record.board.all_legal_moves(Color.WHITE)

    def test_pawns_off_start_rank_have_moved(self) -> None:
        board = board_from_fen("4k3/8/8/3pP3/8/8/4P3/4K3 w - - 0 1").board
        assert board.piece_at(E5).has_moved  # type: ignore[union-attr]
        assert not board.piece_at(E2).has_moved  # type: ignore[union-attr]

    @pytest.mark.parametrize(
        "fen",
        [
            "",
            "8/8/8/8/8/8/8 w - - 0 1",  # seven ranks
            "4k3/8/8/8/8/8/8/4K3 x - - 0 1",  # side
            "4k3/8/8/8/8/8/8/4K3 w KX - 0 1",  # castling
            "4k3/8/8/8/8/8/8/4K3 w KK - 0 1",  # repeated castling flag
            "4k3/8/8/8/8/8/8/4K3 w - e4 0 1",  # en passant rank
            "4k3/8/8/8/8/8/8/4K3 w - - -1 1",  # halfmove
            "4k3/8/8/8/8/8/8/4K3 w - - 0 0",  # fullmove
            "4k3/8/8/8/8/8/8/4K4 w - - 0 1",  # rank too wide
            "4k3/8/8/8/8/8/8/4K2 w - - 0 1",  # rank too short
            "4k2P/8/8/8/8/8/8/4K3 w - - 0 1",  # pawn on back rank
            "4k3/8/8/8/8/8/8/4X3 w - - 0 1",  # piece letter
        ],
    )
    def test_invalid(self, fen: str) -> None:
        with pytest.raises(ValueError):
            board_from_fen(fen)


# ── SAN ──────────────────────────────────────────────────────────────────────


class TestSAN:
    def test_pawn_and_knight(self) -> None:
        board = Board.initial()
        assert move_to_san(board, Move(E2, E4)) == "e4"
        assert move_to_san(board, Move(G1, F3)) == "Nf3"

    def test_castling(self) -> None:
        board = board_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1").board
        assert move_to_san(board, Move(E1, G1)) == "O-O"
        assert move_to_san(board, Move(E1, C1)) == "O-O-O"

    def test_file_disambiguation(self) -> None:
        board = board_from_fen("4k3/8/8/8/8/8/8/R4RK1 w - - 0 1").board
        assert move_to_san(board, Move(A1, D1)) == "Rad1"
        assert move_to_san(board, Move(F1, D1)) == "Rfd1"

    def test_rank_disambiguation(self) -> None:
        board = board_from_fen("4k3/8/8/R7/8/8/8/R3K3 w - - 0 1").board
        assert move_to_san(board, Move(A1, A3)) == "R1a3"
        assert move_to_san(board, Move(A5, A3)) == "R5a3"

    def test_promotion_with_check(self) -> None:
        board = board_from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1").board
        assert move_to_san(board, Move(E7, E8, PieceType.QUEEN)) == "e8=Q+"
        assert move_to_san(board, Move(E7, E8, PieceType.KNIGHT)) == "e8=N"

    def test_en_passant(self) -> None:
        board = board_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1").board
        assert move_to_san(board, Move(E5, D6)) == "exd6"

    def test_checkmate_suffix(self) -> None:
        fen = "r1bqkb1r/pppp1ppp/2n2n2/4p2Q/2B1P3/8/PPPP1PPP/RNB1K1NR w KQkq - 4 4"
        board = board_from_fen(fen).board
        assert move_to_san(board, Move(H5, F7)) == "Qxf7#"

    def test_no_piece_raises(self) -> None:
        with pytest.raises(ValueError):
            move_to_san(Board.initial(), Move(E4, E5))

    def test_parse_basic(self) -> None:
        board = Board.initial()
        assert parse_san(board, Color.WHITE, "Nf3") == Move(G1, F3)
        assert parse_san(board, Color.WHITE, "e4") == Move(E2, E4)
        assert parse_san(board, Color.BLACK, "e5") == Move(E7, parse_square("e5"))

    def test_parse_castling(self) -> None:
        board = board_from_fen("r3k2r/8/8/8/8/8/8/R3K2R b KQkq - 0 1").board
        assert parse_san(board, Color.BLACK, "O-O") == Move(E8, parse_square("g8"))
        assert parse_san(board, Color.BLACK, "0-0-0") == Move(E8, parse_square("c8"))

    def test_parse_disambiguated(self) -> None:
        board = board_from_fen("4k3/8/8/8/8/8/8/R4RK1 w - - 0 1").board
        assert parse_san(board, Color.WHITE, "Rfd1") == Move(F1, D1)
        with pytest.raises(ValueError, match="Ambiguous"):
            parse_san(board, Color.WHITE, "Rd1")

    def test_parse_promotion(self) -> None:
        board = board_from_fen("k7/4P3/8/8/8/8/8/4K3 w - - 0 1").board
        assert parse_san(board, Color.WHITE, "e8=Q+") == Move(E7, E8, PieceType.QUEEN)
        with pytest.raises(ValueError):
            parse_san(board, Color.WHITE, "e8=K")

    @pytest.mark.parametrize("san", ["", "Qh5", "Ke2", "Nf6", "z9", "O-O"])
    def test_parse_illegal(self, san: str) -> None:
        with pytest.raises(ValueError):
            parse_san(Board.initial(), Color.WHITE, san)

    def test_san_roundtrip_all_moves(self) -> None:
        fen = "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        board = board_from_fen(fen).board
        for move in board.all_legal_moves(Color.WHITE):
            assert parse_san(board, Color.WHITE, move_to_san(board, move)) == move


# ── PGN ──────────────────────────────────────────────────────────────────────


class TestPGN:
    def test_result_tokens(self) -> None:
        assert pgn_result_token(GameResult.WHITE_WINS) == "1-0"
        assert pgn_result_token(GameResult.WHITE_TIMEOUT) == "0-1"
        assert pgn_result_token(GameResult.DRAW_STALEMATE) == "1/2-1/2"
        assert pgn_result_token(GameResult.ONGOING) == "*"

    def test_result_from_token(self) -> None:
        assert game_result_from_pgn("0-1") == GameResult.BLACK_WINS
        assert game_result_from_pgn("1/2-1/2") == GameResult.DRAW_AGREEMENT
        assert game_result_from_pgn("*") == GameResult.ONGOING

    def test_movetext(self) -> None:
        moves = [PgnMove("e4"), PgnMove("e5"), PgnMove("Nf3")]
        assert pgn_movetext_from_moves(moves, "*") == "1. e4 e5 2. Nf3 *"

    def test_movetext_black_first(self) -> None:
        moves = [PgnMove("e5"), PgnMove("Nf3")]
        text = pgn_movetext_from_moves(moves, "*", first_black=True, first_number=7)
        assert text == "7... e5 8. Nf3 *"

    def test_movetext_comments(self) -> None:
        moves = [PgnMove("e4", "best by test"), PgnMove("e5"), PgnMove("Nf3", "a}b")]
        text = pgn_movetext_from_moves(moves, "*")
        assert text == "1. e4 {best by test} e5 2. Nf3 {a]b} *"

    def test_build_with_comments(self) -> None:
        pgn = build_pgn({}, ["e4", "e5"], "*", comments=["good", None])
        assert pgn.rstrip().endswith("1. e4 {good} e5 *")
        assert parse_pgn_game(pgn).moves[0].comment == "good"

    def test_build_comment_length_mismatch(self) -> None:
        with pytest.raises(ValueError):
            build_pgn({}, ["e4", "e5"], "*", comments=["good"])

    def test_build_escapes_headers(self) -> None:
        pgn = build_pgn({"White": 'A "B"', "Result": "1-0"}, ["e4"], "1-0")
        assert '[White "A \\"B\\""]' in pgn
        assert pgn.rstrip().endswith("1. e4 1-0")

    def test_parse(self) -> None:
        text = (
            '[Event "Club"]\n'
            '[White "Alice"]\n'
            "\n"
            "1. e4 {best by test} e5 (1... c5 2. Nf3) 2. Nf3 $1 Nc6 ; line comment\n"
            "3. Bb5 1-0\n"
        )
        parsed = parse_pgn_game(text)
        assert parsed.headers == {"Event": "Club", "White": "Alice"}
        assert parsed.sans == ["e4", "e5", "Nf3", "Nc6", "Bb5"]
        assert parsed.moves[0].comment == "best by test"
        assert parsed.moves[3].comment == "line comment"
        assert parsed.result_token == "1-0"

    def test_parse_compact_numbers(self) -> None:
        parsed = parse_pgn_game("1.e4 e5 2.Nf3 2...Nc6 *")
        assert parsed.sans == ["e4", "e5", "Nf3", "Nc6"]
        assert parsed.result_token == "*"

    def test_header_result_fallback(self) -> None:
        parsed = parse_pgn_game('[Result "1/2-1/2"]\n\n1. e4 e5\n')
        assert parsed.result_token == "1/2-1/2"

    def test_invalid_header(self) -> None:
        with pytest.raises(ValueError):
            parse_pgn_game('[Event "unterminated]\n\n1. e4 *')

    def test_roundtrip(self) -> None:
        headers = {"Event": "Test", "Result": "0-1"}
        pgn = build_pgn(headers, ["f3", "e5", "g4", "Qh4#"], "0-1")
        parsed = parse_pgn_game(pgn)
        assert parsed.headers == headers
        assert parsed.sans == ["f3", "e5", "g4", "Qh4#"]
        assert parsed.result_token == "0-1"
