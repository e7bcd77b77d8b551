"""Game — the central orchestrator of a chess game.

Coordinates: Board, Players, undo snapshots, repetition tracking and the
terminal-condition checks. Emits events via simple callbacks so a
presentation layer / tests can subscribe.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field, replace
from datetime import date

from chessref.core.board import Board, PositionKey
from chessref.core.enums import Color, GameResult
from chessref.core.move import Move
from chessref.core.notation import (
    STARTING_FEN,
    board_from_fen,
    board_to_fen,
    build_pgn,
    game_result_from_pgn,
    move_to_san,
    parse_pgn_game,
    parse_san,
    pgn_result_token,
)
from chessref.core.piece import King, Pawn
from chessref.core.rules import Rules
from chessref.game.config import GameConfig
from chessref.game.interfaces import (
    DrawOffer,
    DrawResponder,
    GameOverCallback,
    GamePhase,
    MoveCallback,
    PhaseCallback,
)
from chessref.game.player import Player
from chessref.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

_COORDINATE_MOVE_RE = re.compile(r"^[a-h][1-8][a-h][1-8][nbrqNBRQ]?$")


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_phase_changed: list[PhaseCallback] = field(default_factory=list)


# Attributes that make up the mutable game state (see ``_adopt``).
_STATE_SLOTS = (
    "_board",
    "_white",
    "_black",
    "_current",
    "_result",
    "_phase",
    "_initialized",
    "_ended_by_event",
    "_move_number",
    "_half_move_clock",
    "_records",
    "_undo_stack",
    "_position_keys",
    "_repetitions",
    "_draw_offer",
    "_draw_offer_by",
    "_start_fen",
)


class Game:
    """A single chess game: turn order, legality, history and results.

    Life cycle: construct → :meth:`initialize_game` → :meth:`start` → moves
    until a result is reached. Every command reports failure with ``False``
    and leaves the game untouched; malformed input raises ``ValueError`` only
    from the notation helpers.

    Thread-safety: single-threaded; every call runs to completion.
    """

    __slots__ = _STATE_SLOTS + (
        "config",
        "events",
        "draw_responder",
        "_allow_undo",
        "_time_control",
    )

    def __init__(self, config: GameConfig | None = None) -> None:
        self.config = config or GameConfig()
        self.events = GameEvents()
        self.draw_responder: DrawResponder | None = None
        self._allow_undo = self.config.allow_undo
        self._time_control = self.config.time_control_enabled
        self._clear_state()

    def _clear_state(self) -> None:
        limit = self.config.default_time_limit
        self._board = Board.initial()
        self._white = Player("White", Color.WHITE, time_left=limit)
        self._black = Player("Black", Color.BLACK, time_left=limit)
        self._current = Color.WHITE
        self._result = GameResult.ONGOING
        self._phase = GamePhase.NOT_STARTED
        self._initialized = False
        self._ended_by_event = False
        self._move_number = 1
        self._half_move_clock = 0
        self._records: list[MoveRecord] = []
        self._undo_stack: list[GameState] = []
        self._position_keys: list[PositionKey] = []
        self._repetitions: Counter[PositionKey] = Counter()
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by: Color | None = None
        self._start_fen = STARTING_FEN

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def board(self) -> Board:
        """The live board. Treat as read-only; use ``board.copy()`` to explore."""
        return self._board

    @property
    def current_player(self) -> Color:
        """Side to move."""
        return self._current

    @property
    def player_to_move(self) -> Player:
        return self.player(self._current)

    @property
    def white_player(self) -> Player:
        return self._white

    @property
    def black_player(self) -> Player:
        return self._black

    def player(self, color: Color) -> Player:
        return self._white if color == Color.WHITE else self._black

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def result(self) -> GameResult:
        return self._result

    @property
    def is_started(self) -> bool:
        return self._phase != GamePhase.NOT_STARTED

    @property
    def is_game_over(self) -> bool:
        return self._phase == GamePhase.GAME_OVER

    @property
    def move_number(self) -> int:
        """Full-move number; increments after each Black move."""
        return self._move_number

    @property
    def half_move_clock(self) -> int:
        """Half-moves since the last capture or pawn move."""
        return self._half_move_clock

    @property
    def move_history(self) -> list[Move]:
        return [record.move for record in self._records]

    @property
    def move_records(self) -> list[MoveRecord]:
        return list(self._records)

    @property
    def draw_offer(self) -> DrawOffer:
        return self._draw_offer

    @property
    def allow_undo(self) -> bool:
        return self._allow_undo

    @property
    def time_control_enabled(self) -> bool:
        return self._time_control

    def set_allow_undo(self, allow: bool) -> None:
        self._allow_undo = allow

    def set_time_control(self, enable: bool) -> None:
        self._time_control = enable

    # ── Set-up ───────────────────────────────────────────────────────────

    def initialize_game(
        self,
        white_name: str,
        black_name: str,
        white_is_human: bool = True,
        black_is_human: bool = True,
        time_limit: int | None = None,
        fen: str | None = None,
    ) -> bool:
        """Create both players and set up the board.

        Only valid before the game has started. A malformed *fen* raises
        ``ValueError`` without changing anything.
        """
        if self._phase != GamePhase.NOT_STARTED:
            _LOGGER.debug("initialize_game ignored in phase %s", self._phase.name)
            return False

        limit = self.config.default_time_limit if time_limit is None else time_limit
        self._install_position(fen or STARTING_FEN)
        self._white = Player(white_name, Color.WHITE, white_is_human, limit)
        self._black = Player(black_name, Color.BLACK, black_is_human, limit)
        self._initialized = True
        _LOGGER.info("Game initialised: %s vs %s", self._white.name, self._black.name)
        return True

    def start(self) -> bool:
        """Move from NOT_STARTED to ACTIVE."""
        if self._phase != GamePhase.NOT_STARTED or not self._initialized:
            return False
        self._set_phase(GamePhase.ACTIVE)
        self._update_check_flags()
        self._check_game_end()
        return True

    def reset(self) -> None:
        """Discard everything and return to NOT_STARTED."""
        self._clear_state()
        self._emit_phase(GamePhase.NOT_STARTED)

    def _install_position(self, fen: str) -> None:
        record = board_from_fen(fen)
        for color in (Color.WHITE, Color.BLACK):
            kings = [p for p in record.board.pieces(color) if isinstance(p, King)]
            if len(kings) != 1:
                raise ValueError(f"Position needs exactly one {color} king: {fen!r}")

        self._board = record.board
        self._current = record.side_to_move
        self._move_number = record.fullmove_number
        self._half_move_clock = record.halfmove_clock
        self._result = GameResult.ONGOING
        self._ended_by_event = False
        self._records = []
        self._undo_stack = []
        self._position_keys = []
        self._repetitions = Counter()
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by = None
        self._start_fen = fen
        self._push_position_key()

    # ── Moves ────────────────────────────────────────────────────────────

    def make_move(self, move: Move | str) -> bool:
        """Play *move* for the side to move. Returns True if applied.

        A string is parsed first (coordinate text such as ``e2e4`` or SAN
        such as ``Nf3``); unparseable text is rejected like an illegal move.
        """
        if self._phase != GamePhase.ACTIVE:
            _LOGGER.debug("Move rejected: game is %s", self._phase.name)
            return False

        if isinstance(move, str):
            try:
                move = self.parse_algebraic_notation(move)
            except ValueError as exc:
                _LOGGER.warning("Move text rejected: %s", exc)
                return False

        if not move.is_valid():
            return False
        piece = self._board.piece_at(move.from_pos)
        if piece is None or piece.color != self._current:
            _LOGGER.debug("Move %s rejected: not %s's piece", move, self._current)
            return False
        if move not in self._board.all_legal_moves(self._current):
            _LOGGER.debug("Move %s rejected: illegal", move)
            return False

        self._commit(move)
        return True

    def _commit(self, move: Move) -> None:
        board = self._board
        mover_color = self._current
        opponent_color = mover_color.opposite
        piece = board.piece_at(move.from_pos)
        assert piece is not None

        san = move_to_san(board, move)
        kind = board.classify_move(move)
        is_pawn = isinstance(piece, Pawn)
        symbol = piece.symbol()

        self._undo_stack.append(
            GameState.capture(
                board,
                self._white,
                self._black,
                self._current,
                self._move_number,
                self._half_move_clock,
            )
        )

        captured = board.make_move(move)

        gave_check = board.is_king_in_check(opponent_color)
        self.player(mover_color).record_move(captured is not None, gave_check)
        self._update_check_flags()

        if is_pawn or captured is not None:
            self._half_move_clock = 0
        else:
            self._half_move_clock += 1
        if mover_color == Color.BLACK:
            self._move_number += 1
        self._current = opponent_color
        self._push_position_key()

        record = MoveRecord(
            move=move,
            color=mover_color,
            kind=kind,
            san=san,
            piece_symbol=symbol,
            captured_symbol=captured.symbol() if captured is not None else None,
            gave_check=gave_check,
            fen_after=self.get_fen(),
        )
        self._records.append(record)
        self._draw_offer = DrawOffer.NONE  # any move cancels a pending offer
        self._draw_offer_by = None
        _LOGGER.debug("%s played %s (%s)", mover_color, san, move)

        # The result is settled before any listener runs.
        outcome = self._evaluate_result()
        if outcome != GameResult.ONGOING:
            self._settle(outcome, by_event=False)
        for cb in self.events.on_move:
            cb(record)
        if outcome != GameResult.ONGOING:
            self._announce(outcome)

    def undo_last_move(self) -> bool:
        """Restore the position before the last move. Returns True on success.

        Refused when undo is disabled, when there is nothing to undo, or when
        the game was ended by resignation, agreement, claim or timeout.
        """
        if not self._allow_undo or not self._undo_stack:
            return False
        if self._phase == GamePhase.GAME_OVER and self._ended_by_event:
            return False

        state = self._undo_stack.pop()
        self._board = state.board.copy()
        self._white = state.white_player.copy()
        self._black = state.black_player.copy()
        self._current = state.current_player
        self._move_number = state.move_number
        self._half_move_clock = state.half_move_clock

        self._records.pop()
        self._pop_position_key()
        self._draw_offer = DrawOffer.NONE
        self._draw_offer_by = None

        if self._phase == GamePhase.GAME_OVER:
            self._result = GameResult.ONGOING
            self._set_phase(GamePhase.ACTIVE)
        return True

    # ── Queries ──────────────────────────────────────────────────────────

    def legal_moves(self) -> list[Move]:
        """Legal moves for the side to move."""
        return self._board.all_legal_moves(self._current)

    def is_current_player_in_check(self) -> bool:
        return self._board.is_king_in_check(self._current)

    def is_checkmate(self) -> bool:
        return Rules.is_checkmate(self._board, self._current)

    def is_stalemate(self) -> bool:
        return Rules.is_stalemate(self._board, self._current)

    def is_draw(self) -> bool:
        """Drawn already, or a draw rule currently applies."""
        if self._result.is_draw:
            return True
        return (
            Rules.is_insufficient_material(self._board)
            or Rules.is_fifty_move_rule(self._half_move_clock)
            or Rules.is_threefold_repetition(self.repetition_count())
        )

    def repetition_count(self) -> int:
        """How many times the current position has occurred in this game."""
        if not self._position_keys:
            return 0
        return self._repetitions[self._position_keys[-1]]

    def snapshot(self) -> GameState:
        """Independent copy of the current board, players and counters."""
        return GameState.capture(
            self._board,
            self._white,
            self._black,
            self._current,
            self._move_number,
            self._half_move_clock,
        )

    # ── Resignation / draw / time ────────────────────────────────────────

    def resign(self, color: Color | None = None) -> bool:
        """*color* (default: side to move) resigns."""
        if self._phase != GamePhase.ACTIVE:
            return False
        loser = self._current if color is None else color
        result = GameResult.BLACK_WINS if loser == Color.WHITE else GameResult.WHITE_WINS
        self._finish(result, by_event=True)
        return True

    def offer_draw(self, color: Color | None = None) -> bool:
        """Offer a draw on behalf of *color* (default: side to move).

        Returns True if the draw was agreed. An offer crossing a pending offer
        from the opponent is an agreement. Otherwise ``draw_responder`` (when
        set) answers for the opponent; without one the offer stays pending
        until :meth:`accept_draw` or :meth:`decline_draw`.
        """
        if self._phase != GamePhase.ACTIVE:
            return False
        offerer = self._current if color is None else color

        if self._draw_offer == DrawOffer.OFFERED and self._draw_offer_by == offerer.opposite:
            self._agree_draw()
            return True

        self._draw_offer = DrawOffer.OFFERED
        self._draw_offer_by = offerer
        if self.draw_responder is None:
            return False

        if self.draw_responder(self.player(offerer), self.player(offerer.opposite)):
            self._agree_draw()
            return True
        self.decline_draw()
        return False

    def accept_draw(self, color: Color) -> bool:
        if self._phase != GamePhase.ACTIVE or self._draw_offer != DrawOffer.OFFERED:
            return False
        if self._draw_offer_by in (None, color):
            return False
        self._agree_draw()
        return True

    def decline_draw(self) -> None:
        if self._draw_offer == DrawOffer.OFFERED:
            self._draw_offer = DrawOffer.DECLINED
            self._draw_offer_by = None

    def claim_draw(self) -> bool:
        """Claim a draw by the fifty-move rule or threefold repetition."""
        if self._phase != GamePhase.ACTIVE:
            return False
        if Rules.is_threefold_repetition(self.repetition_count()):
            self._finish(GameResult.DRAW_THREEFOLD_REPETITION, by_event=True)
            return True
        if Rules.is_fifty_move_rule(self._half_move_clock):
            self._finish(GameResult.DRAW_FIFTY_MOVE_RULE, by_event=True)
            return True
        return False

    def report_timeout(self, color: Color) -> bool:
        """*color*'s time ran out. Accepted at any point while ACTIVE."""
        if self._phase != GamePhase.ACTIVE:
            return False
        result = GameResult.WHITE_TIMEOUT if color == Color.WHITE else GameResult.BLACK_TIMEOUT
        self._finish(result, by_event=True)
        return True

    def consume_time(self, color: Color, seconds: int) -> bool:
        """Deduct *seconds* from *color*'s budget.

        Returns True while the player still has time. With time control
        enabled, exhausting the budget ends the game on time.
        """
        if self._phase != GamePhase.ACTIVE:
            return False
        player = self.player(color)
        player.subtract_time(seconds)
        if player.has_time_left():
            return True
        if self._time_control:
            self.report_timeout(color)
        return False

    # ── Notation boundary ────────────────────────────────────────────────

    def move_to_algebraic(self, move: Move) -> str:
        """SAN for a legal *move* in the current position."""
        return move_to_san(self._board, move)

    def parse_algebraic_notation(self, text: str) -> Move:
        """Coordinate text (``e2e4``, ``e7e8q``) or SAN (``Nf3``, ``O-O``)."""
        clean = text.strip()
        if _COORDINATE_MOVE_RE.match(clean):
            return Move.from_uci(clean)
        return parse_san(self._board, self._current, clean)

    def get_fen(self) -> str:
        return board_to_fen(
            self._board, self._current, self._half_move_clock, self._move_number
        )

    def load_from_fen(self, fen: str) -> bool:
        """Replace the position (history is cleared). Returns True on success."""
        if self._phase == GamePhase.GAME_OVER:
            return False
        try:
            self._install_position(fen)
        except ValueError as exc:
            _LOGGER.warning("FEN rejected: %s", exc)
            return False
        self._initialized = True
        self._update_check_flags()
        if self._phase == GamePhase.ACTIVE:
            self._check_game_end()
        return True

    def to_pgn(self, headers: dict[str, str] | None = None) -> str:
        """Export the game as PGN; *headers* override the defaults."""
        token = pgn_result_token(self._result)
        tags = {
            "Event": "Casual Game",
            "Site": "?",
            "Date": date.today().strftime("%Y.%m.%d"),
            "Round": "-",
            "White": self._white.name,
            "Black": self._black.name,
            "Result": token,
        }
        if self._start_fen != STARTING_FEN:
            tags["SetUp"] = "1"
            tags["FEN"] = self._start_fen
        if headers:
            tags.update(headers)

        start = board_from_fen(self._start_fen)
        return build_pgn(
            tags,
            [record.san for record in self._records],
            token,
            comments=[record.comment for record in self._records],
            first_black=start.side_to_move == Color.BLACK,
            first_number=start.fullmove_number,
        )

    def load_from_pgn(self, pgn: str) -> bool:
        """Replay a PGN game into this object. Returns True on success.

        The game is replaced only when every move replays legally.
        """
        try:
            parsed = parse_pgn_game(pgn)
            replay = Game(self.config)
            replay.initialize_game(
                parsed.headers.get("White", self._white.name),
                parsed.headers.get("Black", self._black.name),
                self._white.is_human,
                self._black.is_human,
                fen=parsed.headers.get("FEN"),
            )
        except ValueError as exc:
            _LOGGER.warning("PGN rejected: %s", exc)
            return False

        replay.start()
        for ply, pgn_move in enumerate(parsed.moves, start=1):
            if not replay.make_move(pgn_move.san):
                _LOGGER.warning(
                    "PGN rejected: move %d (%s) does not replay", ply, pgn_move.san
                )
                return False
            if pgn_move.comment:
                last = replay._records[-1]
                replay._records[-1] = replace(last, comment=pgn_move.comment)

        declared = game_result_from_pgn(parsed.result_token)
        if replay.phase == GamePhase.ACTIVE and declared != GameResult.ONGOING:
            replay._finish(declared, by_event=True)

        self._adopt(replay)
        return True

    def _adopt(self, other: Game) -> None:
        for name in _STATE_SLOTS:
            setattr(self, name, getattr(other, name))
        self._emit_phase(self._phase)

    # ── Internal helpers ─────────────────────────────────────────────────

    def _push_position_key(self) -> None:
        key = self._board.position_key(self._current)
        self._position_keys.append(key)
        self._repetitions[key] += 1

    def _pop_position_key(self) -> None:
        key = self._position_keys.pop()
        self._repetitions[key] -= 1
        if not self._repetitions[key]:
            del self._repetitions[key]

    def _update_check_flags(self) -> None:
        for color in (Color.WHITE, Color.BLACK):
            self.player(color).in_check = self._board.is_king_in_check(color)

    def _evaluate_result(self) -> GameResult:
        color = self._current
        if not Rules.has_legal_moves(self._board, color):
            if Rules.is_in_check(self._board, color):
                return GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS
            return GameResult.DRAW_STALEMATE

        if Rules.is_insufficient_material(self._board):
            return GameResult.DRAW_INSUFFICIENT_MATERIAL

        repetitions = self.repetition_count()
        if self.config.automatic_rule_draws:
            if Rules.is_fifty_move_rule(self._half_move_clock):
                return GameResult.DRAW_FIFTY_MOVE_RULE
            if Rules.is_threefold_repetition(repetitions):
                return GameResult.DRAW_THREEFOLD_REPETITION
        else:
            if Rules.is_seventy_five_move_rule(self._half_move_clock):
                return GameResult.DRAW_SEVENTY_FIVE_MOVE_RULE
            if Rules.is_fivefold_repetition(repetitions):
                return GameResult.DRAW_FIVEFOLD_REPETITION
        return GameResult.ONGOING

    def _check_game_end(self) -> None:
        result = self._evaluate_result()
        if result != GameResult.ONGOING:
            self._finish(result, by_event=False)

    def _agree_draw(self) -> None:
        self._draw_offer = DrawOffer.ACCEPTED
        self._draw_offer_by = None
        self._finish(GameResult.DRAW_AGREEMENT, by_event=True)

    def _finish(self, result: GameResult, by_event: bool) -> None:
        self._settle(result, by_event)
        self._announce(result)

    def _settle(self, result: GameResult, by_event: bool) -> None:
        self._result = result
        self._ended_by_event = by_event
        self._phase = GamePhase.GAME_OVER
        _LOGGER.info("Game over: %s", result.name)

    def _announce(self, result: GameResult) -> None:
        self._emit_phase(GamePhase.GAME_OVER)
        for cb in self.events.on_game_over:
            cb(result)

    def _set_phase(self, phase: GamePhase) -> None:
        self._phase = phase
        self._emit_phase(phase)

    def _emit_phase(self, phase: GamePhase) -> None:
        for cb in self.events.on_phase_changed:
            cb(phase)
