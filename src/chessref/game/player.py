"""Player record — identity, time budget and per-game statistics."""

from __future__ import annotations

from dataclasses import dataclass, replace

from chessref.core.enums import Color
from chessref.game.config import DEFAULT_TIME_LIMIT


@dataclass(slots=True)
class Player:
    """A game participant (human or automated).

    Purely a record: the :class:`~chessref.game.Game` updates the counters
    and mirrors the check flag; the player never computes legality.
    """

    name: str
    color: Color
    is_human: bool = True
    time_left: int = DEFAULT_TIME_LIMIT
    moves_played: int = 0
    captured_pieces: int = 0
    checks_given: int = 0
    in_check: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            self.name = f"Player ({self.color})"
        if self.time_left < 0:
            self.time_left = 0

    # ── Time budget ──────────────────────────────────────────────────────

    def add_time(self, seconds: int) -> None:
        self.time_left += seconds

    def subtract_time(self, seconds: int) -> None:
        """Consume *seconds*; the budget never drops below zero."""
        self.time_left = max(0, self.time_left - seconds)

    def set_time_left(self, seconds: int) -> None:
        self.time_left = max(0, seconds)

    def has_time_left(self) -> bool:
        return self.time_left > 0

    @property
    def formatted_time(self) -> str:
        """Remaining time as ``MM:SS``."""
        minutes, seconds = divmod(self.time_left, 60)
        return f"{minutes:02d}:{seconds:02d}"

    # ── Statistics ───────────────────────────────────────────────────────

    def record_move(self, captured: bool, gave_check: bool) -> None:
        self.moves_played += 1
        if captured:
            self.captured_pieces += 1
        if gave_check:
            self.checks_given += 1

    def reset_statistics(self) -> None:
        self.moves_played = 0
        self.captured_pieces = 0
        self.checks_given = 0
        self.in_check = False

    def statistics(self) -> str:
        return (
            f"{self.name} ({self.color_name}): {self.moves_played} moves, "
            f"{self.captured_pieces} captures, {self.checks_given} checks, "
            f"time {self.formatted_time}"
        )

    @property
    def color_name(self) -> str:
        return "White" if self.color == Color.WHITE else "Black"

    def copy(self) -> Player:
        return replace(self)
