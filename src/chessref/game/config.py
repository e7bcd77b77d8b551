"""Game configuration."""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_TIME_LIMIT = 1800  # 30 minutes per player


@dataclass(frozen=True, slots=True)
class GameConfig:
    """Settings that change how a :class:`~chessref.game.Game` behaves.

    Args:
        allow_undo: Whether ``undo_last_move`` is permitted at all.
        time_control_enabled: Whether exhausted time budgets end the game.
        default_time_limit: Seconds per player when none is given.
        automatic_rule_draws: End the game as soon as the fifty-move rule or
            threefold repetition applies. When false those draws must be
            claimed, and the seventy-five-move rule and fivefold repetition
            end the game instead.
    """

    allow_undo: bool = True
    time_control_enabled: bool = True
    default_time_limit: int = DEFAULT_TIME_LIMIT
    automatic_rule_draws: bool = True

    def __post_init__(self) -> None:
        if self.default_time_limit < 0:
            msg = f"default_time_limit must be non-negative, got {self.default_time_limit}"
            raise ValueError(msg)
