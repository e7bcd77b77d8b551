"""Game-layer enumerations and callback signatures."""

from __future__ import annotations

from collections.abc import Callable
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chessref.core.enums import GameResult

if TYPE_CHECKING:
    from chessref.game.player import Player
    from chessref.game.state import MoveRecord


# ── Game phase FSM states ────────────────────────────────────────────────────


class GamePhase(IntEnum):
    """Finite-state-machine states for a chess game."""

    NOT_STARTED = auto()
    ACTIVE = auto()
    GAME_OVER = auto()


class DrawOffer(IntEnum):
    """Draw offer status between players."""

    NONE = 0
    OFFERED = auto()
    ACCEPTED = auto()
    DECLINED = auto()


# ── Callback signatures ──────────────────────────────────────────────────────

MoveCallback = Callable[["MoveRecord"], None]
GameOverCallback = Callable[[GameResult], None]
PhaseCallback = Callable[[GamePhase], None]
# (offering player, responding player) -> accepted?
DrawResponder = Callable[["Player", "Player"], bool]
