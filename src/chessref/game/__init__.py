"""Game management layer — game controller, players, snapshots.

Quick start::

    from chessref.game import Game

    game = Game()
    game.initialize_game("Alice", "Bob")
    game.start()
    game.make_move("e4")
"""

from chessref.game.config import DEFAULT_TIME_LIMIT, GameConfig
from chessref.game.controller import Game, GameEvents
from chessref.game.interfaces import DrawOffer, GamePhase
from chessref.game.player import Player
from chessref.game.state import GameState, MoveRecord

__all__ = [
    # Settings / states
    "DEFAULT_TIME_LIMIT",
    "DrawOffer",
    "GameConfig",
    "GamePhase",
    # Concrete
    "Game",
    "GameEvents",
    "GameState",
    "MoveRecord",
    "Player",
]
