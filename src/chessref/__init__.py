"""chessref — a chess rules referee: legal moves, game flow and notation."""

__version__ = "0.1.0"
