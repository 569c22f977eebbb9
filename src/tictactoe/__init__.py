"""Tic-tac-toe package exposing game logic, computer players, and the web application."""

from .ai import ComputerPlayer, Difficulty
from .game import Board, Outcome, apply_move, detect
from .session import GameSession
from .ui import app

__all__ = [
    "Board",
    "ComputerPlayer",
    "Difficulty",
    "GameSession",
    "Outcome",
    "app",
    "apply_move",
    "detect",
]
