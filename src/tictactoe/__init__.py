"""Tic-tac-toe package exposing game rules, the engine, the AI, and the web application."""

from .ai import ComputerPlayer
from .engine import GameEngine
from .game import Board, Difficulty, Mode, Outcome
from .ui import app

__all__ = [
    "Board",
    "ComputerPlayer",
    "Difficulty",
    "GameEngine",
    "Mode",
    "Outcome",
    "app",
]
