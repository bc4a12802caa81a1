"""
Minesweeper game module.

Provides the core rules engine: cells, the game grid with mine planting,
the open rules and change tracking, plus a text renderer and a
Gymnasium environment built on top of it.
"""
from .errors import (
    MinesweeperError,
    InvalidParametersError,
    InvalidStateError,
    InvalidProgramStateError,
)
from .cell import Cell, CellLabel
from .game import Game, GameConfig, GameState, create_game
from .console import draw, play_random
from .environment import MinesweeperEnv

__all__ = [
    "MinesweeperError",
    "InvalidParametersError",
    "InvalidStateError",
    "InvalidProgramStateError",
    "Cell",
    "CellLabel",
    "Game",
    "GameConfig",
    "GameState",
    "create_game",
    "draw",
    "play_random",
    "MinesweeperEnv",
]
