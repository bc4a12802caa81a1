"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path
from typing import Iterable, List, Set

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minesweeper import Game, GameConfig


# ============================================================================
# Helpers
# ============================================================================

class ScriptedRng:
    """Random source returning a fixed sequence of cell indices."""

    def __init__(self, indices: Iterable[int]) -> None:
        self._indices = iter(indices)

    def integers(self, low: int, high: int) -> int:
        index = next(self._indices)
        assert low <= index < high
        return index


def make_game(mines: Iterable[tuple], rows: int = 9, columns: int = 9) -> Game:
    """Create a game whose mines sit exactly at the given (row, col)s."""
    positions = [row * columns + col for row, col in mines]
    return Game(GameConfig(rows, columns, len(positions)), ScriptedRng(positions))


def mine_indices(game: Game) -> Set[int]:
    """Indices of planted mines, read without opening any cell."""
    return {cell.index for cell in game._cells if cell._is_mine}


def opened_positions(game: Game) -> Set[tuple]:
    """Positions of all opened cells."""
    return {
        (row, col)
        for row in range(game.rows)
        for col in range(game.columns)
        if game.cell(row, col).is_opened
    }


# Mines down column 4 plus the bottom-right corner. Columns 0-2 form an
# empty region bordered by column 3.
COLUMN_LAYOUT: List[tuple] = [(row, 4) for row in range(9)] + [(8, 8)]

# Mines along the last row plus (7, 8). Opening (0, 0) clears the grid.
BOTTOM_LAYOUT: List[tuple] = [(8, col) for col in range(9)] + [(7, 8)]


# ============================================================================
# Game Fixtures
# ============================================================================

@pytest.fixture
def default_game() -> Game:
    """Create a default 9x9 game with 10 mines."""
    return Game(rng=42)


@pytest.fixture
def column_game() -> Game:
    """9x9 game with the column mine layout."""
    return make_game(COLUMN_LAYOUT)


@pytest.fixture
def bottom_game() -> Game:
    """9x9 game with the bottom row mine layout."""
    return make_game(BOTTOM_LAYOUT)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> GameConfig:
    """Create a valid game configuration."""
    return GameConfig(9, 9, 10)


@pytest.fixture
def largest_config() -> GameConfig:
    """Largest accepted grid."""
    return GameConfig(24, 30, 99)
