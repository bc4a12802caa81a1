"""
Cell module for Minesweeper game.

Represents individual cells of the grid. A cell knows whether it is
opened, its label and (once planted) whether it is a mine or how many
mines surround it. Every mutation is reported back to the owning game.
"""
import weakref
from enum import Enum, auto
from typing import TYPE_CHECKING

from .errors import InvalidStateError, InvalidProgramStateError, ensure

if TYPE_CHECKING:
    from .game import Game


# ============================================================================
# Constants
# ============================================================================

class CellLabel(Enum):
    """Player annotations of a closed cell."""

    NONE = auto()
    MINE = auto()
    QUESTION = auto()


# ============================================================================
# Cell Class
# ============================================================================

class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Cells are created and owned by a Game. The game is referenced
    weakly: a cell never keeps its game alive.

    Attributes:
        index: Flat position in the grid (row * columns + column).
    """

    def __init__(self, game: "Game", index: int) -> None:
        self._game = weakref.ref(game)
        self._index = index
        self._is_mine = False
        self._is_opened = False
        self._label = CellLabel.NONE
        self._neighbor_mine_count = 0

    def __repr__(self) -> str:
        return (
            f"Cell(index={self._index}, opened={self._is_opened}, "
            f"label={self._label.name})"
        )

    # ========================================================================
    # Public Accessors
    # ========================================================================

    @property
    def index(self) -> int:
        """Flat index of this cell within its grid."""
        return self._index

    @property
    def is_opened(self) -> bool:
        """Check if cell is opened."""
        return self._is_opened

    @property
    def is_mine(self) -> bool:
        """
        Check if cell is a mine.

        Raises:
            InvalidStateError: If the cell is still closed.
        """
        if not self._is_opened:
            raise InvalidStateError(
                f"Mine status of closed cell {self._index} is hidden"
            )
        return self._is_mine

    @property
    def neighbor_mine_count(self) -> int:
        """
        Number of mines among the adjacent cells.

        Raises:
            InvalidStateError: If the cell is closed or is a mine.
        """
        if self.is_mine:
            raise InvalidStateError(
                f"Cell {self._index} is a mine and has no neighbor count"
            )
        return self._neighbor_mine_count

    @property
    def label(self) -> CellLabel:
        """Current player label."""
        return self._label

    # ========================================================================
    # Player Actions
    # ========================================================================

    def set_label(self, label: CellLabel) -> None:
        """
        Label a closed cell.

        Args:
            label: New label for the cell.

        Raises:
            InvalidStateError: If the cell is opened.
        """
        if self._is_opened:
            raise InvalidStateError(f"Cannot label opened cell {self._index}")
        if label != self._label:
            owner = self._owner()
            owner._check_own_cell(self)
            self._label = label
            owner._on_modified(self)

    def open(self) -> None:
        """
        Open this cell.

        - a labeled closed cell is left untouched
        - a closed cell is opened, cascading over empty neighbors
        - an opened cell opens its neighbors once the labeled neighbors
          match its mine count (even if labeled wrong)
        """
        self._owner()._on_open(self)

    def to_observation(self) -> int:
        """
        Convert cell to observation value.

        Returns:
            -1: Closed cell
            -2: Closed cell labeled as mine
            -3: Closed cell labeled as question
            0-8: Opened cell with neighbor mine count
            9: Opened mine
        """
        if not self._is_opened:
            if self._label == CellLabel.MINE:
                return -2
            if self._label == CellLabel.QUESTION:
                return -3
            return -1
        if self._is_mine:
            return 9
        return self._neighbor_mine_count

    # ========================================================================
    # Owner Operations
    # ========================================================================

    def _plant_mine(self) -> None:
        ensure(not self._is_opened, f"Planting into opened cell {self._index}")
        self._is_mine = True
        self._neighbor_mine_count = 0

    def _add_neighbor_mine(self) -> None:
        ensure(not self._is_opened, f"Counting on opened cell {self._index}")
        if not self._is_mine:
            self._neighbor_mine_count += 1

    def _force_open(self) -> None:
        if not self._is_opened:
            self._is_opened = True
            self._notify_modified()

    def _close(self) -> None:
        self._is_opened = False
        self._label = CellLabel.NONE
        self._notify_modified()

    def _owner(self) -> "Game":
        game = self._game()
        if game is None:
            raise InvalidProgramStateError(
                f"Cell {self._index} outlived its game"
            )
        return game

    def _notify_modified(self) -> None:
        self._owner()._on_modified(self)
