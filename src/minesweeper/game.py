"""
Game module for Minesweeper.

Implements the grid of cells with mine planting, the open protocol
(flood fill and chord-opening), win/lose detection and tracking of the
cells modified since the last poll.
"""
import logging
import math
import numbers
from collections import deque
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Set, Tuple

import numpy as np

from .cell import Cell, CellLabel
from .errors import InvalidParametersError, ensure

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MIN_ROWS = 9
MAX_ROWS = 24
MIN_COLUMNS = 9
MAX_COLUMNS = 30
MIN_MINES = 10
MAX_MINE_DENSITY = 0.93


class GameState(Enum):
    """Possible states of the game."""

    ACTIVE = auto()
    FAILURE = auto()
    SUCCESS = auto()


@dataclass
class GameConfig:
    """
    Parameters of a Minesweeper round.

    Attributes:
        rows: Number of rows (9-24).
        columns: Number of columns (9-30).
        mines: Total mines to plant (10 up to 93% of the cells).
    """

    rows: int = 9
    columns: int = 9
    mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        for name in ("rows", "columns", "mines"):
            value = getattr(self, name)
            if not isinstance(value, numbers.Integral) or isinstance(value, bool):
                raise InvalidParametersError(f"{name.capitalize()} must be an integer")
        if not MIN_ROWS <= self.rows <= MAX_ROWS:
            raise InvalidParametersError(
                f"Rows must be between {MIN_ROWS} and {MAX_ROWS}"
            )
        if not MIN_COLUMNS <= self.columns <= MAX_COLUMNS:
            raise InvalidParametersError(
                f"Columns must be between {MIN_COLUMNS} and {MAX_COLUMNS}"
            )
        max_mines = math.floor(MAX_MINE_DENSITY * self.rows * self.columns)
        if not MIN_MINES <= self.mines <= max_mines:
            raise InvalidParametersError(
                f"Mines must be between {MIN_MINES} and {max_mines}"
            )

    @property
    def total_cells(self) -> int:
        return self.rows * self.columns

    @property
    def safe_cells(self) -> int:
        return self.total_cells - self.mines


# ============================================================================
# Game Class
# ============================================================================

@dataclass(eq=False)
class Game:
    """
    Minesweeper game.

    Owns the grid of cells, plants mines, applies the open rules and
    tracks the round state. Cells are handed out by `cell()` and route
    their actions back here.

    Attributes:
        config: Parameters of the current round.
        rng: Random source for mine planting: a numpy Generator (or any
            object with a compatible `integers` method), or a seed
            passed to numpy.random.default_rng.
    """

    config: GameConfig = field(default_factory=GameConfig)
    rng: Optional[object] = field(default=None, repr=False)
    _cells: List[Cell] = field(default_factory=list, repr=False)
    _state: GameState = GameState.ACTIVE
    _opened_count: int = 0
    _modified: Set[int] = field(default_factory=set, repr=False)

    def __post_init__(self) -> None:
        """Start the first round after dataclass creation."""
        if not hasattr(self.rng, "integers"):
            self.rng = np.random.default_rng(self.rng)
        self.new_game()

    # ========================================================================
    # Round Lifecycle
    # ========================================================================

    def new_game(
        self,
        rows: Optional[int] = None,
        columns: Optional[int] = None,
        mines: Optional[int] = None,
    ) -> None:
        """
        Start a new round with a fresh grid and freshly planted mines.

        Omitted parameters keep their current values.

        Raises:
            InvalidParametersError: If the parameters are out of range.
                The current round is left untouched in that case.
        """
        if rows is not None or columns is not None or mines is not None:
            self.config = GameConfig(
                rows=self.config.rows if rows is None else rows,
                columns=self.config.columns if columns is None else columns,
                mines=self.config.mines if mines is None else mines,
            )

        self._reset()
        self._cells = [Cell(self, index) for index in range(self.config.total_cells)]
        self._plant_mines()
        logger.debug(
            "New game %dx%d with %d mines",
            self.config.rows, self.config.columns, self.config.mines,
        )

    def restart_game(self) -> None:
        """Close every cell and replay the same mine layout."""
        self._reset()
        for cell in self._cells:
            cell._close()
        logger.debug("Game restarted")

    def _reset(self) -> None:
        self._state = GameState.ACTIVE
        self._opened_count = 0
        self._modified.clear()

    # ========================================================================
    # Mine Planting (Low-level)
    # ========================================================================

    def _plant_mines(self) -> None:
        """Plant mines at distinct, uniformly drawn positions."""
        planted = 0
        while planted < self.config.mines:
            index = int(self.rng.integers(0, len(self._cells)))
            if not self._cells[index]._is_mine:
                self._plant_mine(index)
                planted += 1

    def _plant_mine(self, index: int) -> None:
        """Turn a cell into a mine and update its neighbors' counts."""
        ensure(not self._cells[index]._is_mine, f"Cell {index} is already a mine")
        self._cells[index]._plant_mine()
        for neighbor in self._neighbors(index):
            self._cells[neighbor]._add_neighbor_mine()

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _neighbors(self, index: int) -> List[int]:
        """
        Get indices of the cells adjacent to a cell.

        Args:
            index: Flat index of center cell.

        Returns:
            Up to 8 flat indices of valid neighbors.
        """
        ensure(0 <= index < len(self._cells), f"Cell index {index} out of range")
        row, column = divmod(index, self.config.columns)
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_column in (-1, 0, 1):
                if delta_row == 0 and delta_column == 0:
                    continue
                new_row = row + delta_row
                new_column = column + delta_column
                if self._is_valid_position(new_row, new_column):
                    neighbors.append(new_row * self.config.columns + new_column)
        return neighbors

    def _is_valid_position(self, row: int, column: int) -> bool:
        """Check if position is within grid bounds."""
        return 0 <= row < self.config.rows and 0 <= column < self.config.columns

    def _count_labeled_neighbors(self, index: int) -> int:
        """Count closed neighbors labeled as mines."""
        count = 0
        for neighbor in self._neighbors(index):
            cell = self._cells[neighbor]
            if not cell.is_opened and cell.label == CellLabel.MINE:
                count += 1
        return count

    # ========================================================================
    # Open Rules (Mid-level)
    # ========================================================================

    def _on_open(self, cell: Cell) -> None:
        """Apply the open rules to a cell on behalf of Cell.open()."""
        self._check_own_cell(cell)
        index = cell.index

        if cell.is_opened:
            if cell._neighbor_mine_count == self._count_labeled_neighbors(index):
                self._open_neighbors(index)
        elif cell.label != CellLabel.NONE:
            logger.debug("Ignoring open of labeled cell %d", index)
        elif self._open(index) and cell._neighbor_mine_count == 0:
            self._open_neighbors(index)

        if self._state == GameState.ACTIVE:
            self._has_success()

    def _on_modified(self, cell: Cell) -> None:
        """Record a cell change reported by the cell itself."""
        self._check_own_cell(cell)
        self._modified.add(cell.index)

    def _check_own_cell(self, cell: Cell) -> None:
        ensure(self._state == GameState.ACTIVE, "Game is not active")
        index = cell.index
        ensure(0 <= index < len(self._cells), f"Cell index {index} out of range")
        ensure(self._cells[index] is cell, f"Cell {index} is not part of this grid")

    def _open(self, index: int) -> bool:
        """
        Open a single cell.

        Opened and labeled cells are left as they are.

        Returns:
            False if the cell was a mine, True otherwise.
        """
        cell = self._cells[index]
        if cell.is_opened or cell.label != CellLabel.NONE:
            return True

        cell._force_open()
        if cell._is_mine:
            self._open_mines()
            return False

        self._opened_count += 1
        return True

    def _open_mines(self) -> None:
        """Reveal every mine and end the round as lost."""
        for cell in self._cells:
            if cell._is_mine:
                cell._force_open()
        self._state = GameState.FAILURE
        logger.info("Game lost")

    def _open_neighbors(self, index: int) -> None:
        """
        Open the neighbors of a cell, cascading over empty cells.

        Stops at once if a mine is opened.
        """
        pending = deque([index])
        while pending:
            current = pending.popleft()
            for neighbor in self._neighbors(current):
                cell = self._cells[neighbor]
                if cell.is_opened or cell.label != CellLabel.NONE:
                    continue
                if not self._open(neighbor):
                    return
                if cell._neighbor_mine_count == 0:
                    pending.append(neighbor)

    def _has_success(self) -> bool:
        """Check if all safe cells are opened and end the round as won."""
        ensure(self._state == GameState.ACTIVE, "Game is not active")
        safe_cells = self.config.safe_cells
        ensure(
            self._opened_count <= safe_cells,
            f"Opened {self._opened_count} of {safe_cells} safe cells",
        )
        if self._opened_count == safe_cells:
            self._state = GameState.SUCCESS
            logger.info("Game won")
        return self._state == GameState.SUCCESS

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def state(self) -> GameState:
        """Get current game state."""
        return self._state

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def columns(self) -> int:
        return self.config.columns

    @property
    def mines(self) -> int:
        return self.config.mines

    @property
    def opened_count(self) -> int:
        """Number of opened safe cells."""
        return self._opened_count

    @property
    def is_active(self) -> bool:
        """Check if game is still in progress."""
        return self._state == GameState.ACTIVE

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._state == GameState.SUCCESS

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._state == GameState.FAILURE

    def cell(self, row: int, column: int) -> Cell:
        """
        Get the cell at a position.

        Raises:
            InvalidProgramStateError: If the position is outside the grid.
        """
        ensure(0 <= row < self.config.rows, f"Row {row} out of range")
        ensure(0 <= column < self.config.columns, f"Column {column} out of range")
        return self._cells[row * self.config.columns + column]

    def drain_modified_cells(self) -> List[Tuple[int, int]]:
        """
        Get positions of cells modified since the previous call.

        Clears the tracked set.

        Returns:
            List of (row, column) tuples ordered by position.
        """
        positions = [divmod(index, self.config.columns) for index in sorted(self._modified)]
        self._modified.clear()
        return positions

    def get_observation(self) -> np.ndarray:
        """
        Get grid state as numpy array.

        Returns:
            2D int8 array of Cell.to_observation() values.
        """
        obs = np.array(
            [cell.to_observation() for cell in self._cells], dtype=np.int8
        )
        return obs.reshape(self.config.rows, self.config.columns)


def create_game(
    rows: int = 9,
    columns: int = 9,
    mines: int = 10,
    rng: Optional[object] = None,
) -> Game:
    """
    Create a game and start its first round.

    Raises:
        InvalidParametersError: If the parameters are out of range.
    """
    return Game(GameConfig(rows, columns, mines), rng)
