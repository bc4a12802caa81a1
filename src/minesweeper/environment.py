"""
Gymnasium environment wrapper for Minesweeper.

Provides a standard RL interface over the game engine.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .cell import CellLabel
from .console import draw
from .game import Game, GameConfig


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array of Cell.to_observation() values:
        - -1 = closed cell
        - -2 = closed cell labeled as mine
        - -3 = closed cell labeled as question
        - 0-8 = opened cell with neighbor mine count
        - 9 = opened mine

    Actions:
        Discrete action space of size rows * columns.
        Action i opens the cell at (i // columns, i % columns).

    Rewards:
        - +1 for opening a safe cell
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (already opened/labeled)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Game configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or GameConfig()
        self.game: Optional[Game] = None
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-3,
            high=9,
            shape=(self.config.rows, self.config.columns),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.total_cells)

        self._observation = np.full(
            (self.config.rows, self.config.columns), -1, dtype=np.int8
        )
        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if self.game is None:
            self.game = Game(self.config, self.np_random)
        else:
            self.game.rng = self.np_random
            self.game.new_game()
        self._steps = 0

        self._observation = self.game.get_observation()
        self.game.drain_modified_cells()

        return self._observation.copy(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Cell index to open (row * columns + column).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        if self.game is None:
            raise RuntimeError("Call reset() before step()")

        if not self.game.is_active:
            return self._observation.copy(), 0.0, True, False, self._get_info()

        row, column = self._action_to_position(action)
        self._steps += 1

        reward = self._calculate_reward(row, column)
        self._update_observation()

        terminated = not self.game.is_active
        truncated = False

        return self._observation.copy(), reward, terminated, truncated, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (row, column) position."""
        row, column = divmod(int(action), self.config.columns)
        return row, column

    def _calculate_reward(self, row: int, column: int) -> float:
        """
        Open a cell and calculate the reward.

        Args:
            row: Row index.
            column: Column index.

        Returns:
            Reward value.
        """
        cell = self.game.cell(row, column)

        # Invalid action (already opened or labeled)
        if cell.is_opened or cell.label != CellLabel.NONE:
            return -0.1

        cell.open()

        if self.game.is_won:
            return 10.0
        if self.game.is_lost:
            return -10.0
        return 1.0

    def _update_observation(self) -> None:
        """Refresh the cells reported modified by the game."""
        for row, column in self.game.drain_modified_cells():
            self._observation[row, column] = self.game.cell(row, column).to_observation()

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "opened": self.game.opened_count,
            "total_safe": self.config.safe_cells,
            "game_state": self.game.state.name,
            "valid_actions": int(self.get_action_mask().sum()),
        }

    def render(self) -> Optional[str]:
        """Render the current grid."""
        if self.game is None:
            return None
        if self.render_mode == "ansi":
            return draw(self.game)
        if self.render_mode == "human":
            print(draw(self.game))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = closed, unlabeled cell.
        """
        return (self._observation == -1).flatten()
