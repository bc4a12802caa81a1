"""
Unit tests for the Gymnasium environment wrapper.
"""
import numpy as np
import pytest
from minesweeper import CellLabel, GameConfig, MinesweeperEnv

from conftest import mine_indices


@pytest.fixture
def env() -> MinesweeperEnv:
    """Create a default environment."""
    return MinesweeperEnv()


class TestEnvironmentReset:
    """Test environment reset."""

    def test_reset_returns_closed_observation(self, env: MinesweeperEnv) -> None:
        """Reset should return an all-closed observation."""
        obs, info = env.reset(seed=0)
        assert obs.shape == (9, 9)
        assert obs.dtype == np.int8
        assert (obs == -1).all()
        assert info["game_state"] == "ACTIVE"
        assert info["valid_actions"] == 81

    def test_observation_in_space(self, env: MinesweeperEnv) -> None:
        """Observation should belong to the observation space."""
        obs, _ = env.reset(seed=0)
        assert env.observation_space.contains(obs)

    def test_custom_config(self) -> None:
        """Spaces follow the configuration."""
        env = MinesweeperEnv(GameConfig(16, 30, 99))
        obs, _ = env.reset(seed=1)
        assert obs.shape == (16, 30)
        assert env.action_space.n == 480

    def test_same_seed_same_layout(self, env: MinesweeperEnv) -> None:
        """Seeded resets give the same game."""
        env.reset(seed=3)
        first = mine_indices(env.game)
        env.reset(seed=3)
        assert mine_indices(env.game) == first

    def test_reset_starts_new_round(self, env: MinesweeperEnv) -> None:
        """Reset after play closes the grid again."""
        env.reset(seed=0)
        env.step(40)
        obs, info = env.reset()
        assert (obs == -1).all()
        assert info["opened"] == 0


class TestEnvironmentStep:
    """Test environment steps."""

    def test_step_opens_cell(self, env: MinesweeperEnv) -> None:
        """A step opens the chosen cell."""
        env.reset(seed=0)
        obs, reward, terminated, truncated, _ = env.step(40)
        assert env.game.cell(4, 4).is_opened
        assert obs[4, 4] != -1
        assert reward in (1.0, 10.0, -10.0)
        assert truncated is False

    def test_incremental_observation_matches_game(
        self, env: MinesweeperEnv
    ) -> None:
        """Observation patched from modified cells matches the grid."""
        env.reset(seed=2)
        rng = np.random.default_rng(2)
        terminated = False
        while not terminated:
            action = rng.choice(np.flatnonzero(env.get_action_mask()))
            obs, _, terminated, _, _ = env.step(action)
            assert (obs == env.game.get_observation()).all()

    def test_repeated_action_is_invalid(self, env: MinesweeperEnv) -> None:
        """Opening an opened cell is penalized."""
        env.reset(seed=0)
        _, _, terminated, _, _ = env.step(0)
        if terminated:
            pytest.skip("first move hit a mine")
        _, reward, _, _, _ = env.step(0)
        assert reward == pytest.approx(-0.1)

    def test_labeled_cell_is_invalid(self, env: MinesweeperEnv) -> None:
        """Opening a labeled cell is penalized and changes nothing."""
        env.reset(seed=0)
        env.game.cell(0, 0).set_label(CellLabel.MINE)
        _, reward, _, _, _ = env.step(0)
        assert reward == pytest.approx(-0.1)
        assert env.game.cell(0, 0).is_opened is False

    def test_episode_terminates(self, env: MinesweeperEnv) -> None:
        """Episodes end in a win or a loss."""
        env.reset(seed=4)
        rng = np.random.default_rng(4)
        terminated = False
        info = {}
        while not terminated:
            action = rng.choice(np.flatnonzero(env.get_action_mask()))
            _, reward, terminated, _, info = env.step(action)
        assert info["game_state"] in ("SUCCESS", "FAILURE")
        assert reward in (10.0, -10.0)

    def test_step_after_termination(self, env: MinesweeperEnv) -> None:
        """Stepping a finished episode does nothing."""
        env.reset(seed=4)
        rng = np.random.default_rng(4)
        terminated = False
        while not terminated:
            action = rng.choice(np.flatnonzero(env.get_action_mask()))
            _, _, terminated, _, _ = env.step(action)
        _, reward, terminated, _, _ = env.step(0)
        assert reward == 0.0
        assert terminated is True

    def test_step_before_reset_raises(self, env: MinesweeperEnv) -> None:
        """The environment must be reset first."""
        with pytest.raises(RuntimeError):
            env.step(0)


class TestEnvironmentRender:
    """Test environment rendering."""

    def test_ansi_render(self) -> None:
        """ANSI mode returns the drawn grid."""
        env = MinesweeperEnv(render_mode="ansi")
        env.reset(seed=0)
        text = env.render()
        assert text.split("\n") == ["-" * 9] * 9

    def test_action_mask_excludes_opened(self, env: MinesweeperEnv) -> None:
        """Action mask only marks closed, unlabeled cells."""
        env.reset(seed=0)
        env.game.cell(8, 8).set_label(CellLabel.QUESTION)
        obs, _, _, _, _ = env.step(0)
        mask = env.get_action_mask()
        assert mask.sum() == (obs == -1).sum()
        assert not mask[80]
        assert not mask[0]
