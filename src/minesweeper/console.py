"""
Text rendering and a random-play driver for the Minesweeper engine.
"""
from typing import Callable, Optional

import numpy as np

from .cell import CellLabel
from .game import Game, GameState


def draw(game: Game) -> str:
    """
    Render the grid as text, one line per row.

    Closed cells are '-', opened mines '*', opened empty cells 'O' and
    numbered cells their neighbor mine count.
    """
    lines = []
    for row in range(game.rows):
        line = ""
        for column in range(game.columns):
            cell = game.cell(row, column)
            if not cell.is_opened:
                line += "-"
            elif cell.is_mine:
                line += "*"
            elif cell.neighbor_mine_count == 0:
                line += "O"
            else:
                line += str(cell.neighbor_mine_count)
        lines.append(line)
    return "\n".join(lines)


def play_random(
    game: Game,
    rng: Optional[np.random.Generator] = None,
    on_step: Optional[Callable[[Game, int, int], None]] = None,
) -> GameState:
    """
    Open uniformly chosen closed, unlabeled cells until the round is
    over or no such cell is left.

    Args:
        game: Game with an active round.
        rng: Random source for choosing cells.
        on_step: Called with (game, row, column) after every move.

    Returns:
        State of the round when play stopped.
    """
    rng = np.random.default_rng(rng)
    while game.is_active:
        closed = [
            (row, column)
            for row in range(game.rows)
            for column in range(game.columns)
            if not game.cell(row, column).is_opened
            and game.cell(row, column).label == CellLabel.NONE
        ]
        if not closed:
            break
        row, column = closed[rng.integers(len(closed))]
        game.cell(row, column).open()
        if on_step is not None:
            on_step(game, row, column)
    return game.state
