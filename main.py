#!/usr/bin/env python3
"""
Minesweeper - Main entry point.

Usage:
    python main.py play [--rows R] [--columns C] [--mines M] [--seed S]
    python main.py evaluate [--games N]
"""
import argparse
import logging
import sys
import time

import numpy as np

from src.minesweeper import (
    Game,
    GameConfig,
    MinesweeperEnv,
    MinesweeperError,
    draw,
    play_random,
)


def play(args: argparse.Namespace) -> None:
    """Open random cells until the game ends, drawing every move."""
    config = GameConfig(rows=args.rows, columns=args.columns, mines=args.mines)
    rng = np.random.default_rng(args.seed)
    game = Game(config, rng)
    print(draw(game))
    print()

    def show(game: Game, row: int, column: int) -> None:
        print(f"Open ({row}, {column})")
        print(draw(game))
        print()
        time.sleep(args.delay)

    state = play_random(game, rng, on_step=show)
    print(f"Game over: {state.name}")


def evaluate(args: argparse.Namespace) -> None:
    """Play random games through the environment and report the win rate."""
    config = GameConfig(rows=args.rows, columns=args.columns, mines=args.mines)
    env = MinesweeperEnv(config=config)
    rng = np.random.default_rng(args.seed)

    wins = 0
    total_opened = 0
    print(f"Playing {args.games} random games...")

    for episode in range(args.games):
        seed = args.seed + episode if args.seed is not None else None
        env.reset(seed=seed)
        done = False

        while not done:
            valid_actions = np.flatnonzero(env.get_action_mask())
            action = rng.choice(valid_actions)
            _, _, terminated, truncated, info = env.step(action)
            done = terminated or truncated

        total_opened += info["opened"]
        if info["game_state"] == "SUCCESS":
            wins += 1

    print(f"  Win rate: {wins / args.games:.1%}")
    print(f"  Avg opened: {total_opened / args.games:.1f} cells")


def add_game_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the game parameter options shared by all commands."""
    parser.add_argument("--rows", type=int, default=9, help="Number of rows")
    parser.add_argument("--columns", type=int, default=9, help="Number of columns")
    parser.add_argument("--mines", type=int, default=10, help="Number of mines")
    parser.add_argument(
        "--seed", type=int, default=None, help="Random seed (default: OS entropy)"
    )


def main() -> int:
    """Parse arguments and run the appropriate command."""
    parser = argparse.ArgumentParser(description="Minesweeper rules engine")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    play_parser = subparsers.add_parser("play", help="Watch a random game")
    add_game_arguments(play_parser)
    play_parser.add_argument(
        "--delay", type=float, default=0.0, help="Delay between moves"
    )

    eval_parser = subparsers.add_parser(
        "evaluate", help="Win rate of random play"
    )
    add_game_arguments(eval_parser)
    eval_parser.add_argument(
        "--games", type=int, default=100, help="Number of games to play"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        if args.command == "play":
            play(args)
        elif args.command == "evaluate":
            evaluate(args)
        else:
            parser.print_help()
    except MinesweeperError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
