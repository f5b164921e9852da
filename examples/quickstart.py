"""
Quickstart example for logicsweeper.

This script demonstrates generating and checking no-guess boards.
"""

import logging

from logicsweeper import (
    Game,
    is_unambiguous,
    new_board,
    run_generation_many_tests,
)


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 60)
    print("logicsweeper - Quickstart Example")
    print("=" * 60)

    # Example 1: Generate a single no-guess board
    print("\n1. Generating an easy-density 16x10 board without guesses...")
    print("-" * 60)

    board = new_board(16, 10, (0.12, 0.13), require_unambiguous=True)
    first_x, first_y = board.width // 2, board.height // 2
    print(board.format_board(reveal_all=True, highlight=(first_x, first_y)))
    print(f"Solvable from ({first_x}, {first_y}): {is_unambiguous(board, first_x, first_y)}")

    # Example 2: Play the first move
    print("\n2. Opening the first cell of a game...")
    print("-" * 60)

    game = Game(16, 10, (0.12, 0.13), require_unambiguous=True)
    game.reveal(8, 5)
    print(game.board.format_board())
    print(f"Mines not yet hinted: {game.open_mine_count()}")

    # Example 3: Generation statistics
    print("\n3. Generating 10 boards for statistics...")
    print("-" * 60)

    results = run_generation_many_tests(
        width=16,
        height=10,
        mine_density_range=(0.12, 0.13),
        runs=10,
    )

    print(f"Average placements drawn: {results['avg_attempts']:.1f}")
    print(f"90th percentile placements: {results['p90_attempts']:.1f}")
    print(f"Average time per board: {results['avg_elapsed_seconds']:.3f}s")
    print(f"Acceptance rate: {results['acceptance_rate']:.1%}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
