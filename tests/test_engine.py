"""Unit tests for board generation and the Game interface."""

import logging
import random
import unittest

from logicsweeper.board import Board, Visibility
from logicsweeper.engine import (
    DIFFICULTY_LEVELS,
    Game,
    PlayState,
    SolveOutcome,
    generate_mines,
    mine_count_for,
    new_board,
)
from logicsweeper.solver import validate_board


def _scenario_game():
    board = Board(5, 5, 2)
    board.place_mine(2, 2)
    board.place_mine(2, 3)
    return Game.from_board(board)


class TestGeneration(unittest.TestCase):

    def test_mine_count_for_range(self):
        rng = random.Random(5)
        for _ in range(20):
            count = mine_count_for(10, 10, (0.10, 0.20), rng)
            self.assertGreaterEqual(count, 10)
            self.assertLess(count, 20)

    def test_mine_count_for_empty_range(self):
        self.assertEqual(mine_count_for(5, 5, (0.0, 0.0)), 0)
        self.assertEqual(mine_count_for(10, 10, (0.2, 0.2)), 20)

    def test_mine_count_for_rejects_bad_range(self):
        with self.assertRaises(ValueError):
            mine_count_for(5, 5, (0.3, 0.1))
        with self.assertRaises(ValueError):
            mine_count_for(5, 5, (0.1, 1.5))

    def test_first_click_is_a_zero(self):
        board = Board(10, 10, 15)
        attempts = generate_mines(board, 3, 4, False, rng=random.Random(9))
        self.assertGreaterEqual(attempts, 1)
        self.assertFalse(board[3, 4].mine)
        self.assertEqual(board[3, 4].neighbors, 0)
        self.assertEqual(len(board.mines()), 15)

    def test_generate_rejects_overfull_board(self):
        board = Board(3, 3, 1)
        with self.assertRaises(ValueError):
            generate_mines(board, 1, 1, False)

    def test_generate_gives_up_after_max_attempts(self):
        board = Board(4, 4, 2)
        with self.assertRaises(RuntimeError):
            generate_mines(board, 0, 0, True, max_attempts=0)

    def test_rejected_boards_are_drawn_again(self):
        board = Board(6, 6, 6)
        attempts = generate_mines(board, 0, 0, True, rng=random.Random(0))
        self.assertGreater(attempts, 1)
        self.assertEqual(len(board.mines()), 6)
        validate_board(board, 0, 0)

    def test_only_solvable_placement_is_accepted(self):
        # Opening (0, 0) on a 5x1 strip, a single mine can only be pinned
        # down when it sits at the far end.
        rng = random.Random(0)
        runs = 20
        total_attempts = 0
        with self.assertLogs("logicsweeper.engine", level="DEBUG") as logs:
            for _ in range(runs):
                board = Board(5, 1, 1)
                total_attempts += generate_mines(board, 0, 0, True, rng=rng)
                self.assertEqual(board.mines(), [(4, 0)])
                validate_board(board, 0, 0)

        rejections = [
            record.getMessage()
            for record in logs.records
            if record.levelno == logging.DEBUG
        ]
        self.assertGreater(total_attempts, runs)
        self.assertEqual(len(rejections), total_attempts - runs)
        self.assertTrue(any("(ambiguous)" in message for message in rejections))

    def test_new_board_leaves_cells_hidden(self):
        board = new_board(6, 6, (0.1, 0.12), False, rng=random.Random(2))
        self.assertTrue(all(c.visibility is Visibility.HIDDEN for c in board.cells))
        self.assertEqual(board[3, 3].neighbors, 0)


class TestGame(unittest.TestCase):

    def test_first_reveal_generates_unambiguous_board(self):
        game = Game(9, 9, (0.10, 0.12), require_unambiguous=True, rng=random.Random(3))
        self.assertIs(game.play_state, PlayState.INIT)

        game.reveal(4, 4)

        self.assertIn(game.play_state, (PlayState.PLAYING, PlayState.WON))
        self.assertEqual(len(game.board.mines()), game.mine_count)
        self.assertEqual(game.board[4, 4].neighbors, 0)
        self.assertIs(game.board[4, 4].visibility, Visibility.REVEALED)

    def test_hints_before_first_reveal_survive_generation(self):
        game = Game(9, 9, (0.10, 0.11), rng=random.Random(1))
        game.toggle_hint(8, 8)

        game.reveal(4, 4)

        self.assertIs(game.play_state, PlayState.PLAYING)
        self.assertIs(game.board[8, 8].visibility, Visibility.HINTED)
        self.assertEqual(game.open_mine_count(), game.mine_count - 1)

    def test_hinted_first_click_does_not_start_the_game(self):
        game = Game(9, 9, (0.10, 0.11), rng=random.Random(1))
        game.toggle_hint(4, 4)

        self.assertIsNone(game.reveal(4, 4))
        self.assertIs(game.play_state, PlayState.INIT)
        self.assertEqual(game.board.mines(), [])

    def test_game_rejects_mines_that_cannot_fit(self):
        with self.assertRaises(ValueError):
            Game(3, 3, (0.9, 1.0))

    def test_hint_then_chord_wins(self):
        game = _scenario_game()

        self.assertIsNone(game.reveal(0, 0))
        self.assertIs(game.board[2, 4].visibility, Visibility.HIDDEN)

        game.toggle_hint(2, 2)
        game.toggle_hint(2, 3)
        self.assertEqual(game.open_mine_count(), 0)

        outcome = game.reveal(1, 4)

        self.assertIsInstance(outcome, SolveOutcome)
        self.assertGreaterEqual(outcome.duration, 0.0)
        self.assertIs(game.play_state, PlayState.WON)
        self.assertTrue(game.is_solved())
        self.assertTrue(
            all(c.visibility is Visibility.REVEALED for c in game.board.cells)
        )

    def test_revealing_hinted_cell_is_noop(self):
        game = _scenario_game()
        game.toggle_hint(2, 2)
        self.assertIsNone(game.reveal(2, 2))
        self.assertIs(game.play_state, PlayState.PLAYING)
        self.assertIs(game.board[2, 2].visibility, Visibility.HINTED)

    def test_revealing_mine_loses(self):
        game = _scenario_game()
        self.assertIsNone(game.reveal(2, 2))
        self.assertIs(game.play_state, PlayState.LOST)
        self.assertIsNone(game.reveal(0, 0))
        self.assertIs(game.board[0, 0].visibility, Visibility.HIDDEN)

    def test_wrong_hint_chord_loses(self):
        game = _scenario_game()
        game.reveal(0, 0)
        game.toggle_hint(2, 4)
        game.reveal(1, 4)
        self.assertIs(game.play_state, PlayState.LOST)

    def test_out_of_bounds_actions_are_ignored(self):
        game = _scenario_game()
        self.assertIsNone(game.reveal(7, 7))
        game.toggle_hint(-1, 0)
        self.assertEqual(game.open_mine_count(), 2)

    def test_visible_grid(self):
        game = _scenario_game()
        game.reveal(0, 0)
        game.toggle_hint(2, 2)
        grid = game.visible_grid()
        self.assertEqual(grid[0], ["0", "0", "0", "0", "0"])
        self.assertEqual(grid[2][1:4], ["2", "F", "2"])
        self.assertEqual(grid[4][2], ".")

    def test_from_difficulty(self):
        game = Game.from_difficulty("easy")
        width, height, _ = DIFFICULTY_LEVELS["easy"]
        self.assertEqual((game.width, game.height), (width, height))
        with self.assertRaises(ValueError):
            Game.from_difficulty("impossible")


if __name__ == "__main__":
    unittest.main()
