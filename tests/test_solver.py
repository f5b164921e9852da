"""Unit tests for deduction, hypothesis search and board validation."""

import random
import unittest

from logicsweeper.board import Board, Visibility
from logicsweeper.engine import new_board
from logicsweeper.solver import (
    AmbiguousBoard,
    InvalidBoard,
    SearchStatus,
    ValidationError,
    deduce,
    deduce_to_fixed_point,
    guess_mines,
    is_unambiguous,
    validate_board,
)


def _make_board(width, height, mines):
    """Helper to build a board with mines at fixed coordinates.

    Args:
        width: Board width.
        height: Board height.
        mines: Iterable of (x, y) mine coordinates.

    Returns:
        A Board whose mine_count equals the number of mines placed.
    """
    mines = list(mines)
    board = Board(width, height, len(mines))
    for x, y in mines:
        board.place_mine(x, y)
    return board


def _hinted(board):
    return {
        (x, y)
        for y in range(board.height)
        for x in range(board.width)
        if board[x, y].visibility is Visibility.HINTED
    }


def _from_rows(rows, mine_count):
    """Build a board from strings where "M" is a hidden mine and a digit a revealed number.

    Numbers are taken as written, so they need not match the mines around them.
    """
    cells = [
        ["hidden", "M"] if char == "M" else ["revealed", int(char)]
        for row in rows
        for char in row
    ]
    return Board.from_dict(
        {"width": len(rows[0]), "height": len(rows), "mine_count": mine_count, "cells": cells}
    )


class TestValidateBoard(unittest.TestCase):

    def test_diagonal_board_is_rejected(self):
        board = _make_board(5, 5, [(3, 1), (2, 2), (1, 3)])
        with self.assertRaises(ValidationError):
            validate_board(board, 0, 0)

    def test_solvable_board_1(self):
        board = _make_board(5, 5, [(2, 2), (2, 3)])
        validate_board(board, 0, 0)

    def test_solvable_board_2(self):
        board = _make_board(4, 5, [(0, 3), (1, 2), (2, 2), (0, 4)])
        validate_board(board, 0, 0)

    def test_solvable_board_3(self):
        board = _make_board(5, 5, [(2, 2), (1, 3)])
        validate_board(board, 0, 0)

    def test_stalled_deduction_without_candidates_is_ambiguous(self):
        # The far cell of the strip can be neither opened nor hinted.
        board = _make_board(5, 1, [(3, 0)])
        with self.assertRaises(AmbiguousBoard):
            validate_board(board, 0, 0)

    def test_validation_does_not_touch_the_board(self):
        board = _make_board(4, 5, [(0, 3), (1, 2), (2, 2), (0, 4)])
        before = board.clone()
        validate_board(board, 0, 0)
        self.assertEqual(board, before)

    def test_single_corner_mine_is_ambiguous(self):
        board = _make_board(2, 2, [(1, 1)])
        with self.assertRaises(AmbiguousBoard):
            validate_board(board, 0, 0)
        self.assertFalse(is_unambiguous(board, 0, 0))

    def test_is_unambiguous(self):
        board = _make_board(5, 5, [(2, 2), (2, 3)])
        self.assertTrue(is_unambiguous(board, 0, 0))

    def test_generated_boards_validate_from_first_click(self):
        rng = random.Random(1234)
        for _ in range(3):
            board = new_board(8, 8, (0.10, 0.15), True, first_click=(0, 0), rng=rng)
            self.assertEqual(board[0, 0].neighbors, 0)
            self.assertFalse(board[0, 0].mine)
            self.assertEqual(len(board.mines()), board.mine_count)
            validate_board(board, 0, 0)


class TestDeduction(unittest.TestCase):

    def test_deduction_solves_simple_board(self):
        board = _make_board(5, 5, [(2, 2), (2, 3)])
        deduce(board, 0, 0, force=True)
        self.assertTrue(deduce_to_fixed_point(board))
        self.assertTrue(board.is_solved())
        self.assertEqual(_hinted(board) - {(2, 2), (2, 3)}, set())

    def test_deduction_on_solved_board_is_noop(self):
        board = _make_board(5, 5, [(2, 2), (2, 3)])
        deduce(board, 0, 0, force=True)
        deduce_to_fixed_point(board)
        snapshot = board.clone()

        self.assertTrue(deduce_to_fixed_point(board))
        deduce(board, 1, 2, force=True)
        self.assertEqual(board, snapshot)

    def test_opening_a_mine_is_invalid(self):
        board = _make_board(3, 3, [(1, 1)])
        with self.assertRaises(InvalidBoard):
            deduce(board, 1, 1, force=True)

    def test_stalls_without_guessing(self):
        board = _make_board(4, 5, [(0, 3), (1, 2), (2, 2), (0, 4)])
        deduce(board, 0, 0, force=True)
        self.assertFalse(deduce_to_fixed_point(board))
        self.assertEqual(_hinted(board), set())
        for x in range(4):
            self.assertIs(board[x, 1].visibility, Visibility.REVEALED)
            self.assertIs(board[x, 2].visibility, Visibility.HIDDEN)


class TestGuessMines(unittest.TestCase):

    def test_unique_placement_is_progress(self):
        board = _make_board(4, 5, [(0, 3), (1, 2), (2, 2), (0, 4)])
        deduce(board, 0, 0, force=True)
        deduce_to_fixed_point(board)
        before = board.clone()

        status, progressed = guess_mines(board, 0, board.width, 0, board.height)

        self.assertIs(status, SearchStatus.PROGRESS)
        self.assertIsNotNone(progressed)
        self.assertEqual(_hinted(progressed), {(1, 2), (2, 2)})
        self.assertEqual(board, before)

    def test_nothing_revealed_means_no_missing_neighbors(self):
        board = _make_board(3, 3, [(1, 1)])
        status, progressed = guess_mines(board, 0, 3, 0, 3)
        self.assertIs(status, SearchStatus.NO_MISSING_NEIGHBORS)
        self.assertIsNone(progressed)

    def test_several_placements_are_ambiguous(self):
        board = _make_board(2, 2, [(1, 1)])
        board.set_visibility(0, 0, Visibility.REVEALED)
        with self.assertRaises(AmbiguousBoard):
            guess_mines(board, 0, 2, 0, 2)

    def test_mine_budget_shortfall_is_invalid(self):
        board = Board(3, 2, 0)
        board.place_mine(0, 0)
        board.set_visibility(1, 0, Visibility.REVEALED)
        with self.assertRaises(InvalidBoard):
            guess_mines(board, 0, 3, 0, 2)

    def test_single_survivor_on_solved_board_is_done(self):
        # Hinting (2, 0) over-hints the 0, so only (0, 0) survives.
        board = _from_rows(["M1M0"], 2)
        self.assertTrue(board.is_solved())

        status, progressed = guess_mines(board, 0, 4, 0, 1)

        self.assertIs(status, SearchStatus.DONE)
        self.assertIsNone(progressed)

    def test_nested_done_ends_the_search(self):
        board = _from_rows(["M1M0", "2422", "M1M0"], 4)

        status, progressed = guess_mines(board, 0, 4, 0, 3)

        self.assertIs(status, SearchStatus.DONE)
        self.assertIsNone(progressed)

    def test_depth_limit_reports_ambiguous(self):
        board = _make_board(4, 5, [(0, 3), (1, 2), (2, 2), (0, 4)])
        deduce(board, 0, 0, force=True)
        deduce_to_fixed_point(board)
        with self.assertRaises(AmbiguousBoard):
            guess_mines(board, 0, 4, 0, 5, depth=1, max_depth=0)


if __name__ == "__main__":
    unittest.main()
