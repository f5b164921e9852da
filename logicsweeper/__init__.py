"""
logicsweeper

Minesweeper board generation with a no-guess guarantee:
- Deduction: two sound rules (hint when fully constrained, open when fully hinted)
- Hypothesis search: enumerate mine placements around the most constrained cells
- Rejection sampling: regenerate until a board is solvable from the first click
"""

from .adjacents import Adjacents
from .analysis import (
    run_generation_difficulty_analysis,
    run_generation_many_tests,
    run_generation_single_test,
)
from .board import Board, Cell, Visibility
from .combinations import CombinationIter
from .engine import (
    DIFFICULTY_LEVELS,
    Game,
    PlayState,
    SolveOutcome,
    generate_mines,
    new_board,
)
from .solver import (
    AmbiguousBoard,
    InvalidBoard,
    ValidationError,
    is_unambiguous,
    validate_board,
)

__version__ = "1.0.0"

__all__ = [
    # Core classes
    "Adjacents",
    "Board",
    "Cell",
    "CombinationIter",
    "Game",
    "PlayState",
    "SolveOutcome",
    "Visibility",
    # Generation and validation
    "DIFFICULTY_LEVELS",
    "generate_mines",
    "new_board",
    "validate_board",
    "is_unambiguous",
    # Errors
    "ValidationError",
    "InvalidBoard",
    "AmbiguousBoard",
    # Analysis functions
    "run_generation_single_test",
    "run_generation_many_tests",
    "run_generation_difficulty_analysis",
]
