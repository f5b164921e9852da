"""Certify that a board can be solved from a starting cell without guessing."""

import logging
from enum import Enum
from typing import List, Optional, Tuple, Union

from .adjacents import Adjacents
from .board import Board, Visibility
from .combinations import CombinationIter
from .utils import window

logger = logging.getLogger(__name__)

# Radius of the window re-checked right after a hypothesis is placed, and of
# the window the nested search runs on.
LOCAL_CHECK_RADIUS = 2
NESTED_SEARCH_RADIUS = 3


class ValidationError(Exception):
    """Base class for boards rejected by validation."""


class InvalidBoard(ValidationError):
    """The deduced or hypothesized state contradicts the mine counts."""


class AmbiguousBoard(ValidationError):
    """More than one consistent continuation exists; the player would have to guess."""


class SearchStatus(Enum):
    PROGRESS = "progress"
    NO_MISSING_NEIGHBORS = "no_missing_neighbors"
    DONE = "done"


Candidate = Tuple[int, int, int, Adjacents]


# -----------------------------------------------------------------------------
# Deduction
# -----------------------------------------------------------------------------


def deduce(board: Board, x: int, y: int, force: bool = False) -> None:
    """
    Open (x, y) and apply the two sound rules outward from it.

    Rule A: when a revealed cell's missing mines equal its hidden neighbors,
    every hidden neighbor is hinted. Rule B: when a revealed cell has as many
    hinted neighbors as its number, every other neighbor is opened, which
    repeats both rules there.

    Already revealed cells are only re-examined when ``force`` is set (the
    cell passed in directly); cascaded cells stop at revealed ones.

    Raises:
        InvalidBoard: If a mine would have to be opened.
    """
    if board.is_solved():
        return

    stack: List[Tuple[int, int, bool]] = [(x, y, force)]

    while stack:
        cx, cy, forced = stack.pop()
        if not board.is_in_bounds(cx, cy):
            continue

        cell = board[cx, cy]
        if cell.visibility is Visibility.HINTED:
            continue
        if cell.visibility is Visibility.HIDDEN:
            if cell.mine:
                raise InvalidBoard(f"deduction opened a mine at ({cx}, {cy})")
            board.set_visibility(cx, cy, Visibility.REVEALED)
        elif not forced:
            continue

        if cell.mine:
            raise InvalidBoard(f"revealed mine at ({cx}, {cy})")

        n = cell.neighbors
        if n > 0:
            hidden = board.hidden_adjacents(cx, cy)
            hinted = board.hinted_adjacents(cx, cy)
            if n - hinted.count() == hidden.count():
                for dx, dy in hidden.offsets():
                    board.hint(cx + dx, cy + dy)
                hinted = board.hinted_adjacents(cx, cy)
            if hinted.count() != n:
                continue

        # Reversed so the neighbors are visited in compass order.
        for nx, ny in reversed(board.neighbors(cx, cy)):
            stack.append((nx, ny, False))


def deduce_to_fixed_point(board: Board) -> bool:
    """
    Re-run deduction from every revealed cell until a full pass changes nothing.

    Returns:
        True if the board ended up solved.

    Raises:
        InvalidBoard: If deduction opens a mine.
    """
    if board.is_solved():
        return True

    while True:
        snapshot = board.clone()
        for y in range(board.height):
            for x in range(board.width):
                if board[x, y].visibility is Visibility.REVEALED:
                    deduce(board, x, y, force=True)
                    if board.is_solved():
                        return True
        if snapshot == board:
            return False


# -----------------------------------------------------------------------------
# Ambiguity / validity search
# -----------------------------------------------------------------------------


def _missing_mines(board: Board, x: int, y: int) -> int:
    return board[x, y].neighbors - board.hinted_adjacents(x, y).count()


def _find_candidates(
    board: Board, x_start: int, x_end: int, y_start: int, y_end: int
) -> List[Candidate]:
    """Revealed cells in the window that need some, but not all, of their hidden neighbors as mines."""
    candidates: List[Candidate] = []
    for y in range(y_start, y_end):
        for x in range(x_start, x_end):
            cell = board[x, y]
            if cell.visibility is not Visibility.REVEALED or cell.mine:
                continue
            hidden = board.hidden_adjacents(x, y)
            missing = _missing_mines(board, x, y)
            if 0 < missing < hidden.count():
                candidates.append((x, y, missing, hidden))

    candidates.sort(key=lambda c: (c[3].count() - c[2], c[2]))
    return candidates


def _has_overhinted_cell(
    board: Board, x_start: int, x_end: int, y_start: int, y_end: int
) -> bool:
    for y in range(y_start, y_end):
        for x in range(x_start, x_end):
            cell = board[x, y]
            if cell.visibility is Visibility.REVEALED and cell.is_free:
                if board.hinted_adjacents(x, y).count() > cell.neighbors:
                    return True
    return False


def _has_underhinted_cell(board: Board) -> bool:
    for y in range(board.height):
        for x in range(board.width):
            cell = board[x, y]
            if cell.visibility is Visibility.REVEALED and cell.is_free:
                if board.hinted_adjacents(x, y).count() < cell.neighbors:
                    return True
    return False


def guess_mines(
    board: Board,
    x_start: int,
    x_end: int,
    y_start: int,
    y_end: int,
    depth: int = 0,
    max_depth: Union[int, float] = float("inf"),
) -> Tuple[SearchStatus, Optional[Board]]:
    """
    Try every mine placement around the most constrained cells of a window.

    For each candidate cell (fewest free choices first) every combination of
    its missing mines over its hidden neighbors is hinted on a copy of the
    board and checked: locally for over-hinted numbers, globally once all
    mines are placed, and otherwise by a nested search on a wider window.
    A candidate with exactly one surviving placement pins the board down.

    Args:
        board: Board to search; it is not modified.
        x_start, x_end, y_start, y_end: Half-open window to pick candidates from.
        depth: Current nesting level.
        max_depth: Nesting levels beyond this are reported as ambiguous.

    Returns:
        ``(SearchStatus.PROGRESS, board)`` with the unique continuation,
        ``(SearchStatus.DONE, None)`` if the search solved the board, or
        ``(SearchStatus.NO_MISSING_NEIGHBORS, None)`` if no cell in the window
        has undecided neighbors.

    Raises:
        InvalidBoard: If no placement is consistent.
        AmbiguousBoard: If placements only ever survive in pairs or more.
    """
    if depth > max_depth:
        raise AmbiguousBoard(f"search depth {depth} exceeds {max_depth}")

    candidates = _find_candidates(board, x_start, x_end, y_start, y_end)
    if not candidates:
        logger.debug("depth %d: no missing neighbors", depth)
        return SearchStatus.NO_MISSING_NEIGHBORS, None

    ambiguous_count = 0
    for x, y, missing, hidden in candidates:
        if board.count_mines_minus_hints() < missing:
            logger.debug("depth %d: invalid mine count", depth)
            raise InvalidBoard("fewer mines left than a cell still needs")

        offsets = hidden.offsets()
        valid_board: Optional[Board] = None
        is_ambiguous = False

        for combination in CombinationIter(len(offsets), missing):
            hypothesis = board.clone()
            for (dx, dy), chosen in zip(offsets, combination):
                if chosen:
                    hypothesis.set_visibility(x + dx, y + dy, Visibility.HINTED)

            local = window(x, y, LOCAL_CHECK_RADIUS, board.width, board.height)
            if _has_overhinted_cell(hypothesis, *local):
                logger.debug("depth %d: hypothesis over-hints a neighbor", depth)
                continue

            if hypothesis.count_mines_minus_hints() == 0:
                # With every mine placed no number may still be short.
                if _has_underhinted_cell(hypothesis):
                    logger.debug("depth %d: all mines placed, numbers still open", depth)
                    continue
            else:
                nested = window(x, y, NESTED_SEARCH_RADIUS, board.width, board.height)
                try:
                    status, progressed = guess_mines(
                        hypothesis, *nested, depth=depth + 1, max_depth=max_depth
                    )
                except InvalidBoard:
                    continue
                except AmbiguousBoard:
                    # Deeper cells are undetermined, but this placement is not refuted.
                    pass
                else:
                    if status is SearchStatus.DONE:
                        return SearchStatus.DONE, None
                    if status is SearchStatus.PROGRESS and progressed is not None:
                        hypothesis = progressed

            if valid_board is None:
                valid_board = hypothesis
            else:
                logger.debug("depth %d: (%d, %d) is ambiguous", depth, x, y)
                is_ambiguous = True
                break

        if is_ambiguous:
            ambiguous_count += 1
            continue

        if valid_board is not None:
            if valid_board.is_solved():
                return SearchStatus.DONE, None
            if depth == 0 and logger.isEnabledFor(logging.DEBUG):
                logger.debug("progress with:\n%s", valid_board.format_board())
            return SearchStatus.PROGRESS, valid_board

    if ambiguous_count > 0:
        logger.debug("depth %d: %d ambiguous candidates", depth, ambiguous_count)
        raise AmbiguousBoard(f"{ambiguous_count} candidate cells are ambiguous")

    logger.debug("depth %d: every placement is invalid", depth)
    raise InvalidBoard("no consistent mine placement")


# -----------------------------------------------------------------------------
# Validation entry points
# -----------------------------------------------------------------------------


def validate_board(
    board: Board,
    x: int,
    y: int,
    max_depth: Union[int, float] = float("inf"),
) -> None:
    """
    Check that the board can be solved from (x, y) by deduction alone.

    The board itself is left untouched; all work happens on a copy.

    Args:
        board: Board with mines placed.
        x: X-coordinate of the first opened cell.
        y: Y-coordinate of the first opened cell.
        max_depth: Nesting limit for the hypothesis search.

    Raises:
        InvalidBoard: If the board contradicts itself along the way.
        AmbiguousBoard: If at some point the player would have to guess.
    """
    board = board.clone()

    while True:
        deduce(board, x, y, force=True)
        if board.is_solved():
            return

        if deduce_to_fixed_point(board):
            return

        status, progressed = guess_mines(
            board, 0, board.width, 0, board.height, max_depth=max_depth
        )
        if status is SearchStatus.DONE:
            return
        if status is SearchStatus.NO_MISSING_NEIGHBORS:
            raise AmbiguousBoard("deduction stalled with no cell to branch on")
        if progressed is None:
            raise RuntimeError("Search reported progress without a board.")
        board = progressed


def is_unambiguous(
    board: Board,
    x: int,
    y: int,
    max_depth: Union[int, float] = float("inf"),
) -> bool:
    """Return True if ``validate_board`` accepts the board from (x, y)."""
    try:
        validate_board(board, x, y, max_depth=max_depth)
    except ValidationError:
        return False
    return True
