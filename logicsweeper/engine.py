"""Board generation with an optional no-guess guarantee, and the game object a shell plays on."""

import logging
import random
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union

from .board import Board, Visibility
from .solver import InvalidBoard, ValidationError, validate_board

logger = logging.getLogger(__name__)

DensityRange = Tuple[float, float]

# name -> (width, height, (min density, max density))
DIFFICULTY_LEVELS: Dict[str, Tuple[int, int, DensityRange]] = {
    "easy": (20, 14, (0.12, 0.13)),
    "medium": (30, 18, (0.16, 0.17)),
    "hard": (40, 24, (0.21, 0.22)),
}


def mine_count_for(
    width: int,
    height: int,
    mine_density_range: DensityRange,
    rng: Optional[random.Random] = None,
) -> int:
    """
    Draw a mine count from ``[int(lo * cells), int(hi * cells))``.

    An empty range yields its lower bound.

    Raises:
        ValueError: If the densities are outside [0, 1] or reversed.
    """
    lo, hi = mine_density_range
    if not 0.0 <= lo <= hi <= 1.0:
        raise ValueError("mine_density_range must satisfy 0 <= lo <= hi <= 1.")

    cells = width * height
    min_mines = int(lo * cells)
    max_mines = int(hi * cells)
    if max_mines <= min_mines:
        return min_mines

    randrange = rng.randrange if rng is not None else random.randrange
    return randrange(min_mines, max_mines)


def generate_mines(
    board: Board,
    first_x: int,
    first_y: int,
    require_unambiguous: bool,
    *,
    rng: Optional[random.Random] = None,
    max_attempts: Union[int, float] = float("inf"),
    max_depth: Union[int, float] = float("inf"),
) -> int:
    """
    Place ``board.mine_count`` mines until the board is acceptable.

    A placement is accepted when the first cell has no mine neighbors and,
    if ``require_unambiguous`` is set, the board validates from that cell.
    Rejected placements are cleared and drawn again.

    Args:
        board: Board to fill; it is cleared before every attempt.
        first_x: X-coordinate of the first click.
        first_y: Y-coordinate of the first click.
        require_unambiguous: Demand a board solvable without guessing.
        rng: Optional random source.
        max_attempts: Give up after this many placements (unbounded by default).
        max_depth: Nesting limit forwarded to the hypothesis search.

    Returns:
        The number of placements drawn, including the accepted one.

    Raises:
        ValueError: If the first cell is outside the board, or the mines do
            not fit around it.
        RuntimeError: If ``max_attempts`` placements were all rejected.
    """
    if not board.is_in_bounds(first_x, first_y):
        raise ValueError("Cell coordinates are outside the board.")
    if board.mine_count > board.width * board.height - len(
        board.neighbors(first_x, first_y)
    ) - 1:
        raise ValueError("Cannot keep the first cell's neighborhood free of mines.")

    attempts = 0
    rejected: Dict[str, int] = {"neighbors": 0, "invalid": 0, "ambiguous": 0}

    while attempts < max_attempts:
        attempts += 1
        board.clear()
        board.place_mines(board.mine_count, rng)

        first = board[first_x, first_y]
        if first.mine or first.neighbors != 0:
            rejected["neighbors"] += 1
            logger.debug(
                "attempt %d rejected (neighbors): first cell is not a zero", attempts
            )
            continue

        if not require_unambiguous:
            break

        try:
            validate_board(board, first_x, first_y, max_depth=max_depth)
        except ValidationError as e:
            kind = "invalid" if isinstance(e, InvalidBoard) else "ambiguous"
            rejected[kind] += 1
            logger.debug("attempt %d rejected (%s): %s", attempts, kind, e)
            continue
        break
    else:
        raise RuntimeError(
            f"No acceptable board after {attempts} attempts (rejected: {rejected})."
        )

    logger.info(
        "generated %dx%d board with %d mines after %d attempts (rejected: %s)",
        board.width,
        board.height,
        board.mine_count,
        attempts,
        rejected,
    )
    return attempts


def new_board(
    width: int,
    height: int,
    mine_density_range: DensityRange,
    require_unambiguous: bool,
    *,
    first_click: Optional[Tuple[int, int]] = None,
    rng: Optional[random.Random] = None,
    max_attempts: Union[int, float] = float("inf"),
    max_depth: Union[int, float] = float("inf"),
) -> Board:
    """
    Build a board with mines placed around an implicit first click.

    Args:
        width: Board width (number of columns), must be > 0.
        height: Board height (number of rows), must be > 0.
        mine_density_range: (lo, hi) fraction of cells holding mines.
        require_unambiguous: Keep regenerating until the board can be solved
            from the first click without guessing.
        first_click: Cell the player opens first; defaults to the center.
        rng: Optional random source.
        max_attempts: See ``generate_mines``.
        max_depth: See ``generate_mines``.

    Returns:
        A board with every cell still hidden.
    """
    mine_count = mine_count_for(width, height, mine_density_range, rng)
    board = Board(width, height, mine_count)
    if first_click is None:
        first_click = (width // 2, height // 2)

    generate_mines(
        board,
        first_click[0],
        first_click[1],
        require_unambiguous,
        rng=rng,
        max_attempts=max_attempts,
        max_depth=max_depth,
    )
    return board


class PlayState(Enum):
    INIT = "init"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


@dataclass(frozen=True)
class SolveOutcome:
    """Returned by ``Game.reveal`` when the reveal solved the board."""

    duration: float


class Game:
    """One game of Minesweeper as seen by an interactive shell."""

    def __init__(
        self,
        width: int,
        height: int,
        mine_density_range: DensityRange,
        require_unambiguous: bool = False,
        *,
        rng: Optional[random.Random] = None,
        max_attempts: Union[int, float] = float("inf"),
        max_depth: Union[int, float] = float("inf"),
    ) -> None:
        """
        Initialize a game; mines are placed on the first reveal.

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mine_density_range: (lo, hi) fraction of cells holding mines.
            require_unambiguous: Only hand out boards solvable without guessing.
            rng: Optional random source.
            max_attempts: Generation attempt limit (unbounded by default).
            max_depth: Nesting limit for the hypothesis search.

        Raises:
            ValueError: If the mines cannot fit around any first click.
        """
        self.require_unambiguous: bool = require_unambiguous
        self.rng = rng
        self.max_attempts = max_attempts
        self.max_depth = max_depth

        mine_count = mine_count_for(width, height, mine_density_range, rng)
        self.board: Board = Board(width, height, mine_count)
        # A corner click keeps the fewest cells free.
        if mine_count > width * height - len(self.board.neighbors(0, 0)) - 1:
            raise ValueError(
                "Too many mines to keep any first click's neighborhood free."
            )
        self.play_state: PlayState = PlayState.INIT
        self._started_at: float = 0.0
        self._duration: float = 0.0

    @classmethod
    def from_difficulty(
        cls, difficulty: str, require_unambiguous: bool = False, **kwargs: object
    ) -> "Game":
        """
        Create a game from a preset in ``DIFFICULTY_LEVELS``.

        Raises:
            ValueError: If the difficulty name is unknown.
        """
        if difficulty not in DIFFICULTY_LEVELS:
            raise ValueError(
                f"difficulty must be one of {sorted(DIFFICULTY_LEVELS)}, got {difficulty!r}."
            )
        width, height, density = DIFFICULTY_LEVELS[difficulty]
        return cls(width, height, density, require_unambiguous, **kwargs)  # type: ignore[arg-type]

    @classmethod
    def from_board(cls, board: Board) -> "Game":
        """Start playing a board that already has its mines."""
        game = cls.__new__(cls)
        game.require_unambiguous = False
        game.rng = None
        game.max_attempts = float("inf")
        game.max_depth = float("inf")
        game.board = board
        game.play_state = PlayState.PLAYING
        game._started_at = time.monotonic()
        game._duration = 0.0
        return game

    @property
    def width(self) -> int:
        return self.board.width

    @property
    def height(self) -> int:
        return self.board.height

    @property
    def mine_count(self) -> int:
        return self.board.mine_count

    def is_solved(self) -> bool:
        return self.board.is_solved()

    def play_duration(self) -> float:
        """Seconds played so far, or the final time once the game is over."""
        if self.play_state is PlayState.PLAYING:
            return time.monotonic() - self._started_at
        return self._duration

    def open_mine_count(self) -> int:
        return self.board.count_mines_minus_hints()

    def reveal(self, x: int, y: int) -> Optional[SolveOutcome]:
        """
        Apply a reveal action.

        The first reveal places the mines so that the clicked cell is a zero.
        Revealing an already revealed number whose hinted neighbors match it
        opens every other neighbor.

        Returns:
            A ``SolveOutcome`` if this reveal solved the board, otherwise None.
        """
        if not self.board.is_in_bounds(x, y):
            return None
        if self.play_state in (PlayState.WON, PlayState.LOST):
            return None

        if self.play_state is PlayState.INIT:
            if self.board[x, y].visibility is Visibility.HINTED:
                return None
            hinted = [
                (hx, hy)
                for hy in range(self.height)
                for hx in range(self.width)
                if self.board[hx, hy].visibility is Visibility.HINTED
            ]
            generate_mines(
                self.board,
                x,
                y,
                self.require_unambiguous,
                rng=self.rng,
                max_attempts=self.max_attempts,
                max_depth=self.max_depth,
            )
            # Generation clears the board; hints placed before the first click stay.
            for hx, hy in hinted:
                self.board.hint(hx, hy)
            self.play_state = PlayState.PLAYING
            self._started_at = time.monotonic()

        cell = self.board[x, y]
        if cell.visibility is Visibility.HINTED:
            return None
        if cell.mine:
            self._lose(x, y)
            return None

        if cell.visibility is Visibility.REVEALED:
            if self.board.hinted_adjacents(x, y).count() == cell.neighbors:
                for nx, ny in self.board.neighbors(x, y):
                    self._reveal_if_not_hinted(nx, ny)
                    if self.play_state is PlayState.LOST:
                        return None

        self.board.reveal(x, y)
        return self._check_if_won()

    def toggle_hint(self, x: int, y: int) -> None:
        if self.play_state in (PlayState.WON, PlayState.LOST):
            return
        self.board.toggle_hint(x, y)

    def _reveal_if_not_hinted(self, x: int, y: int) -> None:
        cell = self.board[x, y]
        if cell.visibility is not Visibility.HIDDEN:
            return
        if cell.mine:
            self._lose(x, y)
            return
        self.board.reveal(x, y)

    def _lose(self, x: int, y: int) -> None:
        self._duration = time.monotonic() - self._started_at
        self.board.set_visibility(x, y, Visibility.REVEALED)
        self.play_state = PlayState.LOST

    def _check_if_won(self) -> Optional[SolveOutcome]:
        if not self.board.is_solved():
            return None
        if self.play_state is not PlayState.PLAYING:
            return None

        self._duration = time.monotonic() - self._started_at
        self.play_state = PlayState.WON
        self.board.reveal_all()
        return SolveOutcome(self._duration)

    def visible_grid(self) -> List[List[str]]:
        """
        The board as the player sees it, row by row.

        Hidden cells are ".", hinted cells "F", revealed mines "*", and revealed
        free cells their neighbor count.
        """
        rows: List[List[str]] = []
        for y in range(self.height):
            row: List[str] = []
            for x in range(self.width):
                cell = self.board[x, y]
                if cell.visibility is Visibility.HIDDEN:
                    row.append(".")
                elif cell.visibility is Visibility.HINTED:
                    row.append("F")
                elif cell.mine:
                    row.append("*")
                else:
                    row.append(str(cell.neighbors))
            rows.append(row)
        return rows
