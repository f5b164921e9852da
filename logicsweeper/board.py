"""Minesweeper board model: cells, mine placement, hints and flood-fill reveal."""

import random
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Tuple

from .adjacents import Adjacents
from .utils import get_neighborhoods


class Visibility(Enum):
    """What the player (or the solver) currently sees of a cell."""

    HIDDEN = "hidden"
    HINTED = "hinted"
    REVEALED = "revealed"


@dataclass(frozen=True)
class Cell:
    """
    Immutable cell value.

    A cell is either a mine or free; a free cell carries the number of mines
    among its in-bounds neighbors.
    """

    visibility: Visibility = Visibility.HIDDEN
    mine: bool = False
    neighbors: int = 0

    @property
    def is_free(self) -> bool:
        return not self.mine


_EMPTY_CELL = Cell()


class Board:
    """
    Flat, index-addressed grid of cells.

    Cells are immutable values; every mutation replaces the cell at its index,
    so ``clone()`` only needs to copy the list.
    """

    def __init__(self, width: int, height: int, mine_count: int) -> None:
        """
        Create an empty board (no mines, everything hidden).

        Args:
            width: Board width (number of columns), must be > 0.
            height: Board height (number of rows), must be > 0.
            mine_count: Number of mines the board is meant to hold, must be
                between 0 and width * height.

        Raises:
            ValueError: If dimensions or mine count are invalid.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if not 0 <= mine_count <= width * height:
            raise ValueError("mine_count must be between 0 and width * height.")

        self.width: int = width
        self.height: int = height
        self.mine_count: int = mine_count
        self.cells: List[Cell] = [_EMPTY_CELL] * (width * height)

        # Free cells that are not revealed yet; the board is solved at zero.
        self.unrevealed_count: int = width * height
        self.hinted_count: int = 0

        self._neighborhoods: Dict[
            Tuple[int, int], Tuple[Tuple[int, int], ...]
        ] = get_neighborhoods(width, height)

    # -------------------------------------------------------------------------
    # Indexing and copying
    # -------------------------------------------------------------------------

    def __getitem__(self, pos: Tuple[int, int]) -> Cell:
        x, y = pos
        return self.cells[y * self.width + x]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.width == other.width
            and self.height == other.height
            and self.mine_count == other.mine_count
            and self.cells == other.cells
        )

    def __repr__(self) -> str:
        return (
            f"Board(width={self.width}, height={self.height}, "
            f"mine_count={self.mine_count})"
        )

    def clone(self) -> "Board":
        """Return an independent copy of this board."""
        board = Board.__new__(Board)
        board.width = self.width
        board.height = self.height
        board.mine_count = self.mine_count
        board.cells = list(self.cells)
        board.unrevealed_count = self.unrevealed_count
        board.hinted_count = self.hinted_count
        board._neighborhoods = self._neighborhoods
        return board

    def is_in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def neighbors(self, x: int, y: int) -> Tuple[Tuple[int, int], ...]:
        """Return precomputed in-bounds neighbor coordinates for a cell."""
        return self._neighborhoods[(x, y)]

    def set_visibility(self, x: int, y: int, visibility: Visibility) -> None:
        """Change the visibility of one cell and keep the counters in sync."""
        idx = y * self.width + x
        cell = self.cells[idx]
        if cell.visibility is visibility:
            return

        if cell.visibility is Visibility.HINTED:
            self.hinted_count -= 1
        elif visibility is Visibility.HINTED:
            self.hinted_count += 1

        if cell.is_free:
            if visibility is Visibility.REVEALED:
                self.unrevealed_count -= 1
            elif cell.visibility is Visibility.REVEALED:
                self.unrevealed_count += 1

        self.cells[idx] = replace(cell, visibility=visibility)

    # -------------------------------------------------------------------------
    # Mine placement
    # -------------------------------------------------------------------------

    def place_mine(self, x: int, y: int) -> None:
        """
        Turn the cell at (x, y) into a mine and bump its neighbors' counts.

        Raises:
            ValueError: If the coordinates are outside the board or the cell
                already holds a mine.
        """
        if not self.is_in_bounds(x, y):
            raise ValueError("Cell coordinates are outside the board.")

        idx = y * self.width + x
        cell = self.cells[idx]
        if cell.mine:
            raise ValueError(f"Cell ({x}, {y}) already holds a mine.")

        if cell.visibility is Visibility.REVEALED:
            self.unrevealed_count += 1
        self.unrevealed_count -= 1
        self.cells[idx] = replace(cell, mine=True, neighbors=0)

        for nx, ny in self.neighbors(x, y):
            nidx = ny * self.width + nx
            neighbor = self.cells[nidx]
            if neighbor.is_free:
                self.cells[nidx] = replace(neighbor, neighbors=neighbor.neighbors + 1)

    def place_mines(self, count: int, rng: Optional[random.Random] = None) -> None:
        """
        Place ``count`` mines uniformly at random among the non-mine cells.

        Each mine is drawn as a random index into the remaining free cells,
        located by scanning the grid. Existing state is kept; call ``clear()``
        first when regenerating.

        Args:
            count: Number of mines to add.
            rng: Optional random source (defaults to the ``random`` module).

        Raises:
            ValueError: If fewer than ``count`` free cells remain.
        """
        randrange = rng.randrange if rng is not None else random.randrange
        available = sum(1 for cell in self.cells if cell.is_free)
        if count < 0 or count > available:
            raise ValueError("Cannot place that many mines on this board.")

        for _ in range(count):
            remaining = randrange(available)
            for idx, cell in enumerate(self.cells):
                if cell.mine:
                    continue
                if remaining == 0:
                    self.place_mine(idx % self.width, idx // self.width)
                    break
                remaining -= 1
            available -= 1

    def clear(self) -> None:
        """Reset every cell to a hidden free cell with no mine neighbors."""
        self.cells = [_EMPTY_CELL] * (self.width * self.height)
        self.unrevealed_count = self.width * self.height
        self.hinted_count = 0

    # -------------------------------------------------------------------------
    # Neighborhood queries
    # -------------------------------------------------------------------------

    def is_hidden(self, x: int, y: int) -> bool:
        return self.is_in_bounds(x, y) and self[x, y].visibility is Visibility.HIDDEN

    def is_hinted(self, x: int, y: int) -> bool:
        return self.is_in_bounds(x, y) and self[x, y].visibility is Visibility.HINTED

    def hidden_adjacents(self, x: int, y: int) -> Adjacents:
        return Adjacents.from_predicate(self.is_hidden, x, y)

    def hinted_adjacents(self, x: int, y: int) -> Adjacents:
        return Adjacents.from_predicate(self.is_hinted, x, y)

    def count_mines_minus_hints(self) -> int:
        """Mines not yet accounted for by a hint; negative means too many hints."""
        return self.mine_count - self.hinted_count

    def is_solved(self) -> bool:
        """True when every free cell is revealed."""
        return self.unrevealed_count == 0

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def reveal(self, x: int, y: int) -> List[Tuple[int, int]]:
        """
        Reveal a cell, flood-filling through cells with zero mine neighbors.

        Out-of-bounds and already revealed cells are left alone. Mines are
        revealed like any other cell; deciding what that means is up to the
        caller.

        Returns:
            Newly revealed coordinates in reveal order.
        """
        if not self.is_in_bounds(x, y):
            return []

        frontier: Deque[Tuple[int, int]] = deque([(x, y)])
        revealed_cells: List[Tuple[int, int]] = []

        while frontier:
            cx, cy = frontier.popleft()
            cell = self[cx, cy]
            if cell.visibility is Visibility.REVEALED:
                continue

            self.set_visibility(cx, cy, Visibility.REVEALED)
            revealed_cells.append((cx, cy))

            if cell.is_free and cell.neighbors == 0:
                for nx, ny in self.neighbors(cx, cy):
                    if self[nx, ny].visibility is not Visibility.REVEALED:
                        frontier.append((nx, ny))

        return revealed_cells

    def hint(self, x: int, y: int) -> None:
        """Mark a hidden cell as a suspected mine."""
        if self.is_hidden(x, y):
            self.set_visibility(x, y, Visibility.HINTED)

    def toggle_hint(self, x: int, y: int) -> None:
        """Flip a cell between hidden and hinted; revealed cells are untouched."""
        if not self.is_in_bounds(x, y):
            return
        visibility = self[x, y].visibility
        if visibility is Visibility.HINTED:
            self.set_visibility(x, y, Visibility.HIDDEN)
        elif visibility is Visibility.HIDDEN:
            self.set_visibility(x, y, Visibility.HINTED)

    def reveal_all(self) -> None:
        for y in range(self.height):
            for x in range(self.width):
                self.set_visibility(x, y, Visibility.REVEALED)

    def mines(self) -> List[Tuple[int, int]]:
        return [
            (idx % self.width, idx // self.width)
            for idx, cell in enumerate(self.cells)
            if cell.mine
        ]

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Export the board as JSON-compatible data.

        Each cell is a ``[visibility, content]`` pair where content is the
        neighbor count of a free cell or ``"M"`` for a mine.
        """
        return {
            "width": self.width,
            "height": self.height,
            "mine_count": self.mine_count,
            "cells": [
                [cell.visibility.value, "M" if cell.mine else cell.neighbors]
                for cell in self.cells
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Board":
        """
        Rebuild a board exported by ``to_dict``.

        Raises:
            ValueError: If the payload is malformed.
        """
        try:
            board = cls(int(data["width"]), int(data["height"]), int(data["mine_count"]))
            raw_cells = data["cells"]
            cell_count = len(raw_cells)
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed board payload: {e}") from e

        if cell_count != board.width * board.height:
            raise ValueError("Cell list length does not match board dimensions.")

        cells: List[Cell] = []
        for raw_cell in raw_cells:
            try:
                raw_visibility, content = raw_cell
            except (TypeError, ValueError) as e:
                raise ValueError(f"Malformed cell entry: {raw_cell!r}") from e

            visibility = Visibility(raw_visibility)
            if content == "M":
                cells.append(Cell(visibility, mine=True))
            elif (
                isinstance(content, int)
                and not isinstance(content, bool)
                and 0 <= content <= 8
            ):
                cells.append(Cell(visibility, neighbors=content))
            else:
                raise ValueError(f"Invalid cell content: {content!r}")

        board.cells = cells
        board.unrevealed_count = sum(
            1 for c in cells if c.is_free and c.visibility is not Visibility.REVEALED
        )
        board.hinted_count = sum(1 for c in cells if c.visibility is Visibility.HINTED)
        return board

    # -------------------------------------------------------------------------
    # Display methods
    # -------------------------------------------------------------------------

    _ANSI_RESET = "\033[0m"
    _ANSI_COORD = "\033[96m"
    _ANSI_MINE = "\033[91m"
    _ANSI_HINT = "\033[93m"
    _ANSI_HIGHLIGHT = "\033[1;7;34m"

    def format_board(
        self,
        reveal_all: bool = False,
        highlight: Optional[Tuple[int, int]] = None,
    ) -> str:
        """
        Render the board as a multi-line string for terminal display.

        Args:
            reveal_all: If True, show mines and neighbor counts of hidden cells.
            highlight: Optional cell drawn in inverse video.

        Returns:
            A formatted multi-line string with coordinate labels and the board grid.
        """
        w, h = self.width, self.height

        def cell_str(x: int, y: int) -> str:
            cell = self[x, y]
            if cell.visibility is Visibility.HINTED and not reveal_all:
                s = f"{self._ANSI_HINT}F{self._ANSI_RESET}"
            elif reveal_all or cell.visibility is Visibility.REVEALED:
                if cell.mine:
                    s = f"{self._ANSI_MINE}*{self._ANSI_RESET}"
                else:
                    s = str(cell.neighbors)
            else:
                s = "."
            if highlight == (x, y):
                s = f"{self._ANSI_HIGHLIGHT}{s}{self._ANSI_RESET}"
            return s

        def c(s: str) -> str:
            return f"{self._ANSI_COORD}{s}{self._ANSI_RESET}"

        header_cells = " ".join(f"{x:2d}" for x in range(w))
        out = [c("   ") + c(header_cells)]
        out.append(c("   " + "-" * (3 * w - 1)))

        for y in range(h):
            row_cells = " ".join(f" {cell_str(x, y)}" for x in range(w))
            out.append(c(f"{y:2d} ") + c("|") + row_cells)

        return "\n".join(out)
