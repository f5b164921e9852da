"""Bitset over the eight compass neighbors of a cell."""

from dataclasses import dataclass
from typing import Callable, List, Tuple

from .utils import COMPASS_OFFSETS


@dataclass(frozen=True)
class Adjacents:
    """
    Which of a cell's eight neighbors satisfy some predicate.

    Bit ``i`` corresponds to ``COMPASS_OFFSETS[i]``, so the mask reads
    NW, N, NE, E, SE, S, SW, W from the least significant bit upwards.
    """

    mask: int = 0

    @classmethod
    def from_predicate(
        cls, predicate: Callable[[int, int], bool], x: int, y: int
    ) -> "Adjacents":
        """
        Evaluate ``predicate`` on each neighbor of (x, y) in compass order.

        The predicate is responsible for bounds checking; out-of-bounds
        coordinates must evaluate to False.
        """
        mask = 0
        for bit, (dx, dy) in enumerate(COMPASS_OFFSETS):
            if predicate(x + dx, y + dy):
                mask |= 1 << bit
        return cls(mask)

    def count(self) -> int:
        """Number of set neighbors."""
        return bin(self.mask).count("1")

    def offsets(self) -> List[Tuple[int, int]]:
        """Offsets (dx, dy) of the set neighbors, in NW→N→NE→E→SE→S→SW→W order."""
        return [
            offset
            for bit, offset in enumerate(COMPASS_OFFSETS)
            if self.mask & (1 << bit)
        ]
