"""Enumerate every way to choose k of at most eight neighbor slots."""

from math import comb
from typing import Iterator, List, Tuple

MAX_SLOTS = 8

Mask = Tuple[bool, ...]


class CombinationIter:
    """
    Restartable sequence of all size-``k`` subsets of ``{0, ..., n-1}``.

    Each subset is yielded as an 8-long boolean mask (only the first ``n``
    positions are meaningful), in lexicographic index order. Iterating the
    same object twice yields the same sequence again.
    """

    def __init__(self, n: int, k: int) -> None:
        if not 0 <= n <= MAX_SLOTS:
            raise ValueError(f"n must be between 0 and {MAX_SLOTS}, got {n}.")
        if not 0 <= k <= n:
            raise ValueError(f"k must be between 0 and n={n}, got {k}.")
        self.n = n
        self.k = k

    def __iter__(self) -> Iterator[Mask]:
        n, k = self.n, self.k
        indices: List[int] = list(range(k))

        while True:
            mask = [False] * MAX_SLOTS
            for idx in indices:
                mask[idx] = True
            yield tuple(mask)

            # Advance the rightmost index that still has room, then reset the
            # ones after it to consecutive values.
            i = k - 1
            while i >= 0 and indices[i] == n - k + i:
                i -= 1
            if i < 0:
                return
            indices[i] += 1
            for j in range(i + 1, k):
                indices[j] = indices[j - 1] + 1

    def __len__(self) -> int:
        return comb(self.n, self.k)
