"""Utility functions for the logicsweeper board model and solver."""

from typing import Dict, List, Tuple

# Compass order NW, N, NE, E, SE, S, SW, W. Combination indices produced by the
# search are mapped back to physical neighbors through this order.
COMPASS_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, -1),
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
)

# Module-level cache: (width, height) -> {(x,y): ((nx,ny), ...), ...}
_NEIGHBORHOODS_CACHE: Dict[
    Tuple[int, int],
    Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]
] = {}


def get_neighborhoods(
    width: int, height: int
) -> Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]]:
    """
    Precompute and cache in-bounds 8-neighbors for every cell in a grid.

    Neighbors are listed in compass order (see ``COMPASS_OFFSETS``).

    Args:
        width: Grid width (number of columns). Must be positive.
        height: Grid height (number of rows). Must be positive.

    Returns:
        Mapping from each cell (x, y) to a tuple of valid neighboring
        coordinates (nx, ny).

    Raises:
        ValueError: If width or height is non-positive.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive.")

    key = (width, height)
    cached = _NEIGHBORHOODS_CACHE.get(key)
    if cached is not None:
        return cached

    neighborhoods: Dict[Tuple[int, int], Tuple[Tuple[int, int], ...]] = {}
    for y in range(height):
        for x in range(width):
            nbrs: List[Tuple[int, int]] = []
            for dx, dy in COMPASS_OFFSETS:
                nx, ny = x + dx, y + dy
                if 0 <= nx < width and 0 <= ny < height:
                    nbrs.append((nx, ny))
            neighborhoods[(x, y)] = tuple(nbrs)

    _NEIGHBORHOODS_CACHE[key] = neighborhoods
    return neighborhoods


def window(
    x: int, y: int, radius: int, width: int, height: int
) -> Tuple[int, int, int, int]:
    """Return the half-open (x_start, x_end, y_start, y_end) square around a cell, clipped to the grid."""
    return (
        max(x - radius, 0),
        min(x + radius + 1, width),
        max(y - radius, 0),
        min(y + radius + 1, height),
    )
