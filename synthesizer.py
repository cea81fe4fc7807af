"""
Synthesize a new image by a randomized flood fill over a transition model.

The fill starts from one random pixel with a random color from the model.
Every colored pixel taken off the frontier colors its still-empty orthogonal
neighbors with colors drawn from its own transition list, and those
neighbors join the frontier. The walk ends when the frontier is empty.
"""

from typing import Optional

import numpy as np
from scipy.ndimage import label

import sampler
from transition_model import ADJACENT, Bounds, TransitionModel


class RandomFrontier:
    """Stack whose pop returns a uniformly random entry."""

    def __init__(self):
        self._items = []

    def push(self, item) -> None:
        self._items.append(item)

    def pop(self):
        if not self._items:
            raise IndexError("pop from empty frontier")
        i = sampler.random_index(len(self._items))
        items = self._items
        items[i], items[-1] = items[-1], items[i]
        return items.pop()

    def __len__(self) -> int:
        return len(self._items)


def synthesize(model: TransitionModel, bounds: Optional[Bounds] = None) -> np.ndarray:
    """
    Generate an (h, w, 4) RGBA grid with the same bounds as the source.

    Cells the walk never reaches stay all-zero. That only happens when a
    reached color has no outgoing transitions.
    """
    grid, _ = fill(model, bounds)
    return grid


def fill(model: TransitionModel, bounds: Optional[Bounds] = None) -> tuple[np.ndarray, np.ndarray]:
    """
    Run the flood fill, returning the grid and the mask of colored cells.

    Raises:
        ValueError: If the model is empty or the bounds have no pixels
    """
    bounds = bounds or model.bounds
    if bounds is None:
        raise ValueError("No bounds given and the model was not built from a grid")
    if bounds.is_empty():
        raise ValueError(f"Cannot synthesize an empty {bounds.width}x{bounds.height} image")

    h, w = bounds.shape
    grid = np.zeros((h, w, 4), dtype=np.uint8)
    # A transparent black pixel is a legal color, so fill state is kept apart
    filled = np.zeros((h, w), dtype=bool)

    x, y = sampler.random_point(bounds)
    x, y = x - bounds.min_x, y - bounds.min_y
    grid[y, x] = sampler.random_color(model)
    filled[y, x] = True

    frontier = RandomFrontier()
    frontier.push((x, y))

    while len(frontier) > 0:
        x, y = frontier.pop()
        color = tuple(int(c) for c in grid[y, x])
        for dx, dy in ADJACENT:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < w and 0 <= ny < h) or filled[ny, nx]:
                continue
            next_color = sampler.next_color(model, color)
            if next_color is None:
                continue
            grid[ny, nx] = next_color
            filled[ny, nx] = True
            frontier.push((nx, ny))

    return grid, filled


# =============================================================================
# Coverage
# =============================================================================

def unset_mask(grid: np.ndarray) -> np.ndarray:
    """Boolean mask of pixels still at the all-zero sentinel.

    A synthesized transparent black pixel is indistinguishable from an
    unreached one here.
    """
    return ~np.any(grid != 0, axis=-1)


def coverage(grid: np.ndarray) -> float:
    """Fraction of pixels that were colored (0-1)."""
    mask = unset_mask(grid)
    if mask.size == 0:
        return 0.0
    return 1.0 - np.count_nonzero(mask) / mask.size


def unreached_regions(grid: np.ndarray, filled: Optional[np.ndarray] = None) -> int:
    """Number of 4-connected regions of unreached pixels.

    Uses the fill mask from `fill` when given, otherwise the sentinel.
    """
    mask = unset_mask(grid) if filled is None else ~filled
    _, num_regions = label(mask)
    return int(num_regions)
