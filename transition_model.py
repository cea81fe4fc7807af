"""
Color transition model built from the orthogonal adjacencies of an image.

Each quantized color is a state. Scanning the image records, for every
pixel, the colors of its in-bounds left/up/right/down neighbors as outgoing
transitions of that pixel's color. Transition lists keep duplicates and
discovery order: how often a neighbor color repeats is its weight.
"""

from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from color_codec import DEFAULT_THRESHOLD, check_threshold, encode, encode_grid


# Neighbor offsets (dx, dy): left, up, right, down
ADJACENT = ((-1, 0), (0, -1), (1, 0), (0, 1))


@dataclass(frozen=True)
class Bounds:
    """Rectangle of pixel coordinates; max is exclusive."""
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_shape(cls, shape: tuple) -> 'Bounds':
        """Bounds of a (height, width, ...) array anchored at the origin."""
        h, w = shape[:2]
        return cls(0, 0, w, h)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x

    @property
    def height(self) -> int:
        return self.max_y - self.min_y

    @property
    def shape(self) -> tuple[int, int]:
        return (self.height, self.width)

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x < self.max_x and self.min_y <= y < self.max_y


def expected_transition_count(width: int, height: int) -> int:
    """Number of ordered (pixel, in-bounds neighbor) pairs in a w x h grid."""
    if width <= 0 or height <= 0:
        return 0
    return 2 * (2 * width * height - width - height)


@dataclass
class TransitionModel:
    """Markov state space of an image's colors."""
    threshold: int = DEFAULT_THRESHOLD
    states: dict = field(default_factory=dict)  # key -> [neighbor keys]
    keys: list = field(default_factory=list)  # distinct source keys, first-seen order
    bounds: Optional[Bounds] = None

    def __post_init__(self):
        check_threshold(self.threshold)

    def add_transition(self, c1, c2) -> None:
        """Record that color c2 was seen next to color c1."""
        self._add_key_transition(encode(c1, self.threshold), encode(c2, self.threshold))

    def _register(self, key: int) -> list:
        values = self.states.get(key)
        if values is None:
            values = self.states[key] = []
            self.keys.append(key)
        return values

    def _add_key_transition(self, key1: int, key2: int) -> None:
        self._register(key1).append(key2)

    def build_from_grid(self, grid: np.ndarray, bounds: Optional[Bounds] = None) -> 'TransitionModel':
        """
        Scan an (h, w, 4) RGBA grid and record every orthogonal adjacency.

        Pixels are visited column by column (x outer, y inner). Neighbors
        outside the bounds are skipped, so corner pixels contribute two
        transitions, edge pixels three and interior pixels four. Every pixel
        color becomes a state even when it has no neighbors (a 1x1 image).

        Raises:
            ValueError: If the bounds do not match the grid's shape
        """
        if bounds is None:
            bounds = Bounds.from_shape(grid.shape)
        if grid.shape[:2] != bounds.shape:
            raise ValueError(
                f"Grid of shape {grid.shape[:2]} does not match bounds "
                f"{bounds.width}x{bounds.height}"
            )

        encoded = encode_grid(grid, self.threshold).tolist()
        h, w = bounds.shape

        for x in range(w):
            for y in range(h):
                key = encoded[y][x]
                self._register(key)
                for dx, dy in ADJACENT:
                    nx, ny = x + dx, y + dy
                    if 0 <= nx < w and 0 <= ny < h:
                        self._add_key_transition(key, encoded[ny][nx])

        self.bounds = bounds
        return self

    def transitions(self, color) -> list:
        """Transition keys recorded for a color (empty if never seen)."""
        return self.states.get(encode(color, self.threshold), [])

    def __contains__(self, color) -> bool:
        return encode(color, self.threshold) in self.states

    def __len__(self) -> int:
        return len(self.keys)

    @property
    def num_states(self) -> int:
        return len(self.keys)

    @property
    def num_transitions(self) -> int:
        return sum(len(values) for values in self.states.values())

    def summary(self) -> dict:
        """Headline numbers for reporting."""
        return {
            'states': self.num_states,
            'transitions': self.num_transitions,
            'threshold': self.threshold,
            'width': self.bounds.width if self.bounds else 0,
            'height': self.bounds.height if self.bounds else 0,
        }
