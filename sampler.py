"""
Random draws over a transition model.

All draws come from the operating system's secure random source, so there is
no generator state to seed or share between runs.
"""

import secrets
from typing import Optional

from color_codec import Color, decode, encode


def random_index(n: int) -> int:
    """Uniform random integer in [0, n)."""
    if n <= 0:
        raise ValueError(f"Cannot draw an index from an empty range (n={n})")
    return secrets.randbelow(n)


def random_choice(values: list):
    return values[random_index(len(values))]


def next_color(model, color) -> Optional[Color]:
    """
    Draw the color that follows `color` in the chain.

    Returns None when the color has no recorded transitions.
    """
    values = model.states.get(encode(color, model.threshold))
    if not values:
        return None
    return decode(random_choice(values))


def random_color(model) -> Color:
    """Draw a color uniformly from the model's distinct states."""
    if not model.keys:
        raise ValueError("Transition model is empty; build it from an image first")
    return decode(random_choice(model.keys))


def random_point(bounds) -> tuple[int, int]:
    """Uniform random (x, y) coordinate within bounds."""
    if bounds.is_empty():
        raise ValueError(f"Cannot pick a point in empty bounds {bounds.width}x{bounds.height}")
    x = bounds.min_x + random_index(bounds.width)
    y = bounds.min_y + random_index(bounds.height)
    return x, y
