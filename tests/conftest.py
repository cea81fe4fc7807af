import numpy as np
import pytest
from PIL import Image

RED = (255, 0, 0, 255)
GREEN = (0, 255, 0, 255)
BLUE = (0, 0, 255, 255)
YELLOW = (255, 255, 0, 255)


@pytest.fixture
def four_color_grid():
    """2x2 grid: red (0,0), green (1,0), blue (0,1), yellow (1,1)."""
    grid = np.zeros((2, 2, 4), dtype=np.uint8)
    grid[0, 0] = RED
    grid[0, 1] = GREEN
    grid[1, 0] = BLUE
    grid[1, 1] = YELLOW
    return grid


@pytest.fixture
def striped_grid():
    """12x8 grid of vertical red/blue stripes two pixels wide."""
    grid = np.zeros((8, 12, 4), dtype=np.uint8)
    for x in range(12):
        grid[:, x] = RED if (x // 2) % 2 == 0 else BLUE
    return grid


@pytest.fixture
def write_png(tmp_path):
    def _write(grid, name='source.png'):
        path = tmp_path / name
        Image.fromarray(np.asarray(grid, dtype=np.uint8)).save(path, format='PNG')
        return path
    return _write
