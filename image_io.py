"""
Decode images into RGBA pixel grids and encode grids back to files.

Only PNG is supported for now. Grids are uint8 arrays of shape
(height, width, 4) anchored at the origin.
"""

from dataclasses import dataclass
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from color_codec import samples_to_rgba8
from transition_model import Bounds


# =============================================================================
# Constants
# =============================================================================

SUPPORTED_FORMATS = ('PNG',)

# Image size limits (security: prevent decompression bombs)
MAX_IMAGE_PIXELS = 50_000_000  # 50 megapixels
MAX_IMAGE_DIMENSION = 10_000  # 10k pixels per side

# Pillow modes whose samples are wider than 8 bits
WIDE_MODES = {'I;16', 'I;16L', 'I;16B', 'I;16N', 'I'}


class UnsupportedFormatError(ValueError):
    """Raised for image formats the generator cannot read or write."""


@dataclass
class DecodedImage:
    """A decoded image ready for modeling."""
    grid: np.ndarray  # (h, w, 4) uint8 RGBA
    bounds: Bounds
    format: str  # Pillow format name, e.g. 'PNG'


def check_format(fmt: str) -> str:
    fmt = (fmt or '').upper()
    if fmt not in SUPPORTED_FORMATS:
        supported = ', '.join(f'"{f.lower()}"' for f in SUPPORTED_FORMATS)
        raise UnsupportedFormatError(
            f'file format "{fmt.lower()}" not supported; supported formats are: {supported}'
        )
    return fmt


def image_to_grid(img: Image.Image) -> np.ndarray:
    """
    Convert a Pillow image of any mode to an RGBA uint8 grid.

    16-bit grayscale samples keep their high byte.
    """
    if img.mode in WIDE_MODES:
        samples = np.array(img)[..., np.newaxis]
        return samples_to_rgba8(samples, bit_depth=16)

    return samples_to_rgba8(np.array(img.convert('RGBA')))


def load_image(image_path) -> DecodedImage:
    """
    Decode an image file into a pixel grid and its bounds.

    Raises:
        FileNotFoundError: If image file doesn't exist
        UnsupportedFormatError: If the file is not a PNG
        ValueError: If file is not a valid image, is corrupt or exceeds size limits
    """
    try:
        img = Image.open(image_path)
    except FileNotFoundError:
        raise FileNotFoundError(f"Image not found: {image_path}")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValueError(f"Could not open image: {e}")

    with img:
        fmt = check_format(img.format)

        width, height = img.size
        if width > MAX_IMAGE_DIMENSION or height > MAX_IMAGE_DIMENSION:
            raise ValueError(
                f"Image dimensions {width}x{height} exceed maximum "
                f"{MAX_IMAGE_DIMENSION}x{MAX_IMAGE_DIMENSION}"
            )
        if width * height > MAX_IMAGE_PIXELS:
            raise ValueError(
                f"Image has {width * height:,} pixels, exceeding maximum {MAX_IMAGE_PIXELS:,}"
            )

        # Pillow decodes lazily; truncated data only fails here
        try:
            grid = image_to_grid(img)
        except (Image.DecompressionBombError, OSError) as e:
            raise ValueError(f"Could not decode image: {e}")

    return DecodedImage(grid=grid, bounds=Bounds.from_shape(grid.shape), format=fmt)


def save_image(grid: np.ndarray, output_path, fmt: str = 'PNG') -> Path:
    """Encode an RGBA grid to a file, creating parent directories."""
    fmt = check_format(fmt)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(np.ascontiguousarray(grid, dtype=np.uint8)).save(output_path, format=fmt)
    return output_path
