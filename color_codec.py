"""
Color codec: map RGBA colors to compact 32-bit keys and back.

Colors are four 8-bit channels. Keys pack them as R in the highest byte down
to A in the lowest, so two colors are the same Markov state iff their keys
match after quantization.
"""

import numpy as np


# =============================================================================
# Constants
# =============================================================================

Color = tuple[int, int, int, int]  # RGBA 0-255

DEFAULT_THRESHOLD = 1  # Quantization step; 1 keeps all 256 levels
CHANNEL_MAX = 255


# =============================================================================
# Packing
# =============================================================================

def pack(channels) -> int:
    """Pack four 8-bit channels into a single 32-bit key."""
    r, g, b, a = channels
    return (int(r) & 0xFF) << 24 | (int(g) & 0xFF) << 16 | (int(b) & 0xFF) << 8 | (int(a) & 0xFF)


def unpack(key: int) -> Color:
    """Unpack a 32-bit key into its four 8-bit channels."""
    key = int(key)
    return (
        (key >> 24) & 0xFF,
        (key >> 16) & 0xFF,
        (key >> 8) & 0xFF,
        key & 0xFF,
    )


# =============================================================================
# Quantization
# =============================================================================

def check_threshold(threshold: int) -> None:
    if threshold <= 0:
        raise ValueError(f"Quantization threshold must be positive, got {threshold}")


def quantize(color, threshold: int = DEFAULT_THRESHOLD) -> Color:
    """
    Collapse near-identical colors onto a shared value.

    Each channel is reduced to the closest multiple of the threshold below it,
    so with a threshold of 3 a red value of 22 becomes 21. A threshold of 1
    leaves the color unchanged.
    """
    check_threshold(threshold)
    r, g, b, a = color
    return (
        (r // threshold) * threshold,
        (g // threshold) * threshold,
        (b // threshold) * threshold,
        (a // threshold) * threshold,
    )


def encode(color, threshold: int = DEFAULT_THRESHOLD) -> int:
    """Quantize a color and pack it into its state key."""
    return pack(quantize(color, threshold))


def decode(key: int) -> Color:
    """Turn a state key back into a color, alpha included as stored."""
    return unpack(key)


# =============================================================================
# Normalization
# =============================================================================

def to_rgba8(color, bit_depth: int = 8) -> Color:
    """
    Normalize a color of any channel layout to four 8-bit channels.

    Accepts gray, gray+alpha, RGB or RGBA tuples whose channels are
    `bit_depth` bits wide. Same rules as `samples_to_rgba8`.
    """
    pixel = samples_to_rgba8(np.asarray(color, dtype=np.int64)[np.newaxis, :], bit_depth)[0]
    return tuple(int(c) for c in pixel)


def samples_to_rgba8(samples: np.ndarray, bit_depth: int = 8) -> np.ndarray:
    """
    Normalize an array of samples to an RGBA uint8 array.

    The last axis holds 1 (gray), 2 (gray+alpha), 3 (RGB) or 4 (RGBA)
    channels, each `bit_depth` bits wide. Wider channels are truncated by
    dropping their low bits, and a missing alpha channel means fully opaque.
    """
    samples = np.asarray(samples)
    n = samples.shape[-1]
    if n not in (1, 2, 3, 4):
        raise ValueError(f"Unsupported color with {n} channels")

    shift = max(bit_depth - 8, 0)
    channels = ((samples.astype(np.int64) >> shift) & 0xFF).astype(np.uint8)

    if n in (1, 2):
        rgb = np.repeat(channels[..., :1], 3, axis=-1)
    else:
        rgb = channels[..., :3]
    if n in (2, 4):
        alpha = channels[..., -1:]
    else:
        alpha = np.full(channels.shape[:-1] + (1,), CHANNEL_MAX, dtype=np.uint8)
    return np.concatenate([rgb, alpha], axis=-1)


# =============================================================================
# Vectorized helpers
# =============================================================================

def encode_grid(grid: np.ndarray, threshold: int = DEFAULT_THRESHOLD) -> np.ndarray:
    """Encode every pixel of an (h, w, 4) uint8 grid into uint32 keys."""
    check_threshold(threshold)
    quantized = (grid.astype(np.uint32) // threshold) * threshold
    return (
        (quantized[..., 0] << 24)
        | (quantized[..., 1] << 16)
        | (quantized[..., 2] << 8)
        | quantized[..., 3]
    ).astype(np.uint32)

