#!/usr/bin/env python3
"""
Generate a new image from the color adjacencies of a source image.

Pipeline: Decode → Build transition model → Synthesize → Encode
"""

import numpy as np
from dataclasses import dataclass
from pathlib import Path

from color_codec import DEFAULT_THRESHOLD
from image_io import load_image, save_image
from synthesizer import fill, unreached_regions
from transition_model import Bounds, TransitionModel


# =============================================================================
# Constants
# =============================================================================

EXIT_FATAL = 1


@dataclass
class GeneratedImage:
    """One written output image."""
    path: Path
    coverage: float  # Fraction of pixels colored (0-1)
    unreached_regions: int  # 4-connected regions left at the sentinel


# =============================================================================
# Pipeline
# =============================================================================

def build_model(grid: np.ndarray, bounds: Bounds,
                threshold: int = DEFAULT_THRESHOLD) -> TransitionModel:
    """Build a transition model from a decoded RGBA grid."""
    return TransitionModel(threshold=threshold).build_from_grid(grid, bounds)


def numbered_paths(output_path: Path, count: int) -> list[Path]:
    """Output paths for `count` images: the path itself, or <stem>-<i><suffix>."""
    if count == 1:
        return [output_path]
    return [
        output_path.with_name(f"{output_path.stem}-{i}{output_path.suffix}")
        for i in range(1, count + 1)
    ]


def generate(input_path, output_path, threshold: int = DEFAULT_THRESHOLD,
             count: int = 1, verbose: bool = False) -> list[GeneratedImage]:
    """
    Run the full pipeline, writing `count` images generated from one model.

    Returns:
        One GeneratedImage per written file.

    Raises:
        FileNotFoundError: If the input image doesn't exist
        ValueError: On undecodable input, unsupported format or bad parameters
    """
    if count < 1:
        raise ValueError(f"count must be at least 1, got {count}")

    decoded = load_image(input_path)
    model = build_model(decoded.grid, decoded.bounds, threshold=threshold)

    if verbose:
        stats = model.summary()
        print(f"Image: {stats['width']}x{stats['height']} ({decoded.format.lower()})")
        print(f"States: {stats['states']:,}  Transitions: {stats['transitions']:,}")

    results = []
    for path in numbered_paths(Path(output_path), count):
        grid, filled = fill(model, decoded.bounds)
        save_image(grid, path, decoded.format)
        regions = 0 if filled.all() else unreached_regions(grid, filled)
        results.append(GeneratedImage(path, float(filled.mean()), regions))
        if verbose:
            print(f"Wrote: {path}")

    return results


# =============================================================================
# CLI
# =============================================================================

def main(argv=None) -> int:
    import argparse
    import sys

    parser = argparse.ArgumentParser(
        description='Generate a new image using Markov chaining over the colors of a source image.',
        epilog='Exit status: 0 on success, 1 if the image could not be read, generated or written, 2 on usage errors.'
    )
    parser.add_argument('input', help='Source image (.png)')
    parser.add_argument('output', help='Output image path (.png)')
    parser.add_argument(
        '--threshold', '-t',
        type=int,
        default=DEFAULT_THRESHOLD,
        help=f'Color quantization step; larger values merge similar colors (default: {DEFAULT_THRESHOLD})'
    )
    parser.add_argument(
        '--count', '-n',
        type=int,
        default=1,
        help='Number of images to generate from the same model (default: 1)'
    )
    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only print errors and warnings'
    )

    args = parser.parse_args(argv)

    try:
        results = generate(
            args.input, args.output,
            threshold=args.threshold,
            count=args.count,
            verbose=not args.quiet,
        )
    except FileNotFoundError as e:
        print(f"failed to read input file: {e}", file=sys.stderr)
        return EXIT_FATAL
    except ValueError as e:
        print(f"failed to generate image: {e}", file=sys.stderr)
        return EXIT_FATAL
    except OSError as e:
        print(f"failed to write output file: {e}", file=sys.stderr)
        return EXIT_FATAL

    for result in results:
        if result.coverage < 1.0:
            print(f"  Warning: {result.path.name} is only {result.coverage:.1%} covered, "
                  f"{result.unreached_regions} unreached region(s)", file=sys.stderr)

    return 0


if __name__ == '__main__':
    import sys
    sys.exit(main())
