#!/usr/bin/env python3
"""Batch generate Markov images for every PNG in a directory."""

import argparse
import sys
import time
from pathlib import Path

from color_codec import DEFAULT_THRESHOLD
from markov_image import generate


def find_images(directory: Path) -> list[Path]:
    """Find all PNG files in directory."""
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == '.png')


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Batch generate Markov images from a directory of PNGs.'
    )
    parser.add_argument(
        '--input', '-i',
        required=True,
        help='Directory containing source images'
    )
    parser.add_argument(
        '--output', '-o',
        required=True,
        help='Directory for generated images'
    )
    parser.add_argument(
        '--threshold', '-t',
        type=int,
        default=DEFAULT_THRESHOLD,
        help=f'Color quantization step (default: {DEFAULT_THRESHOLD})'
    )
    parser.add_argument(
        '--count', '-n',
        type=int,
        default=1,
        help='Images to generate per source (default: 1)'
    )

    args = parser.parse_args(argv)

    input_dir = Path(args.input)
    output_dir = Path(args.output)

    if not input_dir.is_dir():
        print(f"Error: Input directory not found: {input_dir}", file=sys.stderr)
        return 2

    output_dir.mkdir(parents=True, exist_ok=True)

    images = find_images(input_dir)
    if not images:
        print(f"No images found in {input_dir}", file=sys.stderr)
        return 2

    total = len(images)
    succeeded = 0
    failed = []

    batch_start = time.perf_counter()

    for i, image_path in enumerate(images, 1):
        try:
            img_start = time.perf_counter()
            output_path = output_dir / f"{image_path.stem}-markov.png"
            results = generate(
                image_path, output_path,
                threshold=args.threshold,
                count=args.count,
            )
            img_elapsed = time.perf_counter() - img_start

            worst = min(r.coverage for r in results)
            print(f"[{i}/{total}] {image_path.name} → {len(results)} image(s), "
                  f"{worst:.0%} covered ({img_elapsed:.2f}s)")
            succeeded += 1

        except (OSError, ValueError) as e:
            error_msg = f"{type(e).__name__}: {e}"
            print(f"[{i}/{total}] {image_path.name} → ERROR: {error_msg}", file=sys.stderr)
            failed.append((image_path.name, error_msg))

    batch_elapsed = time.perf_counter() - batch_start

    # Summary
    print()
    print(f"Completed: {succeeded}/{total} succeeded in {batch_elapsed:.2f}s")
    if succeeded > 0:
        print(f"Average: {batch_elapsed / succeeded:.2f}s per image")
    if failed:
        print(f"Failed ({len(failed)}):")
        for name, error in failed:
            print(f"  - {name}: {error}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
