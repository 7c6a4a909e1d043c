"""Convert every PNG under a directory to idTech 3 RLE TGA.

Usage:
    python examples/batch_convert.py textures/
    python examples/batch_convert.py textures/ --jobs 4 --recursive
"""

from __future__ import annotations

import argparse
import logging
from collections import Counter
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from idtech3tga import TgaError, convert


@dataclass
class ConversionResult:
    """Outcome of one file conversion."""

    source: Path
    output: Path | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def convert_one(source: Path) -> ConversionResult:
    """Convert one file; errors are returned, not raised, so one bad file doesn't stop the batch."""
    try:
        return ConversionResult(source=source, output=convert(source))
    except TgaError as err:
        return ConversionResult(source=source, error=str(err))


def find_sources(root: Path, recursive: bool) -> list[Path]:
    pattern = "**/*.png" if recursive else "*.png"
    return sorted(p for p in root.glob(pattern) if p.is_file())


def run(root: Path, jobs: int, recursive: bool) -> int:
    sources = find_sources(root, recursive)
    if not sources:
        print(f"No .png files found under {root}")
        return 0

    print(f"Converting {len(sources)} file(s) with {jobs} worker(s)...")

    # Conversions share no state, so each one can run in its own process
    if jobs > 1:
        with ProcessPoolExecutor(max_workers=jobs) as pool:
            results = list(pool.map(convert_one, sources))
    else:
        results = [convert_one(source) for source in sources]

    outcomes: Counter[str] = Counter()
    for result in results:
        if result.ok:
            outcomes["converted"] += 1
            print(f"  OK   {result.source} -> {result.output}")
        else:
            outcomes["failed"] += 1
            print(f"  FAIL {result.source}: {result.error}")

    print("\nSummary:")
    print(f"  converted={outcomes['converted']}")
    print(f"  failed={outcomes['failed']}")
    return 0 if outcomes["failed"] == 0 else 1


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Batch convert PNG images to idTech 3 compatible RLE TGA files."
    )
    parser.add_argument("root", type=Path, help="Directory containing .png files")
    parser.add_argument(
        "--jobs",
        type=int,
        default=1,
        help="Number of worker processes. Default: 1",
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="Also convert PNGs in subdirectories.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)
    return run(args.root, max(1, args.jobs), args.recursive)


if __name__ == "__main__":
    raise SystemExit(main())
