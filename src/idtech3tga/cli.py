"""Command-line entry point: convert a PNG to an idTech 3 RLE TGA.

Usage:
    idtech3-tga input.png [output.tga]
    python -m idtech3tga input.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from . import __version__
from .exceptions import TgaError
from .writer import convert

_LOGGER = logging.getLogger(__name__)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports usage errors with exit code 1."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(
            1,
            f"{self.prog}: error: {message}\n"
            f"Try '{self.prog} --help' for more information.\n",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="idtech3-tga",
        description="Convert a PNG image to an idTech 3 compatible RLE TGA.",
        epilog="Put -- before a path that starts with a dash: idtech3-tga -- -logo.png",
    )
    parser.add_argument("input", metavar="input.png", help="Source PNG image")
    parser.add_argument(
        "output",
        metavar="output.tga",
        nargs="?",
        help="Destination TGA (default: input path with .png replaced by .tga)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log conversion details to stderr.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        output = convert(args.input, args.output)
    except (TgaError, ValueError) as err:
        print(err, file=sys.stderr)
        return 1

    _LOGGER.debug("Output written to %s", output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
