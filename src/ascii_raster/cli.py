# cli.py
import argparse
import logging
import math
import sys
from typing import Optional, Sequence

from . import __version__
from .errors import AsciiRasterError
from .image_to_ascii import convert_file
from .options import DEFAULT_CHAR_RATIO, ConversionConfig, OutputMode, Size

LOG = logging.getLogger("ascii_raster")


def setup_logging(debug: bool, log_path: str | None = None) -> None:
    level = logging.DEBUG if debug else logging.WARNING
    LOG.setLevel(logging.DEBUG if (debug or log_path) else logging.WARNING)

    fmt = logging.Formatter("%(levelname)s: %(message)s")

    handlers: list[logging.Handler] = []

    sh = logging.StreamHandler(sys.stderr)
    sh.setLevel(level)
    sh.setFormatter(fmt)
    handlers.append(sh)

    if log_path:
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s: %(message)s"))
        handlers.append(fh)

    LOG.handlers[:] = handlers
    LOG.propagate = False       # prevent double logging via root logger


# -----------------------------
# Argument types / conversions
# -----------------------------

def positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {n}")
    return n


def positive_float(value: str) -> float:
    try:
        f = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {value!r}")
    if not math.isfinite(f) or f <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive number, got {value}")
    return f


def size_from_name(name: str) -> Size:
    return Size(name)


def mode_from_name(name: str) -> OutputMode:
    return OutputMode(name)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="ascii-raster",
        description="Convert an image to ASCII art, optionally in 24-bit color",
    )
    ap.add_argument("-i", "--image", required=True, help="Path to the image file")
    ap.add_argument(
        "-s",
        "--size",
        choices=[s.value for s in Size],
        default=Size.MEDIUM.value,
        help="Output size preset: small=60, medium=100, large=150 columns",
    )
    ap.add_argument(
        "-m",
        "--mode",
        choices=[m.value for m in OutputMode],
        default=OutputMode.COLOR.value,
        help="monochrome = plain glyphs; color = ANSI truecolor glyphs",
    )
    ap.add_argument(
        "-w",
        "--width",
        type=positive_int,
        default=None,
        help="Custom width in columns (overrides --size)",
    )
    ap.add_argument(
        "-r",
        "--char-ratio",
        type=positive_float,
        default=DEFAULT_CHAR_RATIO,
        help="Character aspect ratio adjustment (default: %(default)s)",
    )
    ap.add_argument(
        "-j",
        "--jobs",
        type=positive_int,
        default=None,
        help="Worker threads used to render rows (default: executor default)",
    )
    ap.add_argument("--debug", action="store_true", help="Log debug output to stderr")
    ap.add_argument("--log", default=None, help="Also write debug logs to FILE")
    ap.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def config_from_args(args: argparse.Namespace) -> ConversionConfig:
    return ConversionConfig(
        size=size_from_name(args.size),
        mode=mode_from_name(args.mode),
        custom_width=args.width,
        char_ratio=args.char_ratio,
    )


# -----------------------------
# main
# -----------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    try:
        args = build_parser().parse_args(argv)
    except SystemExit as se:
        code = se.code
        return code if isinstance(code, int) else 0

    setup_logging(args.debug, args.log)
    LOG.debug(
        "Args: image=%s size=%s mode=%s width=%s char_ratio=%s jobs=%s",
        args.image,
        args.size,
        args.mode,
        args.width,
        args.char_ratio,
        args.jobs,
    )

    try:
        config = config_from_args(args)
        art = convert_file(args.image, config, max_workers=args.jobs)
    except AsciiRasterError as e:
        LOG.debug("Conversion failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1

    print(art)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
