"""Command line driver for the TGA codec.

Usage examples:
  tgaimage info image.tga
  tgaimage to-png image.tga [image.png]
  tgaimage from-image photo.png photo.tga
  tgaimage blank 64 32 canvas.tga --color 0,255,0,255
  tgaimage normalize rle_top_left.tga plain.tga
  tgaimage diff ref.tga test.tga --threshold 1
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .errors import TGAError
from .extension import DEFAULT_AUTHOR
from .image import Color, TGAImage

logger = logging.getLogger(__name__)


def parse_color(value: str) -> Color:
    parts = value.split(",")
    if len(parts) not in (3, 4):
        raise argparse.ArgumentTypeError("color must be r,g,b or r,g,b,a")
    try:
        channels = [int(p.strip()) for p in parts]
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid color: {value}") from None
    if any(c < 0 or c > 255 for c in channels):
        raise argparse.ArgumentTypeError("color channels must be in 0..255")
    return Color(*channels)


def save_options(args: argparse.Namespace) -> Tuple[str, Optional[datetime]]:
    return args.author, (datetime.now() if args.stamp else None)


def cmd_info(args: argparse.Namespace) -> int:
    img = TGAImage.load(args.path)
    hdr = img.header
    cms = hdr.color_map_spec
    spec = hdr.image_spec
    print(f"file: {args.path}")
    print(f"image type: {hdr.image_type} ({hdr.describe_type()})")
    print(f"size: {spec.width} x {spec.height}")
    print(f"origin: {spec.x_origin},{spec.y_origin}")
    print(f"bits per pixel: {spec.bits_per_pixel} (alpha {hdr.alpha_depth})")
    print(f"image id: {hdr.id_length} bytes")
    if hdr.has_color_map:
        print(f"color map: {cms.length} entries from {cms.first_entry_index}, {cms.bits_per_pixel} bits")
    print(f"format: {'TGA 2.0' if img.footer.is_new_format else 'TGA 1.0'}")
    ext = img.extension
    if ext is not None:
        print(f"author: {ext.author}")
        for line in ext.comments:
            if line:
                print(f"comment: {line}")
        if ext.timestamp is not None:
            print(f"date: {ext.timestamp.isoformat(sep=' ')}")
        if ext.job:
            print(f"job: {ext.job}")
        if ext.software:
            letter = ext.software_letter.decode("ascii", "replace").strip()
            print(f"software: {ext.software} {ext.software_version / 100:.2f}{letter}")
    return 0


def cmd_to_png(args: argparse.Namespace) -> int:
    in_path = Path(args.input)
    out_path = Path(args.output) if args.output else in_path.with_suffix(".png")
    img = TGAImage.load(in_path)
    img.to_pil().save(out_path, format="PNG")
    print(f"wrote {out_path}")
    return 0


def cmd_from_image(args: argparse.Namespace) -> int:
    try:
        with Image.open(args.input) as src:
            img = TGAImage.from_pil(src)
    except OSError as e:
        print(f"cannot open image: {e}", file=sys.stderr)
        return 1
    author, timestamp = save_options(args)
    img.save(args.output, author=author, timestamp=timestamp)
    print(f"wrote {args.output}")
    return 0


def cmd_blank(args: argparse.Namespace) -> int:
    img = TGAImage.blank(args.width, args.height, args.color)
    author, timestamp = save_options(args)
    img.save(args.output, author=author, timestamp=timestamp)
    print(f"wrote {args.output}")
    return 0


def cmd_normalize(args: argparse.Namespace) -> int:
    img = TGAImage.load(args.input)
    author, timestamp = save_options(args)
    img.save(args.output, author=author, timestamp=timestamp)
    print(f"wrote {args.output}")
    return 0


def compare(ref: TGAImage, test: TGAImage, threshold: int) -> Tuple[int, float, int]:
    total = 0
    max_diff = 0
    mismatch = 0
    for a, b in zip(ref.pixels, test.pixels):
        d = abs(a - b)
        total += d
        if d > max_diff:
            max_diff = d
        if d > threshold:
            mismatch += 1
    count = len(ref.pixels)
    mean = (total / count) if count else 0.0
    return max_diff, mean, mismatch


def cmd_diff(args: argparse.Namespace) -> int:
    ref = TGAImage.load(args.ref)
    test = TGAImage.load(args.test)
    if (ref.width, ref.height) != (test.width, test.height):
        print(f"size mismatch: ref={ref.width}x{ref.height} test={test.width}x{test.height}")
        return 1
    if ref.bytes_per_pixel != test.bytes_per_pixel:
        print(f"depth mismatch: ref={ref.bytes_per_pixel * 8} test={test.bytes_per_pixel * 8} bits")
        return 1
    max_diff, mean, mismatch = compare(ref, test, args.threshold)
    print(f"max diff: {max_diff}")
    print(f"mean diff: {mean:.4f}")
    print(f"mismatch bytes (> {args.threshold}): {mismatch}")
    return 1 if mismatch > 0 else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tgaimage", description="Inspect and convert TGA images.")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    parser.add_argument("--author", default=DEFAULT_AUTHOR, help="author name written into the extension area")
    parser.add_argument("--stamp", action="store_true", help="write the current date into the extension area")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("info", help="print header, footer and extension area fields")
    p.add_argument("path")
    p.set_defaults(func=cmd_info)

    p = sub.add_parser("to-png", help="convert a TGA image to PNG")
    p.add_argument("input")
    p.add_argument("output", nargs="?", help="output path (default: input with .png suffix)")
    p.set_defaults(func=cmd_to_png)

    p = sub.add_parser("from-image", help="convert any image Pillow can read to a 32-bit TGA")
    p.add_argument("input")
    p.add_argument("output")
    p.set_defaults(func=cmd_from_image)

    p = sub.add_parser("blank", help="write a blank 32-bit canvas")
    p.add_argument("width", type=int)
    p.add_argument("height", type=int)
    p.add_argument("output")
    p.add_argument("--color", type=parse_color, default=Color(0, 0, 0, 255), help="fill color r,g,b[,a]")
    p.set_defaults(func=cmd_blank)

    p = sub.add_parser("normalize", help="rewrite uncompressed with a bottom-left origin")
    p.add_argument("input")
    p.add_argument("output")
    p.set_defaults(func=cmd_normalize)

    p = sub.add_parser("diff", help="compare the pixel data of two TGA images")
    p.add_argument("ref", help="reference .tga path")
    p.add_argument("test", help="test .tga path")
    p.add_argument("--threshold", type=int, default=0, help="per-channel diff threshold")
    p.set_defaults(func=cmd_diff)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )
    try:
        return args.func(args)
    except TGAError as e:
        logger.debug("command failed", exc_info=True)
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
