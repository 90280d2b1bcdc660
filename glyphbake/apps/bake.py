#!/usr/bin/env python3
"""
Bake a font into <output>.json + <output>.tga.

Usage:
    glyphbake-bake MyFont.ttf out/myfont --size 20 --atlas 512x512 --first 32 --count 96
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

from glyphbake import log
from glyphbake.baking import FontBaker
from glyphbake.errors import GlyphBakeError
from glyphbake.resources import ResourceLoader
from glyphbake.settings import BakeRequest, BakerSettings


def parse_atlas_size(value: str) -> tuple[int, int]:
    """Parse "WxH" (or a single number for a square atlas)."""
    parts = value.lower().split("x")
    try:
        if len(parts) == 1:
            w = h = int(parts[0])
        elif len(parts) == 2:
            w, h = int(parts[0]), int(parts[1])
        else:
            raise ValueError(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"atlas size must look like 512x512, got {value!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"atlas size must be positive, got {value!r}")
    return w, h


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="glyphbake-bake", description="Bake a TrueType font into a bitmap atlas")
    p.add_argument("font", help="TrueType/OpenType font file")
    p.add_argument("output", nargs="?", default=None, help="output name without extension (default: font file stem)")
    p.add_argument("--size", type=float, default=None, help="pixel size")
    p.add_argument("--atlas", type=parse_atlas_size, default=None, help="atlas size, WxH")
    p.add_argument("--first", type=int, default=None, help="first codepoint")
    p.add_argument("--count", type=int, default=None, help="number of codepoints")
    p.add_argument("--padding", type=int, default=None, help="texels between glyphs")
    p.add_argument("--format", choices=("json", "fnt"), default="json", help="descriptor format")
    p.add_argument("--settings", default=None, help="settings JSON with defaults")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def request_from_args(args: argparse.Namespace, defaults: BakeRequest) -> BakeRequest:
    atlas_w, atlas_h = args.atlas if args.atlas is not None else defaults.atlas_size
    return BakeRequest(
        font_path=args.font,
        font_size=args.size if args.size is not None else defaults.font_size,
        atlas_width=atlas_w,
        atlas_height=atlas_h,
        first_char=args.first if args.first is not None else defaults.first_char,
        num_chars=args.count if args.count is not None else defaults.num_chars,
        padding=args.padding if args.padding is not None else defaults.padding,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    log.configure("DEBUG" if args.verbose else "INFO")

    settings = BakerSettings.load(args.settings)
    request = request_from_args(args, settings.request)

    try:
        result = FontBaker().bake(request, args.output or "")
        name = args.output or result.output_name
        descriptor_path, atlas_path = ResourceLoader(settings.output_dir).save_font(
            name, result.descriptor, result.atlas, args.format
        )
    except (GlyphBakeError, ValueError) as e:
        log.error(f"[Bake] {type(e).__name__}: {e}")
        return 1

    print(f"{descriptor_path}\n{atlas_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
