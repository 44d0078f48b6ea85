#!/usr/bin/env python3
"""
remap.py
Remap an image onto a fixed palette and write an indexed PNG.

Usage:
  python remap.py INPUT PALETTE OUTPUT [--bits 4|8] [--range MIN-MAX | --slot N|auto]
                  [--method nearest|quantizer] [--mask] [--export-palette PATH]
                  [--export-format NAME] [--debug]

Palette:
  .act, .pal (RIFF or JASC), .gpl, .txt (Paint.NET) palette files, sniffed by
  content; or an image, whose embedded palette is reused when it has one and
  whose distinct pixel colours are used otherwise.

Methods:
  nearest   : per-pixel CIEDE2000 nearest colour. Ties go to the lowest index.
  quantizer : Pillow quantizer pinned to the palette colours, no dithering.

Output:
  PNG indexed at 4 bits (16-colour window, searched with --slot auto) or
  8 bits (bytes offset by the start of --range so they address the master
  palette). --mask also writes <OUTPUT stem>_mask.png.

Exit status:
  0 on success, 1 when any stage fails, 2 on bad arguments.
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from palette_remap.codec import write_palette
from palette_remap.config import METHODS, RemapConfig
from palette_remap.core_types import ColorPalette, QuantizedRaster
from palette_remap.errors import RemapError
from palette_remap.image_io import decode_image, encode_indexed_png, save_rgba_png
from palette_remap.packer import build_mask, pack_indices
from palette_remap.palette_source import load_palette_source
from palette_remap.quant import remap
from palette_remap.utils import (
    # formatting
    format_seconds_compact,
    format_total_duration_compact,
    # pretty logging
    debug_log,
    error,
    key_value_pairs_to_string,
    log,
    print_banner,
    print_config_line,
)

# CLI args


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="remap",
        description="Remap an image onto a fixed palette and write an indexed PNG.",
    )
    parser.add_argument("input", type=Path, help="Input image")
    parser.add_argument("palette", type=Path, help="Palette file or palette image")
    parser.add_argument("output", type=Path, help="Output PNG")
    parser.add_argument(
        "--range",
        metavar="MIN-MAX",
        default=None,
        help="Restrict matching to palette entries MIN..MAX (inclusive).",
    )
    parser.add_argument(
        "--bits", type=int, choices=[4, 8], default=8, help="Output bit depth."
    )
    parser.add_argument(
        "--slot",
        metavar="N|auto",
        default=None,
        help='Match against 16-colour window N, or "auto" to pick the best one.',
    )
    parser.add_argument(
        "--mask", action="store_true", help="Also write an opaque-white alpha mask."
    )
    parser.add_argument(
        "--method", choices=list(METHODS), default="nearest", help="Matching method."
    )
    parser.add_argument(
        "--export-palette",
        type=Path,
        default=None,
        help="Write the palette used by the output PNG to this file.",
    )
    parser.add_argument(
        "--export-format",
        default=None,
        help="act, riff, jasc, gimp or paintnet. Default follows the extension.",
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    return parser


def parse_cli_args(argv: Optional[List[str]] = None) -> RemapConfig:
    """Parse argv into an immutable RemapConfig. Invalid combinations exit with 2."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return RemapConfig.from_args(args)
    except ValueError as e:
        parser.error(str(e))
        raise  # unreachable; parser.error exits


def output_palette(result: QuantizedRaster, master: ColorPalette) -> ColorPalette:
    """
    Palette written into the PNG: the matched window at 4 bits, the master
    palette up to the end of the window at 8 bits.
    """
    if result.bit_depth == 4:
        return result.palette
    return master.window(0, result.range_min + len(result.palette) - 1)


# Pipeline


def run(config: RemapConfig) -> QuantizedRaster:
    """Run one remap start to finish. Raises RemapError on any failure."""
    debug = config.debug
    t_start = time.perf_counter()

    palette = load_palette_source(config.palette, debug=debug)
    decoded = decode_image(config.input, mode="RGBA")
    t_loaded = time.perf_counter()
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Input", f"{decoded.width}x{decoded.height}"),
                    ("Palette entries", len(palette)),
                    ("Transparent index", palette.transparent_index),
                    ("Load", format_seconds_compact(t_loaded - t_start)),
                ]
            )
        )

    result = remap(decoded.pixels, palette, config)
    t_mapped = time.perf_counter()

    offset = result.range_min if result.bit_depth == 8 else 0
    packed = pack_indices(result.indices, result.bit_depth, offset)
    out_palette = output_palette(result, palette)
    encode_indexed_png(
        config.output,
        packed,
        decoded.width,
        decoded.height,
        result.bit_depth,
        out_palette,
    )
    if config.mask:
        mask_path = save_rgba_png(config.mask_path, build_mask(decoded.pixels))
        log(f"Wrote mask {mask_path.name}")
    if config.export_palette is not None and config.export_format is not None:
        write_palette(config.export_palette, out_palette, config.export_format)
        log(
            f"Wrote palette {config.export_palette.name} "
            f"({config.export_format.value}, {len(out_palette)} colours)"
        )
    t_saved = time.perf_counter()

    log(
        f"Wrote {config.output.name} | size={decoded.width}x{decoded.height} "
        f"| bits={result.bit_depth} | palette_size={len(out_palette)}"
    )
    log(
        key_value_pairs_to_string(
            [
                ("Window", f"{result.range_min}-{result.range_min + len(result.palette) - 1}"),
                ("Slot", "-" if result.slot is None else result.slot),
                ("Error", result.error),
            ]
        )
    )
    if debug:
        debug_log(
            f"Total {format_total_duration_compact(t_saved - t_start)}  "
            f"(load={format_seconds_compact(t_loaded - t_start)}, "
            f"map={format_seconds_compact(t_mapped - t_loaded)}, "
            f"save={format_seconds_compact(t_saved - t_mapped)})"
        )
    else:
        log(f"Total time {format_total_duration_compact(t_saved - t_start)}")
    return result


# Entry point


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point. Returns the process exit status."""
    config = parse_cli_args(argv)
    print_banner(config.input.name)
    print_config_line(
        "run",
        [
            ("Bits", config.bits),
            ("Method", config.method),
            ("Range", "-" if config.range is None else f"{config.range[0]}-{config.range[1]}"),
            ("Slot", "-" if config.slot is None else config.slot),
            ("Mask", config.mask),
        ],
        debug=False,
    )
    try:
        run(config)
    except RemapError as e:
        error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
