# palette_remap/codec/text.py
from __future__ import annotations

"""
Line-based palette formats: JASC-PAL, GIMP (.gpl) and Paint.NET (.txt).

JASC      : strict. Header, version, count, then exactly `count` "R G B" lines.
GIMP      : tolerant. Metadata and comment lines are skipped, and so are lines
            without three leading channel values.
Paint.NET : ';' comments, one AARRGGBB (or RRGGBB) hex value per line.
"""

import re
from pathlib import Path
from typing import List, Optional

from ..core_types import Color, ColorPalette
from ..errors import TruncatedDataError, UnsupportedFormatError
from ..utils import debug_log

JASC_VERSION = "0100"
GIMP_SKIP_PREFIXES = ("Name:", "Columns:", "#")
GIMP_ENTRY_NAME = "Untitled"
PAINT_NET_TITLE = "; Paint.NET Palette"

_HEX_PREFIX = re.compile(r"[0-9A-Fa-f]+")


def _lines(data: bytes) -> List[str]:
    return data.decode("latin-1").splitlines()


def _channel(token: str) -> Optional[int]:
    try:
        value = int(token, 10)
    except ValueError:
        return None
    return value if 0 <= value <= 255 else None


# JASC-PAL


def read_jasc(data: bytes) -> ColorPalette:
    lines = _lines(data)
    if len(lines) < 3:
        raise TruncatedDataError("JASC palette is missing its header lines")
    try:
        count = int(lines[2].strip())
    except ValueError:
        raise UnsupportedFormatError(
            f"JASC colour count is not a number: {lines[2].strip()!r}"
        ) from None
    if count < 1:
        raise UnsupportedFormatError(f"JASC palette declares {count} colours")

    entries = [ln for ln in lines[3:] if ln.strip()]
    if len(entries) < count:
        raise TruncatedDataError(
            f"JASC palette declares {count} colours, file holds {len(entries)}"
        )

    colors: List[Color] = []
    for lineno, line in enumerate(entries[:count], start=1):
        tokens = line.split()
        channels = [_channel(t) for t in tokens[:3]]
        if len(channels) < 3 or None in channels:
            raise UnsupportedFormatError(f"JASC entry {lineno} is malformed: {line!r}")
        colors.append(Color(*channels))  # type: ignore[arg-type]
    return ColorPalette(tuple(colors))


def encode_jasc(palette: ColorPalette) -> bytes:
    out = ["JASC-PAL", JASC_VERSION, str(len(palette))]
    out += [f"{c.r} {c.g} {c.b}" for c in palette]
    return ("\n".join(out) + "\n").encode("ascii")


# GIMP


def read_gimp(data: bytes, *, debug: bool = False) -> ColorPalette:
    colors: List[Color] = []
    skipped = 0
    # First line is the "GIMP Palette" signature.
    for line in _lines(data)[1:]:
        stripped = line.strip()
        if not stripped or stripped.startswith(GIMP_SKIP_PREFIXES):
            continue
        tokens = stripped.split()
        channels = [_channel(t) for t in tokens[:3]]
        if len(channels) < 3 or None in channels:
            skipped += 1
            if debug:
                debug_log(f"gimp: skipped line {stripped!r}")
            continue
        colors.append(Color(*channels))  # type: ignore[arg-type]

    if debug and skipped:
        debug_log(f"gimp: {skipped} malformed line(s) skipped")
    if not colors:
        raise UnsupportedFormatError("GIMP palette contains no colours")
    return ColorPalette(tuple(colors))


def encode_gimp(palette: ColorPalette, name: str) -> bytes:
    out = ["GIMP Palette", f"Name: {name}", "Columns: 0", "#"]
    out += [f"{c.r:3d} {c.g:3d} {c.b:3d}\t{GIMP_ENTRY_NAME}" for c in palette]
    return ("\n".join(out) + "\n").encode("latin-1", errors="replace")


# Paint.NET


def read_paintnet(data: bytes) -> ColorPalette:
    colors: List[Color] = []
    for lineno, line in enumerate(_lines(data), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith(";"):
            continue
        match = _HEX_PREFIX.match(stripped)
        if match is None:
            raise UnsupportedFormatError(
                f"Paint.NET line {lineno} is not a hex colour: {stripped!r}"
            )
        # Alpha (the top byte of AARRGGBB) is ignored.
        colors.append(Color.from_packed(int(match.group(0), 16) & 0xFFFFFF))
    if not colors:
        raise UnsupportedFormatError("Paint.NET palette contains no colours")
    return ColorPalette(tuple(colors))


def encode_paintnet(palette: ColorPalette, name: str) -> bytes:
    out = [PAINT_NET_TITLE, f"; {name}"]
    out += [f"{c.packed():08X}" for c in palette]
    return ("\n".join(out) + "\n").encode("latin-1", errors="replace")


def palette_name_for(path: Path) -> str:
    """Name recorded inside GIMP / Paint.NET files."""
    return Path(path).stem


__all__ = [
    "read_jasc",
    "encode_jasc",
    "read_gimp",
    "encode_gimp",
    "read_paintnet",
    "encode_paintnet",
    "palette_name_for",
]
