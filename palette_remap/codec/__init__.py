# palette_remap/codec/__init__.py
from __future__ import annotations

"""
Palette codec.

Reading sniffs file content (never the extension) and dispatches to one
reader per format. Writing takes an explicit PaletteFormat and commits the
file atomically.
"""

from pathlib import Path
from typing import Callable, Dict, Optional, Union

from ..core_types import NO_TRANSPARENCY, ColorPalette, PaletteFormat
from ..utils import debug_log, read_bytes, write_bytes_atomic
from .binary import encode_act, encode_riff, read_act, read_riff
from .embedded import image_decode_error, palette_from_image, read_embedded_palette
from .sniff import SniffResult, sniff_format
from .text import (
    encode_gimp,
    encode_jasc,
    encode_paintnet,
    palette_name_for,
    read_gimp,
    read_jasc,
    read_paintnet,
)

PathLike = Union[str, Path]

_READERS: Dict[SniffResult, Callable[[bytes], ColorPalette]] = {
    SniffResult.ACT: read_act,
    SniffResult.RIFF: read_riff,
    SniffResult.JASC: read_jasc,
    SniffResult.GIMP: read_gimp,
    SniffResult.PAINT_NET: read_paintnet,
    SniffResult.PNG: read_embedded_palette,
}


def decode_palette(data: bytes, *, debug: bool = False) -> ColorPalette:
    """Decode palette bytes of any supported format."""
    kind = sniff_format(data)
    if debug:
        debug_log(f"palette: sniffed {kind.value} ({len(data):,} bytes)")
    if kind is SniffResult.GIMP:
        return read_gimp(data, debug=debug)
    return _READERS[kind](data)


def read_palette(path: PathLike, *, debug: bool = False) -> ColorPalette:
    """Read a palette file. The returned palette carries its transparent index."""
    return decode_palette(read_bytes(path, stage="palette"), debug=debug)


def encode_palette(
    palette: ColorPalette,
    fmt: PaletteFormat,
    *,
    transparent_index: Optional[int] = None,
    name: str = "palette",
) -> bytes:
    """Serialise a palette. transparent_index defaults to the palette's own."""
    ti = palette.transparent_index if transparent_index is None else transparent_index
    if fmt is PaletteFormat.ACT:
        return encode_act(palette, ti)
    if fmt is PaletteFormat.RIFF:
        return encode_riff(palette)
    if fmt is PaletteFormat.JASC:
        return encode_jasc(palette)
    if fmt is PaletteFormat.GIMP:
        return encode_gimp(palette, name)
    if fmt is PaletteFormat.PAINT_NET:
        return encode_paintnet(palette, name)
    raise ValueError(f"unhandled palette format {fmt!r}")


def write_palette(
    path: PathLike,
    palette: ColorPalette,
    fmt: PaletteFormat,
    *,
    transparent_index: Optional[int] = None,
) -> Path:
    """Write palette to path in fmt. Nothing is left at path on failure."""
    data = encode_palette(
        palette, fmt, transparent_index=transparent_index, name=palette_name_for(Path(path))
    )
    return write_bytes_atomic(path, data, stage="write")


__all__ = [
    "NO_TRANSPARENCY",
    "SniffResult",
    "sniff_format",
    "decode_palette",
    "read_palette",
    "encode_palette",
    "write_palette",
    "palette_from_image",
    "image_decode_error",
]
