# palette_remap/palette_source.py
from __future__ import annotations

"""
Palette source selection.

The extension only picks the entry point: palette files go through the codec
(which sniffs content), images contribute their embedded palette when they
have one and their unique pixel colours otherwise.
"""

from pathlib import Path
from typing import Union

from .codec import read_palette
from .core_types import ColorPalette
from .errors import UnsupportedColorModeError, UnsupportedFormatError
from .image_io import decode_image
from .quant.candidates import unique_raster_colours
from .utils import debug_log

PALETTE_EXTENSIONS = {".act", ".pal", ".gpl", ".txt"}
IMAGE_EXTENSIONS = {".png", ".bmp", ".gif", ".tga", ".jpg", ".jpeg", ".webp"}
MAX_RASTER_COLOURS = 256


def load_palette_source(path: Union[str, Path], *, debug: bool = False) -> ColorPalette:
    """Load the palette to match against from a palette file or an image."""
    path = Path(path)
    ext = path.suffix.lower()
    if ext in PALETTE_EXTENSIONS:
        return read_palette(path, debug=debug)
    if ext not in IMAGE_EXTENSIONS:
        supported = ", ".join(sorted(e.lstrip(".") for e in PALETTE_EXTENSIONS | IMAGE_EXTENSIONS))
        raise UnsupportedFormatError(
            f'the file extension "{ext or path.name}" is not supported; use one of: {supported}'
        )

    decoded = decode_image(path, mode="RGBA")
    if decoded.palette is not None:
        if debug:
            debug_log(f"palette: embedded palette of {len(decoded.palette)} entries")
        return decoded.palette

    palette = unique_raster_colours(decoded.pixels)
    if debug:
        debug_log(f"palette: {len(palette)} unique colours extracted from pixels")
    if len(palette) > MAX_RASTER_COLOURS:
        raise UnsupportedColorModeError(
            f"{path.name} has {len(palette):,} distinct colours; "
            f"a palette image may use at most {MAX_RASTER_COLOURS}",
            stage="palette",
        )
    return palette


__all__ = ["PALETTE_EXTENSIONS", "IMAGE_EXTENSIONS", "load_palette_source"]
