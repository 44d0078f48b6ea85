# palette_remap/codec/embedded.py
from __future__ import annotations

"""
Palettes embedded in raster files (PNG PLTE, GIF, 8-bit BMP), read with Pillow.
"""

import io

from PIL import Image, UnidentifiedImageError

from ..core_types import NO_TRANSPARENCY, ColorPalette
from ..errors import (
    FileAccessError,
    RemapError,
    TruncatedDataError,
    UnsupportedColorModeError,
    UnsupportedFormatError,
)

PALETTE_MODES = ("P", "PA")


def _transparent_index(im: Image.Image, count: int) -> int:
    """tRNS as a single index, or the first fully transparent entry of a table."""
    trns = im.info.get("transparency")
    if isinstance(trns, int):
        return trns if 0 <= trns < count else NO_TRANSPARENCY
    if isinstance(trns, (bytes, bytearray)):
        for i, alpha in enumerate(trns[:count]):
            if alpha == 0:
                return i
    return NO_TRANSPARENCY


def palette_from_image(im: Image.Image) -> ColorPalette:
    """Ordered palette of an opened paletted image."""
    if im.mode not in PALETTE_MODES:
        raise UnsupportedColorModeError(
            f"image mode {im.mode} has no palette", stage="palette"
        )
    flat = im.getpalette("RGB")
    if not flat:
        raise UnsupportedColorModeError("image has no palette chunk", stage="palette")
    rows = [flat[i : i + 3] for i in range(0, len(flat) - 2, 3)]
    return ColorPalette.from_rgb(rows, _transparent_index(im, len(rows)))


def image_decode_error(exc: Exception, what: str, *, stage: str) -> RemapError:
    """
    Map a Pillow failure onto the error taxonomy. OS errors with an errno are
    file access problems; the rest are broken or cut-short image data.
    """
    if isinstance(exc, UnidentifiedImageError):
        return UnsupportedFormatError(f"cannot decode {what}: {exc}", stage=stage)
    if isinstance(exc, OSError) and exc.errno is not None:
        return FileAccessError(f"cannot open {what}: {exc.strerror or exc}", stage=stage)
    if "truncated" in str(exc).lower():
        return TruncatedDataError(f"{what} is truncated: {exc}", stage=stage)
    return UnsupportedFormatError(f"cannot decode {what}: {exc}", stage=stage)


def read_embedded_palette(data: bytes) -> ColorPalette:
    """Decode image bytes and return their embedded palette."""
    try:
        with Image.open(io.BytesIO(data)) as im:
            im.load()
            return palette_from_image(im)
    except (OSError, SyntaxError) as e:
        raise image_decode_error(e, "image palette", stage="palette") from e


__all__ = ["palette_from_image", "image_decode_error", "read_embedded_palette"]
