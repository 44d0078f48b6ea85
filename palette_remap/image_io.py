# palette_remap/image_io.py
from __future__ import annotations

"""
Raster I/O through Pillow: decode to RGB/RGBA arrays, write indexed PNGs at
4 or 8 bits with an explicit palette, and plain RGBA PNGs for masks.
"""

import io
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Union

import numpy as np
from PIL import Image

from .codec import image_decode_error, palette_from_image
from .core_types import NO_TRANSPARENCY, ColorPalette, U8Image
from .errors import UnsupportedColorModeError
from .packer import unpack_indices
from .utils import write_bytes_atomic

PathLike = Union[str, Path]
ChannelLayout = Literal["RGB", "RGBA"]


@dataclass(frozen=True)
class DecodedImage:
    pixels: U8Image  # (H, W, 3|4)
    width: int
    height: int
    palette: Optional[ColorPalette]  # native palette when the file is paletted


def decode_image(path: PathLike, mode: ChannelLayout = "RGBA") -> DecodedImage:
    """Load an image with Pillow, forcing the requested channel layout."""
    try:
        with Image.open(path) as im:
            im.load()
            native = palette_from_image(im) if im.mode in ("P", "PA") else None
            converted = im.convert(mode)
    except (OSError, SyntaxError) as e:
        raise image_decode_error(e, str(path), stage="decode") from e

    arr = np.array(converted, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[0] == 0 or arr.shape[1] == 0:
        raise UnsupportedColorModeError(f"{path} has no pixel data", stage="decode")
    return DecodedImage(arr, int(arr.shape[1]), int(arr.shape[0]), native)


def _png_bytes(im: Image.Image, **params) -> bytes:
    buf = io.BytesIO()
    im.save(buf, format="PNG", **params)
    return buf.getvalue()


def encode_indexed_png(
    path: PathLike,
    packed: bytes,
    width: int,
    height: int,
    bits: int,
    palette: ColorPalette,
) -> Path:
    """
    Write a palette-indexed PNG from a packed index buffer.

    For 8-bit buffers the bytes already include any window offset; the palette
    is the one those bytes address.
    """
    limit = 1 << bits
    if len(palette) > limit:
        raise UnsupportedColorModeError(
            f"{bits}-bit PNG holds {limit} colours, palette has {len(palette)}",
            stage="write",
        )
    indices = unpack_indices(packed, width * height, bits)
    im = Image.frombytes("P", (width, height), indices.tobytes())
    im.putpalette(palette.rgb_array().reshape(-1).tolist())

    params = {"bits": bits} if bits < 8 else {}
    if palette.transparent_index != NO_TRANSPARENCY:
        params["transparency"] = palette.transparent_index
    return write_bytes_atomic(path, _png_bytes(im, **params), stage="write")


def save_rgba_png(path: PathLike, rgba: U8Image) -> Path:
    """Save an (H,W,4) uint8 array as a PNG."""
    im = Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8))
    return write_bytes_atomic(path, _png_bytes(im), stage="write")


__all__ = [
    "ChannelLayout",
    "DecodedImage",
    "decode_image",
    "encode_indexed_png",
    "save_rgba_png",
]
