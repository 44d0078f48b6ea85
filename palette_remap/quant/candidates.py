# palette_remap/quant/candidates.py
from __future__ import annotations

"""
Candidate and source colour sets.

Candidates are the palette colours a pixel may be matched against,
deduplicated so no colour enters distance computation twice. Sources are the
unique colours of the raster being remapped, each converted to Lab once.
"""

from dataclasses import dataclass
from functools import cached_property

import numpy as np
from numpy.typing import NDArray

from ..colour_convert import rgb_to_lab
from ..core_types import ColorPalette, Lab, U8Image, assert_u8_image_rgb, pack_rgb_rows


def unpack_rgb_rows(packed: NDArray[np.integer]) -> NDArray[np.uint8]:
    """uint32 0xRRGGBB [...] -> uint8 [...,3]."""
    p = np.asarray(packed, dtype=np.uint32)
    return np.stack([(p >> 16) & 0xFF, (p >> 8) & 0xFF, p & 0xFF], axis=-1).astype(
        np.uint8
    )


@dataclass(frozen=True)
class CandidateSet:
    """
    Unique palette colours in first-occurrence order.

    rgb           : uint8 [K,3]
    lab           : float64 [K,3]
    palette_index : int64 [K], position of each candidate in the palette
    """

    rgb: NDArray[np.uint8]
    lab: Lab
    palette_index: NDArray[np.int64]

    def __len__(self) -> int:
        return int(self.rgb.shape[0])


def candidates_from_palette(palette: ColorPalette) -> CandidateSet:
    """Deduplicate a palette, keeping the first occurrence of each colour."""
    pal_rgb = palette.rgb_array()
    _, first = np.unique(pack_rgb_rows(pal_rgb), return_index=True)
    first = np.sort(first).astype(np.int64)
    rgb = pal_rgb[first]
    return CandidateSet(rgb=rgb, lab=rgb_to_lab(rgb), palette_index=first)


def unique_raster_colours(image: U8Image) -> ColorPalette:
    """
    Colours of a raster as a palette: alpha dropped, RGB taken as-is,
    sorted by packed 0xRRGGBB and collapsed to one entry per colour.
    """
    img = assert_u8_image_rgb(np.asarray(image))
    packed = np.unique(pack_rgb_rows(img[..., :3]).reshape(-1))
    return ColorPalette.from_rgb(unpack_rgb_rows(packed))


@dataclass(frozen=True)
class SourceColours:
    """
    A raster reduced to its unique colours.

    rgb     : uint8 [H,W,3] source pixels
    unique  : uint8 [U,3] unique colours, ascending packed order
    inverse : int64 [H*W], unique[inverse] rebuilds the flattened pixels
    """

    rgb: U8Image
    unique: NDArray[np.uint8]
    inverse: NDArray[np.int64]

    @property
    def height(self) -> int:
        return int(self.rgb.shape[0])

    @property
    def width(self) -> int:
        return int(self.rgb.shape[1])

    @cached_property
    def lab(self) -> Lab:
        """Lab of each unique colour, computed once and reused across windows."""
        return rgb_to_lab(self.unique)


def prepare_source(image: U8Image) -> SourceColours:
    """Flatten an RGB/RGBA raster into its unique colours. Alpha is ignored."""
    img = assert_u8_image_rgb(np.asarray(image))
    rgb = np.ascontiguousarray(img[..., :3])
    packed, inverse = np.unique(pack_rgb_rows(rgb).reshape(-1), return_inverse=True)
    return SourceColours(
        rgb=rgb,
        unique=unpack_rgb_rows(packed),
        inverse=inverse.reshape(-1).astype(np.int64, copy=False),
    )


__all__ = [
    "CandidateSet",
    "SourceColours",
    "candidates_from_palette",
    "unique_raster_colours",
    "prepare_source",
    "unpack_rgb_rows",
]
