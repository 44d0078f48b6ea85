# palette_remap/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]

U8Image = NDArray[np.uint8]  # (H, W, 3) or (H, W, 4)
U8Mask = NDArray[np.uint8]  # (H, W)
Lab = NDArray[np.float64]  # (..., 3) CIE Lab
IndexArray = NDArray[np.int32]  # (H, W) palette indices

SLOT_SIZE = 16
NO_TRANSPARENCY = -1

# Value objects


@dataclass(frozen=True)
class Color:
    """One palette entry. Alpha defaults to opaque and is never persisted."""

    r: int
    g: int
    b: int
    a: int = 255

    def __post_init__(self) -> None:
        for channel in (self.r, self.g, self.b, self.a):
            if not 0 <= channel <= 255:
                raise ValueError(f"channel out of range: {channel}")

    @property
    def rgb(self) -> RGBTuple:
        return (self.r, self.g, self.b)

    def packed(self) -> int:
        """24-bit 0xRRGGBB."""
        return (self.r << 16) | (self.g << 8) | self.b

    @classmethod
    def from_packed(cls, value: int) -> "Color":
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)


@dataclass(frozen=True)
class ColorPalette:
    """
    Ordered, immutable list of colours. Order is the index space of an
    indexed raster. transparent_index is -1 when the palette has no key colour.
    """

    colors: Tuple[Color, ...]
    transparent_index: int = NO_TRANSPARENCY

    def __post_init__(self) -> None:
        object.__setattr__(self, "colors", tuple(self.colors))
        if len(self.colors) == 0:
            raise ValueError("palette must contain at least one colour")
        if not NO_TRANSPARENCY <= self.transparent_index < len(self.colors):
            raise ValueError(
                f"transparent index {self.transparent_index} outside palette of {len(self.colors)}"
            )

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[Color]:
        return iter(self.colors)

    def __getitem__(self, index: int) -> Color:
        return self.colors[index]

    @classmethod
    def from_rgb(
        cls,
        rows: Union[Sequence[Sequence[int]], NDArray[np.generic]],
        transparent_index: int = NO_TRANSPARENCY,
    ) -> "ColorPalette":
        """Build from an iterable of (r, g, b) rows or a uint8 [N,3] array."""
        colors = tuple(Color(int(r[0]), int(r[1]), int(r[2])) for r in rows)
        return cls(colors, transparent_index)

    def rgb_array(self) -> NDArray[np.uint8]:
        """uint8 [N,3]."""
        return np.array([c.rgb for c in self.colors], dtype=np.uint8).reshape(-1, 3)

    def rgb_tuples(self) -> list[RGBTuple]:
        return [c.rgb for c in self.colors]

    def window(self, lo: int, hi: int) -> "ColorPalette":
        """
        Inclusive sub-range [lo, hi], clipped to the palette. The transparent
        index is re-based onto the window, or dropped when it falls outside.
        """
        lo = max(0, int(lo))
        hi = min(len(self.colors) - 1, int(hi))
        if lo > hi:
            raise ValueError(f"empty palette window {lo}-{hi} of {len(self.colors)}")
        ti = self.transparent_index
        ti = ti - lo if lo <= ti <= hi else NO_TRANSPARENCY
        return ColorPalette(self.colors[lo : hi + 1], ti)

    def resized(self, count: int) -> "ColorPalette":
        """Truncate or zero-pad to count entries."""
        if count < 1:
            raise ValueError("palette must contain at least one colour")
        colors = self.colors[:count]
        if len(colors) < count:
            colors = colors + (Color(0, 0, 0),) * (count - len(colors))
        ti = self.transparent_index if self.transparent_index < count else NO_TRANSPARENCY
        return ColorPalette(colors, ti)

    def slot_count(self, size: int = SLOT_SIZE) -> int:
        return (len(self.colors) + size - 1) // size

    def slot_bounds(self, slot: int, size: int = SLOT_SIZE) -> Tuple[int, int]:
        """Inclusive (lo, hi) of a 16-entry window, clipped to the palette."""
        if not 0 <= slot < self.slot_count(size):
            raise ValueError(f"slot {slot} outside 0..{self.slot_count(size) - 1}")
        lo = slot * size
        return lo, min(lo + size - 1, len(self.colors) - 1)


class PaletteFormat(Enum):
    """Palette file formats the codec reads and writes."""

    ACT = "act"
    RIFF = "riff"
    JASC = "jasc"
    GIMP = "gimp"
    PAINT_NET = "paintnet"

    @classmethod
    def from_name(cls, name: str) -> "PaletteFormat":
        key = name.strip().lower().lstrip(".")
        try:
            return _FORMAT_ALIASES[key]
        except KeyError:
            raise ValueError(f"unknown palette format: {name}") from None

    @classmethod
    def for_path(cls, path: Path) -> Optional["PaletteFormat"]:
        """Default writer format for an output extension (.pal means JASC)."""
        return _FORMAT_BY_EXTENSION.get(Path(path).suffix.lower())


_FORMAT_ALIASES = {
    "act": PaletteFormat.ACT,
    "riff": PaletteFormat.RIFF,
    "ms": PaletteFormat.RIFF,
    "mspal": PaletteFormat.RIFF,
    "jasc": PaletteFormat.JASC,
    "pal": PaletteFormat.JASC,
    "gimp": PaletteFormat.GIMP,
    "gpl": PaletteFormat.GIMP,
    "paintnet": PaletteFormat.PAINT_NET,
    "paint.net": PaletteFormat.PAINT_NET,
    "txt": PaletteFormat.PAINT_NET,
}

_FORMAT_BY_EXTENSION = {
    ".act": PaletteFormat.ACT,
    ".pal": PaletteFormat.JASC,
    ".gpl": PaletteFormat.GIMP,
    ".txt": PaletteFormat.PAINT_NET,
}


@dataclass(frozen=True)
class QuantizedRaster:
    """
    Per-pixel indices into `palette` plus the error reported for the mapping.

    indices  : int32 [H,W], every value < len(palette)
    palette  : the window that was matched against
    range_min: offset of the window inside the master palette
    """

    indices: IndexArray
    palette: ColorPalette
    error: float
    bit_depth: int
    range_min: int = 0
    slot: Optional[int] = None
    window_errors: Tuple[float, ...] = field(default_factory=tuple)

    @property
    def width(self) -> int:
        return int(self.indices.shape[1])

    @property
    def height(self) -> int:
        return int(self.indices.shape[0])


# Small helpers


def pack_rgb_rows(rgb: NDArray[np.uint8]) -> NDArray[np.uint32]:
    """uint8 [...,3] -> uint32 [...] holding 0xRRGGBB."""
    arr = rgb.astype(np.uint32, copy=False)
    return (arr[..., 0] << 16) | (arr[..., 1] << 8) | arr[..., 2]


def assert_u8_image_rgb(image: np.ndarray) -> U8Image:
    """Validate a uint8 (H,W,3 or 4) image and return it typed as U8Image."""
    if image.dtype != np.uint8 or image.ndim != 3 or image.shape[-1] < 3:
        raise TypeError("expected uint8 (H,W,3/4) image")
    return image  # type: ignore[return-value]


__all__ = [
    # aliases / constants
    "RGBTuple",
    "U8Image",
    "U8Mask",
    "Lab",
    "IndexArray",
    "SLOT_SIZE",
    "NO_TRANSPARENCY",
    # value objects
    "Color",
    "ColorPalette",
    "PaletteFormat",
    "QuantizedRaster",
    # helpers
    "pack_rgb_rows",
    "assert_u8_image_rgb",
]
