# palette_remap/quant/fixed.py
from __future__ import annotations

"""
Delegated quantization through Pillow, pinned to a fixed palette.

Pillow's quantize(palette=...) only ever emits entries of the supplied
palette image, so the fixed colours are used exactly and nothing is
synthesised. The palette image is padded to 256 entries with copies of the
first colour; any padded index is folded back onto index 0.
"""

from typing import List, Tuple

import numpy as np
from PIL import Image

from ..core_types import ColorPalette, IndexArray
from ..errors import QuantizationError
from ..utils import debug_log
from .candidates import SourceColours

MAX_FIXED_COLOURS = 256


def _palette_image(palette: ColorPalette) -> Image.Image:
    flat: List[int] = []
    for color in palette:
        flat.extend(color.rgb)
    flat.extend(list(palette[0].rgb) * (MAX_FIXED_COLOURS - len(palette)))
    palette_image = Image.new("P", (1, 1))
    palette_image.putpalette(flat)
    return palette_image


def palette_mse(rgb: np.ndarray, palette: ColorPalette, indices: np.ndarray) -> float:
    """Mean squared RGB error of a mapping, per channel."""
    if rgb.size == 0:
        return 0.0
    mapped = palette.rgb_array()[indices].astype(np.float64)
    diff = rgb[..., :3].astype(np.float64) - mapped
    return float(np.mean(diff * diff))


def quantize_fixed(
    source: SourceColours, palette: ColorPalette, *, debug: bool = False
) -> Tuple[IndexArray, float]:
    """
    Quantize the raster onto exactly the colours of `palette`, without dithering.

    Returns:
      indices: int32 [H,W] into `palette`
      error  : mean squared RGB error
    """
    count = len(palette)
    if count > MAX_FIXED_COLOURS:
        raise QuantizationError(
            f"quantizer accepts at most {MAX_FIXED_COLOURS} fixed colours, got {count}"
        )
    src = Image.fromarray(source.rgb)
    try:
        quantized = src.quantize(
            colors=count, palette=_palette_image(palette), dither=Image.Dither.NONE
        )
    except ValueError as e:
        raise QuantizationError(f"quantizer rejected the palette: {e}") from e

    indices = np.array(quantized, dtype=np.int32)
    indices[indices >= count] = 0
    error = palette_mse(source.rgb, palette, indices)
    if debug:
        debug_log(f"quantizer: {count} fixed colours  mse={error:.3f}")
    return indices, error


__all__ = ["MAX_FIXED_COLOURS", "palette_mse", "quantize_fixed"]
