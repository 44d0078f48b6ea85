# palette_remap/__init__.py
"""
palette_remap package.

Purpose:
  Remap images onto fixed, ordered palettes and write indexed PNGs at 4 or 8
  bits per pixel. See remap.py for the CLI.

Public API:
  read_palette / write_palette : palette codec (ACT, RIFF PAL, JASC, GIMP, Paint.NET).
  load_palette_source          : palette from a palette file or an image.
  remap                        : quantize a raster onto a palette (nearest or quantizer).
  pack_indices / build_mask    : indexed packing and transparency mask.
  colour_convert               : rgb_to_lab, delta_e2000_pair, delta_e2000_matrix.
  core_types                   : Color, ColorPalette, PaletteFormat, QuantizedRaster.
  errors                       : RemapError and its subclasses.

Quick start:
  from palette_remap import read_palette, remap, RemapConfig
"""

__version__ = "0.1.0"

from . import colour_convert
from . import core_types
from . import errors
from . import utils
from .codec import read_palette, write_palette
from .config import RemapConfig
from .core_types import Color, ColorPalette, PaletteFormat, QuantizedRaster
from .errors import RemapError
from .packer import build_mask, pack_indices, unpack_indices
from .palette_source import load_palette_source
from .quant import remap

__all__ = [
    "__version__",
    "colour_convert",
    "core_types",
    "errors",
    "utils",
    "read_palette",
    "write_palette",
    "load_palette_source",
    "remap",
    "RemapConfig",
    "Color",
    "ColorPalette",
    "PaletteFormat",
    "QuantizedRaster",
    "RemapError",
    "build_mask",
    "pack_indices",
    "unpack_indices",
]
