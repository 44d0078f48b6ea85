# palette_remap/quant/__init__.py
"""
Quantization engine: candidate preparation, nearest-colour assignment,
Pillow-delegated fixed-palette quantization, and slot search.
"""

from .assign import assign_nearest
from .candidates import (
    CandidateSet,
    SourceColours,
    candidates_from_palette,
    prepare_source,
    unique_raster_colours,
)
from .fixed import quantize_fixed
from .run import remap, search_slot

__all__ = [
    "CandidateSet",
    "SourceColours",
    "candidates_from_palette",
    "prepare_source",
    "unique_raster_colours",
    "assign_nearest",
    "quantize_fixed",
    "search_slot",
    "remap",
]
