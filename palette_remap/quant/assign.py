# palette_remap/quant/assign.py
from __future__ import annotations

"""
Direct nearest-colour assignment by CIEDE2000.

Each unique source colour is scored against every unique candidate; the
lowest distance wins and ties go to the lowest palette index. Results are
scattered back to pixels through the source inverse map.
"""

from typing import Tuple

import numpy as np

from ..colour_convert import delta_e2000_matrix
from ..core_types import ColorPalette, IndexArray
from ..utils import debug_log
from .candidates import SourceColours, candidates_from_palette

# Rows of unique source colours scored per distance-matrix pass.
CHUNK_ROWS = 1024


def nearest_candidates(
    src_lab: np.ndarray, cand_lab: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    """
    For each source Lab row, the index of the nearest candidate row and its
    CIEDE2000 distance. np.argmin keeps the first of equal minima.
    """
    n = src_lab.shape[0]
    best = np.empty((n,), dtype=np.int64)
    best_de = np.empty((n,), dtype=np.float64)
    for start in range(0, n, CHUNK_ROWS):
        stop = min(start + CHUNK_ROWS, n)
        de = delta_e2000_matrix(src_lab[start:stop], cand_lab)
        pick = np.argmin(de, axis=1)
        best[start:stop] = pick
        best_de[start:stop] = de[np.arange(stop - start), pick]
    return best, best_de


def assign_nearest(
    source: SourceColours, palette: ColorPalette, *, debug: bool = False
) -> Tuple[IndexArray, float]:
    """
    Map every pixel to its perceptually nearest palette entry.

    Returns:
      indices: int32 [H,W] into `palette`
      error  : mean squared CIEDE2000 distance over all pixels
    """
    cands = candidates_from_palette(palette)
    pick, pick_de = nearest_candidates(source.lab, cands.lab)

    per_pixel_index = cands.palette_index[pick][source.inverse]
    per_pixel_de = pick_de[source.inverse]
    error = float(np.mean(per_pixel_de * per_pixel_de)) if per_pixel_de.size else 0.0

    if debug:
        debug_log(
            f"nearest: {source.unique.shape[0]:,} source colours x "
            f"{len(cands)} candidates ({len(palette) - len(cands)} duplicate(s) dropped)  "
            f"mse dE={error:.3f}"
        )
    indices = per_pixel_index.reshape(source.height, source.width).astype(np.int32)
    return indices, error


__all__ = ["CHUNK_ROWS", "nearest_candidates", "assign_nearest"]
