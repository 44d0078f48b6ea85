from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import numpy as np
import pytest
from PIL import Image

from palette_remap.core_types import ColorPalette

# Channels are multiples of 4 and far apart so every quantizer agrees on them.
PRIMARIES: List[Tuple[int, int, int]] = [
    (0, 0, 0),
    (252, 0, 0),
    (0, 252, 0),
    (0, 0, 252),
]


@pytest.fixture
def primaries() -> ColorPalette:
    return ColorPalette.from_rgb(PRIMARIES)


def write_rgba_png(path: Path, rgba: np.ndarray) -> Path:
    Image.fromarray(np.ascontiguousarray(rgba, dtype=np.uint8)).save(path, format="PNG")
    return path


def image_from_colours(rows: List[List[Tuple[int, int, int]]]) -> np.ndarray:
    """(H,W,3) uint8 image from nested rows of RGB tuples."""
    return np.array(rows, dtype=np.uint8)
