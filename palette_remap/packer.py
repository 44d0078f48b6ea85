# palette_remap/packer.py
from __future__ import annotations

"""
Indexed packing and the transparency mask.

8-bit : one byte per pixel, index + range_min so the byte addresses the
        master palette.
4-bit : two pixels per byte in row-major order, first pixel in the high
        nibble. Indices are window offsets. Rows are not byte-aligned.
"""

import numpy as np

from .core_types import IndexArray, U8Image
from .errors import QuantizationError

SUPPORTED_BITS = (4, 8)


def pack_indices(indices: IndexArray, bits: int, range_min: int = 0) -> bytes:
    """Pack a [H,W] (or flat) index array into 4- or 8-bit bytes."""
    flat = np.asarray(indices, dtype=np.int64).reshape(-1)
    if bits == 8:
        values = flat + int(range_min)
        if values.size and (values.min() < 0 or values.max() > 255):
            raise QuantizationError(
                f"8-bit index out of range (offset {range_min})", stage="pack"
            )
        return values.astype(np.uint8).tobytes()
    if bits == 4:
        if flat.size and (flat.min() < 0 or flat.max() > 15):
            raise QuantizationError("4-bit index outside 0..15", stage="pack")
        nibbles = flat.astype(np.uint8)
        if nibbles.size % 2:
            nibbles = np.append(nibbles, np.uint8(0))
        pairs = nibbles.reshape(-1, 2)
        return ((pairs[:, 0] << 4) | pairs[:, 1]).astype(np.uint8).tobytes()
    raise ValueError(f"unsupported bit depth {bits}; expected one of {SUPPORTED_BITS}")


def unpack_indices(packed: bytes, count: int, bits: int, range_min: int = 0) -> np.ndarray:
    """Inverse of pack_indices. Returns a flat uint8 array of `count` entries."""
    raw = np.frombuffer(packed, dtype=np.uint8)
    if bits == 8:
        if raw.size < count:
            raise ValueError(f"packed buffer holds {raw.size} pixels, need {count}")
        return (raw[:count].astype(np.int64) - int(range_min)).astype(np.uint8)
    if bits == 4:
        if raw.size * 2 < count:
            raise ValueError(f"packed buffer holds {raw.size * 2} pixels, need {count}")
        out = np.empty(raw.size * 2, dtype=np.uint8)
        out[0::2] = raw >> 4
        out[1::2] = raw & 0x0F
        return out[:count]
    raise ValueError(f"unsupported bit depth {bits}; expected one of {SUPPORTED_BITS}")


def build_mask(rgba: U8Image) -> U8Image:
    """
    Opaque-white mask: any pixel with alpha > 0 becomes white and keeps its
    alpha; fully transparent pixels are copied unchanged. Input is not modified.
    """
    arr = np.asarray(rgba)
    if arr.dtype != np.uint8 or arr.ndim != 3 or arr.shape[-1] != 4:
        raise TypeError("expected uint8 (H,W,4) image")
    out = arr.copy()
    visible = out[..., 3] > 0
    out[visible, :3] = 255
    return out


__all__ = ["SUPPORTED_BITS", "pack_indices", "unpack_indices", "build_mask"]
