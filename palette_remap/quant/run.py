# palette_remap/quant/run.py
from __future__ import annotations

"""
Quantization entry point.

Resolves which part of the palette to match against (the whole palette, an
explicit range, a fixed 16-entry slot, or the best slot found by search),
runs the configured strategy and returns a QuantizedRaster.
"""

from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from ..config import Method, RemapConfig
from ..core_types import SLOT_SIZE, ColorPalette, IndexArray, QuantizedRaster, U8Image
from ..errors import QuantizationError
from ..utils import debug_log, key_value_pairs_to_string
from .assign import assign_nearest
from .candidates import SourceColours, prepare_source
from .fixed import quantize_fixed

Strategy = Callable[..., Tuple[IndexArray, float]]

STRATEGIES: Dict[str, Strategy] = {
    "nearest": assign_nearest,
    "quantizer": quantize_fixed,
}

MAX_8BIT_INDEX = 255


def get_strategy(method: Method) -> Strategy:
    try:
        return STRATEGIES[method]
    except KeyError:
        raise QuantizationError(f"unknown quantization method {method!r}") from None


def search_slot(
    source: SourceColours,
    palette: ColorPalette,
    strategy: Strategy,
    *,
    max_slots: Optional[int] = None,
    debug: bool = False,
) -> Tuple[int, IndexArray, float, Tuple[float, ...]]:
    """
    Quantize against every 16-entry window in increasing order and keep the
    one with the lowest error. The first window reaching the minimum wins.

    Returns (slot, indices, error, per-window errors).
    """
    slots = palette.slot_count(SLOT_SIZE)
    if max_slots is not None:
        slots = min(slots, max_slots)
    if slots < 1:
        raise QuantizationError("palette has no addressable slots")

    best_slot = -1
    best_indices: Optional[IndexArray] = None
    best_error = float("inf")
    errors: List[float] = []
    for slot in range(slots):
        lo, hi = palette.slot_bounds(slot, SLOT_SIZE)
        indices, err = strategy(source, palette.window(lo, hi), debug=False)
        errors.append(err)
        if debug:
            debug_log(f"slot {slot:2d} [{lo}-{hi}]  error={err:.4f}")
        if err < best_error:
            best_slot, best_indices, best_error = slot, indices, err

    if best_indices is None:
        # Every window reported a non-finite error.
        raise QuantizationError("no slot produced a usable mapping")
    return best_slot, best_indices, best_error, tuple(errors)


def _check_8bit(lo: int, hi: int, bits: int) -> None:
    if bits == 8 and hi > MAX_8BIT_INDEX:
        raise QuantizationError(
            f"8-bit output cannot address palette entries {lo}-{hi}; "
            "use --range or --slot to pick entries below 256"
        )


def remap(
    image: U8Image, palette: ColorPalette, config: RemapConfig
) -> QuantizedRaster:
    """
    Map an RGB/RGBA raster onto `palette` following `config`.
    Alpha does not take part in matching.
    """
    strategy = get_strategy(config.method)
    source = prepare_source(image)
    debug = config.debug
    bits = config.bits

    slot_choice = config.slot
    if (
        slot_choice is None
        and config.range is None
        and bits == 4
        and len(palette) > SLOT_SIZE
    ):
        slot_choice = "auto"
        if debug:
            debug_log(
                f"palette has {len(palette)} entries; searching 16-colour slots for 4-bit output"
            )

    if slot_choice == "auto":
        max_slots = (MAX_8BIT_INDEX + 1) // SLOT_SIZE if bits == 8 else None
        slot, indices, error, window_errors = search_slot(
            source, palette, strategy, max_slots=max_slots, debug=debug
        )
        lo, hi = palette.slot_bounds(slot, SLOT_SIZE)
        window = palette.window(lo, hi)
    else:
        slot = None
        window_errors = ()
        if isinstance(slot_choice, int):
            try:
                lo, hi = palette.slot_bounds(slot_choice, SLOT_SIZE)
            except ValueError as e:
                raise QuantizationError(str(e)) from e
            slot = slot_choice
        elif config.range is not None:
            lo, hi = config.range
            if lo >= len(palette):
                raise QuantizationError(
                    f"range {lo}-{hi} starts beyond a palette of {len(palette)} entries"
                )
            hi = min(hi, len(palette) - 1)
        else:
            lo, hi = 0, len(palette) - 1
        _check_8bit(lo, hi, bits)
        window = palette.window(lo, hi)
        indices, error = strategy(source, window, debug=debug)

    if len(window) > (1 << bits):
        raise QuantizationError(
            f"{bits}-bit output holds {1 << bits} colours, window has {len(window)}"
        )
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Window", f"{lo}-{hi}"),
                    ("Slot", "-" if slot is None else slot),
                    ("Colours", len(window)),
                    ("Error", float(error)),
                ]
            )
        )
    return QuantizedRaster(
        indices=np.ascontiguousarray(indices, dtype=np.int32),
        palette=window,
        error=float(error),
        bit_depth=bits,
        range_min=lo,
        slot=slot,
        window_errors=window_errors,
    )


__all__ = ["Strategy", "STRATEGIES", "get_strategy", "search_slot", "remap"]
