# palette_remap/config.py
from __future__ import annotations

"""
Run configuration. Built once from parsed CLI arguments and passed down
explicitly; nothing in the package reads process-wide option state.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple, Union

from .core_types import PaletteFormat

Method = Literal["nearest", "quantizer"]
SlotChoice = Union[int, Literal["auto"], None]
METHODS: Tuple[str, ...] = ("nearest", "quantizer")


def parse_range(text: str) -> Tuple[int, int]:
    """'min-max' -> (min, max), inclusive, 0 <= min <= max."""
    lo_s, sep, hi_s = text.strip().partition("-")
    if not sep:
        raise ValueError(f"range must look like min-max, got {text!r}")
    try:
        lo, hi = int(lo_s), int(hi_s)
    except ValueError:
        raise ValueError(f"range bounds must be integers, got {text!r}") from None
    if lo < 0 or hi < lo:
        raise ValueError(f"range must satisfy 0 <= min <= max, got {text!r}")
    return lo, hi


def parse_slot(text: str) -> Union[int, Literal["auto"]]:
    """'auto' or a non-negative slot number."""
    value = text.strip().lower()
    if value == "auto":
        return "auto"
    try:
        slot = int(value)
    except ValueError:
        raise ValueError(f"slot must be a number or 'auto', got {text!r}") from None
    if slot < 0:
        raise ValueError(f"slot must be >= 0, got {slot}")
    return slot


@dataclass(frozen=True)
class RemapConfig:
    input: Path
    palette: Path
    output: Path
    bits: int = 8
    range: Optional[Tuple[int, int]] = None
    slot: SlotChoice = None
    mask: bool = False
    method: Method = "nearest"
    export_palette: Optional[Path] = None
    export_format: Optional[PaletteFormat] = None
    debug: bool = False

    def __post_init__(self) -> None:
        if self.bits not in (4, 8):
            raise ValueError(f"bits must be 4 or 8, got {self.bits}")
        if self.method not in METHODS:
            raise ValueError(f"method must be one of {METHODS}, got {self.method!r}")
        if self.range is not None and self.slot is not None:
            raise ValueError("--range and --slot are mutually exclusive")
        if self.range is not None:
            lo, hi = self.range
            if lo < 0 or hi < lo:
                raise ValueError(f"invalid range {lo}-{hi}")
            if self.bits == 4 and hi - lo + 1 > 16:
                raise ValueError("4-bit output needs a range of at most 16 entries")
            if self.bits == 8 and hi > 255:
                raise ValueError("8-bit output cannot address palette entries above 255")
        if isinstance(self.slot, int) and self.slot < 0:
            raise ValueError(f"slot must be >= 0, got {self.slot}")

    @property
    def mask_path(self) -> Path:
        return self.output.with_name(f"{self.output.stem}_mask.png")

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RemapConfig":
        export_format = None
        if args.export_palette is not None:
            if args.export_format:
                export_format = PaletteFormat.from_name(args.export_format)
            else:
                export_format = PaletteFormat.for_path(args.export_palette)
                if export_format is None:
                    raise ValueError(
                        f"cannot infer a palette format from {args.export_palette.name}; "
                        "pass --export-format"
                    )
        return cls(
            input=args.input,
            palette=args.palette,
            output=args.output,
            bits=args.bits,
            range=parse_range(args.range) if args.range else None,
            slot=parse_slot(args.slot) if args.slot else None,
            mask=args.mask,
            method=args.method,
            export_palette=args.export_palette,
            export_format=export_format,
            debug=args.debug,
        )


__all__ = [
    "Method",
    "SlotChoice",
    "METHODS",
    "parse_range",
    "parse_slot",
    "RemapConfig",
]
