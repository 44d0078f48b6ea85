# palette_remap/errors.py
"""
Error taxonomy. Every failure the pipeline reports derives from RemapError and
names the stage it came from so the CLI can report it once.
"""
from __future__ import annotations

from typing import Optional


class RemapError(Exception):
    """Base class. `stage` is one of palette/decode/quantize/pack/write."""

    default_stage: Optional[str] = None

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage or self.default_stage

    def __str__(self) -> str:
        msg = super().__str__()
        return f"{self.stage}: {msg}" if self.stage else msg


class FileAccessError(RemapError):
    """File missing, unreadable or unwritable."""


class UnsupportedFormatError(RemapError):
    """Unrecognised palette extension, malformed header, or non-palette PNG."""

    default_stage = "palette"


class TruncatedDataError(RemapError):
    """A format declares more data than the file holds."""

    default_stage = "palette"


class UnsupportedColorModeError(RemapError):
    """A raster lacks usable colour or palette data."""


class QuantizationError(RemapError):
    """The quantizer rejected its constraints."""

    default_stage = "quantize"


__all__ = [
    "RemapError",
    "FileAccessError",
    "UnsupportedFormatError",
    "TruncatedDataError",
    "UnsupportedColorModeError",
    "QuantizationError",
]
