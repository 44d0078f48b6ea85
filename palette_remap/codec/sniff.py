# palette_remap/codec/sniff.py
from __future__ import annotations

"""
Content sniffing. The only place that looks at magic bytes; every reader is
selected from the tag returned here.
"""

from enum import Enum

SNIFF_BYTES = 256

RIFF_MAGIC = b"RIFF"
JASC_MAGIC = b"JASC-PAL"
GIMP_MAGIC = b"GIMP Palette"
PAINT_NET_MAGIC = b";"
PNG_MAGIC = b"\x89PNG\r\n\x1a\n"


class SniffResult(Enum):
    RIFF = "riff"
    JASC = "jasc"
    GIMP = "gimp"
    PAINT_NET = "paintnet"
    PNG = "png"
    ACT = "act"


def sniff_format(head: bytes) -> SniffResult:
    """Classify a palette file from its leading bytes. Anything unrecognised is ACT."""
    head = head[:SNIFF_BYTES]
    if head.startswith(RIFF_MAGIC):
        return SniffResult.RIFF
    if head.startswith(JASC_MAGIC):
        return SniffResult.JASC
    if head.startswith(GIMP_MAGIC):
        return SniffResult.GIMP
    if head.startswith(PAINT_NET_MAGIC):
        return SniffResult.PAINT_NET
    if head.startswith(PNG_MAGIC):
        return SniffResult.PNG
    return SniffResult.ACT


__all__ = [
    "SNIFF_BYTES",
    "RIFF_MAGIC",
    "JASC_MAGIC",
    "GIMP_MAGIC",
    "PAINT_NET_MAGIC",
    "PNG_MAGIC",
    "SniffResult",
    "sniff_format",
]
