# palette_remap/codec/binary.py
from __future__ import annotations

"""
Binary palette formats.

ACT  : 256 RGB triplets (768 bytes), optionally followed by a big-endian
       (count, transparent index) trailer. 0xFFFF means no transparent index.
RIFF : Microsoft PAL. 'RIFF' <u32 size> 'PAL ' 'data' <u32 size>
       <u16 version> <u16 count> then count x (R, G, B, 0). Little-endian.
"""

import struct
from dataclasses import replace

from ..core_types import NO_TRANSPARENCY, Color, ColorPalette
from ..errors import TruncatedDataError, UnsupportedFormatError
from ..utils import warn

ACT_COLORS = 256
ACT_BODY_SIZE = ACT_COLORS * 3
ACT_TRAILER = struct.Struct(">HH")
ACT_NO_TRANSPARENCY = 0xFFFF

RIFF_HEADER = struct.Struct("<4sI4s4sIHH")
RIFF_FORM_TYPE = b"PAL "
RIFF_CHUNK_ID = b"data"
RIFF_VERSION = 0x0300
RIFF_MAX_COLORS = 0xFFFF


# ACT


def read_act(data: bytes) -> ColorPalette:
    """Decode an Adobe colour table, honouring the optional 4-byte trailer."""
    if len(data) < ACT_BODY_SIZE:
        raise TruncatedDataError(
            f"ACT palette needs {ACT_BODY_SIZE} bytes, file has {len(data)}"
        )
    colors = [
        Color(data[i], data[i + 1], data[i + 2]) for i in range(0, ACT_BODY_SIZE, 3)
    ]

    if len(data) != ACT_BODY_SIZE + ACT_TRAILER.size:
        return ColorPalette(tuple(colors))

    count, alpha_index = ACT_TRAILER.unpack_from(data, ACT_BODY_SIZE)
    if count == 0:
        raise UnsupportedFormatError("ACT trailer declares an empty palette")
    if count > ACT_COLORS:
        raise TruncatedDataError(
            f"ACT trailer declares {count} colours, file holds {ACT_COLORS}"
        )

    transparent = NO_TRANSPARENCY
    if alpha_index != ACT_NO_TRANSPARENCY:
        if alpha_index < count:
            transparent = alpha_index
        else:
            warn(
                f"ACT transparent index {alpha_index} outside {count} colours; ignored"
            )
    return replace(ColorPalette(tuple(colors)).resized(count), transparent_index=transparent)


def encode_act(palette: ColorPalette, transparent_index: int) -> bytes:
    """
    Always 256 triplets. The trailer is appended when there is a transparent
    index or fewer than 256 real colours.
    """
    body = bytearray(ACT_BODY_SIZE)
    count = min(len(palette), ACT_COLORS)
    for i in range(count):
        body[i * 3 : i * 3 + 3] = bytes(palette[i].rgb)

    if transparent_index >= ACT_COLORS:
        warn(f"transparent index {transparent_index} does not fit an ACT file; dropped")
        transparent_index = NO_TRANSPARENCY

    if transparent_index != NO_TRANSPARENCY or count < ACT_COLORS:
        alpha = (
            ACT_NO_TRANSPARENCY
            if transparent_index == NO_TRANSPARENCY
            else transparent_index
        )
        body += ACT_TRAILER.pack(count, alpha)
    return bytes(body)


# Microsoft RIFF PAL


def read_riff(data: bytes) -> ColorPalette:
    """Decode a RIFF 'PAL ' file. The pad byte of each entry is discarded."""
    if len(data) < RIFF_HEADER.size:
        raise TruncatedDataError(
            f"RIFF palette header needs {RIFF_HEADER.size} bytes, file has {len(data)}"
        )
    _riff, _size, form, chunk, _chunk_size, _version, count = RIFF_HEADER.unpack_from(
        data, 0
    )
    if form != RIFF_FORM_TYPE or chunk != RIFF_CHUNK_ID:
        raise UnsupportedFormatError(
            f"RIFF file is not a palette (form {form!r}, chunk {chunk!r})"
        )
    if count == 0:
        raise UnsupportedFormatError("RIFF palette declares no colours")

    needed = RIFF_HEADER.size + 4 * count
    if len(data) < needed:
        raise TruncatedDataError(
            f"RIFF palette declares {count} colours ({needed} bytes), file has {len(data)}"
        )
    off = RIFF_HEADER.size
    colors = tuple(
        Color(data[off + 4 * i], data[off + 4 * i + 1], data[off + 4 * i + 2])
        for i in range(count)
    )
    return ColorPalette(colors)


def encode_riff(palette: ColorPalette) -> bytes:
    count = len(palette)
    if count > RIFF_MAX_COLORS:
        raise UnsupportedFormatError(
            f"RIFF palettes hold at most {RIFF_MAX_COLORS} colours, got {count}"
        )
    payload = bytearray()
    for color in palette:
        payload += bytes((color.r, color.g, color.b, 0))
    chunk_size = 4 + len(payload)  # version + count + entries
    riff_size = len(RIFF_FORM_TYPE) + 8 + chunk_size
    header = RIFF_HEADER.pack(
        b"RIFF", riff_size, RIFF_FORM_TYPE, RIFF_CHUNK_ID, chunk_size, RIFF_VERSION, count
    )
    return header + bytes(payload)


__all__ = [
    "ACT_COLORS",
    "ACT_BODY_SIZE",
    "read_act",
    "encode_act",
    "read_riff",
    "encode_riff",
]
