from __future__ import annotations

import io
import random
import struct

import pytest
from PIL import Image

from palette_remap.codec import (
    SniffResult,
    decode_palette,
    encode_palette,
    read_palette,
    sniff_format,
    write_palette,
)
from palette_remap.codec.binary import read_act, read_riff
from palette_remap.codec.text import read_gimp, read_jasc, read_paintnet
from palette_remap.core_types import ColorPalette, PaletteFormat
from palette_remap.errors import (
    FileAccessError,
    TruncatedDataError,
    UnsupportedColorModeError,
    UnsupportedFormatError,
)

COLOURS = [(0, 0, 0), (255, 255, 255), (12, 34, 56), (200, 100, 7), (1, 2, 3)]


@pytest.fixture
def palette() -> ColorPalette:
    return ColorPalette.from_rgb(COLOURS)


# Round trips


@pytest.mark.parametrize(
    "fmt, name",
    [
        (PaletteFormat.ACT, "p.act"),
        (PaletteFormat.RIFF, "p.pal"),
        (PaletteFormat.JASC, "p.pal"),
        (PaletteFormat.GIMP, "p.gpl"),
        (PaletteFormat.PAINT_NET, "p.txt"),
    ],
)
def test_write_then_read_keeps_order_and_channels(tmp_path, palette, fmt, name):
    path = write_palette(tmp_path / name, palette, fmt)
    loaded = read_palette(path)
    assert loaded.rgb_tuples() == COLOURS
    assert loaded.transparent_index == -1


def test_act_round_trip_keeps_transparent_index(tmp_path, palette):
    path = write_palette(tmp_path / "t.act", palette, PaletteFormat.ACT, transparent_index=3)
    assert path.stat().st_size == 772
    loaded = read_palette(path)
    assert len(loaded) == len(COLOURS)
    assert loaded.transparent_index == 3


# ACT


def _act_with_trailer(count: int, alpha_index: int) -> bytes:
    body = bytearray(768)
    for i in range(count):
        body[i * 3 : i * 3 + 3] = bytes((i, 255 - i, i // 2))
    return bytes(body) + struct.pack(">HH", count, alpha_index)


def test_act_trailer_resizes_and_sets_transparent_index():
    pal = read_act(_act_with_trailer(100, 7))
    assert len(pal) == 100
    assert pal.transparent_index == 7
    assert pal[99].rgb == (99, 156, 49)


def test_act_trailer_sentinel_means_no_transparency():
    pal = read_act(_act_with_trailer(100, 0xFFFF))
    assert len(pal) == 100
    assert pal.transparent_index == -1


def test_act_without_trailer_is_256_colours():
    pal = read_act(bytes(range(256)) * 3)
    assert len(pal) == 256
    assert pal[0].rgb == (0, 1, 2)


def test_act_full_palette_writes_no_trailer():
    full = ColorPalette.from_rgb([(i, i, i) for i in range(256)])
    assert len(encode_palette(full, PaletteFormat.ACT)) == 768


def test_act_short_palette_is_zero_padded_with_trailer(palette):
    data = encode_palette(palette, PaletteFormat.ACT)
    assert len(data) == 772
    assert data[15:768] == bytes(768 - 15)
    assert data[768:] == b"\x00\x05\xff\xff"


def test_act_writer_ignores_entries_beyond_256():
    big = ColorPalette.from_rgb([(i % 256, 0, 0) for i in range(300)])
    data = encode_palette(big, PaletteFormat.ACT)
    assert len(data) == 768


def test_act_short_file_is_truncated():
    with pytest.raises(TruncatedDataError):
        read_act(bytes(700))


def test_act_trailer_count_beyond_table_is_truncated():
    with pytest.raises(TruncatedDataError):
        read_act(bytes(768) + struct.pack(">HH", 300, 0xFFFF))


def test_act_transparent_index_outside_count_is_dropped():
    pal = read_act(_act_with_trailer(10, 50))
    assert len(pal) == 10
    assert pal.transparent_index == -1


# RIFF


def test_riff_layout(palette):
    data = encode_palette(palette, PaletteFormat.RIFF)
    assert data[:4] == b"RIFF"
    assert struct.unpack_from("<I", data, 4)[0] == len(data) - 8
    assert data[8:16] == b"PAL data"
    assert struct.unpack_from("<I", data, 16)[0] == 4 + 4 * len(COLOURS)
    assert data[20:22] == b"\x00\x03"
    assert struct.unpack_from("<H", data, 22)[0] == len(COLOURS)
    assert data[24:28] == bytes((0, 0, 0, 0))
    assert data[32:36] == bytes((12, 34, 56, 0))


def test_riff_pad_byte_is_discarded(palette):
    data = bytearray(encode_palette(palette, PaletteFormat.RIFF))
    data[27] = 0x7F
    assert read_riff(bytes(data))[0].rgb == (0, 0, 0)


def test_riff_declaring_more_entries_than_present_is_truncated(palette):
    data = encode_palette(palette, PaletteFormat.RIFF)
    with pytest.raises(TruncatedDataError):
        read_riff(data[:-4])


def test_riff_that_is_not_a_palette_is_rejected():
    data = b"RIFF" + struct.pack("<I", 20) + b"WAVEfmt " + bytes(12)
    with pytest.raises(UnsupportedFormatError):
        read_riff(data)


# JASC


def test_jasc_text_layout(palette):
    text = encode_palette(palette, PaletteFormat.JASC).decode("ascii")
    lines = text.splitlines()
    assert lines[:3] == ["JASC-PAL", "0100", "5"]
    assert lines[5] == "12 34 56"


def test_jasc_fewer_lines_than_count_is_truncated():
    with pytest.raises(TruncatedDataError):
        read_jasc(b"JASC-PAL\r\n0100\r\n3\r\n1 2 3\r\n4 5 6\r\n")


def test_jasc_reads_crlf_files():
    pal = read_jasc(b"JASC-PAL\r\n0100\r\n2\r\n1 2 3\r\n4 5 6\r\n")
    assert pal.rgb_tuples() == [(1, 2, 3), (4, 5, 6)]


# GIMP


def test_gimp_malformed_lines_are_skipped():
    text = (
        "GIMP Palette\n"
        "Name: test\n"
        "Columns: 4\n"
        "#\n"
        "  0   0   0\tBlack\n"
        "foo bar\n"
        "\n"
        "12 34\n"
        "255 255 255 Bright White\n"
        "300 1 1 out of range\n"
        "\t7\t8\t9\n"
    )
    pal = read_gimp(text.encode())
    assert pal.rgb_tuples() == [(0, 0, 0), (255, 255, 255), (7, 8, 9)]


def test_gimp_writer_uses_fixed_width_and_name(tmp_path, palette):
    path = write_palette(tmp_path / "swatches.gpl", palette, PaletteFormat.GIMP)
    lines = path.read_text().splitlines()
    assert lines[:4] == ["GIMP Palette", "Name: swatches", "Columns: 0", "#"]
    assert lines[4] == "  0   0   0\tUntitled"
    assert lines[6] == " 12  34  56\tUntitled"


def test_gimp_without_colours_is_rejected():
    with pytest.raises(UnsupportedFormatError):
        read_gimp(b"GIMP Palette\nName: empty\n#\n")


# Paint.NET


def test_paintnet_ignores_alpha_and_comments():
    text = b"; Paint.NET Palette\n; comment\nFF102030\n80405060\n405060\n"
    pal = read_paintnet(text)
    assert pal.rgb_tuples() == [(16, 32, 48), (64, 80, 96), (64, 80, 96)]


def test_paintnet_writer_layout(palette):
    lines = encode_palette(palette, PaletteFormat.PAINT_NET, name="x").decode().splitlines()
    assert lines[0] == "; Paint.NET Palette"
    assert lines[1] == "; x"
    assert lines[4] == "000C2238"


def test_paintnet_non_hex_line_is_rejected():
    with pytest.raises(UnsupportedFormatError):
        read_paintnet(b"; Paint.NET Palette\nzzzz\n")


# Sniffing and dispatch


@pytest.mark.parametrize(
    "head, expected",
    [
        (b"RIFF\x00\x00\x00\x00PAL ", SniffResult.RIFF),
        (b"JASC-PAL\n0100\n", SniffResult.JASC),
        (b"GIMP Palette\n", SniffResult.GIMP),
        (b"; Paint.NET Palette\n", SniffResult.PAINT_NET),
        (b"\x89PNG\r\n\x1a\n\x00\x00", SniffResult.PNG),
        (bytes(768), SniffResult.ACT),
        (b"", SniffResult.ACT),
    ],
)
def test_sniff_format(head, expected):
    assert sniff_format(head) is expected


def test_sniffing_ignores_extension(tmp_path, palette):
    # A GIMP palette saved with an .act name still reads as GIMP.
    path = tmp_path / "mislabelled.act"
    path.write_bytes(encode_palette(palette, PaletteFormat.GIMP, name="m"))
    assert read_palette(path).rgb_tuples() == COLOURS


def test_png_embedded_palette(tmp_path):
    im = Image.new("P", (2, 2))
    im.putpalette([10, 20, 30, 40, 50, 60, 70, 80, 90, 100, 110, 120])
    path = tmp_path / "pal.png"
    im.save(path, transparency=2)
    pal = read_palette(path)
    assert pal.rgb_tuples()[:4] == [(10, 20, 30), (40, 50, 60), (70, 80, 90), (100, 110, 120)]
    assert pal.transparent_index == 2


def test_png_without_palette_is_unsupported(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (2, 2), (1, 2, 3)).save(path)
    with pytest.raises(UnsupportedColorModeError):
        read_palette(path)


def test_decode_palette_reports_garbage_png():
    with pytest.raises(UnsupportedFormatError):
        decode_palette(b"\x89PNG\r\n\x1a\nnot really")


def _noisy_png_bytes() -> bytes:
    rng = random.Random(7)
    im = Image.frombytes("P", (16, 16), bytes(rng.getrandbits(8) for _ in range(256)))
    im.putpalette([v for i in range(256) for v in (i, 255 - i, i // 2)])
    buf = io.BytesIO()
    im.save(buf, format="PNG")
    return buf.getvalue()


def test_decode_palette_reports_truncated_png():
    data = _noisy_png_bytes()
    assert len(decode_palette(data)) == 256
    with pytest.raises((TruncatedDataError, UnsupportedFormatError)) as exc:
        decode_palette(data[:-30])
    assert exc.value.stage == "palette"


# File errors


def test_missing_file_is_file_access_error(tmp_path):
    with pytest.raises(FileAccessError):
        read_palette(tmp_path / "nope.act")


def test_failed_write_leaves_nothing_behind(tmp_path, palette):
    target = tmp_path / "missing-dir" / "p.act"
    with pytest.raises(FileAccessError):
        write_palette(target, palette, PaletteFormat.ACT)
    assert not target.exists()


def test_format_names():
    assert PaletteFormat.from_name("gpl") is PaletteFormat.GIMP
    assert PaletteFormat.from_name("MS") is PaletteFormat.RIFF
    assert PaletteFormat.for_path("out.txt") is PaletteFormat.PAINT_NET
    assert PaletteFormat.for_path("out.bin") is None
    with pytest.raises(ValueError):
        PaletteFormat.from_name("bmp")
