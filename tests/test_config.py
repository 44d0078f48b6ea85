from __future__ import annotations

from pathlib import Path

import pytest

from palette_remap.config import RemapConfig, parse_range, parse_slot
from palette_remap.core_types import Color, ColorPalette, PaletteFormat

from remap import build_parser


def test_parse_range():
    assert parse_range("16-31") == (16, 31)
    assert parse_range(" 3-3 ") == (3, 3)
    for bad in ("16", "a-b", "9-2", "-1-4"):
        with pytest.raises(ValueError):
            parse_range(bad)


def test_parse_slot():
    assert parse_slot("auto") == "auto"
    assert parse_slot("AUTO") == "auto"
    assert parse_slot("3") == 3
    with pytest.raises(ValueError):
        parse_slot("x")


def _args(*argv: str):
    return build_parser().parse_args(["in.png", "pal.gpl", "out.png", *argv])


def test_config_from_args_defaults():
    cfg = RemapConfig.from_args(_args())
    assert cfg.bits == 8
    assert cfg.range is None and cfg.slot is None
    assert cfg.method == "nearest"
    assert cfg.mask_path == Path("out_mask.png")


def test_config_from_args_full():
    cfg = RemapConfig.from_args(
        _args("--bits", "4", "--slot", "auto", "--mask", "--export-palette", "x.gpl")
    )
    assert cfg.bits == 4
    assert cfg.slot == "auto"
    assert cfg.mask
    assert cfg.export_format is PaletteFormat.GIMP


def test_config_export_format_override():
    cfg = RemapConfig.from_args(_args("--export-palette", "x.pal", "--export-format", "riff"))
    assert cfg.export_format is PaletteFormat.RIFF


@pytest.mark.parametrize(
    "argv",
    [
        ("--range", "0-3", "--slot", "1"),
        ("--bits", "4", "--range", "0-20"),
        ("--range", "250-300"),
        ("--export-palette", "x.bin"),
    ],
)
def test_config_rejects_invalid_combinations(argv):
    with pytest.raises(ValueError):
        RemapConfig.from_args(_args(*argv))


def test_config_is_immutable():
    cfg = RemapConfig.from_args(_args())
    with pytest.raises(AttributeError):
        cfg.bits = 4  # type: ignore[misc]


def test_palette_window_rebases_transparent_index():
    pal = ColorPalette.from_rgb([(i, i, i) for i in range(40)], transparent_index=18)
    assert pal.window(16, 31).transparent_index == 2
    assert pal.window(0, 15).transparent_index == -1
    assert len(pal.window(32, 47)) == 8


def test_palette_resize_drops_transparent_index():
    pal = ColorPalette.from_rgb([(1, 1, 1)] * 10, transparent_index=8)
    assert pal.resized(5).transparent_index == -1
    grown = pal.resized(12)
    assert len(grown) == 12 and grown[11] == Color(0, 0, 0)


def test_palette_rejects_bad_transparent_index():
    with pytest.raises(ValueError):
        ColorPalette.from_rgb([(1, 1, 1)], transparent_index=1)


def test_slot_bounds():
    pal = ColorPalette.from_rgb([(0, 0, 0)] * 40)
    assert pal.slot_count() == 3
    assert pal.slot_bounds(2) == (32, 39)
    with pytest.raises(ValueError):
        pal.slot_bounds(3)
