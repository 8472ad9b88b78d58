from __future__ import annotations

import pytest

from makepdf.pipeline.color import Color
from makepdf.pipeline.styles import DashPattern, GoTo, Uri, link_from_value


@pytest.mark.parametrize("value", ["FF8800", "#ff8800", "00aBcD"])
def test_hex_round_trip(value: str) -> None:
    color = Color.from_hex(value)
    assert color.to_hex() == value.lstrip("#").upper()


def test_color_from_other_forms() -> None:
    assert Color.from_value([255, 0, 0]).to_hex() == "FF0000"
    assert Color.from_value({"r": 0, "g": 255, "b": 0}).to_hex() == "00FF00"
    assert Color.from_value({"red": 0, "green": 0, "blue": 255}).to_hex() == "0000FF"
    with pytest.raises(ValueError):
        Color.from_hex("12345")
    with pytest.raises(ValueError):
        Color.from_hex("-12345")
    with pytest.raises(ValueError):
        Color.from_hex("GG0000")


def test_hex_matches_reportlab_parsing() -> None:
    color = Color.from_hex("#FF8800")
    assert color.to_rgb() == (1.0, 0x88 / 255.0, 0.0)
    assert Color.from_bytes(1, 2, 254).to_hex() == "0102FE"


def test_fractional_channels_are_rejected() -> None:
    assert Color.from_value([255.0, 0, 0]).to_hex() == "FF0000"
    with pytest.raises(ValueError):
        Color.from_value([1, 0.5, 0])
    with pytest.raises(ValueError):
        Color.from_value({"r": 0, "g": 256, "b": 0})
    with pytest.raises(TypeError):
        Color.from_value([True, 0, 0])


def test_lightness_helpers() -> None:
    assert Color.from_hex("FFFFFF").is_light()
    assert not Color.from_hex("000000").is_light()
    assert Color.from_hex("000000").lighten(0.5).to_hex() == "808080"
    assert Color.from_hex("FFFFFF").darken(1.0).to_hex() == "000000"


def test_dash_pattern_shortcuts() -> None:
    assert DashPattern.from_value("solid").to_array() == []
    assert DashPattern.from_value("dashed").to_array() == [5]
    assert DashPattern.from_value("dashed:1").to_array() == [1]
    custom = DashPattern.from_value({"offset": 2, "dash_1": 3, "gap_1": 1})
    assert custom.offset == 2
    assert custom.to_array() == [3, 1]
    with pytest.raises(ValueError):
        DashPattern.from_value("dotted")


def test_link_wire_forms() -> None:
    assert link_from_value(42) == GoTo(42)
    assert link_from_value("https://example.com") == Uri("https://example.com")
    assert link_from_value({"type": "goto", "page": 7}) == GoTo(7)
    with pytest.raises(ValueError):
        link_from_value({"type": "mailto"})
