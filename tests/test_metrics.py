from __future__ import annotations

from fontTools.ttLib import TTFont
import pytest

from makepdf import config
from makepdf.pipeline.fonts import FontFace
from makepdf.pipeline.metrics import PT_TO_MM, lower_left_y, text_bounds, text_height, text_width


@pytest.fixture(scope="module")
def face() -> FontFace:
    return FontFace(config.BUILTIN_FONT_PATH.read_bytes())


@pytest.fixture(scope="module")
def raw_font() -> TTFont:
    return TTFont(str(config.BUILTIN_FONT_PATH))


def test_width_sums_advances(face: FontFace, raw_font: TTFont) -> None:
    cmap = raw_font.getBestCmap()
    hmtx = raw_font["hmtx"]
    upem = raw_font["head"].unitsPerEm
    expected = sum(hmtx[cmap[ord(c)]][0] for c in "Hello") * 12 / upem * PT_TO_MM
    assert text_width(face, "Hello", 12) == pytest.approx(expected)


def test_missing_glyph_adds_nothing(face: FontFace) -> None:
    # Vera has no CJK coverage
    assert not face.has_glyph("中")
    assert text_width(face, "A中", 10) == pytest.approx(text_width(face, "A", 10))


def test_height_and_lower_left(face: FontFace, raw_font: TTFont) -> None:
    hhea = raw_font["hhea"]
    scale = 10 / raw_font["head"].unitsPerEm * PT_TO_MM
    assert text_height(face, 10) == pytest.approx((hhea.ascent - hhea.descent + hhea.lineGap) * scale)
    assert lower_left_y(face, 10, 50.0) == pytest.approx(50.0 + hhea.descent * scale)
    assert lower_left_y(face, 10, 50.0) < 50.0


def test_text_bounds(face: FontFace) -> None:
    bounds = text_bounds(face, "Day", 12, 10.0, 20.0)
    assert bounds.llx == 10.0
    assert bounds.raw_width == pytest.approx(text_width(face, "Day", 12))
    assert bounds.raw_height == pytest.approx(text_height(face, 12))
    assert text_bounds(face, "", 12, 0, 0).width() == 0.0
