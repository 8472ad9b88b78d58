from __future__ import annotations

from .fonts import FontFace
from .geometry import Bounds


PT_TO_MM = 0.352778


def _scale(face: FontFace, size: float) -> float:
    return size / face.units_per_em * PT_TO_MM


def text_width(face: FontFace, text: str, size: float) -> float:
    """Width in millimetres; characters without a glyph add nothing."""
    scale = _scale(face, size)
    return sum(face.advance(char) for char in text) * scale


def text_height(face: FontFace, size: float) -> float:
    # face-level line height, single line only
    return (face.ascender - face.descender + face.line_gap) * _scale(face, size)


def lower_left_y(face: FontFace, size: float, baseline_y: float) -> float:
    return baseline_y + face.descender * _scale(face, size)


def text_bounds(face: FontFace, text: str, size: float, x: float, y: float) -> Bounds:
    lly = lower_left_y(face, size, y)
    return Bounds.from_coords(
        x,
        lly,
        x + text_width(face, text, size),
        lly + text_height(face, size),
    )


def centered_baseline(face: FontFace, text: str, size: float, box: Bounds):
    """Baseline origin that roughly centres ``text`` inside ``box``."""
    width = text_width(face, text, size)
    height = text_height(face, size)
    x = box.llx + box.raw_width / 2.0 - width / 2.0
    y = box.lly + box.raw_height / 2.0 - height / 4.0
    return x, y
