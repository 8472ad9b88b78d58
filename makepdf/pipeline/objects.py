from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union
import logging

from reportlab.lib.units import mm
from reportlab.pdfgen.canvas import FILL_EVEN_ODD, FILL_NON_ZERO

from .color import Color
from .fonts import FontRegistry
from .geometry import Bounds, Point
from .metrics import centered_baseline, text_bounds
from .styles import (
    CAP_STYLE_CODES,
    JOIN_STYLE_CODES,
    DashPattern,
    LineCapStyle,
    LineJoinStyle,
    Link,
    LinkAnnotation,
    PaintMode,
    WindingOrder,
    enum_or_none,
    link_from_value,
)


logger = logging.getLogger(__name__)

# Distance from a quarter arc's endpoint to its control point, as a fraction of the radius.
CIRCLE_CONTROL_FACTOR = 0.551784


@dataclass
class DrawContext:
    """What an object needs to measure and paint itself on one page."""

    fonts: FontRegistry
    page: Any
    canvas: Any = None


def _optional(value: Any, convert):
    return None if value is None else convert(value)


def _point_value(value: Any) -> Point:
    return Point.from_value(value)


def _points_value(value: Any) -> Tuple[Point, ...]:
    if not isinstance(value, (list, tuple)):
        raise TypeError(f"Invalid point list: {value!r}")
    return tuple(Point.from_value(v) for v in value)


def _depth_value(data: dict) -> int:
    depth = data.get("depth", 0)
    if isinstance(depth, bool):
        raise TypeError(f"Invalid depth: {depth!r}")
    return int(depth or 0)


@dataclass(frozen=True)
class PaintStyle:
    """Per-object overrides; None means use the page default at draw time."""

    fill_color: Optional[Color] = None
    outline_color: Optional[Color] = None
    outline_thickness: Optional[float] = None
    mode: PaintMode = PaintMode.FILL
    order: WindingOrder = WindingOrder.NON_ZERO
    dash_pattern: Optional[DashPattern] = None
    cap_style: Optional[LineCapStyle] = None
    join_style: Optional[LineJoinStyle] = None

    @classmethod
    def from_value(cls, data: dict) -> "PaintStyle":
        return cls(
            fill_color=_optional(data.get("fill_color"), Color.from_value),
            outline_color=_optional(data.get("outline_color"), Color.from_value),
            outline_thickness=_optional(data.get("outline_thickness"), float),
            mode=PaintMode(data.get("mode") or PaintMode.FILL),
            order=WindingOrder(data.get("order") or WindingOrder.NON_ZERO),
            dash_pattern=_optional(data.get("dash_pattern"), DashPattern.from_value),
            cap_style=enum_or_none(LineCapStyle, data.get("cap_style")),
            join_style=enum_or_none(LineJoinStyle, data.get("join_style")),
        )

    def to_value(self) -> dict:
        return {
            "fill_color": self.fill_color.to_hex() if self.fill_color else None,
            "outline_color": self.outline_color.to_hex() if self.outline_color else None,
            "outline_thickness": self.outline_thickness,
            "mode": self.mode.value,
            "order": self.order.value,
            "dash_pattern": self.dash_pattern.to_value() if self.dash_pattern else None,
            "cap_style": self.cap_style.value if self.cap_style else None,
            "join_style": self.join_style.value if self.join_style else None,
        }


def _stroke_state(canv, page, color, thickness, dash, cap, join) -> None:
    canv.setStrokeColorRGB(*(color or page.outline_color).to_rgb())
    canv.setLineWidth(page.outline_thickness if thickness is None else thickness)
    pattern = dash or page.dash_pattern
    canv.setDash(pattern.to_array(), pattern.offset)
    canv.setLineCap(CAP_STYLE_CODES[cap or page.cap_style])
    canv.setLineJoin(JOIN_STYLE_CODES[join or page.join_style])


def _paint_path(ctx: DrawContext, path, style: PaintStyle) -> None:
    canv = ctx.canvas
    page = ctx.page
    canv.setFillColorRGB(*(style.fill_color or page.fill_color).to_rgb())
    _stroke_state(
        canv,
        page,
        style.outline_color,
        style.outline_thickness,
        style.dash_pattern,
        style.cap_style,
        style.join_style,
    )
    fill_mode = FILL_EVEN_ODD if style.order == WindingOrder.EVEN_ODD else FILL_NON_ZERO
    if style.mode == PaintMode.CLIP:
        canv.clipPath(path, stroke=0, fill=0, fillMode=fill_mode)
        return
    stroke = 1 if style.mode in (PaintMode.STROKE, PaintMode.FILL_STROKE) else 0
    fill = 1 if style.mode in (PaintMode.FILL, PaintMode.FILL_STROKE) else 0
    canv.drawPath(path, stroke=stroke, fill=fill, fillMode=fill_mode)


class _Drawable:
    link: Optional[Link] = None

    def shifted(self, dx: float, dy: float):
        raise NotImplementedError

    def bounds(self, ctx: DrawContext) -> Bounds:
        raise NotImplementedError

    def draw(self, ctx: DrawContext) -> None:
        raise NotImplementedError

    def align_to(self, ctx: DrawContext, bounds: Bounds, align: Any = None):
        current = self.bounds(ctx)
        dx, dy = current.offset_to(current.align_to(bounds, align))
        return self.shifted(dx, dy)

    def link_annotations(self, ctx: DrawContext) -> List[LinkAnnotation]:
        if self.link is None:
            return []
        return [LinkAnnotation(self.bounds(ctx), self.depth, self.link)]


@dataclass(frozen=True)
class Text(_Drawable):
    point: Point = Point()
    text: str = ""
    depth: int = 0
    font: Optional[int] = None
    size: Optional[float] = None
    color: Optional[Color] = None
    link: Optional[Link] = None
    box: Optional[Bounds] = None

    @classmethod
    def from_value(cls, data: dict) -> "Text":
        if "point" in data:
            point = _point_value(data["point"])
        else:
            point = Point(float(data.get("x", 0.0)), float(data.get("y", 0.0)))
        return cls(
            point=point,
            text=str(data.get("text", "")),
            depth=_depth_value(data),
            font=_optional(data.get("font"), int),
            size=_optional(data.get("size"), float),
            color=_optional(data.get("color"), Color.from_value),
            link=_optional(data.get("link"), link_from_value),
            box=_optional(data.get("box"), Bounds.from_value),
        )

    def _font_id(self, ctx: DrawContext) -> Optional[int]:
        if self.font is not None and ctx.fonts.get_font_face(self.font) is not None:
            return self.font
        return ctx.fonts.fallback_font_id()

    def _size(self, ctx: DrawContext) -> float:
        return ctx.page.font_size if self.size is None else self.size

    def _origin(self, ctx: DrawContext) -> Tuple[float, float]:
        face = ctx.fonts.get_font_face(self._font_id(ctx))
        if self.box is None or face is None:
            return self.point.x, self.point.y
        return centered_baseline(face, self.text, self._size(ctx), self.box)

    def bounds(self, ctx: DrawContext) -> Bounds:
        face = ctx.fonts.get_font_face(self._font_id(ctx))
        x, y = self._origin(ctx)
        if face is None:
            return Bounds.from_coords(x, y, x, y)
        return text_bounds(face, self.text, self._size(ctx), x, y)

    def shifted(self, dx: float, dy: float) -> "Text":
        box = self.box.shift_by(dx, dy) if self.box is not None else None
        return replace(self, point=self.point.shifted(dx, dy), box=box)

    def draw(self, ctx: DrawContext) -> None:
        font_id = self._font_id(ctx)
        handle = ctx.fonts.get_font_doc_ref(font_id)
        if handle is None:
            logger.warning("Skipping text %r: font %s is not attached to the document", self.text, font_id)
            return
        x, y = self._origin(ctx)
        canv = ctx.canvas
        canv.setFont(handle, self._size(ctx))
        canv.setFillColorRGB(*(self.color or ctx.page.fill_color).to_rgb())
        canv.drawString(x * mm, y * mm, self.text)

    def to_value(self) -> dict:
        return {
            "type": "text",
            "point": self.point.to_value(),
            "text": self.text,
            "depth": self.depth,
            "font": self.font,
            "size": self.size,
            "color": self.color.to_hex() if self.color else None,
            "link": self.link.to_value() if self.link else None,
            "box": self.box.to_value() if self.box else None,
        }


@dataclass(frozen=True)
class Rect(_Drawable):
    rect: Bounds = Bounds()
    depth: int = 0
    style: PaintStyle = PaintStyle()
    link: Optional[Link] = None

    @classmethod
    def from_value(cls, data: dict) -> "Rect":
        if "bounds" in data:
            rect = Bounds.from_value(data["bounds"])
        elif "ll" in data and "ur" in data:
            rect = Bounds(_point_value(data["ll"]), _point_value(data["ur"]))
        elif all(key in data for key in ("llx", "lly", "urx", "ury")):
            rect = Bounds.from_coords(data["llx"], data["lly"], data["urx"], data["ury"])
        else:
            raise ValueError("Rect requires 'bounds', 'll'/'ur' or 'llx'/'lly'/'urx'/'ury'")
        return cls(
            rect=rect,
            depth=_depth_value(data),
            style=PaintStyle.from_value(data),
            link=_optional(data.get("link"), link_from_value),
        )

    def bounds(self, ctx: DrawContext) -> Bounds:
        return self.rect

    def shifted(self, dx: float, dy: float) -> "Rect":
        return replace(self, rect=self.rect.shift_by(dx, dy))

    def draw(self, ctx: DrawContext) -> None:
        path = ctx.canvas.beginPath()
        path.rect(self.rect.llx * mm, self.rect.lly * mm, self.rect.raw_width * mm, self.rect.raw_height * mm)
        _paint_path(ctx, path, self.style)

    def to_value(self) -> dict:
        return {
            "type": "rect",
            "ll": self.rect.ll.to_value(),
            "ur": self.rect.ur.to_value(),
            "depth": self.depth,
            "link": self.link.to_value() if self.link else None,
            **self.style.to_value(),
        }


def circle_points(center: Point, radius: float) -> List[Point]:
    """
    Start point followed by (control 1, control 2, end) for each of the four
    quarter arcs, counter-clockwise from the rightmost point.
    """
    cx, cy = center.x, center.y
    r = radius
    k = radius * CIRCLE_CONTROL_FACTOR
    return [
        Point(cx + r, cy),
        Point(cx + r, cy + k),
        Point(cx + k, cy + r),
        Point(cx, cy + r),
        Point(cx - k, cy + r),
        Point(cx - r, cy + k),
        Point(cx - r, cy),
        Point(cx - r, cy - k),
        Point(cx - k, cy - r),
        Point(cx, cy - r),
        Point(cx + k, cy - r),
        Point(cx + r, cy - k),
        Point(cx + r, cy),
    ]


@dataclass(frozen=True)
class Circle(_Drawable):
    center: Point = Point()
    radius: float = 0.0
    depth: int = 0
    style: PaintStyle = PaintStyle()
    link: Optional[Link] = None

    @classmethod
    def from_value(cls, data: dict) -> "Circle":
        if "center" not in data or "radius" not in data:
            raise ValueError("Circle requires 'center' and 'radius'")
        return cls(
            center=_point_value(data["center"]),
            radius=float(data["radius"]),
            depth=_depth_value(data),
            style=PaintStyle.from_value(data),
            link=_optional(data.get("link"), link_from_value),
        )

    def points(self) -> List[Point]:
        return circle_points(self.center, self.radius)

    def bounds(self, ctx: DrawContext) -> Bounds:
        return Bounds.enclosing(self.points())

    def shifted(self, dx: float, dy: float) -> "Circle":
        return replace(self, center=self.center.shifted(dx, dy))

    def draw(self, ctx: DrawContext) -> None:
        pts = self.points()
        path = ctx.canvas.beginPath()
        path.moveTo(pts[0].x * mm, pts[0].y * mm)
        for i in range(1, len(pts), 3):
            c1, c2, end = pts[i], pts[i + 1], pts[i + 2]
            path.curveTo(c1.x * mm, c1.y * mm, c2.x * mm, c2.y * mm, end.x * mm, end.y * mm)
        path.close()
        _paint_path(ctx, path, self.style)

    def to_value(self) -> dict:
        return {
            "type": "circle",
            "center": self.center.to_value(),
            "radius": self.radius,
            "depth": self.depth,
            "link": self.link.to_value() if self.link else None,
            **self.style.to_value(),
        }


@dataclass(frozen=True)
class Shape(_Drawable):
    points: Tuple[Point, ...] = ()
    depth: int = 0
    style: PaintStyle = PaintStyle()
    link: Optional[Link] = None

    @classmethod
    def from_value(cls, data: dict) -> "Shape":
        return cls(
            points=_points_value(data.get("points", [])),
            depth=_depth_value(data),
            style=PaintStyle.from_value(data),
            link=_optional(data.get("link"), link_from_value),
        )

    def bounds(self, ctx: DrawContext) -> Bounds:
        return Bounds.enclosing(self.points)

    def shifted(self, dx: float, dy: float) -> "Shape":
        return replace(self, points=tuple(p.shifted(dx, dy) for p in self.points))

    def draw(self, ctx: DrawContext) -> None:
        if not self.points:
            return
        path = ctx.canvas.beginPath()
        first, rest = self.points[0], self.points[1:]
        path.moveTo(first.x * mm, first.y * mm)
        for point in rest:
            path.lineTo(point.x * mm, point.y * mm)
        path.close()
        _paint_path(ctx, path, self.style)

    def to_value(self) -> dict:
        return {
            "type": "shape",
            "points": [p.to_value() for p in self.points],
            "depth": self.depth,
            "link": self.link.to_value() if self.link else None,
            **self.style.to_value(),
        }


@dataclass(frozen=True)
class Line(_Drawable):
    points: Tuple[Point, ...] = ()
    depth: int = 0
    color: Optional[Color] = None
    thickness: Optional[float] = None
    dash_pattern: Optional[DashPattern] = None
    cap_style: Optional[LineCapStyle] = None
    join_style: Optional[LineJoinStyle] = None
    link: Optional[Link] = None

    @classmethod
    def from_value(cls, data: dict) -> "Line":
        return cls(
            points=_points_value(data.get("points", [])),
            depth=_depth_value(data),
            color=_optional(data.get("color"), Color.from_value),
            thickness=_optional(data.get("thickness"), float),
            dash_pattern=_optional(data.get("dash_pattern"), DashPattern.from_value),
            cap_style=enum_or_none(LineCapStyle, data.get("cap_style")),
            join_style=enum_or_none(LineJoinStyle, data.get("join_style")),
            link=_optional(data.get("link"), link_from_value),
        )

    def bounds(self, ctx: DrawContext) -> Bounds:
        return Bounds.enclosing(self.points)

    def shifted(self, dx: float, dy: float) -> "Line":
        return replace(self, points=tuple(p.shifted(dx, dy) for p in self.points))

    def draw(self, ctx: DrawContext) -> None:
        if len(self.points) < 2:
            return
        canv = ctx.canvas
        _stroke_state(
            canv, ctx.page, self.color, self.thickness, self.dash_pattern, self.cap_style, self.join_style
        )
        path = canv.beginPath()
        first, rest = self.points[0], self.points[1:]
        path.moveTo(first.x * mm, first.y * mm)
        for point in rest:
            path.lineTo(point.x * mm, point.y * mm)
        canv.drawPath(path, stroke=1, fill=0)

    def to_value(self) -> dict:
        return {
            "type": "line",
            "points": [p.to_value() for p in self.points],
            "depth": self.depth,
            "color": self.color.to_hex() if self.color else None,
            "thickness": self.thickness,
            "dash_pattern": self.dash_pattern.to_value() if self.dash_pattern else None,
            "cap_style": self.cap_style.value if self.cap_style else None,
            "join_style": self.join_style.value if self.join_style else None,
            "link": self.link.to_value() if self.link else None,
        }


@dataclass(frozen=True)
class Group(_Drawable):
    objects: Tuple["DrawObject", ...] = field(default_factory=tuple)
    link: Optional[Link] = None

    @classmethod
    def from_value(cls, data: dict) -> "Group":
        children = data.get("objects", [])
        if not isinstance(children, (list, tuple)):
            raise TypeError(f"Invalid group objects: {children!r}")
        return cls(
            objects=tuple(object_from_value(child) for child in children),
            link=_optional(data.get("link"), link_from_value),
        )

    @property
    def depth(self) -> int:
        return max((child.depth for child in self.objects), default=0)

    def bounds(self, ctx: DrawContext) -> Bounds:
        if not self.objects:
            return Bounds()
        result = self.objects[0].bounds(ctx)
        for child in self.objects[1:]:
            result = result.union(child.bounds(ctx))
        return result

    def shifted(self, dx: float, dy: float) -> "Group":
        return replace(self, objects=tuple(child.shifted(dx, dy) for child in self.objects))

    def draw(self, ctx: DrawContext) -> None:
        for child in self.objects:
            child.draw(ctx)

    def link_annotations(self, ctx: DrawContext) -> List[LinkAnnotation]:
        annotations = super().link_annotations(ctx)
        for child in self.objects:
            annotations.extend(child.link_annotations(ctx))
        return annotations

    def to_value(self) -> dict:
        return {
            "type": "group",
            "objects": [child.to_value() for child in self.objects],
            "link": self.link.to_value() if self.link else None,
        }


DrawObject = Union[Text, Rect, Circle, Line, Shape, Group]

OBJECT_TYPES: Dict[str, Any] = {
    "text": Text,
    "rect": Rect,
    "circle": Circle,
    "line": Line,
    "shape": Shape,
    "group": Group,
}


def object_from_value(value: Any) -> DrawObject:
    if isinstance(value, tuple(OBJECT_TYPES.values())):
        return value
    if not isinstance(value, dict):
        raise TypeError(f"Invalid draw object: {value!r}")
    kind = value.get("type")
    cls = OBJECT_TYPES.get(kind)
    if cls is None:
        raise ValueError(f"Unknown draw object type: {kind!r}")
    return cls.from_value(value)
