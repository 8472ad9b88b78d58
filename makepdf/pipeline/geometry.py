from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple


class HorizontalAlign(str, Enum):
    LEFT = "left"
    MIDDLE = "middle"
    RIGHT = "right"


class VerticalAlign(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


@dataclass(frozen=True)
class Align:
    v: VerticalAlign = VerticalAlign.MIDDLE
    h: HorizontalAlign = HorizontalAlign.MIDDLE

    @classmethod
    def from_value(cls, value: Any) -> "Align":
        if value is None:
            return cls()
        if isinstance(value, Align):
            return value
        if isinstance(value, dict):
            v = value.get("v") or VerticalAlign.MIDDLE
            h = value.get("h") or HorizontalAlign.MIDDLE
            return cls(v=VerticalAlign(v), h=HorizontalAlign(h))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(v=VerticalAlign(value[0]), h=HorizontalAlign(value[1]))
        raise TypeError(f"Invalid alignment: {value!r}")

    def to_value(self) -> dict:
        return {"v": self.v.value, "h": self.h.value}


@dataclass(frozen=True)
class Point:
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_value(cls, value: Any) -> "Point":
        if isinstance(value, Point):
            return value
        if isinstance(value, dict):
            return cls(float(value.get("x", 0.0)), float(value.get("y", 0.0)))
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(float(value[0]), float(value[1]))
        raise TypeError(f"Invalid point: {value!r}")

    def shifted(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)

    def with_precision(self, precision: int) -> "Point":
        return Point(round(self.x, precision), round(self.y, precision))

    def to_value(self) -> dict:
        return {"x": self.x, "y": self.y}


@dataclass(frozen=True)
class Space:
    """Margin or padding offsets, one per side."""

    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0
    left: float = 0.0

    @classmethod
    def from_value(cls, value: Any) -> "Space":
        """
        Expands a scalar, a 1-4 element sequence, or a named mapping the way a
        CSS box model does: [all], [vertical, horizontal],
        [top, horizontal, bottom], [top, right, bottom, left].
        """
        if value is None:
            return cls()
        if isinstance(value, Space):
            return value
        if isinstance(value, bool):
            raise TypeError(f"Invalid spacing: {value!r}")
        if isinstance(value, (int, float)):
            v = float(value)
            return cls(v, v, v, v)
        if isinstance(value, dict):
            return cls(
                top=float(value.get("top", 0.0)),
                right=float(value.get("right", 0.0)),
                bottom=float(value.get("bottom", 0.0)),
                left=float(value.get("left", 0.0)),
            )
        if isinstance(value, (list, tuple)):
            values = [float(v) for v in value]
            if len(values) == 1:
                return cls(values[0], values[0], values[0], values[0])
            if len(values) == 2:
                return cls(values[0], values[1], values[0], values[1])
            if len(values) == 3:
                return cls(values[0], values[1], values[2], values[1])
            if len(values) == 4:
                return cls(values[0], values[1], values[2], values[3])
        raise TypeError(f"Invalid spacing: {value!r}")

    def to_value(self) -> dict:
        return {"top": self.top, "right": self.right, "bottom": self.bottom, "left": self.left}


Margin = Space
Padding = Space


@dataclass(frozen=True)
class Bounds:
    ll: Point = Point()
    ur: Point = Point()

    @classmethod
    def from_coords(cls, llx: float, lly: float, urx: float, ury: float) -> "Bounds":
        return cls(Point(float(llx), float(lly)), Point(float(urx), float(ury)))

    @classmethod
    def from_value(cls, value: Any) -> "Bounds":
        if isinstance(value, Bounds):
            return value
        if isinstance(value, dict):
            if "ll" in value and "ur" in value:
                return cls(Point.from_value(value["ll"]), Point.from_value(value["ur"]))
            if all(key in value for key in ("llx", "lly", "urx", "ury")):
                return cls.from_coords(value["llx"], value["lly"], value["urx"], value["ury"])
        if isinstance(value, (list, tuple)):
            if len(value) == 4:
                return cls.from_coords(*value)
            if len(value) == 2:
                return cls(Point.from_value(value[0]), Point.from_value(value[1]))
        raise TypeError(f"Invalid bounds: {value!r}")

    @classmethod
    def enclosing(cls, points: Iterable[Point]) -> "Bounds":
        """Smallest bounds holding every point; empty input gives zero bounds."""
        it = iter(points)
        first = next(it, None)
        if first is None:
            return cls()
        llx, lly, urx, ury = first.x, first.y, first.x, first.y
        for point in it:
            llx = min(llx, point.x)
            lly = min(lly, point.y)
            urx = max(urx, point.x)
            ury = max(ury, point.y)
        return cls.from_coords(llx, lly, urx, ury)

    @property
    def llx(self) -> float:
        return self.ll.x

    @property
    def lly(self) -> float:
        return self.ll.y

    @property
    def urx(self) -> float:
        return self.ur.x

    @property
    def ury(self) -> float:
        return self.ur.y

    @property
    def raw_width(self) -> float:
        return self.ur.x - self.ll.x

    @property
    def raw_height(self) -> float:
        return self.ur.y - self.ll.y

    def width(self) -> float:
        return max(self.raw_width, 0.0)

    def height(self) -> float:
        return max(self.raw_height, 0.0)

    def to_coords(self) -> Tuple[float, float, float, float]:
        return (self.ll.x, self.ll.y, self.ur.x, self.ur.y)

    def lr(self) -> Point:
        return Point(self.ur.x, self.ll.y)

    def ul(self) -> Point:
        return Point(self.ll.x, self.ur.y)

    def center(self) -> Point:
        return Point(self.ll.x + self.raw_width / 2.0, self.ll.y + self.raw_height / 2.0)

    def with_padding(self, padding: Any = None) -> "Bounds":
        space = Space.from_value(padding)
        return Bounds.from_coords(
            self.ll.x + space.left,
            self.ll.y + space.bottom,
            self.ur.x - space.right,
            self.ur.y - space.top,
        )

    # Margins shrink the same way padding does; the distinction is where they apply.
    with_margin = with_padding

    def with_precision(self, precision: int) -> "Bounds":
        return Bounds(self.ll.with_precision(precision), self.ur.with_precision(precision))

    def shift_by(self, x: Optional[float] = None, y: Optional[float] = None) -> "Bounds":
        dx = x or 0.0
        dy = y or 0.0
        return Bounds(self.ll.shifted(dx, dy), self.ur.shifted(dx, dy))

    def move_to(self, x: Optional[float] = None, y: Optional[float] = None) -> "Bounds":
        dx = 0.0 if x is None else x - self.ll.x
        dy = 0.0 if y is None else y - self.ll.y
        return self.shift_by(dx, dy)

    def scale_to(self, width: Optional[float] = None, height: Optional[float] = None) -> "Bounds":
        new_width = self.raw_width if width is None else width
        new_height = self.raw_height if height is None else height
        return Bounds.from_coords(
            self.ll.x, self.ll.y, self.ll.x + new_width, self.ll.y + new_height
        )

    def scale_by_factor(self, width: Optional[float] = None, height: Optional[float] = None) -> "Bounds":
        return self.scale_to(
            width=self.raw_width * (1.0 if width is None else width),
            height=self.raw_height * (1.0 if height is None else height),
        )

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds.from_coords(
            min(self.ll.x, other.ll.x),
            min(self.ll.y, other.ll.y),
            max(self.ur.x, other.ur.x),
            max(self.ur.y, other.ur.y),
        )

    def align_to(self, target: "Bounds", align: Any = None) -> "Bounds":
        align = Align.from_value(align)
        width = self.raw_width
        height = self.raw_height

        if align.h == HorizontalAlign.LEFT:
            llx = target.ll.x
        elif align.h == HorizontalAlign.RIGHT:
            llx = target.ur.x - width
        else:
            llx = target.ll.x + (target.raw_width - width) / 2.0

        if align.v == VerticalAlign.BOTTOM:
            lly = target.ll.y
        elif align.v == VerticalAlign.TOP:
            lly = target.ur.y - height
        else:
            lly = target.ll.y + (target.raw_height - height) / 2.0

        return Bounds.from_coords(llx, lly, llx + width, lly + height)

    def offset_to(self, other: "Bounds") -> Tuple[float, float]:
        """Translation that moves this lower-left corner onto ``other``'s."""
        return (other.ll.x - self.ll.x, other.ll.y - self.ll.y)

    def to_value(self) -> dict:
        return {"ll": self.ll.to_value(), "ur": self.ur.to_value()}


def outer_bounds(bounds: Bounds, margin: Any = None) -> Bounds:
    return bounds.with_margin(margin)


def inner_bounds(outer: Bounds, padding: Any = None) -> Bounds:
    return outer.with_padding(padding)
