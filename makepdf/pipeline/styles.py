from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, List, Optional, Union

from .geometry import Bounds


class PaintMode(str, Enum):
    CLIP = "clip"
    FILL = "fill"
    FILL_STROKE = "fill_stroke"
    STROKE = "stroke"


class WindingOrder(str, Enum):
    EVEN_ODD = "even_odd"
    NON_ZERO = "non_zero"


class LineCapStyle(str, Enum):
    BUTT = "butt"
    ROUND = "round"
    PROJECTING_SQUARE = "projecting_square"


class LineJoinStyle(str, Enum):
    LIMIT = "limit"
    MITER = "miter"
    ROUND = "round"


# PDF operand values for the J and j operators.
CAP_STYLE_CODES = {
    LineCapStyle.BUTT: 0,
    LineCapStyle.ROUND: 1,
    LineCapStyle.PROJECTING_SQUARE: 2,
}
JOIN_STYLE_CODES = {
    LineJoinStyle.MITER: 0,
    LineJoinStyle.ROUND: 1,
    LineJoinStyle.LIMIT: 2,
}

DEFAULT_DASH_LENGTH = 5


@dataclass(frozen=True)
class DashPattern:
    offset: int = 0
    dash_1: Optional[int] = None
    gap_1: Optional[int] = None
    dash_2: Optional[int] = None
    gap_2: Optional[int] = None
    dash_3: Optional[int] = None
    gap_3: Optional[int] = None

    @classmethod
    def solid(cls) -> "DashPattern":
        return cls()

    @classmethod
    def dashed(cls, length: int = DEFAULT_DASH_LENGTH) -> "DashPattern":
        return cls(dash_1=int(length))

    @classmethod
    def from_value(cls, value: Any) -> "DashPattern":
        if isinstance(value, DashPattern):
            return value
        if isinstance(value, str):
            if value == "solid":
                return cls.solid()
            if value == "dashed":
                return cls.dashed()
            if value.startswith("dashed:"):
                length = value[len("dashed:") :]
                try:
                    return cls.dashed(int(length))
                except ValueError as exc:
                    raise ValueError(f"Invalid dash length: {length!r}") from exc
            raise ValueError(f"Unknown dash pattern format: {value!r}")
        if isinstance(value, dict):
            known = {f.name for f in fields(cls)}
            unknown = set(value) - known
            if unknown:
                raise ValueError(f"Unknown dash pattern fields: {', '.join(sorted(unknown))}")
            return cls(
                offset=int(value.get("offset") or 0),
                **{key: int(value[key]) for key in known - {"offset"} if value.get(key) is not None},
            )
        raise TypeError(f"Invalid dash pattern: {value!r}")

    def to_array(self) -> List[int]:
        values = [self.dash_1, self.gap_1, self.dash_2, self.gap_2, self.dash_3, self.gap_3]
        return [v for v in values if v is not None]

    def to_value(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class GoTo:
    page: int

    def to_value(self) -> dict:
        return {"type": "goto", "page": self.page}


@dataclass(frozen=True)
class Uri:
    uri: str

    def to_value(self) -> dict:
        return {"type": "uri", "uri": self.uri}


Link = Union[GoTo, Uri]


def link_from_value(value: Any) -> Link:
    if isinstance(value, (GoTo, Uri)):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Invalid link: {value!r}")
    if isinstance(value, int):
        return GoTo(value)
    if isinstance(value, str):
        return Uri(value)
    if isinstance(value, dict):
        kind = value.get("type")
        if kind == "goto":
            return GoTo(int(value["page"]))
        if kind == "uri":
            return Uri(str(value["uri"]))
        raise ValueError(f"Unknown link type: {kind!r}")
    raise TypeError(f"Invalid link: {value!r}")


@dataclass(frozen=True)
class LinkAnnotation:
    bounds: Bounds
    depth: int
    link: Link


def enum_or_none(enum_cls, value: Any):
    if value is None:
        return None
    return enum_cls(value)
