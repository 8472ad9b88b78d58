from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from .color import Color
from .dates import Date
from .geometry import Bounds
from .objects import DrawContext, Group, Line, Rect, Text, object_from_value
from .styles import link_from_value


WEEKDAY_HEADERS = ("SUNDAY", "MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY")
CALENDAR_ROWS = 13
CALENDAR_WEEKS = 6


@dataclass(frozen=True)
class Grid:
    """Splits bounds into equal rows and columns; row 1 is the top row."""

    bounds: Bounds
    rows: int
    columns: int
    padding: Any = None

    def __post_init__(self) -> None:
        if self.rows <= 0 or self.columns <= 0:
            raise ValueError(f"Grid needs positive rows and columns, got {self.rows}x{self.columns}")

    def width(self) -> float:
        return self.bounds.width()

    def height(self) -> float:
        return self.bounds.height()

    def row_height(self) -> float:
        return self.height() / self.rows

    def column_width(self) -> float:
        return self.width() / self.columns

    def cell(self, row: int, col: int, width: int = 1, height: int = 1) -> Bounds:
        row_height = self.row_height()
        col_width = self.column_width()
        llx = self.bounds.llx + (col - 1) * col_width
        lly = self.bounds.lly + self.height() - row * row_height - (height - 1) * row_height
        cell = Bounds.from_coords(llx, lly, llx + col_width * width, lly + row_height * height)
        return cell.with_padding(self.padding) if self.padding is not None else cell

    def map_cell(self, fn: Callable[..., Any]) -> Callable[..., Any]:
        def mapped(row: int, col: int, width: int = 1, height: int = 1, **opts: Any) -> Any:
            return fn(self.cell(row, col, width=width, height=height), **opts)

        return mapped


class GroupBuilder:
    """Mutable collection handed to widget callbacks; frozen into a Group afterwards."""

    def __init__(self, ctx: DrawContext, objects: Optional[List[Any]] = None) -> None:
        self.ctx = ctx
        self.objects: List[Any] = list(objects or [])
        self.link: Any = None

    def append(self, obj: Any) -> None:
        self.objects.append(object_from_value(obj))

    push = append

    def bounds(self) -> Bounds:
        return self.build().bounds(self.ctx)

    def build(self) -> Group:
        link = link_from_value(self.link) if self.link is not None else None
        return Group(tuple(object_from_value(obj) for obj in self.objects), link=link)


def _text_args(value: Any) -> Optional[dict]:
    if value is None:
        return None
    if isinstance(value, str):
        return {"type": "text", "text": value}
    return {**value, "type": "text"}


def rect_text(
    ctx: DrawContext,
    rect: Optional[dict] = None,
    text: Any = None,
    align: Any = None,
    margin: Any = None,
    padding: Any = None,
    link: Any = None,
) -> Group:
    """
    Rect shrunk by ``margin`` with optional text aligned inside it after
    ``padding``. Text defaults to centred on both axes.
    """
    rect_args = {"ll": {"x": 0, "y": 0}, "ur": {"x": 0, "y": 0}, **(rect or {}), "type": "rect"}
    base = object_from_value(rect_args)
    box = base.rect.with_margin(margin)
    objects: List[Any] = [Rect(box, base.depth, base.style, base.link)]

    args = _text_args(text)
    if args is not None:
        label = Text.from_value(args)
        objects.append(label.align_to(ctx, box.with_padding(padding), align))
    return Group(tuple(objects), link=link_from_value(link) if link is not None else None)


def section(
    ctx: DrawContext,
    bounds: Any,
    header: Optional[dict] = None,
    padding: Any = None,
    outline_color: Any = None,
    outline_thickness: Optional[float] = None,
    outline_dash_pattern: Any = None,
    outline_cap_style: Optional[str] = None,
    outline_join_style: Optional[str] = None,
    on_inner: Optional[Callable[[Bounds, GroupBuilder], Any]] = None,
) -> Group:
    """Header bar, three-sided outline, and whatever ``on_inner`` appends inside."""
    bounds = Bounds.from_value(bounds)
    header = header or {}
    header_height = header.get("height")
    if header_height is None:
        header_height = Text(text=str(header.get("text") or "")).bounds(ctx).height()
    header_height = float(header_height)
    header_bottom = bounds.ury - header_height

    objects: List[Any] = [
        rect_text(
            ctx,
            rect={
                "mode": "fill",
                "ll": {"x": bounds.llx, "y": header_bottom},
                "ur": bounds.ur.to_value(),
                "fill_color": header.get("background"),
            },
            text={"text": str(header.get("text") or ""), "color": header.get("foreground")},
        ),
        Line.from_value(
            {
                "points": [
                    [bounds.llx, header_bottom],
                    [bounds.llx, bounds.lly],
                    [bounds.urx, bounds.lly],
                    [bounds.urx, header_bottom],
                ],
                "color": outline_color,
                "thickness": outline_thickness,
                "dash_pattern": outline_dash_pattern,
                "cap_style": outline_cap_style,
                "join_style": outline_join_style,
            }
        ),
    ]

    inner = GroupBuilder(ctx)
    if on_inner is not None:
        inner_bounds = bounds.scale_to(height=bounds.height() - header_height).with_padding(padding)
        on_inner(inner_bounds, inner)
    objects.append(inner.build())
    return Group(tuple(objects))


def lined_list(
    ctx: DrawContext,
    bounds: Any,
    rows: Sequence[Optional[str]],
    line_color: Any = None,
    text_color: Any = None,
    align: Any = None,
) -> Group:
    bounds = Bounds.from_value(bounds)
    objects: List[Any] = []
    if not rows:
        return Group()
    grid = Grid(bounds, len(rows), 1)
    color = Color.from_value(line_color) if line_color is not None else None
    for i, row in enumerate(rows, start=1):
        cell = grid.cell(i, 1)
        objects.append(Line(points=(cell.ll, cell.lr()), color=color))
        if isinstance(row, str) and row:
            label = Text.from_value({"text": row, "color": text_color})
            objects.append(label.align_to(ctx, cell, align or {"h": "left"}))
    return Group(tuple(objects))


def _invalid_fill(fill: Color) -> Color:
    remaining = 1.0 - fill.luminance()
    if fill.is_light():
        return fill.darken(remaining * 0.5)
    return fill.lighten(remaining * 0.5)


def calendar(
    ctx: DrawContext,
    bounds: Any,
    month: Any,
    fill_color: Any = None,
    text_color: Any = None,
    outline_thickness: Optional[float] = None,
    on_day_block: Optional[Callable[[Optional[Date], GroupBuilder], Any]] = None,
) -> Group:
    """
    Sunday-first month grid: a weekday header row and six two-row week
    bands. Days outside the month get a contrasting fill.
    """
    month = Date.from_value(month)
    fill = Color.from_value(fill_color if fill_color is not None else ctx.page.fill_color)
    if text_color is None:
        text = Color.from_hex("000000") if fill.is_light() else Color.from_hex("FFFFFF")
    else:
        text = Color.from_value(text_color)
    invalid_fill = _invalid_fill(fill)
    thickness = 0.0 if outline_thickness is None else float(outline_thickness)

    grid = Grid(Bounds.from_value(bounds), CALENDAR_ROWS, 7)

    def cell_rect_text(cell: Bounds, rect: Optional[dict] = None, label: Any = None) -> Group:
        args = {"ll": cell.ll.to_value(), "ur": cell.ur.to_value(), **(rect or {})}
        return rect_text(ctx, rect=args, text=label if label is not None else {})

    cell_block = grid.map_cell(cell_rect_text)

    objects: List[Any] = []
    for col, name in enumerate(WEEKDAY_HEADERS, start=1):
        objects.append(
            cell_block(
                1,
                col,
                rect={"fill_color": fill},
                label={"text": name, "color": text},
            )
        )

    first = month.beginning_of_month()
    last = month.end_of_month()
    start_weekday = first.weekday.number_from_sunday()
    end_weekday = last.weekday.number_from_sunday()
    weeks_in_month = month.weeks_in_month_sunday()

    for week in range(1, CALENDAR_WEEKS + 1):
        for weekday in range(1, 8):
            is_valid = (
                (week == 1 and weekday >= start_weekday)
                or (week == weeks_in_month and weekday <= end_weekday)
                or (1 < week < weeks_in_month)
            )
            day_num = (week - 1) * 7 + weekday - (start_weekday - 1)
            date = first.add_days(day_num - 1) if is_valid else None

            block = cell_block(
                week * 2,
                weekday,
                height=2,
                rect={
                    "fill_color": fill if is_valid else invalid_fill,
                    "outline_color": fill,
                    "outline_thickness": thickness,
                    "mode": "stroke" if is_valid else "fill_stroke",
                },
            )
            items = GroupBuilder(ctx, [block])
            if is_valid:
                block_bounds = block.bounds(ctx)
                corner = block_bounds.scale_by_factor(width=0.25, height=0.25)
                day = rect_text(
                    ctx,
                    rect={"ll": corner.ll.to_value(), "ur": corner.ur.to_value(), "fill_color": fill},
                    text={"text": str(day_num), "color": text},
                ).align_to(ctx, block_bounds, {"v": "top", "h": "left"})
                items.append(day)
            if on_day_block is not None:
                on_day_block(date, items)
            objects.append(items.build())
    return Group(tuple(objects))

