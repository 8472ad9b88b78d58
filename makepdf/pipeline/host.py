from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
import logging

from .. import config
from ..errors import ScriptLoadError
from .color import Color
from .dates import Date, start_end_week
from .fonts import FontId, FontRegistry
from .geometry import Bounds, Point, Space
from .objects import DrawContext, DrawObject, object_from_value
from .pages import Page, PageId, PageKind, PageRegistry, WeakPage
from .styles import Link, link_from_value
from . import widgets


logger = logging.getLogger(__name__)
script_logger = logging.getLogger("makepdf.script")

Hook = Callable[["PageView"], Any]


def resolve_script(script: str) -> Path:
    if script.startswith(config.BUILTIN_SCRIPT_PREFIX):
        name = script[len(config.BUILTIN_SCRIPT_PREFIX) :]
        path = config.BUILTIN_SCRIPTS_DIR / f"{name}.py"
        if not name or not path.is_file():
            available = ", ".join(list_builtin_scripts()) or "none"
            raise ScriptLoadError(f"Unknown built-in script {script!r} (available: {available})")
        return path
    path = Path(script).expanduser()
    if not path.is_file():
        raise ScriptLoadError(f"Script not found: {path}")
    return path


def list_builtin_scripts() -> List[str]:
    if not config.BUILTIN_SCRIPTS_DIR.is_dir():
        return []
    return sorted(
        p.stem for p in config.BUILTIN_SCRIPTS_DIR.glob("*.py") if not p.name.startswith("_")
    )


def _merge(value: Any, kwargs: Dict[str, Any], kind: str) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if isinstance(value, dict):
        data.update(value)
    elif value is not None:
        raise TypeError(f"Expected a mapping for {kind}, got {value!r}")
    data.update(kwargs)
    data["type"] = kind
    return data


class HookRegistry:
    def __init__(self) -> None:
        self._hooks: Dict[PageKind, List[Hook]] = {kind: [] for kind in PageKind}

    def on_daily_page(self, fn: Hook) -> Hook:
        self._hooks[PageKind.DAILY].append(fn)
        return fn

    def on_weekly_page(self, fn: Hook) -> Hook:
        self._hooks[PageKind.WEEKLY].append(fn)
        return fn

    def on_monthly_page(self, fn: Hook) -> Hook:
        self._hooks[PageKind.MONTHLY].append(fn)
        return fn

    def hooks_for(self, kind: PageKind) -> List[Hook]:
        return list(self._hooks[PageKind(kind)])

    def __bool__(self) -> bool:
        return any(self._hooks.values())


class ScriptLog:
    """``pdf.log``: forwards script messages to the makepdf.script logger."""

    @staticmethod
    def _join(args) -> str:
        return " ".join(str(arg) for arg in args)

    def debug(self, *args: Any) -> None:
        script_logger.debug(self._join(args))

    def info(self, *args: Any) -> None:
        script_logger.info(self._join(args))

    def warn(self, *args: Any) -> None:
        script_logger.warning(self._join(args))

    warning = warn

    def error(self, *args: Any) -> None:
        script_logger.error(self._join(args))


class PageView:
    def __init__(self, host: "PdfHost", page: Union[Page, WeakPage]) -> None:
        self._host = host
        self._page = page

    @property
    def id(self) -> PageId:
        return self._page.id

    @property
    def title(self) -> str:
        return self._page.title

    @property
    def kind(self) -> Optional[str]:
        return self._page.kind.value if self._page.kind else None

    @property
    def date(self) -> Optional[Date]:
        return self._page.date

    def push(self, obj: Any) -> bool:
        return self._page.push(obj)

    def bounds(self) -> Bounds:
        page_config = self._host.page
        width = self._page.width if self._page.width is not None else page_config.width
        height = self._page.height if self._page.height is not None else page_config.height
        return Bounds.from_coords(0.0, 0.0, width, height)

    def _lookup(self, kind: PageKind, date: Any) -> Optional["PageView"]:
        target = Date.from_value(date) if date is not None else self.date
        if target is None:
            return None
        return self._host._view(self._host.registry.get_page_by_date(kind, target))

    def monthly(self, date: Any = None) -> Optional["PageView"]:
        return self._lookup(PageKind.MONTHLY, date)

    def weekly(self, date: Any = None) -> Optional["PageView"]:
        return self._lookup(PageKind.WEEKLY, date)

    def daily(self, date: Any = None) -> Optional["PageView"]:
        return self._lookup(PageKind.DAILY, date)

    def next_page(self) -> Optional["PageView"]:
        return self._host._view(self._host.registry.next_page(self._page))

    def prev_page(self) -> Optional["PageView"]:
        return self._host._view(self._host.registry.prev_page(self._page))

    def __repr__(self) -> str:
        return f"PageView(id={self.id:08X}, title={self.title!r})"


class Planner:
    def __init__(self, host: "PdfHost") -> None:
        self._host = host

    def _for_each(self, kind: PageKind, fn: Callable[[PageView, Date], Any]) -> None:
        for page in self._host.registry.pages():
            if page.kind == kind:
                fn(PageView(self._host, page), page.date)

    def for_monthly_page(self, fn: Callable[[PageView, Date], Any]) -> None:
        self._for_each(PageKind.MONTHLY, fn)

    def for_weekly_page(self, fn: Callable[[PageView, Date], Any]) -> None:
        self._for_each(PageKind.WEEKLY, fn)

    def for_daily_page(self, fn: Callable[[PageView, Date], Any]) -> None:
        self._for_each(PageKind.DAILY, fn)

    def _get(self, kind: PageKind, date: Any) -> Optional[PageView]:
        return self._host._view(self._host.registry.get_page_by_date(kind, Date.from_value(date)))

    def get_monthly_page(self, date: Any) -> Optional[PageView]:
        return self._get(PageKind.MONTHLY, date)

    def get_weekly_page(self, date: Any) -> Optional[PageView]:
        return self._get(PageKind.WEEKLY, date)

    def get_daily_page(self, date: Any) -> Optional[PageView]:
        return self._get(PageKind.DAILY, date)


class PagesApi:
    def __init__(self, host: "PdfHost") -> None:
        self._host = host

    def create(self, title: str, width: Optional[float] = None, height: Optional[float] = None) -> PageView:
        return PageView(self._host, self._host.registry.create(title, width=width, height=height))

    def get(self, page_id: PageId) -> Optional[PageView]:
        return self._host._view(self._host.registry.get_page(page_id))

    def ids(self) -> List[PageId]:
        return self._host.registry.ids()

    def setup_planner(self) -> Planner:
        self._host.registry.setup_planner(self._host.config.planner)
        return Planner(self._host)


class FontsApi:
    def __init__(self, fonts: FontRegistry) -> None:
        self._fonts = fonts

    def load(self, path: Union[str, Path]) -> FontId:
        return self._fonts.add_from_path(path)

    add = load

    def load_bytes(self, data: bytes) -> FontId:
        return self._fonts.add_from_bytes(data)

    def fallback(self, font_id: Optional[FontId] = None) -> Optional[FontId]:
        if font_id is not None:
            if self._fonts.get_font_face(font_id) is None:
                raise ValueError(f"Unknown font id {font_id!r}")
            self._fonts.add_font_as_fallback(font_id)
        return self._fonts.fallback_font_id()

    def ids(self) -> List[FontId]:
        return self._fonts.ids()

    def path(self, font_id: FontId) -> Optional[str]:
        path = self._fonts.path(font_id)
        return str(path) if path is not None else None


class ObjectApi:
    def __init__(self, host: "PdfHost") -> None:
        self._host = host

    def text(self, value: Optional[dict] = None, **kwargs: Any) -> DrawObject:
        return object_from_value(_merge(value, kwargs, "text"))

    def rect(self, value: Optional[dict] = None, **kwargs: Any) -> DrawObject:
        return object_from_value(_merge(value, kwargs, "rect"))

    def circle(self, value: Optional[dict] = None, **kwargs: Any) -> DrawObject:
        return object_from_value(_merge(value, kwargs, "circle"))

    def line(self, value: Optional[dict] = None, **kwargs: Any) -> DrawObject:
        return object_from_value(_merge(value, kwargs, "line"))

    def shape(self, value: Optional[dict] = None, **kwargs: Any) -> DrawObject:
        return object_from_value(_merge(value, kwargs, "shape"))

    def group(self, objects: Any = None, link: Any = None) -> DrawObject:
        if isinstance(objects, dict):
            return object_from_value({**objects, "type": "group"})
        return object_from_value({"type": "group", "objects": list(objects or []), "link": link})

    def rect_text(self, **kwargs: Any) -> DrawObject:
        return widgets.rect_text(self._host.context, **kwargs)

    def section(self, **kwargs: Any) -> DrawObject:
        return widgets.section(self._host.context, **kwargs)

    def lined_list(self, **kwargs: Any) -> DrawObject:
        return widgets.lined_list(self._host.context, **kwargs)

    def calendar(self, **kwargs: Any) -> DrawObject:
        return widgets.calendar(self._host.context, **kwargs)

    def bounds(self, obj: Any) -> Bounds:
        return object_from_value(obj).bounds(self._host.context)

    def align_to(self, obj: Any, bounds: Any, align: Any = None) -> DrawObject:
        return object_from_value(obj).align_to(self._host.context, Bounds.from_value(bounds), align)


class UtilsApi:
    def bounds(self, value: Any = None, **kwargs: Any) -> Bounds:
        return Bounds.from_value(value if value is not None else kwargs)

    def point(self, value: Any = None, **kwargs: Any) -> Point:
        return Point.from_value(value if value is not None else kwargs)

    def color(self, value: Any) -> Color:
        return Color.from_value(value)

    def link(self, value: Any) -> Link:
        return link_from_value(value)

    def space(self, value: Any = None) -> Space:
        return Space.from_value(value)

    def date(self, value: Any = None) -> Date:
        return Date.today() if value is None else Date.from_value(value)

    def grid(self, bounds: Any, rows: int, columns: int, padding: Any = None) -> widgets.Grid:
        return widgets.Grid(Bounds.from_value(bounds), int(rows), int(columns), padding)

    def start_end_week(self, date: Any):
        return start_end_week(Date.from_value(date))


class PdfHost:
    """The ``pdf`` object a script sees."""

    def __init__(self, pdf_config: "config.PdfConfig", registry: PageRegistry, fonts: FontRegistry, hooks: HookRegistry) -> None:
        self.config = pdf_config
        self.registry = registry
        self.font_registry = fonts
        self.hooks = hooks
        self.pages = PagesApi(self)
        self.fonts = FontsApi(fonts)
        self.font = self.fonts
        self.object = ObjectApi(self)
        self.utils = UtilsApi()
        self.log = ScriptLog()

    @property
    def page(self) -> "config.PageConfig":
        return self.config.page

    @property
    def planner(self) -> "config.PlannerConfig":
        return self.config.planner

    @property
    def title(self) -> str:
        return self.config.title

    @title.setter
    def title(self, value: str) -> None:
        self.config.title = value

    @property
    def context(self) -> DrawContext:
        return DrawContext(self.font_registry, self.config.page)

    def _view(self, page: Optional[Union[Page, WeakPage]]) -> Optional[PageView]:
        return PageView(self, page) if page is not None else None
